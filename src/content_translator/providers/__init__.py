from content_translator.providers.base import ProviderTranslation, TranslationError, TranslationProvider
from content_translator.providers.factory import ProviderFactory

__all__ = [
    "ProviderTranslation",
    "TranslationError",
    "TranslationProvider",
    "ProviderFactory",
]
