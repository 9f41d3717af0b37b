from typing import Optional

from content_translator.config import ConfigurationError
from content_translator.providers.base import TranslationProvider
from content_translator.providers.deepl_provider import DeepLProvider
from content_translator.providers.google_cloud_provider import GoogleCloudProvider


class ProviderFactory:
    """Factory for creating translation providers."""

    @staticmethod
    def create_provider(
        provider_name: str,
        api_key: Optional[str] = None,
        rate_limit: int = 10,
        max_retries: int = 3,
    ) -> TranslationProvider:
        providers: dict[str, type[TranslationProvider]] = {
            "deepl": DeepLProvider,
            "google": GoogleCloudProvider,
        }

        key = provider_name.lower()
        if key not in providers:
            raise ConfigurationError(
                f"Unsupported provider: {provider_name}. "
                f"Available providers: {list(providers.keys())}"
            )

        return providers[key](api_key, rate_limit=rate_limit, max_retries=max_retries)
