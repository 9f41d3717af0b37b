import asyncio
import logging
from typing import Optional

from content_translator.providers.base import ProviderTranslation, TranslationProvider

logger = logging.getLogger(__name__)


class DeepLProvider(TranslationProvider):
    """DeepL translation provider with async support."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        rate_limit: int = 10,
        max_retries: int = 3,
    ) -> None:
        super().__init__(api_key, rate_limit=rate_limit, max_retries=max_retries)
        import deepl

        self._deepl = deepl
        self.translator = deepl.Translator(api_key)

    def _is_retryable(self, exc: BaseException) -> bool:
        return not isinstance(
            exc,
            (self._deepl.AuthorizationException, self._deepl.QuotaExceededException),
        )

    async def _request(
        self,
        texts: list[str],
        target_locale: str,
        tag_handling: str,
    ) -> list[ProviderTranslation]:
        logger.debug("DeepL request: %s texts -> %s", len(texts), target_locale)
        loop = asyncio.get_event_loop()
        results = await loop.run_in_executor(
            None,
            lambda: self.translator.translate_text(
                texts,
                source_lang=None,
                target_lang=target_locale,
                tag_handling=tag_handling,
            ),
        )
        if not isinstance(results, list):
            results = [results]

        return [
            ProviderTranslation(text=result.text, detected_source_lang=result.detected_source_lang)
            for result in results
        ]
