import asyncio
import logging
import os
from typing import Optional

from content_translator.providers.base import ProviderTranslation, TranslationProvider

logger = logging.getLogger(__name__)


class GoogleCloudProvider(TranslationProvider):
    """Google Cloud Translation (v2) provider."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        rate_limit: int = 10,
        max_retries: int = 3,
    ) -> None:
        super().__init__(api_key, rate_limit=rate_limit, max_retries=max_retries)
        from google.cloud import translate_v2 as translate

        if api_key:
            os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = api_key
        self.client = translate.Client()

    async def _request(
        self,
        texts: list[str],
        target_locale: str,
        tag_handling: str,
    ) -> list[ProviderTranslation]:
        # Google takes ISO-639 codes, so regional variants collapse to the language.
        target_language = target_locale.split("-")[0].lower()
        logger.debug("Google request: %s texts -> %s", len(texts), target_language)
        loop = asyncio.get_event_loop()
        results = await loop.run_in_executor(
            None,
            lambda: self.client.translate(
                texts,
                target_language=target_language,
                format_=tag_handling,
            ),
        )
        if isinstance(results, dict):
            results = [results]

        return [
            ProviderTranslation(
                text=result["translatedText"],
                detected_source_lang=result.get("detectedSourceLanguage", ""),
            )
            for result in results
        ]
