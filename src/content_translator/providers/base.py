import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from time import perf_counter
from typing import Optional, Sequence

from asyncio_throttle import Throttler
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_random_exponential

logger = logging.getLogger(__name__)


class TranslationError(Exception):
    """Custom exception for translation errors."""


@dataclass
class ProviderTranslation:
    """One translated text as returned by a provider, in request order."""

    text: str
    detected_source_lang: str


class TranslationProvider(ABC):
    """Abstract base class for translation providers.

    Callers only rely on :meth:`translate`. Subclasses implement
    :meth:`_request`, which performs exactly one batched SDK call.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        rate_limit: int = 10,
        max_retries: int = 3,
    ) -> None:
        self.api_key = api_key
        self.throttler = Throttler(rate_limit=max(1, rate_limit), period=1.0)
        self.service_name = self.__class__.__name__.replace("Provider", "").lower()
        self.max_retries = max(1, max_retries)

    @abstractmethod
    async def _request(
        self,
        texts: list[str],
        target_locale: str,
        tag_handling: str,
    ) -> list[ProviderTranslation]:
        """Send one batched request to the provider."""

    def _is_retryable(self, exc: BaseException) -> bool:
        """Return False for errors that a retry cannot fix."""
        return True

    async def _sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    async def translate(
        self,
        texts: Sequence[str],
        target_locale: str,
        tag_handling: str = "html",
    ) -> list[ProviderTranslation]:
        """Translate ``texts`` into ``target_locale``, preserving order."""
        texts = list(texts)
        if not texts:
            return []

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_random_exponential(min=1, max=30),
            retry=retry_if_exception(self._is_retryable),
            sleep=self._sleep,
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    attempt_number = attempt.retry_state.attempt_number
                    logger.debug(
                        "Provider %s attempt %s/%s for %s texts",
                        self.service_name,
                        attempt_number,
                        self.max_retries,
                        len(texts),
                    )
                    throttle_start = perf_counter()
                    async with self.throttler:
                        throttle_wait = perf_counter() - throttle_start
                        if throttle_wait > 0.001:
                            logger.debug(
                                "Provider %s throttled for %.3fs",
                                self.service_name,
                                throttle_wait,
                            )
                        results = await self._request(texts, target_locale, tag_handling)
        except TranslationError:
            raise
        except Exception as exc:
            logger.error("Provider %s failed: %s", self.service_name, exc)
            raise TranslationError(f"{self.service_name} translation failed: {exc}") from exc

        return results
