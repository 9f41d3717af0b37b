import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from platformdirs import user_cache_dir

# Platform locale -> provider target language code
DEFAULT_LOCALE_MAP: dict[str, str] = {
    "en": "EN-US",
    "es": "ES",
    "fr": "FR",
    "pt": "PT-BR",
    "de": "DE",
}

PROVIDER_API_KEY_ENV: dict[str, str] = {
    "deepl": "DEEPL_API_KEY",
    "google": "GOOGLE_APPLICATION_CREDENTIALS",
}


class ConfigurationError(ValueError):
    """Raised when required settings are missing or invalid."""


@dataclass
class Config:
    """Configuration settings for content translation."""

    provider: str = "deepl"
    provider_api_key: Optional[str] = None
    rate_limit: int = 10  # provider requests per second
    max_retries: int = 3
    # Caching configuration
    cache_type: str = "sqlite"  # sqlite, memory
    cache_db_path: str = ""
    locale_map: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_LOCALE_MAP))

    def __post_init__(self) -> None:
        if not self.cache_db_path:
            base_cache_dir = Path(user_cache_dir("content-translator", "content-translator"))
            self.cache_db_path = str(base_cache_dir / "content_translations.db")

    def resolve_api_key(self) -> str:
        """Return the provider credential, failing fast when it is missing."""
        if self.provider_api_key:
            return self.provider_api_key

        env_var = PROVIDER_API_KEY_ENV.get(self.provider)
        if env_var is None:
            raise ConfigurationError(
                f"Unsupported provider: {self.provider}. "
                f"Available providers: {list(PROVIDER_API_KEY_ENV.keys())}"
            )

        api_key = os.getenv(env_var, "").strip()
        if not api_key:
            raise ConfigurationError(f"Missing credentials for provider '{self.provider}': set {env_var}")
        return api_key
