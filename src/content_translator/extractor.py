import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional

from content_translator.batch import UNKNOWN_LOCALE, TranslatableEntry, TranslationResult, translate_batch
from content_translator.cache import TranslationCacheStore
from content_translator.providers import TranslationProvider

logger = logging.getLogger(__name__)


class UnsupportedLocaleError(ValueError):
    """Raised when a platform locale has no provider mapping."""


@dataclass
class EntityTranslation:
    """Field-keyed translation of one entity."""

    target_locale: str
    source_locale: str = ""
    translated: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "translated": dict(self.translated),
            "sourceLocale": self.source_locale,
            "targetLocale": self.target_locale,
        }


class ContentExtractor:
    """Translates the named text fields of one kind of entity.

    Content keys follow ``"<entity_type>:<entity_id>:<field>"`` so a field
    keeps its cache identity across edits.
    """

    entity_type: str = "entity"

    def __init__(
        self,
        provider: TranslationProvider,
        store: TranslationCacheStore,
        locale_map: Mapping[str, str],
    ) -> None:
        self.provider = provider
        self.store = store
        self.locale_map = dict(locale_map)

    def provider_locale(self, platform_locale: str) -> str:
        try:
            return self.locale_map[platform_locale]
        except KeyError:
            raise UnsupportedLocaleError(
                f"Unsupported locale: {platform_locale}. "
                f"Supported locales: {sorted(self.locale_map)}"
            ) from None

    def key_prefix(self, entity_id: str) -> str:
        return f"{self.entity_type}:{entity_id}:"

    def build_entries(self, entity_id: str, fields: Mapping[str, Optional[str]]) -> list[TranslatableEntry]:
        prefix = self.key_prefix(entity_id)
        return [
            TranslatableEntry(content_key=f"{prefix}{name}", text=text)
            for name, text in fields.items()
            if text and text.strip()
        ]

    async def translate_fields(
        self,
        entity_id: str,
        fields: Mapping[str, Optional[str]],
        target_locale: str,
    ) -> EntityTranslation:
        """Translate ``fields`` of the entity into a supported platform locale."""
        provider_locale = self.provider_locale(target_locale)
        entries = self.build_entries(entity_id, fields)
        if not entries:
            logger.info(
                "event=nothing_to_translate entity_type=%s entity_id=%s",
                self.entity_type,
                entity_id,
            )
            return EntityTranslation(target_locale=target_locale)

        results = await translate_batch(entries, provider_locale, self.provider, self.store)
        return self._collect(entity_id, results, target_locale)

    def _collect(
        self,
        entity_id: str,
        results: list[TranslationResult],
        target_locale: str,
    ) -> EntityTranslation:
        prefix = self.key_prefix(entity_id)
        translation = EntityTranslation(target_locale=target_locale)
        for result in results:
            field_name = result.content_key[len(prefix):] if result.content_key.startswith(prefix) else result.content_key
            translation.translated[field_name] = result.translated_text
            if not translation.source_locale and result.source_locale not in ("", UNKNOWN_LOCALE):
                translation.source_locale = result.source_locale
        return translation
