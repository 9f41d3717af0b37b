import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from content_translator.cache import TranslationCacheStore
from content_translator.extractor import ContentExtractor, EntityTranslation
from content_translator.providers import TranslationProvider

logger = logging.getLogger(__name__)

# Fragment name used for proposals that only carry a legacy HTML description.
LEGACY_FRAGMENT = "default"


class ProposalNotFoundError(LookupError):
    """Raised when a proposal source has no proposal with the given id."""


@dataclass
class Proposal:
    """Translatable content of a decision proposal."""

    id: str
    title: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    fragments: dict[str, str] = field(default_factory=dict)

    def translatable_fields(self) -> dict[str, Optional[str]]:
        """Return fields in translation order: title, category, then body fragments."""
        fields: dict[str, Optional[str]] = {"title": self.title, "category": self.category}
        if self.fragments:
            for name, text in self.fragments.items():
                if name in fields:
                    logger.warning("event=fragment_skipped proposal_id=%s fragment=%s", self.id, name)
                    continue
                fields[name] = text
        elif self.description:
            fields[LEGACY_FRAGMENT] = self.description
        return fields

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Proposal":
        return cls(
            id=str(data["id"]),
            title=data.get("title"),
            category=data.get("category"),
            description=data.get("description"),
            fragments=dict(data.get("fragments") or {}),
        )


class ProposalSource(ABC):
    """Where proposals are loaded from."""

    @abstractmethod
    async def get_proposal(self, proposal_id: str) -> Proposal:
        raise NotImplementedError


class InMemoryProposalSource(ProposalSource):
    def __init__(self, proposals: Iterable[Proposal] = ()) -> None:
        self.proposals = {proposal.id: proposal for proposal in proposals}

    def add(self, proposal: Proposal) -> None:
        self.proposals[proposal.id] = proposal

    async def get_proposal(self, proposal_id: str) -> Proposal:
        try:
            return self.proposals[proposal_id]
        except KeyError:
            raise ProposalNotFoundError(f"Proposal not found: {proposal_id}") from None


class JsonProposalSource(InMemoryProposalSource):
    """Proposals read from a JSON file holding a list of proposal objects."""

    def __init__(self, path: str) -> None:
        self.path = path
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if isinstance(data, dict):
            data = [data]
        super().__init__(Proposal.from_dict(item) for item in data)
        logger.info("Loaded %s proposals from %s", len(self.proposals), path)


class ProposalTranslator(ContentExtractor):
    """Translates a proposal's title, category and body fragments."""

    entity_type = "proposal"

    def __init__(
        self,
        source: ProposalSource,
        provider: TranslationProvider,
        store: TranslationCacheStore,
        locale_map: Mapping[str, str],
    ) -> None:
        super().__init__(provider, store, locale_map)
        self.source = source

    async def translate_proposal(self, proposal_id: str, target_locale: str) -> EntityTranslation:
        # Reject unsupported locales before touching the source.
        self.provider_locale(target_locale)
        proposal = await self.source.get_proposal(proposal_id)
        return await self.translate_fields(proposal.id, proposal.translatable_fields(), target_locale)
