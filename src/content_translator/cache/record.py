from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, NamedTuple, Optional


class CacheKey(NamedTuple):
    """Composite identity of a cached fragment within one target locale."""

    content_key: str
    content_hash: str


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CacheRecord:
    """A persisted translation for one (content_key, content_hash, target_locale)."""

    content_key: str
    content_hash: str
    target_locale: str
    translated_text: str
    source_locale: Optional[str] = None
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def key(self) -> CacheKey:
        return CacheKey(self.content_key, self.content_hash)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data["updated_at"] = self.updated_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CacheRecord":
        """Create from dictionary."""
        data = dict(data)
        data["updated_at"] = datetime.fromisoformat(data["updated_at"])
        return cls(**data)
