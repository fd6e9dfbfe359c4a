from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Protocol


class Tokenizable(Protocol):
    """Entity that can hold tokens.

    ``token_owner_type`` discriminates the entity kind, ``id`` is None until
    the entity has been persisted.
    """

    token_owner_type: str

    @property
    def id(self) -> Optional[int]: ...


@dataclass(frozen=True)
class OwnerRef:
    owner_type: str
    owner_id: Optional[int]

    @classmethod
    def of(cls, owner: Tokenizable) -> "OwnerRef":
        return cls(owner_type=owner.token_owner_type, owner_id=owner.id)

    @property
    def persisted(self) -> bool:
        return self.owner_id is not None


@dataclass(frozen=True)
class Token:
    name: str
    value: str = field(repr=False)
    owner_type: str
    owner_id: int
    expires_at: Optional[datetime] = None
    data: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now

    def is_valid(self, now: datetime) -> bool:
        return not self.is_expired(now)

    def with_id(self, token_id: int) -> "Token":
        return replace(self, id=token_id)


@dataclass(frozen=True)
class TokenCriteria:
    """Filter for store queries. ``None`` fields do not constrain the match.

    ``valid_at`` keeps only tokens without expiry or expiring after that instant.
    """

    owner_type: Optional[str] = None
    owner_id: Optional[int] = None
    name: Optional[str] = None
    value: Optional[str] = None
    valid_at: Optional[datetime] = None

    def is_empty(self) -> bool:
        return all(
            part is None
            for part in (self.owner_type, self.owner_id, self.name, self.value, self.valid_at)
        )


class QueryOrder(str, Enum):
    NATURAL = "natural"
    NEWEST_FIRST = "newest_first"


def token_name(name: Any) -> str:
    if isinstance(name, Enum):
        name = name.value
    text = str(name).strip()
    if not text:
        raise ValueError("Token name must not be empty")
    return text
