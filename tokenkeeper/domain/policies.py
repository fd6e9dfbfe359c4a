from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Iterable, Mapping, Optional

DEFAULT_SIZE = 12
DEFAULT_TTL = timedelta(hours=48)


@dataclass(frozen=True)
class TokenPolicy:
    size: int = DEFAULT_SIZE
    ttl: Optional[timedelta] = DEFAULT_TTL


@dataclass(frozen=True)
class TokenPolicies:
    """Per-name defaults for new tokens. ``ttl=None`` means the token never expires."""

    default: TokenPolicy = TokenPolicy()
    by_name: Mapping[str, TokenPolicy] = field(default_factory=dict)

    @classmethod
    def build(cls, default: TokenPolicy, named: Iterable[tuple[str, TokenPolicy]] = ()) -> "TokenPolicies":
        return cls(default=default, by_name=dict(named))

    def for_name(self, name: str) -> TokenPolicy:
        return self.by_name.get(name, self.default)
