from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol

from .models import QueryOrder, Token, TokenCriteria


class TokenStore(Protocol):
    """Durable storage for token records.

    Every method raises ``StorageError`` when the backend fails. Destroying an
    owner must also destroy its tokens; the embedding system is responsible
    for calling ``TokenRepository.remove_all`` (or an equivalent cascade).
    """

    async def insert(self, token: Token) -> int: ...

    async def delete_matching(self, criteria: TokenCriteria) -> int: ...

    async def query_one(self, criteria: TokenCriteria, order: QueryOrder = QueryOrder.NATURAL) -> Optional[Token]: ...

    async def resolve_owner(self, owner_type: str, owner_id: int) -> Optional[Any]: ...


class Randomizer(Protocol):
    def random(self) -> float: ...


class Clock(Protocol):
    def now(self) -> datetime: ...
