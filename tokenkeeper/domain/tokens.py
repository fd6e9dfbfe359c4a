from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional, Union

from .errors import InvalidOwnerState
from .generator import TokenGenerator
from .models import OwnerRef, QueryOrder, Token, TokenCriteria, Tokenizable, token_name
from .policies import TokenPolicies
from .repositories import Clock, TokenStore

logger = logging.getLogger(__name__)


class _Default:
    def __repr__(self) -> str:
        return "DEFAULT"


DEFAULT = _Default()

Owner = Union[Tokenizable, OwnerRef]


def _ref(owner: Owner) -> OwnerRef:
    return owner if isinstance(owner, OwnerRef) else OwnerRef.of(owner)


class TokenRepository:
    """
    Named token slots per owner: one token per (owner_type, owner_id, name).
    """

    def __init__(
        self,
        store: TokenStore,
        generator: TokenGenerator,
        *,
        clock: Clock,
        policies: TokenPolicies | None = None,
    ):
        self._store = store
        self._generator = generator
        self._clock = clock
        self._policies = policies or TokenPolicies()

    async def generate(self, size: int) -> str:
        return await self._generator.generate(size)

    async def add(
        self,
        owner: Owner,
        name: Any,
        *,
        expires_at: Union[datetime, None, _Default] = DEFAULT,
        size: Optional[int] = None,
        data: Optional[str] = None,
    ) -> Token:
        """Replace the owner's token called ``name`` with a freshly generated one.

        The delete and the insert are two separate store calls; wrap the call in
        a storage transaction if readers must never see the slot empty.
        """
        ref = _ref(owner)
        if not ref.persisted:
            raise InvalidOwnerState(f"Cannot add token to unsaved {ref.owner_type} owner")
        name = token_name(name)
        policy = self._policies.for_name(name)
        if isinstance(expires_at, _Default):
            expires_at = self._clock.now() + policy.ttl if policy.ttl is not None else None
        elif expires_at is not None and expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        size = policy.size if size is None else size
        if size < 1:
            raise ValueError(f"Token size must be at least 1, got {size}")

        await self.remove(ref, name)
        token = Token(
            name=name,
            value=await self._generator.generate(size),
            owner_type=ref.owner_type,
            owner_id=ref.owner_id,
            expires_at=expires_at,
            data=data,
            created_at=self._clock.now(),
        )
        token_id = await self._store.insert(token)
        logger.info(
            "Token '%s' issued for %s#%s (size=%s, expires_at=%s)",
            name,
            ref.owner_type,
            ref.owner_id,
            size,
            expires_at.isoformat() if expires_at else "never",
        )
        return token.with_id(token_id)

    async def remove(self, owner: Owner, name: Any) -> bool:
        ref = _ref(owner)
        if not ref.persisted:
            return False
        name = token_name(name)
        deleted = await self._store.delete_matching(
            TokenCriteria(owner_type=ref.owner_type, owner_id=ref.owner_id, name=name)
        )
        if deleted:
            logger.info("Token '%s' removed for %s#%s", name, ref.owner_type, ref.owner_id)
        return deleted > 0

    async def remove_all(self, owner: Owner) -> int:
        ref = _ref(owner)
        if not ref.persisted:
            return 0
        deleted = await self._store.delete_matching(
            TokenCriteria(owner_type=ref.owner_type, owner_id=ref.owner_id)
        )
        logger.info("Removed %s token(s) of %s#%s", deleted, ref.owner_type, ref.owner_id)
        return deleted

    async def find_by_name(self, owner: Owner, name: Any) -> Optional[Token]:
        ref = _ref(owner)
        if not ref.persisted:
            return None
        return await self._store.query_one(
            TokenCriteria(owner_type=ref.owner_type, owner_id=ref.owner_id, name=token_name(name))
        )

    async def find(self, owner_type: str, name: Any, value: str, owner_id: Optional[int] = None) -> Optional[Token]:
        return await self._store.query_one(
            TokenCriteria(owner_type=owner_type, owner_id=owner_id, name=token_name(name), value=value),
            QueryOrder.NATURAL,
        )

    async def find_valid(
        self,
        owner_type: str,
        name: Any,
        value: str,
        owner_id: Optional[int] = None,
    ) -> Optional[Token]:
        return await self._store.query_one(
            TokenCriteria(
                owner_type=owner_type,
                owner_id=owner_id,
                name=token_name(name),
                value=value,
                valid_at=self._clock.now(),
            ),
            QueryOrder.NATURAL,
        )


class OwnerTokens:
    """Token operations bound to a single owner."""

    def __init__(self, repository: TokenRepository, owner: Owner):
        self._repository = repository
        self._owner = owner

    @property
    def ref(self) -> OwnerRef:
        return _ref(self._owner)

    async def add(self, name: Any, **options: Any) -> Token:
        return await self._repository.add(self._owner, name, **options)

    async def remove(self, name: Any) -> bool:
        return await self._repository.remove(self._owner, name)

    async def remove_all(self) -> int:
        return await self._repository.remove_all(self._owner)

    async def find_by_name(self, name: Any) -> Optional[Token]:
        return await self._repository.find_by_name(self._owner, name)

    async def find(self, name: Any, value: str) -> Optional[Token]:
        ref = self.ref
        if not ref.persisted:
            return None
        return await self._repository.find(ref.owner_type, name, value, owner_id=ref.owner_id)

    async def find_valid(self, name: Any, value: str) -> Optional[Token]:
        ref = self.ref
        if not ref.persisted:
            return None
        return await self._repository.find_valid(ref.owner_type, name, value, owner_id=ref.owner_id)
