from __future__ import annotations

import logging
from typing import Any, Optional

from .repositories import TokenStore
from .tokens import TokenRepository

logger = logging.getLogger(__name__)


class OwnerLookup:
    """
    Resolves owners from (name, value) token pairs for any registered owner type.
    Expired tokens are filtered at query time and never deleted here.
    """

    def __init__(self, repository: TokenRepository, store: TokenStore):
        self._repository = repository
        self._store = store

    async def find_owner_by_token(self, owner_type: str, name: Any, value: str) -> Optional[Any]:
        token = await self._repository.find(owner_type, name, value)
        if token is None:
            return None
        return await self._store.resolve_owner(token.owner_type, token.owner_id)

    async def find_owner_by_valid_token(self, owner_type: str, name: Any, value: str) -> Optional[Any]:
        token = await self._repository.find_valid(owner_type, name, value)
        if token is None:
            logger.debug("No valid '%s' token for owner type %s", name, owner_type)
            return None
        return await self._store.resolve_owner(token.owner_type, token.owner_id)
