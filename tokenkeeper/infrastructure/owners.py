from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional

from ..domain.errors import OwnerTypeNotRegistered

logger = logging.getLogger(__name__)

OwnerResolver = Callable[[int], Awaitable[Optional[Any]]]


class OwnerRegistry:
    """Maps owner types to coroutines that load an owner by id."""

    def __init__(self):
        self._resolvers: dict[str, OwnerResolver] = {}

    def register(self, owner_type: str, resolver: OwnerResolver) -> None:
        if owner_type in self._resolvers:
            logger.warning("Replacing token owner resolver for '%s'", owner_type)
        self._resolvers[owner_type] = resolver

    async def resolve(self, owner_type: str, owner_id: int) -> Optional[Any]:
        resolver = self._resolvers.get(owner_type)
        if resolver is None:
            raise OwnerTypeNotRegistered(owner_type)
        return await resolver(owner_id)
