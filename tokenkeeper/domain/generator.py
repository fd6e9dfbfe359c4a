from __future__ import annotations

import hashlib
import logging

from .errors import TokenGenerationError
from .models import TokenCriteria
from .repositories import Clock, Randomizer, TokenStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 1000


class TokenGenerator:
    """
    Mints hex token values that no stored token currently uses.

    The check and the later insert are separate store calls, so two concurrent
    callers may still draw the same value; only a unique index in storage
    closes that window.
    """

    def __init__(
        self,
        store: TokenStore,
        *,
        randomizer: Randomizer,
        clock: Clock,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be positive")
        self._store = store
        self._randomizer = randomizer
        self._clock = clock
        self._max_attempts = max_attempts

    async def generate(self, size: int) -> str:
        if size < 1:
            raise ValueError(f"Token size must be at least 1, got {size}")
        for attempt in range(1, self._max_attempts + 1):
            candidate = self._draw(size)
            existing = await self._store.query_one(TokenCriteria(value=candidate))
            if existing is None:
                return candidate
            logger.debug("Token collision on attempt %s (size=%s), drawing again", attempt, size)
        logger.warning("Token generation exhausted after %s attempts (size=%s)", self._max_attempts, size)
        raise TokenGenerationError(size, self._max_attempts)

    def _draw(self, size: int) -> str:
        seed = f"--{self._randomizer.random()}--{self._clock.now().isoformat()}--{self._randomizer.random()}--"
        digest = hashlib.sha1(seed.encode("utf-8")).hexdigest()
        block = 1
        while len(digest) < size:
            digest += hashlib.sha1(f"{seed}{block}".encode("utf-8")).hexdigest()
            block += 1
        return digest[:size]
