from __future__ import annotations

import random
from datetime import datetime, timezone

from ...domain.repositories import Clock, Randomizer


class SystemRandomizer(Randomizer):
    def __init__(self, source: random.Random | None = None):
        self._random = source or random.SystemRandom()

    def random(self) -> float:
        return self._random.random()


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)
