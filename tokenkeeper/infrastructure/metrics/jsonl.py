from __future__ import annotations

import functools
import json
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, TypeVar

T = TypeVar("T")

METRICS_LOGGER_NAME = "metrics.actions"


class MetricsClient:
    """Emits one JSON line per timed action to the ``metrics.actions`` logger."""

    def __init__(self):
        self._logger = logging.getLogger(METRICS_LOGGER_NAME)

    def configure(self, logger: logging.Logger | None = None) -> None:
        if logger:
            self._logger = logger

    def _emit(self, action: str, duration_ms: float, success: bool, *, source: str | None, error: str | None) -> None:
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "action": action,
            "duration_ms": round(duration_ms, 3),
            "success": success,
        }
        if source:
            payload["source"] = source
        if error:
            payload["error"] = error
        self._logger.info(json.dumps(payload, ensure_ascii=False))

    @asynccontextmanager
    async def span_async(self, action: str, *, source: str | None = None):
        start = time.perf_counter()
        error = None
        try:
            yield
        except Exception as exc:
            error = type(exc).__name__
            raise
        finally:
            duration = (time.perf_counter() - start) * 1000
            self._emit(action, duration, error is None, source=source, error=error)

    def wrap_async(self, action: str, *, source: str | None = None):
        def decorator(func: Callable[..., Awaitable[T]]):
            @functools.wraps(func)
            async def wrapper(*args, **kwargs):
                async with self.span_async(action, source=source):
                    return await func(*args, **kwargs)

            return wrapper

        return decorator


metrics = MetricsClient()
