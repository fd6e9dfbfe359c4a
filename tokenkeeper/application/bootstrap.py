from __future__ import annotations

from contextlib import asynccontextmanager

from ..infrastructure import OwnerRegistry
from .container import TokensConfig, create_container


@asynccontextmanager
async def bootstrap_tokens(config: TokensConfig, owners: OwnerRegistry | None = None, **overrides):
    container = create_container(config, owners, **overrides)
    await container.init_resources()
    yield container
