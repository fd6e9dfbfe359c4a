from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from ..domain import (
    DEFAULT_SIZE,
    DEFAULT_TTL,
    OwnerLookup,
    OwnerTokens,
    TokenGenerator,
    TokenPolicies,
    TokenPolicy,
    TokenRepository,
)
from ..domain.generator import DEFAULT_MAX_ATTEMPTS
from ..domain.repositories import Clock, Randomizer
from ..domain.tokens import Owner
from ..infrastructure import OwnerRegistry, load_policies_from_yaml
from ..infrastructure.metrics import metrics
from ..infrastructure.random import SystemClock, SystemRandomizer
from ..infrastructure.sqlite import SQLiteDatabase, SQLiteTokenStore
from .metrics import configure_metrics_logger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokensConfig:
    db_path: str
    default_size: int = DEFAULT_SIZE
    default_ttl: timedelta | None = DEFAULT_TTL
    max_generation_attempts: int = DEFAULT_MAX_ATTEMPTS
    policies_path: str | None = None
    metrics_path: str | None = None


class TokensContainer:
    def __init__(
        self,
        *,
        config: TokensConfig,
        owners: OwnerRegistry,
        repository: TokenRepository,
        lookup: OwnerLookup,
        database: SQLiteDatabase,
        store: SQLiteTokenStore,
    ):
        self.config = config
        self.owners = owners
        self.repository = repository
        self.lookup = lookup
        self.store = store

        self._database = database

    def tokens_for(self, owner: Owner) -> OwnerTokens:
        return OwnerTokens(self.repository, owner)

    async def init_resources(self) -> None:
        await self._database.init()


def load_policies(config: TokensConfig) -> TokenPolicies:
    default = TokenPolicy(size=config.default_size, ttl=config.default_ttl)
    if not config.policies_path:
        return TokenPolicies(default=default)
    policies = load_policies_from_yaml(config.policies_path, default)
    logger.info(
        "Loaded token policies from %s: %s",
        config.policies_path,
        ",".join(sorted(policies.by_name)) or "none",
    )
    return policies


def create_container(
    config: TokensConfig,
    owners: OwnerRegistry | None = None,
    *,
    clock: Clock | None = None,
    randomizer: Randomizer | None = None,
) -> TokensContainer:
    owners = owners or OwnerRegistry()
    clock = clock or SystemClock()

    if config.metrics_path:
        metrics.configure(configure_metrics_logger(config.metrics_path))

    database = SQLiteDatabase(config.db_path)
    store = SQLiteTokenStore(database, owners)
    generator = TokenGenerator(
        store,
        randomizer=randomizer or SystemRandomizer(),
        clock=clock,
        max_attempts=config.max_generation_attempts,
    )
    repository = TokenRepository(store, generator, clock=clock, policies=load_policies(config))
    lookup = OwnerLookup(repository, store)

    return TokensContainer(
        config=config,
        owners=owners,
        repository=repository,
        lookup=lookup,
        database=database,
        store=store,
    )
