import unittest
from datetime import timedelta

from tokenkeeper.domain import OwnerLookup, StorageError, TokenGenerator, TokenRepository

from tests.fakes import CountingRandomizer, FakeTokenStore, FixedClock, Team, User


class OwnerLookupTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.store = FakeTokenStore()
        self.clock = FixedClock()
        generator = TokenGenerator(self.store, randomizer=CountingRandomizer(), clock=self.clock)
        self.repo = TokenRepository(self.store, generator, clock=self.clock)
        self.lookup = OwnerLookup(self.repo, self.store)
        self.user = User(id=7, email="ann@example.com")
        self.team = Team(id=7, title="Core")
        self.store.add_owner(self.user)
        self.store.add_owner(self.team)

    async def test_find_owner_by_token(self):
        token = await self.repo.add(self.user, "activation")
        self.assertIs(await self.lookup.find_owner_by_token("User", "activation", token.value), self.user)

    async def test_lookup_is_scoped_to_owner_type(self):
        user_token = await self.repo.add(self.user, "invite")
        team_token = await self.repo.add(self.team, "invite")

        self.assertIsNone(await self.lookup.find_owner_by_token("Team", "invite", user_token.value))
        self.assertIs(await self.lookup.find_owner_by_token("Team", "invite", team_token.value), self.team)

    async def test_unknown_token_returns_none(self):
        await self.repo.add(self.user, "activation")
        self.assertIsNone(await self.lookup.find_owner_by_token("User", "activation", "missing"))
        self.assertIsNone(await self.lookup.find_owner_by_valid_token("User", "activation", "missing"))

    async def test_expired_token_only_resolves_without_validity(self):
        token = await self.repo.add(self.user, "activation", expires_at=self.clock.now() - timedelta(seconds=1))

        self.assertIs(await self.lookup.find_owner_by_token("User", "activation", token.value), self.user)
        self.assertIsNone(await self.lookup.find_owner_by_valid_token("User", "activation", token.value))
        self.assertEqual(len(self.store.tokens), 1)

    async def test_valid_token_resolves_owner(self):
        token = await self.repo.add(self.user, "activation", expires_at=None)
        self.clock.advance(timedelta(days=365))
        self.assertIs(await self.lookup.find_owner_by_valid_token("User", "activation", token.value), self.user)

    async def test_storage_errors_propagate(self):
        token = await self.repo.add(self.user, "activation")
        self.store.fail_with = StorageError("connection lost")
        with self.assertRaises(StorageError):
            await self.lookup.find_owner_by_token("User", "activation", token.value)
