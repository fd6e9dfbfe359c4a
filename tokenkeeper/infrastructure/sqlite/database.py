from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import aiosqlite

from ...domain.errors import StorageError

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;

CREATE TABLE IF NOT EXISTS tokens (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  name TEXT NOT NULL,
  token TEXT NOT NULL,
  owner_type TEXT NOT NULL,
  owner_id INTEGER NOT NULL,
  expires_at TEXT,
  data TEXT,
  created_at TEXT DEFAULT (strftime('%Y-%m-%d %H:%M:%f', 'now'))
);

CREATE UNIQUE INDEX IF NOT EXISTS idx_tokens_token ON tokens(token);
CREATE INDEX IF NOT EXISTS idx_tokens_owner_name ON tokens(owner_type, owner_id, name);
"""


class SQLiteDatabase:
    def __init__(self, path: str):
        self.path = path

    async def init(self) -> None:
        try:
            async with aiosqlite.connect(self.path) as conn:
                conn.row_factory = aiosqlite.Row
                await conn.executescript(SCHEMA_SQL)
                await conn.commit()
        except aiosqlite.Error as exc:
            raise StorageError(f"Failed to initialize token database at {self.path}: {exc}") from exc
        logger.info("Token database ready at %s", self.path)

    @asynccontextmanager
    async def connect(self):
        try:
            conn = await aiosqlite.connect(self.path)
        except aiosqlite.Error as exc:
            raise StorageError(f"Cannot open token database at {self.path}: {exc}") from exc
        conn.row_factory = aiosqlite.Row
        try:
            yield conn
        except aiosqlite.Error as exc:
            raise StorageError(str(exc)) from exc
        finally:
            await conn.close()
