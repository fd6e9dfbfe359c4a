from __future__ import annotations

from typing import Any, Optional

from tokenkeeper.domain.models import QueryOrder, Token, TokenCriteria
from tokenkeeper.domain.repositories import TokenStore
from tokenkeeper.infrastructure.mappers import timestamp_to_db, token_from_row, token_to_params
from tokenkeeper.infrastructure.owners import OwnerRegistry

from .database import SQLiteDatabase
from ..metrics import metrics

_ORDER_BY = {
    QueryOrder.NATURAL: "",
    QueryOrder.NEWEST_FIRST: "ORDER BY created_at DESC, id DESC",
}


def _where(criteria: TokenCriteria) -> tuple[str, tuple]:
    clauses: list[str] = []
    params: list[Any] = []
    for column, value in (
        ("owner_type", criteria.owner_type),
        ("owner_id", criteria.owner_id),
        ("name", criteria.name),
        ("token", criteria.value),
    ):
        if value is not None:
            clauses.append(f"{column}=?")
            params.append(value)
    if criteria.valid_at is not None:
        clauses.append("(expires_at IS NULL OR expires_at > ?)")
        params.append(timestamp_to_db(criteria.valid_at))
    if not clauses:
        return "", ()
    return "WHERE " + " AND ".join(clauses), tuple(params)


class SQLiteTokenStore(TokenStore):
    def __init__(self, db: SQLiteDatabase, owners: OwnerRegistry):
        self._db = db
        self._owners = owners

    @metrics.wrap_async("db:tokens.insert", source="database")
    async def insert(self, token: Token) -> int:
        async with self._db.connect() as conn:
            cur = await conn.execute(
                """
                INSERT INTO tokens(name, token, owner_type, owner_id, expires_at, data, created_at)
                VALUES(?, ?, ?, ?, ?, ?, ?)
                """,
                token_to_params(token),
            )
            await conn.commit()
            return int(cur.lastrowid)

    @metrics.wrap_async("db:tokens.delete_matching", source="database")
    async def delete_matching(self, criteria: TokenCriteria) -> int:
        if criteria.is_empty():
            raise ValueError("Refusing to delete tokens without criteria")
        where, params = _where(criteria)
        async with self._db.connect() as conn:
            cur = await conn.execute(f"DELETE FROM tokens {where}", params)
            await conn.commit()
            return cur.rowcount

    @metrics.wrap_async("db:tokens.query_one", source="database")
    async def query_one(self, criteria: TokenCriteria, order: QueryOrder = QueryOrder.NATURAL) -> Optional[Token]:
        where, params = _where(criteria)
        async with self._db.connect() as conn:
            cur = await conn.execute(
                f"""
                SELECT id, name, token, owner_type, owner_id, expires_at, data, created_at
                FROM tokens
                {where}
                {_ORDER_BY[order]}
                LIMIT 1
                """,
                params,
            )
            row = await cur.fetchone()
        return token_from_row(dict(row)) if row else None

    async def resolve_owner(self, owner_type: str, owner_id: int) -> Optional[Any]:
        return await self._owners.resolve(owner_type, owner_id)
