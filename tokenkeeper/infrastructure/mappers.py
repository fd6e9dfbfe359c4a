from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from ..domain.models import Token

# Fixed-width UTC text sorts the same way the instants do, so SQL can compare it.
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"


def _coerce(mapping: Mapping[str, Any], key: str, default: Any = None) -> Any:
    value = mapping.get(key, default)
    return value if value is not None else default


def timestamp_to_db(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def timestamp_from_db(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    text = str(value)
    fmt = TIMESTAMP_FORMAT if "." in text else "%Y-%m-%d %H:%M:%S"
    return datetime.strptime(text, fmt).replace(tzinfo=timezone.utc)


def token_from_row(row: Mapping[str, Any]) -> Token:
    return Token(
        id=int(row["id"]),
        name=str(row["name"]),
        value=str(row["token"]),
        owner_type=str(row["owner_type"]),
        owner_id=int(row["owner_id"]),
        expires_at=timestamp_from_db(row.get("expires_at")),
        data=_coerce(row, "data"),
        created_at=timestamp_from_db(row.get("created_at")),
    )


def token_to_params(token: Token) -> tuple:
    return (
        token.name,
        token.value,
        token.owner_type,
        token.owner_id,
        timestamp_to_db(token.expires_at),
        token.data,
        timestamp_to_db(token.created_at or datetime.now(timezone.utc)),
    )
