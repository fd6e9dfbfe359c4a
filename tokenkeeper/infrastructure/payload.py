from __future__ import annotations

from typing import Any, Optional

import yaml


def encode_data(payload: Any) -> Optional[str]:
    """Serialize a token's auxiliary payload for the ``data`` column."""
    if payload is None:
        return None
    return yaml.safe_dump(payload, allow_unicode=True, sort_keys=True)


def decode_data(text: Optional[str]) -> Any:
    if not text:
        return None
    return yaml.safe_load(text)
