from datetime import timedelta
from pathlib import Path

import yaml

from ..domain.policies import TokenPolicies, TokenPolicy


def _ttl_from_hours(raw, *, entry) -> timedelta | None:
    if raw is None:
        return None
    try:
        hours = float(raw)
    except (TypeError, ValueError):
        raise RuntimeError(f"Invalid ttl_hours in token policy: {entry}")
    if hours < 0:
        raise RuntimeError(f"Negative ttl_hours in token policy: {entry}")
    # 0 means never expires, same as TOKENS_DEFAULT_TTL_HOURS
    return timedelta(hours=hours) if hours > 0 else None


def load_policies_from_yaml(path: str, default: TokenPolicy | None = None) -> TokenPolicies:
    p = Path(path)
    if not p.exists():
        raise RuntimeError(f"token policies file not found: {path}")

    with p.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict) or "tokens" not in data:
        raise RuntimeError("Invalid token policies format")

    entries = data["tokens"]
    if not isinstance(entries, list):
        raise RuntimeError("tokens must be a list")

    default = default or TokenPolicy()
    named: list[tuple[str, TokenPolicy]] = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise RuntimeError(f"Invalid token policy entry: {entry}")
        name = str(entry.get("name") or "").strip()
        if not name:
            raise RuntimeError(f"Invalid token policy entry: {entry}")

        size = entry.get("size", default.size)
        if not isinstance(size, int) or isinstance(size, bool) or size < 1:
            raise RuntimeError(f"Invalid size in token policy: {entry}")

        if "ttl_hours" in entry:
            ttl = _ttl_from_hours(entry["ttl_hours"], entry=entry)
        else:
            ttl = default.ttl

        named.append((name, TokenPolicy(size=size, ttl=ttl)))

    return TokenPolicies.build(default, named)
