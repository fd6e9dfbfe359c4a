import argparse
import asyncio
import json
import logging
import os
from datetime import timedelta

from dotenv import load_dotenv

from .application import TokensConfig, bootstrap_tokens
from .domain import OwnerRef

logger = logging.getLogger(__name__)


def _ttl_from_env(raw: str) -> timedelta | None:
    raw = raw.strip()
    if not raw:
        return None
    hours = float(raw)
    return timedelta(hours=hours) if hours > 0 else None


def load_config() -> TokensConfig:
    db_path = os.getenv("TOKENS_DB_PATH", "").strip()
    if not db_path:
        raise RuntimeError("TOKENS_DB_PATH is empty. Put it to .env")
    default_size = int(os.getenv("TOKENS_DEFAULT_SIZE", "12"))
    if default_size < 1:
        raise RuntimeError("TOKENS_DEFAULT_SIZE must be positive")
    default_ttl = _ttl_from_env(os.getenv("TOKENS_DEFAULT_TTL_HOURS", "48"))
    max_attempts = int(os.getenv("TOKENS_MAX_GENERATION_ATTEMPTS", "1000"))
    policies_path = os.getenv("TOKENS_POLICIES_PATH", "").strip() or None
    metrics_path = os.getenv("TOKENS_METRICS_PATH", "").strip() or None
    config = TokensConfig(
        db_path=db_path,
        default_size=default_size,
        default_ttl=default_ttl,
        max_generation_attempts=max_attempts,
        policies_path=policies_path,
        metrics_path=metrics_path,
    )
    logger.info(
        "Config loaded: db_path=%s, default_size=%s, default_ttl=%s, max_attempts=%s, policies=%s, metrics=%s",
        config.db_path,
        config.default_size,
        config.default_ttl or "never",
        config.max_generation_attempts,
        config.policies_path or "-",
        config.metrics_path or "-",
    )
    return config


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Token store maintenance commands.")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("init", help="Create or migrate the token tables")

    generate = commands.add_parser("generate", help="Print a token value unused by any stored token")
    generate.add_argument("--size", type=int, default=None, help="Token length (default: TOKENS_DEFAULT_SIZE)")

    lookup = commands.add_parser("lookup", help="Show a stored token as JSON (the value is not printed)")
    lookup.add_argument("owner_type")
    lookup.add_argument("name")
    lookup.add_argument("value")
    lookup.add_argument("--valid", action="store_true", help="Ignore expired tokens")

    revoke = commands.add_parser("revoke", help="Delete a named token of one owner")
    revoke.add_argument("owner_type")
    revoke.add_argument("owner_id", type=int)
    revoke.add_argument("name")

    return parser.parse_args(argv)


def describe_token(token) -> dict:
    return {
        "id": token.id,
        "name": token.name,
        "owner_type": token.owner_type,
        "owner_id": token.owner_id,
        "expires_at": token.expires_at.isoformat() if token.expires_at else None,
        "created_at": token.created_at.isoformat() if token.created_at else None,
        "has_data": token.data is not None,
    }


async def run(args: argparse.Namespace, config: TokensConfig) -> int:
    async with bootstrap_tokens(config) as container:
        if args.command == "init":
            print(f"Token database initialized at {config.db_path}")
            return 0

        if args.command == "generate":
            size = args.size if args.size is not None else config.default_size
            print(await container.repository.generate(size))
            return 0

        if args.command == "lookup":
            finder = container.repository.find_valid if args.valid else container.repository.find
            token = await finder(args.owner_type, args.name, args.value)
            if token is None:
                print("Token not found")
                return 1
            print(json.dumps(describe_token(token), ensure_ascii=False, indent=2))
            return 0

        if args.command == "revoke":
            removed = await container.repository.remove(OwnerRef(args.owner_type, args.owner_id), args.name)
            print("Token revoked" if removed else "Token not found")
            return 0 if removed else 1

    raise RuntimeError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    args = parse_args(argv)
    config = load_config()
    try:
        return asyncio.run(run(args, config))
    except Exception:
        logger.exception("Command '%s' failed", args.command)
        raise


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except KeyboardInterrupt:
        logger.info("Interrupted by user, shutting down")
