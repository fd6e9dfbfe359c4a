from .application import TokensConfig, TokensContainer, bootstrap_tokens, create_container
from .domain import (
    InvalidOwnerState,
    OwnerLookup,
    OwnerRef,
    OwnerTokens,
    OwnerTypeNotRegistered,
    StorageError,
    Token,
    Tokenizable,
    TokenError,
    TokenGenerationError,
    TokenGenerator,
    TokenRepository,
)
from .infrastructure import OwnerRegistry, decode_data, encode_data

__all__ = [
    "TokensConfig",
    "TokensContainer",
    "bootstrap_tokens",
    "create_container",
    "InvalidOwnerState",
    "OwnerLookup",
    "OwnerRef",
    "OwnerTokens",
    "OwnerTypeNotRegistered",
    "StorageError",
    "Token",
    "Tokenizable",
    "TokenError",
    "TokenGenerationError",
    "TokenGenerator",
    "TokenRepository",
    "OwnerRegistry",
    "decode_data",
    "encode_data",
]
