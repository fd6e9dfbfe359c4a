from .errors import (
    InvalidOwnerState,
    OwnerTypeNotRegistered,
    StorageError,
    TokenError,
    TokenGenerationError,
)
from .generator import TokenGenerator
from .lookup import OwnerLookup
from .models import OwnerRef, QueryOrder, Token, TokenCriteria, Tokenizable, token_name
from .policies import DEFAULT_SIZE, DEFAULT_TTL, TokenPolicies, TokenPolicy
from .repositories import Clock, Randomizer, TokenStore
from .tokens import DEFAULT, OwnerTokens, TokenRepository

__all__ = [
    "TokenError",
    "StorageError",
    "InvalidOwnerState",
    "TokenGenerationError",
    "OwnerTypeNotRegistered",
    "TokenGenerator",
    "OwnerLookup",
    "OwnerRef",
    "QueryOrder",
    "Token",
    "TokenCriteria",
    "Tokenizable",
    "token_name",
    "DEFAULT_SIZE",
    "DEFAULT_TTL",
    "TokenPolicies",
    "TokenPolicy",
    "Clock",
    "Randomizer",
    "TokenStore",
    "DEFAULT",
    "OwnerTokens",
    "TokenRepository",
]
