from __future__ import annotations


class TokenError(Exception):
    """Base class for errors raised by tokenkeeper."""


class StorageError(TokenError):
    """Token storage is unavailable or a query failed."""


class InvalidOwnerState(TokenError):
    """The owner has no durable identity yet."""


class TokenGenerationError(TokenError):
    """No unused token value was found within the attempt limit."""

    def __init__(self, size: int, attempts: int):
        super().__init__(f"Could not generate a unique token of size {size} after {attempts} attempts")
        self.size = size
        self.attempts = attempts


class OwnerTypeNotRegistered(TokenError, LookupError):
    def __init__(self, owner_type: str):
        super().__init__(f"Owner type '{owner_type}' is not registered for tokens")
        self.owner_type = owner_type
