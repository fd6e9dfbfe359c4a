from .bootstrap import bootstrap_tokens
from .container import TokensConfig, TokensContainer, create_container

__all__ = [
    "bootstrap_tokens",
    "TokensConfig",
    "TokensContainer",
    "create_container",
]
