from .address import normalize_address
from .config import DEFAULT_CHAIN, ChainResolver, get_chain_resolver, resolve_chain

__all__ = [
    "DEFAULT_CHAIN",
    "ChainResolver",
    "get_chain_resolver",
    "normalize_address",
    "resolve_chain",
]
