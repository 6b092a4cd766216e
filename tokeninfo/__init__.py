"""
Token metadata resolution service.

Resolves name, symbol, logo and checksummed address for EVM tokens from a
bulk metadata API, direct contract reads and a symbol search API, with a
shared bounded cache in front of all three.
"""

from .core import BatchCoordinator, create_app
from .database import CacheStore, RedisCacheStore
from .evm import ChainResolver, normalize_address, resolve_chain
from .processors import (
    BulkMetadataSource,
    OnChainSource,
    PartialTokenRecord,
    ResolutionOrchestrator,
    SymbolSearchSource,
    TokenRecord,
    TokenSearchIndex,
)

__all__ = [
    'BatchCoordinator',
    'BulkMetadataSource',
    'CacheStore',
    'ChainResolver',
    'OnChainSource',
    'PartialTokenRecord',
    'RedisCacheStore',
    'ResolutionOrchestrator',
    'SymbolSearchSource',
    'TokenRecord',
    'TokenSearchIndex',
    'create_app',
    'normalize_address',
    'resolve_chain',
]
