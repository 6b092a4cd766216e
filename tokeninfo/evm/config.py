import logging
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from ..config import Config

logger = logging.getLogger(__name__)

DEFAULT_CHAIN = "ethereum"

# Canonical slugs follow the bulk upstream's coin key naming ("ethereum:0x...").
DEFAULT_CHAIN_ALIASES: Dict[str, str] = {
    "1": "ethereum",
    "eth": "ethereum",
    "mainnet": "ethereum",
    "homestead": "ethereum",
    "ethereum": "ethereum",
    "137": "polygon",
    "matic": "polygon",
    "polygon": "polygon",
    "polygon-pos": "polygon",
    "42161": "arbitrum",
    "arb": "arbitrum",
    "arbitrum": "arbitrum",
    "arbitrum-one": "arbitrum",
    "10": "optimism",
    "op": "optimism",
    "optimism": "optimism",
    "optimistic-ethereum": "optimism",
    "43114": "avax",
    "avax": "avax",
    "avalanche": "avax",
    "avalanche-c": "avax",
    "8453": "base",
    "base": "base",
    "56": "bsc",
    "bnb": "bsc",
    "bsc": "bsc",
    "binance-smart-chain": "bsc",
    "250": "fantom",
    "ftm": "fantom",
    "fantom": "fantom",
    "100": "xdai",
    "gnosis": "xdai",
    "xdai": "xdai",
    "42220": "celo",
    "celo": "celo",
    "59144": "linea",
    "linea": "linea",
    "534352": "scroll",
    "scroll": "scroll",
    "324": "era",
    "era": "era",
    "zksync": "era",
    "zksync-era": "era",
}


class ChainResolver:
    """
    Maps a chain identifier (numeric chain id or alias) to one canonical slug.

    Unknown identifiers are not an error: they pass through lowercased.
    """

    def __init__(self, aliases: Optional[Mapping[str, str]] = None):
        merged = {**DEFAULT_CHAIN_ALIASES, **(aliases if aliases is not None else Config.CHAIN_ALIASES)}
        self._aliases = MappingProxyType({str(k).strip().lower(): str(v).strip().lower() for k, v in merged.items()})

    @property
    def aliases(self) -> Mapping[str, str]:
        return self._aliases

    def resolve(self, chain_input: Optional[str] = None) -> str:
        if chain_input is None:
            return DEFAULT_CHAIN
        key = str(chain_input).strip().lower()
        if not key:
            return DEFAULT_CHAIN
        return self._aliases.get(key, key)


_chain_resolver = None


def get_chain_resolver() -> ChainResolver:
    """Get or create the process-wide ChainResolver built from Config."""
    global _chain_resolver
    if _chain_resolver is None:
        _chain_resolver = ChainResolver()
        logger.info(f"Loaded {len(_chain_resolver.aliases)} chain aliases")
    return _chain_resolver


def resolve_chain(chain_input: Optional[str] = None) -> str:
    return get_chain_resolver().resolve(chain_input)
