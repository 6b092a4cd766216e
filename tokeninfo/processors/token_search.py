import logging
import threading
from difflib import SequenceMatcher
from typing import Any, Dict, List, Optional

import requests

from ..config import Config

logger = logging.getLogger(__name__)

# CoinGecko platform ids; "binance-smart-chain" is CoinGecko's name for bsc.
EVM_PLATFORMS = frozenset([
    "ethereum",
    "polygon-pos",
    "arbitrum-one",
    "optimistic-ethereum",
    "avalanche",
    "base",
    "bsc",
    "binance-smart-chain",
    "fantom",
    "gnosis",
    "xdai",
    "celo",
    "linea",
    "scroll",
    "zksync",
])

IMAGE_URL_TEMPLATE = "https://coin-images.coingecko.com/coins/images/{id}.png"
NO_MATCH = [{"message": "No EVM token match found"}]


def _has_evm_platform(token: Dict[str, Any]) -> bool:
    platforms = token.get("platforms")
    if not isinstance(platforms, dict):
        return False
    return any(p in EVM_PLATFORMS for p in platforms)


def match_score(query: str, token: Dict[str, Any]) -> float:
    best = 0.0
    for field in ("id", "symbol", "name"):
        value = str(token.get(field) or "").lower()
        if not value:
            continue
        if value == query:
            return 1.0
        if value.startswith(query):
            score = 0.95
        elif query in value:
            score = 0.9
        else:
            score = SequenceMatcher(None, query, value).ratio()
        best = max(best, score)
    return best


class TokenSearchIndex:
    """
    Fuzzy search over the CoinGecko token list, restricted to EVM platforms.

    The list is loaded once at startup; a failed load leaves the index empty.
    """

    def __init__(
        self,
        tokens: Optional[List[Dict[str, Any]]] = None,
        min_score: float = 0.7,
        limit: int = 10,
        session: Optional[requests.Session] = None,
    ):
        self.min_score = min_score
        self.limit = limit
        self._session = session or requests.Session()
        self._lock = threading.Lock()
        self._tokens: List[Dict[str, Any]] = [t for t in (tokens or []) if _has_evm_platform(t)]

    def __len__(self) -> int:
        return len(self._tokens)

    def load(self, url: Optional[str] = None) -> int:
        url = url or Config.TOKEN_LIST_URL
        logger.info(f"Fetching token list from {url}")
        try:
            resp = self._session.get(url, timeout=max(Config.HTTP_TIMEOUT_SECONDS, 60))
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Token list preload failed: {e}")
            return len(self)

        if not isinstance(data, list):
            logger.error("Token list response is not a list")
            return len(self)

        tokens = [t for t in data if isinstance(t, dict) and _has_evm_platform(t)]
        with self._lock:
            self._tokens = tokens
        logger.info(f"Loaded {len(tokens):,} EVM tokens")
        return len(tokens)

    def search(self, query: str) -> List[Dict[str, Any]]:
        """
        Return one result per (matched token, EVM platform) pair.

        Args:
            query: Free text matched against token id, symbol and name

        Returns:
            List of result dicts, best matches first; NO_MATCH when empty
        """
        q = query.strip().lower()
        if not q:
            return list(NO_MATCH)

        with self._lock:
            tokens = self._tokens

        scored = []
        for idx, token in enumerate(tokens):
            score = match_score(q, token)
            if score >= self.min_score:
                scored.append((-score, idx, token))
        scored.sort(key=lambda s: (s[0], s[1]))

        results: List[Dict[str, Any]] = []
        for _, _, token in scored[: self.limit]:
            symbol = token.get("symbol")
            for chain, address in token["platforms"].items():
                if chain not in EVM_PLATFORMS or not isinstance(address, str) or not address.startswith("0x"):
                    continue
                results.append({
                    "id": token.get("id"),
                    "symbol": symbol.upper() if isinstance(symbol, str) else None,
                    "name": token.get("name"),
                    "chain": chain,
                    "contractAddress": address,
                    "image": IMAGE_URL_TEMPLATE.format(id=token.get("id")),
                })

        if not results:
            return list(NO_MATCH)
        return results
