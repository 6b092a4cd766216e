import logging
from typing import Any, Dict, List, Optional

import requests

from ..config import Config
from ..database import BaseCacheStore, cache_key
from .models import PartialTokenRecord, clean_text

logger = logging.getLogger(__name__)


def pick_best_coin(symbol: str, coins: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """First coin whose symbol matches exactly (case-insensitive), else the top hit."""
    candidates = [c for c in coins if isinstance(c, dict)]
    if not candidates:
        return None
    for coin in candidates:
        if (clean_text(coin.get("symbol")) or "").lower() == symbol:
            return coin
    return candidates[0]


class SymbolSearchSource:
    """
    Resolves a symbol to a display name and logo via CoinGecko's /search.

    Many tokens share a symbol; the result is a best guess.
    """

    SOURCE = "search"

    def __init__(
        self,
        cache: BaseCacheStore,
        session: Optional[requests.Session] = None,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
    ):
        self.cache = cache
        self._session = session or requests.Session()
        self.base_url = (base_url or Config.SEARCH_API_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else Config.COINGECKO_API_KEY

    def fetch(self, symbol: Optional[str]) -> Optional[PartialTokenRecord]:
        query = (clean_text(symbol) or "").lower()
        if not query:
            return None

        key = cache_key(self.SOURCE, query)
        raw = self.cache.get_or_load(key, lambda: self._search(query))
        # {} is a cached "searched, nothing found"
        if not raw:
            return None
        return PartialTokenRecord.from_dict(raw)

    def _search(self, query: str) -> Optional[Dict[str, Optional[str]]]:
        headers = {"accept": "application/json"}
        if self.api_key:
            headers["x-cg-demo-api-key"] = self.api_key

        try:
            resp = self._session.get(
                f"{self.base_url}/search",
                params={"query": query},
                headers=headers,
                timeout=Config.HTTP_TIMEOUT_SECONDS,
            )
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Symbol search failed for {query!r}: {e}")
            return None

        coins = data.get("coins") if isinstance(data, dict) else None
        if not isinstance(coins, list):
            logger.warning(f"Symbol search response for {query!r} has no coins list")
            return None

        coin = pick_best_coin(query, coins)
        if coin is None:
            logger.debug(f"Symbol search found nothing for {query!r}")
            return {}
        return {
            "name": clean_text(coin.get("name")),
            "image": clean_text(coin.get("large")) or clean_text(coin.get("thumb")),
        }
