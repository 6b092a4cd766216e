import logging
from typing import Dict, Iterable, Optional

import requests
from web3 import Web3

from ..config import Config
from ..database import BaseCacheStore, cache_key
from .models import PartialTokenRecord, clean_text

logger = logging.getLogger(__name__)


class BulkMetadataSource:
    """
    Batch metadata lookup against the DefiLlama coins API.

    One request covers every address of a resolution batch; the response is
    keyed by "chain:address". Price fields are ignored.
    """

    SOURCE = "bulk"

    def __init__(
        self,
        cache: BaseCacheStore,
        session: Optional[requests.Session] = None,
        base_url: Optional[str] = None,
    ):
        self.cache = cache
        self._session = session or requests.Session()
        self.base_url = (base_url or Config.BULK_API_URL).rstrip("/")

    def fetch(self, chain: str, addresses: Iterable[str]) -> Dict[str, PartialTokenRecord]:
        """
        Look up all addresses of a batch with a single upstream call.

        Args:
            chain: Canonical chain slug
            addresses: Normalized addresses (any case)

        Returns:
            Dict mapping "chain:lowercased address" to PartialTokenRecord.
            Empty if the upstream is unavailable. Addresses that are not
            well-formed EVM addresses are never sent upstream.
        """
        unique = sorted({a.lower() for a in addresses if a and Web3.is_address(a)})
        if not unique:
            return {}

        key = cache_key(self.SOURCE, chain, ",".join(unique))
        raw = self.cache.get_or_load(key, lambda: self._fetch_raw(chain, unique))
        if raw is None:
            return {}
        return {coin: PartialTokenRecord.from_dict(entry) for coin, entry in raw.items()}

    def _fetch_raw(self, chain: str, addresses: list) -> Optional[Dict[str, Dict[str, Optional[str]]]]:
        coins = ",".join(f"{chain}:{a}" for a in addresses)
        url = f"{self.base_url}/prices/current/{coins}"
        logger.info(f"[{chain}] Bulk metadata lookup for {len(addresses)} addresses")

        try:
            resp = self._session.get(url, timeout=Config.HTTP_TIMEOUT_SECONDS)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"[{chain}] Bulk metadata request failed: {e}")
            return None

        coins_data = data.get("coins") if isinstance(data, dict) else None
        if not isinstance(coins_data, dict):
            logger.warning(f"[{chain}] Bulk metadata response has no coins mapping")
            return None

        out: Dict[str, Dict[str, Optional[str]]] = {}
        for coin, entry in coins_data.items():
            if not isinstance(entry, dict):
                continue
            out[str(coin).lower()] = {
                "name": clean_text(entry.get("name")),
                "symbol": clean_text(entry.get("symbol")),
                "image": clean_text(entry.get("logo")) or clean_text(entry.get("image")),
            }

        logger.info(f"[{chain}] Bulk metadata found {len(out)}/{len(addresses)} addresses")
        return out
