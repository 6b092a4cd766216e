import logging
import threading
from typing import Callable, Dict, Optional

import requests
from web3 import Web3

from ..config import Config
from ..database import BaseCacheStore, cache_key
from ..evm.rpc import EvmCallReverted, EvmRpcClient, EvmRpcError
from .models import PartialTokenRecord

logger = logging.getLogger(__name__)


class OnChainSource:
    """
    Reads name() and symbol() straight from the token contract.

    The two reads are independent: one reverting or timing out leaves only
    its own field empty.
    """

    SOURCE = "onchain"

    def __init__(
        self,
        cache: BaseCacheStore,
        rpc_url_for_chain: Callable[[str], Optional[str]] = Config.rpc_url_for_chain,
        session: Optional[requests.Session] = None,
    ):
        self.cache = cache
        self._rpc_url_for_chain = rpc_url_for_chain
        self._session = session or requests.Session()
        self._clients: Dict[str, EvmRpcClient] = {}
        self._lock = threading.Lock()

    def _client(self, chain: str) -> Optional[EvmRpcClient]:
        with self._lock:
            client = self._clients.get(chain)
            if client is None:
                rpc_url = self._rpc_url_for_chain(chain)
                if not rpc_url:
                    return None
                client = EvmRpcClient(chain=chain, rpc_url=rpc_url, session=self._session)
                self._clients[chain] = client
            return client

    def fetch(self, chain: str, address: str) -> Optional[PartialTokenRecord]:
        if not Web3.is_address(address):
            return None
        client = self._client(chain)
        if client is None:
            logger.debug(f"[{chain}] No RPC endpoint configured; skipping on-chain read")
            return None

        key = cache_key(self.SOURCE, chain, address.lower())
        raw = self.cache.get_or_load(
            key,
            lambda: self._read(client, address),
            cache_if=lambda r: not r.get("incomplete"),
        )
        if raw is None:
            return None
        return PartialTokenRecord.from_dict(raw)

    def _read(self, client: EvmRpcClient, address: str) -> Optional[Dict[str, object]]:
        out: Dict[str, object] = {"name": None, "symbol": None}
        answered = False
        failed = False
        for field, reader in (("name", client.get_name), ("symbol", client.get_symbol)):
            try:
                out[field] = reader(address)
                answered = True
            except EvmCallReverted as e:
                answered = True
                logger.debug(f"[{client.chain}] {field}() reverted for {address}: {e}")
            except EvmRpcError as e:
                failed = True
                logger.warning(f"[{client.chain}] {field}() read failed for {address}: {e}")

        # Neither read reached the node: report absence so the next request retries.
        if not answered:
            return None
        # One read never reached the node: serve what we have but keep it out of the cache.
        if failed:
            out["incomplete"] = True
        return out
