import logging
import threading
from typing import Any, Optional

import requests

from ...config import Config
from ...errors import UpstreamError

logger = logging.getLogger(__name__)


class EvmRpcError(UpstreamError):
    pass


class EvmCallReverted(EvmRpcError):
    """The node answered, but the call itself errored (e.g. no such function)."""
    pass


def _decode_erc20_string(result_hex: Optional[str]) -> Optional[str]:
    """Decode an ABI `string` return, or a legacy `bytes32` one (e.g. MKR)."""
    if not result_hex or result_hex == "0x":
        return None
    try:
        raw = bytes.fromhex(result_hex[2:] if result_hex.startswith("0x") else result_hex)
    except ValueError:
        return None
    if len(raw) == 32:
        return raw.rstrip(b"\x00").decode("utf-8", errors="replace").strip() or None
    if len(raw) < 64:
        return None
    offset = int.from_bytes(raw[0:32], "big")
    if offset + 32 > len(raw):
        return None
    strlen = int.from_bytes(raw[offset : offset + 32], "big")
    start = offset + 32
    end = start + strlen
    if end > len(raw):
        return None
    return raw[start:end].decode("utf-8", errors="replace").strip() or None


class EvmRpcClient:
    _SYMBOL = "0x95d89b41"
    _NAME = "0x06fdde03"

    def __init__(self, chain: str, rpc_url: str, session: Optional[requests.Session] = None):
        self.chain = chain
        self.rpc_url = rpc_url
        self._session = session or requests.Session()
        self._lock = threading.Lock()
        self._next_id = 0

    def _request_id(self) -> int:
        with self._lock:
            self._next_id += 1
            return self._next_id

    def _post(self, payload: Any) -> Any:
        try:
            resp = self._session.post(
                self.rpc_url,
                json=payload,
                timeout=Config.RPC_TIMEOUT_SECONDS,
                headers={"Content-Type": "application/json"},
            )
            resp.raise_for_status()
            return resp.json()
        except (requests.RequestException, ValueError) as e:
            raise EvmRpcError(f"{self.chain} RPC request failed: {e}") from e

    def eth_call(self, to: str, data: str) -> Optional[str]:
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id(),
            "method": "eth_call",
            "params": [{"to": to, "data": data}, "latest"],
        }
        response = self._post(payload)
        if not isinstance(response, dict):
            raise EvmRpcError(f"{self.chain} RPC returned malformed payload: {response!r}")
        if "error" in response:
            raise EvmCallReverted(f"{self.chain} eth_call to {to} reverted: {response['error']}")
        return response.get("result")

    def get_name(self, token: str) -> Optional[str]:
        return _decode_erc20_string(self.eth_call(token.lower(), self._NAME))

    def get_symbol(self, token: str) -> Optional[str]:
        return _decode_erc20_string(self.eth_call(token.lower(), self._SYMBOL))
