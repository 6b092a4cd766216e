import logging
from typing import Any

from web3 import Web3

logger = logging.getLogger(__name__)


def normalize_address(address: Any) -> str:
    """
    Checksum-format a contract address.

    Malformed input is never rejected; it degrades to the stripped input
    lowercased.
    """
    text = "" if address is None else str(address).strip()
    try:
        return Web3.to_checksum_address(text)
    except (ValueError, TypeError) as e:
        logger.debug(f"Not a checksummable address {text!r}: {e}")
        return text.lower()
