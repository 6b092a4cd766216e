import logging
from typing import Mapping

from .models import PartialTokenRecord, TokenRecord, format_token_record
from .onchain_reader import OnChainSource
from .symbol_search import SymbolSearchSource

logger = logging.getLogger(__name__)


class ResolutionOrchestrator:
    """
    Merges the three sources for one address, highest priority first.

    1. bulk metadata seed (already fetched for the whole batch)
    2. on-chain name()/symbol(), only if name or symbol is missing
    3. symbol search, only if image is missing and a symbol is known;
       fills image, and name if still missing

    A field set by an earlier step is never replaced.
    """

    def __init__(self, onchain: OnChainSource, symbol_search: SymbolSearchSource):
        self.onchain = onchain
        self.symbol_search = symbol_search

    def seed(self, chain: str, address: str, bulk: Mapping[str, PartialTokenRecord]) -> PartialTokenRecord:
        record = PartialTokenRecord()
        record.merge(bulk.get(f"{chain}:{address.lower()}"))
        return record

    def resolve(self, chain: str, address: str, bulk: Mapping[str, PartialTokenRecord]) -> TokenRecord:
        record = self.seed(chain, address, bulk)

        if record.name is None or record.symbol is None:
            record.merge(self.onchain.fetch(chain, address), only=("name", "symbol"))

        if record.image is None and record.symbol:
            record.merge(self.symbol_search.fetch(record.symbol), only=("image", "name"))

        if record.is_empty():
            logger.debug(f"[{chain}] No metadata found for {address}")
        return format_token_record(record, address)

    def resolve_seed_only(self, chain: str, address: str, bulk: Mapping[str, PartialTokenRecord]) -> TokenRecord:
        """Format from bulk data alone, as if the per-address sources had failed."""
        return format_token_record(self.seed(chain, address, bulk), address)
