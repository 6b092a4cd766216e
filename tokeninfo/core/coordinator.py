import logging
import time
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Iterable, List, Optional

from ..config import Config
from ..database import BaseCacheStore, get_cache_store
from ..evm import ChainResolver, get_chain_resolver, normalize_address
from ..processors import (
    BulkMetadataSource,
    OnChainSource,
    ResolutionOrchestrator,
    SymbolSearchSource,
    TokenRecord,
)

logger = logging.getLogger(__name__)


class BatchCoordinator:
    """
    Top-level entry for address resolution.

    One bulk lookup per batch, then per-address enrichment fanned out over a
    bounded thread pool. Output order and length always match the input.
    """

    def __init__(
        self,
        cache: Optional[BaseCacheStore] = None,
        chain_resolver: Optional[ChainResolver] = None,
        bulk_source: Optional[BulkMetadataSource] = None,
        onchain_source: Optional[OnChainSource] = None,
        symbol_search: Optional[SymbolSearchSource] = None,
        max_workers: Optional[int] = None,
        deadline_seconds: Optional[float] = None,
    ):
        self.cache = cache or get_cache_store()
        self.chain_resolver = chain_resolver or get_chain_resolver()
        self.bulk_source = bulk_source or BulkMetadataSource(self.cache)
        self.orchestrator = ResolutionOrchestrator(
            onchain=onchain_source or OnChainSource(self.cache),
            symbol_search=symbol_search or SymbolSearchSource(self.cache),
        )
        self.max_workers = int(max_workers if max_workers is not None else Config.ENRICH_MAX_WORKERS)
        self.deadline_seconds = float(
            deadline_seconds if deadline_seconds is not None else Config.BATCH_DEADLINE_SECONDS
        )

    def resolve(self, address: str, chain: Optional[str] = None) -> TokenRecord:
        return self.resolve_batch([address], chain)[0]

    def resolve_batch(self, addresses: Iterable[str], chain: Optional[str] = None) -> List[TokenRecord]:
        start = time.time()
        slug = self.chain_resolver.resolve(chain)
        normalized = [normalize_address(a) for a in addresses]
        if not normalized:
            return []

        bulk = self.bulk_source.fetch(slug, normalized)

        results: List[Optional[TokenRecord]] = [None] * len(normalized)
        executor = ThreadPoolExecutor(
            max_workers=max(1, min(self.max_workers, len(normalized))),
            thread_name_prefix="tokeninfo-enrich",
        )
        try:
            futures = {
                executor.submit(self.orchestrator.resolve, slug, address, bulk): idx
                for idx, address in enumerate(normalized)
            }
            done, not_done = wait(futures, timeout=self.deadline_seconds)
            for fut in done:
                results[futures[fut]] = fut.result()
            if not_done:
                logger.warning(
                    f"[{slug}] Enrichment deadline of {self.deadline_seconds:.1f}s hit; "
                    f"{len(not_done)}/{len(normalized)} addresses fall back to bulk data"
                )
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        for idx, record in enumerate(results):
            if record is None:
                results[idx] = self.orchestrator.resolve_seed_only(slug, normalized[idx], bulk)

        logger.info(f"[{slug}] Resolved {len(results)} addresses in {time.time() - start:.2f}s")
        return results  # type: ignore[return-value]
