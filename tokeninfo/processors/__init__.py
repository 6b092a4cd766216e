from .models import PartialTokenRecord, TokenRecord, format_token_record, token_id
from .bulk_metadata import BulkMetadataSource
from .onchain_reader import OnChainSource
from .symbol_search import SymbolSearchSource
from .resolver import ResolutionOrchestrator
from .token_search import TokenSearchIndex

__all__ = [
    'PartialTokenRecord',
    'TokenRecord',
    'format_token_record',
    'token_id',
    'BulkMetadataSource',
    'OnChainSource',
    'SymbolSearchSource',
    'ResolutionOrchestrator',
    'TokenSearchIndex',
]
