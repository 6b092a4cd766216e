import json
import logging
import os
from typing import Dict, Optional

from dotenv import load_dotenv
load_dotenv()


def _env_json(name: str) -> Optional[dict]:
    value = os.getenv(name)
    if not value:
        return None
    return json.loads(value)


class Config:
    # HTTP service
    HOST = os.getenv('HOST', '0.0.0.0')
    PORT = int(os.getenv('PORT', '4000'))
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # On-chain reads (JSON-RPC)
    # RPC_URL is the ethereum endpoint; other chains come from RPC_URLS or RPC_URL_<SLUG>
    RPC_URL = os.getenv('RPC_URL', 'https://cloudflare-eth.com')
    RPC_URLS = _env_json('RPC_URLS') or {}
    RPC_TIMEOUT_SECONDS = float(os.getenv('RPC_TIMEOUT_SECONDS', '10'))

    # Upstream HTTP APIs
    BULK_API_URL = os.getenv('BULK_API_URL', 'https://coins.llama.fi')
    SEARCH_API_URL = os.getenv('SEARCH_API_URL', 'https://api.coingecko.com/api/v3')
    TOKEN_LIST_URL = os.getenv('TOKEN_LIST_URL', 'https://api.coingecko.com/api/v3/coins/list?include_platform=true')
    COINGECKO_API_KEY = os.getenv('COINGECKO_API_KEY', None)
    HTTP_TIMEOUT_SECONDS = float(os.getenv('HTTP_TIMEOUT_SECONDS', '10'))

    # Resolution
    ENRICH_MAX_WORKERS = int(os.getenv('ENRICH_MAX_WORKERS', '8'))
    BATCH_DEADLINE_SECONDS = float(os.getenv('BATCH_DEADLINE_SECONDS', '30'))
    CHAIN_ALIASES: Dict[str, str] = _env_json('CHAIN_ALIASES') or {}

    # Cache
    CACHE_BACKEND = os.getenv('CACHE_BACKEND', 'memory').lower()
    CACHE_MAX_ENTRIES = int(os.getenv('CACHE_MAX_ENTRIES', '5000'))
    CACHE_TTL_SECONDS = int(os.getenv('CACHE_TTL_SECONDS', '3600'))

    # Redis Configuration (shared cache backend)
    REDIS_HOST = os.getenv('REDIS_HOST', 'localhost')
    REDIS_PORT = int(os.getenv('REDIS_PORT', '6379'))
    REDIS_DB = int(os.getenv('REDIS_DB', '0'))
    REDIS_PASSWORD = os.getenv('REDIS_PASSWORD', None)
    REDIS_KEY_PREFIX = os.getenv('REDIS_KEY_PREFIX', 'tokeninfo:')

    @classmethod
    def rpc_url_for_chain(cls, chain: str) -> Optional[str]:
        if chain in cls.RPC_URLS:
            return cls.RPC_URLS.get(chain)
        url = os.getenv(f'RPC_URL_{chain.upper()}') or os.getenv(f'RPC_URL_{chain}')
        if url:
            return url
        if chain == 'ethereum':
            return cls.RPC_URL
        return None

    @classmethod
    def validate(cls):
        positive_fields = [
            'PORT',
            'RPC_TIMEOUT_SECONDS',
            'HTTP_TIMEOUT_SECONDS',
            'ENRICH_MAX_WORKERS',
            'BATCH_DEADLINE_SECONDS',
            'CACHE_MAX_ENTRIES',
            'CACHE_TTL_SECONDS',
        ]
        invalid = [field for field in positive_fields if getattr(cls, field) <= 0]
        if invalid:
            raise ValueError(f"Configuration values must be positive: {', '.join(invalid)}")
        if cls.CACHE_BACKEND not in ('memory', 'redis'):
            raise ValueError(f"Unsupported CACHE_BACKEND: {cls.CACHE_BACKEND}")
        return True


def setup_logging(level: Optional[str] = None):
    logging.basicConfig(
        level=getattr(logging, (level or Config.LOG_LEVEL).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    # requests/urllib3 are chatty at DEBUG
    logging.getLogger('urllib3').setLevel(logging.WARNING)


Config.validate()
