import json
import unittest
from unittest.mock import MagicMock, patch

import redis

from tokeninfo.config import Config
from tokeninfo.database import RedisCacheStore
from tokeninfo.errors import CacheConnectionError


class TestRedisCacheStore(unittest.TestCase):
    def setUp(self):
        self.client = MagicMock()
        self.store = RedisCacheStore(client=self.client, ttl_seconds=120)
        self.prefix = Config.REDIS_KEY_PREFIX

    def test_set_uses_setex_with_ttl(self):
        self.store.set('search:usdc', {'name': 'USDC'})
        self.client.setex.assert_called_once_with(f'{self.prefix}search:usdc', 120, json.dumps({'name': 'USDC'}))

    def test_get_decodes_json(self):
        self.client.get.return_value = json.dumps({'symbol': 'USDC'})
        self.assertEqual(self.store.get('onchain:ethereum:0xa'), {'symbol': 'USDC'})
        self.client.get.assert_called_with(f'{self.prefix}onchain:ethereum:0xa')

    def test_missing_key(self):
        self.client.get.return_value = None
        self.client.exists.return_value = 0
        self.assertIsNone(self.store.get('k'))
        self.assertFalse(self.store.has('k'))

    def test_redis_errors_read_as_miss(self):
        self.client.get.side_effect = redis.ConnectionError('down')
        self.client.exists.side_effect = redis.ConnectionError('down')
        self.client.setex.side_effect = redis.ConnectionError('down')
        self.assertIsNone(self.store.get('k'))
        self.assertFalse(self.store.has('k'))
        self.store.set('k', {'a': 1})

    def test_undecodable_entry_reads_as_miss(self):
        self.client.get.return_value = '{not json'
        self.assertIsNone(self.store.get('k'))

    def test_get_or_load_stores_loaded_value(self):
        self.client.get.return_value = None
        value = self.store.get_or_load('search:weth', lambda: {'name': 'WETH'})
        self.assertEqual(value, {'name': 'WETH'})
        self.client.setex.assert_called_once()

    @patch('redis.Redis')
    def test_connection_failure_raises(self, mock_redis_cls):
        mock_client = MagicMock()
        mock_client.ping.side_effect = redis.ConnectionError('refused')
        mock_redis_cls.return_value = mock_client

        with self.assertRaises(CacheConnectionError):
            RedisCacheStore()

    @patch('redis.Redis')
    def test_connects_with_configured_settings(self, mock_redis_cls):
        mock_client = MagicMock()
        mock_redis_cls.return_value = mock_client

        store = RedisCacheStore()

        self.assertIs(store.client, mock_client)
        mock_client.ping.assert_called_once()
        kwargs = mock_redis_cls.call_args.kwargs
        self.assertEqual(kwargs['host'], Config.REDIS_HOST)
        self.assertEqual(kwargs['port'], Config.REDIS_PORT)
        self.assertTrue(kwargs['decode_responses'])


if __name__ == '__main__':
    unittest.main()
