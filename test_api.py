import unittest
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from tokeninfo.core import BatchCoordinator, create_app
from tokeninfo.processors import TokenRecord, TokenSearchIndex

USDC = '0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48'
WETH = '0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2'

USDC_RECORD = TokenRecord(id='usd-coin', symbol='usdc', name='USD Coin', image='https://img/usdc.png', contract_address=USDC)
WETH_RECORD = TokenRecord(id='weth', symbol='weth', name='WETH', image=None, contract_address=WETH)


class TestTokenInfoApi(unittest.TestCase):
    def setUp(self):
        self.coordinator = MagicMock(spec=BatchCoordinator)
        self.search_index = MagicMock(spec=TokenSearchIndex)
        self.search_index.__len__.return_value = 3
        app = create_app(coordinator=self.coordinator, search_index=self.search_index, preload=False)
        self.client = TestClient(app, raise_server_exceptions=False)
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)

    def test_single_lookup(self):
        self.coordinator.resolve.return_value = USDC_RECORD

        resp = self.client.get('/api/tokeninfo', params={'chain': '1', 'address': USDC.lower()})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {
            'id': 'usd-coin',
            'symbol': 'usdc',
            'name': 'USD Coin',
            'image': 'https://img/usdc.png',
            'contractAddress': USDC,
        })
        self.coordinator.resolve.assert_called_once_with(USDC.lower(), '1')

    def test_single_lookup_without_chain(self):
        self.coordinator.resolve.return_value = USDC_RECORD
        self.client.get('/api/tokeninfo', params={'address': USDC})
        self.coordinator.resolve.assert_called_once_with(USDC, None)

    def test_missing_address_is_rejected_before_any_lookup(self):
        for params in ({}, {'address': '  '}, {'chain': 'ethereum'}):
            resp = self.client.get('/api/tokeninfo', params=params)
            self.assertEqual(resp.status_code, 400)
            self.assertEqual(resp.json(), {'error': 'Missing address'})
        self.coordinator.resolve.assert_not_called()

    def test_batch_drops_blank_entries(self):
        self.coordinator.resolve_batch.return_value = [USDC_RECORD, WETH_RECORD]

        resp = self.client.get('/api/tokeninfo/batch', params={'chain': 'ethereum', 'addresses': f' ,{USDC}, ,{WETH},'})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual([r['id'] for r in resp.json()], ['usd-coin', 'weth'])
        self.assertIsNone(resp.json()[1]['image'])
        self.coordinator.resolve_batch.assert_called_once_with([USDC, WETH], 'ethereum')

    def test_batch_requires_addresses(self):
        resp = self.client.get('/api/tokeninfo/batch', params={'chain': 'ethereum'})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {'error': 'Missing addresses'})
        self.coordinator.resolve_batch.assert_not_called()

    def test_unexpected_error_is_a_500(self):
        self.coordinator.resolve.side_effect = RuntimeError('boom')

        resp = self.client.get('/api/tokeninfo', params={'address': USDC})

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {'error': 'boom'})

    def test_search(self):
        self.search_index.search.return_value = [{'id': 'usd-coin', 'symbol': 'USDC'}]

        resp = self.client.get('/api/search', params={'query': 'usdc'})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), [{'id': 'usd-coin', 'symbol': 'USDC'}])
        self.search_index.search.assert_called_once_with('usdc')

    def test_search_requires_query(self):
        resp = self.client.get('/api/search')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {'error': 'Missing query'})

    def test_search_rejects_empty_query(self):
        resp = self.client.get('/api/search', params={'query': ''})
        self.assertEqual(resp.status_code, 400)
        self.search_index.search.assert_not_called()

    def test_whitespace_query_is_passed_to_the_index(self):
        self.search_index.search.return_value = [{'message': 'No EVM token match found'}]

        resp = self.client.get('/api/search', params={'query': '   '})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), [{'message': 'No EVM token match found'}])
        self.search_index.search.assert_called_once_with('   ')

    def test_health(self):
        resp = self.client.get('/health')
        self.assertEqual(resp.json(), {'status': 'ok', 'tokens': 3})
        self.search_index.load.assert_not_called()


class TestStartup(unittest.TestCase):
    def test_token_list_is_preloaded_on_startup(self):
        search_index = MagicMock(spec=TokenSearchIndex)
        app = create_app(coordinator=MagicMock(spec=BatchCoordinator), search_index=search_index)

        with TestClient(app):
            search_index.load.assert_called_once_with()


if __name__ == '__main__':
    unittest.main()
