import unittest

from tokeninfo.processors.models import (
    PartialTokenRecord,
    clean_text,
    format_token_record,
    slugify,
    token_id,
)

USDC = '0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48'


class TestTokenId(unittest.TestCase):
    def test_name_wins(self):
        self.assertEqual(token_id('USD Coin', 'USDC', USDC), 'usd-coin')

    def test_symbol_when_no_name(self):
        self.assertEqual(token_id(None, 'USDC', USDC), 'usdc')

    def test_address_when_nothing_known(self):
        self.assertEqual(token_id(None, None, USDC), USDC.lower())

    def test_slugify_collapses_whitespace(self):
        self.assertEqual(slugify('  Wrapped   Ether\tToken '), 'wrapped-ether-token')


class TestPartialTokenRecord(unittest.TestCase):
    def test_merge_only_fills_missing_fields(self):
        record = PartialTokenRecord(symbol='USDC')
        record.merge(PartialTokenRecord(name='USD Coin', symbol='FAKE', image='a.png'))
        self.assertEqual(record, PartialTokenRecord(name='USD Coin', symbol='USDC', image='a.png'))

    def test_merge_respects_field_subset(self):
        record = PartialTokenRecord()
        record.merge(PartialTokenRecord(name='USD Coin', symbol='USDC', image='a.png'), only=('name', 'symbol'))
        self.assertIsNone(record.image)
        self.assertEqual(record.symbol, 'USDC')

    def test_merge_none_is_a_no_op(self):
        record = PartialTokenRecord(name='x')
        record.merge(None)
        self.assertEqual(record, PartialTokenRecord(name='x'))

    def test_from_dict_cleans_values(self):
        record = PartialTokenRecord.from_dict({'name': '  ', 'symbol': ' USDC\x00', 'image': 7})
        self.assertEqual(record, PartialTokenRecord(symbol='USDC'))
        self.assertTrue(PartialTokenRecord.from_dict(None).is_empty())
        self.assertIsNone(clean_text(None))


class TestFormatTokenRecord(unittest.TestCase):
    def test_full_record(self):
        record = format_token_record(
            PartialTokenRecord(name='USD Coin', symbol='USDC', image='https://img/usdc.png'), USDC
        )
        self.assertEqual(record.to_dict(), {
            'id': 'usd-coin',
            'symbol': 'usdc',
            'name': 'USD Coin',
            'image': 'https://img/usdc.png',
            'contractAddress': USDC,
        })

    def test_name_defaults_to_uppercased_symbol(self):
        record = format_token_record(PartialTokenRecord(symbol='weth'), USDC)
        self.assertEqual(record.name, 'WETH')
        self.assertEqual(record.symbol, 'weth')
        self.assertEqual(record.id, 'weth')

    def test_empty_record(self):
        record = format_token_record(PartialTokenRecord(), USDC)
        self.assertEqual(record.to_dict(), {
            'id': USDC.lower(),
            'symbol': None,
            'name': None,
            'image': None,
            'contractAddress': USDC,
        })


if __name__ == '__main__':
    unittest.main()
