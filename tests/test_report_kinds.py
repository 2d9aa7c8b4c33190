"""
レポート種別判定のテスト
"""
import unittest
import sys
from pathlib import Path

# プロジェクトルートをパスに追加
sys.path.insert(0, str(Path(__file__).parent.parent))

from common.error_handling.exceptions import ConfigurationError
from profit_and_loss_converter.data_models import DividendRecord, TransactionRecord
from profit_and_loss_converter.exceptions import UnsupportedReportError
from profit_and_loss_converter.report_kinds import (
    ReportKind,
    get_layout,
    parse_report_kind,
    resolve_report_kind
)


class TestReportKinds(unittest.TestCase):
    """ファイル名・文字列からのレポート種別判定テスト"""

    def test_resolve_from_file_prefix(self):
        cases = {
            'realized_pl(JP)_20240131.csv': ReportKind.PROFIT_AND_LOSS,
            'downloads/Realized_PL_2024.csv': ReportKind.PROFIT_AND_LOSS,
            'dividendlist_20241231.csv': ReportKind.DIVIDEND_LIST,
        }
        for file_name, expected in cases.items():
            with self.subTest(file_name=file_name):
                self.assertIs(resolve_report_kind(Path(file_name)), expected)

    def test_unknown_prefix_raises(self):
        with self.assertRaises(UnsupportedReportError) as ctx:
            resolve_report_kind('tradehistory_2024.csv')
        self.assertIn('tradehistory_2024.csv', str(ctx.exception))
        self.assertIsInstance(ctx.exception, ConfigurationError)

    def test_parse_report_kind(self):
        self.assertIs(parse_report_kind('profit_and_loss'), ReportKind.PROFIT_AND_LOSS)
        self.assertIs(parse_report_kind('dividend_list'), ReportKind.DIVIDEND_LIST)
        with self.assertRaises(UnsupportedReportError):
            parse_report_kind('margin')

    def test_profit_and_loss_layout_columns(self):
        layout = get_layout(ReportKind.PROFIT_AND_LOSS)

        self.assertIs(layout.record_type, TransactionRecord)
        self.assertEqual(len(layout.columns), 13)
        self.assertEqual(layout.columns[-3:], (
            'total_realized_profit_and_loss', 'withholding_tax', 'profit_and_loss'
        ))
        positions = {spec.name: spec.position for spec in layout.field_specs}
        self.assertEqual(positions['account'], 4)
        self.assertEqual(positions['shares'], 7)
        self.assertEqual(positions['realized_profit_and_loss'], 11)
        self.assertFalse(layout.auto_fit_columns)

    def test_dividend_layout_columns(self):
        layout = get_layout(ReportKind.DIVIDEND_LIST)

        self.assertIs(layout.record_type, DividendRecord)
        self.assertEqual(len(layout.columns), 14)
        self.assertTrue(all(not spec.required for spec in layout.field_specs))
        self.assertTrue(layout.auto_fit_columns)


if __name__ == '__main__':
    unittest.main()
