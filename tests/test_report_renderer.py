"""
レポート出力のテスト（書き込み先は記録用のダミー）
"""
import json
import shutil
import tempfile
import unittest
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

# プロジェクトルートをパスに追加
sys.path.insert(0, str(Path(__file__).parent.parent))

from common.config.config_manager import ConfigManager
from profit_and_loss_converter.data_models import Coordinate, DividendRecord, TransactionRecord
from profit_and_loss_converter.exceptions import RenderStateError
from profit_and_loss_converter.period_aggregator import PeriodAggregator
from profit_and_loss_converter.report_kinds import DIVIDEND_LIST_LAYOUT, PROFIT_AND_LOSS_LAYOUT
from profit_and_loss_converter.report_renderer import (
    RenderState,
    ReportRenderer,
    display_width
)
from profit_and_loss_converter.settings import ReportSettings


class RecordingSink:
    """書き込み内容を記録するだけの出力先"""

    def __init__(self):
        self.cells = {}
        self.widths = {}
        self.save_count = 0

    def write_cell(self, coordinate, value, style):
        self.cells[coordinate] = (value, style)

    def set_column_width(self, col, width):
        self.widths[col] = width

    def save(self):
        self.save_count += 1

    def value(self, col, row):
        return self.cells[Coordinate(col, row)][0]

    def style(self, col, row):
        return self.cells[Coordinate(col, row)][1]


def make_trade(trade_date, account='特定', realized=10000):
    return TransactionRecord(
        trade_date=trade_date,
        settlement_date=date(2024, 1, 12),
        security_code='1301',
        security_name='X Corp',
        account=account,
        shares=100,
        asked_price=Decimal('1500.00'),
        proceeds=150000,
        purchase_price=Decimal('1400.00'),
        realized_profit_and_loss=realized,
    )


class RendererTestCase(unittest.TestCase):

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.sink = RecordingSink()

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def load_settings(self, **overrides):
        config_file = self.temp_dir / 'settings.json'
        config_file.write_text(json.dumps(overrides), encoding='utf-8')
        return ReportSettings.from_config(ConfigManager(config_file))


class TestProfitAndLossRendering(RendererTestCase):
    """実現損益シートの出力テスト"""

    def setUp(self):
        super().setUp()
        self.settings = self.load_settings()

    def render(self, records):
        groups = PeriodAggregator(PROFIT_AND_LOSS_LAYOUT, self.settings).aggregate(records)
        renderer = ReportRenderer(PROFIT_AND_LOSS_LAYOUT, self.settings)
        return renderer, renderer.render(groups, self.sink)

    def test_single_group_layout(self):
        renderer, last_row = self.render([make_trade(date(2024, 1, 10))])

        # ヘッダー(2行目) + 明細(3行目) + 合計(4行目)
        self.assertEqual(last_row, 4)
        self.assertIs(renderer.state, RenderState.FINALIZED)
        self.assertEqual(self.sink.save_count, 1)

        self.assertEqual(self.sink.value(2, 2), '約定日')
        self.assertEqual(self.sink.value(14, 2), '損益[円]')
        self.assertEqual(self.sink.style(2, 2).background_color, 'FFF8CBAD')

        self.assertEqual(self.sink.value(2, 3), date(2024, 1, 10))
        self.assertEqual(self.sink.value(6, 3), '特定')
        self.assertEqual(self.sink.value(11, 3), 10000)
        self.assertIsNone(self.sink.value(12, 3))

        self.assertIsNone(self.sink.value(2, 4))
        self.assertEqual(self.sink.value(12, 4), 10000)
        self.assertEqual(self.sink.value(13, 4), 2031)
        self.assertEqual(self.sink.value(14, 4), 7969)
        self.assertEqual(self.sink.style(2, 4).background_color, 'FFC5E0B4')

    def test_cells_stay_inside_layout_columns(self):
        self.render([make_trade(date(2024, 1, 10)), make_trade(date(2024, 1, 11))])

        columns = {coordinate.col for coordinate in self.sink.cells}
        self.assertEqual(columns, set(range(2, 2 + len(PROFIT_AND_LOSS_LAYOUT.columns))))

    def test_groups_rendered_in_ascending_order(self):
        _, last_row = self.render([
            make_trade(date(2024, 2, 1), realized=-500),
            make_trade(date(2024, 1, 10)),
        ])

        self.assertEqual(last_row, 6)
        self.assertEqual(self.sink.value(2, 3), date(2024, 1, 10))
        self.assertEqual(self.sink.value(2, 5), date(2024, 2, 1))
        self.assertEqual(self.sink.style(11, 5).font_color, 'FFFF0000')
        self.assertEqual(self.sink.value(13, 6), 0)
        self.assertEqual(self.sink.value(14, 6), -500)

    def test_fixed_column_width(self):
        self.render([make_trade(date(2024, 1, 10))])

        self.assertEqual(len(self.sink.widths), 13)
        self.assertTrue(all(width == 16.0 for width in self.sink.widths.values()))

    def test_empty_input_writes_header_only(self):
        _, last_row = self.render([])

        self.assertEqual(last_row, 2)
        self.assertEqual(self.sink.save_count, 1)

    def test_start_position_from_settings(self):
        self.settings = self.load_settings(start_row=5, start_col=1)
        self.render([make_trade(date(2024, 1, 10))])

        self.assertEqual(self.sink.value(1, 5), '約定日')
        self.assertEqual(min(c.col for c in self.sink.cells), 1)

    def test_write_group_before_header_raises(self):
        renderer = ReportRenderer(PROFIT_AND_LOSS_LAYOUT, self.settings)
        groups = PeriodAggregator(PROFIT_AND_LOSS_LAYOUT, self.settings).aggregate(
            [make_trade(date(2024, 1, 10))]
        )

        with self.assertRaises(RenderStateError):
            renderer.write_group(self.sink, groups[date(2024, 1, 10)])
        with self.assertRaises(RenderStateError):
            renderer.finalize(self.sink)

    def test_render_twice_raises(self):
        renderer, _ = self.render([make_trade(date(2024, 1, 10))])

        with self.assertRaises(RenderStateError):
            renderer.write_header(self.sink)
        self.assertEqual(self.sink.save_count, 1)


class TestDividendRendering(RendererTestCase):
    """配当金シートの出力テスト"""

    def test_auto_fit_widths_and_totals(self):
        settings = self.load_settings()
        record = DividendRecord(
            settlement_date=date(2024, 6, 25),
            product='国内株式',
            account='特定',
            security_code='8058',
            security_name='三菱商事',
            currency='円',
            unit_price=Decimal('70.00'),
            shares=100,
            dividends_before_tax=Decimal('7000'),
            taxes=Decimal('1422'),
            net_amount_received=Decimal('5578'),
        )
        groups = PeriodAggregator(DIVIDEND_LIST_LAYOUT, settings).aggregate([record])
        last_row = ReportRenderer(DIVIDEND_LIST_LAYOUT, settings).render(groups, self.sink)

        self.assertEqual(last_row, 4)
        self.assertEqual(self.sink.value(2, 2), '入金日')
        self.assertEqual(self.sink.value(13, 4), Decimal('7000'))
        self.assertEqual(self.sink.value(15, 4), Decimal('5578'))

        # 「配当・分配金合計（税引前）[円/現地通貨]」のヘッダー幅 + 余白
        header = '配当・分配金合計（税引前）[円/現地通貨]'
        self.assertEqual(self.sink.widths[13], display_width(header) + 2)

    def test_display_width_counts_wide_characters(self):
        self.assertEqual(display_width('abc'), 3)
        self.assertEqual(display_width('銘柄'), 4)
        self.assertEqual(display_width('¥7,000'), 6)


if __name__ == '__main__':
    unittest.main()
