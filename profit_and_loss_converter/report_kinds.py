"""
レポート種別モジュール

入力CSVの種類（実現損益・配当金）ごとの列定義、集計方法、書式ルールを
まとめたレイアウトを定義します。
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any, Callable, FrozenSet, Optional, Tuple, Union

from .data_models import AggregateTotals, DividendRecord, DividendTotals, TransactionRecord
from .exceptions import UnsupportedReportError
from .period_aggregator import DividendAccumulator, ProfitAndLossAccumulator
from .record_parser import FieldSpec, FieldType


class ReportKind(Enum):
    """レポート種別"""
    PROFIT_AND_LOSS = 'profit_and_loss'
    DIVIDEND_LIST = 'dividend_list'


@dataclass(frozen=True)
class ReportLayout:
    """レポート種別ごとのレイアウト定義"""
    kind: ReportKind
    record_type: type
    field_specs: Tuple[FieldSpec, ...]
    footer_field_names: Tuple[str, ...]
    group_key: Callable[[Any], Optional[date]]
    accumulator_type: type
    decimal_fields: FrozenSet[str] = frozenset()
    signed_currency_fields: FrozenSet[str] = frozenset()
    currency_fields: FrozenSet[str] = frozenset()
    auto_fit_columns: bool = False

    @property
    def columns(self) -> Tuple[str, ...]:
        """出力列（レコード列 + フッター列）"""
        return tuple(self.record_type.FIELD_NAMES) + self.footer_field_names


def _trade_date_key(record: TransactionRecord) -> Optional[date]:
    return record.trade_date


def _settlement_month_key(record: DividendRecord) -> Optional[date]:
    if record.settlement_date is None:
        return None
    return record.settlement_date.replace(day=1)


PROFIT_AND_LOSS_LAYOUT = ReportLayout(
    kind=ReportKind.PROFIT_AND_LOSS,
    record_type=TransactionRecord,
    field_specs=(
        FieldSpec('trade_date', 0, FieldType.DATE, required=False),
        FieldSpec('settlement_date', 1, FieldType.DATE, required=False),
        FieldSpec('security_code', 2, FieldType.STRING),
        FieldSpec('security_name', 3, FieldType.STRING),
        FieldSpec('account', 4, FieldType.STRING),
        # 5: 信用区分, 6: 売買/決済 は使用しない
        FieldSpec('shares', 7, FieldType.INTEGER),
        FieldSpec('asked_price', 8, FieldType.DECIMAL),
        FieldSpec('proceeds', 9, FieldType.INTEGER),
        FieldSpec('purchase_price', 10, FieldType.DECIMAL),
        FieldSpec('realized_profit_and_loss', 11, FieldType.INTEGER),
    ),
    footer_field_names=AggregateTotals.FOOTER_FIELD_NAMES,
    group_key=_trade_date_key,
    accumulator_type=ProfitAndLossAccumulator,
    decimal_fields=frozenset({'asked_price', 'purchase_price'}),
    signed_currency_fields=frozenset({
        'proceeds',
        'realized_profit_and_loss',
        'total_realized_profit_and_loss',
        'withholding_tax',
        'profit_and_loss',
    }),
)

DIVIDEND_LIST_LAYOUT = ReportLayout(
    kind=ReportKind.DIVIDEND_LIST,
    record_type=DividendRecord,
    field_specs=(
        FieldSpec('settlement_date', 0, FieldType.DATE, required=False),
        FieldSpec('product', 1, FieldType.STRING, required=False),
        FieldSpec('account', 2, FieldType.STRING, required=False),
        FieldSpec('security_code', 3, FieldType.STRING, required=False),
        FieldSpec('security_name', 4, FieldType.STRING, required=False),
        FieldSpec('currency', 5, FieldType.STRING, required=False),
        FieldSpec('unit_price', 6, FieldType.DECIMAL, required=False),
        FieldSpec('shares', 7, FieldType.INTEGER, required=False),
        FieldSpec('dividends_before_tax', 8, FieldType.DECIMAL, required=False),
        FieldSpec('taxes', 9, FieldType.DECIMAL, required=False),
        FieldSpec('net_amount_received', 10, FieldType.DECIMAL, required=False),
    ),
    footer_field_names=DividendTotals.FOOTER_FIELD_NAMES,
    group_key=_settlement_month_key,
    accumulator_type=DividendAccumulator,
    currency_fields=frozenset({
        'unit_price',
        'dividends_before_tax',
        'taxes',
        'net_amount_received',
        'total_dividends_before_tax',
        'total_taxes',
        'total_net_amount_received',
    }),
    auto_fit_columns=True,
)

LAYOUTS = {
    ReportKind.PROFIT_AND_LOSS: PROFIT_AND_LOSS_LAYOUT,
    ReportKind.DIVIDEND_LIST: DIVIDEND_LIST_LAYOUT,
}

# 証券会社からダウンロードしたファイル名の接頭辞
FILE_PREFIXES = (
    ('realized_pl', ReportKind.PROFIT_AND_LOSS),
    ('dividendlist', ReportKind.DIVIDEND_LIST),
)


def resolve_report_kind(csv_path: Union[str, Path]) -> ReportKind:
    """ファイル名の接頭辞からレポート種別を判定"""
    file_name = Path(csv_path).name.lower()
    for prefix, kind in FILE_PREFIXES:
        if file_name.startswith(prefix):
            return kind

    prefixes = ', '.join(prefix for prefix, _ in FILE_PREFIXES)
    raise UnsupportedReportError(
        f"レポート種別を判定できません: {Path(csv_path).name} (対応する接頭辞: {prefixes})"
    )


def parse_report_kind(value: str) -> ReportKind:
    """文字列（'profit_and_loss' など）からレポート種別を取得"""
    try:
        return ReportKind(value)
    except ValueError:
        choices = ', '.join(kind.value for kind in ReportKind)
        raise UnsupportedReportError(f"不明なレポート種別です: {value} (指定可能: {choices})") from None


def get_layout(kind: ReportKind) -> ReportLayout:
    return LAYOUTS[kind]
