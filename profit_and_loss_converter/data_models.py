"""
データモデル定義

CSVの1行に対応するレコード、期間ごとの集計結果、セル書式などを定義します。
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_DOWN
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from openpyxl.utils import get_column_letter


def format_field_value(value: Any) -> Optional[str]:
    """セル値を正規化した文字列に変換（日付はYYYY-MM-DD、数値は区切りなし）"""
    if value is None:
        return None
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


class Coordinate(NamedTuple):
    """シート上のセル位置（1始まり）"""
    col: int
    row: int

    @property
    def column_letter(self) -> str:
        return get_column_letter(self.col)

    def to_address(self) -> str:
        """A1形式のセル番地"""
        return f"{self.column_letter}{self.row}"


@dataclass(frozen=True)
class CellStyle:
    """セル書式（背景色, 表示形式, 文字色）"""
    background_color: Optional[str] = None
    number_format: Optional[str] = None
    font_color: Optional[str] = None


class _FieldAccessMixin:
    """フィールド名と値の組を列順に返す"""

    FIELD_NAMES: Tuple[str, ...] = ()

    def get_all_fields(self) -> List[Tuple[str, Any]]:
        return [(name, getattr(self, name)) for name in self.FIELD_NAMES]


@dataclass(frozen=True)
class TransactionRecord(_FieldAccessMixin):
    """実現損益レコード（1約定）"""
    trade_date: Optional[date]                  # 約定日
    settlement_date: Optional[date]             # 受渡日
    security_code: Optional[str]                # 銘柄コード
    security_name: Optional[str]                # 銘柄名
    account: Optional[str]                      # 口座
    shares: Optional[int]                       # 数量[株]
    asked_price: Optional[Decimal]              # 売却/決済単価[円]
    proceeds: Optional[int]                     # 売却/決済額[円]
    purchase_price: Optional[Decimal]           # 平均取得価額[円]
    realized_profit_and_loss: Optional[int]     # 実現損益[円]

    FIELD_NAMES = (
        'trade_date',
        'settlement_date',
        'security_code',
        'security_name',
        'account',
        'shares',
        'asked_price',
        'proceeds',
        'purchase_price',
        'realized_profit_and_loss',
    )


@dataclass(frozen=True)
class DividendRecord(_FieldAccessMixin):
    """配当金レコード（1入金）"""
    settlement_date: Optional[date]             # 入金日
    product: Optional[str]                      # 商品
    account: Optional[str]                      # 口座
    security_code: Optional[str]                # 銘柄コード
    security_name: Optional[str]                # 銘柄
    currency: Optional[str]                     # 受取通貨
    unit_price: Optional[Decimal]               # 単価[円/現地通貨]
    shares: Optional[int]                       # 数量[株/口]
    dividends_before_tax: Optional[Decimal]     # 配当・分配金（税引前）
    taxes: Optional[Decimal]                    # 税額
    net_amount_received: Optional[Decimal]      # 受取金額

    FIELD_NAMES = (
        'settlement_date',
        'product',
        'account',
        'security_code',
        'security_name',
        'currency',
        'unit_price',
        'shares',
        'dividends_before_tax',
        'taxes',
        'net_amount_received',
    )


@dataclass(frozen=True)
class AggregateTotals:
    """期間ごとの実現損益集計"""
    specific_account_total: int
    nisa_account_total: int
    withholding_tax: int
    grand_total: int
    net_profit_and_loss: int

    # フッター行に出力する列
    FOOTER_FIELD_NAMES = (
        'total_realized_profit_and_loss',
        'withholding_tax',
        'profit_and_loss',
    )

    @classmethod
    def from_account_totals(cls, specific_account_total: int, nisa_account_total: int,
                            tax_rate: Decimal) -> 'AggregateTotals':
        """口座区分ごとの合計から源泉徴収税額と損益を算出

        損失の場合は課税しない。税額は小数点以下切り捨て。
        """
        if specific_account_total < 0:
            withholding_tax = 0
        else:
            withholding_tax = int(
                (Decimal(specific_account_total) * tax_rate).to_integral_value(rounding=ROUND_DOWN)
            )
        grand_total = specific_account_total + nisa_account_total
        return cls(
            specific_account_total=specific_account_total,
            nisa_account_total=nisa_account_total,
            withholding_tax=withholding_tax,
            grand_total=grand_total,
            net_profit_and_loss=grand_total - withholding_tax,
        )

    def footer_values(self) -> Dict[str, Any]:
        return {
            'total_realized_profit_and_loss': self.grand_total,
            'withholding_tax': self.withholding_tax,
            'profit_and_loss': self.net_profit_and_loss,
        }


@dataclass(frozen=True)
class DividendTotals:
    """期間ごとの配当金集計"""
    total_dividends_before_tax: Decimal
    total_taxes: Decimal
    total_net_amount_received: Decimal

    FOOTER_FIELD_NAMES = (
        'total_dividends_before_tax',
        'total_taxes',
        'total_net_amount_received',
    )

    def footer_values(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in self.FOOTER_FIELD_NAMES}


@dataclass(frozen=True)
class PeriodGroup:
    """集計期間ごとのレコード群"""
    key: date
    records: Tuple[Any, ...]


@dataclass
class ConversionSummary:
    """変換処理の結果"""
    report_kind: str
    csv_path: Path
    xlsx_path: Path
    sheet_title: str
    row_count: int = 0
    record_count: int = 0
    dropped_count: int = 0
    group_count: int = 0
    last_row: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """辞書形式で出力"""
        return {
            'report_kind': self.report_kind,
            'csv_file': self.csv_path.name,
            'xlsx_file': self.xlsx_path.name,
            'sheet_title': self.sheet_title,
            'row_count': self.row_count,
            'record_count': self.record_count,
            'dropped_count': self.dropped_count,
            'group_count': self.group_count,
            'last_row': self.last_row,
        }
