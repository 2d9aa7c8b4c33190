"""
損益CSV → Excel 変換パッケージ

証券会社からダウンロードした実現損益・配当金CSVを、期間ごとの合計行と
源泉徴収税額付きのExcelシートへ変換します。
"""

from .data_models import (
    AggregateTotals,
    CellStyle,
    ConversionSummary,
    Coordinate,
    DividendRecord,
    DividendTotals,
    PeriodGroup,
    TransactionRecord
)
from .exceptions import (
    IOFailureError,
    MalformedDateError,
    MalformedNumberError,
    MissingFieldError,
    ParseError,
    ProfitAndLossConverterError,
    RenderStateError,
    SheetOperationError,
    UnsupportedReportError
)
from .excel_processor import WorksheetSink
from .main_controller import MainController
from .period_aggregator import PeriodAggregator
from .record_parser import RecordParser
from .report_kinds import ReportKind, ReportLayout, get_layout, resolve_report_kind
from .report_renderer import RenderState, ReportRenderer
from .settings import ReportSettings
from .style_resolver import RowKind, StyleResolver

__version__ = '1.0.0'

__all__ = [
    'AggregateTotals',
    'CellStyle',
    'ConversionSummary',
    'Coordinate',
    'DividendRecord',
    'DividendTotals',
    'PeriodGroup',
    'TransactionRecord',
    'IOFailureError',
    'MalformedDateError',
    'MalformedNumberError',
    'MissingFieldError',
    'ParseError',
    'ProfitAndLossConverterError',
    'RenderStateError',
    'SheetOperationError',
    'UnsupportedReportError',
    'WorksheetSink',
    'MainController',
    'PeriodAggregator',
    'RecordParser',
    'ReportKind',
    'ReportLayout',
    'get_layout',
    'resolve_report_kind',
    'RenderState',
    'ReportRenderer',
    'ReportSettings',
    'RowKind',
    'StyleResolver'
]
