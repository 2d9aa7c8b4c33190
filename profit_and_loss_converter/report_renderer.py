"""
レポート出力モジュール

期間グループを「ヘッダー行 → 明細行 → 合計行 → ...」の順にシートへ書き込みます。
書き込み先（sink）は次のメソッドを持つオブジェクトです。

- write_cell(coordinate, value, style)
- set_column_width(col, width)
- save()
"""

import logging
import unicodedata
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from .data_models import CellStyle, Coordinate, PeriodGroup, format_field_value
from .exceptions import RenderStateError
from .settings import ReportSettings
from .style_resolver import RowKind, StyleResolver


class RenderState(Enum):
    """出力処理の状態"""
    EMPTY = 'empty'
    HEADER_WRITTEN = 'header_written'
    RECORDING_GROUP = 'recording_group'
    GROUP_TOTALED = 'group_totaled'
    FINALIZED = 'finalized'


def display_width(text: str) -> int:
    """全角文字を2として表示幅を数える"""
    return sum(2 if unicodedata.east_asian_width(char) in ('W', 'F') else 1 for char in text)


class ReportRenderer:
    """期間グループをシートへ書き込むクラス"""

    AUTO_FIT_PADDING = 2

    def __init__(self, layout, settings: ReportSettings,
                 style_resolver: Optional[StyleResolver] = None):
        self.layout = layout
        self.settings = settings
        self.style_resolver = style_resolver or StyleResolver(layout, settings)
        self.logger = logging.getLogger(__name__)

        self.state = RenderState.EMPTY
        self.row_index = settings.start_row
        self.column_widths: Dict[int, int] = {}

    def render(self, groups: Any, sink) -> int:
        """全グループを書き込んで保存し、最後に書き込んだ行番号を返す"""
        self.write_header(sink)

        group_list = groups.values() if isinstance(groups, Mapping) else groups
        for group in group_list:
            self.write_group(sink, group)

        self.finalize(sink)
        return self.row_index - 1

    def write_header(self, sink) -> None:
        """ヘッダー行を書き込み"""
        self._require(RenderState.EMPTY)

        style = self.style_resolver.resolve_header()
        kind = self.layout.kind.value
        for col_offset, field_name in enumerate(self.layout.columns):
            label = self.settings.header_label(kind, field_name)
            self._write(sink, col_offset, label, style)

        self.row_index += 1
        self.state = RenderState.HEADER_WRITTEN

    def write_group(self, sink, group: PeriodGroup):
        """1期間分の明細行と合計行を書き込み、集計結果を返す"""
        self._require(RenderState.HEADER_WRITTEN, RenderState.GROUP_TOTALED)
        self.state = RenderState.RECORDING_GROUP

        accumulator = self.layout.accumulator_type(self.settings)
        for record in group.records:
            self._write_record(sink, record)
            accumulator.add(record)

        totals = accumulator.result()
        self._write_footer(sink, totals)

        self.state = RenderState.GROUP_TOTALED
        self.logger.debug(f"期間 {group.key.isoformat()}: {len(group.records)}件 {totals}")
        return totals

    def finalize(self, sink) -> None:
        """列幅を設定してブックを保存"""
        self._require(RenderState.HEADER_WRITTEN, RenderState.GROUP_TOTALED)

        for col_offset in range(len(self.layout.columns)):
            col = self.settings.start_col + col_offset
            if self.layout.auto_fit_columns:
                width = self.column_widths.get(col, 0) + self.AUTO_FIT_PADDING
            else:
                width = self.settings.column_width
            sink.set_column_width(col, width)

        sink.save()
        self.state = RenderState.FINALIZED
        self.logger.info(f"レポート出力完了: {self.settings.start_row}行目から{self.row_index - 1}行目")

    def _write_record(self, sink, record) -> None:
        values = dict(record.get_all_fields())
        for col_offset, field_name in enumerate(self.layout.columns):
            value = values.get(field_name)
            style = self.style_resolver.resolve(field_name, format_field_value(value), RowKind.BODY)
            self._write(sink, col_offset, value, style)
        self.row_index += 1

    def _write_footer(self, sink, totals) -> None:
        values = totals.footer_values()
        for col_offset, field_name in enumerate(self.layout.columns):
            value = values.get(field_name)
            style = self.style_resolver.resolve_footer(field_name, format_field_value(value))
            self._write(sink, col_offset, value, style)
        self.row_index += 1

    def _write(self, sink, col_offset: int, value: Any, style: CellStyle) -> None:
        coordinate = Coordinate(self.settings.start_col + col_offset, self.row_index)
        sink.write_cell(coordinate, value, style)
        self._track_width(coordinate.col, value, style)

    def _track_width(self, col: int, value: Any, style: CellStyle) -> None:
        if value is None:
            return
        if style.number_format and isinstance(value, (int, Decimal)):
            text = f"¥{value:,}"
        else:
            text = format_field_value(value)
        self.column_widths[col] = max(self.column_widths.get(col, 0), display_width(text))

    def _require(self, *allowed: RenderState) -> None:
        if self.state not in allowed:
            expected = ', '.join(state.value for state in allowed)
            raise RenderStateError(f"出力手順が不正です: 現在の状態={self.state.value}, 必要な状態={expected}")
