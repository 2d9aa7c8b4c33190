"""
セル書式判定モジュール
"""

from enum import Enum
from typing import Optional

from .data_models import CellStyle
from .settings import ReportSettings


class RowKind(Enum):
    """行の種類"""
    HEADER = 'header'
    BODY = 'body'
    FOOTER = 'footer'


class StyleResolver:
    """フィールド名と表示値からセル書式を決定するクラス

    罫線は全セル共通のため、ここでは扱わない（シート書き込み側で付与）。
    """

    def __init__(self, layout, settings: ReportSettings):
        self.layout = layout
        self.settings = settings

    def resolve(self, field_name: str, formatted_value: Optional[str],
                row_kind: RowKind = RowKind.BODY) -> CellStyle:
        """セル書式を取得"""
        background_color = self._background_color(row_kind)

        if row_kind is RowKind.HEADER or formatted_value is None:
            return CellStyle(background_color=background_color)

        if field_name in self.layout.decimal_fields:
            return CellStyle(background_color, self.settings.number_format('yen_decimal'))

        if field_name in self.layout.signed_currency_fields:
            font_color = None
            if formatted_value.startswith('-'):
                font_color = self.settings.color('realized_loss_font')
            return CellStyle(background_color, self.settings.number_format('yen'), font_color)

        if field_name in self.layout.currency_fields:
            return CellStyle(background_color, self.settings.number_format('yen'))

        return CellStyle(background_color=background_color)

    def resolve_footer(self, field_name: str, formatted_value: Optional[str]) -> CellStyle:
        return self.resolve(field_name, formatted_value, RowKind.FOOTER)

    def resolve_header(self) -> CellStyle:
        return CellStyle(background_color=self._background_color(RowKind.HEADER))

    def _background_color(self, row_kind: RowKind) -> Optional[str]:
        if row_kind is RowKind.HEADER:
            return self.settings.color('header_background')
        if row_kind is RowKind.FOOTER:
            return self.settings.color('footer_background')
        return None
