"""
Excelファイル処理モジュール

出力先ブックの対象シートを作り直し、セルへの書き込みと保存を行います。
"""

import logging
from pathlib import Path
from typing import Any, Optional

from openpyxl.styles import Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from common.error_handling.exceptions import FileProcessingError
from common.file_handlers.excel_handler import ExcelHandler
from .data_models import CellStyle, Coordinate
from .exceptions import IOFailureError, SheetOperationError

THIN_SIDE = Side(border_style='thin', color='FF000000')
THIN_BORDER = Border(left=THIN_SIDE, right=THIN_SIDE, top=THIN_SIDE, bottom=THIN_SIDE)


class WorksheetSink:
    """openpyxl のワークシートへセルを書き込むクラス

    ブックは open() で一度だけ開き、save() で一度だけ保存する。
    """

    def __init__(self, workbook: Workbook, worksheet: Worksheet, xlsx_path: Path,
                 excel_handler: Optional[ExcelHandler] = None):
        self.workbook = workbook
        self.worksheet = worksheet
        self.xlsx_path = Path(xlsx_path)
        self.excel_handler = excel_handler or ExcelHandler(logging.getLogger(__name__))
        self.logger = logging.getLogger(__name__)
        self.saved = False

    @classmethod
    def open(cls, xlsx_path: Path, sheet_title: str,
             excel_handler: Optional[ExcelHandler] = None) -> 'WorksheetSink':
        """ブックを読み込み、対象シートを作り直す"""
        excel_handler = excel_handler or ExcelHandler(logging.getLogger(__name__))
        xlsx_path = Path(xlsx_path)
        is_new_workbook = not xlsx_path.exists()

        try:
            workbook = excel_handler.load_workbook(xlsx_path)
        except FileProcessingError as e:
            raise IOFailureError(str(e)) from e

        worksheet = cls.recreate_sheet(workbook, sheet_title)

        # 新規ブックの空の既定シートは不要
        if is_new_workbook:
            for sheet in list(workbook.worksheets):
                if sheet is not worksheet and sheet.max_row == 1 and sheet['A1'].value is None:
                    workbook.remove(sheet)

        return cls(workbook, worksheet, xlsx_path, excel_handler)

    @staticmethod
    def recreate_sheet(workbook: Workbook, sheet_title: str) -> Worksheet:
        """同名のシートがあれば削除し、新しいシートを作成"""
        logger = logging.getLogger(__name__)
        try:
            if sheet_title in workbook.sheetnames:
                workbook.remove(workbook[sheet_title])
                logger.info(f"既存シートを削除しました: {sheet_title}")
            worksheet = workbook.create_sheet(title=sheet_title)
        except (KeyError, ValueError) as e:
            raise SheetOperationError(f"シートの作成に失敗しました: {sheet_title} - {str(e)}") from e

        if worksheet.title != sheet_title:
            # openpyxl は重複・不正なシート名を黙って書き換えるため確認する
            raise SheetOperationError(f"シート名を設定できません: {sheet_title} -> {worksheet.title}")

        logger.info(f"シートを作成しました: {sheet_title}")
        return worksheet

    def write_cell(self, coordinate: Coordinate, value: Any, style: CellStyle) -> None:
        """セルに値と書式を設定（罫線は全セル共通で細線）"""
        cell = self.worksheet[coordinate.to_address()]
        if value is not None:
            cell.value = value

        if style.number_format:
            cell.number_format = style.number_format

        if style.background_color:
            cell.fill = PatternFill(
                start_color=style.background_color,
                end_color=style.background_color,
                fill_type='solid'
            )

        if style.font_color:
            cell.font = Font(color=style.font_color)

        cell.border = THIN_BORDER

    def set_column_width(self, col: int, width: float) -> None:
        self.worksheet.column_dimensions[get_column_letter(col)].width = width

    def save(self) -> None:
        """ブックを保存（1回のみ）"""
        if self.saved:
            raise SheetOperationError(f"ブックは既に保存済みです: {self.xlsx_path.name}")
        try:
            self.excel_handler.save_workbook(self.workbook, self.xlsx_path)
        except FileProcessingError as e:
            raise IOFailureError(str(e)) from e
        self.saved = True
        self.logger.info(f"シート '{self.worksheet.title}' を保存しました: {self.xlsx_path}")
