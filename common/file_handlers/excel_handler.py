"""
統一Excelハンドラー
"""
import zipfile
from pathlib import Path

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.workbook import Workbook

from ..error_handling.exceptions import FileProcessingError


class ExcelHandler:
    """Excelファイルの統一処理クラス"""

    def __init__(self, logger=None, error_handler=None):
        self.logger = logger
        self.error_handler = error_handler

    def load_workbook(self, file_path: Path, create_if_missing: bool = True) -> Workbook:
        """Excelブックを読み込み（存在しない場合は新規作成）"""
        file_path = Path(file_path)

        if not file_path.exists():
            if not create_if_missing:
                raise FileProcessingError(f"Excelファイルが見つかりません: {file_path}")
            if self.logger:
                self.logger.info(f"Excelファイルが存在しないため新規作成します: {file_path.name}")
            return Workbook()

        try:
            workbook = openpyxl.load_workbook(file_path)
        except (OSError, InvalidFileException, zipfile.BadZipFile, KeyError) as e:
            if self.error_handler:
                self.error_handler.handle_file_processing_error(e, file_path)
            raise FileProcessingError(f"Excel読み込みエラー: {file_path.name} - {str(e)}") from e

        if self.logger:
            self.logger.info(f"Excel読み込み成功: {file_path.name} (シート: {workbook.sheetnames})")
        return workbook

    def save_workbook(self, workbook: Workbook, file_path: Path) -> None:
        """Excelブックを保存"""
        file_path = Path(file_path)
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            workbook.save(file_path)
        except OSError as e:
            if self.error_handler:
                self.error_handler.handle_file_processing_error(e, file_path)
            raise FileProcessingError(f"Excel保存エラー: {file_path.name} - {str(e)}") from e

        if self.logger:
            self.logger.info(f"Excel保存成功: {file_path.name}")
