"""
統一CSVハンドラー
"""
import pandas as pd
from pathlib import Path
from typing import List, Optional, Any
from ..utils.encoding_detector import EncodingDetector
from ..error_handling.exceptions import FileProcessingError, EncodingDetectionError


class CSVHandler:
    """CSVファイルの統一処理クラス"""

    def __init__(self, logger=None):
        self.logger = logger
        self.encoding_detector = EncodingDetector(logger)

    def read_csv_with_encoding_detection(self, file_path: Path, **kwargs) -> pd.DataFrame:
        """エンコーディング自動検出でCSVファイルを読み込み"""
        try:
            # まずエンコーディングを検出
            encoding = self.encoding_detector.detect_encoding(file_path)
            return self._read_csv_with_encoding(file_path, encoding, **kwargs)

        except (EncodingDetectionError, FileProcessingError):
            # 検出失敗時は複数エンコーディングを試行
            return self.try_multiple_encodings(file_path, **kwargs)

    def try_multiple_encodings(self, file_path: Path, encodings: Optional[List[str]] = None, **kwargs) -> pd.DataFrame:
        """デコードできる最初のエンコーディングでCSVを読み込み"""
        try:
            encoding = self.encoding_detector.try_encodings(file_path, encodings)
        except EncodingDetectionError as e:
            error_msg = f"すべてのエンコーディングでCSV読み込みに失敗: {file_path.name}"
            if self.logger:
                self.logger.error(error_msg)
            raise FileProcessingError(error_msg) from e

        df = self._read_csv_with_encoding(file_path, encoding, **kwargs)
        if self.logger:
            self.logger.info(f"CSV読み込み成功: {file_path.name} ({encoding})")
        return df

    def _read_csv_with_encoding(self, file_path: Path, encoding: str, **kwargs) -> pd.DataFrame:
        """指定されたエンコーディングでCSVを読み込み"""
        try:
            return pd.read_csv(file_path, encoding=encoding, **kwargs)
        except pd.errors.EmptyDataError:
            # 空ファイルは0行として扱う
            if self.logger:
                self.logger.warning(f"CSVファイルが空です: {file_path.name}")
            return pd.DataFrame()
        except (OSError, UnicodeError, LookupError, ValueError) as e:
            # pandas の ParserError は ValueError のサブクラス
            raise FileProcessingError(f"CSV読み込みエラー: {file_path.name} ({encoding}) - {str(e)}") from e

    def read_rows(self, file_path: Path, skip_header: bool = True,
                  encoding: Optional[str] = None) -> List[List[Optional[str]]]:
        """CSVを文字列の行リストとして読み込み（列位置はファイルのまま保持）"""
        file_path = Path(file_path)
        if not file_path.is_file():
            raise FileProcessingError(f"CSVファイルが見つかりません: {file_path}")

        read_options = {
            'header': 0 if skip_header else None,
            'dtype': str,
            'keep_default_na': False,
            'index_col': False,
        }

        if encoding:
            df = self._read_csv_with_encoding(file_path, encoding, **read_options)
        else:
            df = self.read_csv_with_encoding_detection(file_path, **read_options)

        rows = [
            [self._normalize_cell(value) for value in values]
            for values in df.itertuples(index=False, name=None)
        ]

        if self.logger:
            self.logger.info(f"CSV行読み込み完了: {file_path.name} ({len(rows)}行, {len(df.columns)}列)")
        return rows

    @staticmethod
    def _normalize_cell(value: Any) -> Optional[str]:
        """空欄・欠損セルを None にそろえる"""
        if value is None or (not isinstance(value, str) and pd.isna(value)):
            return None
        text = str(value).strip()
        return text or None
