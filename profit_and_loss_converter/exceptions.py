"""
カスタム例外クラス定義

変換処理で使用するカスタム例外を定義します。
"""
from typing import Optional

from common.error_handling.exceptions import (
    ConfigurationError,
    DataValidationError,
    FileProcessingError
)


class ProfitAndLossConverterError(Exception):
    """損益変換ツールの基本例外クラス"""
    pass


class ParseError(ProfitAndLossConverterError, DataValidationError):
    """CSVフィールドの解析エラー

    どのフィールドのどの値で失敗したかを保持する。
    """

    reason = "解析に失敗しました"

    def __init__(self, field_name: str, raw_value: Optional[str] = None,
                 line_number: Optional[int] = None, detail: Optional[str] = None):
        self.field_name = field_name
        self.raw_value = raw_value
        self.line_number = line_number
        self.detail = detail
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        message = f"{self.field_name}: {self.reason}"
        if self.raw_value is not None:
            message += f" (値: '{self.raw_value}')"
        if self.line_number is not None:
            message += f" [{self.line_number}行目]"
        if self.detail:
            message += f" - {self.detail}"
        return message

    def with_line_number(self, line_number: int) -> 'ParseError':
        """行番号付きの同じ種類の例外を作成"""
        return type(self)(self.field_name, self.raw_value, line_number, self.detail)


class MissingFieldError(ParseError):
    """必須フィールドが存在しない場合の例外"""

    reason = "必須フィールドがありません"


class MalformedDateError(ParseError):
    """日付の形式が不正な場合の例外"""

    reason = "日付の形式が不正です (YYYY/MM/DD)"


class MalformedNumberError(ParseError):
    """数値の形式が不正な場合の例外"""

    reason = "数値の形式が不正です"


class IOFailureError(ProfitAndLossConverterError, FileProcessingError):
    """入力CSV・出力Excelの読み書きエラーの例外"""
    pass


class SheetOperationError(ProfitAndLossConverterError):
    """シートの削除・作成に失敗した場合の例外"""
    pass


class UnsupportedReportError(ProfitAndLossConverterError, ConfigurationError):
    """レポート種別を判定できない場合の例外"""
    pass


class RenderStateError(ProfitAndLossConverterError):
    """レポート出力の手順が不正な場合の例外"""
    pass
