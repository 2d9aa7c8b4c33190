"""
統一エラーハンドリングシステム
"""
import logging
import traceback
from pathlib import Path
from typing import Dict, Any, Optional, NoReturn


class ErrorHandler:
    """エラーハンドリングの統一クラス

    変換処理は1件のエラーで全体を中断するため、ここではログ出力のみを行い
    例外の握りつぶしはしない。
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def handle_file_processing_error(self, error: Exception, file_path: Optional[Path]) -> None:
        """ファイル処理エラーを処理"""
        error_context = {
            'error_type': type(error).__name__,
            'file_path': str(file_path) if file_path else 'Unknown',
            'file_name': file_path.name if file_path else 'Unknown',
            'error_message': str(error)
        }

        self.log_error_with_context(error, error_context)

    def handle_data_validation_error(self, error: Exception, data_context: str) -> None:
        """データ検証エラーを処理"""
        error_context = {
            'error_type': type(error).__name__,
            'data_context': data_context,
            'error_message': str(error)
        }

        # ParseError はフィールド名と元の値を持つ
        for attribute in ('field_name', 'raw_value', 'line_number'):
            value = getattr(error, attribute, None)
            if value is not None:
                error_context[attribute] = value

        self.log_error_with_context(error, error_context)

    def log_and_raise(self, error: Exception, context: str) -> NoReturn:
        """エラーをログ出力して例外を再発生"""
        self.logger.error(f"致命的エラー [{context}]: {str(error)}")
        self.logger.debug(f"エラー詳細: {traceback.format_exc()}")

        raise error

    def log_error_with_context(self, error: Exception, context: Dict[str, Any]) -> None:
        """コンテキスト情報付きでエラーをログ出力"""
        context_str = ", ".join([f"{k}={v}" for k, v in context.items()])
        self.logger.error(f"エラー詳細: {context_str}")
        self.logger.debug(f"スタックトレース: {traceback.format_exc()}")
