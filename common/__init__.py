"""
共通コンポーネントパッケージ
"""

from .file_handlers.csv_handler import CSVHandler
from .file_handlers.excel_handler import ExcelHandler
from .error_handling.exceptions import (
    FileProcessingError,
    DataValidationError,
    ConfigurationError,
    EncodingDetectionError
)
from .error_handling.error_handler import ErrorHandler
from .logging.unified_logger import UnifiedLogger
from .config.config_manager import ConfigManager
from .utils.encoding_detector import EncodingDetector

__all__ = [
    'CSVHandler',
    'ExcelHandler',
    'FileProcessingError',
    'DataValidationError',
    'ConfigurationError',
    'EncodingDetectionError',
    'ErrorHandler',
    'UnifiedLogger',
    'ConfigManager',
    'EncodingDetector'
]
