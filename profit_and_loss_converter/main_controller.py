"""
メインコントローラーモジュール

CSV読み込み → レコード解析 → 期間集計 → シート出力 の処理フローを管理します。
"""

import logging
import time
from pathlib import Path
from typing import List, Optional, Union

from common.config.config_manager import ConfigManager
from common.error_handling.error_handler import ErrorHandler
from common.error_handling.exceptions import FileProcessingError
from common.file_handlers.csv_handler import CSVHandler
from common.file_handlers.excel_handler import ExcelHandler
from common.logging.unified_logger import UnifiedLogger

from .data_models import ConversionSummary
from .excel_processor import WorksheetSink
from .exceptions import IOFailureError, ParseError, ProfitAndLossConverterError
from .period_aggregator import PeriodAggregator
from .record_parser import RecordParser
from .report_kinds import ReportKind, get_layout, resolve_report_kind
from .report_renderer import ReportRenderer
from .settings import ReportSettings

PACKAGE_LOGGER_NAME = 'profit_and_loss_converter'


class MainController:
    """メインコントローラークラス"""

    def __init__(self, config_path: Optional[Path] = None, log_level: Optional[str] = None,
                 log_file: Optional[Path] = None):
        """設定を読み込み、各コンポーネントを初期化"""
        self.config = ConfigManager(config_path)

        logging_settings = self.config.get_logging_settings()
        self.unified_logger = UnifiedLogger(
            PACKAGE_LOGGER_NAME,
            log_level or logging_settings['log_level'],
            log_file or logging_settings['log_file']
        )
        self.logger = logging.getLogger(__name__)
        self.config.logger = self.logger

        self.error_handler = ErrorHandler(self.logger)
        self.settings = ReportSettings.from_config(self.config)
        self.csv_handler = CSVHandler(self.logger)
        self.excel_handler = ExcelHandler(self.logger, self.error_handler)

        # ロガーは設定読み込み後に作成するため、読み込み結果はここで出力する
        if self.config.config_path:
            self.logger.info(f"設定ファイル: {self.config.config_path}")
        else:
            self.logger.warning("設定ファイルが見つかりません。デフォルト設定を使用します。")
        self.unified_logger.log_configuration_info(dict(self.settings.to_log_dict()))

    def convert(self, csv_path: Union[str, Path], xlsx_path: Union[str, Path],
                report_kind: Optional[ReportKind] = None) -> ConversionSummary:
        """CSVを読み込んでExcelシートへ出力

        解析エラーが1件でもあれば出力先ブックには一切書き込まない。
        """
        start_time = time.time()
        csv_path = Path(csv_path)
        xlsx_path = Path(xlsx_path)

        kind = report_kind or resolve_report_kind(csv_path)
        layout = get_layout(kind)
        sheet_title = self.settings.sheet_title(kind.value)
        summary = ConversionSummary(kind.value, csv_path, xlsx_path, sheet_title)

        self.logger.info(f"変換開始: {csv_path.name} -> {xlsx_path.name} [{sheet_title}] ({kind.value})")

        try:
            rows = self._load_rows(csv_path)
            summary.row_count = len(rows)

            first_line_number = 2 if self.settings.skip_header else 1
            records = RecordParser(layout).parse_all(rows, first_line_number)

            aggregator = PeriodAggregator(layout, self.settings)
            groups = aggregator.aggregate(records)
            summary.record_count = len(records) - aggregator.dropped_count
            summary.dropped_count = aggregator.dropped_count
            summary.group_count = len(groups)

            sink = WorksheetSink.open(xlsx_path, sheet_title, self.excel_handler)
            renderer = ReportRenderer(layout, self.settings)
            summary.last_row = renderer.render(groups, sink)

        except ParseError as e:
            self.error_handler.handle_data_validation_error(e, csv_path.name)
            raise
        except IOFailureError as e:
            self.error_handler.handle_file_processing_error(e, csv_path)
            raise
        except ProfitAndLossConverterError as e:
            self.error_handler.log_and_raise(e, "変換処理")

        self.unified_logger.log_file_operation("Excel出力", xlsx_path, True)
        self.unified_logger.log_data_statistics(summary.to_dict())
        self.unified_logger.log_processing_summary(
            summary.row_count,
            summary.record_count,
            summary.dropped_count,
            time.time() - start_time
        )
        return summary

    def _load_rows(self, csv_path: Path) -> List[List[Optional[str]]]:
        """CSVの全行を読み込み"""
        try:
            rows = self.csv_handler.read_rows(
                csv_path,
                skip_header=self.settings.skip_header,
                encoding=self.settings.encoding
            )
        except FileProcessingError as e:
            raise IOFailureError(str(e)) from e

        self.unified_logger.log_file_operation("CSV読み込み", csv_path, True)
        return rows
