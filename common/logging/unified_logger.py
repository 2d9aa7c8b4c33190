"""
統一ロギングシステム
"""
import logging
from pathlib import Path
from typing import Dict, Any, Optional


class UnifiedLogger:
    """統一ロギングシステムクラス"""

    SECRET_KEYWORDS = ['password', 'secret', 'key', 'token']

    def __init__(self, name: str = __name__, level: str = "INFO", log_file: Optional[Path] = None):
        self.logger = self.setup_logger(name, level, log_file)

    def setup_logger(self, name: str, level: str = "INFO", log_file: Optional[Path] = None) -> logging.Logger:
        """ロガーをセットアップ"""
        logger = logging.getLogger(name)
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))

        # 既存のハンドラーをクリア
        logger.handlers.clear()

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        # ファイルハンドラーを追加（指定されている場合）
        if log_file:
            log_file = Path(log_file)
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        return logger

    def log_file_operation(self, operation: str, file_path: Path, success: bool) -> None:
        """ファイル操作のログ出力"""
        status = "成功" if success else "失敗"
        message = f"ファイル操作 [{operation}] {status}: {Path(file_path).name}"

        if success:
            self.logger.info(message)
        else:
            self.logger.error(message)

    def log_processing_summary(self, processed_count: int, success_count: int, error_count: int,
                               duration_seconds: float) -> None:
        """処理結果サマリーのログ出力"""
        self.logger.info("=" * 50)
        self.logger.info("処理結果サマリー")
        self.logger.info(f"読み込みレコード数: {processed_count}")
        self.logger.info(f"出力レコード数: {success_count}")
        self.logger.info(f"除外レコード数: {error_count}")
        self.logger.info(f"処理時間: {duration_seconds:.2f}秒")
        self.logger.info("=" * 50)

    def log_configuration_info(self, config: Dict[str, Any]) -> None:
        """設定情報のログ出力"""
        self.logger.info("設定情報:")
        for key, value in config.items():
            # パスワードや秘密情報をマスク
            if any(secret in key.lower() for secret in self.SECRET_KEYWORDS):
                value = '*' * len(str(value)) if value else 'None'
            self.logger.info(f"  {key}: {value}")

    def log_data_statistics(self, data_stats: Dict[str, Any]) -> None:
        """データ統計のログ出力"""
        self.logger.info("データ統計:")
        for key, value in data_stats.items():
            self.logger.info(f"  {key}: {value}")
