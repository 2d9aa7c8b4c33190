"""
中央集約設定管理システム
"""
import copy
import json
import re
from pathlib import Path
from typing import Dict, Any, Optional
from ..error_handling.exceptions import ConfigurationError


class ConfigManager:
    """設定管理の統一クラス

    設定ファイルの値は組み込みのデフォルト設定に上書きマージされる。
    ネストした辞書（headers, colors など）はキー単位でマージする。
    """

    DEFAULT_CONFIG_FILES = [
        'settings.json',
        'config.json'
    ]

    ARGB_PATTERN = re.compile(r'^[0-9A-Fa-f]{8}$')

    def __init__(self, config_path: Optional[Path] = None, logger=None):
        self.logger = logger
        self.config_path = config_path
        self.config_data = {}
        self.load_config(config_path)

    def load_config(self, config_path: Optional[Path] = None) -> Dict[str, Any]:
        """設定ファイルを読み込み"""
        self.config_data = self._get_default_config()

        if config_path:
            self._merge(self.config_data, self._load_single_config(Path(config_path)))
            self.config_path = Path(config_path)
            return self.config_data

        # デフォルトの設定ファイルを順次試行
        for config_file in self.DEFAULT_CONFIG_FILES:
            candidate = Path(config_file)
            if candidate.exists():
                self._merge(self.config_data, self._load_single_config(candidate))
                self.config_path = candidate
                break
        else:
            if self.logger:
                self.logger.warning("設定ファイルが見つかりません。デフォルト設定を使用します。")

        return self.config_data

    def _load_single_config(self, config_path: Path) -> Dict[str, Any]:
        """単一の設定ファイルを読み込み"""
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = json.load(f)
        except FileNotFoundError:
            raise ConfigurationError(f"設定ファイルが見つかりません: {config_path}")
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"設定ファイルの形式が無効です: {config_path} - {str(e)}")
        except OSError as e:
            raise ConfigurationError(f"設定ファイル読み込みエラー: {config_path} - {str(e)}")

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"設定ファイルの最上位はオブジェクトである必要があります: {config_path}")

        if self.logger:
            self.logger.info(f"設定ファイル読み込み成功: {config_path.name}")

        return config_data

    @classmethod
    def _merge(cls, base: Dict[str, Any], updates: Dict[str, Any]) -> None:
        """辞書を再帰的にマージ"""
        for key, value in updates.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                cls._merge(base[key], value)
            else:
                base[key] = value

    def _get_default_config(self) -> Dict[str, Any]:
        """デフォルト設定を取得"""
        return copy.deepcopy({
            'sheet_titles': {
                'profit_and_loss': '株取引',
                'dividend_list': '配当金',
            },
            'headers': {
                'profit_and_loss': {
                    'trade_date': '約定日',
                    'settlement_date': '受渡日',
                    'security_code': '銘柄コード',
                    'security_name': '銘柄名',
                    'account': '口座',
                    'shares': '数量[株]',
                    'asked_price': '売却/決済単価[円]',
                    'proceeds': '売却/決済額[円]',
                    'purchase_price': '平均取得価額[円]',
                    'realized_profit_and_loss': '実現損益[円]',
                    'total_realized_profit_and_loss': '合計実現損益[円]',
                    'withholding_tax': '源泉徴収税額[円]',
                    'profit_and_loss': '損益[円]',
                },
                'dividend_list': {
                    'settlement_date': '入金日',
                    'product': '商品',
                    'account': '口座',
                    'security_code': '銘柄コード',
                    'security_name': '銘柄',
                    'currency': '受取通貨',
                    'unit_price': '単価[円/現地通貨]',
                    'shares': '数量[株/口]',
                    'dividends_before_tax': '配当・分配金（税引前）[円/現地通貨]',
                    'taxes': '税額[円/現地通貨]',
                    'net_amount_received': '受取金額[円/現地通貨]',
                    'total_dividends_before_tax': '配当・分配金合計（税引前）[円/現地通貨]',
                    'total_taxes': '税額合計[円/現地通貨]',
                    'total_net_amount_received': '受取金額合計[円/現地通貨]',
                },
            },
            'colors': {
                'header_background': 'FFF8CBAD',
                'footer_background': 'FFC5E0B4',
                'realized_loss_font': 'FFFF0000',
            },
            'formats': {
                'yen': '"¥"#,##0;"¥"-#,##0',
                'yen_decimal': '"¥"#,##0.00;"¥"-#,##0.00',
            },
            'account_labels': {
                'specific': '特定',
            },
            'tax_rate': 0.20315,
            'start_row': 2,
            'start_col': 2,
            'column_width': 16.0,
            'skip_header': True,
            'encoding': None,
            'log_level': 'INFO',
            'log_file': None,
        })

    def get(self, key: str, default: Any = None) -> Any:
        """設定値を取得"""
        return self.config_data.get(key, default)

    def get_section(self, key: str) -> Dict[str, Any]:
        """辞書型の設定セクションを取得"""
        section = self.get(key, {})
        if not isinstance(section, dict):
            raise ConfigurationError(f"設定項目 '{key}' はオブジェクトである必要があります: {section!r}")
        return dict(section)

    def get_logging_settings(self) -> Dict[str, Any]:
        """ログ関連の設定を取得"""
        return {
            'log_level': self.get('log_level', 'INFO'),
            'log_file': self.get('log_file'),
        }

    def validate_configuration(self) -> bool:
        """設定の妥当性を検証"""
        errors = []

        tax_rate = self.get('tax_rate')
        if isinstance(tax_rate, bool) or not isinstance(tax_rate, (int, float, str)):
            errors.append(f"tax_rate が数値ではありません: {tax_rate!r}")
        else:
            try:
                if not 0 <= float(tax_rate) < 1:
                    errors.append(f"tax_rate は 0 以上 1 未満で指定してください: {tax_rate}")
            except ValueError:
                errors.append(f"tax_rate が数値ではありません: {tax_rate!r}")

        for field in ('start_row', 'start_col'):
            value = self.get(field)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                errors.append(f"{field} は 1 以上の整数で指定してください: {value!r}")

        column_width = self.get('column_width')
        if isinstance(column_width, bool) or not isinstance(column_width, (int, float)) or column_width <= 0:
            errors.append(f"column_width は正の数で指定してください: {column_width!r}")

        for name, color in self.get_section('colors').items():
            if not isinstance(color, str) or not self.ARGB_PATTERN.match(color):
                errors.append(f"色 '{name}' はARGB形式(8桁の16進数)で指定してください: {color!r}")

        if errors:
            error_msg = f"設定値が不正です: {errors}"
            if self.logger:
                self.logger.error(error_msg)
            raise ConfigurationError(error_msg)

        if self.logger:
            self.logger.info("設定の妥当性検証完了")

        return True
