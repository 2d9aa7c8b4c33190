"""
レポート設定モジュール

起動時に一度だけ ConfigManager から読み込み、以降は読み取り専用の値として
各コンポーネントへ明示的に渡します。
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Any, Mapping, Optional

from common.config.config_manager import ConfigManager
from common.error_handling.exceptions import ConfigurationError


def _freeze(mapping: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class ReportSettings:
    """レポート出力設定"""
    headers: Mapping[str, Mapping[str, str]] = field(default_factory=dict)
    colors: Mapping[str, str] = field(default_factory=dict)
    formats: Mapping[str, str] = field(default_factory=dict)
    sheet_titles: Mapping[str, str] = field(default_factory=dict)
    account_labels: Mapping[str, str] = field(default_factory=dict)
    tax_rate: Decimal = Decimal('0.20315')
    start_row: int = 2
    start_col: int = 2
    column_width: float = 16.0
    skip_header: bool = True
    encoding: Optional[str] = None

    @classmethod
    def from_config(cls, config: ConfigManager) -> 'ReportSettings':
        """ConfigManager の内容から設定値を構築"""
        config.validate_configuration()

        try:
            tax_rate = Decimal(str(config.get('tax_rate')))
        except InvalidOperation as e:
            raise ConfigurationError(f"tax_rate が数値ではありません: {config.get('tax_rate')!r}") from e

        headers = {
            kind: _freeze(labels)
            for kind, labels in config.get_section('headers').items()
            if isinstance(labels, dict)
        }

        return cls(
            headers=_freeze(headers),
            colors=_freeze(config.get_section('colors')),
            formats=_freeze(config.get_section('formats')),
            sheet_titles=_freeze(config.get_section('sheet_titles')),
            account_labels=_freeze(config.get_section('account_labels')),
            tax_rate=tax_rate,
            start_row=int(config.get('start_row')),
            start_col=int(config.get('start_col')),
            column_width=float(config.get('column_width')),
            skip_header=bool(config.get('skip_header', True)),
            encoding=config.get('encoding') or None,
        )

    def header_label(self, report_kind: str, field_name: str) -> str:
        """ヘッダー表示名を取得（未設定の場合はフィールド名）"""
        return self.headers.get(report_kind, {}).get(field_name, field_name)

    def sheet_title(self, report_kind: str) -> str:
        title = self.sheet_titles.get(report_kind)
        if not title:
            raise ConfigurationError(f"シート名が設定されていません: sheet_titles.{report_kind}")
        return title

    def color(self, name: str) -> Optional[str]:
        return self.colors.get(name)

    def number_format(self, name: str) -> Optional[str]:
        return self.formats.get(name)

    def to_log_dict(self) -> Mapping[str, Any]:
        """ログ出力用の要約"""
        return {
            'sheet_titles': dict(self.sheet_titles),
            'tax_rate': str(self.tax_rate),
            'start_row': self.start_row,
            'start_col': self.start_col,
            'column_width': self.column_width,
            'skip_header': self.skip_header,
            'encoding': self.encoding or 'auto',
        }
