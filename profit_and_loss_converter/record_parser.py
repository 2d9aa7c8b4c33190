"""
レコード解析モジュール

CSVの1行（文字列のリスト）を型付きのレコードへ変換します。
列は見出しではなく位置で参照します。
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .data_models import format_field_value
from .exceptions import (
    MalformedDateError,
    MalformedNumberError,
    MissingFieldError,
    ParseError
)

INTEGER_PATTERN = re.compile(r'^[+-]?\d+$')
DECIMAL_PATTERN = re.compile(r'^[+-]?(\d+(\.\d*)?|\.\d+)$')
DATE_PATTERN = re.compile(r'^\d{4}/\d{1,2}/\d{1,2}$')


class FieldType(Enum):
    """フィールドの型"""
    DATE = 'date'
    INTEGER = 'integer'
    DECIMAL = 'decimal'
    STRING = 'string'


@dataclass(frozen=True)
class FieldSpec:
    """CSV列の定義"""
    name: str
    position: int
    field_type: FieldType
    required: bool = True


def parse_date(field_name: str, text: Optional[str]) -> Optional[date]:
    """YYYY/MM/DD 形式の日付を解析"""
    if text is None:
        return None
    if not DATE_PATTERN.match(text):
        raise MalformedDateError(field_name, text)
    try:
        return datetime.strptime(text, '%Y/%m/%d').date()
    except ValueError as e:
        raise MalformedDateError(field_name, text, detail=str(e)) from e


def parse_int(field_name: str, text: Optional[str]) -> Optional[int]:
    """桁区切りのカンマを除去して整数を解析"""
    if text is None:
        return None
    normalized = text.replace(',', '')
    if not INTEGER_PATTERN.match(normalized):
        raise MalformedNumberError(field_name, text)
    return int(normalized)


def parse_decimal(field_name: str, text: Optional[str]) -> Optional[Decimal]:
    """桁区切りのカンマを除去して小数を解析"""
    if text is None:
        return None
    normalized = text.replace(',', '')
    if not DECIMAL_PATTERN.match(normalized):
        raise MalformedNumberError(field_name, text)
    try:
        return Decimal(normalized)
    except InvalidOperation as e:
        raise MalformedNumberError(field_name, text, detail=str(e)) from e


def parse_string(field_name: str, text: Optional[str]) -> Optional[str]:
    return text


FIELD_PARSERS = {
    FieldType.DATE: parse_date,
    FieldType.INTEGER: parse_int,
    FieldType.DECIMAL: parse_decimal,
    FieldType.STRING: parse_string,
}


def serialize_fields(record: Any) -> Dict[str, Optional[str]]:
    """レコードの各フィールドを正規化した文字列で返す"""
    return {name: format_field_value(value) for name, value in record.get_all_fields()}


class RecordParser:
    """CSV行をレコードへ変換するクラス

    レイアウト（``ReportLayout``）の列定義に従って各列を個別に解析する。
    必須列が欠けている場合は MissingFieldError、形式不正の場合は
    MalformedDateError / MalformedNumberError を送出する。
    """

    def __init__(self, layout):
        self.layout = layout
        self.logger = logging.getLogger(__name__)

    def parse(self, raw_fields: Sequence[Optional[str]]):
        """1行分のフィールドを解析してレコードを返す"""
        values = {}
        for spec in self.layout.field_specs:
            text = self._get_raw(raw_fields, spec.position)
            if text is None and spec.required:
                raise MissingFieldError(spec.name)
            values[spec.name] = FIELD_PARSERS[spec.field_type](spec.name, text)
        return self.layout.record_type(**values)

    def parse_all(self, rows: Iterable[Sequence[Optional[str]]],
                  first_line_number: int = 1) -> List[Any]:
        """全行を解析（1行でも失敗した場合は全体を中断）

        first_line_number はエラーメッセージに表示するファイル上の行番号の起点。
        """
        records = []
        for line_number, raw_fields in enumerate(rows, first_line_number):
            try:
                records.append(self.parse(raw_fields))
            except ParseError as e:
                raise e.with_line_number(line_number) from e

        self.logger.info(f"レコード解析完了: {len(records)}件")
        return records

    @staticmethod
    def _get_raw(raw_fields: Sequence[Optional[str]], position: int) -> Optional[str]:
        """指定位置の値を取得（列が足りない・空欄の場合は None）"""
        if position >= len(raw_fields):
            return None
        value = raw_fields[position]
        if value is None:
            return None
        value = str(value).strip()
        return value or None
