"""
期間集計モジュール

解析済みレコードを期間キー（約定日・入金月など）ごとにまとめ、
口座区分ごとの合計・源泉徴収税額を算出します。
"""

import logging
from collections import OrderedDict
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, List

from .data_models import AggregateTotals, DividendTotals, PeriodGroup
from .settings import ReportSettings


class AccountClass(Enum):
    """口座区分"""
    SPECIFIC = 'specific'  # 特定口座（課税）
    NISA = 'nisa'          # NISA口座（非課税）


def classify_account(account: str, settings: ReportSettings) -> AccountClass:
    """口座名の部分一致で口座区分を判定（大文字小文字は区別）

    特定口座のラベルを含まないものはすべてNISA扱い。
    """
    specific_label = settings.account_labels.get('specific', '特定')
    if specific_label and specific_label in account:
        return AccountClass.SPECIFIC
    return AccountClass.NISA


class ProfitAndLossAccumulator:
    """実現損益を口座区分ごとに積み上げる"""

    def __init__(self, settings: ReportSettings):
        self.settings = settings
        self.specific_account_total = 0
        self.nisa_account_total = 0

    def add(self, record) -> None:
        if record.account is None or record.realized_profit_and_loss is None:
            return
        if classify_account(record.account, self.settings) is AccountClass.SPECIFIC:
            self.specific_account_total += record.realized_profit_and_loss
        else:
            self.nisa_account_total += record.realized_profit_and_loss

    def result(self) -> AggregateTotals:
        return AggregateTotals.from_account_totals(
            self.specific_account_total,
            self.nisa_account_total,
            self.settings.tax_rate,
        )


class DividendAccumulator:
    """配当金・税額・受取金額を積み上げる（3項目とも揃った行のみ）"""

    def __init__(self, settings: ReportSettings):
        self.settings = settings
        self.total_dividends_before_tax = Decimal(0)
        self.total_taxes = Decimal(0)
        self.total_net_amount_received = Decimal(0)

    def add(self, record) -> None:
        amounts = (record.dividends_before_tax, record.taxes, record.net_amount_received)
        if any(amount is None for amount in amounts):
            return
        self.total_dividends_before_tax += record.dividends_before_tax
        self.total_taxes += record.taxes
        self.total_net_amount_received += record.net_amount_received

    def result(self) -> DividendTotals:
        return DividendTotals(
            total_dividends_before_tax=self.total_dividends_before_tax,
            total_taxes=self.total_taxes,
            total_net_amount_received=self.total_net_amount_received,
        )


class PeriodAggregator:
    """期間ごとのレコードグループを作成するクラス"""

    def __init__(self, layout, settings: ReportSettings):
        self.layout = layout
        self.settings = settings
        self.logger = logging.getLogger(__name__)
        self.dropped_count = 0

    def aggregate(self, records: Iterable[Any]) -> 'OrderedDict[date, PeriodGroup]':
        """期間キーの昇順に並んだグループを返す

        期間キーを取得できないレコード（日付が空欄）は出力対象から除外する。
        """
        buckets: Dict[date, List[Any]] = {}
        self.dropped_count = 0

        for record in records:
            key = self.layout.group_key(record)
            if key is None:
                self.dropped_count += 1
                self.logger.debug(f"日付がないため除外: {record}")
                continue
            buckets.setdefault(key, []).append(record)

        groups = OrderedDict(
            (key, PeriodGroup(key=key, records=tuple(buckets[key])))
            for key in sorted(buckets)
        )

        if self.dropped_count:
            self.logger.warning(f"日付がないレコードを除外しました: {self.dropped_count}件")
        self.logger.info(f"期間集計完了: {len(groups)}期間")
        return groups
