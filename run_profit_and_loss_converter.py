#!/usr/bin/env python3
"""
損益CSV → Excel 変換ツール メイン実行スクリプト

使用方法:
    python run_profit_and_loss_converter.py realized_pl(JP)_20240131.csv 確定申告.xlsx
    python run_profit_and_loss_converter.py dividendlist_20241231.csv 確定申告.xlsx
    python run_profit_and_loss_converter.py export.csv 確定申告.xlsx --kind profit_and_loss
"""

import sys
import argparse
from pathlib import Path

# プロジェクトルートをパスに追加
sys.path.insert(0, str(Path(__file__).parent))

from common.error_handling.exceptions import ConfigurationError
from profit_and_loss_converter.exceptions import ProfitAndLossConverterError
from profit_and_loss_converter.main_controller import MainController
from profit_and_loss_converter.report_kinds import ReportKind, parse_report_kind

USAGE_MESSAGE = "引数が不足しています。使用例: ./profit-and-loss-converter hogehoge.csv piyopiyo.xlsx"


def parse_arguments(argv=None):
    """コマンドライン引数を解析"""
    parser = argparse.ArgumentParser(
        description="証券会社の実現損益・配当金CSVをExcelシートへ変換します",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
使用例:
  %(prog)s realized_pl(JP)_20240131.csv 確定申告.xlsx          # 実現損益を「株取引」シートへ出力
  %(prog)s dividendlist_20241231.csv 確定申告.xlsx             # 配当金を「配当金」シートへ出力
  %(prog)s export.csv 確定申告.xlsx --kind profit_and_loss     # レポート種別を明示
  %(prog)s export.csv 確定申告.xlsx --config my_settings.json  # 設定ファイルを指定
        """
    )

    parser.add_argument(
        'csv_filepath',
        metavar='CSVFILE',
        type=Path,
        nargs='?',
        help='入力CSVファイル'
    )

    parser.add_argument(
        'xlsx_filepath',
        metavar='XLSXFILE',
        type=Path,
        nargs='?',
        help='出力Excelファイル（存在しない場合は新規作成）'
    )

    parser.add_argument(
        '--kind',
        choices=[kind.value for kind in ReportKind],
        help='レポート種別（省略時はCSVファイル名から判定）'
    )

    parser.add_argument(
        '--config',
        type=Path,
        help='設定ファイル（省略時はカレントディレクトリの settings.json）'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='ログレベル（省略時は設定ファイルの値）'
    )

    parser.add_argument(
        '--log-file',
        type=Path,
        help='ログファイルの出力先'
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """メイン関数"""
    args = parse_arguments(argv)

    if args.csv_filepath is None or args.xlsx_filepath is None:
        print(USAGE_MESSAGE, file=sys.stderr)
        return 1

    try:
        controller = MainController(
            config_path=args.config,
            log_level=args.log_level,
            log_file=args.log_file
        )
        report_kind = parse_report_kind(args.kind) if args.kind else None
        summary = controller.convert(args.csv_filepath, args.xlsx_filepath, report_kind)

    except (ProfitAndLossConverterError, ConfigurationError) as e:
        print(f"エラー: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n\n処理が中断されました。", file=sys.stderr)
        return 1

    print(f"✓ {summary.csv_path.name} を {summary.xlsx_path.name} の「{summary.sheet_title}」シートへ出力しました。"
          f"（{summary.record_count}件, {summary.group_count}期間）")
    return 0


if __name__ == '__main__':
    sys.exit(main())
