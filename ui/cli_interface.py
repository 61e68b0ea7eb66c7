"""コマンドラインインターフェース

バッチJSONからソリッドを生成し IFC を出力する CLI を提供します。
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from config.settings import GeneratorConfig
from core.conversion_service import ConversionService
from exceptions.custom_errors import GeometryEngineError
from utils.logger import setup_logger

LOGGER_NAME = "stb_geometry"


class CliInterface:
    """コマンドラインインターフェース"""

    def __init__(self):
        self.service = None

    def create_parser(self) -> argparse.ArgumentParser:
        """引数パーサーを作成"""
        parser = argparse.ArgumentParser(
            prog="stb-geometry",
            description="ST-Bridge 部材ジオメトリ生成ツール",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
使用例:
  python main.py batch.json                          # output/batch.ifc に出力
  python main.py batch.json -o model.ifc             # 出力ファイル名を指定
  python main.py batch.json --summary summary.json   # スキップ理由などのサマリーを出力
  python main.py batch.json --categories column,beam # 対象カテゴリを限定
  python main.py batch.json --debug                  # デバッグモードで実行
            """,
        )

        parser.add_argument("input_file", help="入力バッチJSONファイルパス")

        parser.add_argument(
            "-o",
            "--output",
            dest="output_file",
            help="出力IFCファイルパス（省略時は出力ディレクトリ/入力ファイル名.ifc）",
        )

        parser.add_argument(
            "--summary", dest="summary_file", help="生成サマリーJSONの出力先"
        )

        parser.add_argument(
            "--categories",
            type=str,
            help="変換対象カテゴリをカンマ区切りで指定 (例: beam,column,wall)\n"
            "有効なカテゴリ: column, post, beam, girder, brace, pile, footing,\n"
            "strip_footing, foundation_column, slab, wall",
        )

        parser.add_argument(
            "--config", dest="config_file", help="設定JSONファイルパス"
        )

        parser.add_argument(
            "--debug", action="store_true", help="デバッグモードを有効にする"
        )

        return parser

    def run(self, args: Optional[list] = None) -> int:
        """CLIを実行

        Args:
            args: コマンドライン引数（テスト用）

        Returns:
            int: 終了コード（0: 成功、1: エラー）
        """
        parser = self.create_parser()
        parsed_args = parser.parse_args(args)

        try:
            config = GeneratorConfig.load_from_file(
                Path(parsed_args.config_file) if parsed_args.config_file else None
            )
            if parsed_args.debug:
                config.debug_enabled = True
            # 各モジュールのロガーはルートへ伝播するためルートにハンドラを設定
            setup_logger("", config.get_log_file_path(), config.debug_enabled)
            self.service = ConversionService(config, logging.getLogger(LOGGER_NAME))

            categories = None
            if parsed_args.categories:
                categories = [cat.strip() for cat in parsed_args.categories.split(",")]
                print(f"変換対象カテゴリ: {', '.join(categories)}")

            summary = self.service.convert_file(
                parsed_args.input_file,
                parsed_args.output_file,
                parsed_args.summary_file,
                categories,
            )

        except (GeometryEngineError, ValueError) as e:
            print(f"エラー: {e}", file=sys.stderr)
            return 1

        self._print_summary(summary)
        return 0

    @staticmethod
    def _print_summary(summary: dict) -> None:
        print(f"変換完了: {summary['output_file']}")
        print(f"  ソリッド: {summary['solid_count']}")
        for element_type, count in sorted(summary["solids_by_type"].items()):
            print(f"    {element_type}: {count}")
        print(f"  スキップ: {summary['skipped_count']}")
        for reason, count in sorted(summary["skipped_by_reason"].items()):
            print(f"    {reason}: {count}")


def main():
    """メイン関数"""
    cli = CliInterface()
    exit_code = cli.run()
    sys.exit(exit_code)
