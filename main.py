#!/usr/bin/env python3
"""ST-Bridge ジオメトリ生成ツール - メインエントリーポイント

使用例:
  python main.py batch.json                          # ファイルを指定して生成
  python main.py batch.json -o output.ifc            # 出力ファイル名も指定
  python main.py batch.json --summary summary.json   # サマリーJSONも出力
  python main.py batch.json --debug                  # デバッグモードで生成
"""

import sys

# 標準出力・標準エラー出力をUTF-8に統一（OS問わず）
try:
    if sys.stdout is not None and hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8")
    if sys.stderr is not None and hasattr(sys.stderr, "reconfigure"):
        sys.stderr.reconfigure(encoding="utf-8")
except (AttributeError, OSError):
    pass

from ui.cli_interface import CliInterface


def main():
    """メイン関数"""
    print("=" * 60)
    print("ST-Bridge ジオメトリ生成ツール v1.0.0")
    print("=" * 60)

    cli = CliInterface()
    exit_code = cli.run()

    print("=" * 60)
    print("処理が正常に完了しました" if exit_code == 0 else "処理中にエラーが発生しました")
    print("=" * 60)
    return exit_code


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n\n中断されました。")
        sys.exit(1)
