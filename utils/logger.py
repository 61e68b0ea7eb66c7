import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(
    name: str, log_file: Optional[Path] = None, debug_enabled: bool = False
) -> logging.Logger:
    """ロガーを設定して返します。

    既にハンドラが設定済みのロガーはそのまま返します。
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG if debug_enabled else logging.INFO)

    # 子ロガー（geometryEngine.* など）のデバッグ出力を確保
    if debug_enabled:
        logging.getLogger().setLevel(logging.DEBUG)

    formatter = logging.Formatter(LOG_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_element_logger(base: logging.Logger, element_type: str) -> logging.Logger:
    """要素種別ごとの子ロガーを返す（例: stb_geometry.Column）"""
    return base.getChild(element_type)
