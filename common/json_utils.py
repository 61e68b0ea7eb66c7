"""Utility functions for JSON serialization.
"""
from pathlib import Path
from typing import Any, Union
import json


def save_json(data: Any, file_path: Union[str, Path]) -> None:
    """Save Python data to a JSON file using UTF-8 encoding.

    Args:
        data: JSON serializable object to save.
        file_path: Destination path for the JSON file.
    """
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False, default=str)


def load_json(file_path: Union[str, Path]) -> Any:
    """Load a UTF-8 JSON file."""
    with open(file_path, "r", encoding="utf-8") as f:
        return json.load(f)
