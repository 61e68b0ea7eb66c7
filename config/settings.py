import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

from exceptions.custom_errors import InputDataError

logger = logging.getLogger(__name__)


@dataclass
class GeneratorConfig:
    """ジオメトリ生成設定クラス"""

    circle_segments: int = 32  # 円形断面の分割数
    default_placement_mode: str = "center"  # 梁の配置基準（center / top-aligned）
    pile_length_diameter_factor: float = 20.0  # 杭長推定（径 × 係数）
    section_transition_epsilon: float = 0.1  # 多断面境界の遷移幅 [mm]
    default_output_dir: Path = Path("output")
    debug_enabled: bool = False
    log_file_name: str = "stb_geometry.log"
    project_name: str = "ST-Bridge Geometry"

    def get_log_file_path(self) -> Path:
        """ログファイル出力先パスを返す"""
        output_dir = Path(self.default_output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        return output_dir / self.log_file_name

    @classmethod
    def load_from_file(cls, config_path: Optional[Path] = None) -> "GeneratorConfig":
        """JSON設定ファイルから読み込み

        未知のキーは無視し、ファイルが無い場合は既定値を返します。

        Raises:
            InputDataError: JSONとして解釈できない場合
        """
        if config_path is None or not Path(config_path).exists():
            return cls()

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise InputDataError(f"設定ファイルを解析できません: {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise InputDataError(f"設定ファイルの形式が不正です: {config_path}")

        known = {f.name for f in fields(cls)}
        overrides = {}
        for key, value in data.items():
            if key not in known:
                logger.warning("未知の設定キーを無視します: %s", key)
                continue
            overrides[key] = Path(value) if key == "default_output_dir" else value
        return cls(**overrides)
