"""バッチJSONファイルの読み込み・レコード変換を行うサービス

入力形式::

    {
      "nodes": {"1": [0, 0, 0], ...}  または [{"id": "1", "x": 0, "y": 0, "z": 0}, ...],
      "sections": [{"id": "C1", "dimensions": {...}, "variant_markup": "<...>"}, ...],
      "steel_shapes": [{"name": "H-400x200x8x13", "shape_type": "H", "dimensions": {...}}, ...],
      "elements": [{"kind": "column", "id": "1", "section_id": "C1", ...}, ...]
    }
"""

import json
import logging
import os
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from common.geometry import Vector3
from config.settings import GeneratorConfig
from exceptions.custom_errors import InputDataError
from geometryEngine.context import GenerationContext
from geometryEngine.placement_calculator import PlacementMode
from geometryEngine.records import (
    BeamRecord,
    BraceRecord,
    ColumnRecord,
    ElementRecord,
    FootingRecord,
    FoundationColumnRecord,
    PileRecord,
    SectionRecord,
    SlabRecord,
    StripFootingRecord,
    SteelShape,
    WallOpening,
    WallRecord,
)
from stbParser.variant_expander import parse_variant_markup

logger = logging.getLogger(__name__)

# kind（小文字） → (レコード型, 要素種別名)
KIND_TABLE: Dict[str, Tuple[type, str]] = {
    "column": (ColumnRecord, "Column"),
    "post": (ColumnRecord, "Post"),
    "beam": (BeamRecord, "Beam"),
    "girder": (BeamRecord, "Girder"),
    "brace": (BraceRecord, "Brace"),
    "pile": (PileRecord, "Pile"),
    "footing": (FootingRecord, "Footing"),
    "strip_footing": (StripFootingRecord, "StripFooting"),
    "stripfooting": (StripFootingRecord, "StripFooting"),
    "foundation_column": (FoundationColumnRecord, "FoundationColumn"),
    "foundationcolumn": (FoundationColumnRecord, "FoundationColumn"),
    "slab": (SlabRecord, "Slab"),
    "wall": (WallRecord, "Wall"),
}

VECTOR_FIELDS = {
    "bottom_coord", "top_coord", "start_coord", "end_coord", "node_coord",
    "offset_start", "offset_end",
}
PAIR_FIELDS = {"offset_bottom", "offset_top", "offset"}
FLOAT_FIELDS = {
    "rotate", "level_top", "level_bottom", "length_all",
    "haunch_start", "haunch_end", "joint_start", "joint_end",
    "level", "lateral_offset", "length_fd", "length_wr",
}


@dataclass
class BatchInput:
    """読み込み済みバッチ"""

    nodes: Dict[str, Vector3] = field(default_factory=dict)
    sections: Dict[str, SectionRecord] = field(default_factory=dict)
    steel_shapes: Dict[str, SteelShape] = field(default_factory=dict)
    records: List[ElementRecord] = field(default_factory=list)
    rejected: List[Dict[str, Any]] = field(default_factory=list)

    def to_context(
        self, config: Optional[GeneratorConfig] = None, context_logger: Optional[logging.Logger] = None
    ) -> GenerationContext:
        return GenerationContext(
            nodes=self.nodes,
            sections=self.sections,
            steel_shapes=self.steel_shapes,
            config=config or GeneratorConfig(),
            logger=context_logger or logging.getLogger("geometryEngine"),
        )


def _vector(value: Any, name: str) -> Vector3:
    try:
        if isinstance(value, Mapping):
            values = [float(value.get(axis, 0.0)) for axis in ("x", "y", "z")]
        else:
            values = [float(v) for v in value]
    except (TypeError, ValueError) as e:
        raise InputDataError(f"{name} は座標として解釈できません: {value!r}") from e
    if len(values) == 2:
        values.append(0.0)
    if len(values) != 3:
        raise InputDataError(f"{name} は3成分で指定してください: {value!r}")
    return Vector3(*values)


def _pair(value: Any, name: str) -> Tuple[float, float]:
    vector = _vector(value, name)
    return (vector.x, vector.y)


class BatchFileService:
    """バッチJSONファイルの読み込み・検証を行うサービス"""

    # セキュリティ設定
    MAX_FILE_SIZE = 100 * 1024 * 1024  # 100MB

    def __init__(self, logger=None):
        self.logger = logger or logging.getLogger(__name__)

    def load_batch_file(self, file_path: Union[str, Path]) -> BatchInput:
        """バッチファイルを読み込み、レコードに変換

        Raises:
            InputDataError: ファイルが存在しない・読めない・JSONとして不正な場合
        """
        if not os.path.exists(file_path):
            raise InputDataError(f"バッチファイルが {file_path} に見つかりません")

        file_size = os.path.getsize(file_path)
        if file_size > self.MAX_FILE_SIZE:
            raise InputDataError(
                f"ファイルサイズが制限を超えています: {file_size / (1024*1024):.1f}MB > {self.MAX_FILE_SIZE / (1024*1024):.1f}MB"
            )

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise InputDataError(f"バッチファイルをJSONとして解析できません: {file_path}: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise InputDataError(f"ファイル読み込みエラー: {file_path}: {e}") from e

        self.logger.info("読み込んだバッチファイル: %s", file_path)
        return self.parse_batch(data)

    def parse_batch(self, data: Any) -> BatchInput:
        """JSONオブジェクトからバッチを構築"""
        if not isinstance(data, Mapping):
            raise InputDataError("バッチはJSONオブジェクトで指定してください")

        batch = BatchInput(
            nodes=self._parse_nodes(data.get("nodes") or {}),
            sections=self._parse_sections(data.get("sections") or []),
            steel_shapes=self._parse_steel_shapes(data.get("steel_shapes") or []),
        )
        for index, item in enumerate(data.get("elements") or []):
            try:
                batch.records.append(self.parse_element(item, index))
            except InputDataError as e:
                self.logger.warning("要素 #%d を読み込めないためスキップします: %s", index, e)
                batch.rejected.append({"index": index, "message": str(e)})

        self.logger.info(
            "バッチ読み込み完了: 節点 %d, 断面 %d, 鋼材形状 %d, 要素 %d (除外 %d)",
            len(batch.nodes),
            len(batch.sections),
            len(batch.steel_shapes),
            len(batch.records),
            len(batch.rejected),
        )
        return batch

    def _parse_nodes(self, nodes: Any) -> Dict[str, Vector3]:
        if isinstance(nodes, Mapping):
            return {str(node_id): _vector(value, f"節点 {node_id}") for node_id, value in nodes.items()}
        result = {}
        for item in nodes:
            if "id" not in item:
                raise InputDataError(f"節点に id がありません: {item!r}")
            result[str(item["id"])] = _vector(item, f"節点 {item['id']}")
        return result

    def _parse_sections(self, sections: Any) -> Dict[str, SectionRecord]:
        items = sections.values() if isinstance(sections, Mapping) else sections
        result = {}
        for item in items:
            if "id" not in item:
                raise InputDataError(f"断面に id がありません: {item!r}")
            section_id = str(item["id"])
            markup = None
            try:
                markup = parse_variant_markup(item.get("variant_markup"))
            except ET.ParseError as e:
                self.logger.warning("断面 %s: variant_markup を解析できないため無視します: %s", section_id, e)
            result[section_id] = SectionRecord(
                id=section_id,
                name=item.get("name", ""),
                dimensions=dict(item.get("dimensions") or {}),
                section_type=item.get("section_type"),
                profile_type=item.get("profile_type"),
                shape=item.get("shape"),
                variant_markup=markup,
                is_reference_direction=item.get("is_reference_direction"),
                concrete=item.get("concrete"),
                base_plate=item.get("base_plate"),
            )
        return result

    def _parse_steel_shapes(self, shapes: Any) -> Dict[str, SteelShape]:
        items = shapes.values() if isinstance(shapes, Mapping) else shapes
        result = {}
        for item in items:
            if "name" not in item:
                raise InputDataError(f"鋼材形状に name がありません: {item!r}")
            result[item["name"]] = SteelShape(
                name=item["name"],
                shape_type=item.get("shape_type"),
                dimensions=dict(item.get("dimensions") or {}),
            )
        return result

    def parse_element(self, item: Any, index: int = 0) -> ElementRecord:
        """要素1件をレコードに変換

        Raises:
            InputDataError: kind が不明、または値を解釈できない場合
        """
        if not isinstance(item, Mapping):
            raise InputDataError(f"要素はオブジェクトで指定してください: {item!r}")
        kind = str(item.get("kind", "")).strip().lower()
        if kind not in KIND_TABLE:
            raise InputDataError(f"不明な要素種別です: {item.get('kind')!r}")
        record_cls, kind_name = KIND_TABLE[kind]

        known = {f.name for f in fields(record_cls)} - {"kind"}
        values: Dict[str, Any] = {"kind": kind_name, "id": str(item.get("id", f"{kind}-{index}"))}
        for key, value in item.items():
            if key in ("kind", "id") or value is None:
                continue
            if key not in known:
                self.logger.debug("%s %s: 未知のキーを無視します: %s", kind_name, values["id"], key)
                continue
            values[key] = self._convert(key, value)
        return record_cls(**values)

    @staticmethod
    def _convert(key: str, value: Any) -> Any:
        try:
            if key in VECTOR_FIELDS:
                return _vector(value, key)
            if key in PAIR_FIELDS:
                return _pair(value, key)
            if key in FLOAT_FIELDS:
                return float(value)
            if key in (
                "section_id", "section_wr_id", "bottom_node", "top_node", "start_node", "end_node", "node",
            ):
                return str(value)
            if key == "placement_mode":
                return PlacementMode.parse(value).value
            if key == "node_ids":
                return tuple(str(v) for v in value)
            if key == "coords":
                return tuple(_vector(v, key) for v in value)
            if key == "offsets":
                return {str(k): _vector(v, key) for k, v in value.items()}
            if key == "openings":
                return tuple(
                    WallOpening(
                        position_x=float(o.get("position_x", 0.0)),
                        position_y=float(o.get("position_y", 0.0)),
                        length_x=float(o["length_x"]),
                        length_y=float(o["length_y"]),
                        id=str(o.get("id", "")),
                    )
                    for o in value
                )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise InputDataError(f"{key} の値を解釈できません: {value!r}") from e
        return value
