"""要素レコード定義

パース済みの部材レコード（要素種別ごとの閉じた型集合）と、
断面・鋼材形状レコードを定義します。レコードは生成処理で変更されません。
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

from common.geometry import Vector3


@dataclass(frozen=True)
class SteelShape:
    """鋼材形状（StbSecSteel の各形状）"""

    name: str
    shape_type: Optional[str] = None
    dimensions: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SectionRecord:
    """断面記述

    Attributes:
        dimensions: 寸法属性バッグ（XML属性・JSON寸法オブジェクト）
        shape: 鋼材形状名（鋼材形状テーブルへの参照）
        variant_markup: Same/NotSame/多断面の断面図形要素
        concrete: SRC断面のコンクリート寸法バッグ
        base_plate: 柱脚ベースプレート寸法バッグ（B_X, B_Y, t, offset_X, offset_Y）
    """

    id: str
    name: str = ""
    dimensions: Mapping[str, Any] = field(default_factory=dict)
    section_type: Optional[str] = None
    profile_type: Optional[str] = None
    shape: Optional[str] = None
    variant_markup: Optional[ET.Element] = field(default=None, compare=False)
    is_reference_direction: Any = None
    concrete: Optional[Mapping[str, Any]] = None
    base_plate: Optional[Mapping[str, Any]] = None

    def raw_data(self) -> dict:
        """メタデータ用の元断面データ"""
        data = {"id": self.id, "name": self.name, "dimensions": dict(self.dimensions)}
        for key in ("section_type", "profile_type", "shape", "is_reference_direction"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        if self.concrete:
            data["concrete"] = dict(self.concrete)
        if self.base_plate:
            data["base_plate"] = dict(self.base_plate)
        return data


@dataclass(frozen=True)
class ElementRecordBase:
    id: str
    section_id: Optional[str] = None
    name: str = ""
    guid: Optional[str] = None

    @property
    def element_type(self) -> str:
        return getattr(self, "kind", self.__class__.__name__)


@dataclass(frozen=True)
class ColumnRecord(ElementRecordBase):
    """柱・間柱（kind = Column / Post）"""

    bottom_node: Optional[str] = None
    top_node: Optional[str] = None
    bottom_coord: Optional[Vector3] = None
    top_coord: Optional[Vector3] = None
    offset_bottom: Tuple[float, float] = (0.0, 0.0)
    offset_top: Tuple[float, float] = (0.0, 0.0)
    rotate: float = 0.0
    kind: str = "Column"


@dataclass(frozen=True)
class BeamRecord(ElementRecordBase):
    """大梁・小梁（kind = Girder / Beam）

    haunch_* / joint_* は多断面梁の始端・終端側の変断面区間長さ [mm]。
    """

    start_node: Optional[str] = None
    end_node: Optional[str] = None
    start_coord: Optional[Vector3] = None
    end_coord: Optional[Vector3] = None
    offset_start: Vector3 = Vector3()
    offset_end: Vector3 = Vector3()
    rotate: float = 0.0
    placement_mode: Optional[str] = None
    haunch_start: float = 0.0
    haunch_end: float = 0.0
    joint_start: float = 0.0
    joint_end: float = 0.0
    kind: str = "Beam"


@dataclass(frozen=True)
class BraceRecord(ElementRecordBase):
    start_node: Optional[str] = None
    end_node: Optional[str] = None
    start_coord: Optional[Vector3] = None
    end_coord: Optional[Vector3] = None
    offset_start: Vector3 = Vector3()
    offset_end: Vector3 = Vector3()
    rotate: float = 0.0
    kind: str = "Brace"


@dataclass(frozen=True)
class PileRecord(ElementRecordBase):
    """杭

    1節点形式（node + level_top）と2節点形式（bottom_node / top_node）の
    どちらかで指定します。
    """

    node: Optional[str] = None
    node_coord: Optional[Vector3] = None
    level_top: Optional[float] = None
    length_all: Optional[float] = None
    bottom_node: Optional[str] = None
    top_node: Optional[str] = None
    bottom_coord: Optional[Vector3] = None
    top_coord: Optional[Vector3] = None
    offset: Tuple[float, float] = (0.0, 0.0)
    rotate: float = 0.0
    kind: str = "Pile"

    @property
    def is_single_node(self) -> bool:
        return self.node is not None or self.node_coord is not None


@dataclass(frozen=True)
class FootingRecord(ElementRecordBase):
    node: Optional[str] = None
    node_coord: Optional[Vector3] = None
    level_bottom: float = 0.0
    offset: Tuple[float, float] = (0.0, 0.0)
    rotate: float = 0.0
    kind: str = "Footing"


@dataclass(frozen=True)
class StripFootingRecord(ElementRecordBase):
    """布基礎（2節点の連続基礎）

    level は天端レベル（未指定時は節点高さ）、lateral_offset は材軸に直交する
    水平方向のずれ（材軸の左側が正）[mm]。
    """

    start_node: Optional[str] = None
    end_node: Optional[str] = None
    start_coord: Optional[Vector3] = None
    end_coord: Optional[Vector3] = None
    level: Optional[float] = None
    lateral_offset: float = 0.0
    kind: str = "StripFooting"


@dataclass(frozen=True)
class FoundationColumnRecord(ElementRecordBase):
    """基礎柱

    節点（天端）から下向きに基礎部 length_fd と立上り部 length_wr を配置します。
    section_id は基礎部、section_wr_id は立上り部の断面です。
    """

    node: Optional[str] = None
    node_coord: Optional[Vector3] = None
    length_fd: Optional[float] = None
    length_wr: float = 0.0
    section_wr_id: Optional[str] = None
    offset: Tuple[float, float] = (0.0, 0.0)
    rotate: float = 0.0
    kind: str = "FoundationColumn"


@dataclass(frozen=True)
class SlabRecord(ElementRecordBase):
    """スラブ（節点順に外周を構成、offsets は節点IDごと）"""

    node_ids: Tuple[str, ...] = ()
    coords: Tuple[Vector3, ...] = ()
    offsets: Mapping[str, Vector3] = field(default_factory=dict)
    kind: str = "Slab"


@dataclass(frozen=True)
class WallOpening:
    """壁開口（壁の左下隅を原点とする壁面内座標）"""

    position_x: float
    position_y: float
    length_x: float
    length_y: float
    id: str = ""


@dataclass(frozen=True)
class WallRecord(ElementRecordBase):
    node_ids: Tuple[str, ...] = ()
    coords: Tuple[Vector3, ...] = ()
    openings: Tuple[WallOpening, ...] = ()
    kind: str = "Wall"


ElementRecord = Union[
    ColumnRecord,
    BeamRecord,
    BraceRecord,
    PileRecord,
    FootingRecord,
    StripFootingRecord,
    FoundationColumnRecord,
    SlabRecord,
    WallRecord,
]

ELEMENT_RECORD_TYPES: Sequence[type] = (
    ColumnRecord,
    BeamRecord,
    BraceRecord,
    PileRecord,
    FootingRecord,
    StripFootingRecord,
    FoundationColumnRecord,
    SlabRecord,
    WallRecord,
)
