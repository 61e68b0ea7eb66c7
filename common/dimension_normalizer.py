"""Dimension Normalizer

属性バッグ（XML属性・JSON寸法オブジェクト）から正規化寸法を導出します。
エイリアスの優先順位は common.attribute_keys の定義順で決まり、
入力のキー順序には依存しません。
"""

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Pattern, Sequence

from common.attribute_keys import (
    DIAMETER_KEYS,
    EXTENDED_PILE_KEYS,
    HEIGHT_KEYS,
    HEIGHT_PATTERN,
    LENGTH_PILE_KEYS,
    PRIMARY_THICKNESS_KEYS,
    RADIUS_KEYS,
    THICKNESS_KEYS,
    WIDTH_KEYS,
    WIDTH_PATTERN,
)

logger = logging.getLogger(__name__)

_NUMBER_PATTERN = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

PROFILE_HINT_CIRCLE = "CIRCLE"
PROFILE_HINT_EXTENDED_PILE = "EXTENDED_PILE"

PILE_TYPE_EXTENDED_FOOT = "ExtendedFoot"
PILE_TYPE_EXTENDED_TOP = "ExtendedTop"
PILE_TYPE_EXTENDED_TOP_FOOT = "ExtendedTopFoot"

_CANONICAL_FIELDS = (
    "width",
    "height",
    "thickness",
    "overall_width",
    "overall_depth",
    "diameter",
    "radius",
    "length_pile",
)


def parse_number(value: Any) -> Optional[float]:
    """属性値を有限の数値に変換（"400mm" のような先頭数値も許容）

    Returns:
        有限数値。数値として解釈できない場合は None
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _NUMBER_PATTERN.match(value)
        if not match:
            return None
        number = float(match.group())
    else:
        return None
    return number if math.isfinite(number) else None


@dataclass(frozen=True)
class ExtendedPileSpec:
    """拡径杭の断面構成"""

    pile_type: str
    axial_diameter: float
    foot_diameter: Optional[float] = None
    top_diameter: Optional[float] = None
    foot_length: float = 0.0
    top_length: float = 0.0
    foot_taper_angle: float = 0.0
    top_taper_angle: float = 0.0

    @staticmethod
    def _taper_length(extended: Optional[float], axial: float, angle_deg: float) -> float:
        if not extended or angle_deg <= 0:
            return 0.0
        return ((extended - axial) / 2) / math.tan(math.radians(angle_deg))

    def foot_taper_length(self) -> float:
        """根固め部テーパー長さ"""
        return self._taper_length(self.foot_diameter, self.axial_diameter, self.foot_taper_angle)

    def top_taper_length(self) -> float:
        """杭頭拡径部テーパー長さ"""
        return self._taper_length(self.top_diameter, self.axial_diameter, self.top_taper_angle)


@dataclass(frozen=True)
class NormalizedDimensions:
    """正規化済み寸法

    Attributes:
        values: 元の属性バッグのうち有限数値の項目（比較対象外）
        extended: 拡径杭キーのみを保持するサイドマップ
    """

    width: Optional[float] = None
    height: Optional[float] = None
    thickness: Optional[float] = None
    overall_width: Optional[float] = None
    overall_depth: Optional[float] = None
    diameter: Optional[float] = None
    radius: Optional[float] = None
    length_pile: Optional[float] = None
    profile_hint: Optional[str] = None
    pile_type: Optional[str] = None
    extended: Mapping[str, float] = field(default_factory=dict)
    values: Mapping[str, float] = field(default_factory=dict, compare=False, repr=False)

    def get(self, key: str, default: Optional[float] = None) -> Optional[float]:
        """正規化フィールド → 拡径杭マップ → 元の数値属性 の順で値を返す"""
        if key in _CANONICAL_FIELDS:
            value = getattr(self, key)
            if value is not None:
                return value
        if key in self.extended:
            return self.extended[key]
        return self.values.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        """値が設定された正規化フィールドを辞書で返す"""
        result: Dict[str, Any] = {}
        for name in _CANONICAL_FIELDS + ("profile_hint", "pile_type"):
            value = getattr(self, name)
            if value is not None:
                result[name] = value
        result.update(self.extended)
        return result


def _first_alias(numeric: Mapping[str, float], keys: Sequence[str]) -> Optional[float]:
    for key in keys:
        if key in numeric:
            return numeric[key]
    return None


def _first_pattern(numeric: Mapping[str, float], pattern: Pattern) -> Optional[float]:
    for key in sorted(numeric):
        if pattern.match(key):
            return numeric[key]
    return None


class DimensionNormalizer:
    """寸法正規化・アクセサ群"""

    @staticmethod
    def derive(bag: Optional[Mapping[str, Any]]) -> Optional[NormalizedDimensions]:
        """属性バッグから正規化寸法を導出

        Args:
            bag: 属性名 → 値 の辞書（値は数値・数値文字列が混在）

        Returns:
            NormalizedDimensions。寸法として認識できる項目が無い場合は None
        """
        if not bag:
            return None

        numeric: Dict[str, float] = {}
        for key, value in bag.items():
            number = parse_number(value)
            if number is not None:
                numeric[str(key)] = number

        width = _first_alias(numeric, WIDTH_KEYS)
        if width is None:
            width = _first_pattern(numeric, WIDTH_PATTERN)
        height = _first_alias(numeric, HEIGHT_KEYS)
        if height is None:
            height = _first_pattern(numeric, HEIGHT_PATTERN)
        explicit_outline = width is not None or height is not None

        thickness = _first_alias(numeric, PRIMARY_THICKNESS_KEYS)
        length_pile = _first_alias(numeric, LENGTH_PILE_KEYS)
        extended = {key: numeric[key] for key in EXTENDED_PILE_KEYS if key in numeric}

        diameter = _first_alias(numeric, DIAMETER_KEYS)
        radius = _first_alias(numeric, RADIUS_KEYS)
        if diameter is None and "D_axial" in extended:
            diameter = extended["D_axial"]
        if diameter is None and radius is not None:
            diameter = radius * 2

        profile_hint = None
        if diameter is not None:
            radius = diameter / 2
            if width is None:
                width = diameter
            if height is None:
                height = diameter
            if not explicit_outline:
                profile_hint = PROFILE_HINT_CIRCLE

        has_foot = "D_extended_foot" in extended
        has_top = "D_extended_top" in extended
        pile_type = None
        if has_foot and has_top:
            pile_type = PILE_TYPE_EXTENDED_TOP_FOOT
        elif has_foot:
            pile_type = PILE_TYPE_EXTENDED_FOOT
        elif has_top:
            pile_type = PILE_TYPE_EXTENDED_TOP
        if pile_type:
            profile_hint = PROFILE_HINT_EXTENDED_PILE

        recognized = (width, height, diameter, thickness, length_pile)
        if all(value is None for value in recognized) and not extended:
            logger.debug("寸法属性が見つかりません: keys=%s", list(bag.keys()))
            return None

        return NormalizedDimensions(
            width=width,
            height=height,
            thickness=thickness,
            overall_width=width,
            overall_depth=height,
            diameter=diameter,
            radius=radius,
            length_pile=length_pile,
            profile_hint=profile_hint,
            pile_type=pile_type,
            extended=extended,
            values=numeric,
        )

    @staticmethod
    def _lookup(dims: Optional[NormalizedDimensions], keys: Sequence[str]) -> Optional[float]:
        if dims is None:
            return None
        return _first_alias(dims.values, keys)

    @classmethod
    def get_width(cls, dims: Optional[NormalizedDimensions]) -> Optional[float]:
        if dims is not None and dims.width is not None:
            return dims.width
        return cls._lookup(dims, WIDTH_KEYS)

    @classmethod
    def get_height(cls, dims: Optional[NormalizedDimensions]) -> Optional[float]:
        if dims is not None and dims.height is not None:
            return dims.height
        return cls._lookup(dims, HEIGHT_KEYS)

    @classmethod
    def get_diameter(cls, dims: Optional[NormalizedDimensions]) -> Optional[float]:
        if dims is not None and dims.diameter is not None:
            return dims.diameter
        return cls._lookup(dims, DIAMETER_KEYS + ("D_axial",))

    @classmethod
    def get_radius(cls, dims: Optional[NormalizedDimensions]) -> Optional[float]:
        """半径（直径がある場合は常に直径/2）"""
        diameter = cls.get_diameter(dims)
        if diameter is not None:
            return diameter / 2
        return cls._lookup(dims, RADIUS_KEYS)

    @classmethod
    def get_thickness(cls, dims: Optional[NormalizedDimensions]) -> Optional[float]:
        if dims is not None and dims.thickness is not None:
            return dims.thickness
        return cls._lookup(dims, THICKNESS_KEYS)

    @staticmethod
    def is_extended_pile(dims: Optional[NormalizedDimensions]) -> bool:
        return dims is not None and dims.profile_hint == PROFILE_HINT_EXTENDED_PILE

    @classmethod
    def is_circular_profile(cls, dims: Optional[NormalizedDimensions]) -> bool:
        if dims is None:
            return False
        return dims.profile_hint in (PROFILE_HINT_CIRCLE, PROFILE_HINT_EXTENDED_PILE)

    @classmethod
    def is_rectangular_profile(cls, dims: Optional[NormalizedDimensions]) -> bool:
        if dims is None or cls.is_circular_profile(dims):
            return False
        return cls.get_width(dims) is not None and cls.get_height(dims) is not None

    @staticmethod
    def validate_dimensions(dims: Optional[NormalizedDimensions]) -> List[str]:
        """正規化寸法の妥当性チェック

        Returns:
            エラーメッセージのリスト（空なら妥当）
        """
        if dims is None:
            return ["寸法情報がありません"]
        errors = []
        for name in _CANONICAL_FIELDS:
            value = getattr(dims, name)
            if value is not None and value <= 0:
                errors.append(f"{name}は正の値である必要があります: {value}")
        for name, value in dims.extended.items():
            if name.startswith("angle_"):
                if not 0 <= value < 90:
                    errors.append(f"{name}は0以上90未満である必要があります: {value}")
            elif value <= 0:
                errors.append(f"{name}は正の値である必要があります: {value}")
        return errors

    @classmethod
    def get_extended_pile_sections(
        cls, dims: Optional[NormalizedDimensions]
    ) -> Optional[ExtendedPileSpec]:
        """拡径杭の断面構成を返す（拡径杭でない場合は None）"""
        if not cls.is_extended_pile(dims):
            return None
        ext = dims.extended
        axial = ext.get("D_axial", dims.diameter)
        if not axial or axial <= 0:
            logger.warning("拡径杭の軸径が不明です: %s", dict(ext))
            return None
        return ExtendedPileSpec(
            pile_type=dims.pile_type,
            axial_diameter=axial,
            foot_diameter=ext.get("D_extended_foot"),
            top_diameter=ext.get("D_extended_top"),
            foot_length=ext.get("length_extended_foot", 0.0),
            top_length=ext.get("length_extended_top", 0.0),
            foot_taper_angle=ext.get("angle_extended_foot_taper", 0.0),
            top_taper_angle=ext.get("angle_extended_top_taper", 0.0),
        )


derive_dimensions = DimensionNormalizer.derive
