"""Section Type Classifier

断面記述から断面ファミリーを決定します。未知・曖昧な入力は
RECTANGLE に解決し、例外を送出することはありません。
"""

import logging
from enum import Enum
from typing import Any, Optional, Tuple

from common.attribute_keys import HEIGHT_KEYS
from common.dimension_normalizer import NormalizedDimensions

logger = logging.getLogger(__name__)


class SectionFamily(str, Enum):
    """断面ファミリー"""

    RECTANGLE = "RECTANGLE"
    CIRCLE = "CIRCLE"
    H = "H"
    BOX = "BOX"
    PIPE = "PIPE"
    C = "C"
    L = "L"
    T = "T"
    CROSS_H = "CROSS_H"


# 大文字化したタグ → ファミリー（定義順に照合）
TYPE_ALIASES: Tuple[Tuple[str, SectionFamily], ...] = (
    ("RECT", SectionFamily.RECTANGLE),
    ("RECTANGULAR", SectionFamily.RECTANGLE),
    ("SQ", SectionFamily.RECTANGLE),
    ("SQUARE", SectionFamily.RECTANGLE),
    ("RC", SectionFamily.RECTANGLE),
    ("RC-SECTION", SectionFamily.RECTANGLE),
    ("ROUND", SectionFamily.CIRCLE),
    ("CIRCULAR", SectionFamily.CIRCLE),
    ("ROUND-SECTION", SectionFamily.CIRCLE),
    ("HOLLOW", SectionFamily.PIPE),
    ("TUBE", SectionFamily.PIPE),
    ("CHS", SectionFamily.PIPE),
    ("PIPE-SECTION", SectionFamily.PIPE),
    ("RHS", SectionFamily.BOX),
    ("SHS", SectionFamily.BOX),
    ("BOX-SECTION", SectionFamily.BOX),
    ("SQUARE-SECTION", SectionFamily.BOX),
    ("I", SectionFamily.H),
    ("IBEAM", SectionFamily.H),
    ("WIDE_FLANGE", SectionFamily.H),
    ("H-SECTION", SectionFamily.H),
    ("CHANNEL", SectionFamily.C),
    ("U", SectionFamily.C),
    ("U-SHAPE", SectionFamily.C),
    ("ANGLE", SectionFamily.L),
    ("L-SHAPE", SectionFamily.L),
    ("TEE", SectionFamily.T),
    ("T-SHAPE", SectionFamily.T),
    ("CROSS-H", SectionFamily.CROSS_H),
    ("CROSS", SectionFamily.CROSS_H),
    ("CRUCIFORM", SectionFamily.CROSS_H),
)

_ALIAS_MAP = dict(TYPE_ALIASES)

# 接頭辞照合は長い名前から（CROSS_H を C より先に）
_PREFIX_FAMILIES = sorted(SectionFamily, key=lambda f: len(f.value), reverse=True)

_IGNORED_TAGS = ("", "UNKNOWN", "NONE")


def normalize_section_tag(tag: Any) -> Optional[SectionFamily]:
    """断面タイプ文字列をファミリーに変換（解決できない場合は None）"""
    if tag is None:
        return None
    if isinstance(tag, SectionFamily):
        return tag
    upper = str(tag).strip().upper()
    if upper in _IGNORED_TAGS:
        return None

    try:
        return SectionFamily(upper)
    except ValueError:
        pass

    if upper in _ALIAS_MAP:
        return _ALIAS_MAP[upper]

    for family in _PREFIX_FAMILIES:
        for separator in ("-", "_"):
            if upper.startswith(family.value + separator):
                return family
    return None


def _has(dims: NormalizedDimensions, *keys: str) -> bool:
    return all(dims.get(key) is not None for key in keys)


def _height_from_depth_only(dims: NormalizedDimensions) -> bool:
    # 山形鋼（depth + width + thickness）の高さは depth 由来
    if dims.values.get("depth") is None:
        return False
    before_depth = HEIGHT_KEYS[: HEIGHT_KEYS.index("depth")]
    return all(dims.values.get(key) is None for key in before_depth)


class SectionTypeClassifier:
    """断面ファミリー判定"""

    @staticmethod
    def infer_from_dimensions(dims: Optional[NormalizedDimensions]) -> SectionFamily:
        """寸法項目の組み合わせからファミリーを推定

        判定順は固定です（先に一致したものを採用）。
        """
        if dims is None:
            return SectionFamily.RECTANGLE

        diameter = dims.diameter is not None or _has(dims, "outer_diameter")
        wall = any(
            dims.values.get(key) is not None
            for key in ("wall_thickness", "thickness", "t")
        )

        if diameter and wall:
            return SectionFamily.PIPE
        if _has(dims, "outer_height", "outer_width", "wall_thickness"):
            return SectionFamily.BOX
        if (
            _has(dims, "width", "height")
            and dims.thickness is not None
            and not _height_from_depth_only(dims)
        ):
            return SectionFamily.BOX
        if _has(dims, "overall_depth", "overall_width", "web_thickness", "flange_thickness"):
            return SectionFamily.H
        if _has(dims, "overall_depth", "flange_width", "web_thickness", "flange_thickness"):
            return SectionFamily.C
        if (
            _has(dims, "depth", "width", "thickness")
            and dims.values.get("overall_depth") is None
            and dims.values.get("web_thickness") is None
        ):
            return SectionFamily.L
        if diameter:
            return SectionFamily.CIRCLE
        return SectionFamily.RECTANGLE

    @classmethod
    def classify(
        cls,
        section_type: Any = None,
        profile_type: Any = None,
        steel_shape_type: Any = None,
        dimensions: Optional[NormalizedDimensions] = None,
    ) -> SectionFamily:
        """断面ファミリーを決定

        Args:
            section_type: 明示的な断面タイプ
            profile_type: プロファイルタイプ
            steel_shape_type: 鋼材形状レコードのタイプタグ
            dimensions: 正規化寸法

        Returns:
            SectionFamily（常に値を返す）
        """
        for source in (section_type, profile_type, steel_shape_type):
            family = normalize_section_tag(source)
            if family is not None:
                return family
        family = cls.infer_from_dimensions(dimensions)
        logger.debug(
            "寸法から断面ファミリーを推定: %s (type=%s, profile=%s, shape=%s)",
            family.value, section_type, profile_type, steel_shape_type,
        )
        return family


def _as_reference_flag(value: Any) -> Optional[bool]:
    if value is None or isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text == "false":
        return False
    if text == "true":
        return True
    return None


def resolve_rotation_with_reference(base_rotation: float, is_reference_direction: Any) -> float:
    """基準方向フラグを考慮した回転角（度）

    isReferenceDirection が明示的に false の場合のみ 90 度を加算します。
    """
    if _as_reference_flag(is_reference_direction) is False:
        return (base_rotation + 90.0) % 360.0
    return base_rotation
