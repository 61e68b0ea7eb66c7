"""Profile Parameter Mapper

正規化寸法と断面ファミリーから、プロファイル生成用のパラメータを
組み立てます。既定値の適用はこのモジュールだけで行います。
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Union

from common.dimension_normalizer import NormalizedDimensions
from geometryEngine.section_classifier import SectionFamily

logger = logging.getLogger(__name__)

DEFAULT_CIRCLE_SEGMENTS = 32


@dataclass(frozen=True)
class RectangleParams:
    width: float
    height: float


@dataclass(frozen=True)
class CircleParams:
    radius: float
    segments: int = DEFAULT_CIRCLE_SEGMENTS


@dataclass(frozen=True)
class HParams:
    overall_depth: float
    overall_width: float
    web_thickness: float
    flange_thickness: float
    fillet_radius: float = 0.0


@dataclass(frozen=True)
class BoxParams:
    width: float
    height: float
    wall_thickness: float


@dataclass(frozen=True)
class PipeParams:
    outer_diameter: float
    wall_thickness: float
    segments: int = DEFAULT_CIRCLE_SEGMENTS


@dataclass(frozen=True)
class ChannelParams:
    overall_depth: float
    flange_width: float
    web_thickness: float
    flange_thickness: float


@dataclass(frozen=True)
class LParams:
    depth: float
    width: float
    thickness: float


@dataclass(frozen=True)
class TParams:
    overall_depth: float
    flange_width: float
    web_thickness: float
    flange_thickness: float


@dataclass(frozen=True)
class CrossHParams:
    depth_x: float
    width_x: float
    depth_y: float
    width_y: float
    web_thickness: float
    flange_thickness: float


ProfileParams = Union[
    RectangleParams,
    CircleParams,
    HParams,
    BoxParams,
    PipeParams,
    ChannelParams,
    LParams,
    TParams,
    CrossHParams,
]


def _pick(dims: Optional[NormalizedDimensions], *keys: str) -> Optional[float]:
    """最初に見つかった正の値を返す"""
    if dims is None:
        return None
    for key in keys:
        value = dims.get(key)
        if value is not None and value > 0:
            return value
    return None


def _chain(dims: Optional[NormalizedDimensions], keys, default: float) -> float:
    value = _pick(dims, *keys)
    return default if value is None else value


def _segments(dims: Optional[NormalizedDimensions], default: int) -> int:
    value = _pick(dims, "segments")
    return int(value) if value is not None and value >= 3 else default


def _map_h(dims, segments):
    return HParams(
        overall_depth=_chain(dims, ("overall_depth", "H", "height", "A"), 450),
        overall_width=_chain(dims, ("overall_width", "B", "width"), 200),
        web_thickness=_chain(dims, ("web_thickness", "t1", "tw"), 9),
        flange_thickness=_chain(dims, ("flange_thickness", "t2", "tf"), 14),
        fillet_radius=_chain(dims, ("fillet_radius", "r"), 0.0),
    )


def _map_box(dims, segments):
    return BoxParams(
        width=_chain(dims, ("width", "outer_width", "B"), 150),
        height=_chain(dims, ("height", "outer_height", "A"), 150),
        wall_thickness=_chain(dims, ("wall_thickness", "thickness", "t"), 9),
    )


def _map_pipe(dims, segments):
    return PipeParams(
        outer_diameter=_chain(dims, ("diameter", "outer_diameter", "A"), 150),
        wall_thickness=_chain(dims, ("thickness", "wall_thickness", "t"), 6),
        segments=_segments(dims, segments),
    )


def _map_rectangle(dims, segments):
    return RectangleParams(
        width=_chain(dims, ("width",), 400),
        height=_chain(dims, ("height",), 400),
    )


def _map_circle(dims, segments):
    radius = _pick(dims, "radius")
    if radius is None:
        diameter = _pick(dims, "diameter")
        radius = diameter / 2 if diameter is not None else 100
    return CircleParams(radius=radius, segments=_segments(dims, segments))


def _map_channel(dims, segments):
    return ChannelParams(
        overall_depth=_chain(dims, ("overall_depth", "H", "height", "A"), 300),
        flange_width=_chain(dims, ("flange_width", "B", "width"), 90),
        web_thickness=_chain(dims, ("web_thickness", "t1", "tw"), 9),
        flange_thickness=_chain(dims, ("flange_thickness", "t2", "tf"), 13),
    )


def _map_l(dims, segments):
    return LParams(
        depth=_chain(dims, ("overall_depth", "depth", "A"), 65),
        width=_chain(dims, ("flange_width", "width", "B"), 65),
        thickness=_chain(dims, ("web_thickness", "thickness", "t"), 6),
    )


def _map_t(dims, segments):
    return TParams(
        overall_depth=_chain(dims, ("overall_depth", "H", "height"), 200),
        flange_width=_chain(dims, ("flange_width", "B", "width"), 150),
        web_thickness=_chain(dims, ("web_thickness", "t1", "tw"), 8),
        flange_thickness=_chain(dims, ("flange_thickness", "t2", "tf"), 12),
    )


def _map_cross_h(dims, segments):
    depth_x = _chain(dims, ("overallDepthX", "H_x", "H", "height"), 400)
    width_x = _chain(dims, ("overallWidthX", "B_x", "B", "width"), 200)
    return CrossHParams(
        depth_x=depth_x,
        width_x=width_x,
        depth_y=_chain(dims, ("overallDepthY", "H_y"), depth_x),
        width_y=_chain(dims, ("overallWidthY", "B_y"), width_x),
        web_thickness=_chain(dims, ("web_thickness", "t1", "tw"), 9),
        flange_thickness=_chain(dims, ("flange_thickness", "t2", "tf"), 14),
    )


_MAPPERS: Dict[SectionFamily, Callable[[Optional[NormalizedDimensions], int], ProfileParams]] = {
    SectionFamily.H: _map_h,
    SectionFamily.BOX: _map_box,
    SectionFamily.PIPE: _map_pipe,
    SectionFamily.RECTANGLE: _map_rectangle,
    SectionFamily.CIRCLE: _map_circle,
    SectionFamily.C: _map_channel,
    SectionFamily.L: _map_l,
    SectionFamily.T: _map_t,
    SectionFamily.CROSS_H: _map_cross_h,
}


def map_profile_params(
    dims: Optional[NormalizedDimensions],
    family: SectionFamily,
    segments: int = DEFAULT_CIRCLE_SEGMENTS,
) -> ProfileParams:
    """正規化寸法 → プロファイルパラメータ

    Args:
        dims: 正規化寸法（None の場合は全項目既定値）
        family: 断面ファミリー
        segments: 円形断面の既定分割数

    Returns:
        ファミリーに対応するパラメータ
    """
    family = SectionFamily(family)
    params = _MAPPERS[family](dims, segments)
    logger.debug("プロファイルパラメータ: %s -> %s", family.value, params)
    return params


def default_profile_params(
    family: SectionFamily, segments: int = DEFAULT_CIRCLE_SEGMENTS
) -> ProfileParams:
    """寸法情報が無い場合の既定パラメータ"""
    return map_profile_params(None, family, segments)


def section_height(params: ProfileParams) -> float:
    """断面せい（天端揃え配置で使用）"""
    if isinstance(params, (CircleParams, PipeParams)):
        return 0.0
    if isinstance(params, (HParams, ChannelParams, TParams)):
        return params.overall_depth
    if isinstance(params, (RectangleParams, BoxParams)):
        return params.height
    if isinstance(params, LParams):
        return params.depth
    if isinstance(params, CrossHParams):
        return max(params.depth_x, params.width_y)
    return 0.0
