"""Profile Builder

断面ファミリーとパラメータから2D断面形状（頂点ループ）を生成します。
外形は反時計回り、穴は時計回りで、局所原点を図心とします。
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Tuple

from geometryEngine.profile_parameter_mapper import (
    BoxParams,
    ChannelParams,
    CircleParams,
    CrossHParams,
    HParams,
    LParams,
    PipeParams,
    ProfileParams,
    RectangleParams,
    TParams,
)
from geometryEngine.section_classifier import SectionFamily

logger = logging.getLogger(__name__)

Point2 = Tuple[float, float]
Loop = Tuple[Point2, ...]


def polygon_area(points: Sequence[Point2]) -> float:
    """符号付き面積（反時計回りで正）"""
    area = 0.0
    count = len(points)
    for i in range(count):
        x1, y1 = points[i]
        x2, y2 = points[(i + 1) % count]
        area += x1 * y2 - x2 * y1
    return area / 2


def polygon_centroid(points: Sequence[Point2]) -> Point2:
    """多角形の図心（面積ゼロの場合は頂点平均）"""
    area = polygon_area(points)
    if abs(area) < 1e-12:
        count = len(points)
        return (sum(p[0] for p in points) / count, sum(p[1] for p in points) / count)
    cx = cy = 0.0
    count = len(points)
    for i in range(count):
        x1, y1 = points[i]
        x2, y2 = points[(i + 1) % count]
        cross = x1 * y2 - x2 * y1
        cx += (x1 + x2) * cross
        cy += (y1 + y2) * cross
    return (cx / (6 * area), cy / (6 * area))


def _translate(points: Sequence[Point2], dx: float, dy: float) -> Loop:
    return tuple((x + dx, y + dy) for x, y in points)


def _centered(points: Sequence[Point2]) -> Loop:
    cx, cy = polygon_centroid(points)
    return _translate(points, -cx, -cy)


def _rotate_quarter(points: Sequence[Point2]) -> Loop:
    return tuple((-y, x) for x, y in points)


@dataclass(frozen=True)
class Profile:
    """2D断面形状

    Attributes:
        vertices: 外形ループ（反時計回り、閉じ点なし）
        holes: 穴ループ（時計回り）
        extra_outlines: 追加の外形ループ（十字H形の直交アーム）
        family: 生成元の断面ファミリー
    """

    vertices: Loop
    holes: Tuple[Loop, ...] = ()
    extra_outlines: Tuple[Loop, ...] = ()
    family: Optional[SectionFamily] = None

    @property
    def outer_loops(self) -> Tuple[Loop, ...]:
        return (self.vertices,) + tuple(self.extra_outlines)

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    def area(self) -> float:
        """外形面積から穴面積を差し引いた値（重なりは考慮しない）"""
        outer = sum(abs(polygon_area(loop)) for loop in self.outer_loops)
        return outer - sum(abs(polygon_area(hole)) for hole in self.holes)

    def bounding_box(self) -> Tuple[float, float, float, float]:
        xs = [p[0] for loop in self.outer_loops for p in loop]
        ys = [p[1] for loop in self.outer_loops for p in loop]
        return (min(xs), min(ys), max(xs), max(ys))

    def is_valid(self) -> bool:
        if len(self.vertices) < 3:
            return False
        points = [c for loop in self.outer_loops + self.holes for p in loop for c in p]
        if not all(math.isfinite(c) for c in points):
            return False
        return self.area() > 1e-9


def _positive(*values: float) -> bool:
    return all(v is not None and v > 0 for v in values)


def _circle_loop(radius: float, segments: int, clockwise: bool = False) -> Loop:
    sign = -1.0 if clockwise else 1.0
    return tuple(
        (radius * math.cos(sign * 2 * math.pi * i / segments),
         radius * math.sin(sign * 2 * math.pi * i / segments))
        for i in range(segments)
    )


def _h_loop(depth: float, width: float, web: float, flange: float) -> Optional[Loop]:
    if not _positive(depth, width, web, flange) or flange * 2 >= depth or web >= width:
        return None
    hw, hd, tw2 = width / 2, depth / 2, web / 2
    inner = hd - flange
    return (
        (-hw, -hd), (hw, -hd), (hw, -inner), (tw2, -inner),
        (tw2, inner), (hw, inner), (hw, hd), (-hw, hd),
        (-hw, inner), (-tw2, inner), (-tw2, -inner), (-hw, -inner),
    )


def _build_rectangle(p: RectangleParams) -> Optional[Profile]:
    if not _positive(p.width, p.height):
        return None
    hw, hh = p.width / 2, p.height / 2
    return Profile(((-hw, -hh), (hw, -hh), (hw, hh), (-hw, hh)))


def _build_circle(p: CircleParams) -> Optional[Profile]:
    if not _positive(p.radius) or p.segments < 3:
        return None
    return Profile(_circle_loop(p.radius, p.segments))


def _build_h(p: HParams) -> Optional[Profile]:
    loop = _h_loop(p.overall_depth, p.overall_width, p.web_thickness, p.flange_thickness)
    return Profile(loop) if loop else None


def _build_box(p: BoxParams) -> Optional[Profile]:
    if not _positive(p.width, p.height, p.wall_thickness):
        return None
    if p.wall_thickness * 2 >= min(p.width, p.height):
        return None
    hw, hh = p.width / 2, p.height / 2
    iw, ih = hw - p.wall_thickness, hh - p.wall_thickness
    outer = ((-hw, -hh), (hw, -hh), (hw, hh), (-hw, hh))
    hole = ((-iw, -ih), (-iw, ih), (iw, ih), (iw, -ih))
    return Profile(outer, holes=(hole,))


def _build_pipe(p: PipeParams) -> Optional[Profile]:
    if not _positive(p.outer_diameter, p.wall_thickness) or p.segments < 3:
        return None
    radius = p.outer_diameter / 2
    inner = max(0.0, radius - p.wall_thickness)
    if inner <= 0:
        return None
    return Profile(
        _circle_loop(radius, p.segments),
        holes=(_circle_loop(inner, p.segments, clockwise=True),),
    )


def _build_channel(p: ChannelParams) -> Optional[Profile]:
    d, fw, tw, tf = p.overall_depth, p.flange_width, p.web_thickness, p.flange_thickness
    if not _positive(d, fw, tw, tf) or tf * 2 >= d or tw >= fw:
        return None
    hd = d / 2
    loop = (
        (0.0, -hd), (fw, -hd), (fw, -hd + tf), (tw, -hd + tf),
        (tw, hd - tf), (fw, hd - tf), (fw, hd), (0.0, hd),
    )
    return Profile(_centered(loop))


def _build_l(p: LParams) -> Optional[Profile]:
    d, w, t = p.depth, p.width, p.thickness
    if not _positive(d, w, t) or t >= min(d, w):
        return None
    loop = ((0.0, 0.0), (w, 0.0), (w, t), (t, t), (t, d), (0.0, d))
    return Profile(_centered(loop))


def _build_t(p: TParams) -> Optional[Profile]:
    d, fw, tw, tf = p.overall_depth, p.flange_width, p.web_thickness, p.flange_thickness
    if not _positive(d, fw, tw, tf) or tf >= d or tw >= fw:
        return None
    stem = d - tf
    loop = (
        (-tw / 2, 0.0), (tw / 2, 0.0), (tw / 2, stem), (fw / 2, stem),
        (fw / 2, d), (-fw / 2, d), (-fw / 2, stem), (-tw / 2, stem),
    )
    return Profile(_centered(loop))


def _build_cross_h(p: CrossHParams) -> Optional[Profile]:
    arm_x = _h_loop(p.depth_x, p.width_x, p.web_thickness, p.flange_thickness)
    arm_y = _h_loop(p.depth_y, p.width_y, p.web_thickness, p.flange_thickness)
    if not arm_x or not arm_y:
        return None
    return Profile(arm_x, extra_outlines=(_rotate_quarter(arm_y),))


_BUILDERS: Dict[SectionFamily, Callable[..., Optional[Profile]]] = {
    SectionFamily.RECTANGLE: _build_rectangle,
    SectionFamily.CIRCLE: _build_circle,
    SectionFamily.H: _build_h,
    SectionFamily.BOX: _build_box,
    SectionFamily.PIPE: _build_pipe,
    SectionFamily.C: _build_channel,
    SectionFamily.L: _build_l,
    SectionFamily.T: _build_t,
    SectionFamily.CROSS_H: _build_cross_h,
}


def build_profile(family: SectionFamily, params: ProfileParams) -> Optional[Profile]:
    """断面形状を生成

    Args:
        family: 断面ファミリー
        params: ファミリーに対応するパラメータ

    Returns:
        Profile。パラメータ不足・形状として成立しない場合は None
    """
    family = SectionFamily(family)
    profile = _BUILDERS[family](params)
    if profile is None:
        logger.warning("断面形状を生成できません: %s %s", family.value, params)
        return None
    return Profile(
        vertices=profile.vertices,
        holes=profile.holes,
        extra_outlines=profile.extra_outlines,
        family=family,
    )


def rectangle_profile(width: float, height: float) -> Optional[Profile]:
    """矩形断面（基礎・ベースプレートなど寸法直指定用）"""
    return build_profile(SectionFamily.RECTANGLE, RectangleParams(width, height))


def polygon_profile(points: Sequence[Point2], holes: Sequence[Sequence[Point2]] = ()) -> Optional[Profile]:
    """任意多角形断面（スラブ・壁）

    向きを外形は反時計回り、穴は時計回りに揃えます。
    """
    if len(points) < 3:
        return None
    outer = tuple(points)
    if polygon_area(outer) < 0:
        outer = tuple(reversed(outer))
    hole_loops = []
    for hole in holes:
        loop = tuple(hole)
        if len(loop) < 3:
            continue
        if polygon_area(loop) > 0:
            loop = tuple(reversed(loop))
        hole_loops.append(loop)
    profile = Profile(outer, holes=tuple(hole_loops))
    return profile if profile.is_valid() else None
