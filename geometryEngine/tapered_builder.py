"""Multi-Section / Tapered Solid Builder

変断面部材（テーパー・ハンチ・多断面）の断面補間と、材軸方向への
ロフトメッシュ生成を行います。局所座標系では材軸が +Z で、
部材は z = -L/2 から +L/2 に配置されます。
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, Union

from exceptions.custom_errors import ProfileMismatchError
from geometryEngine.profile_builder import Loop, Profile

logger = logging.getLogger(__name__)

DEFAULT_TRANSITION_EPSILON = 0.1


class SectionPosition(str, Enum):
    """断面位置タグ"""

    BOTTOM = "BOTTOM"
    START = "START"
    HAUNCH_S = "HAUNCH_S"
    CENTER = "CENTER"
    HAUNCH_E = "HAUNCH_E"
    TOP = "TOP"
    END = "END"

    @classmethod
    def parse(cls, value: Union[str, float, "SectionPosition"]) -> Union["SectionPosition", float]:
        """位置文字列（または数値距離）を解釈"""
        if isinstance(value, SectionPosition):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        text = str(value).strip().upper()
        try:
            return cls(text)
        except ValueError:
            return float(text)


@dataclass(frozen=True)
class PositionedProfile:
    position: Union[SectionPosition, float]
    profile: Profile


@dataclass(frozen=True)
class MultiSectionSpec:
    """位置付き断面の並び（2断面以上）"""

    sections: Tuple[PositionedProfile, ...]

    def __post_init__(self):
        if len(self.sections) < 2:
            raise ValueError(f"多断面には2断面以上が必要です: {len(self.sections)}")

    @property
    def positions(self) -> Tuple[Union[SectionPosition, float], ...]:
        return tuple(s.position for s in self.sections)

    def profile_at(self, position: SectionPosition) -> Optional[Profile]:
        for section in self.sections:
            if section.position == position:
                return section.profile
        return None


@dataclass(frozen=True)
class SegmentBoundary:
    """材軸方向の断面配置（position は始端からの距離 mm）"""

    position: float
    profile: Profile


@dataclass
class LoftedMesh:
    """ロフトメッシュ（局所座標）"""

    vertices: List[Tuple[float, float, float]] = field(default_factory=list)
    faces: List[Tuple[int, int, int]] = field(default_factory=list)
    stations: Tuple[SegmentBoundary, ...] = ()
    length: float = 0.0

    def section_at(self, distance: float) -> Profile:
        """始端から distance の位置の断面（区間内は線形補間）"""
        stations = self.stations
        if distance <= stations[0].position:
            return stations[0].profile
        for current, following in zip(stations, stations[1:]):
            if distance <= following.position:
                span = following.position - current.position
                t = 0.0 if span <= 0 else (distance - current.position) / span
                return interpolate_profiles(current.profile, following.profile, t)
        return stations[-1].profile


def validate_profiles(start: Profile, end: Profile) -> None:
    """補間可能かチェック

    Raises:
        ProfileMismatchError: 頂点数（外形ループ）が一致しない場合
    """
    if len(start.outer_loops) != len(end.outer_loops):
        raise ProfileMismatchError(len(start.outer_loops), len(end.outer_loops))
    for a, b in zip(start.outer_loops, end.outer_loops):
        if len(a) != len(b):
            raise ProfileMismatchError(len(a), len(b))


def _lerp_loop(a: Loop, b: Loop, t: float) -> Loop:
    return tuple(
        (pa[0] + (pb[0] - pa[0]) * t, pa[1] + (pb[1] - pa[1]) * t)
        for pa, pb in zip(a, b)
    )


def _holes_compatible(start: Profile, end: Profile) -> bool:
    return len(start.holes) == len(end.holes) and all(
        len(a) == len(b) for a, b in zip(start.holes, end.holes)
    )


def interpolate_profiles(start: Profile, end: Profile, t: float) -> Profile:
    """2断面の線形補間

    穴は両断面で構成が一致する場合のみ補間し、一致しない場合は省略します。

    Raises:
        ProfileMismatchError: 外形の頂点数が一致しない場合
    """
    validate_profiles(start, end)
    t = max(0.0, min(1.0, t))
    holes: Tuple[Loop, ...] = ()
    if _holes_compatible(start, end):
        holes = tuple(_lerp_loop(a, b, t) for a, b in zip(start.holes, end.holes))
    return Profile(
        vertices=_lerp_loop(start.vertices, end.vertices, t),
        holes=holes,
        extra_outlines=tuple(
            _lerp_loop(a, b, t) for a, b in zip(start.extra_outlines, end.extra_outlines)
        ),
        family=start.family,
    )


def generate_intermediate_profiles(start: Profile, end: Profile, divisions: int) -> List[Profile]:
    """始端・終端を含む divisions+1 個の補間断面"""
    divisions = max(1, divisions)
    return [interpolate_profiles(start, end, i / divisions) for i in range(divisions + 1)]


def _clamp(value: float, length: float) -> float:
    return max(0.0, min(length, value))


def calculate_segment_boundaries(
    spec: MultiSectionSpec,
    length: float,
    haunch_start: float = 0.0,
    haunch_end: float = 0.0,
    epsilon: float = DEFAULT_TRANSITION_EPSILON,
) -> List[SegmentBoundary]:
    """断面の材軸方向配置を計算

    Args:
        spec: 位置付き断面
        length: 部材長さ
        haunch_start: 始端側ハンチ（継手）長さ
        haunch_end: 終端側ハンチ（継手）長さ
        epsilon: 断面切替部の遷移幅

    Returns:
        位置順に並んだ境界リスト
    """
    P = SectionPosition
    start = spec.profile_at(P.START)
    center = spec.profile_at(P.CENTER)
    end = spec.profile_at(P.END)
    hs = haunch_start if haunch_start and haunch_start > 0 else 0.0
    he = haunch_end if haunch_end and haunch_end > 0 else 0.0
    if hs + he > length > 0:
        # 両端ハンチが部材長を超える場合は比率を保って部材長に収める
        scale = length / (hs + he)
        logger.warning(
            "ハンチ長さの合計 %.1f が部材長さ %.1f を超えるため縮小します", hs + he, length
        )
        hs, he = hs * scale, he * scale
    count = len(spec.sections)

    if start and center and end and count == 3 and (hs > 0 or he > 0):
        points = [(0.0, start)]
        if hs > 0:
            points += [(hs - epsilon, start), (hs, center)]
        else:
            points.append((epsilon, center))
        if he > 0:
            if hs <= 0:
                points.append((length / 2, center))
            points += [(length - he, center), (length - he + epsilon, end)]
        points.append((length, end))
        boundaries = [SegmentBoundary(_clamp(pos, length), prof) for pos, prof in points]
        boundaries.sort(key=lambda b: b.position)
        return boundaries

    if start and center and count == 2:
        transition = hs if hs > 0 else length * 0.2
        return [
            SegmentBoundary(0.0, start),
            SegmentBoundary(_clamp(transition, length), center),
            SegmentBoundary(length, center),
        ]

    if center and end and count == 2:
        transition = length - he if he > 0 else length * 0.8
        return [
            SegmentBoundary(0.0, center),
            SegmentBoundary(_clamp(transition, length), end),
            SegmentBoundary(length, end),
        ]

    if start and end and count == 2:
        return [SegmentBoundary(0.0, start), SegmentBoundary(length, end)]

    fixed: Dict[SectionPosition, float] = {
        P.START: 0.0,
        P.BOTTOM: 0.0,
        P.HAUNCH_S: hs,
        P.CENTER: length / 2,
        P.HAUNCH_E: length - he,
        P.END: length,
        P.TOP: length,
    }
    boundaries = []
    for index, section in enumerate(spec.sections):
        if isinstance(section.position, SectionPosition):
            position = fixed[section.position]
        elif isinstance(section.position, (int, float)):
            position = float(section.position)
        else:
            position = index / (count - 1) * length
        boundaries.append(SegmentBoundary(_clamp(position, length), section.profile))
    boundaries.sort(key=lambda b: b.position)
    return boundaries


def _add_ring(mesh: LoftedMesh, loop: Loop, z: float) -> int:
    base = len(mesh.vertices)
    mesh.vertices.extend((x, y, z) for x, y in loop)
    return base


def _add_side_faces(mesh: LoftedMesh, lower: int, upper: int, count: int, flip: bool) -> None:
    for i in range(count):
        j = (i + 1) % count
        a, b, c, d = lower + i, lower + j, upper + i, upper + j
        if flip:
            mesh.faces.append((a, c, b))
            mesh.faces.append((b, c, d))
        else:
            mesh.faces.append((a, b, c))
            mesh.faces.append((b, d, c))


def _add_fan_cap(mesh: LoftedMesh, base: int, count: int, reverse: bool) -> None:
    for i in range(1, count - 1):
        if reverse:
            mesh.faces.append((base, base + i + 1, base + i))
        else:
            mesh.faces.append((base, base + i, base + i + 1))


def _nearest_offset(outer: Loop, hole: Loop) -> int:
    ox, oy = outer[0]
    distances = [(hx - ox) ** 2 + (hy - oy) ** 2 for hx, hy in hole]
    return distances.index(min(distances))


def _add_ring_cap(mesh: LoftedMesh, outer_base: int, outer: Loop, hole_base: int, hole: Loop, reverse: bool) -> None:
    # 外形と穴（同頂点数）の間を帯状に張る。穴は時計回りなので逆順で対応付ける
    count = len(outer)
    reordered = [len(hole) - 1 - k for k in range(len(hole))]
    offset = _nearest_offset(outer, tuple(hole[k] for k in reordered))
    mapping = [reordered[(i + offset) % count] for i in range(count)]
    for i in range(count):
        j = (i + 1) % count
        a, b = outer_base + i, outer_base + j
        c, d = hole_base + mapping[i], hole_base + mapping[j]
        if reverse:
            mesh.faces.append((a, c, b))
            mesh.faces.append((b, c, d))
        else:
            mesh.faces.append((a, b, c))
            mesh.faces.append((b, d, c))


def _loft(stations: Sequence[SegmentBoundary], length: float) -> LoftedMesh:
    mesh = LoftedMesh(stations=tuple(stations), length=length)
    first = stations[0].profile
    use_holes = all(_holes_compatible(first, s.profile) for s in stations)

    ring_bases: List[Dict[str, List[int]]] = []
    for station in stations:
        z = station.position - length / 2
        profile = station.profile
        entry = {
            "outer": [_add_ring(mesh, loop, z) for loop in profile.outer_loops],
            "holes": [_add_ring(mesh, loop, z) for loop in profile.holes] if use_holes else [],
        }
        ring_bases.append(entry)

    for lower, upper in zip(ring_bases, ring_bases[1:]):
        for k, loop in enumerate(first.outer_loops):
            _add_side_faces(mesh, lower["outer"][k], upper["outer"][k], len(loop), flip=False)
        for k, loop in enumerate(first.holes if use_holes else ()):
            _add_side_faces(mesh, lower["holes"][k], upper["holes"][k], len(loop), flip=True)

    for index, reverse in ((0, True), (len(stations) - 1, False)):
        profile = stations[index].profile
        bases = ring_bases[index]
        single_ring_hole = (
            use_holes
            and len(profile.holes) == 1
            and len(profile.holes[0]) == len(profile.vertices)
        )
        if single_ring_hole:
            _add_ring_cap(
                mesh, bases["outer"][0], profile.vertices,
                bases["holes"][0], profile.holes[0], reverse,
            )
            loops = profile.extra_outlines
            outer_bases = bases["outer"][1:]
        else:
            loops = profile.outer_loops
            outer_bases = bases["outer"]
        for base, loop in zip(outer_bases, loops):
            _add_fan_cap(mesh, base, len(loop), reverse)
    return mesh


def build_tapered_solid(start: Profile, end: Profile, length: float) -> Optional[LoftedMesh]:
    """2断面の線形テーパーソリッド

    Raises:
        ProfileMismatchError: 頂点数が一致しない場合
    """
    if length <= 0:
        return None
    validate_profiles(start, end)
    stations = (SegmentBoundary(0.0, start), SegmentBoundary(length, end))
    return _loft(stations, length)


def build_multi_section_solid(
    spec: Optional[MultiSectionSpec],
    length: float,
    haunch_start: float = 0.0,
    haunch_end: float = 0.0,
    epsilon: float = DEFAULT_TRANSITION_EPSILON,
) -> Optional[LoftedMesh]:
    """多断面ソリッド（2断面は単純テーパー）

    Returns:
        LoftedMesh。断面が2未満・長さ0の場合は None

    Raises:
        ProfileMismatchError: 頂点数が一致しない場合
    """
    if spec is None or len(spec.sections) < 2 or length <= 0:
        return None
    first = spec.sections[0].profile
    for section in spec.sections[1:]:
        validate_profiles(first, section.profile)

    boundaries = calculate_segment_boundaries(spec, length, haunch_start, haunch_end, epsilon)
    stations: List[SegmentBoundary] = []
    for boundary in boundaries:
        if stations and abs(boundary.position - stations[-1].position) < 1e-9:
            # 同一位置の重複断面は後勝ち
            stations[-1] = boundary
            continue
        stations.append(boundary)
    if len(stations) < 2:
        logger.warning("有効な断面区間がありません: length=%s", length)
        return None
    logger.debug("多断面ロフト: %s", [round(s.position, 3) for s in stations])
    return _loft(stations, length)
