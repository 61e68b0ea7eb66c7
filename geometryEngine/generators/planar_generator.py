"""面要素（スラブ・壁）ジェネレーター"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from common.dimension_normalizer import derive_dimensions
from common.geometry import EPSILON, UNIT_Z, Vector3
from exceptions.custom_errors import SkipReason
from geometryEngine.context import GenerationContext
from geometryEngine.generators.base_generator import ElementGenerator
from geometryEngine.mesh_validator import MeshCreationValidator
from geometryEngine.metadata_builder import (
    PROFILE_SOURCE_CALCULATOR,
    PROFILE_SOURCE_FALLBACK,
    MetadataBuilder,
)
from geometryEngine.placement_calculator import LocalBasis, PlacementCalculator
from geometryEngine.profile_builder import Point2, polygon_centroid, polygon_profile
from geometryEngine.records import SlabRecord, WallRecord
from geometryEngine.section_classifier import SectionFamily
from geometryEngine.solid import Solid

logger = logging.getLogger(__name__)

DEFAULT_SLAB_DEPTH = 150.0
DEFAULT_WALL_THICKNESS = 200.0
OPENING_CLEARANCE = 1.0
MIN_OPENING_SIZE = 10.0
BOTTOM_EDGE_TOLERANCE = 1.0


def newell_normal(points: Sequence[Vector3]) -> Vector3:
    """ニューウェル法による多角形法線（正規化前）"""
    nx = ny = nz = 0.0
    count = len(points)
    for i in range(count):
        p, q = points[i], points[(i + 1) % count]
        nx += (p.y - q.y) * (p.z + q.z)
        ny += (p.z - q.z) * (p.x + q.x)
        nz += (p.x - q.x) * (p.y + q.y)
    return Vector3(nx, ny, nz)


def project_to_basis(points: Sequence[Vector3], origin: Vector3, basis: LocalBasis) -> List[Point2]:
    return [
        ((p - origin).dot(basis.x_axis), (p - origin).dot(basis.y_axis))
        for p in points
    ]


class PlanarElementGenerator(ElementGenerator):
    """面要素の共通処理"""

    thickness_keys: Tuple[str, ...] = ()
    default_thickness = 0.0

    def _thickness(self, section) -> Tuple[float, Optional[object]]:
        dims = derive_dimensions(section.dimensions)
        if dims is not None:
            for key in self.thickness_keys:
                value = dims.get(key)
                if value is not None and value > 0:
                    return value, dims
        return self.default_thickness, dims

    def _planar_solid(
        self,
        record,
        section,
        validator: MeshCreationValidator,
        outline: Sequence[Point2],
        holes: Sequence[Sequence[Point2]],
        origin: Vector3,
        basis: LocalBasis,
        thickness: float,
        offset_along_normal: float,
        dims,
        **extra: Any,
    ) -> Solid:
        """平面内の多角形を法線方向に厚み付け

        断面は図心を局所原点に移動し、配置中心をその分ずらします。
        offset_along_normal は面の基準位置から厚さ中心までの法線方向距離です。
        """
        cx, cy = polygon_centroid(outline)
        outer = [(x - cx, y - cy) for x, y in outline]
        hole_loops = [[(x - cx, y - cy) for x, y in hole] for hole in holes]
        profile = polygon_profile(outer, hole_loops)
        validator.validate_profile(profile)

        center = origin + basis.x_axis * cx + basis.y_axis * cy + basis.z_axis * offset_along_normal
        placement = self._place(validator, PlacementCalculator.placement_from_basis, center, basis, thickness)
        metadata: Dict[str, Any] = MetadataBuilder.build(
            element_type=record.element_type,
            element_id=record.id,
            section_id=record.section_id,
            family=SectionFamily.RECTANGLE,
            profile_source=PROFILE_SOURCE_FALLBACK if dims is None else PROFILE_SOURCE_CALCULATOR,
            section_data=section.raw_data(),
            length=placement.length,
            vertex_count=profile.vertex_count,
            opening_count=len(profile.holes),
            **extra,
        )
        return Solid(
            element_id=record.id,
            element_type=record.element_type,
            section_family=SectionFamily.RECTANGLE,
            placement=placement,
            length=placement.length,
            profile=profile,
            name=record.name,
            guid=record.guid,
            metadata=metadata,
        )


class SlabGenerator(PlanarElementGenerator):
    """スラブ: 節点面を天端として下方へ厚さ分押し出し"""

    element_name = "Slab"
    thickness_keys = ("depth", "thickness", "t")
    default_thickness = DEFAULT_SLAB_DEPTH

    def generate(self, record: SlabRecord, context: GenerationContext) -> List[Solid]:
        validator = self._validator(record)
        points = self._points(context, record.node_ids, record.coords)
        validator.validate_node_positions(points, required=3)
        if record.node_ids and not record.coords:
            points = [
                p + record.offsets.get(node_id, Vector3())
                for p, node_id in zip(points, record.node_ids)
            ]
        section = self._section(record, context, validator)
        depth, dims = self._thickness(section)

        normal = newell_normal(points)
        if normal.length() < EPSILON:
            raise validator.fail(SkipReason.DEGENERATE_GEOMETRY, "スラブ面の法線を計算できない")
        z_axis = normal.normalized()
        if z_axis.z < 0:
            z_axis = -z_axis
        edge = points[1] - points[0]
        x_dir = edge - z_axis * edge.dot(z_axis)
        if x_dir.length() < EPSILON:
            raise validator.fail(SkipReason.DEGENERATE_GEOMETRY, "スラブの辺が縮退している")
        x_axis = x_dir.normalized()
        basis = LocalBasis(x_axis, z_axis.cross(x_axis).normalized(), z_axis)

        outline = project_to_basis(points, points[0], basis)
        solid = self._planar_solid(
            record, section, validator, outline, (), points[0], basis,
            depth, -depth / 2, dims, depth=depth,
        )
        return [solid]


class WallGenerator(PlanarElementGenerator):
    """壁: 下端辺の方向を壁面X、全体Zを壁面Yとし、節点面を厚さ中心に配置"""

    element_name = "Wall"
    thickness_keys = ("t", "thickness", "wall_thickness")
    default_thickness = DEFAULT_WALL_THICKNESS

    @staticmethod
    def _wall_basis(points: Sequence[Vector3]) -> Optional[Tuple[Vector3, LocalBasis]]:
        min_z = min(p.z for p in points)
        bottom = [p for p in points if abs(p.z - min_z) <= BOTTOM_EDGE_TOLERANCE]
        candidates = [bottom[:2]] if len(bottom) >= 2 else []
        candidates.append(list(points[:2]))
        for a, b in candidates:
            direction = Vector3(b.x - a.x, b.y - a.y, 0.0)
            if direction.length() >= EPSILON:
                x_axis = direction.normalized()
                z_axis = x_axis.cross(UNIT_Z).normalized()
                return a, LocalBasis(x_axis, UNIT_Z, z_axis)
        return None

    def _opening_holes(self, record: WallRecord, outline: Sequence[Point2]) -> List[List[Point2]]:
        """開口を壁外形の 1mm 内側にクリップ（10mm 未満は除外）"""
        min_u = min(p[0] for p in outline)
        max_u = max(p[0] for p in outline)
        min_v = min(p[1] for p in outline)
        max_v = max(p[1] for p in outline)
        holes = []
        for opening in record.openings:
            u0 = max(min_u + opening.position_x, min_u + OPENING_CLEARANCE)
            v0 = max(min_v + opening.position_y, min_v + OPENING_CLEARANCE)
            u1 = min(min_u + opening.position_x + opening.length_x, max_u - OPENING_CLEARANCE)
            v1 = min(min_v + opening.position_y + opening.length_y, max_v - OPENING_CLEARANCE)
            if u1 - u0 < MIN_OPENING_SIZE or v1 - v0 < MIN_OPENING_SIZE:
                self.logger.debug("%s %s: 開口 %s は小さすぎるため除外します", record.element_type, record.id, opening.id)
                continue
            holes.append([(u0, v0), (u0, v1), (u1, v1), (u1, v0)])
        return holes

    def generate(self, record: WallRecord, context: GenerationContext) -> List[Solid]:
        validator = self._validator(record)
        points = self._points(context, record.node_ids, record.coords)
        validator.validate_node_positions(points, required=3)
        section = self._section(record, context, validator)
        thickness, dims = self._thickness(section)

        found = self._wall_basis(points)
        if found is None:
            raise validator.fail(SkipReason.DEGENERATE_GEOMETRY, "壁の方向を計算できない")
        origin, basis = found

        outline = project_to_basis(points, origin, basis)
        width = max(p[0] for p in outline) - min(p[0] for p in outline)
        height = max(p[1] for p in outline) - min(p[1] for p in outline)
        holes = self._opening_holes(record, outline)
        solid = self._planar_solid(
            record, section, validator, outline, holes, origin, basis,
            thickness, 0.0, dims, width=width, height=height, wall_thickness=thickness,
        )
        return [solid]
