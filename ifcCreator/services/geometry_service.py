"""Geometry Service

Solid（局所断面＋剛体配置）から IFC の形状表現と配置を作成します。
押し出しは局所 -L/2 から +Z 方向に L、多断面は区間ごとに分割します。
"""

import logging
from typing import List

from common.geometry import UNIT_X, UNIT_Z, Vector3
from exceptions.custom_errors import IFCGenerationError
from geometryEngine.solid import Solid
from ifcCreator.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

MIN_SEGMENT_LENGTH = 1e-6


class GeometryService:
    """ジオメトリ構築サービス"""

    def __init__(self, ifc_file, model_context, profile_service: ProfileService = None):
        self.file = ifc_file
        self.model_context = model_context
        self.profile_service = profile_service or ProfileService(ifc_file)

    def _direction(self, vector: Vector3):
        unit = vector.normalized()
        return self.file.createIfcDirection([unit.x, unit.y, unit.z])

    def _axis_placement(self, location: Vector3, axis: Vector3 = UNIT_Z, ref: Vector3 = UNIT_X):
        return self.file.createIfcAxis2Placement3D(
            Location=self.file.createIfcCartesianPoint(
                [float(location.x), float(location.y), float(location.z)]
            ),
            Axis=self._direction(axis),
            RefDirection=self._direction(ref),
        )

    def create_local_placement(self, solid: Solid, relative_to=None):
        """配置の回転から IfcLocalPlacement を作成"""
        placement = solid.placement
        axis = placement.rotation.rotate(UNIT_Z)
        ref = placement.rotation.rotate(UNIT_X)
        return self.file.createIfcLocalPlacement(
            PlacementRelTo=relative_to,
            RelativePlacement=self._axis_placement(placement.center, axis, ref),
        )

    def _extrusion(self, profile_def, start_z: float, depth: float, end_profile_def=None):
        position = self._axis_placement(Vector3(0.0, 0.0, start_z))
        direction = self.file.createIfcDirection([0.0, 0.0, 1.0])
        if end_profile_def is not None:
            return self.file.createIfcExtrudedAreaSolidTapered(
                SweptArea=profile_def,
                Position=position,
                ExtrudedDirection=direction,
                Depth=depth,
                EndSweptArea=end_profile_def,
            )
        return self.file.createIfcExtrudedAreaSolid(
            SweptArea=profile_def,
            Position=position,
            ExtrudedDirection=direction,
            Depth=depth,
        )

    def create_solid_items(self, solid: Solid) -> List:
        """形状表現アイテムを作成

        Raises:
            IFCGenerationError: 断面がない場合
        """
        half = solid.length / 2
        if solid.is_multi_section and solid.mesh is not None:
            return self._multi_section_items(solid, half)
        if solid.profile is None:
            raise IFCGenerationError(
                f"{solid.element_type} {solid.element_id}: 断面がないため形状を作成できません"
            )
        profile_def = self.profile_service.create_profile(solid.profile, solid.profile_params)
        return [self._extrusion(profile_def, -half, solid.length)]

    def _multi_section_items(self, solid: Solid, half: float) -> List:
        """区間ごとの押し出し（断面が変わる区間はテーパー）"""
        items = []
        stations = solid.mesh.stations
        for lower, upper in zip(stations, stations[1:]):
            depth = upper.position - lower.position
            if depth < MIN_SEGMENT_LENGTH:
                continue
            start_def = self.profile_service.create_arbitrary_profile(lower.profile)
            end_def = None
            if lower.profile != upper.profile:
                end_def = self.profile_service.create_arbitrary_profile(upper.profile)
            items.append(self._extrusion(start_def, lower.position - half, depth, end_def))
        logger.debug(
            "%s %s: 多断面を %d 区間で出力", solid.element_type, solid.element_id, len(items)
        )
        return items

    def create_product_shape(self, solid: Solid):
        """IfcProductDefinitionShape を作成"""
        items = self.create_solid_items(solid)
        representation = self.file.createIfcShapeRepresentation(
            ContextOfItems=self.model_context,
            RepresentationIdentifier="Body",
            RepresentationType="AdvancedSweptSolid" if len(items) > 1 or solid.is_multi_section else "SweptSolid",
            Items=items,
        )
        return self.file.createIfcProductDefinitionShape(Representations=[representation])
