"""布基礎・基礎柱ジェネレーター"""

from typing import List, Optional

from common.dimension_normalizer import derive_dimensions
from common.geometry import Vector3
from exceptions.custom_errors import SkipReason
from geometryEngine.context import GenerationContext
from geometryEngine.generators.base_generator import ElementGenerator
from geometryEngine.generators.footing_generator import _first_positive
from geometryEngine.metadata_builder import (
    PROFILE_SOURCE_CALCULATOR,
    PROFILE_SOURCE_FALLBACK,
    MetadataBuilder,
)
from geometryEngine.placement_calculator import PlacementCalculator, PlacementMode
from geometryEngine.profile_builder import build_profile
from geometryEngine.profile_parameter_mapper import RectangleParams
from geometryEngine.records import FoundationColumnRecord, StripFootingRecord
from geometryEngine.section_classifier import SectionFamily
from geometryEngine.solid import Solid

DEFAULT_STRIP_FOOTING_WIDTH = 600.0
DEFAULT_STRIP_FOOTING_HEIGHT = 400.0


class StripFootingGenerator(ElementGenerator):
    """布基礎: 2節点間の水平な矩形断面

    天端を level（未指定時は節点高さ）に揃え、断面高さ分だけ下に配置します。
    """

    element_name = "StripFooting"

    def generate(self, record: StripFootingRecord, context: GenerationContext) -> List[Solid]:
        validator = self._validator(record)
        start = self._point(context, record.start_node, record.start_coord)
        end = self._point(context, record.end_node, record.end_coord)
        validator.validate_node_positions([start, end])
        section = self._section(record, context, validator)

        dims = derive_dimensions(section.dimensions)
        width = _first_positive(dims, ("width_X", "width"), DEFAULT_STRIP_FOOTING_WIDTH)
        height = _first_positive(dims, ("depth", "height"), DEFAULT_STRIP_FOOTING_HEIGHT)

        if record.level is not None:
            start = Vector3(start.x, start.y, record.level)
            end = Vector3(end.x, end.y, record.level)
        lateral = self._lateral_offset(start, end, record.lateral_offset)
        placement = self._place(
            validator,
            PlacementCalculator.calculate_horizontal_placement,
            start,
            end,
            lateral,
            lateral,
            0.0,
            PlacementMode.TOP_ALIGNED.value,
            height,
        )

        params = RectangleParams(width, height)
        profile = build_profile(SectionFamily.RECTANGLE, params)
        validator.validate_profile(profile)
        metadata = MetadataBuilder.build(
            element_type=record.element_type,
            element_id=record.id,
            section_id=record.section_id,
            family=SectionFamily.RECTANGLE,
            profile_source=PROFILE_SOURCE_FALLBACK if dims is None else PROFILE_SOURCE_CALCULATOR,
            section_data=section.raw_data(),
            length=placement.length,
            width=width,
            height=height,
            level=record.level,
            lateral_offset=record.lateral_offset,
        )
        self.logger.debug(
            "%s %s: 長さ=%.0f, 幅=%.0f, 高さ=%.0f",
            record.element_type, record.id, placement.length, width, height,
        )
        return [
            Solid(
                element_id=record.id,
                element_type=record.element_type,
                section_family=SectionFamily.RECTANGLE,
                placement=placement,
                length=placement.length,
                profile=profile,
                profile_params=params,
                name=record.name,
                guid=record.guid,
                metadata=metadata,
            )
        ]

    @staticmethod
    def _lateral_offset(start: Vector3, end: Vector3, offset: float) -> Vector3:
        """平面内で材軸の左側へ offset ずらすベクトル"""
        plan = Vector3(end.x - start.x, end.y - start.y, 0.0)
        if not offset or plan.length() <= 0:
            return Vector3()
        return Vector3(-plan.y, plan.x, 0.0).normalized() * offset


class FoundationColumnGenerator(ElementGenerator):
    """基礎柱: 1節点から下向きに基礎部（FD）と立上り部（WR）

    立上り部は節点直下、基礎部はその下に配置します。
    立上り部の断面が解決できない場合は基礎部のみ生成します。
    """

    element_name = "FoundationColumn"

    def generate(self, record: FoundationColumnRecord, context: GenerationContext) -> List[Solid]:
        validator = self._validator(record)
        node = self._point(context, record.node, record.node_coord)
        validator.validate_node_positions([node], required=1)
        section = self._section(record, context, validator)
        if not record.length_fd or record.length_fd <= 0:
            raise validator.fail(SkipReason.INVALID_LENGTH, f"基礎部の長さが不正です: {record.length_fd}")
        length_wr = max(record.length_wr or 0.0, 0.0)
        resolver = self._resolver(context)

        fd_bottom = Vector3(node.x, node.y, node.z - record.length_fd - length_wr)
        fd_top = Vector3(node.x, node.y, node.z - length_wr)
        resolved = resolver.resolve(section)
        placement = self._vertical_placement(
            validator, fd_bottom, fd_top, record.offset, record.offset, record.rotate
        )
        metadata = self._metadata(
            record, section, resolved, placement.length,
            part="main", length_fd=record.length_fd, length_wr=length_wr,
        )
        solids = [self._single_solid(record, resolved, placement, validator, metadata)]

        wall_rise = self._wall_rise_solid(record, context, resolver, fd_top, node, length_wr)
        if wall_rise is not None:
            solids.append(wall_rise)
        return solids

    def _wall_rise_solid(self, record, context, resolver, bottom: Vector3, top: Vector3, length_wr: float) -> Optional[Solid]:
        if length_wr <= 0 or not record.section_wr_id:
            return None
        section = context.resolve_section(record.section_wr_id)
        if section is None:
            self.logger.warning(
                "%s %s: 立上り部の断面 %s が見つかりません", record.element_type, record.id, record.section_wr_id
            )
            return None
        resolved = resolver.resolve(section)
        if resolved.profile is None or not resolved.profile.is_valid():
            self.logger.warning("%s %s: 立上り部の断面を生成できません", record.element_type, record.id)
            return None
        validator = self._validator(record)
        placement = self._vertical_placement(validator, bottom, top, record.offset, record.offset, record.rotate)
        metadata = self._metadata(
            record, section, resolved, placement.length,
            part="wall_rise", length_fd=record.length_fd, length_wr=length_wr,
        )
        return self._single_solid(record, resolved, placement, validator, metadata, part="wall_rise")
