"""基礎（フーチング）ジェネレーター"""

import math
from typing import List

from common.dimension_normalizer import derive_dimensions
from geometryEngine.context import GenerationContext
from geometryEngine.generators.base_generator import ElementGenerator
from geometryEngine.metadata_builder import (
    PROFILE_SOURCE_CALCULATOR,
    PROFILE_SOURCE_FALLBACK,
    MetadataBuilder,
)
from geometryEngine.placement_calculator import PlacementCalculator
from geometryEngine.profile_builder import build_profile
from geometryEngine.profile_parameter_mapper import RectangleParams
from geometryEngine.records import FootingRecord
from geometryEngine.section_classifier import SectionFamily, resolve_rotation_with_reference
from geometryEngine.solid import Solid

DEFAULT_FOOTING_WIDTH = 1000.0
DEFAULT_FOOTING_DEPTH = 1500.0


def _first_positive(dims, keys, default: float) -> float:
    if dims is not None:
        for key in keys:
            value = dims.values.get(key)
            if value is not None and value > 0:
                return value
    return default


class FootingGenerator(ElementGenerator):
    """基礎: 1節点、底面レベルから depth 分の直方体"""

    element_name = "Footing"

    def generate(self, record: FootingRecord, context: GenerationContext) -> List[Solid]:
        validator = self._validator(record)
        node = self._point(context, record.node, record.node_coord)
        validator.validate_node_positions([node], required=1)
        section = self._section(record, context, validator)

        dims = derive_dimensions(section.dimensions)
        width_x = _first_positive(dims, ("width_X", "width_x", "B_X", "width"), DEFAULT_FOOTING_WIDTH)
        width_y = _first_positive(dims, ("width_Y", "width_y", "B_Y", "height"), DEFAULT_FOOTING_WIDTH)
        depth = _first_positive(dims, ("depth", "D_footing", "thickness"), DEFAULT_FOOTING_DEPTH)

        rotation = resolve_rotation_with_reference(record.rotate, section.is_reference_direction)
        placement = self._place(
            validator,
            PlacementCalculator.calculate_single_node_placement,
            node,
            record.level_bottom,
            depth,
            record.offset,
            math.radians(rotation),
        )

        params = RectangleParams(width_x, width_y)
        profile = build_profile(SectionFamily.RECTANGLE, params)
        validator.validate_profile(profile)
        metadata = MetadataBuilder.build_for_footing(
            element_type=record.element_type,
            element_id=record.id,
            section_id=record.section_id,
            family=SectionFamily.RECTANGLE,
            profile_source=PROFILE_SOURCE_FALLBACK if dims is None else PROFILE_SOURCE_CALCULATOR,
            section_data=section.raw_data(),
            length=placement.length,
            depth=depth,
            level_bottom=record.level_bottom,
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
