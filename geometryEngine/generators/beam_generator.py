"""大梁・小梁ジェネレーター"""

import math
from typing import List

from geometryEngine.context import GenerationContext
from geometryEngine.generators.base_generator import ElementGenerator
from geometryEngine.metadata_builder import MetadataBuilder
from geometryEngine.placement_calculator import PlacementCalculator, PlacementMode
from geometryEngine.records import BeamRecord
from geometryEngine.section_classifier import resolve_rotation_with_reference
from geometryEngine.solid import Solid


class BeamGenerator(ElementGenerator):
    """梁（Girder / Beam）

    水平配置。配置基準はレコード指定 → 設定既定値の順。
    Haunch / Joint / FiveTypes / Taper は多断面ソリッドになります。
    """

    element_name = "Beam"
    supports_multi_section = True

    def _placement_mode(self, record, context: GenerationContext) -> str:
        """不明な指定は警告して設定既定値（それも不明なら center）に戻す"""
        candidates = (
            ("レコード", getattr(record, "placement_mode", None)),
            ("設定", context.config.default_placement_mode),
        )
        for source, value in candidates:
            if not value:
                continue
            try:
                return PlacementMode.parse(value).value
            except ValueError as e:
                self.logger.warning("%s %s: %sの%s", record.element_type, record.id, source, e)
        return PlacementMode.CENTER.value

    def generate(self, record: BeamRecord, context: GenerationContext) -> List[Solid]:
        validator = self._validator(record)
        start = self._point(context, record.start_node, record.start_coord)
        end = self._point(context, record.end_node, record.end_coord)
        validator.validate_node_positions([start, end])
        section = self._section(record, context, validator)
        resolver = self._resolver(context)

        expansion = resolver.expand_variants(section)
        primary = resolver.resolve(section, expansion)
        validator.validate_profile(primary.profile)

        mode = self._placement_mode(record, context)
        height = resolver.section_height(primary)
        rotation = resolve_rotation_with_reference(record.rotate, section.is_reference_direction)
        placement = self._place(
            validator,
            PlacementCalculator.calculate_horizontal_placement,
            start,
            end,
            record.offset_start,
            record.offset_end,
            math.radians(rotation),
            mode,
            height,
        )

        positioned = expansion.positioned if self.supports_multi_section else []
        metadata = MetadataBuilder.build_for_beam(
            element_type=record.element_type,
            element_id=record.id,
            section_id=record.section_id,
            family=primary.family,
            profile_source=primary.profile_source,
            section_data=section.raw_data(),
            length=placement.length,
            placement_mode=mode,
            section_height=height,
            multi_section=len(positioned) >= 2,
            section_count=max(1, len(positioned)),
        )

        if len(positioned) >= 2:
            spec = resolver.build_variant_spec(positioned, primary.family)
            haunch_start = record.haunch_start or record.joint_start
            haunch_end = record.haunch_end or record.joint_end
            solid = self._multi_solid(
                record, primary, spec, placement, context, validator, metadata,
                haunch_start, haunch_end,
            )
        else:
            solid = self._single_solid(record, primary, placement, validator, metadata)
        return [solid]
