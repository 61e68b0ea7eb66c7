"""柱・間柱ジェネレーター"""

from typing import List, Optional

from common.dimension_normalizer import parse_number
from common.geometry import Vector3
from geometryEngine.context import GenerationContext
from geometryEngine.generators.base_generator import ElementGenerator
from geometryEngine.metadata_builder import MetadataBuilder, PROFILE_SOURCE_CALCULATOR
from geometryEngine.placement_calculator import Placement
from geometryEngine.profile_builder import rectangle_profile
from geometryEngine.profile_parameter_mapper import RectangleParams
from geometryEngine.records import ColumnRecord, SectionRecord
from geometryEngine.section_classifier import SectionFamily, resolve_rotation_with_reference
from geometryEngine.solid import Solid


class ColumnGenerator(ElementGenerator):
    """柱（Column / Post）

    鉛直配置。NotSame バリアントは多断面ソリッド、十字H形は2アーム、
    SRC はコンクリート部、ベースプレート指定があれば柱脚プレートを追加します。
    """

    element_name = "Column"

    def generate(self, record: ColumnRecord, context: GenerationContext) -> List[Solid]:
        validator = self._validator(record)
        bottom = self._point(context, record.bottom_node, record.bottom_coord)
        top = self._point(context, record.top_node, record.top_coord)
        validator.validate_node_positions([bottom, top])
        section = self._section(record, context, validator)
        resolver = self._resolver(context)

        rotation = resolve_rotation_with_reference(record.rotate, section.is_reference_direction)
        placement = self._vertical_placement(
            validator, bottom, top, record.offset_bottom, record.offset_top, rotation
        )

        solids: Optional[List[Solid]] = None
        if resolver.is_cross_h(section):
            solids = self._cross_h_solids(record, section, resolver, placement, bottom, top, rotation, validator)

        if solids is None:
            expansion = resolver.expand_variants(section)
            primary = resolver.resolve(section, expansion)
            validator.validate_profile(primary.profile)
            if len(expansion.variants) >= 2:
                spec = resolver.build_variant_spec(expansion.variants, primary.family)
                metadata = MetadataBuilder.build_for_column(
                    element_type=record.element_type,
                    element_id=record.id,
                    section_id=record.section_id,
                    family=primary.family,
                    profile_source=primary.profile_source,
                    section_data=section.raw_data(),
                    length=placement.length,
                    section_mode="multi",
                    section_count=len(spec.sections) if spec else 0,
                )
                main = self._multi_solid(record, primary, spec, placement, context, validator, metadata)
            else:
                metadata = self._metadata(record, section, primary, placement.length, section_mode="single", section_count=1, part="main")
                main = self._single_solid(record, primary, placement, validator, metadata)
            solids = [main]
            concrete = self._concrete_solid(record, section, resolver, placement)
            if concrete is not None:
                solids.append(concrete)

        base_plate = self._base_plate_solid(record, section, bottom, rotation)
        if base_plate is not None:
            solids.append(base_plate)
        self.logger.debug("%s %s: %d ソリッド", record.element_type, record.id, len(solids))
        return solids

    def _cross_h_solids(self, record, section, resolver, placement, bottom, top, rotation, validator) -> Optional[List[Solid]]:
        arms = resolver.resolve_cross_h_arms(section)
        if arms is None:
            return None
        solids = []
        for part, arm, roll in (("cross_h_x", arms[0], rotation), ("cross_h_y", arms[1], rotation + 90.0)):
            arm_placement = placement
            if roll != rotation:
                arm_placement = self._vertical_placement(
                    validator, bottom, top, record.offset_bottom, record.offset_top, roll
                )
            metadata = self._metadata(record, section, arm, arm_placement.length, part=part, section_mode="cross_h")
            solids.append(self._single_solid(record, arm, arm_placement, validator, metadata, part=part))
        solids[0].guid = record.guid
        return solids

    def _concrete_solid(self, record, section: SectionRecord, resolver, placement: Placement) -> Optional[Solid]:
        """SRC柱のコンクリート部"""
        if not section.concrete:
            return None
        resolved = resolver.resolve_bag(section.concrete)
        if resolved.profile is None or not resolved.profile.is_valid():
            self.logger.warning("%s %s: コンクリート断面を生成できません", record.element_type, record.id)
            return None
        metadata = self._metadata(record, section, resolved, placement.length, part="concrete")
        return Solid(
            element_id=record.id,
            element_type=record.element_type,
            section_family=resolved.family,
            placement=placement,
            length=placement.length,
            profile=resolved.profile,
            profile_params=resolved.params,
            part="concrete",
            name=record.name,
            metadata=metadata,
        )

    def _base_plate_solid(self, record, section: SectionRecord, bottom: Vector3, rotation: float) -> Optional[Solid]:
        """柱脚ベースプレート（下端節点の直下に厚さ t）"""
        bag = section.base_plate
        if not bag:
            return None
        width = parse_number(bag.get("B_X"))
        depth = parse_number(bag.get("B_Y"))
        thickness = parse_number(bag.get("t"))
        if not width or not depth or not thickness or min(width, depth, thickness) <= 0:
            self.logger.warning("%s %s: ベースプレート寸法が不正です: %s", record.element_type, record.id, dict(bag))
            return None
        offset_x = (parse_number(bag.get("offset_X")) or 0.0) + record.offset_bottom[0]
        offset_y = (parse_number(bag.get("offset_Y")) or 0.0) + record.offset_bottom[1]
        top = Vector3(bottom.x + offset_x, bottom.y + offset_y, bottom.z)
        base = Vector3(top.x, top.y, top.z - thickness)
        placement = self._vertical_placement(self._validator(record), base, top, (0.0, 0.0), (0.0, 0.0), rotation)
        profile = rectangle_profile(width, depth)
        return Solid(
            element_id=record.id,
            element_type=record.element_type,
            section_family=SectionFamily.RECTANGLE,
            placement=placement,
            length=placement.length,
            profile=profile,
            profile_params=RectangleParams(width, depth),
            part="base_plate",
            name=record.name,
            metadata=MetadataBuilder.build_for_column(
                element_type=record.element_type,
                element_id=record.id,
                section_id=record.section_id,
                family=SectionFamily.RECTANGLE,
                profile_source=PROFILE_SOURCE_CALCULATOR,
                section_data=dict(bag),
                length=placement.length,
                part="base_plate",
            ),
        )
