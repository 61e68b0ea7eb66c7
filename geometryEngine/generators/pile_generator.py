"""杭ジェネレーター"""

from typing import List, Optional, Tuple

from common.dimension_normalizer import DimensionNormalizer, ExtendedPileSpec
from common.geometry import Vector3
from exceptions.custom_errors import SkipReason
from geometryEngine.context import GenerationContext
from geometryEngine.generators.base_generator import ElementGenerator
from geometryEngine.metadata_builder import MetadataBuilder
from geometryEngine.profile_builder import build_profile
from geometryEngine.profile_parameter_mapper import CircleParams
from geometryEngine.records import PileRecord
from geometryEngine.section_classifier import SectionFamily, resolve_rotation_with_reference
from geometryEngine.section_resolver import ResolvedSection
from geometryEngine.solid import Solid
from geometryEngine.tapered_builder import MultiSectionSpec, PositionedProfile

PILE_FORMAT_SINGLE_NODE = "1node"
PILE_FORMAT_TWO_NODE = "2node"


class PileGenerator(ElementGenerator):
    """杭

    1節点形式は杭頭レベルから杭長分下方へ、2節点形式は節点間に配置します。
    拡径杭は円形断面の多断面ソリッドになります。
    """

    element_name = "Pile"

    def generate(self, record: PileRecord, context: GenerationContext) -> List[Solid]:
        validator = self._validator(record)
        section = self._section(record, context, validator)
        resolved = self._resolver(context).resolve(section)

        if record.is_single_node:
            node = self._point(context, record.node, record.node_coord)
            validator.validate_node_positions([node], required=1)
            bottom, top = self._single_node_ends(record, node, resolved, context)
            pile_format = PILE_FORMAT_SINGLE_NODE
        else:
            bottom = self._point(context, record.bottom_node, record.bottom_coord)
            top = self._point(context, record.top_node, record.top_coord)
            validator.validate_node_positions([bottom, top])
            offset = Vector3(record.offset[0], record.offset[1], 0.0)
            bottom, top = bottom + offset, top + offset
            pile_format = PILE_FORMAT_TWO_NODE

        rotation = resolve_rotation_with_reference(record.rotate, section.is_reference_direction)
        placement = self._vertical_placement(validator, bottom, top, (0.0, 0.0), (0.0, 0.0), rotation)

        extended = DimensionNormalizer.get_extended_pile_sections(resolved.dimensions)
        metadata = MetadataBuilder.build_for_pile(
            element_type=record.element_type,
            element_id=record.id,
            section_id=record.section_id,
            family=SectionFamily.CIRCLE if extended else resolved.family,
            profile_source=resolved.profile_source,
            section_data=section.raw_data(),
            length=placement.length,
            pile_type=resolved.dimensions.pile_type if resolved.dimensions else None,
            pile_format=pile_format,
        )

        if extended is not None:
            segments = context.config.circle_segments
            spec = self._extended_spec(
                extended, placement.length, segments, context.config.section_transition_epsilon
            )
            circle = ResolvedSection(
                family=SectionFamily.CIRCLE,
                params=CircleParams(extended.axial_diameter / 2, segments),
                profile=None,
                dimensions=resolved.dimensions,
                profile_source=resolved.profile_source,
            )
            return [self._multi_solid(record, circle, spec, placement, context, validator, metadata)]

        return [self._single_solid(record, resolved, placement, validator, metadata)]

    def _single_node_ends(
        self, record: PileRecord, node: Vector3, resolved: ResolvedSection, context: GenerationContext
    ) -> Tuple[Vector3, Vector3]:
        """1節点形式の杭先端・杭頭（オフセットは1回だけ適用）"""
        level_top = record.level_top if record.level_top is not None else node.z
        length = self._pile_length(record, resolved, context)
        top = Vector3(node.x + record.offset[0], node.y + record.offset[1], level_top)
        bottom = Vector3(top.x, top.y, level_top - length)
        return bottom, top

    def _pile_length(self, record: PileRecord, resolved: ResolvedSection, context: GenerationContext) -> float:
        """杭長: length_all → 断面 length_pile → 径 × 係数 の推定"""
        if record.length_all and record.length_all > 0:
            return record.length_all
        dims = resolved.dimensions
        if dims is not None and dims.length_pile and dims.length_pile > 0:
            return dims.length_pile
        diameter = DimensionNormalizer.get_diameter(dims) or DimensionNormalizer.get_width(dims)
        if not diameter:
            raise self._validator(record).fail(SkipReason.INVALID_LENGTH, "杭長を決定できない")
        estimated = diameter * context.config.pile_length_diameter_factor
        self.logger.warning(
            "%s %s: 杭長が未指定のため推定します: %.1f mm", record.element_type, record.id, estimated
        )
        return estimated

    @staticmethod
    def _extended_spec(
        extended: ExtendedPileSpec, length: float, segments: int, epsilon: float
    ) -> Optional[MultiSectionSpec]:
        """拡径杭の断面配置（位置は杭先端からの距離）

        片側のみ拡径でテーパー角が無い場合は杭全長で線形に変化させます。
        両側拡径でテーパー角が無い側は epsilon の遷移幅で断面を切り替えます。
        """

        def circle(diameter: float):
            return build_profile(SectionFamily.CIRCLE, CircleParams(diameter / 2, segments))

        axial = circle(extended.axial_diameter)
        foot = circle(extended.foot_diameter) if extended.foot_diameter else None
        top = circle(extended.top_diameter) if extended.top_diameter else None
        foot_taper = extended.foot_taper_length() if foot else 0.0
        top_taper = extended.top_taper_length() if top else 0.0

        if foot and not top and foot_taper <= 0:
            stations = [(0.0, foot), (length, axial)]
        elif top and not foot and top_taper <= 0:
            stations = [(0.0, axial), (length, top)]
        else:
            stations = []
            if foot:
                foot_end = extended.foot_length
                stations += [
                    (0.0, foot),
                    (foot_end, foot),
                    (foot_end + (foot_taper if foot_taper > 0 else epsilon), axial),
                ]
            else:
                stations.append((0.0, axial))
            if top:
                top_start = length - extended.top_length
                stations += [
                    (top_start - (top_taper if top_taper > 0 else epsilon), axial),
                    (top_start, top),
                    (length, top),
                ]
            else:
                stations.append((length, axial))

        sections = tuple(PositionedProfile(pos, prof) for pos, prof in stations if prof is not None)
        if len(sections) < 2:
            return None
        return MultiSectionSpec(sections)
