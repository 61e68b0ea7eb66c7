"""Base Element Generator

全要素ジェネレーターの基底クラス。
節点解決・断面解決・配置計算・検証の共通処理を提供します。
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from common.geometry import Vector3
from exceptions.custom_errors import (
    DegeneratePlacementError,
    ProfileMismatchError,
    SkipReason,
)
from geometryEngine.context import GenerationContext
from geometryEngine.mesh_validator import MeshCreationValidator
from geometryEngine.metadata_builder import MetadataBuilder
from geometryEngine.placement_calculator import Placement, PlacementCalculator
from geometryEngine.records import SectionRecord
from geometryEngine.section_resolver import ResolvedSection, SectionResolver
from geometryEngine.solid import Solid
from geometryEngine.tapered_builder import MultiSectionSpec, build_multi_section_solid

logger = logging.getLogger(__name__)


class ElementGenerator(ABC):
    """要素ジェネレーター基底クラス

    generate() は1要素から1つ以上のソリッドを返し、生成できない場合は
    理由タグ付きの ElementSkippedError を送出します。
    """

    element_name = "Element"

    def __init__(self):
        self.logger = logger.getChild(self.__class__.__name__)

    @abstractmethod
    def generate(self, record, context: GenerationContext) -> List[Solid]:
        """要素のソリッドを生成（サブクラスで実装）"""

    @staticmethod
    def _validator(record) -> MeshCreationValidator:
        return MeshCreationValidator(record.id, record.element_type)

    @staticmethod
    def _point(context: GenerationContext, node_id: Optional[str], coord: Optional[Vector3]) -> Optional[Vector3]:
        """生座標（JSON入力）があれば優先し、なければ節点テーブルを参照"""
        if coord is not None:
            return coord
        return context.resolve_node(node_id)

    def _points(self, context: GenerationContext, node_ids: Sequence[str], coords: Sequence[Vector3]) -> List[Optional[Vector3]]:
        if coords:
            return list(coords)
        return [context.resolve_node(node_id) for node_id in node_ids]

    @staticmethod
    def _section(record, context: GenerationContext, validator: MeshCreationValidator) -> SectionRecord:
        section = context.resolve_section(record.section_id)
        validator.validate_section(section)
        return section

    @staticmethod
    def _place(validator: MeshCreationValidator, calculate, *args, **kwargs) -> Placement:
        """配置計算（縮退時は invalid-length でスキップ）"""
        try:
            placement = calculate(*args, **kwargs)
        except DegeneratePlacementError as e:
            raise validator.fail(SkipReason.INVALID_LENGTH, str(e)) from e
        validator.validate_placement(placement)
        return placement

    @staticmethod
    def _vertical_placement(validator, bottom, top, offset_bottom, offset_top, roll_degrees: float) -> Placement:
        return ElementGenerator._place(
            validator,
            PlacementCalculator.calculate_vertical_placement,
            bottom,
            top,
            offset_bottom,
            offset_top,
            math.radians(roll_degrees),
        )

    @staticmethod
    def _metadata(record, section: Optional[SectionRecord], resolved: ResolvedSection, length: float, **extra: Any) -> Dict[str, Any]:
        return MetadataBuilder.build(
            element_type=record.element_type,
            element_id=record.id,
            section_id=record.section_id,
            family=resolved.family,
            profile_source=resolved.profile_source,
            section_data=section.raw_data() if section is not None else None,
            length=length,
            **extra,
        )

    def _single_solid(
        self,
        record,
        resolved: ResolvedSection,
        placement: Placement,
        validator: MeshCreationValidator,
        metadata: Dict[str, Any],
        part: str = "main",
    ) -> Solid:
        validator.validate_profile(resolved.profile)
        return Solid(
            element_id=record.id,
            element_type=record.element_type,
            section_family=resolved.family,
            placement=placement,
            length=placement.length,
            profile=resolved.profile,
            profile_params=resolved.params,
            part=part,
            name=record.name,
            guid=record.guid if part == "main" else None,
            metadata=metadata,
        )

    def _multi_solid(
        self,
        record,
        resolved: ResolvedSection,
        spec: Optional[MultiSectionSpec],
        placement: Placement,
        context: GenerationContext,
        validator: MeshCreationValidator,
        metadata: Dict[str, Any],
        haunch_start: float = 0.0,
        haunch_end: float = 0.0,
    ) -> Solid:
        """多断面ソリッド（有効断面が2未満なら insufficient-sections）"""
        if spec is None:
            raise validator.fail(SkipReason.INSUFFICIENT_SECTIONS, "多断面の有効断面が2未満")
        try:
            mesh = build_multi_section_solid(
                spec,
                placement.length,
                haunch_start,
                haunch_end,
                context.config.section_transition_epsilon,
            )
        except ProfileMismatchError as e:
            raise validator.fail(SkipReason.DEGENERATE_PROFILE, str(e)) from e
        if mesh is None:
            raise validator.fail(SkipReason.INSUFFICIENT_SECTIONS, "多断面の区間を構成できない")
        validator.validate_geometry(mesh)
        for section in spec.sections:
            validator.validate_profile(section.profile)
        return Solid(
            element_id=record.id,
            element_type=record.element_type,
            section_family=resolved.family,
            placement=placement,
            length=placement.length,
            multi_section=spec,
            mesh=mesh,
            profile_params=resolved.params,
            name=record.name,
            guid=record.guid,
            metadata=metadata,
        )

    @staticmethod
    def _resolver(context: GenerationContext) -> SectionResolver:
        return SectionResolver(context)
