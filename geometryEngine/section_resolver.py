"""断面解決

断面レコード（＋鋼材形状テーブル）から
正規化 → 分類 → パラメータ変換 → 断面形状生成 を通した結果を返します。
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from common.dimension_normalizer import NormalizedDimensions, derive_dimensions
from geometryEngine.context import GenerationContext
from geometryEngine.metadata_builder import (
    PROFILE_SOURCE_CALCULATOR,
    PROFILE_SOURCE_FALLBACK,
    PROFILE_SOURCE_IFC_EQUIVALENT,
)
from geometryEngine.profile_builder import Profile, build_profile
from geometryEngine.profile_parameter_mapper import (
    ProfileParams,
    map_profile_params,
    section_height as params_section_height,
)
from geometryEngine.records import SectionRecord, SteelShape
from geometryEngine.section_classifier import (
    SectionFamily,
    SectionTypeClassifier,
    normalize_section_tag,
)
from geometryEngine.tapered_builder import MultiSectionSpec, PositionedProfile, SectionPosition
from stbParser.variant_expander import VariantDescriptor, VariantExpansion, expand_section_variants

logger = logging.getLogger(__name__)

CROSS_H_SHAPE_KEYS = ("crossH_shapeX", "crossH_shapeY")

SECTION_HEIGHT_KEYS = ("overall_depth", "height", "outer_height", "A", "depth")


@dataclass(frozen=True)
class ResolvedSection:
    """解決済み断面"""

    family: SectionFamily
    params: ProfileParams
    profile: Optional[Profile]
    dimensions: Optional[NormalizedDimensions]
    profile_source: str
    shape_name: Optional[str] = None


class SectionResolver:
    def __init__(self, context: GenerationContext):
        self.context = context
        self.segments = context.config.circle_segments
        self.logger = logger.getChild(self.__class__.__name__)

    @staticmethod
    def expand_variants(section: SectionRecord) -> VariantExpansion:
        return expand_section_variants(section.variant_markup)

    def _steel_shape(self, name: Optional[str]) -> Optional[SteelShape]:
        steel = self.context.resolve_steel_shape(name)
        if name and steel is None:
            self.logger.warning("鋼材形状が見つかりません: %s", name)
        return steel

    def resolve_bag(
        self,
        bag: Optional[Mapping[str, Any]],
        section_type: Any = None,
        profile_type: Any = None,
        steel: Optional[SteelShape] = None,
        family: Optional[SectionFamily] = None,
    ) -> ResolvedSection:
        """寸法バッグ（＋鋼材形状）から断面を解決

        鋼材形状の寸法を基本とし、バッグ側の値で上書きします。
        """
        merged: Dict[str, Any] = {}
        if steel is not None:
            merged.update(steel.dimensions)
        if bag:
            merged.update(bag)
        dims = derive_dimensions(merged)

        if family is None:
            family = SectionTypeClassifier.classify(
                section_type=section_type,
                profile_type=profile_type,
                steel_shape_type=steel.shape_type if steel is not None else None,
                dimensions=dims,
            )
        params = map_profile_params(dims, family, self.segments)
        profile = build_profile(family, params)

        if steel is not None:
            source = PROFILE_SOURCE_IFC_EQUIVALENT
        elif dims is None:
            source = PROFILE_SOURCE_FALLBACK
        else:
            source = PROFILE_SOURCE_CALCULATOR
        return ResolvedSection(
            family=family,
            params=params,
            profile=profile,
            dimensions=dims,
            profile_source=source,
            shape_name=steel.name if steel is not None else None,
        )

    def resolve(
        self,
        section: SectionRecord,
        expansion: Optional[VariantExpansion] = None,
        family: Optional[SectionFamily] = None,
    ) -> ResolvedSection:
        """断面レコードの代表断面を解決

        形状名は section.shape → バリアント展開の代表形状 の順で参照します。
        """
        shape_name = section.shape
        if not shape_name and expansion is not None:
            shape_name = expansion.primary_shape
        steel = self._steel_shape(shape_name)
        return self.resolve_bag(
            section.dimensions,
            section_type=section.section_type,
            profile_type=section.profile_type,
            steel=steel,
            family=family,
        )

    def is_cross_h(self, section: SectionRecord) -> bool:
        if normalize_section_tag(section.section_type) is SectionFamily.CROSS_H:
            return True
        return all(section.dimensions.get(key) for key in CROSS_H_SHAPE_KEYS)

    def resolve_cross_h_arms(self, section: SectionRecord) -> Optional[List[ResolvedSection]]:
        """十字H形の X/Y アームを H 形として解決（鋼材形状が揃わない場合は None）"""
        arms = []
        for key in CROSS_H_SHAPE_KEYS:
            steel = self._steel_shape(section.dimensions.get(key))
            if steel is None:
                return None
            arms.append(self.resolve_bag(None, steel=steel, family=SectionFamily.H))
        return arms

    @staticmethod
    def section_height(resolved: ResolvedSection) -> float:
        """天端揃え配置で使用する断面せい（円形断面は0）"""
        if resolved.family in (SectionFamily.CIRCLE, SectionFamily.PIPE):
            return 0.0
        dims = resolved.dimensions
        if dims is not None:
            for key in SECTION_HEIGHT_KEYS:
                value = dims.get(key)
                if value is not None and value > 0:
                    return value
        return params_section_height(resolved.params)

    def build_variant_spec(
        self, descriptors: Sequence[VariantDescriptor], family: SectionFamily
    ) -> Optional[MultiSectionSpec]:
        """位置付きバリアントから多断面仕様を組み立て

        全断面を同じファミリー・分割数で再生成するため頂点数は一致します。

        Returns:
            MultiSectionSpec。有効な断面が2未満の場合は None
        """
        sections = []
        for descriptor in descriptors:
            try:
                position = SectionPosition.parse(descriptor.position)
            except ValueError:
                self.logger.warning(
                    "断面位置を解釈できません: %s (%s)", descriptor.position, descriptor.shape
                )
                continue
            steel = self._steel_shape(descriptor.shape)
            if steel is None:
                continue
            resolved = self.resolve_bag(None, steel=steel, family=family)
            if resolved.profile is None:
                continue
            sections.append(PositionedProfile(position, resolved.profile))

        if len(sections) < 2:
            self.logger.warning(
                "多断面の有効断面が不足しています: %d/%d", len(sections), len(descriptors)
            )
            return None
        return MultiSectionSpec(tuple(sections))
