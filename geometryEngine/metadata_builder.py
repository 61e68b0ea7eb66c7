"""ソリッドメタデータ構築

差分・検査UIが「なぜその形状が選ばれたか」を説明できるよう、
断面ファミリー・プロファイル生成元・元断面データを記録します。
"""

from typing import Any, Dict, Optional

from geometryEngine.section_classifier import SectionFamily

PROFILE_SOURCE_CALCULATOR = "calculator"
PROFILE_SOURCE_IFC_EQUIVALENT = "ifc-equivalent"
PROFILE_SOURCE_FALLBACK = "fallback"

PROFILE_SOURCES = (
    PROFILE_SOURCE_CALCULATOR,
    PROFILE_SOURCE_IFC_EQUIVALENT,
    PROFILE_SOURCE_FALLBACK,
)


class MetadataBuilder:
    """要素種別ごとのメタデータ"""

    @staticmethod
    def build(
        element_type: str,
        element_id: str,
        section_id: Optional[str],
        family: SectionFamily,
        profile_source: str,
        section_data: Optional[Dict[str, Any]],
        length: float,
        **extra: Any,
    ) -> Dict[str, Any]:
        if profile_source not in PROFILE_SOURCES:
            raise ValueError(f"不明なプロファイル生成元です: {profile_source}")
        metadata = {
            "element_type": element_type,
            "element_id": element_id,
            "section_id": section_id,
            "section_type": SectionFamily(family).value,
            "profile_meta": {
                "profile_source": profile_source,
                "section_type": SectionFamily(family).value,
            },
            "section_data_original": section_data,
            "length": length,
        }
        metadata.update({k: v for k, v in extra.items() if v is not None})
        return metadata

    @classmethod
    def build_for_column(cls, *, section_mode: str = "single", section_count: int = 1, part: str = "main", **params) -> Dict[str, Any]:
        return cls.build(section_mode=section_mode, section_count=section_count, part=part, **params)

    @classmethod
    def build_for_beam(
        cls,
        *,
        placement_mode: str,
        section_height: float,
        multi_section: bool = False,
        section_count: int = 1,
        **params,
    ) -> Dict[str, Any]:
        return cls.build(
            placement_mode=placement_mode,
            section_height=section_height,
            multi_section=multi_section,
            section_count=section_count,
            **params,
        )

    @classmethod
    def build_for_pile(cls, *, pile_type: Optional[str], pile_format: str, **params) -> Dict[str, Any]:
        return cls.build(pile_type=pile_type, pile_format=pile_format, **params)

    @classmethod
    def build_for_footing(cls, *, depth: float, level_bottom: float, **params) -> Dict[str, Any]:
        return cls.build(depth=depth, level_bottom=level_bottom, **params)
