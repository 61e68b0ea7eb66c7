# variant_expander.py
"""
断面バリアント展開（Same / NotSame / 多断面梁）

鋼材断面図形要素（StbSecSteelFigure*）の子要素から、部材に適用する
鋼材形状名の記述子リストを組み立てます。タグは名前空間を無視した
ローカル名で照合します。
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field, replace
from typing import Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)

SAME_PATTERNS = (
    "StbSecSteelColumn_S_Same",
    "StbSecSteelColumn_CFT_Same",
    "StbSecSteelColumn_SRC_Same",
    "StbSecSteelBeam_S_Same",
    "StbSecSteelBeam_S_Straight",
    "StbSecSteelBrace_S_Same",
    "StbSecSteelGirder_S_Same",
    # ST-Bridge 2.1.0
    "StbSecSteelColumnSame",
    "StbSecSteelBeamStraight",
    "StbSecSteelBraceSame",
    "StbSecSteelGirderSame",
)

NOT_SAME_PATTERNS = (
    "StbSecSteelColumn_S_NotSame",
    "StbSecSteelColumn_CFT_NotSame",
    "StbSecSteelColumn_SRC_NotSame",
    "StbSecSteelBeam_S_NotSame",
    "StbSecSteelBrace_S_NotSame",
    "StbSecSteelGirder_S_NotSame",
    "StbSecSteel_Column_NotSame_NotSame",
    # ST-Bridge 2.1.0
    "StbSecSteelColumnNotSame",
    "StbSecSteelBeamNotSame",
    "StbSecSteelBraceNotSame",
    "StbSecSteelGirderNotSame",
)

BEAM_MULTI_SECTION_PATTERNS = (
    "StbSecSteelBeam_S_Haunch",
    "StbSecSteelBeam_S_Joint",
    "StbSecSteelBeam_S_FiveTypes",
    "StbSecSteelBeam_S_Taper",
    # ST-Bridge 2.1.0
    "StbSecSteelBeamHaunch",
    "StbSecSteelBeamJoint",
    "StbSecSteelBeamFiveTypes",
    "StbSecSteelBeamTaper",
)

V210_SHAPE_WRAPPERS = (
    "StbSecSteelBeam_S_Shape",
    "StbSecSteelColumn_S_Shape",
    "StbSecSteelBrace_S_Shape",
    "StbSecSteelGirder_S_Shape",
)

VARIANT_SAME = "SAME"
VARIANT_NOT_SAME = "NOT_SAME"
VARIANT_MULTI_SECTION = "BEAM_MULTI_SECTION"
VARIANT_V210_SHAPE = "V210_SHAPE"
VARIANT_FALLBACK = "FALLBACK"


def local_name(tag: str) -> str:
    """'{namespace}Tag' / 'stb:Tag' からローカル名を取り出す"""
    if "}" in tag:
        tag = tag.rsplit("}", 1)[1]
    if ":" in tag:
        tag = tag.rsplit(":", 1)[1]
    return tag


@dataclass
class VariantDescriptor:
    """鋼材形状バリアント記述子"""

    shape: str
    tag_name: str
    variant_type: str
    position: Optional[str] = None
    end_shape: Optional[str] = None
    strength_main: Optional[str] = None
    order: Optional[float] = None
    attributes: Dict[str, str] = field(default_factory=dict)

    @property
    def is_taper(self) -> bool:
        return self.end_shape is not None


@dataclass
class VariantExpansion:
    """バリアント展開結果"""

    uniform: Optional[VariantDescriptor] = None
    variants: List[VariantDescriptor] = field(default_factory=list)
    multi_section: List[VariantDescriptor] = field(default_factory=list)
    fallback: Optional[VariantDescriptor] = None

    @property
    def primary_shape(self) -> Optional[str]:
        """採用されたカテゴリの代表形状名"""
        if self.uniform is not None:
            return self.uniform.shape
        if self.variants:
            return self.variants[0].shape
        if self.multi_section:
            return self.multi_section[0].shape
        if self.fallback is not None:
            return self.fallback.shape
        return None

    @property
    def is_multi_section(self) -> bool:
        return len(self.variants) >= 2 or len(self.multi_section) >= 2

    @property
    def positioned(self) -> List[VariantDescriptor]:
        """位置付きバリアント（NotSame または多断面）"""
        return self.variants or self.multi_section

    def is_empty(self) -> bool:
        return self.primary_shape is None


class SameNotSameExpander:
    """Same/NotSame/多断面パターンの統一処理"""

    def __init__(self, figure_element: Optional[ET.Element]):
        self.figure = figure_element
        self.logger = logger.getChild(self.__class__.__name__)

    def _iter_tagged(self, patterns) -> Iterator[ET.Element]:
        wanted = set(patterns)
        for elem in self.figure.iter():
            if elem is not self.figure and local_name(elem.tag) in wanted:
                yield elem

    @staticmethod
    def _build_descriptor(elem: ET.Element, variant_type: str) -> Optional[VariantDescriptor]:
        shape = elem.get("shape")
        end_shape = None
        if not shape:
            shape = elem.get("start_shape")
            end_shape = elem.get("end_shape")
        if not shape:
            return None
        return VariantDescriptor(
            shape=shape,
            tag_name=local_name(elem.tag),
            variant_type=variant_type,
            position=elem.get("pos"),
            end_shape=end_shape,
            strength_main=elem.get("strength_main") or elem.get("strength"),
            attributes=dict(elem.attrib),
        )

    @staticmethod
    def _expand_taper(descriptor: VariantDescriptor) -> List[VariantDescriptor]:
        start = replace(descriptor, position="START")
        end = replace(
            descriptor,
            position="END",
            shape=descriptor.end_shape,
            order=(descriptor.order + 0.5) if descriptor.order is not None else None,
        )
        return [start, end]

    def find_same(self) -> Optional[VariantDescriptor]:
        for elem in self._iter_tagged(SAME_PATTERNS):
            descriptor = self._build_descriptor(elem, VARIANT_SAME)
            if descriptor:
                descriptor.position = descriptor.position or "SAME"
                return descriptor
        return None

    def find_not_same(self) -> List[VariantDescriptor]:
        results = []
        for elem in self._iter_tagged(NOT_SAME_PATTERNS):
            descriptor = self._build_descriptor(elem, VARIANT_NOT_SAME)
            if descriptor:
                descriptor.position = descriptor.position or "TOP"
                results.append(descriptor)
        return results

    def find_multi_section(self) -> List[VariantDescriptor]:
        results = []
        for elem in self._iter_tagged(BEAM_MULTI_SECTION_PATTERNS):
            descriptor = self._build_descriptor(elem, VARIANT_MULTI_SECTION)
            if descriptor is None:
                continue
            if descriptor.is_taper:
                results.extend(self._expand_taper(descriptor))
            else:
                descriptor.position = descriptor.position or "CENTER"
                results.append(descriptor)
        return results

    @staticmethod
    def _position_from_order(order: float, total: int) -> str:
        if total == 1:
            return "SAME"
        if total == 2:
            return "START" if order == 1 else "END"
        if order == 1:
            return "START"
        if order == total:
            return "END"
        return "CENTER"

    def find_v210_shapes(self) -> List[VariantDescriptor]:
        """ST-Bridge 2.1.0 の入れ子形状ラッパー（order 付き）"""
        variants = []
        wrappers = list(self._iter_tagged(V210_SHAPE_WRAPPERS))
        for index, wrapper in enumerate(wrappers):
            order_attr = wrapper.get("order")
            order = float(order_attr) if order_attr and order_attr.strip().isdigit() else index + 1
            candidates = list(wrapper) or [wrapper]
            for child in candidates:
                descriptor = self._build_descriptor(child, VARIANT_V210_SHAPE)
                if descriptor is None:
                    continue
                descriptor.order = order
                if descriptor.is_taper:
                    variants.extend(self._expand_taper(descriptor))
                else:
                    descriptor.position = self._position_from_order(order, len(wrappers))
                    variants.append(descriptor)
        variants.sort(key=lambda d: d.order or 0)
        return variants

    def find_fallback(self) -> Optional[VariantDescriptor]:
        """shape（または start_shape）属性を持つ最初の子孫要素（深さ優先）"""
        for attr in ("shape", "start_shape"):
            for elem in self.figure.iter():
                if elem is not self.figure and elem.get(attr):
                    return self._build_descriptor(elem, VARIANT_FALLBACK)
        return None

    def expand(self) -> VariantExpansion:
        """優先順位: Same → NotSame → 多断面 → 2.1.0 入れ子 → フォールバック"""
        if self.figure is None:
            return VariantExpansion()

        same = self.find_same()
        if same is not None:
            self.logger.debug("Same パターン: %s", same.shape)
            return VariantExpansion(uniform=same)

        not_same = self.find_not_same()
        if not_same:
            self.logger.debug("NotSame パターン: %s", [d.shape for d in not_same])
            return VariantExpansion(variants=not_same)

        multi = self.find_multi_section()
        if multi:
            self.logger.debug("多断面パターン: %s", [(d.position, d.shape) for d in multi])
            return VariantExpansion(multi_section=multi)

        nested = self.find_v210_shapes()
        if nested:
            self.logger.debug("2.1.0 入れ子形状: %s", [(d.position, d.shape) for d in nested])
            if len(nested) == 1:
                return VariantExpansion(uniform=nested[0])
            return VariantExpansion(multi_section=nested)

        fallback = self.find_fallback()
        if fallback is not None:
            self.logger.debug("フォールバック形状: %s", fallback.shape)
        else:
            self.logger.warning("断面図形に形状名が見つかりません: %s", local_name(self.figure.tag))
        return VariantExpansion(fallback=fallback)


def expand_section_variants(figure_element: Optional[ET.Element]) -> VariantExpansion:
    """断面図形要素のバリアント展開"""
    return SameNotSameExpander(figure_element).expand()


def parse_variant_markup(markup: Optional[str]) -> Optional[ET.Element]:
    """XML文字列を要素に変換（空文字列は None）

    Raises:
        ET.ParseError: XMLとして解釈できない場合
    """
    if markup is None or not str(markup).strip():
        return None
    return ET.fromstring(markup)
