# __init__.py
"""
ST-Bridge Parser Package

断面定義要素（Same / NotSame / 多断面）からバリアント記述子を展開します。
"""

from .variant_expander import (
    SameNotSameExpander,
    VariantDescriptor,
    VariantExpansion,
    expand_section_variants,
    parse_variant_markup,
)

__all__ = [
    "SameNotSameExpander",
    "VariantDescriptor",
    "VariantExpansion",
    "expand_section_variants",
    "parse_variant_markup",
]
