"""要素種別ごとのジオメトリジェネレーター"""

from .base_generator import ElementGenerator
from .beam_generator import BeamGenerator
from .brace_generator import BraceGenerator
from .column_generator import ColumnGenerator
from .footing_generator import FootingGenerator
from .foundation_generator import FoundationColumnGenerator, StripFootingGenerator
from .pile_generator import PileGenerator
from .planar_generator import SlabGenerator, WallGenerator

__all__ = [
    "ElementGenerator",
    "BeamGenerator",
    "BraceGenerator",
    "ColumnGenerator",
    "FootingGenerator",
    "FoundationColumnGenerator",
    "StripFootingGenerator",
    "PileGenerator",
    "SlabGenerator",
    "WallGenerator",
]
