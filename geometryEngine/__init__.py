"""ST-Bridge 構造要素ジオメトリエンジン

描画ツールキットに依存しない計算層（寸法正規化・断面分類・断面形状・
配置・多断面ロフト）と、要素種別ごとの生成オーケストレーションを提供します。
"""

from .context import GenerationContext
from .generator_factory import GeometryGeneratorFactory, generate_solids
from .section_classifier import SectionFamily
from .solid import GenerationResult, SkippedElement, Solid

__all__ = [
    "GenerationContext",
    "GeometryGeneratorFactory",
    "generate_solids",
    "SectionFamily",
    "GenerationResult",
    "SkippedElement",
    "Solid",
]
