"""ブレースジェネレーター"""

from geometryEngine.context import GenerationContext
from geometryEngine.generators.beam_generator import BeamGenerator
from geometryEngine.placement_calculator import PlacementMode


class BraceGenerator(BeamGenerator):
    """ブレース（中心配置・一様断面）"""

    element_name = "Brace"
    supports_multi_section = False

    def _placement_mode(self, record, context: GenerationContext) -> str:
        return PlacementMode.CENTER.value
