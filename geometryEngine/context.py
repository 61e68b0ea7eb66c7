"""生成コンテキスト

節点・断面・鋼材形状の参照テーブル、設定、ロガーをまとめて
生成パイプラインに渡します。テーブルはバッチ単位で読み取り専用です。
"""

import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional

from common.geometry import Vector3
from config.settings import GeneratorConfig
from geometryEngine.records import SectionRecord, SteelShape


@dataclass(frozen=True)
class GenerationContext:
    nodes: Mapping[str, Vector3] = field(default_factory=dict)
    sections: Mapping[str, SectionRecord] = field(default_factory=dict)
    steel_shapes: Mapping[str, SteelShape] = field(default_factory=dict)
    config: GeneratorConfig = field(default_factory=GeneratorConfig)
    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger("geometryEngine")
    )

    def resolve_node(self, node_id: Optional[str]) -> Optional[Vector3]:
        """節点座標（見つからない場合は None）"""
        if node_id is None:
            return None
        return self.nodes.get(str(node_id))

    def resolve_section(self, section_id: Optional[str]) -> Optional[SectionRecord]:
        if section_id is None:
            return None
        return self.sections.get(str(section_id))

    def resolve_steel_shape(self, name: Optional[str]) -> Optional[SteelShape]:
        if not name:
            return None
        return self.steel_shapes.get(name)
