import logging
import xml.etree.ElementTree as ET

import pytest

from common.geometry import Vector3
from config.settings import GeneratorConfig
from geometryEngine.context import GenerationContext
from geometryEngine.records import SectionRecord, SteelShape

H_400 = "H-400x200x8x13"
H_500 = "H-500x200x10x16"


@pytest.fixture
def nodes():
    return {
        "1": Vector3(0.0, 0.0, 0.0),
        "2": Vector3(0.0, 0.0, 3000.0),
        "3": Vector3(6000.0, 0.0, 3000.0),
    }


@pytest.fixture
def steel_shapes():
    return {
        H_400: SteelShape(H_400, "H", {"A": 400, "B": 200, "t1": 8, "t2": 13}),
        H_500: SteelShape(H_500, "H", {"A": 500, "B": 200, "t1": 10, "t2": 16}),
    }


@pytest.fixture
def make_context(nodes, steel_shapes, tmp_path):
    """断面を指定してコンテキストを作成するファクトリ"""

    def _make(*sections, **config_overrides):
        config = GeneratorConfig(default_output_dir=tmp_path / "output", **config_overrides)
        return GenerationContext(
            nodes=nodes,
            sections={section.id: section for section in sections},
            steel_shapes=steel_shapes,
            config=config,
            logger=logging.getLogger("stb_geometry.test"),
        )

    return _make


def figure(tag: str, *children) -> ET.Element:
    """断面図形要素を組み立てる（children は (タグ, 属性) の組）"""
    root = ET.Element(tag)
    for child_tag, attrs in children:
        ET.SubElement(root, child_tag, attrs)
    return root


def rect_section(section_id="C1", width=600, height=600, **kwargs) -> SectionRecord:
    return SectionRecord(
        id=section_id, dimensions={"width_X": width, "width_Y": height}, **kwargs
    )
