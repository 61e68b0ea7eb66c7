"""Mesh Creation Validator

生成パイプラインの各段階（節点・断面・プロファイル・配置・形状）の
検証を行います。検証に失敗した場合は理由タグ付きの
ElementSkippedError を送出します。
"""

import logging
import math
from typing import Optional, Sequence

from common.geometry import Vector3
from exceptions.custom_errors import ElementSkippedError, SkipReason
from geometryEngine.placement_calculator import Placement
from geometryEngine.profile_builder import Profile
from geometryEngine.tapered_builder import LoftedMesh

logger = logging.getLogger(__name__)

MIN_PROFILE_VERTICES = 3


class MeshCreationValidator:
    """要素単位の検証"""

    def __init__(self, element_id: str, element_type: str):
        self.element_id = element_id
        self.element_type = element_type

    def fail(self, reason: SkipReason, detail: str) -> ElementSkippedError:
        return ElementSkippedError(
            self.element_id,
            self.element_type,
            reason,
            f"{self.element_type} '{self.element_id}': {detail}のためスキップします",
        )

    def validate_node_positions(self, positions: Sequence[Optional[Vector3]], required: int = 2) -> None:
        """節点座標の存在・有限性"""
        found = [p for p in positions if p is not None]
        if len(found) < required or len(found) != len(positions):
            raise self.fail(SkipReason.MISSING_NODES, "節点座標が見つからない")
        for point in found:
            if not point.is_finite():
                raise self.fail(SkipReason.DEGENERATE_GEOMETRY, f"節点座標が有限値ではない {point}")

    def validate_section(self, section) -> None:
        if section is None:
            raise self.fail(SkipReason.MISSING_SECTION, "断面データが見つからない")

    def validate_profile(self, profile: Optional[Profile]) -> None:
        """頂点数3以上・面積ありのプロファイル"""
        if profile is None or profile.vertex_count < MIN_PROFILE_VERTICES:
            raise self.fail(SkipReason.DEGENERATE_PROFILE, "断面形状を生成できない")
        if not profile.is_valid():
            raise self.fail(SkipReason.DEGENERATE_PROFILE, "断面形状の面積が0")

    def validate_placement(self, placement: Optional[Placement]) -> None:
        if placement is None or not math.isfinite(placement.length) or placement.length <= 0:
            raise self.fail(SkipReason.INVALID_LENGTH, "部材長さが0")
        if not placement.center.is_finite():
            raise self.fail(SkipReason.DEGENERATE_GEOMETRY, "配置中心が有限値ではない")

    def validate_geometry(self, mesh: Optional[LoftedMesh]) -> None:
        """ロフトメッシュの頂点・面の存在と有限性"""
        if mesh is None or not mesh.vertices or not mesh.faces:
            raise self.fail(SkipReason.DEGENERATE_GEOMETRY, "形状を生成できない")
        for vertex in mesh.vertices:
            if not all(math.isfinite(c) for c in vertex):
                raise self.fail(SkipReason.DEGENERATE_GEOMETRY, "形状に非有限の頂点がある")
