"""Placement Calculator

部材の端点（節点座標＋オフセット）から中心・長さ・軸方向・回転を
計算します。角度はすべてラジアンで受け取ります。
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from common.geometry import UNIT_X, UNIT_Z, Quaternion, Vector3
from exceptions.custom_errors import DegeneratePlacementError

logger = logging.getLogger(__name__)

MIN_MEMBER_LENGTH = 1e-9
VERTICAL_THRESHOLD = 0.99


class PlacementMode(str, Enum):
    """梁の配置基準"""

    CENTER = "center"
    TOP_ALIGNED = "top-aligned"

    @classmethod
    def parse(cls, value) -> "PlacementMode":
        """配置基準文字列を解釈（大文字小文字・区切り文字は区別しない）

        Raises:
            ValueError: 不明な配置基準の場合
        """
        if isinstance(value, PlacementMode):
            return value
        text = str(value).strip().lower().replace("_", "-")
        if text == "top":
            return cls.TOP_ALIGNED
        try:
            return cls(text)
        except ValueError:
            raise ValueError(
                f"不明な配置基準です: {value!r} (有効: {', '.join(m.value for m in cls)})"
            ) from None


@dataclass(frozen=True)
class LocalBasis:
    """部材局所座標系（z_axis が材軸方向）"""

    x_axis: Vector3
    y_axis: Vector3
    z_axis: Vector3

    def to_quaternion(self) -> Quaternion:
        return Quaternion.from_basis(self.x_axis, self.y_axis, self.z_axis)


@dataclass(frozen=True)
class Placement:
    """剛体配置

    局所座標の原点が center、局所 +Z が direction に一致します。
    """

    center: Vector3
    length: float
    direction: Vector3
    rotation: Quaternion
    start: Vector3
    end: Vector3
    roll_angle: float = 0.0
    basis: Optional[LocalBasis] = None
    placement_mode: str = PlacementMode.CENTER.value
    section_height: float = 0.0

    def to_world(self, local: Vector3) -> Vector3:
        """局所座標 → 全体座標"""
        return self.center + self.rotation.rotate(local)

    @property
    def x_axis(self) -> Vector3:
        return self.rotation.rotate(UNIT_X)

    @property
    def z_axis(self) -> Vector3:
        return self.rotation.rotate(UNIT_Z)


def _check_finite(*points: Vector3) -> None:
    for point in points:
        if not point.is_finite():
            raise DegeneratePlacementError(f"座標が有限値ではありません: {point}")


def _with_roll(rotation: Quaternion, roll_angle: float) -> Quaternion:
    # 局所Z（材軸）まわりの回転を右から合成
    if abs(roll_angle) < 1e-12:
        return rotation
    return rotation.multiply(Quaternion.from_axis_angle(UNIT_Z, roll_angle))


class PlacementCalculator:
    """配置計算"""

    @staticmethod
    def calculate_beam_basis(direction: Vector3) -> LocalBasis:
        """材軸方向から局所基底を計算

        ほぼ鉛直な部材は全体Xを基準、それ以外は全体Z（上向き）を基準にします。
        """
        z_axis = direction.normalized()
        if abs(z_axis.dot(UNIT_Z)) > VERTICAL_THRESHOLD:
            y_axis = z_axis.cross(UNIT_X).normalized()
            x_axis = y_axis.cross(z_axis).normalized()
        else:
            x_axis = UNIT_Z.cross(z_axis).normalized()
            y_axis = z_axis.cross(x_axis).normalized()
        return LocalBasis(x_axis, y_axis, z_axis)

    @staticmethod
    def calculate_vertical_placement(
        bottom: Vector3,
        top: Vector3,
        bottom_offset: Tuple[float, float] = (0.0, 0.0),
        top_offset: Tuple[float, float] = (0.0, 0.0),
        roll_angle: float = 0.0,
    ) -> Placement:
        """柱・間柱・杭の配置（オフセットはX/Yのみ）

        Raises:
            DegeneratePlacementError: 端点一致・非有限座標の場合
        """
        _check_finite(bottom, top)
        start = Vector3(bottom.x + bottom_offset[0], bottom.y + bottom_offset[1], bottom.z)
        end = Vector3(top.x + top_offset[0], top.y + top_offset[1], top.z)

        length = start.distance_to(end)
        if not math.isfinite(length) or length <= MIN_MEMBER_LENGTH:
            raise DegeneratePlacementError(f"部材長さが0です: {start} - {end}")

        direction = (end - start).normalized()
        rotation = _with_roll(Quaternion.from_unit_vectors(UNIT_Z, direction), roll_angle)
        return Placement(
            center=start.midpoint(end),
            length=length,
            direction=direction,
            rotation=rotation,
            start=start,
            end=end,
            roll_angle=roll_angle,
        )

    @classmethod
    def calculate_horizontal_placement(
        cls,
        start: Vector3,
        end: Vector3,
        start_offset: Vector3 = Vector3(),
        end_offset: Vector3 = Vector3(),
        roll_angle: float = 0.0,
        placement_mode: str = PlacementMode.CENTER.value,
        section_height: float = 0.0,
    ) -> Placement:
        """大梁・小梁・ブレースの配置

        天端揃え（top-aligned）の場合、中心・長さを求める前に両端を
        局所鉛直軸方向へ -section_height/2 移動します。

        Raises:
            DegeneratePlacementError: 端点一致・非有限座標の場合
        """
        _check_finite(start, end, start_offset, end_offset)
        mode = PlacementMode.parse(placement_mode)
        if start.distance_to(end) <= MIN_MEMBER_LENGTH:
            raise DegeneratePlacementError(f"部材長さが0です: {start} - {end}")

        raw_basis = cls.calculate_beam_basis(end - start)
        adjusted_start = start + start_offset
        adjusted_end = end + end_offset
        if mode is PlacementMode.TOP_ALIGNED and section_height > 0:
            shift = raw_basis.y_axis * (-section_height / 2)
            adjusted_start = adjusted_start + shift
            adjusted_end = adjusted_end + shift

        length = adjusted_start.distance_to(adjusted_end)
        if not math.isfinite(length) or length <= MIN_MEMBER_LENGTH:
            raise DegeneratePlacementError(
                f"オフセット適用後の部材長さが0です: {adjusted_start} - {adjusted_end}"
            )

        direction = (adjusted_end - adjusted_start).normalized()
        basis = cls.calculate_beam_basis(direction)
        rotation = _with_roll(basis.to_quaternion(), roll_angle)
        return Placement(
            center=adjusted_start.midpoint(adjusted_end),
            length=length,
            direction=direction,
            rotation=rotation,
            start=adjusted_start,
            end=adjusted_end,
            roll_angle=roll_angle,
            basis=basis,
            placement_mode=mode.value,
            section_height=section_height,
        )

    @staticmethod
    def calculate_single_node_placement(
        node: Vector3,
        level_bottom: float,
        depth: float,
        offset: Tuple[float, float] = (0.0, 0.0),
        rotation_angle: float = 0.0,
    ) -> Placement:
        """1節点要素（基礎）の配置

        底面レベルから depth 分立ち上がる要素の中心を返します。
        """
        _check_finite(node)
        if not math.isfinite(depth) or depth <= MIN_MEMBER_LENGTH:
            raise DegeneratePlacementError(f"高さが0です: depth={depth}")
        bottom = Vector3(node.x + offset[0], node.y + offset[1], level_bottom)
        top = Vector3(bottom.x, bottom.y, level_bottom + depth)
        rotation = Quaternion.identity()
        if abs(rotation_angle) > 1e-12:
            rotation = Quaternion.from_axis_angle(UNIT_Z, rotation_angle)
        return Placement(
            center=bottom.midpoint(top),
            length=depth,
            direction=UNIT_Z,
            rotation=rotation,
            start=bottom,
            end=top,
            roll_angle=rotation_angle,
        )

    @staticmethod
    def placement_from_basis(center: Vector3, basis: LocalBasis, thickness: float) -> Placement:
        """面材（スラブ・壁）の配置（z_axis 方向に thickness の厚み）"""
        _check_finite(center)
        if not math.isfinite(thickness) or thickness <= MIN_MEMBER_LENGTH:
            raise DegeneratePlacementError(f"厚さが0です: {thickness}")
        half = basis.z_axis * (thickness / 2)
        return Placement(
            center=center,
            length=thickness,
            direction=basis.z_axis,
            rotation=basis.to_quaternion(),
            start=center - half,
            end=center + half,
            basis=basis,
        )
