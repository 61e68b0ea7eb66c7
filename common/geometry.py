# common/geometry.py
"""
common.geometry
--------------
3D ベクトル・クォータニオン演算を提供するモジュール。

ジオメトリエンジンの配置計算（軸方向・回転）はすべてこのモジュールの
型で表現されます。
"""

import math
from dataclasses import dataclass
from typing import Iterable

# 角度・正規化計算で使用する許容誤差
EPSILON = 1e-9


@dataclass(frozen=True)
class Vector3:
    """
    三次元ベクトル（点）を表現するクラス。

    Attributes:
        x (float): X 成分
        y (float): Y 成分
        z (float): Z 成分
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_iterable(cls, values: Iterable[float]) -> "Vector3":
        """[x, y, z] 形式（Z省略可）からベクトルを生成"""
        coords = [float(v) for v in values]
        if len(coords) == 2:
            coords.append(0.0)
        if len(coords) != 3:
            raise ValueError(f"座標は2または3成分で指定してください: {coords}")
        return cls(*coords)

    def __add__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> "Vector3":
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __neg__(self) -> "Vector3":
        return Vector3(-self.x, -self.y, -self.z)

    def dot(self, other: "Vector3") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "Vector3") -> "Vector3":
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length(self) -> float:
        return math.sqrt(self.dot(self))

    def normalized(self) -> "Vector3":
        """単位ベクトルを返す

        Raises:
            ValueError: ゼロベクトルの場合
        """
        length = self.length()
        if length < EPSILON:
            raise ValueError("ゼロベクトルは正規化できません")
        return Vector3(self.x / length, self.y / length, self.z / length)

    def distance_to(self, other: "Vector3") -> float:
        return (other - self).length()

    def midpoint(self, other: "Vector3") -> "Vector3":
        return Vector3(
            (self.x + other.x) / 2, (self.y + other.y) / 2, (self.z + other.z) / 2
        )

    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in (self.x, self.y, self.z))

    def is_close(self, other: "Vector3", tolerance: float = 1e-6) -> bool:
        return (
            abs(self.x - other.x) <= tolerance
            and abs(self.y - other.y) <= tolerance
            and abs(self.z - other.z) <= tolerance
        )


UNIT_X = Vector3(1.0, 0.0, 0.0)
UNIT_Y = Vector3(0.0, 1.0, 0.0)
UNIT_Z = Vector3(0.0, 0.0, 1.0)


@dataclass(frozen=True)
class Quaternion:
    """単位クォータニオン（x, y, z, w）"""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0

    @classmethod
    def identity(cls) -> "Quaternion":
        return cls(0.0, 0.0, 0.0, 1.0)

    @classmethod
    def from_axis_angle(cls, axis: Vector3, angle: float) -> "Quaternion":
        """軸まわりの回転（ラジアン）"""
        axis = axis.normalized()
        half = angle / 2
        s = math.sin(half)
        return cls(axis.x * s, axis.y * s, axis.z * s, math.cos(half))

    @classmethod
    def from_unit_vectors(cls, v_from: Vector3, v_to: Vector3) -> "Quaternion":
        """v_from を v_to へ写す最短弧回転

        反平行の場合は v_from に直交する任意軸まわりの180度回転を返します。
        """
        v_from = v_from.normalized()
        v_to = v_to.normalized()
        dot = v_from.dot(v_to)

        if dot > 0.999999:
            return cls.identity()
        if dot < -0.999999:
            axis = UNIT_X.cross(v_from)
            if axis.length() < 1e-6:
                axis = UNIT_Y.cross(v_from)
            return cls.from_axis_angle(axis, math.pi)

        axis = v_from.cross(v_to)
        return cls(axis.x, axis.y, axis.z, 1.0 + dot).normalized()

    @classmethod
    def from_basis(cls, x_axis: Vector3, y_axis: Vector3, z_axis: Vector3) -> "Quaternion":
        """直交基底（列ベクトル）から回転を生成"""
        m00, m01, m02 = x_axis.x, y_axis.x, z_axis.x
        m10, m11, m12 = x_axis.y, y_axis.y, z_axis.y
        m20, m21, m22 = x_axis.z, y_axis.z, z_axis.z
        trace = m00 + m11 + m22

        if trace > 0:
            s = 0.5 / math.sqrt(trace + 1.0)
            quat = cls((m21 - m12) * s, (m02 - m20) * s, (m10 - m01) * s, 0.25 / s)
        elif m00 > m11 and m00 > m22:
            s = 2.0 * math.sqrt(1.0 + m00 - m11 - m22)
            quat = cls(0.25 * s, (m01 + m10) / s, (m02 + m20) / s, (m21 - m12) / s)
        elif m11 > m22:
            s = 2.0 * math.sqrt(1.0 + m11 - m00 - m22)
            quat = cls((m01 + m10) / s, 0.25 * s, (m12 + m21) / s, (m02 - m20) / s)
        else:
            s = 2.0 * math.sqrt(1.0 + m22 - m00 - m11)
            quat = cls((m02 + m20) / s, (m12 + m21) / s, 0.25 * s, (m10 - m01) / s)
        return quat.normalized()

    def normalized(self) -> "Quaternion":
        norm = math.sqrt(self.x ** 2 + self.y ** 2 + self.z ** 2 + self.w ** 2)
        if norm < EPSILON:
            return Quaternion.identity()
        return Quaternion(self.x / norm, self.y / norm, self.z / norm, self.w / norm)

    def multiply(self, other: "Quaternion") -> "Quaternion":
        """ハミルトン積 self * other（other を先に適用）"""
        return Quaternion(
            self.w * other.x + self.x * other.w + self.y * other.z - self.z * other.y,
            self.w * other.y - self.x * other.z + self.y * other.w + self.z * other.x,
            self.w * other.z + self.x * other.y - self.y * other.x + self.z * other.w,
            self.w * other.w - self.x * other.x - self.y * other.y - self.z * other.z,
        )

    __mul__ = multiply

    def rotate(self, v: Vector3) -> Vector3:
        """ベクトルを回転"""
        q = Vector3(self.x, self.y, self.z)
        t = q.cross(v) * 2.0
        return v + t * self.w + q.cross(t)


def rotate_vector_around_axis(v: Vector3, axis: Vector3, angle: float) -> Vector3:
    """ロドリゲスの回転公式による軸まわり回転（ラジアン）"""
    k = axis.normalized()
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return v * cos_a + k.cross(v) * sin_a + k * (k.dot(v) * (1 - cos_a))
