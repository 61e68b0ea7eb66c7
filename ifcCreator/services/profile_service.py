"""Profile Service

生成済み断面（Profile / ProfileParams）を IFC プロファイル定義へ変換します。
中心対称な断面でパラメータが分かるものはパラメトリック定義、
それ以外は外形ポリラインによる任意形状定義で出力します。
"""

import logging
from typing import Dict, Optional, Sequence

from exceptions.custom_errors import ProfileCreationError
from geometryEngine.profile_builder import Loop, Profile
from geometryEngine.profile_parameter_mapper import (
    BoxParams,
    CircleParams,
    HParams,
    PipeParams,
    ProfileParams,
    RectangleParams,
)

logger = logging.getLogger(__name__)


class ProfileService:
    """IFCプロファイル作成サービス"""

    def __init__(self, ifc_file):
        self.file = ifc_file
        self._cache: Dict[tuple, object] = {}

    def create_profile(
        self,
        profile: Profile,
        params: Optional[ProfileParams] = None,
        name: Optional[str] = None,
    ):
        """断面から IFC プロファイルを作成

        Args:
            profile: 局所座標の断面（図心原点）
            params: パラメトリック断面の寸法（あれば優先）
            name: プロファイル名
        """
        if params is not None:
            parametric = self._create_parametric_profile(params, name)
            if parametric is not None:
                return parametric
        return self.create_arbitrary_profile(profile, name)

    def create_arbitrary_profile(self, profile: Profile, name: Optional[str] = None):
        """外形ポリラインによる任意形状プロファイル

        Raises:
            ProfileCreationError: 外形の頂点が3未満の場合
        """
        if profile is None or any(len(loop) < 3 for loop in profile.outer_loops):
            raise ProfileCreationError("ARBITRARY", message="外形の頂点が3未満のためプロファイルを作成できません")
        key = ("arbitrary", name, profile.vertices, profile.holes, profile.extra_outlines)
        if key in self._cache:
            return self._cache[key]

        if profile.extra_outlines:
            # 十字H等の重なり外形は複合プロファイルとして出力
            parts = [
                self._closed_profile(loop, (), None)
                for loop in profile.outer_loops
            ]
            result = self.file.createIfcCompositeProfileDef(
                ProfileType="AREA", ProfileName=name, Profiles=parts
            )
        else:
            result = self._closed_profile(profile.vertices, profile.holes, name)

        self._cache[key] = result
        return result

    def _closed_profile(self, outer: Loop, holes: Sequence[Loop], name: Optional[str]):
        outer_curve = self._polyline(outer)
        if holes:
            return self.file.createIfcArbitraryProfileDefWithVoids(
                ProfileType="AREA",
                ProfileName=name,
                OuterCurve=outer_curve,
                InnerCurves=[self._polyline(hole) for hole in holes],
            )
        return self.file.createIfcArbitraryClosedProfileDef(
            ProfileType="AREA", ProfileName=name, OuterCurve=outer_curve
        )

    def _polyline(self, loop: Loop):
        points = [
            self.file.createIfcCartesianPoint([float(x), float(y)]) for x, y in loop
        ]
        # 最初の点を最後に追加してポリゴンを閉じる
        points.append(points[0])
        return self.file.createIfcPolyline(points)

    def _position(self):
        return self.file.createIfcAxis2Placement2D(
            Location=self.file.createIfcCartesianPoint([0.0, 0.0])
        )

    def _create_parametric_profile(self, params: ProfileParams, name: Optional[str]):
        """中心対称断面のパラメトリック定義（非対称断面は None）"""
        key = ("parametric", name, params)
        if key in self._cache:
            return self._cache[key]

        if isinstance(params, RectangleParams):
            result = self.file.createIfcRectangleProfileDef(
                ProfileType="AREA",
                ProfileName=name or f"RectProfile_{params.width}x{params.height}",
                Position=self._position(),
                XDim=params.width,
                YDim=params.height,
            )
        elif isinstance(params, CircleParams):
            result = self.file.createIfcCircleProfileDef(
                ProfileType="AREA",
                ProfileName=name or f"CircleProfile_R{params.radius}",
                Position=self._position(),
                Radius=params.radius,
            )
        elif isinstance(params, HParams):
            result = self.file.createIfcIShapeProfileDef(
                ProfileType="AREA",
                ProfileName=name
                or f"HProfile_{params.overall_depth}x{params.overall_width}"
                f"x{params.web_thickness}x{params.flange_thickness}",
                Position=self._position(),
                OverallDepth=params.overall_depth,
                OverallWidth=params.overall_width,
                WebThickness=params.web_thickness,
                FlangeThickness=params.flange_thickness,
                FilletRadius=params.fillet_radius or None,
            )
        elif isinstance(params, BoxParams):
            result = self.file.createIfcRectangleHollowProfileDef(
                ProfileType="AREA",
                ProfileName=name
                or f"BoxProfile_{params.width}x{params.height}x{params.wall_thickness}",
                Position=self._position(),
                XDim=params.width,
                YDim=params.height,
                WallThickness=params.wall_thickness,
            )
        elif isinstance(params, PipeParams):
            result = self.file.createIfcCircleHollowProfileDef(
                ProfileType="AREA",
                ProfileName=name
                or f"PipeProfile_D{params.outer_diameter}x{params.wall_thickness}",
                Position=self._position(),
                Radius=params.outer_diameter / 2,
                WallThickness=params.wall_thickness,
            )
        else:
            logger.debug("非対称断面は任意形状で出力します: %s", type(params).__name__)
            return None

        self._cache[key] = result
        return result
