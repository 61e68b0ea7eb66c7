# ifcCreator/ifc_project_builder.py
"""
IFCプロジェクト構造構築モジュール
生成ソリッドの出力先となるプロジェクト・サイト・建物・階を作成します。
"""
import time
from typing import List, Optional

import ifcopenshell

from common.guid_utils import create_ifc_guid


class IFCProjectBuilder:
    """IFCプロジェクト構造の構築責務"""

    def __init__(self, application_name: str = "StbGeometryEngine"):
        self.file: Optional[ifcopenshell.file] = None
        self.owner_history = None
        self.model_context = None
        self.plan_context = None
        self.storey = None
        self.storey_placement = None
        self.building = None
        self.building_placement = None
        self.application_name = application_name

    def create_project_structure(
        self, project_name: str = "構造プロジェクト"
    ) -> ifcopenshell.file:
        """IFC4プロジェクト構造を作成"""
        self.file = ifcopenshell.file(schema="IFC4")
        self._create_basic_structure(project_name)
        return self.file

    def _create_basic_structure(self, project_name: str):
        """基本的なプロジェクト構造を作成"""
        timestamp = int(time.time())

        org = self.file.createIfcOrganization(Name="StbGeometryEngine")
        person = self.file.createIfcPerson(FamilyName="StbGeometryEngine")
        pao = self.file.createIfcPersonAndOrganization(
            ThePerson=person, TheOrganization=org
        )
        app = self.file.createIfcApplication(
            ApplicationDeveloper=org,
            Version="1.0",
            ApplicationFullName=self.application_name,
            ApplicationIdentifier="stb_geometry_engine",
        )

        self.owner_history = self.file.createIfcOwnerHistory(
            OwningUser=pao,
            OwningApplication=app,
            State="READWRITE",
            ChangeAction="ADDED",
            CreationDate=timestamp,
        )

        # 幾何学コンテキスト
        context = self._create_geometric_contexts()

        # 単位系
        unit_assign = self.file.createIfcUnitAssignment(Units=self._create_units())

        project = self.file.createIfcProject(
            GlobalId=create_ifc_guid(),
            Name=project_name,
            OwnerHistory=self.owner_history,
            RepresentationContexts=[context],
            UnitsInContext=unit_assign,
        )

        # 空間構造
        self._create_spatial_hierarchy(project)

    def _create_geometric_contexts(self):
        """幾何学表現コンテキストを作成（親コンテキストを返す）"""
        context = self.file.createIfcGeometricRepresentationContext(
            ContextType="Model",
            CoordinateSpaceDimension=3,
            Precision=1e-5,
            WorldCoordinateSystem=self.file.createIfcAxis2Placement3D(
                Location=self.file.createIfcCartesianPoint([0.0, 0.0, 0.0])
            ),
        )

        self.model_context = self.file.createIfcGeometricRepresentationSubContext(
            ContextIdentifier="Body",
            ContextType="Model",
            ParentContext=context,
            TargetView="MODEL_VIEW",
        )

        self.plan_context = self.file.createIfcGeometricRepresentationSubContext(
            ContextIdentifier="Axis",
            ContextType="Plan",
            ParentContext=context,
            TargetView="PLAN_VIEW",
        )
        return context

    def _create_units(self) -> List:
        """単位系を作成（長さ mm）"""
        return [
            self.file.createIfcSIUnit(
                UnitType="LENGTHUNIT", Name="METRE", Prefix="MILLI"
            ),
            self.file.createIfcSIUnit(UnitType="AREAUNIT", Name="SQUARE_METRE"),
            self.file.createIfcSIUnit(UnitType="VOLUMEUNIT", Name="CUBIC_METRE"),
            self.file.createIfcSIUnit(UnitType="PLANEANGLEUNIT", Name="RADIAN"),
        ]

    def _create_spatial_hierarchy(self, project):
        """サイト・建物の空間階層を作成"""
        site_placement = self.file.createIfcLocalPlacement(
            RelativePlacement=self.file.createIfcAxis2Placement3D(
                Location=self.file.createIfcCartesianPoint([0.0, 0.0, 0.0])
            )
        )
        site = self.file.createIfcSite(
            GlobalId=create_ifc_guid(),
            OwnerHistory=self.owner_history,
            Name="Site",
            CompositionType="ELEMENT",
            ObjectPlacement=site_placement,
        )
        self.file.createIfcRelAggregates(
            GlobalId=create_ifc_guid(),
            OwnerHistory=self.owner_history,
            RelatingObject=project,
            RelatedObjects=[site],
        )

        self.building_placement = self.file.createIfcLocalPlacement(
            PlacementRelTo=site_placement,
            RelativePlacement=self.file.createIfcAxis2Placement3D(
                Location=self.file.createIfcCartesianPoint([0.0, 0.0, 0.0])
            ),
        )
        self.building = self.file.createIfcBuilding(
            GlobalId=create_ifc_guid(),
            OwnerHistory=self.owner_history,
            Name="Building",
            CompositionType="ELEMENT",
            ObjectPlacement=self.building_placement,
        )
        self.file.createIfcRelAggregates(
            GlobalId=create_ifc_guid(),
            OwnerHistory=self.owner_history,
            RelatingObject=site,
            RelatedObjects=[self.building],
        )

    def add_storey(self, name: str, elevation: float):
        """BuildingStoreyを追加して現在の階に設定"""
        placement = self.file.createIfcLocalPlacement(
            PlacementRelTo=self.building_placement,
            RelativePlacement=self.file.createIfcAxis2Placement3D(
                Location=self.file.createIfcCartesianPoint([0.0, 0.0, float(elevation)])
            ),
        )
        storey = self.file.createIfcBuildingStorey(
            GlobalId=create_ifc_guid(),
            OwnerHistory=self.owner_history,
            Name=name,
            CompositionType="ELEMENT",
            ObjectPlacement=placement,
            Elevation=float(elevation),
        )
        self.file.createIfcRelAggregates(
            GlobalId=create_ifc_guid(),
            OwnerHistory=self.owner_history,
            RelatingObject=self.building,
            RelatedObjects=[storey],
        )
        self.storey = storey
        self.storey_placement = placement
        return storey, placement

    def contain_in_storey(self, elements: List, storey=None) -> None:
        """要素を階に所属させる"""
        if not elements:
            return
        self.file.createIfcRelContainedInSpatialStructure(
            GlobalId=create_ifc_guid(),
            OwnerHistory=self.owner_history,
            RelatedElements=elements,
            RelatingStructure=storey or self.storey,
        )

    def get_3d_context(self):
        """3D幾何学表現コンテキストを取得"""
        return self.model_context
