# ifcCreator/api.py
"""
IfcCreator High-Level API
生成済みソリッドを IFC4 ファイルへ出力します。
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Union
import logging

from common.guid_utils import convert_stb_guid_to_ifc, create_ifc_guid
from exceptions.custom_errors import IFCGenerationError, ProfileCreationError
from geometryEngine.solid import Solid
from ifcCreator.core.ifc_project_builder import IFCProjectBuilder
from ifcCreator.services.geometry_service import GeometryService
from ifcCreator.services.profile_service import ProfileService
from ifcCreator.services.property_service import PropertyService

logger = logging.getLogger(__name__)

# 要素種別 → (IFCクラス, PredefinedType)
IFC_ENTITY_MAP: Dict[str, tuple] = {
    "Column": ("IfcColumn", "COLUMN"),
    "Post": ("IfcColumn", "COLUMN"),
    "Beam": ("IfcBeam", "BEAM"),
    "Girder": ("IfcBeam", "BEAM"),
    "Brace": ("IfcMember", "BRACE"),
    "Pile": ("IfcPile", "NOTDEFINED"),
    "Footing": ("IfcFooting", "PAD_FOOTING"),
    "StripFooting": ("IfcFooting", "STRIP_FOOTING"),
    "FoundationColumn": ("IfcColumn", "COLUMN"),
    "Slab": ("IfcSlab", "FLOOR"),
    "Wall": ("IfcWall", "SOLIDWALL"),
}
DEFAULT_IFC_ENTITY = ("IfcBuildingElementProxy", "NOTDEFINED")


def resolve_guid(solid: Solid, used: set) -> str:
    """STB GUID を変換（不正・重複時は新規発行）"""
    if solid.guid:
        try:
            guid = convert_stb_guid_to_ifc(solid.guid)
        except ValueError:
            logger.debug("%s %s: GUID %s は不正なため再発行します", solid.element_type, solid.element_id, solid.guid)
        else:
            if guid not in used:
                used.add(guid)
                return guid
    guid = create_ifc_guid()
    used.add(guid)
    return guid


class IfcCreator:
    """ソリッド → IFC 出力API

    使用例:
        creator = IfcCreator("ST-Bridge Geometry")
        creator.export(result.solids, "output/model.ifc")
    """

    def __init__(self, project_name: str = "構造プロジェクト"):
        self.project_name = project_name
        self.project_builder = IFCProjectBuilder()
        self.file = None
        self.created: Dict[str, int] = {}
        self.failed: List[Dict[str, Any]] = []

    def build(self, solids: Iterable[Solid]):
        """IFCモデルをメモリ上に構築して返す"""
        self.file = self.project_builder.create_project_structure(self.project_name)
        self.project_builder.add_storey("GL", 0.0)
        profiles = ProfileService(self.file)
        geometry = GeometryService(self.file, self.project_builder.get_3d_context(), profiles)
        properties = PropertyService(self.file, self.project_builder.owner_history)

        elements = []
        used_guids: set = set()
        for solid in solids:
            try:
                element = self._create_element(solid, geometry, properties, used_guids)
            except (IFCGenerationError, ProfileCreationError) as e:
                logger.warning("%s", e)
                self.failed.append(
                    {"element_id": solid.element_id, "element_type": solid.element_type, "message": str(e)}
                )
                continue
            elements.append(element)

        self.project_builder.contain_in_storey(elements)
        logger.info("IFC要素作成: %d 件 (失敗 %d 件) %s", len(elements), len(self.failed), self.created)
        return self.file

    def _create_element(self, solid: Solid, geometry: GeometryService, properties: PropertyService, used_guids: set):
        ifc_class, predefined = IFC_ENTITY_MAP.get(solid.element_type, DEFAULT_IFC_ENTITY)
        shape = geometry.create_product_shape(solid)
        placement = geometry.create_local_placement(solid, self.project_builder.storey_placement)
        name = solid.name or solid.element_id
        if solid.part != "main":
            name = f"{name}_{solid.part}"

        attributes = dict(
            GlobalId=resolve_guid(solid, used_guids),
            OwnerHistory=self.project_builder.owner_history,
            Name=name,
            ObjectPlacement=placement,
            Representation=shape,
            Tag=solid.element_id,
        )
        if ifc_class != DEFAULT_IFC_ENTITY[0]:
            attributes["PredefinedType"] = predefined
        element = self.file.create_entity(ifc_class, **attributes)
        properties.create_element_properties(solid, element, ifc_class)
        self.created[ifc_class] = self.created.get(ifc_class, 0) + 1
        return element

    def export(self, solids: Iterable[Solid], filename: Union[str, Path]) -> Path:
        """IFCファイルを書き出す

        Raises:
            IFCGenerationError: ファイル書き込みに失敗した場合
        """
        path = Path(filename)
        self.build(solids)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            self.file.write(str(path))
        except OSError as e:
            raise IFCGenerationError(f"IFCファイルの書き込みに失敗しました: {path}: {e}") from e
        logger.info("IFCファイルを出力しました: %s", path)
        return path
