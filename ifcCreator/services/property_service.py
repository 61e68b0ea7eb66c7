"""Property Service

ソリッドのメタデータを IFC プロパティセットとして付与します。
"""

import logging
from typing import Any, Dict, List

from common.guid_utils import create_ifc_guid
from geometryEngine.solid import Solid

logger = logging.getLogger(__name__)

GEOMETRY_PSET_NAME = "Pset_StbGeometry"

COMMON_PSET_NAMES: Dict[str, str] = {
    "IfcColumn": "Pset_ColumnCommon",
    "IfcBeam": "Pset_BeamCommon",
    "IfcMember": "Pset_MemberCommon",
    "IfcPile": "Pset_PileCommon",
    "IfcFooting": "Pset_FootingCommon",
    "IfcSlab": "Pset_SlabCommon",
    "IfcWall": "Pset_WallCommon",
}


def flatten_metadata(metadata: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """入れ子の辞書を "a.b" 形式のキーに展開（スカラー値のみ）"""
    flat: Dict[str, Any] = {}
    for key, value in metadata.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(flatten_metadata(value, f"{name}."))
        elif isinstance(value, (str, int, float, bool)):
            flat[name] = value
    return flat


class PropertyService:
    """プロパティ管理サービス"""

    def __init__(self, ifc_file, owner_history=None):
        self.file = ifc_file
        self.owner_history = owner_history

    def _value(self, value: Any):
        if isinstance(value, bool):
            return self.file.createIfcBoolean(value)
        if isinstance(value, int):
            return self.file.createIfcInteger(value)
        if isinstance(value, float):
            return self.file.createIfcReal(value)
        return self.file.createIfcLabel(str(value))

    def _single_value(self, name: str, value: Any):
        return self.file.createIfcPropertySingleValue(name, None, self._value(value), None)

    def _attach(self, element, pset_name: str, values: Dict[str, Any]):
        properties = [self._single_value(name, value) for name, value in values.items()]
        pset = self.file.createIfcPropertySet(
            GlobalId=create_ifc_guid(),
            OwnerHistory=self.owner_history,
            Name=pset_name,
            HasProperties=properties,
        )
        rel = self.file.createIfcRelDefinesByProperties(
            GlobalId=create_ifc_guid(),
            OwnerHistory=self.owner_history,
            RelatedObjects=[element],
            RelatingPropertyDefinition=pset,
        )
        return [pset, rel]

    def create_element_properties(self, solid: Solid, element, ifc_class: str) -> List:
        """共通プロパティセットとジオメトリメタデータを付与"""
        created = []
        common_name = COMMON_PSET_NAMES.get(ifc_class)
        if common_name:
            created.extend(
                self._attach(
                    element,
                    common_name,
                    {"Reference": solid.element_id, "LoadBearing": True, "IsExternal": False},
                )
            )

        values = flatten_metadata(solid.metadata)
        values["part"] = solid.part
        values["section_family"] = solid.section_family.value
        created.extend(self._attach(element, GEOMETRY_PSET_NAME, values))
        logger.debug("%s %s: プロパティ %d 件", solid.element_type, solid.element_id, len(values))
        return created
