"""ifcCreator

生成済みソリッドの IFC4 出力
"""

from .core.ifc_project_builder import IFCProjectBuilder
from .api import IFC_ENTITY_MAP, IfcCreator

__all__ = [
    "IFCProjectBuilder",
    "IfcCreator",
    "IFC_ENTITY_MAP",
]
