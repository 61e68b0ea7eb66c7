"""
共通モジュールパッケージ
"""

from .json_utils import save_json
from .guid_utils import convert_stb_guid_to_ifc, create_ifc_guid

__all__ = ["save_json", "convert_stb_guid_to_ifc", "create_ifc_guid"]
