"""ifcCreator Services Package

プロファイル・形状・プロパティの IFC 変換サービス
"""

from .profile_service import ProfileService
from .property_service import PropertyService
from .geometry_service import GeometryService

__all__ = [
    'ProfileService',
    'PropertyService',
    'GeometryService'
]
