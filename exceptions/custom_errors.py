"""カスタム例外クラス定義"""

from enum import Enum


class SkipReason(str, Enum):
    """要素スキップ理由タグ"""

    MISSING_NODES = "missing-nodes"
    MISSING_SECTION = "missing-section"
    INVALID_LENGTH = "invalid-length"
    DEGENERATE_PROFILE = "degenerate-profile"
    DEGENERATE_GEOMETRY = "degenerate-geometry"
    INSUFFICIENT_SECTIONS = "insufficient-sections"
    GENERATION_ERROR = "generation-error"


class GeometryEngineError(Exception):
    """ジオメトリ生成処理における一般的なエラー"""
    pass


class InputDataError(GeometryEngineError):
    """入力ファイル（バッチ・設定）の読み込みエラー"""
    pass


class ElementValidationError(GeometryEngineError):
    """要素検証エラー"""
    pass


class IFCGenerationError(GeometryEngineError):
    """IFC生成エラー"""
    pass


class ParameterValidationError(ElementValidationError):
    """パラメータ検証エラー"""
    def __init__(self, element_type: str, parameter_name: str, message: str = ""):
        self.element_type = element_type
        self.parameter_name = parameter_name
        if not message:
            message = f"{element_type}の{parameter_name}パラメータに問題があります"
        super().__init__(message)


class GeometryValidationError(ElementValidationError):
    """ジオメトリ検証エラー"""
    def __init__(self, element_type: str, geometry_issue: str, message: str = ""):
        self.element_type = element_type
        self.geometry_issue = geometry_issue
        if not message:
            message = f"{element_type}のジオメトリに問題があります: {geometry_issue}"
        super().__init__(message)


class DegeneratePlacementError(GeometryValidationError):
    """配置計算の縮退エラー（端点の一致・非有限座標）"""
    def __init__(self, placement_info: str = "", message: str = ""):
        self.placement_info = placement_info
        if not message:
            if placement_info:
                message = f"配置を計算できません: {placement_info}"
            else:
                message = "配置を計算できません"
        super().__init__("placement", placement_info, message)


class ProfileMismatchError(GeometryValidationError):
    """補間対象プロファイルの頂点数不一致エラー"""
    def __init__(self, start_count: int, end_count: int, message: str = ""):
        self.start_count = start_count
        self.end_count = end_count
        if not message:
            message = (
                f"プロファイルの頂点数が一致しません: {start_count} != {end_count}"
            )
        super().__init__("profile", "vertex_count_mismatch", message)


class ElementSkippedError(ElementValidationError):
    """要素をスキップすべき状態を表すエラー"""
    def __init__(
        self,
        element_id: str,
        element_type: str,
        reason: SkipReason,
        message: str = "",
    ):
        self.element_id = element_id
        self.element_type = element_type
        self.reason = SkipReason(reason)
        if not message:
            message = f"{element_type} '{element_id}' をスキップします: {self.reason.value}"
        super().__init__(message)


class ProfileCreationError(GeometryEngineError):
    """プロファイル作成エラー"""
    def __init__(self, profile_type: str, parameters: dict = None, message: str = ""):
        self.profile_type = profile_type
        self.parameters = parameters or {}
        if not message:
            message = f"プロファイル'{profile_type}'の作成に失敗しました"
        super().__init__(message)
