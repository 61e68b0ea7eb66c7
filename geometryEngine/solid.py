"""生成結果（ソリッド・スキップ要素・バッチ結果）"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from exceptions.custom_errors import SkipReason
from geometryEngine.placement_calculator import Placement
from geometryEngine.profile_builder import Profile
from geometryEngine.profile_parameter_mapper import ProfileParams
from geometryEngine.section_classifier import SectionFamily
from geometryEngine.tapered_builder import LoftedMesh, MultiSectionSpec


@dataclass
class Solid:
    """描画層に渡すソリッド

    profile（単一断面）と multi_section（多断面）のどちらか一方を持ちます。
    多断面の場合は mesh にロフト結果（局所座標）が入ります。
    """

    element_id: str
    element_type: str
    section_family: SectionFamily
    placement: Placement
    length: float
    profile: Optional[Profile] = None
    multi_section: Optional[MultiSectionSpec] = None
    mesh: Optional[LoftedMesh] = None
    profile_params: Optional[ProfileParams] = None
    part: str = "main"
    name: str = ""
    guid: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_multi_section(self) -> bool:
        return self.multi_section is not None


@dataclass(frozen=True)
class SkippedElement:
    element_id: str
    element_type: str
    reason: SkipReason
    message: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "element_id": self.element_id,
            "element_type": self.element_type,
            "reason": self.reason.value,
            "message": self.message,
        }


@dataclass
class GenerationResult:
    """バッチ生成結果（ソリッドが0件でも正常な結果）"""

    solids: List[Solid] = field(default_factory=list)
    skipped: List[SkippedElement] = field(default_factory=list)
    cancelled: bool = False

    def skipped_by_reason(self) -> Dict[str, int]:
        return dict(Counter(item.reason.value for item in self.skipped))

    def solids_by_type(self) -> Dict[str, int]:
        return dict(Counter(solid.element_type for solid in self.solids))

    def extend(self, other: "GenerationResult") -> None:
        self.solids.extend(other.solids)
        self.skipped.extend(other.skipped)
        self.cancelled = self.cancelled or other.cancelled

    def to_summary(self) -> Dict[str, Any]:
        return {
            "solid_count": len(self.solids),
            "solids_by_type": self.solids_by_type(),
            "skipped_count": len(self.skipped),
            "skipped_by_reason": self.skipped_by_reason(),
            "skipped": [item.to_dict() for item in self.skipped],
            "cancelled": self.cancelled,
        }
