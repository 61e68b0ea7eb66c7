"""Custom exceptions for the ST-Bridge geometry engine"""

from .custom_errors import (
    DegeneratePlacementError,
    ElementSkippedError,
    ElementValidationError,
    GeometryEngineError,
    GeometryValidationError,
    IFCGenerationError,
    InputDataError,
    ParameterValidationError,
    ProfileCreationError,
    ProfileMismatchError,
    SkipReason,
)

__all__ = [
    "DegeneratePlacementError",
    "ElementSkippedError",
    "ElementValidationError",
    "GeometryEngineError",
    "GeometryValidationError",
    "IFCGenerationError",
    "InputDataError",
    "ParameterValidationError",
    "ProfileCreationError",
    "ProfileMismatchError",
    "SkipReason",
]
