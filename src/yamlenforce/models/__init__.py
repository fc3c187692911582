"""Pydantic and dataclass models for locations, errors and range maps."""

from yamlenforce.models.errors import (
    AbstractError,
    BatchResult,
    ErrorKind,
    LocatedError,
    PathSegment,
    ResolvedLocation,
    ValidationResult,
)
from yamlenforce.models.location import SourceLocation, SourceRange
from yamlenforce.models.range_map import RangeIndexNode

__all__ = [
    "AbstractError",
    "BatchResult",
    "ErrorKind",
    "LocatedError",
    "PathSegment",
    "RangeIndexNode",
    "ResolvedLocation",
    "SourceLocation",
    "SourceRange",
    "ValidationResult",
]
