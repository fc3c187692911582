"""Structured error models with YAML source position tracking."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from yamlenforce.models.location import SourceLocation

PathSegment = str | int


class ErrorKind(StrEnum):
    """Which part of the addressed node an error points at."""

    KEY = "key"
    VALUE_START = "value-start"
    VALUE_END = "value-end"
    META = "meta"


class AbstractError(BaseModel):
    """A validation error addressed by logical path rather than by position.

    ``path`` is empty and ``kind`` is ``meta`` for document/file-level errors.
    """

    model_config = ConfigDict(frozen=True)

    message: str
    path: tuple[PathSegment, ...] = ()
    kind: ErrorKind = ErrorKind.VALUE_START

    @classmethod
    def meta(cls, message: str) -> AbstractError:
        return cls(message=message, path=(), kind=ErrorKind.META)


class ResolvedLocation(BaseModel):
    """Where an error lands in the source, plus the alias hops taken to get there.

    ``via_trail`` is ordered from the hop nearest ``primary`` to the hop
    nearest the document root.
    """

    model_config = ConfigDict(frozen=True)

    primary: SourceLocation
    via_trail: tuple[SourceLocation, ...] = ()


class LocatedError(BaseModel):
    """An abstract error paired with its resolved position, if one is known."""

    error: AbstractError
    location: ResolvedLocation | None = None


class ValidationResult(BaseModel):
    """Result of validating a single document."""

    source: str
    errors: list[LocatedError] = []

    @property
    def valid(self) -> bool:
        return not self.errors


class BatchResult(BaseModel):
    """Aggregate of several per-document results."""

    results: list[ValidationResult] = []

    @property
    def valid(self) -> bool:
        return all(result.valid for result in self.results)

    @property
    def error_count(self) -> int:
        return sum(len(result.errors) for result in self.results)

    @property
    def failed(self) -> list[ValidationResult]:
        return [result for result in self.results if not result.valid]
