"""Source positions inside a YAML/JSON document."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator


class SourceLocation(BaseModel):
    """A 1-based line/column position in source text."""

    model_config = ConfigDict(frozen=True)

    line: int
    column: int

    def __str__(self) -> str:
        return f"L{self.line}:{self.column}"


class SourceRange(BaseModel):
    """Span of source text between two locations."""

    model_config = ConfigDict(frozen=True)

    start: SourceLocation
    end: SourceLocation

    @model_validator(mode="after")
    def _check_order(self) -> SourceRange:
        if (self.end.line, self.end.column) < (self.start.line, self.start.column):
            raise ValueError(f"range end {self.end} precedes start {self.start}")
        return self
