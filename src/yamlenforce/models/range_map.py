"""Range map: a document's logical shape with source ranges attached."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from yamlenforce.models.errors import PathSegment
from yamlenforce.models.location import SourceRange


@dataclass(frozen=True)
class RangeIndexNode:
    """One logical position of a document.

    ``children`` only holds segments that were visited while indexing; a
    missing segment means no position was recorded, not that the document
    lacks it. ``alias_target`` is set when this position is a YAML alias and
    holds the range map of the anchored node.
    """

    value_range: SourceRange
    key_range: SourceRange | None = None
    children: Mapping[PathSegment, RangeIndexNode] = field(
        default_factory=lambda: MappingProxyType({})
    )
    alias_target: RangeIndexNode | None = None

    def child(self, segment: PathSegment) -> RangeIndexNode | None:
        return self.children.get(segment)
