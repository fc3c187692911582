"""Alias-preserving YAML document tree composed from parser events.

ruamel.yaml's own composer replaces every alias with the anchored node
itself, which loses the position of the ``*alias`` occurrence. This module
composes its own tree from the event stream so alias nodes survive with
their own spans.
"""

from __future__ import annotations

import bisect
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.events import (
    AliasEvent,
    CollectionEndEvent,
    DocumentEndEvent,
    DocumentStartEvent,
    MappingEndEvent,
    MappingStartEvent,
    NodeEvent,
    ScalarEvent,
    SequenceEndEvent,
    SequenceStartEvent,
)

from yamlenforce.models.location import SourceLocation, SourceRange

Span = tuple[int, int]

_STRUCTURAL_EVENTS = (NodeEvent, CollectionEndEvent, DocumentStartEvent, DocumentEndEvent)


class DocumentError(Exception):
    """Raised when source text cannot be turned into a single document tree."""


class YAMLSafetyError(DocumentError):
    """Raised when YAML input violates safety constraints.

    Distinct from parse errors: these indicate potentially malicious input
    (e.g., billion-laughs anchors, excessive nesting, oversized documents).
    """


@dataclass(kw_only=True)
class Node:
    """Base document node. ``span`` is ``None`` when the parser gave no offsets."""

    span: Span | None
    anchor: str | None = None


@dataclass(kw_only=True)
class ScalarNode(Node):
    value: str = ""


@dataclass(kw_only=True)
class SequenceNode(Node):
    items: list[Node] = field(default_factory=list)


@dataclass(kw_only=True)
class MappingNode(Node):
    pairs: list[tuple[Node, Node]] = field(default_factory=list)


@dataclass(kw_only=True)
class AliasNode(Node):
    source: str = ""


class LineCounter:
    """Converts character offsets of ``content`` into 1-based line/column."""

    def __init__(self, content: str) -> None:
        self._line_starts = [0]
        offset = content.find("\n")
        while offset != -1:
            self._line_starts.append(offset + 1)
            offset = content.find("\n", offset + 1)

    def location(self, offset: int) -> SourceLocation:
        line = bisect.bisect_right(self._line_starts, offset)
        return SourceLocation(line=line, column=offset - self._line_starts[line - 1] + 1)

    def range(self, span: Span) -> SourceRange:
        start, end = span
        return SourceRange(start=self.location(start), end=self.location(end))


def _span(start_mark: Any, end_mark: Any) -> Span | None:
    start = getattr(start_mark, "index", None)
    end = getattr(end_mark, "index", None)
    if start is None or end is None:
        return None
    return start, end


class DocumentComposer:
    """Builds a :class:`Node` tree for the single document in a YAML stream."""

    def __init__(self, max_depth: int = 64) -> None:
        self._yaml = YAML(typ="safe", pure=True)
        self._max_depth = max_depth

    def compose(self, content: str) -> Node | None:
        """Compose ``content`` into a node tree, or ``None`` for an empty stream."""
        events = (
            event for event in self._yaml.parse(content) if isinstance(event, _STRUCTURAL_EVENTS)
        )
        root: Node | None = None
        seen_document = False
        for event in events:
            if not isinstance(event, DocumentStartEvent):
                continue
            if seen_document:
                raise DocumentError("expected a single document in the stream")
            seen_document = True
            root = self._compose_node(next(events), events, depth=0)
        return root

    def _compose_node(self, event: Any, events: Iterator[Any], depth: int) -> Node:
        if depth > self._max_depth:
            raise YAMLSafetyError(f"YAML nesting exceeds maximum depth ({self._max_depth})")

        if isinstance(event, AliasEvent):
            return AliasNode(span=_span(event.start_mark, event.end_mark), source=event.anchor)

        if isinstance(event, ScalarEvent):
            return ScalarNode(
                span=_span(event.start_mark, event.end_mark),
                anchor=event.anchor,
                value=event.value,
            )

        if isinstance(event, SequenceStartEvent):
            items: list[Node] = []
            for child in events:
                if isinstance(child, SequenceEndEvent):
                    return SequenceNode(
                        span=_span(event.start_mark, child.end_mark),
                        anchor=event.anchor,
                        items=items,
                    )
                items.append(self._compose_node(child, events, depth + 1))

        elif isinstance(event, MappingStartEvent):
            pairs: list[tuple[Node, Node]] = []
            key: Node | None = None
            for child in events:
                if isinstance(child, MappingEndEvent):
                    return MappingNode(
                        span=_span(event.start_mark, child.end_mark),
                        anchor=event.anchor,
                        pairs=pairs,
                    )
                node = self._compose_node(child, events, depth + 1)
                if key is None:
                    key = node
                else:
                    pairs.append((key, node))
                    key = None

        raise DocumentError(f"unexpected parser event {type(event).__name__}")
