"""Position indexer: maps a document's logical shape onto source ranges.

The indexer walks the node tree once, depth first. Every leaf (scalar,
alias, empty collection) writes its logical path into the range map, one
segment at a time, creating each segment's node on first visit only. Alias
leaves additionally get the range map of their anchored node attached,
built by the same walk.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType

from yamlenforce.models.errors import PathSegment
from yamlenforce.models.location import SourceRange
from yamlenforce.models.range_map import RangeIndexNode
from yamlenforce.parser.document import (
    AliasNode,
    LineCounter,
    MappingNode,
    Node,
    ScalarNode,
    SequenceNode,
)

logger = logging.getLogger("yamlenforce.indexer")


@dataclass(frozen=True)
class IndexContext:
    """Traversal state threaded through every recursive step.

    ``anchors`` maps anchor names to their defining node, as registered so
    far. ``expanding`` holds the anchors whose range maps are currently being
    built; an alias to one of them is left unresolved.
    """

    anchors: Mapping[str, Node] = field(default_factory=dict)
    expanding: frozenset[str] = frozenset()

    def register(self, node: Node) -> IndexContext:
        if node.anchor is None:
            return self
        return replace(self, anchors={**self.anchors, node.anchor: node})

    def entering(self, anchor: str) -> IndexContext:
        return replace(self, expanding=self.expanding | {anchor})


@dataclass(frozen=True)
class _Step:
    segment: PathSegment
    value_range: SourceRange
    key_range: SourceRange | None = None


@dataclass
class _Entry:
    """Mutable range map node, only alive while one map is being built."""

    value_range: SourceRange
    key_range: SourceRange | None = None
    children: dict[PathSegment, _Entry] = field(default_factory=dict)
    alias_target: RangeIndexNode | None = None

    def descend(self, step: _Step) -> _Entry:
        entry = self.children.get(step.segment)
        if entry is None:
            entry = _Entry(value_range=step.value_range, key_range=step.key_range)
            self.children[step.segment] = entry
        return entry

    def freeze(self) -> RangeIndexNode:
        return RangeIndexNode(
            value_range=self.value_range,
            key_range=self.key_range,
            children=MappingProxyType(
                {segment: child.freeze() for segment, child in self.children.items()}
            ),
            alias_target=self.alias_target,
        )


def _is_leaf(node: Node) -> bool:
    if isinstance(node, (ScalarNode, AliasNode)):
        return True
    if isinstance(node, MappingNode):
        return not node.pairs
    if isinstance(node, SequenceNode):
        return not node.items
    return False



def _register_subtree(node: Node, ctx: IndexContext) -> IndexContext:
    ctx = ctx.register(node)
    if isinstance(node, MappingNode):
        for key, value in node.pairs:
            ctx = _register_subtree(value, _register_subtree(key, ctx))
    elif isinstance(node, SequenceNode):
        for item in node.items:
            ctx = _register_subtree(item, ctx)
    return ctx


class PositionIndexer:
    """Builds the range map of a composed document."""

    def __init__(self, counter: LineCounter) -> None:
        self._counter = counter

    def index(self, root: Node) -> RangeIndexNode | None:
        """Return the range map rooted at ``root``, or ``None`` if it has no position."""
        range_map, _ = self._build(root, IndexContext())
        return range_map

    def _range(self, node: Node) -> SourceRange | None:
        if node.span is None:
            return None
        return self._counter.range(node.span)

    def _build(
        self, root: Node, ctx: IndexContext
    ) -> tuple[RangeIndexNode | None, IndexContext]:
        root_range = self._range(root)
        if root_range is None:
            return None, ctx
        entry = _Entry(value_range=root_range)
        ctx = self._visit(root, (), entry, ctx)
        return entry.freeze(), ctx

    def _visit(
        self,
        node: Node,
        steps: tuple[_Step | None, ...],
        root: _Entry,
        ctx: IndexContext,
    ) -> IndexContext:
        ctx = ctx.register(node)

        if isinstance(node, MappingNode):
            for key, value in node.pairs:
                if not isinstance(key, ScalarNode):
                    # Complex keys have no path segment a validator could name;
                    # anchors under the pair still resolve for later aliases.
                    ctx = _register_subtree(value, _register_subtree(key, ctx))
                    continue
                ctx = ctx.register(key)
                key_range = self._range(key)
                value_range = self._range(value)
                step = None
                if key_range is not None and value_range is not None:
                    step = _Step(key.value, value_range, key_range)
                ctx = self._visit(value, steps + (step,), root, ctx)
        elif isinstance(node, SequenceNode):
            for position, item in enumerate(node.items):
                item_range = self._range(item)
                step = None if item_range is None else _Step(position, item_range)
                ctx = self._visit(item, steps + (step,), root, ctx)

        if _is_leaf(node):
            self._record(node, steps, root, ctx)
        return ctx

    def _record(
        self,
        node: Node,
        steps: tuple[_Step | None, ...],
        root: _Entry,
        ctx: IndexContext,
    ) -> None:
        leaf_range = self._range(node)
        if leaf_range is None or any(step is None for step in steps):
            return

        entry = root
        for step in steps:
            entry = entry.descend(step)
        entry.value_range = leaf_range

        if isinstance(node, AliasNode) and entry.alias_target is None:
            entry.alias_target = self._resolve_alias(node, ctx)

    def _resolve_alias(self, node: AliasNode, ctx: IndexContext) -> RangeIndexNode | None:
        if node.source in ctx.expanding:
            logger.debug("Alias '*%s' re-enters its own anchor; left unresolved", node.source)
            return None
        target = ctx.anchors.get(node.source)
        if target is None:
            logger.debug("Alias '*%s' has no registered anchor", node.source)
            return None
        # The expansion's own anchor registrations stay local to it.
        range_map, _ = self._build(target, ctx.entering(node.source))
        return range_map


def build_range_map(root: Node, counter: LineCounter) -> RangeIndexNode | None:
    """Index ``root`` with a fresh :class:`PositionIndexer`."""
    return PositionIndexer(counter).index(root)
