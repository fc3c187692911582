"""Error locator: resolves an abstract error's logical path to a source location."""

from __future__ import annotations

from yamlenforce.models.errors import AbstractError, ErrorKind, ResolvedLocation
from yamlenforce.models.location import SourceLocation
from yamlenforce.models.range_map import RangeIndexNode


def _follow_aliases(cursor: RangeIndexNode, trail: list[SourceLocation]) -> RangeIndexNode:
    while cursor.alias_target is not None:
        trail.append(cursor.value_range.start)
        cursor = cursor.alias_target
    return cursor


def locate_error(error: AbstractError, range_map: RangeIndexNode) -> ResolvedLocation:
    """Resolve ``error`` against ``range_map``.

    Walks ``error.path`` through the map, stepping through alias targets as
    they are met. A segment with no recorded position stops the walk and the
    deepest position reached is used instead, so this never fails.

    The primary location depends on ``error.kind``: the key's start for
    ``key`` errors (falling back to the value when there is no key), the
    value's end for ``value-end`` and the value's start otherwise. Alias hops
    are returned nearest the primary location first.
    """
    cursor = range_map
    trail: list[SourceLocation] = []

    for segment in error.path:
        cursor = _follow_aliases(cursor, trail)
        child = cursor.child(segment)
        if child is None:
            break
        cursor = child

    cursor = _follow_aliases(cursor, trail)

    if error.kind == ErrorKind.KEY and cursor.key_range is not None:
        primary = cursor.key_range.start
    elif error.kind == ErrorKind.VALUE_END:
        primary = cursor.value_range.end
    else:
        primary = cursor.value_range.start

    return ResolvedLocation(primary=primary, via_trail=tuple(reversed(trail)))
