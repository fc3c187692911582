"""Tests for resolving abstract errors to source locations."""

from __future__ import annotations

from types import MappingProxyType

import pytest

from yamlenforce.models.errors import AbstractError, ErrorKind
from yamlenforce.models.range_map import RangeIndexNode
from yamlenforce.parser.locator import locate_error
from tests.conftest import ALIASED_YAML, MULTI_HOP_YAML, SNAKE_YAML, index_yaml, loc, rng


def _node(value_range, key_range=None, children=None, alias_target=None) -> RangeIndexNode:
    return RangeIndexNode(
        value_range=value_range,
        key_range=key_range,
        children=MappingProxyType(children or {}),
        alias_target=alias_target,
    )


@pytest.fixture
def hand_built_map() -> RangeIndexNode:
    """``list: [{x: 1}]`` laid out over three lines."""
    x = _node(rng(3, 8, 3, 9), key_range=rng(3, 5, 3, 6))
    item = _node(rng(3, 5, 4, 1), children={"x": x})
    seq = _node(rng(2, 3, 4, 1), key_range=rng(1, 1, 1, 5), children={0: item})
    return _node(rng(1, 1, 4, 1), children={"list": seq})


class TestErrorKinds:
    def test_key_error_uses_key_start(self, hand_built_map: RangeIndexNode) -> None:
        error = AbstractError(message="extra key", path=("list", 0, "x"), kind=ErrorKind.KEY)
        assert locate_error(error, hand_built_map).primary == loc(3, 5)

    def test_key_error_without_key_range_uses_value_start(
        self, hand_built_map: RangeIndexNode
    ) -> None:
        error = AbstractError(message="bad item", path=("list", 0), kind=ErrorKind.KEY)
        assert locate_error(error, hand_built_map).primary == loc(3, 5)

    def test_value_start(self, hand_built_map: RangeIndexNode) -> None:
        error = AbstractError(message="bad", path=("list", 0, "x"), kind=ErrorKind.VALUE_START)
        assert locate_error(error, hand_built_map).primary == loc(3, 8)

    def test_value_end(self, hand_built_map: RangeIndexNode) -> None:
        error = AbstractError(message="missing", path=("list", 0), kind=ErrorKind.VALUE_END)
        assert locate_error(error, hand_built_map).primary == loc(4, 1)

    def test_meta_with_empty_path_is_root_start(self, hand_built_map: RangeIndexNode) -> None:
        resolved = locate_error(AbstractError.meta("no structure"), hand_built_map)
        assert resolved.primary == loc(1, 1)
        assert resolved.via_trail == ()

    @pytest.mark.parametrize(
        "content, start",
        [
            ("- a\n- b\n", loc(1, 1)),
            ("key: value\n", loc(1, 1)),
            ("plain scalar\n", loc(1, 1)),
            ("# leading comment\nkey: value\n", loc(2, 1)),
            ("  {a: 1}\n", loc(1, 3)),
        ],
    )
    def test_meta_resolves_to_root_for_any_shape(self, content: str, start) -> None:
        range_map = index_yaml(content)
        resolved = locate_error(AbstractError.meta("file-level"), range_map)
        assert resolved.primary == range_map.value_range.start == start


class TestPartialPaths:
    def test_unknown_segment_falls_back_to_ancestor(self, hand_built_map: RangeIndexNode) -> None:
        error = AbstractError(
            message="derived", path=("list", 0, "nope", "deeper"), kind=ErrorKind.VALUE_START
        )
        assert locate_error(error, hand_built_map).primary == loc(3, 5)

    def test_unknown_first_segment_falls_back_to_root(
        self, hand_built_map: RangeIndexNode
    ) -> None:
        error = AbstractError(message="missing", path=("other",), kind=ErrorKind.KEY)
        assert locate_error(error, hand_built_map).primary == loc(1, 1)

    def test_string_and_integer_segments_are_distinct(
        self, hand_built_map: RangeIndexNode
    ) -> None:
        error = AbstractError(message="bad", path=("list", "0"), kind=ErrorKind.VALUE_START)
        assert locate_error(error, hand_built_map).primary == loc(2, 3)


class TestAliasResolution:
    def test_error_behind_alias_points_at_target(self) -> None:
        error = AbstractError(
            message="'world' is not an integer",
            path=("b", "hello", "there"),
            kind=ErrorKind.VALUE_START,
        )
        resolved = locate_error(error, index_yaml(ALIASED_YAML))
        assert resolved.primary == loc(3, 12)
        assert resolved.via_trail == (loc(4, 4),)

    def test_same_error_without_alias_has_no_trail(self) -> None:
        error = AbstractError(message="bad", path=("a", "hello", "there"))
        resolved = locate_error(error, index_yaml(ALIASED_YAML))
        assert resolved.primary == loc(3, 12)
        assert resolved.via_trail == ()

    def test_multi_hop_trail_is_nearest_primary_first(self) -> None:
        error = AbstractError(message="bad", path=("top", "inner", "x"))
        resolved = locate_error(error, index_yaml(MULTI_HOP_YAML))
        assert resolved.primary == loc(2, 6)
        assert resolved.via_trail == (loc(4, 10), loc(5, 6))

    def test_trailing_alias_is_unwound(self) -> None:
        error = AbstractError(message="bad", path=("b",), kind=ErrorKind.VALUE_START)
        resolved = locate_error(error, index_yaml(ALIASED_YAML))
        assert resolved.primary == loc(1, 4)
        assert resolved.via_trail == (loc(4, 4),)

    def test_cyclic_alias_terminates(self) -> None:
        error = AbstractError(message="bad", path=("a", 0, 0, 0, 0))
        resolved = locate_error(error, index_yaml("a: &a [*a]\n"))
        assert resolved.primary == loc(1, 8)
        assert resolved.via_trail == (loc(1, 8),)


class TestScenarios:
    def test_missing_and_extra_key(self) -> None:
        range_map = index_yaml(SNAKE_YAML)
        missing = AbstractError(
            message="missing key 'url'", path=("images", 0), kind=ErrorKind.VALUE_END
        )
        extra = AbstractError(message="extra key", path=("images", 0, "uri"), kind=ErrorKind.KEY)
        assert locate_error(missing, range_map).primary == loc(4, 1)
        assert locate_error(extra, range_map).primary == loc(3, 5)

    def test_top_level_extra_key(self) -> None:
        extra = AbstractError(message="extra key", path=("images",), kind=ErrorKind.KEY)
        assert locate_error(extra, index_yaml(SNAKE_YAML)).primary == loc(2, 1)
