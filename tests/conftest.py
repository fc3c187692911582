"""Shared test fixtures for yamlenforce."""

from __future__ import annotations

from pathlib import Path

import pytest

from yamlenforce.models.location import SourceLocation, SourceRange
from yamlenforce.models.range_map import RangeIndexNode
from yamlenforce.parser.document import DocumentComposer, LineCounter
from yamlenforce.parser.indexer import build_range_map
from yamlenforce.parser.loader import TrackedLoader
from yamlenforce.service.validation import DocumentValidator
from yamlenforce.structure.validator import JsonSchemaValidator

FIXTURES_DIR = Path(__file__).parent / "fixtures"
CONFIG_DIR = FIXTURES_DIR / "config"


@pytest.fixture
def loader() -> TrackedLoader:
    return TrackedLoader()


@pytest.fixture
def composer() -> DocumentComposer:
    return DocumentComposer()


@pytest.fixture
def schema_validator() -> JsonSchemaValidator:
    return JsonSchemaValidator()


@pytest.fixture
def document_validator() -> DocumentValidator:
    return DocumentValidator()


def index_yaml(content: str) -> RangeIndexNode:
    """Compose and index ``content``; the document must not be empty."""
    root = DocumentComposer().compose(content)
    assert root is not None
    range_map = build_range_map(root, LineCounter(content))
    assert range_map is not None
    return range_map


def loc(line: int, column: int) -> SourceLocation:
    return SourceLocation(line=line, column=column)


def rng(start_line: int, start_col: int, end_line: int, end_col: int) -> SourceRange:
    return SourceRange(start=loc(start_line, start_col), end=loc(end_line, end_col))


SNAKE_YAML = """\
name: snake
images:
  - uri: pic.png
"""

ALIASED_YAML = """\
a: &a
  hello:
    there: world
b: *a
"""

MULTI_HOP_YAML = """\
base: &base
  x: 1
mid: &mid
  inner: *base
top: *mid
"""

# Requires ``images[].url`` (string) and rejects unknown keys.
ANIMAL_STRUCTURE = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "images": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {"url": {"type": "string"}},
                "required": ["url"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["name", "images"],
    "additionalProperties": False,
}

# Top-level override that only allows ``name``.
NAME_ONLY_STRUCTURE = {
    "type": "object",
    "properties": {"name": {"type": "string"}},
    "additionalProperties": False,
}

GREETING_STRUCTURE = {
    "type": "object",
    "properties": {
        "b": {
            "type": "object",
            "properties": {
                "hello": {
                    "type": "object",
                    "properties": {"there": {"type": "integer"}},
                },
            },
        },
    },
}
