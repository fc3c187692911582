"""YAML parsing with line fidelity and alias-aware error location."""

from yamlenforce.parser.document import (
    DocumentComposer,
    DocumentError,
    LineCounter,
    YAMLSafetyError,
)
from yamlenforce.parser.indexer import PositionIndexer, build_range_map
from yamlenforce.parser.loader import LoadedDocument, TrackedLoader
from yamlenforce.parser.locator import locate_error

__all__ = [
    "DocumentComposer",
    "DocumentError",
    "LineCounter",
    "LoadedDocument",
    "PositionIndexer",
    "TrackedLoader",
    "YAMLSafetyError",
    "build_range_map",
    "locate_error",
]
