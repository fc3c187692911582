"""YAML loader with position tracking for rich error reporting."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.constructor import BaseConstructor, SafeConstructor
from ruamel.yaml.nodes import MappingNode, ScalarNode

from yamlenforce.models.range_map import RangeIndexNode
from yamlenforce.parser.document import DocumentComposer, LineCounter, YAMLSafetyError
from yamlenforce.parser.indexer import build_range_map
from yamlenforce.settings import Settings

logger = logging.getLogger("yamlenforce.loader")


_STR_TAG = "tag:yaml.org,2002:str"


class LiteralKeyConstructor(SafeConstructor):
    """Safe constructor that keeps scalar mapping keys as their source text.

    Validators then name a key exactly as it is written (``true``, ``1``,
    ``~``), which is also the segment the range map records for it.
    """

    def construct_mapping(self, node: Any, deep: bool = False) -> Any:
        if isinstance(node, MappingNode):
            self.flatten_mapping(node)
            for key_node, _ in node.value:
                if isinstance(key_node, ScalarNode):
                    key_node.tag = _STR_TAG
        return BaseConstructor.construct_mapping(self, node, deep=deep)


def _to_plain_value(data: Any, memo: dict[int, Any]) -> Any:
    """Copy ``data`` with every remaining non-string mapping key stringified.

    Shared and self-referencing containers are copied once.
    """
    if id(data) in memo:
        return memo[id(data)]
    if isinstance(data, dict):
        plain: dict[str, Any] = {}
        memo[id(data)] = plain
        for key, value in data.items():
            plain[key if isinstance(key, str) else str(key)] = _to_plain_value(value, memo)
        return plain
    if isinstance(data, list):
        items: list[Any] = []
        memo[id(data)] = items
        items.extend(_to_plain_value(item, memo) for item in data)
        return items
    return data


@dataclass
class LoadedDocument:
    """Parsed document value plus its range map (``None`` for an empty document)."""

    data: Any
    range_map: RangeIndexNode | None
    source: str = "<string>"


class TrackedLoader:
    """YAML loader that tracks source positions for error reporting.

    The document is read twice: once by ruamel.yaml's safe loader for the
    plain Python value handed to validators, and once as an event stream to
    build the alias-aware range map.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or Settings()
        self._yaml = YAML(typ="safe", pure=True)
        self._yaml.Constructor = LiteralKeyConstructor
        self._composer = DocumentComposer(max_depth=settings.max_depth)
        self._max_document_size = settings.max_document_size
        self._max_node_count = settings.max_node_count

    # -- safety checks -------------------------------------------------------

    def _check_document_size(self, content: str) -> None:
        if len(content) > self._max_document_size:
            raise YAMLSafetyError(
                f"YAML document exceeds maximum size "
                f"({len(content):,} chars > {self._max_document_size:,} limit)"
            )

    def _check_node_count(self, data: Any) -> None:
        """Post-parse defense-in-depth: reject documents with too many nodes.

        Shared (aliased) values are counted once per reference, so
        billion-laughs style expansion trips the limit. A container is not
        re-entered from inside itself, so self-referencing aliases terminate.
        """
        limit = self._max_node_count
        count = 0
        stack: list[tuple[Any, frozenset[int]]] = [(data, frozenset())]
        while stack:
            node, ancestors = stack.pop()
            count += 1
            if count > limit:
                raise YAMLSafetyError(f"YAML document exceeds maximum node count ({limit:,})")
            if not isinstance(node, (dict, list)) or id(node) in ancestors:
                continue
            inner = ancestors | {id(node)}
            children = node.values() if isinstance(node, dict) else node
            stack.extend((child, inner) for child in children)

    # -- public loading API --------------------------------------------------

    def load(self, path: Path) -> LoadedDocument:
        """Load a YAML/JSON file and return its value and range map."""
        with path.open("r", encoding="utf-8") as handle:
            content = handle.read()
        return self.load_string(content, filename=str(path))

    def load_string(self, content: str, filename: str = "<string>") -> LoadedDocument:
        """Load YAML/JSON from a string."""
        self._check_document_size(content)
        try:
            # Composing first enforces the depth limit before ruamel recurses.
            root = self._composer.compose(content)
            data = self._yaml.load(content)
        except RecursionError as exc:
            raise YAMLSafetyError("YAML nesting exceeds the interpreter recursion limit") from exc
        self._check_node_count(data)
        data = _to_plain_value(data, {})

        if root is None:
            logger.debug("Document '%s' is empty; no range map built", filename)
            return LoadedDocument(data=data, range_map=None, source=filename)

        range_map = build_range_map(root, LineCounter(content))
        return LoadedDocument(data=data, range_map=range_map, source=filename)
