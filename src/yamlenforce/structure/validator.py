"""Structure validation: matches a parsed document against a JSON Schema.

The matching itself is done by the ``jsonschema`` library; this module only
translates its errors into :class:`AbstractError` records addressed by
logical path, which the error locator turns into source positions.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from yamlenforce.models.errors import AbstractError, ErrorKind

logger = logging.getLogger("yamlenforce.structure")

Structure = Mapping[str, Any]


class StructureError(Exception):
    """Raised when a structure definition cannot be used."""


class StructureValidator(ABC):
    """Compares a document value against an expected structure."""

    @abstractmethod
    def validate(self, data: Any, structure: Structure) -> list[AbstractError]:
        """Return every mismatch between ``data`` and ``structure``, in order."""


def _extra_keys(instance: Mapping[Any, Any], schema: Mapping[str, Any]) -> list[Any]:
    properties = schema.get("properties", {})
    patterns = schema.get("patternProperties", {})
    extras = []
    for key in instance:
        if key in properties:
            continue
        if isinstance(key, str) and any(re.search(pattern, key) for pattern in patterns):
            continue
        extras.append(key)
    return extras


class JsonSchemaValidator(StructureValidator):
    """:class:`StructureValidator` backed by the ``jsonschema`` library."""

    def validate(self, data: Any, structure: Structure) -> list[AbstractError]:
        validator_cls = validator_for(structure)
        try:
            validator_cls.check_schema(structure)
        except SchemaError as exc:
            logger.warning("Rejected invalid structure: %s", exc.message)
            return [AbstractError.meta(f"Invalid structure: {exc.message}")]

        errors: list[AbstractError] = []
        reported_required: set[tuple[tuple[Any, ...], int]] = set()
        for error in validator_cls(structure).iter_errors(data):
            path = tuple(error.absolute_path)

            if error.validator == "required" and isinstance(error.instance, Mapping):
                # jsonschema emits one error per missing property; report them
                # all at once, in the order the schema lists them.
                seen = (path, id(error.schema))
                if seen in reported_required:
                    continue
                reported_required.add(seen)
                errors.extend(
                    AbstractError(
                        message=f"missing key '{name}'",
                        path=path,
                        kind=ErrorKind.VALUE_END,
                    )
                    for name in error.validator_value
                    if name not in error.instance
                )
            elif error.validator == "additionalProperties" and isinstance(
                error.instance, Mapping
            ):
                errors.extend(
                    AbstractError(message="extra key", path=path + (key,), kind=ErrorKind.KEY)
                    for key in _extra_keys(error.instance, error.schema)
                )
            else:
                errors.append(
                    AbstractError(message=error.message, path=path, kind=ErrorKind.VALUE_START)
                )
        return errors


def parse_structure(text: str) -> Structure:
    """Parse a JSON or YAML structure definition given as a string."""
    try:
        structure = YAML(typ="safe", pure=True).load(text)
    except YAMLError as exc:
        raise StructureError(f"Failed to parse structure: {exc}") from exc
    if not isinstance(structure, Mapping):
        raise StructureError("Structure must be a mapping")
    return structure

