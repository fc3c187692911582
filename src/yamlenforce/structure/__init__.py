"""Expected-structure definitions and the validators that apply them."""

from yamlenforce.structure.validator import (
    JsonSchemaValidator,
    Structure,
    StructureError,
    StructureValidator,
    parse_structure,
)

__all__ = [
    "JsonSchemaValidator",
    "Structure",
    "StructureError",
    "StructureValidator",
    "parse_structure",
]
