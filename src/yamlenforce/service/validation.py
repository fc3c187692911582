"""Validates documents end to end: load, match structure, locate errors."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from ruamel.yaml.error import YAMLError

from yamlenforce.models.errors import (
    AbstractError,
    BatchResult,
    LocatedError,
    ValidationResult,
)
from yamlenforce.parser.document import DocumentError
from yamlenforce.parser.loader import LoadedDocument, TrackedLoader
from yamlenforce.parser.locator import locate_error
from yamlenforce.structure.validator import (
    JsonSchemaValidator,
    Structure,
    StructureValidator,
)

logger = logging.getLogger("yamlenforce.service")


class DocumentValidator:
    """Runs a structure validator over documents and attaches source locations.

    Problems with the document itself (missing file, parse failure, no
    structure) are reported as ``meta`` errors, never raised.
    """

    def __init__(
        self,
        loader: TrackedLoader | None = None,
        validator: StructureValidator | None = None,
    ) -> None:
        self._loader = loader or TrackedLoader()
        self._validator = validator or JsonSchemaValidator()

    def validate_string(
        self,
        content: str,
        structure: Structure,
        source: str = "<string>",
    ) -> ValidationResult:
        """Validate YAML/JSON ``content`` against ``structure``."""
        try:
            document = self._loader.load_string(content, filename=source)
        except (DocumentError, YAMLError) as exc:
            logger.warning("Failed to parse document '%s': %s", source, exc)
            return self._meta(source, f"Failed to parse document: {exc}")
        return self._validate_document(document, structure)

    def validate_file(
        self,
        path: Path | str,
        structure: Structure | None = None,
    ) -> ValidationResult:
        """Validate the file at ``path`` against ``structure``."""
        path = Path(path)
        source = str(path)

        if not path.exists():
            return self._meta(source, "File does not exist")
        if not path.is_file():
            return self._meta(source, "Not a file")

        logger.info("Validating file '%s'", source)
        try:
            document = self._loader.load(path)
        except (DocumentError, YAMLError, UnicodeDecodeError) as exc:
            logger.warning("Failed to parse document '%s': %s", source, exc)
            return self._meta(source, f"Failed to parse document: {exc}")

        if structure is None:
            return self._meta(
                source, "Unable to determine expected structure for file", document
            )
        return self._validate_document(document, structure)

    def validate_files(
        self,
        paths: Iterable[Path | str],
        structure: Structure | None = None,
    ) -> BatchResult:
        """Validate every file in ``paths``; the batch is valid only if all are."""
        batch = BatchResult(results=[self.validate_file(path, structure) for path in paths])
        logger.info(
            "Validated %d file(s): %d failed, %d error(s)",
            len(batch.results),
            len(batch.failed),
            batch.error_count,
        )
        return batch

    def _validate_document(
        self, document: LoadedDocument, structure: Structure
    ) -> ValidationResult:
        errors = self._validator.validate(document.data, structure)
        logger.debug("Structure validation of '%s' found %d error(s)", document.source, len(errors))

        located: list[LocatedError] = []
        for error in errors:
            location = None
            if document.range_map is not None:
                location = locate_error(error, document.range_map)
            located.append(LocatedError(error=error, location=location))
        return ValidationResult(source=document.source, errors=located)

    @staticmethod
    def _meta(
        source: str, message: str, document: LoadedDocument | None = None
    ) -> ValidationResult:
        error = AbstractError.meta(message)
        location = None
        if document is not None and document.range_map is not None:
            location = locate_error(error, document.range_map)
        return ValidationResult(
            source=source,
            errors=[LocatedError(error=error, location=location)],
        )
