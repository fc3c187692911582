"""Plain-text rendering of validation results."""

from __future__ import annotations

from yamlenforce.models.errors import BatchResult, LocatedError, ResolvedLocation, ValidationResult

SUCCESS_MESSAGE = "All yaml files matched the expected structure(s)!"


def format_location(location: ResolvedLocation) -> str:
    """Render ``L<line>:<col>`` followed by one ``via`` hop per alias."""
    parts = [str(location.primary)]
    parts.extend(f"via {hop}" for hop in location.via_trail)
    return " ".join(parts)


def format_error(located: LocatedError) -> str:
    message = located.error.message
    if located.error.path:
        message += f" ({'.'.join(str(segment) for segment in located.error.path)})"
    if located.location is not None:
        message += f" [{format_location(located.location)}]"
    return message


def format_result(result: ValidationResult, indent: str = "  ") -> list[str]:
    """Return the report lines for one document; empty when it is valid."""
    if result.valid:
        return []
    count = len(result.errors)
    lines = [f"Found {count} error{'' if count == 1 else 's'} in file '{result.source}':"]
    lines.extend(f"{indent}{format_error(located)}" for located in result.errors)
    return lines


def format_summary(batch: BatchResult) -> str:
    """Return the closing line of a batch report.

    The success message is only produced when every document in the batch
    is valid.
    """
    if batch.valid:
        return SUCCESS_MESSAGE
    failed = len(batch.failed)
    return (
        f"{failed} of {len(batch.results)} file{'' if len(batch.results) == 1 else 's'} "
        f"failed validation ({batch.error_count} error{'' if batch.error_count == 1 else 's'})"
    )
