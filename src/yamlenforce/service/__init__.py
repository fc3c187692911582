"""Document validation service and result reporting."""

from yamlenforce.service.report import format_error, format_result, format_summary
from yamlenforce.service.validation import DocumentValidator

__all__ = [
    "DocumentValidator",
    "format_error",
    "format_result",
    "format_summary",
]
