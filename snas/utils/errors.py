"""
Error kinds and the structured error response used at every SNAS boundary.

Internals raise SNASError; boundary methods catch it and return error_response()
so callers always receive a JSON-ready dict with an explicit status code.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from snas.utils.timestamp import now_exact


class ErrorKind(str, Enum):
    """Error categories with their HTTP-style status codes."""

    INVALID_INPUT = "INVALID_INPUT"
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"
    EXTERNAL_SERVICE_UNAVAILABLE = "EXTERNAL_SERVICE_UNAVAILABLE"
    VALIDATION_FAILURE = "VALIDATION_FAILURE"
    STORAGE_FAILURE = "STORAGE_FAILURE"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.RECORD_NOT_FOUND: 404,
    ErrorKind.VALIDATION_FAILURE: 422,
    ErrorKind.STORAGE_FAILURE: 500,
    ErrorKind.EXTERNAL_SERVICE_UNAVAILABLE: 503,
}


class SNASError(Exception):
    """
    Exception carrying an ErrorKind and optional per-item details.

    Attributes:
        kind: ErrorKind category
        message: Error description
        details: Optional list of detail strings (e.g., individual validation errors)
        original_error: The underlying exception, if any
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        details: Optional[List[str]] = None,
        original_error: Optional[Exception] = None,
    ):
        self.kind = kind
        self.message = message
        self.details = details or []
        self.original_error = original_error

        # Build enhanced error message
        parts = [f"[{kind.value}] {message}"]

        if self.details:
            parts.extend(f"  - {detail}" for detail in self.details)

        if original_error:
            parts.append(f"Original error: {original_error}")

        super().__init__("\n".join(parts))

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    def to_response(self) -> Dict[str, Any]:
        """Convert to the structured boundary error shape."""
        return error_response(self.message, self.kind, details=self.details)


def error_response(
    message: str,
    kind: ErrorKind = ErrorKind.STORAGE_FAILURE,
    status_code: Optional[int] = None,
    details: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """
    Create the standardized error response.

    Args:
        message: Human-readable error
        kind: ErrorKind category
        status_code: Override for the kind's default status code
        details: Optional detail strings

    Returns:
        {success: False, error, error_kind, status_code, timestamp[, details]}
    """
    response = {
        "success": False,
        "error": message,
        "error_kind": kind.value,
        "status_code": status_code or kind.status_code,
        "timestamp": now_exact(),
    }
    if details:
        response["details"] = list(details)
    return response
