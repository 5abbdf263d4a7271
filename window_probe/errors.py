"""
Error taxonomy for window-probe.

Errors raised by attribute queries decide what the retry scheduler does with
an operation:

- TransientFailureError: the attribute source is busy; the operation is retried
- UnsupportedAttributeError: the query is meaningless for this object; dropped
- DeadlineExceededError: retries exhausted; recorded on the operation, never raised
- MalformedRequestError: a bad request; fatal, never retried
"""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(Enum):
    """
    Error codes for window-probe.

    Ranges:
    - 1000-1099: Attribute query errors
    - 1100-1199: Scheduling errors
    - 1200-1299: Configuration errors
    - 1300-1399: Application registry errors
    """

    # Attribute query errors (1000-1099)
    TRANSIENT_FAILURE = 1000
    UNSUPPORTED_ATTRIBUTE = 1001
    MALFORMED_REQUEST = 1002

    # Scheduling errors (1100-1199)
    DEADLINE_EXCEEDED = 1100

    # Configuration errors (1200-1299)
    INVALID_CONFIG = 1200
    CONFIG_ALREADY_FROZEN = 1201

    # Application registry errors (1300-1399)
    REGISTRY_LOAD_FAILED = 1300


class ProbeError(Exception):
    """Base exception for window-probe errors."""

    default_code = ErrorCode.MALFORMED_REQUEST

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize error.

        Args:
            message: Human-readable error message
            code: Error code from ErrorCode enum (class default if omitted)
            suggestion: Suggested recovery action
            context: Additional context for debugging
        """
        self.code = code or self.default_code
        self.message = message
        self.suggestion = suggestion
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to a JSON-compatible dictionary."""
        result = {
            "code": self.code.value,
            "message": self.message
        }

        if self.suggestion:
            result["suggestion"] = self.suggestion

        if self.context:
            result["context"] = self.context

        return result


class TransientFailureError(ProbeError):
    """The attribute source did not answer in time; the call may be retried."""

    default_code = ErrorCode.TRANSIENT_FAILURE


class UnsupportedAttributeError(ProbeError):
    """The attribute is not supported by this object; retrying is pointless."""

    default_code = ErrorCode.UNSUPPORTED_ATTRIBUTE


class DeadlineExceededError(ProbeError):
    """Retries were exhausted before the operation succeeded."""

    default_code = ErrorCode.DEADLINE_EXCEEDED


class MalformedRequestError(ProbeError):
    """The request itself is invalid; fatal and never retried."""

    default_code = ErrorCode.MALFORMED_REQUEST


class ConfigError(ProbeError):
    """Invalid or late configuration."""

    default_code = ErrorCode.INVALID_CONFIG
