"""Error Hierarchy — typed, categorized exceptions for every storage failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - StorageError is the only type a repository caller needs to branch on
    - StorageError.original_error is never discarded (also chained as __cause__)
    - Backend exception types never cross the repository boundary
    - StorageError status follows its cause: rejected input 400 (reused id 409),
      backend or stored-data failure 503
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with OnboardingError base: FastAPI global handler catches all
    - StorageErrorCode as str Enum: one code per repository operation, machine-readable
    - DeserializationError subclasses StorageError so codec failures share the same surface
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    STORAGE = "storage"
    SERIALIZATION = "serialization"
    INTERNAL = "internal"


class StorageErrorCode(str, Enum):
    """Operation-specific codes carried by StorageError."""
    GET_PARTNER_ERROR = "GET_PARTNER_ERROR"
    SAVE_PARTNER_ERROR = "SAVE_PARTNER_ERROR"
    LIST_PARTNERS_ERROR = "LIST_PARTNERS_ERROR"
    DELETE_PARTNER_ERROR = "DELETE_PARTNER_ERROR"
    SAVE_SUBMISSION_ERROR = "SAVE_SUBMISSION_ERROR"
    GET_SUBMISSION_ERROR = "GET_SUBMISSION_ERROR"
    LIST_SUBMISSIONS_ERROR = "LIST_SUBMISSIONS_ERROR"
    DELETE_SUBMISSION_ERROR = "DELETE_SUBMISSION_ERROR"
    DESERIALIZATION_ERROR = "DESERIALIZATION_ERROR"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    store: str | None = None
    key: str | None = None
    debug_info: dict[str, Any] | None = None


class OnboardingError(Exception):
    """Base exception for all onboarding storage errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "store": self.context.store,
                    "key": self.context.key,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class RecordValidationError(OnboardingError):
    """Record or config payload failed validation."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class ResourceNotFoundError(OnboardingError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


# ─── Storage Errors ─────────────────────────────────────────────

# Bad record input: the operation fails the same way on every attempt
CALLER_INPUT_ERRORS = (ValueError, TypeError, KeyError)


class RecordIdReusedError(ValueError):
    """Save of an id whose record this repository already deleted."""


def _storage_status(
    code: StorageErrorCode, cause: BaseException | None,
) -> tuple[int, ErrorSeverity]:
    """HTTP status and severity for a StorageError, judged by its cause.

    Rejected caller input keeps the operation code but is a 4xx, not an outage.
    """
    if code is StorageErrorCode.DESERIALIZATION_ERROR:
        return 503, ErrorSeverity.CRITICAL
    if isinstance(cause, RecordIdReusedError):
        return 409, ErrorSeverity.ERROR
    if isinstance(cause, CALLER_INPUT_ERRORS):
        return 400, ErrorSeverity.ERROR
    return 503, ErrorSeverity.CRITICAL


class StorageError(OnboardingError):
    """A repository operation failed after retries or on a non-retryable failure."""
    def __init__(
        self,
        message: str,
        code: StorageErrorCode,
        original_error: BaseException | None = None,
        context: ErrorContext | None = None,
    ):
        http_status, severity = _storage_status(code, original_error)
        super().__init__(
            message, code.value, ErrorCategory.STORAGE,
            severity, context, http_status,
        )
        self.storage_code = code
        self.original_error = original_error
        if original_error is not None:
            self.__cause__ = original_error

    @property
    def is_caller_error(self) -> bool:
        """True when the input was rejected; retrying the request cannot succeed."""
        return self.http_status < 500


class DeserializationError(StorageError):
    """Stored payload could not be decoded into a record."""
    def __init__(
        self,
        message: str,
        field: str | None = None,
        original_error: BaseException | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, StorageErrorCode.DESERIALIZATION_ERROR,
            original_error, context,
        )
        self.category = ErrorCategory.SERIALIZATION
        self.field = field


class BlobStoreError(OnboardingError):
    """Raw backend failure, raised by blob store implementations.

    Repositories never let this escape; it is the `original_error` of a StorageError.
    """
    def __init__(
        self,
        message: str,
        operation: str,
        transient: bool = True,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Blob store {operation} failed: {message}",
            "BLOB_STORE_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
        self.transient = transient
