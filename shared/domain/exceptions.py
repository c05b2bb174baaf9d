"""
Rich Domain Exceptions

Exception hierarchy for the school simulation.
Supports structured error information, error codes, and context.

Denied matching operations (full course, missing prerequisites, busy
instructor) are not exceptions: they are reported through boolean results.
These classes cover the conditions that cannot be recovered inside a
simulated day.
"""

from enum import Enum
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


class ErrorCode(str, Enum):
    """Standard error codes for domain exceptions."""

    # Domain errors
    DOMAIN_VALIDATION_ERROR = "DOMAIN_VALIDATION_ERROR"
    ENTITY_NOT_FOUND = "ENTITY_NOT_FOUND"
    ENTITY_ALREADY_EXISTS = "ENTITY_ALREADY_EXISTS"
    INVARIANT_VIOLATION = "INVARIANT_VIOLATION"

    # Catalog errors
    SUBJECTS_NOT_FOUND = "SUBJECTS_NOT_FOUND"
    CATALOG_PARSE_ERROR = "CATALOG_PARSE_ERROR"

    # Persistence errors
    SNAPSHOT_ERROR = "SNAPSHOT_ERROR"


class DomainException(Exception):
    """
    Base class for all domain exceptions.

    Provides structured error information with error codes, context, and metadata.
    """

    log_level = "error"

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        status_code: int = 500,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            error_code: Standard error code
            status_code: HTTP status code (default: 500)
            context: Additional context data
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.context = context or {}
        self.cause = cause

        # Log the exception
        getattr(logger, self.log_level)(
            "Domain exception raised",
            error_code=error_code.value,
            message=message,
            status_code=status_code,
            context=context,
            exception_type=type(self).__name__,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        result = {
            "error": self.error_code.value,
            "message": self.message,
            "type": type(self).__name__,
        }
        if self.context:
            result["context"] = self.context
        return result


class ValidationError(DomainException):
    """Raised when domain validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any | None = None,
        **kwargs
    ):
        context = kwargs.pop("context", {})
        if field:
            context["field"] = field
        if value is not None:
            context["value"] = str(value)

        super().__init__(
            message=message,
            error_code=ErrorCode.DOMAIN_VALIDATION_ERROR,
            status_code=400,
            context=context,
            **kwargs
        )


class EntityNotFoundError(DomainException):
    """Raised when an entity is not found."""

    def __init__(
        self,
        entity_type: str,
        entity_id: str | None = None,
        **kwargs
    ):
        message = kwargs.pop("message", None) or f"{entity_type} not found"
        if entity_id:
            message += f" (ID: {entity_id})"

        context = kwargs.pop("context", {})
        context["entity_type"] = entity_type
        if entity_id:
            context["entity_id"] = entity_id

        super().__init__(
            message=message,
            error_code=ErrorCode.ENTITY_NOT_FOUND,
            status_code=404,
            context=context,
            **kwargs
        )


class EntityAlreadyExistsError(DomainException):
    """Raised when attempting to add an entity that already exists."""

    def __init__(
        self,
        entity_type: str,
        entity_id: str | None = None,
        **kwargs
    ):
        message = kwargs.pop("message", None) or f"{entity_type} already exists"
        if entity_id:
            message += f" (ID: {entity_id})"

        context = kwargs.pop("context", {})
        context["entity_type"] = entity_type
        if entity_id:
            context["entity_id"] = entity_id

        super().__init__(
            message=message,
            error_code=ErrorCode.ENTITY_ALREADY_EXISTS,
            status_code=409,
            context=context,
            **kwargs
        )


class SubjectsNotFoundError(DomainException):
    """Raised when a catalog provides no subject, so no simulation can run."""

    def __init__(self, source: str | None = None, **kwargs):
        context = kwargs.pop("context", {})
        if source:
            context["source"] = source

        super().__init__(
            message=(
                "The catalog does not contain a subject. "
                "It is not possible to run the simulation with no subject"
            ),
            error_code=ErrorCode.SUBJECTS_NOT_FOUND,
            status_code=422,
            context=context,
            **kwargs
        )


class CatalogParseError(DomainException):
    """Raised when a catalog line cannot be turned into an entity."""

    # The loader reports skipped lines itself.
    log_level = "debug"

    def __init__(
        self,
        message: str,
        line_number: int | None = None,
        line: str | None = None,
        **kwargs
    ):
        context = kwargs.pop("context", {})
        if line_number is not None:
            context["line_number"] = line_number
        if line is not None:
            context["line"] = line

        super().__init__(
            message=message,
            error_code=ErrorCode.CATALOG_PARSE_ERROR,
            status_code=422,
            context=context,
            **kwargs
        )


class SnapshotError(DomainException):
    """Raised when a school snapshot cannot be written or read."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        **kwargs
    ):
        context = kwargs.pop("context", {})
        if path:
            context["path"] = path

        super().__init__(
            message=message,
            error_code=ErrorCode.SNAPSHOT_ERROR,
            status_code=500,
            context=context,
            **kwargs
        )


class InvariantViolationError(DomainException):
    """Raised when runtime verification finds a broken school invariant."""

    def __init__(
        self,
        violations: list[dict[str, Any]],
        **kwargs
    ):
        message = kwargs.pop("message", None) or (
            f"{len(violations)} school invariant violation(s) detected"
        )
        context = kwargs.pop("context", {})
        context["violations"] = [
            {key: str(value) for key, value in violation.items()} for violation in violations
        ]

        super().__init__(
            message=message,
            error_code=ErrorCode.INVARIANT_VIOLATION,
            status_code=500,
            context=context,
            **kwargs
        )
        self.violations = violations
