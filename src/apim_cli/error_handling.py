"""Error taxonomy and top-level error reporting for the APIM CLI."""

import logging
import sys
from enum import Enum
from typing import Any, Dict, Optional, TextIO

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


class ManagementApiError(Exception):
    """Base class for failures surfaced by the Management API client."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class AuthenticationError(ManagementApiError):
    """Login did not complete."""


class NotAuthenticatedError(ManagementApiError):
    """A request needing a session token was made before login."""


class ListingError(ManagementApiError):
    """Listing applications failed."""


class ErrorSeverity(Enum):
    """Classification of error severity levels."""

    CRITICAL = "critical"  # Process must terminate immediately
    HIGH = "high"  # Command aborted
    MEDIUM = "medium"  # Transport or remote failure
    LOW = "low"  # Bad input


class ErrorContext:
    """Context information about a failed command."""

    def __init__(
        self,
        error: BaseException,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        operation: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ):
        self.error = error
        self.severity = severity
        self.operation = operation
        self.metadata = metadata or {}

    @property
    def exit_code(self) -> int:
        if isinstance(self.error, KeyboardInterrupt):
            return EXIT_INTERRUPTED
        return EXIT_FAILURE


def classify_error(error: BaseException, operation: str = "") -> ErrorContext:
    """
    Classify an error and create an appropriate ErrorContext.

    Args:
        error: The exception that reached the top level
        operation: The command during which the error occurred

    Returns:
        ErrorContext with severity and any HTTP status attached as metadata
    """
    error_type = type(error).__name__

    if error_type in ("KeyboardInterrupt", "MemoryError"):
        return ErrorContext(error, ErrorSeverity.CRITICAL, operation)

    if isinstance(error, ManagementApiError):
        # No HTTP status means the request never got an answer
        if error.status is None:
            return ErrorContext(error, ErrorSeverity.MEDIUM, operation)
        return ErrorContext(error, ErrorSeverity.HIGH, operation, {"status": error.status})

    if any(x in error_type for x in ["Network", "Connection", "Timeout"]):
        return ErrorContext(error, ErrorSeverity.MEDIUM, operation)

    if any(x in error_type for x in ["Validation", "Parse", "Format"]) or error_type == "ValueError":
        return ErrorContext(error, ErrorSeverity.LOW, operation)

    return ErrorContext(error, ErrorSeverity.MEDIUM, operation)


def format_error(context: ErrorContext) -> str:
    """Render the single user-facing line for a failure."""
    if isinstance(context.error, KeyboardInterrupt):
        return "Error: interrupted"

    message = str(context.error) or type(context.error).__name__
    status = context.metadata.get("status")
    if status is not None:
        message = f"{message} (HTTP {status})"
    if context.operation:
        return f"Error: {context.operation} failed: {message}"
    return f"Error: {message}"


def report_error(context: ErrorContext, stream: Optional[TextIO] = None) -> int:
    """
    Report a command failure and return the process exit code.

    Writes one line to ``stream`` (stderr by default). The severity is only
    logged at INFO and the traceback at DEBUG, so the line stays alone unless
    ``-v`` is given.
    """
    log_fields = {"command": context.operation or None, "status": context.metadata.get("status")}
    logger.info(
        f"{context.severity.value.upper()} error in {context.operation or 'command'}: "
        f"{context.error!r}",
        extra=log_fields,
    )
    logger.debug(
        "Traceback",
        exc_info=(type(context.error), context.error, context.error.__traceback__),
        extra=log_fields,
    )

    print(format_error(context), file=stream or sys.stderr)
    return context.exit_code
