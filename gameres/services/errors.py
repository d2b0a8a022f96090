"""Error handling module for the game resource resolver.

This module provides:
- Exception classes for each failure kind (remote fetch, file system, identity)
- User-friendly error message generation with suggested actions
- A centralized error handling service used by the command-line entry point

"No local installation" and "no update available" are not errors: the
resolver reports them by returning None.
"""

import json
import time
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx
import structlog

log = structlog.stdlib.get_logger()


class ErrorCategory(Enum):
    """Kind of failure, used to pick suggestions and log routing."""
    NETWORK = "network"
    FILE_SYSTEM = "file_system"
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    IDENTITY = "identity"
    UNEXPECTED = "unexpected"


class ErrorSeverity(Enum):
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass(frozen=True)
class ErrorContext:
    """Where an unclassified error was caught."""
    operation: str
    component: str
    details: dict[str, Any]


@dataclass(frozen=True)
class UserFriendlyError:
    """What the command line shows for a failure."""
    message: str
    category: ErrorCategory
    severity: ErrorSeverity
    suggested_actions: list[str]
    technical_details: str | None = None
    recoverable: bool = True


def _technical_details(*items: tuple[str, Any], cause: Exception | None = None) -> str | None:
    """Join labelled values and the underlying exception into one block, skipping empty values."""
    lines = [f"{label}: {value}" for label, value in items if value is not None and value != ""]
    if cause is not None:
        lines.append(f"{type(cause).__name__}: {cause}")
    return "\n".join(lines) or None


class AppError(Exception):
    """Base class of every failure the resolver reports."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNEXPECTED,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        suggested_actions: list[str] | None = None,
        technical_details: str | None = None,
        recoverable: bool = True,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.suggested_actions = suggested_actions or []
        self.technical_details = technical_details
        self.recoverable = recoverable
        self.context = context

    def to_user_friendly(self) -> UserFriendlyError:
        return UserFriendlyError(
            message=self.message,
            category=self.category,
            severity=self.severity,
            suggested_actions=self.suggested_actions,
            technical_details=self.technical_details,
            recoverable=self.recoverable,
        )


class RemoteFetchError(AppError):
    """Fetching or decoding the launcher resource descriptor failed.

    Not retried internally; retry policy belongs to the caller.
    """

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        url: str | None = None,
        status_code: int | None = None,
        retcode: int | None = None,
    ) -> None:
        if status_code is not None and status_code >= 500:
            suggested_actions = ["The launcher server is experiencing issues", "Try again later"]
        elif retcode is not None:
            suggested_actions = [
                "The launcher backend rejected the request",
                "The game region may no longer be served by this endpoint",
            ]
        else:
            suggested_actions = ["Check your internet connection", "Try again in a few moments"]

        super().__init__(
            message=message,
            category=ErrorCategory.NETWORK,
            suggested_actions=suggested_actions,
            technical_details=_technical_details(
                ("Retcode", retcode), ("Status", status_code), ("URL", url), cause=original_error
            ),
        )
        self.original_error = original_error
        self.url = url
        self.status_code = status_code
        self.retcode = retcode


class FileSystemError(AppError):
    """Install path, marker file or volume could not be accessed."""

    _SUGGESTIONS: dict[type[OSError], list[str]] = {
        PermissionError: ["Check permissions of the game directory", "Choose a different install location"],
        FileNotFoundError: ["Verify the install path is correct", "Check if the game directory was moved or deleted"],
    }

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        path: str | None = None,
        operation: str | None = None,
    ) -> None:
        suggested_actions = ["Check the install path and permissions", "Make sure the drive is connected"]
        for error_type, actions in self._SUGGESTIONS.items():
            if isinstance(original_error, error_type):
                suggested_actions = actions
                break

        super().__init__(
            message=message,
            category=ErrorCategory.FILE_SYSTEM,
            suggested_actions=suggested_actions,
            technical_details=_technical_details(("Path", path), ("Operation", operation), cause=original_error),
        )
        self.original_error = original_error
        self.path = path
        self.operation = operation


class ValidationError(AppError):
    """Malformed input, such as a bad version string or language name."""

    def __init__(self, message: str, field: str | None = None, value: Any = None) -> None:
        super().__init__(
            message=message,
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.WARNING,
            suggested_actions=["Review the input requirements"],
            technical_details=_technical_details(
                ("Field", field), ("Value", None if value is None else str(value)[:100])
            ),
        )
        self.field = field
        self.value = value


class ConfigurationError(AppError):
    """A required setting is missing or unusable."""

    def __init__(self, message: str, setting: str | None = None, current_value: Any = None) -> None:
        super().__init__(
            message=message,
            category=ErrorCategory.CONFIGURATION,
            suggested_actions=["Check the configuration settings", "Reset to default values if needed"],
            technical_details=_technical_details(("Setting", setting), ("Current", current_value)),
        )
        self.setting = setting
        self.current_value = current_value


class UnknownGameIdentityError(AppError, ValueError):
    """A game identity outside the recognised set was used. Programmer error."""

    def __init__(self, biz: object) -> None:
        super().__init__(
            message=f"Unknown game identity: {biz}",
            category=ErrorCategory.IDENTITY,
            severity=ErrorSeverity.CRITICAL,
            suggested_actions=["Use one of the supported game identities"],
            technical_details=f"Value: {biz!r}",
            recoverable=False,
        )
        self.biz = biz


class ErrorHandlingService:
    """Turns exceptions into ``UserFriendlyError`` values and keeps a short history."""

    def __init__(self, max_history_size: int = 100) -> None:
        self._error_history: deque[tuple[float, AppError]] = deque(maxlen=max_history_size)

    def handle_error(
        self,
        error: Exception,
        operation: str,
        component: str,
        context: dict[str, Any] | None = None,
    ) -> UserFriendlyError:
        """Classify ``error``, log it with its technical details and record it.

        Args:
            error: The exception that occurred
            operation: What was being done, e.g. ``check``
            component: Where it happened, e.g. ``cli``
            context: Extra values such as ``url`` or ``path``
        """
        app_error = self._convert_to_app_error(error, operation, component, context or {})
        self._log_error(app_error, operation, component, context)
        self._error_history.append((time.time(), app_error))
        return app_error.to_user_friendly()

    def _convert_to_app_error(
        self,
        error: Exception,
        operation: str,
        component: str,
        context: dict[str, Any],
    ) -> AppError:
        if isinstance(error, AppError):
            return error

        if isinstance(error, httpx.HTTPStatusError):
            return RemoteFetchError(
                f"The launcher server answered with HTTP {error.response.status_code}.",
                original_error=error,
                url=str(error.request.url),
                status_code=error.response.status_code,
            )
        if isinstance(error, httpx.TimeoutException):
            return RemoteFetchError(
                "The request timed out. The launcher server may be slow or unavailable.",
                original_error=error,
                url=context.get("url"),
            )
        if isinstance(error, httpx.RequestError):
            return RemoteFetchError(
                "A network error occurred. Please check your connection.",
                original_error=error,
                url=context.get("url"),
            )
        # Checked before ValueError, which it subclasses
        if isinstance(error, json.JSONDecodeError):
            return RemoteFetchError("The launcher server returned invalid JSON.", original_error=error)

        if isinstance(error, OSError):
            if isinstance(error, PermissionError):
                message = "Permission denied while accessing the game directory."
            elif isinstance(error, FileNotFoundError):
                message = "The file or directory was not found."
            else:
                message = f"A file system error occurred: {error}"
            return FileSystemError(message, original_error=error, path=context.get("path"), operation=operation)

        if isinstance(error, ValueError):
            return ValidationError(str(error), field=context.get("field"), value=context.get("value"))

        return AppError(
            message="An unexpected error occurred. Please try again.",
            technical_details=_technical_details(cause=error),
            context=ErrorContext(operation=operation, component=component, details=context),
        )

    def _log_error(
        self,
        error: AppError,
        operation: str,
        component: str,
        context: dict[str, Any] | None,
    ) -> None:
        log_method = log.warning if error.severity == ErrorSeverity.WARNING else log.error
        log_method(
            "Error occurred",
            error_message=error.message,
            category=error.category.value,
            severity=error.severity.value,
            operation=operation,
            component=component,
            technical_details=error.technical_details,
            recoverable=error.recoverable,
            context=context,
        )

    def get_recent_errors(self, count: int = 10) -> list[AppError]:
        """Most recent handled errors, oldest first."""
        return [error for _, error in list(self._error_history)[-count:]]

    def create_user_message(self, error: UserFriendlyError, include_suggestions: bool = True) -> str:
        """Message for stderr: the error, then up to three suggested actions."""
        lines = [error.message]
        if include_suggestions and error.suggested_actions:
            lines.append("\nSuggested actions:")
            lines.extend(f"  • {action}" for action in error.suggested_actions[:3])
        return "\n".join(lines)


_error_service: ErrorHandlingService | None = None


def get_error_service() -> ErrorHandlingService:
    """Process-wide error handling service."""
    global _error_service
    if _error_service is None:
        _error_service = ErrorHandlingService()
    return _error_service


def handle_error(
    error: Exception,
    operation: str,
    component: str,
    context: dict[str, Any] | None = None,
) -> UserFriendlyError:
    """Handle ``error`` with the process-wide service."""
    return get_error_service().handle_error(error, operation, component, context)
