"""
Custom exceptions for LogPulse.

Provides structured error handling with appropriate HTTP status codes
and error details for API responses.
"""

from typing import Any, Dict, Optional


class LogPulseException(Exception):
    """Base exception for LogPulse."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "internal_error",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}


class ConfigurationError(LogPulseException):
    """Raised when the configuration cannot be read or has the wrong shape."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            message=message,
            status_code=400,
            error_code="configuration_error",
            details=details,
        )


class ConfigValidationError(LogPulseException):
    """Raised when a validation pass reports errors that block startup or reload."""

    def __init__(self, result: Any, message: str = "Configuration validation failed") -> None:
        super().__init__(
            message=message,
            status_code=422,
            error_code="config_invalid",
            details=result.model_dump(),
        )
        self.result = result


class FilterInitializationError(LogPulseException):
    """Raised when the PV filter cannot be built, e.g. a bad exclude pattern."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            message=message,
            status_code=500,
            error_code="filter_initialization_error",
            details=details,
        )


class FilterNotInitializedError(LogPulseException):
    """Raised when classifying before any filter snapshot was published."""

    def __init__(self, message: str = "PV filter has not been initialized") -> None:
        super().__init__(
            message=message,
            status_code=503,
            error_code="filter_not_initialized",
        )


class AuthenticationError(LogPulseException):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Invalid or missing authentication token") -> None:
        super().__init__(
            message=message,
            status_code=401,
            error_code="authentication_error",
        )
