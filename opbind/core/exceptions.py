"""Structured exception hierarchy for consistent error handling.

Key components:
- **ErrorCode enum**: Standardized error identifiers for programmatic handling
- **Severity enum**: Error classification for monitoring and alerting
- **OpbindError**: Base exception with context and cause chaining
- **Specialized exceptions**: Contract, parsing and configuration failures

Contract validation failures inside ``Operation.run`` are not raised: they are
reported through the result flag and the contract's errors. The exceptions in
this module cover the cases where a caller explicitly asks for a raise
(``Operation.call``) or where the input cannot be processed at all.
"""

from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for opbind."""

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    """An operation, contract or representer was declared incorrectly."""

    # Input errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Input validation failed due to invalid or missing data."""

    PARSE_ERROR = "PARSE_ERROR"
    """The incoming document could not be decoded."""


class Severity(Enum):
    """Severity levels for opbind errors."""

    LOW = "LOW"
    """Low severity errors caused by client input."""

    MEDIUM = "MEDIUM"
    """Medium severity errors that may affect some features."""

    HIGH = "HIGH"
    """High severity errors pointing at a programming mistake."""

    CRITICAL = "CRITICAL"
    """Critical errors requiring immediate attention."""


class OpbindError(Exception):
    """Base exception class for all opbind exceptions.

    Args:
        error_code: Unique identifier for the error type (string or ErrorCode enum)
        message: Human-readable error message
        severity: Severity level of the error (defaults to MEDIUM)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        error_code: str | ErrorCode,
        message: str,
        severity: Severity = Severity.MEDIUM,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )
        self.message = message
        self.severity = severity
        self.context = context or {}
        self.cause = cause

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    @property
    def is_expected(self) -> bool:
        """Determine if this is an expected error based on severity.

        Returns:
            bool: True if the error is expected (LOW or MEDIUM severity)
        """
        return self.severity in (Severity.LOW, Severity.MEDIUM)

    @property
    def should_alert(self) -> bool:
        """Determine if this error should trigger alerts.

        Returns:
            bool: True if the error should trigger alerts (HIGH or CRITICAL severity)
        """
        return self.severity in (Severity.HIGH, Severity.CRITICAL)

    def __str__(self) -> str:
        """Return a string representation of the exception.

        Returns:
            str: A formatted string containing the error code and message
        """
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return a detailed representation of the exception.

        Returns:
            str: A string showing the class name, error code, message, severity,
                and context
        """
        class_name = self.__class__.__name__
        context_str = f", context={self.context}" if self.context else ""
        return (
            f"{class_name}(error_code='{self.error_code}', "
            f"message='{self.message}', severity={self.severity.value}{context_str})"
        )


class ValidationError(OpbindError):
    """Exception raised when input validation fails.

    Args:
        message: Description of the validation failure
        error_code: Error code (defaults to VALIDATION_ERROR)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.VALIDATION_ERROR,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.LOW, context, cause)


class ContractInvalidError(ValidationError):
    """Raised by ``Operation.call`` when the contract did not validate.

    Args:
        operation: Name of the operation that ended invalid
        errors: Field errors collected by the contract
    """

    def __init__(self, operation: str, errors: dict[str, list[str]]) -> None:
        self.errors = errors
        super().__init__(
            f"Contract for {operation} is invalid",
            context={"operation": operation, "errors": errors},
        )


class RepresenterParseError(OpbindError):
    """Exception raised when an incoming document cannot be parsed.

    Args:
        message: Description of the parse failure
        context: Additional context information about the error
        cause: The decoder exception that caused this error
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(ErrorCode.PARSE_ERROR, message, Severity.LOW, context, cause)


class ConfigurationError(OpbindError):
    """Exception raised when operations or representers are misdeclared.

    Args:
        message: Description of the misconfiguration
        context: Additional context information about the error
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            ErrorCode.CONFIGURATION_ERROR, message, Severity.HIGH, context, None
        )
