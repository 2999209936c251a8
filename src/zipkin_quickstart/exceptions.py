"""
Custom exceptions for the Zipkin quick-start installer.

This module defines domain-specific exceptions that map each way an install
can go wrong onto a distinct type, so the CLI can render a useful message.
"""


class QuickstartError(Exception):
    """
    Base exception for all installer errors.

    All custom exceptions should inherit from this class to allow for easy
    catching of all application-specific errors.
    """

    def __init__(self, message: str, details: str | None = None) -> None:
        """
        Initialize the exception.

        Args:
            message: The primary error message.
            details: Optional additional context about the error.
        """
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


# =============================================================================
# Usage and Configuration Errors
# =============================================================================


class UsageError(QuickstartError):
    """Exception raised when the command line cannot be understood."""

    pass


class ConfigurationError(QuickstartError):
    """
    Exception raised when configuration is invalid or unreadable.

    Attributes:
        key: The configuration key with the bad value, if known.
    """

    def __init__(
        self,
        message: str,
        key: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.key = key


# =============================================================================
# Resolution and Validation Errors
# =============================================================================


class ResolutionError(QuickstartError):
    """
    Exception raised when the registry search cannot produce exactly one package.

    Attributes:
        group: The Maven group that was searched.
        artifact_id: The artifact id that was searched.
    """

    def __init__(
        self,
        message: str,
        group: str | None = None,
        artifact_id: str | None = None,
        details: str | None = None,
    ) -> None:
        """
        Initialize the resolution exception.

        Args:
            message: The primary error message.
            group: The Maven group that was searched.
            artifact_id: The artifact id that was searched.
            details: Optional additional context.
        """
        super().__init__(message, details)
        self.group = group
        self.artifact_id = artifact_id


class ValidationError(QuickstartError):
    """
    Exception raised when validation fails.

    Attributes:
        field: The name of the field that failed validation.
        value: The value that failed validation.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.field = field
        self.value = value


class InvalidVersionError(ValidationError):
    """Exception raised when a version string is not MAJOR.MINOR.PATCH."""

    pass


# =============================================================================
# Transport Errors
# =============================================================================


class TransportError(QuickstartError):
    """
    Exception raised when a download does not complete.

    Attributes:
        url: The URL that was being fetched.
        status_code: The HTTP status code, when the server answered.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        details: str | None = None,
    ) -> None:
        """
        Initialize the transport exception.

        Args:
            message: The primary error message.
            url: The URL that was being fetched.
            status_code: The HTTP status code returned, if any.
            details: Optional additional context.
        """
        super().__init__(message, details)
        self.url = url
        self.status_code = status_code


# =============================================================================
# Verification Errors
# =============================================================================


class VerificationError(QuickstartError):
    """
    Exception raised when a checksum or signature does not match.

    Attributes:
        path: The local file that failed verification.
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.path = path


class ToolUnavailableError(QuickstartError):
    """
    Exception raised when an optional local tool is missing.

    Never fatal: capability detection catches it and the matching
    verification step is skipped.

    Attributes:
        tool: Name of the missing tool.
    """

    def __init__(
        self,
        message: str,
        tool: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.tool = tool
