"""
Exception hierarchy for Clair Scanner.

Provides a standardized exception hierarchy for consistent error handling
across the application. All exceptions inherit from ScannerException.
"""

from typing import Optional


class ScannerException(Exception):
    """Base exception for all Clair Scanner errors."""
    pass


class WorkspaceException(ScannerException, OSError):
    """Temporary workspace could not be allocated."""

    def __init__(self, reason: str):
        """
        Initialize workspace exception.

        Args:
            reason: Reason for failure
        """
        self.reason = reason
        super().__init__(f"Failed to create workspace: {reason}")


class ImageExportException(ScannerException):
    """Image could not be saved or its layers could not be resolved."""

    def __init__(self, image: str, reason: str):
        """
        Initialize image export exception.

        Args:
            image: Image reference that failed to export
            reason: Reason for failure
        """
        self.image = image
        self.reason = reason
        super().__init__(f"Failed to export {image}: {reason}")


class AnalyzerException(ScannerException):
    """Clair was unreachable or answered with an error."""

    def __init__(self, reason: str, status_code: Optional[int] = None):
        """
        Initialize analyzer exception.

        Args:
            reason: Error message, as reported by Clair when available
            status_code: HTTP status of the failed response (optional)
        """
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Clair analysis failed: {reason}")


class ValidationException(ScannerException):
    """Input validation failed."""

    def __init__(self, message: str, field: str = None):
        """
        Initialize validation exception.

        Args:
            message: Validation error message
            field: Field that failed validation (optional)
        """
        self.field = field
        if field:
            super().__init__(f"Validation failed for {field}: {message}")
        else:
            super().__init__(f"Validation failed: {message}")


class LayerServerException(ScannerException):
    """Layer server could not start listening."""

    def __init__(self, port: int, reason: str):
        """
        Initialize layer server exception.

        Args:
            port: Port the server tried to bind
            reason: Reason for failure
        """
        self.port = port
        self.reason = reason
        super().__init__(f"Failed to serve layers on port {port}: {reason}")


class WhitelistException(ScannerException):
    """Whitelist file is missing or malformed."""
    pass


class ScanInterrupted(ScannerException):
    """Scan was cancelled by a signal."""

    def __init__(self, signal_name: str = "interrupt"):
        self.signal_name = signal_name
        super().__init__(f"Application interrupted ({signal_name})")


__all__ = [
    "ScannerException",
    "WorkspaceException",
    "ImageExportException",
    "AnalyzerException",
    "ValidationException",
    "LayerServerException",
    "WhitelistException",
    "ScanInterrupted",
]
