"""Custom exceptions for syntax query operations."""

from typing import Any


class SyntaxQueryError(Exception):
    """Base exception for syntax query operations."""

    def __init__(self, message: str, error_details: dict[str, Any] | None = None):
        """
        Initialize the exception.

        Args:
            message: Error message
            error_details: Optional dictionary with detailed error information
        """
        super().__init__(message)
        self.error_details = error_details


class SyntaxQueryConfigError(SyntaxQueryError):
    """Raised when rule or style configuration is invalid."""
