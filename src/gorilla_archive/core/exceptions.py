"""Custom exception classes.

This module defines custom exceptions used throughout the application.
"""

from typing import Any, Dict, Optional


class BaseAppException(Exception):
    """Base exception class for the application.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Error message.
            details: Additional error details.
            cause: Underlying exception that caused this error.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation of the exception."""
        return self.message

    def __repr__(self) -> str:
        """Detailed representation of the exception."""
        return f"{self.__class__.__name__}('{self.message}', details={self.details})"


class ConfigurationError(BaseAppException):
    """Raised when a required configuration value is missing.

    Attributes:
        key: Name of the missing configuration key.
    """

    def __init__(
        self,
        key: str,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message or f"{key} not configured", details)
        self.key = key


class ValidationError(BaseAppException):
    """Raised when data validation fails."""
    pass


class NotFoundError(BaseAppException):
    """Raised when a requested entity does not exist.

    Attributes:
        entity: Entity type name.
        entity_id: Identifier that was looked up.
    """

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} '{entity_id}' not found")
        self.entity = entity
        self.entity_id = entity_id


class ExternalServiceError(BaseAppException):
    """Raised when external service call fails.

    Attributes:
        service: Name of the external service.
        status_code: HTTP status code if applicable.
    """

    def __init__(
        self,
        message: str,
        service: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Error message.
            service: Name of the external service.
            status_code: HTTP status code if applicable.
            details: Additional error details.
            cause: Underlying exception that caused this error.
        """
        super().__init__(message, details, cause)
        self.service = service
        self.status_code = status_code


class BackendUnavailableError(ExternalServiceError):
    """Raised when the backend cannot be reached or its response cannot be read.

    The message is internal; callers only ever see a generic 502.

    Attributes:
        target_url: The target URL that failed.
        method: HTTP method used.
    """

    def __init__(
        self,
        message: str,
        target_url: str,
        method: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Error message.
            target_url: The target URL that failed.
            method: HTTP method used.
            details: Additional error details.
            cause: Underlying exception that caused this error.
        """
        super().__init__(message, "backend", None, details, cause)
        self.target_url = target_url
        self.method = method
