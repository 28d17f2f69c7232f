"""Base classes and utilities.

This module provides base classes and common utilities used throughout
the application.
"""

from abc import ABC
from typing import Optional

import structlog


class BaseService(ABC):
    """Base service class.

    All service classes should inherit from this base class to ensure
    consistent behavior and logging.
    """

    def __init__(self, name: Optional[str] = None) -> None:
        """Initialize the service.

        Args:
            name: Service name for logging.
        """
        self.name = name or self.__class__.__name__
        self.logger = structlog.get_logger(self.name)

    async def startup(self) -> None:
        """Service startup hook.

        Override this method to perform service initialization.
        """
        self.logger.info(f"{self.name} service starting up")

    async def shutdown(self) -> None:
        """Service shutdown hook.

        Override this method to perform service cleanup.
        """
        self.logger.info(f"{self.name} service shutting down")


class BaseClient(ABC):
    """Base HTTP client class.

    Provides URL building and request/response logging for HTTP clients.
    """

    def __init__(self, name: str, base_url: str, timeout: Optional[float] = None) -> None:
        """Initialize the client.

        Args:
            name: Client name for logging.
            base_url: Base URL for the service.
            timeout: Request timeout in seconds, None for the HTTP client default.
        """
        self.name = name
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.logger = structlog.get_logger(f"{name}Client")

    def _build_url(self, path: str) -> str:
        """Build full URL from path.

        Args:
            path: URL path.

        Returns:
            str: Full URL.
        """
        path = path.lstrip("/")
        return f"{self.base_url}/{path}"

    def _log_request(self, method: str, url: str) -> None:
        """Log outgoing request.

        Args:
            method: HTTP method.
            url: Request URL.
        """
        self.logger.info(
            "Outgoing request",
            method=method,
            url=url,
        )

    def _log_response(self, method: str, url: str, status_code: int, duration: float) -> None:
        """Log response.

        Args:
            method: HTTP method.
            url: Request URL.
            status_code: Response status code.
            duration: Request duration in seconds.
        """
        self.logger.info(
            "Response received",
            method=method,
            url=url,
            status_code=status_code,
            duration=f"{duration:.4f}s",
        )
