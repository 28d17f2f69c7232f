"""Custom middleware for the FastAPI application.

This module provides middleware for correlation ID tracking, request
logging and CORS. Paths under a passthrough prefix are relayed as-is, so
none of these middlewares touch their response headers.
"""

import time
import uuid
from typing import Iterable, Tuple

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp, Receive, Scope, Send
import structlog

from .monitoring import endpoint_label, track_request

logger = structlog.get_logger(__name__)


def is_passthrough_path(path: str, prefixes: Tuple[str, ...]) -> bool:
    """Check whether a path is the prefix itself or lies below it."""
    return any(path == prefix or path.startswith(prefix + "/") for prefix in prefixes)


class ScopedCORSMiddleware(CORSMiddleware):
    """CORS middleware that leaves passthrough paths alone.

    Preflight requests under a passthrough prefix reach the route instead
    of being answered here, and their responses get no CORS headers.
    """

    def __init__(self, app: ASGIApp, passthrough_prefixes: Iterable[str] = (), **kwargs) -> None:
        super().__init__(app, **kwargs)
        self.passthrough_prefixes = tuple(passthrough_prefixes)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and is_passthrough_path(scope["path"], self.passthrough_prefixes):
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """Middleware to add correlation ID to requests.

    This middleware generates a unique correlation ID for each request
    and makes it available throughout the request lifecycle.
    """

    def __init__(
        self,
        app: ASGIApp,
        header_name: str = "X-Correlation-ID",
        passthrough_prefixes: Iterable[str] = (),
    ) -> None:
        """Initialize the middleware.

        Args:
            app: ASGI application.
            header_name: Header name for correlation ID.
            passthrough_prefixes: Path prefixes whose responses keep their own headers.
        """
        super().__init__(app)
        self.header_name = header_name
        self.passthrough_prefixes = tuple(passthrough_prefixes)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Process request with correlation ID.

        Args:
            request: FastAPI request object.
            call_next: Next middleware/handler in chain.

        Returns:
            Response: FastAPI response object.
        """
        correlation_id = request.headers.get(self.header_name) or str(uuid.uuid4())

        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)
        request.state.correlation_id = correlation_id

        try:
            response = await call_next(request)
            if not is_passthrough_path(request.url.path, self.passthrough_prefixes):
                response.headers[self.header_name] = correlation_id
            return response
        finally:
            structlog.contextvars.clear_contextvars()


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log HTTP requests and responses.

    This middleware logs request and response information including
    timing and status codes, and records request metrics.
    """

    def __init__(self, app: ASGIApp, passthrough_prefixes: Iterable[str] = ()) -> None:
        super().__init__(app)
        self.passthrough_prefixes = tuple(passthrough_prefixes)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Process request with logging.

        Args:
            request: FastAPI request object.
            call_next: Next middleware/handler in chain.

        Returns:
            Response: FastAPI response object.
        """
        start_time = time.time()
        endpoint = endpoint_label(request.url.path)

        logger.info(
            "Request started",
            method=request.method,
            path=request.url.path,
            query_params=str(request.query_params),
            user_agent=request.headers.get("user-agent"),
            client_ip=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            process_time = time.time() - start_time
            logger.error(
                "Request failed",
                method=request.method,
                path=request.url.path,
                process_time=f"{process_time:.4f}s",
                error=str(exc),
                exc_info=True,
            )
            track_request(request.method, endpoint, 500, process_time)
            raise

        process_time = time.time() - start_time
        logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            process_time=f"{process_time:.4f}s",
        )
        track_request(request.method, endpoint, response.status_code, process_time)

        if not is_passthrough_path(request.url.path, self.passthrough_prefixes):
            response.headers["X-Process-Time"] = str(process_time)
        return response
