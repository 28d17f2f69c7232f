"""Monitoring and metrics collection.

This module provides Prometheus metrics collection and monitoring
functionality for the application.
"""

from typing import Optional

from prometheus_client import Counter, Histogram, Info
import structlog

from .config import Settings

logger = structlog.get_logger(__name__)

# Prometheus metrics
request_count = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    ["method", "endpoint", "status_code"]
)

request_duration = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"]
)

proxy_requests = Counter(
    "proxy_requests_total",
    "Total number of forwarded requests",
    ["method", "status"]
)

proxy_duration = Histogram(
    "proxy_request_duration_seconds",
    "Forwarded request duration in seconds",
    ["method"]
)

downloads = Counter(
    "catalog_downloads_total",
    "Total number of download actions served",
    ["download_type"]
)

error_count = Counter(
    "errors_total",
    "Total number of errors",
    ["type", "component"]
)

# Application info
app_info = Info(
    "app_info",
    "Application information"
)


def setup_monitoring(settings: Settings) -> None:
    """Setup monitoring and metrics collection."""
    logger.info("Setting up monitoring")

    app_info.info({
        "version": settings.app_version,
        "name": "gorilla-archive",
    })


def endpoint_label(path: str) -> str:
    """Collapse request paths into a bounded set of metric labels.

    Forwarded paths are arbitrary, so everything under /api shares a label.
    """
    if path == "/api" or path.startswith("/api/"):
        return "/api/*"
    return path


def track_request(method: str, endpoint: str, status_code: int, duration: float) -> None:
    """Track HTTP request metrics.

    Args:
        method: HTTP method.
        endpoint: Request endpoint.
        status_code: Response status code.
        duration: Request duration in seconds.
    """
    request_count.labels(
        method=method,
        endpoint=endpoint,
        status_code=status_code
    ).inc()

    request_duration.labels(
        method=method,
        endpoint=endpoint
    ).observe(duration)


def track_proxy_request(method: str, status: str, duration: Optional[float] = None) -> None:
    """Track forwarded request metrics.

    Args:
        method: HTTP method.
        status: Outcome label (an HTTP status code or "error").
        duration: Request duration in seconds.
    """
    proxy_requests.labels(method=method, status=status).inc()

    if duration is not None:
        proxy_duration.labels(method=method).observe(duration)


def track_download(download_type: str) -> None:
    """Track a served download action."""
    downloads.labels(download_type=download_type).inc()


def track_error(error_type: str, component: str) -> None:
    """Track error occurrence.

    Args:
        error_type: Type of error.
        component: Component where error occurred.
    """
    error_count.labels(type=error_type, component=component).inc()
