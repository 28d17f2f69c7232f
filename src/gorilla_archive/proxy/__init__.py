"""Proxy module.

This module provides request forwarding from ``/api/*`` to the
configured backend base origin.
"""

from .client import BackendClient
from .router import router
from .service import ForwarderService, collapse_headers, join_path

__all__ = [
    "BackendClient",
    "ForwarderService",
    "collapse_headers",
    "join_path",
    "router",
]
