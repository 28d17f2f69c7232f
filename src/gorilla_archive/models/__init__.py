"""Pydantic models for the application.

This module contains all data models used throughout the application
for request/response validation and serialization.
"""

from .catalog import (
    CatalogView,
    DownloadAction,
    DownloadKind,
    DownloadType,
    Notification,
    NotificationType,
    ReleaseType,
    Update,
    YearGroup,
)
from .common import BaseModel, ErrorResponse, HealthResponse, ProxyErrorResponse
from .preferences import Preferences, PreferencesUpdate
from .proxy import HttpMethod, ProxyRequest, ProxyResponse

__all__ = [
    # Catalog models
    "CatalogView",
    "DownloadAction",
    "DownloadKind",
    "DownloadType",
    "Notification",
    "NotificationType",
    "ReleaseType",
    "Update",
    "YearGroup",
    # Common models
    "BaseModel",
    "ErrorResponse",
    "HealthResponse",
    "ProxyErrorResponse",
    # Preferences models
    "Preferences",
    "PreferencesUpdate",
    # Proxy models
    "HttpMethod",
    "ProxyRequest",
    "ProxyResponse",
]
