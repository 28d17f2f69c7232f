"""Preferences module.

This module persists the user preferences record as JSON text under a
fixed storage key.
"""

from .router import router
from .service import PreferencesService
from .store import JsonFileStore

__all__ = [
    "JsonFileStore",
    "PreferencesService",
    "router",
]
