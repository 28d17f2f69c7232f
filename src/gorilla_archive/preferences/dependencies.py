"""Preferences dependencies for FastAPI."""

from fastapi import Request

from .service import PreferencesService


def get_preferences_service(request: Request) -> PreferencesService:
    """Get the preferences service created at application startup."""
    return request.app.state.preferences
