"""Preferences router."""

from fastapi import APIRouter, Depends

from gorilla_archive.models.preferences import Preferences, PreferencesUpdate
from .dependencies import get_preferences_service
from .service import PreferencesService

router = APIRouter()


@router.get("", response_model=Preferences, summary="Get preferences")
def get_preferences(
    service: PreferencesService = Depends(get_preferences_service),
) -> Preferences:
    return service.get()


@router.patch("", response_model=Preferences, summary="Update preferences")
def update_preferences(
    changes: PreferencesUpdate,
    service: PreferencesService = Depends(get_preferences_service),
) -> Preferences:
    """Apply a partial update; omitted fields keep their stored values."""
    return service.update(changes)


@router.post("/{field}/toggle", response_model=Preferences, summary="Toggle a preference")
def toggle_preference(
    field: str,
    service: PreferencesService = Depends(get_preferences_service),
) -> Preferences:
    return service.toggle(field)
