"""Preferences data models."""

from typing import Optional

from pydantic import Field

from .common import BaseModel


class Preferences(BaseModel):
    """User preferences.

    Serialized by alias so stored text keeps the camelCase keys.
    """

    sound_enabled: bool = Field(default=True, alias="soundEnabled", description="Play click sounds")
    compact_mode: bool = Field(default=False, alias="compactMode", description="Smaller list items")
    auto_expand: bool = Field(default=True, alias="autoExpand", description="Expand recent years on load")
    theme: str = Field(default="dark", description="Theme label")


class PreferencesUpdate(BaseModel):
    """Partial preferences update."""

    sound_enabled: Optional[bool] = Field(None, alias="soundEnabled")
    compact_mode: Optional[bool] = Field(None, alias="compactMode")
    auto_expand: Optional[bool] = Field(None, alias="autoExpand")
    theme: Optional[str] = Field(None, min_length=1)
