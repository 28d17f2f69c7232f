"""Preferences service."""

import pydantic

from gorilla_archive.core.base import BaseService
from gorilla_archive.core.exceptions import ValidationError
from gorilla_archive.models.preferences import Preferences, PreferencesUpdate
from .store import JsonFileStore

# Toggleable fields by stored name and by attribute name.
_BOOLEAN_FIELDS = {
    "soundEnabled": "sound_enabled",
    "compactMode": "compact_mode",
    "autoExpand": "auto_expand",
}
_BOOLEAN_FIELDS.update({name: name for name in list(_BOOLEAN_FIELDS.values())})


class PreferencesService(BaseService):
    """Loads and persists the preferences record under one storage key."""

    def __init__(self, store: JsonFileStore, key: str) -> None:
        super().__init__()
        self.store = store
        self.key = key

    def get(self) -> Preferences:
        """Return stored preferences.

        Defaults are returned, and written, when nothing is stored yet or
        the stored text cannot be read back.
        """
        raw = self.store.get(self.key)
        if raw is None:
            return self.save(Preferences())

        try:
            return Preferences.model_validate_json(raw)
        except pydantic.ValidationError as e:
            self.logger.warning("Stored preferences unreadable, using defaults", key=self.key, error=str(e))
            return self.save(Preferences())

    def save(self, prefs: Preferences) -> Preferences:
        self.store.set(self.key, prefs.model_dump_json(by_alias=True))
        return prefs

    def update(self, changes: PreferencesUpdate) -> Preferences:
        """Apply a partial update and persist the result."""
        values = changes.model_dump(exclude_unset=True, exclude_none=True)
        prefs = self.get().model_copy(update=values)
        self.logger.info("Preferences updated", fields=sorted(values))
        return self.save(prefs)

    def toggle(self, field: str) -> Preferences:
        """Flip one boolean preference and persist the result.

        Args:
            field: Stored name (``soundEnabled``) or attribute name (``sound_enabled``).

        Raises:
            ValidationError: If the field is unknown or not a boolean.
        """
        attribute = _BOOLEAN_FIELDS.get(field)
        if attribute is None:
            raise ValidationError(
                f"Unknown preference '{field}'",
                details={"allowed": sorted(k for k, v in _BOOLEAN_FIELDS.items() if k != v)},
            )

        prefs = self.get()
        prefs = prefs.model_copy(update={attribute: not getattr(prefs, attribute)})
        self.logger.info("Preference toggled", field=attribute, value=getattr(prefs, attribute))
        return self.save(prefs)
