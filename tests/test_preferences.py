"""Tests for preferences storage."""

import json

import pytest

from gorilla_archive.core.exceptions import ValidationError
from gorilla_archive.models.preferences import Preferences, PreferencesUpdate
from gorilla_archive.preferences import JsonFileStore, PreferencesService

KEY = "gt-prefs"


@pytest.fixture
def store(tmp_path):
    return JsonFileStore(str(tmp_path / "prefs"))


@pytest.fixture
def service(store):
    return PreferencesService(store, key=KEY)


class TestJsonFileStore:

    def test_missing_key_returns_none(self, store):
        assert store.get(KEY) is None

    def test_last_write_wins(self, store):
        store.set(KEY, "first")
        store.set(KEY, "second")
        assert store.get(KEY) == "second"

    @pytest.mark.parametrize("key", ["", "../escape", ".hidden", "a/b"])
    def test_rejects_unsafe_keys(self, store, key):
        with pytest.raises(ValueError):
            store.get(key)


class TestPreferencesService:

    def test_defaults_on_first_load_are_persisted(self, service, store):
        prefs = service.get()

        assert prefs == Preferences()
        assert json.loads(store.get(KEY)) == {
            "soundEnabled": True,
            "compactMode": False,
            "autoExpand": True,
            "theme": "dark",
        }

    def test_reads_stored_camel_case_text(self, service, store):
        store.set(KEY, json.dumps({"soundEnabled": False, "compactMode": True, "autoExpand": False, "theme": "light"}))

        prefs = service.get()

        assert prefs.sound_enabled is False
        assert prefs.compact_mode is True
        assert prefs.auto_expand is False
        assert prefs.theme == "light"

    def test_missing_fields_fall_back_to_defaults(self, service, store):
        store.set(KEY, json.dumps({"compactMode": True}))

        prefs = service.get()

        assert prefs.compact_mode is True
        assert prefs.sound_enabled is True

    def test_unreadable_text_resets_to_defaults(self, service, store):
        store.set(KEY, "{not json")
        assert service.get() == Preferences()
        assert json.loads(store.get(KEY))["theme"] == "dark"

    def test_partial_update(self, service, store):
        prefs = service.update(PreferencesUpdate(compactMode=True, theme="light"))

        assert prefs.compact_mode is True
        assert prefs.theme == "light"
        assert prefs.sound_enabled is True
        assert json.loads(store.get(KEY))["compactMode"] is True

    @pytest.mark.parametrize("field", ["soundEnabled", "sound_enabled"])
    def test_toggle_accepts_both_names(self, service, field):
        assert service.toggle(field).sound_enabled is False
        assert service.toggle(field).sound_enabled is True

    @pytest.mark.parametrize("field", ["theme", "volume"])
    def test_toggle_rejects_non_boolean_fields(self, service, field):
        with pytest.raises(ValidationError):
            service.toggle(field)


class TestPreferencesRoutes:

    def test_get_defaults(self, client):
        response = client.get("/preferences")

        assert response.status_code == 200
        assert response.json() == {
            "soundEnabled": True,
            "compactMode": False,
            "autoExpand": True,
            "theme": "dark",
        }

    def test_patch_then_get(self, client):
        response = client.patch("/preferences", json={"compactMode": True})

        assert response.status_code == 200
        assert response.json()["compactMode"] is True
        assert client.get("/preferences").json()["compactMode"] is True

    def test_toggle(self, client):
        response = client.post("/preferences/soundEnabled/toggle")

        assert response.status_code == 200
        assert response.json()["soundEnabled"] is False

    def test_toggle_unknown_field(self, client):
        response = client.post("/preferences/volume/toggle")

        assert response.status_code == 422
        assert response.json()["type"] == "validation_error"
