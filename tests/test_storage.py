"""Tests for the client key/value storage."""
from __future__ import annotations

from storefront.core.config import Settings
from storefront.core.storage import USER_ID_KEY, ClientStorage, current_user_id


def test_missing_user_falls_back_to_default(storage):
    assert current_user_id(storage, "guest") == "guest"


def test_stored_user_is_returned(storage):
    storage.set_item(USER_ID_KEY, "reader-1")
    assert current_user_id(storage, "guest") == "reader-1"

    storage.remove_item(USER_ID_KEY)
    assert current_user_id(storage, "guest") == "guest"


def test_state_survives_reopen(tmp_path):
    store = ClientStorage.in_dir(tmp_path / "state")
    store.set_item(USER_ID_KEY, "reader-2")
    store.close()

    reopened = ClientStorage.in_dir(tmp_path / "state")
    assert reopened.get_item(USER_ID_KEY) == "reader-2"
    reopened.close()


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("STOREFRONT_API_URL", "http://books.internal:9000/")
    monkeypatch.setenv("STOREFRONT_DEFAULT_USER", "visitor")
    monkeypatch.setenv("STOREFRONT_TIMEOUT", "2.5")

    settings = Settings.from_env()

    assert settings.api_url == "http://books.internal:9000"
    assert settings.default_user_id == "visitor"
    assert settings.timeout == 2.5
