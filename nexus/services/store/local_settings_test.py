"""Unit tests for the local settings file and credential healing."""

import json

import pytest

from nexus.services.store.exceptions import StoreConfigError
from nexus.services.store.local_settings import (
    API_KEY,
    URL_KEY,
    LocalSettingsStore,
    is_insecure,
)

DEFAULT_URL = "https://prod.supabase.co"
DEFAULT_KEY = "sb_publishable_default"


@pytest.fixture
def store(tmp_path):
    return LocalSettingsStore(tmp_path / "nested" / "settings.json")


@pytest.mark.unit
class TestLocalSettingsStore:
    def test_missing_file_is_empty(self, store):
        assert store.all() == {}
        assert store.get(URL_KEY) is None

    def test_set_creates_parent_dirs(self, store):
        store.set("theme", "dark")

        assert store.path.exists()
        assert store.get("theme") == "dark"

    def test_set_many_merges(self, store):
        store.set("a", "1")
        store.set_many({"b": "2", "a": "3"})

        assert store.all() == {"a": "3", "b": "2"}

    def test_corrupt_file_ignored(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{not json")

        assert store.all() == {}

    def test_non_string_values_dropped(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text(json.dumps({"a": "ok", "b": 3}))

        assert store.all() == {"a": "ok"}


@pytest.mark.unit
class TestIsInsecure:
    def test_missing_values(self):
        assert is_insecure(None, "k")
        assert is_insecure("https://x", None)

    def test_secret_key(self):
        assert is_insecure("https://x.supabase.co", "sb_secret_abc")

    def test_localhost_url(self):
        assert is_insecure("http://localhost:54321", "sb_publishable_k")

    def test_valid(self):
        assert not is_insecure(DEFAULT_URL, DEFAULT_KEY)


@pytest.mark.unit
class TestResolveStoreCredentials:
    def test_absent_values_written_from_defaults(self, store):
        creds = store.resolve_store_credentials(DEFAULT_URL, DEFAULT_KEY)

        assert creds.base_url == DEFAULT_URL
        assert creds.api_key == DEFAULT_KEY
        assert store.get(URL_KEY) == DEFAULT_URL
        assert store.get(API_KEY) == DEFAULT_KEY

    def test_stored_values_kept(self, store):
        store.set_many({URL_KEY: "https://mine.supabase.co/", API_KEY: "sb_publishable_mine"})

        creds = store.resolve_store_credentials(DEFAULT_URL, DEFAULT_KEY)

        assert creds.base_url == "https://mine.supabase.co"
        assert creds.api_key == "sb_publishable_mine"

    def test_secret_key_healed(self, store):
        store.set_many({URL_KEY: "https://mine.supabase.co", API_KEY: "sb_secret_leaked"})

        creds = store.resolve_store_credentials(DEFAULT_URL, DEFAULT_KEY)

        assert creds.api_key == DEFAULT_KEY
        assert store.get(API_KEY) == DEFAULT_KEY

    def test_localhost_healed(self, store):
        store.set_many({URL_KEY: "http://localhost:54321", API_KEY: "sb_publishable_local"})

        creds = store.resolve_store_credentials(DEFAULT_URL, DEFAULT_KEY)

        assert creds.base_url == DEFAULT_URL

    def test_no_defaults_raises(self, store):
        with pytest.raises(StoreConfigError, match="STORE_URL"):
            store.resolve_store_credentials(None, None)
