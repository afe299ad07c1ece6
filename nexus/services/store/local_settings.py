"""Durable local key-value settings holding the store URL and API key."""

import json
from pathlib import Path
from typing import Optional

from loguru import logger
from pydantic import BaseModel

from nexus.services.store.exceptions import StoreConfigError

URL_KEY = "store_url"
API_KEY = "store_key"


class StoreCredentials(BaseModel):
    base_url: str
    api_key: str


def is_insecure(url: Optional[str], key: Optional[str]) -> bool:
    """True when stored credentials must be replaced by the defaults.

    Secret keys may not be used from a client, and a localhost URL is a
    leftover from a local test setup.
    """
    if not url or not key:
        return True
    return key.startswith("sb_secret_") or "localhost" in url


class LocalSettingsStore:
    """String key-value pairs persisted as a JSON object on disk."""

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning(f"Ignoring unreadable settings file {self.path}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> Optional[str]:
        return self.all().get(key)

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def set_many(self, values: dict[str, str]) -> None:
        data = self.all()
        data.update(values)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
        tmp.replace(self.path)

    def resolve_store_credentials(
        self, default_url: Optional[str], default_key: Optional[str]
    ) -> StoreCredentials:
        """Read the store credentials, healing them from the defaults if needed."""
        url = self.get(URL_KEY)
        key = self.get(API_KEY)

        if not is_insecure(url, key):
            return StoreCredentials(base_url=url.rstrip("/"), api_key=key)

        if is_insecure(default_url, default_key):
            raise StoreConfigError(
                "No usable store credentials: set STORE_URL and STORE_KEY "
                f"or write {URL_KEY}/{API_KEY} to {self.path}"
            )

        logger.info(f"Resetting store credentials in {self.path} to configured defaults")
        self.set_many({URL_KEY: default_url, API_KEY: default_key})
        return StoreCredentials(base_url=default_url.rstrip("/"), api_key=default_key)
