"""
Key-value persistence for the shop's collections.

Each logical collection (appointments, services, providers, admin flag) is
one JSON document. Loads never raise: a missing or corrupted document falls
back to the caller's default. Saves are best-effort: failures are logged and
dropped so a full disk never ends the session.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from enum import Enum
from typing import Any

from barbershop.config import settings
from barbershop.errors import PersistenceError

logger = logging.getLogger(__name__)


class StorageKey(str, Enum):
    APPOINTMENTS = "appointments"
    SERVICES = "services"
    PROVIDERS = "providers"
    ADMIN_MODE = "admin_mode"


def _key_name(key) -> str:
    return key.value if isinstance(key, StorageKey) else str(key)


class KeyValueStore:
    """load/save contract shared by every store."""

    def load(self, key: str, default: Any) -> Any:
        try:
            return self._read(_key_name(key), default)
        except PersistenceError as exc:
            logger.warning("Error loading %s from storage: %s", key, exc)
            return default

    def save(self, key: str, value: Any) -> None:
        try:
            self._write(_key_name(key), value)
        except PersistenceError as exc:
            logger.error("Error saving %s to storage: %s", key, exc)

    def _read(self, key: str, default: Any) -> Any:
        raise NotImplementedError

    def _write(self, key: str, value: Any) -> None:
        raise NotImplementedError


class InMemoryStore(KeyValueStore):
    """Process-local store for tests and the console demo."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def _read(self, key: str, default: Any) -> Any:
        if key not in self._data:
            return default
        try:
            return json.loads(self._data[key])
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"corrupted value for {key}") from exc

    def _write(self, key: str, value: Any) -> None:
        try:
            self._data[key] = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise PersistenceError(f"cannot encode {key}: {exc}") from exc


class JsonFileStore(KeyValueStore):
    """One JSON file per key under ``data_dir``, written atomically."""

    def __init__(
        self,
        data_dir: str = settings.storage.data_dir,
        key_prefix: str = settings.storage.key_prefix,
    ) -> None:
        self.data_dir = data_dir
        self.key_prefix = key_prefix

    def path_for(self, key: str) -> str:
        return os.path.join(self.data_dir, f"{self.key_prefix}{key}.json")

    def _read(self, key: str, default: Any) -> Any:
        path = self.path_for(key)
        if not os.path.exists(path):
            return copy.deepcopy(default)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as exc:
            # JSONDecodeError and UnicodeDecodeError are both ValueError
            raise PersistenceError(f"cannot read {path}: {exc}") from exc

    def _write(self, key: str, value: Any) -> None:
        path = self.path_for(key)
        folder = os.path.dirname(os.path.abspath(path))
        tmp_name = None
        try:
            os.makedirs(folder, exist_ok=True)
            # Atomic write
            with tempfile.NamedTemporaryFile(
                "w", delete=False, encoding="utf-8", dir=folder, suffix=".tmp"
            ) as tf:
                tmp_name = tf.name
                json.dump(value, tf, ensure_ascii=False, indent=2)
            os.replace(tmp_name, path)
        except (OSError, TypeError, ValueError) as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise PersistenceError(f"cannot write {path}: {exc}") from exc
