"""Local persistence: a small JSON key/value store and the layout cache."""

from __future__ import annotations

import logging
from copy import deepcopy
from pathlib import Path
from typing import Any

from .const import LAYOUT_STORAGE_KEY, TOKEN_STORAGE_KEY
from .errors import InvalidLayoutError
from .layout import EMPTY_LAYOUT, Layout, layout_from_list, layout_to_list
from .utils import load_json, save_json, warn_once

_LOGGER = logging.getLogger(__name__)

__all__ = ["KeyValueStore", "LayoutCache", "CredentialStore"]


class KeyValueStore:
    """JSON-file backed key/value store, loaded lazily and written on change."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._data: dict[str, Any] | None = None

    def _load(self) -> dict[str, Any]:
        if self._data is not None:
            return self._data
        try:
            raw = load_json(self.path)
        except FileNotFoundError:
            raw = {}
        except (OSError, ValueError) as err:
            _LOGGER.warning("Ignoring unreadable store %s: %s", self.path, err)
            raw = {}
        if not isinstance(raw, dict):
            _LOGGER.warning("Ignoring store %s: expected a JSON object", self.path)
            raw = {}
        self._data = raw
        return raw

    def get(self, key: str, default: Any = None) -> Any:
        return deepcopy(self._load().get(key, default))

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` and write the file. ``OSError`` propagates."""

        data = dict(self._load())
        data[key] = deepcopy(value)
        save_json(self.path, data)
        self._data = data

    def remove(self, key: str) -> None:
        data = dict(self._load())
        if key not in data:
            return
        del data[key]
        save_json(self.path, data)
        self._data = data

    def __contains__(self, key: object) -> bool:
        return key in self._load()


class LayoutCache:
    """Cache of the current layout between sessions."""

    def __init__(self, store: KeyValueStore, key: str = LAYOUT_STORAGE_KEY) -> None:
        self._store = store
        self._key = key

    def load(self) -> Layout:
        """Return the cached layout, or an empty one if nothing usable is stored."""

        raw = self._store.get(self._key)
        if raw is None:
            return EMPTY_LAYOUT
        try:
            return layout_from_list(raw)
        except InvalidLayoutError as err:
            _LOGGER.warning("Discarding cached layout: %s", err)
            return EMPTY_LAYOUT

    def save(self, layout: Layout) -> bool:
        """Persist ``layout``; failures are logged and reported as ``False``."""

        try:
            self._store.set(self._key, layout_to_list(layout))
        except OSError as err:
            warn_once(_LOGGER, "layout_cache_write", f"could not write {self._store.path}: {err}")
            return False
        return True


class CredentialStore:
    """Slot holding the remote-access credential."""

    def __init__(self, store: KeyValueStore, key: str = TOKEN_STORAGE_KEY) -> None:
        self._store = store
        self._key = key

    def get(self) -> str | None:
        value = self._store.get(self._key)
        if not isinstance(value, str):
            return None
        value = value.strip()
        return value or None

    def set(self, token: str) -> None:
        token = (token or "").strip()
        if not token:
            self.clear()
            return
        self._store.set(self._key, token)

    def clear(self) -> None:
        self._store.remove(self._key)
