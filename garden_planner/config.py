"""Helpers for loading planner settings."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .const import (
    BED_HEIGHT_PX,
    DEFAULT_API_BASE_URL,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_REMOTE_CATALOG_PATH,
    ENV_CONFIG,
    ENV_HOME,
    ENV_TOKEN,
    STORE_FILENAME,
)
from .utils import load_data

_LOGGER = logging.getLogger(__name__)

__all__ = ["DEFAULTS", "GardenConfig", "load_config", "default_state_dir"]

DEFAULTS: dict[str, Any] = {
    "state_dir": None,
    "catalog_source": None,
    "owner": "",
    "repo": "",
    "catalog_path": DEFAULT_REMOTE_CATALOG_PATH,
    "api_base_url": DEFAULT_API_BASE_URL,
    "timeout": DEFAULT_HTTP_TIMEOUT,
    "bed_height_px": BED_HEIGHT_PX,
    "token": None,
}


def default_state_dir() -> Path:
    env = os.getenv(ENV_HOME)
    return Path(env).expanduser() if env else Path.home() / ".garden_planner"


def _clean_str(value: Any) -> str:
    return str(value or "").strip()


@dataclass(slots=True)
class GardenConfig:
    """Settings for a planner session."""

    state_dir: Path
    catalog_source: str | None = None
    owner: str = ""
    repo: str = ""
    catalog_path: str = DEFAULT_REMOTE_CATALOG_PATH
    api_base_url: str = DEFAULT_API_BASE_URL
    timeout: float = DEFAULT_HTTP_TIMEOUT
    bed_height_px: float = BED_HEIGHT_PX
    token: str | None = None

    @property
    def store_path(self) -> Path:
        return self.state_dir / STORE_FILENAME

    @property
    def remote_configured(self) -> bool:
        return bool(self.owner and self.repo)

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> GardenConfig:
        state_raw = _clean_str(options.get("state_dir"))
        state_dir = Path(state_raw).expanduser() if state_raw else default_state_dir()
        catalog_source = _clean_str(options.get("catalog_source")) or None
        owner = _clean_str(options.get("owner"))
        repo = _clean_str(options.get("repo"))
        catalog_path = _clean_str(options.get("catalog_path")).strip("/") or DEFAULT_REMOTE_CATALOG_PATH
        api_base_url = _clean_str(options.get("api_base_url")).rstrip("/") or DEFAULT_API_BASE_URL
        try:
            timeout = float(options.get("timeout", DEFAULT_HTTP_TIMEOUT))
        except (TypeError, ValueError):
            _LOGGER.warning("Invalid timeout %r, using %s", options.get("timeout"), DEFAULT_HTTP_TIMEOUT)
            timeout = DEFAULT_HTTP_TIMEOUT
        if timeout <= 0:
            timeout = DEFAULT_HTTP_TIMEOUT
        try:
            bed_height_px = float(options.get("bed_height_px", BED_HEIGHT_PX))
        except (TypeError, ValueError):
            _LOGGER.warning("Invalid bed_height_px %r, using %s", options.get("bed_height_px"), BED_HEIGHT_PX)
            bed_height_px = BED_HEIGHT_PX
        token = _clean_str(options.get("token")) or None
        return cls(
            state_dir=state_dir,
            catalog_source=catalog_source,
            owner=owner,
            repo=repo,
            catalog_path=catalog_path,
            api_base_url=api_base_url,
            timeout=timeout,
            bed_height_px=bed_height_px,
            token=token,
        )


def load_config(path: str | Path | None = None, **overrides: Any) -> GardenConfig:
    """Return the configuration merged from defaults, a file, the environment and ``overrides``.

    ``path`` falls back to ``GARDEN_PLANNER_CONFIG``. A missing or unreadable
    file is logged and ignored.
    """

    options = dict(DEFAULTS)
    source = path or os.getenv(ENV_CONFIG)
    if source:
        try:
            data = load_data(source)
        except FileNotFoundError:
            _LOGGER.warning("Config file %s not found, using defaults", source)
        except (OSError, ValueError) as err:
            _LOGGER.warning("Could not read config %s: %s", source, err)
        else:
            if isinstance(data, Mapping):
                options.update(data)
            else:
                _LOGGER.warning("Ignoring config %s: expected a mapping", source)

    env_token = os.getenv(ENV_TOKEN)
    if env_token and not options.get("token"):
        options["token"] = env_token
    options.update({key: value for key, value in overrides.items() if value is not None})
    return GardenConfig.from_options(options)
