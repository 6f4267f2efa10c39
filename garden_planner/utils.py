"""Utility helpers for reading data files and logging used across the planner."""

from __future__ import annotations

import json
import math
import os
import time
from collections import OrderedDict
from collections.abc import Iterable
from os import PathLike
from pathlib import Path
from typing import Any, Union

import voluptuous as vol
import yaml

__all__ = [
    "load_json",
    "load_data",
    "save_json",
    "get_data_dir",
    "js_round",
    "warn_once",
    "format_invalid",
]


PathType = Union[str, PathLike]

DEFAULT_DATA_DIR = Path(__file__).resolve().parent / "data"

_WARNED: OrderedDict[str, float] = OrderedDict()
_MAX_CODES = 1024


def _read_text(path: Path, parse) -> Any:
    if not path.exists():
        raise FileNotFoundError(path)
    with path.open("r", encoding="utf-8") as handle:
        return parse(handle)


def load_json(path: PathType) -> Any:
    """Parse the JSON file at ``path``.

    Undecodable content raises :class:`ValueError` naming the file.
    """

    p = Path(path)
    try:
        return _read_text(p, json.load)
    except ValueError as exc:
        raise ValueError(f"{p} is not valid JSON: {exc}") from exc


def load_data(path: PathType) -> Any:
    """Parse a settings or dataset file; ``.yaml``/``.yml`` are read as YAML."""

    p = Path(path)
    if p.suffix.lower() in {".yaml", ".yml"}:
        try:
            return _read_text(p, yaml.safe_load) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"{p} is not valid YAML: {exc}") from exc
    return load_json(p)


def save_json(path: PathType, data: Any) -> bool:
    """Write ``data`` to ``path`` and return ``True`` on success.

    The file is written next to its destination first and then moved into
    place so readers never observe a half-written document.
    """

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    tmp = p.with_name(f".{p.name}.tmp")
    with tmp.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    os.replace(tmp, p)
    return True


def get_data_dir() -> Path:
    """Return the directory holding the packaged datasets."""

    return DEFAULT_DATA_DIR


def js_round(value: float) -> int:
    """Round half up, matching JavaScript's ``Math.round``.

    Python's :func:`round` uses banker's rounding which would place a plant
    dropped at 25px on 2 inches instead of 3.
    """

    return int(math.floor(value + 0.5))


def warn_once(logger, code: str, message: str, window: int = 60) -> None:
    """Warn about ``code`` at most once every ``window`` seconds."""

    now = time.monotonic()
    last = _WARNED.get(code)
    if last is not None and now - last <= window:
        return
    _WARNED.pop(code, None)
    _WARNED[code] = now
    while len(_WARNED) > _MAX_CODES:
        _WARNED.popitem(last=False)
    logger.warning("%s: %s", code, message)


def format_invalid(err: vol.Invalid, prefix: Iterable[Any] = ()) -> str:
    """Return a readable message for a voluptuous error, including its path."""

    errors = err.errors if isinstance(err, vol.MultipleInvalid) else [err]
    messages: list[str] = []
    for item in errors:
        path = [*prefix, *item.path]
        location = ".".join(str(part) for part in path)
        messages.append(f"{location}: {item.msg}" if location else str(item.msg))
    return "; ".join(messages)
