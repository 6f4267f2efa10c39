"""The plant catalog: definitions available for placement."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from typing import Any

import aiohttp
from yarl import URL

from .const import (
    DEFAULT_CATALOG_FILE,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_NEW_PLANT_COLOR,
    DEFAULT_NEW_PLANT_ICON,
    DEFAULT_NEW_PLANT_ROWS,
    DEFAULT_NEW_PLANT_SPACING,
    DEFAULT_NEW_PLANT_STAGGER,
)
from .errors import DuplicatePlantError, InvalidPlantError
from .models import PlantDefinition
from .utils import get_data_dir, load_json

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "PlantCatalog",
    "default_catalog_path",
    "load_catalog",
    "async_load_catalog",
    "new_plant_definition",
]


class PlantCatalog:
    """Ordered, append-only collection of :class:`PlantDefinition` keyed by id."""

    def __init__(self, plants: Iterable[PlantDefinition] = ()) -> None:
        self._plants: dict[str, PlantDefinition] = {}
        for plant in plants:
            self.append(plant)

    @classmethod
    def from_payload(cls, payload: Any) -> PlantCatalog:
        """Build a catalog from a decoded JSON array.

        Invalid entries are skipped and duplicate ids keep their first
        occurrence; both are logged.
        """

        catalog = cls()
        if not isinstance(payload, list):
            _LOGGER.warning("Plant catalog must be a JSON array, got %s", type(payload).__name__)
            return catalog
        for index, item in enumerate(payload):
            try:
                plant = PlantDefinition.from_payload(item)
            except InvalidPlantError as err:
                _LOGGER.warning("Skipping catalog entry %s: %s", index, err)
                continue
            if plant.id in catalog:
                _LOGGER.warning("Skipping catalog entry %s: duplicate id %s", index, plant.id)
                continue
            catalog.append(plant)
        return catalog

    def __iter__(self) -> Iterator[PlantDefinition]:
        return iter(self._plants.values())

    def __len__(self) -> int:
        return len(self._plants)

    def __contains__(self, plant_id: object) -> bool:
        return plant_id in self._plants

    def __repr__(self) -> str:
        return f"PlantCatalog({list(self._plants)!r})"

    def get(self, plant_id: str) -> PlantDefinition | None:
        return self._plants.get(plant_id)

    @property
    def by_id(self) -> Mapping[str, PlantDefinition]:
        return dict(self._plants)

    def append(self, plant: PlantDefinition) -> None:
        """Add ``plant``; ids already present raise :class:`DuplicatePlantError`."""

        if plant.id in self._plants:
            raise DuplicatePlantError(plant.id)
        self._plants[plant.id] = plant

    def to_list(self) -> list[dict[str, Any]]:
        return [plant.to_dict() for plant in self._plants.values()]


def default_catalog_path() -> Path:
    return get_data_dir() / DEFAULT_CATALOG_FILE


def _is_url(source: str | Path) -> bool:
    return isinstance(source, str) and URL(source).scheme in {"http", "https"}


def load_catalog(source: str | Path | None = None) -> PlantCatalog:
    """Load the bootstrap catalog from a local JSON file.

    A missing or unreadable file yields an empty catalog.
    """

    path = Path(source) if source else default_catalog_path()
    try:
        payload = load_json(path)
    except (OSError, ValueError) as err:
        _LOGGER.warning("Could not load plants from %s: %s", path, err)
        return PlantCatalog()
    return PlantCatalog.from_payload(payload)


async def async_load_catalog(
    source: str | Path | None = None,
    *,
    session: aiohttp.ClientSession | None = None,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
) -> PlantCatalog:
    """Load the bootstrap catalog from a URL or a local file.

    Fetch failures are logged and produce an empty catalog.
    """

    if source is None or not _is_url(source):
        return load_catalog(source)
    if session is None:
        async with aiohttp.ClientSession() as own_session:
            return await _fetch_catalog(own_session, str(source), timeout)
    return await _fetch_catalog(session, str(source), timeout)


async def _fetch_catalog(session: aiohttp.ClientSession, url: str, timeout: float) -> PlantCatalog:
    try:
        async with session.get(url, timeout=aiohttp.ClientTimeout(total=timeout)) as resp:
            resp.raise_for_status()
            payload = await resp.json(content_type=None)
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as err:
        _LOGGER.warning("Could not load plants from %s: %s", url, err)
        return PlantCatalog()
    return PlantCatalog.from_payload(payload)


def new_plant_definition(name: str, spacing: float = DEFAULT_NEW_PLANT_SPACING) -> PlantDefinition:
    """Return a definition for a user-added plant.

    New plants get two staggered rows and a generic seedling icon; the id is
    the lower-cased name.
    """

    name = (name or "").strip()
    if not name:
        raise InvalidPlantError("plant name is required")
    return PlantDefinition.from_payload(
        {
            "id": name.lower(),
            "name": name,
            "spacing": spacing,
            "rows": DEFAULT_NEW_PLANT_ROWS,
            "stagger": DEFAULT_NEW_PLANT_STAGGER,
            "color": DEFAULT_NEW_PLANT_COLOR,
            "icon": DEFAULT_NEW_PLANT_ICON,
        }
    )
