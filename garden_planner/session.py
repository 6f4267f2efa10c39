"""Session state for one user: catalog, current layout and persistence side effects."""

from __future__ import annotations

import logging
from pathlib import Path

import aiohttp

from .catalog import PlantCatalog, async_load_catalog, new_plant_definition
from .config import GardenConfig
from .const import DEFAULT_NEW_PLANT_SPACING, EXPORT_FILENAME
from .errors import GardenPlannerError, MalformedInputError, MissingCredentialError
from .layout import Layout, add_plant, export_layout, import_layout, remove_plant, resolve_layout
from .models import PlacedPlant, PlantDefinition
from .placement import DropEvent, PlantGeometry, place_drop, plant_geometry
from .remote import GitHubContentsStore
from .storage import CredentialStore, KeyValueStore, LayoutCache
from .sync import CatalogSync

_LOGGER = logging.getLogger(__name__)

__all__ = ["GardenSession"]


class GardenSession:
    """Holds the mutable state the layout engine itself never keeps.

    Every layout change is written to the local cache straight away.
    """

    def __init__(
        self,
        config: GardenConfig,
        catalog: PlantCatalog | None = None,
        store: KeyValueStore | None = None,
    ) -> None:
        self.config = config
        self.catalog = catalog if catalog is not None else PlantCatalog()
        self.store = store or KeyValueStore(config.store_path)
        self._cache = LayoutCache(self.store)
        self.credentials = CredentialStore(self.store)
        self.layout: Layout = self._cache.load()
        self._sync: CatalogSync | None = None
        self._remote: GitHubContentsStore | None = None

    @classmethod
    async def async_create(
        cls,
        config: GardenConfig,
        *,
        http_session: aiohttp.ClientSession | None = None,
    ) -> GardenSession:
        """Create a session, loading the bootstrap catalog first."""

        catalog = await async_load_catalog(config.catalog_source, session=http_session, timeout=config.timeout)
        _LOGGER.debug("Loaded %d plants", len(catalog))
        return cls(config, catalog)

    # ------------------------------------------------------------------
    def _commit(self, layout: Layout) -> None:
        self.layout = layout
        self._cache.save(layout)

    def plant(self, plant_id: str) -> PlantDefinition:
        plant = self.catalog.get(plant_id)
        if plant is None:
            raise GardenPlannerError(f"unknown plant '{plant_id}'")
        return plant

    def drop(self, plant_id: str, event: DropEvent) -> PlacedPlant:
        """Place ``plant_id`` where ``event`` landed and persist the layout."""

        placed = place_drop(event, self.plant(plant_id), self.layout)
        self._commit(add_plant(self.layout, placed))
        _LOGGER.debug("Placed %s as %s at x=%s lane=%s", plant_id, placed.uuid, placed.x, placed.lane)
        return placed

    def remove(self, uuid: str) -> bool:
        """Remove a placed plant; return ``False`` if nothing matched."""

        layout = remove_plant(self.layout, uuid)
        if len(layout) == len(self.layout):
            return False
        self._commit(layout)
        return True

    def clear(self) -> None:
        self._commit(())

    def placements(self) -> list[tuple[PlacedPlant, PlantDefinition, PlantGeometry]]:
        """Return drawable placements; plants missing from the catalog are left out."""

        return [
            (placed, plant, plant_geometry(placed, plant, self.config.bed_height_px))
            for placed, plant in resolve_layout(self.layout, self.catalog.by_id)
        ]

    # ------------------------------------------------------------------
    def export_json(self) -> str:
        return export_layout(self.layout)

    def export_to(self, path: str | Path | None = None) -> Path:
        """Write the layout to ``path`` (a directory or file); default ``garden-plan.json``."""

        target = Path(path) if path else Path(EXPORT_FILENAME)
        if target.is_dir():
            target = target / EXPORT_FILENAME
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(self.export_json(), encoding="utf-8")
        except OSError as err:
            raise GardenPlannerError(f"could not write {target}: {err}") from err
        return target

    def import_json(self, text: str | bytes) -> Layout:
        """Replace the layout with ``text``; on any error the layout is left as is."""

        layout = import_layout(text)
        self._commit(layout)
        _LOGGER.info("Imported layout with %d plants", len(layout))
        return layout

    def import_from(self, path: str | Path) -> Layout:
        try:
            raw = Path(path).read_bytes()
        except OSError as err:
            raise MalformedInputError(f"could not read {path}: {err}") from err
        return self.import_json(raw)

    # ------------------------------------------------------------------
    def credential(self) -> str | None:
        return self.credentials.get() or self.config.token

    def set_credential(self, token: str) -> None:
        self.credentials.set(token)

    def catalog_sync(self, http_session: aiohttp.ClientSession) -> CatalogSync:
        """Return the catalog syncer, sending requests through ``http_session``.

        The syncer and its lock are kept across calls; only the HTTP session
        is swapped.
        """

        if self._sync is None:
            if not self.config.remote_configured:
                raise GardenPlannerError("owner and repo must be configured to add plants")
            self._remote = GitHubContentsStore(
                http_session,
                self.config.owner,
                self.config.repo,
                self.credential,
                base_url=self.config.api_base_url,
                timeout=self.config.timeout,
            )
            self._sync = CatalogSync(self._remote, self.catalog, self.credential, path=self.config.catalog_path)
        else:
            self._remote.session = http_session
        return self._sync

    async def add_plant(
        self,
        http_session: aiohttp.ClientSession,
        name: str,
        spacing: float = DEFAULT_NEW_PLANT_SPACING,
    ) -> PlantDefinition:
        """Create a plant from ``name``/``spacing`` and append it to the shared catalog."""

        if not self.credential():
            raise MissingCredentialError("no GitHub token stored; run 'set-token' first")
        plant = new_plant_definition(name, spacing)
        await self.catalog_sync(http_session).append_plant(plant)
        return plant
