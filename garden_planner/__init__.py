"""Garden bed layout planner: placement geometry, layout persistence and catalog sync."""

from .catalog import PlantCatalog, async_load_catalog, load_catalog, new_plant_definition
from .config import GardenConfig, load_config
from .errors import (
    ConcurrentModificationError,
    DuplicatePlantError,
    GardenPlannerError,
    InvalidLayoutError,
    InvalidPlantError,
    MalformedInputError,
    MissingCredentialError,
    RemoteSyncError,
)
from .layout import Layout, add_plant, export_layout, import_layout, remove_plant, resolve_layout
from .models import PlacedPlant, PlantDefinition
from .placement import DropEvent, PlantGeometry, place, place_drop, plant_geometry
from .remote import DocumentStore, GitHubContentsStore, VersionedDocument
from .session import GardenSession
from .storage import CredentialStore, KeyValueStore, LayoutCache
from .sync import CatalogSync, optimistic_update

__all__ = [
    "PlantDefinition",
    "PlacedPlant",
    "Layout",
    "DropEvent",
    "PlantGeometry",
    "place",
    "place_drop",
    "plant_geometry",
    "add_plant",
    "remove_plant",
    "export_layout",
    "import_layout",
    "resolve_layout",
    "PlantCatalog",
    "load_catalog",
    "async_load_catalog",
    "new_plant_definition",
    "KeyValueStore",
    "LayoutCache",
    "CredentialStore",
    "DocumentStore",
    "VersionedDocument",
    "GitHubContentsStore",
    "CatalogSync",
    "optimistic_update",
    "GardenSession",
    "GardenConfig",
    "load_config",
    "GardenPlannerError",
    "MalformedInputError",
    "InvalidLayoutError",
    "InvalidPlantError",
    "DuplicatePlantError",
    "RemoteSyncError",
    "ConcurrentModificationError",
    "MissingCredentialError",
]
