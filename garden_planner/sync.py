"""Append plant definitions to the shared remote catalog."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from typing import Any

from .catalog import PlantCatalog
from .const import DEFAULT_REMOTE_CATALOG_PATH
from .errors import DuplicatePlantError, MissingCredentialError, RemoteSyncError
from .models import PlantDefinition
from .remote import DocumentStore

_LOGGER = logging.getLogger(__name__)

__all__ = ["optimistic_update", "CatalogSync", "decode_catalog_document", "encode_catalog_document"]


async def optimistic_update(
    store: DocumentStore,
    path: str,
    mutate: Callable[[bytes], bytes],
    *,
    message: str,
) -> str:
    """Read ``path``, apply ``mutate`` and write it back guarded by the read version.

    If the document changed in between, the store raises
    :class:`~garden_planner.errors.ConcurrentModificationError`. Nothing is
    retried; the caller decides whether to start over.
    """

    document = await store.read(path)
    updated = mutate(document.content)
    return await store.write(path, updated, version=document.version, message=message)


def decode_catalog_document(raw: bytes) -> list[Any]:
    """Return the JSON array stored in a remote catalog document."""

    try:
        payload = json.loads(raw.decode("utf-8"))
    except ValueError as err:
        raise RemoteSyncError(f"Remote catalog is not valid JSON: {err}", reason="decode") from err
    if not isinstance(payload, list):
        raise RemoteSyncError("Remote catalog must be a JSON array", reason="decode")
    return payload


def encode_catalog_document(plants: list[Any]) -> bytes:
    return json.dumps(plants, indent=2, ensure_ascii=False).encode("utf-8")


class CatalogSync:
    """Append new plants to the remote catalog and reflect them locally."""

    def __init__(
        self,
        store: DocumentStore,
        catalog: PlantCatalog,
        credential_provider: Callable[[], str | None],
        *,
        path: str = DEFAULT_REMOTE_CATALOG_PATH,
    ) -> None:
        self.store = store
        self.catalog = catalog
        self.path = path
        self._credential_provider = credential_provider
        self._lock = asyncio.Lock()

    async def append_plant(self, plant: PlantDefinition) -> str:
        """Append ``plant`` to the remote catalog and return the new version.

        The local catalog only changes once the remote write succeeded.
        """

        if not self._credential_provider():
            raise MissingCredentialError("a GitHub token is required to add plants")

        async with self._lock:
            if plant.id in self.catalog:
                raise DuplicatePlantError(plant.id)

            def _append(raw: bytes) -> bytes:
                plants = decode_catalog_document(raw)
                if any(isinstance(item, dict) and item.get("id") == plant.id for item in plants):
                    raise DuplicatePlantError(plant.id)
                plants.append(plant.to_dict())
                return encode_catalog_document(plants)

            version = await optimistic_update(
                self.store,
                self.path,
                _append,
                message=f"Add plant: {plant.name}",
            )
            self.catalog.append(plant)

        _LOGGER.info("Added plant %s to %s (version %s)", plant.id, self.path, version or "unknown")
        return version
