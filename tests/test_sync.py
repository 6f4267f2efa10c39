import asyncio
import json

import pytest

from garden_planner.catalog import PlantCatalog, new_plant_definition
from garden_planner.errors import (
    ConcurrentModificationError,
    DuplicatePlantError,
    MissingCredentialError,
    RemoteSyncError,
)
from garden_planner.remote import VersionedDocument
from garden_planner.sync import CatalogSync, optimistic_update


class MemoryDocumentStore:
    def __init__(self, payload, version="v1"):
        self.content = payload if isinstance(payload, bytes) else json.dumps(payload).encode("utf-8")
        self.version = version
        self.reads = 0
        self.writes = []
        self.read_error = None
        self.conflict = False

    async def read(self, path):
        self.reads += 1
        if self.read_error is not None:
            raise self.read_error
        await asyncio.sleep(0)
        return VersionedDocument(content=self.content, version=self.version)

    async def write(self, path, content, *, version, message):
        if self.conflict or version != self.version:
            raise ConcurrentModificationError(f"{path} changed", status=409, reason="conflict")
        self.writes.append({"path": path, "version": version, "message": message})
        self.content = content
        self.version = f"v{len(self.writes) + 1}"
        return self.version


REMOTE_PLANTS = [{"id": "basil", "name": "Basil", "spacing": 12, "rows": 2, "stagger": True}]


def make_sync(store, catalog, token="ghp_token"):
    return CatalogSync(store, catalog, lambda: token)


@pytest.mark.asyncio
async def test_optimistic_update_writes_with_read_version():
    store = MemoryDocumentStore(b"[]", version="abc")
    version = await optimistic_update(store, "doc.json", lambda raw: raw + b" ", message="touch")
    assert version == "v2"
    assert store.writes == [{"path": "doc.json", "version": "abc", "message": "touch"}]


@pytest.mark.asyncio
async def test_append_plant_updates_remote_and_local(catalog):
    store = MemoryDocumentStore(REMOTE_PLANTS)
    kale = new_plant_definition("Kale", 14)

    version = await make_sync(store, catalog).append_plant(kale)

    assert version == "v2"
    remote = json.loads(store.content.decode("utf-8"))
    assert [item["id"] for item in remote] == ["basil", "kale"]
    assert remote[1] == kale.to_dict()
    assert store.writes[0]["message"] == "Add plant: Kale"
    assert catalog.get("kale") == kale


@pytest.mark.asyncio
async def test_append_plant_conflict_leaves_catalog_unchanged(catalog):
    store = MemoryDocumentStore(REMOTE_PLANTS)
    store.conflict = True
    before = list(catalog)

    with pytest.raises(ConcurrentModificationError):
        await make_sync(store, catalog).append_plant(new_plant_definition("Kale", 14))

    assert list(catalog) == before
    assert json.loads(store.content.decode("utf-8")) == REMOTE_PLANTS


@pytest.mark.asyncio
async def test_append_plant_requires_credential(catalog):
    store = MemoryDocumentStore(REMOTE_PLANTS)
    with pytest.raises(MissingCredentialError):
        await make_sync(store, catalog, token=None).append_plant(new_plant_definition("Kale"))
    assert store.reads == 0
    assert "kale" not in catalog


@pytest.mark.asyncio
async def test_append_plant_read_failure_is_reported(catalog):
    store = MemoryDocumentStore(REMOTE_PLANTS)
    store.read_error = RemoteSyncError("Failed to fetch", status=500)
    with pytest.raises(RemoteSyncError):
        await make_sync(store, catalog).append_plant(new_plant_definition("Kale"))
    assert "kale" not in catalog


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [b"{not json", b'{"id": "basil"}', b"\xff\xfe", b"[" + b"1" * 5000 + b"]"])
async def test_append_plant_decode_failure_is_remote_sync_error(catalog, payload):
    store = MemoryDocumentStore(payload)
    with pytest.raises(RemoteSyncError):
        await make_sync(store, catalog).append_plant(new_plant_definition("Kale"))
    assert store.writes == []
    assert "kale" not in catalog


@pytest.mark.asyncio
async def test_append_plant_rejects_local_duplicate(catalog, basil):
    store = MemoryDocumentStore(REMOTE_PLANTS)
    with pytest.raises(DuplicatePlantError):
        await make_sync(store, catalog).append_plant(basil)
    assert store.reads == 0


@pytest.mark.asyncio
async def test_append_plant_rejects_remote_duplicate(tomato):
    catalog = PlantCatalog([tomato])
    store = MemoryDocumentStore(REMOTE_PLANTS)
    with pytest.raises(DuplicatePlantError):
        await make_sync(store, catalog).append_plant(new_plant_definition("Basil"))
    assert store.writes == []
    assert "basil" not in catalog


@pytest.mark.asyncio
async def test_concurrent_appends_are_serialised(catalog):
    store = MemoryDocumentStore(REMOTE_PLANTS)
    sync = make_sync(store, catalog)

    await asyncio.gather(
        sync.append_plant(new_plant_definition("Kale")),
        sync.append_plant(new_plant_definition("Chard")),
    )

    remote = json.loads(store.content.decode("utf-8"))
    assert [item["id"] for item in remote] == ["basil", "kale", "chard"]
    assert "kale" in catalog and "chard" in catalog
