import json

from garden_planner.const import LAYOUT_STORAGE_KEY, TOKEN_STORAGE_KEY
from garden_planner.models import PlacedPlant
from garden_planner.storage import CredentialStore, KeyValueStore, LayoutCache


def test_key_value_store_persists(tmp_path):
    path = tmp_path / "store.json"
    store = KeyValueStore(path)
    assert store.get("missing") is None
    store.set("answer", {"value": 42})
    assert KeyValueStore(path).get("answer") == {"value": 42}
    assert "answer" in store
    store.remove("answer")
    assert KeyValueStore(path).get("answer") is None


def test_key_value_store_returns_copies(tmp_path):
    store = KeyValueStore(tmp_path / "store.json")
    store.set("items", [1])
    store.get("items").append(2)
    assert store.get("items") == [1]


def test_key_value_store_ignores_corrupt_file(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("{oops", encoding="utf-8")
    store = KeyValueStore(path)
    assert store.get("anything") is None
    store.set("k", "v")
    assert json.loads(path.read_text(encoding="utf-8")) == {"k": "v"}


def test_layout_cache_roundtrip(tmp_path):
    store = KeyValueStore(tmp_path / "store.json")
    cache = LayoutCache(store)
    assert cache.load() == ()
    layout = (PlacedPlant(uuid="a", plant_id="basil", x=10, lane=0),)
    assert cache.save(layout) is True
    assert LayoutCache(KeyValueStore(tmp_path / "store.json")).load() == layout
    stored = json.loads((tmp_path / "store.json").read_text(encoding="utf-8"))
    assert stored[LAYOUT_STORAGE_KEY] == [{"uuid": "a", "plantId": "basil", "x": 10, "lane": 0}]


def test_layout_cache_discards_invalid_layout(tmp_path):
    store = KeyValueStore(tmp_path / "store.json")
    store.set(LAYOUT_STORAGE_KEY, [{"uuid": "a"}])
    assert LayoutCache(store).load() == ()


def test_layout_cache_save_failure_is_best_effort(tmp_path, monkeypatch):
    store = KeyValueStore(tmp_path / "store.json")
    cache = LayoutCache(store)

    def boom(*_args, **_kwargs):
        raise OSError("disk full")

    monkeypatch.setattr("garden_planner.storage.save_json", boom)
    assert cache.save((PlacedPlant(uuid="a", plant_id="basil", x=1, lane=0),)) is False


def test_credential_store(tmp_path):
    store = KeyValueStore(tmp_path / "store.json")
    creds = CredentialStore(store)
    assert creds.get() is None
    creds.set("  ghp_secret  ")
    assert creds.get() == "ghp_secret"
    assert store.get(TOKEN_STORAGE_KEY) == "ghp_secret"
    creds.set("")
    assert creds.get() is None
    assert TOKEN_STORAGE_KEY not in store
