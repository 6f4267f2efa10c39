import json

import pytest

from garden_planner.cli import main


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("GARDEN_PLANNER_CONFIG", "GARDEN_PLANNER_TOKEN", "GARDEN_PLANNER_HOME"):
        monkeypatch.delenv(name, raising=False)


def run(tmp_path, *args):
    return main(["--state-dir", str(tmp_path / "state"), *args])


def test_catalog_lists_packaged_plants(tmp_path, capsys):
    assert run(tmp_path, "catalog") == 0
    ids = [plant["id"] for plant in json.loads(capsys.readouterr().out)]
    assert "basil" in ids


def test_place_layout_remove(tmp_path, capsys):
    assert run(tmp_path, "place", "basil", "150", "40") == 0
    placed = json.loads(capsys.readouterr().out)
    assert (placed["plantId"], placed["x"], placed["lane"]) == ("basil", 15, 0)

    assert run(tmp_path, "layout") == 0
    layout = json.loads(capsys.readouterr().out)
    assert [entry["uuid"] for entry in layout] == [placed["uuid"]]
    assert layout[0]["name"] == "Basil"

    assert run(tmp_path, "remove", placed["uuid"]) == 0
    assert run(tmp_path, "layout") == 0
    assert json.loads(capsys.readouterr().out) == []


def test_place_unknown_plant_fails(tmp_path, capsys):
    assert run(tmp_path, "place", "mystery", "10", "10") == 1
    assert "unknown plant" in capsys.readouterr().err


def test_export_and_import(tmp_path, capsys):
    run(tmp_path, "place", "tomato", "300", "180")
    capsys.readouterr()
    target = tmp_path / "out"
    target.mkdir()
    assert run(tmp_path, "export", str(target)) == 0
    exported = target / "garden-plan.json"
    assert exported.exists()

    assert run(tmp_path, "clear") == 0
    assert run(tmp_path, "import", str(exported)) == 0
    assert "Imported 1 plants" in capsys.readouterr().out


def test_import_invalid_file_keeps_layout(tmp_path, capsys):
    run(tmp_path, "place", "basil", "150", "40")
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    capsys.readouterr()

    assert run(tmp_path, "import", str(bad)) == 1
    assert "Error" in capsys.readouterr().err
    run(tmp_path, "layout")
    assert len(json.loads(capsys.readouterr().out)) == 1


def test_add_plant_without_token(tmp_path, capsys):
    code = run(tmp_path, "add-plant", "Kale", "--owner", "samwise41", "--repo", "Garden")
    assert code == 1
    assert "set-token" in capsys.readouterr().err


@pytest.mark.parametrize("x", ["nan", "inf"])
def test_place_rejects_non_finite_coordinates(tmp_path, capsys, x):
    with pytest.raises(SystemExit) as exc:
        run(tmp_path, "place", "basil", x, "10")
    assert exc.value.code == 2
    assert "finite" in capsys.readouterr().err


def test_export_to_unwritable_path_fails_cleanly(tmp_path, capsys):
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    assert run(tmp_path, "export", str(blocker / "plan.json")) == 1
    assert "could not write" in capsys.readouterr().err
