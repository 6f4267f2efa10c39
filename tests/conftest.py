from __future__ import annotations

from pathlib import Path

import pytest

from garden_planner.catalog import PlantCatalog
from garden_planner.config import GardenConfig
from garden_planner.models import PlantDefinition


@pytest.fixture
def basil() -> PlantDefinition:
    return PlantDefinition(id="basil", name="Basil", spacing_inches=12, row_count=2, stagger=True)


@pytest.fixture
def tomato() -> PlantDefinition:
    return PlantDefinition(id="tomato", name="Tomato", spacing_inches=24, row_count=1, stagger=False)


@pytest.fixture
def carrot() -> PlantDefinition:
    return PlantDefinition(id="carrot", name="Carrot", spacing_inches=3, row_count=2, stagger=False)


@pytest.fixture
def catalog(basil, tomato, carrot) -> PlantCatalog:
    return PlantCatalog([basil, tomato, carrot])


@pytest.fixture
def config(tmp_path: Path) -> GardenConfig:
    return GardenConfig(state_dir=tmp_path / "state", owner="samwise41", repo="Garden")
