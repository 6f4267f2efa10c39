"""Placement geometry: turn a pointer drop into a placed plant."""

from __future__ import annotations

import logging
import math
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from .const import BED_HEIGHT_PX, LANE_BOTTOM, LANE_TOP, PX_PER_INCH
from .models import PlacedPlant, PlantDefinition
from .utils import js_round

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "DropEvent",
    "PlantGeometry",
    "place",
    "place_drop",
    "pixels_to_inches",
    "lane_for_offset",
    "stagger_offset",
    "plant_geometry",
]


@dataclass(frozen=True, slots=True)
class DropEvent:
    """Raw pointer drop reported by the presentation layer."""

    drop_x: float
    drop_y: float
    bed_origin_x: float = 0.0
    bed_origin_y: float = 0.0
    bed_height_px: float = BED_HEIGHT_PX


@dataclass(frozen=True, slots=True)
class PlantGeometry:
    """Pixel geometry of a placed plant relative to the bed's top-left corner."""

    center_x: float
    center_y: float
    diameter: float


def _new_uuid() -> str:
    return str(uuid.uuid4())


def pixels_to_inches(relative_px: float) -> int:
    """Return whole inches for a pixel offset, clamped at the bed's left edge."""

    if not math.isfinite(relative_px):
        raise ValueError(f"expected a finite pixel offset, got {relative_px}")
    return max(0, js_round(relative_px / PX_PER_INCH))


def lane_for_offset(relative_y: float, bed_height_px: float, plant: PlantDefinition) -> int:
    """Return the lane for a vertical offset; single-row plants always use lane 0."""

    if plant.single_row:
        return LANE_TOP
    return LANE_TOP if relative_y < bed_height_px / 2 else LANE_BOTTOM


def stagger_offset(x: int, lane: int, plant: PlantDefinition, layout: Sequence[PlacedPlant]) -> int:
    """Return ``x`` shifted half a spacing right if it sits under a top-lane plant.

    The shift is applied once. Other plants that the shifted position may now
    touch are not re-checked.
    """

    if not plant.stagger or lane != LANE_BOTTOM:
        return x
    spacing = plant.spacing_inches
    for existing in layout:
        if existing.lane == LANE_TOP and abs(existing.x - x) < spacing:
            _LOGGER.debug("Staggering %s at %s: top-lane neighbour %s at %s", plant.id, x, existing.uuid, existing.x)
            return js_round(x + spacing / 2)
    return x


def place(
    drop_x: float,
    drop_y: float,
    bed_origin_x: float,
    bed_origin_y: float,
    bed_height_px: float,
    plant: PlantDefinition,
    layout: Sequence[PlacedPlant],
    *,
    uuid_factory: Callable[[], str] = _new_uuid,
) -> PlacedPlant:
    """Return the :class:`PlacedPlant` produced by dropping ``plant`` on the bed.

    Pointer coordinates are absolute; the bed origin is subtracted before the
    pixel offset is converted to inches. ``layout`` is only read. The caller
    appends the result with :func:`garden_planner.layout.add_plant`.
    """

    relative_x = drop_x - bed_origin_x
    relative_y = drop_y - bed_origin_y

    x = pixels_to_inches(relative_x)
    lane = lane_for_offset(relative_y, bed_height_px, plant)
    x = stagger_offset(x, lane, plant, layout)

    return PlacedPlant(uuid=uuid_factory(), plant_id=plant.id, x=x, lane=lane)


def place_drop(
    event: DropEvent,
    plant: PlantDefinition,
    layout: Sequence[PlacedPlant],
    *,
    uuid_factory: Callable[[], str] = _new_uuid,
) -> PlacedPlant:
    """Convenience wrapper around :func:`place` taking a :class:`DropEvent`."""

    return place(
        event.drop_x,
        event.drop_y,
        event.bed_origin_x,
        event.bed_origin_y,
        event.bed_height_px,
        plant,
        layout,
        uuid_factory=uuid_factory,
    )


def plant_geometry(
    placed: PlacedPlant,
    plant: PlantDefinition,
    bed_height_px: float = BED_HEIGHT_PX,
) -> PlantGeometry:
    """Return where a renderer should draw ``placed``.

    Lane 0 is centred a quarter of the way down the bed, lane 1 three
    quarters down, and single-row plants on the centre line.
    """

    if plant.single_row:
        fraction = 0.5
    elif placed.lane == LANE_BOTTOM:
        fraction = 0.75
    else:
        fraction = 0.25
    return PlantGeometry(
        center_x=placed.x * PX_PER_INCH,
        center_y=bed_height_px * fraction,
        diameter=plant.spacing_inches * PX_PER_INCH,
    )
