"""Operations on the ordered collection of placed plants."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any

from .errors import InvalidLayoutError, MalformedInputError
from .models import PlacedPlant, PlantDefinition

_LOGGER = logging.getLogger(__name__)

Layout = tuple[PlacedPlant, ...]

__all__ = [
    "Layout",
    "EMPTY_LAYOUT",
    "add_plant",
    "remove_plant",
    "layout_to_list",
    "layout_from_list",
    "export_layout",
    "import_layout",
    "resolve_layout",
]

EMPTY_LAYOUT: Layout = ()


def add_plant(layout: Sequence[PlacedPlant], placed: PlacedPlant) -> Layout:
    """Return ``layout`` with ``placed`` appended."""

    if any(existing.uuid == placed.uuid for existing in layout):
        raise ValueError(f"duplicate plant uuid {placed.uuid}")
    return (*layout, placed)


def remove_plant(layout: Sequence[PlacedPlant], uuid: str) -> Layout:
    """Return ``layout`` without the entry identified by ``uuid``.

    Unknown ids are ignored so removing twice is harmless.
    """

    return tuple(placed for placed in layout if placed.uuid != uuid)


def layout_to_list(layout: Iterable[PlacedPlant]) -> list[dict[str, Any]]:
    return [placed.to_dict() for placed in layout]


def layout_from_list(data: Any) -> Layout:
    """Validate decoded JSON and return it as a layout.

    Raises :class:`InvalidLayoutError` when ``data`` is not a list of layout
    entries or when two entries share a ``uuid``.
    """

    if not isinstance(data, list):
        raise InvalidLayoutError("layout must be a JSON array")
    entries: list[PlacedPlant] = []
    seen: set[str] = set()
    for index, item in enumerate(data):
        placed = PlacedPlant.from_payload(item, index=index)
        if placed.uuid in seen:
            raise InvalidLayoutError(f"{index}.uuid: duplicate uuid {placed.uuid}")
        seen.add(placed.uuid)
        entries.append(placed)
    return tuple(entries)


def export_layout(layout: Iterable[PlacedPlant]) -> str:
    """Serialise ``layout`` as pretty-printed JSON."""

    return json.dumps(layout_to_list(layout), indent=2, ensure_ascii=False)


def import_layout(text: str | bytes) -> Layout:
    """Parse an exported layout document.

    Raises :class:`MalformedInputError` when ``text`` is not JSON and
    :class:`InvalidLayoutError` when the JSON is not a valid layout. The
    caller's layout is never touched; it should only be replaced with the
    returned value.
    """

    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as err:
            raise MalformedInputError(f"layout is not UTF-8 text: {err}") from err
    try:
        data = json.loads(text)
    except ValueError as err:
        raise MalformedInputError(f"Invalid JSON file: {err}") from err
    return layout_from_list(data)


def resolve_layout(
    layout: Iterable[PlacedPlant],
    plants: Mapping[str, PlantDefinition],
) -> Iterator[tuple[PlacedPlant, PlantDefinition]]:
    """Yield each placed plant with its definition, in layout order.

    Entries whose ``plant_id`` is missing from ``plants`` are skipped.
    """

    for placed in layout:
        plant = plants.get(placed.plant_id)
        if plant is None:
            _LOGGER.debug("Skipping %s: unknown plant id %s", placed.uuid, placed.plant_id)
            continue
        yield placed, plant
