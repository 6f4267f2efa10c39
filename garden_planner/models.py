"""Value types for plant definitions and placed plants."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from numbers import Real
from typing import Any

import voluptuous as vol

from .const import LANE_TOP, LANES
from .errors import InvalidLayoutError, InvalidPlantError
from .utils import format_invalid, js_round

__all__ = [
    "PlantDefinition",
    "PlacedPlant",
    "PLANT_SCHEMA",
    "PLACED_PLANT_SCHEMA",
]


def _finite_number(value: Any) -> Real:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise vol.Invalid("expected a number")
    try:
        finite = math.isfinite(value)
    except OverflowError:
        finite = False
    if not finite:
        raise vol.Invalid("expected a finite number")
    return value


def _positive_number(value: Any) -> float:
    if _finite_number(value) <= 0:
        raise vol.Invalid("expected a positive number")
    return value


def _row_count(value: Any) -> int:
    if isinstance(value, bool) or value not in (1, 2):
        raise vol.Invalid("expected 1 or 2")
    return int(value)


def _position(value: Any) -> int:
    """Accept any non-negative number and normalise it to whole inches.

    Layouts saved by older clients may carry fractional offsets from an odd
    stagger shift; those are rounded instead of rejected.
    """

    if _finite_number(value) < 0:
        raise vol.Invalid("expected a non-negative number")
    return js_round(value)


def _lane(value: Any) -> int:
    if isinstance(value, bool) or value not in LANES:
        raise vol.Invalid(f"expected one of {list(LANES)}")
    return int(value)


_NON_EMPTY_STR = vol.All(str, vol.Length(min=1))

PLANT_SCHEMA = vol.Schema(
    {
        vol.Required("id"): _NON_EMPTY_STR,
        vol.Required("name"): _NON_EMPTY_STR,
        vol.Required("spacing"): _positive_number,
        vol.Optional("rows", default=2): _row_count,
        vol.Optional("stagger", default=False): bool,
        vol.Optional("color", default=""): str,
        vol.Optional("icon", default=""): str,
    },
    extra=vol.REMOVE_EXTRA,
)

PLACED_PLANT_SCHEMA = vol.Schema(
    {
        vol.Required("uuid"): _NON_EMPTY_STR,
        vol.Required("plantId"): _NON_EMPTY_STR,
        vol.Required("x"): _position,
        vol.Required("lane"): _lane,
    },
    extra=vol.REMOVE_EXTRA,
)

# Alternative spellings accepted when reading plant payloads
_PLANT_ALIASES = {
    "spacingInches": "spacing",
    "spacing_inches": "spacing",
    "rowCount": "rows",
    "row_count": "rows",
}


@dataclass(frozen=True, slots=True)
class PlantDefinition:
    """A plant that can be placed on the bed."""

    id: str
    name: str
    spacing_inches: float
    row_count: int = 2
    stagger: bool = False
    color: str = ""
    icon: str = ""

    @property
    def single_row(self) -> bool:
        return self.row_count == 1

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> PlantDefinition:
        """Create a :class:`PlantDefinition` from a catalog JSON object."""

        if not isinstance(payload, Mapping):
            raise InvalidPlantError("plant definition must be an object")
        raw = dict(payload)
        for alias, key in _PLANT_ALIASES.items():
            if alias in raw and key not in raw:
                raw[key] = raw.pop(alias)
        try:
            data = PLANT_SCHEMA(raw)
        except vol.Invalid as err:
            raise InvalidPlantError(f"invalid plant definition: {format_invalid(err)}") from err
        return cls(
            id=data["id"],
            name=data["name"],
            spacing_inches=data["spacing"],
            row_count=data["rows"],
            stagger=data["stagger"],
            color=data["color"],
            icon=data["icon"],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "spacing": self.spacing_inches,
            "rows": self.row_count,
            "stagger": self.stagger,
            "color": self.color,
            "icon": self.icon,
        }


@dataclass(frozen=True, slots=True)
class PlacedPlant:
    """One plant instance on the bed."""

    uuid: str
    plant_id: str
    x: int
    lane: int = LANE_TOP

    @classmethod
    def from_payload(cls, payload: Any, *, index: int | None = None) -> PlacedPlant:
        """Validate a layout entry, raising :class:`InvalidLayoutError`."""

        prefix = () if index is None else (index,)
        if not isinstance(payload, Mapping):
            where = f"{index}: " if index is not None else ""
            raise InvalidLayoutError(f"{where}layout entry must be an object")
        try:
            data = PLACED_PLANT_SCHEMA(dict(payload))
        except vol.Invalid as err:
            raise InvalidLayoutError(format_invalid(err, prefix)) from err
        return cls(uuid=data["uuid"], plant_id=data["plantId"], x=data["x"], lane=data["lane"])

    def to_dict(self) -> dict[str, Any]:
        return {"uuid": self.uuid, "plantId": self.plant_id, "x": self.x, "lane": self.lane}
