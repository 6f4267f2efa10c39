"""Exceptions raised by the garden planner core."""

from __future__ import annotations

__all__ = [
    "GardenPlannerError",
    "MalformedInputError",
    "InvalidLayoutError",
    "InvalidPlantError",
    "DuplicatePlantError",
    "RemoteSyncError",
    "ConcurrentModificationError",
    "MissingCredentialError",
]


class GardenPlannerError(RuntimeError):
    """Base class for all planner errors surfaced to the presentation layer."""


class MalformedInputError(GardenPlannerError, ValueError):
    """Raised when an imported document is not valid JSON."""


class InvalidLayoutError(GardenPlannerError, ValueError):
    """Raised when an imported document is JSON but not a valid layout."""


class InvalidPlantError(GardenPlannerError, ValueError):
    """Raised when a plant definition payload fails validation."""


class DuplicatePlantError(GardenPlannerError, ValueError):
    """Raised when a plant id is already present in the catalog."""

    def __init__(self, plant_id: str) -> None:
        super().__init__(f"plant '{plant_id}' already exists in the catalog")
        self.plant_id = plant_id


class RemoteSyncError(GardenPlannerError):
    """Raised when the remote catalog cannot be read, decoded or written."""

    def __init__(self, message: str, *, status: int | None = None, reason: str | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.reason = reason


class ConcurrentModificationError(RemoteSyncError):
    """Raised when the remote document changed between read and write."""


class MissingCredentialError(GardenPlannerError):
    """Raised when a remote append is attempted without a stored credential."""
