"""Command line interface for the garden planner.

Usage::

    python -m garden_planner <command> [args]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import math
import sys
from pathlib import Path

import aiohttp

from .config import GardenConfig, load_config
from .const import DEFAULT_NEW_PLANT_SPACING
from .errors import GardenPlannerError
from .placement import DropEvent
from .session import GardenSession

_LOGGER = logging.getLogger(__name__)


def _finite_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError as err:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from err
    if not math.isfinite(number):
        raise argparse.ArgumentTypeError(f"expected a finite number, got {value!r}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="garden-planner", description="Plan a raised garden bed")
    parser.add_argument("--config", type=Path, help="JSON or YAML settings file")
    parser.add_argument("--state-dir", type=Path, help="Directory holding the local layout store")
    parser.add_argument("--catalog", dest="catalog_source", help="Plant catalog file or URL")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("catalog", help="List available plants")
    sub.add_parser("layout", help="Show the plants placed on the bed")

    place = sub.add_parser("place", help="Drop a plant on the bed at pixel coordinates")
    place.add_argument("plant_id")
    place.add_argument("x", type=_finite_float, help="Horizontal drop position in pixels")
    place.add_argument("y", type=_finite_float, help="Vertical drop position in pixels")
    place.add_argument("--origin-x", type=_finite_float, default=0.0, help="Bed left edge in pixels")
    place.add_argument("--origin-y", type=_finite_float, default=0.0, help="Bed top edge in pixels")

    remove = sub.add_parser("remove", help="Remove a placed plant")
    remove.add_argument("uuid")

    sub.add_parser("clear", help="Remove every placed plant")

    export = sub.add_parser("export", help="Write the layout to a JSON file")
    export.add_argument("path", nargs="?", type=Path, help="Target file or directory")

    imp = sub.add_parser("import", help="Replace the layout with a JSON file")
    imp.add_argument("path", type=Path)

    add = sub.add_parser("add-plant", help="Add a plant to the shared GitHub catalog")
    add.add_argument("name")
    add.add_argument("--spacing", type=float, default=DEFAULT_NEW_PLANT_SPACING, help="Spacing in inches")
    add.add_argument("--owner", help="GitHub repository owner")
    add.add_argument("--repo", help="GitHub repository name")

    token = sub.add_parser("set-token", help="Store the GitHub token used by add-plant")
    token.add_argument("token")
    return parser


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


async def _run(args: argparse.Namespace, config: GardenConfig) -> int:
    async with aiohttp.ClientSession() as http_session:
        session = await GardenSession.async_create(config, http_session=http_session)
        command = args.command

        if command == "catalog":
            _print_json(session.catalog.to_list())
        elif command == "layout":
            _print_json(
                [
                    {**placed.to_dict(), "name": plant.name, "center": [geo.center_x, geo.center_y]}
                    for placed, plant, geo in session.placements()
                ]
            )
        elif command == "place":
            event = DropEvent(args.x, args.y, args.origin_x, args.origin_y, config.bed_height_px)
            _print_json(session.drop(args.plant_id, event).to_dict())
        elif command == "remove":
            if not session.remove(args.uuid):
                print(f"No plant with uuid {args.uuid}", file=sys.stderr)
        elif command == "clear":
            session.clear()
        elif command == "export":
            print(session.export_to(args.path))
        elif command == "import":
            layout = session.import_from(args.path)
            print(f"Imported {len(layout)} plants")
        elif command == "set-token":
            session.set_credential(args.token)
        elif command == "add-plant":
            plant = await session.add_plant(http_session, args.name, args.spacing)
            print(f"Plant {plant.name} added; the published catalog updates once the repository rebuilds.")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run a planner subcommand and return the process exit status."""

    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = load_config(
        args.config,
        state_dir=args.state_dir,
        catalog_source=args.catalog_source,
        owner=getattr(args, "owner", None),
        repo=getattr(args, "repo", None),
    )
    try:
        return asyncio.run(_run(args, config))
    except GardenPlannerError as err:
        _LOGGER.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {err}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - manual execution
    sys.exit(main())
