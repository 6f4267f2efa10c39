"""Constants shared across the garden planner."""

from __future__ import annotations

# Scale used by the bed canvas: 1 inch is drawn as 10 pixels.
PX_PER_INCH = 10
BED_HEIGHT_PX = 200

LANE_TOP = 0
LANE_BOTTOM = 1
LANES = (LANE_TOP, LANE_BOTTOM)

# Local key/value store keys
LAYOUT_STORAGE_KEY = "garden_layout"
TOKEN_STORAGE_KEY = "gh_token"
STORE_FILENAME = "garden_planner_store.json"

EXPORT_FILENAME = "garden-plan.json"

DEFAULT_CATALOG_FILE = "plants.json"
DEFAULT_REMOTE_CATALOG_PATH = "public/plants.json"
DEFAULT_API_BASE_URL = "https://api.github.com"
DEFAULT_HTTP_TIMEOUT = 30.0

# Defaults applied to plants created from the "add plant" flow
DEFAULT_NEW_PLANT_SPACING = 12
DEFAULT_NEW_PLANT_ROWS = 2
DEFAULT_NEW_PLANT_STAGGER = True
DEFAULT_NEW_PLANT_COLOR = "bg-blue-500"
DEFAULT_NEW_PLANT_ICON = "\N{SEEDLING}"

ENV_CONFIG = "GARDEN_PLANNER_CONFIG"
ENV_HOME = "GARDEN_PLANNER_HOME"
ENV_TOKEN = "GARDEN_PLANNER_TOKEN"
