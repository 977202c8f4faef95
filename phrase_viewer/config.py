# config.py

from typing import Dict, Any

# --- Theme Configuration ---
THEMES: Dict[str, Dict[str, Any]] = {
    "dark": {
        "highlight": "#007ACC",
        # 0-255; 110 is close to a 50% stipple
        "highlight_alpha": 110,
    },
    "light": {
        "highlight": "#FFD400",
        "highlight_alpha": 120,
    },
}
DEFAULT_THEME: str = "dark"

# --- Layout Constants ---
# Horizontal padding subtracted from the container width before fitting a page
PAGE_MARGIN: float = 40.0

# Lower bound for fit-to-width scale; narrower containers are clamped to this
MIN_SCALE: float = 0.05

# Vertical gap between page containers and offset of the first page
PAGE_SPACING: float = 20.0
PAGE_TOP_OFFSET: float = 10.0

DEFAULT_CONTAINER_WIDTH: float = 1200.0
DEFAULT_VIEWPORT_HEIGHT: float = 900.0

# --- Cross-reference table ---
# Reference ids used by the analysis panel, mapped to the phrase they cite
SEARCH_PHRASES: Dict[int, str] = {
    1: "Maersk's results continued to improve year-on-year … EBITDA of USD 2.3 bn",
    2: "EBITDA increased to USD 2.3 bn",
    3: "Gain on sale of non-current assets",
}
