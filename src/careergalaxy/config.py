"""
Global Configuration and Rendering Defaults.

This module centralizes the constants shared by the layout engine, the
recommendation annotator and the viewport controller. Values here are the
defaults; a ``galaxy.toml`` file can override most of them (see
``careergalaxy.core.settings``).
"""

import math
from typing import Dict, Tuple

# --- Taxonomy Shape ---

# Levels: 0 (super-cluster) -> 1 (industry) -> 2 (sub-industry)
#         -> 3 (role family) -> 4 (job title)
MIN_LEVEL = 0
MAX_LEVEL = 4

LEVEL_NAMES: Dict[int, str] = {
    0: "Super-Cluster",
    1: "Industry",
    2: "Sub-Industry",
    3: "Role Family",
    4: "Job Title",
}

# Color for injected nodes whose parent could not be resolved
DEFAULT_NODE_COLOR = "#6b7280"

INJECTED_NODE_DESCRIPTION = "AI-generated career node"

# --- Radial Layout ---

DEFAULT_CENTER: Tuple[float, float] = (0.0, 0.0)

DEFAULT_LEVEL_RADII: Tuple[float, ...] = (400.0, 900.0, 1400.0, 2000.0, 2600.0)

# Arc reserved for a node's children before growth is applied (60 degrees)
BASE_CHILD_ARC = math.pi / 3

# Sub-linear growth per child level; applied to sqrt(child count)
ARC_GROWTH: Tuple[float, ...] = (0.0, 0.35, 0.2, 0.2, 0.2)

# Hard cap per child level: 120 degrees for industries, 90 degrees deeper
MAX_CHILD_ARC: Tuple[float, ...] = (
    2 * math.pi,
    math.pi / 1.5,
    math.pi / 2,
    math.pi / 2,
    math.pi / 2,
)

# --- Viewport ---

BASE_VIEW_WIDTH = 2000.0
BASE_VIEW_HEIGHT = 1200.0

# (x, y, width, height) restored by "reset view"
DEFAULT_WINDOW: Tuple[float, float, float, float] = (-1000.0, -600.0, 2000.0, 1200.0)

MIN_ZOOM = 0.3
MAX_ZOOM = 4.0

WHEEL_SENSITIVITY = 0.002
ZOOM_STEP = 1.3

# Coarser levels get a wider view when centered on
LEVEL_ZOOM: Dict[int, float] = {
    0: 0.9,
    1: 1.2,
    2: 1.5,
    3: 1.8,
    4: 2.2,
}
FALLBACK_ZOOM = 1.5

TRANSITION_SECONDS = 0.5

# CSS "ease" timing curve
TRANSITION_EASING: Tuple[float, float, float, float] = (0.25, 0.1, 0.25, 1.0)

# --- Recommendation Palette ---

PATH_COLORS: Dict[str, str] = {
    "Direct Fit": "#10b981",
    "Strategic Pivot": "#f59e0b",
    "Aspirational": "#8b5cf6",
}

DEFAULT_PATH_COLOR = "#10b981"


def level_name(level: int) -> str:
    """Human readable label for a taxonomy level."""
    return LEVEL_NAMES.get(level, f"Level {level}")
