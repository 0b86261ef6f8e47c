"""
Settings loading for galaxy.toml.

Every key is optional; missing sections fall back to the defaults in
``careergalaxy.config``. Example::

    [layout]
    level_radii = [400, 900, 1400, 2000, 2600]

    [viewport]
    max_zoom = 6.0
    level_zoom = { "4" = 3.0 }

    [merge]
    level_policy = "reject"
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from ..config import LEVEL_ZOOM
from .layout import LayoutConfig
from .merge import LevelPolicy
from .viewport import ViewportConfig

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = "galaxy.toml"


@dataclass
class GalaxySettings:
    """
    Parsed galaxy.toml.

    Attributes:
        layout: Radial layout geometry.
        viewport: Viewport limits and defaults.
        level_policy: Merge behavior for declared-level mismatches.
        source: File the settings came from, if any.
    """

    layout: LayoutConfig = field(default_factory=LayoutConfig)
    viewport: ViewportConfig = field(default_factory=ViewportConfig)
    level_policy: LevelPolicy = LevelPolicy.TRUST
    source: Optional[Path] = None

    @classmethod
    def load(cls, path: Union[str, Path]) -> "GalaxySettings":
        """
        Load and parse a settings file.

        Returns:
            GalaxySettings: Defaults when the file does not exist.

        Raises:
            ValueError: If the TOML is malformed or holds invalid values.
        """
        path = Path(path)
        if not path.exists():
            return cls()

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ValueError(f"Failed to parse {path}: {e}")

        try:
            settings = cls.from_dict(data)
        except (ValidationError, ValueError) as e:
            raise ValueError(f"Failed to parse {path}: {e}")

        settings.source = path
        logger.debug(f"Loaded settings from {path}")
        return settings

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GalaxySettings":
        layout = _section(data, "layout")
        viewport = _section(data, "viewport")
        merge = _section(data, "merge")

        if "level_zoom" in viewport:
            overrides = viewport["level_zoom"]
            if not isinstance(overrides, dict):
                raise ValueError("viewport.level_zoom must be a table")
            # Partial tables override single levels
            viewport["level_zoom"] = {**LEVEL_ZOOM, **{int(k): v for k, v in overrides.items()}}

        return cls(
            layout=LayoutConfig(**layout),
            viewport=ViewportConfig(**viewport),
            level_policy=LevelPolicy(merge.get("level_policy", LevelPolicy.TRUST)),
        )


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ValueError(f"[{name}] must be a table")
    return dict(section)
