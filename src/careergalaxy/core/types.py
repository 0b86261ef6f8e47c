"""
Core type definitions for careergalaxy.

All models are frozen: a taxonomy snapshot, a merged working copy and a
positioned layout are values, and every "change" is a ``model_copy`` into a
new collection. That is what lets the merge and layout stages stay pure.
"""

import logging
import re
from enum import StrEnum
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..config import DEFAULT_NODE_COLOR, DEFAULT_PATH_COLOR, MAX_LEVEL, MIN_LEVEL, PATH_COLORS

logger = logging.getLogger(__name__)


class PathCategory(StrEnum):
    """Categories of AI-proposed career trajectories."""
    DIRECT_FIT = "Direct Fit"
    STRATEGIC_PIVOT = "Strategic Pivot"
    ASPIRATIONAL = "Aspirational"

    @classmethod
    def from_label(cls, label: str) -> Optional["PathCategory"]:
        """
        Resolve a free-text path type to a known category.

        Matching is case-insensitive and understands the descriptive aliases
        used by the recommendation pipeline ("primary fit", "lateral pivot",
        "aspirational stretch").
        """
        key = (label or "").strip().lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        return _CATEGORY_ALIASES.get(key)

    @property
    def color(self) -> str:
        return PATH_COLORS.get(self.value, DEFAULT_PATH_COLOR)


_CATEGORY_ALIASES: Dict[str, PathCategory] = {
    "primary fit": PathCategory.DIRECT_FIT,
    "direct": PathCategory.DIRECT_FIT,
    "lateral pivot": PathCategory.STRATEGIC_PIVOT,
    "pivot": PathCategory.STRATEGIC_PIVOT,
    "aspirational stretch": PathCategory.ASPIRATIONAL,
    "stretch": PathCategory.ASPIRATIONAL,
}


def path_color(path_type: str) -> str:
    """Palette color for a path type, falling back to the default color."""
    category = PathCategory.from_label(path_type)
    if category is None:
        return DEFAULT_PATH_COLOR
    return category.color


class ExperienceLevel(StrEnum):
    """Seniority band attached to job-title nodes."""
    ENTRY = "entry"
    MID = "mid"
    SENIOR = "senior"
    LEAD = "lead"
    EXECUTIVE = "executive"


class CareerNode(BaseModel):
    """
    A single entry of the career taxonomy.

    ``child_ids`` order is display order. Annotation fields are populated
    only while rendering and are never part of the canonical store.
    """
    id: str
    name: str
    level: int = Field(ge=MIN_LEVEL, le=MAX_LEVEL)
    parent_id: Optional[str] = None
    child_ids: Tuple[str, ...] = ()
    color: str = DEFAULT_NODE_COLOR
    description: str = ""

    # Job title specifics
    job_search_keywords: Tuple[str, ...] = ()
    typical_salary: Optional[str] = None
    required_skills: Tuple[str, ...] = ()
    experience_level: Optional[ExperienceLevel] = None

    # AI-generated metadata
    years_from_now: Optional[float] = None
    salary_range: Optional[str] = None
    reasoning: Optional[str] = None
    injected: bool = False

    # Render-time annotations
    recommended: bool = False
    recommendation_reason: Optional[str] = None
    path_types: Tuple[str, ...] = ()
    path_colors: Tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def is_leaf(self) -> bool:
        """Job titles are terminal: clicking them selects rather than expands."""
        return self.level == MAX_LEVEL

    @property
    def has_children(self) -> bool:
        return len(self.child_ids) > 0

    def with_child(self, child_id: str) -> "CareerNode":
        """Return a copy with ``child_id`` appended, if not already present."""
        if child_id in self.child_ids:
            return self
        return self.model_copy(update={"child_ids": self.child_ids + (child_id,)})


class PositionedNode(CareerNode):
    """
    A CareerNode placed on the plane.

    ``angle`` is measured from the global center; ``wedge_start`` and
    ``wedge_end`` bound the angular sector reserved for the node's subtree.
    """
    x: float
    y: float
    angle: float
    wedge_start: float
    wedge_end: float

    def contains_angle(self, angle: float, tolerance: float = 1e-9) -> bool:
        return self.wedge_start - tolerance <= angle <= self.wedge_end + tolerance


class GalaxyLink(BaseModel):
    """Parent -> child edge between two positioned nodes."""
    source: str
    target: str
    source_x: float
    source_y: float
    target_x: float
    target_y: float
    color: str
    recommended: bool = False
    path_colors: Tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)


_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    return _SLUG_PATTERN.sub("-", text.lower()).strip("-")


def injected_node_id(path_index: int, level: int, name: str) -> str:
    """
    Deterministic id for a path node that arrived without one.

    Namespaced by the path's position in the submission so that re-merging
    the same paths always yields the same ids.
    """
    return f"ai-p{path_index}-l{level}-{slugify(name) or 'node'}"


class PathNodeDescriptor(BaseModel):
    """A fully specified node inside a PathSpec (may not exist in the taxonomy)."""
    id: Optional[str] = None
    name: Optional[str] = None
    level: Optional[int] = None
    kind: Optional[str] = None  # "ROLE" | "CATEGORY"

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("id", "name", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("level", mode="before")
    @classmethod
    def _coerce_level(cls, value: Any) -> Optional[int]:
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str) and value.strip().lstrip("-").isdigit():
            return int(value.strip())
        return None

    def resolved_id(self, path_index: int) -> Optional[str]:
        if self.id:
            return self.id
        if self.name and self.level is not None:
            return injected_node_id(path_index, self.level, self.name)
        return None


NodeRef = Union[str, PathNodeDescriptor]


class PathLink(BaseModel):
    """Explicit parent wiring supplied alongside a path."""
    source: str
    target: str

    model_config = ConfigDict(frozen=True)


_LEGACY_KEYS = {
    "nodeRefs": "node_refs",
    "searchQuery": "search_query",
    "optimizedSearchQuery": "search_query",
}


class PathSpec(BaseModel):
    """
    One proposed trajectory through the taxonomy.

    ``node_refs`` is a linear chain: consecutive entries are parent -> child
    in presentation order.
    """
    type: str = PathCategory.DIRECT_FIT.value
    node_refs: Tuple[NodeRef, ...] = ()
    links: Tuple[PathLink, ...] = ()
    reasoning: str = ""
    search_query: str = ""

    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _normalize_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        data = dict(data)
        for external, internal in _LEGACY_KEYS.items():
            if external in data and internal not in data:
                data[internal] = data.pop(external)

        # pathNodes (rich descriptors) win over the older nodeIds list
        if "node_refs" not in data:
            data["node_refs"] = data.pop("pathNodes", None) or data.pop("nodeIds", None) or []

        refs = data.get("node_refs")
        if not isinstance(refs, (list, tuple)):
            logger.warning(f"Ignoring non-list node references: {refs!r}")
            refs = []
        kept = [r for r in refs if isinstance(r, (str, dict, PathNodeDescriptor))]
        if len(kept) != len(refs):
            logger.warning(f"Dropped {len(refs) - len(kept)} unreadable node reference(s)")
        data["node_refs"] = kept

        links = data.get("links") or []
        data["links"] = [
            l for l in links
            if isinstance(l, PathLink)
            or (isinstance(l, dict) and l.get("source") and l.get("target"))
        ]
        return data

    @property
    def category(self) -> Optional[PathCategory]:
        return PathCategory.from_label(self.type)

    @property
    def color(self) -> str:
        return path_color(self.type)

    def node_ids(self, path_index: int) -> List[str]:
        """Resolved node ids in chain order; unidentifiable entries are skipped."""
        ids: List[str] = []
        for ref in self.node_refs:
            if isinstance(ref, str):
                if ref:
                    ids.append(ref)
                continue
            resolved = ref.resolved_id(path_index)
            if resolved:
                ids.append(resolved)
        return ids

    def parent_from_links(self, node_id: str) -> Optional[str]:
        for link in self.links:
            if link.target == node_id:
                return link.source
        return None


class ViewportWindow(BaseModel):
    """The rectangle of the node plane currently mapped onto the screen."""
    x: float
    y: float
    width: float
    height: float

    model_config = ConfigDict(frozen=True)

    @classmethod
    def centered_on(cls, cx: float, cy: float, width: float, height: float) -> "ViewportWindow":
        return cls(x=cx - width / 2, y=cy - height / 2, width=width, height=height)

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def interpolate(self, other: "ViewportWindow", t: float) -> "ViewportWindow":
        """Linear blend towards ``other``; ``t`` is clamped to [0, 1]."""
        t = max(0.0, min(1.0, t))
        return ViewportWindow(
            x=self.x + (other.x - self.x) * t,
            y=self.y + (other.y - self.y) * t,
            width=self.width + (other.width - self.width) * t,
            height=self.height + (other.height - self.height) * t,
        )

    def as_view_box(self) -> str:
        """SVG ``viewBox`` attribute value."""
        return f"{self.x:g} {self.y:g} {self.width:g} {self.height:g}"
