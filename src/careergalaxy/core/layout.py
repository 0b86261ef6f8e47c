"""
Radial layout engine.

Assigns plane coordinates to every node reachable from a root:

- Roots are spread evenly on the innermost ring, starting at north and
  proceeding clockwise (screen coordinates, y pointing down).
- Each node reserves an angular wedge for its subtree. Its children share an
  arc centered on the node's angle, never wider than that wedge, split into
  equal slices; each child sits in the middle of its slice on the ring for
  its level and inherits the slice as its own wedge.

Because every wedge is nested inside its parent's, a subtree always occupies
a contiguous sector. The engine is a pure function of (nodes, config).
"""

import logging
import math
from collections import defaultdict, deque
from typing import Deque, Dict, Iterable, List, Optional, Set, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

from ..config import (
    ARC_GROWTH,
    BASE_CHILD_ARC,
    DEFAULT_CENTER,
    DEFAULT_LEVEL_RADII,
    MAX_CHILD_ARC,
    MAX_LEVEL,
    MIN_LEVEL,
)
from .types import CareerNode, PositionedNode

logger = logging.getLogger(__name__)

LEVEL_COUNT = MAX_LEVEL - MIN_LEVEL + 1

NORTH = -math.pi / 2

_GEOMETRY_FIELDS = {"x", "y", "angle", "wedge_start", "wedge_end"}


class LayoutConfig(BaseModel):
    """Geometry of the radial layout. Per-level tuples are indexed by level."""
    center_x: float = DEFAULT_CENTER[0]
    center_y: float = DEFAULT_CENTER[1]
    level_radii: Tuple[float, ...] = DEFAULT_LEVEL_RADII
    base_arc: float = BASE_CHILD_ARC
    arc_growth: Tuple[float, ...] = ARC_GROWTH
    max_arc: Tuple[float, ...] = MAX_CHILD_ARC

    model_config = ConfigDict(frozen=True)

    @field_validator("level_radii", "arc_growth", "max_arc")
    @classmethod
    def _one_value_per_level(cls, value: Tuple[float, ...]) -> Tuple[float, ...]:
        if len(value) != LEVEL_COUNT:
            raise ValueError(f"expected {LEVEL_COUNT} values (one per level), got {len(value)}")
        return value

    def radius(self, level: int) -> float:
        return self.level_radii[level]

    def child_arc(self, child_level: int, count: int) -> float:
        """
        Arc width for ``count`` children at ``child_level``.

        Grows with the square root of the child count so that wide families
        spread out without the arc growing unboundedly, then caps per level.
        """
        if count <= 0:
            return 0.0
        desired = self.base_arc * (1 + self.arc_growth[child_level] * math.sqrt(count))
        return min(self.max_arc[child_level], desired)


class RadialLayoutEngine:
    """
    Computes PositionedNodes for a working taxonomy.

    Nodes whose parent is missing, nodes unreachable from a root, and cycle
    members are left out of the result rather than raising.
    """

    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig()

    def layout(self, nodes: Iterable[CareerNode]) -> List[PositionedNode]:
        by_id: Dict[str, CareerNode] = {}
        for node in nodes:
            by_id.setdefault(node.id, node)

        claimed: Dict[str, List[str]] = defaultdict(list)
        for node in by_id.values():
            if node.parent_id is not None:
                claimed[node.parent_id].append(node.id)

        roots = [n for n in by_id.values() if n.level == MIN_LEVEL and n.parent_id is None]
        if not roots:
            return []

        placed: List[PositionedNode] = []
        placed_ids: Set[str] = set()
        queue: Deque[PositionedNode] = deque()

        share = 2 * math.pi / len(roots)
        for i, root in enumerate(roots):
            angle = NORTH + i * share
            positioned = self._place(root, angle, angle - share / 2, angle + share / 2)
            placed.append(positioned)
            placed_ids.add(root.id)
            queue.append(positioned)

        while queue:
            parent = queue.popleft()
            children = self._children_of(parent, by_id, claimed, placed_ids)
            if not children:
                continue

            child_level = min(parent.level + 1, MAX_LEVEL)
            arc = min(
                self.config.child_arc(child_level, len(children)),
                parent.wedge_end - parent.wedge_start,
            )
            start = parent.angle - arc / 2
            step = arc / len(children)

            for i, child in enumerate(children):
                lo = start + i * step
                hi = lo + step
                positioned = self._place(child, (lo + hi) / 2, lo, hi)
                placed.append(positioned)
                placed_ids.add(child.id)
                queue.append(positioned)

        dropped = len(by_id) - len(placed)
        if dropped:
            logger.debug(f"Layout dropped {dropped} unreachable node(s)")
        return placed

    @staticmethod
    def _children_of(
        parent: PositionedNode,
        by_id: Dict[str, CareerNode],
        claimed: Dict[str, List[str]],
        placed_ids: Set[str],
    ) -> List[CareerNode]:
        """Children in display order: declared ``child_ids`` first, then stragglers."""
        ordered: List[str] = []
        for child_id in list(parent.child_ids) + claimed.get(parent.id, []):
            child = by_id.get(child_id)
            if child is None or child.parent_id != parent.id:
                continue
            if child_id in placed_ids or child_id in ordered:
                continue
            ordered.append(child_id)
        return [by_id[c] for c in ordered]

    def _place(self, node: CareerNode, angle: float, wedge_start: float, wedge_end: float) -> PositionedNode:
        radius = self.config.radius(node.level)
        return PositionedNode(
            **node.model_dump(exclude=_GEOMETRY_FIELDS),
            x=self.config.center_x + math.cos(angle) * radius,
            y=self.config.center_y + math.sin(angle) * radius,
            angle=angle,
            wedge_start=wedge_start,
            wedge_end=wedge_end,
        )


def generate_radial_layout(
    nodes: Iterable[CareerNode],
    config: Optional[LayoutConfig] = None,
) -> List[PositionedNode]:
    """Functional entry point for :class:`RadialLayoutEngine`."""
    return RadialLayoutEngine(config).layout(nodes)
