"""
Recommendation annotation.

Marks the positioned nodes touched by AI paths so a recommended trajectory
reads as an unbroken, colored lineage from a root down to its target role.
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Set

from ..config import DEFAULT_PATH_COLOR
from .types import GalaxyLink, PathCategory, PathSpec, PositionedNode

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = PathCategory.DIRECT_FIT


def lineage(node_id: str, by_id: Mapping[str, PositionedNode]) -> List[str]:
    """Ids from the root down to ``node_id``; stops early on a cycle or a gap."""
    chain: List[str] = []
    seen: Set[str] = set()
    current = by_id.get(node_id)
    while current is not None and current.id not in seen:
        seen.add(current.id)
        chain.append(current.id)
        current = by_id.get(current.parent_id) if current.parent_id else None
    chain.reverse()
    return chain


def annotate_recommendations(
    nodes: Sequence[PositionedNode],
    paths: Optional[Sequence[PathSpec]] = None,
) -> List[PositionedNode]:
    """
    Return copies of ``nodes`` with recommendation fields populated.

    Every node referenced by a path is recommended, and so is each of its
    ancestors (back-fill). ``path_types``/``path_colors`` list the paths that
    reference a node directly, in declaration order; back-filled ancestors
    default to the Direct Fit category. The last rendered node of a node's
    primary path carries that path's reasoning; entries the merge skipped
    do not count.

    Nodes that are not recommended come back with their annotations cleared,
    so annotating an already annotated layout never leaks stale markings.
    """
    paths = list(paths or [])
    by_id: Dict[str, PositionedNode] = {n.id: n for n in nodes}
    path_ids: List[List[str]] = [p.node_ids(i) for i, p in enumerate(paths)]
    path_members: List[Set[str]] = [set(ids) for ids in path_ids]
    path_ends: List[Optional[str]] = [
        next((i for i in reversed(ids) if i in by_id), None) for ids in path_ids
    ]

    recommended: Set[str] = set()
    for ids in path_ids:
        for node_id in ids:
            recommended.add(node_id)
            recommended.update(lineage(node_id, by_id))

    annotated: List[PositionedNode] = []
    for node in nodes:
        if node.id not in recommended:
            annotated.append(_cleared(node))
            continue

        direct = [i for i, members in enumerate(path_members) if node.id in members]
        if direct:
            path_types = tuple(paths[i].type for i in direct)
            path_colors = tuple(paths[i].color for i in direct)
        else:
            path_types = (DEFAULT_CATEGORY.value,)
            path_colors = (DEFAULT_CATEGORY.color,)

        primary = direct[0] if direct else 0
        reason = None
        if path_ends[primary] == node.id:
            reason = paths[primary].reasoning or None

        annotated.append(node.model_copy(update={
            "recommended": True,
            "recommendation_reason": reason,
            "path_types": path_types,
            "path_colors": path_colors,
        }))

    if paths:
        logger.debug(f"Marked {len(recommended & by_id.keys())} node(s) as recommended")
    return annotated


def _cleared(node: PositionedNode) -> PositionedNode:
    if not (node.recommended or node.recommendation_reason or node.path_types or node.path_colors):
        return node
    return node.model_copy(update={
        "recommended": False,
        "recommendation_reason": None,
        "path_types": (),
        "path_colors": (),
    })


def build_links(nodes: Sequence[PositionedNode]) -> List[GalaxyLink]:
    """
    Parent -> child edges between positioned nodes.

    An edge is recommended when both of its endpoints are; it is drawn in
    the child's path colors.
    """
    by_id = {n.id: n for n in nodes}
    links: List[GalaxyLink] = []
    for node in nodes:
        parent = by_id.get(node.parent_id) if node.parent_id else None
        if parent is None:
            continue
        recommended = parent.recommended and node.recommended
        links.append(GalaxyLink(
            source=parent.id,
            target=node.id,
            source_x=parent.x,
            source_y=parent.y,
            target_x=node.x,
            target_y=node.y,
            color=node.path_colors[0] if recommended and node.path_colors else node.color,
            recommended=recommended,
            path_colors=node.path_colors if recommended else (),
        ))
    return links


def primary_color(node: PositionedNode) -> str:
    """Color a renderer should use for a node's highlight."""
    if node.recommended and node.path_colors:
        return node.path_colors[0]
    return node.color if not node.recommended else DEFAULT_PATH_COLOR
