"""
Progressive disclosure state machine.

Tracks which part of the positioned taxonomy is currently revealed:

- VisibleSet: ids eligible for rendering (always includes every root).
- ExpandedSet: ids whose children are shown.
- ExpansionHistory: expansions in order, most recent last, for "Back".

Only one branch per sibling group is open at a time. Every request that does
not meet its precondition is a no-op, so UI code can call speculatively.
"""

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import (
    Callable,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Set,
    Tuple,
    TypeVar,
    Union,
)

from .types import CareerNode, GalaxyLink

logger = logging.getLogger(__name__)

N = TypeVar("N", bound=CareerNode)


class DisclosureAction(StrEnum):
    """Outcome of a node click."""
    EXPANDED = "expanded"
    COLLAPSED = "collapsed"
    SELECTED = "selected"
    NONE = "none"


@dataclass(frozen=True)
class HistoryEntry:
    """
    One recorded expansion.

    ``hidden`` and ``unexpanded`` hold what the expansion closed on the
    node's siblings, so Back can reopen it.
    """
    node_id: str
    hidden: FrozenSet[str] = frozenset()
    unexpanded: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class DisclosureSnapshot:
    """Saved disclosure state, used by save/restore hooks."""
    visible: FrozenSet[str]
    expanded: FrozenSet[str]
    history: Tuple[HistoryEntry, ...] = field(default_factory=tuple)


class DisclosureController:
    """
    Expand/collapse/back state over an id-indexed node map.

    Args:
        nodes: The positioned (or plain) nodes the UI can show.
        root_ids: Always-visible roots; defaults to the level-0 nodes.
        on_select: Called with the full node record when a job title is clicked.
    """

    def __init__(
        self,
        nodes: Union[Mapping[str, CareerNode], Iterable[CareerNode]],
        root_ids: Optional[Sequence[str]] = None,
        on_select: Optional[Callable[[CareerNode], None]] = None,
    ):
        if isinstance(nodes, Mapping):
            self._nodes: Dict[str, CareerNode] = dict(nodes)
        else:
            self._nodes = {n.id: n for n in nodes}

        if root_ids is None:
            root_ids = [n.id for n in self._nodes.values() if n.level == 0 and n.parent_id is None]
        self._root_ids: Tuple[str, ...] = tuple(r for r in root_ids if r in self._nodes)
        self._on_select = on_select

        self._visible: Set[str] = set()
        self._expanded: Set[str] = set()
        self._history: List[HistoryEntry] = []
        self.collapse_all()

    # =========================================================================
    # State
    # =========================================================================

    @property
    def root_ids(self) -> Tuple[str, ...]:
        return self._root_ids

    @property
    def visible_ids(self) -> FrozenSet[str]:
        return frozenset(self._visible)

    @property
    def expanded_ids(self) -> FrozenSet[str]:
        return frozenset(self._expanded)

    @property
    def history(self) -> Tuple[str, ...]:
        return tuple(entry.node_id for entry in self._history)

    @property
    def can_go_back(self) -> bool:
        return bool(self._history)

    def is_visible(self, node_id: str) -> bool:
        return node_id in self._visible

    def is_expanded(self, node_id: str) -> bool:
        return node_id in self._expanded

    def children(self, node_id: str) -> List[str]:
        node = self._nodes.get(node_id)
        if node is None:
            return []
        return [
            c for c in node.child_ids
            if c in self._nodes and self._nodes[c].parent_id == node_id
        ]

    def siblings(self, node_id: str) -> List[str]:
        node = self._nodes.get(node_id)
        if node is None:
            return []
        if node.parent_id is None:
            group = list(self._root_ids)
        else:
            group = self.children(node.parent_id)
        return [s for s in group if s != node_id]

    def descendants(self, node_id: str) -> Set[str]:
        found: Set[str] = set()
        stack = list(self.children(node_id))
        while stack:
            current = stack.pop()
            if current in found or current == node_id:
                continue
            found.add(current)
            stack.extend(self.children(current))
        return found

    # =========================================================================
    # Transitions
    # =========================================================================

    def expand(self, node_id: str) -> bool:
        """
        Reveal the direct children of a visible, collapsed node.

        Any expanded sibling is collapsed first, together with its subtree.
        """
        children = self.children(node_id)
        if node_id not in self._visible or node_id in self._expanded or not children:
            return False

        hidden: Set[str] = set()
        unexpanded: Set[str] = set()
        for sibling in self.siblings(node_id):
            if sibling in self._expanded:
                h, u = self._closing(sibling)
                hidden |= h
                unexpanded |= u

        self._visible -= hidden
        self._expanded -= unexpanded
        self._visible.update(children)
        self._expanded.add(node_id)
        self._history.append(HistoryEntry(node_id, frozenset(hidden), frozenset(unexpanded)))

        logger.debug(f"Expanded {node_id}: +{len(children)} visible, closed {len(unexpanded)} sibling branch node(s)")
        return True

    def collapse(self, node_id: str) -> bool:
        """Hide every descendant of an expanded node. History is untouched."""
        if node_id not in self._expanded:
            return False
        hidden, unexpanded = self._closing(node_id)
        self._visible -= hidden
        self._expanded -= unexpanded
        logger.debug(f"Collapsed {node_id}: -{len(hidden)} visible")
        return True

    def back(self) -> Optional[str]:
        """
        Undo the most recent expansion.

        Returns:
            The id that was collapsed, or None when there is no history.
        """
        if not self._history:
            return None
        entry = self._history.pop()
        self.collapse(entry.node_id)
        self._reopen(entry.hidden, entry.unexpanded)
        return entry.node_id

    def collapse_all(self) -> None:
        self._visible = set(self._root_ids)
        self._expanded = set()
        self._history = []

    def select(self, node_id: str) -> Optional[CareerNode]:
        node = self._nodes.get(node_id)
        if node is not None and self._on_select is not None:
            self._on_select(node)
        return node

    def click(self, node_id: str) -> DisclosureAction:
        """
        Route a node click.

        Job titles are selected, never expanded; an expanded node collapses;
        a collapsed node with children expands.
        """
        node = self._nodes.get(node_id)
        if node is None:
            return DisclosureAction.NONE
        if node.is_leaf:
            self.select(node_id)
            return DisclosureAction.SELECTED
        if node_id in self._expanded:
            self.collapse(node_id)
            return DisclosureAction.COLLAPSED
        if self.expand(node_id):
            return DisclosureAction.EXPANDED
        return DisclosureAction.NONE

    # =========================================================================
    # Save / Restore
    # =========================================================================

    def snapshot(self) -> DisclosureSnapshot:
        return DisclosureSnapshot(
            visible=frozenset(self._visible),
            expanded=frozenset(self._expanded),
            history=tuple(self._history),
        )

    def restore(self, snapshot: DisclosureSnapshot) -> None:
        """
        Re-apply a saved state.

        Ids unknown to this controller are dropped, and whatever no longer
        satisfies the disclosure invariants is left closed.
        """
        self.collapse_all()
        self._reopen(snapshot.visible, snapshot.expanded)
        self._history = [e for e in snapshot.history if e.node_id in self._nodes]

    # =========================================================================
    # Rendering helpers
    # =========================================================================

    def visible_nodes(self, nodes: Iterable[N]) -> List[N]:
        """Filter ``nodes`` to the visible ones, preserving order."""
        return [n for n in nodes if n.id in self._visible]

    def visible_links(self, links: Iterable[GalaxyLink]) -> List[GalaxyLink]:
        return [l for l in links if l.source in self._visible and l.target in self._visible]

    # =========================================================================
    # Internals
    # =========================================================================

    def _closing(self, node_id: str) -> Tuple[Set[str], Set[str]]:
        """What collapsing ``node_id`` would hide and un-expand."""
        below = self.descendants(node_id)
        hidden = below & self._visible
        unexpanded = (below | {node_id}) & self._expanded
        return hidden, unexpanded

    def _reopen(self, visible: Iterable[str], expanded: Iterable[str]) -> None:
        """
        Re-show and re-expand ids top-down.

        A node is shown only under an expanded parent and expanded only while
        visible, with children, and with no sibling already open.
        """
        to_show = set(visible)
        to_expand = set(expanded)
        known = [self._nodes[i] for i in to_show | to_expand if i in self._nodes]
        for node in sorted(known, key=lambda n: (self._depth(n.id), n.id)):
            if (
                node.id in to_show
                and node.id not in self._visible
                and node.parent_id is not None
                and node.parent_id in self._expanded
            ):
                self._visible.add(node.id)
            if (
                node.id in to_expand
                and node.id in self._visible
                and node.id not in self._expanded
                and self.children(node.id)
                and not any(s in self._expanded for s in self.siblings(node.id))
            ):
                self._expanded.add(node.id)

    def _depth(self, node_id: str) -> int:
        depth = 0
        seen = {node_id}
        current = self._nodes.get(node_id)
        while current is not None and current.parent_id is not None and current.parent_id not in seen:
            seen.add(current.parent_id)
            depth += 1
            current = self._nodes.get(current.parent_id)
        return depth
