"""
Galaxy session.

Wires the pipeline stages together for a UI shell:

    taxonomy --merge--> working nodes --layout--> positioned
             --annotate--> rendered nodes + links

and owns the disclosure and viewport controllers that user events drive.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from .annotate import annotate_recommendations, build_links
from .disclosure import DisclosureAction, DisclosureController
from .graph import TaxonomyGraph
from .layout import LayoutConfig, RadialLayoutEngine
from .merge import LevelPolicy, MergeResult, PathMerger
from .taxonomy import TaxonomyStore
from .types import CareerNode, GalaxyLink, PathSpec, PositionedNode, ViewportWindow
from .viewport import ViewportConfig, ViewportController

logger = logging.getLogger(__name__)


class GalaxySession:
    """
    In-process state for one galaxy view.

    Args:
        taxonomy: Canonical hierarchy; defaults to the bundled one.
        paths: Initial AI paths.
        layout_config: Radial layout geometry.
        viewport_config: Viewport limits and defaults.
        level_policy: How the merger treats declared-level mismatches.
        on_select: Called with the full record of a clicked job title.
        on_view_change: Called with every new viewport window.
        clock: Time source forwarded to the viewport.
    """

    def __init__(
        self,
        taxonomy: Optional[TaxonomyStore] = None,
        paths: Optional[Sequence[PathSpec]] = None,
        layout_config: Optional[LayoutConfig] = None,
        viewport_config: Optional[ViewportConfig] = None,
        level_policy: LevelPolicy = LevelPolicy.TRUST,
        on_select: Optional[Callable[[CareerNode], None]] = None,
        on_view_change: Optional[Callable[[ViewportWindow], None]] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.taxonomy = taxonomy or TaxonomyStore.default()
        self.merger = PathMerger(level_policy)
        self.engine = RadialLayoutEngine(layout_config)
        self._on_select = on_select

        viewport_kwargs: Dict[str, Any] = {"on_change": on_view_change}
        if clock is not None:
            viewport_kwargs["clock"] = clock
        self.viewport = ViewportController(viewport_config, **viewport_kwargs)

        self.paths: List[PathSpec] = []
        self.merge_result: Optional[MergeResult] = None
        self.nodes: List[PositionedNode] = []
        self.links: List[GalaxyLink] = []
        self._by_id: Dict[str, PositionedNode] = {}
        self.disclosure: Optional[DisclosureController] = None

        self.set_paths(paths)

    # =========================================================================
    # Pipeline
    # =========================================================================

    def set_paths(self, paths: Optional[Sequence[PathSpec]] = None) -> MergeResult:
        """
        Replace the AI paths and rerun merge, layout and annotation.

        The disclosure state survives as far as it is still valid for the
        new node set.
        """
        self.paths = list(paths or [])
        self.merge_result = self.merger.merge(self.taxonomy, self.paths)

        positioned = self.engine.layout(self.merge_result.node_list)
        self.nodes = annotate_recommendations(positioned, self.paths)
        self.links = build_links(self.nodes)
        self._by_id = {n.id: n for n in self.nodes}

        previous = self.disclosure.snapshot() if self.disclosure is not None else None
        self.disclosure = DisclosureController(
            self._by_id,
            root_ids=[r for r in self.merge_result.root_ids if r in self._by_id],
            on_select=self._handle_select,
        )
        if previous is not None:
            self.disclosure.restore(previous)

        logger.debug(
            f"Rendered {len(self.nodes)} node(s), {len(self.links)} link(s) "
            f"from {len(self.paths)} path(s)"
        )
        return self.merge_result

    def get_node(self, node_id: str) -> Optional[PositionedNode]:
        return self._by_id.get(node_id)

    @property
    def recommended_nodes(self) -> List[PositionedNode]:
        return [n for n in self.nodes if n.recommended]

    # =========================================================================
    # Events
    # =========================================================================

    def click(self, node_id: str) -> DisclosureAction:
        """Route a node click and follow an expansion with the camera."""
        self.viewport.cancel_transition()
        action = self.disclosure.click(node_id)
        if action == DisclosureAction.EXPANDED:
            self.viewport.center_on(self._by_id[node_id])
        return action

    def back(self) -> Optional[str]:
        """Undo the latest expansion and re-center on the node's parent."""
        self.viewport.cancel_transition()
        collapsed = self.disclosure.back()
        if collapsed is None:
            return None
        node = self._by_id.get(collapsed)
        parent = self._by_id.get(node.parent_id) if node and node.parent_id else None
        if parent is not None:
            self.viewport.center_on(parent)
        else:
            self.viewport.reset()
        return collapsed

    def collapse_all(self) -> None:
        self.viewport.cancel_transition()
        self.disclosure.collapse_all()
        self.viewport.reset()

    def reset_view(self) -> ViewportWindow:
        return self.viewport.reset()

    def tick(self, now: Optional[float] = None) -> ViewportWindow:
        return self.viewport.tick(now)

    # =========================================================================
    # Rendering
    # =========================================================================

    def visible_nodes(self) -> List[PositionedNode]:
        return self.disclosure.visible_nodes(self.nodes)

    def visible_links(self) -> List[GalaxyLink]:
        return self.disclosure.visible_links(self.links)

    def graph(self) -> TaxonomyGraph:
        return TaxonomyGraph.from_nodes(self.nodes)

    def stats(self) -> Dict[str, Any]:
        stats = self.graph().get_stats()
        stats["paths"] = len(self.paths)
        stats["merge_issues"] = len(self.merge_result.issues) if self.merge_result else 0
        stats["dropped_by_layout"] = len(self.merge_result.nodes) - len(self.nodes) if self.merge_result else 0
        return stats

    def _handle_select(self, node: CareerNode) -> None:
        logger.debug(f"Selected job title {node.id}")
        if self._on_select is not None:
            self._on_select(node)
