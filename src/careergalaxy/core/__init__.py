"""
careergalaxy Core Module.

Data Model:
    - CareerNode, PositionedNode, GalaxyLink: Taxonomy records
    - PathSpec, PathNodeDescriptor: AI-proposed trajectories
    - TaxonomyStore, TaxonomyGraph: Canonical hierarchy and its index

Pipeline:
    - PathMerger: Fold paths into a working taxonomy
    - RadialLayoutEngine: Place nodes on concentric rings
    - annotate_recommendations, build_links: Render-time markings

Interaction:
    - DisclosureController: Expand / collapse / back
    - ViewportController: Pan, zoom and eased centering
    - GalaxySession: All of the above behind one object
"""

from .annotate import annotate_recommendations, build_links, lineage
from .disclosure import DisclosureAction, DisclosureController, DisclosureSnapshot, HistoryEntry
from .graph import TaxonomyGraph
from .layout import LayoutConfig, RadialLayoutEngine, generate_radial_layout
from .merge import IssueKind, LevelPolicy, MergeIssue, MergeResult, PathMerger, merge_paths, parse_paths
from .result import Err, Ok, Result
from .session import GalaxySession
from .settings import GalaxySettings
from .taxonomy import TaxonomyError, TaxonomyStore
from .types import (
    CareerNode,
    ExperienceLevel,
    GalaxyLink,
    PathCategory,
    PathLink,
    PathNodeDescriptor,
    PathSpec,
    PositionedNode,
    ViewportWindow,
)
from .viewport import ViewportConfig, ViewportController, ViewportTransition, cubic_bezier

__all__ = [
    # Types
    "CareerNode",
    "ExperienceLevel",
    "GalaxyLink",
    "PathCategory",
    "PathLink",
    "PathNodeDescriptor",
    "PathSpec",
    "PositionedNode",
    "ViewportWindow",
    # Results
    "Ok",
    "Err",
    "Result",
    # Taxonomy
    "TaxonomyError",
    "TaxonomyGraph",
    "TaxonomyStore",
    # Pipeline
    "IssueKind",
    "LevelPolicy",
    "MergeIssue",
    "MergeResult",
    "PathMerger",
    "merge_paths",
    "parse_paths",
    "LayoutConfig",
    "RadialLayoutEngine",
    "generate_radial_layout",
    "annotate_recommendations",
    "build_links",
    "lineage",
    # Interaction
    "DisclosureAction",
    "DisclosureController",
    "DisclosureSnapshot",
    "HistoryEntry",
    "ViewportConfig",
    "ViewportController",
    "ViewportTransition",
    "cubic_bezier",
    "GalaxySession",
    "GalaxySettings",
]
