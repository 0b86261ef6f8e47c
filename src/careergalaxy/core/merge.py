"""
Path merging.

Folds AI-proposed PathSpecs into a working copy of the canonical taxonomy:

- References to existing nodes are resolved and chained.
- Descriptors for nodes the taxonomy does not know are materialized as new
  CareerNodes and wired under the previous chain entry (or an explicit link).
- Broken entries are skipped and reported, never raised.

The canonical TaxonomyStore is never touched; running the merge twice with
the same paths against fresh clones yields identical working taxonomies.
"""

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import DEFAULT_NODE_COLOR, INJECTED_NODE_DESCRIPTION, MAX_LEVEL, MIN_LEVEL
from .result import Err, Ok, Result
from .taxonomy import TaxonomyStore
from .types import CareerNode, NodeRef, PathNodeDescriptor, PathSpec

logger = logging.getLogger(__name__)

# Name keywords that make a generic fallback parent for unanchored nodes
FALLBACK_PARENT_KEYWORDS = ("Technology", "Business", "General")

# Tokens shorter than this are ignored when auto-linking an orphan by name
MIN_LINK_TOKEN_LENGTH = 4


class LevelPolicy(StrEnum):
    """What to do when a descriptor's declared level disagrees with its parent."""
    TRUST = "trust"
    REJECT = "reject"


class IssueKind(StrEnum):
    DANGLING_REFERENCE = "dangling_reference"
    MALFORMED_DESCRIPTOR = "malformed_descriptor"
    LEVEL_MISMATCH = "level_mismatch"


@dataclass(frozen=True)
class MergeIssue:
    """A path entry that could not be merged."""
    kind: IssueKind
    path_index: int
    position: int
    message: str

    def __str__(self) -> str:
        return f"path {self.path_index} entry {self.position}: {self.message}"


@dataclass
class MergeResult:
    """
    Working taxonomy produced by a merge.

    Attributes:
        nodes: Working node map (canonical nodes plus injected ones).
        root_ids: Ordered ids of level-0 roots, including injected roots.
        injected_ids: Ids created by the merge, in creation order.
        issues: Entries that were skipped.
    """
    nodes: Dict[str, CareerNode]
    root_ids: List[str]
    injected_ids: List[str] = field(default_factory=list)
    issues: List[MergeIssue] = field(default_factory=list)

    @property
    def node_list(self) -> List[CareerNode]:
        return list(self.nodes.values())


class PathMerger:
    """
    Materializes PathSpecs into a working taxonomy.

    Parent resolution for a new node, in order:
      1. An explicit link on the path targeting the node.
      2. The previous successfully resolved entry of the chain.
      3. For the first entry only: the best-named node one level up
         (orphan auto-link), so the node stays reachable from a root.
    """

    def __init__(self, level_policy: LevelPolicy = LevelPolicy.TRUST):
        self.level_policy = LevelPolicy(level_policy)

    def merge(self, taxonomy: TaxonomyStore, paths: Optional[Sequence[PathSpec]] = None) -> MergeResult:
        working = taxonomy.clone_nodes()
        result = MergeResult(nodes=working, root_ids=list(taxonomy.root_ids))

        for path_index, path in enumerate(paths or []):
            self._merge_path(path, path_index, result)

        if result.injected_ids:
            logger.debug(f"Injected {len(result.injected_ids)} node(s): {result.injected_ids}")
        for issue in result.issues:
            logger.warning(f"Skipped {issue}")
        return result

    def _merge_path(self, path: PathSpec, path_index: int, result: MergeResult) -> None:
        previous_id: Optional[str] = None

        for position, ref in enumerate(path.node_refs):
            outcome = self._resolve(ref, path, path_index, position, previous_id, result)
            if outcome.is_err():
                result.issues.append(outcome.error)
                continue
            previous_id = outcome.unwrap()

    def _resolve(
        self,
        ref: NodeRef,
        path: PathSpec,
        path_index: int,
        position: int,
        previous_id: Optional[str],
        result: MergeResult,
    ) -> Result[str, MergeIssue]:
        working = result.nodes

        if isinstance(ref, str):
            if ref in working:
                return Ok(ref)
            return Err(MergeIssue(
                IssueKind.DANGLING_REFERENCE, path_index, position,
                f"unknown node id '{ref}' with no descriptor to create it from",
            ))

        node_id = ref.resolved_id(path_index)
        if node_id is None:
            return Err(MergeIssue(
                IssueKind.MALFORMED_DESCRIPTOR, path_index, position,
                "descriptor has neither an id nor a name and level",
            ))
        if node_id in working:
            return Ok(node_id)

        return self._materialize(ref, node_id, path, path_index, position, previous_id, result)

    def _materialize(
        self,
        descriptor: PathNodeDescriptor,
        node_id: str,
        path: PathSpec,
        path_index: int,
        position: int,
        previous_id: Optional[str],
        result: MergeResult,
    ) -> Result[str, MergeIssue]:
        working = result.nodes
        level = descriptor.level

        if not descriptor.name or level is None or not (MIN_LEVEL <= level <= MAX_LEVEL):
            return Err(MergeIssue(
                IssueKind.MALFORMED_DESCRIPTOR, path_index, position,
                f"descriptor '{node_id}' needs a name and a level between {MIN_LEVEL} and {MAX_LEVEL}",
            ))

        parent_id = path.parent_from_links(node_id)
        if parent_id not in working:
            parent_id = previous_id
        if parent_id is None and position == 0 and level > MIN_LEVEL:
            parent_id = self._auto_link(descriptor.name, level, working)

        parent = working.get(parent_id) if parent_id else None
        if parent is not None and parent.level != level - 1:
            if self.level_policy == LevelPolicy.REJECT:
                return Err(MergeIssue(
                    IssueKind.LEVEL_MISMATCH, path_index, position,
                    f"'{node_id}' declares level {level} under level {parent.level} node '{parent.id}'",
                ))
            logger.debug(
                f"Trusting declared level {level} for '{node_id}' under level {parent.level} '{parent.id}'"
            )

        node = CareerNode(
            id=node_id,
            name=descriptor.name,
            level=level,
            parent_id=parent.id if parent else None,
            color=parent.color if parent else DEFAULT_NODE_COLOR,
            description=INJECTED_NODE_DESCRIPTION,
            reasoning=path.reasoning or None,
            injected=True,
        )
        working[node_id] = node
        result.injected_ids.append(node_id)

        if parent is not None:
            working[parent.id] = parent.with_child(node_id)
        elif level == MIN_LEVEL:
            result.root_ids.append(node_id)

        logger.debug(f"Injecting dynamic node: {descriptor.name} ({node_id})")
        return Ok(node_id)

    @staticmethod
    def _auto_link(name: str, level: int, working: Dict[str, CareerNode]) -> Optional[str]:
        """Pick a parent for an unanchored node from the level above it."""
        candidates = [n for n in working.values() if n.level == level - 1]
        if not candidates:
            return None

        tokens = [t for t in name.lower().split() if len(t) >= MIN_LINK_TOKEN_LENGTH]
        best: Optional[CareerNode] = None
        best_score = 0
        for candidate in candidates:
            candidate_name = candidate.name.lower()
            score = sum(1 for token in tokens if token in candidate_name)
            if score > best_score:
                best, best_score = candidate, score

        if best is not None:
            logger.debug(f"Auto-linked {name} to {best.name} (score: {best_score})")
            return best.id

        fallback = next(
            (c for c in candidates if any(k in c.name for k in FALLBACK_PARENT_KEYWORDS)),
            candidates[0],
        )
        logger.debug(f"Fallback link for {name} to {fallback.name}")
        return fallback.id


def merge_paths(
    taxonomy: TaxonomyStore,
    paths: Optional[Sequence[PathSpec]] = None,
    level_policy: LevelPolicy = LevelPolicy.TRUST,
) -> MergeResult:
    """Merge ``paths`` into a fresh working copy of ``taxonomy``."""
    return PathMerger(level_policy).merge(taxonomy, paths)


def parse_paths(raw: Optional[Sequence[dict]]) -> Tuple[List[PathSpec], List[str]]:
    """
    Validate raw path payloads from a collaborator.

    Returns:
        The valid PathSpecs and one message per rejected payload.
    """
    paths: List[PathSpec] = []
    errors: List[str] = []
    for index, item in enumerate(raw or []):
        try:
            paths.append(item if isinstance(item, PathSpec) else PathSpec.model_validate(item))
        except ValueError as e:
            errors.append(f"path {index}: {e}")
            logger.warning(f"Rejected path {index}: {e}")
    return paths, errors
