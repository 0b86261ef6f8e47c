"""
Static career taxonomy.

The TaxonomyStore is the canonical, read-only hierarchy that every render
cycle starts from. It is loaded once (from the bundled YAML file or a
user-supplied one) and never mutated; merging AI paths always happens on a
working copy obtained from ``clone_nodes()``.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Union

import yaml
from pydantic import ValidationError

from .graph import TaxonomyGraph
from .types import CareerNode

logger = logging.getLogger(__name__)

NodeRecord = Union[CareerNode, Mapping[str, Any]]


class TaxonomyError(ValueError):
    """Raised when a taxonomy source cannot be turned into a store."""


class TaxonomyStore:
    """
    Immutable id-indexed career hierarchy plus lookup helpers.

    Attributes:
        nodes: Read-only mapping of node id to CareerNode.
        root_ids: Ordered ids of the level-0 nodes.
    """

    def __init__(self, nodes: Mapping[str, CareerNode], root_ids: Optional[Sequence[str]] = None):
        self._nodes: Dict[str, CareerNode] = dict(nodes)
        if root_ids is None:
            root_ids = [n.id for n in self._nodes.values() if n.level == 0 and n.parent_id is None]
        self._root_ids = tuple(root_ids)

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def from_records(cls, records: Iterable[NodeRecord]) -> "TaxonomyStore":
        """
        Build a store from node records, deriving ``child_ids`` from ``parent_id``.

        Children keep record order. ``child_ids`` already present on a record
        are preserved and missing children are appended after them.

        Raises:
            TaxonomyError: On an invalid record or a duplicate id.
        """
        ordered: Dict[str, CareerNode] = {}
        for record in records:
            try:
                node = record if isinstance(record, CareerNode) else CareerNode.model_validate(record)
            except ValidationError as e:
                raise TaxonomyError(f"Invalid taxonomy record {record!r}: {e}") from e
            if node.id in ordered:
                raise TaxonomyError(f"Duplicate taxonomy id: {node.id}")
            ordered[node.id] = node

        children: Dict[str, List[str]] = {node_id: list(n.child_ids) for node_id, n in ordered.items()}
        for node in ordered.values():
            if node.parent_id in children and node.id not in children[node.parent_id]:
                children[node.parent_id].append(node.id)

        nodes = {
            node_id: node.model_copy(update={"child_ids": tuple(children[node_id])})
            for node_id, node in ordered.items()
        }
        return cls(nodes)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "TaxonomyStore":
        """
        Load a taxonomy YAML file.

        Expected format::

            nodes:
              - id: sc-tech
                name: Technology & Digital
                level: 0
                parent_id: null
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise TaxonomyError(f"Failed to read taxonomy {path}: {e}") from e
        return cls.from_yaml(text, source=str(path))

    @classmethod
    def from_yaml(cls, text: str, source: str = "<string>") -> "TaxonomyStore":
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise TaxonomyError(f"Failed to parse taxonomy {source}: {e}") from e

        if isinstance(data, dict):
            records = data.get("nodes")
        else:
            records = data
        if not isinstance(records, list):
            raise TaxonomyError(f"Taxonomy {source} has no 'nodes' list")

        store = cls.from_records(records)
        logger.debug(f"Loaded {len(store)} taxonomy nodes from {source}")
        return store

    @classmethod
    def default(cls) -> "TaxonomyStore":
        """The bundled career taxonomy (loaded once per process)."""
        return _load_default()

    # =========================================================================
    # Lookups
    # =========================================================================

    @property
    def nodes(self) -> Mapping[str, CareerNode]:
        return MappingProxyType(self._nodes)

    @property
    def root_ids(self) -> tuple:
        return self._root_ids

    def get_node(self, node_id: str) -> Optional[CareerNode]:
        return self._nodes.get(node_id)

    def get_children(self, node_id: str) -> List[CareerNode]:
        node = self._nodes.get(node_id)
        if node is None:
            return []
        return [self._nodes[c] for c in node.child_ids if c in self._nodes]

    def get_parent(self, node_id: str) -> Optional[CareerNode]:
        node = self._nodes.get(node_id)
        if node is None or node.parent_id is None:
            return None
        return self._nodes.get(node.parent_id)

    def lineage(self, node_id: str) -> List[CareerNode]:
        """Nodes from the root down to ``node_id`` (empty if unknown)."""
        chain: List[CareerNode] = []
        seen = set()
        current = self._nodes.get(node_id)
        while current is not None and current.id not in seen:
            seen.add(current.id)
            chain.append(current)
            current = self._nodes.get(current.parent_id) if current.parent_id else None
        chain.reverse()
        return chain

    def nodes_at_level(self, level: int) -> List[CareerNode]:
        return [n for n in self._nodes.values() if n.level == level]

    def search_job_titles(self, query: str) -> List[CareerNode]:
        """Job titles whose name, description or search keywords contain ``query``."""
        q = query.strip().lower()
        if not q:
            return []
        return [
            node for node in self._nodes.values()
            if node.is_leaf and (
                q in node.name.lower()
                or q in node.description.lower()
                or any(q in k.lower() for k in node.job_search_keywords)
            )
        ]

    def clone_nodes(self) -> Dict[str, CareerNode]:
        """
        A working copy of the node map.

        Nodes are frozen, so copying the mapping is enough to isolate the
        canonical store from anything done to the copy.
        """
        return dict(self._nodes)

    def graph(self) -> TaxonomyGraph:
        return TaxonomyGraph.from_nodes(self._nodes.values())

    def validate(self) -> List[str]:
        """
        Check the structural invariants of the hierarchy.

        Returns:
            A list of human readable problems; empty when the store is sound.
        """
        problems: List[str] = []
        for node in self._nodes.values():
            if node.parent_id is None:
                if node.level != 0:
                    problems.append(f"{node.id}: level {node.level} node has no parent")
            else:
                parent = self._nodes.get(node.parent_id)
                if parent is None:
                    problems.append(f"{node.id}: parent {node.parent_id} does not exist")
                elif parent.level != node.level - 1:
                    problems.append(
                        f"{node.id}: level {node.level} under level {parent.level} parent {parent.id}"
                    )
            for child_id in node.child_ids:
                child = self._nodes.get(child_id)
                if child is None:
                    problems.append(f"{node.id}: child {child_id} does not exist")
                elif child.parent_id != node.id:
                    problems.append(f"{node.id}: child {child_id} points at parent {child.parent_id}")

        for root_id in self._root_ids:
            if root_id not in self._nodes:
                problems.append(f"root {root_id} does not exist")

        if not self.graph().is_forest():
            problems.append("hierarchy contains a cycle")
        return problems

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[CareerNode]:
        return iter(self._nodes.values())


@lru_cache(maxsize=1)
def _load_default() -> TaxonomyStore:
    text = resources.files("careergalaxy").joinpath("data/taxonomy.yaml").read_text(encoding="utf-8")
    return TaxonomyStore.from_yaml(text, source="careergalaxy/data/taxonomy.yaml")
