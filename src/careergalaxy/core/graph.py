"""
Taxonomy hierarchy index backed by rustworkx.

The taxonomy itself is a plain id -> CareerNode mapping; this index mirrors it
as a directed parent -> child graph for the questions that are awkward to
answer on the mapping alone:

- Structural validation (cycles, nodes with more than one parent).
- Summary statistics for tooling.

It manages the mapping between string node ids and rustworkx integer indices.
"""

from collections import defaultdict
from typing import Any, Dict, Iterable, Iterator, Set

import rustworkx as rx

from .types import CareerNode


class TaxonomyGraph:
    """
    Directed parent -> child view over a set of career nodes.

    Features:
    - O(1) node lookup via id-to-index map
    - Forest validation
    - Per-level and structural counts
    """

    def __init__(self):
        self._graph = rx.PyDiGraph(multigraph=False)
        self._id_to_idx: Dict[str, int] = {}
        self._nodes_by_level: Dict[int, Set[str]] = defaultdict(set)

    @classmethod
    def from_nodes(cls, nodes: Iterable[CareerNode]) -> "TaxonomyGraph":
        """
        Build the index from nodes, wiring edges from each ``parent_id``.

        Edges to parents that are not part of ``nodes`` are skipped.
        """
        graph = cls()
        node_list = list(nodes)
        for node in node_list:
            graph.add_node(node)
        for node in node_list:
            if node.parent_id is not None:
                graph.add_edge(node.parent_id, node.id)
        return graph

    def add_node(self, node: CareerNode) -> None:
        """Add or replace a node."""
        if node.id in self._id_to_idx:
            idx = self._id_to_idx[node.id]
            previous: CareerNode = self._graph[idx]
            self._nodes_by_level[previous.level].discard(node.id)
            self._graph[idx] = node
        else:
            idx = self._graph.add_node(node)
            self._id_to_idx[node.id] = idx
        self._nodes_by_level[node.level].add(node.id)

    def add_edge(self, parent_id: str, child_id: str) -> None:
        """Add a parent -> child edge; ignored if either end is unknown."""
        if parent_id not in self._id_to_idx or child_id not in self._id_to_idx:
            return
        u_idx = self._id_to_idx[parent_id]
        v_idx = self._id_to_idx[child_id]
        if not self._graph.has_edge(u_idx, v_idx):
            self._graph.add_edge(u_idx, v_idx, None)

    def is_forest(self) -> bool:
        """True when the hierarchy is acyclic and every node has at most one parent."""
        if not rx.is_directed_acyclic_graph(self._graph):
            return False
        return all(self._graph.in_degree(idx) <= 1 for idx in self._graph.node_indices())

    def iter_nodes(self) -> Iterator[CareerNode]:
        return iter(self._graph.nodes())

    @property
    def node_count(self) -> int:
        return self._graph.num_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.num_edges()

    def get_stats(self) -> Dict[str, Any]:
        orphans = 0
        leaves = 0
        for idx in self._graph.node_indices():
            node: CareerNode = self._graph[idx]
            if node.level > 0 and self._graph.in_degree(idx) == 0:
                orphans += 1
            if self._graph.out_degree(idx) == 0:
                leaves += 1

        return {
            "total_nodes": self.node_count,
            "total_edges": self.edge_count,
            "nodes_by_level": {
                level: len(ids) for level, ids in sorted(self._nodes_by_level.items()) if ids
            },
            "injected": sum(1 for node in self.iter_nodes() if node.injected),
            "recommended": sum(1 for node in self.iter_nodes() if node.recommended),
            "leaves": leaves,
            "orphans": orphans,
            "backend": "rustworkx",
        }
