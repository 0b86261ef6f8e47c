"""Unit tests for the rustworkx-backed hierarchy index."""

from careergalaxy.core.graph import TaxonomyGraph
from careergalaxy.core.types import CareerNode


class TestTaxonomyGraph:
    def test_edges_follow_parent_ids(self, store):
        g = store.graph()
        assert g.node_count == len(store)
        assert g.edge_count == len(store) - 2

    def test_replace_node(self):
        g = TaxonomyGraph()
        g.add_node(CareerNode(id="a", name="A", level=1))
        g.add_node(CareerNode(id="a", name="A2", level=2))
        assert g.node_count == 1
        assert g.get_stats()["nodes_by_level"] == {2: 1}
        assert [n.name for n in g.iter_nodes()] == ["A2"]

    def test_unknown_edge_ignored(self):
        g = TaxonomyGraph()
        g.add_node(CareerNode(id="a", name="A", level=0))
        g.add_edge("a", "ghost")
        assert g.edge_count == 0

    def test_duplicate_edge_ignored(self):
        g = TaxonomyGraph.from_nodes([
            CareerNode(id="r", name="R", level=0),
            CareerNode(id="a", name="A", level=1, parent_id="r"),
        ])
        g.add_edge("r", "a")
        assert g.edge_count == 1

    def test_forest(self, store):
        assert store.graph().is_forest()

    def test_cycle_is_not_forest(self):
        g = TaxonomyGraph.from_nodes([
            CareerNode(id="a", name="A", level=1, parent_id="b"),
            CareerNode(id="b", name="B", level=2, parent_id="a"),
        ])
        assert not g.is_forest()

    def test_stats(self, store):
        stats = store.graph().get_stats()
        assert stats["total_nodes"] == 10
        assert stats["total_edges"] == 8
        assert stats["nodes_by_level"] == {0: 2, 1: 3, 2: 2, 3: 1, 4: 2}
        assert stats["leaves"] == 4
        assert stats["orphans"] == 0
        assert stats["injected"] == 0
        assert stats["backend"] == "rustworkx"

    def test_orphans_counted(self):
        stats = TaxonomyGraph.from_nodes([
            CareerNode(id="r", name="R", level=0),
            CareerNode(id="x", name="X", level=2, parent_id="missing"),
        ]).get_stats()
        assert stats["orphans"] == 1
