"""Unit tests for the progressive disclosure state machine."""

from unittest.mock import MagicMock

import pytest

from careergalaxy.core.annotate import build_links
from careergalaxy.core.disclosure import DisclosureAction, DisclosureController
from careergalaxy.core.layout import generate_radial_layout


def assert_closed(ctl: DisclosureController, nodes) -> None:
    """Every visible non-root hangs off a visible, expanded parent; one open branch per sibling group."""
    for node_id in ctl.visible_ids:
        parent_id = nodes[node_id].parent_id
        if parent_id is None:
            continue
        assert parent_id in ctl.visible_ids
        assert parent_id in ctl.expanded_ids
    for node_id in ctl.expanded_ids:
        assert not any(s in ctl.expanded_ids for s in ctl.siblings(node_id))


@pytest.fixture
def ctl(store):
    return DisclosureController(store.nodes, store.root_ids)


class TestInitialState:
    def test_roots_only(self, ctl):
        assert ctl.visible_ids == {"tech", "biz"}
        assert ctl.expanded_ids == frozenset()
        assert ctl.history == ()
        assert not ctl.can_go_back

    def test_roots_default_to_level_zero(self, store):
        assert DisclosureController(store.nodes).root_ids == ("tech", "biz")

    def test_accepts_node_iterable(self, store):
        ctl = DisclosureController(list(store))
        assert ctl.visible_ids == {"tech", "biz"}


class TestExpandCollapse:
    def test_example_scenario(self, tiny_store):
        ctl = DisclosureController(tiny_store.nodes, tiny_store.root_ids)
        assert ctl.expand("R")
        assert ctl.visible_ids == {"R", "I"}
        assert ctl.expanded_ids == {"R"}
        ctl.collapse_all()
        assert ctl.visible_ids == {"R"}
        assert ctl.expanded_ids == frozenset()

    def test_expand_shows_direct_children_only(self, ctl):
        ctl.expand("tech")
        assert ctl.visible_ids == {"tech", "biz", "software", "data"}

    def test_expand_preconditions(self, ctl):
        assert not ctl.expand("web")          # hidden
        assert not ctl.expand("missing")
        ctl.expand("tech")
        assert not ctl.expand("tech")         # already expanded
        ctl.expand("software")
        ctl.expand("web")
        ctl.expand("frontend")
        assert not ctl.expand("fe-dev")       # no children
        assert ctl.history == ("tech", "software", "web", "frontend")

    def test_collapse_hides_subtree(self, ctl, store):
        for node_id in ("tech", "software", "web"):
            ctl.expand(node_id)
        assert ctl.collapse("software")
        assert ctl.visible_ids == {"tech", "biz", "software", "data"}
        assert ctl.expanded_ids == {"tech"}
        assert_closed(ctl, store.nodes)

    def test_collapse_keeps_history(self, ctl):
        ctl.expand("tech")
        ctl.collapse("tech")
        assert ctl.history == ("tech",)
        assert not ctl.collapse("tech")

    def test_single_branch_open(self, ctl, store):
        ctl.expand("tech")
        ctl.expand("software")
        ctl.expand("data")
        assert ctl.expanded_ids == {"tech", "data"}
        assert "web" not in ctl.visible_ids
        assert "science" in ctl.visible_ids
        assert_closed(ctl, store.nodes)

    def test_roots_are_siblings(self, ctl, store):
        ctl.expand("tech")
        ctl.expand("biz")
        assert ctl.expanded_ids == {"biz"}
        assert ctl.visible_ids == {"tech", "biz", "consulting"}
        assert_closed(ctl, store.nodes)

    def test_collapse_all_clears_history(self, ctl):
        ctl.expand("tech")
        ctl.collapse_all()
        assert ctl.history == ()


class TestBack:
    def test_empty_history(self, ctl):
        assert ctl.back() is None

    def test_back_inverts_expand(self, ctl):
        ctl.expand("tech")
        ctl.expand("software")
        ctl.expand("web")
        ctl.expand("frontend")
        before = (ctl.visible_ids, ctl.expanded_ids)

        ctl.expand("data")
        assert ctl.back() == "data"
        assert (ctl.visible_ids, ctl.expanded_ids) == before

    @pytest.mark.parametrize("sequence", [
        ["tech"],
        ["tech", "software"],
        ["tech", "software", "data"],
        ["tech", "biz", "consulting"],
        ["biz", "tech", "data", "software", "web"],
    ])
    def test_back_inverts_every_step(self, ctl, store, sequence):
        states = []
        for node_id in sequence:
            states.append((ctl.visible_ids, ctl.expanded_ids))
            ctl.expand(node_id)
            assert_closed(ctl, store.nodes)
        for state in reversed(states):
            if not ctl.can_go_back:
                break
            ctl.back()
            assert_closed(ctl, store.nodes)
        assert (ctl.visible_ids, ctl.expanded_ids) == states[0]

    def test_back_after_manual_collapse(self, ctl):
        ctl.expand("tech")
        ctl.collapse("tech")
        assert ctl.back() == "tech"
        assert ctl.visible_ids == {"tech", "biz"}


class TestClick:
    def test_leaf_click_selects(self, store):
        on_select = MagicMock()
        ctl = DisclosureController(store.nodes, on_select=on_select)
        assert ctl.click("fe-dev") == DisclosureAction.SELECTED
        on_select.assert_called_once_with(store.get_node("fe-dev"))
        assert ctl.expanded_ids == frozenset()

    def test_click_toggles(self, ctl):
        assert ctl.click("tech") == DisclosureAction.EXPANDED
        assert ctl.click("tech") == DisclosureAction.COLLAPSED
        assert ctl.visible_ids == {"tech", "biz"}

    def test_click_without_children(self, ctl):
        ctl.expand("biz")
        assert ctl.click("consulting") == DisclosureAction.NONE
        assert ctl.click("missing") == DisclosureAction.NONE

    def test_select_without_callback(self, ctl, store):
        assert ctl.select("ui-dev") == store.get_node("ui-dev")


class TestSnapshot:
    def test_roundtrip(self, ctl):
        ctl.expand("tech")
        ctl.expand("software")
        snap = ctl.snapshot()
        ctl.collapse_all()
        ctl.restore(snap)
        assert ctl.visible_ids == snap.visible
        assert ctl.expanded_ids == snap.expanded
        assert ctl.history == ("tech", "software")

    def test_restore_onto_smaller_taxonomy(self, ctl, store):
        ctl.expand("tech")
        ctl.expand("software")
        snap = ctl.snapshot()

        pruned = {k: v for k, v in store.nodes.items() if k not in ("web", "frontend", "fe-dev", "ui-dev")}
        smaller = DisclosureController(pruned)
        smaller.restore(snap)
        assert smaller.visible_ids == {"tech", "biz", "software", "data"}
        assert smaller.expanded_ids == {"tech"}
        assert_closed(smaller, pruned)


class TestRenderingHelpers:
    def test_visible_nodes_and_links(self, store):
        positioned = generate_radial_layout(store)
        ctl = DisclosureController({n.id: n for n in positioned})
        ctl.expand("tech")

        assert [n.id for n in ctl.visible_nodes(positioned)] == ["tech", "biz", "software", "data"]
        links = ctl.visible_links(build_links(positioned))
        assert {(l.source, l.target) for l in links} == {("tech", "software"), ("tech", "data")}

    def test_tree_queries(self, ctl):
        assert ctl.children("tech") == ["software", "data"]
        assert ctl.siblings("software") == ["data"]
        assert ctl.siblings("tech") == ["biz"]
        assert ctl.descendants("web") == {"frontend", "fe-dev", "ui-dev"}
