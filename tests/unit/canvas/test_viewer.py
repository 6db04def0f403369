"""Unit tests for the read-only viewer reducer and controller."""

from unittest.mock import MagicMock

import pytest

from archgraph.canvas.viewer import (
    GraphLoaded,
    GraphLoadFailed,
    GraphRequested,
    NodeClicked,
    PaneClicked,
    ViewerController,
    ViewerState,
    apply_event,
)
from archgraph.canvas.viewport import Point, Viewport
from archgraph.core.exceptions import RecordStoreError
from archgraph.core.result import Err, Ok
from archgraph.core.types import Category, GraphNode, RawGraph


class TestApplyEvent:
    def test_load_lays_out_and_clears_selection(self, chain_graph):
        state = apply_event(ViewerState(), GraphRequested("shop"))
        assert state.loading

        state = apply_event(state, GraphLoaded("shop", chain_graph))
        assert not state.loading
        assert state.graph.node_count == 3
        assert len(state.layout.nodes) == 3
        assert state.selected_id is None
        assert state.render.selected_id is None

    def test_stale_response_discarded(self, chain_graph):
        state = apply_event(ViewerState(), GraphRequested("a"))
        state = apply_event(state, GraphRequested("b"))

        after = apply_event(state, GraphLoaded("a", chain_graph))
        assert after is state
        assert after.graph.node_count == 0

    def test_failure_shows_empty_state(self):
        state = apply_event(ViewerState(), GraphRequested("shop"))
        state = apply_event(state, GraphLoadFailed("shop", "connection refused"))

        assert state.is_empty
        assert state.load_error == "connection refused"
        assert not state.loading

    def test_switching_subject_drops_old_graph(self, chain_graph):
        state = apply_event(ViewerState(), GraphRequested("shop"))
        state = apply_event(state, GraphLoaded("shop", chain_graph))
        state = apply_event(state, GraphRequested("billing"))

        assert state.subject == "billing"
        assert state.graph.node_count == 0

    def test_reset_keeps_graph_until_reload(self, chain_graph):
        state = apply_event(ViewerState(), GraphRequested("shop"))
        state = apply_event(state, GraphLoaded("shop", chain_graph))
        state = apply_event(state, NodeClicked("s1"))
        state = apply_event(state, GraphRequested("shop"))

        assert state.graph.node_count == 3
        assert state.selected_id is None

    def test_click_toggles(self, chain_graph):
        state = apply_event(ViewerState(), GraphRequested("shop"))
        state = apply_event(state, GraphLoaded("shop", chain_graph))

        state = apply_event(state, NodeClicked("c1"))
        assert state.selected_id == "c1"
        assert state.render.emphasized_nodes == {"c1", "s1"}

        state = apply_event(state, NodeClicked("c1"))
        assert state.selected_id is None
        assert state.render.dimmed_nodes == frozenset()

    def test_click_unknown_node_ignored(self, chain_graph):
        state = apply_event(ViewerState(), GraphRequested("shop"))
        state = apply_event(state, GraphLoaded("shop", chain_graph))
        assert apply_event(state, NodeClicked("ghost")) is state

    def test_pane_click_clears(self, chain_graph):
        state = apply_event(ViewerState(), GraphRequested("shop"))
        state = apply_event(state, GraphLoaded("shop", chain_graph))
        state = apply_event(state, NodeClicked("r1"))

        state = apply_event(state, PaneClicked())
        assert state.selected_id is None

    def test_unknown_event(self):
        with pytest.raises(TypeError):
            apply_event(ViewerState(), object())


class TestViewerController:
    def test_show(self, fake_store):
        controller = ViewerController(fake_store)
        state = controller.show("shop")

        assert state.subject == "shop"
        assert state.graph.node_count == 3

    def test_show_unknown_subject_is_empty(self, fake_store):
        state = ViewerController(fake_store).show("nothing")
        assert state.is_empty
        assert state.load_error is None

    def test_fetch_error_is_reported(self, fake_store):
        fake_store.fail_fetch = True
        controller = ViewerController(fake_store)

        assert isinstance(controller.fetch("shop"), Err)
        state = controller.show("shop")
        assert state.is_empty
        assert "connection refused" in state.load_error

    def test_out_of_order_responses(self, fake_store, chain_graph):
        controller = ViewerController(fake_store)
        key_a = controller.begin_load("a")
        key_b = controller.begin_load("b")

        other = RawGraph(nodes=[GraphNode(id="x", category=Category.ENTITY)])
        controller.complete_load(key_b, Ok(other))
        controller.complete_load(key_a, Ok(chain_graph))

        assert controller.state.subject == "b"
        assert [n.id for n in controller.state.graph.nodes] == ["x"]

    def test_selection_listener(self, fake_store):
        listener = MagicMock()
        controller = ViewerController(fake_store)
        controller.on_selection_changed(listener)
        controller.show("shop")

        controller.click_node("s1")
        controller.click_node("s1")
        controller.click_pane()

        assert [c.args[0] for c in listener.call_args_list] == ["s1", None]

    def test_reset_refetches_and_restores_viewport(self, fake_store):
        controller = ViewerController(fake_store)
        controller.show("shop")
        controller.click_node("c1")
        controller.pan(30, 40)
        controller.zoom(1.5, Point(10, 10))

        state = controller.reset()
        assert state.viewport == Viewport()
        assert state.selected_id is None
        assert state.graph.node_count == 3

    def test_reset_without_subject(self, fake_store):
        controller = ViewerController(fake_store)
        assert controller.reset() is controller.state

    def test_store_error_type(self, fake_store):
        fake_store.fail_fetch = True
        result = ViewerController(fake_store).fetch("shop")
        assert isinstance(result.error, RecordStoreError)
