"""Unit tests for selection highlighting."""

from archgraph.core.graph import ArchitectureGraph
from archgraph.core.types import Category, GraphEdge, GraphNode
from archgraph.graph.highlight import highlight, toggle_selection
from archgraph.graph.theme import DIMMED_EDGE, EMPHASIZED_EDGE, NEUTRAL_EDGE


def build(chain_graph, *extra_nodes):
    nodes = list(chain_graph.nodes) + list(extra_nodes)
    graph, _ = ArchitectureGraph.ingest(nodes, chain_graph.edges)
    return graph


class TestHighlight:
    def test_no_selection_is_neutral(self, chain_graph):
        render = highlight(build(chain_graph), None)

        assert render.selected_id is None
        assert render.emphasized_nodes == frozenset()
        assert render.dimmed_nodes == frozenset()
        assert all(e.style == NEUTRAL_EDGE for e in render.edges)
        assert all(n.style.opacity == 1.0 for n in render.nodes)

    def test_middle_node_emphasizes_both_neighbours(self, chain_graph):
        entity = GraphNode(id="e1", label="Order", category=Category.ENTITY)
        render = highlight(build(chain_graph, entity), "s1")

        assert render.selected_id == "s1"
        assert render.emphasized_nodes == {"c1", "s1", "r1"}
        assert render.dimmed_nodes == {"e1"}
        assert render.emphasized_edges == {"e0", "e1"}

    def test_end_node_dims_far_edge(self, chain_graph):
        render = highlight(build(chain_graph), "c1")

        assert render.emphasized_nodes == {"c1", "s1"}
        assert render.dimmed_nodes == {"r1"}
        edges = {e.edge_id: e for e in render.edges}
        assert edges["e0"].style == EMPHASIZED_EDGE
        assert edges["e1"].style == DIMMED_EDGE
        assert edges["e1"].dimmed

    def test_missing_selection_behaves_as_none(self, chain_graph):
        graph = build(chain_graph)
        assert highlight(graph, "ghost") == highlight(graph, None)

    def test_emphasized_and_dimmed_partition_nodes(self, chain_graph):
        render = highlight(build(chain_graph), "r1")
        all_ids = {n.node_id for n in render.nodes}
        assert render.emphasized_nodes | render.dimmed_nodes == all_ids
        assert not render.emphasized_nodes & render.dimmed_nodes

    def test_isolated_node_emphasizes_only_itself(self):
        graph, _ = ArchitectureGraph.ingest(
            [GraphNode(id="a", category=Category.CONFIG), GraphNode(id="b")],
            [],
        )
        render = highlight(graph, "a")
        assert render.emphasized_nodes == {"a"}
        assert render.dimmed_nodes == {"b"}

    def test_self_loop(self):
        graph, _ = ArchitectureGraph.ingest(
            [GraphNode(id="a"), GraphNode(id="b")],
            [GraphEdge(source="a", target="a", relation="recurses")],
        )
        render = highlight(graph, "a")
        assert render.emphasized_nodes == {"a"}
        assert render.emphasized_edges == {"e0"}

    def test_dimmed_node_style(self, chain_graph):
        render = highlight(build(chain_graph), "c1")
        style = render.node("r1").style
        assert style.opacity == 0.4
        assert style.background == "#f8fafc"
        assert not style.shadow

    def test_edges_carry_arrow_marker(self, chain_graph):
        render = highlight(build(chain_graph), None)
        assert {e.marker for e in render.edges} == {"arrowclosed"}

    def test_empty_graph(self):
        render = highlight(ArchitectureGraph.empty(), "x")
        assert render.selected_id is None
        assert render.nodes == ()


class TestToggleSelection:
    def test_select(self):
        assert toggle_selection(None, "a") == "a"

    def test_replace(self):
        assert toggle_selection("a", "b") == "b"

    def test_same_node_clears(self):
        assert toggle_selection("a", "a") is None

    def test_pane_click_clears(self):
        assert toggle_selection("a", None) is None
