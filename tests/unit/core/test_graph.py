"""Unit tests for graph ingestion and the category vocabulary."""

import pytest

from archgraph.core.graph import ArchitectureGraph
from archgraph.core.types import Category, GraphEdge, GraphNode, RawGraph


class TestCategory:
    def test_parse_is_case_insensitive(self):
        assert Category.parse("service") == Category.SERVICE
        assert Category.parse(" Controller ") == Category.CONTROLLER

    @pytest.mark.parametrize("raw", ["MIDDLEWARE", "", None, 42])
    def test_unknown_values_fall_back_to_other(self, raw):
        assert Category.parse(raw) == Category.OTHER

    def test_rank_order(self):
        ranks = [c.rank for c in (Category.CONTROLLER, Category.SERVICE, Category.REPOSITORY,
                                  Category.ENTITY, Category.CONFIG, Category.OTHER)]
        assert ranks == [0, 1, 2, 3, 4, 5]

    def test_node_accepts_wire_shape(self):
        node = GraphNode.model_validate({"id": "a", "label": "A", "type": "repository"})
        assert node.category == Category.REPOSITORY

    def test_node_unknown_type_is_other(self):
        node = GraphNode.model_validate({"id": "a", "label": "A", "type": "ASPECT"})
        assert node.category == Category.OTHER


class TestIngest:
    def test_valid_graph_is_clean(self, chain_graph):
        graph, report = ArchitectureGraph.from_raw(chain_graph)

        assert report.is_clean
        assert graph.node_count == 3
        assert graph.edge_count == 2
        assert report.accepted_edges == 2

    def test_dangling_edge_rejected_rest_kept(self, chain_graph):
        raw = RawGraph(
            nodes=chain_graph.nodes,
            edges=chain_graph.edges + [GraphEdge(source="s1", target="ghost", relation="calls")],
        )
        graph, report = ArchitectureGraph.from_raw(raw)

        assert graph.node_count == 3
        assert graph.edge_count == 2
        assert len(report.rejected_edges) == 1
        assert report.rejected_edges[0].edge.target == "ghost"
        assert "ghost" in report.rejected_edges[0].reason

    def test_edge_with_null_endpoint_rejected(self, chain_graph):
        raw = RawGraph.model_validate({
            "nodes": [n.model_dump(by_alias=True) for n in chain_graph.nodes],
            "edges": [{"source": "c1", "target": "s1"}, {"source": None, "target": "r1"}],
        })
        graph, report = ArchitectureGraph.from_raw(raw)

        assert graph.edge_count == 1
        assert report.rejected_edges[0].reason == "unknown node id(s): <missing>"

    def test_duplicate_node_first_wins(self):
        graph, report = ArchitectureGraph.ingest(
            [
                GraphNode(id="x", label="First", category=Category.SERVICE),
                GraphNode(id="x", label="Second", category=Category.ENTITY),
            ],
            [],
        )
        assert graph.node_count == 1
        assert graph.get_node("x").label == "First"
        assert report.duplicate_node_ids == ["x"]

    def test_preserves_input_order(self):
        ids = ["z", "a", "m"]
        graph, _ = ArchitectureGraph.ingest([GraphNode(id=i, label=i) for i in ids], [])
        assert [n.id for n in graph.iter_nodes()] == ids

    def test_category_lookup(self, chain_graph):
        graph, _ = ArchitectureGraph.from_raw(chain_graph)
        assert graph.category_of("r1") == Category.REPOSITORY
        assert graph.category_of("missing") == Category.OTHER

    def test_neighbors_both_directions(self, chain_graph):
        graph, _ = ArchitectureGraph.from_raw(chain_graph)
        assert graph.neighbors("s1") == {"c1", "r1"}
        assert graph.neighbors("c1") == {"s1"}
        assert graph.neighbors("nope") == set()

    def test_has_node_none(self, chain_graph):
        graph, _ = ArchitectureGraph.from_raw(chain_graph)
        assert graph.has_node(None) is False

    def test_to_dict_uses_wire_keys(self, chain_graph):
        graph, _ = ArchitectureGraph.from_raw(chain_graph)
        data = graph.to_dict()
        assert data["nodes"][0] == {"id": "c1", "label": "OrderController", "type": "CONTROLLER"}
        assert data["edges"][0] == {"source": "c1", "target": "s1", "relation": "calls"}
        assert data["stats"] == {"node_count": 3, "edge_count": 2}
