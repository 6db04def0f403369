"""Shared fixtures for archgraph tests."""

from typing import Dict, List

import pytest

from archgraph.core.exceptions import RecordStoreError
from archgraph.core.types import Category, GraphEdge, GraphNode, RawGraph
from archgraph.flows.document import FlowDocument
from archgraph.store.base import RecordStore


class FakeStore(RecordStore):
    """In-memory record store with switchable failures."""

    def __init__(self, graphs: Dict[str, RawGraph] = None):
        self.graphs = dict(graphs or {})
        self.flows: Dict[int, FlowDocument] = {}
        self.fail_fetch = False
        self.fail_save = False
        self.fail_delete = False
        self.saved: List[FlowDocument] = []
        self._next_id = 1

    def fetch_graph(self, subject_name):
        if self.fail_fetch:
            raise RecordStoreError("connection refused")
        return self.graphs.get(subject_name, RawGraph())

    def list_flows(self, subject_name):
        if self.fail_fetch:
            raise RecordStoreError("connection refused")
        return [f for f in self.flows.values() if f.subject_name == subject_name]

    def save_flow(self, document):
        if self.fail_save:
            raise RecordStoreError("server error", status=500)
        self.saved.append(document)
        if document.id is None:
            document = document.model_copy(update={"id": self._next_id})
            self._next_id += 1
        self.flows[document.id] = document
        return document

    def delete_flow(self, flow_id):
        if self.fail_delete:
            raise RecordStoreError("server error", status=500)
        self.flows.pop(flow_id, None)


@pytest.fixture
def chain_graph() -> RawGraph:
    """Controller -> Service -> Repository."""
    return RawGraph(
        nodes=[
            GraphNode(id="c1", label="OrderController", category=Category.CONTROLLER),
            GraphNode(id="s1", label="OrderService", category=Category.SERVICE),
            GraphNode(id="r1", label="OrderRepository", category=Category.REPOSITORY),
        ],
        edges=[
            GraphEdge(source="c1", target="s1", relation="calls"),
            GraphEdge(source="s1", target="r1", relation="uses"),
        ],
    )


@pytest.fixture
def fake_store(chain_graph) -> FakeStore:
    return FakeStore({"shop": chain_graph})
