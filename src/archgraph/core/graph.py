"""
Architecture graph backed by rustworkx.

It manages:
- The bimap between string node ids and rustworkx integer indices.
- Validation at ingestion: edges with a dangling endpoint are rejected
  and reported, the rest of the graph still loads.
- O(1) category lookup per node id.

Node and edge input order is preserved; layout depends on it.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Set, Tuple

import rustworkx as rx

from .types import Category, GraphEdge, GraphNode, RawGraph

logger = logging.getLogger(__name__)


@dataclass
class RejectedEdge:
    """An edge dropped at ingestion and the reason it was dropped."""
    edge: GraphEdge
    reason: str


@dataclass
class IngestReport:
    """
    Outcome of loading a raw graph.

    Attributes:
        accepted_nodes: Number of nodes added.
        accepted_edges: Number of edges added.
        rejected_edges: Edges referencing unknown node ids.
        duplicate_node_ids: Ids seen more than once; the first occurrence wins.
    """
    accepted_nodes: int = 0
    accepted_edges: int = 0
    rejected_edges: List[RejectedEdge] = field(default_factory=list)
    duplicate_node_ids: List[str] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not self.rejected_edges and not self.duplicate_node_ids


class ArchitectureGraph:
    """
    Directed component graph for one analysed subject.

    Built once per load and treated as read-only afterwards; a refreshed
    subject gets a brand new instance.
    """

    def __init__(self):
        self._graph = rx.PyDiGraph(multigraph=True)
        self._id_to_idx: Dict[str, int] = {}
        self._idx_to_id: Dict[int, str] = {}
        self._edges: List[GraphEdge] = []

    @classmethod
    def ingest(
        cls,
        nodes: Iterable[GraphNode],
        edges: Iterable[GraphEdge],
    ) -> Tuple["ArchitectureGraph", IngestReport]:
        """
        Build a graph from raw node and edge lists.

        Edges whose source or target is not a known node id are rejected
        and listed in the report. One bad edge never blanks the whole graph.
        """
        graph = cls()
        report = IngestReport()

        for node in nodes:
            if graph.has_node(node.id):
                report.duplicate_node_ids.append(node.id)
                logger.warning(f"Duplicate node id ignored: {node.id}")
                continue
            graph._add_node(node)
            report.accepted_nodes += 1

        for edge in edges:
            missing = [
                endpoint for endpoint in (edge.source, edge.target)
                if not graph.has_node(endpoint)
            ]
            if missing:
                reason = f"unknown node id(s): {', '.join(m or '<missing>' for m in missing)}"
                report.rejected_edges.append(RejectedEdge(edge=edge, reason=reason))
                logger.warning(f"Rejected edge {edge.source} -> {edge.target}: {reason}")
                continue
            graph._add_edge(edge)
            report.accepted_edges += 1

        return graph, report

    @classmethod
    def from_raw(cls, raw: RawGraph) -> Tuple["ArchitectureGraph", IngestReport]:
        return cls.ingest(raw.nodes, raw.edges)

    @classmethod
    def empty(cls) -> "ArchitectureGraph":
        return cls()

    def _add_node(self, node: GraphNode) -> None:
        idx = self._graph.add_node(node)
        self._id_to_idx[node.id] = idx
        self._idx_to_id[idx] = node.id

    def _add_edge(self, edge: GraphEdge) -> None:
        u_idx = self._id_to_idx[edge.source]
        v_idx = self._id_to_idx[edge.target]
        self._graph.add_edge(u_idx, v_idx, edge)
        self._edges.append(edge)

    def get_node(self, node_id: str) -> Optional[GraphNode]:
        """Retrieve a node by id."""
        idx = self._id_to_idx.get(node_id)
        if idx is None:
            return None
        return self._graph[idx]

    def has_node(self, node_id: Optional[str]) -> bool:
        return node_id is not None and node_id in self._id_to_idx

    def category_of(self, node_id: str) -> Category:
        """Category of a node; unknown ids resolve to OTHER."""
        node = self.get_node(node_id)
        return node.category if node else Category.OTHER

    def iter_nodes(self) -> Iterator[GraphNode]:
        """Iterate over nodes in input order."""
        for idx in self._graph.node_indices():
            yield self._graph[idx]

    def iter_edges(self) -> Iterator[GraphEdge]:
        """Iterate over accepted edges in input order."""
        return iter(self._edges)

    @property
    def nodes(self) -> List[GraphNode]:
        return list(self.iter_nodes())

    @property
    def edges(self) -> List[GraphEdge]:
        return list(self._edges)

    def neighbors(self, node_id: str) -> Set[str]:
        """Ids one edge away from ``node_id`` in either direction."""
        idx = self._id_to_idx.get(node_id)
        if idx is None:
            return set()
        indices = set(self._graph.successor_indices(idx))
        indices.update(self._graph.predecessor_indices(idx))
        indices.discard(idx)
        return {self._idx_to_id[i] for i in indices}

    @property
    def node_count(self) -> int:
        return self._graph.num_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.num_edges()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the wire shape of the analysis endpoint."""
        return {
            "nodes": [n.model_dump(by_alias=True, mode="json") for n in self.iter_nodes()],
            "edges": [e.model_dump(mode="json") for e in self._edges],
            "stats": {
                "node_count": self.node_count,
                "edge_count": self.edge_count,
            },
        }

    def __repr__(self) -> str:
        return f"ArchitectureGraph(nodes={self.node_count}, edges={self.edge_count})"
