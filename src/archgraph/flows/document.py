"""
Flow documents: hand-authored graphs with manual positions.

A flow graph is not the analysed architecture graph. Its nodes carry
free-text labels and positions placed by the user, and their ids are
minted locally from the node kind and creation time.

Every model here is frozen; mutating operations return a new FlowGraph.
The serialized form is JSON and round-trips without loss.
"""

import json
import logging
from enum import StrEnum
from typing import Any, List, Optional, Set, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ..core.exceptions import FlowDecodeError
from ..core.types import Category

logger = logging.getLogger(__name__)

DEFAULT_RELATION = "calls"
ARROW_MARKER = "arrowclosed"
DEFAULT_FLOW_NAME = "New Flow"


class FlowNodeKind(StrEnum):
    """Palette item kinds: every component category plus free-form notes."""
    CONTROLLER = "CONTROLLER"
    SERVICE = "SERVICE"
    REPOSITORY = "REPOSITORY"
    ENTITY = "ENTITY"
    CONFIG = "CONFIG"
    OTHER = "OTHER"
    NOTE = "NOTE"

    @classmethod
    def parse(cls, raw: Any) -> "FlowNodeKind":
        if isinstance(raw, FlowNodeKind):
            return raw
        if isinstance(raw, str):
            try:
                return cls(raw.strip().upper())
            except ValueError:
                pass
        return cls.OTHER

    @classmethod
    def from_category(cls, category: Category) -> "FlowNodeKind":
        return cls(category.value)


class FlowPoint(BaseModel):
    x: float = 0.0
    y: float = 0.0

    model_config = ConfigDict(frozen=True)


class FlowViewport(BaseModel):
    x: float = 0.0
    y: float = 0.0
    zoom: float = Field(default=1.0, gt=0)

    model_config = ConfigDict(frozen=True)


class FlowNode(BaseModel):
    id: str
    kind: FlowNodeKind = FlowNodeKind.OTHER
    label: str = ""
    position: FlowPoint = Field(default_factory=FlowPoint)

    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _accept_canvas_shape(cls, data: Any) -> Any:
        # Canvas exports keep the label under data.label
        if isinstance(data, dict) and "label" not in data:
            inner = data.get("data")
            if isinstance(inner, dict) and "label" in inner:
                data = {**data, "label": inner["label"]}
        if isinstance(data, dict) and "kind" in data:
            data = {**data, "kind": FlowNodeKind.parse(data["kind"])}
        return data


class FlowEdge(BaseModel):
    id: str
    source: str
    target: str
    relation: str = DEFAULT_RELATION
    marker: str = ARROW_MARKER

    model_config = ConfigDict(frozen=True, extra="ignore")

    @staticmethod
    def make_id(source: str, target: str) -> str:
        return f"e-{source}-{target}"


class FlowGraph(BaseModel):
    nodes: Tuple[FlowNode, ...] = ()
    edges: Tuple[FlowEdge, ...] = ()
    viewport: FlowViewport = Field(default_factory=FlowViewport)

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def get_node(self, node_id: str) -> Optional[FlowNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def has_node(self, node_id: str) -> bool:
        return self.get_node(node_id) is not None

    def has_connection(self, source: str, target: str) -> bool:
        return any(e.source == source and e.target == target for e in self.edges)

    def mint_node_id(self, kind: FlowNodeKind, millis: int) -> str:
        """``KIND-millis``, suffixed when two nodes share a timestamp."""
        base = f"{kind.value}-{millis}"
        candidate = base
        suffix = 2
        while self.has_node(candidate):
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    def with_node(self, node: FlowNode) -> "FlowGraph":
        if self.has_node(node.id):
            raise ValueError(f"Duplicate flow node id: {node.id}")
        return self.model_copy(update={"nodes": self.nodes + (node,)})

    def move_node(self, node_id: str, position: FlowPoint) -> "FlowGraph":
        nodes = tuple(
            n.model_copy(update={"position": position}) if n.id == node_id else n
            for n in self.nodes
        )
        return self.model_copy(update={"nodes": nodes})

    def connect(
        self, source: str, target: str, relation: str = DEFAULT_RELATION
    ) -> Tuple["FlowGraph", Optional[FlowEdge]]:
        """
        Add a directed edge.

        Refused (returns the graph unchanged and None) for unknown
        endpoints, a self-connection, or an already existing connection.
        """
        if source == target or not self.has_node(source) or not self.has_node(target):
            return self, None
        if self.has_connection(source, target):
            return self, None
        edge = FlowEdge(id=self._mint_edge_id(source, target), source=source,
                        target=target, relation=relation)
        return self.model_copy(update={"edges": self.edges + (edge,)}), edge

    def _mint_edge_id(self, source: str, target: str) -> str:
        # Hyphenated node ids can give two pairs the same base id
        base = FlowEdge.make_id(source, target)
        taken = {e.id for e in self.edges}
        candidate = base
        suffix = 2
        while candidate in taken:
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    def remove_node(self, node_id: str) -> "FlowGraph":
        """Drop a node together with its incident edges."""
        return self.model_copy(update={
            "nodes": tuple(n for n in self.nodes if n.id != node_id),
            "edges": tuple(e for e in self.edges if node_id not in (e.source, e.target)),
        })

    def remove_edge(self, edge_id: str) -> "FlowGraph":
        return self.model_copy(update={"edges": tuple(e for e in self.edges if e.id != edge_id)})

    def with_viewport(self, viewport: FlowViewport) -> "FlowGraph":
        return self.model_copy(update={"viewport": viewport})


def encode_graph(graph: FlowGraph) -> str:
    """Serialize nodes, edges and viewport to the stored JSON string."""
    return graph.model_dump_json()


def decode_graph(serialized: Optional[str]) -> FlowGraph:
    """
    Decode a stored flow graph.

    Empty input decodes to an empty graph. Repeated node or edge ids keep
    their first occurrence, and edges referencing unknown nodes are
    dropped, each with a warning.

    Raises:
        FlowDecodeError: If the payload is not a valid flow graph.
    """
    if serialized is None or not serialized.strip():
        return FlowGraph()

    try:
        payload = json.loads(serialized)
    except json.JSONDecodeError as e:
        raise FlowDecodeError(f"Flow graph is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise FlowDecodeError("Flow graph must be a JSON object")

    try:
        graph = FlowGraph.model_validate(payload)
    except ValidationError as e:
        raise FlowDecodeError(f"Malformed flow graph: {e.error_count()} error(s)") from e

    node_ids: Set[str] = set()
    nodes: List[FlowNode] = []
    for node in graph.nodes:
        if node.id in node_ids:
            logger.warning(f"Dropping duplicate flow node {node.id}")
            continue
        node_ids.add(node.id)
        nodes.append(node)

    edge_ids: Set[str] = set()
    edges: List[FlowEdge] = []
    for edge in graph.edges:
        if edge.source not in node_ids or edge.target not in node_ids:
            logger.warning(f"Dropping flow edge {edge.id}: dangling endpoint")
        elif edge.id in edge_ids:
            logger.warning(f"Dropping duplicate flow edge {edge.id}")
        else:
            edge_ids.add(edge.id)
            edges.append(edge)

    if len(nodes) != len(graph.nodes) or len(edges) != len(graph.edges):
        graph = graph.model_copy(update={"nodes": tuple(nodes), "edges": tuple(edges)})
    return graph


class FlowDocument(BaseModel):
    """
    A named, persisted flow for one analysed subject.

    On the wire the subject travels as ``projectName`` and the encoded
    graph as ``flowData``.
    """
    id: Optional[Union[int, str]] = None
    name: str = DEFAULT_FLOW_NAME
    description: str = ""
    subject_name: str = Field(alias="projectName")
    serialized_graph: str = Field(default="", alias="flowData")

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @property
    def is_saved(self) -> bool:
        return self.id is not None

    def graph(self) -> FlowGraph:
        return decode_graph(self.serialized_graph)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
