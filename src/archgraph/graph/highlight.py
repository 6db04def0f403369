"""
Selection Highlight Engine.

Derives per-render styling from a graph and an optional selected node id.
With nothing selected every node and edge renders at normal style. With a
node selected, the node itself and everything one edge hop away is
emphasized, edges touching it are emphasized, and the rest is dimmed.

The selection is always an explicit argument; the engine holds no state.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Set, Tuple

from ..core.graph import ArchitectureGraph
from ..core.types import Category
from .theme import DIMMED_EDGE, EMPHASIZED_EDGE, NEUTRAL_EDGE, EdgeStyle, NodeStyle, node_style


@dataclass(frozen=True)
class NodeRender:
    node_id: str
    category: Category
    emphasized: bool
    dimmed: bool
    style: NodeStyle


@dataclass(frozen=True)
class EdgeRender:
    edge_id: str
    source: str
    target: str
    relation: str
    emphasized: bool
    dimmed: bool
    style: EdgeStyle
    marker: str = "arrowclosed"


@dataclass(frozen=True)
class RenderState:
    """
    Ephemeral styling for one frame. Never persisted.

    ``selected_id`` is None whenever the requested selection did not
    resolve to a node of the graph.
    """
    selected_id: Optional[str]
    nodes: Tuple[NodeRender, ...]
    edges: Tuple[EdgeRender, ...]

    @property
    def emphasized_nodes(self) -> FrozenSet[str]:
        return frozenset(n.node_id for n in self.nodes if n.emphasized)

    @property
    def emphasized_edges(self) -> FrozenSet[str]:
        return frozenset(e.edge_id for e in self.edges if e.emphasized)

    @property
    def dimmed_nodes(self) -> FrozenSet[str]:
        return frozenset(n.node_id for n in self.nodes if n.dimmed)

    def node(self, node_id: str) -> Optional[NodeRender]:
        for render in self.nodes:
            if render.node_id == node_id:
                return render
        return None

    def by_node_id(self) -> Dict[str, NodeRender]:
        return {render.node_id: render for render in self.nodes}


EMPTY_RENDER = RenderState(selected_id=None, nodes=(), edges=())


def edge_id(index: int) -> str:
    return f"e{index}"


def connected_set(graph: ArchitectureGraph, selected_id: str) -> Set[str]:
    """The selected id plus every node sharing an edge with it. One pass over edges."""
    connected = {selected_id}
    for edge in graph.iter_edges():
        if edge.touches(selected_id):
            connected.add(edge.source)
            connected.add(edge.target)
    return connected


def highlight(graph: ArchitectureGraph, selected_id: Optional[str]) -> RenderState:
    """
    Compute the render state for a graph under a selection.

    A selection that does not name a node of ``graph`` behaves as None.
    """
    if not graph.has_node(selected_id):
        return _neutral(graph)

    connected = connected_set(graph, selected_id)

    nodes = tuple(
        NodeRender(
            node_id=node.id,
            category=node.category,
            emphasized=node.id in connected,
            dimmed=node.id not in connected,
            style=node_style(node.category, dimmed=node.id not in connected),
        )
        for node in graph.iter_nodes()
    )

    edges = []
    for index, edge in enumerate(graph.iter_edges()):
        touching = edge.touches(selected_id)
        edges.append(EdgeRender(
            edge_id=edge_id(index),
            source=edge.source,
            target=edge.target,
            relation=edge.relation,
            emphasized=touching,
            dimmed=not touching,
            style=EMPHASIZED_EDGE if touching else DIMMED_EDGE,
        ))

    return RenderState(selected_id=selected_id, nodes=nodes, edges=tuple(edges))


def _neutral(graph: ArchitectureGraph) -> RenderState:
    nodes = tuple(
        NodeRender(
            node_id=node.id,
            category=node.category,
            emphasized=False,
            dimmed=False,
            style=node_style(node.category, dimmed=False),
        )
        for node in graph.iter_nodes()
    )
    edges = tuple(
        EdgeRender(
            edge_id=edge_id(index),
            source=edge.source,
            target=edge.target,
            relation=edge.relation,
            emphasized=False,
            dimmed=False,
            style=NEUTRAL_EDGE,
        )
        for index, edge in enumerate(graph.iter_edges())
    )
    return RenderState(selected_id=None, nodes=nodes, edges=edges)


def toggle_selection(current: Optional[str], clicked: Optional[str]) -> Optional[str]:
    """
    Next selection after a click.

    Clicking the selected node clears it, clicking another node replaces
    it, clicking empty canvas (``clicked`` is None) clears it.
    """
    if clicked is None or clicked == current:
        return None
    return clicked
