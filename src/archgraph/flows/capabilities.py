"""
Capabilities handed out by the flow document manager.

A ``ReadOnlyFlow`` exposes the open document and selection only. An
``EditableFlow`` additionally exposes mutation. The manager issues exactly
one of them depending on its state, so code holding a read-only capability
has no mutation methods to call.

Each capability is bound to the manager state it was issued for. Once the
manager transitions, the capability goes inert: reads still answer from
the manager, mutations become no-ops.
"""

import logging
from typing import TYPE_CHECKING, Optional

from .document import (
    DEFAULT_RELATION,
    FlowDocument,
    FlowEdge,
    FlowGraph,
    FlowNode,
    FlowNodeKind,
    FlowPoint,
    FlowViewport,
)

if TYPE_CHECKING:
    from .manager import FlowDocumentManager

logger = logging.getLogger(__name__)


class ReadOnlyFlow:
    """View of the open flow: graph snapshot, metadata and selection."""

    def __init__(self, manager: "FlowDocumentManager", epoch: int):
        self._manager = manager
        self._epoch = epoch

    @property
    def is_live(self) -> bool:
        """True while the manager is still in the state this was issued for."""
        return self._manager.epoch == self._epoch

    @property
    def editable(self) -> bool:
        return False

    @property
    def graph(self) -> FlowGraph:
        return self._manager.graph

    @property
    def document(self) -> Optional[FlowDocument]:
        return self._manager.document

    @property
    def selected_id(self) -> Optional[str]:
        return self._manager.selected_id

    def select(self, node_id: Optional[str]) -> Optional[str]:
        """Toggle selection of ``node_id``; None clears. Returns the new selection."""
        if not self.is_live:
            return self._manager.selected_id
        return self._manager._select(node_id)


class EditableFlow(ReadOnlyFlow):
    """Mutating view of a flow in the editing state."""

    @property
    def editable(self) -> bool:
        return self.is_live

    def add_node(self, kind: FlowNodeKind, label: str, position: FlowPoint) -> Optional[FlowNode]:
        """Create a node with a locally minted id at a canvas position."""
        if not self.is_live:
            return None
        graph = self._manager.graph
        node = FlowNode(
            id=graph.mint_node_id(kind, self._manager.now_millis()),
            kind=kind,
            label=label,
            position=position,
        )
        self._commit(graph.with_node(node))
        return node

    def move_node(self, node_id: str, position: FlowPoint) -> bool:
        """Update one node's manual position."""
        graph = self._manager.graph
        if not self.is_live or not graph.has_node(node_id):
            return False
        return self._commit(graph.move_node(node_id, position))

    def connect(self, source: str, target: str, relation: str = DEFAULT_RELATION) -> Optional[FlowEdge]:
        if not self.is_live:
            return None
        graph, edge = self._manager.graph.connect(source, target, relation)
        if edge is None:
            logger.debug(f"Connection {source} -> {target} refused")
            return None
        self._commit(graph)
        return edge

    def remove_node(self, node_id: str) -> bool:
        graph = self._manager.graph
        if not self.is_live or not graph.has_node(node_id):
            return False
        if self._manager.selected_id == node_id:
            self._manager._select(None)
        return self._commit(graph.remove_node(node_id))

    def remove_edge(self, edge_id: str) -> bool:
        graph = self._manager.graph
        if not self.is_live or not any(e.id == edge_id for e in graph.edges):
            return False
        return self._commit(graph.remove_edge(edge_id))

    def set_viewport(self, viewport: FlowViewport) -> bool:
        if not self.is_live:
            return False
        return self._commit(self._manager.graph.with_viewport(viewport))

    def rename(self, name: Optional[str] = None, description: Optional[str] = None) -> bool:
        if not self.is_live:
            return False
        return self._manager._update_metadata(self._epoch, name=name, description=description)

    def _commit(self, graph: FlowGraph) -> bool:
        return self._manager._replace_graph(self._epoch, graph)
