"""
Editable flow builder canvas.

Three gestures mutate a flow: dragging a palette item onto the canvas,
dragging from one node's connector to another node, and dragging a node
to a new position. Every mutation goes through the ``EditableFlow``
capability of the flow document manager; while the document is only
viewable the controller holds no such capability and refuses to start
or complete any of them.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from ..core.graph import ArchitectureGraph
from ..core.types import Category, GraphNode
from ..flows.capabilities import EditableFlow
from ..flows.document import FlowNodeKind, FlowPoint, FlowViewport
from ..flows.manager import FlowDocumentManager
from .gestures import DragGesture, GestureKind, GesturePhase
from .viewport import CanvasBounds, Point, Viewport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaletteItem:
    kind: FlowNodeKind
    label: str
    component_id: Optional[str] = None


STICKY_NOTE = PaletteItem(kind=FlowNodeKind.NOTE, label="Sticky Note")

PALETTE_GROUPS: Tuple[Tuple[Category, str], ...] = (
    (Category.CONTROLLER, "Controllers"),
    (Category.SERVICE, "Services"),
    (Category.REPOSITORY, "Repositories"),
    (Category.ENTITY, "Entities"),
)


class Palette:
    """Draggable items: the note tool plus the subject's analysed components."""

    def __init__(self, components: Iterable[GraphNode] = ()):
        self._components: List[GraphNode] = list(components)

    @classmethod
    def from_graph(cls, graph: ArchitectureGraph) -> "Palette":
        return cls(graph.iter_nodes())

    @property
    def tools(self) -> Tuple[PaletteItem, ...]:
        return (STICKY_NOTE,)

    def search(self, term: str = "") -> List[GraphNode]:
        needle = term.strip().lower()
        return [c for c in self._components if needle in c.label.lower()]

    def groups(self, term: str = "") -> List[Tuple[str, List[PaletteItem]]]:
        """Non-empty component groups matching ``term``, in flow order."""
        matches = self.search(term)
        grouped = []
        for category, title in PALETTE_GROUPS:
            items = [
                PaletteItem(kind=FlowNodeKind.from_category(c.category), label=c.label, component_id=c.id)
                for c in matches if c.category == category
            ]
            if items:
                grouped.append((title, items))
        return grouped


# --- Drop targets ---

@dataclass(frozen=True)
class CanvasDrop:
    """Pointer released over the canvas at client coordinates."""
    client_x: float
    client_y: float


@dataclass(frozen=True)
class ConnectorDrop:
    """Pointer released over a node's connection point."""
    node_id: str


DropTarget = Union[CanvasDrop, ConnectorDrop, None]


class BuilderController:
    """
    Pointer handling for the flow builder.

    Args:
        manager: Owner of the open flow document.
        bounds: Client-space rectangle of the canvas element.
        viewport: Initial viewport; its zoom limits are kept when a
            document viewport is adopted.
    """

    def __init__(
        self,
        manager: FlowDocumentManager,
        bounds: Optional[CanvasBounds] = None,
        viewport: Optional[Viewport] = None,
    ):
        self._manager = manager
        self._bounds = bounds or CanvasBounds()
        self._gesture = DragGesture()
        self._viewport = viewport or Viewport()
        self._synced_epoch = -1
        self.sync_viewport()

    @property
    def viewport(self) -> Viewport:
        if self._manager.epoch != self._synced_epoch:
            self.sync_viewport()
        return self._viewport

    @property
    def gesture(self) -> DragGesture:
        return self._gesture

    @property
    def bounds(self) -> CanvasBounds:
        return self._bounds

    def resize(self, bounds: CanvasBounds) -> None:
        self._bounds = bounds

    def sync_viewport(self) -> None:
        """
        Adopt the viewport stored with the open document.

        Runs again whenever the manager has transitioned since the last sync.
        """
        stored = self._manager.graph.viewport
        self._synced_epoch = self._manager.epoch
        self._viewport = Viewport(
            x=stored.x, y=stored.y, zoom=stored.zoom,
            min_zoom=self._viewport.min_zoom, max_zoom=self._viewport.max_zoom,
        )

    def _editable(self) -> Optional[EditableFlow]:
        capability = self._manager.capability
        if isinstance(capability, EditableFlow):
            return capability
        return None

    def to_canvas(self, client_x: float, client_y: float) -> Point:
        """Client coordinates to untransformed canvas coordinates."""
        return self.viewport.project(self._bounds.to_local(client_x, client_y))

    # --- Gesture starts ---

    def begin_palette_drag(self, item: PaletteItem) -> bool:
        if self._editable() is None:
            logger.debug("Palette drag refused: flow is read-only")
            return False
        return self._gesture.start(GestureKind.PALETTE, item=item)

    def begin_connect(self, source_id: str) -> bool:
        if self._editable() is None or not self._manager.graph.has_node(source_id):
            return False
        return self._gesture.start(GestureKind.CONNECT, source_id=source_id)

    def begin_move(self, node_id: str, client_x: float, client_y: float) -> bool:
        if self._editable() is None:
            return False
        node = self._manager.graph.get_node(node_id)
        if node is None:
            return False
        grab = self.to_canvas(client_x, client_y)
        offset = Point(node.position.x - grab.x, node.position.y - grab.y)
        return self._gesture.start(GestureKind.MOVE, node_id=node_id, offset=offset)

    # --- Gesture ends ---

    def drop(self, target: DropTarget) -> GesturePhase:
        """
        Release the active gesture over ``target``.

        Returns DROPPED when the model changed, CANCELLED otherwise, IDLE
        when no gesture was active.
        """
        if not self._gesture.is_active:
            return GesturePhase.IDLE

        editable = self._editable()
        applied = editable is not None and self._apply(editable, target)
        if applied:
            self._gesture.drop()
        else:
            self._gesture.cancel()
        return self._gesture.finish()

    def cancel(self) -> GesturePhase:
        if not self._gesture.cancel():
            return GesturePhase.IDLE
        return self._gesture.finish()

    def _apply(self, editable: EditableFlow, target: DropTarget) -> bool:
        kind = self._gesture.kind
        payload = self._gesture.payload

        if kind == GestureKind.PALETTE:
            if not self._inside_canvas(target):
                return False
            item: PaletteItem = payload["item"]
            point = self.to_canvas(target.client_x, target.client_y)
            return editable.add_node(item.kind, item.label, FlowPoint(x=point.x, y=point.y)) is not None

        if kind == GestureKind.CONNECT:
            if not isinstance(target, ConnectorDrop):
                return False
            return editable.connect(payload["source_id"], target.node_id) is not None

        if kind == GestureKind.MOVE:
            if not self._inside_canvas(target):
                return False
            point = self.to_canvas(target.client_x, target.client_y)
            offset: Point = payload["offset"]
            position = FlowPoint(x=point.x + offset.x, y=point.y + offset.y)
            return editable.move_node(payload["node_id"], position)

        return False

    def _inside_canvas(self, target: DropTarget) -> bool:
        return isinstance(target, CanvasDrop) and self._bounds.contains(target.client_x, target.client_y)

    # --- Non-gesture input ---

    def select(self, node_id: Optional[str]) -> Optional[str]:
        """Toggle selection; allowed in both viewing and editing."""
        capability = self._manager.capability
        if capability is None:
            return None
        return capability.select(node_id)

    def delete_selection(self) -> bool:
        editable = self._editable()
        if editable is None or editable.selected_id is None:
            return False
        return editable.remove_node(editable.selected_id)

    def pan(self, dx: float, dy: float) -> Viewport:
        return self._set_viewport(self.viewport.pan_by(dx, dy))

    def zoom(self, factor: float, anchor: Point = Point(0.0, 0.0)) -> Viewport:
        return self._set_viewport(self.viewport.zoom_at(factor, anchor))

    def _set_viewport(self, viewport: Viewport) -> Viewport:
        self._viewport = viewport
        editable = self._editable()
        if editable is not None:
            editable.set_viewport(FlowViewport(x=viewport.x, y=viewport.y, zoom=viewport.zoom))
        return viewport

