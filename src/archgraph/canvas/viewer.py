"""
Read-only graph viewer.

Viewer state is rewritten atomically by a single reducer, ``apply_event``.
Graph, layout, selection and render state always change together, so a
highlight is never computed against a half-updated node/edge pair and is
computed exactly once per event.

``ViewerController`` wraps the reducer with the record store. Responses
are keyed by subject name; a response for a subject that is no longer
displayed is discarded.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional, Union

from ..core.exceptions import RecordStoreError
from ..core.graph import ArchitectureGraph, IngestReport
from ..core.result import Err, Ok, Result
from ..core.types import RawGraph
from ..graph.highlight import EMPTY_RENDER, RenderState, highlight, toggle_selection
from ..graph.layout import DEFAULT_LAYOUT, LayoutConfig, LayoutResult, layout_graph
from ..store.base import RecordStore
from .viewport import Point, Viewport

logger = logging.getLogger(__name__)

EMPTY_LAYOUT = LayoutResult(nodes=[], edges=[])


@dataclass(frozen=True)
class ViewerState:
    subject: Optional[str] = None
    graph: ArchitectureGraph = field(default_factory=ArchitectureGraph.empty)
    layout: LayoutResult = EMPTY_LAYOUT
    report: Optional[IngestReport] = None
    selected_id: Optional[str] = None
    render: RenderState = EMPTY_RENDER
    viewport: Viewport = field(default_factory=Viewport)
    loading: bool = False
    load_error: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to draw and the placeholder should show."""
        return self.graph.node_count == 0


# --- Events ---

@dataclass(frozen=True)
class GraphRequested:
    subject: str


@dataclass(frozen=True)
class GraphLoaded:
    subject: str
    raw: RawGraph


@dataclass(frozen=True)
class GraphLoadFailed:
    subject: str
    error: str


@dataclass(frozen=True)
class NodeClicked:
    node_id: str


@dataclass(frozen=True)
class PaneClicked:
    pass


@dataclass(frozen=True)
class ViewportChanged:
    viewport: Viewport


ViewerEvent = Union[GraphRequested, GraphLoaded, GraphLoadFailed, NodeClicked, PaneClicked, ViewportChanged]


def apply_event(
    state: ViewerState,
    event: ViewerEvent,
    layout_config: LayoutConfig = DEFAULT_LAYOUT,
) -> ViewerState:
    """Pure reducer: the next viewer state after ``event``."""
    match event:
        case GraphRequested(subject=subject):
            # Reset discards manual viewport changes and any selection.
            # A different subject also discards the old graph wholesale.
            base = state if subject == state.subject else ViewerState()
            return replace(
                base,
                subject=subject,
                selected_id=None,
                render=highlight(base.graph, None),
                viewport=state.viewport.reset(),
                loading=True,
                load_error=None,
            )

        case GraphLoaded(subject=subject, raw=raw):
            if subject != state.subject:
                logger.debug(f"Discarding stale graph for {subject} (showing {state.subject})")
                return state
            graph, report = ArchitectureGraph.from_raw(raw)
            return replace(
                state,
                graph=graph,
                layout=layout_graph(graph, layout_config),
                report=report,
                selected_id=None,
                render=highlight(graph, None),
                loading=False,
                load_error=None,
            )

        case GraphLoadFailed(subject=subject, error=error):
            if subject != state.subject:
                return state
            empty = ArchitectureGraph.empty()
            return replace(
                state,
                graph=empty,
                layout=EMPTY_LAYOUT,
                report=None,
                selected_id=None,
                render=EMPTY_RENDER,
                loading=False,
                load_error=error,
            )

        case NodeClicked(node_id=node_id):
            if not state.graph.has_node(node_id):
                return state
            selected = toggle_selection(state.selected_id, node_id)
            return replace(state, selected_id=selected, render=highlight(state.graph, selected))

        case PaneClicked():
            if state.selected_id is None:
                return state
            return replace(state, selected_id=None, render=highlight(state.graph, None))

        case ViewportChanged(viewport=viewport):
            return replace(state, viewport=viewport)

    raise TypeError(f"Unknown viewer event: {event!r}")


SelectionListener = Callable[[Optional[str]], None]


class ViewerController:
    """
    Drives the read-only viewer for one subject at a time.

    The controller exclusively owns the graph it displays; switching
    subjects replaces it rather than patching it.
    """

    def __init__(
        self,
        store: RecordStore,
        layout_config: Optional[LayoutConfig] = None,
        viewport: Optional[Viewport] = None,
    ):
        self._store = store
        self._layout_config = layout_config or DEFAULT_LAYOUT
        self._state = ViewerState(viewport=viewport or Viewport())
        self._selection_listeners: List[SelectionListener] = []

    @property
    def state(self) -> ViewerState:
        return self._state

    def on_selection_changed(self, listener: SelectionListener) -> None:
        self._selection_listeners.append(listener)

    def dispatch(self, event: ViewerEvent) -> ViewerState:
        previous = self._state.selected_id
        self._state = apply_event(self._state, event, self._layout_config)
        if self._state.selected_id != previous:
            for listener in self._selection_listeners:
                listener(self._state.selected_id)
        return self._state

    # --- Loading ---

    def begin_load(self, subject: str) -> str:
        """Start showing ``subject``. Returns the key its response must carry."""
        self.dispatch(GraphRequested(subject))
        return subject

    def complete_load(self, key: str, result: Result[RawGraph, RecordStoreError]) -> ViewerState:
        """Apply a fetch response; ignored when ``key`` is no longer displayed."""
        if isinstance(result, Ok):
            return self.dispatch(GraphLoaded(key, result.value))
        return self.dispatch(GraphLoadFailed(key, str(result.error)))

    def fetch(self, subject: str) -> Result[RawGraph, RecordStoreError]:
        try:
            return Ok(self._store.fetch_graph(subject))
        except RecordStoreError as e:
            logger.warning(f"Fetching graph for {subject} failed: {e}")
            return Err(e)

    def show(self, subject: str) -> ViewerState:
        """Fetch, lay out and display a subject's graph."""
        key = self.begin_load(subject)
        return self.complete_load(key, self.fetch(subject))

    def reset(self) -> ViewerState:
        """Re-run the full fetch and layout pipeline for the current subject."""
        if self._state.subject is None:
            return self._state
        return self.show(self._state.subject)

    # --- Pointer input ---

    def click_node(self, node_id: str) -> ViewerState:
        return self.dispatch(NodeClicked(node_id))

    def click_pane(self) -> ViewerState:
        return self.dispatch(PaneClicked())

    def pan(self, dx: float, dy: float) -> ViewerState:
        return self.dispatch(ViewportChanged(self._state.viewport.pan_by(dx, dy)))

    def zoom(self, factor: float, anchor: Point = Point(0.0, 0.0)) -> ViewerState:
        return self.dispatch(ViewportChanged(self._state.viewport.zoom_at(factor, anchor)))
