"""
Flow Document Manager.

Holds the single open flow document and drives its lifecycle:

    open(doc)      -> VIEWING
    new_flow()     -> EDITING (empty document, never VIEWING first)
    request_edit() VIEWING -> EDITING
    save()         EDITING -> VIEWING on success, stays EDITING on failure
    cancel()       EDITING -> VIEWING (last saved) or CLOSED (never saved)
    delete()       any open state -> CLOSED
    close()        any state -> CLOSED

All node/edge mutations arrive through the ``EditableFlow`` capability,
which routes them back here, so save always serializes one consistent
snapshot. Listing and deletion are delegated to the record store.
"""

import logging
import time
from enum import StrEnum
from typing import Callable, List, Optional, Union

from ..core.exceptions import (
    ArchgraphError,
    EmptyFlowError,
    FlowSaveError,
    InvalidTransitionError,
    RecordStoreError,
)
from ..core.result import Err, Ok, Result
from ..graph.highlight import toggle_selection
from ..store.base import RecordStore
from .capabilities import EditableFlow, ReadOnlyFlow
from .document import DEFAULT_FLOW_NAME, FlowDocument, FlowGraph, encode_graph

logger = logging.getLogger(__name__)


class FlowState(StrEnum):
    CLOSED = "closed"
    VIEWING = "viewing"
    EDITING = "editing"


def _epoch_millis() -> int:
    return int(time.time() * 1000)


class FlowDocumentManager:
    """
    Owner of the open flow document.

    Args:
        store: Record store used for listing, saving and deleting.
        clock: Millisecond clock used to mint node ids.
    """

    def __init__(self, store: RecordStore, clock: Optional[Callable[[], int]] = None):
        self._store = store
        self._clock = clock or _epoch_millis
        self._state = FlowState.CLOSED
        self._epoch = 0
        self._saved: Optional[FlowDocument] = None
        self._document: Optional[FlowDocument] = None
        self._graph = FlowGraph()
        self._selected: Optional[str] = None

    # --- Read access ---

    @property
    def state(self) -> FlowState:
        return self._state

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def document(self) -> Optional[FlowDocument]:
        return self._document

    @property
    def graph(self) -> FlowGraph:
        return self._graph

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected

    @property
    def capability(self) -> Optional[Union[ReadOnlyFlow, EditableFlow]]:
        """Capability matching the current state, or None when closed."""
        if self._state == FlowState.EDITING:
            return EditableFlow(self, self._epoch)
        if self._state == FlowState.VIEWING:
            return ReadOnlyFlow(self, self._epoch)
        return None

    def now_millis(self) -> int:
        return self._clock()

    # --- Store delegation ---

    def list_flows(self, subject_name: str) -> List[FlowDocument]:
        """Flows recorded for a subject. A failed fetch renders as an empty list."""
        try:
            return self._store.list_flows(subject_name)
        except RecordStoreError as e:
            logger.warning(f"Failed to list flows for {subject_name}: {e}")
            return []

    # --- Transitions ---

    def open(self, document: FlowDocument) -> ReadOnlyFlow:
        """
        Open a stored document read-only.

        Raises:
            FlowDecodeError: If the stored graph cannot be decoded. The
                manager state is left untouched.
        """
        graph = document.graph()
        self._enter(FlowState.VIEWING, saved=document, document=document, graph=graph)
        return ReadOnlyFlow(self, self._epoch)

    def new_flow(self, subject_name: str, name: str = DEFAULT_FLOW_NAME) -> EditableFlow:
        document = FlowDocument(name=name, subject_name=subject_name)
        self._enter(FlowState.EDITING, saved=None, document=document, graph=FlowGraph())
        return EditableFlow(self, self._epoch)

    def request_edit(self) -> EditableFlow:
        """Make the viewed document mutable."""
        if self._state == FlowState.EDITING:
            return EditableFlow(self, self._epoch)
        if self._state != FlowState.VIEWING:
            raise InvalidTransitionError("edit", self._state)
        self._enter(FlowState.EDITING, saved=self._saved, document=self._document, graph=self._graph)
        return EditableFlow(self, self._epoch)

    def save(self) -> Result[FlowDocument, ArchgraphError]:
        """
        Serialize the current graph and write it through to the store.

        On success the manager views the stored document. On failure it
        stays in EDITING with every in-memory change intact.
        """
        if self._state != FlowState.EDITING:
            return Err(InvalidTransitionError("save", self._state))
        if self._graph.is_empty:
            return Err(EmptyFlowError())

        pending = self._document.model_copy(update={"serialized_graph": encode_graph(self._graph)})
        try:
            stored = self._store.save_flow(pending)
        except RecordStoreError as e:
            logger.error(f"Saving flow '{pending.name}' failed: {e}")
            return Err(FlowSaveError(pending.name, e))

        logger.info(f"Saved flow '{stored.name}' (id={stored.id})")
        self._enter(FlowState.VIEWING, saved=stored, document=stored, graph=self._graph)
        return Ok(stored)

    def cancel(self) -> FlowState:
        """Discard unsaved edits. Outside EDITING this does nothing."""
        if self._state != FlowState.EDITING:
            return self._state
        if self._saved is not None and self._saved.is_saved:
            self._enter(FlowState.VIEWING, saved=self._saved, document=self._saved,
                        graph=self._saved.graph())
        else:
            self.close()
        return self._state

    def delete(self) -> Result[None, ArchgraphError]:
        """Delete the open document from the store and close it."""
        if self._state == FlowState.CLOSED:
            return Err(InvalidTransitionError("delete", self._state))
        if self._saved is not None and self._saved.is_saved:
            try:
                self._store.delete_flow(self._saved.id)
            except RecordStoreError as e:
                logger.error(f"Deleting flow {self._saved.id} failed: {e}")
                return Err(e)
        self.close()
        return Ok(None)

    def close(self) -> None:
        self._enter(FlowState.CLOSED, saved=None, document=None, graph=FlowGraph())

    # --- Internal, used by capabilities ---

    def _enter(
        self,
        state: FlowState,
        saved: Optional[FlowDocument],
        document: Optional[FlowDocument],
        graph: FlowGraph,
    ) -> None:
        self._state = state
        self._saved = saved
        self._document = document
        self._graph = graph
        self._selected = None
        self._epoch += 1

    def _replace_graph(self, epoch: int, graph: FlowGraph) -> bool:
        if epoch != self._epoch or self._state != FlowState.EDITING:
            return False
        self._graph = graph
        return True

    def _update_metadata(self, epoch: int, name: Optional[str], description: Optional[str]) -> bool:
        if epoch != self._epoch or self._state != FlowState.EDITING:
            return False
        update = {}
        if name is not None:
            update["name"] = name
        if description is not None:
            update["description"] = description
        self._document = self._document.model_copy(update=update)
        return True

    def _select(self, node_id: Optional[str]) -> Optional[str]:
        if node_id is not None and not self._graph.has_node(node_id):
            node_id = None
        self._selected = toggle_selection(self._selected, node_id)
        return self._selected
