"""
Record store contract.

The engine talks to the outside world only through these four operations.
Implementations raise ``RecordStoreError`` for anything that went wrong
in transport or persistence; a subject that was never analysed is not an
error and yields an empty graph.
"""

from abc import ABC, abstractmethod
from typing import List, Union

from ..core.types import RawGraph
from ..flows.document import FlowDocument

FlowId = Union[int, str]


class RecordStore(ABC):

    @abstractmethod
    def fetch_graph(self, subject_name: str) -> RawGraph:
        """Current node/edge graph for a subject; empty if never analysed."""

    @abstractmethod
    def list_flows(self, subject_name: str) -> List[FlowDocument]:
        """All flow documents recorded for a subject."""

    @abstractmethod
    def save_flow(self, document: FlowDocument) -> FlowDocument:
        """Create when ``document.id`` is None, otherwise fully update by id."""

    @abstractmethod
    def delete_flow(self, flow_id: FlowId) -> None:
        """Remove a flow document."""

    def close(self) -> None:
        """Release any held resources."""
