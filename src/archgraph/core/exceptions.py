"""
Exception hierarchy for archgraph.

Nothing here is process-fatal. Store failures are surfaced for a user
retry, decode failures reject a single document.
"""

from typing import Optional


class ArchgraphError(Exception):
    """Base class for all archgraph errors."""


class ConfigError(ArchgraphError):
    """Raised when the configuration file cannot be loaded or validated."""

    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"Invalid config {path}: {message}")


class RecordStoreError(ArchgraphError):
    """
    Raised when the external record store cannot complete a request.

    Attributes:
        message: Human-readable error message.
        status: HTTP status code, if the failure came from a response.
        url: The request target, if known.
    """

    def __init__(self, message: str, status: Optional[int] = None, url: Optional[str] = None):
        self.message = message
        self.status = status
        self.url = url
        detail = f" (HTTP {status})" if status is not None else ""
        super().__init__(f"{message}{detail}")


class FlowDecodeError(ArchgraphError):
    """Raised when a serialized flow graph cannot be decoded."""


class FlowSaveError(ArchgraphError):
    """
    Raised when writing a flow document to the store fails.

    The in-progress edit is preserved so the save can be retried.
    """

    def __init__(self, flow_name: str, cause: Exception):
        self.flow_name = flow_name
        self.cause = cause
        super().__init__(f"Failed to save flow '{flow_name}': {cause}")


class EmptyFlowError(ArchgraphError):
    """Raised when saving a flow whose canvas holds no nodes."""

    def __init__(self):
        super().__init__("Canvas is empty")


class InvalidTransitionError(ArchgraphError):
    """Raised when a flow document operation is not valid in the current state."""

    def __init__(self, operation: str, state: str):
        self.operation = operation
        self.state = state
        super().__init__(f"Cannot {operation} while {state}")
