"""
Drag gesture state machine.

    Idle -> Dragging -> {Dropped, Cancelled} -> Idle

The pointer is exclusive, so at most one gesture is active. A gesture
that ends without a valid receiving area is Cancelled and must not
mutate anything.
"""

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class GesturePhase(StrEnum):
    IDLE = "idle"
    DRAGGING = "dragging"
    DROPPED = "dropped"
    CANCELLED = "cancelled"


class GestureKind(StrEnum):
    PALETTE = "palette"  # palette item dragged onto the canvas
    CONNECT = "connect"  # connector dragged to another node
    MOVE = "move"  # node dragged to a new position


@dataclass
class DragGesture:
    """
    A single pointer gesture.

    ``payload`` carries what the gesture started with: the palette item,
    the source node id, or the moved node id and its grab offset.
    """
    phase: GesturePhase = GesturePhase.IDLE
    kind: Optional[GestureKind] = None
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_active(self) -> bool:
        return self.phase == GesturePhase.DRAGGING

    def start(self, kind: GestureKind, **payload: Any) -> bool:
        """Enter Dragging. Refused if another gesture is in flight."""
        if self.phase != GesturePhase.IDLE:
            logger.debug(f"Ignoring {kind} gesture start while {self.phase}")
            return False
        self.phase = GesturePhase.DRAGGING
        self.kind = kind
        self.payload = dict(payload)
        return True

    def drop(self) -> bool:
        if not self.is_active:
            return False
        self.phase = GesturePhase.DROPPED
        return True

    def cancel(self) -> bool:
        if not self.is_active:
            return False
        self.phase = GesturePhase.CANCELLED
        return True

    def finish(self) -> GesturePhase:
        """Return to Idle, reporting the terminal phase the gesture reached."""
        terminal = self.phase
        self.phase = GesturePhase.IDLE
        self.kind = None
        self.payload = {}
        return terminal
