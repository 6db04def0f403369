"""Unit tests for the drag gesture state machine."""

from archgraph.canvas.gestures import DragGesture, GestureKind, GesturePhase


class TestDragGesture:
    def test_starts_idle(self):
        gesture = DragGesture()
        assert gesture.phase == GesturePhase.IDLE
        assert not gesture.is_active

    def test_drop_cycle(self):
        gesture = DragGesture()
        assert gesture.start(GestureKind.CONNECT, source_id="a")
        assert gesture.payload == {"source_id": "a"}
        assert gesture.drop()

        assert gesture.finish() == GesturePhase.DROPPED
        assert gesture.phase == GesturePhase.IDLE
        assert gesture.kind is None
        assert gesture.payload == {}

    def test_cancel_cycle(self):
        gesture = DragGesture()
        gesture.start(GestureKind.MOVE, node_id="a")
        assert gesture.cancel()
        assert gesture.finish() == GesturePhase.CANCELLED

    def test_second_start_refused(self):
        gesture = DragGesture()
        gesture.start(GestureKind.PALETTE, item="x")
        assert not gesture.start(GestureKind.CONNECT, source_id="a")
        assert gesture.kind == GestureKind.PALETTE

    def test_drop_without_start(self):
        gesture = DragGesture()
        assert not gesture.drop()
        assert not gesture.cancel()
        assert gesture.finish() == GesturePhase.IDLE
