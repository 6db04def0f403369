"""
Viewport transform between screen space and canvas space.

A viewport translates by ``(x, y)`` and scales by ``zoom``:

    screen = canvas * zoom + (x, y)
    canvas = (screen - (x, y)) / zoom

Anything placed from a pointer event must go through ``project`` so it
lands where the user released it, not at raw screen coordinates.
"""

from dataclasses import dataclass, replace
from typing import NamedTuple

DEFAULT_MIN_ZOOM = 0.1
DEFAULT_MAX_ZOOM = 2.0


class Point(NamedTuple):
    x: float
    y: float


@dataclass(frozen=True)
class Viewport:
    x: float = 0.0
    y: float = 0.0
    zoom: float = 1.0
    min_zoom: float = DEFAULT_MIN_ZOOM
    max_zoom: float = DEFAULT_MAX_ZOOM

    def __post_init__(self):
        if self.zoom <= 0:
            raise ValueError(f"zoom must be positive, got {self.zoom}")

    def project(self, screen: Point) -> Point:
        """Screen (canvas-local) coordinates to canvas coordinates."""
        return Point((screen.x - self.x) / self.zoom, (screen.y - self.y) / self.zoom)

    def unproject(self, canvas: Point) -> Point:
        """Canvas coordinates to screen (canvas-local) coordinates."""
        return Point(canvas.x * self.zoom + self.x, canvas.y * self.zoom + self.y)

    def pan_by(self, dx: float, dy: float) -> "Viewport":
        return replace(self, x=self.x + dx, y=self.y + dy)

    def zoom_at(self, factor: float, anchor: Point) -> "Viewport":
        """
        Scale by ``factor`` keeping the canvas point under ``anchor`` fixed.

        The resulting zoom is clamped to ``[min_zoom, max_zoom]``.
        """
        new_zoom = min(max(self.zoom * factor, self.min_zoom), self.max_zoom)
        fixed = self.project(anchor)
        return replace(
            self,
            zoom=new_zoom,
            x=anchor.x - fixed.x * new_zoom,
            y=anchor.y - fixed.y * new_zoom,
        )

    def reset(self) -> "Viewport":
        return replace(self, x=0.0, y=0.0, zoom=1.0)


@dataclass(frozen=True)
class CanvasBounds:
    """Client-space rectangle occupied by the canvas element."""
    left: float = 0.0
    top: float = 0.0
    width: float = float("inf")
    height: float = float("inf")

    def contains(self, client_x: float, client_y: float) -> bool:
        return (
            self.left <= client_x <= self.left + self.width
            and self.top <= client_y <= self.top + self.height
        )

    def to_local(self, client_x: float, client_y: float) -> Point:
        """Client coordinates to canvas-local screen coordinates."""
        return Point(client_x - self.left, client_y - self.top)
