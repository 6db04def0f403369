"""
Graph computations: tiered layout, selection highlighting, rendering.
"""

from .highlight import RenderState, highlight, toggle_selection
from .layout import LayoutConfig, LayoutResult, layout, layout_graph

__all__ = [
    "RenderState",
    "highlight",
    "toggle_selection",
    "LayoutConfig",
    "LayoutResult",
    "layout",
    "layout_graph",
]
