"""
archgraph - architecture graph engine.

Ingests a directed graph of software components, lays it out in tiers by
component category, highlights the one-hop neighbourhood of a selected
component, and manages hand-authored flow documents built on a canvas.

Usage:
    from archgraph import ArchitectureGraph, layout_graph, highlight

    graph, report = ArchitectureGraph.from_raw(store.fetch_graph("shop-api"))
    positions = layout_graph(graph)
    render = highlight(graph, "OrderService")
"""

__version__ = "0.1.0"

from .core.graph import ArchitectureGraph, IngestReport
from .core.types import Category, GraphEdge, GraphNode, PositionedNode, RawGraph
from .graph.highlight import RenderState, highlight
from .graph.layout import LayoutConfig, layout, layout_graph

__all__ = [
    "__version__",
    "ArchitectureGraph",
    "IngestReport",
    "Category",
    "GraphEdge",
    "GraphNode",
    "PositionedNode",
    "RawGraph",
    "RenderState",
    "highlight",
    "LayoutConfig",
    "layout",
    "layout_graph",
]
