"""
Core data types for archgraph.

- types: category vocabulary, nodes, edges
- graph: validated architecture graph
- exceptions / result: error taxonomy and explicit Ok/Err results
"""

from .graph import ArchitectureGraph, IngestReport, RejectedEdge
from .types import Category, GraphEdge, GraphNode, PositionedNode, RawGraph

__all__ = [
    "ArchitectureGraph",
    "IngestReport",
    "RejectedEdge",
    "Category",
    "GraphEdge",
    "GraphNode",
    "PositionedNode",
    "RawGraph",
]
