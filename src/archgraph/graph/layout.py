"""
Tiered Layout Engine.

Places every component in a column determined solely by its category, so
dependency direction reads left to right (Controller -> Service ->
Repository -> Entity -> Config -> Other) without any per-edge routing.

Columns are stacked top to bottom in input order and centred vertically
against the tallest column. The function is pure: the same graph in the
same node order always produces the same positions.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from ..core.graph import ArchitectureGraph
from ..core.types import Category, GraphEdge, GraphNode, PositionedNode


class LayoutConfig(BaseModel):
    """Fixed geometry for the tiered layout."""
    node_width: float = Field(default=220, gt=0)
    node_height: float = Field(default=70, gt=0)
    node_spacing: float = Field(default=80, gt=0)  # vertical gap inside a tier
    tier_spacing: float = Field(default=250, gt=0)  # horizontal gap between tiers

    model_config = ConfigDict(frozen=True)

    @property
    def row_height(self) -> float:
        return self.node_height + self.node_spacing


DEFAULT_LAYOUT = LayoutConfig()


@dataclass(frozen=True)
class LayoutResult:
    """Positioned nodes plus the untouched edge list."""
    nodes: List[PositionedNode]
    edges: List[GraphEdge]
    max_height: float = 0.0

    def position_of(self, node_id: str) -> Optional[PositionedNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def by_id(self) -> Dict[str, PositionedNode]:
        return {node.id: node for node in self.nodes}


def tier_of(node: GraphNode) -> int:
    """Tier rank for a node. Unknown categories were already folded into OTHER."""
    return Category.parse(node.category).rank


def group_by_tier(nodes: Sequence[GraphNode]) -> Dict[int, List[GraphNode]]:
    """Stable partition of nodes by tier, preserving input order inside each tier."""
    tiers: Dict[int, List[GraphNode]] = {}
    for node in nodes:
        tiers.setdefault(tier_of(node), []).append(node)
    return tiers


def layout(
    nodes: Sequence[GraphNode],
    edges: Sequence[GraphEdge],
    config: Optional[LayoutConfig] = None,
) -> LayoutResult:
    """
    Compute tiered positions for a graph.

    Args:
        nodes: Nodes in input order.
        edges: Passed through unchanged.
        config: Geometry constants. Defaults to ``DEFAULT_LAYOUT``.

    Returns:
        LayoutResult with nodes ordered by tier, then input order.
    """
    config = config or DEFAULT_LAYOUT
    tiers = group_by_tier(nodes)
    if not tiers:
        return LayoutResult(nodes=[], edges=list(edges))

    row_height = config.row_height
    max_height = max(len(members) for members in tiers.values()) * row_height

    positioned: List[PositionedNode] = []
    for rank in sorted(tiers):
        members = tiers[rank]
        column_height = len(members) * row_height
        start_y = (max_height - column_height) / 2
        x = rank * config.tier_spacing

        for index, node in enumerate(members):
            positioned.append(PositionedNode.place(
                node,
                tier=rank,
                x=x,
                y=start_y + index * row_height,
                width=config.node_width,
                height=config.node_height,
            ))

    return LayoutResult(nodes=positioned, edges=list(edges), max_height=max_height)


def layout_graph(graph: ArchitectureGraph, config: Optional[LayoutConfig] = None) -> LayoutResult:
    """Lay out an ingested ArchitectureGraph."""
    return layout(graph.nodes, graph.edges, config)
