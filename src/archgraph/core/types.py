"""
Core type definitions for archgraph.

The analysed architecture graph is made of components (nodes) tagged with a
closed category vocabulary, and directed relations (edges) between them.
"""

from enum import StrEnum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Category(StrEnum):
    """Categories of components in the architecture graph."""
    CONTROLLER = "CONTROLLER"
    SERVICE = "SERVICE"
    REPOSITORY = "REPOSITORY"
    ENTITY = "ENTITY"
    CONFIG = "CONFIG"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, raw: Any) -> "Category":
        """
        Resolve a raw category string.

        Matching is case-insensitive. Anything unrecognised, including a
        missing value, falls back to OTHER.
        """
        if isinstance(raw, Category):
            return raw
        if not isinstance(raw, str):
            return cls.OTHER
        try:
            return cls(raw.strip().upper())
        except ValueError:
            return cls.OTHER

    @property
    def rank(self) -> int:
        """Tier rank in the fixed left-to-right ordering."""
        return TIER_RANK[self]

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


# Strict hierarchy: left to right
TIER_RANK: Dict[Category, int] = {
    Category.CONTROLLER: 0,
    Category.SERVICE: 1,
    Category.REPOSITORY: 2,
    Category.ENTITY: 3,
    Category.CONFIG: 4,
    Category.OTHER: 5,
}


class GraphNode(BaseModel):
    """
    A component of the analysed system.

    Identity is the id; the label is display-only and may repeat.
    On the wire the category travels as ``type``.
    """
    id: str
    label: str = ""
    category: Category = Field(default=Category.OTHER, alias="type")

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value: Any) -> Category:
        return Category.parse(value)


class GraphEdge(BaseModel):
    """
    Directed relationship between two components.

    Endpoints may be missing in raw payloads; such edges are rejected at
    ingestion instead of failing the whole graph.
    """
    source: Optional[str] = None
    target: Optional[str] = None
    relation: str = ""

    model_config = ConfigDict(frozen=True, extra="ignore")

    def touches(self, node_id: str) -> bool:
        """True if either endpoint is ``node_id``."""
        return self.source == node_id or self.target == node_id


class RawGraph(BaseModel):
    """
    Unvalidated node/edge lists as returned by an analysis source.

    Edges may still reference unknown ids; ``ArchitectureGraph.ingest``
    is responsible for rejecting them.
    """
    nodes: List[GraphNode] = Field(default_factory=list)
    edges: List[GraphEdge] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")

    @property
    def is_empty(self) -> bool:
        return not self.nodes and not self.edges


class PositionedNode(BaseModel):
    """
    A GraphNode with a computed position.

    Produced only by the layout engine.
    """
    id: str
    label: str
    category: Category
    tier: int
    x: float
    y: float
    width: float
    height: float
    source_side: str = "right"
    target_side: str = "left"

    model_config = ConfigDict(frozen=True)

    @classmethod
    def place(cls, node: GraphNode, tier: int, x: float, y: float,
              width: float, height: float) -> "PositionedNode":
        return cls(
            id=node.id,
            label=node.label,
            category=node.category,
            tier=tier,
            x=x,
            y=y,
            width=width,
            height=height,
        )
