"""
Category palette and style hints for rendered nodes and edges.
"""

from dataclasses import dataclass

from ..core.types import Category


@dataclass(frozen=True)
class CategoryTheme:
    accent: str
    border: str
    label: str


@dataclass(frozen=True)
class NodeStyle:
    background: str
    border_color: str
    accent_color: str
    text_color: str
    opacity: float
    shadow: bool


@dataclass(frozen=True)
class EdgeStyle:
    stroke: str
    stroke_width: float
    opacity: float
    animated: bool
    marker_color: str
    z_index: int


def node_theme(category: Category) -> CategoryTheme:
    match category:
        case Category.CONTROLLER:
            return CategoryTheme(accent="#2563eb", border="#1d4ed8", label="Controller")
        case Category.SERVICE:
            return CategoryTheme(accent="#7c3aed", border="#6d28d9", label="Service")
        case Category.REPOSITORY:
            return CategoryTheme(accent="#ea580c", border="#c2410c", label="Repository")
        case Category.ENTITY:
            return CategoryTheme(accent="#059669", border="#047857", label="Entity")
        case Category.CONFIG:
            return CategoryTheme(accent="#475569", border="#334155", label="Config")
        case _:
            return CategoryTheme(accent="#52525b", border="#3f3f46", label="Other")


def node_style(category: Category, dimmed: bool) -> NodeStyle:
    theme = node_theme(category)
    if dimmed:
        return NodeStyle(
            background="#f8fafc",
            border_color="#e2e8f0",
            accent_color="#cbd5e1",
            text_color="#94a3b8",
            opacity=0.4,
            shadow=False,
        )
    return NodeStyle(
        background="#ffffff",
        border_color=theme.border,
        accent_color=theme.accent,
        text_color="#1e293b",
        opacity=1.0,
        shadow=True,
    )


NEUTRAL_EDGE = EdgeStyle(
    stroke="#cbd5e1", stroke_width=1.5, opacity=1.0,
    animated=True, marker_color="#cbd5e1", z_index=0,
)

EMPHASIZED_EDGE = EdgeStyle(
    stroke="#2563eb", stroke_width=3.0, opacity=1.0,
    animated=True, marker_color="#2563eb", z_index=10,
)

DIMMED_EDGE = EdgeStyle(
    stroke="#e2e8f0", stroke_width=1.5, opacity=0.3,
    animated=False, marker_color="#e2e8f0", z_index=0,
)

# Columns shown in the legend, in flow order.
LEGEND = (Category.CONTROLLER, Category.SERVICE, Category.REPOSITORY, Category.ENTITY)
