"""
Static HTML rendering of a laid-out architecture graph.

Produces a self-contained page with an inline SVG: one column per tier,
edges drawn as curves from the source's right handle to the target's left
handle, and the current render state (emphasized / dimmed) applied.
"""

import html
import webbrowser
from pathlib import Path
from typing import Dict, List

from .highlight import RenderState
from .layout import LayoutResult
from .theme import LEGEND, node_theme

PADDING = 40

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>{title}</title>
    <style>
        body {{
            margin: 0;
            font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
            background: #f9fafb;
            color: #1e293b;
        }}
        header {{ padding: 16px 24px; border-bottom: 1px solid #e5e7eb; background: #ffffff; }}
        header h1 {{ margin: 0; font-size: 18px; }}
        header p {{ margin: 4px 0 0; font-size: 12px; color: #64748b; }}
        .legend {{ display: flex; gap: 12px; align-items: center; font-size: 12px; padding: 12px 24px; }}
        .legend .dot {{ width: 8px; height: 8px; border-radius: 50%; display: inline-block; margin-right: 6px; }}
        .legend .arrow {{ color: #cbd5e1; }}
        .empty {{ padding: 48px; text-align: center; color: #94a3b8; }}
        svg text {{ font-size: 13px; font-weight: 500; }}
    </style>
</head>
<body>
    <header>
        <h1>{title}</h1>
        <p>{summary}</p>
    </header>
    <div class="legend">{legend}</div>
    {body}
</body>
</html>
"""


def _legend() -> str:
    parts: List[str] = []
    for i, category in enumerate(LEGEND):
        theme = node_theme(category)
        if i:
            parts.append('<span class="arrow">&rarr;</span>')
        parts.append(f'<span><span class="dot" style="background:{theme.accent}"></span>{theme.label}</span>')
    return "".join(parts)


def _svg(layout: LayoutResult, render: RenderState) -> str:
    positions = layout.by_id()
    node_renders = render.by_node_id()

    width = max(n.x + n.width for n in layout.nodes) + 2 * PADDING
    height = max(n.y + n.height for n in layout.nodes) + 2 * PADDING

    markers: Dict[str, str] = {}
    edge_parts: List[str] = []
    for edge in sorted(render.edges, key=lambda e: e.style.z_index):
        src = positions.get(edge.source)
        dst = positions.get(edge.target)
        if src is None or dst is None:
            continue
        color = edge.style.marker_color
        marker_id = f"arrow-{color.lstrip('#')}"
        markers[marker_id] = color

        x1 = src.x + src.width + PADDING
        y1 = src.y + src.height / 2 + PADDING
        x2 = dst.x + PADDING
        y2 = dst.y + dst.height / 2 + PADDING
        mid = (x1 + x2) / 2
        dash = ' stroke-dasharray="6 4"' if edge.style.animated else ""
        edge_parts.append(
            f'<path d="M{x1},{y1} C{mid},{y1} {mid},{y2} {x2},{y2}" fill="none" '
            f'stroke="{edge.style.stroke}" stroke-width="{edge.style.stroke_width}" '
            f'opacity="{edge.style.opacity}"{dash} marker-end="url(#{marker_id})">'
            f'<title>{html.escape(edge.relation)}</title></path>'
        )

    node_parts: List[str] = []
    for node in layout.nodes:
        nr = node_renders.get(node.id)
        if nr is None:
            continue
        style = nr.style
        x = node.x + PADDING
        y = node.y + PADDING
        filter_attr = ' filter="url(#shadow)"' if style.shadow else ""
        selected = ' stroke-width="2"' if node.id == render.selected_id else ""
        node_parts.append(
            f'<g opacity="{style.opacity}" data-node-id="{html.escape(node.id)}">'
            f'<rect x="{x}" y="{y}" width="{node.width}" height="{node.height}" rx="12" '
            f'fill="{style.background}" stroke="{style.border_color}"{selected}{filter_attr}/>'
            f'<rect x="{x}" y="{y}" width="6" height="{node.height}" rx="3" fill="{style.accent_color}"/>'
            f'<text x="{x + 18}" y="{y + node.height / 2 + 5}" fill="{style.text_color}">'
            f'{html.escape(node.label or node.id)}</text>'
            f'<title>{html.escape(node.id)} ({node_theme(node.category).label})</title></g>'
        )

    defs = "".join(
        f'<marker id="{mid}" viewBox="0 0 10 10" refX="10" refY="5" markerWidth="8" '
        f'markerHeight="8" orient="auto-start-reverse"><path d="M0,0 L10,5 L0,10 z" fill="{color}"/></marker>'
        for mid, color in markers.items()
    )
    shadow = ('<filter id="shadow" x="-10%" y="-10%" width="120%" height="130%">'
              '<feDropShadow dx="0" dy="4" stdDeviation="4" flood-opacity="0.08"/></filter>')

    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}"><defs>{shadow}{defs}</defs>'
        f'{"".join(edge_parts)}{"".join(node_parts)}</svg>'
    )


def generate_html(subject: str, layout: LayoutResult, render: RenderState) -> str:
    """Render a full HTML page for a subject's laid-out graph."""
    title = f"{subject} architecture"
    summary = f"{len(layout.nodes)} components, {len(layout.edges)} relations"
    if render.selected_id:
        summary += f" &middot; selected: {html.escape(render.selected_id)}"

    if layout.nodes:
        body = _svg(layout, render)
    else:
        body = '<div class="empty">No architecture data. Run an analysis first.</div>'

    return HTML_TEMPLATE.format(
        title=html.escape(title),
        summary=summary,
        legend=_legend(),
        body=body,
    )


def export_html(subject: str, layout: LayoutResult, render: RenderState,
                output_path: Path, open_browser: bool = False) -> Path:
    output_path = Path(output_path)
    output_path.write_text(generate_html(subject, layout, render), encoding="utf-8")
    if open_browser:
        webbrowser.open(f"file://{output_path.absolute()}")
    return output_path
