"""
Highlight Command - Show what a selected component is directly connected to.
"""

import json

import click
from rich.console import Console

from ...core.exceptions import ArchgraphError
from ...graph.highlight import highlight as compute_highlight
from ..utils import CliContext, echo_error, echo_warning, load_subject_graph, open_store

console = Console()


@click.command()
@click.argument("subject")
@click.argument("node_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def highlight(ctx: CliContext, subject: str, node_id: str, as_json: bool):
    """
    Select NODE_ID in SUBJECT's graph and list its one-hop neighbourhood.
    """
    try:
        with open_store(ctx) as store:
            graph, _ = load_subject_graph(store, subject)
    except ArchgraphError as e:
        echo_error(f"Could not load graph for {subject}: {e}")
        raise SystemExit(1)

    render = compute_highlight(graph, node_id)

    if as_json:
        click.echo(json.dumps({
            "selected": render.selected_id,
            "emphasized_nodes": sorted(render.emphasized_nodes),
            "emphasized_edges": [
                {"source": e.source, "target": e.target, "relation": e.relation}
                for e in render.edges if e.emphasized
            ],
        }, indent=2))
        return

    if render.selected_id is None:
        echo_warning(f"Component not found: {node_id}")
        return

    console.print(f"[bold]{node_id}[/bold] connects to:")
    for edge in render.edges:
        if not edge.emphasized:
            continue
        if edge.source == node_id:
            console.print(f"  → [cyan]{edge.target}[/cyan] [dim]{edge.relation}[/dim]")
        else:
            console.print(f"  ← [cyan]{edge.source}[/cyan] [dim]{edge.relation}[/dim]")
    dimmed = len(render.dimmed_nodes)
    console.print(f"[dim]{len(render.emphasized_nodes)} emphasized, {dimmed} dimmed[/dim]")
