"""
Layout Command - Print the tiered layout of a subject's graph.
"""

import json

import click
from rich.console import Console
from rich.table import Table

from ...core.exceptions import ArchgraphError
from ...graph.layout import layout_graph
from ...graph.theme import node_theme
from ..utils import CliContext, echo_error, echo_ingest_report, echo_warning, load_subject_graph, open_store

console = Console()


@click.command()
@click.argument("subject")
@click.option("--json", "as_json", is_flag=True, help="Output positions as JSON")
@click.pass_obj
def layout(ctx: CliContext, subject: str, as_json: bool):
    """
    Compute tiered positions for SUBJECT's components.
    """
    try:
        with open_store(ctx) as store:
            graph, report = load_subject_graph(store, subject)
    except ArchgraphError as e:
        echo_error(f"Could not load graph for {subject}: {e}")
        raise SystemExit(1)

    result = layout_graph(graph, ctx.config.layout)

    if as_json:
        click.echo(json.dumps({
            "subject": subject,
            "nodes": [n.model_dump(mode="json") for n in result.nodes],
            "edges": [e.model_dump(mode="json") for e in result.edges],
            "rejected_edges": [
                {**r.edge.model_dump(mode="json"), "reason": r.reason} for r in report.rejected_edges
            ],
        }, indent=2))
        return

    echo_ingest_report(report)
    if not result.nodes:
        echo_warning(f"No architecture data for {subject}")
        return

    table = Table(title=f"{subject} layout")
    table.add_column("Tier", justify="right")
    table.add_column("Category")
    table.add_column("Id", style="cyan")
    table.add_column("Label")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    for node in result.nodes:
        table.add_row(
            str(node.tier),
            node_theme(node.category).label,
            node.id,
            node.label,
            f"{node.x:g}",
            f"{node.y:g}",
        )
    console.print(table)
