"""
Flows Command Group - Inspect and delete hand-authored flow documents.
"""

import json
from typing import List, Optional

import click
from rich.console import Console
from rich.table import Table

from ...core.exceptions import FlowDecodeError
from ...core.result import Err
from ...flows.document import FlowDocument
from ...flows.manager import FlowDocumentManager
from ..utils import CliContext, echo_error, echo_success, echo_warning, open_store

console = Console()


def _find(documents: List[FlowDocument], flow_id: str) -> Optional[FlowDocument]:
    for document in documents:
        if str(document.id) == flow_id:
            return document
    return None


@click.group()
def flows():
    """List, show and delete flow documents."""


@flows.command("list")
@click.argument("subject")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def list_flows(ctx: CliContext, subject: str, as_json: bool):
    """List flows recorded for SUBJECT."""
    with open_store(ctx) as store:
        documents = FlowDocumentManager(store).list_flows(subject)

    if as_json:
        click.echo(json.dumps([d.to_wire() for d in documents], indent=2))
        return

    if not documents:
        echo_warning(f"No flows for {subject}")
        return

    table = Table(title=f"{subject} flows")
    table.add_column("Id", justify="right", style="cyan")
    table.add_column("Name")
    table.add_column("Description")
    for document in documents:
        table.add_row(str(document.id), document.name, document.description or "No description.")
    console.print(table)


@flows.command("show")
@click.argument("subject")
@click.argument("flow_id")
@click.pass_obj
def show_flow(ctx: CliContext, subject: str, flow_id: str):
    """Show the nodes and edges of flow FLOW_ID."""
    with open_store(ctx) as store:
        manager = FlowDocumentManager(store)
        document = _find(manager.list_flows(subject), flow_id)
        if document is None:
            echo_error(f"Flow not found: {flow_id}")
            raise SystemExit(1)
        try:
            view = manager.open(document)
        except FlowDecodeError as e:
            echo_error(f"Flow {flow_id} is unreadable: {e}")
            raise SystemExit(1)

    console.print(f"[bold]{document.name}[/bold] 🔒")
    console.print(f"[dim]{document.description or 'No description.'}[/dim]")

    graph = view.graph
    nodes = Table(title="Nodes")
    nodes.add_column("Id", style="cyan")
    nodes.add_column("Kind")
    nodes.add_column("Label")
    nodes.add_column("Position", justify="right")
    for node in graph.nodes:
        nodes.add_row(node.id, node.kind.value, node.label, f"({node.position.x:g}, {node.position.y:g})")
    console.print(nodes)

    if graph.edges:
        edges = Table(title="Edges")
        edges.add_column("Source", style="cyan")
        edges.add_column("Target", style="cyan")
        edges.add_column("Relation")
        for edge in graph.edges:
            edges.add_row(edge.source, edge.target, edge.relation)
        console.print(edges)


@flows.command("delete")
@click.argument("subject")
@click.argument("flow_id")
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_obj
def delete_flow(ctx: CliContext, subject: str, flow_id: str, yes: bool):
    """Delete flow FLOW_ID."""
    with open_store(ctx) as store:
        manager = FlowDocumentManager(store)
        document = _find(manager.list_flows(subject), flow_id)
        if document is None:
            echo_error(f"Flow not found: {flow_id}")
            raise SystemExit(1)
        if not yes and not click.confirm(f"Delete flow '{document.name}'?"):
            return
        try:
            manager.open(document)
        except FlowDecodeError as e:
            echo_error(f"Flow {flow_id} is unreadable: {e}")
            raise SystemExit(1)
        result = manager.delete()

    if isinstance(result, Err):
        echo_error(f"Delete failed: {result.error}")
        raise SystemExit(1)
    echo_success(f"Deleted flow '{document.name}'")

