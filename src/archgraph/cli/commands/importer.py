"""
Import Command - Load an analysed graph into the local store.

Reads a JSON file in the analysis endpoint's shape
(``{"nodes": [{id, label, type}], "edges": [{source, target, relation}]}``),
validates it, and replaces the subject's graph in the SQLite store.
"""

import json
import logging
from pathlib import Path

import click
from pydantic import ValidationError

from ...core.exceptions import ArchgraphError
from ...core.graph import ArchitectureGraph
from ...core.types import RawGraph
from ...store import SQLiteRecordStore
from ..utils import CliContext, echo_error, echo_info, echo_ingest_report, echo_success, open_store

logger = logging.getLogger(__name__)


@click.command("import")
@click.argument("subject")
@click.argument("graph_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def import_graph(ctx: CliContext, subject: str, graph_file: Path):
    """
    Import an analysed graph for SUBJECT from GRAPH_FILE.
    """
    try:
        raw = RawGraph.model_validate(json.loads(graph_file.read_text()))
    except (json.JSONDecodeError, ValidationError) as e:
        echo_error(f"Invalid graph file {graph_file}: {e}")
        raise SystemExit(1)

    graph, report = ArchitectureGraph.from_raw(raw)
    echo_ingest_report(report)

    try:
        with open_store(ctx) as store:
            if not isinstance(store, SQLiteRecordStore):
                echo_error("Import requires the sqlite store backend")
                raise SystemExit(1)
            store.put_graph(subject, graph.iter_nodes(), graph.iter_edges())
    except ArchgraphError as e:
        echo_error(str(e))
        raise SystemExit(1)

    echo_success(f"Imported {graph.node_count} components and {graph.edge_count} relations for {subject}")
    if not report.is_clean:
        echo_info(f"{len(report.rejected_edges)} edge(s) rejected")
