"""
CLI Utilities - Shared helper functions for command line operations.

Formatted printing, configuration access, and graph loading used across
the archgraph commands.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Tuple

import click

from ..config import ArchgraphConfig, load_config
from ..core.graph import ArchitectureGraph, IngestReport
from ..store import RecordStore, build_store

logger = logging.getLogger(__name__)


@dataclass
class CliContext:
    """Shared state passed to every command through ``click.pass_obj``."""
    config_path: Optional[Path] = None
    _config: Optional[ArchgraphConfig] = None

    @property
    def config(self) -> ArchgraphConfig:
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config


def echo_success(message: str) -> None:
    click.echo(click.style(f"✅ {message}", fg="green"))


def echo_error(message: str) -> None:
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    click.echo(click.style(f"⚠️  {message}", fg="yellow"))


def echo_info(message: str) -> None:
    click.echo(click.style(f"   {message}", dim=True))


def echo_ingest_report(report: IngestReport) -> None:
    """Print rejected edges and duplicate ids found while loading a graph."""
    for rejected in report.rejected_edges:
        echo_warning(f"Rejected edge {rejected.edge.source} -> {rejected.edge.target}: {rejected.reason}")
    for node_id in report.duplicate_node_ids:
        echo_warning(f"Duplicate node id ignored: {node_id}")


@contextmanager
def open_store(ctx: CliContext) -> Iterator[RecordStore]:
    store = build_store(ctx.config)
    try:
        yield store
    finally:
        store.close()


def load_subject_graph(store: RecordStore, subject: str) -> Tuple[ArchitectureGraph, IngestReport]:
    """
    Fetch and ingest a subject's graph.

    Raises:
        RecordStoreError: If the store cannot be reached.
    """
    raw = store.fetch_graph(subject)
    return ArchitectureGraph.from_raw(raw)
