"""
Unit tests for CLI utilities.
"""

from unittest.mock import patch

from archgraph import config as config_module
from archgraph.cli.utils import CliContext, echo_ingest_report, load_subject_graph, open_store
from archgraph.core.graph import IngestReport, RejectedEdge
from archgraph.core.types import GraphEdge
from archgraph.store.sqlite import SQLiteRecordStore


class TestCliContext:
    def test_config_loaded_once(self, config_file):
        ctx = CliContext(config_path=config_file)
        with patch("archgraph.cli.utils.load_config", wraps=config_module.load_config) as mock_load:
            first = ctx.config
            second = ctx.config
        assert first is second
        mock_load.assert_called_once_with(config_file)

    def test_open_store_builds_configured_backend(self, config_file, db_path):
        with open_store(CliContext(config_path=config_file)) as store:
            assert isinstance(store, SQLiteRecordStore)
            assert store.db_path == db_path


class TestHelpers:
    def test_load_subject_graph(self, fake_store):
        graph, report = load_subject_graph(fake_store, "shop")
        assert graph.node_count == 3
        assert report.is_clean

    def test_echo_ingest_report(self, capsys):
        report = IngestReport(
            rejected_edges=[RejectedEdge(GraphEdge(source="a", target="b"), "unknown node id(s): b")],
            duplicate_node_ids=["x"],
        )
        echo_ingest_report(report)

        out = capsys.readouterr().out
        assert "Rejected edge a -> b: unknown node id(s): b" in out
        assert "Duplicate node id ignored: x" in out
