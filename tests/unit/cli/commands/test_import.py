"""
Unit tests for the 'import' and 'subjects' commands.
"""

from click.testing import CliRunner

from archgraph.cli.main import main
from archgraph.store.sqlite import SQLiteRecordStore


class TestImportCommand:
    def test_import_stores_valid_part(self, config_file, graph_file, db_path):
        runner = CliRunner()
        result = runner.invoke(main, ["-c", str(config_file), "import", "shop", str(graph_file)])

        assert result.exit_code == 0, result.output
        assert "Rejected edge s1 -> ghost" in result.output
        assert "Imported 3 components and 2 relations for shop" in result.output

        raw = SQLiteRecordStore(db_path).fetch_graph("shop")
        assert [n.id for n in raw.nodes] == ["c1", "s1", "r1"]
        assert len(raw.edges) == 2

    def test_invalid_file(self, config_file, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{not json")

        result = CliRunner().invoke(main, ["-c", str(config_file), "import", "shop", str(bad)])
        assert result.exit_code == 1
        assert "Invalid graph file" in result.output

    def test_requires_sqlite_backend(self, config_file, graph_file, monkeypatch):
        monkeypatch.setenv("ARCHGRAPH_STORE", "http")

        result = CliRunner().invoke(main, ["-c", str(config_file), "import", "shop", str(graph_file)])
        assert result.exit_code == 1
        assert "requires the sqlite store backend" in result.output


class TestSubjectsCommand:
    def test_lists_subjects(self, config_file, seeded_store):
        result = CliRunner().invoke(main, ["-c", str(config_file), "subjects"])
        assert result.exit_code == 0
        assert result.output.strip() == "shop"

    def test_no_subjects(self, config_file):
        result = CliRunner().invoke(main, ["-c", str(config_file), "subjects"])
        assert result.exit_code == 0
        assert "No subjects imported yet" in result.output
