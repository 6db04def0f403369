"""Unit tests for configuration loading."""

from pathlib import Path

import pytest
import yaml

from archgraph.canvas.viewport import Point
from archgraph.config import ArchgraphConfig, StoreBackend, ViewportSettings, load_config
from archgraph.core.exceptions import ConfigError
from archgraph.store import RestRecordStore, SQLiteRecordStore, build_store


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("ARCHGRAPH_STORE", "ARCHGRAPH_API_URL", "ARCHGRAPH_DB_PATH"):
        monkeypatch.delenv(name, raising=False)


def write(path, data):
    path.write_text(yaml.safe_dump(data))
    return path


class TestLoadConfig:
    def test_defaults_when_missing(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = load_config()

        assert config.store.backend == StoreBackend.SQLITE
        assert config.layout.tier_spacing == 250
        assert config.viewport.max_zoom == 2.0

    def test_explicit_missing_path_uses_defaults(self, tmp_path):
        assert load_config(tmp_path / "absent.yaml") == ArchgraphConfig()

    def test_reads_yaml(self, tmp_path):
        path = write(tmp_path / "config.yaml", {
            "store": {"backend": "http", "api_url": "http://dash/api", "timeout": 5},
            "layout": {"node_spacing": 40},
        })
        config = load_config(path)

        assert config.store.backend == StoreBackend.HTTP
        assert config.store.timeout == 5
        assert config.layout.row_height == 110

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = write(tmp_path / "config.yaml", {"store": {"backend": "sqlite", "db_path": "a.db"}})
        monkeypatch.setenv("ARCHGRAPH_STORE", "http")
        monkeypatch.setenv("ARCHGRAPH_DB_PATH", "b.db")

        config = load_config(path)
        assert config.store.backend == StoreBackend.HTTP
        assert config.store.db_path == Path("b.db")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("store: [unclosed")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    @pytest.mark.parametrize("store", ["http", 3, ["sqlite"]])
    def test_scalar_store_section(self, tmp_path, store):
        path = write(tmp_path / "config.yaml", {"store": store})
        with pytest.raises(ConfigError, match="store must be a mapping"):
            load_config(path)

    def test_invalid_values(self, tmp_path):
        path = write(tmp_path / "config.yaml", {"layout": {"node_width": -1}})
        with pytest.raises(ConfigError):
            load_config(path)


class TestViewportSettings:
    def test_range_checked(self):
        with pytest.raises(ValueError):
            ViewportSettings(min_zoom=3, max_zoom=1)

    def test_initial_viewport(self):
        viewport = ViewportSettings(min_zoom=0.5, max_zoom=4).initial_viewport()
        assert (viewport.x, viewport.y, viewport.zoom) == (0, 0, 1)
        assert viewport.zoom_at(10, Point(0, 0)).zoom == 4


class TestBuildStore:
    def test_sqlite(self, tmp_path):
        config = ArchgraphConfig.model_validate({"store": {"db_path": str(tmp_path / "x.db")}})
        assert isinstance(build_store(config), SQLiteRecordStore)

    def test_http(self):
        config = ArchgraphConfig.model_validate({"store": {"backend": "http", "api_url": "http://dash/api/"}})
        store = build_store(config)

        assert isinstance(store, RestRecordStore)
        assert store.base_url == "http://dash/api"
        store.close()
