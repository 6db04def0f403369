"""Fixtures for CLI tests: a config file pointing at a temporary SQLite store."""

import json

import pytest
import yaml

from archgraph.store.sqlite import SQLiteRecordStore


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("ARCHGRAPH_STORE", "ARCHGRAPH_API_URL", "ARCHGRAPH_DB_PATH"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "archgraph.db"


@pytest.fixture
def config_file(tmp_path, db_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"store": {"backend": "sqlite", "db_path": str(db_path)}}))
    return path


@pytest.fixture
def seeded_store(db_path, chain_graph):
    store = SQLiteRecordStore(db_path)
    store.put_graph("shop", chain_graph.nodes, chain_graph.edges)
    return store


@pytest.fixture
def graph_file(tmp_path, chain_graph):
    path = tmp_path / "graph.json"
    payload = chain_graph.model_dump(by_alias=True, mode="json")
    payload["edges"].append({"source": "s1", "target": "ghost", "relation": "calls"})
    path.write_text(json.dumps(payload))
    return path
