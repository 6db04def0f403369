"""
SQLite record store.

Local persistence for analysed graphs and flow documents, featuring:
- Schema versioning and migrations
- Connection handling via context managers
- Node and edge ordering preserved through explicit position columns
"""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List

from ..core.exceptions import RecordStoreError
from ..core.types import GraphEdge, GraphNode, RawGraph
from ..flows.document import FlowDocument
from .base import FlowId, RecordStore

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 2


class SQLiteRecordStore(RecordStore):
    """
    Persistent record store in a local SQLite file.

    Graphs are stored per subject; importing a subject replaces its
    previous graph entirely.
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self._init_db()

    @contextmanager
    def _connection(self):
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise RecordStoreError(f"Cannot open {self.db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys=ON")
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise RecordStoreError(f"SQLite error: {e}") from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_db(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        with self._connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY,
                    applied_at TEXT NOT NULL,
                    description TEXT
                )
            """)
            current_version = self._get_schema_version(conn)
            if current_version < SCHEMA_VERSION:
                self._migrate(conn, current_version)

    def _get_schema_version(self, conn: sqlite3.Connection) -> int:
        row = conn.execute("SELECT MAX(version) AS v FROM schema_version").fetchone()
        return row["v"] if row and row["v"] else 0

    def _migrate(self, conn: sqlite3.Connection, from_version: int) -> None:
        now = datetime.now(timezone.utc).isoformat()

        if from_version < 1:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS nodes (
                    subject TEXT NOT NULL,
                    id TEXT NOT NULL,
                    label TEXT NOT NULL,
                    category TEXT NOT NULL,
                    position INTEGER NOT NULL,
                    PRIMARY KEY (subject, id)
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS edges (
                    subject TEXT NOT NULL,
                    source_id TEXT NOT NULL,
                    target_id TEXT NOT NULL,
                    relation TEXT NOT NULL,
                    position INTEGER NOT NULL
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_nodes_subject ON nodes(subject)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_edges_subject ON edges(subject)")
            conn.execute(
                "INSERT INTO schema_version (version, applied_at, description) VALUES (1, ?, ?)",
                (now, "Initial graph schema"),
            )

        if from_version < 2:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS flows (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    subject TEXT NOT NULL,
                    name TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '',
                    flow_data TEXT NOT NULL DEFAULT '',
                    updated_at TEXT NOT NULL
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_flows_subject ON flows(subject)")
            conn.execute(
                "INSERT INTO schema_version (version, applied_at, description) VALUES (2, ?, ?)",
                (now, "Flow documents"),
            )

    # --- Graphs ---

    def put_graph(self, subject_name: str, nodes: Iterable[GraphNode], edges: Iterable[GraphEdge]) -> None:
        """Replace the stored graph for a subject. Edges are stored as given."""
        with self._connection() as conn:
            conn.execute("DELETE FROM nodes WHERE subject = ?", (subject_name,))
            conn.execute("DELETE FROM edges WHERE subject = ?", (subject_name,))
            conn.executemany(
                "INSERT OR IGNORE INTO nodes (subject, id, label, category, position) VALUES (?, ?, ?, ?, ?)",
                [(subject_name, n.id, n.label, n.category.value, i) for i, n in enumerate(nodes)],
            )
            conn.executemany(
                "INSERT INTO edges (subject, source_id, target_id, relation, position) VALUES (?, ?, ?, ?, ?)",
                [(subject_name, e.source, e.target, e.relation, i) for i, e in enumerate(edges)],
            )
        logger.info(f"Stored graph for {subject_name}")

    def fetch_graph(self, subject_name: str) -> RawGraph:
        with self._connection() as conn:
            node_rows = conn.execute(
                "SELECT id, label, category FROM nodes WHERE subject = ? ORDER BY position",
                (subject_name,),
            ).fetchall()
            edge_rows = conn.execute(
                "SELECT source_id, target_id, relation FROM edges WHERE subject = ? ORDER BY position",
                (subject_name,),
            ).fetchall()

        return RawGraph(
            nodes=[GraphNode(id=r["id"], label=r["label"], category=r["category"]) for r in node_rows],
            edges=[GraphEdge(source=r["source_id"], target=r["target_id"], relation=r["relation"])
                   for r in edge_rows],
        )

    def list_subjects(self) -> List[str]:
        with self._connection() as conn:
            rows = conn.execute("SELECT DISTINCT subject FROM nodes ORDER BY subject").fetchall()
        return [r["subject"] for r in rows]

    # --- Flows ---

    def list_flows(self, subject_name: str) -> List[FlowDocument]:
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT id, subject, name, description, flow_data FROM flows WHERE subject = ? ORDER BY id",
                (subject_name,),
            ).fetchall()
        return [self._row_to_flow(r) for r in rows]

    def save_flow(self, document: FlowDocument) -> FlowDocument:
        now = datetime.now(timezone.utc).isoformat()
        with self._connection() as conn:
            if document.id is None:
                cursor = conn.execute(
                    "INSERT INTO flows (subject, name, description, flow_data, updated_at) VALUES (?, ?, ?, ?, ?)",
                    (document.subject_name, document.name, document.description,
                     document.serialized_graph, now),
                )
                return document.model_copy(update={"id": cursor.lastrowid})

            cursor = conn.execute(
                "UPDATE flows SET subject = ?, name = ?, description = ?, flow_data = ?, updated_at = ? WHERE id = ?",
                (document.subject_name, document.name, document.description,
                 document.serialized_graph, now, self._flow_key(document.id)),
            )
            if cursor.rowcount == 0:
                raise RecordStoreError(f"Flow not found: {document.id}", status=404)
        return document

    def delete_flow(self, flow_id: FlowId) -> None:
        with self._connection() as conn:
            cursor = conn.execute("DELETE FROM flows WHERE id = ?", (self._flow_key(flow_id),))
            if cursor.rowcount == 0:
                raise RecordStoreError(f"Flow not found: {flow_id}", status=404)

    @staticmethod
    def _flow_key(flow_id: FlowId) -> int:
        try:
            return int(flow_id)
        except (TypeError, ValueError) as e:
            raise RecordStoreError(f"Invalid flow id: {flow_id!r}", status=400) from e

    @staticmethod
    def _row_to_flow(row: sqlite3.Row) -> FlowDocument:
        return FlowDocument(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            subject_name=row["subject"],
            serialized_graph=row["flow_data"],
        )
