"""SQLite-backed document store.

Every record lives in one ``documents`` table as a JSON body keyed by
``(collection, id)``. Callers work with plain dicts; ``id``, ``created_at`` and
``updated_at`` are managed here.
"""

from __future__ import annotations

import json
import logging
import os
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterator

from resume_builder.core.config import settings

logger = logging.getLogger(__name__)

_conn: sqlite3.Connection | None = None
_conn_lock = threading.RLock()

Document = dict[str, Any]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    return utc_now().isoformat()


def new_id() -> str:
    return uuid.uuid4().hex


def _get_connection() -> sqlite3.Connection:
    global _conn
    with _conn_lock:
        if _conn is not None:
            return _conn

        db_path = settings.database_path
        directory = os.path.dirname(db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        _conn = sqlite3.connect(
            db_path,
            check_same_thread=False,
            timeout=5,
            isolation_level=None,
        )
        _conn.execute("PRAGMA journal_mode=WAL;")
        _conn.execute("PRAGMA synchronous=NORMAL;")
        _conn.execute("PRAGMA busy_timeout=5000;")
        _conn.execute(
            """
            CREATE TABLE IF NOT EXISTS documents (
                collection TEXT NOT NULL,
                id TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                body_json TEXT NOT NULL,
                PRIMARY KEY (collection, id)
            );
            """
        )
        _conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_documents_collection_created
            ON documents (collection, created_at);
            """
        )
        return _conn


def init_db() -> None:
    _get_connection()
    logger.info("document_store_ready path=%s", settings.database_path)


@contextmanager
def transaction() -> Iterator[sqlite3.Connection]:
    """Run the enclosed store calls atomically.

    Nested use on the same thread joins the outer transaction.
    """
    conn = _get_connection()
    with _conn_lock:
        if conn.in_transaction:
            yield conn
            return
        conn.execute("BEGIN IMMEDIATE")
        try:
            yield conn
        except BaseException:
            conn.execute("ROLLBACK")
            raise
        conn.execute("COMMIT")


def _load(row: tuple[Any, ...] | None) -> Document | None:
    if not row:
        return None
    return json.loads(row[0])


def _dump(doc: Document) -> str:
    return json.dumps(doc, ensure_ascii=False, default=str)


def insert_document(collection: str, doc: Document) -> Document:
    now = utc_now_iso()
    record = dict(doc)
    record["id"] = record.get("id") or new_id()
    record.setdefault("created_at", now)
    record["updated_at"] = now

    conn = _get_connection()
    with _conn_lock:
        conn.execute(
            """
            INSERT INTO documents (collection, id, created_at, updated_at, body_json)
            VALUES (?, ?, ?, ?, ?)
            """,
            (collection, record["id"], record["created_at"], record["updated_at"], _dump(record)),
        )
    return record


def get_document(collection: str, doc_id: str) -> Document | None:
    conn = _get_connection()
    with _conn_lock:
        cur = conn.execute(
            "SELECT body_json FROM documents WHERE collection = ? AND id = ?",
            (collection, doc_id),
        )
        row = cur.fetchone()
    return _load(row)


def _where(collection: str, filters: dict[str, Any] | None) -> tuple[str, list[Any]]:
    clauses = ["collection = ?"]
    params: list[Any] = [collection]
    for field, value in (filters or {}).items():
        path = f"$.{field}"
        if value is None:
            clauses.append("json_extract(body_json, ?) IS NULL")
            params.append(path)
        else:
            clauses.append("json_extract(body_json, ?) = ?")
            params.extend([path, value])
    return " AND ".join(clauses), params


def _sort_key(field: str) -> Callable[[Document], tuple[int, Any]]:
    def key(doc: Document) -> tuple[int, Any]:
        value = doc.get(field)
        return (0, "") if value is None else (1, value)

    return key


def find_documents(
    collection: str,
    filters: dict[str, Any] | None = None,
    *,
    predicate: Callable[[Document], bool] | None = None,
    sort_by: str | None = None,
    descending: bool = False,
    limit: int | None = None,
) -> list[Document]:
    """Return documents whose fields equal ``filters`` and that satisfy ``predicate``."""
    where, params = _where(collection, filters)
    conn = _get_connection()
    with _conn_lock:
        cur = conn.execute(
            f"SELECT body_json FROM documents WHERE {where} ORDER BY created_at",
            params,
        )
        rows = cur.fetchall()

    docs = [json.loads(row[0]) for row in rows]
    if predicate is not None:
        docs = [doc for doc in docs if predicate(doc)]
    if sort_by:
        docs.sort(key=_sort_key(sort_by), reverse=descending)
    if limit is not None:
        docs = docs[: max(0, limit)]
    return docs


def find_one(collection: str, filters: dict[str, Any] | None = None, **kwargs: Any) -> Document | None:
    docs = find_documents(collection, filters, limit=1, **kwargs)
    return docs[0] if docs else None


def count_documents(collection: str, filters: dict[str, Any] | None = None) -> int:
    where, params = _where(collection, filters)
    conn = _get_connection()
    with _conn_lock:
        cur = conn.execute(f"SELECT COUNT(*) FROM documents WHERE {where}", params)
        row = cur.fetchone()
    return int(row[0]) if row else 0


def update_document(collection: str, doc_id: str, changes: dict[str, Any]) -> Document | None:
    """Shallow-merge ``changes`` into the stored document. Returns None when it does not exist."""
    with transaction() as conn:
        current = get_document(collection, doc_id)
        if current is None:
            return None
        current.update(changes)
        current["id"] = doc_id
        current["updated_at"] = utc_now_iso()
        conn.execute(
            "UPDATE documents SET updated_at = ?, body_json = ? WHERE collection = ? AND id = ?",
            (current["updated_at"], _dump(current), collection, doc_id),
        )
    return current


def delete_document(collection: str, doc_id: str) -> bool:
    conn = _get_connection()
    with _conn_lock:
        cur = conn.execute(
            "DELETE FROM documents WHERE collection = ? AND id = ?",
            (collection, doc_id),
        )
    return bool(cur.rowcount)


def delete_documents(collection: str, filters: dict[str, Any] | None = None) -> int:
    where, params = _where(collection, filters)
    conn = _get_connection()
    with _conn_lock:
        cur = conn.execute(f"DELETE FROM documents WHERE {where}", params)
    return int(cur.rowcount or 0)


def purge_documents_older_than(collection: str, days: int) -> int:
    cutoff = (utc_now() - timedelta(days=max(1, int(days)))).isoformat()
    conn = _get_connection()
    with _conn_lock:
        cur = conn.execute(
            "DELETE FROM documents WHERE collection = ? AND created_at < ?",
            (collection, cutoff),
        )
    return int(cur.rowcount or 0)


def clear_database() -> None:
    conn = _get_connection()
    with _conn_lock:
        conn.execute("DELETE FROM documents")
