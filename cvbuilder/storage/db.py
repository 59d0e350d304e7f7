from __future__ import annotations

import logging
import os
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator

from cvbuilder.core.config import settings

logger = logging.getLogger(__name__)

_conn: sqlite3.Connection | None = None
_conn_lock = threading.RLock()

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        email TEXT NOT NULL UNIQUE,
        password_hash TEXT NOT NULL,
        password_salt TEXT NOT NULL,
        name TEXT,
        is_admin INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS sessions (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        token TEXT NOT NULL UNIQUE,
        expires_at TEXT NOT NULL,
        created_at TEXT NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS cvs (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        title TEXT NOT NULL,
        personal_info_json TEXT NOT NULL,
        education_json TEXT NOT NULL,
        experience_json TEXT NOT NULL,
        skills_json TEXT NOT NULL,
        is_paid INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS payments (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        cv_id TEXT REFERENCES cvs(id) ON DELETE SET NULL,
        amount INTEGER NOT NULL,
        currency TEXT NOT NULL DEFAULT 'USD',
        payment_method TEXT NOT NULL,
        reference TEXT UNIQUE,
        status TEXT NOT NULL,
        metadata_json TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS pricing (
        id TEXT PRIMARY KEY,
        additional_cv_price INTEGER NOT NULL,
        created_at TEXT NOT NULL
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_sessions_expiry ON sessions (expires_at);",
    "CREATE INDEX IF NOT EXISTS idx_cvs_user ON cvs (user_id, created_at);",
    "CREATE INDEX IF NOT EXISTS idx_payments_user ON payments (user_id, created_at);",
    "CREATE INDEX IF NOT EXISTS idx_pricing_created_at ON pricing (created_at);",
)

_TABLES_IN_DELETE_ORDER = ("payments", "sessions", "cvs", "pricing", "users")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    return utc_now().isoformat()


def new_id() -> str:
    return str(uuid.uuid4())


def get_connection() -> sqlite3.Connection:
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
        _conn.execute("PRAGMA foreign_keys=ON;")
        for statement in _SCHEMA:
            _conn.execute(statement)
        logger.info("database_ready path=%s", db_path)
        return _conn


def init_db() -> None:
    get_connection()


def _row_to_dict(cursor: sqlite3.Cursor, row: tuple) -> dict[str, Any]:
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def fetch_one(query: str, params: tuple[Any, ...] = ()) -> dict[str, Any] | None:
    conn = get_connection()
    with _conn_lock:
        cur = conn.execute(query, params)
        row = cur.fetchone()
        return _row_to_dict(cur, row) if row else None


def fetch_all(query: str, params: tuple[Any, ...] = ()) -> list[dict[str, Any]]:
    conn = get_connection()
    with _conn_lock:
        cur = conn.execute(query, params)
        return [_row_to_dict(cur, row) for row in cur.fetchall()]


def fetch_scalar(query: str, params: tuple[Any, ...] = ()) -> Any:
    conn = get_connection()
    with _conn_lock:
        row = conn.execute(query, params).fetchone()
        return row[0] if row else None


def execute(query: str, params: tuple[Any, ...] = ()) -> int:
    conn = get_connection()
    with _conn_lock:
        cur = conn.execute(query, params)
        return int(cur.rowcount or 0)


@contextmanager
def transaction() -> Iterator[sqlite3.Connection]:
    conn = get_connection()
    with _conn_lock:
        conn.execute("BEGIN IMMEDIATE")
        try:
            yield conn
        except Exception:
            conn.execute("ROLLBACK")
            raise
        conn.execute("COMMIT")


def fetch_one_in(conn: sqlite3.Connection, query: str, params: tuple[Any, ...] = ()) -> dict[str, Any] | None:
    cur = conn.execute(query, params)
    row = cur.fetchone()
    return _row_to_dict(cur, row) if row else None


def reset_database() -> None:
    with transaction() as conn:
        for table in _TABLES_IN_DELETE_ORDER:
            conn.execute(f"DELETE FROM {table}")
