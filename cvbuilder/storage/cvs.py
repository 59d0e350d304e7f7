from __future__ import annotations

import json
import sqlite3
from typing import Any

from cvbuilder.storage.db import execute, fetch_all, fetch_one, fetch_one_in, fetch_scalar, new_id, transaction, utc_now_iso

_CV_COLUMNS = (
    "id, user_id, title, personal_info_json, education_json, experience_json, skills_json, "
    "is_paid, created_at, updated_at"
)


def _decode(row: dict[str, Any] | None) -> dict[str, Any] | None:
    if row is None:
        return None
    return {
        "id": row["id"],
        "user_id": row["user_id"],
        "title": row["title"],
        "personal_info": json.loads(row["personal_info_json"]),
        "education": json.loads(row["education_json"]),
        "experience": json.loads(row["experience_json"]),
        "skills": json.loads(row["skills_json"]),
        "is_paid": bool(row["is_paid"]),
        "created_at": row["created_at"],
        "updated_at": row["updated_at"],
    }


def _content_columns(content: dict[str, Any]) -> tuple[str, str, str, str]:
    return (
        json.dumps(content.get("personalInfo", {}), ensure_ascii=False),
        json.dumps(content.get("education", []), ensure_ascii=False),
        json.dumps(content.get("experience", []), ensure_ascii=False),
        json.dumps(content.get("skills", []), ensure_ascii=False),
    )


def insert_cv(
    conn: sqlite3.Connection,
    *,
    user_id: str,
    title: str,
    content: dict[str, Any],
    is_paid: bool,
) -> str:
    """Insert a CV on an open connection; ``content`` uses the camelCase wire keys."""
    cv_id = new_id()
    now = utc_now_iso()
    conn.execute(
        f"""
        INSERT INTO cvs ({_CV_COLUMNS})
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (cv_id, user_id, title, *_content_columns(content), 1 if is_paid else 0, now, now),
    )
    return cv_id


def get_cv_in(conn: sqlite3.Connection, cv_id: str) -> dict[str, Any] | None:
    return _decode(fetch_one_in(conn, f"SELECT {_CV_COLUMNS} FROM cvs WHERE id = ?", (cv_id,)))


def create_first_cv(*, user_id: str, title: str, content: dict[str, Any]) -> tuple[dict[str, Any] | None, int]:
    """Insert a free CV only while the user has none.

    Returns ``(record, existing_count)``; ``record`` is ``None`` when the user
    already owns CVs. The count and the insert share one transaction.
    """
    with transaction() as conn:
        existing = int(conn.execute("SELECT COUNT(*) FROM cvs WHERE user_id = ?", (user_id,)).fetchone()[0])
        if existing:
            return None, existing
        cv_id = insert_cv(conn, user_id=user_id, title=title, content=content, is_paid=False)
        record = get_cv_in(conn, cv_id)
    if record is None:
        raise RuntimeError(f"CV {cv_id} vanished after insert.")
    return record, 0


def list_cvs_for_user(user_id: str) -> list[dict[str, Any]]:
    rows = fetch_all(
        f"SELECT {_CV_COLUMNS} FROM cvs WHERE user_id = ? ORDER BY created_at ASC, rowid ASC",
        (user_id,),
    )
    return [_decode(row) for row in rows]


def get_cv_for_user(cv_id: str, user_id: str) -> dict[str, Any] | None:
    return _decode(
        fetch_one(f"SELECT {_CV_COLUMNS} FROM cvs WHERE id = ? AND user_id = ?", (cv_id, user_id))
    )



def update_cv(*, cv_id: str, user_id: str, title: str, content: dict[str, Any]) -> dict[str, Any] | None:
    updated = execute(
        """
        UPDATE cvs
        SET title = ?, personal_info_json = ?, education_json = ?, experience_json = ?,
            skills_json = ?, updated_at = ?
        WHERE id = ? AND user_id = ?
        """,
        (title, *_content_columns(content), utc_now_iso(), cv_id, user_id),
    )
    if not updated:
        return None
    return get_cv_for_user(cv_id, user_id)


def delete_cv(cv_id: str, user_id: str) -> bool:
    return execute("DELETE FROM cvs WHERE id = ? AND user_id = ?", (cv_id, user_id)) > 0


def count_cvs() -> int:
    return int(fetch_scalar("SELECT COUNT(*) FROM cvs") or 0)


def count_paid_cvs() -> int:
    return int(fetch_scalar("SELECT COUNT(*) FROM cvs WHERE is_paid = 1") or 0)
