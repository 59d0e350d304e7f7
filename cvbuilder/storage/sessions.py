from __future__ import annotations

from datetime import datetime
from typing import Any

from cvbuilder.storage.db import execute, fetch_one, new_id, utc_now_iso


def create_session(*, user_id: str, token: str, expires_at: datetime) -> dict[str, Any]:
    session_id = new_id()
    execute(
        """
        INSERT INTO sessions (id, user_id, token, expires_at, created_at)
        VALUES (?, ?, ?, ?, ?)
        """,
        (session_id, user_id, token, expires_at.isoformat(), utc_now_iso()),
    )
    return {"id": session_id, "user_id": user_id, "token": token, "expires_at": expires_at}


def get_session_by_token(token: str) -> dict[str, Any] | None:
    row = fetch_one(
        "SELECT id, user_id, token, expires_at, created_at FROM sessions WHERE token = ?",
        (token,),
    )
    if row is None:
        return None
    row["expires_at"] = datetime.fromisoformat(row["expires_at"])
    return row


def delete_session(token: str) -> bool:
    return execute("DELETE FROM sessions WHERE token = ?", (token,)) > 0


def purge_expired_sessions() -> int:
    return execute("DELETE FROM sessions WHERE expires_at <= ?", (utc_now_iso(),))
