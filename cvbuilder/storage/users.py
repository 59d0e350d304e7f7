from __future__ import annotations

from typing import Any

from cvbuilder.storage.db import execute, fetch_one, fetch_scalar, new_id, utc_now_iso

_USER_COLUMNS = "id, email, password_hash, password_salt, name, is_admin, created_at, updated_at"


def _decode(row: dict[str, Any] | None) -> dict[str, Any] | None:
    if row is None:
        return None
    row["is_admin"] = bool(row["is_admin"])
    return row


def create_user(
    *,
    email: str,
    password_hash: str,
    password_salt: str,
    name: str | None,
    is_admin: bool = False,
) -> dict[str, Any]:
    user_id = new_id()
    now = utc_now_iso()
    execute(
        """
        INSERT INTO users (
            id, email, password_hash, password_salt, name, is_admin, created_at, updated_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (user_id, email, password_hash, password_salt, name, 1 if is_admin else 0, now, now),
    )
    user = get_user_by_id(user_id)
    if user is None:
        raise RuntimeError(f"User {user_id} vanished after insert.")
    return user


def get_user_by_id(user_id: str) -> dict[str, Any] | None:
    return _decode(fetch_one(f"SELECT {_USER_COLUMNS} FROM users WHERE id = ?", (user_id,)))


def get_user_by_email(email: str) -> dict[str, Any] | None:
    return _decode(fetch_one(f"SELECT {_USER_COLUMNS} FROM users WHERE email = ?", (email,)))


def count_users() -> int:
    return int(fetch_scalar("SELECT COUNT(*) FROM users") or 0)
