from __future__ import annotations

import json
from typing import Any, Literal

from cvbuilder.storage.cvs import get_cv_in, insert_cv
from cvbuilder.storage.db import execute, fetch_all, fetch_one, fetch_one_in, new_id, transaction, utc_now_iso

PaymentStatus = Literal["pending", "success", "failed"]

_PAYMENT_COLUMNS = (
    "id, user_id, cv_id, amount, currency, payment_method, reference, status, metadata_json, "
    "created_at, updated_at"
)


def _decode(row: dict[str, Any] | None) -> dict[str, Any] | None:
    if row is None:
        return None
    raw_metadata = row.pop("metadata_json")
    row["metadata"] = json.loads(raw_metadata) if raw_metadata else None
    return row


def create_payment(
    *,
    user_id: str,
    amount: int,
    currency: str,
    payment_method: str,
    reference: str,
    metadata: dict[str, Any] | None,
) -> dict[str, Any]:
    payment_id = new_id()
    now = utc_now_iso()
    execute(
        f"""
        INSERT INTO payments ({_PAYMENT_COLUMNS})
        VALUES (?, ?, NULL, ?, ?, ?, ?, 'pending', ?, ?, ?)
        """,
        (
            payment_id,
            user_id,
            amount,
            currency,
            payment_method,
            reference,
            json.dumps(metadata, ensure_ascii=False) if metadata is not None else None,
            now,
            now,
        ),
    )
    payment = get_payment_by_id(payment_id)
    if payment is None:
        raise RuntimeError(f"Payment {payment_id} vanished after insert.")
    return payment


def get_payment_by_id(payment_id: str) -> dict[str, Any] | None:
    return _decode(fetch_one(f"SELECT {_PAYMENT_COLUMNS} FROM payments WHERE id = ?", (payment_id,)))


def get_payment_by_reference(reference: str, user_id: str | None = None) -> dict[str, Any] | None:
    if user_id is None:
        row = fetch_one(f"SELECT {_PAYMENT_COLUMNS} FROM payments WHERE reference = ?", (reference,))
    else:
        row = fetch_one(
            f"SELECT {_PAYMENT_COLUMNS} FROM payments WHERE reference = ? AND user_id = ?",
            (reference, user_id),
        )
    return _decode(row)


def list_payments_for_user(user_id: str) -> list[dict[str, Any]]:
    rows = fetch_all(
        f"SELECT {_PAYMENT_COLUMNS} FROM payments WHERE user_id = ? ORDER BY created_at DESC, rowid DESC",
        (user_id,),
    )
    return [_decode(row) for row in rows]


def update_payment_status(payment_id: str, status: PaymentStatus) -> None:
    execute(
        "UPDATE payments SET status = ?, updated_at = ? WHERE id = ?",
        (status, utc_now_iso(), payment_id),
    )


def mark_payment_failed(payment_id: str) -> bool:
    """Mark a payment failed unless it already succeeded."""
    return (
        execute(
            "UPDATE payments SET status = 'failed', updated_at = ? WHERE id = ? AND status != 'success'",
            (utc_now_iso(), payment_id),
        )
        > 0
    )


def complete_payment(payment_id: str) -> dict[str, Any] | None:
    """Mark a payment successful and create its CV from the stored metadata.

    Runs in one transaction so a verify call racing a webhook cannot create
    two CVs. Returns the CV attached to the payment, or ``None`` when the
    payment carries no CV data.
    """
    with transaction() as conn:
        row = _decode(fetch_one_in(conn, f"SELECT {_PAYMENT_COLUMNS} FROM payments WHERE id = ?", (payment_id,)))
        if row is None:
            return None
        now = utc_now_iso()
        conn.execute("UPDATE payments SET status = 'success', updated_at = ? WHERE id = ?", (now, payment_id))

        if row["cv_id"]:
            existing = get_cv_in(conn, row["cv_id"])
            if existing is not None:
                return existing

        cv_data = row["metadata"]
        if not cv_data:
            return None

        cv_id = insert_cv(
            conn,
            user_id=row["user_id"],
            title=cv_data.get("title") or "Untitled CV",
            content=cv_data,
            is_paid=True,
        )
        conn.execute("UPDATE payments SET cv_id = ?, updated_at = ? WHERE id = ?", (cv_id, now, payment_id))
        return get_cv_in(conn, cv_id)
