from __future__ import annotations

from typing import Any

from cvbuilder.storage.db import execute, fetch_one, new_id, utc_now_iso


def get_current_pricing() -> dict[str, Any] | None:
    return fetch_one(
        """
        SELECT id, additional_cv_price, created_at
        FROM pricing
        ORDER BY created_at DESC, rowid DESC
        LIMIT 1
        """
    )


def set_additional_cv_price(price_cents: int) -> dict[str, Any]:
    pricing_id = new_id()
    created_at = utc_now_iso()
    execute(
        "INSERT INTO pricing (id, additional_cv_price, created_at) VALUES (?, ?, ?)",
        (pricing_id, price_cents, created_at),
    )
    return {"id": pricing_id, "additional_cv_price": price_cents, "created_at": created_at}
