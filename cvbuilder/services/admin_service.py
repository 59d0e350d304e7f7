from __future__ import annotations

import logging
from typing import Any

from cvbuilder.services.cv_service import current_pricing
from cvbuilder.storage import cvs as cv_store
from cvbuilder.storage import pricing as pricing_store
from cvbuilder.storage import users as user_store

logger = logging.getLogger(__name__)


def dashboard_stats() -> dict[str, Any]:
    total_cvs = cv_store.count_cvs()
    paid_cvs = cv_store.count_paid_cvs()
    return {
        "stats": {
            "totalUsers": user_store.count_users(),
            "totalCvs": total_cvs,
            "freeCvs": total_cvs - paid_cvs,
            "paidCvs": paid_cvs,
        },
        "pricing": current_pricing(),
    }


def update_pricing(admin_id: str, price_cents: int) -> dict[str, Any]:
    pricing_store.set_additional_cv_price(price_cents)
    logger.info("pricing_updated admin_id=%s additional_cv_price=%s", admin_id, price_cents)
    return {"pricing": current_pricing(), "message": "Pricing updated successfully"}
