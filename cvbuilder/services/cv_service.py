from __future__ import annotations

import logging
import re
from typing import Any

from cvbuilder.core.config import settings
from cvbuilder.schemas.cv import CVContent, CVDocument, cv_to_wire
from cvbuilder.scoring.ats import ATSScoreResult, score_cv
from cvbuilder.services.pdf_renderer import render_cv_pdf
from cvbuilder.storage import cvs as cv_store
from cvbuilder.storage import pricing as pricing_store

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_RE = re.compile(r"[^A-Za-z0-9 ._-]+")


class CVServiceError(Exception):
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class PaymentRequiredError(CVServiceError):
    def __init__(self, *, cv_count: int, price: int, currency: str):
        message = f"Additional CVs cost {_format_price(price, currency)}. Please confirm payment."
        super().__init__(message, status_code=402)
        self.cv_count = cv_count
        self.price = price
        self.currency = currency

    def to_payload(self) -> dict[str, Any]:
        return {
            "error": "Payment required",
            "message": str(self),
            "requiresPayment": True,
            "cvCount": self.cv_count,
            "price": self.price,
            "currency": self.currency,
        }


def _format_price(price_cents: int, currency: str) -> str:
    amount = price_cents / 100
    if currency == "USD":
        return f"${amount:g}" if amount == int(amount) else f"${amount:.2f}"
    return f"{amount:.2f} {currency}"


def current_pricing() -> dict[str, Any]:
    record = pricing_store.get_current_pricing()
    if record is None:
        return {
            "additionalCvPrice": settings.default_additional_cv_price,
            "currency": settings.default_currency,
            "createdAt": None,
        }
    return {
        "additionalCvPrice": int(record["additional_cv_price"]),
        "currency": settings.default_currency,
        "createdAt": record["created_at"],
    }


def additional_cv_price() -> int:
    return int(current_pricing()["additionalCvPrice"])


def _content_of(document: CVDocument) -> dict[str, Any]:
    return document.content().model_dump(by_alias=True)


def _owned_cv(user_id: str, cv_id: str) -> dict[str, Any]:
    record = cv_store.get_cv_for_user(cv_id, user_id)
    if record is None:
        raise CVServiceError("CV not found", status_code=404)
    return record


def list_cvs(user_id: str) -> list[dict[str, Any]]:
    return [cv_to_wire(record) for record in cv_store.list_cvs_for_user(user_id)]


def get_cv(user_id: str, cv_id: str) -> dict[str, Any]:
    return cv_to_wire(_owned_cv(user_id, cv_id))


def create_cv(user_id: str, payload: CVDocument) -> tuple[dict[str, Any], str]:
    """Create the user's free CV; any further CV comes from a completed payment."""
    record, existing = cv_store.create_first_cv(user_id=user_id, title=payload.title, content=_content_of(payload))
    if record is None:
        raise PaymentRequiredError(
            cv_count=existing,
            price=additional_cv_price(),
            currency=settings.default_currency,
        )
    logger.info("cv_created user_id=%s cv_id=%s paid=%s", user_id, record["id"], record["is_paid"])
    return cv_to_wire(record), "Free CV created successfully"


def update_cv(user_id: str, cv_id: str, payload: CVDocument) -> dict[str, Any]:
    record = cv_store.update_cv(
        cv_id=cv_id,
        user_id=user_id,
        title=payload.title,
        content=_content_of(payload),
    )
    if record is None:
        raise CVServiceError("CV not found", status_code=404)
    return cv_to_wire(record)


def delete_cv(user_id: str, cv_id: str) -> None:
    if not cv_store.delete_cv(cv_id, user_id):
        raise CVServiceError("CV not found", status_code=404)
    logger.info("cv_deleted user_id=%s cv_id=%s", user_id, cv_id)


def _stored_content(record: dict[str, Any]) -> CVContent:
    return CVContent.model_validate(
        {
            "personalInfo": record["personal_info"],
            "education": record["education"],
            "experience": record["experience"],
            "skills": record["skills"],
        }
    )


def score_stored_cv(user_id: str, cv_id: str) -> ATSScoreResult:
    return score_cv(_stored_content(_owned_cv(user_id, cv_id)))


def download_filename(title: str) -> str:
    cleaned = _UNSAFE_FILENAME_RE.sub("", title or "").strip()
    return f"{cleaned or 'cv'}.pdf"


def export_cv_pdf(user_id: str, cv_id: str) -> tuple[str, bytes]:
    record = _owned_cv(user_id, cv_id)
    content = _stored_content(record)
    return download_filename(record["title"]), render_cv_pdf(record["title"], content)
