from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from cvbuilder.schemas.cv import CamelModel, CVDocument


class InitiatePaymentRequest(CamelModel):
    payment_method: Literal["mobile_money", "card"]
    phone_number: str | None = Field(default=None, max_length=40)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    cv_data: CVDocument


class WebhookPayload(BaseModel):
    reference: str = Field(min_length=1, max_length=200)
    status: str = ""
    event: str = ""
    data: dict[str, Any] | None = None


class PaymentOut(CamelModel):
    id: str
    user_id: str
    cv_id: str | None = None
    amount: int
    currency: str
    payment_method: str
    reference: str
    status: str
    created_at: str
    updated_at: str


def payment_to_wire(record: dict[str, Any]) -> dict[str, Any]:
    return PaymentOut.model_validate(record).model_dump(by_alias=True)
