from __future__ import annotations

import logging
import time
from typing import Any

from cvbuilder.core.config import settings
from cvbuilder.integrations import lenco
from cvbuilder.integrations.lenco import InitiatePaymentParams, LencoError
from cvbuilder.schemas.cv import cv_to_wire
from cvbuilder.schemas.payment import InitiatePaymentRequest, WebhookPayload, payment_to_wire
from cvbuilder.services.cv_service import additional_cv_price
from cvbuilder.storage import payments as payment_store

logger = logging.getLogger(__name__)


class PaymentError(Exception):
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


def new_payment_reference(user_id: str) -> str:
    return f"CV_{int(time.time() * 1000)}_{user_id[:8]}"


def _callback_url() -> str:
    return f"{settings.frontend_url}/payment-callback"


def _provider_data(response: dict[str, Any]) -> dict[str, Any]:
    data = response.get("data")
    return data if isinstance(data, dict) else {}


def initiate_payment(user: dict[str, Any], payload: InitiatePaymentRequest) -> dict[str, Any]:
    # Prices are stored in cents of the default currency only.
    currency = settings.default_currency
    if payload.currency and payload.currency.upper() != currency:
        raise PaymentError(f"Unsupported currency; payments are charged in {currency}", status_code=400)

    client = lenco.lenco_client
    phone_info = None
    phone_number = None
    if payload.payment_method == "mobile_money":
        validation = client.validate_phone_number_for_payment(payload.phone_number)
        if not validation.is_valid:
            raise PaymentError(validation.error or "Invalid phone number", status_code=400)
        phone_info = validation.phone_info
        phone_number = phone_info.normalized_number if phone_info else payload.phone_number

    amount = additional_cv_price()
    reference = new_payment_reference(user["id"])
    payment = payment_store.create_payment(
        user_id=user["id"],
        amount=amount,
        currency=currency,
        payment_method=payload.payment_method,
        reference=reference,
        metadata=payload.cv_data.model_dump(by_alias=True),
    )

    params = InitiatePaymentParams(
        amount=amount / 100,
        currency=currency,
        payment_method=payload.payment_method,
        customer_email=user["email"],
        customer_name=user.get("name") or user["email"],
        phone_number=phone_number,
        reference=reference,
        callback_url=_callback_url(),
    )
    try:
        if payload.payment_method == "mobile_money":
            response = client.initiate_mobile_money_payment(params)
        else:
            response = client.initiate_card_payment(params)
    except LencoError as exc:
        payment_store.update_payment_status(payment["id"], "failed")
        logger.warning("payment_initiate_failed reference=%s error=%s", reference, exc)
        raise PaymentError(str(exc), status_code=502) from exc

    logger.info(
        "payment_initiated user_id=%s reference=%s method=%s amount=%s",
        user["id"],
        reference,
        payload.payment_method,
        amount,
    )
    data = _provider_data(response)
    result: dict[str, Any] = {
        "payment": {
            "id": payment["id"],
            "reference": reference,
            "status": payment["status"],
            "amount": amount,
            "currency": currency,
        },
        "authorization_url": data.get("authorization_url"),
        "access_code": data.get("access_code"),
    }
    if phone_info is not None:
        result["phoneInfo"] = phone_info.to_wire()
    return result


def _provider_status(reference: str) -> str | None:
    try:
        verification = lenco.lenco_client.verify_payment(reference)
    except LencoError as exc:
        logger.warning("payment_verify_failed reference=%s error=%s", reference, exc)
        raise PaymentError(str(exc), status_code=502) from exc
    return _provider_data(verification).get("status")


def _success_result(cv: dict[str, Any] | None) -> dict[str, Any]:
    result: dict[str, Any] = {"status": "success", "message": "Payment successful"}
    if cv is not None:
        result["cv"] = cv_to_wire(cv)
    return result


def verify_payment(user_id: str, reference: str) -> dict[str, Any]:
    payment = payment_store.get_payment_by_reference(reference, user_id=user_id)
    if payment is None:
        raise PaymentError("Payment not found", status_code=404)

    # A settled payment is never downgraded by a later provider answer.
    if payment["status"] == "success":
        return _success_result(payment_store.complete_payment(payment["id"]))

    if _provider_status(reference) != "success":
        payment_store.mark_payment_failed(payment["id"])
        logger.info("payment_verified reference=%s status=failed", reference)
        return {"status": "failed", "message": "Payment failed"}

    cv = payment_store.complete_payment(payment["id"])
    logger.info("payment_verified reference=%s status=success cv_id=%s", reference, cv["id"] if cv else None)
    return _success_result(cv)


def handle_webhook(payload: WebhookPayload) -> dict[str, str]:
    """Apply a provider callback.

    The body is unauthenticated, so a success event only completes the
    payment once the provider itself reports the charge as successful.
    """
    logger.info("payment_webhook reference=%s status=%s event=%s", payload.reference, payload.status, payload.event)
    payment = payment_store.get_payment_by_reference(payload.reference)
    if payment is None:
        raise PaymentError("Payment not found", status_code=404)

    if payload.status == "success" and payload.event == "charge.success":
        if payment["status"] == "success" or _provider_status(payload.reference) == "success":
            payment_store.complete_payment(payment["id"])
        else:
            logger.warning("payment_webhook_unconfirmed reference=%s", payload.reference)
    elif payload.status == "failed" or payload.event == "charge.failed":
        payment_store.mark_payment_failed(payment["id"])
    return {"message": "Webhook processed"}


def payment_history(user_id: str) -> list[dict[str, Any]]:
    return [payment_to_wire(record) for record in payment_store.list_payments_for_user(user_id)]
