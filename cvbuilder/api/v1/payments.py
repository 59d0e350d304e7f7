from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from cvbuilder.dependencies import get_current_user
from cvbuilder.schemas.payment import InitiatePaymentRequest, WebhookPayload
from cvbuilder.services import payment_service
from cvbuilder.services.payment_service import PaymentError

router = APIRouter()


def _raise_payment_error(exc: PaymentError) -> None:
    raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc


@router.post("/payment/initiate")
def initiate_payment(payload: InitiatePaymentRequest, user: dict[str, Any] = Depends(get_current_user)):
    try:
        return payment_service.initiate_payment(user, payload)
    except PaymentError as exc:
        _raise_payment_error(exc)


@router.post("/payment/verify/{reference}")
def verify_payment(reference: str, user: dict[str, Any] = Depends(get_current_user)):
    try:
        return payment_service.verify_payment(user["id"], reference)
    except PaymentError as exc:
        _raise_payment_error(exc)


@router.post("/payment/webhook")
def payment_webhook(payload: WebhookPayload):
    try:
        return payment_service.handle_webhook(payload)
    except PaymentError as exc:
        _raise_payment_error(exc)


@router.get("/payment/history")
def payment_history(user: dict[str, Any] = Depends(get_current_user)):
    return {"payments": payment_service.payment_history(user["id"])}
