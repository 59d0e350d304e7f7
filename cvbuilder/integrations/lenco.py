from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Literal

import httpx

from cvbuilder.core.config import settings
from cvbuilder.phone.classifier import PhoneNumberInfo, classify_phone_number, format_phone_number

logger = logging.getLogger(__name__)

PaymentMethod = Literal["mobile_money", "card"]


class LencoError(Exception):
    pass


@dataclass(frozen=True)
class InitiatePaymentParams:
    amount: float
    currency: str
    payment_method: PaymentMethod
    customer_email: str
    customer_name: str
    reference: str
    phone_number: str | None = None
    callback_url: str | None = None


@dataclass(frozen=True)
class PhoneValidation:
    is_valid: bool
    phone_info: PhoneNumberInfo | None = None
    error: str | None = None


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return fallback


class LencoClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.lenco.co/v2",
        timeout_s: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, path: str, *, json: dict[str, Any] | None = None, fallback: str) -> dict[str, Any]:
        try:
            with httpx.Client(
                base_url=self._base_url,
                timeout=self._timeout_s,
                transport=self._transport,
            ) as client:
                response = client.request(method, path, json=json, headers=self._headers())
        except httpx.HTTPError as exc:
            logger.warning("lenco_transport_error path=%s error=%s", path, exc)
            raise LencoError(fallback) from exc

        if response.is_error:
            logger.warning("lenco_http_error path=%s status=%s body=%s", path, response.status_code, response.text[:500])
            raise LencoError(_error_message(response, fallback))

        try:
            body = response.json()
        except ValueError as exc:
            raise LencoError(fallback) from exc
        if not isinstance(body, dict):
            raise LencoError(fallback)
        return body

    def initiate_mobile_money_payment(self, params: InitiatePaymentParams) -> dict[str, Any]:
        return self._request(
            "POST",
            "/payments/mobile-money/initialize",
            json={
                "amount": params.amount,
                "currency": params.currency,
                "email": params.customer_email,
                "name": params.customer_name,
                "phone_number": params.phone_number,
                "reference": params.reference,
                "callback_url": params.callback_url,
            },
            fallback="Failed to initiate mobile money payment",
        )

    def initiate_card_payment(self, params: InitiatePaymentParams) -> dict[str, Any]:
        return self._request(
            "POST",
            "/payments/card/initialize",
            json={
                "amount": params.amount,
                "currency": params.currency,
                "email": params.customer_email,
                "name": params.customer_name,
                "reference": params.reference,
                "callback_url": params.callback_url,
            },
            fallback="Failed to initiate card payment",
        )

    def verify_payment(self, reference: str) -> dict[str, Any]:
        return self._request(
            "GET",
            f"/payments/verify/{reference}",
            fallback="Failed to verify payment",
        )

    @staticmethod
    def validate_phone_number_for_payment(phone_number: str | None) -> PhoneValidation:
        if not (phone_number or "").strip():
            return PhoneValidation(is_valid=False, error="Phone number is required")
        info = classify_phone_number(phone_number or "")
        if not info.is_valid:
            return PhoneValidation(is_valid=False, phone_info=info, error="Unsupported or invalid mobile money number")
        return PhoneValidation(is_valid=True, phone_info=info)

    @staticmethod
    def format_phone_number_for_display(phone_number: str) -> str:
        return format_phone_number(phone_number)


def get_lenco_client() -> LencoClient:
    return LencoClient(
        api_key=settings.lenco_api_key,
        base_url=settings.lenco_base_url,
        timeout_s=settings.lenco_timeout_s,
    )


lenco_client = get_lenco_client()
