from __future__ import annotations

import base64
import hashlib
import hmac
import json
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

from cvbuilder.core.config import settings


class InvalidTokenError(Exception):
    pass


def _b64url_encode(value: bytes) -> str:
    return base64.urlsafe_b64encode(value).decode("ascii").rstrip("=")


def _b64url_decode(value: str) -> bytes:
    padding = "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode(value + padding)


def new_password_salt() -> str:
    return secrets.token_hex(16)


def hash_password(password: str, salt: str) -> str:
    return hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        settings.password_hash_iterations,
    ).hex()


def verify_password(password: str, salt: str, expected_hash: str) -> bool:
    return hmac.compare_digest(hash_password(password, salt), expected_hash)


def _sign(payload_b64: str) -> bytes:
    return hmac.new(
        settings.auth_token_secret.encode("utf-8"),
        payload_b64.encode("utf-8"),
        hashlib.sha256,
    ).digest()


def create_auth_token(user_id: str, *, now: datetime | None = None) -> tuple[str, datetime]:
    issued_at = now or datetime.now(timezone.utc)
    expires_at = issued_at + timedelta(days=settings.auth_token_ttl_days)
    payload = {
        "uid": user_id,
        "exp": int(expires_at.timestamp()),
        # Two logins within the same second still get distinct tokens.
        "jti": secrets.token_urlsafe(8),
    }
    payload_b64 = _b64url_encode(json.dumps(payload, separators=(",", ":"), sort_keys=True).encode("utf-8"))
    return f"{payload_b64}.{_b64url_encode(_sign(payload_b64))}", expires_at


def decode_auth_token(token: str) -> dict[str, Any]:
    parts = (token or "").split(".")
    if len(parts) != 2:
        raise InvalidTokenError("malformed token")

    payload_b64, signature_b64 = parts
    try:
        provided = _b64url_decode(signature_b64)
    except (ValueError, TypeError) as exc:
        raise InvalidTokenError("malformed signature") from exc
    if not hmac.compare_digest(_sign(payload_b64), provided):
        raise InvalidTokenError("bad signature")

    try:
        payload = json.loads(_b64url_decode(payload_b64).decode("utf-8"))
    except (ValueError, TypeError) as exc:
        raise InvalidTokenError("malformed payload") from exc

    if not isinstance(payload, dict) or not payload.get("uid"):
        raise InvalidTokenError("missing subject")
    if int(payload.get("exp", 0)) < int(datetime.now(timezone.utc).timestamp()):
        raise InvalidTokenError("expired")
    return payload


def extract_bearer_token(authorization: str | None) -> str | None:
    value = (authorization or "").strip()
    if value.lower().startswith("bearer "):
        token = value[7:].strip()
        return token or None
    return None
