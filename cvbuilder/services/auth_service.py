from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from typing import Any

from cvbuilder.core.config import settings
from cvbuilder.core.security import (
    InvalidTokenError,
    create_auth_token,
    decode_auth_token,
    hash_password,
    new_password_salt,
    verify_password,
)
from cvbuilder.schemas.auth import AuthResponse, LoginRequest, SignupRequest, UserOut
from cvbuilder.storage import sessions as session_store
from cvbuilder.storage import users as user_store

logger = logging.getLogger(__name__)


class AuthError(Exception):
    def __init__(self, message: str, status_code: int = 401):
        super().__init__(message)
        self.status_code = status_code


def user_to_wire(user: dict[str, Any]) -> UserOut:
    return UserOut(id=user["id"], email=user["email"], name=user.get("name"), is_admin=bool(user.get("is_admin")))


def _issue_session(user: dict[str, Any]) -> AuthResponse:
    token, expires_at = create_auth_token(user["id"])
    session_store.create_session(user_id=user["id"], token=token, expires_at=expires_at)
    return AuthResponse(user=user_to_wire(user), token=token)


def signup(payload: SignupRequest) -> AuthResponse:
    if user_store.get_user_by_email(payload.email) is not None:
        raise AuthError("User already exists", status_code=400)

    salt = new_password_salt()
    try:
        user = user_store.create_user(
            email=payload.email,
            password_hash=hash_password(payload.password, salt),
            password_salt=salt,
            name=(payload.name or "").strip() or None,
            is_admin=payload.email in settings.admin_emails,
        )
    except sqlite3.IntegrityError as exc:
        raise AuthError("User already exists", status_code=400) from exc

    logger.info("user_signed_up user_id=%s admin=%s", user["id"], user["is_admin"])
    return _issue_session(user)


def login(payload: LoginRequest) -> AuthResponse:
    user = user_store.get_user_by_email(payload.email)
    if user is None or not verify_password(payload.password, user["password_salt"], user["password_hash"]):
        logger.info("login_failed")
        raise AuthError("Invalid credentials")
    return _issue_session(user)


def logout(token: str) -> None:
    session_store.delete_session(token)


def authenticate(token: str | None) -> dict[str, Any]:
    if not token:
        raise AuthError("Access token required")

    try:
        claims = decode_auth_token(token)
    except InvalidTokenError as exc:
        logger.info("token_rejected reason=%s", exc)
        raise AuthError("Invalid or expired token") from exc

    session = session_store.get_session_by_token(token)
    if session is None or session["expires_at"] < datetime.now(timezone.utc):
        raise AuthError("Invalid or expired token")

    user = user_store.get_user_by_id(str(claims["uid"]))
    if user is None or user["id"] != session["user_id"]:
        raise AuthError("User not found")
    return user
