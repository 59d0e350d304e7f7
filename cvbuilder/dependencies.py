from __future__ import annotations

from typing import Any

from fastapi import Depends, Header, HTTPException, status

from cvbuilder.core.security import extract_bearer_token
from cvbuilder.services.auth_service import AuthError, authenticate


def get_bearer_token(authorization: str | None = Header(default=None)) -> str | None:
    return extract_bearer_token(authorization)


def get_current_user(token: str | None = Depends(get_bearer_token)) -> dict[str, Any]:
    try:
        return authenticate(token)
    except AuthError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc


def require_admin(user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    if not user.get("is_admin"):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user
