from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status

from cvbuilder.core.rate_limit import rate_limit
from cvbuilder.dependencies import get_bearer_token, get_current_user
from cvbuilder.schemas.auth import AuthResponse, LoginRequest, SignupRequest
from cvbuilder.services import auth_service
from cvbuilder.services.auth_service import AuthError, user_to_wire

router = APIRouter()


def _raise_auth_error(exc: AuthError) -> None:
    raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc


@router.post("/auth/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@rate_limit()
def signup(request: Request, payload: SignupRequest):
    _ = request
    try:
        return auth_service.signup(payload)
    except AuthError as exc:
        _raise_auth_error(exc)


@router.post("/auth/login", response_model=AuthResponse)
@rate_limit()
def login(request: Request, payload: LoginRequest):
    _ = request
    try:
        return auth_service.login(payload)
    except AuthError as exc:
        _raise_auth_error(exc)


@router.get("/auth/me")
def me(user: dict[str, Any] = Depends(get_current_user)):
    return {"user": user_to_wire(user).model_dump(by_alias=True)}


@router.post("/auth/logout")
def logout(
    user: dict[str, Any] = Depends(get_current_user),
    token: str | None = Depends(get_bearer_token),
):
    _ = user
    if token:
        auth_service.logout(token)
    return {"message": "Logged out"}
