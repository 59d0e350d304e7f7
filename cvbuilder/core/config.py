from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    log_level: str
    sentry_dsn: str | None
    database_path: str
    auth_token_secret: str
    auth_token_ttl_days: int
    password_hash_iterations: int
    admin_emails: tuple[str, ...]
    rate_limit: str
    rate_limit_enabled: bool
    trust_x_forwarded_for: bool
    cors_allowed_origins: tuple[str, ...]
    default_additional_cv_price: int
    default_currency: str
    lenco_api_key: str
    lenco_base_url: str
    lenco_timeout_s: float
    frontend_url: str
    session_purge_interval_s: int


settings = Settings(
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    database_path=_get_env("DATABASE_PATH", "data/cvbuilder.db") or "data/cvbuilder.db",
    auth_token_secret=_get_env("AUTH_TOKEN_SECRET", "change-me") or "change-me",
    auth_token_ttl_days=_get_env_int("AUTH_TOKEN_TTL_DAYS", 7),
    password_hash_iterations=_get_env_int("PASSWORD_HASH_ITERATIONS", 190_000),
    admin_emails=tuple(email.lower() for email in _get_env_list("ADMIN_EMAILS", [])),
    rate_limit=_get_env("RATE_LIMIT", "30/minute") or "30/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    trust_x_forwarded_for=_get_env_bool("TRUST_X_FORWARDED_FOR", False),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ],
    ),
    default_additional_cv_price=_get_env_int("DEFAULT_ADDITIONAL_CV_PRICE", 100),
    default_currency=(_get_env("DEFAULT_CURRENCY", "USD") or "USD").strip().upper(),
    lenco_api_key=_get_env("LENCO_API_KEY", "") or "",
    lenco_base_url=(_get_env("LENCO_BASE_URL", "https://api.lenco.co/v2") or "https://api.lenco.co/v2").rstrip("/"),
    lenco_timeout_s=float(_get_env("LENCO_TIMEOUT_S", "30") or "30"),
    frontend_url=(_get_env("FRONTEND_URL", "http://localhost:3000") or "http://localhost:3000").rstrip("/"),
    session_purge_interval_s=_get_env_int("SESSION_PURGE_INTERVAL_S", 3600),
)

if settings.auth_token_ttl_days < 1:
    raise RuntimeError("AUTH_TOKEN_TTL_DAYS must be at least 1.")
