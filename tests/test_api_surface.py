import os
import sys
import tempfile
from pathlib import Path

from fastapi import FastAPI
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATABASE_PATH", os.path.join(tempfile.gettempdir(), "cvbuilder-tests.db"))
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
os.environ.setdefault("ADMIN_EMAILS", "admin@example.com")
os.environ.setdefault("PASSWORD_HASH_ITERATIONS", "1000")

from cvbuilder.api.v1.health import router as health_router
from cvbuilder.main import app


def _registered_routes() -> set[tuple[str, str]]:
    routes = set()
    for route in app.routes:
        for method in getattr(route, "methods", None) or ():
            routes.add((method, route.path))
    return routes


def test_cv_builder_routes_are_registered() -> None:
    routes = _registered_routes()

    expected = {
        ("GET", "/health"),
        ("POST", "/auth/signup"),
        ("POST", "/auth/login"),
        ("GET", "/auth/me"),
        ("POST", "/auth/logout"),
        ("GET", "/cv"),
        ("POST", "/cv"),
        ("GET", "/cv/pricing"),
        ("GET", "/cv/{cv_id}"),
        ("PUT", "/cv/{cv_id}"),
        ("DELETE", "/cv/{cv_id}"),
        ("GET", "/cv/{cv_id}/ats-score"),
        ("GET", "/cv/download/{cv_id}"),
        ("POST", "/payment/initiate"),
        ("POST", "/payment/verify/{reference}"),
        ("POST", "/payment/webhook"),
        ("GET", "/payment/history"),
        ("GET", "/admin/stats"),
        ("GET", "/admin/pricing"),
        ("PUT", "/admin/pricing"),
        ("POST", "/ats/score"),
        ("GET", "/phone/lookup"),
        ("GET", "/phone/format"),
        ("GET", "/phone/validate"),
        ("GET", "/phone/countries"),
        ("GET", "/phone/countries/{iso_code}/operators"),
        ("GET", "/phone/countries/{iso_code}/operators/{operator}"),
    }
    assert expected <= routes


def test_routes_are_mounted_at_root() -> None:
    assert not any(path.startswith("/v1") for _, path in _registered_routes())


def test_health_endpoint_returns_ok() -> None:
    test_app = FastAPI()
    test_app.include_router(health_router)
    client = TestClient(test_app)

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
