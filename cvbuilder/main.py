import logging

import sentry_sdk
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from cvbuilder.api.v1.admin import router as admin_router
from cvbuilder.api.v1.ats import router as ats_router
from cvbuilder.api.v1.auth import router as auth_router
from cvbuilder.api.v1.cvs import router as cv_router
from cvbuilder.api.v1.health import router as health_router
from cvbuilder.api.v1.payments import router as payment_router
from cvbuilder.api.v1.phone import router as phone_router
from cvbuilder.core.config import settings
from cvbuilder.core.cors import cors_allowed_origins
from cvbuilder.core.lifespan import lifespan
from cvbuilder.core.rate_limit import limiter

load_dotenv()
logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = FastAPI(title="CV Builder API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.include_router(health_router, tags=["Health"])
app.include_router(auth_router, tags=["Auth"])
app.include_router(cv_router, tags=["CV"])
app.include_router(payment_router, tags=["Payment"])
app.include_router(admin_router, tags=["Admin"])
app.include_router(ats_router, tags=["ATS"])
app.include_router(phone_router, tags=["Phone"])
