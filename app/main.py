"""FastAPI application entrypoint."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1 import v1_router
from app.core.config import get_settings
from app.core.database import dispose_db, init_db
from app.core.errors import AssetServiceError, ValidationError
from app.services.asset_tags import AssetTagCounter
from app.services.sessions import SessionStore

_settings = get_settings()

logging.basicConfig(
    level=_settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    # Startup: ensure tables exist
    await init_db()
    yield
    await dispose_db()


app = FastAPI(
    title="Ashram Assets",
    version="0.1.0",
    description="Asset tracking across ashram sites",
    lifespan=lifespan,
)

# Logins and tag sequences are shared by every request in this process
app.state.sessions = SessionStore()
app.state.tag_counter = AssetTagCounter()

# ── CORS ─────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in _settings.allowed_origins.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Errors ───────────────────────────────────────────────────
@app.exception_handler(AssetServiceError)
async def asset_service_error_handler(_request: Request, exc: AssetServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Unhandled service error: %s", exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.message,
            "code": exc.code,
            "field": exc.field if isinstance(exc, ValidationError) else None,
        },
    )


# ── API routes ───────────────────────────────────────────────
app.include_router(v1_router)


@app.get("/health", tags=["system"])
async def health_check() -> dict:
    return {"status": "ok"}
