# app/main.py
from __future__ import annotations

"""
# Movie Create API — Application Entrypoint (FastAPI)

ASGI application factory and lifecycle for the movie create service.

## Design Goals
- Deterministic, testable **app factory** (`create_app`) with explicit lifespan.
- Centralized exception handling (`app.core.exception_handlers`).
- Graceful shutdown: the async DB engine is disposed on exit.

## Probes
- `/healthz` — liveness (process up).
- `/readyz` — readiness (quick DB check).
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator
import logging
import os

from fastapi import FastAPI

# -- Logging bootstrap (Loguru + stdlib intercept) ----------------------------
# Importing sets up handlers/format; ignore the symbol with _ alias.
from app.core import logger as _logsetup  # noqa: F401

from app.api.v1.routers import router as api_v1_router
from app.core.config import settings
from app.core.exception_handlers import install_exception_handlers
from app.db.session import async_engine, db_healthcheck

logger = logging.getLogger("app.main")


# ─────────────────────────────────────────────────────────────────────────────
# 🔄 Lifespan: startup & shutdown
# ─────────────────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifecycle manager.

    Startup:
        - Log a startup banner.

    Shutdown:
        - Dispose the async DB engine.
    """
    logger.info("✅ %s starting up", settings.PROJECT_NAME)
    try:
        yield
    finally:
        try:
            await async_engine.dispose()
            logger.info("🛑 Database engine disposed")
        except Exception:
            logger.exception("Error disposing DB engine")
        logger.info("🛑 %s shutting down", settings.PROJECT_NAME)


# ─────────────────────────────────────────────────────────────────────────────
# 🏗️ App factory
# ─────────────────────────────────────────────────────────────────────────────
def create_app() -> FastAPI:
    """
    Build and configure the FastAPI app instance.

    Returns:
        FastAPI: application with exception handlers, routers, and
        health/readiness endpoints.
    """
    enable_docs = settings.ENABLE_DOCS

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        docs_url="/docs" if enable_docs else None,
        redoc_url="/redoc" if enable_docs else None,
        openapi_url="/openapi.json" if enable_docs else None,
        lifespan=lifespan,
    )

    install_exception_handlers(app)

    # ── Routers (versioned API) ─────────────────────────────────────────────
    app.include_router(api_v1_router, prefix=settings.API_V1_STR, tags=["v1"])

    # ── Meta endpoints ──────────────────────────────────────────────────────
    @app.get("/healthz", tags=["meta"])
    async def healthz() -> dict[str, bool]:
        """Liveness probe. No external checks."""
        return {"ok": True}

    @app.get("/readyz", tags=["meta"])
    async def readyz() -> dict[str, object]:
        """Readiness probe (quick DB check)."""
        db_ok = await db_healthcheck()
        return {"ready": db_ok, "checks": {"db": db_ok}}

    return app


# ─────────────────────────────────────────────────────────────────────────────
# 🚀 Module-level ASGI app for Uvicorn/Gunicorn
# ─────────────────────────────────────────────────────────────────────────────
app = create_app()
__all__ = ["create_app", "app"]


# Local dev runner (prefer: `uvicorn app.main:app --reload`)
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "1") == "1",
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
