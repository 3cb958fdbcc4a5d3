"""
API v1 Router Aggregator
========================

Quick usage
-----------
    from app.api.v1.routers import build_v1_router
    app.include_router(build_v1_router(), prefix="/api/v1")
"""

from fastapi import APIRouter

from .movies import router as movies_router


def build_v1_router() -> APIRouter:
    """Compose the API v1 surface into a single `APIRouter`."""
    v1 = APIRouter()
    v1.include_router(movies_router)
    return v1


router = build_v1_router()

__all__ = ["build_v1_router", "router", "movies_router"]
