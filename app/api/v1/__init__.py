"""Versioned API (v1).

Import the aggregated router from the routers subpackage:

    from app.api.v1.routers import router as api_v1_router
"""

__all__ = []
