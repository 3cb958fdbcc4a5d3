"""
Movies · Create
===============

Endpoints
---------
- POST   /movies        : Validate and create a movie (server token required)

Practices
---------
- The acting client is resolved from the server-token header inside the same
  transaction as the insert.
- This route owns the transaction: the service never commits; we commit once
  it returns and roll back on any classified failure.
- Errors surface as problem+json via `app.core.exception_handlers`.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import ErrorKind, MovieError
from app.db.session import get_async_db
from app.schemas.movie import MovieCreateIn, MovieOut
from app.services.client_service import ServerTokenResolver
from app.services.movie_service import create_movie

router = APIRouter(tags=["Movies"])

logger = logging.getLogger(__name__)

OP_ROUTE = "movies.create_movie_route"


async def _release(db: AsyncSession) -> None:
    """Roll back whatever is still open; the error being raised stays the primary one."""
    if not db.in_transaction():
        return
    try:
        await db.rollback()
    except Exception:
        logger.exception("Rollback failed while handling a movie create error")


@router.post(
    "/movies",
    response_model=MovieOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create movie",
)
async def create_movie_route(
    payload: MovieCreateIn,
    request: Request,
    db: AsyncSession = Depends(get_async_db),
) -> MovieOut:
    """
    Create a new **Movie**.

    Steps
    -----
    1) Read the server token from the configured header.
    2) Run the create service (validate → resolve client → stored routine).
    3) Commit; the response carries the database-assigned audit timestamps.
    """
    token = request.headers.get(settings.SERVER_TOKEN_HEADER, "")
    movie = payload.to_movie()

    try:
        await create_movie(
            movie,
            db,
            ServerTokenResolver(token),
            timeout=settings.MOVIE_CREATE_TIMEOUT_SECONDS,
        )
    except MovieError:
        # Validation/identity failures leave the transaction to us.
        await _release(db)
        raise

    try:
        await db.commit()
    except Exception as exc:
        logger.exception("Commit failed for movie %r", movie.title)
        await _release(db)
        raise MovieError(
            op=OP_ROUTE, kind=ErrorKind.DATABASE, message=f"Commit failed: {exc}", cause=exc
        ) from exc

    return MovieOut.from_movie(movie)
