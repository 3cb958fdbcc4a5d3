# app/services/movie_service.py
from __future__ import annotations

"""
Movie create service
====================

Validate-then-persist flow for a single :class:`~app.schemas.movie.Movie`.

Steps
-----
1) **Validate** business fields (pure, short-circuit, no I/O).
2) **Resolve** the acting client/user from the explicit identity.
3) **Attribute** Create*/Update* audit fields to that actor.
4) **Persist** through exactly one `insert_movie` call on the storage port,
   inside the caller's open transaction.
5) **Scan** database-assigned timestamps back onto the movie.

Transactions
------------
- The caller owns the transaction: this service never begins or commits one.
- Validation and identity failures leave the transaction untouched.
- Storage failures roll the session back; a failed rollback is raised as its
  own `DATABASE` error with the first error kept on `.original`.

Cancellation
------------
- `timeout` bounds identity lookup + insert; expiry raises `CANCELED`.
- A cancelled task still attempts the rollback, then re-raises
  `asyncio.CancelledError` unchanged.
"""

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ErrorKind, MovieError
from app.repositories.movies import MovieRepositoryProtocol, SqlMovieRepository
from app.schemas.movie import Movie, is_unset_time
from app.services.client_service import Actor, Identity, resolve_actor

logger = logging.getLogger(__name__)

T = TypeVar("T")

OP_VALIDATE = "movie_service.validate_movie"
OP_CREATE = "movie_service.create_movie"

# The first film was in 1878.
EARLIEST_FILM_YEAR = 1878

UNIQUE_VIOLATION = "23505"


# ─────────────────────────────────────────────────────────────
# ✅ Validation
# ─────────────────────────────────────────────────────────────
def _invalid(param: str, message: str) -> MovieError:
    return MovieError(op=OP_VALIDATE, kind=ErrorKind.VALIDATION, param=param, message=message)


def _missing(field: str) -> MovieError:
    return _invalid(field, f"{field} is a required field")


def validate_movie(movie: Movie) -> Optional[MovieError]:
    """Return the first business-rule violation on `movie`, or None.

    Order is fixed: Title, Year, Rated, Released, RunTime, Director, Writer.
    """
    if movie.title == "":
        return _missing("Title")
    if movie.year < EARLIEST_FILM_YEAR:
        return _invalid("Year", f"The first film was in {EARLIEST_FILM_YEAR}, Year must be >= {EARLIEST_FILM_YEAR}")
    if movie.rated == "":
        return _missing("Rated")
    if is_unset_time(movie.released):
        return _invalid("Released", "Released must have a value")
    if movie.run_time <= 0:
        return _invalid("RunTime", "Run time must be greater than zero")
    if movie.director == "":
        return _missing("Director")
    if movie.writer == "":
        return _missing("Writer")
    return None


# ─────────────────────────────────────────────────────────────
# 🔧 Helpers
# ─────────────────────────────────────────────────────────────
def _sqlstate(exc: BaseException) -> Optional[str]:
    """Best-effort SQLSTATE from a DBAPI error wrapped by SQLAlchemy."""
    orig = getattr(exc, "orig", None)
    for candidate in (orig, getattr(orig, "__cause__", None)):
        if candidate is None:
            continue
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code:
            return str(code)
    return None


def _classify(exc: Exception) -> MovieError:
    if isinstance(exc, IntegrityError) and _sqlstate(exc) == UNIQUE_VIOLATION:
        return MovieError(op=OP_CREATE, kind=ErrorKind.EXIST, message="Movie already exists", cause=exc)
    return MovieError(op=OP_CREATE, kind=ErrorKind.DATABASE, message=f"Unable to create movie: {exc}", cause=exc)


def _attribute(movie: Movie, actor: Actor) -> None:
    audit = movie.audit
    audit.create_client_id = actor.client_id
    audit.create_client_number = actor.client_number
    audit.create_username = actor.username
    audit.update_client_id = actor.client_id
    audit.update_client_number = actor.client_number
    audit.update_username = actor.username
    # Only the database assigns these.
    audit.create_timestamp = None
    audit.update_timestamp = None


async def _within(aw: Awaitable[T], deadline: Optional[float]) -> T:
    if deadline is None:
        return await aw
    remaining = deadline - asyncio.get_running_loop().time()
    return await asyncio.wait_for(aw, timeout=max(remaining, 0))


async def _rollback(db: AsyncSession, err: MovieError) -> None:
    """Roll back after `err`; a failing rollback raises a distinct DATABASE error."""
    try:
        await db.rollback()
    except Exception as rb_exc:
        logger.error("Rollback failed after %s error in %s: %s", err.kind.value, err.op, rb_exc)
        raise MovieError(
            op=OP_CREATE,
            kind=ErrorKind.DATABASE,
            message=f"Rollback failed: {rb_exc}",
            cause=rb_exc,
            original=err,
        ) from rb_exc


# ─────────────────────────────────────────────────────────────
# 🎬 Create
# ─────────────────────────────────────────────────────────────
async def create_movie(
    movie: Movie,
    db: AsyncSession,
    identity: Identity,
    *,
    repository: Optional[MovieRepositoryProtocol] = None,
    timeout: Optional[float] = None,
) -> Movie:
    """Validate `movie`, attribute it to the actor and insert it.

    Returns the same `movie` with its audit block populated. Does **not**
    commit; the caller commits once all work in the transaction is done.

    Raises
    ------
    MovieError
        `VALIDATION` (no I/O happened), `INTERNAL` (actor unresolvable),
        `EXIST` / `DATABASE` (storage failed, session rolled back) or
        `CANCELED` (deadline expired).
    """
    err = validate_movie(movie)
    if err is not None:
        logger.info("Movie rejected: %s (%s)", err.message, err.param)
        raise err

    deadline = None if timeout is None else asyncio.get_running_loop().time() + timeout

    try:
        actor = await _within(resolve_actor(identity, db), deadline)
    except Exception as exc:
        if deadline is not None and isinstance(exc, asyncio.TimeoutError):
            raise MovieError(
                op=OP_CREATE, kind=ErrorKind.CANCELED, message="Timed out resolving client", cause=exc
            ) from exc
        logger.warning("Unable to resolve client for movie create: %s", exc)
        raise MovieError(
            op=OP_CREATE, kind=ErrorKind.INTERNAL, message=f"Unable to resolve client: {exc}", cause=exc
        ) from exc

    _attribute(movie, actor)

    repo = repository or SqlMovieRepository(db)
    try:
        stamps = await _within(repo.insert_movie(movie, actor), deadline)
    except asyncio.CancelledError:
        logger.warning("Movie create cancelled; rolling back")
        try:
            await db.rollback()
        except Exception:
            logger.exception("Rollback failed after cancellation")
        raise
    except Exception as exc:
        if deadline is not None and isinstance(exc, asyncio.TimeoutError):
            # Only our own deadline means "canceled"; a driver timeout is a storage failure.
            err = MovieError(op=OP_CREATE, kind=ErrorKind.CANCELED, message="Timed out creating movie", cause=exc)
            logger.warning("Movie create timed out; rolling back")
        else:
            err = _classify(exc)
            logger.exception("Movie create failed (%s)", err.kind.value)
        await _rollback(db, err)
        raise err from exc

    movie.audit.create_timestamp = stamps.create_timestamp
    movie.audit.update_timestamp = stamps.update_timestamp or stamps.create_timestamp

    logger.info("Movie %r created by %s", movie.title, actor.username)
    return movie
