from __future__ import annotations

"""Movie persistence port.

The create flow depends only on :class:`MovieRepositoryProtocol`; the
PostgreSQL implementation calls the `create_movie` stored routine, which
performs the insert and returns the audit timestamps it assigned.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.schemas.movie import Movie
from app.services.client_service import Actor


@dataclass(frozen=True)
class AuditTimestamps:
    create_timestamp: datetime
    update_timestamp: Optional[datetime] = None


class MovieRoutineError(RuntimeError):
    """The stored routine ran but did not return what the contract promises."""


# Protocol-like documentation for the expected interface.
class MovieRepositoryProtocol:
    async def insert_movie(self, movie: Movie, actor: Actor) -> AuditTimestamps:
        raise NotImplementedError


class SqlMovieRepository(MovieRepositoryProtocol):
    """Calls `<schema>.create_movie` inside the caller's session/transaction.

    Bind order matches the routine signature: title, year, rated, released,
    run_time, director, writer, create_client_num, create_username.
    """

    def __init__(self, db: AsyncSession, *, schema: Optional[str] = None) -> None:
        self.db = db
        self.schema = schema or settings.MOVIE_DB_SCHEMA

    def _statement(self):
        return text(
            f"""
            select *
              from {self.schema}.create_movie (
                p_title => :title,
                p_year => :year,
                p_rated => :rated,
                p_released => :released,
                p_run_time => :run_time,
                p_director => :director,
                p_writer => :writer,
                p_create_client_num => :create_client_num,
                p_create_username => :create_username)
            """
        )

    async def insert_movie(self, movie: Movie, actor: Actor) -> AuditTimestamps:
        params = {
            "title": movie.title,
            "year": movie.year,
            "rated": movie.rated,
            "released": movie.released,
            "run_time": movie.run_time,
            "director": movie.director,
            "writer": movie.writer,
            "create_client_num": actor.client_number,
            "create_username": actor.username,
        }
        result = await self.db.execute(self._statement(), params)
        row = result.mappings().first()
        if row is None:
            raise MovieRoutineError("create_movie returned no rows")

        created = row.get("o_create_timestamp")
        if created is None:
            raise MovieRoutineError("create_movie returned no create timestamp")
        # Older routine versions return only the create timestamp.
        return AuditTimestamps(
            create_timestamp=created,
            update_timestamp=row.get("o_update_timestamp"),
        )
