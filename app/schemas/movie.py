from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


class Audit(BaseModel):
    """Who created/last updated a record and when.

    Timestamps are assigned by the database; anything set client-side is
    overwritten on create.
    """

    create_client_id: Optional[str] = None
    create_client_number: Optional[int] = None
    create_username: str = ""
    create_timestamp: Optional[datetime] = None
    update_client_id: Optional[str] = None
    update_client_number: Optional[int] = None
    update_username: str = ""
    update_timestamp: Optional[datetime] = None


class Movie(BaseModel):
    """A movie as submitted for creation, plus its audit block."""

    title: str = ""
    year: int = 0
    rated: str = ""
    released: Optional[datetime] = None
    run_time: int = 0
    director: str = ""
    writer: str = ""
    audit: Audit = Field(default_factory=Audit)


# Zero value used by clients that cannot send null (0001-01-01T00:00:00Z).
_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


def is_unset_time(value: Optional[datetime]) -> bool:
    if value is None:
        return True
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value == _ZERO_TIME


class MovieCreateIn(BaseModel):
    """Request body for `POST /movies`.

    Fields default to empty so business validation reports the missing one.
    """

    title: str = ""
    year: int = 0
    rated: str = ""
    released: Optional[datetime] = None
    run_time: int = Field(0, description="Run time in minutes")
    director: str = ""
    writer: str = ""

    def to_movie(self) -> Movie:
        return Movie(**self.model_dump())


class MovieOut(BaseModel):
    title: str
    year: int
    rated: str
    released: datetime
    run_time: int
    director: str
    writer: str
    create_client_id: Optional[str] = None
    create_username: str
    create_timestamp: datetime
    update_client_id: Optional[str] = None
    update_username: str
    update_timestamp: datetime

    @classmethod
    def from_movie(cls, movie: Movie) -> "MovieOut":
        a = movie.audit
        return cls(
            title=movie.title,
            year=movie.year,
            rated=movie.rated,
            released=movie.released,
            run_time=movie.run_time,
            director=movie.director,
            writer=movie.writer,
            create_client_id=a.create_client_id,
            create_username=a.create_username,
            create_timestamp=a.create_timestamp,
            update_client_id=a.update_client_id,
            update_username=a.update_username,
            update_timestamp=a.update_timestamp,
        )
