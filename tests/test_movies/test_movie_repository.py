# tests/test_movies/test_movie_repository.py

from datetime import datetime, timezone

import pytest

from app.repositories.movies import MovieRoutineError, SqlMovieRepository

pytestmark = pytest.mark.anyio

CREATED = datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)
UPDATED = datetime(2026, 10, 19, 8, 0, 1, tzinfo=timezone.utc)


async def test_calls_stored_routine_with_nine_ordered_params(fake_session, repo_man, actor):
    session = fake_session([{"o_create_timestamp": CREATED, "o_update_timestamp": UPDATED}])
    repo = SqlMovieRepository(session)

    stamps = await repo.insert_movie(repo_man, actor)

    assert stamps.create_timestamp == CREATED
    assert stamps.update_timestamp == UPDATED
    assert len(session.executed) == 1

    sql, params = session.executed[0]
    assert "demo.create_movie" in sql
    assert list(params) == [
        "title", "year", "rated", "released", "run_time",
        "director", "writer", "create_client_num", "create_username",
    ]
    assert params["title"] == "Repo Man"
    assert params["year"] == 1984
    assert params["run_time"] == 92
    assert params["create_client_num"] == 42
    assert params["create_username"] == "gilcrest"
    # named binds line up with the routine's parameters
    for name in params:
        assert f"=> :{name}" in sql


async def test_schema_override(fake_session, repo_man, actor):
    session = fake_session([{"o_create_timestamp": CREATED}])

    await SqlMovieRepository(session, schema="catalog").insert_movie(repo_man, actor)

    assert "catalog.create_movie" in session.executed[0][0]


async def test_create_only_routine_returns_no_update_timestamp(fake_session, repo_man, actor):
    session = fake_session([{"o_create_timestamp": CREATED}])

    stamps = await SqlMovieRepository(session).insert_movie(repo_man, actor)

    assert stamps.create_timestamp == CREATED
    assert stamps.update_timestamp is None


async def test_no_row_is_an_error(fake_session, repo_man, actor):
    session = fake_session([None])

    with pytest.raises(MovieRoutineError, match="no rows"):
        await SqlMovieRepository(session).insert_movie(repo_man, actor)


async def test_null_create_timestamp_is_an_error(fake_session, repo_man, actor):
    session = fake_session([{"o_create_timestamp": None, "o_update_timestamp": UPDATED}])

    with pytest.raises(MovieRoutineError, match="create timestamp"):
        await SqlMovieRepository(session).insert_movie(repo_man, actor)


async def test_driver_errors_propagate_unwrapped(fake_session, repo_man, actor):
    """Classification happens in the service, not here."""
    session = fake_session([ConnectionRefusedError("refused")])

    with pytest.raises(ConnectionRefusedError):
        await SqlMovieRepository(session).insert_movie(repo_man, actor)
