# tests/test_movies/test_validate_movie.py

from datetime import datetime, timezone

import pytest

from app.core.exceptions import ErrorKind, MovieError
from app.schemas.movie import Movie
from app.services.movie_service import validate_movie


def test_repo_man_is_valid(repo_man: Movie):
    """✅ The canonical movie passes every check."""
    assert validate_movie(repo_man) is None


@pytest.mark.parametrize(
    "field, value, param, message",
    [
        ("title", "", "Title", "Title is a required field"),
        ("year", 1877, "Year", "The first film was in 1878, Year must be >= 1878"),
        ("rated", "", "Rated", "Rated is a required field"),
        ("released", None, "Released", "Released must have a value"),
        ("run_time", 0, "RunTime", "Run time must be greater than zero"),
        ("director", "", "Director", "Director is a required field"),
        ("writer", "", "Writer", "Writer is a required field"),
    ],
)
def test_invalid_field_is_named(repo_man: Movie, field, value, param, message):
    """❌ One bad field → Validation error naming that field."""
    setattr(repo_man, field, value)

    err = validate_movie(repo_man)

    assert isinstance(err, MovieError)
    assert err.kind is ErrorKind.VALIDATION
    assert err.param == param
    assert err.message == message
    assert err.op == "movie_service.validate_movie"
    assert err.status_code == 400


@pytest.mark.parametrize("year, ok", [(1878, True), (1877, False), (0, False)])
def test_year_boundary_is_inclusive(repo_man: Movie, year, ok):
    repo_man.year = year
    assert (validate_movie(repo_man) is None) is ok


@pytest.mark.parametrize("run_time, ok", [(1, True), (0, False), (-5, False)])
def test_run_time_must_be_positive(repo_man: Movie, run_time, ok):
    repo_man.run_time = run_time
    assert (validate_movie(repo_man) is None) is ok


def test_zero_time_counts_as_unset(repo_man: Movie):
    repo_man.released = datetime(1, 1, 1, tzinfo=timezone.utc)
    assert validate_movie(repo_man).param == "Released"


def test_naive_zero_time_counts_as_unset(repo_man: Movie):
    repo_man.released = datetime(1, 1, 1)
    assert validate_movie(repo_man).param == "Released"


def test_whitespace_is_not_treated_as_empty(repo_man: Movie):
    """Only literal emptiness is checked."""
    repo_man.title = "   "
    repo_man.writer = " "
    assert validate_movie(repo_man) is None


def test_first_failure_wins():
    """Checks run in a fixed order and stop at the first failure."""
    m = Movie(title="", year=1700, rated="", released=None, run_time=0, director="", writer="")
    assert validate_movie(m).param == "Title"

    m.title = "Eraserhead"
    assert validate_movie(m).param == "Year"

    m.year = 1977
    assert validate_movie(m).param == "Rated"

    m.rated = "R"
    assert validate_movie(m).param == "Released"

    m.released = datetime(1977, 3, 19, tzinfo=timezone.utc)
    assert validate_movie(m).param == "RunTime"

    m.run_time = 89
    assert validate_movie(m).param == "Director"

    m.director = "David Lynch"
    assert validate_movie(m).param == "Writer"

    m.writer = "David Lynch"
    assert validate_movie(m) is None


def test_validate_has_no_side_effects(repo_man: Movie):
    before = repo_man.model_dump()
    validate_movie(repo_man)
    assert repo_man.model_dump() == before
