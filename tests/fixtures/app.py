# tests/fixtures/app.py

"""
🧩 App Fixture:
- Builds the FastAPI app through the production factory
- Injects a scripted fake DB session in place of `get_async_db`
- Returns an HTTP client fixture for route tests
"""

from typing import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from app.db.session import get_async_db
from app.main import create_app
from tests.fixtures.db import FakeAsyncSession


@pytest.fixture()
def route_session() -> FakeAsyncSession:
    """Session handed to the route; tests script `route_session.results`."""
    return FakeAsyncSession()


@pytest.fixture()
def app(route_session: FakeAsyncSession) -> FastAPI:
    app = create_app()

    async def _override_get_db():
        yield route_session

    # 🔁 Override DB dependency with the fake session
    app.dependency_overrides[get_async_db] = _override_get_db
    return app


@pytest.fixture()
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """🌐 Provides an HTTP client for sending requests to the test app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
