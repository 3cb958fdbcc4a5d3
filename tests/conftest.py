# tests/conftest.py
"""
Global test bootstrap
- Provides env defaults BEFORE any app module reads settings
- Pulls in the shared fixtures (fake db session, movies, app/client)
"""

from __future__ import annotations

import os

# ──────────────────────────────────────────────────────────────────────────────
# 🌱 Test env (set before importing app modules)
# ──────────────────────────────────────────────────────────────────────────────
os.environ.setdefault("POSTGRES_PASSWORD", "postgres")
os.environ.setdefault("POSTGRES_DB", "movies_test")
os.environ.setdefault("MOVIE_DB_SCHEMA", "demo")
os.environ.setdefault("LOG_FILE", "")
os.environ.setdefault("LOG_LEVEL", "WARNING")

# ──────────────────────────────────────────────────────────────────────────────
# 📦 Pull in the rest of the fixtures
# ──────────────────────────────────────────────────────────────────────────────
from tests.fixtures.db import *          # noqa: F401,F403,E402
from tests.fixtures.movies import *      # noqa: F401,F403,E402
from tests.fixtures.app import *         # noqa: F401,F403,E402
