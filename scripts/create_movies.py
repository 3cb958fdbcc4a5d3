#!/usr/bin/env python3
"""
Create movies from a JSON file in a single transaction (all or nothing).

File format (list of items):
[
  {
    "title": "Repo Man",
    "year": 1984,
    "rated": "R",
    "released": "1984-03-02T00:00:00Z",
    "run_time": 92,
    "director": "Alex Cox",
    "writer": "Alex Cox"
  }
]

Env vars:
  POSTGRES_* / MOVIE_DB_SCHEMA   (see app.core.config)

Usage:
  python scripts/create_movies.py movies.json --client-id c1 --client-num 1 --username gilcrest
"""

import argparse
import asyncio
import json
import sys

from app.core import logger as _logsetup  # noqa: F401
from app.core.exceptions import MovieError
from app.db.session import async_engine, transactional_async_session
from app.schemas.movie import MovieCreateIn
from app.services.client_service import Actor
from app.services.movie_service import create_movie


def _parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Create movies from a JSON file")
    p.add_argument("path", help="JSON file holding a list of movies")
    p.add_argument("--client-id", required=True)
    p.add_argument("--client-num", required=True, type=int)
    p.add_argument("--username", required=True)
    p.add_argument("--timeout", type=float, default=None, help="Per-movie deadline in seconds")
    return p.parse_args(argv)


async def _run(args: argparse.Namespace) -> int:
    with open(args.path, "r", encoding="utf-8") as f:
        items = json.load(f)
    actor = Actor(client_id=args.client_id, client_number=args.client_num, username=args.username)

    created = []
    try:
        async with transactional_async_session() as db:
            for it in items:
                movie = MovieCreateIn.model_validate(it).to_movie()
                created.append(await create_movie(movie, db, actor, timeout=args.timeout))
    except MovieError as e:
        print(f"ERROR: {e.kind.value} {e.param or ''} {e.message}".rstrip(), file=sys.stderr)
        return 1
    finally:
        await async_engine.dispose()

    for m in created:
        print("OK:", m.title, m.audit.create_timestamp.isoformat())
    print(f"Created {len(created)}/{len(items)} movies")
    return 0


def main(argv=None) -> int:
    return asyncio.run(_run(_parse_args(argv)))


if __name__ == "__main__":
    sys.exit(main())
