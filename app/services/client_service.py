# app/services/client_service.py
from __future__ import annotations

"""
Client identity — who is writing
================================

The create flow never reads identity from ambient state. Callers pass either:

- an :class:`Actor` they already resolved, or
- an :class:`ActorResolver` that looks the actor up inside the caller's
  transaction (e.g. :class:`ServerTokenResolver`).

This module does not authenticate tokens; it only maps an already-trusted
server token to the API client that owns it.
"""

from dataclasses import dataclass
import logging
from typing import Optional, Protocol, Union, runtime_checkable

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Actor:
    """Resolved identity of the client/user performing a write."""

    client_id: str
    client_number: int
    username: str


@runtime_checkable
class ActorResolver(Protocol):
    async def resolve(self, db: AsyncSession) -> Actor:
        ...


Identity = Union[Actor, ActorResolver]


class ClientLookupError(LookupError):
    """No API client could be resolved for the supplied credential."""


class ServerTokenResolver:
    """Resolve the API client owning a server token.

    Runs `<schema>.lookup_client_by_server_token` on the caller's session, so
    the lookup sees the same transaction as the write that follows.
    """

    def __init__(self, server_token: str, *, username: Optional[str] = None) -> None:
        self.server_token = server_token
        self.username = username

    def __repr__(self) -> str:
        # never echo the token itself
        return f"ServerTokenResolver(username={self.username!r})"

    async def resolve(self, db: AsyncSession) -> Actor:
        if not self.server_token:
            raise ClientLookupError("server token is empty")

        schema = settings.MOVIE_DB_SCHEMA
        stmt = text(
            f"select client_id, client_num, username "
            f"from {schema}.lookup_client_by_server_token(p_server_token => :server_token)"
        )
        row = (await db.execute(stmt, {"server_token": self.server_token})).mappings().first()
        if row is None:
            raise ClientLookupError("no client registered for server token")

        username = row.get("username") or self.username
        if not username:
            raise ClientLookupError("client has no username and none was supplied")

        logger.debug("Resolved client %s for server token", row["client_id"])
        return Actor(
            client_id=str(row["client_id"]),
            client_number=int(row["client_num"]),
            username=username,
        )


async def resolve_actor(identity: Identity, db: AsyncSession) -> Actor:
    """Return `identity` as-is when already resolved, otherwise run its lookup."""
    if isinstance(identity, Actor):
        return identity
    return await identity.resolve(db)
