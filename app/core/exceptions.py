# app/core/exceptions.py
from __future__ import annotations

"""
Movie Create Service — Application Exceptions
=============================================
A small, consistent layer on top of FastAPI/Starlette's `HTTPException` that
lets us attach structured metadata and integrate cleanly with our JSON error
shape from `app.core.exception_handlers`.

Key ideas
---------
- One base `AppException` that carries `code`, `details`, `extra`.
- `MovieError` is the single classified error raised by the movie create flow.
  It is built once, at the point of failure, and carries:
    * `op`    — the operation that failed (e.g. ``movie_service.create_movie``)
    * `kind`  — one of :class:`ErrorKind`
    * `param` — offending field for validation failures
    * `cause` — the underlying exception, when there is one
    * `original` — the first error when a rollback failure supersedes it
- The HTTP status is derived from `kind`, so callers never map it by hand.

Usage
-----
    raise MovieError(
        op="movie_service.validate_movie",
        kind=ErrorKind.VALIDATION,
        param="Title",
        message="Title is a required field",
    )
"""

from enum import Enum
from typing import Any, Dict, Optional

from fastapi import HTTPException, status

__all__ = [
    "AppException",
    "ErrorKind",
    "MovieError",
]


# ──────────────────────────────────────────────────────────────
# 📦 Core: AppException
# ──────────────────────────────────────────────────────────────
class AppException(HTTPException):
    """Base application-level exception with optional metadata.

    Attributes
    -----------
    status_code : int
        HTTP status code (e.g., 400/409/500/504).
    message : str
        Human-readable error message (serialized as `detail` as well).
    code : int
        Optional internal/typed error code. Defaults to `status_code`.
    details : dict | list | str | None
        Machine-readable details (e.g., offending field, constraint).
    extra : dict | None
        Additional non-sensitive metadata to surface to clients.
    headers : dict | None
        Optional response headers.
    """

    def __init__(
        self,
        *,
        status_code: int,
        message: str,
        code: Optional[int] = None,
        details: Optional[Any] = None,
        extra: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.code: int = int(code or status_code)
        self.message: str = message
        self.details: Optional[Any] = details
        self.extra: Dict[str, Any] = extra or {}

    def __str__(self) -> str:
        return self.message

    # ── [Helper] Canonical body used by handlers ───────────────────────────
    def to_problem(self) -> Dict[str, Any]:
        """Return a dict matching our problem-like JSON shape."""
        body: Dict[str, Any] = {
            "error": True,
            "message": self.message,
            "code": self.code,
        }
        if self.details is not None:
            body["details"] = self.details
        # Avoid leaking obvious secrets if someone passed them in `extra`.
        extra_sanitized = dict(self.extra) if self.extra else {}
        for k in ("token", "server_token", "authorization", "password", "secret"):
            extra_sanitized.pop(k, None)
        body.update(extra_sanitized)
        return body


# ──────────────────────────────────────────────────────────────
# 🏷️ Error classification
# ──────────────────────────────────────────────────────────────
class ErrorKind(str, Enum):
    VALIDATION = "validation"
    DATABASE = "database"
    EXIST = "exist"
    INTERNAL = "internal"
    CANCELED = "canceled"


_STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.EXIST: status.HTTP_409_CONFLICT,
    ErrorKind.DATABASE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.CANCELED: status.HTTP_504_GATEWAY_TIMEOUT,
}

# Kinds whose message is safe to show a client verbatim.
_PUBLIC_KINDS = {ErrorKind.VALIDATION, ErrorKind.EXIST}


# ──────────────────────────────────────────────────────────────
# 🎬 Movie domain error
# ──────────────────────────────────────────────────────────────
class MovieError(AppException):
    """Classified failure of the movie create flow."""

    def __init__(
        self,
        *,
        op: str,
        kind: ErrorKind,
        message: str,
        param: Optional[str] = None,
        cause: Optional[BaseException] = None,
        original: Optional["MovieError"] = None,
    ) -> None:
        details: Dict[str, Any] = {"kind": kind.value}
        if param:
            details["param"] = param
        super().__init__(
            status_code=_STATUS_BY_KIND[kind],
            message=message,
            details=details,
        )
        self.op = op
        self.kind = kind
        self.param = param
        self.cause = cause
        self.original = original

    @property
    def public_message(self) -> str:
        """Message suitable for an API response (internals hidden for 5xx kinds)."""
        if self.kind in _PUBLIC_KINDS:
            return self.message
        if self.kind is ErrorKind.CANCELED:
            return "The request timed out before the movie was saved."
        return "The movie could not be saved. Please try again."

    def __repr__(self) -> str:
        parts = [f"op={self.op!r}", f"kind={self.kind.value!r}"]
        if self.param:
            parts.append(f"param={self.param!r}")
        parts.append(f"message={self.message!r}")
        if self.cause is not None:
            parts.append(f"cause={self.cause!r}")
        if self.original is not None:
            parts.append(f"original={self.original!r}")
        return f"MovieError({', '.join(parts)})"
