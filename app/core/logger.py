from __future__ import annotations

"""
Movie Create Service · Logging
==============================

Loguru owns every sink. Stdlib loggers used across the service (`app.*`) and by
the frameworks under it (uvicorn, fastapi, sqlalchemy) are bridged into Loguru
so one format covers all output. Importing this module configures everything;
`app.main` and `scripts/create_movies.py` import it for that side effect.

Env
---
LOG_LEVEL   INFO|DEBUG|WARNING|ERROR   (default: INFO)
LOG_JSON    1 → one JSON object per line; anything else → colour console
LOG_FILE    path of an extra file sink, rotated at 10 MB (default: unset, no file)
"""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_JSON = os.getenv("LOG_JSON", "0").strip().lower() in {"1", "true", "yes"}
LOG_FILE = os.getenv("LOG_FILE", "").strip()

# Stdlib loggers bridged into Loguru, with the level each one is held at.
BRIDGED_LOGGERS: Dict[str, str] = {
    "app": LOG_LEVEL,
    "uvicorn": LOG_LEVEL,
    "uvicorn.error": LOG_LEVEL,
    "fastapi": LOG_LEVEL,
    # Statement echo is noisy; only engine warnings and errors come through.
    "sqlalchemy.engine": "WARNING",
}


def _escape(value: str) -> str:
    # Loguru reads "<...>" as colour markup.
    return value.replace("<", r"\<")


def _console_line(record) -> str:
    where = f"{_escape(record['name'])}:{_escape(record['function'])}:{record['line']}"
    return (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        f"<cyan>{where}</cyan> - "
        "<level>{message}</level>\n{exception}"
    )


def _json_line(record) -> str:
    doc: Dict[str, Any] = {
        "time": record["time"].isoformat(),
        "level": record["level"].name,
        "logger": record["name"],
        "function": record["function"],
        "line": record["line"],
        "message": record["message"],
    }
    doc.update({k: v for k, v in record["extra"].items() if k not in doc and not k.startswith("_")})
    # Rendered up front: braces in the JSON must not reach Loguru's formatter.
    record["extra"]["_json"] = json.dumps(doc, ensure_ascii=False, default=str)
    return "{extra[_json]}\n{exception}"


LINE_FORMAT = _json_line if LOG_JSON else _console_line

logger.remove()
logger.add(sys.stdout, level=LOG_LEVEL, format=LINE_FORMAT, enqueue=True, backtrace=False, diagnose=False)

if LOG_FILE:
    Path(LOG_FILE).parent.mkdir(parents=True, exist_ok=True)
    logger.add(LOG_FILE, rotation="10 MB", level=LOG_LEVEL, format=LINE_FORMAT, enqueue=True, diagnose=False)


class InterceptHandler(logging.Handler):
    """Re-emit a stdlib record through Loguru, attributed to its real call site."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        def _origin(r) -> None:
            r.update(name=record.name, function=record.funcName, line=record.lineno)

        logger.patch(_origin).opt(exception=record.exc_info).log(level, record.getMessage())


for _name, _level in BRIDGED_LOGGERS.items():
    _std = logging.getLogger(_name)
    _std.handlers = [InterceptHandler()]
    _std.setLevel(_level)
    _std.propagate = False
