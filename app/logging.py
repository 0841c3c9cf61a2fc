from __future__ import annotations

import logging
import os
from typing import Any

import structlog

# Third-party loggers that are too chatty at INFO
_QUIET_LOGGERS = ("aiosqlite", "asyncio", "sqlalchemy.engine", "httpx")


def _get_log_level() -> int:
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level, logging.INFO)


def _resolve_format() -> str:
    fmt = os.getenv("LOG_FORMAT")
    if fmt:
        return fmt.lower()
    return "console" if os.getenv("APP_ENV", "dev") == "dev" else "json"


def setup_logging(log_file: str | os.PathLike | None = None) -> None:
    """Configure structlog and route stdlib logging through it.

    - JSON lines (or the console renderer in dev) with ISO/UTC timestamp,
      level, event and bound fields
    - contextvars are merged so request_id bound by the middleware shows up
      in service logs
    - stdlib loggers (services, uvicorn) share the same formatter
    """

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if _resolve_format() == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors + [structlog.stdlib.ExtraAdder()],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        os.makedirs(os.path.dirname(str(log_file)), exist_ok=True)
        handlers.append(logging.FileHandler(str(log_file), encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(
        level=_get_log_level(),
        handlers=handlers,
        force=True,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(*args: Any, **kwargs: Any) -> structlog.stdlib.BoundLogger:  # convenience
    return structlog.get_logger(*args, **kwargs)
