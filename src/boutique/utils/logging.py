"""Structured logging for the boutique service.

Every log line goes through structlog on top of the stdlib root logger, so
Protean's own records and ours share one set of handlers. Rendering follows
the deployment environment: JSON lines in production and staging, coloured
console output with rich tracebacks everywhere else.

Request handlers bind ``actor_role``, ``actor_id`` and ``path`` with
``add_context``; domain code adds ``order_id`` / ``order_number`` per call.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

SERVICE_NAME = "boutique"

_LEVEL_BY_ENVIRONMENT = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}
_JSON_ENVIRONMENTS = frozenset({"production", "staging"})
_MAX_LOG_BYTES = 10 * 1024 * 1024
_LOG_BACKUPS = 5


def current_environment() -> str:
    return (os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    """``LOG_LEVEL`` when set, otherwise the default level of the current environment."""
    return os.getenv("LOG_LEVEL") or _LEVEL_BY_ENVIRONMENT.get(current_environment(), "INFO")


def _rotating_handler(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=_MAX_LOG_BYTES,
        backupCount=_LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def _configure_stdlib(level: str, log_dir: str | None, log_file_prefix: str) -> None:
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [logging.StreamHandler(sys.stdout)]

    # File logs only when asked for; containers log to stdout
    log_dir = log_dir or os.getenv("BOUTIQUE_LOG_DIR")
    if log_dir:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        root.addHandler(_rotating_handler(directory / f"{log_file_prefix}.log", level))
        root.addHandler(_rotating_handler(directory / f"{log_file_prefix}_error.log", logging.ERROR))

    for noisy in ("protean", "asyncio", "sqlalchemy.engine"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def add_service(logger, method_name: str, event_dict: dict) -> dict:
    """Stamp the service name and environment on every event."""
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("env", current_environment())
    return event_dict


def _renderer(environment: str):
    if environment in _JSON_ENVIRONMENTS:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=3),
    )


def _configure_structlog(environment: str) -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            add_service,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                ]
            ),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _renderer(environment),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(log_dir: str | None = None, log_file_prefix: str = SERVICE_NAME) -> None:
    _configure_stdlib(get_log_level(), log_dir, log_file_prefix)
    _configure_structlog(current_environment())


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def add_context(**kwargs: Any) -> None:
    """Bind key/values to every log line emitted from the current context."""
    structlog.contextvars.bind_contextvars(**{key: value for key, value in kwargs.items() if value is not None})


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
