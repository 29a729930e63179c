"""Logging for the storefront.

Standard library handlers own the sinks (stdout plus rotating files);
structlog turns the keyword events emitted by every module into JSON in
production and coloured console lines elsewhere. Credentials and contact
details never reach a sink: they are masked before rendering.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

from shared.config import get_environment

_LEVEL_BY_ENVIRONMENT = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

_ROTATE_BYTES = 10 * 1024 * 1024
_ROTATE_BACKUPS = 5

# Event keys whose values are replaced before an event is rendered
SENSITIVE_KEYS = frozenset({"password", "password_confirm", "password_hash", "session_id", "phone", "address"})
MASK = "***"

# Libraries that are chatty at DEBUG
_QUIET_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "passlib", "asyncio", "httpx", "multipart")


def get_log_level() -> str:
    """``LOG_LEVEL`` if set, otherwise the level for the current environment."""
    return os.getenv("LOG_LEVEL", _LEVEL_BY_ENVIRONMENT.get(get_environment(), "INFO")).upper()


def mask_sensitive_values(logger, method_name, event_dict):  # noqa: ARG001
    """structlog processor hiding the values of :data:`SENSITIVE_KEYS`."""
    for key in SENSITIVE_KEYS.intersection(event_dict):
        if event_dict[key] is not None:
            event_dict[key] = MASK
    return event_dict


def _rotating_handler(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=_ROTATE_BYTES,
        backupCount=_ROTATE_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(log_dir: Path | None = None) -> Path:
    """Route stdlib logging to stdout, ``storefront.log`` and ``storefront_error.log``.

    Returns the directory the log files are written to.
    """
    log_level = get_log_level()

    log_dir = Path(log_dir or os.getenv("LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    root_logger.addHandler(console_handler)
    root_logger.addHandler(_rotating_handler(log_dir / "storefront.log", log_level))
    root_logger.addHandler(_rotating_handler(log_dir / "storefront_error.log", logging.ERROR))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return log_dir


def _renderer(environment: str):
    if environment in ("production", "staging"):
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stdout.isatty(),
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2),
    )


def setup_structlog(environment: str | None = None) -> None:
    """Configure structlog to render through stdlib logging."""
    environment = environment or get_environment()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            mask_sensitive_values,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _renderer(environment),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(log_dir: Path | None = None) -> None:
    """Configure all logging for the application."""
    setup_stdlib_logging(log_dir)
    setup_structlog()


def add_context(**kwargs: Any) -> None:
    """Bind values (request id, user id) to every event logged from this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
