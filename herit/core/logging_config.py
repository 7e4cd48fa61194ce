"""
Logging for the Herit backend.

Every record carries the ID of the HTTP request it was emitted under, so
the lines of one login, onboarding step or rule change can be grepped
together. ``LogfireMiddleware`` binds the ID through ``bind_request_id``;
records logged outside a request show ``-``.

Environment:
- ``HERIT_LOG_LEVEL`` (or ``settings.log_level``): console level
- ``HERIT_LOG_FORMAT``: ``simple``, ``detailed`` or ``json``
- ``HERIT_ENABLE_FILE_LOGGING`` / ``HERIT_LOG_FILE_DIR``: DEBUG copy in ``herit.log``
"""

import logging
import os
from contextvars import ContextVar, Token
from pathlib import Path
from typing import Optional

NO_REQUEST = "-"

_request_id: ContextVar[str] = ContextVar("herit_request_id", default=NO_REQUEST)


def _env_flag(name: str) -> bool:
    return os.getenv(name, "false").lower() in ("true", "1", "yes")


def _console_level() -> str:
    try:
        from herit.server.core.config import settings

        return settings.log_level.upper()
    except Exception:
        # Settings may be invalid (e.g. a short secret); logging must still come up
        return os.getenv("HERIT_LOG_LEVEL", "INFO").upper()


LOG_LEVEL = _console_level()
LOG_FORMAT = os.getenv("HERIT_LOG_FORMAT", "detailed")
LOG_FILE_DIR = os.getenv("HERIT_LOG_FILE_DIR", "logs")
ENABLE_FILE_LOGGING = _env_flag("HERIT_ENABLE_FILE_LOGGING")
LOG_FILE_NAME = "herit.log"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

SIMPLE_FORMAT = "%(levelname)s %(name)s: %(message)s"

DETAILED_FORMAT = "%(asctime)s %(levelname)-8s [%(request_id)s] %(name)s:%(lineno)d - %(message)s"

JSON_FORMAT = (
    '{"ts": "%(asctime)s", "level": "%(levelname)s", "request_id": "%(request_id)s", '
    '"logger": "%(name)s", "line": %(lineno)d, "message": "%(message)s"}'
)

MODULE_LOG_LEVELS = {
    "herit.core": "INFO",
    "herit.core.database": "INFO",
    "herit.server": "INFO",
    "herit.server.api": "DEBUG",
    "herit.server.services": "DEBUG",
    "herit.server.core": "INFO",
    # Third-party libraries
    "sqlalchemy": "WARNING",
    "sqlalchemy.engine": "WARNING",
    "sqlalchemy.pool": "WARNING",
    "aiosqlite": "WARNING",
    "httpx": "WARNING",
    "limits": "WARNING",
    "asyncio": "WARNING",
    "uvicorn": "INFO",
    "uvicorn.access": "INFO",
}

_FORMATS = {"simple": SIMPLE_FORMAT, "detailed": DETAILED_FORMAT, "json": JSON_FORMAT}


def bind_request_id(request_id: str) -> Token:
    """Tag records logged in the current context with ``request_id``; pass the token to ``reset_request_id``."""
    return _request_id.set(request_id)


def reset_request_id(token: Token) -> None:
    _request_id.reset(token)


def current_request_id() -> str:
    return _request_id.get()


class RequestIdFilter(logging.Filter):
    """Adds ``request_id`` to every record passing through a handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()
        return True


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = True,
) -> None:
    """
    Install the console handler, and the file handler when enabled, on the root logger.

    Calling it again replaces the handlers instead of adding more.

    Args:
        log_level: Console level; defaults to ``LOG_LEVEL``
        log_format: ``simple``, ``detailed`` or ``json``; anything else means ``detailed``
        enable_file: Also write ``herit.log`` when ``HERIT_ENABLE_FILE_LOGGING`` is set
    """
    level = (log_level or LOG_LEVEL).upper()
    fmt = log_format or LOG_FORMAT
    formatter = logging.Formatter(_FORMATS.get(fmt, DETAILED_FORMAT), datefmt=DATE_FORMAT)
    request_ids = RequestIdFilter()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(request_ids)
    root_logger.addHandler(console_handler)

    file_logging = enable_file and ENABLE_FILE_LOGGING
    if file_logging:
        Path(LOG_FILE_DIR).mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(Path(LOG_FILE_DIR) / LOG_FILE_NAME)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(request_ids)
        root_logger.addHandler(file_handler)

    for module_name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(module_name).setLevel(module_level)

    root_logger.info(f"Logging configured: level={level}, format={fmt}, file_logging={file_logging}")


def get_logger(name: str) -> logging.Logger:
    """Logger for a Herit module; pass ``__name__``."""
    return logging.getLogger(name)
