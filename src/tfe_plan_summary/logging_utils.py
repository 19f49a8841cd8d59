"""Logging helpers for the plan summary CLI.

All handlers write outside stdout, which is reserved for the report.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
import threading
from pathlib import Path

from tfe_plan_summary.config import load_settings

_logging_configured = False
_logging_lock = threading.Lock()

_logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"
_SYSLOG_ADDRESSES = ("/dev/log", "/var/run/syslog")


def _formatter() -> logging.Formatter:
    return logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT)


def _syslog_handler() -> logging.Handler | None:
    for address in _SYSLOG_ADDRESSES:
        if Path(address).exists():
            handler = logging.handlers.SysLogHandler(address=address)
            handler.setFormatter(logging.Formatter("tfe-plan-summary: %(levelname)s %(message)s"))
            return handler
    _logger.warning("LOG_SYSLOG is set but no local syslog socket was found")
    return None


def configure_logging() -> None:
    """Configure process logging from settings."""
    global _logging_configured

    settings = load_settings()
    level = getattr(logging, settings.logging.level.upper(), logging.WARNING)

    handlers: list[logging.Handler] = []

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(_formatter())
    handlers.append(stream_handler)

    if settings.logging.file:
        try:
            Path(settings.logging.file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(settings.logging.file)
            file_handler.setFormatter(_formatter())
            handlers.append(file_handler)
        except OSError as exc:
            _logger.warning("Failed to open log file %s: %s", settings.logging.file, exc)

    if settings.logging.syslog:
        try:
            syslog_handler = _syslog_handler()
        except OSError as exc:
            _logger.warning("Failed to connect to syslog: %s", exc)
            syslog_handler = None
        if syslog_handler is not None:
            handlers.append(syslog_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    # httpx logs every request at INFO; keep it quiet unless debugging.
    if level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)

    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    if not _logging_configured:
        with _logging_lock:
            if not _logging_configured:
                configure_logging()
    return logging.getLogger(name)
