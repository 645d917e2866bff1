"""structlog setup.

Learn: Every module grabs `structlog.get_logger()` at import time and logs
event-style names with key/value context (`auth.login_succeeded`,
email=...). This module only decides how those events are rendered:
coloured console lines for humans, or JSON lines for log shippers.

Passwords never appear in log context: callers only ever bind emails.
"""

import logging
import sys

import structlog

from credstore.config import Settings, settings as default_settings


def configure_logging(settings: Settings = default_settings) -> None:
    """Configure structlog processors and level from settings."""
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    if settings.debug:
        level = logging.DEBUG

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_json
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


def _stderr_logger(*args) -> structlog.PrintLogger:
    # Resolve sys.stderr per logger so redirected streams (CliRunner, capsys) are honoured
    return structlog.PrintLogger(file=sys.stderr)
