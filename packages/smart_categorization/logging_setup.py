"""Logging for the ``smart_categorization`` package.

Every record emitted while a categorization or tag command runs carries the
command it belongs to, e.g. ``categorize[tx-42]``. The orchestrator opens a
:func:`command_context` per command; the handler installed by
:func:`configure_logging` stamps the current context onto each record as
``%(command)s`` (``-`` outside any command).

Library modules only call ``get_logger(__name__)``. Until an entrypoint calls
``configure_logging`` the package logger holds a ``NullHandler`` and stays
silent.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import IO

PKG_LOGGER_NAME = "smart_categorization"
LEVEL_ENV_VAR = "SMART_CATEGORIZATION_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(command)s] %(message)s"

_current_command: ContextVar[str] = ContextVar("smart_categorization_command", default="-")
_CONFIGURED = False


@contextmanager
def command_context(operation: str, transaction_id: str) -> Iterator[str]:
    """Label log records emitted inside the block with ``operation[transaction_id]``.

    Contexts nest; the previous label is restored on exit. Worker threads do
    not inherit the label.
    """

    label = f"{operation}[{transaction_id.strip() or '?'}]"
    token = _current_command.set(label)
    try:
        yield label
    finally:
        _current_command.reset(token)


def current_command() -> str:
    return _current_command.get()


class CommandContextFilter(logging.Filter):
    """Attach ``record.command`` so formatters can reference it."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "command"):
            record.command = _current_command.get()
        return True


def resolve_level(level: int | str | None = None) -> int:
    """Explicit level, else ``SMART_CATEGORIZATION_LOG_LEVEL``, else INFO.

    Names are case-insensitive; unknown names resolve to INFO rather than
    failing the entrypoint.
    """

    raw: int | str | None = level if level is not None else os.getenv(LEVEL_ENV_VAR)
    if isinstance(raw, int):
        return raw
    if not raw or not raw.strip():
        return logging.INFO
    name = raw.strip().upper()
    if name.isdigit():
        return int(name)
    return logging.getLevelNamesMapping().get(name, logging.INFO)


def configure_logging(level: int | str | None = None, *, stream: IO[str] | None = None) -> None:
    """Attach one command-aware ``StreamHandler`` to the package logger, once.

    ``stream`` defaults to the ``sys.stderr`` current at call time.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(PKG_LOGGER_NAME)
    for h in [h for h in logger.handlers if isinstance(h, logging.NullHandler)]:
        logger.removeHandler(h)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.addFilter(CommandContextFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger.setLevel(resolve_level(level))
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = [
    "CommandContextFilter",
    "command_context",
    "configure_logging",
    "current_command",
    "get_logger",
    "resolve_level",
]
