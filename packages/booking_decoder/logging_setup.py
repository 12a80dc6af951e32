"""Logging for the ``booking_decoder`` package.

Library modules take a logger from ``get_logger("booking_decoder.<module>")``
and never attach handlers; until an entry point calls ``configure_logging``
the package logger only carries a ``NullHandler``.

Messages are grep-friendly ``event key=value ...`` lines. Context that holds
for a whole batch (the bank family, for instance) is bound once with
:func:`bind` and appended to every message of that batch.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import MutableMapping
from typing import IO, Any

_PKG_LOGGER_NAME = "booking_decoder"
_LEVEL_ENV_VAR = "BOOKING_DECODER_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_CONFIGURED = False


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        level = os.getenv(_LEVEL_ENV_VAR) or logging.INFO
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    resolved = logging.getLevelNamesMapping().get(name)
    if resolved is None:
        raise ValueError(f"unknown log level: {level!r}")
    return resolved


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Attach one ``StreamHandler`` to the package logger and return it.

    ``level`` falls back to ``BOOKING_DECODER_LOG_LEVEL`` and then ``INFO``;
    ``stream`` to ``sys.stderr`` at call time. Only the first call has an
    effect.
    """

    global _CONFIGURED
    logger = logging.getLogger(_PKG_LOGGER_NAME)
    if _CONFIGURED:
        return logger

    resolved = _resolve_level(level)
    for h in [h for h in logger.handlers if isinstance(h, logging.NullHandler)]:
        logger.removeHandler(h)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(resolved)
    logger.propagate = False

    _CONFIGURED = True
    return logger


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


class ContextAdapter(logging.LoggerAdapter):
    """Append the bound ``key=value`` pairs to each message."""

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        context = " ".join(f"{k}={v}" for k, v in (self.extra or {}).items())
        return (f"{msg} {context}" if context else msg), kwargs


def bind(logger: logging.Logger, **context: object) -> ContextAdapter:
    """Return ``logger`` with ``context`` appended to every message."""

    return ContextAdapter(logger, context)


__all__ = ["DEFAULT_FORMAT", "ContextAdapter", "bind", "configure_logging", "get_logger"]
