"""
FAQLens - Logging
==================
Provides a pre-configured logger factory for consistent, readable
log output across all FAQLens modules.

Logging verbosity is driven by ``settings.ENV``:
  • ``"dev"``  → DEBUG level  (every FAQ decision is visible)
  • ``"prod"`` → WARNING level (failed provider calls, aborted refreshes,
    unreadable FAQ files)

Message tags
------------
Request-path messages start with a bracketed stage tag so one request
can be followed with ``grep``:
  ``[FAQ]``        augmentation decisions and similarity scores
  ``[CACHE]``      cache slot swaps and aborted refreshes
  ``[EMBED]``      embedding provider failures
  ``[CLASSIFY]``   classification provider failures
  ``[GENERATE]``   answer-generation provider failures
  ``[ASSISTANT]``  end-to-end answer timing
  ``[API]``        unhandled failures in the HTTP layer

Usage:
    from faqlens.src.utils.logger import get_logger
    logger = get_logger(__name__)
    logger.info("[FAQ] %s", reason)
"""

import logging
import sys

from faqlens.config.settings import settings

# ── Resolve default level from environment mode ───────────────────────
_ENV_LEVEL_MAP = {
    "dev": logging.DEBUG,
    "prod": logging.WARNING,
}
_DEFAULT_LEVEL = _ENV_LEVEL_MAP.get(settings.ENV, logging.INFO)

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """
    Create and return a named logger with a standardised formatter.

    Args:
        name:  Typically ``__name__`` of the calling module.
        level: Explicit logging level override.
               If *None*, the level is derived from ``settings.ENV``.

    Returns:
        A configured ``logging.Logger`` instance.
    """
    resolved_level = level if level is not None else _DEFAULT_LEVEL
    logger = logging.getLogger(name)

    if not logger.handlers:
        logger.setLevel(resolved_level)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(resolved_level)
        console_handler.setFormatter(logging.Formatter(fmt=_LOG_FORMAT, datefmt=_DATE_FORMAT))
        logger.addHandler(console_handler)

        # Handled here; the root logger would print it twice
        logger.propagate = False

    return logger
