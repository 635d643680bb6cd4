"""Logging hooks invoked before every registry call.

A hook takes a %-style format string and its arguments, e.g.
``logf("registry.tags url=%s repository=%s", url, repository)``.
"""

import logging
from collections.abc import Callable

logger = logging.getLogger("registry_client")

LogfCallback = Callable[..., None]


def quiet(format: str, *args) -> None:
    """Discard log messages silently."""


def log(format: str, *args) -> None:
    """Pass log messages to the ``registry_client`` logger at INFO level."""
    logger.info(format, *args)
