"""Logging utilities."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "edittree"


def configure_logging(level: str = "WARNING", *, rich_tracebacks: bool = True) -> logging.Logger:
    """Attach a rich handler to the package logger and return it."""
    console = Console(stderr=True)
    handler = RichHandler(console=console, rich_tracebacks=rich_tracebacks, markup=False, show_path=False)
    logger = logging.getLogger(ROOT_LOGGER)
    for existing in [h for h in logger.handlers if isinstance(h, RichHandler)]:
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level.upper())
    return logger


def get_logger(name: str, *extra_names: str) -> logging.Logger:
    """Return a logger namespaced under the package logger."""
    namespace = ".".join([name, *extra_names]) if extra_names else name
    if namespace != ROOT_LOGGER and not namespace.startswith(ROOT_LOGGER + "."):
        namespace = f"{ROOT_LOGGER}.{namespace}"
    return logging.getLogger(namespace)


__all__ = ["configure_logging", "get_logger"]
