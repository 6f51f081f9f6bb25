# pytransit/util/logger.py
"""
Logging helpers.

Modules log through ``get_logger(__name__)`` so everything lands under the
``pytransit`` logger. The library stays silent until an application
configures logging, or calls ``configure_logging`` for a quick console setup.
"""
import logging
import sys
from typing import Optional

LOGGER_NAME = "pytransit"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_root = logging.getLogger(LOGGER_NAME)
_root.addHandler(logging.NullHandler())


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the package logger, or a child of it."""
    if not name or name == LOGGER_NAME:
        return _root
    if name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return _root.getChild(name)


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Attach a console handler to the package logger.

    Safe to call more than once: the handler is only installed the first time,
    later calls just adjust the level.
    """
    if not any(getattr(h, "_pytransit_console", False) for h in _root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._pytransit_console = True  # type: ignore[attr-defined]
        _root.addHandler(handler)
    _root.setLevel(level)
    return _root
