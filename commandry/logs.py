"""
Package logging.

Every module logs through logging.getLogger(__name__), under the "commandry"
logger. As a library, the package only installs a NullHandler; hosts that
want readable terminal output call install() once.
"""
import logging

from rich.console import Console
from rich.logging import RichHandler

from .utils import *

logger = logging.getLogger("commandry")
logger.addHandler(logging.NullHandler())


def install(level=logging.INFO, /, console=Unset):
    """
    Attach a RichHandler to the package logger (once) and set its level.

    Returns the handler in use, so callers can tweak its formatter.
    """
    logger.setLevel(level)
    for handler in logger.handlers:
        if isinstance(handler, RichHandler):
            return handler

    handler = RichHandler(
        console=Console(stderr=True) if console is Unset else console,
        rich_tracebacks=True,
        markup=False,
        show_path=False,
        show_time=True,
        show_level=True,
        tracebacks_show_locals=False,
    )
    logger.addHandler(handler)
    return handler


__all__ = (
    "logger",
    "install",
)
