"""
Logger helpers for argtree.

All loggers live under the "argtree" namespace and stay silent unless the host
application configures logging itself or calls setup_logging(). The tokenizer
and parser emit DEBUG traces (produced tokens, delegation, bindings) that are
handy when a command line does not parse the way its author expected.
"""
import logging

from rich.logging import RichHandler

ROOT = "argtree"


def get_logger(name, /):
    """
    Return the logger for an argtree module.

    "argtree.parser" and "parser" both resolve to the "argtree.parser" logger.
    """
    if not isinstance(name, str):
        raise TypeError("get_logger() argument must be a string")
    if name == ROOT or name.startswith(ROOT + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT}.{name}")


def setup_logging(level=logging.DEBUG, /, *, console=None):
    """
    Attach a rich handler to the "argtree" logger.

    Calling it again replaces the handler installed by a previous call instead
    of stacking a second one. The diagnostics console (stderr) is used unless
    another rich Console is given.
    """
    if console is None:
        from .faults import console

    logger = logging.getLogger(ROOT)
    for handler in list(logger.handlers):
        if getattr(handler, "_argtree", False):
            logger.removeHandler(handler)

    handler = RichHandler(console=console, show_path=False, markup=False)
    handler._argtree = True
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger


__all__ = (
    "get_logger",
    "setup_logging",
)
