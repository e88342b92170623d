"""Logging setup for crudforge.

Modules log through ``logging.getLogger(__name__)``; this module only
configures the ``crudforge`` logger once, from the CLI or app factory.
"""

import logging
import sys

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO", fmt: str = DEFAULT_FORMAT, stream=sys.stderr) -> None:
    """Attach a stream handler to the ``crudforge`` logger.

    Safe to call multiple times; the handler is only added once.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger("crudforge")
    if not root.handlers:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)
    root.setLevel(level)
