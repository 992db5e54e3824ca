"""Logging setup for the command-line entry point.

Library modules only create loggers; configuring handlers is left to the
application, which for the CLI means ``setup_logging``.
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-24s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(log_level: str = "INFO") -> None:
    """Attach a console handler to the root logger (once) and set its level."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(handler)

    # urllib3 logs every retry at WARNING and every connection at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
