"""
Logging setup for the Bitwig OSC client and shell.

All diagnostic output goes to stderr so the interactive shell's stdout stays
readable.  Inbound and outbound OSC traffic is logged by
ingestion/osc_transport.py at DEBUG level; pass ``debug=True`` to see it.
"""

from __future__ import annotations

import logging
import sys

_LOG_FORMAT = "%(asctime)s.%(msecs)03d " "[%(name)s] %(levelname)s " "%(message)s"
_LOG_DATE_FORMAT = "%H:%M:%S"


def configure_logging(level: int = logging.INFO, *, debug: bool = False) -> None:
    """
    Configure the root logger to write structured output to stderr.

    Args:
        level: Python logging level (default: INFO).
        debug: Force DEBUG level, which includes every OSC message.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=_LOG_FORMAT, datefmt=_LOG_DATE_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else level)

    # python-osc's own loggers stay quiet unless debugging.
    logging.getLogger("pythonosc").setLevel(logging.DEBUG if debug else logging.WARNING)
