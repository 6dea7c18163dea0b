#!/usr/bin/env python
"""Interactive shell on a live Bitwig session.

Connects a :class:`~ingestion.bitwig_client.BitwigClient` and drops into a
Python prompt with the mirrored session in scope.

Usage
-----
    # Defaults from BITWIG_OSC_* env vars / .env
    python scripts/bitwig_repl.py

    # Controller on another machine, log every OSC message
    python scripts/bitwig_repl.py --remote-host 192.168.1.20 --debug

In the shell::

    OSC4Bitwig> session.play()
    OSC4Bitwig> session.track(2).set_volume(100)
    OSC4Bitwig> session.on("clip:is_playing", print)
    OSC4Bitwig> summary()

Exit codes
----------
    0  — shell exited normally
    1  — could not bind the feedback port or invalid configuration
"""

from __future__ import annotations

import argparse
import code
import logging
import pprint
import sys
from pathlib import Path

# Add project root to sys.path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.bitwig.session import session_summary  # noqa: E402
from ingestion.bitwig_client import BitwigClient, load_config  # noqa: E402
from ingestion.logging_config import configure_logging  # noqa: E402

logger = logging.getLogger("bitwig_repl")

_PROMPT = "OSC4Bitwig> "


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Interactive shell on a live Bitwig session")
    p.add_argument("--listen-host", help="Interface to receive controller feedback on")
    p.add_argument("--listen-port", type=int, help="UDP port to receive feedback on")
    p.add_argument("--remote-host", help="Host running the Bitwig controller script")
    p.add_argument("--remote-port", type=int, help="UDP port of the controller script")
    p.add_argument("--tracks", type=int, dest="track_count", help="Tracks in the track bank")
    p.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Log every inbound and outbound OSC message",
    )
    return p.parse_args()


def main() -> int:
    args = parse_args()

    try:
        config = load_config(**vars(args))
    except ValueError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1

    configure_logging(debug=config.debug)
    client = BitwigClient(config)
    try:
        client.connect()
    except OSError as exc:
        logger.error("Cannot listen on %s:%d (%s)", config.listen_host, config.listen_port, exc)
        return 1

    namespace = {
        "client": client,
        "session": client.session,
        "song": client.session,
        "summary": lambda: pprint.pprint(session_summary(client.session)),
    }
    sys.ps1 = _PROMPT
    try:
        code.interact(
            banner="Bitwig session mirror — `session`, `client` and `summary()` are in scope.",
            local=namespace,
            exitmsg="",
        )
    finally:
        client.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
