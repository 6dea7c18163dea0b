"""
ingestion/osc_transport.py — python-osc binding for the Bitwig session mirror.

This module is the I/O boundary between the session entities in
core/bitwig/ and the Bitwig OSC controller script.  It implements the
:class:`~core.bitwig.transport.OscTransport` protocol.

Architecture
────────────
::

    Bitwig Studio
        └── OSC controller script
                │  UDP  remote_host:remote_port  ◄── send()
                │  UDP  listen_host:listen_port  ──► _route() → handlers
                ▼
    ingestion/osc_transport.py (this module)
        └── core/bitwig Session / Track / Clip

Dispatch model
──────────────
A single ``BlockingOSCUDPServer`` handles one datagram at a time on one
background thread, so handlers run to completion in arrival order and never
concurrently.  The python-osc ``Dispatcher`` only parses; every message goes
to its default handler, which looks up the literal address in our own
routing table.  The table is guarded by a lock so entities can subscribe and
unsubscribe (e.g. during a clip refresh) from the application thread.

Error handling
──────────────
Bind and send failures (``OSError``) propagate unchanged — an already-bound
port surfaces as ``OSError: [Errno 98] Address already in use`` from
:meth:`PythonOscTransport.start`.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import Any

from pythonosc.dispatcher import Dispatcher
from pythonosc.osc_message_builder import OscMessageBuilder
from pythonosc.osc_server import BlockingOSCUDPServer
from pythonosc.udp_client import SimpleUDPClient

from core.bitwig.transport import Handler
from core.bitwig.types import OscArg, OscType

logger = logging.getLogger(__name__)

_DEFAULT_LISTEN_HOST = "0.0.0.0"
_DEFAULT_LISTEN_PORT = 9099
_DEFAULT_REMOTE_HOST = "127.0.0.1"
_DEFAULT_REMOTE_PORT = 8099
_JOIN_TIMEOUT = 2.0  # seconds


# ---------------------------------------------------------------------------
# Outbound encoding
# ---------------------------------------------------------------------------


def _add_arg(builder: OscMessageBuilder, arg: Any) -> None:
    """Append one argument, honouring an explicit :class:`OscArg` type.

    Typed values are converted to the tag's Python type first (``int`` for
    INTEGER, ``float`` for FLOAT …) so a float sent as INTEGER truncates
    instead of failing in ``struct.pack``.  Bare values use python-osc's own
    inference (bool → T/F, int → i, float → f, str → s).
    """
    if not isinstance(arg, OscArg):
        builder.add_arg(arg)
        return

    if arg.type is OscType.INTEGER:
        builder.add_arg(int(arg.value), OscMessageBuilder.ARG_TYPE_INT)
    elif arg.type is OscType.FLOAT:
        builder.add_arg(float(arg.value), OscMessageBuilder.ARG_TYPE_FLOAT)
    elif arg.type is OscType.STRING:
        builder.add_arg(str(arg.value), OscMessageBuilder.ARG_TYPE_STRING)
    else:
        flag = bool(arg.value)
        builder.add_arg(
            flag, OscMessageBuilder.ARG_TYPE_TRUE if flag else OscMessageBuilder.ARG_TYPE_FALSE
        )


def build_message(address: str, *args: Any) -> Any:
    """Build a python-osc ``OscMessage`` for ``address`` and ``args``."""
    builder = OscMessageBuilder(address=address)
    for arg in args:
        _add_arg(builder, arg)
    return builder.build()


def _plain(arg: Any) -> Any:
    """Unwrap :class:`OscArg` for log output."""
    return arg.value if isinstance(arg, OscArg) else arg


# ---------------------------------------------------------------------------
# PythonOscTransport
# ---------------------------------------------------------------------------


class PythonOscTransport:
    """
    UDP OSC transport built on python-osc.

    Usage::

        transport = PythonOscTransport(remote_host="192.168.1.20")
        transport.start()
        session.attach(transport)
        ...
        transport.stop()
    """

    def __init__(
        self,
        listen_host: str = _DEFAULT_LISTEN_HOST,
        listen_port: int = _DEFAULT_LISTEN_PORT,
        remote_host: str = _DEFAULT_REMOTE_HOST,
        remote_port: int = _DEFAULT_REMOTE_PORT,
    ) -> None:
        """
        Initialize the transport.  No sockets are opened until used.

        Args:
            listen_host: Interface to receive controller feedback on.
            listen_port: UDP port to receive controller feedback on.
            remote_host: Host running the Bitwig controller script.
            remote_port: UDP port the controller script listens on.
        """
        self.listen_host = listen_host
        self.listen_port = listen_port
        self.remote_host = remote_host
        self.remote_port = remote_port

        self._handlers: defaultdict[str, list[Handler]] = defaultdict(list)
        self._lock = threading.Lock()
        self._client: SimpleUDPClient | None = None
        self._server: BlockingOSCUDPServer | None = None
        self._thread: threading.Thread | None = None

    @property
    def is_listening(self) -> bool:
        return self._server is not None

    @property
    def bound_port(self) -> int | None:
        """Port actually bound (differs from ``listen_port`` when that is 0)."""
        if self._server is None:
            return None
        return self._server.server_address[1]

    # ── Subscriptions ───────────────────────────────────────────────────────

    def subscribe(self, address: str, handler: Handler) -> None:
        with self._lock:
            self._handlers[address].append(handler)

    def unsubscribe(self, address: str, handler: Handler) -> None:
        with self._lock:
            handlers = self._handlers.get(address)
            if not handlers:
                return
            for i, existing in enumerate(handlers):
                if existing is handler:
                    del handlers[i]
                    break
            if not handlers:
                del self._handlers[address]

    def subscription_count(self, address: str | None = None) -> int:
        """Number of handlers on ``address``, or across all addresses."""
        with self._lock:
            if address is not None:
                return len(self._handlers.get(address, ()))
            return sum(len(hs) for hs in self._handlers.values())

    def _route(self, address: str, *args: Any) -> None:
        """Dispatcher default handler: deliver one message to its subscribers."""
        logger.debug("From Bitwig: %s %s", address, list(args))
        with self._lock:
            handlers = tuple(self._handlers.get(address, ()))
        for handler in handlers:
            handler(*args)

    # ── Receiving ───────────────────────────────────────────────────────────

    def start(self) -> None:
        """Bind the feedback port and start dispatching on a background thread.

        Raises:
            OSError: If the port cannot be bound.
        """
        if self._server is not None:
            return

        dispatcher = Dispatcher()
        dispatcher.set_default_handler(self._route)
        self._server = BlockingOSCUDPServer((self.listen_host, self.listen_port), dispatcher)
        self._thread = threading.Thread(
            target=self._server.serve_forever,
            name="bitwig-osc-server",
            daemon=True,
        )
        self._thread.start()
        logger.info(
            "Listening for Bitwig on %s:%d (sending to %s:%d)",
            self.listen_host,
            self.bound_port,
            self.remote_host,
            self.remote_port,
        )

    def stop(self) -> None:
        """Stop the server thread and close the feedback socket."""
        if self._server is None:
            return
        self._server.shutdown()
        self._server.server_close()
        if self._thread is not None:
            self._thread.join(timeout=_JOIN_TIMEOUT)
        self._server = None
        self._thread = None
        logger.info("Stopped listening for Bitwig")

    def __enter__(self) -> PythonOscTransport:
        self.start()
        return self

    def __exit__(self, *exc: object) -> None:
        self.stop()

    # ── Sending ─────────────────────────────────────────────────────────────

    def _ensure_client(self) -> SimpleUDPClient:
        if self._client is None:
            self._client = SimpleUDPClient(self.remote_host, self.remote_port)
        return self._client

    def send(self, address: str, *args: Any) -> None:
        message = build_message(address, *args)
        logger.debug("To Bitwig: %s %s", address, [_plain(a) for a in args])
        self._ensure_client().send(message)

    def __repr__(self) -> str:
        return (
            f"PythonOscTransport(listen={self.listen_host}:{self.listen_port}, "
            f"remote={self.remote_host}:{self.remote_port})"
        )
