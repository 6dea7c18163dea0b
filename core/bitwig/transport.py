"""
OSC transport protocol for the session mirror.

Defines the contract entities rely on to receive and send OSC messages.
This module is pure — no sockets, no threads.  The python-osc
implementation lives in ingestion/osc_transport.py; tests use an in-memory
fake.
"""

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

Handler = Callable[..., None]
"""Inbound handler: called with the message's positional OSC arguments."""


@runtime_checkable
class OscTransport(Protocol):
    """
    Protocol for OSC transports.

    Handlers are matched against the literal address string and invoked
    synchronously, one message at a time, in arrival order.
    """

    def subscribe(self, address: str, handler: Handler) -> None:
        """Register ``handler`` for messages arriving on ``address``."""
        ...

    def unsubscribe(self, address: str, handler: Handler) -> None:
        """Remove a handler previously registered with :meth:`subscribe`.

        Unknown (address, handler) pairs are ignored.
        """
        ...

    def send(self, address: str, *args: Any) -> None:
        """
        Serialize and transmit one message.

        Args:
            address: OSC address, sent verbatim.
            *args:   Bare values (type inferred by the transport) or
                     :class:`~core.bitwig.types.OscArg` instances.

        Raises:
            OSError: Whatever the underlying socket raises; not reinterpreted.
        """
        ...
