"""
Shared fixtures for the test suite.

Centralizes reusable test infrastructure so individual test files
don't need to repeat transport / listener boilerplate.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from typing import Any

import pytest

from core.bitwig.session import Session
from core.bitwig.types import ChangeEvent

# ---------------------------------------------------------------------------
# Fake transport
# ---------------------------------------------------------------------------


class FakeTransport:
    """In-memory OSC transport — no sockets.

    ``sent`` records every outbound ``(address, args)`` pair; ``deliver()``
    plays the role of the controller script sending feedback.
    """

    def __init__(self) -> None:
        self.handlers: defaultdict[str, list[Callable[..., None]]] = defaultdict(list)
        self.sent: list[tuple[str, tuple[Any, ...]]] = []

    def subscribe(self, address: str, handler: Callable[..., None]) -> None:
        self.handlers[address].append(handler)

    def unsubscribe(self, address: str, handler: Callable[..., None]) -> None:
        handlers = self.handlers.get(address, [])
        for i, existing in enumerate(handlers):
            if existing is handler:
                del handlers[i]
                break

    def send(self, address: str, *args: Any) -> None:
        self.sent.append((address, args))

    def deliver(self, address: str, *args: Any) -> int:
        """Dispatch one inbound message; returns the number of handlers called."""
        handlers = tuple(self.handlers.get(address, ()))
        for handler in handlers:
            handler(*args)
        return len(handlers)

    def subscription_count(self, address: str | None = None) -> int:
        if address is not None:
            return len(self.handlers.get(address, ()))
        return sum(len(hs) for hs in self.handlers.values())

    def sent_to(self, address: str) -> list[tuple[Any, ...]]:
        return [args for addr, args in self.sent if addr == address]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def session(transport: FakeTransport) -> Session:
    """Default-sized session attached to the fake transport."""
    s = Session()
    s.attach(transport)
    return s


@pytest.fixture()
def listen() -> Callable[[Any, str], list[ChangeEvent]]:
    """Factory: ``listen(entity, name)`` returns a list that fills with events."""

    def _listen(entity: Any, name: str) -> list[ChangeEvent]:
        received: list[ChangeEvent] = []
        entity.on(name, received.append)
        return received

    return _listen
