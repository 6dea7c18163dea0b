"""core/bitwig/events.py — Named listener registry.

Used twice over: every entity owns one for its local events, and the
Session's registry doubles as the mediator that re-publishes descendant
events under ``<kind>:<field>`` names (``track:volume``, ``clip:is_playing``).

Usage::

    registry = EventRegistry()
    registry.on("volume", lambda ev: print(ev.prev, "→", ev.value))
    registry.emit("volume", ChangeEvent("volume", 0.8, 0.5))

Listeners are append-only and called synchronously in subscription order.
A listener that raises stops the emit and the exception reaches whoever
delivered the inbound message.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable

from core.bitwig.types import ChangeEvent

Listener = Callable[[ChangeEvent], None]


class EventRegistry:
    """Maps event names to ordered listener lists."""

    def __init__(self) -> None:
        self._listeners: defaultdict[str, list[Listener]] = defaultdict(list)

    def on(self, name: str, listener: Listener) -> None:
        """Append ``listener`` to the listeners of ``name``."""
        self._listeners[name].append(listener)

    def emit(self, name: str, event: ChangeEvent) -> None:
        """Call every listener of ``name`` with ``event``, in subscription order."""
        for listener in tuple(self._listeners.get(name, ())):
            listener(event)

    def listener_count(self, name: str) -> int:
        return len(self._listeners.get(name, ()))

    def __repr__(self) -> str:
        counts = {name: len(ls) for name, ls in self._listeners.items()}
        return f"EventRegistry({counts})"
