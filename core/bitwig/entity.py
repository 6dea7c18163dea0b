"""core/bitwig/entity.py — Shared lifecycle and change propagation for mirrored entities.

Lifecycle
─────────
Entities are built as plain data.  ``attach(transport)`` registers one
inbound subscription per tracked field (returned by :meth:`Entity.bindings`)
and cascades to child entities; ``detach()`` removes exactly those
subscriptions.  Until attached an entity never receives updates and its
commands raise :class:`NotAttachedError`.

Change propagation
──────────────────
For every inbound value the entity:

1. captures the current field value as ``prev``;
2. assigns the new value;
3. emits one :class:`~core.bitwig.types.ChangeEvent` on its own registry
   under the field name, then on the Session mediator under
   ``<kind>:<field>``.

Listeners therefore always observe the new value when re-reading the field,
and local listeners run before Session-level ones.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, ClassVar

from core.bitwig.events import EventRegistry, Listener
from core.bitwig.transport import Handler, OscTransport
from core.bitwig.types import ChangeEvent

logger = logging.getLogger(__name__)


class NotAttachedError(RuntimeError):
    """Raised when a command is issued on an entity with no transport."""

    def __init__(self, entity: str) -> None:
        self.entity = entity
        super().__init__(f"{entity} is not attached to a transport; call attach() first")


class Entity:
    """Base class for Session, Track and Clip.

    Args:
        bus: Session-level registry that re-publishes this entity's events
             under ``<kind>:<field>``.  ``None`` keeps events local, which is
             what the Session itself uses and what isolated tests rely on.
    """

    kind: ClassVar[str] = "entity"

    def __init__(self, bus: EventRegistry | None = None) -> None:
        self.events = EventRegistry()
        self._bus = bus
        self._transport: OscTransport | None = None
        self._subscriptions: list[tuple[str, Handler]] = []

    # ── Lifecycle ───────────────────────────────────────────────────────────

    def bindings(self) -> list[tuple[str, Handler]]:
        """Return this entity's own ``(address, handler)`` subscriptions."""
        raise NotImplementedError

    def children(self) -> Iterable[Entity]:
        """Child entities attached and detached together with this one."""
        return ()

    @property
    def transport(self) -> OscTransport | None:
        return self._transport

    @property
    def is_attached(self) -> bool:
        return self._transport is not None

    def attach(self, transport: OscTransport) -> None:
        """Subscribe this entity and its children on ``transport``.

        Attaching again to the same transport does nothing; attaching to a
        different one detaches from the old transport first.
        """
        if self._transport is transport:
            return
        if self._transport is not None:
            self.detach()

        self._transport = transport
        for address, handler in self.bindings():
            transport.subscribe(address, handler)
            self._subscriptions.append((address, handler))
        for child in self.children():
            child.attach(transport)
        logger.debug("Attached %r (%d subscriptions)", self, len(self._subscriptions))

    def detach(self) -> None:
        """Remove every subscription registered by :meth:`attach`, children first."""
        for child in self.children():
            child.detach()
        if self._transport is None:
            return
        for address, handler in self._subscriptions:
            self._transport.unsubscribe(address, handler)
        self._subscriptions.clear()
        self._transport = None

    # ── Events ──────────────────────────────────────────────────────────────

    def on(self, name: str, listener: Listener) -> None:
        """Listen for one of this entity's events (field names)."""
        self.events.on(name, listener)

    def identity(self) -> dict[str, Any]:
        """Identifying fields copied into every event this entity emits."""
        return {}

    def publish(self, event: ChangeEvent) -> None:
        self.events.emit(event.field, event)
        if self._bus is not None and self._bus is not self.events:
            self._bus.emit(f"{self.kind}:{event.field}", event)

    def update(self, field: str, value: Any) -> None:
        """Assign ``value`` to ``field`` and publish the change."""
        prev = getattr(self, field)
        setattr(self, field, value)
        self.publish(ChangeEvent(field, value, prev, **self.identity()))

    def field_handler(self, field: str) -> Handler:
        """Inbound handler that narrows the OSC arguments to one field value."""

        def handler(*args: Any) -> None:
            self.update(field, args[0] if args else None)

        return handler

    def update_slot(
        self, slot: Any, attr: str, value: Any, *, event: str, num: int, emit: bool
    ) -> None:
        """Update a send / device-parameter slot in place.

        Slots are not entities: unless ``emit`` is set the change is silent.
        """
        prev = getattr(slot, attr)
        setattr(slot, attr, value)
        if emit:
            self.publish(ChangeEvent(event, value, prev, num=num, **self.identity()))

    # ── Commands ────────────────────────────────────────────────────────────

    def _send(self, address: str, *args: Any) -> None:
        """Hand one message to the transport.  Fire-and-forget."""
        if self._transport is None:
            raise NotAttachedError(repr(self))
        self._transport.send(address, *args)
