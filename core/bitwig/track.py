"""core/bitwig/track.py — A mixer track with its clip slots and sends.

Inbound feedback (1-based track id)::

    /track/{id}/solo | mute | recarm | pan | volume | selected | name
    /track/{id}/vu                      → vu_level
    /track/{id}/send/{n}/name | volume  → sends[n] (0-based, no events by default)

Outbound commands are fire-and-forget; the mirrored field only changes when
the controller echoes the value back.  Note the asymmetry kept from the
controller script: arming is *sent* to ``/arm`` but *reported* on ``/recarm``.

Clip refresh
────────────
When the scene layout changes, the caller sets ``num_scenes`` and calls
:meth:`Track.refresh_clips`, which tears down every clip subscription,
rebuilds the slots and asks the controller to resend each slot's state::

    track.set_num_scenes(16)
    track.refresh_clips()     # 16 × /track/#/clip/info <track id> <slot>
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from core.bitwig import addresses
from core.bitwig.clip import Clip
from core.bitwig.entity import Entity, NotAttachedError
from core.bitwig.events import EventRegistry
from core.bitwig.transport import Handler
from core.bitwig.types import DEFAULT_CLIP_SLOT_COUNT, DEFAULT_SEND_COUNT, OscArg, Send

if TYPE_CHECKING:
    from core.bitwig.session import Session

logger = logging.getLogger(__name__)

# wire property → attribute
TRACK_FIELDS: dict[str, str] = {
    "solo": "solo",
    "mute": "mute",
    "recarm": "recarm",
    "pan": "pan",
    "volume": "volume",
    "vu": "vu_level",
    "selected": "selected",
    "name": "name",
}


class Track(Entity):
    """A track in the controller's track bank.

    Args:
        track_id:   1-based id, fixed for the track's lifetime.
        bus:        Session mediator receiving ``track:<field>`` and
                    ``clip:<field>`` events.
        send_count: Number of send slots.
        clip_count: Clip slots created up front (before any refresh).
        emit_sub_field_events: Emit ``send_name`` / ``send_volume`` events.
        session:    Owning session (back-reference only).
    """

    kind = "track"

    def __init__(
        self,
        track_id: int,
        *,
        bus: EventRegistry | None = None,
        send_count: int = DEFAULT_SEND_COUNT,
        clip_count: int = DEFAULT_CLIP_SLOT_COUNT,
        emit_sub_field_events: bool = False,
        session: Session | None = None,
    ) -> None:
        super().__init__(bus)
        self.id = track_id
        self.session = session
        self.emit_sub_field_events = emit_sub_field_events

        self.solo: Any = 0
        self.mute: Any = 0
        self.recarm: Any = 0
        self.volume: Any = 0
        self.pan: Any = 0
        self.selected: Any = 0
        self.name: Any = ""
        self.vu_level: Any = 0
        self.num_scenes: int = clip_count

        self.sends: list[Send] = [Send() for _ in range(send_count)]
        self.clips: list[Clip] = self._build_clips(clip_count)

    def _build_clips(self, count: int) -> list[Clip]:
        return [Clip(self, i, bus=self._bus) for i in range(count)]

    # ── Entity hooks ────────────────────────────────────────────────────────

    def bindings(self) -> list[tuple[str, Handler]]:
        subs = [
            (addresses.track(self.id, wire), self.field_handler(attr))
            for wire, attr in TRACK_FIELDS.items()
        ]
        for n in range(len(self.sends)):
            subs.append((addresses.track_send(self.id, n, "name"), self._send_handler(n, "name")))
            subs.append(
                (addresses.track_send(self.id, n, "volume"), self._send_handler(n, "volume"))
            )
        return subs

    def _send_handler(self, n: int, attr: str) -> Handler:
        def handler(*args: Any) -> None:
            self.update_slot(
                self.sends[n],
                attr,
                args[0] if args else None,
                event=f"send_{attr}",
                num=n,
                emit=self.emit_sub_field_events,
            )

        return handler

    def children(self) -> Iterable[Clip]:
        return tuple(self.clips)

    def identity(self) -> dict[str, Any]:
        return {"track_id": self.id}

    # ── Lookup ──────────────────────────────────────────────────────────────

    def clip(self, clip_id: int) -> Clip:
        """Return the clip in slot ``clip_id`` (0-based).

        Raises:
            ValueError: If the slot does not exist.
        """
        if 0 <= clip_id < len(self.clips):
            return self.clips[clip_id]
        raise ValueError(
            f"Clip id {clip_id} out of range (track {self.id} has {len(self.clips)} clips)"
        )

    # ── Clip refresh ────────────────────────────────────────────────────────

    def set_num_scenes(self, num_scenes: int) -> None:
        """Record the scene count used to size the next :meth:`refresh_clips`."""
        self.num_scenes = num_scenes

    def refresh_clips(self) -> None:
        """Rebuild every clip slot and request fresh slot state.

        Messages for the old slots that arrive after teardown are dropped;
        the info requests make the controller resend them.

        Raises:
            NotAttachedError: If the track has no transport.  Nothing is
                torn down in that case.
        """
        transport = self.transport
        if transport is None:
            raise NotAttachedError(repr(self))

        for clip in self.clips:
            clip.detach()

        self.clips = self._build_clips(self.num_scenes)
        for clip in self.clips:
            clip.attach(transport)

        for i in range(self.num_scenes):
            self._send(addresses.CLIP_INFO, OscArg.integer(self.id), OscArg.integer(i))
        logger.debug("Track %d: refreshed %d clip slots", self.id, self.num_scenes)

    # ── Commands ────────────────────────────────────────────────────────────

    def set_name(self, name: str) -> None:
        self._send(addresses.track(self.id, "name"), OscArg.string(name))

    def set_recarm(self, recarm: int) -> None:
        """Arm (1) or disarm (0).  Sent to ``/arm``; feedback arrives on ``/recarm``."""
        self._send(addresses.track(self.id, "arm"), OscArg.integer(recarm))

    def set_solo(self, solo: int) -> None:
        self._send(addresses.track(self.id, "solo"), OscArg.integer(solo))

    def set_mute(self, mute: int) -> None:
        self._send(addresses.track(self.id, "mute"), OscArg.integer(mute))

    def set_volume(self, volume: int) -> None:
        """Set the fader, 0 – 127."""
        self._send(addresses.track(self.id, "volume"), OscArg.integer(volume))

    def set_pan(self, pan: float) -> None:
        self._send(addresses.track(self.id, "pan"), OscArg.float_(pan))

    def set_send_name(self, send: int, name: str) -> None:
        self._send(addresses.track_send(self.id, send, "name"), OscArg.string(name))

    def set_send_volume(self, send: int, volume: int) -> None:
        self._send(addresses.track_send(self.id, send, "volume"), OscArg.integer(volume))

    def view(self) -> None:
        """Focus this track in the controller."""
        self._send(addresses.TRACK_VIEW, OscArg.integer(self.id))

    def __repr__(self) -> str:
        return f"Track(id={self.id}, name={self.name!r})"
