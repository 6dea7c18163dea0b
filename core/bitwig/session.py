"""core/bitwig/session.py — Root of the mirrored Bitwig session.

The Session owns the track bank, the transport/master state and the
``/fxparam`` slots of the selected device.  Its event registry is also the
mediator every descendant re-publishes into, so one ``on()`` call can watch
the whole tree::

    session = Session()
    session.on("playing", lambda ev: print("transport", ev.value))
    session.on("track:volume", lambda ev: print(ev.track_id, ev.value))
    session.on("clip:is_playing", lambda ev: print(ev.track_id, ev.clip_id))
    session.attach(transport)

Inbound feedback::

    /play → playing      /record → recording      /click → click
    /master/volume | pan | solo | mute | recarm | selected
    /fxparam/{1..N}/name | value → device_params[N-1] (no events by default)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from core.bitwig import addresses
from core.bitwig.entity import Entity
from core.bitwig.track import Track
from core.bitwig.transport import Handler
from core.bitwig.types import (
    DEFAULT_CLIP_SLOT_COUNT,
    DEFAULT_DEVICE_PARAM_COUNT,
    DEFAULT_SEND_COUNT,
    DEFAULT_TRACK_COUNT,
    DeviceParam,
    OscArg,
)

logger = logging.getLogger(__name__)

# address → attribute
SESSION_FIELDS: dict[str, str] = {
    addresses.PLAY: "playing",
    addresses.RECORD: "recording",
    addresses.CLICK: "click",
    addresses.MASTER_VOLUME: "volume",
    addresses.MASTER_PAN: "pan",
    addresses.MASTER_SOLO: "solo",
    addresses.MASTER_MUTE: "mute",
    addresses.MASTER_RECARM: "recarm",
    addresses.MASTER_SELECTED: "selected",
}


class Session(Entity):
    """The whole mirrored session.

    Args:
        track_count:        Tracks in the bank (ids ``1..track_count``).
        send_count:         Sends per track.
        clip_count:         Clip slots per track before the first refresh.
        device_param_count: ``/fxparam`` slots.
        emit_sub_field_events: Also emit events for sends and device params.
    """

    kind = "session"

    def __init__(
        self,
        *,
        track_count: int = DEFAULT_TRACK_COUNT,
        send_count: int = DEFAULT_SEND_COUNT,
        clip_count: int = DEFAULT_CLIP_SLOT_COUNT,
        device_param_count: int = DEFAULT_DEVICE_PARAM_COUNT,
        emit_sub_field_events: bool = False,
    ) -> None:
        super().__init__(bus=None)
        self.emit_sub_field_events = emit_sub_field_events

        self.volume: Any = 0
        self.pan: Any = 0
        self.click: Any = 0
        self.playing: Any = 0
        self.recording: Any = 0
        self.selected_track: Any = 0
        self.solo: Any = 0
        self.mute: Any = 0
        self.recarm: Any = 0
        self.selected: Any = 0

        self.device_params: list[DeviceParam] = [
            DeviceParam() for _ in range(device_param_count)
        ]
        # tracks are 1-indexed on the wire
        self.tracks: tuple[Track, ...] = tuple(
            Track(
                i + 1,
                bus=self.events,
                send_count=send_count,
                clip_count=clip_count,
                emit_sub_field_events=emit_sub_field_events,
                session=self,
            )
            for i in range(track_count)
        )

    # ── Entity hooks ────────────────────────────────────────────────────────

    def bindings(self) -> list[tuple[str, Handler]]:
        subs = [(address, self.field_handler(attr)) for address, attr in SESSION_FIELDS.items()]
        for i in range(len(self.device_params)):
            subs.append((addresses.fxparam(i + 1, "name"), self._param_handler(i, "name")))
            subs.append((addresses.fxparam(i + 1, "value"), self._param_handler(i, "value")))
        return subs

    def _param_handler(self, i: int, attr: str) -> Handler:
        def handler(*args: Any) -> None:
            self.update_slot(
                self.device_params[i],
                attr,
                args[0] if args else None,
                event=f"device_param_{attr}",
                num=i,
                emit=self.emit_sub_field_events,
            )

        return handler

    def children(self) -> Iterable[Track]:
        return self.tracks

    # ── Lookup ──────────────────────────────────────────────────────────────

    def track(self, track_id: int) -> Track:
        """Return the track with 1-based id ``track_id``.

        Raises:
            ValueError: If no such track exists.
        """
        if 1 <= track_id <= len(self.tracks):
            return self.tracks[track_id - 1]
        raise ValueError(
            f"Track id {track_id} out of range (session has tracks 1..{len(self.tracks)})"
        )

    # ── Clip layout ─────────────────────────────────────────────────────────

    def set_num_scenes(self, num_scenes: int) -> None:
        """Set the scene count on every track."""
        for track in self.tracks:
            track.set_num_scenes(num_scenes)

    def refresh_clips(self) -> None:
        """Refresh the clip slots of every track, in track order."""
        logger.debug("Refreshing clip slots on %d tracks", len(self.tracks))
        for track in self.tracks:
            track.refresh_clips()

    # ── Commands ────────────────────────────────────────────────────────────

    def play(self) -> None:
        self._send(addresses.PLAY, 1)

    def stop(self) -> None:
        self._send(addresses.STOP, 1)

    def record(self) -> None:
        """Toggle transport recording."""
        self._send(addresses.RECORD)

    def loop(self, force_on: bool = False) -> None:
        """Toggle looping, or switch it on when ``force_on`` is set."""
        if force_on:
            self._send(addresses.REPEAT, 1)
        else:
            self._send(addresses.REPEAT)

    def set_click(self, state: Any) -> None:
        """Enable the metronome for a truthy ``state``; otherwise toggle it off."""
        if state:
            self._send(addresses.CLICK, 1)
        else:
            self._send(addresses.CLICK)

    def launch_scene(self, scene: int) -> None:
        self._send(addresses.scene_launch(scene))

    def set_volume(self, volume: int) -> None:
        self._send(addresses.MASTER_VOLUME, OscArg.integer(volume))

    def set_pan(self, pan: int) -> None:
        self._send(addresses.MASTER_PAN, OscArg.integer(pan))

    def set_tempo(self, tempo: int) -> None:
        self._send(addresses.TEMPO_RAW, OscArg.integer(tempo))

    def set_time(self, time: int) -> None:
        """Move the play position."""
        self._send(addresses.TIME, OscArg.integer(time))

    def toggle_fx_bypass(self) -> None:
        self._send(addresses.FX_BYPASS)

    def select(self) -> None:
        """Select the master track."""
        self._send(addresses.MASTER_SELECT)

    def __repr__(self) -> str:
        return f"Session(tracks={len(self.tracks)}, playing={self.playing!r})"


# ---------------------------------------------------------------------------
# Summary helper
# ---------------------------------------------------------------------------


def session_summary(session: Session) -> dict:
    """Return a compact, JSON-friendly view of the mirrored state.

    Keys:
        playing, recording, click:  Transport flags as last reported.
        master:       {volume, pan, solo, mute}.
        track_count:  int.
        tracks:       List of {id, name, volume, pan, mute, solo, recarm,
                      playing_clips} where ``playing_clips`` lists slot ids
                      whose ``is_playing`` is truthy.
        device_params: List of {name, value}.
    """

    def _track_info(t: Track) -> dict:
        return {
            "id": t.id,
            "name": t.name,
            "volume": t.volume,
            "pan": t.pan,
            "mute": t.mute,
            "solo": t.solo,
            "recarm": t.recarm,
            "playing_clips": [c.id for c in t.clips if c.is_playing],
        }

    return {
        "playing": session.playing,
        "recording": session.recording,
        "click": session.click,
        "master": {
            "volume": session.volume,
            "pan": session.pan,
            "solo": session.solo,
            "mute": session.mute,
        },
        "track_count": len(session.tracks),
        "tracks": [_track_info(t) for t in session.tracks],
        "device_params": [{"name": p.name, "value": p.value} for p in session.device_params],
    }
