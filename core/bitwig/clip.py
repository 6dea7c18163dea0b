"""core/bitwig/clip.py — One clip slot of a track.

Inbound feedback (0-based slot id in the path)::

    /track/{track_id}/slot/{clip_id}/index
    /track/{track_id}/slot/{clip_id}/isSelected
    /track/{track_id}/slot/{clip_id}/hasContent
    /track/{track_id}/slot/{clip_id}/isPlaying
    /track/{track_id}/slot/{clip_id}/isRecording
    /track/{track_id}/slot/{clip_id}/isQueued

Outbound::

    /track/{track_id}/clip/{clip_id + 1}/launch
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from core.bitwig import addresses
from core.bitwig.entity import Entity
from core.bitwig.events import EventRegistry
from core.bitwig.transport import Handler

if TYPE_CHECKING:
    from core.bitwig.track import Track

# wire property → attribute
CLIP_FIELDS: dict[str, str] = {
    "index": "index",
    "isSelected": "is_selected",
    "hasContent": "has_content",
    "isPlaying": "is_playing",
    "isRecording": "is_recording",
    "isQueued": "is_queued",
}


class Clip(Entity):
    """A clip slot.  Values mirror the protocol payloads exactly, uncoerced.

    Args:
        track:   Owning track (back-reference; supplies the track id).
        clip_id: 0-based slot number, fixed for the clip's lifetime.
        bus:     Session mediator receiving ``clip:<field>`` events.
    """

    kind = "clip"

    def __init__(self, track: Track, clip_id: int, *, bus: EventRegistry | None = None) -> None:
        super().__init__(bus)
        self.track = track
        self.id = clip_id
        self.index: Any = 0
        self.is_selected: Any = False
        self.has_content: Any = False
        self.is_playing: Any = False
        self.is_recording: Any = False
        self.is_queued: Any = False

    def bindings(self) -> list[tuple[str, Handler]]:
        return [
            (addresses.clip_slot(self.track.id, self.id, wire), self.field_handler(attr))
            for wire, attr in CLIP_FIELDS.items()
        ]

    def identity(self) -> dict[str, Any]:
        return {"track_id": self.track.id, "clip_id": self.id}

    def launch(self) -> None:
        """Trigger the clip.  The launch address is 1-based."""
        self._send(addresses.clip_launch(self.track.id, self.id))

    def __repr__(self) -> str:
        return f"Clip(track={self.track.id}, id={self.id})"
