"""
tests/test_bitwig_clip.py — Clip entity.

Covers:
- construction is plain data: defaults, no subscriptions until attach()
- one inbound message per slot field → field updated + one local and one
  Session-level event with matching value / prev
- arrival order preserved, prev chains through consecutive updates
- payloads stored uncoerced
- launch() address shifts the clip id by one
- detach() stops updates; commands on a detached clip raise
"""

from __future__ import annotations

import pytest

from core.bitwig.clip import CLIP_FIELDS, Clip
from core.bitwig.entity import NotAttachedError
from core.bitwig.events import EventRegistry
from core.bitwig.track import Track

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_clip(track_id: int = 2, clip_id: int = 0) -> tuple[Clip, EventRegistry]:
    bus = EventRegistry()
    track = Track(track_id, bus=bus, clip_count=0)
    return Clip(track, clip_id, bus=bus), bus


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestClipConstruction:
    def test_defaults(self) -> None:
        clip, _ = _make_clip()
        assert clip.id == 0
        assert clip.index == 0
        assert clip.is_selected is False
        assert clip.has_content is False
        assert clip.is_playing is False
        assert clip.is_recording is False
        assert clip.is_queued is False

    def test_not_attached_until_attach(self, transport) -> None:
        clip, _ = _make_clip()
        assert not clip.is_attached
        assert transport.subscription_count() == 0

    def test_bindings_cover_every_slot_field(self) -> None:
        clip, _ = _make_clip(track_id=3, clip_id=5)
        addrs = [address for address, _ in clip.bindings()]
        assert addrs == [f"/track/3/slot/5/{wire}" for wire in CLIP_FIELDS]

    def test_attach_subscribes_once_per_field(self, transport) -> None:
        clip, _ = _make_clip()
        clip.attach(transport)
        assert transport.subscription_count() == len(CLIP_FIELDS)


# ---------------------------------------------------------------------------
# Inbound updates
# ---------------------------------------------------------------------------


class TestClipUpdates:
    @pytest.mark.parametrize(("wire", "attr"), list(CLIP_FIELDS.items()))
    def test_single_message_updates_field_and_emits_twice(
        self, transport, listen, wire: str, attr: str
    ) -> None:
        clip, bus = _make_clip(track_id=2, clip_id=4)
        clip.attach(transport)
        initial = getattr(clip, attr)
        local = listen(clip, attr)
        bubbled = listen(bus, f"clip:{attr}")

        transport.deliver(f"/track/2/slot/4/{wire}", 1)

        assert getattr(clip, attr) == 1
        assert len(local) == 1
        assert len(bubbled) == 1
        ev = local[0]
        assert ev.field == attr
        assert ev.value == 1
        assert ev.prev == initial
        assert ev.track_id == 2
        assert ev.clip_id == 4
        assert bubbled[0] == ev

    def test_only_target_field_changes(self, transport) -> None:
        clip, _ = _make_clip()
        clip.attach(transport)

        transport.deliver("/track/2/slot/0/isPlaying", True)

        assert clip.is_playing is True
        assert clip.is_queued is False
        assert clip.has_content is False
        assert clip.index == 0

    def test_prev_chains_in_arrival_order(self, transport, listen) -> None:
        clip, _ = _make_clip()
        clip.attach(transport)
        events = listen(clip, "index")

        transport.deliver("/track/2/slot/0/index", 3)
        transport.deliver("/track/2/slot/0/index", 7)

        assert [(e.prev, e.value) for e in events] == [(0, 3), (3, 7)]

    def test_listener_sees_new_value(self, transport) -> None:
        clip, _ = _make_clip()
        clip.attach(transport)
        seen: list[object] = []
        clip.on("has_content", lambda ev: seen.append(clip.has_content))

        transport.deliver("/track/2/slot/0/hasContent", 1)

        assert seen == [1]

    def test_payload_stored_as_delivered(self, transport) -> None:
        clip, _ = _make_clip()
        clip.attach(transport)

        transport.deliver("/track/2/slot/0/isQueued", "yes")

        assert clip.is_queued == "yes"

    def test_message_without_arguments_sets_none(self, transport) -> None:
        clip, _ = _make_clip()
        clip.attach(transport)

        transport.deliver("/track/2/slot/0/isSelected")

        assert clip.is_selected is None

    def test_other_slot_address_ignored(self, transport, listen) -> None:
        clip, _ = _make_clip(clip_id=0)
        clip.attach(transport)
        events = listen(clip, "is_playing")

        transport.deliver("/track/2/slot/1/isPlaying", True)

        assert clip.is_playing is False
        assert events == []


# ---------------------------------------------------------------------------
# Commands and lifecycle
# ---------------------------------------------------------------------------


class TestClipCommands:
    def test_launch_shifts_clip_id(self, transport) -> None:
        clip, _ = _make_clip(track_id=2, clip_id=0)
        clip.attach(transport)

        clip.launch()

        assert transport.sent == [("/track/2/clip/1/launch", ())]

    def test_launch_without_transport_raises(self) -> None:
        clip, _ = _make_clip()
        with pytest.raises(NotAttachedError, match="not attached"):
            clip.launch()

    def test_detach_stops_updates(self, transport, listen) -> None:
        clip, _ = _make_clip()
        clip.attach(transport)
        events = listen(clip, "is_playing")

        clip.detach()
        delivered = transport.deliver("/track/2/slot/0/isPlaying", True)

        assert delivered == 0
        assert clip.is_playing is False
        assert events == []
        assert transport.subscription_count() == 0

    def test_attach_twice_is_noop(self, transport, listen) -> None:
        clip, _ = _make_clip()
        clip.attach(transport)
        clip.attach(transport)
        events = listen(clip, "index")

        transport.deliver("/track/2/slot/0/index", 1)

        assert len(events) == 1

    def test_repr(self) -> None:
        clip, _ = _make_clip(track_id=2, clip_id=3)
        assert repr(clip) == "Clip(track=2, id=3)"
