"""core/bitwig/addresses.py — OSC address builders for the Bitwig controller script.

Every address the mirror listens on or sends to is built here so the
numbering quirks of the controller script live in one place:

* track ids are 1-based on the wire;
* clip *slot* feedback uses the 0-based clip id directly;
* clip *launch* adds 1 to the clip id;
* ``/track/#/…`` commands carry the track id as an argument, not in the path.

Pure module — string formatting only.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Transport / master
# ---------------------------------------------------------------------------

PLAY = "/play"
STOP = "/stop"
RECORD = "/record"
CLICK = "/click"
REPEAT = "/repeat"
TEMPO_RAW = "/tempo/raw"
TIME = "/time"
FX_BYPASS = "/fx/bypass"

MASTER_VOLUME = "/master/volume"
MASTER_PAN = "/master/pan"
MASTER_SOLO = "/master/solo"
MASTER_MUTE = "/master/mute"
MASTER_RECARM = "/master/recarm"
MASTER_SELECTED = "/master/selected"
MASTER_SELECT = "/master/select"

CLIP_INFO = "/track/#/clip/info"
TRACK_VIEW = "/track/#/track/view"


def scene_launch(scene: int) -> str:
    """``/scene/{n}/launch`` — scene numbers are passed through unchanged."""
    return f"/scene/{scene}/launch"


def fxparam(slot: int, prop: str) -> str:
    """``/fxparam/{slot}/{prop}`` — ``slot`` is 1-based."""
    return f"/fxparam/{slot}/{prop}"


# ---------------------------------------------------------------------------
# Tracks
# ---------------------------------------------------------------------------


def track(track_id: int, prop: str) -> str:
    """``/track/{id}/{prop}`` — ``track_id`` is already 1-based."""
    return f"/track/{track_id}/{prop}"


def track_send(track_id: int, send: int, prop: str) -> str:
    """``/track/{id}/send/{send}/{prop}`` — send numbers are 0-based."""
    return f"/track/{track_id}/send/{send}/{prop}"


# ---------------------------------------------------------------------------
# Clips
# ---------------------------------------------------------------------------


def clip_slot(track_id: int, clip_id: int, prop: str) -> str:
    """``/track/{id}/slot/{clip_id}/{prop}`` — inbound slot feedback, 0-based clip id."""
    return f"/track/{track_id}/slot/{clip_id}/{prop}"


def clip_launch(track_id: int, clip_id: int) -> str:
    """``/track/{id}/clip/{clip_id + 1}/launch`` — the launch command is 1-based."""
    return f"/track/{track_id}/clip/{clip_id + 1}/launch"
