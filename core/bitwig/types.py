"""core/bitwig/types.py — Value objects shared by the Bitwig session mirror.

Two kinds of value live here:

* **Outbound payloads** — :class:`OscArg`, a closed tagged variant over the
  four OSC argument types the controller script understands.  Commands build
  these so the wire type is decided by the command, not guessed from the
  Python value.
* **Inbound state** — :class:`ChangeEvent` (one per field mutation) and the
  two slot records that are not independently addressable entities,
  :class:`Send` and :class:`DeviceParam`.

No I/O, no timestamps, no env vars.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Session shape defaults (the controller script's bank sizes)
# ---------------------------------------------------------------------------

DEFAULT_TRACK_COUNT: int = 8
DEFAULT_SEND_COUNT: int = 6
DEFAULT_CLIP_SLOT_COUNT: int = 8
DEFAULT_DEVICE_PARAM_COUNT: int = 8


# ---------------------------------------------------------------------------
# Outbound payloads
# ---------------------------------------------------------------------------


class OscType(str, Enum):
    """OSC type tags used for explicitly typed outbound arguments."""

    INTEGER = "i"
    FLOAT = "f"
    STRING = "s"
    BOOL = "T"  # encoded as T or F depending on the value


@dataclass(frozen=True)
class OscArg:
    """An outbound OSC argument with an explicit wire type.

    The value is stored exactly as the caller supplied it; the transport
    converts it to the tag's Python type while encoding.  Bare (untyped)
    values may be passed to ``OscTransport.send`` alongside these, in which
    case the transport infers their type.
    """

    type: OscType
    value: Any

    @classmethod
    def integer(cls, value: Any) -> OscArg:
        return cls(OscType.INTEGER, value)

    @classmethod
    def float_(cls, value: Any) -> OscArg:
        return cls(OscType.FLOAT, value)

    @classmethod
    def string(cls, value: Any) -> OscArg:
        return cls(OscType.STRING, value)

    @classmethod
    def boolean(cls, value: Any) -> OscArg:
        return cls(OscType.BOOL, value)


# ---------------------------------------------------------------------------
# Change events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ChangeEvent:
    """One field mutation on a mirrored entity.

    The same instance is delivered to the entity's own listeners and to the
    Session-level listeners, so identifying fields are always filled in for
    track and clip events.
    """

    field: str
    """Attribute name that changed, e.g. ``"volume"`` or ``"is_playing"``."""

    value: Any
    """New value, exactly as received from the transport."""

    prev: Any
    """Value the field held before this update."""

    track_id: int | None = None
    """1-based id of the owning track (track and clip events only)."""

    clip_id: int | None = None
    """0-based slot id (clip events only)."""

    num: int | None = None
    """Slot index for send / device-parameter events."""


# ---------------------------------------------------------------------------
# Slot records
# ---------------------------------------------------------------------------


@dataclass
class Send:
    """One send slot on a track.  Updated in place by inbound messages."""

    name: str = ""
    volume: Any = 0


@dataclass
class DeviceParam:
    """One parameter slot of the currently selected device (``/fxparam/N``)."""

    name: str = ""
    value: Any = 0
