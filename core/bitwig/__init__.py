"""core/bitwig — Live mirror of a Bitwig Studio session driven by OSC.

Entities (Session → Track → Clip) hold plain state and become live only once
attached to an :class:`~core.bitwig.transport.OscTransport`.  Nothing in this
package opens sockets; the python-osc binding lives in
ingestion/osc_transport.py.
"""

from core.bitwig.clip import Clip
from core.bitwig.entity import Entity, NotAttachedError
from core.bitwig.events import EventRegistry
from core.bitwig.session import Session, session_summary
from core.bitwig.track import Track
from core.bitwig.types import ChangeEvent, DeviceParam, OscArg, OscType, Send

__all__ = [
    "ChangeEvent",
    "Clip",
    "DeviceParam",
    "Entity",
    "EventRegistry",
    "NotAttachedError",
    "OscArg",
    "OscType",
    "Send",
    "Session",
    "Track",
    "session_summary",
]
