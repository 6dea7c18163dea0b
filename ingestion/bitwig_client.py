"""ingestion/bitwig_client.py — Connected Bitwig session mirror.

Wires a :class:`~ingestion.osc_transport.PythonOscTransport` to a
:class:`~core.bitwig.session.Session` sized from a
:class:`~core.config.BridgeConfig`.

Usage
─────
::

    with BitwigClient(load_config()) as client:
        client.session.on("track:volume", print)
        client.session.track(1).set_volume(100)

Configuration
─────────────
:func:`load_config` reads ``BITWIG_OSC_*`` environment variables (after
loading a ``.env`` file, if present)::

    BITWIG_OSC_LISTEN_HOST      default 0.0.0.0
    BITWIG_OSC_LISTEN_PORT      default 9099
    BITWIG_OSC_REMOTE_HOST      default 127.0.0.1
    BITWIG_OSC_REMOTE_PORT      default 8099
    BITWIG_OSC_TRACK_COUNT      default 8
    BITWIG_OSC_SEND_COUNT       default 6
    BITWIG_OSC_CLIP_SLOT_COUNT  default 8
    BITWIG_OSC_DEVICE_PARAM_COUNT default 8
    BITWIG_OSC_DEBUG            default false
    BITWIG_OSC_SUB_FIELD_EVENTS default false
"""

from __future__ import annotations

import logging
import os
from typing import Any

from dotenv import load_dotenv

from core.bitwig.session import Session
from core.config import DEFAULT_CONFIG, BridgeConfig
from ingestion.osc_transport import PythonOscTransport

logger = logging.getLogger(__name__)

_ENV_PREFIX = "BITWIG_OSC_"
_TRUTHY = frozenset({"1", "true", "yes", "on"})


# ---------------------------------------------------------------------------
# Environment configuration
# ---------------------------------------------------------------------------


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(_ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{_ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(_ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in _TRUTHY


def load_config(**overrides: Any) -> BridgeConfig:
    """Build a :class:`BridgeConfig` from the environment.

    Args:
        **overrides: Field values that win over the environment (``None``
            values are ignored, so argparse results can be passed straight in).

    Returns:
        Validated, frozen config.

    Raises:
        ValueError: If an env var is not a valid integer or the resulting
            config fails validation.
    """
    load_dotenv()
    d = DEFAULT_CONFIG
    values: dict[str, Any] = {
        "listen_host": os.getenv(_ENV_PREFIX + "LISTEN_HOST") or d.listen_host,
        "listen_port": _env_int("LISTEN_PORT", d.listen_port),
        "remote_host": os.getenv(_ENV_PREFIX + "REMOTE_HOST") or d.remote_host,
        "remote_port": _env_int("REMOTE_PORT", d.remote_port),
        "track_count": _env_int("TRACK_COUNT", d.track_count),
        "send_count": _env_int("SEND_COUNT", d.send_count),
        "clip_slot_count": _env_int("CLIP_SLOT_COUNT", d.clip_slot_count),
        "device_param_count": _env_int("DEVICE_PARAM_COUNT", d.device_param_count),
        "debug": _env_bool("DEBUG", d.debug),
        "emit_sub_field_events": _env_bool("SUB_FIELD_EVENTS", d.emit_sub_field_events),
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    return BridgeConfig(**values)


# ---------------------------------------------------------------------------
# BitwigClient
# ---------------------------------------------------------------------------


class BitwigClient:
    """A Session mirrored live over a python-osc transport.

    The session exists (with default state) as soon as the client is built;
    it starts tracking Bitwig once :meth:`connect` has bound the feedback
    port and attached every entity.
    """

    def __init__(self, config: BridgeConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self.transport = PythonOscTransport(
            listen_host=config.listen_host,
            listen_port=config.listen_port,
            remote_host=config.remote_host,
            remote_port=config.remote_port,
        )
        self.session = Session(
            track_count=config.track_count,
            send_count=config.send_count,
            clip_count=config.clip_slot_count,
            device_param_count=config.device_param_count,
            emit_sub_field_events=config.emit_sub_field_events,
        )

    @property
    def song(self) -> Session:
        """Alias for :attr:`session`."""
        return self.session

    def connect(self) -> None:
        """Bind the feedback port, then subscribe the whole session.

        Raises:
            OSError: If the feedback port cannot be bound.
        """
        self.transport.start()
        self.session.attach(self.transport)
        logger.info(
            "Mirroring Bitwig session (%d tracks) from %s:%d",
            len(self.session.tracks),
            self.config.remote_host,
            self.config.remote_port,
        )

    def close(self) -> None:
        self.session.detach()
        self.transport.stop()

    def __enter__(self) -> BitwigClient:
        self.connect()
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
