"""
Configuration dataclasses for the Bitwig OSC bridge.

These immutable config objects decouple connection and sizing parameters
from constructor signatures, so a client, a shell, and the tests can share
one standard configuration.

Environment loading lives in ``ingestion/bitwig_client.py`` so core/ stays
pure (no env vars, no dotenv import at config time).
"""

from dataclasses import dataclass

_MAX_PORT: int = 65535


@dataclass(frozen=True)
class BridgeConfig:
    """
    Connection and session-shape settings for a Bitwig OSC client.

    Attributes:
        listen_host: Interface the inbound OSC server binds to.
        listen_port: UDP port the bridge sends its feedback to.
        remote_host: Host running the Bitwig OSC controller script.
        remote_port: UDP port the controller script listens on.
        track_count: Number of tracks in the controller's track bank.
        send_count: Number of sends reported per track.
        clip_slot_count: Clip slots created per track before the first refresh.
        device_param_count: Number of ``/fxparam`` slots for the selected device.
        debug: Log every inbound and outbound message at DEBUG level.
        emit_sub_field_events: Emit change events for send and device-parameter
            slots too. Off by default: those slots update silently.

    Example:
        >>> config = BridgeConfig(remote_host="192.168.1.20", track_count=16)
        >>> client = BitwigClient(config)
    """

    listen_host: str = "0.0.0.0"
    listen_port: int = 9099
    remote_host: str = "127.0.0.1"
    remote_port: int = 8099
    track_count: int = 8
    send_count: int = 6
    clip_slot_count: int = 8
    device_param_count: int = 8
    debug: bool = False
    emit_sub_field_events: bool = False

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        for name in ("listen_port", "remote_port"):
            port = getattr(self, name)
            if not 0 < port <= _MAX_PORT:
                raise ValueError(f"{name} must be in 1..{_MAX_PORT}, got {port}")
        for name in ("track_count", "send_count", "clip_slot_count", "device_param_count"):
            count = getattr(self, name)
            if count <= 0:
                raise ValueError(f"{name} must be positive, got {count}")
        if not self.remote_host:
            raise ValueError("remote_host must not be empty")


# Pre-defined configurations

DEFAULT_CONFIG = BridgeConfig()
"""Default configuration: 8 tracks, 6 sends, 8 clip slots, local controller on 8099."""
