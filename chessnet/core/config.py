"""
Configuration and logging setup.

- Settings are read from environment variables (CHESSNET_*), falling back to defaults.
- CLI flags override individual fields with dataclasses.replace().
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Optional

from chessnet.core.shared_types import Color

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def _get(name: str, default: Any, cast: Optional[Callable[[str], Any]] = None) -> Any:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    return cast(value) if cast else value


def _color(value: str) -> Color:
    return Color(value.capitalize())


@dataclass(frozen=True)
class Settings:
    # Transport
    host: str = "127.0.0.1"
    port: int = 5000

    # Timeouts (seconds). io_timeout covers handshake, writes and direct responses.
    # turn_timeout is how long we wait for the opponent to come up with a move.
    io_timeout: float = 30.0
    turn_timeout: float = 600.0

    # Largest single record accepted by the codec
    max_record_bytes: int = 1 << 20

    # If set, the server refuses handshakes asking it to play the other color
    server_color: Optional[Color] = None

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        defaults = cls()
        return cls(
            host=_get("CHESSNET_HOST", defaults.host),
            port=_get("CHESSNET_PORT", defaults.port, int),
            io_timeout=_get("CHESSNET_IO_TIMEOUT_S", defaults.io_timeout, float),
            turn_timeout=_get("CHESSNET_TURN_TIMEOUT_S", defaults.turn_timeout, float),
            max_record_bytes=_get(
                "CHESSNET_MAX_RECORD_BYTES", defaults.max_record_bytes, int
            ),
            server_color=_get("CHESSNET_SERVER_COLOR", defaults.server_color, _color),
            log_level=_get("CHESSNET_LOG_LEVEL", defaults.log_level).upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    """Root logger setup for the command line entrypoint. Library code only ever calls getLogger()."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
