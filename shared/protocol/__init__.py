"""
Shared protocol package: constants, error taxonomy and the fixed-size
frame codec used by both roles of a session.
"""

from .constants import (
    ACK_MESSAGE,
    DEFAULT_ACCEPT_TIMEOUT_MS,
    DEFAULT_FRAME_SIZE,
    ENCODING,
    FRAME_PADDING,
    LISTEN_BACKLOG,
    SERVER_IDENTITY,
)
from .errors import ConfigError, ErrorCode, FatalSessionError, SessionError, UsageError
from .framing import decode_frame, encode_frame

__all__ = [
    "ACK_MESSAGE",
    "DEFAULT_ACCEPT_TIMEOUT_MS",
    "DEFAULT_FRAME_SIZE",
    "ENCODING",
    "FRAME_PADDING",
    "LISTEN_BACKLOG",
    "SERVER_IDENTITY",
    "ConfigError",
    "ErrorCode",
    "FatalSessionError",
    "SessionError",
    "UsageError",
    "decode_frame",
    "encode_frame",
]
