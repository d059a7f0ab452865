"""Protocol-wide constants shared by client and server."""

ENCODING = "utf-8"
DEFAULT_FRAME_SIZE = 255  # bytes per frame, both ends must agree
FRAME_PADDING = b"\x00"
ACK_MESSAGE = "Message Received."
SERVER_IDENTITY = "Server"
DEFAULT_ACCEPT_TIMEOUT_MS = 100
LISTEN_BACKLOG = 128

__all__ = [
    "ENCODING",
    "DEFAULT_FRAME_SIZE",
    "FRAME_PADDING",
    "ACK_MESSAGE",
    "SERVER_IDENTITY",
    "DEFAULT_ACCEPT_TIMEOUT_MS",
    "LISTEN_BACKLOG",
]
