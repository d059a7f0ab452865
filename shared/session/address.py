from __future__ import annotations

import logging
import socket
from typing import Sequence, Tuple

from shared.protocol import LISTEN_BACKLOG, ErrorCode, FatalSessionError, UsageError

logger = logging.getLogger(__name__)

SERVER_USAGE = "Error: Usage pairchat-server [addr] [port]"
CLIENT_USAGE = "Error: Usage pairchat-client [host] [port]"

Address = Tuple[str, int]


def resolve_address(argv: Sequence[str], usage: str) -> Address:
    """Read ``host port`` from process arguments (``argv[0]`` is the program)."""
    if len(argv) != 3:
        raise UsageError(usage)
    host, port_text = argv[1], argv[2]
    try:
        port = int(port_text)
    except ValueError as exc:
        raise UsageError(usage, message=f"Invalid port {port_text!r}") from exc
    if not 0 <= port <= 65535:
        raise UsageError(usage, message=f"Port out of range: {port}")
    return host, port


def create_listener(address: Address) -> socket.socket:
    """Bind a listening socket in non-blocking mode."""
    try:
        listener = socket.create_server(address, backlog=LISTEN_BACKLOG)
    except OSError as exc:
        logger.error("Listener failed to bind %s:%s: %s", address[0], address[1], exc)
        raise FatalSessionError(ErrorCode.BIND_FAILED, message=f"Listener failed to bind: {exc}") from exc
    try:
        listener.setblocking(False)
    except OSError as exc:
        listener.close()
        raise FatalSessionError(ErrorCode.NONBLOCKING_FAILED, message=f"failed to initiate non-blocking: {exc}") from exc
    logger.info("Listening on %s:%s", *listener.getsockname()[:2])
    return listener


def connect_server(address: Address) -> socket.socket:
    """Open a connection to the server and switch it to non-blocking mode."""
    try:
        stream = socket.create_connection(address)
    except OSError as exc:
        logger.error("Stream failed to connect to %s:%s: %s", address[0], address[1], exc)
        raise FatalSessionError(ErrorCode.CONNECT_FAILED, message=f"Stream failed to connect: {exc}") from exc
    try:
        stream.setblocking(False)
    except OSError as exc:
        stream.close()
        raise FatalSessionError(ErrorCode.NONBLOCKING_FAILED, message=f"failed to initiate non-blocking: {exc}") from exc
    logger.info("Connected to %s:%s", address[0], address[1])
    return stream


__all__ = [
    "Address",
    "CLIENT_USAGE",
    "SERVER_USAGE",
    "connect_server",
    "create_listener",
    "resolve_address",
]
