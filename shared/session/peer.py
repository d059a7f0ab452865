from __future__ import annotations

import logging
import socket
from typing import Optional

from shared.protocol import ErrorCode, FatalSessionError
from shared.utils import format_address

logger = logging.getLogger(__name__)


class Peer:
    """
    Remote end of a session: one owned socket handle plus a display identity.

    Peers are never copied implicitly. ``duplicate()`` hands out a second handle
    on the same OS connection; the connection stays open until every duplicate
    has been closed.
    """

    def __init__(self, handle: socket.socket, identity: str) -> None:
        self._handle = handle
        self._identity = identity

    @classmethod
    def wrap(cls, handle: socket.socket, identity: str) -> "Peer":
        """Wrap an already connected socket, expected to be non-blocking."""
        return cls(handle, identity)

    @classmethod
    def acquire(cls, listener: socket.socket) -> Optional["Peer"]:
        """Accept one pending connection without blocking, ``None`` if nothing is pending."""
        try:
            handle, addr = listener.accept()
        except BlockingIOError:
            return None
        except OSError as exc:
            logger.debug("Accept failed: %s", exc)
            return None
        try:
            handle.setblocking(False)
        except OSError as exc:
            handle.close()
            raise FatalSessionError(ErrorCode.NONBLOCKING_FAILED, message=f"failed to initiate non-blocking: {exc}") from exc
        return cls(handle, format_address(addr))

    @property
    def handle(self) -> socket.socket:
        return self._handle

    @property
    def identity(self) -> str:
        return self._identity

    @property
    def closed(self) -> bool:
        return self._handle.fileno() == -1

    def duplicate(self) -> "Peer":
        try:
            handle = self._handle.dup()
        except OSError as exc:
            raise FatalSessionError(ErrorCode.DUPLICATE_FAILED, message=f"Could not duplicate socket: {exc}") from exc
        return Peer(handle, self._identity)

    def close(self) -> None:
        """Close this handle only; duplicates keep the connection alive."""
        self._handle.close()

    def __enter__(self) -> "Peer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Peer(identity={self._identity!r}, closed={self.closed})"
