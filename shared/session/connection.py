from __future__ import annotations

import logging
import selectors
import socket
import sys
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

from shared.protocol import (
    ACK_MESSAGE,
    DEFAULT_ACCEPT_TIMEOUT_MS,
    SERVER_IDENTITY,
    ErrorCode,
    FatalSessionError,
    decode_frame,
    encode_frame,
)

from .address import CLIENT_USAGE, SERVER_USAGE, Address, connect_server, create_listener, resolve_address
from .peer import Peer

logger = logging.getLogger(__name__)


class Occupancy(Enum):
    """Peer slot of a session. Client sessions hold the server until it leaves, then EMPTY."""

    NOT_APPLICABLE = "not_applicable"
    EMPTY = "empty"
    OCCUPIED = "occupied"


class SessionState(Enum):
    LISTENING_EMPTY = "listening_empty"
    LISTENING_OCCUPIED = "listening_occupied"
    CLIENT_BOUND = "client_bound"
    CLIENT_DISCONNECTED = "client_disconnected"


class Signal(Enum):
    """Recoverable outcomes returned instead of a message."""

    EMPTY = "Empty"
    BLOCKED = "Blocked"
    DISCONNECTED = "Disconnected"


@dataclass(frozen=True)
class SendReceipt:
    description: Union[str, Signal]
    sent_at: float = field(default_factory=time.monotonic)

    @property
    def sent(self) -> bool:
        return not isinstance(self.description, Signal)

    def elapsed_ms(self, now: Optional[float] = None) -> int:
        """Milliseconds since the frame was handed to the socket."""
        now = time.monotonic() if now is None else now
        return int((now - self.sent_at) * 1000)


class Connection:
    """
    Session with exactly one remote peer over a non-blocking TCP stream.

    Server sessions start empty and bind the first peer accepted from the
    listener; later suitors are accepted and closed by ``reject_others``.
    Client sessions are bound to the server until it goes away; after that
    the slot is empty and the state is ``CLIENT_DISCONNECTED``.
    Every message travels as one frame of exactly ``frame_size`` bytes.
    """

    def __init__(self, frame_size: int, occupancy: Occupancy) -> None:
        if not isinstance(frame_size, int) or isinstance(frame_size, bool) or frame_size <= 0:
            raise ValueError(f"frame_size must be a positive int, got {frame_size!r}")
        self._frame_size = frame_size
        self._listening = occupancy is not Occupancy.NOT_APPLICABLE
        self._occupancy = occupancy
        self._peer: Optional[Peer] = None
        self._rbuf = bytearray()

    @classmethod
    def make_server(cls, frame_size: int, address: Optional[Address] = None) -> Tuple["Connection", socket.socket]:
        """Bind a listener; the caller keeps it alive and passes it to the admission calls."""
        if address is None:
            address = resolve_address(sys.argv, SERVER_USAGE)
        listener = create_listener(address)
        return cls(frame_size, Occupancy.EMPTY), listener

    @classmethod
    def make_client(cls, frame_size: int, address: Optional[Address] = None) -> "Connection":
        if address is None:
            address = resolve_address(sys.argv, CLIENT_USAGE)
        connection = cls(frame_size, Occupancy.NOT_APPLICABLE)
        connection._bind(Peer.wrap(connect_server(address), SERVER_IDENTITY))
        return connection

    @property
    def frame_size(self) -> int:
        return self._frame_size

    @property
    def occupancy(self) -> Occupancy:
        return self._occupancy

    @property
    def peer(self) -> Optional[Peer]:
        return self._peer

    @property
    def connected(self) -> bool:
        return self._peer is not None

    @property
    def listening(self) -> bool:
        """True for server-role sessions, which admit peers from a listener."""
        return self._listening

    @property
    def state(self) -> SessionState:
        if not self._listening:
            return SessionState.CLIENT_BOUND if self._peer is not None else SessionState.CLIENT_DISCONNECTED
        if self._occupancy is Occupancy.OCCUPIED:
            return SessionState.LISTENING_OCCUPIED
        return SessionState.LISTENING_EMPTY

    def await_peer(self, listener: socket.socket) -> None:
        """
        Block until a peer is accepted and bound. There is no timeout and no
        way to cancel; use ``await_peer_timeout`` from a responsive loop.
        """
        if self._peer is not None:
            return
        with selectors.DefaultSelector() as selector:
            selector.register(listener, selectors.EVENT_READ)
            while True:
                peer = Peer.acquire(listener)
                if peer is not None:
                    self._bind(peer)
                    return
                selector.select()

    def await_peer_timeout(self, listener: socket.socket, timeout_ms: int = DEFAULT_ACCEPT_TIMEOUT_MS) -> bool:
        """Wait at most ``timeout_ms`` for a peer. Returns whether one is bound."""
        if self._peer is not None:
            return True
        deadline = time.monotonic() + timeout_ms / 1000
        with selectors.DefaultSelector() as selector:
            selector.register(listener, selectors.EVENT_READ)
            while True:
                peer = Peer.acquire(listener)
                if peer is not None:
                    self._bind(peer)
                    return True
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
                selector.select(remaining)

    def reject_others(self, listener: socket.socket) -> Tuple[bool, Optional[str]]:
        """
        Accept and immediately close one pending suitor while the slot is taken.

        Returns ``(occupied, rejected_identity)``; the refused side gets no
        message, its connection is simply closed.
        """
        if self._occupancy is not Occupancy.OCCUPIED:
            return False, None
        suitor = Peer.acquire(listener)
        if suitor is None:
            return True, None
        identity = suitor.identity
        suitor.close()
        logger.info("Rejected %s, session bound to %s", identity, self._peer.identity if self._peer else None)
        return True, identity

    def send(self, message: str) -> SendReceipt:
        """
        Write ``message`` as one frame. Overlong text is truncated to the frame.

        A failed write is fatal: a non-blocking socket that cannot take the
        whole frame right away is not retried here.
        """
        peer = self._peer
        if peer is None:
            return SendReceipt(Signal.EMPTY)
        frame = encode_frame(message, self._frame_size)
        sent_at = time.monotonic()
        try:
            peer.handle.sendall(frame)
        except OSError as exc:
            logger.error("Writing to %s failed: %s", peer.identity, exc)
            raise FatalSessionError(ErrorCode.WRITE_FAILED, message=f"Writing to socket failed: {exc}") from exc
        logger.debug("Sent frame of %s bytes to %s", len(frame), peer.identity)
        return SendReceipt(f"Message sent {list(frame)}", sent_at)

    def receive(self) -> Union[str, Signal]:
        """
        Try to read one frame without blocking.

        Returns the decoded text, ``Signal.BLOCKED`` while no full frame is
        available, ``Signal.DISCONNECTED`` once the peer is gone, or
        ``Signal.EMPTY`` when no peer is bound.
        """
        peer = self._peer
        if peer is None:
            return Signal.EMPTY
        while len(self._rbuf) < self._frame_size:
            try:
                chunk = peer.handle.recv(self._frame_size - len(self._rbuf))
            except BlockingIOError:
                return Signal.BLOCKED
            except OSError as exc:
                logger.info("Read from %s failed: %s", peer.identity, exc)
                return self._drop_peer()
            if not chunk:
                return self._drop_peer()
            self._rbuf.extend(chunk)
        frame = bytes(self._rbuf)
        self._rbuf.clear()
        logger.debug("Received frame from %s", peer.identity)
        return decode_frame(frame)

    def notify_received(self) -> SendReceipt:
        return self.send(ACK_MESSAGE)

    def close(self) -> None:
        if self._peer is not None:
            self._peer.close()
        self._reset()

    def _bind(self, peer: Peer) -> None:
        self._peer = peer
        self._rbuf.clear()
        if self._listening:
            self._occupancy = Occupancy.OCCUPIED
            logger.info("Peer %s connected", peer.identity)
        else:
            self._occupancy = Occupancy.NOT_APPLICABLE

    def _drop_peer(self) -> Signal:
        peer = self._peer
        self._reset()
        if peer is not None:
            peer.close()
            logger.info("Peer %s disconnected", peer.identity)
        return Signal.DISCONNECTED

    def _reset(self) -> None:
        self._peer = None
        self._rbuf.clear()
        self._occupancy = Occupancy.EMPTY

    def __repr__(self) -> str:
        identity = self._peer.identity if self._peer else None
        return f"Connection(frame_size={self._frame_size}, state={self.state.name}, peer={identity!r})"
