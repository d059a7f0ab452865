from __future__ import annotations

import socket
import time

import pytest

from shared.protocol import ErrorCode, FatalSessionError
from shared.session import Peer
from shared.utils import format_address

from session_helpers import connect_to, read_exactly, wait_for


def test_acquire_without_pending_connection_returns_none(listener):
    started = time.monotonic()
    assert Peer.acquire(listener) is None
    assert time.monotonic() - started < 0.5


def test_acquire_accepts_pending_connection(listener):
    remote = connect_to(listener)
    try:
        peer = wait_for(lambda: Peer.acquire(listener))
        assert peer.identity == format_address(remote.getsockname())
        assert peer.handle.getblocking() is False
        peer.close()
        assert peer.closed
    finally:
        remote.close()


def test_wrap_keeps_handle_and_identity():
    left, right = socket.socketpair()
    try:
        peer = Peer.wrap(left, "Server")
        assert peer.handle is left
        assert peer.identity == "Server"
        assert not peer.closed
    finally:
        left.close()
        right.close()


def test_duplicate_shares_the_connection():
    left, right = socket.socketpair()
    left.setblocking(False)
    peer = Peer.wrap(left, "Server")
    twin = peer.duplicate()
    try:
        assert twin.identity == peer.identity
        assert twin.handle.fileno() != peer.handle.fileno()

        right.sendall(b"ping")
        assert read_exactly(twin.handle, 4) == b"ping"

        peer.handle.sendall(b"from-original")
        assert read_exactly(right, 13) == b"from-original"

        peer.close()
        right.sendall(b"still-open")
        assert read_exactly(twin.handle, 10) == b"still-open"
        twin.handle.sendall(b"pong")
        assert read_exactly(right, 4) == b"pong"
    finally:
        peer.close()
        twin.close()
        right.close()


def test_duplicate_of_closed_handle_is_fatal():
    left, right = socket.socketpair()
    peer = Peer.wrap(left, "Server")
    peer.close()
    try:
        with pytest.raises(FatalSessionError) as info:
            peer.duplicate()
        assert info.value.code is ErrorCode.DUPLICATE_FAILED
    finally:
        right.close()


def test_peer_as_context_manager_closes_handle():
    left, right = socket.socketpair()
    with Peer.wrap(left, "x") as peer:
        assert not peer.closed
    assert peer.closed
    right.close()


def test_format_address_brackets_ipv6():
    assert format_address(("127.0.0.1", 8080)) == "127.0.0.1:8080"
    assert format_address(("::1", 9000, 0, 0)) == "[::1]:9000"
