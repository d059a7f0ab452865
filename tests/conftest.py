from __future__ import annotations

import socket
from typing import Iterator, Tuple

import pytest

from shared.session import Connection, Occupancy, create_listener
from shared.settings import ENV_PREFIX, Settings

from session_helpers import FRAME_SIZE, connect_to


@pytest.fixture
def listener() -> Iterator[socket.socket]:
    sock = create_listener(("127.0.0.1", 0))
    yield sock
    sock.close()


@pytest.fixture
def bound_server(listener) -> Iterator[Tuple[Connection, socket.socket]]:
    """Server session already bound to a plain blocking client socket."""
    connection = Connection(FRAME_SIZE, Occupancy.EMPTY)
    remote = connect_to(listener)
    assert connection.await_peer_timeout(listener, 2000)
    yield connection, remote
    remote.close()
    connection.close()


@pytest.fixture
def fast_settings() -> Settings:
    return Settings(poll_interval_ms=10, accept_timeout_ms=10, history_size=50)


@pytest.fixture
def clean_env(monkeypatch):
    """Clear PAIRCHAT_* variables and restore them (or their absence) afterwards."""
    for name in Settings.model_fields:
        key = f"{ENV_PREFIX}{name.upper()}"
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    return monkeypatch
