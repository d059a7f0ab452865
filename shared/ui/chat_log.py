from __future__ import annotations

import socket
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Union

from shared.protocol import ACK_MESSAGE, DEFAULT_ACCEPT_TIMEOUT_MS
from shared.session import Connection, Occupancy, SendReceipt, Signal
from shared.utils import local_timestamp


WAITING_NOTICE = "Waiting for client..."


@dataclass(frozen=True)
class ChatEntry:
    text: str
    remote: bool = False


class ChatLog:
    """Bounded chat history; the oldest lines fall off first."""

    def __init__(self, max_entries: int = 200) -> None:
        self._entries: Deque[ChatEntry] = deque(maxlen=max_entries)
        self._unrendered: Deque[ChatEntry] = deque(maxlen=max_entries)

    def add(self, text: str, remote: bool = False) -> ChatEntry:
        entry = ChatEntry(text=text, remote=remote)
        self._entries.append(entry)
        self._unrendered.append(entry)
        return entry

    def entries(self) -> List[ChatEntry]:
        return list(self._entries)

    def texts(self) -> List[str]:
        return [entry.text for entry in self._entries]

    def drain_new(self) -> List[ChatEntry]:
        """Entries added since the last drain."""
        pending = list(self._unrendered)
        self._unrendered.clear()
        return pending

    def __len__(self) -> int:
        return len(self._entries)


def handle_peer_message(
    connection: Connection,
    chat: ChatLog,
    message: Union[str, Signal],
    receipt: SendReceipt,
    label: str = "Client",
) -> None:
    """Record what ``receive()`` produced and acknowledge real messages."""
    if message is Signal.EMPTY or message is Signal.BLOCKED:
        return
    if message is Signal.DISCONNECTED:
        chat.add(f"{label} {local_timestamp()}: Disconnected", remote=True)
        if connection.listening:
            chat.add(WAITING_NOTICE)
        return
    if message == ACK_MESSAGE:
        chat.add(f"{label} {local_timestamp()}: {message} taking {receipt.elapsed_ms()}ms", remote=True)
        return
    chat.add(f"{label} {local_timestamp()}: {message}", remote=True)
    connection.notify_received()


def admit_peer(
    connection: Connection,
    listener: socket.socket,
    chat: ChatLog,
    timeout_ms: int = DEFAULT_ACCEPT_TIMEOUT_MS,
) -> bool:
    """Give an empty server slot one bounded chance to bind a client."""
    if not connection.listening or connection.occupancy is not Occupancy.EMPTY:
        return False
    if not connection.await_peer_timeout(listener, timeout_ms):
        return False
    chat.add(f"Client {connection.peer.identity} connected")
    return True


__all__ = ["WAITING_NOTICE", "ChatEntry", "ChatLog", "admit_peer", "handle_peer_message"]
