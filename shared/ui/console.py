from __future__ import annotations

import logging
import queue
import socket
import sys
import threading
from typing import Optional, TextIO

from shared.session import Connection, SendReceipt, Signal
from shared.settings import Settings
from shared.utils import local_timestamp

from .chat_log import WAITING_NOTICE, ChatEntry, ChatLog, admit_peer, handle_peer_message

logger = logging.getLogger(__name__)

QUIT_COMMAND = ":quit"
REMOTE_COLOUR = "\033[32m"
LOCAL_COLOUR = "\033[34m"
RESET_COLOUR = "\033[0m"


class ConsoleChat:
    """Line-based chat loop driving one session from the terminal."""

    def __init__(
        self,
        connection: Connection,
        settings: Settings,
        listener: Optional[socket.socket] = None,
        remote_label: str = "Client",
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ) -> None:
        self.connection = connection
        self.settings = settings
        self.listener = listener
        self.remote_label = remote_label
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.chat = ChatLog(settings.history_size)
        self._colour = self.stdout.isatty()
        self._lines: "queue.Queue[Optional[str]]" = queue.Queue()
        self._receipt = SendReceipt(Signal.EMPTY)
        self._reader: Optional[threading.Thread] = None

    def run(self) -> None:
        logger.info("Console ready. Type '%s' to leave.", QUIT_COMMAND)
        if self.listener is not None:
            self.chat.add(WAITING_NOTICE)
        self._start_reader()
        while self.tick():
            pass
        self.render()

    def tick(self) -> bool:
        """One poll cycle. Returns False once the loop should stop."""
        if self.listener is not None:
            self.connection.reject_others(self.listener)

        message = self.connection.receive()
        handle_peer_message(self.connection, self.chat, message, self._receipt, self.remote_label)
        if message is Signal.DISCONNECTED and self.listener is None:
            return False
        self.render()

        if self.listener is not None:
            admit_peer(self.connection, self.listener, self.chat, self.settings.accept_timeout_ms)

        try:
            line = self._lines.get(timeout=self.settings.poll_interval_ms / 1000)
        except queue.Empty:
            return True
        return self.submit(line)

    def submit(self, line: Optional[str]) -> bool:
        """Send one typed line. ``None`` (stdin closed) or the quit command stops the loop."""
        if line is None or line.strip() == QUIT_COMMAND:
            return False
        self._receipt = self.connection.send(line)
        self.chat.add(f"You {local_timestamp()}: {line}")
        return True

    def render(self) -> None:
        for entry in self.chat.drain_new():
            print(self._format(entry), file=self.stdout, flush=True)

    def _format(self, entry: ChatEntry) -> str:
        if not self._colour:
            return entry.text
        colour = REMOTE_COLOUR if entry.remote else LOCAL_COLOUR
        return f"{colour}{entry.text}{RESET_COLOUR}"

    def _start_reader(self) -> None:
        if self._reader is None:
            self._reader = threading.Thread(target=self._read_lines, name="console-input", daemon=True)
            self._reader.start()

    def _read_lines(self) -> None:
        for line in iter(self.stdin.readline, ""):
            self._lines.put(line.rstrip("\r\n"))
        self._lines.put(None)
