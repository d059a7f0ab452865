from .chat_log import WAITING_NOTICE, ChatEntry, ChatLog, admit_peer, handle_peer_message
from .console import QUIT_COMMAND, ConsoleChat

__all__ = [
    "QUIT_COMMAND",
    "WAITING_NOTICE",
    "ChatEntry",
    "ChatLog",
    "ConsoleChat",
    "admit_peer",
    "handle_peer_message",
]
