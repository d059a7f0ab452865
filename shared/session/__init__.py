"""
Session layer: peer acquisition, single-peer admission and fixed-frame
exchange over a non-blocking TCP stream.
"""

from .address import CLIENT_USAGE, SERVER_USAGE, connect_server, create_listener, resolve_address
from .connection import Connection, Occupancy, SendReceipt, SessionState, Signal
from .peer import Peer

__all__ = [
    "CLIENT_USAGE",
    "SERVER_USAGE",
    "Connection",
    "Occupancy",
    "Peer",
    "SendReceipt",
    "SessionState",
    "Signal",
    "connect_server",
    "create_listener",
    "resolve_address",
]
