from __future__ import annotations

import time
from typing import Any, Optional, Tuple

DISPLAY_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def local_timestamp(ts: Optional[float] = None) -> str:
    """Local wall-clock time for chat lines."""
    return time.strftime(DISPLAY_TIME_FORMAT, time.localtime(ts))


def format_address(addr: Tuple[Any, ...]) -> str:
    """Render a socket address as ``host:port`` (IPv6 hosts bracketed)."""
    host, port = addr[0], addr[1]
    if ":" in str(host):
        return f"[{host}]:{port}"
    return f"{host}:{port}"


__all__ = ["DISPLAY_TIME_FORMAT", "local_timestamp", "format_address"]
