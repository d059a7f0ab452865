from __future__ import annotations

from enum import IntEnum
from typing import Optional


class ErrorCode(IntEnum):
    """Failure classes raised by the session layer."""

    BIND_FAILED = 1001
    NONBLOCKING_FAILED = 1002
    CONNECT_FAILED = 1003
    DUPLICATE_FAILED = 1004
    WRITE_FAILED = 1005
    INVALID_UTF8 = 1006
    BAD_USAGE = 1007
    BAD_CONFIG = 1008


class SessionError(Exception):
    """Structured session exception carrying code + message."""

    def __init__(self, code: ErrorCode, message: str = "", usage: Optional[str] = None) -> None:
        self.code = code
        self.message = message
        self.usage = usage
        super().__init__(f"{code.name} ({int(code)}): {message}")


class FatalSessionError(SessionError):
    """Setup or I/O failure the session cannot recover from."""


class UsageError(SessionError):
    """Process arguments do not match the expected shape."""

    def __init__(self, usage: str, message: str = "") -> None:
        super().__init__(ErrorCode.BAD_USAGE, message=message or usage, usage=usage)


class ConfigError(SessionError):
    """Raised when configuration values are invalid."""

    def __init__(self, message: str) -> None:
        super().__init__(ErrorCode.BAD_CONFIG, message=message)


__all__ = ["ErrorCode", "SessionError", "FatalSessionError", "UsageError", "ConfigError"]
