from __future__ import annotations

from .constants import ENCODING, FRAME_PADDING
from .errors import ErrorCode, FatalSessionError


def encode_frame(message: str, frame_size: int) -> bytes:
    """
    Encode text into exactly ``frame_size`` bytes.

    UTF-8 bytes past ``frame_size`` are dropped; shorter payloads are zero padded.
    The format is not binary safe: a zero byte ends the message on decode.
    """
    data = message.encode(ENCODING)[:frame_size]
    return data.ljust(frame_size, FRAME_PADDING)


def decode_frame(frame: bytes) -> str:
    """Decode the frame prefix up to the first zero byte."""
    payload = bytes(frame).split(FRAME_PADDING, 1)[0]
    try:
        return payload.decode(ENCODING)
    except UnicodeDecodeError as exc:
        raise FatalSessionError(ErrorCode.INVALID_UTF8, message=f"Invalid utf8 message: {exc}") from exc


__all__ = ["encode_frame", "decode_frame"]
