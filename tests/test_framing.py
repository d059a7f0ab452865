from __future__ import annotations

import pytest

from shared.protocol import ACK_MESSAGE, ErrorCode, FatalSessionError, decode_frame, encode_frame


def test_encode_decode_roundtrip():
    frame = encode_frame("hello there", 255)
    assert len(frame) == 255
    assert frame.startswith(b"hello there\x00")
    assert decode_frame(frame) == "hello there"


def test_multibyte_text_roundtrip():
    text = "héllo ✓ 你好"
    assert decode_frame(encode_frame(text, 64)) == text


def test_empty_message_is_all_padding():
    frame = encode_frame("", 16)
    assert frame == b"\x00" * 16
    assert decode_frame(frame) == ""


def test_overlong_message_is_truncated_to_frame():
    text = "a" * 300 + "b" * 10
    frame = encode_frame(text, 255)
    assert len(frame) == 255
    assert decode_frame(frame) == "a" * 255


def test_message_filling_frame_exactly():
    text = "x" * 32
    frame = encode_frame(text, 32)
    assert frame == text.encode()
    assert decode_frame(frame) == text


def test_embedded_zero_byte_ends_message():
    assert decode_frame(encode_frame("ab\x00cd", 16)) == "ab"


def test_ack_message_fits_default_frame():
    assert decode_frame(encode_frame(ACK_MESSAGE, 255)) == "Message Received."


def test_invalid_utf8_is_fatal():
    with pytest.raises(FatalSessionError) as info:
        decode_frame(b"\xff\xfeabc" + b"\x00" * 11)
    assert info.value.code is ErrorCode.INVALID_UTF8


def test_truncation_can_split_a_character():
    frame = encode_frame("é", 1)
    assert frame == b"\xc3"
    with pytest.raises(FatalSessionError):
        decode_frame(frame)
