"""Tests for Modbus RTU frame building and parsing."""

import pytest

from wifikit_assistant.errors import MalformedHexInput
from wifikit_assistant.protocol.framing import (
    BINARY_SEND,
    Frame,
    FunctionCode,
    build_rtu_frame,
    decode_hex,
    frame_prefix,
    parse_rtu_frame,
    verify_rtu_frame,
    wrap_binary_send,
)
from wifikit_assistant.utils.crc import crc16_bytes


def test_frame_prefix():
    """Slave 0x01 followed by the function code."""
    assert frame_prefix(FunctionCode.READ_HOLDING_REGISTERS) == "0103"
    assert frame_prefix(FunctionCode.WRITE_HOLDING_REGISTERS) == "0110"


def test_build_read_frame():
    """Read frame is prefix + payload + CRC, 8 bytes in total."""
    frame = build_rtu_frame(FunctionCode.READ_HOLDING_REGISTERS, "00120001")
    assert frame.startswith("0103" + "00120001")
    assert frame == "010300120001240f"
    assert len(frame) // 2 == 8


def test_build_write_frame():
    """Write frame carries 9 bytes before the CRC."""
    frame = build_rtu_frame(FunctionCode.WRITE_HOLDING_REGISTERS, "00280001020064")
    assert frame.startswith("0110")
    assert len("0110" + "00280001020064") // 2 == 9
    assert frame == "011000280001020064a193"
    assert len(frame) // 2 == 11


def test_build_frame_crc_matches_bytes():
    """Trailing CRC is computed over the decoded prefix + payload."""
    frame = build_rtu_frame(FunctionCode.READ_HOLDING_REGISTERS, "00000001")
    body = bytes.fromhex(frame[:-4])
    assert frame[-4:] == crc16_bytes(body).hex()


def test_build_frame_accepts_uppercase_hex():
    """Hex case does not change the frame bytes."""
    lower = build_rtu_frame(FunctionCode.WRITE_HOLDING_REGISTERS, "002a0001020a0b")
    upper = build_rtu_frame(FunctionCode.WRITE_HOLDING_REGISTERS, "002A0001020A0B")
    assert bytes.fromhex(lower) == bytes.fromhex(upper)


def test_build_frame_odd_length():
    """Odd-length hex is rejected."""
    with pytest.raises(MalformedHexInput):
        build_rtu_frame(FunctionCode.WRITE_HOLDING_REGISTERS, "002800010200640")


def test_build_frame_non_hex():
    """Non-hex characters are rejected."""
    with pytest.raises(MalformedHexInput):
        build_rtu_frame(FunctionCode.READ_HOLDING_REGISTERS, "0012zz01")


def test_decode_hex_non_ascii():
    """Non-ASCII input is reported as malformed hex, not a raw ValueError."""
    with pytest.raises(MalformedHexInput):
        decode_hex("00é1")


def test_wrap_binary_send_read():
    """Length argument for a read frame is 8."""
    frame = build_rtu_frame(FunctionCode.READ_HOLDING_REGISTERS, "00120001")
    assert wrap_binary_send(frame) == f"{BINARY_SEND}=8,010300120001240f\n"


def test_wrap_binary_send_write():
    """Length argument is half the hex length of frame + CRC."""
    frame = build_rtu_frame(FunctionCode.WRITE_HOLDING_REGISTERS, "00280001020064")
    assert wrap_binary_send(frame).startswith("AT+INVDATA=11,0110")


def test_verify_and_parse_frame():
    """A CRC-valid reply parses into its fields."""
    data = bytes.fromhex("0103020064b9af")
    assert verify_rtu_frame(data)
    parsed = parse_rtu_frame(data)
    assert parsed is not None
    assert parsed.slave == 0x01
    assert parsed.function == 0x03
    assert parsed.payload == b"\x02\x00\x64"


def test_parse_bad_checksum():
    """Frames with corrupt checksum should return None."""
    data = bytearray.fromhex("0103020064b9af")
    data[-1] = 0x00
    assert parse_rtu_frame(bytes(data)) is None


def test_parse_too_short():
    assert parse_rtu_frame(b"\x01\x03") is None


def test_frame_to_bytes():
    """Frame.to_bytes appends the CRC low byte first."""
    frame = Frame(slave=0x01, function=0x03, payload=bytes.fromhex("00120001"))
    assert frame.to_bytes().hex() == "010300120001240f"


def test_frame_repr():
    """Frame repr should be readable."""
    r = repr(Frame(slave=0x01, function=0x10, payload=b"\x02"))
    assert "0x10" in r
