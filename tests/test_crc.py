"""Tests for CRC-16 calculation."""

from wifikit_assistant.utils.crc import crc16, crc16_bytes


def test_crc16_empty():
    """CRC of empty data is the untouched initial register."""
    assert crc16(b"") == 0xFFFF
    assert crc16_bytes(b"") == b"\xff\xff"


def test_crc16_known_value():
    """Read one register at 0x0012 from slave 1, checked against a Modbus CRC table."""
    data = bytes([0x01, 0x03, 0x00, 0x12, 0x00, 0x01])
    result = crc16(data)
    assert result == 0x0F24, f"Expected 0x0F24, got 0x{result:04X}"


def test_crc16_reference_frame():
    """The textbook frame 01 03 00 00 00 01 ends in 84 0A."""
    assert crc16_bytes(bytes([0x01, 0x03, 0x00, 0x00, 0x00, 0x01])) == b"\x84\x0a"


def test_crc16_bytes_little_endian():
    """Low byte goes first on the wire."""
    data = bytes([0x01, 0x03, 0x00, 0x12, 0x00, 0x01])
    assert crc16_bytes(data) == bytes([0x24, 0x0F])


def test_crc16_deterministic():
    """Same input should always produce same output."""
    data = b"\x01\x10\x00\x28\x00\x01\x02\x00\x64"
    assert crc16(data) == crc16(data)
    assert crc16(data) == 0x93A1


def test_crc16_different_inputs():
    """Different inputs should produce different CRCs."""
    assert crc16(b"\x01") != crc16(b"\x02")
