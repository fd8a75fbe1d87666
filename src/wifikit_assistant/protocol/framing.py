"""Modbus RTU frame builder for the logger's binary-send AT command.

Frame layout::

    +----------+----------+----------------------------+----------+
    |  Slave   | Function |          Payload           |   CRC    |
    |  1 byte  |  1 byte  |      variable length       | 2 bytes  |
    +----------+----------+----------------------------+----------+

- Slave: always 0x01
- Function: 0x03 (read holding registers) or 0x10 (write holding registers)
- Payload: register address and quantity; writes add byte count and values
- CRC: Modbus CRC-16 over (slave + function + payload), little-endian

The frame travels as ASCII hex inside ``AT+INVDATA=<n>,<hex>``, where ``n``
is the byte length of the frame including its CRC.
"""

from __future__ import annotations

import binascii
from dataclasses import dataclass
from enum import IntEnum

from ..errors import MalformedHexInput
from ..utils.crc import crc16, crc16_bytes

SLAVE_ID = 0x01
BINARY_SEND = "AT+INVDATA"
READ_PAYLOAD_HEX_LEN = 8  # address(2) + quantity(2)
WRITE_PAYLOAD_MIN_HEX_LEN = 14  # address(2) + quantity(2) + count(1) + value(>=1)


class FunctionCode(IntEnum):
    """Modbus function codes the logger tunnels."""

    READ_HOLDING_REGISTERS = 0x03
    WRITE_HOLDING_REGISTERS = 0x10


@dataclass
class Frame:
    """A Modbus RTU frame without its CRC."""

    slave: int
    function: int
    payload: bytes

    def to_bytes(self) -> bytes:
        body = bytes([self.slave, self.function]) + self.payload
        return body + crc16_bytes(body)

    def __repr__(self) -> str:
        return (
            f"Frame(slave=0x{self.slave:02X}, function=0x{self.function:02X}, "
            f"payload={self.payload.hex(' ') if self.payload else '(empty)'})"
        )


def frame_prefix(function: FunctionCode) -> str:
    """Hex prefix for slave id + function code, e.g. ``"0103"``."""
    return f"{SLAVE_ID:02x}{function.value:02x}"


def decode_hex(text: str) -> bytes:
    """Decode an ASCII hex string, raising MalformedHexInput on bad input."""
    if len(text) % 2:
        raise MalformedHexInput(f"Hex string has odd length ({len(text)}): {text!r}")
    try:
        return binascii.unhexlify(text)
    except (binascii.Error, ValueError) as e:
        raise MalformedHexInput(f"Invalid hex string {text!r}: {e}") from e


def build_rtu_frame(function: FunctionCode, payload_hex: str) -> str:
    """Build a hex-encoded RTU frame with its CRC appended.

    Args:
        function: Read or write holding registers.
        payload_hex: Operation payload as hex (address, quantity and, for
            writes, byte count and values).

    Returns:
        The frame as hex text: prefix + payload + CRC (low byte first).

    Raises:
        MalformedHexInput: If the payload is not valid hex.
    """
    command = frame_prefix(function) + payload_hex
    data = decode_hex(command)
    return command + crc16_bytes(data).hex()


def wrap_binary_send(frame_hex: str) -> str:
    """Wrap a hex frame in the AT binary-send command.

    The numeric argument is the byte length of the frame, i.e. half the
    number of hex characters.
    """
    return f"{BINARY_SEND}={len(frame_hex) // 2},{frame_hex}\n"


def verify_rtu_frame(data: bytes) -> bool:
    """Check the trailing little-endian CRC of a raw RTU frame."""
    if len(data) < 4:
        return False
    expected = int.from_bytes(data[-2:], "little")
    return crc16(data[:-2]) == expected


def parse_rtu_frame(data: bytes) -> Frame | None:
    """Parse a raw RTU frame.

    Returns:
        A ``Frame`` if the frame is long enough and its CRC matches,
        or ``None`` otherwise.
    """
    if not verify_rtu_frame(data):
        return None
    return Frame(slave=data[0], function=data[1], payload=data[2:-2])
