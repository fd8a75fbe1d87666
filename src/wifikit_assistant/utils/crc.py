"""CRC-16 (Modbus RTU variant).

Polynomial 0xA001 (reflected 0x8005), initial register 0xFFFF, no final
XOR. On the wire the two checksum bytes go low byte first.
"""

from __future__ import annotations

MODBUS_POLYNOMIAL = 0xA001
CRC_INIT = 0xFFFF


def crc16(data: bytes) -> int:
    """Compute the Modbus CRC-16 of *data* as an unsigned 16-bit integer."""
    crc = CRC_INIT
    for byte in data:
        crc ^= byte
        for _ in range(8):
            if crc & 0x0001:
                crc = (crc >> 1) ^ MODBUS_POLYNOMIAL
            else:
                crc >>= 1
    return crc


def crc16_bytes(data: bytes) -> bytes:
    """Return the CRC of *data* as the two bytes appended to an RTU frame."""
    return crc16(data).to_bytes(2, "little")
