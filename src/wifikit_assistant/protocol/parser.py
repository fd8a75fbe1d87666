"""Response normalization and Modbus reply decoding."""

from __future__ import annotations

import binascii
from dataclasses import dataclass, field

from .commands import OK_MARKER
from .framing import FunctionCode, parse_rtu_frame

CONTROL_BYTE = "\x10"


def strip_ok_prefix(response: str) -> str:
    """Remove the first ``+ok=`` marker from a credential response."""
    return response.replace(OK_MARKER, "", 1)


def strip_control_byte(response: str) -> str:
    """Remove every 0x10 byte the AT transport inserts into Modbus replies."""
    return response.replace(CONTROL_BYTE, "")


@dataclass
class ModbusReply:
    """A CRC-valid Modbus RTU reply decoded from a normalized response."""

    slave: int
    function: int
    data: bytes
    registers: list[int] = field(default_factory=list)

    @property
    def is_exception(self) -> bool:
        return bool(self.function & 0x80)

    @property
    def exception_code(self) -> int | None:
        if not self.is_exception or not self.data:
            return None
        return self.data[0]

    def to_dict(self) -> dict:
        result = {
            "slave": self.slave,
            "function": self.function,
            "data_hex": self.data.hex(),
        }
        if self.is_exception:
            result["exception_code"] = self.exception_code
        if self.registers:
            result["registers"] = list(self.registers)
        return result


def decode_modbus_reply(response: str) -> ModbusReply | None:
    """Decode a normalized Modbus response into a ModbusReply.

    The device may echo the reply with a ``+ok=`` marker and whitespace;
    both are ignored here. The reported text is never altered.

    Returns:
        The decoded reply, or ``None`` if the text is not a hex-encoded
        RTU frame with a valid CRC.
    """
    text = response.strip()
    if text.startswith(OK_MARKER):
        text = text[len(OK_MARKER):]
    text = "".join(text.split())

    try:
        raw = binascii.unhexlify(text)
    except (binascii.Error, ValueError):
        return None

    frame = parse_rtu_frame(raw)
    if frame is None:
        return None

    reply = ModbusReply(slave=frame.slave, function=frame.function, data=frame.payload)

    # Read replies: byte count followed by big-endian 16-bit registers
    if frame.function == FunctionCode.READ_HOLDING_REGISTERS and frame.payload:
        count = frame.payload[0]
        values = frame.payload[1 : 1 + count]
        reply.registers = [
            int.from_bytes(values[i : i + 2], "big")
            for i in range(0, len(values) - 1, 2)
        ]

    return reply
