"""AT command constants and high-level command builders.

Commands are newline-terminated ASCII lines, except the unlock code and the
handshake acknowledgement which are sent bare.
"""

from __future__ import annotations

from enum import Enum

from .framing import (
    FunctionCode,
    READ_PAYLOAD_HEX_LEN,
    WRITE_PAYLOAD_MIN_HEX_LEN,
    build_rtu_frame,
    wrap_binary_send,
)

# Unlock codes accepted by known firmware variants
DEFAULT_UNLOCK_CODE = "WIFIKIT-214028-READ"
ALTERNATE_UNLOCK_CODE = "HF-A11ASSISTHREAD"
UNLOCK_CODES = (DEFAULT_UNLOCK_CODE, ALTERNATE_UNLOCK_CODE)

ACKNOWLEDGE = "+ok"
OK_MARKER = "+ok="


class Command(str, Enum):
    """AT queries used by the credential readout and the session itself."""

    AP_SETTINGS = "AT+WAP"
    AP_KEY = "AT+WAKEY"
    STA_SSID = "AT+WSSSID"
    STA_KEY = "AT+WSKEY"
    STA_NETWORK = "AT+WANN"
    WEB_LOGIN = "AT+WEBU"
    QUIT = "AT+Q"


# Fixed order in which the credential readout queries the device
CREDENTIAL_COMMANDS: tuple[Command, ...] = (
    Command.AP_SETTINGS,
    Command.AP_KEY,
    Command.STA_SSID,
    Command.STA_KEY,
    Command.STA_NETWORK,
    Command.WEB_LOGIN,
)


def build_at_command(command: str | Command) -> str:
    """Terminate an AT command with a newline."""
    text = command.value if isinstance(command, Command) else command
    return f"{text}\n"


def build_quit() -> str:
    return build_at_command(Command.QUIT)


def build_modbus_read(payload_hex: str) -> str:
    """Build the binary-send command for a read-holding-registers request.

    Args:
        payload_hex: 8 hex chars, register address then quantity,
            e.g. ``"00120001"`` reads one register at 0x0012.
    """
    if len(payload_hex) != READ_PAYLOAD_HEX_LEN:
        raise ValueError(
            f"Read payload must be {READ_PAYLOAD_HEX_LEN} hex chars, "
            f"got {len(payload_hex)}"
        )
    frame = build_rtu_frame(FunctionCode.READ_HOLDING_REGISTERS, payload_hex)
    return wrap_binary_send(frame)


def build_modbus_write(payload_hex: str) -> str:
    """Build the binary-send command for a write-holding-registers request.

    Args:
        payload_hex: At least 14 hex chars: register address, quantity,
            byte count, then the register values.
    """
    if len(payload_hex) < WRITE_PAYLOAD_MIN_HEX_LEN:
        raise ValueError(
            f"Write payload must be at least {WRITE_PAYLOAD_MIN_HEX_LEN} hex "
            f"chars, got {len(payload_hex)}"
        )
    frame = build_rtu_frame(FunctionCode.WRITE_HOLDING_REGISTERS, payload_hex)
    return wrap_binary_send(frame)
