"""Session configuration.

A ``SessionConfig`` is built once from command-line or tool arguments and
handed to the session. Strategy selection happens here, so conflicting or
malformed options fail before any socket exists.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from .errors import ConfigurationError
from .protocol.commands import DEFAULT_UNLOCK_CODE
from .protocol.framing import READ_PAYLOAD_HEX_LEN, WRITE_PAYLOAD_MIN_HEX_LEN


@dataclass(frozen=True)
class CredentialQuery:
    """Read AP, station and web settings."""


@dataclass(frozen=True)
class AtPassthrough:
    """Send one raw AT command."""

    command: str


@dataclass(frozen=True)
class ModbusRead:
    """Read holding registers; payload is address + quantity as hex."""

    payload: str


@dataclass(frozen=True)
class ModbusWrite:
    """Write holding registers; payload is address, quantity, count, values."""

    payload: str


Strategy = Union[CredentialQuery, AtPassthrough, ModbusRead, ModbusWrite]


@dataclass(frozen=True)
class SessionConfig:
    """Everything one session needs, fixed for its lifetime."""

    target: str
    source: str | None = None
    unlock_code: str = DEFAULT_UNLOCK_CODE
    strategy: Strategy = field(default_factory=CredentialQuery)
    verbose: bool = False


def select_strategy(
    at_command: str | None = None,
    modbus_read: str | None = None,
    modbus_write: str | None = None,
) -> Strategy:
    """Pick the single command strategy from mutually exclusive options.

    Raises:
        ConfigurationError: If more than one option is set, or a Modbus
            payload has the wrong length.
    """
    chosen = [
        name
        for name, value in (
            ("at", at_command),
            ("modbus-read", modbus_read),
            ("modbus-write", modbus_write),
        )
        if value
    ]
    if len(chosen) > 1:
        raise ConfigurationError(
            f"Options {', '.join(chosen)} are mutually exclusive"
        )

    if at_command:
        return AtPassthrough(command=at_command)

    if modbus_read:
        if len(modbus_read) != READ_PAYLOAD_HEX_LEN:
            raise ConfigurationError(
                "modbus-read needs the first register address and the length "
                "as 8 hex chars, e.g. 00120001 reads register 0x0012, length 1"
            )
        return ModbusRead(payload=modbus_read)

    if modbus_write:
        if len(modbus_write) < WRITE_PAYLOAD_MIN_HEX_LEN:
            raise ConfigurationError(
                "modbus-write needs at least 14 hex chars: address, length, "
                "byte count and values, e.g. 00280001020064"
            )
        return ModbusWrite(payload=modbus_write)

    return CredentialQuery()


def build_config(
    target: str | None,
    source: str | None = None,
    unlock_code: str | None = None,
    at_command: str | None = None,
    modbus_read: str | None = None,
    modbus_write: str | None = None,
    verbose: bool = False,
) -> SessionConfig:
    """Validate raw options and build an immutable SessionConfig."""
    if not target:
        raise ConfigurationError("A logger address is required, e.g. 10.10.100.254:48899")

    return SessionConfig(
        target=target,
        source=source or None,
        unlock_code=unlock_code or DEFAULT_UNLOCK_CODE,
        strategy=select_strategy(at_command, modbus_read, modbus_write),
        verbose=verbose,
    )
