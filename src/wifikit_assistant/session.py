"""Session protocol driver.

One session is a fixed sequence over a single socket::

    UNLOCKING -> ACKNOWLEDGING -> EXECUTING -> QUITTING -> DONE

Any failed exchange raises and ends the session where it stands; the quit
command is only sent after the selected strategy has completed.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Union

from .config import (
    AtPassthrough,
    CredentialQuery,
    ModbusRead,
    ModbusWrite,
    SessionConfig,
)
from .errors import TransportError
from .models.report import CommandReport, CredentialsReport, ModbusReport
from .protocol.commands import (
    ACKNOWLEDGE,
    CREDENTIAL_COMMANDS,
    build_at_command,
    build_modbus_read,
    build_modbus_write,
    build_quit,
)
from .protocol.parser import decode_modbus_reply, strip_control_byte
from .transport.udp_connection import UDPConnection

logger = logging.getLogger(__name__)

Report = Union[CredentialsReport, CommandReport, ModbusReport]


class SessionState(Enum):
    UNLOCKING = "unlocking"
    ACKNOWLEDGING = "acknowledging"
    EXECUTING = "executing"
    QUITTING = "quitting"
    DONE = "done"


class Session:
    """Drives one unlock / command / quit cycle against a logger.

    Usage::

        config = build_config("10.10.100.254:48899")
        report = Session(config).run()
        for line in report.lines():
            print(line)
    """

    def __init__(
        self,
        config: SessionConfig,
        connection_factory: Callable[..., UDPConnection] = UDPConnection,
    ) -> None:
        self._config = config
        self._connection_factory = connection_factory
        self._state = SessionState.UNLOCKING

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def state(self) -> SessionState:
        return self._state

    def run(self) -> Report:
        """Run the full session and return the strategy's report.

        Raises:
            AddressResolutionError: If an endpoint cannot be resolved.
            TransportError: If any exchange fails.
            MalformedHexInput: If a Modbus payload is not valid hex.
        """
        conn = self._connection_factory(
            self._config.target,
            source=self._config.source,
            verbose=self._config.verbose,
        )
        with conn:
            self._unlock(conn)
            self._acknowledge(conn)
            report = self._execute(conn)
            self._quit(conn)
        self._state = SessionState.DONE
        return report

    def _unlock(self, conn: UDPConnection) -> str:
        self._state = SessionState.UNLOCKING
        response = conn.exchange(self._config.unlock_code, pause=1, timeout=5)
        if not response:
            raise TransportError("Empty response from logger")
        logger.debug("Unlocked: %s", response)
        return response

    def _acknowledge(self, conn: UDPConnection) -> None:
        self._state = SessionState.ACKNOWLEDGING
        conn.exchange(ACKNOWLEDGE, pause=0, expect_response=False)

    def _execute(self, conn: UDPConnection) -> Report:
        self._state = SessionState.EXECUTING
        strategy = self._config.strategy

        if isinstance(strategy, CredentialQuery):
            return self._read_credentials(conn)
        if isinstance(strategy, AtPassthrough):
            return self._send_at_command(conn, strategy.command)
        if isinstance(strategy, ModbusRead):
            return self._send_modbus(conn, build_modbus_read(strategy.payload))
        if isinstance(strategy, ModbusWrite):
            return self._send_modbus(conn, build_modbus_write(strategy.payload))
        raise TypeError(f"Unknown strategy: {strategy!r}")

    def _quit(self, conn: UDPConnection) -> None:
        self._state = SessionState.QUITTING
        conn.exchange(build_quit(), pause=1, expect_response=False)

    def _read_credentials(self, conn: UDPConnection) -> CredentialsReport:
        responses = [
            conn.exchange(build_at_command(command), pause=1, timeout=5)
            for command in CREDENTIAL_COMMANDS
        ]
        return CredentialsReport.from_responses(responses)

    def _send_at_command(self, conn: UDPConnection, command: str) -> CommandReport:
        response = conn.exchange(build_at_command(command), pause=1, timeout=5)
        return CommandReport(command=command, response=response)

    def _send_modbus(self, conn: UDPConnection, request: str) -> ModbusReport:
        response = strip_control_byte(conn.exchange(request, pause=1, timeout=5))
        return ModbusReport(
            request=request.strip(),
            response=response,
            reply=decode_modbus_reply(response),
        )


def run_session(config: SessionConfig) -> Report:
    """Run one session with the default UDP transport."""
    return Session(config).run()
