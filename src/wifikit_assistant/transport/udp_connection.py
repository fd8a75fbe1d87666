"""UDP connection to a logger's assistant endpoint.

The device answers each datagram with at most one datagram. Every exchange
is a blocking send, a fixed pacing delay, and, when a reply is expected,
exactly one read bounded by a timeout. Nothing is retried.
"""

from __future__ import annotations

import logging
import socket
import time
from dataclasses import dataclass
from typing import Callable

from ..errors import AddressResolutionError, TransportError

logger = logging.getLogger(__name__)

ASSISTANT_PORT = 48899
RECEIVE_BUFFER_SIZE = 1500  # one datagram
PACING_DELAY = 1.0  # seconds
RESPONSE_TIMEOUT = 5.0  # seconds


@dataclass(frozen=True)
class Endpoint:
    """A resolved IPv4 address and port."""

    host: str
    port: int

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


def resolve_endpoint(address: str, default_port: int = ASSISTANT_PORT) -> Endpoint:
    """Resolve ``host`` or ``host:port`` to an IPv4 Endpoint.

    Raises:
        AddressResolutionError: If the port is not numeric or the host
            cannot be resolved.
    """
    host, sep, port_text = address.rpartition(":")
    if not sep:
        host, port_text = address, ""

    port = default_port
    if port_text:
        try:
            port = int(port_text)
        except ValueError as e:
            raise AddressResolutionError(f"Invalid port in {address!r}") from e
    if not 0 <= port <= 0xFFFF:
        raise AddressResolutionError(f"Port out of range in {address!r}")

    try:
        infos = socket.getaddrinfo(host or None, port, socket.AF_INET, socket.SOCK_DGRAM)
    except (socket.gaierror, UnicodeError) as e:
        raise AddressResolutionError(f"Cannot resolve {address!r}: {e}") from e

    ip, resolved_port = infos[0][4][:2]
    return Endpoint(host=ip, port=resolved_port)


class UDPConnection:
    """Manages the datagram socket for one session.

    Usage::

        with UDPConnection("10.10.100.254") as conn:
            reply = conn.exchange("WIFIKIT-214028-READ")
            conn.exchange("+ok", pause=0, expect_response=False)
    """

    def __init__(
        self,
        target: str,
        source: str | None = None,
        verbose: bool = False,
        socket_factory: Callable[..., socket.socket] = socket.socket,
    ) -> None:
        self._target = target
        self._source = source
        self._verbose = verbose
        self._socket_factory = socket_factory
        self._sock: socket.socket | None = None
        self._remote: Endpoint | None = None
        self._local: Endpoint | None = None

    @property
    def connected(self) -> bool:
        return self._sock is not None

    @property
    def remote(self) -> Endpoint | None:
        return self._remote

    @property
    def local(self) -> Endpoint | None:
        return self._local

    def open(self) -> Endpoint:
        """Resolve both endpoints and connect the socket.

        Returns:
            The resolved remote endpoint.

        Raises:
            AddressResolutionError: If either endpoint cannot be resolved.
            TransportError: If the socket cannot be bound or connected.
        """
        local = resolve_endpoint(self._source, default_port=0) if self._source else None
        remote = resolve_endpoint(self._target)

        sock = self._socket_factory(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            if local is not None:
                sock.bind((local.host, local.port))
            sock.connect((remote.host, remote.port))
        except OSError as e:
            sock.close()
            raise TransportError(f"Could not connect to {remote}: {e}") from e

        self._sock = sock
        self._remote = remote
        self._local = local
        logger.info("* Connecting %s -> %s...", local or "*", remote)
        return remote

    def close(self) -> None:
        """Release the socket."""
        if self._sock is None:
            return
        try:
            self._sock.close()
        finally:
            self._sock = None
            logger.debug("Socket closed")

    def __enter__(self) -> UDPConnection:
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _require_socket(self) -> socket.socket:
        if self._sock is None:
            raise TransportError("Not connected to logger")
        return self._sock

    def _trace(self, message: str, *args) -> None:
        level = logging.INFO if self._verbose else logging.DEBUG
        logger.log(level, message, *args)

    def send(self, message: str) -> int:
        """Write a whole message as one datagram.

        Raises:
            TransportError: If the write fails or is truncated.
        """
        sock = self._require_socket()
        data = message.encode("utf-8")
        self._trace("> %s", message.strip())
        try:
            sent = sock.send(data)
        except OSError as e:
            raise TransportError(f"Failed to send {message.strip()!r}: {e}") from e
        if sent != len(data):
            raise TransportError(
                f"Short write: sent {sent} of {len(data)} bytes"
            )
        return sent

    def receive(self, timeout: float = RESPONSE_TIMEOUT) -> str:
        """Read one datagram and return it as trimmed text.

        Raises:
            TransportError: On timeout or any read error.
        """
        sock = self._require_socket()
        sock.settimeout(timeout)
        try:
            data = sock.recv(RECEIVE_BUFFER_SIZE)
        except TimeoutError as e:
            raise TransportError(f"No response from logger within {timeout}s") from e
        except OSError as e:
            raise TransportError(f"Failed to read response: {e}") from e

        response = data.decode("utf-8", errors="replace").strip()
        self._trace("< %s", response)
        return response

    def exchange(
        self,
        message: str,
        pause: float = PACING_DELAY,
        timeout: float = RESPONSE_TIMEOUT,
        expect_response: bool = True,
    ) -> str | None:
        """Send a message, wait the pacing delay, then optionally read a reply.

        Args:
            message: Command text, sent as-is.
            pause: Seconds to wait after sending, before anything else.
            timeout: Maximum seconds to wait for the reply.
            expect_response: Whether a reply must be read.

        Returns:
            The trimmed reply text, or None when no reply is expected.
        """
        self.send(message)
        time.sleep(pause)
        if not expect_response:
            return None
        return self.receive(timeout)
