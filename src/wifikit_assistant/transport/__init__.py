"""Datagram transport to the logger's assistant endpoint."""

from .udp_connection import UDPConnection
