"""Error taxonomy for a logger session.

Every error is fatal to the session it occurs in. Inner components raise,
and only the entry points (CLI, MCP tools) turn them into exit codes or
error payloads.
"""

from __future__ import annotations


class AssistantError(Exception):
    """Base class for all wifikit-assistant errors."""


class ConfigurationError(AssistantError, ValueError):
    """Conflicting or malformed session options, detected before any I/O."""


class AddressResolutionError(AssistantError, OSError):
    """A local or remote endpoint could not be parsed or resolved."""


class TransportError(AssistantError, ConnectionError):
    """Send failure, receive failure or receive timeout on an exchange."""


class MalformedHexInput(AssistantError, ValueError):
    """A Modbus payload is not valid hex or has an odd length."""
