"""MCP server entry point for WiFi data loggers.

Exposes the logger sessions as tools via the Model Context Protocol using
the official Python MCP SDK with stdio transport. Every tool call runs one
complete unlock / command / quit session.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .config import build_config
from .errors import AssistantError
from .protocol.commands import (
    ACKNOWLEDGE,
    ALTERNATE_UNLOCK_CODE,
    CREDENTIAL_COMMANDS,
    DEFAULT_UNLOCK_CODE,
    UNLOCK_CODES,
    Command,
)
from .protocol.framing import BINARY_SEND, FunctionCode
from .session import Session
from .transport.udp_connection import ASSISTANT_PORT

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "wifikit-assistant",
    instructions="MCP server for WiFi data loggers speaking the AT assistant protocol",
)


def _run(target: str, **options: Any) -> dict[str, Any]:
    """Build a config, run one session and return the report as a dict."""
    try:
        config = build_config(target=target, **options)
        report = Session(config).run()
    except AssistantError as e:
        logger.warning("Session with %s failed: %s", target, e)
        return {"error": str(e), "error_type": type(e).__name__}
    return report.to_dict()


# ─── SESSION TOOLS ───────────────────────────────────────────────────

@mcp.tool()
def read_credentials(
    target: str,
    source: str | None = None,
    code: str = DEFAULT_UNLOCK_CODE,
) -> dict[str, Any]:
    """Read AP, station and web login settings from a logger.

    Args:
        target: Logger assistant endpoint, host or host:port (default port 48899).
        source: Optional local source address.
        code: Unlock code (WIFIKIT-214028-READ or HF-A11ASSISTHREAD).
    """
    return _run(target, source=source, unlock_code=code)


@mcp.tool()
def send_at_command(
    target: str,
    command: str,
    source: str | None = None,
    code: str = DEFAULT_UNLOCK_CODE,
) -> dict[str, Any]:
    """Send a single raw AT command and return the logger's reply unmodified.

    Args:
        target: Logger assistant endpoint, host or host:port.
        command: AT command text, e.g. "AT+VER".
        source: Optional local source address.
        code: Unlock code.
    """
    if not command:
        return {"error": "command must not be empty"}
    return _run(target, source=source, unlock_code=code, at_command=command)


@mcp.tool()
def modbus_read(
    target: str,
    payload: str,
    source: str | None = None,
    code: str = DEFAULT_UNLOCK_CODE,
) -> dict[str, Any]:
    """Read holding registers from the inverter behind the logger.

    Args:
        target: Logger assistant endpoint, host or host:port.
        payload: 8 hex chars, first register then length, e.g. "00120001".
        source: Optional local source address.
        code: Unlock code.
    """
    if not payload:
        return {"error": "payload must not be empty"}
    return _run(target, source=source, unlock_code=code, modbus_read=payload)


@mcp.tool()
def modbus_write(
    target: str,
    payload: str,
    source: str | None = None,
    code: str = DEFAULT_UNLOCK_CODE,
) -> dict[str, Any]:
    """Write holding registers on the inverter behind the logger.

    Args:
        target: Logger assistant endpoint, host or host:port.
        payload: At least 14 hex chars: register, length, byte count, values,
                 e.g. "00280001020064".
        source: Optional local source address.
        code: Unlock code.
    """
    if not payload:
        return {"error": "payload must not be empty"}
    return _run(target, source=source, unlock_code=code, modbus_write=payload)


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("wifikit://protocol/commands")
def resource_commands() -> str:
    """AT commands used by the session and the credential readout."""
    return json.dumps({
        "port": ASSISTANT_PORT,
        "acknowledge": ACKNOWLEDGE,
        "credentials": [c.value for c in CREDENTIAL_COMMANDS],
        "quit": Command.QUIT.value,
        "binary_send": BINARY_SEND,
        "modbus_functions": {f.name.lower(): f.value for f in FunctionCode},
    })


@mcp.resource("wifikit://protocol/unlock-codes")
def resource_unlock_codes() -> str:
    """Known vendor unlock codes."""
    return json.dumps({"default": DEFAULT_UNLOCK_CODE, "codes": list(UNLOCK_CODES)})


# ─── MCP PROMPTS ─────────────────────────────────────────────────────

@mcp.prompt()
def diagnose_logger(target: str) -> str:
    """Guide the AI through checking a logger's network configuration.

    Args:
        target: Logger assistant endpoint.
    """
    return f"""Check the WiFi data logger at {target}.
Steps:
- Use read_credentials to read the AP, station and web settings
- If the logger does not answer, retry once with code {ALTERNATE_UNLOCK_CODE}
- Compare the station SSID and IP against the expected site network
- Report the AP encryption and whether the web login is still the default

Use send_at_command only for read-only queries unless asked otherwise."""


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
