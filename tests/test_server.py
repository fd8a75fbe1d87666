"""Tests for the MCP tool surface, with FastMCP and the session mocked."""

from __future__ import annotations

import json
import sys
from unittest.mock import MagicMock, patch

from wifikit_assistant.errors import TransportError
from wifikit_assistant.models.report import CommandReport


def _get_server_module():
    """Import server module with FastMCP mocked to avoid init issues."""
    mock_fastmcp_cls = MagicMock()
    mock_fastmcp_instance = MagicMock()
    # Make the @mcp.tool() decorator a no-op that returns the function unchanged
    mock_fastmcp_instance.tool.return_value = lambda fn: fn
    mock_fastmcp_instance.resource.return_value = lambda fn: fn
    mock_fastmcp_instance.prompt.return_value = lambda fn: fn
    mock_fastmcp_cls.return_value = mock_fastmcp_instance

    with patch("mcp.server.fastmcp.FastMCP", mock_fastmcp_cls):
        sys.modules.pop("wifikit_assistant.server", None)
        import wifikit_assistant.server as server_mod

    return server_mod


def test_send_at_command_returns_report():
    server = _get_server_module()
    with patch.object(server, "Session") as session_cls:
        session_cls.return_value.run.return_value = CommandReport("AT+VER", "+ok=4.01.14")
        result = server.send_at_command("10.10.100.254", "AT+VER")

    assert result == {"command": "AT+VER", "response": "+ok=4.01.14"}
    config = session_cls.call_args.args[0]
    assert config.strategy.command == "AT+VER"


def test_configuration_error_is_returned():
    """Bad payloads come back as an error dict without opening a session."""
    server = _get_server_module()
    with patch.object(server, "Session") as session_cls:
        result = server.modbus_read("10.10.100.254", "0012")
    assert result["error_type"] == "ConfigurationError"
    session_cls.assert_not_called()


def test_transport_error_is_returned():
    server = _get_server_module()
    with patch.object(server, "Session") as session_cls:
        session_cls.return_value.run.side_effect = TransportError("Empty response from logger")
        result = server.read_credentials("10.10.100.254")
    assert result == {"error": "Empty response from logger", "error_type": "TransportError"}


def test_modbus_write_passes_payload():
    server = _get_server_module()
    with patch.object(server, "Session") as session_cls:
        session_cls.return_value.run.return_value.to_dict.return_value = {"response": "ok"}
        server.modbus_write("10.10.100.254", "00280001020064", code="HF-A11ASSISTHREAD")
    config = session_cls.call_args.args[0]
    assert config.strategy.payload == "00280001020064"
    assert config.unlock_code == "HF-A11ASSISTHREAD"


def test_empty_arguments_rejected():
    server = _get_server_module()
    assert "error" in server.send_at_command("10.10.100.254", "")
    assert "error" in server.modbus_read("10.10.100.254", "")


def test_resources():
    server = _get_server_module()
    commands = json.loads(server.resource_commands())
    assert commands["port"] == 48899
    assert commands["credentials"][0] == "AT+WAP"
    assert commands["modbus_functions"]["read_holding_registers"] == 3
    codes = json.loads(server.resource_unlock_codes())
    assert codes["default"] == "WIFIKIT-214028-READ"


def test_diagnose_prompt_mentions_target():
    server = _get_server_module()
    assert "10.10.100.254" in server.diagnose_logger("10.10.100.254")
