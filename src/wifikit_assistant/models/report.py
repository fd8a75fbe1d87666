"""Session report models.

Each command strategy produces one report. Reports hold normalized text
only and render themselves as log lines or plain dicts.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..protocol.parser import ModbusReply, strip_ok_prefix

LABEL_WIDTH = 24


@dataclass
class CredentialsReport:
    """Credential readout, in the order the device is queried."""

    ap_settings: str = ""
    ap_encryption: str = ""
    sta_ssid: str = ""
    sta_key: str = ""
    sta_ip: str = ""
    web_login: str = ""

    @classmethod
    def from_responses(cls, responses: list[str]) -> CredentialsReport:
        """Build a report from the six raw responses, stripping ``+ok=``."""
        if len(responses) != 6:
            raise ValueError(f"Expected 6 responses, got {len(responses)}")
        return cls(*(strip_ok_prefix(r) for r in responses))

    def sections(self) -> list[tuple[str, list[tuple[str, str]]]]:
        return [
            ("AP settings", [
                ("Mode, SSID and Channel", self.ap_settings),
                ("Encryption", self.ap_encryption),
            ]),
            ("Station settings", [
                ("SSID", self.sta_ssid),
                ("Key", self.sta_key),
                ("IP", self.sta_ip),
            ]),
            ("Web settings", [
                ("Login", self.web_login),
            ]),
        ]

    def lines(self) -> list[str]:
        result = []
        for title, fields in self.sections():
            result.append(title)
            for label, value in fields:
                result.append(f"\t{label + ':':<{LABEL_WIDTH}}{value}")
        return result

    def to_dict(self) -> dict:
        return {
            "ap": {
                "settings": self.ap_settings,
                "encryption": self.ap_encryption,
            },
            "station": {
                "ssid": self.sta_ssid,
                "key": self.sta_key,
                "ip": self.sta_ip,
            },
            "web": {
                "login": self.web_login,
            },
        }


@dataclass
class CommandReport:
    """Raw reply to an AT passthrough command."""

    command: str
    response: str

    def lines(self) -> list[str]:
        return [self.response]

    def to_dict(self) -> dict:
        return {"command": self.command, "response": self.response}


@dataclass
class ModbusReport:
    """Reply to a tunnelled Modbus request, with control bytes removed."""

    request: str
    response: str
    reply: ModbusReply | None = None

    def lines(self) -> list[str]:
        result = [self.response]
        if self.reply is not None and self.reply.registers:
            values = " ".join(f"0x{v:04X}" for v in self.reply.registers)
            result.append(f"\t{'Registers:':<{LABEL_WIDTH}}{values}")
        elif self.reply is not None and self.reply.is_exception:
            result.append(f"\t{'Exception code:':<{LABEL_WIDTH}}{self.reply.exception_code}")
        return result

    def to_dict(self) -> dict:
        result = {"request": self.request, "response": self.response}
        if self.reply is not None:
            result["decoded"] = self.reply.to_dict()
        return result
