"""Command-line entry point.

Examples::

    wifikit-assistant -t 10.10.100.254
    wifikit-assistant -t 10.10.100.254:48899 --at "AT+VER" -v
    wifikit-assistant -t 10.10.100.254 --modbus-read 00120001
"""

from __future__ import annotations

import argparse
import logging
import sys

from .config import build_config
from .errors import AssistantError, ConfigurationError
from .protocol.commands import ALTERNATE_UNLOCK_CODE, DEFAULT_UNLOCK_CODE
from .session import Session

logger = logging.getLogger("wifikit_assistant")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wifikit-assistant",
        description="Read credentials from, or send AT and Modbus commands to, "
        "a WiFi data logger over its UDP assistant port.",
    )
    parser.add_argument(
        "-t", "--target",
        required=True,
        metavar="HOST[:PORT]",
        help="IP and port of the logger's assistant endpoint [10.10.100.254:48899]",
    )
    parser.add_argument(
        "-s", "--source",
        metavar="HOST[:PORT]",
        help="Local source address",
    )
    parser.add_argument(
        "-c", "--code",
        default=DEFAULT_UNLOCK_CODE,
        help=f"WiFi configuration code [{DEFAULT_UNLOCK_CODE} or {ALTERNATE_UNLOCK_CODE}]",
    )

    command = parser.add_mutually_exclusive_group()
    command.add_argument(
        "--at",
        dest="at_command",
        metavar="COMMAND",
        help="Send an AT command instead of reading credentials",
    )
    command.add_argument(
        "--modbus-read",
        metavar="HEX",
        help="Read holding registers instead of credentials "
        "[00120001 -> register 0x0012, length 1]",
    )
    command.add_argument(
        "--modbus-write",
        metavar="HEX",
        help="Write holding registers instead of credentials "
        "[00280001020064 -> register 0x0028, length 1, 2 bytes, value 0x0064]",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Output all communication with the logger",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run one session and log its report."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")

    try:
        config = build_config(
            target=args.target,
            source=args.source,
            unlock_code=args.code,
            at_command=args.at_command,
            modbus_read=args.modbus_read,
            modbus_write=args.modbus_write,
            verbose=args.verbose,
        )
    except ConfigurationError as e:
        parser.error(str(e))

    try:
        report = Session(config).run()
    except AssistantError as e:
        logger.error("%s", e)
        return 1

    for line in report.lines():
        logger.info("%s", line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
