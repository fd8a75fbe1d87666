"""Protocol layer: Modbus RTU framing, CRC, AT command builders, and response parsing."""

from .framing import FunctionCode, build_rtu_frame, wrap_binary_send
from .commands import Command, build_at_command
from .parser import strip_ok_prefix, strip_control_byte
