"""Report models for session results."""

from .report import CommandReport, CredentialsReport, ModbusReport
