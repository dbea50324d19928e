"""Typed configuration store for the sysmon terminal monitor."""

__version__ = "1.0.0"

PROGRAM_NAME = "sysmon"
