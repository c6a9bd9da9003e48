"""Modbus RTU frames, bench device commands, simulated slaves and two serial commands."""

__version__ = "0.1.0"