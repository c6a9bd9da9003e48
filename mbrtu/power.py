"""Programmable power supply commands and readings."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum

from .errors import DataNullError
from .protocol import Function, FunctionCode
from .utils import current_timestamp


class PowerCommand(Enum):
    """The kinds of request the power supply understands."""

    TEMP = "temp"
    VOLTAGE = "voltage"
    CURRENT = "current"
    GET_ON_OFF = "get_on_off"
    GET_VOLTAGE = "get_voltage"
    GET_CURRENT = "get_current"
    SET_ON_OFF = "set_on_off"
    SET_VOLTAGE = "set_voltage"
    SET_CURRENT = "set_current"


_READS = {
    PowerCommand.TEMP: (2, 0),
    PowerCommand.VOLTAGE: (4, 0),
    PowerCommand.CURRENT: (6, 0xC000),
    PowerCommand.GET_ON_OFF: (9, 0x0003),
    PowerCommand.GET_VOLTAGE: (0x000A, 0),
    PowerCommand.GET_CURRENT: (0x000C, 0),
}

_SET_REGISTERS = {
    PowerCommand.SET_VOLTAGE: 0x000A,
    PowerCommand.SET_CURRENT: 0x000C,
}


def f32_u16(value: float) -> tuple[int, int]:
    """Split a 32-bit float into its high and low big-endian 16-bit words."""
    try:
        raw = struct.pack(">f", value)
    except OverflowError:
        raw = struct.pack(">f", math.copysign(math.inf, value))
    high, low = struct.unpack(">2H", raw)
    return high, low


@dataclass(frozen=True)
class PowerMode:
    """A power supply request; ``value`` is used by the set commands."""

    command: PowerCommand
    value: float = 0.0

    def params(self) -> tuple[FunctionCode, tuple[int, ...]]:
        """The function code and register words for this request."""
        if self.command in _READS:
            return FunctionCode.READ_HOLDING_REGISTERS, _READS[self.command]
        if self.command is PowerCommand.SET_ON_OFF:
            return FunctionCode.WRITE_MULTIPLE_REGISTERS, (9, 0x0003)
        register = _SET_REGISTERS[self.command]
        return FunctionCode.WRITE_MULTIPLE_REGISTERS, (register, *f32_u16(self.value))


def request(slave: int, mode: PowerMode) -> Function:
    """Build the request frame for ``mode`` addressed to ``slave``."""
    code, data = mode.params()
    return Function(slave, code, data)


@dataclass(frozen=True)
class PowerData:
    """A power supply reading."""

    time: timedelta
    value: float

    @classmethod
    def from_response(cls, response: Function) -> PowerData:
        """Decode the first big-endian float carried by ``response``."""
        raw = response.data_u8()
        if len(raw) < 4:
            raise DataNullError()
        (value,) = struct.unpack_from(">f", raw)
        return cls(current_timestamp(), value)