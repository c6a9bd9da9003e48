"""Temperature controller commands and readings."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum

from .errors import DataNullError
from .protocol import Function, FunctionCode
from .utils import current_timestamp


class TemperatureCommand(Enum):
    """The kinds of temperature controller request."""

    TEMP1 = "temp1"
    TEMP2 = "temp2"
    SET1 = "set1"
    SET2 = "set2"
    RUN = "run"
    KEY_A = "key_a"
    KEY_B = "key_b"


_READS = {
    TemperatureCommand.TEMP1: (10, 1),
    TemperatureCommand.TEMP2: (14, 1),
}

# register, and the exclusive upper bound of accepted values (None: any)
_WRITES = {
    TemperatureCommand.SET1: (60, None),
    TemperatureCommand.SET2: (61, None),
    TemperatureCommand.RUN: (63, 3),
    TemperatureCommand.KEY_A: (46, 2),
    TemperatureCommand.KEY_B: (47, 2),
}


@dataclass(frozen=True)
class TemperatureMode:
    """A temperature controller request.

    Set points are in tenths of a degree; ``RUN`` takes 0 stop, 1 run,
    2 pause; keys take 0 on, 1 off. Out-of-range values are sent as 0.
    """

    command: TemperatureCommand
    value: int = 0

    def params(self) -> tuple[FunctionCode, tuple[int, int]]:
        """The function code and register words for this request."""
        if self.command in _READS:
            return FunctionCode.READ_HOLDING_REGISTERS, _READS[self.command]
        register, limit = _WRITES[self.command]
        value = self.value if limit is None or self.value < limit else 0
        return FunctionCode.WRITE_SINGLE_REGISTER, (register, value)


def request(slave: int, mode: TemperatureMode) -> Function:
    """Build the request frame for ``mode`` addressed to ``slave``."""
    code, data = mode.params()
    return Function(slave, code, data)


@dataclass(frozen=True)
class TemperatureData:
    """A temperature reading in degrees."""

    time: timedelta
    value: float

    @classmethod
    def from_response(cls, response: Function) -> TemperatureData:
        """Decode the first register as tenths of a degree."""
        if not response.data:
            raise DataNullError()
        return cls(current_timestamp(), response.data[0] * 0.1)