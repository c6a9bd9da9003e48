"""Eight-channel relay board commands and state."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum

from .errors import DataNullError
from .protocol import Function, FunctionCode
from .utils import current_timestamp


def _clamp_position(position: int) -> int:
    return min(max(position, 0), 7)


def set_bit(value: int, position: int, state: bool) -> int:
    """Return ``value`` with bit ``position`` (clamped to 0..7) set to ``state``."""
    mask = 1 << _clamp_position(position)
    return (value | mask) if state else (value & ~mask & 0xFFFF)


class RelayCommand(Enum):
    """The kinds of relay request."""

    ON_OFF = "on_off"
    ON = "on"
    OFF = "off"
    READ = "read"


@dataclass(frozen=True)
class RelayMode:
    """A relay request.

    ``ON_OFF`` writes ``value`` as the whole switch mask; ``ON`` and ``OFF``
    change bit ``position`` of the current mask ``value``.
    """

    command: RelayCommand
    value: int = 0
    position: int = 0

    def params(self) -> tuple[FunctionCode, tuple[int, int]]:
        """The function code and register words for this request."""
        if self.command is RelayCommand.READ:
            return FunctionCode.READ_HOLDING_REGISTERS, (0, 1)
        if self.command is RelayCommand.ON_OFF:
            return FunctionCode.WRITE_SINGLE_REGISTER, (0, self.value)
        state = self.command is RelayCommand.ON
        return FunctionCode.WRITE_SINGLE_REGISTER, (0, set_bit(self.value, self.position, state))


def request(slave: int, mode: RelayMode) -> Function:
    """Build the request frame for ``mode`` addressed to ``slave``."""
    code, data = mode.params()
    return Function(slave, code, data)


@dataclass(frozen=True)
class RelayData:
    """The switch mask read from a relay board."""

    time: timedelta
    value: int

    def get_state(self, position: int) -> bool:
        """Whether relay ``position`` (clamped to 0..7) is on."""
        return bool(self.value & (1 << _clamp_position(position)))

    @classmethod
    def from_response(cls, response: Function) -> RelayData:
        """Take the first register of ``response`` as the switch mask."""
        if not response.data:
            raise DataNullError()
        return cls(current_timestamp(), response.data[0])

    def __str__(self) -> str:
        secs = self.time.days * 86400 + self.time.seconds
        return f"time:{secs}\nvalue: {self.value:08b}"