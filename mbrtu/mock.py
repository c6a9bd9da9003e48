"""Simulated devices that answer Modbus requests the way the real ones do."""

from __future__ import annotations

import random
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from . import power, relay, temperature, voltage
from .errors import DataLenError, DataShortError, ParseFailError
from .power import PowerCommand, PowerMode, f32_u16
from .protocol import Function, FunctionCode
from .relay import RelayCommand, RelayMode, set_bit
from .temperature import TemperatureCommand, TemperatureMode

_TEMPERATURE_READING = 60 * 10
_POWER_SETTING = 60.0

_VOLTAGE_RANGES = ((0, 25), (25, 30), (30, 100))
_CURRENT_RANGES = ((0, 20), (20, 100), (100, 500))

_STATIC_PAIRS = (
    (0, 0),
    (10, 10),
    (20, 20),
    (30, 30),
    (40, 40),
    (50, 50),
    (0, 10),
    (20, 40),
    (50, 0),
    (0, 0),
    (25, 10),
    (0, 0),
    (0, 0),
    (0, 0),
    (0, 0),
)


class _RelayRegister:
    """The switch mask shared by every simulated relay board."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    @value.setter
    def value(self, new: int) -> None:
        with self._lock:
            self._value = new


_relay_register = _RelayRegister()


class Mock(ABC):
    """A simulated device: the request it expects and the reply it gives."""

    @abstractmethod
    def request(self) -> Function:
        """The request this device answers."""

    @abstractmethod
    def response(self) -> Function:
        """The reply this device sends."""


@dataclass
class PowerMock(Mock):
    """A power supply whose set voltage is always 60 V."""

    slave: int
    mode: PowerMode = field(default_factory=lambda: PowerMode(PowerCommand.GET_VOLTAGE))

    @classmethod
    def from_frame(cls, frame: bytes) -> PowerMock:
        """Build a mock for the slave addressed by ``frame``."""
        if not frame:
            raise DataShortError(0)
        return cls(frame[0], PowerMode(PowerCommand.GET_VOLTAGE))

    def request(self) -> Function:
        return power.request(self.slave, self.mode)

    def response(self) -> Function:
        code, _ = self.mode.params()
        return Function(self.slave, code, f32_u16(_POWER_SETTING))


@dataclass
class RelayMock(Mock):
    """A relay board that remembers the last switch mask written to it."""

    slave: int
    mode: RelayMode
    req: Function | None = None

    @classmethod
    def from_frame(cls, frame: bytes) -> RelayMock:
        """Build a mock from a request frame; a write stores its mask."""
        req = Function.parse_request(frame)
        if req.code == FunctionCode.READ_HOLDING_REGISTERS:
            return cls(req.slave, RelayMode(RelayCommand.READ))
        if len(req.data) < 2:
            raise DataLenError()
        _relay_register.value = req.data[1]
        return cls(req.slave, RelayMode(RelayCommand.ON_OFF, 0), req)

    def request(self) -> Function:
        if self.mode.command is RelayCommand.READ or self.req is None:
            return relay.request(self.slave, self.mode)
        return self.req

    def response(self) -> Function:
        if self.mode.command is RelayCommand.READ:
            code, _ = self.mode.params()
            return Function(self.slave, code, (_relay_register.value,))
        if self.req is None:
            raise ValueError("no recorded request to echo")
        return self.req


@dataclass
class TempMock(Mock):
    """A temperature controller that always reads 60 degrees."""

    slave: int
    mode: TemperatureMode
    req: Function | None = None

    @classmethod
    def from_frame(cls, frame: bytes) -> TempMock:
        """Build a mock from a request frame."""
        req = Function.parse_request(frame)
        if req.code == FunctionCode.READ_HOLDING_REGISTERS:
            command = TemperatureCommand.TEMP1 if req.data[0] == 10 else TemperatureCommand.TEMP2
            return cls(req.slave, TemperatureMode(command))
        if req.code == FunctionCode.WRITE_SINGLE_REGISTER:
            return cls(req.slave, TemperatureMode(TemperatureCommand.RUN, 0), req)
        raise ParseFailError()

    def request(self) -> Function:
        return temperature.request(self.slave, self.mode)

    def response(self) -> Function:
        code, _ = self.mode.params()
        if code == FunctionCode.READ_HOLDING_REGISTERS:
            return Function(self.slave, code, (_TEMPERATURE_READING,))
        if self.req is None:
            raise ValueError("no recorded request to echo")
        return self.req


@dataclass
class VoltageMock(Mock):
    """A voltage and current meter that reports random readings."""

    slave: int
    rng: random.Random | None = field(default=None, compare=False, repr=False)

    @classmethod
    def from_frame(cls, frame: bytes) -> VoltageMock:
        """Build a mock for the slave addressed by ``frame``."""
        if not frame:
            raise DataShortError(0)
        return cls(frame[0])

    def request(self) -> Function:
        return voltage.request(self.slave)

    def response(self) -> Function:
        return Function(
            self.slave,
            FunctionCode.READ_INPUT_REGISTERS,
            generate_response_voltage(self.rng),
        )


def _pick(rng: random.Random, ranges: tuple[tuple[int, int], ...]) -> int:
    low, high = rng.choice(ranges)
    return rng.randrange(low, high)


def generate_response_voltage(rng: random.Random | None = None) -> list[int]:
    """Fifteen random voltage and current pairs, in thousandths, truncated to 16 bits."""
    rng = rng if rng is not None else random.Random()
    values: list[int] = []
    for _ in range(voltage.VOLTAGE_CHANNEL):
        volts = _pick(rng, _VOLTAGE_RANGES) * 1000
        amps = _pick(rng, _CURRENT_RANGES) * 1000
        values.extend((volts & 0xFFFF, amps & 0xFFFF))
    return values


def static_response() -> list[int]:
    """A fixed meter reading: voltages in thousandths, currents as given."""
    return [value for volts, amps in _STATIC_PAIRS for value in (volts * 1000, amps)]


def generate_relay(rng: random.Random | None = None) -> list[int]:
    """A relay mask with one of the first two relays switched on."""
    rng = rng if rng is not None else random.Random()
    return [set_bit(0, rng.randrange(2), True)]


_MOCKS_BY_SLAVE = {
    0x01: TempMock,
    0x02: RelayMock,
    0x03: PowerMock,
    0x04: PowerMock,
}


def mock_for_frame(frame: bytes) -> Mock:
    """Choose the simulated device for a frame by its slave address."""
    frame = bytes(frame)
    if not frame:
        raise DataShortError(0)
    return _MOCKS_BY_SLAVE.get(frame[0], VoltageMock).from_frame(frame)