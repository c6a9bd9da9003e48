"""Fifteen-channel voltage and current meter."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum

from .errors import DataLenError, DataNullError
from .protocol import Function, FunctionCode
from .utils import current_timestamp

VOLTAGE_CHANNEL = 15
_VALUE_COUNT = VOLTAGE_CHANNEL * 2


class VoltageState(Enum):
    """The verdict on one channel; the value is its display label."""

    NO_CONNECTED = "未连接"
    VACANCY = "空位"
    QUALIFIED = "合格"
    UNDER_VOLTAGE = "欠压"
    OVER_VOLTAGE = "欠流"
    UNDER_CURRENT = "过压"
    OVER_CURRENT = "过流"
    NO_OUTPUT = "无输出"

    def __str__(self) -> str:
        return self.value

    @property
    def key(self) -> str:
        """The name used in serialized data."""
        return "".join(part.capitalize() for part in self.name.split("_"))

    @classmethod
    def from_key(cls, key: str) -> VoltageState:
        """Look up a state by its serialized name."""
        for state in cls:
            if state.key == key:
                return state
        raise ValueError(f"unknown voltage state: {key!r}")


@dataclass
class Verify:
    """Limits a channel must lie within to be qualified (volts and amperes)."""

    voltage_top: float = 25.0
    voltage_down: float = 1.0
    current_top: float = 10.0
    current_down: float = 1.0


def _judge(value: float, down: float, top: float, under: VoltageState,
           over: VoltageState) -> VoltageState:
    if down <= value <= top:
        return VoltageState.QUALIFIED
    if 0.0 < value < down:
        return under
    if value > top:
        return over
    return VoltageState.NO_OUTPUT


@dataclass
class VoltageChannel:
    """One voltage and current pair."""

    index: int = 0
    voltage: float = 0.0
    current: float = 0.0
    state: VoltageState = VoltageState.NO_CONNECTED

    def set_state(self, verify: Verify) -> None:
        """Store the overall state against ``verify``."""
        self.state = self.get_state(verify)

    def get_voltage_state(self, verify: Verify) -> VoltageState:
        """Judge the voltage alone."""
        return _judge(self.voltage, verify.voltage_down, verify.voltage_top,
                      VoltageState.UNDER_VOLTAGE, VoltageState.OVER_VOLTAGE)

    def get_current_state(self, verify: Verify) -> VoltageState:
        """Judge the current alone."""
        return _judge(self.current, verify.current_down, verify.current_top,
                      VoltageState.UNDER_CURRENT, VoltageState.OVER_CURRENT)

    def get_state(self, verify: Verify) -> VoltageState:
        """Judge the channel; a voltage fault takes precedence."""
        voltage_state = self.get_voltage_state(verify)
        if voltage_state is not VoltageState.QUALIFIED:
            return voltage_state
        return self.get_current_state(verify)


def _duration_to_dict(duration: timedelta) -> dict[str, int]:
    return {
        "secs": duration.days * 86400 + duration.seconds,
        "nanos": duration.microseconds * 1000,
    }


def _duration_from_dict(data: dict) -> timedelta:
    return timedelta(seconds=data["secs"], microseconds=data["nanos"] // 1000)


@dataclass
class VoltageData:
    """A full reading of the meter."""

    time: timedelta
    slave: int = 0
    data: list[VoltageChannel] = field(default_factory=list)

    @classmethod
    def from_values(cls, values: Sequence[float]) -> VoltageData:
        """Build channels from 30 raw values: voltage and current in thousandths."""
        if len(values) != _VALUE_COUNT:
            raise ValueError(f"expected {_VALUE_COUNT} values, got {len(values)}")
        pairs = zip(values[0::2], values[1::2])
        channels = [
            VoltageChannel(i, voltage / 1000.0, current / 1000.0, VoltageState.QUALIFIED)
            for i, (voltage, current) in enumerate(pairs)
        ]
        return cls(current_timestamp(), 0, channels)

    @classmethod
    def from_response(cls, response: Function) -> VoltageData:
        """Decode a meter reply; any length other than 30 words reads as zeros."""
        words = response.data
        if not words:
            raise DataNullError()
        if len(words) < _VALUE_COUNT:
            raise DataLenError()
        values = [float(w) for w in words] if len(words) == _VALUE_COUNT else [0.0] * _VALUE_COUNT
        result = cls.from_values(values)
        result.slave = response.slave
        return result

    def to_values(self) -> list[float]:
        """Lay the channels back out as 30 values, voltage scaled back to thousandths."""
        result = [0.0] * _VALUE_COUNT
        for channel in self.data:
            if 0 <= channel.index < VOLTAGE_CHANNEL:
                result[channel.index * 2] = channel.voltage * 1000.0
                result[channel.index * 2 + 1] = channel.current
        return result

    def to_dict(self) -> dict:
        """A plain, JSON-ready representation."""
        return {
            "time": _duration_to_dict(self.time),
            "slave": self.slave,
            "data": [
                {
                    "index": c.index,
                    "voltage": c.voltage,
                    "current": c.current,
                    "state": c.state.key,
                }
                for c in self.data
            ],
        }

    @classmethod
    def from_dict(cls, data: dict) -> VoltageData:
        """Rebuild a reading from :meth:`to_dict` output."""
        channels = [
            VoltageChannel(
                c["index"], c["voltage"], c["current"], VoltageState.from_key(c["state"])
            )
            for c in data["data"]
        ]
        return cls(_duration_from_dict(data["time"]), data["slave"], channels)

    def update_channel_index(self, index: int) -> None:
        """Offset channel numbers for the ``index``-th meter in a chain."""
        for channel in self.data:
            channel.index += index * VOLTAGE_CHANNEL

    def update_channel_state(self, verify: Verify) -> None:
        """Judge every channel against ``verify``."""
        for channel in self.data:
            channel.set_state(verify)

    def voltage(self) -> float:
        """Mean voltage over the channels (NaN when there are none)."""
        if not self.data:
            return math.nan
        return sum(c.voltage for c in self.data) / len(self.data)

    def current(self) -> float:
        """Mean current over the channels (NaN when there are none)."""
        if not self.data:
            return math.nan
        return sum(c.current for c in self.data) / len(self.data)


def request(slave: int) -> Function:
    """Build the request reading all 30 input registers of ``slave``."""
    return Function(slave, FunctionCode.READ_INPUT_REGISTERS, (0x00, 0x1E))