"""Query devices over a serial port and print what they report."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar

from .errors import MbError
from .mock import Mock, PowerMock, RelayMock, TempMock, VoltageMock
from .power import PowerCommand, PowerData, PowerMode
from .protocol import Builder, Function, default_port_name
from .relay import RelayCommand, RelayData, RelayMode
from .temperature import TemperatureCommand, TemperatureData, TemperatureMode
from .utils import print_hex
from .voltage import VoltageData

T = TypeVar("T")

_DEFAULT_BAUDRATE = 9600


@dataclass
class Reader:
    """Sends the requests of simulated devices to real ones and decodes the replies."""

    builder: Builder = field(
        default_factory=lambda: Builder(default_port_name(), _DEFAULT_BAUDRATE)
    )

    def run(self, mock: Mock, parser: Callable[[Function], T]) -> T | None:
        """Send ``mock``'s request; return the decoded reply, or None for a command echo."""
        print(f"\n----\nstart {type(mock).__name__}: \n")
        request = mock.request()
        print_hex("request", request.request_data())

        response = self.builder.call(request)
        print_hex("response", response.response_data())

        if response == request:
            print("命令执行\n")
            return None

        print(f"u16:\n{list(response.data)}")
        data = parser(response)
        print(f"解析结果:\n{data}")
        return data

    def run_voltage(self, mock: VoltageMock) -> VoltageData | None:
        """Read a voltage and current meter."""
        return self.run(mock, VoltageData.from_response)

    def run_temp(self, mock: TempMock) -> TemperatureData | None:
        """Read or command a temperature controller."""
        return self.run(mock, TemperatureData.from_response)

    def run_relay(self, mock: RelayMock) -> RelayData | None:
        """Read or switch a relay board."""
        return self.run(mock, RelayData.from_response)

    def run_power(self, mock: PowerMock) -> PowerData | None:
        """Read or command a power supply."""
        return self.run(mock, PowerData.from_response)


_DEVICES = {
    "voltage": (5, lambda reader, slave: reader.run_voltage(VoltageMock(slave))),
    "temp": (
        1,
        lambda reader, slave: reader.run_temp(
            TempMock(slave, TemperatureMode(TemperatureCommand.TEMP1))
        ),
    ),
    "relay": (
        2,
        lambda reader, slave: reader.run_relay(
            RelayMock(slave, RelayMode(RelayCommand.ON, 0, 1))
        ),
    ),
    "power": (
        3,
        lambda reader, slave: reader.run_power(
            PowerMock(slave, PowerMode(PowerCommand.GET_VOLTAGE))
        ),
    ),
}


def main(argv: list[str] | None = None) -> int:
    """Query one device and print the result."""
    parser = argparse.ArgumentParser(description="Query a Modbus RTU device.")
    parser.add_argument("device", nargs="?", default="relay", choices=sorted(_DEVICES))
    parser.add_argument("--port", default=default_port_name(), help="serial port")
    parser.add_argument("--baudrate", type=int, default=_DEFAULT_BAUDRATE)
    parser.add_argument("--slave", type=int, help="slave address")
    args = parser.parse_args(argv)

    default_slave, action = _DEVICES[args.device]
    slave = args.slave if args.slave is not None else default_slave
    reader = Reader(Builder(args.port, args.baudrate))
    try:
        action(reader, slave)
    except (MbError, OSError) as exc:
        print(f"错误: {exc}", file=sys.stderr)
        return 1
    return 0