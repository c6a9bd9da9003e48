"""Modbus RTU frames, CRC and a serial transport."""

from __future__ import annotations

import struct
import sys
from dataclasses import dataclass, field
from typing import ClassVar

import serial
from serial.tools import list_ports

from .errors import DataLenError, DataShortError

_READ_TIMEOUT = 0.3
_CHUNK = 32
_MAX_RESPONSE = 1024

_NAMES = {
    0x01: "ReadCoils",
    0x02: "ReadDiscreteInputs",
    0x03: "ReadHoldingRegisters",
    0x04: "ReadInputRegisters",
    0x05: "WriteSingleCoil",
    0x06: "WriteSingleRegister",
    0x0F: "WriteMultipleCoils",
    0x10: "WriteMultipleRegisters",
    0x16: "MaskWriteRegister",
    0x17: "ReadWriteMultipleRegisters",
}
_READ_CODES = frozenset({0x01, 0x02, 0x03, 0x04})


@dataclass(frozen=True)
class FunctionCode:
    """A Modbus function code; codes without a name are custom codes."""

    value: int

    READ_COILS: ClassVar[FunctionCode]
    READ_DISCRETE_INPUTS: ClassVar[FunctionCode]
    READ_HOLDING_REGISTERS: ClassVar[FunctionCode]
    READ_INPUT_REGISTERS: ClassVar[FunctionCode]
    WRITE_SINGLE_COIL: ClassVar[FunctionCode]
    WRITE_SINGLE_REGISTER: ClassVar[FunctionCode]
    WRITE_MULTIPLE_COILS: ClassVar[FunctionCode]
    WRITE_MULTIPLE_REGISTERS: ClassVar[FunctionCode]
    MASK_WRITE_REGISTER: ClassVar[FunctionCode]
    READ_WRITE_MULTIPLE_REGISTERS: ClassVar[FunctionCode]

    def __post_init__(self) -> None:
        if not 0 <= self.value <= 0xFF:
            raise ValueError(f"function code out of range: {self.value}")

    @classmethod
    def from_value(cls, value: int) -> FunctionCode:
        """Return the function code for a byte value."""
        return cls(value)

    @property
    def name(self) -> str:
        return _NAMES.get(self.value, "Custom")

    @property
    def is_custom(self) -> bool:
        return self.value not in _NAMES

    def is_read(self) -> bool:
        """True for the four read functions, whose replies carry a byte count."""
        return self.value in _READ_CODES

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"FunctionCode.{self.name}(0x{self.value:02X})"


FunctionCode.READ_COILS = FunctionCode(0x01)
FunctionCode.READ_DISCRETE_INPUTS = FunctionCode(0x02)
FunctionCode.READ_HOLDING_REGISTERS = FunctionCode(0x03)
FunctionCode.READ_INPUT_REGISTERS = FunctionCode(0x04)
FunctionCode.WRITE_SINGLE_COIL = FunctionCode(0x05)
FunctionCode.WRITE_SINGLE_REGISTER = FunctionCode(0x06)
FunctionCode.WRITE_MULTIPLE_COILS = FunctionCode(0x0F)
FunctionCode.WRITE_MULTIPLE_REGISTERS = FunctionCode(0x10)
FunctionCode.MASK_WRITE_REGISTER = FunctionCode(0x16)
FunctionCode.READ_WRITE_MULTIPLE_REGISTERS = FunctionCode(0x17)


def calculate_crc(data: bytes) -> int:
    """Compute the Modbus RTU CRC-16 of ``data``."""
    crc = 0xFFFF
    for byte in data:
        crc ^= byte
        for _ in range(8):
            if crc & 1:
                crc = (crc >> 1) ^ 0xA001
            else:
                crc >>= 1
    return crc


def _with_crc(frame: bytes) -> bytes:
    return frame + calculate_crc(frame).to_bytes(2, "little")


def _words(raw: bytes) -> tuple[int, ...]:
    return struct.unpack(f">{len(raw) // 2}H", raw)


@dataclass(frozen=True)
class Function:
    """A Modbus request or reply: slave address, function code and 16-bit words."""

    slave: int
    code: FunctionCode
    data: tuple[int, ...] = field(default=())

    def __post_init__(self) -> None:
        if not 0 <= self.slave <= 0xFF:
            raise ValueError(f"slave address out of range: {self.slave}")
        words = tuple(self.data)
        if any(not 0 <= w <= 0xFFFF for w in words):
            raise ValueError("register values must fit in 16 bits")
        object.__setattr__(self, "data", words)

    def data_u8(self) -> bytes:
        """The words as big-endian bytes."""
        return struct.pack(f">{len(self.data)}H", *self.data)

    @classmethod
    def parse_response(cls, response: bytes) -> Function:
        """Parse a read reply: slave, code, byte count, data, CRC."""
        response = bytes(response)
        length = len(response)
        if length < 5:
            raise DataShortError(length)
        byte_count = response[2]
        if length < 3 + byte_count or byte_count % 2:
            raise DataLenError()
        return cls(
            response[0],
            FunctionCode.from_value(response[1]),
            _words(response[3 : 3 + byte_count]),
        )

    @classmethod
    def parse_request(cls, request: bytes) -> Function:
        """Parse a request: slave, code, data, CRC."""
        request = bytes(request)
        length = len(request)
        if length < 4:
            raise DataShortError(length)
        byte_count = length - 4
        if byte_count < 2 or byte_count % 2:
            raise DataLenError()
        return cls(
            request[0],
            FunctionCode.from_value(request[1]),
            _words(request[2 : 2 + byte_count]),
        )

    def request_data(self) -> bytes:
        """Encode as a request frame."""
        return _with_crc(bytes([self.slave, self.code.value]) + self.data_u8())

    def response_data(self) -> bytes:
        """Encode as a reply frame; write functions echo the request."""
        if not self.code.is_read():
            return self.request_data()
        payload = self.data_u8()
        header = bytes([self.slave, self.code.value, len(payload) & 0xFF])
        return _with_crc(header + payload)


def _read_full_response(port) -> bytes:
    """Read 32-byte chunks until a short read, a timeout or the buffer limit."""
    received = bytearray()
    while len(received) < _MAX_RESPONSE:
        chunk = port.read(min(_CHUNK, _MAX_RESPONSE - len(received)))
        if not chunk:
            break
        received.extend(chunk)
        if len(chunk) < _CHUNK:
            break
    return bytes(received)


@dataclass
class Builder:
    """Sends requests over a serial port and decodes the replies."""

    port_name: str
    baudrate: int

    def call(self, request: Function) -> Function:
        """Send ``request`` and return the decoded reply.

        Write functions are answered with an echo of the request, so the
        request itself is returned for them.
        """
        with serial.Serial(self.port_name, self.baudrate, timeout=_READ_TIMEOUT) as port:
            port.write(request.request_data())
            port.flush()
            response = _read_full_response(port)
            port.flush()
        if request.code.is_read():
            return Function.parse_response(response)
        return request


def get_ports() -> list[str]:
    """List serial ports with known hardware, followed by ``"test"``."""
    try:
        ports = [
            info.device
            for info in list_ports.comports()
            if info.hwid and info.hwid != "n/a"
        ]
    except Exception:
        ports = []
    ports.append("test")
    return ports


def default_port_name() -> str:
    """The serial port used when none is given."""
    return "COM1" if sys.platform.startswith("win") else "/dev/ttyUSB0"