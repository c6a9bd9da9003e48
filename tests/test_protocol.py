import sys
from unittest.mock import patch

import pytest

from mbrtu.errors import DataLenError, DataShortError
from mbrtu.protocol import (
    Builder,
    Function,
    FunctionCode,
    calculate_crc,
    default_port_name,
    get_ports,
)

TEMP1_REQUEST = bytes([0x01, 0x03, 0x00, 0x0A, 0x00, 0x01, 0xA4, 0x08])
SET_TEMP_REQUEST = bytes([0x01, 0x06, 0x00, 0x3C, 0x02, 0x59, 0x88, 0x9C])
VOLTAGE_REQUEST = bytes([0x01, 0x04, 0x00, 0x00, 0x00, 0x1E, 0x70, 0x02])


class FakePort:
    def __init__(self, reply: bytes):
        self.reply = bytearray(reply)
        self.written = b""
        self.reads = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def write(self, data):
        self.written += bytes(data)
        return len(data)

    def flush(self):
        pass

    def read(self, size):
        chunk = bytes(self.reply[:size])
        del self.reply[:size]
        self.reads.append(len(chunk))
        return chunk


def test_function_code_known_and_custom():
    assert FunctionCode.from_value(0x03) == FunctionCode.READ_HOLDING_REGISTERS
    assert FunctionCode.from_value(0x10).name == "WriteMultipleRegisters"
    custom = FunctionCode.from_value(0x42)
    assert custom.is_custom
    assert custom.value == 0x42
    assert str(custom) == "66"


def test_function_code_is_read():
    assert all(FunctionCode.from_value(v).is_read() for v in (1, 2, 3, 4))
    assert not any(
        FunctionCode.from_value(v).is_read() for v in (5, 6, 0x0F, 0x10, 0x16, 0x17, 0x42)
    )


def test_function_code_range():
    with pytest.raises(ValueError):
        FunctionCode.from_value(256)


@pytest.mark.parametrize(
    "function, frame",
    [
        (Function(1, FunctionCode.READ_HOLDING_REGISTERS, [10, 1]), TEMP1_REQUEST),
        (Function(1, FunctionCode.WRITE_SINGLE_REGISTER, [60, 601]), SET_TEMP_REQUEST),
        (Function(1, FunctionCode.READ_INPUT_REGISTERS, [0x00, 0x1E]), VOLTAGE_REQUEST),
    ],
)
def test_request_data_known_frames(function, frame):
    assert function.request_data() == frame
    assert Function.parse_request(frame) == function


def test_write_response_echoes_request():
    function = Function.parse_request(SET_TEMP_REQUEST)
    assert function.response_data() == SET_TEMP_REQUEST


def test_crc_of_frame_with_crc_is_zero():
    assert calculate_crc(TEMP1_REQUEST) == 0
    body = bytes([2, 3, 4, 0, 7])
    crc = calculate_crc(body)
    assert calculate_crc(body + crc.to_bytes(2, "little")) == 0


def test_data_u8_big_endian():
    function = Function(1, FunctionCode.READ_HOLDING_REGISTERS, [0x1234, 0x00FF])
    assert function.data_u8() == bytes([0x12, 0x34, 0x00, 0xFF])


def test_response_round_trip():
    function = Function(5, FunctionCode.READ_INPUT_REGISTERS, list(range(0, 30000, 1000)))
    frame = function.response_data()
    assert frame[2] == 60
    assert len(frame) == 3 + 60 + 2
    assert Function.parse_response(frame) == function


def test_parse_response_too_short():
    with pytest.raises(DataShortError) as info:
        Function.parse_response(bytes([1, 3, 2, 0]))
    assert info.value.length == 4


def test_parse_response_odd_or_missing_bytes():
    with pytest.raises(DataLenError):
        Function.parse_response(bytes([1, 3, 3, 0, 1, 2, 0, 0]))
    with pytest.raises(DataLenError):
        Function.parse_response(bytes([1, 3, 10, 0, 1]))


def test_parse_request_errors():
    with pytest.raises(DataShortError):
        Function.parse_request(bytes([1, 3, 0]))
    with pytest.raises(DataLenError):
        Function.parse_request(bytes([1, 3, 0, 0]))
    with pytest.raises(DataLenError):
        Function.parse_request(bytes([1, 3, 0, 0, 0, 0, 0]))


def test_function_value_ranges():
    with pytest.raises(ValueError):
        Function(1, FunctionCode.READ_COILS, [0x10000])
    with pytest.raises(ValueError):
        Function(300, FunctionCode.READ_COILS, [])


def test_builder_call_read_reads_chunks():
    expected = Function(1, FunctionCode.READ_INPUT_REGISTERS, list(range(30)))
    port = FakePort(expected.response_data())
    request = Function.parse_request(VOLTAGE_REQUEST)
    with patch("serial.Serial", return_value=port) as opener:
        result = Builder("/dev/null", 9600).call(request)
    assert result == expected
    assert port.written == VOLTAGE_REQUEST
    assert port.reads[:2] == [32, 32]
    assert opener.call_args.args == ("/dev/null", 9600)


def test_builder_call_write_returns_request():
    port = FakePort(SET_TEMP_REQUEST)
    request = Function.parse_request(SET_TEMP_REQUEST)
    with patch("serial.Serial", return_value=port):
        result = Builder("/dev/null", 9600).call(request)
    assert result == request
    assert port.written == SET_TEMP_REQUEST


def test_builder_call_empty_reply_fails():
    port = FakePort(b"")
    request = Function.parse_request(TEMP1_REQUEST)
    with patch("serial.Serial", return_value=port):
        with pytest.raises(DataShortError):
            Builder("/dev/null", 9600).call(request)


def test_get_ports_ends_with_test():
    assert get_ports()[-1] == "test"


def test_default_port_name():
    expected = "COM1" if sys.platform.startswith("win") else "/dev/ttyUSB0"
    assert default_port_name() == expected