"""Serve simulated devices on a serial port."""

from __future__ import annotations

import argparse
import sys

import serial

from .errors import MbError
from .mock import mock_for_frame
from .utils import print_hex

_DEFAULT_PORT = "/dev/ttyUSB1"
_DEFAULT_BAUDRATE = 9600
_TIMEOUT = 1.0


def handle_frame(frame: bytes) -> bytes | None:
    """Return the reply to ``frame``, or None when no device expects it."""
    frame = bytes(frame)
    mock = mock_for_frame(frame)
    if frame != mock.request().request_data():
        return None
    return mock.response().response_data()


def _read_frame(port) -> bytes:
    first = port.read(1)
    if not first:
        return b""
    waiting = port.in_waiting
    return first + (port.read(waiting) if waiting else b"")


def serve(port_name: str, baudrate: int) -> None:
    """Answer requests arriving on ``port_name`` until interrupted."""
    with serial.Serial(port_name, baudrate, timeout=_TIMEOUT) as port:
        while True:
            try:
                frame = _read_frame(port)
            except serial.SerialException as exc:
                print(f"读取失败: {exc!r}", file=sys.stderr)
                continue
            if not frame:
                continue
            try:
                reply = handle_frame(frame)
            except (MbError, ValueError):
                reply = None
            if reply is None:
                print(f"接收到未知请求: {list(frame)}")
                continue
            print_hex("request", frame)
            port.write(reply)
            print_hex("response", reply)
            port.flush()


def main(argv: list[str] | None = None) -> int:
    """Run the simulated device server."""
    parser = argparse.ArgumentParser(description="Answer Modbus RTU requests with simulated devices.")
    parser.add_argument("--port", default=_DEFAULT_PORT, help="serial port to listen on")
    parser.add_argument("--baudrate", type=int, default=_DEFAULT_BAUDRATE)
    args = parser.parse_args(argv)
    try:
        serve(args.port, args.baudrate)
    except KeyboardInterrupt:
        return 0
    except OSError as exc:
        print(f"打开串口失败: {exc}", file=sys.stderr)
        return 1
    return 0