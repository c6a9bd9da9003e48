import time
from datetime import timedelta

from mbrtu.utils import (
    current_timestamp,
    format_hex,
    hms_from_duration,
    hms_from_duration_string,
    print_hex,
    time_from_hms,
)


def test_current_timestamp_close_to_now():
    before = time.time()
    stamp = current_timestamp()
    after = time.time()
    assert before - 1 <= stamp.total_seconds() <= after + 1


def test_hms_round_trip():
    for h, m, s in [(0, 0, 0), (1, 2, 3), (25, 59, 59)]:
        assert hms_from_duration(time_from_hms(h, m, s)) == (h, m, s)


def test_time_from_hms_whole_seconds():
    assert time_from_hms(0, 0, 90) == timedelta(seconds=90)
    assert hms_from_duration(time_from_hms(0, 0, 90)) == (0, 1, 30)


def test_hms_ignores_fractions():
    assert hms_from_duration(timedelta(seconds=61.9)) == (0, 1, 1)


def test_hms_string():
    assert hms_from_duration_string(time_from_hms(1, 2, 3)) == "1时 2分 3秒"


def test_format_hex():
    assert format_hex("req", bytes([1, 0xAB])) == "req (2): [1, 171] \n01 AB \n"


def test_format_hex_empty():
    assert format_hex("x", []) == "x (0): [] \n \n"


def test_print_hex_outputs_format(capsys):
    print_hex("name", [0x10, 0x20])
    out = capsys.readouterr().out
    assert out == format_hex("name", [0x10, 0x20]) + "\n"