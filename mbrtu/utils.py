"""Time and hex-dump helpers."""

from __future__ import annotations

import time
from collections.abc import Iterable
from datetime import timedelta


def current_timestamp() -> timedelta:
    """Return the time elapsed since the Unix epoch."""
    return timedelta(seconds=time.time())


def time_from_hms(hours: int, minutes: int, seconds: int) -> timedelta:
    """Build a whole-second duration from hours, minutes and seconds."""
    return timedelta(seconds=hours * 3600 + minutes * 60 + seconds)


def hms_from_duration(duration: timedelta) -> tuple[int, int, int]:
    """Split a duration into whole hours, minutes and seconds."""
    total = int(duration.total_seconds())
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return hours, minutes, seconds


def hms_from_duration_string(duration: timedelta) -> str:
    """Format a duration as hours, minutes and seconds."""
    hours, minutes, seconds = hms_from_duration(duration)
    return f"{hours}时 {minutes}分 {seconds}秒"


def format_hex(name: str, data: Iterable[int]) -> str:
    """Describe a byte sequence as a decimal list followed by a hex dump."""
    values = list(data)
    hex_dump = "".join(f"{v:02X} " for v in values)
    return f"{name} ({len(values)}): {values} \n{hex_dump} \n"


def print_hex(name: str, data: Iterable[int]) -> None:
    """Print the description made by :func:`format_hex`."""
    print(format_hex(name, data))