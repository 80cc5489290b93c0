# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# fs-changeset/src/fs_changeset/timestamp.py

"""Timestamps with nanosecond precision and a fixed text format.

The text form is ``YYYY-MM-DD HH:MM:SS.s+``: UTC wall-clock time with one to
nine fractional digits and no offset. Parsing reads the value back as UTC, so
an instant rendered in some other zone is silently reinterpreted; callers that
care must normalize before formatting.
"""

import calendar
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Final

from .errors import TimestampParseError


TIMESTAMP_FORMAT: Final = "YYYY-MM-DD HH:MM:SS.s+"

NANOS_PER_SECOND: Final = 1_000_000_000
MAX_SUBSECOND_DIGITS: Final = 9

_EPOCH: Final = datetime(1970, 1, 1, tzinfo=timezone.utc)
# 0001-01-01 00:00:00 and 9999-12-31 23:59:59, the span datetime can render
MIN_SECONDS: Final = -62135596800
MAX_SECONDS: Final = 253402300799

_DIGITS: Final = frozenset("0123456789")

# (component, width) pairs and literal separators, in text order
_LAYOUT: Final = (
    ("year", 4), "-", ("month", 2), "-", ("day", 2), " ",
    ("hour", 2), ":", ("minute", 2), ":", ("second", 2), ".",
)


@dataclass(frozen=True, order=True)
class Timestamp:
    """An instant as UTC seconds since the epoch plus nanoseconds."""
    seconds: int
    nanos: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.nanos < NANOS_PER_SECOND:
            raise ValueError(f"nanos out of range: {self.nanos}")
        if not MIN_SECONDS <= self.seconds <= MAX_SECONDS:
            raise ValueError(f"Timestamp outside years 1-9999: {self.seconds}s")

    @classmethod
    def from_datetime(cls, value: datetime) -> "Timestamp":
        """Build from a datetime; naive values are taken as UTC."""
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        delta = value - _EPOCH
        return cls(delta.days * 86400 + delta.seconds, delta.microseconds * 1000)

    @classmethod
    def from_unix_nanos(cls, nanos: int) -> "Timestamp":
        seconds, rest = divmod(nanos, NANOS_PER_SECOND)
        return cls(seconds, rest)

    @classmethod
    def now(cls) -> "Timestamp":
        return cls.from_unix_nanos(time.time_ns())

    @property
    def unix_nanos(self) -> int:
        return self.seconds * NANOS_PER_SECOND + self.nanos

    def to_datetime(self) -> datetime:
        """Aware UTC datetime; precision below a microsecond is dropped."""
        return _EPOCH + timedelta(seconds=self.seconds, microseconds=self.nanos // 1000)

    def format(self) -> str:
        dt = _EPOCH + timedelta(seconds=self.seconds)
        fraction = f"{self.nanos:09d}".rstrip("0") or "0"
        return (
            f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d} "
            f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}.{fraction}"
        )

    @classmethod
    def parse(cls, text: str) -> "Timestamp":
        """Parse the fixed format, reading the wall-clock value as UTC."""
        if not isinstance(text, str):
            raise TimestampParseError(
                f"Expected a timestamp string, got {type(text).__name__}", text
            )

        fields = {}
        pos = 0
        for item in _LAYOUT:
            if isinstance(item, str):
                if text[pos:pos + 1] != item:
                    raise TimestampParseError(
                        f"Expected {item!r} at position {pos}", text, pos, "literal"
                    )
                pos += 1
                continue
            name, width = item
            token = text[pos:pos + width]
            if len(token) != width or not set(token) <= _DIGITS:
                raise TimestampParseError(
                    f"Invalid {name} at position {pos}: expected {width} digits",
                    text, pos, name
                )
            fields[name] = int(token)
            pos += width

        start = pos
        while pos < len(text) and text[pos] in _DIGITS:
            pos += 1
        digits = text[start:pos]
        if not 1 <= len(digits) <= MAX_SUBSECOND_DIGITS:
            raise TimestampParseError(
                f"Invalid subsecond at position {start}: expected 1 to "
                f"{MAX_SUBSECOND_DIGITS} digits",
                text, start, "subsecond"
            )
        if pos != len(text):
            raise TimestampParseError(
                f"Unexpected trailing characters at position {pos}", text, pos, "trailing"
            )

        _check_ranges(text, fields)
        wall = datetime(
            fields["year"], fields["month"], fields["day"],
            fields["hour"], fields["minute"], fields["second"],
            tzinfo=timezone.utc,
        )
        nanos = int(digits.ljust(MAX_SUBSECOND_DIGITS, "0"))
        return cls(cls.from_datetime(wall).seconds, nanos)

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"Timestamp({self.format()})"


# Character offset of each numeric component within the text form
_OFFSETS: Final = {"year": 0, "month": 5, "day": 8, "hour": 11, "minute": 14, "second": 17}
_RANGES: Final = {
    "year": (1, 9999), "month": (1, 12), "hour": (0, 23), "minute": (0, 59), "second": (0, 59),
}


def _check_ranges(text: str, fields: dict[str, int]) -> None:
    for name in ("year", "month", "day", "hour", "minute", "second"):
        if name == "day":
            low, high = 1, calendar.monthrange(fields["year"], fields["month"])[1]
        else:
            low, high = _RANGES[name]
        if not low <= fields[name] <= high:
            raise TimestampParseError(
                f"{name} out of range at position {_OFFSETS[name]}: {fields[name]}",
                text, _OFFSETS[name], name
            )
