# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# fs-changeset/src/fs_changeset/errors.py

"""Exceptions raised while decoding changesets and their leaf values."""

from typing import Optional


class DecodeError(ValueError):
    """Base exception for every decoding failure."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class HashDecodeError(DecodeError):
    """Raised when a string is not exactly 64 hex characters."""

    def __init__(self, message: str, text: object = None):
        self.text = text
        super().__init__(message)


class TimestampParseError(DecodeError):
    """Raised when a string does not match the timestamp format."""

    def __init__(
        self,
        message: str,
        text: object = None,
        position: Optional[int] = None,
        component: Optional[str] = None,
    ):
        self.text = text
        self.position = position
        self.component = component
        super().__init__(message)


class WireFormatError(DecodeError):
    """Raised when a serialized structure has the wrong shape."""

    def __init__(self, message: str, location: str = ""):
        self.location = location
        if location:
            message = f"{message} (at {location})"
        super().__init__(message)
