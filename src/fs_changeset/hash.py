# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# fs-changeset/src/fs_changeset/hash.py

"""Fixed-width content hash with a lowercase hex text form."""

import hashlib
from dataclasses import dataclass
from typing import Final

from .errors import HashDecodeError


HASH_SIZE: Final = 32
HEX_LENGTH: Final = 2 * HASH_SIZE
_HEX_DIGITS: Final = frozenset("0123456789abcdefABCDEF")


@dataclass(frozen=True, order=True)
class Hash:
    """A 32-byte content hash."""
    digest: bytes

    def __post_init__(self) -> None:
        if isinstance(self.digest, (bytearray, memoryview)):
            object.__setattr__(self, "digest", bytes(self.digest))
        if not isinstance(self.digest, bytes):
            raise ValueError(f"Hash digest must be bytes, got {type(self.digest).__name__}")
        if len(self.digest) != HASH_SIZE:
            raise ValueError(f"Hash digest must be {HASH_SIZE} bytes, got {len(self.digest)}")

    @classmethod
    def of(cls, data: bytes) -> "Hash":
        """Hash `data` with SHA-256."""
        return cls(hashlib.sha256(data).digest())

    @classmethod
    def from_hex(cls, text: str) -> "Hash":
        """Decode 64 hex characters (any case) into a hash."""
        if not isinstance(text, str):
            raise HashDecodeError(
                f"Expected a hex string, got {type(text).__name__}", text
            )
        if len(text) != HEX_LENGTH:
            raise HashDecodeError(
                f"Invalid string length {len(text)}, expected {HEX_LENGTH}", text
            )
        for index, char in enumerate(text):
            if char not in _HEX_DIGITS:
                raise HashDecodeError(
                    f"Invalid character {char!r} at position {index}", text
                )
        return cls(bytes.fromhex(text))

    def to_hex(self) -> str:
        return self.digest.hex()

    def __str__(self) -> str:
        return self.to_hex()

    def __repr__(self) -> str:
        return f"Hash({self.to_hex()})"
