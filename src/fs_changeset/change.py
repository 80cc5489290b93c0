# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# fs-changeset/src/fs_changeset/change.py

"""Generic before/after wrappers for changed and unchanged values."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Generic, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class Ordering(IntEnum):
    """Three-way comparison result of an old value against a new one."""
    LESS = -1
    EQUAL = 0
    GREATER = 1


@dataclass(frozen=True)
class Change(Generic[T]):
    """A value that went from `from_` to `to`."""
    from_: T
    to: T

    def map(self, f: Callable[[T], R]) -> "Change[R]":
        return Change(f(self.from_), f(self.to))

    def compare(self) -> Ordering:
        """Order the old value against the new one, e.g. growth of a size."""
        if self.from_ < self.to:
            return Ordering.LESS
        if self.to < self.from_:
            return Ordering.GREATER
        return Ordering.EQUAL


class MaybeChange(Generic[T]):
    """Either `Changed` or `Same`; the shape of every optionally changed field."""

    __slots__ = ()

    @staticmethod
    def between(old: T, new: T) -> "MaybeChange[T]":
        """`Same(old)` when the values are equal, `Changed` otherwise."""
        if old == new:
            return Same(old)
        return Changed(Change(old, new))

    def is_changed(self) -> bool:
        raise NotImplementedError

    def new_value(self) -> T:
        raise NotImplementedError

    def old_value(self) -> T:
        raise NotImplementedError

    def map(self, f: Callable[[T], R]) -> "MaybeChange[R]":
        raise NotImplementedError


@dataclass(frozen=True)
class Changed(MaybeChange[T]):
    """The value was changed."""
    change: Change[T]

    def is_changed(self) -> bool:
        return True

    def new_value(self) -> T:
        return self.change.to

    def old_value(self) -> T:
        return self.change.from_

    def map(self, f: Callable[[T], R]) -> "Changed[R]":
        return Changed(self.change.map(f))


@dataclass(frozen=True)
class Same(MaybeChange[T]):
    """The value was not changed."""
    value: T

    def is_changed(self) -> bool:
        return False

    def new_value(self) -> T:
        return self.value

    def old_value(self) -> T:
        return self.value

    def map(self, f: Callable[[T], R]) -> "Same[R]":
        return Same(f(self.value))
