# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.19
# Copyright (C) 2026 HRDAG https://hrdag.org
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along
# with this program; if not, see <https://www.gnu.org/licenses/>.
#
# ------
# fs-changeset/src/fs_changeset/types.py

"""Type definitions for filesystem entry and metadata changes.

Every closed set of variants is a frozen dataclass base with one subclass per
variant. Code that dispatches on a variant should handle every member of the
matching ``*_VARIANTS`` tuple and raise ``TypeError`` for anything else.
"""

import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Callable, Final, Generic, Iterable, Iterator, Mapping, Optional, TypeVar

from .change import Change, MaybeChange, Same
from .hash import Hash

logger = logging.getLogger(__name__)

Ts = TypeVar("Ts")
NewTs = TypeVar("NewTs")


# Entry content changes

@dataclass(frozen=True)
class EntryDiff:
    """A change of the primary content of a filesystem entry."""


@dataclass(frozen=True)
class FileChanged(EntryDiff):
    """The underlying file content has changed."""
    hash_change: Change[Hash]


@dataclass(frozen=True)
class SymlinkChanged(EntryDiff):
    """The path stored in the symlink has changed."""
    path_change: Change[str]


@dataclass(frozen=True)
class TypeChange(EntryDiff):
    """The entry type changed, e.g. "file" to "directory"."""
    change: Change[str]


@dataclass(frozen=True)
class OtherChange(EntryDiff):
    """Some other, unclassified change occurred."""


ENTRY_DIFF_VARIANTS: Final = (FileChanged, SymlinkChanged, TypeChange, OtherChange)


# Named streams

@dataclass(frozen=True)
class NamedStreamType:
    """Kind of OS-specific named stream associated with a path."""


@dataclass(frozen=True)
class ReparseData(NamedStreamType):
    """NTFS reparse data."""


@dataclass(frozen=True)
class AccessControlList(NamedStreamType):
    """NTFS access control list."""


@dataclass(frozen=True)
class DosName(NamedStreamType):
    """DOS 8.3 name."""


@dataclass(frozen=True)
class ObjectId(NamedStreamType):
    """NTFS object ID."""


@dataclass(frozen=True)
class EncryptedFileSystemInfo(NamedStreamType):
    """EFS encryption metadata."""


@dataclass(frozen=True)
class ExtendedAttributes(NamedStreamType):
    """Extended attributes."""


@dataclass(frozen=True)
class AlternateDataStream(NamedStreamType):
    """An alternate data stream, identified by its name."""
    name: str


NAMED_STREAM_TYPES: Final = (
    ReparseData, AccessControlList, DosName, ObjectId,
    EncryptedFileSystemInfo, ExtendedAttributes, AlternateDataStream,
)


# Metadata changes

@dataclass(frozen=True)
class MetadataChange:
    """A single changed metadata field.

    Optional values are None where the field does not apply on the observing
    platform; None is a real value, not a missing one.
    """


@dataclass(frozen=True)
class Size(MetadataChange):
    change: Change[int]


@dataclass(frozen=True)
class NtfsAttributes(MetadataChange):
    """Platform attribute bitmask."""
    change: Change[Optional[int]]


@dataclass(frozen=True)
class UnixPermissions(MetadataChange):
    change: Change[Optional[int]]


@dataclass(frozen=True)
class Nlink(MetadataChange):
    """Number of hard links."""
    change: Change[Optional[int]]


@dataclass(frozen=True)
class Uid(MetadataChange):
    change: Change[Optional[int]]


@dataclass(frozen=True)
class Gid(MetadataChange):
    change: Change[Optional[int]]


@dataclass(frozen=True)
class NamedStream(MetadataChange):
    """Content of a named stream changed."""
    stream: NamedStreamType
    change: Change[Optional[bytes]]


METADATA_CHANGE_VARIANTS: Final = (
    Size, NtfsAttributes, UnixPermissions, Nlink, Uid, Gid, NamedStream,
)


# Aggregates

def _optional(f: Callable[[Ts], NewTs]) -> Callable[[Optional[Ts]], Optional[NewTs]]:
    return lambda value: None if value is None else f(value)


@dataclass(frozen=True)
class MetadataInfo(Generic[Ts]):
    """Metadata changes of one entry plus its inode and timestamps.

    `changes` keeps detection order and may hold several entries for the
    same field; nothing here deduplicates them.
    """
    changes: tuple[MetadataChange, ...] = ()
    inode: MaybeChange[Optional[int]] = Same(None)
    created: MaybeChange[Optional[Ts]] = Same(None)
    modified: MaybeChange[Optional[Ts]] = Same(None)
    accessed: MaybeChange[Optional[Ts]] = Same(None)
    inode_modified: MaybeChange[Optional[Ts]] = Same(None)

    def __post_init__(self) -> None:
        if not isinstance(self.changes, tuple):
            object.__setattr__(self, "changes", tuple(self.changes))

    @classmethod
    def unchanged(
        cls,
        inode: Optional[int] = None,
        created: Optional[Ts] = None,
        modified: Optional[Ts] = None,
        accessed: Optional[Ts] = None,
        inode_modified: Optional[Ts] = None,
    ) -> "MetadataInfo[Ts]":
        """Info with no metadata changes and every field `Same`."""
        return cls(
            (), Same(inode), Same(created), Same(modified),
            Same(accessed), Same(inode_modified),
        )

    def transform_timestamps(self, f: Callable[[Ts], NewTs]) -> "MetadataInfo[NewTs]":
        """Apply `f` to every present timestamp, keeping everything else."""
        g = _optional(f)
        return MetadataInfo(
            changes=self.changes,
            inode=self.inode,
            created=self.created.map(g),
            modified=self.modified.map(g),
            accessed=self.accessed.map(g),
            inode_modified=self.inode_modified.map(g),
        )


class MetaEntryDiff(Generic[Ts]):
    """Per-path diff: an entry and exactly one attached MetadataInfo."""

    __slots__ = ()

    meta: MetadataInfo[Ts]

    def meta_info(self) -> MetadataInfo[Ts]:
        return self.meta

    def transform_timestamps(self, f: Callable[[Ts], NewTs]) -> "MetaEntryDiff[NewTs]":
        return replace(self, meta=self.meta.transform_timestamps(f))


@dataclass(frozen=True)
class Added(MetaEntryDiff[Ts]):
    meta: MetadataInfo[Ts]


@dataclass(frozen=True)
class Deleted(MetaEntryDiff[Ts]):
    meta: MetadataInfo[Ts]


@dataclass(frozen=True)
class MetaOnlyChange(MetaEntryDiff[Ts]):
    """Content unchanged, only metadata changed."""
    meta: MetadataInfo[Ts]


@dataclass(frozen=True)
class EntryChange(MetaEntryDiff[Ts]):
    """Content changed; metadata info is attached even if no field changed."""
    entry: EntryDiff
    meta: MetadataInfo[Ts]


META_ENTRY_DIFF_VARIANTS: Final = (Added, Deleted, MetaOnlyChange, EntryChange)


@dataclass(frozen=True, eq=False)
class Changeset(Generic[Ts]):
    """All per-path diffs of one comparison pass.

    `changes` is a read-only mapping ordered by path, whatever order it was
    given in, so equal changesets serialize identically.
    """
    earliest_timestamp: Ts
    changes: Mapping[str, MetaEntryDiff[Ts]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        ordered = dict(sorted(self.changes.items()))
        object.__setattr__(self, "changes", MappingProxyType(ordered))

    @classmethod
    def from_pairs(
        cls,
        earliest_timestamp: Ts,
        pairs: Iterable[tuple[str, MetaEntryDiff[Ts]]],
    ) -> "Changeset[Ts]":
        """Assemble from (path, diff) pairs; a repeated path keeps the last diff."""
        changes = {}
        for path, diff in pairs:
            if path in changes:
                logger.debug(f"Overwriting diff for duplicate path: {path}")
            changes[path] = diff
        return cls(earliest_timestamp, changes)

    def with_change(self, path: str, diff: MetaEntryDiff[Ts]) -> "Changeset[Ts]":
        """A new changeset with `diff` stored at `path`."""
        changes = dict(self.changes)
        changes[path] = diff
        return Changeset(self.earliest_timestamp, changes)

    def transform_timestamps(self, f: Callable[[Ts], NewTs]) -> "Changeset[NewTs]":
        return Changeset(
            f(self.earliest_timestamp),
            {path: diff.transform_timestamps(f) for path, diff in self.changes.items()},
        )

    def paths(self) -> list[str]:
        return list(self.changes)

    def items(self) -> list[tuple[str, MetaEntryDiff[Ts]]]:
        return list(self.changes.items())

    def __len__(self) -> int:
        return len(self.changes)

    def __iter__(self) -> Iterator[str]:
        return iter(self.changes)

    def __contains__(self, path: object) -> bool:
        return path in self.changes

    def __getitem__(self, path: str) -> MetaEntryDiff[Ts]:
        return self.changes[path]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Changeset):
            return NotImplemented
        return (self.earliest_timestamp == other.earliest_timestamp
                and self.items() == other.items())

    def __hash__(self) -> int:
        return hash((self.earliest_timestamp, tuple(self.items())))
