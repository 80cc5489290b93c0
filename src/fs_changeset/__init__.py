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
# fs-changeset/src/fs_changeset/__init__.py

"""Data model and wire format for filesystem changesets."""

from .change import Change, Changed, MaybeChange, Ordering, Same
from .errors import DecodeError, HashDecodeError, TimestampParseError, WireFormatError
from .hash import Hash
from .timestamp import TIMESTAMP_FORMAT, Timestamp
from .types import (
    ENTRY_DIFF_VARIANTS,
    META_ENTRY_DIFF_VARIANTS,
    METADATA_CHANGE_VARIANTS,
    NAMED_STREAM_TYPES,
    AccessControlList,
    Added,
    AlternateDataStream,
    Changeset,
    Deleted,
    DosName,
    EncryptedFileSystemInfo,
    EntryChange,
    EntryDiff,
    ExtendedAttributes,
    FileChanged,
    Gid,
    MetaEntryDiff,
    MetaOnlyChange,
    MetadataChange,
    MetadataInfo,
    NamedStream,
    NamedStreamType,
    Nlink,
    NtfsAttributes,
    ObjectId,
    OtherChange,
    ReparseData,
    Size,
    SymlinkChanged,
    TypeChange,
    Uid,
    UnixPermissions,
)
from .wire import changeset_from_wire, changeset_to_wire, dumps, loads

__version__ = "0.1.0"

__all__ = [
    "Change",
    "Changed",
    "MaybeChange",
    "Ordering",
    "Same",
    "DecodeError",
    "HashDecodeError",
    "TimestampParseError",
    "WireFormatError",
    "Hash",
    "TIMESTAMP_FORMAT",
    "Timestamp",
    "ENTRY_DIFF_VARIANTS",
    "META_ENTRY_DIFF_VARIANTS",
    "METADATA_CHANGE_VARIANTS",
    "NAMED_STREAM_TYPES",
    "AccessControlList",
    "Added",
    "AlternateDataStream",
    "Changeset",
    "Deleted",
    "DosName",
    "EncryptedFileSystemInfo",
    "EntryChange",
    "EntryDiff",
    "ExtendedAttributes",
    "FileChanged",
    "Gid",
    "MetaEntryDiff",
    "MetaOnlyChange",
    "MetadataChange",
    "MetadataInfo",
    "NamedStream",
    "NamedStreamType",
    "Nlink",
    "NtfsAttributes",
    "ObjectId",
    "OtherChange",
    "ReparseData",
    "Size",
    "SymlinkChanged",
    "TypeChange",
    "Uid",
    "UnixPermissions",
    "changeset_from_wire",
    "changeset_to_wire",
    "dumps",
    "loads",
]
