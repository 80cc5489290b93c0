# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# tests/conftest.py
"""Pytest configuration and shared fixtures for fs-changeset tests."""

import pytest

from fs_changeset import (
    Added,
    AlternateDataStream,
    Change,
    Changed,
    Changeset,
    Deleted,
    EntryChange,
    FileChanged,
    Hash,
    MetadataInfo,
    MetaOnlyChange,
    NamedStream,
    OtherChange,
    Same,
    Size,
    Timestamp,
    UnixPermissions,
)


@pytest.fixture
def ts():
    """Build timestamps from their text form."""
    return Timestamp.parse


@pytest.fixture
def old_hash():
    return Hash(bytes(range(32)))


@pytest.fixture
def new_hash():
    return Hash(bytes(range(255, 223, -1)))


@pytest.fixture
def metadata_info(ts):
    """Metadata info with a size change and a changed modification time."""
    return MetadataInfo(
        changes=[Size(Change(10, 20))],
        inode=Same(42),
        created=Same(ts("2024-01-01 00:00:00.0")),
        modified=Changed(Change(ts("2024-01-02 03:04:05.5"), ts("2024-01-03 00:00:00.123456789"))),
        accessed=Same(None),
        inode_modified=Changed(Change(None, ts("2024-01-03 00:00:00.25"))),
    )


@pytest.fixture
def changeset(ts, metadata_info, old_hash, new_hash):
    """A changeset holding one diff of every variant."""
    return Changeset.from_pairs(
        ts("2024-01-01 00:00:00.0"),
        [
            ("z/new.txt", Added(MetadataInfo.unchanged(inode=7))),
            ("gone", Deleted(MetadataInfo.unchanged())),
            ("a/b.txt", MetaOnlyChange(metadata_info)),
            ("data.bin", EntryChange(
                FileChanged(Change(old_hash, new_hash)),
                MetadataInfo(changes=[
                    UnixPermissions(Change(0o644, 0o755)),
                    NamedStream(AlternateDataStream("Zone.Identifier"), Change(None, b"\x00\xff")),
                ]),
            )),
            ("misc", EntryChange(OtherChange(), MetadataInfo())),
        ],
    )
