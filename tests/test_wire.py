# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# tests/test_wire.py

"""Unit tests for the JSON wire format."""

import json
import random

import pytest

from fs_changeset import (
    AccessControlList,
    AlternateDataStream,
    Change,
    Changed,
    Changeset,
    DecodeError,
    EntryChange,
    FileChanged,
    HashDecodeError,
    MetadataInfo,
    MetaOnlyChange,
    NamedStream,
    Nlink,
    NtfsAttributes,
    OtherChange,
    Same,
    Size,
    SymlinkChanged,
    Timestamp,
    TimestampParseError,
    TypeChange,
    Uid,
    WireFormatError,
    changeset_from_wire,
    changeset_to_wire,
    dumps,
    loads,
)
from fs_changeset.wire import (
    entry_diff_from_wire,
    entry_diff_to_wire,
    meta_entry_diff_from_wire,
    meta_entry_diff_to_wire,
    metadata_change_from_wire,
    metadata_change_to_wire,
    named_stream_type_from_wire,
    named_stream_type_to_wire,
)

UNCHANGED_INFO = {
    "changes": [],
    "inode": {"Same": None},
    "created": {"Same": None},
    "modified": {"Same": None},
    "accessed": {"Same": None},
    "inode_modified": {"Same": None},
}


@pytest.fixture
def simple_changeset(ts):
    return Changeset(
        ts("2024-01-01 00:00:00.0"),
        {"a/b.txt": MetaOnlyChange(MetadataInfo(changes=[Size(Change(10, 20))]))},
    )


class TestEndToEnd:
    """Test whole changesets through the wire format."""

    def test_simple_changeset_text(self, simple_changeset):
        expected = (
            '{"earliest_timestamp":"2024-01-01 00:00:00.0","changes":{"a/b.txt":'
            '{"MetaOnlyChange":{"changes":[{"Size":{"from":10,"to":20}}],'
            '"inode":{"Same":null},"created":{"Same":null},"modified":{"Same":null},'
            '"accessed":{"Same":null},"inode_modified":{"Same":null}}}}}'
        )
        assert dumps(simple_changeset) == expected

    def test_simple_changeset_round_trip(self, simple_changeset):
        wire = changeset_to_wire(simple_changeset)
        assert list(wire["changes"]) == ["a/b.txt"]
        assert changeset_from_wire(json.loads(json.dumps(wire))) == simple_changeset
        assert loads(dumps(simple_changeset)) == simple_changeset

    def test_full_changeset_round_trip(self, changeset):
        assert loads(dumps(changeset)) == changeset
        assert loads(dumps(changeset, indent=2)) == changeset

    def test_output_independent_of_insertion_order(self, changeset):
        items = changeset.items()
        for seed in range(5):
            random.Random(seed).shuffle(items)
            shuffled = Changeset.from_pairs(changeset.earliest_timestamp, items)
            assert dumps(shuffled) == dumps(changeset)

    def test_keys_in_path_order(self, changeset):
        wire = json.loads(dumps(changeset))
        assert list(wire) == ["earliest_timestamp", "changes"]
        assert list(wire["changes"]) == sorted(wire["changes"])

    def test_non_ascii_paths_written_raw(self, ts):
        cs = Changeset(ts("2024-01-01 00:00:00.0"), {"ünï.txt": MetaOnlyChange(MetadataInfo())})
        assert '"ünï.txt"' in dumps(cs)

    def test_remapped_timestamps(self, changeset):
        """A changeset remapped to unix nanoseconds serializes with custom codecs."""
        remapped = changeset.transform_timestamps(lambda t: t.unix_nanos)
        text = dumps(remapped, encode_timestamp=lambda n: n)
        wire = json.loads(text)
        assert wire["earliest_timestamp"] == 1704067200 * 10 ** 9
        back = loads(text, decode_timestamp=Timestamp.from_unix_nanos)
        assert back == changeset


class TestVariantShapes:
    """Test the externally tagged shape of every variant."""

    def test_entry_diffs(self, old_hash, new_hash):
        assert entry_diff_to_wire(FileChanged(Change(old_hash, new_hash))) == {
            "FileChanged": {"hash_change": {"from": old_hash.to_hex(), "to": new_hash.to_hex()}}}
        assert entry_diff_to_wire(SymlinkChanged(Change("a", "b"))) == {
            "SymlinkChanged": {"path_change": {"from": "a", "to": "b"}}}
        assert entry_diff_to_wire(TypeChange(Change("file", "directory"))) == {
            "TypeChange": {"from": "file", "to": "directory"}}
        assert entry_diff_to_wire(OtherChange()) == "OtherChange"

    def test_named_streams(self):
        assert named_stream_type_to_wire(AccessControlList()) == "AccessControlList"
        assert named_stream_type_to_wire(AlternateDataStream("x")) == {
            "AlternateDataStream": {"name": "x"}}

    def test_metadata_changes(self):
        assert metadata_change_to_wire(NtfsAttributes(Change(None, 32))) == {
            "NtfsAttributes": {"from": None, "to": 32}}
        assert metadata_change_to_wire(NamedStream(AccessControlList(), Change(b"\x01", None))) == {
            "NamedStream": ["AccessControlList", {"from": [1], "to": None}]}

    def test_entry_change(self):
        diff = EntryChange(OtherChange(), MetadataInfo())
        assert meta_entry_diff_to_wire(diff) == {"EntryChange": ["OtherChange", UNCHANGED_INFO]}

    def test_changed_timestamp(self, ts):
        info = MetadataInfo(modified=Changed(Change(None, ts("2024-01-01 00:00:00.5"))))
        wire = meta_entry_diff_to_wire(MetaOnlyChange(info))
        assert wire["MetaOnlyChange"]["modified"] == {
            "Change": {"from": None, "to": "2024-01-01 00:00:00.5"}}

    def test_mixed_case_hash_normalized(self, old_hash):
        upper = old_hash.to_hex().upper()
        entry = entry_diff_from_wire({"FileChanged": {"hash_change": {"from": upper, "to": upper}}})
        assert entry_diff_to_wire(entry)["FileChanged"]["hash_change"]["from"] == old_hash.to_hex()

    def test_unit_variant_as_object_accepted(self):
        assert entry_diff_from_wire({"OtherChange": None}) == OtherChange()
        assert named_stream_type_from_wire({"DosName": None}) == named_stream_type_from_wire("DosName")

    def test_extra_keys_ignored(self):
        info = dict(UNCHANGED_INFO, extra=1)
        assert meta_entry_diff_from_wire({"Added": info}).meta_info() == MetadataInfo()


class TestDecodeErrors:
    """Test rejection of malformed input."""

    def test_unknown_variant(self):
        with pytest.raises(WireFormatError) as exc_info:
            metadata_change_from_wire({"Mtime": {"from": 1, "to": 2}})
        assert "Mtime" in str(exc_info.value)

    def test_missing_field_location(self):
        info = dict(UNCHANGED_INFO)
        del info["accessed"]
        with pytest.raises(WireFormatError) as exc_info:
            changeset_from_wire({
                "earliest_timestamp": "2024-01-01 00:00:00.0",
                "changes": {"a/b.txt": {"Deleted": info}},
            })
        assert exc_info.value.location == "changes['a/b.txt'].Deleted"
        assert "accessed" in str(exc_info.value)

    @pytest.mark.parametrize("wire", [
        {"Size": {"from": -1, "to": 2}},
        {"Size": {"from": 2 ** 64, "to": 2}},
        {"Size": {"from": None, "to": 2}},
        {"Uid": {"from": 2 ** 32, "to": None}},
        {"Gid": {"from": True, "to": 0}},
        {"Nlink": {"from": 1.5, "to": 0}},
        {"NamedStream": ["DosName", {"from": [256], "to": None}]},
        {"NamedStream": ["DosName"]},
        {"Size": {"from": 1}},
        {"Size": {"from": 1, "to": 2}, "Uid": {"from": 1, "to": 2}},
        ["Size"],
    ])
    def test_bad_metadata_change(self, wire):
        with pytest.raises(WireFormatError):
            metadata_change_from_wire(wire)

    def test_integer_location(self):
        with pytest.raises(WireFormatError) as exc_info:
            metadata_change_from_wire({"Uid": {"from": 1, "to": -5}})
        assert exc_info.value.location == "Uid.to"

    def test_optional_integers_accept_null(self):
        assert metadata_change_from_wire({"Nlink": {"from": None, "to": 2}}) == Nlink(Change(None, 2))
        assert metadata_change_from_wire({"Uid": {"from": 0, "to": 2 ** 32 - 1}}) == Uid(
            Change(0, 2 ** 32 - 1))

    def test_unit_variant_with_payload_rejected(self):
        with pytest.raises(WireFormatError):
            entry_diff_from_wire({"OtherChange": {"x": 1}})

    def test_bad_hash_surfaces_hash_error(self):
        with pytest.raises(HashDecodeError):
            entry_diff_from_wire({"FileChanged": {"hash_change": {"from": "ab", "to": "cd"}}})

    def test_bad_hash_names_its_path(self, changeset):
        wire = changeset_to_wire(changeset)
        wire["changes"]["data.bin"]["EntryChange"][0]["FileChanged"]["hash_change"]["to"] = "zz"
        with pytest.raises(HashDecodeError) as exc_info:
            changeset_from_wire(wire)
        assert exc_info.value.text == "zz"
        assert "changes['data.bin'].EntryChange[0].FileChanged.hash_change.to" in str(exc_info.value)

    def test_bad_timestamp_surfaces_parse_error(self, simple_changeset):
        wire = changeset_to_wire(simple_changeset)
        wire["earliest_timestamp"] = "2024-13-40 99:99:99.0"
        with pytest.raises(TimestampParseError):
            changeset_from_wire(wire)

    def test_invalid_json(self):
        with pytest.raises(WireFormatError):
            loads("{not json")

    def test_deeply_nested_json(self):
        with pytest.raises(WireFormatError):
            loads("[" * 100000 + "]" * 100000)

    def test_all_errors_are_decode_errors(self):
        for text in ("[]", '{"changes": {}}', '{"earliest_timestamp": "x", "changes": {}}'):
            with pytest.raises(DecodeError):
                loads(text)

    def test_same_without_value_rejected(self):
        info = dict(UNCHANGED_INFO, inode="Same")
        with pytest.raises(WireFormatError):
            meta_entry_diff_from_wire({"Added": info})


class TestEncodeErrors:
    """Test that unknown variants are never silently dropped."""

    def test_unknown_metadata_change(self):
        class Custom(Size):
            pass

        with pytest.raises(TypeError):
            metadata_change_to_wire(Custom(Change(1, 2)))

    def test_unknown_entry_diff(self):
        with pytest.raises(TypeError):
            entry_diff_to_wire(object())

    def test_same_maybe_change_encoded(self):
        info = MetadataInfo(inode=Same(5))
        assert meta_entry_diff_to_wire(MetaOnlyChange(info))["MetaOnlyChange"]["inode"] == {"Same": 5}
