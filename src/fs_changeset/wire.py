# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# fs-changeset/src/fs_changeset/wire.py

"""JSON wire format for changesets.

Variants are externally tagged: a unit variant is its name as a string, any
other variant is a single-key object mapping its name to its payload. Tuple
variants carry a list payload and struct variants an object. Struct keys are
emitted in declaration order and changeset paths in path order, so equal
changesets always produce the same text.

Timestamp leaves go through ``encode_timestamp`` / ``decode_timestamp``. The
defaults speak the ``Timestamp`` text format; pass other callables to
serialize a changeset whose timestamps were remapped with
``transform_timestamps``.
"""

import json
import logging
from typing import Any, Callable, Final, Optional

from .change import Change, Changed, MaybeChange, Same
from .errors import DecodeError, HashDecodeError, WireFormatError
from .hash import Hash
from .timestamp import Timestamp
from .types import (
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

logger = logging.getLogger(__name__)

Encoder = Callable[[Any], Any]
Decoder = Callable[[Any, str], Any]

_UNIT_STREAMS: Final = {
    cls.__name__: cls
    for cls in (ReparseData, AccessControlList, DosName, ObjectId,
                EncryptedFileSystemInfo, ExtendedAttributes)
}

# tag -> (class, integer width in bits, optional)
_METADATA_FIELDS: Final = {
    "Size": (Size, 64, False),
    "NtfsAttributes": (NtfsAttributes, 32, True),
    "UnixPermissions": (UnixPermissions, 32, True),
    "Nlink": (Nlink, 64, True),
    "Uid": (Uid, 32, True),
    "Gid": (Gid, 32, True),
}

_META_ENTRY_VARIANTS: Final = {
    "Added": Added,
    "Deleted": Deleted,
    "MetaOnlyChange": MetaOnlyChange,
}

_INFO_TIMESTAMP_FIELDS: Final = ("created", "modified", "accessed", "inode_modified")


# Encoding

def _optional(encode: Encoder) -> Encoder:
    return lambda value: None if value is None else encode(value)


def _identity(value: Any) -> Any:
    return value


def _change_to_wire(change: Change, encode: Encoder = _identity) -> dict:
    return {"from": encode(change.from_), "to": encode(change.to)}


def _maybe_change_to_wire(maybe: MaybeChange, encode: Encoder = _identity) -> dict:
    if isinstance(maybe, Changed):
        return {"Change": _change_to_wire(maybe.change, encode)}
    if isinstance(maybe, Same):
        return {"Same": encode(maybe.value)}
    raise TypeError(f"Unhandled MaybeChange variant: {type(maybe).__name__}")


def entry_diff_to_wire(entry: EntryDiff) -> Any:
    if isinstance(entry, FileChanged):
        return {"FileChanged": {"hash_change": _change_to_wire(entry.hash_change, Hash.to_hex)}}
    if isinstance(entry, SymlinkChanged):
        return {"SymlinkChanged": {"path_change": _change_to_wire(entry.path_change)}}
    if isinstance(entry, TypeChange):
        return {"TypeChange": _change_to_wire(entry.change)}
    if isinstance(entry, OtherChange):
        return "OtherChange"
    raise TypeError(f"Unhandled EntryDiff variant: {type(entry).__name__}")


def named_stream_type_to_wire(stream: NamedStreamType) -> Any:
    if isinstance(stream, AlternateDataStream):
        return {"AlternateDataStream": {"name": stream.name}}
    name = type(stream).__name__
    if _UNIT_STREAMS.get(name) is type(stream):
        return name
    raise TypeError(f"Unhandled NamedStreamType variant: {name}")


def metadata_change_to_wire(change: MetadataChange) -> dict:
    if isinstance(change, NamedStream):
        return {"NamedStream": [
            named_stream_type_to_wire(change.stream),
            _change_to_wire(change.change, _optional(list)),
        ]}
    tag = type(change).__name__
    if tag in _METADATA_FIELDS and _METADATA_FIELDS[tag][0] is type(change):
        return {tag: _change_to_wire(change.change)}
    raise TypeError(f"Unhandled MetadataChange variant: {tag}")


def metadata_info_to_wire(info: MetadataInfo, encode_timestamp: Encoder = Timestamp.format) -> dict:
    encode = _optional(encode_timestamp)
    wire = {
        "changes": [metadata_change_to_wire(c) for c in info.changes],
        "inode": _maybe_change_to_wire(info.inode),
    }
    for name in _INFO_TIMESTAMP_FIELDS:
        wire[name] = _maybe_change_to_wire(getattr(info, name), encode)
    return wire


def meta_entry_diff_to_wire(diff: MetaEntryDiff, encode_timestamp: Encoder = Timestamp.format) -> dict:
    info = metadata_info_to_wire(diff.meta_info(), encode_timestamp)
    if isinstance(diff, EntryChange):
        return {"EntryChange": [entry_diff_to_wire(diff.entry), info]}
    tag = type(diff).__name__
    if _META_ENTRY_VARIANTS.get(tag) is type(diff):
        return {tag: info}
    raise TypeError(f"Unhandled MetaEntryDiff variant: {tag}")


def changeset_to_wire(changeset: Changeset, encode_timestamp: Encoder = Timestamp.format) -> dict:
    return {
        "earliest_timestamp": encode_timestamp(changeset.earliest_timestamp),
        "changes": {
            path: meta_entry_diff_to_wire(diff, encode_timestamp)
            for path, diff in changeset.items()
        },
    }


def dumps(
    changeset: Changeset,
    indent: Optional[int] = None,
    encode_timestamp: Encoder = Timestamp.format,
) -> str:
    """Serialize a changeset to JSON text; compact unless `indent` is given."""
    separators = (",", ":") if indent is None else (",", ": ")
    return json.dumps(
        changeset_to_wire(changeset, encode_timestamp),
        indent=indent,
        separators=separators,
        ensure_ascii=False,
    )


# Decoding

def _at(location: str, key: Any) -> str:
    if isinstance(key, int):
        return f"{location}[{key}]"
    if isinstance(key, str) and not key.isidentifier():
        return f"{location}[{key!r}]"
    return f"{location}.{key}" if location else key


def _object(value: Any, location: str) -> dict:
    if not isinstance(value, dict):
        raise WireFormatError(f"Expected an object, got {_kind(value)}", location)
    return value


def _field(obj: dict, name: str, location: str) -> Any:
    if name not in obj:
        raise WireFormatError(f"Missing field {name!r}", location)
    return obj[name]


def _kind(value: Any) -> str:
    if value is None:
        return "null"
    return type(value).__name__


def _tuple(value: Any, size: int, location: str) -> list:
    if not isinstance(value, list) or len(value) != size:
        raise WireFormatError(f"Expected a list of {size} elements", location)
    return value


def _string(value: Any, location: str) -> str:
    if not isinstance(value, str):
        raise WireFormatError(f"Expected a string, got {_kind(value)}", location)
    return value


def _unsigned(bits: int) -> Decoder:
    def decode(value: Any, location: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise WireFormatError(f"Expected an integer, got {_kind(value)}", location)
        if not 0 <= value < 2 ** bits:
            raise WireFormatError(f"Integer {value} out of range for u{bits}", location)
        return value
    return decode


def _byte_list(value: Any, location: str) -> bytes:
    if not isinstance(value, list):
        raise WireFormatError(f"Expected a list of bytes, got {_kind(value)}", location)
    byte = _unsigned(8)
    return bytes(byte(b, _at(location, i)) for i, b in enumerate(value))


def _optional_decoder(decode: Decoder) -> Decoder:
    return lambda value, location: None if value is None else decode(value, location)


def _tagged(value: Any, location: str) -> tuple[str, Any]:
    """Split an externally tagged value into (tag, payload)."""
    if isinstance(value, str):
        return value, None
    if isinstance(value, dict) and len(value) == 1:
        (tag, payload), = value.items()
        return tag, payload
    raise WireFormatError("Expected a variant name or a single-key object", location)


def _change_from_wire(value: Any, decode: Decoder, location: str) -> Change:
    obj = _object(value, location)
    return Change(
        decode(_field(obj, "from", location), _at(location, "from")),
        decode(_field(obj, "to", location), _at(location, "to")),
    )


def _maybe_change_from_wire(value: Any, decode: Decoder, location: str) -> MaybeChange:
    tag, payload = _tagged(value, location)
    if tag == "Change":
        return Changed(_change_from_wire(payload, decode, _at(location, tag)))
    if tag == "Same":
        if not isinstance(value, dict):
            raise WireFormatError("Variant 'Same' needs a value", location)
        return Same(decode(payload, _at(location, tag)))
    raise WireFormatError(f"Unknown MaybeChange variant {tag!r}", location)


def _hash(value: Any, location: str) -> Hash:
    try:
        return Hash.from_hex(value)
    except HashDecodeError as e:
        raise HashDecodeError(f"{e.message} (at {location})", e.text) from e


def _unit(tag: str, value: Any, payload: Any, location: str) -> None:
    if isinstance(value, dict) and payload is not None:
        raise WireFormatError(f"Unit variant {tag!r} takes no value", location)


def entry_diff_from_wire(value: Any, location: str = "") -> EntryDiff:
    tag, payload = _tagged(value, location)
    inner = _at(location, tag)
    if tag == "FileChanged":
        obj = _object(payload, inner)
        return FileChanged(_change_from_wire(
            _field(obj, "hash_change", inner), _hash, _at(inner, "hash_change")))
    if tag == "SymlinkChanged":
        obj = _object(payload, inner)
        return SymlinkChanged(_change_from_wire(
            _field(obj, "path_change", inner), _string, _at(inner, "path_change")))
    if tag == "TypeChange":
        return TypeChange(_change_from_wire(payload, _string, inner))
    if tag == "OtherChange":
        _unit(tag, value, payload, location)
        return OtherChange()
    raise WireFormatError(f"Unknown EntryDiff variant {tag!r}", location)


def named_stream_type_from_wire(value: Any, location: str = "") -> NamedStreamType:
    tag, payload = _tagged(value, location)
    if tag == "AlternateDataStream":
        inner = _at(location, tag)
        obj = _object(payload, inner)
        return AlternateDataStream(_string(_field(obj, "name", inner), _at(inner, "name")))
    if tag in _UNIT_STREAMS:
        _unit(tag, value, payload, location)
        return _UNIT_STREAMS[tag]()
    raise WireFormatError(f"Unknown NamedStreamType variant {tag!r}", location)


def metadata_change_from_wire(value: Any, location: str = "") -> MetadataChange:
    tag, payload = _tagged(value, location)
    inner = _at(location, tag)
    if tag == "NamedStream":
        stream, change = _tuple(payload, 2, inner)
        return NamedStream(
            named_stream_type_from_wire(stream, _at(inner, 0)),
            _change_from_wire(change, _optional_decoder(_byte_list), _at(inner, 1)),
        )
    if tag in _METADATA_FIELDS:
        cls, bits, optional = _METADATA_FIELDS[tag]
        decode = _unsigned(bits)
        if optional:
            decode = _optional_decoder(decode)
        return cls(_change_from_wire(payload, decode, inner))
    raise WireFormatError(f"Unknown MetadataChange variant {tag!r}", location)


def metadata_info_from_wire(
    value: Any,
    decode_timestamp: Callable[[Any], Any] = Timestamp.parse,
    location: str = "",
) -> MetadataInfo:
    obj = _object(value, location)
    changes = _field(obj, "changes", location)
    if not isinstance(changes, list):
        raise WireFormatError(f"Expected a list, got {_kind(changes)}", _at(location, "changes"))
    timestamp = _optional_decoder(lambda v, _: decode_timestamp(v))
    fields = {
        name: _maybe_change_from_wire(_field(obj, name, location), timestamp, _at(location, name))
        for name in _INFO_TIMESTAMP_FIELDS
    }
    return MetadataInfo(
        changes=tuple(
            metadata_change_from_wire(c, _at(_at(location, "changes"), i))
            for i, c in enumerate(changes)
        ),
        inode=_maybe_change_from_wire(
            _field(obj, "inode", location), _optional_decoder(_unsigned(64)), _at(location, "inode")),
        **fields,
    )


def meta_entry_diff_from_wire(
    value: Any,
    decode_timestamp: Callable[[Any], Any] = Timestamp.parse,
    location: str = "",
) -> MetaEntryDiff:
    tag, payload = _tagged(value, location)
    inner = _at(location, tag)
    if tag == "EntryChange":
        entry, info = _tuple(payload, 2, inner)
        return EntryChange(
            entry_diff_from_wire(entry, _at(inner, 0)),
            metadata_info_from_wire(info, decode_timestamp, _at(inner, 1)),
        )
    if tag in _META_ENTRY_VARIANTS:
        return _META_ENTRY_VARIANTS[tag](metadata_info_from_wire(payload, decode_timestamp, inner))
    raise WireFormatError(f"Unknown MetaEntryDiff variant {tag!r}", location)


def changeset_from_wire(
    value: Any,
    decode_timestamp: Callable[[Any], Any] = Timestamp.parse,
) -> Changeset:
    obj = _object(value, "")
    changes = _object(_field(obj, "changes", ""), "changes")
    return Changeset(
        decode_timestamp(_field(obj, "earliest_timestamp", "")),
        {
            _string(path, "changes"): meta_entry_diff_from_wire(
                diff, decode_timestamp, _at("changes", path))
            for path, diff in changes.items()
        },
    )


def loads(text: str, decode_timestamp: Callable[[Any], Any] = Timestamp.parse) -> Changeset:
    """Deserialize a changeset from JSON text."""
    try:
        value = json.loads(text)
    except json.JSONDecodeError as e:
        raise WireFormatError(f"Invalid JSON: {e}") from e
    except RecursionError as e:
        raise WireFormatError("Invalid JSON: nested too deeply") from e
    try:
        return changeset_from_wire(value, decode_timestamp)
    except DecodeError as e:
        logger.debug(f"Changeset decode failed: {e}")
        raise
