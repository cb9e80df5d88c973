"""Header and records of the IPI (ID) stream."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import ClassVar

from .types import ErrorCode, PdbError
from .util import codeview_record_size

__all__ = [
    "IpiStreamHeader",
    "IpiTypeRecordKind",
    "BuildInfoType",
    "IpiRecord",
    "parse_string_id",
    "parse_substr_list",
    "parse_build_info",
]


def _truncated(what: str) -> PdbError:
    return PdbError(ErrorCode.INVALID_STREAM, f"{what} is truncated")


@dataclass(frozen=True)
class IpiStreamHeader:
    """Header at the start of the IPI stream."""

    class Version(enum.IntEnum):
        V40 = 19950410
        V41 = 19951122
        V50 = 19961031
        V70 = 19990903
        V80 = 20040203

    version: int
    header_size: int
    type_index_begin: int
    type_index_end: int
    type_record_bytes: int
    hash_stream_index: int
    hash_aux_stream_index: int
    hash_key_size: int
    hash_bucket_count: int
    hash_value_buffer_offset: int
    hash_value_buffer_length: int
    index_offset_buffer_offset: int
    index_offset_buffer_length: int
    hash_adj_buffer_offset: int
    hash_adj_buffer_length: int

    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<IIIIIHHIIIIIIII")
    SIZE: ClassVar[int] = 56

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> IpiStreamHeader:
        if offset < 0 or offset + cls.SIZE > len(data):
            raise _truncated("IPI stream header")
        version, *rest = cls._FORMAT.unpack_from(data, offset)
        try:
            version = cls.Version(version)
        except ValueError:
            pass
        return cls(version, *rest)


class IpiTypeRecordKind(enum.IntEnum):
    """Kinds of CodeView records that can appear in the IPI stream."""

    LF_FUNC_ID = 0x1601
    LF_MFUNC_ID = 0x1602
    LF_BUILDINFO = 0x1603
    LF_SUBSTR_LIST = 0x1604
    LF_STRING_ID = 0x1605
    LF_UDT_SRC_LINE = 0x1606
    LF_UDT_MOD_SRC_LINE = 0x1607


class BuildInfoType(enum.IntEnum):
    """Meaning of each entry in an LF_BUILDINFO record."""

    CURRENT_DIRECTORY = 0
    BUILD_TOOL = 1
    SOURCE_FILE = 2
    TYPE_SERVER_PDB = 3
    COMMAND_LINE = 4


@dataclass(frozen=True)
class IpiRecord:
    """A CodeView record of the IPI stream: its header and the data after it."""

    size: int
    kind: IpiTypeRecordKind | int
    data: bytes

    HEADER_SIZE: ClassVar[int] = 4
    _HEADER: ClassVar[struct.Struct] = struct.Struct("<HH")

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> IpiRecord:
        if offset < 0 or offset + cls.HEADER_SIZE > len(data):
            raise _truncated("IPI record header")
        size, kind = cls._HEADER.unpack_from(data, offset)
        try:
            length = codeview_record_size(size)
        except ValueError as exc:
            raise PdbError(ErrorCode.INVALID_STREAM, str(exc)) from None
        start = offset + cls.HEADER_SIZE
        if start + length > len(data):
            raise _truncated("IPI record")
        try:
            kind = IpiTypeRecordKind(kind)
        except ValueError:
            pass
        return cls(size, kind, bytes(data[start : start + length]))

    @property
    def record_size(self) -> int:
        """Number of bytes the record takes up, header included."""
        return self.HEADER_SIZE + len(self.data)


def parse_string_id(data: bytes) -> tuple[int, str]:
    """Decode the data of an LF_STRING_ID record into its substring-list id and name."""
    if len(data) < 4:
        raise _truncated("LF_STRING_ID record")
    (string_id,) = struct.unpack_from("<I", data, 0)
    name = bytes(data[4:]).split(b"\0", 1)[0]
    return string_id, name.decode("utf-8", errors="replace")


def _indices(data: bytes, offset: int, count: int, what: str) -> tuple[int, ...]:
    if offset + 4 * count > len(data):
        raise _truncated(what)
    return struct.unpack_from(f"<{count}I", data, offset)


def parse_substr_list(data: bytes) -> tuple[int, ...]:
    """Decode the data of an LF_SUBSTR_LIST record into its list of string ids."""
    if len(data) < 4:
        raise _truncated("LF_SUBSTR_LIST record")
    (count,) = struct.unpack_from("<I", data, 0)
    return _indices(data, 4, count, "LF_SUBSTR_LIST record")


def parse_build_info(data: bytes) -> tuple[int, ...]:
    """Decode the data of an LF_BUILDINFO record into its string ids.

    Entries are ordered as in :class:`BuildInfoType`.
    """
    if len(data) < 2:
        raise _truncated("LF_BUILDINFO record")
    (count,) = struct.unpack_from("<H", data, 0)
    return _indices(data, 2, count, "LF_BUILDINFO record")