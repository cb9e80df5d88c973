"""The "/names" string table stream."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import ClassVar

from .raw_file import RawFile
from .types import ErrorCode, PdbError

__all__ = ["NamesHeader", "NamesStream"]


@dataclass(frozen=True)
class NamesHeader:
    """Header of the names stream."""

    magic: int
    hash_version: int
    size: int

    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<III")
    SIZE: ClassVar[int] = 12

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> NamesHeader:
        if offset < 0 or offset + cls.SIZE > len(data):
            raise PdbError(ErrorCode.INVALID_STREAM, "names header is truncated")
        return cls(*cls._FORMAT.unpack_from(data, offset))


class NamesStream:
    """String table used to look up file names referenced by line information."""

    def __init__(self, file: RawFile, stream_index: int) -> None:
        stream = file.create_stream(stream_index)
        self._header = NamesHeader.from_bytes(bytes(stream))
        self._strings = stream.substream(NamesHeader.SIZE, len(stream) - NamesHeader.SIZE)

    @property
    def header(self) -> NamesHeader:
        return self._header

    def get_filename(self, filename_offset: int) -> str:
        """Return the file name at the given offset into the string table."""
        return self._strings.read_cstring(filename_offset).decode("utf-8", errors="replace")