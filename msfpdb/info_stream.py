"""The PDB info stream: header, named stream map and feature codes."""

from __future__ import annotations

import struct
from types import MappingProxyType
from typing import Mapping

from .names_stream import NamesStream
from .raw_file import RawFile
from .types import ErrorCode, FeatureCode, Header, PdbError

__all__ = ["InfoStream"]

# the PDB info stream always resides at index 1
INFO_STREAM_INDEX = 1

_NAMES_STREAM_NAME = "/names"


class InfoStream:
    """Parsed PDB info stream."""

    def __init__(self, file: RawFile) -> None:
        stream = file.create_stream(INFO_STREAM_INDEX)
        self._header = Header.from_bytes(bytes(stream))
        offset = Header.SIZE

        # named stream map: a string table followed by a serialized hash table
        table_length = stream.read_u32(offset)
        offset += 4
        strings = stream.substream(offset, table_length)
        offset += table_length

        entry_count = stream.read_u32(offset)
        offset += 8  # size and capacity

        # present and deleted bit vectors
        for _ in range(2):
            word_count = stream.read_u32(offset)
            offset += 4 + 4 * word_count

        named: dict[str, int] = {}
        for _ in range(entry_count):
            string_offset = stream.read_u32(offset)
            stream_index = stream.read_u32(offset + 4)
            offset += 8
            name = strings.read_cstring(string_offset).decode("utf-8", errors="replace")
            named[name] = stream_index
        self._named_streams = MappingProxyType(named)

        # feature codes take up the remaining bytes
        count = max(0, len(stream) - offset) // 4
        self._feature_codes: tuple[int, ...] = struct.unpack(
            f"<{count}I", stream.read_bytes(offset, 4 * count)
        )

    @property
    def header(self) -> Header:
        return self._header

    @property
    def named_streams(self) -> Mapping[str, int]:
        """Stream indices by name, e.g. "/names" or "/LinkInfo"."""
        return self._named_streams

    @property
    def feature_codes(self) -> tuple[int, ...]:
        return self._feature_codes

    @property
    def uses_debug_fast_link(self) -> bool:
        """Whether the PDB was linked using /DEBUG:FASTLINK."""
        return FeatureCode.MINIMAL_DEBUG_INFO in self._feature_codes

    @property
    def names_stream_index(self) -> int:
        return self._named_streams.get(_NAMES_STREAM_NAME, 0)

    def has_names_stream(self) -> bool:
        return self.names_stream_index != 0

    def create_names_stream(self, file: RawFile) -> NamesStream:
        """Open the "/names" string table stream."""
        if not self.has_names_stream():
            raise PdbError(ErrorCode.INVALID_STREAM_INDEX, "PDB has no /names stream")
        return NamesStream(file, self.names_stream_index)