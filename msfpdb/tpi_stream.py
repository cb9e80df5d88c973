"""The TPI stream: CodeView type records addressed by type index."""

from __future__ import annotations

from typing import Iterator

from .raw_file import RawFile
from .tpi_records import TpiStreamHeader, TypeRecord
from .types import ErrorCode, PdbError

__all__ = ["TPIStream", "has_valid_tpi_stream", "create_tpi_stream", "TPI_STREAM_INDEX"]

# the TPI stream always resides at index 2
TPI_STREAM_INDEX = 2


class TPIStream:
    """All type records of the TPI stream, indexed by their type index."""

    def __init__(self, file: RawFile, header: TpiStreamHeader) -> None:
        self._header = header
        expected = header.type_index_end - header.type_index_begin
        if expected < 0:
            raise PdbError(
                ErrorCode.INVALID_STREAM,
                f"type index range [{header.type_index_begin:#x}, "
                f"{header.type_index_end:#x}) is empty",
            )
        data = bytes(file.create_stream(TPI_STREAM_INDEX))

        # types carry no index of their own; it follows from their position in the stream
        records: list[TypeRecord] = []
        offset = TpiStreamHeader.SIZE
        while offset < len(data):
            if len(records) == expected:
                raise PdbError(
                    ErrorCode.INVALID_STREAM,
                    f"TPI stream holds more than the {expected} records its header announces",
                )
            record = TypeRecord.from_bytes(data, offset)
            records.append(record)
            offset += record.record_size
        self._records = tuple(records)

    @property
    def header(self) -> TpiStreamHeader:
        return self._header

    @property
    def first_type_index(self) -> int:
        """Index of the first type, which is not necessarily zero."""
        return self._header.type_index_begin

    @property
    def last_type_index(self) -> int:
        return self._header.type_index_end

    @property
    def type_records(self) -> tuple[TypeRecord, ...]:
        """All records; the one for a type index is at ``index - first_type_index``."""
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[TypeRecord]:
        return iter(self._records)

    def get_type_record(self, type_index: int) -> TypeRecord | None:
        """Return the record for ``type_index``, or None if the index is not in the stream."""
        position = type_index - self._header.type_index_begin
        if not 0 <= position < len(self._records):
            return None
        return self._records[position]


def has_valid_tpi_stream(file: RawFile) -> ErrorCode:
    """Check whether the file provides a TPI stream this library can read."""
    try:
        stream = file.create_stream(TPI_STREAM_INDEX)
    except PdbError as exc:
        return exc.code
    if len(stream) < TpiStreamHeader.SIZE:
        return ErrorCode.INVALID_STREAM
    header = TpiStreamHeader.from_bytes(bytes(stream))
    if header.version != TpiStreamHeader.Version.V80:
        return ErrorCode.UNKNOWN_VERSION
    return ErrorCode.SUCCESS


def create_tpi_stream(file: RawFile) -> TPIStream:
    """Read the TPI stream header from the file and build the stream."""
    stream = file.create_stream(TPI_STREAM_INDEX)
    header = TpiStreamHeader.from_bytes(bytes(stream))
    return TPIStream(file, header)