"""The symbol records of a module's stream."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import ClassVar, Iterator

from .raw_file import MSFStream, RawFile
from .types import ErrorCode, PdbError
from .util import codeview_record_size, round_up_to_multiple

__all__ = ["CodeViewRecord", "ModuleSymbolStream"]

# the module stream starts with a 4-byte signature
_SIGNATURE_SIZE = 4


@dataclass(frozen=True)
class CodeViewRecord:
    """A CodeView symbol record and the offset at which it was found."""

    offset: int
    size: int
    kind: int
    data: bytes

    HEADER_SIZE: ClassVar[int] = 4
    _HEADER: ClassVar[struct.Struct] = struct.Struct("<HH")

    @classmethod
    def read(cls, stream: MSFStream, offset: int) -> CodeViewRecord:
        """Parse the record that starts at ``offset`` in the stream."""
        size, kind = cls._HEADER.unpack(stream.read_bytes(offset, cls.HEADER_SIZE))
        try:
            length = codeview_record_size(size)
        except ValueError as exc:
            raise PdbError(ErrorCode.INVALID_STREAM, str(exc)) from None
        data = stream.read_bytes(offset + cls.HEADER_SIZE, length)
        return cls(offset, size, kind, data)

    @property
    def record_size(self) -> int:
        """Number of bytes the record takes up, header included, without padding."""
        return self.HEADER_SIZE + len(self.data)


class ModuleSymbolStream:
    """The symbol part of a module stream; line information is not included."""

    def __init__(self, file: RawFile, stream_index: int, symbol_stream_size: int) -> None:
        self._stream = file.create_stream(stream_index, symbol_stream_size)

    def __len__(self) -> int:
        return len(self._stream)

    def __iter__(self) -> Iterator[CodeViewRecord]:
        """Yield every record in stream order."""
        offset = _SIGNATURE_SIZE
        while offset < len(self._stream):
            record = CodeViewRecord.read(self._stream, offset)
            yield record
            offset = round_up_to_multiple(offset + record.record_size, 4)

    def record_at(self, offset: int) -> CodeViewRecord:
        """Return the record at ``offset``, e.g. a record's parent or end."""
        return CodeViewRecord.read(self._stream, offset)

    def find_record(self, kind: int) -> CodeViewRecord | None:
        """Return the first record of the given kind, or None."""
        return next((record for record in self if record.kind == kind), None)