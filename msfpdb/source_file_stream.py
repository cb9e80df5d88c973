"""The source info sub-stream of the DBI stream: source files of every module."""

from __future__ import annotations

import struct

from .raw_file import MSFStream
from .types import ErrorCode, PdbError

__all__ = ["SourceFileStream"]


class SourceFileStream:
    """File names contributing to each module.

    The sub-stream holds a module count, a legacy 16-bit file count, per-module
    start indices and file counts, the file name offsets of all modules, and
    the string table the offsets point into.
    """

    def __init__(self, stream: MSFStream) -> None:
        module_count = stream.read_u16(0)
        # the stored file count only covers 64k files and is not used
        offset = 4

        self._module_indices = struct.unpack(
            f"<{module_count}H", stream.read_bytes(offset, 2 * module_count)
        )
        offset += 2 * module_count
        self._module_file_counts = struct.unpack(
            f"<{module_count}H", stream.read_bytes(offset, 2 * module_count)
        )
        offset += 2 * module_count

        file_count = sum(self._module_file_counts)
        self._file_name_offsets = struct.unpack(
            f"<{file_count}I", stream.read_bytes(offset, 4 * file_count)
        )
        offset += 4 * file_count

        self._strings = stream.substream(offset, len(stream) - offset)

    @property
    def module_count(self) -> int:
        return len(self._module_indices)

    @property
    def file_count(self) -> int:
        """Number of file name offsets over all modules."""
        return len(self._file_name_offsets)

    def get_module_filename_offsets(self, module_index: int) -> tuple[int, ...]:
        """Return the string table offsets of the files of the given module."""
        if not 0 <= module_index < self.module_count:
            raise IndexError(
                f"module index {module_index} out of range [0, {self.module_count})"
            )
        start = self._module_indices[module_index]
        count = self._module_file_counts[module_index]
        if start + count > len(self._file_name_offsets):
            raise PdbError(
                ErrorCode.INVALID_STREAM,
                f"files of module {module_index} lie outside the offset table",
            )
        return self._file_name_offsets[start : start + count]

    def get_filename(self, filename_offset: int) -> str:
        """Return the file name at the given offset into the string table."""
        return self._strings.read_cstring(filename_offset).decode("utf-8", errors="replace")