"""Access to the MSF container: the superblock, the stream directory and streams."""

from __future__ import annotations

import os
import struct
from typing import Iterable, Sequence

from .types import ErrorCode, PdbError, SuperBlock
from .util import block_index_to_file_offset, size_to_block_count

__all__ = ["MSFStream", "RawFile", "coalesce_blocks"]

# Streams that exist in the directory but hold no data store this size.
_NIL_STREAM_SIZE = 0xFFFFFFFF


def coalesce_blocks(
    data: bytes, block_size: int, block_indices: Sequence[int], size: int
) -> bytes:
    """Join the blocks holding a stream into one contiguous byte string of ``size`` bytes."""
    block_count = size_to_block_count(size, block_size)
    if len(block_indices) < block_count:
        raise PdbError(
            ErrorCode.INVALID_STREAM,
            f"stream of {size} bytes needs {block_count} blocks, "
            f"only {len(block_indices)} are listed",
        )
    view = memoryview(data)
    parts = []
    for block_index in block_indices[:block_count]:
        start = block_index_to_file_offset(block_index, block_size)
        if start + block_size > len(data):
            raise PdbError(
                ErrorCode.INVALID_STREAM,
                f"block {block_index} lies outside the file",
            )
        parts.append(view[start : start + block_size])
    return b"".join(parts)[:size]


class MSFStream:
    """A contiguous, read-only view of one stream's bytes."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)

    def __len__(self) -> int:
        return len(self._data)

    def __bytes__(self) -> bytes:
        return self._data

    def _check(self, offset: int, size: int) -> None:
        if offset < 0 or size < 0 or offset + size > len(self._data):
            raise PdbError(
                ErrorCode.INVALID_STREAM,
                f"read of {size} bytes at offset {offset} exceeds stream of "
                f"{len(self._data)} bytes",
            )

    def read_u16(self, offset: int) -> int:
        """Read a little-endian unsigned 16-bit value."""
        self._check(offset, 2)
        return struct.unpack_from("<H", self._data, offset)[0]

    def read_u32(self, offset: int) -> int:
        """Read a little-endian unsigned 32-bit value."""
        self._check(offset, 4)
        return struct.unpack_from("<I", self._data, offset)[0]

    def read_bytes(self, offset: int, size: int) -> bytes:
        """Return ``size`` bytes starting at ``offset``."""
        self._check(offset, size)
        return self._data[offset : offset + size]

    def read_cstring(self, offset: int) -> bytes:
        """Return the NUL-terminated string at ``offset``, without the terminator."""
        self._check(offset, 0)
        end = self._data.find(b"\0", offset)
        if end < 0:
            raise PdbError(
                ErrorCode.INVALID_STREAM,
                f"string at offset {offset} has no terminator",
            )
        return self._data[offset:end]

    def substream(self, offset: int, size: int) -> MSFStream:
        """Return a new stream over ``size`` bytes starting at ``offset``."""
        return MSFStream(self.read_bytes(offset, size))


class RawFile:
    """An MSF file: the superblock and the directory of its streams."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        superblock = SuperBlock.from_bytes(self._data)
        if not superblock.has_valid_magic():
            raise PdbError(ErrorCode.INVALID_SUPER_BLOCK, "file magic does not match")
        self._superblock = superblock
        block_size = superblock.block_size

        # the superblock lists the blocks that hold the indices of the directory blocks
        directory_block_count = size_to_block_count(superblock.directory_size, block_size)
        index_data = coalesce_blocks(
            self._data,
            block_size,
            superblock.directory_block_indices,
            directory_block_count * 4,
        )
        directory_indices = struct.unpack(f"<{directory_block_count}I", index_data)
        directory = MSFStream(
            coalesce_blocks(
                self._data, block_size, directory_indices, superblock.directory_size
            )
        )

        stream_count = directory.read_u32(0)
        sizes_data = directory.read_bytes(4, 4 * stream_count)
        raw_sizes = struct.unpack(f"<{stream_count}I", sizes_data)
        self._stream_sizes = tuple(
            0 if size == _NIL_STREAM_SIZE else size for size in raw_sizes
        )

        offset = 4 + 4 * stream_count
        blocks = []
        for size in self._stream_sizes:
            count = size_to_block_count(size, block_size)
            blocks.append(
                struct.unpack(f"<{count}I", directory.read_bytes(offset, 4 * count))
            )
            offset += 4 * count
        self._stream_blocks: tuple[tuple[int, ...], ...] = tuple(blocks)

    @classmethod
    def open(cls, path: str | os.PathLike) -> RawFile:
        """Read a whole file from disk and parse it."""
        with open(path, "rb") as handle:
            return cls(handle.read())

    @property
    def superblock(self) -> SuperBlock:
        return self._superblock

    @property
    def block_size(self) -> int:
        return self._superblock.block_size

    @property
    def stream_count(self) -> int:
        return len(self._stream_sizes)

    @property
    def stream_sizes(self) -> tuple[int, ...]:
        return self._stream_sizes

    def _check_index(self, stream_index: int) -> None:
        if not 0 <= stream_index < len(self._stream_sizes):
            raise PdbError(
                ErrorCode.INVALID_STREAM_INDEX,
                f"stream index {stream_index} out of range [0, {len(self._stream_sizes)})",
            )

    def stream_size(self, stream_index: int) -> int:
        """Return the size in bytes of the given stream."""
        self._check_index(stream_index)
        return self._stream_sizes[stream_index]

    def stream_blocks(self, stream_index: int) -> tuple[int, ...]:
        """Return the indices of the blocks that hold the given stream."""
        self._check_index(stream_index)
        return self._stream_blocks[stream_index]

    def create_stream(self, stream_index: int, stream_size: int | None = None) -> MSFStream:
        """Return the given stream, optionally only its first ``stream_size`` bytes."""
        full_size = self.stream_size(stream_index)
        if stream_size is None:
            stream_size = full_size
        elif not 0 <= stream_size <= full_size:
            raise PdbError(
                ErrorCode.INVALID_STREAM,
                f"requested {stream_size} bytes of stream {stream_index}, "
                f"which holds {full_size}",
            )
        return MSFStream(
            coalesce_blocks(
                self._data, self.block_size, self._stream_blocks[stream_index], stream_size
            )
        )

    def iter_streams(self) -> Iterable[MSFStream]:
        """Yield every stream in directory order."""
        for index in range(len(self._stream_sizes)):
            yield self.create_stream(index)