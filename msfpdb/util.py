"""Small arithmetic helpers for MSF block layout and CodeView records."""

from __future__ import annotations

__all__ = [
    "block_index_to_file_offset",
    "size_to_block_count",
    "is_power_of_two",
    "round_up_to_multiple",
    "find_first_set_bit",
    "codeview_record_size",
    "name_length",
]

# Size of the 16-bit length field that starts every CodeView record.
_RECORD_SIZE_FIELD = 2


def block_index_to_file_offset(block_index: int, block_size: int) -> int:
    """Return the file offset at which the given block starts."""
    if block_index < 0 or block_size < 0:
        raise ValueError("block index and block size must not be negative")
    return block_index * block_size


def size_to_block_count(size_in_bytes: int, block_size: int) -> int:
    """Return how many blocks of ``block_size`` are needed to hold ``size_in_bytes``."""
    if block_size <= 0:
        raise ValueError(f"invalid block size {block_size}")
    if size_in_bytes < 0:
        raise ValueError(f"invalid size {size_in_bytes}")
    return -(-size_in_bytes // block_size)


def is_power_of_two(value: int) -> bool:
    """Return whether ``value`` is a power of two; ``value`` must be positive."""
    if value <= 0:
        raise ValueError(f"invalid value {value}")
    return value & (value - 1) == 0


def round_up_to_multiple(value: int, multiple: int) -> int:
    """Round ``value`` up to the next multiple of ``multiple``, a power of two."""
    if not is_power_of_two(multiple):
        raise ValueError(f"multiple {multiple} must be a power of two")
    return (value + multiple - 1) & ~(multiple - 1)


def find_first_set_bit(value: int) -> int:
    """Return the position of the lowest set bit, counting from the LSB."""
    if value <= 0:
        raise ValueError(f"invalid value {value}")
    return (value & -value).bit_length() - 1


def codeview_record_size(header_size: int) -> int:
    """Return the size of a CodeView record's data, given the size stored in its header.

    The stored size covers the 2-byte kind field but not the size field itself.
    """
    size = header_size - _RECORD_SIZE_FIELD
    if size < 0:
        raise ValueError(f"invalid record size {header_size}")
    return size


def name_length(header_size: int, fixed_size: int, name: bytes) -> int:
    """Return the length of a record's trailing name, ignoring padding NUL bytes.

    ``header_size`` is the size stored in the record header, ``fixed_size`` the
    size of the record's fixed part, and ``name`` the bytes that follow it.
    """
    estimated = header_size - _RECORD_SIZE_FIELD - fixed_size
    if estimated < 0:
        raise ValueError("record is smaller than its fixed part")
    if estimated == 0:
        return 0
    if len(name) < estimated:
        raise ValueError("name data is shorter than the record claims")
    return len(bytes(name[:estimated]).rstrip(b"\0"))