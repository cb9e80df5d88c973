"""Fixed-layout structures of PDB/MSF files and the library's error type."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field
from typing import ClassVar

from .util import size_to_block_count

__all__ = [
    "ErrorCode",
    "PdbError",
    "GUID",
    "ImageSectionHeader",
    "SuperBlock",
    "Header",
    "FeatureCode",
    "PublicStreamHeader",
    "HashTableHeader",
    "HashRecord",
]


class ErrorCode(enum.IntEnum):
    """Result of validating a PDB file or one of its streams."""

    SUCCESS = 0
    INVALID_SUPER_BLOCK = 1
    INVALID_FREE_BLOCK_MAP = 2
    INVALID_STREAM = 3
    INVALID_SIGNATURE = 4
    INVALID_STREAM_INDEX = 5
    UNKNOWN_VERSION = 6


class PdbError(Exception):
    """Raised when PDB data is malformed; ``code`` says what is wrong."""

    def __init__(self, code: ErrorCode, message: str | None = None) -> None:
        self.code = ErrorCode(code)
        super().__init__(message or self.code.name.replace("_", " ").lower())


def _unpack(fmt: struct.Struct, data: bytes, offset: int, what: str) -> tuple:
    if offset < 0 or offset + fmt.size > len(data):
        raise PdbError(
            ErrorCode.INVALID_STREAM,
            f"{what} at offset {offset} needs {fmt.size} bytes, data has {len(data)}",
        )
    return fmt.unpack_from(data, offset)


@dataclass(frozen=True)
class GUID:
    """A 16-byte GUID in its Windows memory layout."""

    data1: int
    data2: int
    data3: int
    data4: bytes

    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<IHH8s")
    SIZE: ClassVar[int] = 16

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> GUID:
        return cls(*_unpack(cls._FORMAT, data, offset, "GUID"))

    def __str__(self) -> str:
        tail = self.data4.hex().upper()
        return f"{self.data1:08X}-{self.data2:04X}-{self.data3:04X}-{tail[:4]}-{tail[4:]}"


@dataclass(frozen=True)
class ImageSectionHeader:
    """A PE section header as stored in the section header stream."""

    name: bytes
    virtual_size: int
    virtual_address: int
    size_of_raw_data: int
    pointer_to_raw_data: int
    pointer_to_relocations: int
    pointer_to_linenumbers: int
    number_of_relocations: int
    number_of_linenumbers: int
    characteristics: int

    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<8sIIIIIIHHI")
    SIZE: ClassVar[int] = 40

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> ImageSectionHeader:
        return cls(*_unpack(cls._FORMAT, data, offset, "section header"))

    @property
    def physical_address(self) -> int:
        """The same field as ``virtual_size``, under its other name."""
        return self.virtual_size

    @property
    def section_name(self) -> str:
        return self.name.rstrip(b"\0").decode("latin-1")


@dataclass(frozen=True)
class SuperBlock:
    """The MSF superblock at the start of every PDB file."""

    MAGIC: ClassVar[bytes] = b"Microsoft C/C++ MSF 7.00\r\n\x1a\x44\x53\0"

    file_magic: bytes
    padding: bytes
    block_size: int
    free_block_map_index: int
    block_count: int
    directory_size: int
    unknown: int
    directory_block_indices: tuple[int, ...] = field(default=())

    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<30s2sIIIII")
    SIZE: ClassVar[int] = 52

    @classmethod
    def from_bytes(cls, data: bytes) -> SuperBlock:
        """Parse the superblock, including the indices of the directory index blocks."""
        fields = _unpack(cls._FORMAT, data, 0, "superblock")
        block_size, directory_size = fields[2], fields[5]
        if block_size == 0:
            raise PdbError(ErrorCode.INVALID_SUPER_BLOCK, "block size is zero")
        directory_blocks = size_to_block_count(directory_size, block_size)
        index_blocks = size_to_block_count(directory_blocks * 4, block_size)
        indices = _unpack(
            struct.Struct(f"<{index_blocks}I"), data, cls.SIZE, "directory block indices"
        )
        return cls(*fields, directory_block_indices=tuple(indices))

    def has_valid_magic(self) -> bool:
        return self.file_magic == self.MAGIC


@dataclass(frozen=True)
class Header:
    """Header of the PDB info stream."""

    class Version(enum.IntEnum):
        VC2 = 19941610
        VC4 = 19950623
        VC41 = 19950814
        VC50 = 19960307
        VC98 = 19970604
        VC70_DEP = 19990604
        VC70 = 20000404
        VC80 = 20030901
        VC110 = 20091201
        VC140 = 20140508

    version: int
    signature: int
    age: int
    guid: GUID

    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<III")
    SIZE: ClassVar[int] = 28

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> Header:
        version, signature, age = _unpack(cls._FORMAT, data, offset, "info header")
        guid = GUID.from_bytes(data, offset + cls._FORMAT.size)
        return cls(version, signature, age, guid)


class FeatureCode(enum.IntEnum):
    """Feature codes that may follow the named stream map in the info stream."""

    VC110 = 20091201
    VC140 = 20140508
    NO_TYPE_MERGE = 0x4D544F4E
    MINIMAL_DEBUG_INFO = 0x494E494D


@dataclass(frozen=True)
class PublicStreamHeader:
    """Header of the public symbol stream."""

    sym_hash: int
    addr_map: int
    thunk_count: int
    size_of_thunk: int
    isect_thunk_table: int
    padding: int
    offset_thunk_table: int
    section_count: int
    padding2: int

    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<IIIIHHIHH")
    SIZE: ClassVar[int] = 28

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> PublicStreamHeader:
        return cls(*_unpack(cls._FORMAT, data, offset, "public stream header"))


@dataclass(frozen=True)
class HashTableHeader:
    """Header of the hash tables used by the public and global symbol streams."""

    SIGNATURE: ClassVar[int] = 0xFFFFFFFF
    VERSION: ClassVar[int] = 0xEFFE0000 + 19990810

    signature: int
    version: int
    size: int
    bucket_count: int

    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<IIII")
    SIZE: ClassVar[int] = 16

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> HashTableHeader:
        return cls(*_unpack(cls._FORMAT, data, offset, "hash table header"))

    def is_valid(self) -> bool:
        return self.signature == self.SIGNATURE and self.version == self.VERSION


@dataclass(frozen=True)
class HashRecord:
    """A hash record; ``offset`` is one-based into the symbol record stream."""

    offset: int
    cref: int

    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<II")
    SIZE: ClassVar[int] = 8

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> HashRecord:
        return cls(*_unpack(cls._FORMAT, data, offset, "hash record"))