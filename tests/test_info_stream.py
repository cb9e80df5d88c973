import struct

import pytest

from msfpdb.info_stream import InfoStream
from msfpdb.raw_file import RawFile
from msfpdb.types import ErrorCode, FeatureCode, GUID, Header, PdbError, SuperBlock

BLOCK_SIZE = 512
GUID_BYTES = bytes(range(16))


def build_msf(streams, block_size=BLOCK_SIZE):
    blocks = [b"", b"", b""]  # superblock and free block maps
    stream_blocks = []
    for data in streams:
        indices = []
        for start in range(0, len(data), block_size):
            indices.append(len(blocks))
            blocks.append(data[start : start + block_size])
        stream_blocks.append(indices)
    directory = struct.pack("<I", len(streams))
    directory += b"".join(struct.pack("<I", len(data)) for data in streams)
    directory += b"".join(struct.pack(f"<{len(ix)}I", *ix) for ix in stream_blocks)
    directory_indices = []
    for start in range(0, len(directory), block_size):
        directory_indices.append(len(blocks))
        blocks.append(directory[start : start + block_size])
    index_block = len(blocks)
    blocks.append(struct.pack(f"<{len(directory_indices)}I", *directory_indices))
    blocks[0] = SuperBlock.MAGIC + b"\0\0" + struct.pack(
        "<IIIIII", block_size, 1, len(blocks), len(directory), 0, index_block
    )
    return b"".join(block.ljust(block_size, b"\0") for block in blocks)


def build_info_stream(named, features=(), version=Header.Version.VC70, signature=0x1234, age=3):
    data = struct.pack("<III", version, signature, age) + GUID_BYTES
    table = b""
    entries = b""
    for name, index in named.items():
        entries += struct.pack("<II", len(table), index)
        table += name.encode() + b"\0"
    data += struct.pack("<I", len(table)) + table
    data += struct.pack("<II", len(named), max(1, len(named)) * 2)
    data += struct.pack("<II", 1, (1 << len(named)) - 1)
    data += struct.pack("<I", 0)
    data += entries
    data += b"".join(struct.pack("<I", code) for code in features)
    return data


def build_names_stream(names):
    table = b"\0" + b"".join(name.encode() + b"\0" for name in names)
    return struct.pack("<III", 0xEFFEEFFE, 1, len(table)) + table


def make_file(named, features=(), extra=b""):
    info = build_info_stream(named, features) + extra
    names = build_names_stream(["main.cpp", "util.h"])
    return RawFile(build_msf([b"", info, names]))


def test_header_is_parsed():
    info = InfoStream(make_file({"/names": 2}))
    assert info.header.version == Header.Version.VC70
    assert info.header.signature == 0x1234
    assert info.header.age == 3
    assert info.header.guid == GUID.from_bytes(GUID_BYTES)


def test_names_stream_found_and_opened():
    file = make_file({"/LinkInfo": 5, "/names": 2})
    info = InfoStream(file)
    assert info.has_names_stream()
    assert info.names_stream_index == 2
    names = info.create_names_stream(file)
    assert names.get_filename(1) == "main.cpp"
    assert names.get_filename(len("main.cpp") + 2) == "util.h"


def test_named_streams_mapping():
    info = InfoStream(make_file({"/LinkInfo": 5, "/names": 2}))
    assert dict(info.named_streams) == {"/LinkInfo": 5, "/names": 2}


def test_missing_names_stream():
    file = make_file({"/LinkInfo": 5})
    info = InfoStream(file)
    assert not info.has_names_stream()
    with pytest.raises(PdbError) as excinfo:
        info.create_names_stream(file)
    assert excinfo.value.code is ErrorCode.INVALID_STREAM_INDEX


def test_fast_link_detected():
    info = InfoStream(
        make_file({"/names": 2}, features=(FeatureCode.VC140, FeatureCode.MINIMAL_DEBUG_INFO))
    )
    assert info.uses_debug_fast_link
    assert info.feature_codes == (FeatureCode.VC140, FeatureCode.MINIMAL_DEBUG_INFO)


def test_no_fast_link_without_feature():
    info = InfoStream(make_file({"/names": 2}, features=(FeatureCode.VC140,)))
    assert not info.uses_debug_fast_link
    assert info.feature_codes == (FeatureCode.VC140,)


def test_trailing_partial_feature_code_is_ignored():
    info = InfoStream(make_file({"/names": 2}, features=(FeatureCode.VC110,), extra=b"\x01\x02"))
    assert info.feature_codes == (FeatureCode.VC110,)


def test_truncated_info_stream_raises():
    truncated = build_info_stream({"/names": 2})[: Header.SIZE + 2]
    file = RawFile(build_msf([b"", truncated]))
    with pytest.raises(PdbError) as excinfo:
        InfoStream(file)
    assert excinfo.value.code is ErrorCode.INVALID_STREAM