import struct

import pytest

from msfpdb.module_symbol_stream import CodeViewRecord, ModuleSymbolStream
from msfpdb.raw_file import MSFStream, RawFile
from msfpdb.types import PdbError, SuperBlock

BLOCK_SIZE = 512
SIGNATURE = struct.pack("<I", 4)


def build_pdb(streams, block_size=BLOCK_SIZE):
    blocks = {}
    next_block = 2
    stream_blocks = []
    for data in streams:
        indices = []
        for start in range(0, len(data), block_size):
            blocks[next_block] = data[start : start + block_size]
            indices.append(next_block)
            next_block += 1
        stream_blocks.append(indices)
    directory = struct.pack("<I", len(streams))
    directory += b"".join(struct.pack("<I", len(s)) for s in streams)
    directory += b"".join(struct.pack(f"<{len(i)}I", *i) for i in stream_blocks)
    directory_indices = []
    for start in range(0, len(directory), block_size):
        blocks[next_block] = directory[start : start + block_size]
        directory_indices.append(next_block)
        next_block += 1
    blocks[1] = struct.pack(f"<{len(directory_indices)}I", *directory_indices)
    blocks[0] = SuperBlock.MAGIC + b"\0\0" + struct.pack(
        "<IIIIII", block_size, 1, next_block, len(directory), 0, 1
    )
    out = bytearray(next_block * block_size)
    for index, chunk in blocks.items():
        out[index * block_size : index * block_size + len(chunk)] = chunk
    return bytes(out)


def record(kind, payload, padded=True):
    raw = struct.pack("<HH", len(payload) + 2, kind) + payload
    if padded:
        raw += b"\0" * (-len(raw) % 4)
    return raw


REC_A = record(0x1111, b"\x01\x02\x03\x04")
REC_B = record(0x2222, b"xyz")
REC_END = record(0x0006, b"")
STREAM = SIGNATURE + REC_A + REC_B + REC_END


def symbol_stream(data=STREAM, size=None):
    file = RawFile(build_pdb([b"", data]))
    return ModuleSymbolStream(file, 1, len(data) if size is None else size)


def test_iterates_all_records_in_order():
    records = list(symbol_stream())
    assert [r.kind for r in records] == [0x1111, 0x2222, 0x0006]
    assert records[0].data == b"\x01\x02\x03\x04"
    assert records[1].data == b"xyz"
    assert records[2].data == b""


def test_first_record_follows_signature_and_records_are_aligned():
    records = list(symbol_stream())
    assert records[0].offset == len(SIGNATURE)
    assert records[1].offset == len(SIGNATURE) + len(REC_A)
    assert all(r.offset % 4 == 0 for r in records)


def test_record_at_round_trip():
    stream = symbol_stream()
    for rec in stream:
        assert stream.record_at(rec.offset) == rec


def test_find_record():
    stream = symbol_stream()
    found = stream.find_record(0x2222)
    assert found.data == b"xyz"
    assert stream.find_record(0x9999) is None


def test_size_limits_the_records_seen():
    stream = symbol_stream(size=len(SIGNATURE) + len(REC_A))
    assert len(stream) == len(SIGNATURE) + len(REC_A)
    assert [r.kind for r in stream] == [0x1111]
    assert stream.find_record(0x2222) is None


def test_size_beyond_stream_is_an_error():
    file = RawFile(build_pdb([b"", STREAM]))
    with pytest.raises(PdbError):
        ModuleSymbolStream(file, 1, len(STREAM) + 4)


def test_truncated_record_is_an_error():
    data = SIGNATURE + record(0x1111, b"\x01\x02\x03\x04", padded=False)[:-2]
    with pytest.raises(PdbError):
        list(symbol_stream(data))


def test_record_with_too_small_size_is_an_error():
    data = SIGNATURE + struct.pack("<HH", 1, 0x1111)
    with pytest.raises(PdbError):
        list(symbol_stream(data))


def test_codeview_record_read_and_size():
    rec = CodeViewRecord.read(MSFStream(REC_B), 0)
    assert rec.kind == 0x2222
    assert rec.size == len(b"xyz") + 2
    assert rec.record_size == CodeViewRecord.HEADER_SIZE + len(b"xyz")


def test_signature_only_stream_has_no_records():
    assert list(symbol_stream(SIGNATURE)) == []