import struct

from msfpdb.image_section_stream import ImageSectionStream
from msfpdb.raw_file import RawFile
from msfpdb.types import SuperBlock


def build_msf(streams, block_size=512):
    blocks = [b"", b"", b""]
    stream_blocks = []
    for stream in streams:
        indices = []
        for off in range(0, len(stream), block_size):
            indices.append(len(blocks))
            blocks.append(stream[off : off + block_size])
        stream_blocks.append(indices)
    directory = struct.pack("<I", len(streams))
    directory += b"".join(struct.pack("<I", len(s)) for s in streams)
    directory += b"".join(struct.pack(f"<{len(i)}I", *i) for i in stream_blocks)
    dir_indices = []
    for off in range(0, len(directory), block_size):
        dir_indices.append(len(blocks))
        blocks.append(directory[off : off + block_size])
    blocks[2] = struct.pack(f"<{len(dir_indices)}I", *dir_indices)
    blocks[0] = (
        SuperBlock.MAGIC
        + b"\0\0"
        + struct.pack("<IIIII", block_size, 1, len(blocks), len(directory), 0)
        + struct.pack("<I", 2)
    )
    return b"".join(b.ljust(block_size, b"\0") for b in blocks)


def section(name, virtual_address, virtual_size=0x200):
    return struct.pack(
        "<8sIIIIIIHHI", name, virtual_size, virtual_address, 0x400, 0x600, 0, 0, 0, 0, 0x60000020
    )


def make_stream(extra=b""):
    data = section(b".text", 0x1000) + section(b".data", 0x3000) + extra
    raw = RawFile(build_msf([b"", data]))
    return ImageSectionStream(raw, 1)


def test_sections_parsed():
    stream = make_stream()
    assert len(stream) == 2
    assert [s.section_name for s in stream] == [".text", ".data"]
    assert stream.sections[1].virtual_address == 0x3000


def test_trailing_partial_header_ignored():
    stream = make_stream(extra=b"\xff" * 10)
    assert len(stream) == 2


def test_convert_offset_to_rva():
    stream = make_stream()
    assert stream.convert_section_offset_to_rva(1, 0x10) == 0x1000 + 0x10
    assert stream.convert_section_offset_to_rva(2, 0) == 0x3000


def test_convert_index_zero_is_zero():
    assert make_stream().convert_section_offset_to_rva(0, 0x10) == 0


def test_convert_index_beyond_sections_is_zero():
    assert make_stream().convert_section_offset_to_rva(3, 0x10) == 0


def test_empty_stream_has_no_sections():
    stream = ImageSectionStream(RawFile(build_msf([b""])), 0)
    assert len(stream) == 0
    assert stream.convert_section_offset_to_rva(1, 5) == 0