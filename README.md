# msfpdb

`msfpdb` reads program database (PDB) files stored in the multi-stream file
(MSF) container format. It works on the raw bytes of a file, joins the
block-scattered streams into contiguous byte strings, and decodes the headers
and CodeView records found inside them. It uses only the standard library.

## Installation

```
pip install msfpdb
```

## Modules

- `msfpdb.raw_file`: `RawFile` parses the superblock and the stream directory
  (`RawFile(data)` or `RawFile.open(path)`). `create_stream(index, size=None)`
  returns an `MSFStream` with `read_u16`, `read_u32`, `read_bytes`,
  `read_cstring` and `substream`. `coalesce_blocks` joins a list of blocks into
  one byte string.
- `msfpdb.types`: `SuperBlock`, the info stream `Header`, `GUID`,
  `ImageSectionHeader`, `PublicStreamHeader`, `HashTableHeader`, `HashRecord`,
  `FeatureCode`, and the `ErrorCode`/`PdbError` pair used to report invalid
  input.
- `msfpdb.util`: block and alignment arithmetic (`size_to_block_count`,
  `round_up_to_multiple`, `find_first_set_bit`, `codeview_record_size`,
  `name_length`, ...).
- `msfpdb.info_stream`: `InfoStream` reads stream 1: its header, the named
  stream map (`named_streams`), the feature codes and `uses_debug_fast_link`.
  `has_names_stream()` and `create_names_stream(file)` give access to `/names`.
- `msfpdb.names_stream`: `NamesStream.get_filename(offset)` resolves file name
  offsets.
- `msfpdb.image_section_stream`: `ImageSectionStream(file, index)` holds the PE
  section headers; `convert_section_offset_to_rva(section, offset)` returns 0
  for section 0 and for sections outside the image.
- `msfpdb.tpi_stream`: `has_valid_tpi_stream(file)` returns an `ErrorCode`,
  `create_tpi_stream(file)` builds a `TPIStream`, whose
  `get_type_record(type_index)` returns a `TypeRecord` or `None`.
- `msfpdb.tpi_kinds`: `TypeRecordKind`, `TypeIndexKind`, `CallingConvention`,
  `MethodProperty`.
- `msfpdb.tpi_records`: `TpiStreamHeader`, `TypeRecord` (with `fields()` to
  decode the fixed part of common leaf kinds) and the bit-field attribute
  classes `TypeProperty`, `MemberAttributes`, `FunctionAttributes`,
  `ModifierAttributes`, `PointerAttributes`.
- `msfpdb.ipi_types`: `IpiStreamHeader`, `IpiRecord`, `IpiTypeRecordKind`,
  `BuildInfoType` and the decoders `parse_string_id`, `parse_substr_list`,
  `parse_build_info`.
- `msfpdb.source_file_stream`: `SourceFileStream(stream)` decodes a source info
  sub-stream given as an `MSFStream`, listing the file names of each module.
- `msfpdb.module_symbol_stream`: `ModuleSymbolStream(file, index, size)`
  iterates the `CodeViewRecord`s of a module's symbol stream and offers
  `record_at(offset)` and `find_record(kind)`.

## Example

```python
from msfpdb.raw_file import RawFile
from msfpdb.info_stream import InfoStream
from msfpdb.tpi_stream import has_valid_tpi_stream, create_tpi_stream
from msfpdb.types import ErrorCode

pdb = RawFile.open("program.pdb")

info = InfoStream(pdb)
print("fastlink:", info.uses_debug_fast_link)

if info.has_names_stream():
    names = info.create_names_stream(pdb)
    print(names.get_filename(0))

if has_valid_tpi_stream(pdb) is ErrorCode.SUCCESS:
    tpi = create_tpi_stream(pdb)
    record = tpi.get_type_record(tpi.first_type_index)
    print(record.kind, record.fields())
```

Malformed input raises `msfpdb.types.PdbError`, which carries the matching
`ErrorCode` in its `code` attribute.

## What it does not do

- It does not parse the DBI stream. There is no reader for module information,
  section contributions, public or global symbols, or line information, so the
  stream index and size that `ModuleSymbolStream` needs, and the bytes that
  `SourceFileStream` decodes, must be located by the caller.
- It has no command-line tool; it is a library only.
- It only reads; it cannot write or modify PDB files.

## Running the tests

```
pip install -e ".[test]"
pytest
```