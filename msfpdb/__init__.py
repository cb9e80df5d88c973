"""Read-only access to MSF/PDB program database files and their CodeView streams."""

__version__ = "0.1.0"

__all__ = [
    "util",
    "types",
    "raw_file",
    "image_section_stream",
    "names_stream",
    "tpi_kinds",
    "info_stream",
    "tpi_records",
    "ipi_types",
    "tpi_stream",
    "source_file_stream",
    "module_symbol_stream",
]