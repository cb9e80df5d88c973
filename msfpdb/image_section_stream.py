"""The stream of PE section headers stored in a PDB."""

from __future__ import annotations

from typing import Iterator

from .raw_file import RawFile
from .types import ImageSectionHeader

__all__ = ["ImageSectionStream"]


class ImageSectionStream:
    """Section headers of the image, used to turn section offsets into RVAs."""

    def __init__(self, file: RawFile, stream_index: int) -> None:
        data = bytes(file.create_stream(stream_index))
        count = len(data) // ImageSectionHeader.SIZE
        self._sections = tuple(
            ImageSectionHeader.from_bytes(data, i * ImageSectionHeader.SIZE)
            for i in range(count)
        )

    @property
    def sections(self) -> tuple[ImageSectionHeader, ...]:
        return self._sections

    def __len__(self) -> int:
        return len(self._sections)

    def __iter__(self) -> Iterator[ImageSectionHeader]:
        return iter(self._sections)

    def convert_section_offset_to_rva(
        self, one_based_section_index: int, offset_in_section: int
    ) -> int:
        """Convert a one-based section index and offset into an RVA.

        Returns 0 for index 0 and for sections that are not part of the image,
        such as those of linker-generated symbols.
        """
        if one_based_section_index == 0 or one_based_section_index > len(self._sections):
            return 0
        section = self._sections[one_based_section_index - 1]
        return (section.virtual_address + offset_in_section) & 0xFFFFFFFF