"""
Section Header Table Decoder
============================

Decodes the ``e_shnum`` entries of the section header table located at
``e_shoff``.  Entries are 40 bytes (ELF32) or 64 bytes (ELF64).

``sh_name`` stays a raw offset into the section-name string table;
``sh_link`` and ``sh_info`` are 32-bit in both layouts.
"""

from __future__ import annotations

from elfscope.core.errors import DecodeStage
from elfscope.parsers.constants import SectionFlags, SectionType
from elfscope.parsers.cursor import ByteCursor
from elfscope.parsers.layouts import SECTION_HEADER_LAYOUTS
from elfscope.parsers.structures import FileHeader, Identification, SectionHeader
from elfscope.parsers.table import TableDecoder


class SectionHeaderTableDecoder(TableDecoder[SectionHeader]):
    """Decoder for ``ElfN_Shdr`` arrays."""

    stage = DecodeStage.SECTION_HEADERS
    layouts = SECTION_HEADER_LAYOUTS
    entry_name = "shdr"

    def build(self, record: dict[str, int]) -> SectionHeader:
        return SectionHeader(
            name=record["name"],
            type=SectionType(record["type"]),
            flags=SectionFlags(record["flags"]),
            addr=record["addr"],
            offset=record["offset"],
            size=record["size"],
            link=record["link"],
            info=record["info"],
            addralign=record["addralign"],
            entsize=record["entsize"],
        )


def parse_section_headers(
    data: bytes | bytearray | memoryview,
    ident: Identification,
    header: FileHeader,
) -> tuple[SectionHeader, ...]:
    """Decode the section header table described by *header*."""
    decoder = SectionHeaderTableDecoder(ident)
    return decoder.decode(
        ByteCursor(data, stage=DecodeStage.SECTION_HEADERS),
        header.sh_offset,
        header.shnum,
        header.shent_size,
    )
