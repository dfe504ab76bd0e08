"""
Program Header Table Decoder
============================

Decodes the ``e_phnum`` entries of the program header table located at
``e_phoff``.  Entries are 32 bytes (ELF32) or 56 bytes (ELF64) and are
returned in on-disk order.
"""

from __future__ import annotations

from elfscope.core.errors import DecodeStage
from elfscope.parsers.constants import ProgramHeaderType, SegmentFlags
from elfscope.parsers.cursor import ByteCursor
from elfscope.parsers.layouts import PROGRAM_HEADER_LAYOUTS
from elfscope.parsers.structures import FileHeader, Identification, ProgramHeader
from elfscope.parsers.table import TableDecoder


class ProgramHeaderTableDecoder(TableDecoder[ProgramHeader]):
    """Decoder for ``ElfN_Phdr`` arrays."""

    stage = DecodeStage.PROGRAM_HEADERS
    layouts = PROGRAM_HEADER_LAYOUTS
    entry_name = "phdr"

    def build(self, record: dict[str, int]) -> ProgramHeader:
        return ProgramHeader(
            type=ProgramHeaderType(record["type"]),
            flags=SegmentFlags(record["flags"]),
            offset=record["offset"],
            vaddr=record["vaddr"],
            paddr=record["paddr"],
            filesz=record["filesz"],
            memsz=record["memsz"],
            align=record["align"],
        )


def parse_program_headers(
    data: bytes | bytearray | memoryview,
    ident: Identification,
    header: FileHeader,
) -> tuple[ProgramHeader, ...]:
    """Decode the program header table described by *header*."""
    decoder = ProgramHeaderTableDecoder(ident)
    return decoder.decode(
        ByteCursor(data, stage=DecodeStage.PROGRAM_HEADERS),
        header.ph_offset,
        header.phnum,
        header.phent_size,
    )
