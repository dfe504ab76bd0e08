"""
Elfscope Parsers
================

Decoders and encoders for the ELF identification block, file header and
program / section header tables.
"""

from elfscope.parsers.elf_parser import ElfParser, ParseState, parse_elf
from elfscope.parsers.serializer import (
    encode_elf_header,
    encode_file_header,
    encode_identification,
    encode_program_header,
    encode_section_header,
)
from elfscope.parsers.structures import (
    ElfHeader,
    FileHeader,
    Identification,
    ProgramHeader,
    SectionHeader,
)

__all__ = [
    "ElfParser",
    "ParseState",
    "parse_elf",
    "encode_elf_header",
    "encode_file_header",
    "encode_identification",
    "encode_program_header",
    "encode_section_header",
    "ElfHeader",
    "FileHeader",
    "Identification",
    "ProgramHeader",
    "SectionHeader",
]
