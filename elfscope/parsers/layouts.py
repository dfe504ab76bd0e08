"""
ELF On-Disk Layouts
===================

Fixed byte layouts of the file header, program header and section
header records for both address widths, expressed as :mod:`struct`
format tables.  Each :class:`Layout` knows its field names, their
relative offsets and sizes, and can unpack or pack a record in either
byte order.

Sizes::

    FileHeader      36 B (ELF32)   48 B (ELF64)   following e_ident
    ProgramHeader   32 B (ELF32)   56 B (ELF64)
    SectionHeader   40 B (ELF32)   64 B (ELF64)

The 64-bit program header moves ``p_flags`` directly after ``p_type``
so the 8-byte fields stay naturally aligned.
"""

from __future__ import annotations

import struct
from typing import Mapping, Sequence

from elfscope.parsers.constants import DataEncoding, ElfClass


class Layout:
    """A named, ordered record of fixed-width unsigned integer fields.

    Args:
        name: Record name used in diagnostics.
        fields: ``(field_name, struct_code)`` pairs in on-disk order.
    """

    def __init__(self, name: str, fields: Sequence[tuple[str, str]]) -> None:
        self.name = name
        self.fields: tuple[str, ...] = tuple(f for f, _ in fields)
        codes = "".join(code for _, code in fields)
        self._structs: dict[DataEncoding, struct.Struct] = {
            enc: struct.Struct(enc.struct_prefix + codes) for enc in DataEncoding
        }
        self.size: int = self._structs[DataEncoding.LSB].size

        self._spans: list[tuple[str, int, int]] = []
        offset = 0
        for field_name, code in fields:
            width = struct.calcsize("<" + code)
            self._spans.append((field_name, offset, width))
            offset += width

    def __repr__(self) -> str:
        return f"Layout({self.name!r}, size={self.size})"

    def unpack(
        self, encoding: DataEncoding, buffer: bytes | bytearray | memoryview, offset: int = 0
    ) -> dict[str, int]:
        """Unpack one record at *offset*.  The caller checks the bounds."""
        values = self._structs[encoding].unpack_from(buffer, offset)
        return dict(zip(self.fields, values))

    def pack(self, encoding: DataEncoding, values: Mapping[str, int]) -> bytes:
        """Pack *values* into the record's byte image.

        Raises:
            ValueError: If a field is missing or does not fit its width.
        """
        try:
            ordered = [int(values[f]) for f in self.fields]
        except KeyError as exc:
            raise ValueError(f"{self.name}: missing field {exc.args[0]}") from None
        try:
            return self._structs[encoding].pack(*ordered)
        except struct.error as exc:
            raise ValueError(f"{self.name}: {exc}") from None

    def span_at(self, available: int) -> tuple[str, int, int]:
        """Return ``(field, relative_offset, width)`` of the first field
        that does not fit in *available* bytes."""
        for field_name, rel, width in self._spans:
            if rel + width > available:
                return field_name, rel, width
        return self._spans[-1]


FILE_HEADER_32 = Layout(
    "Elf32_Ehdr",
    [
        ("type", "H"), ("machine", "H"), ("version", "I"),
        ("entry_point", "I"), ("ph_offset", "I"), ("sh_offset", "I"),
        ("flags", "I"), ("eh_size", "H"), ("phent_size", "H"),
        ("phnum", "H"), ("shent_size", "H"), ("shnum", "H"),
        ("shstrndx", "H"),
    ],
)

FILE_HEADER_64 = Layout(
    "Elf64_Ehdr",
    [
        ("type", "H"), ("machine", "H"), ("version", "I"),
        ("entry_point", "Q"), ("ph_offset", "Q"), ("sh_offset", "Q"),
        ("flags", "I"), ("eh_size", "H"), ("phent_size", "H"),
        ("phnum", "H"), ("shent_size", "H"), ("shnum", "H"),
        ("shstrndx", "H"),
    ],
)

PROGRAM_HEADER_32 = Layout(
    "Elf32_Phdr",
    [
        ("type", "I"), ("offset", "I"), ("vaddr", "I"), ("paddr", "I"),
        ("filesz", "I"), ("memsz", "I"), ("flags", "I"), ("align", "I"),
    ],
)

PROGRAM_HEADER_64 = Layout(
    "Elf64_Phdr",
    [
        ("type", "I"), ("flags", "I"), ("offset", "Q"), ("vaddr", "Q"),
        ("paddr", "Q"), ("filesz", "Q"), ("memsz", "Q"), ("align", "Q"),
    ],
)

SECTION_HEADER_32 = Layout(
    "Elf32_Shdr",
    [
        ("name", "I"), ("type", "I"), ("flags", "I"), ("addr", "I"),
        ("offset", "I"), ("size", "I"), ("link", "I"), ("info", "I"),
        ("addralign", "I"), ("entsize", "I"),
    ],
)

SECTION_HEADER_64 = Layout(
    "Elf64_Shdr",
    [
        ("name", "I"), ("type", "I"), ("flags", "Q"), ("addr", "Q"),
        ("offset", "Q"), ("size", "Q"), ("link", "I"), ("info", "I"),
        ("addralign", "Q"), ("entsize", "Q"),
    ],
)

FILE_HEADER_LAYOUTS: dict[ElfClass, Layout] = {
    ElfClass.ELF32: FILE_HEADER_32,
    ElfClass.ELF64: FILE_HEADER_64,
}

PROGRAM_HEADER_LAYOUTS: dict[ElfClass, Layout] = {
    ElfClass.ELF32: PROGRAM_HEADER_32,
    ElfClass.ELF64: PROGRAM_HEADER_64,
}

SECTION_HEADER_LAYOUTS: dict[ElfClass, Layout] = {
    ElfClass.ELF32: SECTION_HEADER_32,
    ElfClass.ELF64: SECTION_HEADER_64,
}
