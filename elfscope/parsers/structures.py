"""
Decoded ELF Structures
======================

Immutable value objects produced by the decoders.  Address-sized fields
are plain ``int``; their width on disk is fixed by
:attr:`Identification.elf_class`.  Table entries are stored in on-disk
order, which for program headers is load-significant.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from elfscope.parsers.constants import (
    AbiVersion,
    DataEncoding,
    ElfClass,
    FileType,
    Machine,
    OsAbi,
    ProgramHeaderType,
    SectionFlags,
    SectionType,
    SegmentFlags,
    Version,
)


@dataclass(frozen=True, slots=True)
class Identification:
    """The 16-byte ``e_ident`` block."""
    elf_class: ElfClass
    data_encoding: DataEncoding
    version: Version = Version.CURRENT
    osabi: OsAbi = OsAbi.SYSV
    abiversion: AbiVersion = AbiVersion.ZERO


@dataclass(frozen=True, slots=True)
class FileHeader:
    """Fixed file header fields following ``e_ident``.

    ``entry_point``, ``ph_offset`` and ``sh_offset`` are 4 bytes wide for
    ELF32 and 8 bytes wide for ELF64; every other field has a fixed width.
    """
    type: FileType
    machine: Machine
    version: Version
    entry_point: int
    ph_offset: int
    sh_offset: int
    flags: int
    eh_size: int
    phent_size: int
    phnum: int
    shent_size: int
    shnum: int
    shstrndx: int


@dataclass(frozen=True, slots=True)
class ProgramHeader:
    """One program header table entry (a segment)."""
    type: ProgramHeaderType
    flags: SegmentFlags
    offset: int
    vaddr: int
    paddr: int
    filesz: int
    memsz: int
    align: int


@dataclass(frozen=True, slots=True)
class SectionHeader:
    """One section header table entry.

    ``name`` is the raw offset into the section-name string table.
    """
    name: int
    type: SectionType
    flags: SectionFlags
    addr: int
    offset: int
    size: int
    link: int
    info: int
    addralign: int
    entsize: int


@dataclass(frozen=True, slots=True)
class ElfHeader:
    """Identification, file header and both header tables of one file."""
    identification: Identification
    file_header: FileHeader
    program_headers: tuple[ProgramHeader, ...] = field(default_factory=tuple)
    section_headers: tuple[SectionHeader, ...] = field(default_factory=tuple)

    @property
    def elf_class(self) -> ElfClass:
        return self.identification.elf_class

    @property
    def data_encoding(self) -> DataEncoding:
        return self.identification.data_encoding
