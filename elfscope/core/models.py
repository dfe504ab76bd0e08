"""
Elfscope Data Models
====================

Pydantic models describing decoded ELF metadata for presentation and
machine-readable reports.  They are built from the immutable decoder
structures in :mod:`elfscope.parsers.structures` and carry both the raw
numeric codes and their display labels, so a report never loses the
original value of an unknown code.

References:
    - TIS Committee. (1995). Executable and Linkable Format (ELF) Specification.
    - Pydantic v2 documentation. https://docs.pydantic.dev/latest/
"""

from __future__ import annotations

import datetime as _dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from elfscope.core.errors import ElfDecodeError, TruncatedInputError
from elfscope.parsers.structures import (
    ElfHeader,
    FileHeader,
    Identification,
    ProgramHeader,
    SectionHeader,
)


# ---------------------------------------------------------------------------
# Identification / file header
# ---------------------------------------------------------------------------

class IdentificationInfo(BaseModel):
    """The ``e_ident`` block.

    Attributes:
        elf_class: ``"ELF32"`` or ``"ELF64"``.
        bits: Address width in bits.
        endian: ``"little"`` or ``"big"``.
        data: readelf description of the data encoding.
        version: EI_VERSION.
        osabi: Raw EI_OSABI byte.
        osabi_label: Display name of the OS/ABI.
        abiversion: Raw EI_ABIVERSION byte.
    """
    model_config = ConfigDict(frozen=True)

    elf_class: str
    bits: int
    endian: str
    data: str
    version: int
    osabi: int
    osabi_label: str
    abiversion: int

    @classmethod
    def from_ident(cls, ident: Identification) -> IdentificationInfo:
        return cls(
            elf_class=ident.elf_class.label,
            bits=ident.elf_class.bits,
            endian="little" if ident.data_encoding.struct_prefix == "<" else "big",
            data=ident.data_encoding.label,
            version=int(ident.version),
            osabi=int(ident.osabi),
            osabi_label=ident.osabi.label,
            abiversion=int(ident.abiversion),
        )


class FileHeaderInfo(BaseModel):
    """The fixed file header, with labels for ``e_type`` and ``e_machine``."""
    model_config = ConfigDict(frozen=True)

    type: int
    type_label: str
    machine: int
    machine_label: str
    version: int
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

    @classmethod
    def from_header(cls, header: FileHeader) -> FileHeaderInfo:
        return cls(
            type=int(header.type),
            type_label=header.type.label,
            machine=int(header.machine),
            machine_label=header.machine.label,
            version=int(header.version),
            entry_point=header.entry_point,
            ph_offset=header.ph_offset,
            sh_offset=header.sh_offset,
            flags=header.flags,
            eh_size=header.eh_size,
            phent_size=header.phent_size,
            phnum=header.phnum,
            shent_size=header.shent_size,
            shnum=header.shnum,
            shstrndx=header.shstrndx,
        )


# ---------------------------------------------------------------------------
# Table entries
# ---------------------------------------------------------------------------

class ProgramHeaderInfo(BaseModel):
    """One segment from the program header table."""
    model_config = ConfigDict(frozen=True)

    index: int
    type: int
    type_label: str
    flags: int
    flags_label: str
    offset: int
    vaddr: int
    paddr: int
    filesz: int
    memsz: int
    align: int

    @classmethod
    def from_entry(cls, index: int, entry: ProgramHeader) -> ProgramHeaderInfo:
        return cls(
            index=index,
            type=int(entry.type),
            type_label=entry.type.label,
            flags=int(entry.flags),
            flags_label=entry.flags.label,
            offset=entry.offset,
            vaddr=entry.vaddr,
            paddr=entry.paddr,
            filesz=entry.filesz,
            memsz=entry.memsz,
            align=entry.align,
        )


class SectionHeaderInfo(BaseModel):
    """One section from the section header table.

    ``name_offset`` is the unresolved ``sh_name`` string-table offset.
    """
    model_config = ConfigDict(frozen=True)

    index: int
    name_offset: int
    type: int
    type_label: str
    flags: int
    flags_label: str
    addr: int
    offset: int
    size: int
    link: int
    info: int
    addralign: int
    entsize: int

    @classmethod
    def from_entry(cls, index: int, entry: SectionHeader) -> SectionHeaderInfo:
        return cls(
            index=index,
            name_offset=entry.name,
            type=int(entry.type),
            type_label=entry.type.label,
            flags=int(entry.flags),
            flags_label=entry.flags.label,
            addr=entry.addr,
            offset=entry.offset,
            size=entry.size,
            link=entry.link,
            info=entry.info,
            addralign=entry.addralign,
            entsize=entry.entsize,
        )


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------

class ElfReport(BaseModel):
    """Everything decoded from one ELF file."""
    path: str = ""
    size: int = 0
    identification: IdentificationInfo
    file_header: FileHeaderInfo
    program_headers: list[ProgramHeaderInfo] = Field(default_factory=list)
    section_headers: list[SectionHeaderInfo] = Field(default_factory=list)

    @classmethod
    def from_header(cls, header: ElfHeader, path: str = "", size: int = 0) -> ElfReport:
        return cls(
            path=path,
            size=size,
            identification=IdentificationInfo.from_ident(header.identification),
            file_header=FileHeaderInfo.from_header(header.file_header),
            program_headers=[
                ProgramHeaderInfo.from_entry(i, ph)
                for i, ph in enumerate(header.program_headers)
            ],
            section_headers=[
                SectionHeaderInfo.from_entry(i, sh)
                for i, sh in enumerate(header.section_headers)
            ],
        )


class InspectionFailure(BaseModel):
    """Why a file could not be decoded.

    Attributes:
        kind: Exception class name (``"TruncatedInputError"``, ...), or
              ``"FileError"`` for problems reading the file itself.
        stage: Pipeline stage that failed, empty for file errors.
        message: Human-readable description.
        field: Truncated field name, when known.
        offset: Buffer offset of the truncated field, when known.
    """
    kind: str
    stage: str = ""
    message: str
    field: Optional[str] = None
    offset: Optional[int] = None

    @classmethod
    def from_error(cls, exc: ElfDecodeError) -> InspectionFailure:
        failure = cls(
            kind=type(exc).__name__,
            stage=exc.stage.value,
            message=exc.reason,
        )
        if isinstance(exc, TruncatedInputError):
            failure = failure.model_copy(update={"field": exc.field, "offset": exc.offset})
        return failure


class InspectionResult(BaseModel):
    """Outcome of inspecting one file: a report or a failure."""
    path: str
    started_at: _dt.datetime = Field(
        default_factory=lambda: _dt.datetime.now(_dt.timezone.utc)
    )
    finished_at: Optional[_dt.datetime] = None
    report: Optional[ElfReport] = None
    failure: Optional[InspectionFailure] = None

    @property
    def ok(self) -> bool:
        return self.report is not None and self.failure is None

    @property
    def duration_seconds(self) -> float:
        if self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()
