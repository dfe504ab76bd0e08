"""Shared fixtures: synthetic ELF header images in every class / byte order."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from shared.config import ElfscopeConfig
from shared.logger import ToolLogger

from elfscope.parsers.constants import (
    DataEncoding,
    ElfClass,
    FileType,
    Machine,
    OsAbi,
    ProgramHeaderType,
    SectionFlags,
    SectionType,
    SegmentFlags,
)
from elfscope.parsers.layouts import (
    FILE_HEADER_LAYOUTS,
    PROGRAM_HEADER_LAYOUTS,
    SECTION_HEADER_LAYOUTS,
)
from elfscope.parsers.serializer import encode_elf_header
from elfscope.parsers.structures import (
    ElfHeader,
    FileHeader,
    Identification,
    ProgramHeader,
    SectionHeader,
)

ALL_FORMATS = [
    (ElfClass.ELF32, DataEncoding.LSB),
    (ElfClass.ELF32, DataEncoding.MSB),
    (ElfClass.ELF64, DataEncoding.LSB),
    (ElfClass.ELF64, DataEncoding.MSB),
]
FORMAT_IDS = ["elf32-le", "elf32-be", "elf64-le", "elf64-be"]

# 32-bit little-endian identification + file header, type NONE / machine 386
SCENARIO_BYTES = bytes.fromhex(
    "7f454c46010101" "00" + "00" * 8
    + "00000300" "01000000" "05000000" "0a000000" "0b000000" "02000000"
    "0000" "0100" "0100" "0100" "0100" "0100"
)


def sample_program_headers() -> tuple[ProgramHeader, ...]:
    return (
        ProgramHeader(
            type=ProgramHeaderType.PHDR, flags=SegmentFlags.R,
            offset=0x34, vaddr=0x8048034, paddr=0x8048034,
            filesz=0x60, memsz=0x60, align=4,
        ),
        ProgramHeader(
            type=ProgramHeaderType.LOAD, flags=SegmentFlags.R | SegmentFlags.X,
            offset=0, vaddr=0x8048000, paddr=0x8048000,
            filesz=0x1000, memsz=0x1000, align=0x1000,
        ),
        ProgramHeader(
            type=ProgramHeaderType.GNU_STACK, flags=SegmentFlags.R | SegmentFlags.W,
            offset=0, vaddr=0, paddr=0, filesz=0, memsz=0, align=16,
        ),
    )


def sample_section_headers() -> tuple[SectionHeader, ...]:
    return (
        SectionHeader(
            name=0, type=SectionType.NULL, flags=SectionFlags(0),
            addr=0, offset=0, size=0, link=0, info=0, addralign=0, entsize=0,
        ),
        SectionHeader(
            name=0x1B, type=SectionType.PROGBITS,
            flags=SectionFlags.ALLOC | SectionFlags.EXECINSTR,
            addr=0x8049000, offset=0x1000, size=0x200,
            link=0, info=0, addralign=16, entsize=0,
        ),
        SectionHeader(
            name=0x11, type=SectionType.STRTAB, flags=SectionFlags(0),
            addr=0, offset=0x1200, size=0x40,
            link=0, info=0, addralign=1, entsize=0,
        ),
    )


def build_header(
    elf_class: ElfClass = ElfClass.ELF64,
    encoding: DataEncoding = DataEncoding.LSB,
    *,
    program_headers: tuple[ProgramHeader, ...] = (),
    section_headers: tuple[SectionHeader, ...] = (),
    file_type: FileType = FileType.EXEC,
    machine: Machine = Machine.X86_64,
    entry_point: int = 0x8048080,
    phent_size: int | None = None,
    shent_size: int | None = None,
    ph_offset: int | None = None,
    sh_offset: int | None = None,
) -> ElfHeader:
    """Assemble an :class:`ElfHeader` with tables packed after the file header."""
    ident = Identification(elf_class, encoding, osabi=OsAbi.LINUX)
    eh_size = 16 + FILE_HEADER_LAYOUTS[elf_class].size
    phent = phent_size if phent_size is not None else PROGRAM_HEADER_LAYOUTS[elf_class].size
    shent = shent_size if shent_size is not None else SECTION_HEADER_LAYOUTS[elf_class].size

    if ph_offset is None:
        ph_offset = eh_size if program_headers else 0
    if sh_offset is None:
        sh_offset = (
            max(eh_size, ph_offset + len(program_headers) * phent)
            if section_headers else 0
        )

    file_header = FileHeader(
        type=file_type,
        machine=machine,
        version=ident.version,
        entry_point=entry_point,
        ph_offset=ph_offset,
        sh_offset=sh_offset,
        flags=0,
        eh_size=eh_size,
        phent_size=phent,
        phnum=len(program_headers),
        shent_size=shent,
        shnum=len(section_headers),
        shstrndx=2 if section_headers else 0,
    )
    return ElfHeader(ident, file_header, program_headers, section_headers)


@pytest.fixture
def scenario_bytes() -> bytes:
    return SCENARIO_BYTES


@pytest.fixture(params=ALL_FORMATS, ids=FORMAT_IDS)
def elf_format(request: pytest.FixtureRequest) -> tuple[ElfClass, DataEncoding]:
    """Each (class, data encoding) pair in turn."""
    return request.param


@pytest.fixture
def header_factory() -> Callable[..., ElfHeader]:
    return build_header


@pytest.fixture
def full_header() -> ElfHeader:
    """ELF64 little-endian executable with three segments and three sections."""
    return build_header(
        program_headers=sample_program_headers(),
        section_headers=sample_section_headers(),
    )


@pytest.fixture
def full_image(full_header: ElfHeader) -> bytes:
    return encode_elf_header(full_header)


@pytest.fixture
def elf_file(tmp_path: Path, full_image: bytes) -> Path:
    path = tmp_path / "sample.elf"
    path.write_bytes(full_image)
    return path


@pytest.fixture
def quiet_logger() -> ToolLogger:
    return ToolLogger("test", log_level="DEBUG", console_output=False)


@pytest.fixture
def config() -> ElfscopeConfig:
    return ElfscopeConfig()


@pytest.fixture
def quiet_config_file(tmp_path: Path) -> Path:
    """Configuration that keeps the log console silent below ERROR."""
    path = tmp_path / "quiet.toml"
    path.write_text('[global]\nlog_level = "ERROR"\n', encoding="utf-8")
    return path
