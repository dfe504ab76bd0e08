"""Tests for the file header decoder and its serializer."""

from __future__ import annotations

import struct

import pytest

from elfscope.core.errors import (
    DecodeStage,
    TruncatedInputError,
    UnsupportedFileTypeError,
    UnsupportedVersionError,
)
from elfscope.parsers.constants import (
    DataEncoding,
    ElfClass,
    FileType,
    Machine,
    Version,
)
from elfscope.parsers.file_header import parse_file_header
from elfscope.parsers.ident import parse_identification
from elfscope.parsers.serializer import encode_file_header
from elfscope.parsers.structures import FileHeader, Identification


def _header(**overrides) -> FileHeader:
    values = dict(
        type=FileType.EXEC,
        machine=Machine.X86_64,
        version=Version.CURRENT,
        entry_point=0x400000,
        ph_offset=64,
        sh_offset=4096,
        flags=0,
        eh_size=64,
        phent_size=56,
        phnum=2,
        shent_size=64,
        shnum=5,
        shstrndx=4,
    )
    values.update(overrides)
    return FileHeader(**values)


def test_scenario_decodes(scenario_bytes: bytes) -> None:
    ident = parse_identification(scenario_bytes)
    assert parse_file_header(scenario_bytes, ident) == FileHeader(
        type=FileType.NONE,
        machine=Machine.X386,
        version=Version.CURRENT,
        entry_point=5,
        ph_offset=10,
        sh_offset=11,
        flags=2,
        eh_size=0,
        phent_size=1,
        phnum=1,
        shent_size=1,
        shnum=1,
        shstrndx=1,
    )


def test_scenario_reencodes_byte_for_byte(scenario_bytes: bytes) -> None:
    ident = parse_identification(scenario_bytes)
    header = parse_file_header(scenario_bytes, ident)
    assert encode_file_header(ident, header) == scenario_bytes


def test_elf64_big_endian_exact_bytes() -> None:
    ident = Identification(ElfClass.ELF64, DataEncoding.MSB)
    header = _header()
    raw = encode_file_header(ident, header)

    assert len(raw) == 64
    assert raw[:16] == b"\x7fELF\x02\x02\x01" + bytes(9)
    assert raw[16:] == struct.pack(
        ">HHIQQQIHHHHHH", 2, 0x3E, 1, 0x400000, 64, 4096, 0, 64, 56, 2, 64, 5, 4
    )
    assert raw[24:32] == bytes.fromhex("0000000000400000")
    assert parse_file_header(raw, ident) == header


def test_round_trip_every_format(elf_format) -> None:
    ident = Identification(*elf_format)
    header = _header(entry_point=0x8048000, flags=0x5000000)
    raw = encode_file_header(ident, header)
    assert len(raw) == (52 if ident.elf_class is ElfClass.ELF32 else 64)
    assert parse_file_header(raw, ident) == header


def test_wide_addresses_need_elf64() -> None:
    header = _header(entry_point=0x1_0000_0000)
    raw = encode_file_header(Identification(ElfClass.ELF64, DataEncoding.LSB), header)
    assert parse_file_header(raw, Identification(ElfClass.ELF64, DataEncoding.LSB)) == header
    with pytest.raises(ValueError):
        encode_file_header(Identification(ElfClass.ELF32, DataEncoding.LSB), header)


def test_unknown_machine_round_trips() -> None:
    ident = Identification(ElfClass.ELF32, DataEncoding.MSB)
    header = _header(machine=Machine(0xABCD))
    decoded = parse_file_header(encode_file_header(ident, header), ident)
    assert decoded.machine.is_unknown
    assert int(decoded.machine) == 0xABCD


class TestFileType:

    def test_unknown_type_is_open_by_default(self) -> None:
        ident = Identification(ElfClass.ELF64, DataEncoding.LSB)
        raw = encode_file_header(ident, _header(type=FileType(0x1234)))
        decoded = parse_file_header(raw, ident)
        assert decoded.type.is_unknown
        assert int(decoded.type) == 0x1234

    def test_strict_mode_rejects_unknown_type(self) -> None:
        ident = Identification(ElfClass.ELF64, DataEncoding.LSB)
        raw = encode_file_header(ident, _header(type=FileType(0x1234)))
        with pytest.raises(UnsupportedFileTypeError) as info:
            parse_file_header(raw, ident, strict_file_type=True)
        assert info.value.code == 0x1234
        assert info.value.stage is DecodeStage.FILE_HEADER

    def test_strict_mode_accepts_declared_types(self) -> None:
        ident = Identification(ElfClass.ELF64, DataEncoding.LSB)
        raw = encode_file_header(ident, _header(type=FileType.CORE))
        assert parse_file_header(raw, ident, strict_file_type=True).type is FileType.CORE


class TestRejection:

    def test_bad_header_version(self) -> None:
        ident = Identification(ElfClass.ELF32, DataEncoding.LSB)
        raw = bytearray(encode_file_header(ident, _header()))
        raw[20:24] = (2).to_bytes(4, "little")
        with pytest.raises(UnsupportedVersionError) as info:
            parse_file_header(bytes(raw), ident)
        assert info.value.stage is DecodeStage.FILE_HEADER
        assert info.value.code == 2

    def test_truncated_header(self, scenario_bytes: bytes) -> None:
        ident = parse_identification(scenario_bytes)
        with pytest.raises(TruncatedInputError) as info:
            parse_file_header(scenario_bytes[:40], ident)
        err = info.value
        assert err.stage is DecodeStage.FILE_HEADER
        assert err.field == "e_ehsize"
        assert err.offset == 40

    def test_truncated_wide_field(self) -> None:
        ident = Identification(ElfClass.ELF64, DataEncoding.MSB)
        raw = encode_file_header(ident, _header())
        with pytest.raises(TruncatedInputError) as info:
            parse_file_header(raw[:28], ident)
        assert info.value.field == "e_entry"
        assert info.value.needed == 8
        assert info.value.available == 4
