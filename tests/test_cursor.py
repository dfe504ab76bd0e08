"""Tests for the bounds-checked byte cursor."""

from __future__ import annotations

import pytest

from elfscope.core.errors import DecodeStage, TruncatedInputError
from elfscope.parsers.constants import DataEncoding
from elfscope.parsers.cursor import ByteCursor
from elfscope.parsers.layouts import PROGRAM_HEADER_64


class TestIntegers:

    def test_byte_order(self) -> None:
        data = bytes.fromhex("01020304")
        assert ByteCursor(data).read_u16(DataEncoding.LSB, "x") == 0x0201
        assert ByteCursor(data).read_u16(DataEncoding.MSB, "x") == 0x0102
        assert ByteCursor(data).read_u32(DataEncoding.LSB, "x") == 0x04030201
        assert ByteCursor(data).read_u32(DataEncoding.MSB, "x") == 0x01020304

    def test_u64(self) -> None:
        data = (0x1122334455667788).to_bytes(8, "big")
        assert ByteCursor(data).read_u64(DataEncoding.MSB, "x") == 0x1122334455667788

    def test_reads_advance(self) -> None:
        cursor = ByteCursor(b"\x01\x02\x03")
        assert cursor.read_u8("a") == 1
        assert cursor.read_u8("b") == 2
        assert cursor.offset == 2
        assert cursor.remaining == 1

    def test_unsupported_width(self) -> None:
        with pytest.raises(ValueError):
            ByteCursor(b"\x00" * 8).read_uint(3, DataEncoding.LSB, "x")


class TestTruncation:

    def test_truncated_read_does_not_advance(self) -> None:
        cursor = ByteCursor(b"\x00\x00\x00", offset=1, stage=DecodeStage.FILE_HEADER)
        with pytest.raises(TruncatedInputError) as info:
            cursor.read_u32(DataEncoding.LSB, "e_version")
        err = info.value
        assert err.stage is DecodeStage.FILE_HEADER
        assert err.field == "e_version"
        assert err.offset == 1
        assert err.needed == 4
        assert err.available == 2
        assert cursor.offset == 1

    def test_offset_past_end(self) -> None:
        cursor = ByteCursor(b"\x00", offset=10)
        assert cursor.remaining == 0
        with pytest.raises(TruncatedInputError) as info:
            cursor.skip(1, "pad")
        assert info.value.available == 0

    def test_read_layout_names_first_cut_field(self) -> None:
        # type + flags present, p_offset cut after two bytes
        cursor = ByteCursor(b"\x00" * 10, stage=DecodeStage.PROGRAM_HEADERS)
        with pytest.raises(TruncatedInputError) as info:
            cursor.read_layout(PROGRAM_HEADER_64, DataEncoding.LSB, prefix="phdr[0].")
        err = info.value
        assert err.field == "phdr[0].offset"
        assert err.offset == 8
        assert err.needed == 8
        assert err.available == 2


class TestProbing:

    def test_expect_bytes_match_consumes(self) -> None:
        cursor = ByteCursor(b"\x7fELF\x02")
        assert cursor.expect_bytes(b"\x7fELF")
        assert cursor.offset == 4

    def test_expect_bytes_mismatch_consumes_nothing(self) -> None:
        cursor = ByteCursor(b"MZ\x90\x00")
        assert not cursor.expect_bytes(b"\x7fELF")
        assert cursor.offset == 0

    def test_expect_bytes_short_buffer(self) -> None:
        cursor = ByteCursor(b"\x7fE")
        assert not cursor.expect_bytes(b"\x7fELF")
        assert cursor.offset == 0

    def test_at_returns_independent_cursor(self) -> None:
        cursor = ByteCursor(b"\x00" * 8)
        other = cursor.at(4, DecodeStage.SECTION_HEADERS)
        other.skip(2, "x")
        assert cursor.offset == 0
        assert other.offset == 6
        assert other.stage is DecodeStage.SECTION_HEADERS

    def test_take_and_peek(self) -> None:
        cursor = ByteCursor(b"abcdef")
        assert cursor.peek(2) == b"ab"
        assert cursor.take(3, "x") == b"abc"
        assert cursor.peek(10) == b"def"
