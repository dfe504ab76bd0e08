"""
Byte Cursor
===========

Bounds-checked, byte-order-aware reader over an immutable buffer.

A :class:`ByteCursor` is a ``(buffer, offset)`` pair.  Every read checks
that the requested bytes exist *before* advancing; when they do not, it
raises :class:`~elfscope.core.errors.TruncatedInputError` and the offset
is left where it was.  :meth:`ByteCursor.expect_bytes` is the only
non-raising check: on a mismatch it reports ``False`` and consumes
nothing, so callers can try alternatives from the same position.
"""

from __future__ import annotations

import struct

from elfscope.core.errors import DecodeStage, TruncatedInputError
from elfscope.parsers.constants import DataEncoding
from elfscope.parsers.layouts import Layout

_UINT_CODES: dict[int, str] = {1: "B", 2: "H", 4: "I", 8: "Q"}

_UINT_STRUCTS: dict[tuple[DataEncoding, int], struct.Struct] = {
    (enc, size): struct.Struct(enc.struct_prefix + code)
    for enc in DataEncoding
    for size, code in _UINT_CODES.items()
}


class ByteCursor:
    """Read position inside a byte buffer.

    Args:
        data: Complete input buffer (not copied).
        offset: Absolute starting offset.
        stage: Pipeline stage reported by truncation errors.
    """

    __slots__ = ("_data", "_offset", "stage")

    def __init__(
        self,
        data: bytes | bytearray | memoryview,
        offset: int = 0,
        stage: DecodeStage = DecodeStage.IDENTIFICATION,
    ) -> None:
        self._data = data
        self._offset = offset
        self.stage = stage

    def __repr__(self) -> str:
        return f"ByteCursor(offset=0x{self._offset:x}, size=0x{len(self._data):x})"

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        """Bytes left from the current offset (zero past the end)."""
        return max(len(self._data) - self._offset, 0)

    def at(self, offset: int, stage: DecodeStage | None = None) -> ByteCursor:
        """Return a new cursor over the same buffer at absolute *offset*."""
        return ByteCursor(self._data, offset, self.stage if stage is None else stage)

    # ------------------------------------------------------------------ #
    #  Bounds
    # ------------------------------------------------------------------ #

    def require(self, size: int, field: str) -> None:
        """Raise :class:`TruncatedInputError` unless *size* bytes remain."""
        if size > self.remaining:
            raise TruncatedInputError(
                self.stage, field, self._offset, size, self.remaining
            )

    # ------------------------------------------------------------------ #
    #  Raw bytes
    # ------------------------------------------------------------------ #

    def take(self, size: int, field: str) -> bytes:
        """Consume exactly *size* bytes and return them."""
        self.require(size, field)
        start = self._offset
        self._offset += size
        return bytes(self._data[start:self._offset])

    def skip(self, size: int, field: str) -> None:
        """Consume *size* bytes without looking at them."""
        self.require(size, field)
        self._offset += size

    def expect_bytes(self, literal: bytes) -> bool:
        """Consume *literal* if the buffer continues with it.

        Returns ``False`` (consuming nothing) on a mismatch or when fewer
        than ``len(literal)`` bytes remain.
        """
        end = self._offset + len(literal)
        if bytes(self._data[self._offset:end]) != literal:
            return False
        self._offset = end
        return True

    def peek(self, size: int) -> bytes:
        """Return up to *size* upcoming bytes without consuming them."""
        return bytes(self._data[self._offset:self._offset + size])

    # ------------------------------------------------------------------ #
    #  Integers
    # ------------------------------------------------------------------ #

    def read_uint(self, size: int, encoding: DataEncoding, field: str) -> int:
        """Consume a *size*-byte unsigned integer in *encoding* order."""
        try:
            fmt = _UINT_STRUCTS[(encoding, size)]
        except KeyError:
            raise ValueError(f"unsupported integer width: {size}") from None
        self.require(size, field)
        (value,) = fmt.unpack_from(self._data, self._offset)
        self._offset += size
        return value

    def read_u8(self, field: str) -> int:
        return self.read_uint(1, DataEncoding.LSB, field)

    def read_u16(self, encoding: DataEncoding, field: str) -> int:
        return self.read_uint(2, encoding, field)

    def read_u32(self, encoding: DataEncoding, field: str) -> int:
        return self.read_uint(4, encoding, field)

    def read_u64(self, encoding: DataEncoding, field: str) -> int:
        return self.read_uint(8, encoding, field)

    # ------------------------------------------------------------------ #
    #  Records
    # ------------------------------------------------------------------ #

    def read_layout(
        self, layout: Layout, encoding: DataEncoding, prefix: str = ""
    ) -> dict[str, int]:
        """Consume one fixed-size record described by *layout*.

        On truncation the error names the first field of the record that
        runs past the end of the buffer, prefixed with *prefix*.
        """
        available = self.remaining
        if layout.size > available:
            field, rel, width = layout.span_at(available)
            raise TruncatedInputError(
                self.stage,
                f"{prefix}{field}",
                self._offset + rel,
                width,
                available - rel,
            )
        values = layout.unpack(encoding, self._data, self._offset)
        self._offset += layout.size
        return values
