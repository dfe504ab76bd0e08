"""
Header Table Decoding
=====================

Shared machinery for the program header and section header tables:
both are arrays of fixed-size records located by an absolute file
offset, an entry count and a declared entry size taken from the file
header.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from elfscope.core.errors import DecodeStage, TruncatedInputError
from elfscope.parsers.cursor import ByteCursor
from elfscope.parsers.layouts import Layout
from elfscope.parsers.structures import Identification

T = TypeVar("T")


class TableDecoder(Generic[T]):
    """Decode ``count`` consecutive records of one :class:`Layout`.

    Subclasses set :attr:`stage` and :attr:`layouts` and implement
    :meth:`build` to turn one unpacked record into a value object.
    """

    stage: DecodeStage
    layouts: dict
    entry_name: str = "entry"

    def __init__(self, ident: Identification) -> None:
        self._ident = ident
        self._encoding = ident.data_encoding
        self.layout: Layout = self.layouts[ident.elf_class]

    def stride(self, declared_size: int) -> int:
        """Distance between entries.

        The declared entry size wins when it can hold a whole record;
        smaller (corrupt) values fall back to the record size.
        """
        return declared_size if declared_size >= self.layout.size else self.layout.size

    def decode(
        self,
        cursor: ByteCursor,
        offset: int,
        count: int,
        declared_size: int,
    ) -> tuple[T, ...]:
        """Decode exactly *count* entries starting at absolute *offset*.

        The complete table span ``count * stride`` must lie inside the
        buffer; otherwise nothing is returned and
        :class:`TruncatedInputError` names the first field that is cut.
        """
        if count == 0:
            return ()

        stride = self.stride(declared_size)
        table = cursor.at(offset, self.stage)
        span = count * stride
        if span > table.remaining:
            self._raise_truncated(table, stride)

        entries: list[T] = []
        for index in range(count):
            record = table.at(offset + index * stride).read_layout(
                self.layout, self._encoding, prefix=f"{self.entry_name}[{index}]."
            )
            entries.append(self.build(record))
        return tuple(entries)

    def build(self, record: dict[str, int]) -> T:
        raise NotImplementedError

    def _raise_truncated(self, table: ByteCursor, stride: int) -> None:
        # First entry whose full stride does not fit, then its first cut field
        index = table.remaining // stride
        start = table.offset + index * stride
        available = table.remaining - index * stride
        field, rel, width = self.layout.span_at(available)
        if rel + width <= available:
            # The record fits but its padding to the declared stride does not
            field, rel, width = "padding", self.layout.size, stride - self.layout.size
        raise TruncatedInputError(
            self.stage,
            f"{self.entry_name}[{index}].{field}",
            start + rel,
            width,
            available - rel,
        )
