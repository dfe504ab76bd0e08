"""
ELF Header Parser
=================

Chains the stage decoders into one pipeline over an in-memory buffer::

    START -> IDENT_PARSED -> FILE_HEADER_PARSED
          -> PROGRAM_HEADERS_PARSED -> SECTION_HEADERS_PARSED -> DONE

Any stage failure moves the parser to ``FAILED``, records the error and
re-raises it; no partially decoded header is ever returned.

The identification block selects the address width and byte order used
by every later stage.  Program and section header tables are read at the
absolute offsets declared in the file header.

Decoding is pure: it reads only the buffer it was given and allocates only
its own result, so independent buffers can be decoded concurrently.

References:
    - TIS Committee. (1995). Tool Interface Standard (TIS) Executable and
      Linkable Format (ELF) Specification, Version 1.2.
"""

from __future__ import annotations

import enum

from elfscope.core.errors import ElfDecodeError
from elfscope.parsers.cursor import ByteCursor
from elfscope.parsers.file_header import FileHeaderDecoder
from elfscope.parsers.ident import decode_identification
from elfscope.parsers.program_header import ProgramHeaderTableDecoder
from elfscope.parsers.section_header import SectionHeaderTableDecoder
from elfscope.parsers.structures import ElfHeader


class ParseState(str, enum.Enum):
    """Progress of an :class:`ElfParser` through the pipeline."""
    START = "start"
    IDENT_PARSED = "ident_parsed"
    FILE_HEADER_PARSED = "file_header_parsed"
    PROGRAM_HEADERS_PARSED = "program_headers_parsed"
    SECTION_HEADERS_PARSED = "section_headers_parsed"
    DONE = "done"
    FAILED = "failed"


class ElfParser:
    """Decode the identification, file header and header tables of an ELF image.

    Usage::

        parser = ElfParser(raw_bytes)
        try:
            header = parser.parse()
        except ElfDecodeError as exc:
            print(exc.stage, exc.reason)

    Args:
        data: Complete ELF file contents.
        strict_file_type: Reject undeclared ``e_type`` codes.
    """

    def __init__(
        self,
        data: bytes | bytearray | memoryview,
        *,
        strict_file_type: bool = False,
    ) -> None:
        self._data = data
        self._strict_file_type = strict_file_type
        self.state: ParseState = ParseState.START
        self.error: ElfDecodeError | None = None
        self._result: ElfHeader | None = None

    @property
    def result(self) -> ElfHeader | None:
        """The decoded header once :attr:`state` is ``DONE``."""
        return self._result

    def parse(self) -> ElfHeader:
        """Run the pipeline.

        Returns:
            The decoded :class:`ElfHeader`.

        Raises:
            ElfDecodeError: The first stage failure; :attr:`state` is then
                ``FAILED`` and :attr:`error` holds the same exception.
        """
        if self._result is not None:
            return self._result
        if self.error is not None:
            raise self.error

        try:
            header = self._run()
        except ElfDecodeError as exc:
            self.state = ParseState.FAILED
            self.error = exc
            raise

        self._result = header
        self.state = ParseState.DONE
        return header

    def _run(self) -> ElfHeader:
        cursor = ByteCursor(self._data)

        ident = decode_identification(cursor)
        self.state = ParseState.IDENT_PARSED

        file_header = FileHeaderDecoder(
            ident, strict_file_type=self._strict_file_type
        ).decode(cursor)
        self.state = ParseState.FILE_HEADER_PARSED

        program_headers = ProgramHeaderTableDecoder(ident).decode(
            cursor,
            file_header.ph_offset,
            file_header.phnum,
            file_header.phent_size,
        )
        self.state = ParseState.PROGRAM_HEADERS_PARSED

        section_headers = SectionHeaderTableDecoder(ident).decode(
            cursor,
            file_header.sh_offset,
            file_header.shnum,
            file_header.shent_size,
        )
        self.state = ParseState.SECTION_HEADERS_PARSED

        return ElfHeader(
            identification=ident,
            file_header=file_header,
            program_headers=program_headers,
            section_headers=section_headers,
        )


def parse_elf(
    data: bytes | bytearray | memoryview,
    *,
    strict_file_type: bool = False,
) -> ElfHeader:
    """Decode *data* in one call.  See :class:`ElfParser`."""
    return ElfParser(data, strict_file_type=strict_file_type).parse()
