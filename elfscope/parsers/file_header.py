"""
File Header Decoder
===================

Decodes the fixed file header that follows ``e_ident`` (offset 16).  The
field sequence is the same for both widths; only ``e_entry``,
``e_phoff`` and ``e_shoff`` widen from 4 to 8 bytes for ELF64.  All
multi-byte fields use the byte order recorded in the identification
block, which is passed in rather than re-read.
"""

from __future__ import annotations

from elfscope.core.errors import (
    DecodeStage,
    UnsupportedFileTypeError,
    UnsupportedVersionError,
)
from elfscope.parsers.constants import EI_NIDENT, FileType, Machine, Version
from elfscope.parsers.cursor import ByteCursor
from elfscope.parsers.structures import FileHeader, Identification


class FileHeaderDecoder:
    """Decoder for ``ElfN_Ehdr`` bound to one (width, byte order) pair.

    Args:
        ident: Identification decoded from the same buffer.
        strict_file_type: Reject ``e_type`` codes outside :class:`FileType`
            instead of decoding them to ``UNKNOWN`` members.
    """

    def __init__(self, ident: Identification, *, strict_file_type: bool = False) -> None:
        self._ident = ident
        self._encoding = ident.data_encoding
        self._addr_size = ident.elf_class.address_size
        self._strict = strict_file_type

    def decode(self, cursor: ByteCursor) -> FileHeader:
        """Decode the header at the cursor and advance past it.

        Raises:
            UnsupportedFileTypeError: Unknown ``e_type`` in strict mode.
            UnsupportedVersionError: ``e_version`` is not 1.
            TruncatedInputError: The buffer ends inside the header.
        """
        cursor.stage = DecodeStage.FILE_HEADER
        enc = self._encoding

        code = cursor.read_u16(enc, "e_type")
        file_type = FileType(code)
        if self._strict and file_type.is_unknown:
            raise UnsupportedFileTypeError(code)

        machine = Machine(cursor.read_u16(enc, "e_machine"))

        code = cursor.read_u32(enc, "e_version")
        try:
            version = Version(code)
        except ValueError:
            raise UnsupportedVersionError(DecodeStage.FILE_HEADER, code) from None

        entry_point = cursor.read_uint(self._addr_size, enc, "e_entry")
        ph_offset = cursor.read_uint(self._addr_size, enc, "e_phoff")
        sh_offset = cursor.read_uint(self._addr_size, enc, "e_shoff")
        flags = cursor.read_u32(enc, "e_flags")

        return FileHeader(
            type=file_type,
            machine=machine,
            version=version,
            entry_point=entry_point,
            ph_offset=ph_offset,
            sh_offset=sh_offset,
            flags=flags,
            eh_size=cursor.read_u16(enc, "e_ehsize"),
            phent_size=cursor.read_u16(enc, "e_phentsize"),
            phnum=cursor.read_u16(enc, "e_phnum"),
            shent_size=cursor.read_u16(enc, "e_shentsize"),
            shnum=cursor.read_u16(enc, "e_shnum"),
            shstrndx=cursor.read_u16(enc, "e_shstrndx"),
        )


def parse_file_header(
    data: bytes | bytearray | memoryview,
    ident: Identification,
    *,
    strict_file_type: bool = False,
) -> FileHeader:
    """Decode the file header that follows the identification block in *data*."""
    decoder = FileHeaderDecoder(ident, strict_file_type=strict_file_type)
    return decoder.decode(ByteCursor(data, EI_NIDENT, DecodeStage.FILE_HEADER))
