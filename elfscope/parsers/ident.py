"""
Identification Decoder
======================

Decodes the 16-byte ``e_ident`` block that opens every ELF file::

    offset  size  field
    0       4     magic        7F 45 4C 46
    4       1     class        1 = ELF32, 2 = ELF64
    5       1     data         1 = little endian, 2 = big endian
    6       1     version      1
    7       1     osabi
    8       1     abiversion
    9       7     padding

Class and data encoding select the layouts used for the rest of the
file, so any failure here is fatal.  OS/ABI and ABI version are
advisory and never fail.
"""

from __future__ import annotations

from elfscope.core.errors import (
    DecodeStage,
    MalformedMagicError,
    UnsupportedClassError,
    UnsupportedDataEncodingError,
    UnsupportedVersionError,
)
from elfscope.parsers.constants import (
    EI_PAD_SIZE,
    ELF_MAGIC,
    AbiVersion,
    DataEncoding,
    ElfClass,
    OsAbi,
    Version,
)
from elfscope.parsers.cursor import ByteCursor
from elfscope.parsers.structures import Identification


def decode_identification(cursor: ByteCursor) -> Identification:
    """Decode ``e_ident`` at the cursor and advance past it.

    Raises:
        MalformedMagicError: The magic number is missing or wrong.
        UnsupportedClassError: ``EI_CLASS`` is not 1 or 2.
        UnsupportedDataEncodingError: ``EI_DATA`` is not 1 or 2.
        UnsupportedVersionError: ``EI_VERSION`` is not 1.
        TruncatedInputError: The buffer ends inside the block.
    """
    cursor.stage = DecodeStage.IDENTIFICATION
    if not cursor.expect_bytes(ELF_MAGIC):
        raise MalformedMagicError(cursor.peek(len(ELF_MAGIC)))

    code = cursor.read_u8("ei_class")
    try:
        elf_class = ElfClass(code)
    except ValueError:
        raise UnsupportedClassError(code) from None

    code = cursor.read_u8("ei_data")
    try:
        data_encoding = DataEncoding(code)
    except ValueError:
        raise UnsupportedDataEncodingError(code) from None

    code = cursor.read_u8("ei_version")
    try:
        version = Version(code)
    except ValueError:
        raise UnsupportedVersionError(DecodeStage.IDENTIFICATION, code) from None

    osabi = OsAbi(cursor.read_u8("ei_osabi"))
    abiversion = AbiVersion(cursor.read_u8("ei_abiversion"))
    cursor.skip(EI_PAD_SIZE, "ei_pad")

    return Identification(
        elf_class=elf_class,
        data_encoding=data_encoding,
        version=version,
        osabi=osabi,
        abiversion=abiversion,
    )


def parse_identification(data: bytes | bytearray | memoryview) -> Identification:
    """Decode the identification block at the start of *data*."""
    return decode_identification(ByteCursor(data))
