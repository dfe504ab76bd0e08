"""
Elfscope Decode Errors
======================

Exception hierarchy raised by the ELF decoding pipeline.  Every error
records the :class:`DecodeStage` in which it occurred so callers can
report *where* a buffer was rejected, not only *why*.

Closed value spaces (class, data encoding, versions and, in strict mode,
the file type) reject undeclared codes with a dedicated error.  Open
value spaces never raise: they decode to an ``UNKNOWN_0x...`` member.
"""

from __future__ import annotations

import enum


class DecodeStage(str, enum.Enum):
    """Pipeline stage in which a decode step runs."""
    IDENTIFICATION = "identification"
    FILE_HEADER = "file_header"
    PROGRAM_HEADERS = "program_headers"
    SECTION_HEADERS = "section_headers"


class ElfDecodeError(Exception):
    """Base class for every failure of the decoding pipeline.

    Attributes:
        stage: Stage that rejected the input.
        reason: Human-readable description of the failure.
    """

    def __init__(self, stage: DecodeStage, reason: str) -> None:
        self.stage = stage
        self.reason = reason
        super().__init__(f"{stage.value}: {reason}")


class MalformedMagicError(ElfDecodeError):
    """The buffer does not start with ``7F 45 4C 46``."""

    def __init__(self, found: bytes) -> None:
        self.found = bytes(found)
        super().__init__(
            DecodeStage.IDENTIFICATION,
            f"bad magic number {self.found.hex(' ') or '<empty>'}, not an ELF file",
        )


class UnsupportedClassError(ElfDecodeError):
    """``EI_CLASS`` is neither ELFCLASS32 nor ELFCLASS64."""

    def __init__(self, code: int) -> None:
        self.code = code
        super().__init__(
            DecodeStage.IDENTIFICATION, f"unsupported ELF class 0x{code:02x}"
        )


class UnsupportedDataEncodingError(ElfDecodeError):
    """``EI_DATA`` is neither ELFDATA2LSB nor ELFDATA2MSB."""

    def __init__(self, code: int) -> None:
        self.code = code
        super().__init__(
            DecodeStage.IDENTIFICATION,
            f"unsupported data encoding 0x{code:02x}",
        )


class UnsupportedVersionError(ElfDecodeError):
    """``EI_VERSION`` or ``e_version`` is not EV_CURRENT (1)."""

    def __init__(self, stage: DecodeStage, code: int) -> None:
        self.code = code
        super().__init__(stage, f"unsupported ELF version {code}")


class UnsupportedFileTypeError(ElfDecodeError):
    """``e_type`` holds an undeclared code and strict typing is enabled."""

    def __init__(self, code: int) -> None:
        self.code = code
        super().__init__(
            DecodeStage.FILE_HEADER, f"unsupported file type 0x{code:04x}"
        )


class TruncatedInputError(ElfDecodeError):
    """The buffer ends before a field could be read in full.

    Attributes:
        field: Name of the first field that does not fit.
        offset: Absolute buffer offset where the field starts.
        needed: Bytes required from *offset*.
        available: Bytes actually present from *offset*.
    """

    def __init__(
        self,
        stage: DecodeStage,
        field: str,
        offset: int,
        needed: int,
        available: int,
    ) -> None:
        self.field = field
        self.offset = offset
        self.needed = needed
        self.available = max(available, 0)
        super().__init__(
            stage,
            f"truncated input reading {field} at offset 0x{offset:x} "
            f"(need {needed} bytes, {self.available} available)",
        )
