"""
ELF Header Serializer
=====================

Inverse of the decoders: produces the exact on-disk bytes of the
identification block, the file header and individual table entries in
the width and byte order named by an :class:`Identification`.

For any well-formed header region (zero ``EI_PAD`` bytes)::

    encode_file_header(*decode(raw)) == raw
    decode(encode_file_header(ident, header)) == (ident, header)
"""

from __future__ import annotations

from dataclasses import fields

from elfscope.parsers.constants import EI_PAD_SIZE, ELF_MAGIC
from elfscope.parsers.layouts import (
    FILE_HEADER_LAYOUTS,
    PROGRAM_HEADER_LAYOUTS,
    SECTION_HEADER_LAYOUTS,
)
from elfscope.parsers.structures import (
    ElfHeader,
    FileHeader,
    Identification,
    ProgramHeader,
    SectionHeader,
)


def encode_identification(ident: Identification) -> bytes:
    """Return the 16-byte ``e_ident`` block for *ident*."""
    raw = (
        ident.elf_class,
        ident.data_encoding,
        ident.version,
        ident.osabi,
        ident.abiversion,
    )
    for value in raw:
        if not 0 <= int(value) <= 0xFF:
            raise ValueError(f"e_ident byte out of range: {int(value)}")
    return ELF_MAGIC + bytes(int(v) for v in raw) + bytes(EI_PAD_SIZE)


def encode_file_header(ident: Identification, header: FileHeader) -> bytes:
    """Return ``e_ident`` followed by the fixed file header fields.

    The result is 52 bytes for ELF32 and 64 bytes for ELF64.

    Raises:
        ValueError: A field does not fit its on-disk width (for example a
            64-bit entry point in an ELF32 header).
    """
    layout = FILE_HEADER_LAYOUTS[ident.elf_class]
    return encode_identification(ident) + layout.pack(
        ident.data_encoding, _values(header)
    )


def encode_program_header(ident: Identification, entry: ProgramHeader) -> bytes:
    """Return the 32- or 56-byte image of one program header entry."""
    layout = PROGRAM_HEADER_LAYOUTS[ident.elf_class]
    return layout.pack(ident.data_encoding, _values(entry))


def encode_section_header(ident: Identification, entry: SectionHeader) -> bytes:
    """Return the 40- or 64-byte image of one section header entry."""
    layout = SECTION_HEADER_LAYOUTS[ident.elf_class]
    return layout.pack(ident.data_encoding, _values(entry))


def encode_program_header_table(
    ident: Identification, entries: tuple[ProgramHeader, ...] | list[ProgramHeader]
) -> bytes:
    return b"".join(encode_program_header(ident, e) for e in entries)


def encode_section_header_table(
    ident: Identification, entries: tuple[SectionHeader, ...] | list[SectionHeader]
) -> bytes:
    return b"".join(encode_section_header(ident, e) for e in entries)


def encode_elf_header(header: ElfHeader) -> bytes:
    """Lay out a complete header image.

    The tables are written at the offsets recorded in the file header,
    with entries spaced by ``phent_size`` / ``shent_size``.  Gaps are
    zero-filled.

    Raises:
        ValueError: The declared entry sizes are smaller than the record
            size, or the counts disagree with the table lengths, or two
            regions overlap.
    """
    ident = header.identification
    fh = header.file_header
    if fh.phnum != len(header.program_headers):
        raise ValueError("phnum does not match the number of program headers")
    if fh.shnum != len(header.section_headers):
        raise ValueError("shnum does not match the number of section headers")

    regions: list[tuple[int, bytes]] = [(0, encode_file_header(ident, fh))]
    regions += _table_regions(
        fh.ph_offset,
        fh.phent_size,
        [encode_program_header(ident, e) for e in header.program_headers],
    )
    regions += _table_regions(
        fh.sh_offset,
        fh.shent_size,
        [encode_section_header(ident, e) for e in header.section_headers],
    )

    image = bytearray(max(start + len(blob) for start, blob in regions))
    written = bytearray(len(image))
    for start, blob in regions:
        end = start + len(blob)
        if any(written[start:end]):
            raise ValueError(f"overlapping regions at offset 0x{start:x}")
        image[start:end] = blob
        written[start:end] = b"\x01" * len(blob)
    return bytes(image)


def _table_regions(offset: int, entsize: int, blobs: list[bytes]) -> list[tuple[int, bytes]]:
    if not blobs:
        return []
    if entsize < len(blobs[0]):
        raise ValueError(
            f"entry size {entsize} is smaller than the record size {len(blobs[0])}"
        )
    return [
        (offset + i * entsize, blob.ljust(entsize, b"\x00"))
        for i, blob in enumerate(blobs)
    ]


def _values(record: object) -> dict[str, int]:
    return {f.name: getattr(record, f.name) for f in fields(record)}  # type: ignore[arg-type]
