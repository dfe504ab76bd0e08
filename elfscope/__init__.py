"""
Elfscope -- ELF Header Inspector
================================

Elfscope decodes and encodes the fixed-layout metadata at the front of an
ELF object: the identification block, the file header, and the program
and section header tables.  All four ELF class / data encoding
combinations are supported.

Capabilities:
    - Bounds-checked decoding with stage-tagged errors
    - Open enumerations that keep unknown codes instead of rejecting them
    - readelf-style labels for every enumerated field
    - Byte-exact encoding of headers and header tables
    - Concurrent batch inspection with console and JSON output

References:
    - TIS Committee. (1995). Executable and Linkable Format (ELF) Specification.
    - System V Application Binary Interface, Edition 4.1, chapter 4.
"""

__version__ = "0.3.0"

from elfscope.core.errors import ElfDecodeError
from elfscope.parsers import ElfHeader, ElfParser, encode_elf_header, parse_elf

__all__ = [
    "__version__",
    "ElfDecodeError",
    "ElfHeader",
    "ElfParser",
    "encode_elf_header",
    "parse_elf",
]
