"""
ELF Enumerated Fields
=====================

Lookup tables for every enumerated field of the ELF identification
block, file header, program header and section header.

Two kinds of value space exist:

* **Closed** -- :class:`ElfClass`, :class:`DataEncoding` and
  :class:`Version`.  A code outside the table makes the file undecodable
  and the decoders raise.
* **Open** -- :class:`OsAbi`, :class:`AbiVersion`, :class:`FileType`,
  :class:`Machine`, :class:`ProgramHeaderType` and :class:`SectionType`.
  The registries are extended by the format over time, so an undeclared
  code decodes to an ``UNKNOWN_0x...`` pseudo-member that still carries
  the raw code (``int(member)``) and round-trips unchanged.

Bit masks (``sh_flags``, ``p_flags``) are :class:`enum.IntFlag` types that
keep undeclared bits.

Display strings follow GNU ``readelf`` wording.

References:
    - TIS Committee. (1995). Tool Interface Standard (TIS) Executable and
      Linkable Format (ELF) Specification, Version 1.2.
    - System V Application Binary Interface, Edition 4.1, chapter 4.
    - Linux man page: elf(5).
"""

from __future__ import annotations

import enum

# Magic number
ELF_MAGIC: bytes = b"\x7fELF"

# Size of e_ident
EI_NIDENT: int = 16
EI_PAD_SIZE: int = 7

# Reserved sh_flags ranges
SHF_MASKOS: int = 0x0FF00000
SHF_MASKPROC: int = 0xF0000000


# ---------------------------------------------------------------------------
# Enumeration bases
# ---------------------------------------------------------------------------

class LabelledIntEnum(enum.IntEnum):
    """IntEnum with a readelf-style :attr:`label`."""

    @property
    def label(self) -> str:
        text = _LABELS.get(type(self).__name__, {}).get(self._value_)
        if text is not None:
            return text
        for low, high, prefix in _RANGES.get(type(self).__name__, ()):
            if low <= self._value_ <= high:
                return f"{prefix}: (0x{self._value_:x})"
        return f"<unknown>: 0x{self._value_:x}"


class OpenIntEnum(LabelledIntEnum):
    """IntEnum whose undeclared codes decode to ``UNKNOWN`` pseudo-members.

    ``Machine(0xABCD)`` does not raise; it returns a member named
    ``UNKNOWN_0xABCD`` whose value is ``0xABCD``.  Pseudo-members are
    cached, so two lookups of the same code return the same object.
    """

    @classmethod
    def _missing_(cls, value: object) -> OpenIntEnum | None:
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            return None
        pseudo = int.__new__(cls, value)
        pseudo._name_ = f"UNKNOWN_0x{value:X}"
        pseudo._value_ = value
        return cls._value2member_map_.setdefault(value, pseudo)  # type: ignore[return-value]

    @property
    def is_unknown(self) -> bool:
        """``True`` for a code the table does not declare."""
        return self._name_ not in type(self)._member_map_


# ---------------------------------------------------------------------------
# Identification (e_ident)
# ---------------------------------------------------------------------------

class ElfClass(LabelledIntEnum):
    """EI_CLASS: address width.  Closed."""
    ELF32 = 0x01
    ELF64 = 0x02

    @property
    def address_size(self) -> int:
        """Size in bytes of address and offset fields."""
        return 4 if self is ElfClass.ELF32 else 8

    @property
    def bits(self) -> int:
        return self.address_size * 8


class DataEncoding(LabelledIntEnum):
    """EI_DATA: byte order of every multi-byte field.  Closed."""
    LSB = 0x01  # Little-endian
    MSB = 0x02  # Big-endian

    @property
    def struct_prefix(self) -> str:
        """:mod:`struct` byte-order character for this encoding."""
        return "<" if self is DataEncoding.LSB else ">"


class Version(LabelledIntEnum):
    """EI_VERSION / e_version.  Only EV_CURRENT is defined.  Closed."""
    CURRENT = 0x01


class OsAbi(OpenIntEnum):
    """EI_OSABI: operating system / ABI extensions.  Open (advisory)."""
    SYSV = 0x00
    HPUX = 0x01
    NETBSD = 0x02
    LINUX = 0x03
    GNU_HURD = 0x04
    SOLARIS = 0x06
    AIX = 0x07
    IRIX = 0x08
    FREEBSD = 0x09
    TRU64 = 0x0A
    NOVELL_MODESTO = 0x0B
    OPENBSD = 0x0C
    OPENVMS = 0x0D
    NONSTOP_KERNEL = 0x0E
    AROS = 0x0F
    FENIX_OS = 0x10
    CLOUDABI = 0x11
    OPENVOS = 0x12


class AbiVersion(OpenIntEnum):
    """EI_ABIVERSION.  Usually zero; open."""
    ZERO = 0x00
    ONE = 0x01

    @property
    def label(self) -> str:
        return str(self._value_)


# ---------------------------------------------------------------------------
# File header
# ---------------------------------------------------------------------------

class FileType(OpenIntEnum):
    """e_type: object file type.

    Open by default; the file header decoder can be asked to treat it as
    closed (``strict_file_type``).
    """
    NONE = 0x0000
    REL = 0x0001
    EXEC = 0x0002
    DYN = 0x0003
    CORE = 0x0004
    LOOS = 0xFE00
    HIOS = 0xFEFF
    LOPROC = 0xFF00
    HIPROC = 0xFFFF


class Machine(OpenIntEnum):
    """e_machine: target instruction set architecture.  Open."""
    NONE = 0x00
    M32 = 0x01
    SPARC = 0x02
    X386 = 0x03
    M68K = 0x04
    M88K = 0x05
    INTEL_MCU = 0x06
    INTEL_80860 = 0x07
    MIPS = 0x08
    S370 = 0x09
    MIPS_RS3_LE = 0x0A
    PARISC = 0x0F
    I960 = 0x13
    PPC = 0x14
    PPC64 = 0x15
    S390 = 0x16
    V800 = 0x24
    FR20 = 0x25
    RH32 = 0x26
    RCE = 0x27
    ARM = 0x28
    ALPHA = 0x29
    SH = 0x2A
    SPARCV9 = 0x2B
    TRICORE = 0x2C
    ARC = 0x2D
    H8_300 = 0x2E
    H8_300H = 0x2F
    H8S = 0x30
    H8_500 = 0x31
    IA_64 = 0x32
    MIPS_X = 0x33
    COLDFIRE = 0x34
    M68HC12 = 0x35
    MMA = 0x36
    PCP = 0x37
    NCPU = 0x38
    NDR1 = 0x39
    STARCORE = 0x3A
    ME16 = 0x3B
    ST100 = 0x3C
    TINYJ = 0x3D
    X86_64 = 0x3E
    TMS320C6000 = 0x8C
    AARCH64 = 0xB7
    RISCV = 0xF3
    BPF = 0xF7
    MCS6502 = 0xFE
    WDC65C816 = 0x101


# ---------------------------------------------------------------------------
# Program header
# ---------------------------------------------------------------------------

class ProgramHeaderType(OpenIntEnum):
    """p_type: segment kind.  Open (OS and processor ranges are reserved)."""
    NULL = 0x00000000
    LOAD = 0x00000001
    DYNAMIC = 0x00000002
    INTERP = 0x00000003
    NOTE = 0x00000004
    SHLIB = 0x00000005
    PHDR = 0x00000006
    TLS = 0x00000007
    LOOS = 0x60000000
    GNU_EH_FRAME = 0x6474E550
    GNU_STACK = 0x6474E551
    GNU_RELRO = 0x6474E552
    GNU_PROPERTY = 0x6474E553
    HIOS = 0x6FFFFFFF
    LOPROC = 0x70000000
    HIPROC = 0x7FFFFFFF


class SegmentFlags(enum.IntFlag):
    """p_flags: segment permissions.  Undeclared bits are kept."""
    X = 0x1
    W = 0x2
    R = 0x4

    @property
    def label(self) -> str:
        """readelf-style ``RWE`` column."""
        value = int(self)
        return "".join(
            letter if value & bit else " "
            for bit, letter in ((0x4, "R"), (0x2, "W"), (0x1, "E"))
        )


# ---------------------------------------------------------------------------
# Section header
# ---------------------------------------------------------------------------

class SectionType(OpenIntEnum):
    """sh_type: section contents and semantics.  Open."""
    NULL = 0x00
    PROGBITS = 0x01
    SYMTAB = 0x02
    STRTAB = 0x03
    RELA = 0x04
    HASH = 0x05
    DYNAMIC = 0x06
    NOTE = 0x07
    NOBITS = 0x08
    REL = 0x09
    SHLIB = 0x0A
    DYNSYM = 0x0B
    INIT_ARRAY = 0x0E
    FINI_ARRAY = 0x0F
    PREINIT_ARRAY = 0x10
    GROUP = 0x11
    SYMTAB_SHNDX = 0x12
    NUM = 0x13


class SectionFlags(enum.IntFlag):
    """sh_flags: section attribute bit set.

    Only the generic bits are named; OS-specific (:data:`SHF_MASKOS`) and
    processor-specific (:data:`SHF_MASKPROC`) bits are preserved as-is.
    """
    WRITE = 0x1
    ALLOC = 0x2
    EXECINSTR = 0x4
    MERGE = 0x10
    STRINGS = 0x20
    INFO_LINK = 0x40
    LINK_ORDER = 0x80
    OS_NONCONFORMING = 0x100
    GROUP = 0x200
    TLS = 0x400
    COMPRESSED = 0x800

    @property
    def label(self) -> str:
        """readelf key letters, e.g. ``"WAX"``.

        ``o`` marks OS-specific bits, ``p`` processor-specific bits and
        ``x`` any other undeclared bit.
        """
        value = int(self)
        letters = [letter for bit, letter in _SHF_LETTERS if value & bit]
        known = sum(bit for bit, _ in _SHF_LETTERS)
        if value & SHF_MASKOS:
            letters.append("o")
        if value & SHF_MASKPROC:
            letters.append("p")
        if value & ~(known | SHF_MASKOS | SHF_MASKPROC):
            letters.append("x")
        return "".join(letters)


_SHF_LETTERS: tuple[tuple[int, str], ...] = (
    (0x1, "W"),
    (0x2, "A"),
    (0x4, "X"),
    (0x10, "M"),
    (0x20, "S"),
    (0x40, "I"),
    (0x80, "L"),
    (0x100, "O"),
    (0x200, "G"),
    (0x400, "T"),
    (0x800, "C"),
)


# ---------------------------------------------------------------------------
# Display tables
# ---------------------------------------------------------------------------

_LABELS: dict[str, dict[int, str]] = {
    "ElfClass": {
        ElfClass.ELF32: "ELF32",
        ElfClass.ELF64: "ELF64",
    },
    "DataEncoding": {
        DataEncoding.LSB: "2's complement, little endian",
        DataEncoding.MSB: "2's complement, big endian",
    },
    "Version": {
        Version.CURRENT: "1 (current)",
    },
    "OsAbi": {
        OsAbi.SYSV: "UNIX - System V",
        OsAbi.HPUX: "UNIX - HP-UX",
        OsAbi.NETBSD: "UNIX - NetBSD",
        OsAbi.LINUX: "UNIX - GNU",
        OsAbi.GNU_HURD: "GNU/Hurd",
        OsAbi.SOLARIS: "UNIX - Solaris",
        OsAbi.AIX: "UNIX - AIX",
        OsAbi.IRIX: "UNIX - IRIX",
        OsAbi.FREEBSD: "UNIX - FreeBSD",
        OsAbi.TRU64: "UNIX - TRU64",
        OsAbi.NOVELL_MODESTO: "Novell - Modesto",
        OsAbi.OPENBSD: "UNIX - OpenBSD",
        OsAbi.OPENVMS: "VMS - OpenVMS",
        OsAbi.NONSTOP_KERNEL: "HP - Non-Stop Kernel",
        OsAbi.AROS: "AROS",
        OsAbi.FENIX_OS: "FenixOS",
        OsAbi.CLOUDABI: "Nuxi CloudABI",
        OsAbi.OPENVOS: "Stratus Technologies OpenVOS",
    },
    "FileType": {
        FileType.NONE: "NONE (None)",
        FileType.REL: "REL (Relocatable file)",
        FileType.EXEC: "EXEC (Executable file)",
        FileType.DYN: "DYN (Shared object file)",
        FileType.CORE: "CORE (Core file)",
        FileType.LOOS: "OS Specific: (LoOs)",
        FileType.HIOS: "OS Specific: (HiOs)",
        FileType.LOPROC: "Processor Specific: (LoProc)",
        FileType.HIPROC: "Processor Specific: (HiProc)",
    },
    "Machine": {
        Machine.NONE: "None",
        Machine.M32: "WE32100",
        Machine.SPARC: "Sparc",
        Machine.X386: "Intel 80386",
        Machine.M68K: "MC68000",
        Machine.M88K: "MC88000",
        Machine.INTEL_MCU: "Intel MCU",
        Machine.INTEL_80860: "Intel 80860",
        Machine.MIPS: "MIPS R3000",
        Machine.S370: "IBM System/370",
        Machine.MIPS_RS3_LE: "MIPS R4000 big-endian",
        Machine.PARISC: "HPPA",
        Machine.I960: "Intel 80960",
        Machine.PPC: "PowerPC",
        Machine.PPC64: "PowerPC64",
        Machine.S390: "IBM S/390",
        Machine.V800: "Renesas V850 (using RH850 ABI)",
        Machine.FR20: "Fujitsu FR20",
        Machine.RH32: "TRW RH32",
        Machine.RCE: "Motorola M*Core",
        Machine.ARM: "ARM",
        Machine.ALPHA: "Digital Alpha (old)",
        Machine.SH: "Renesas / SuperH SH",
        Machine.SPARCV9: "Sparc v9",
        Machine.TRICORE: "Siemens Tricore",
        Machine.ARC: "ARC",
        Machine.H8_300: "Renesas H8/300",
        Machine.H8_300H: "Renesas H8/300H",
        Machine.H8S: "Renesas H8S",
        Machine.H8_500: "Renesas H8/500",
        Machine.IA_64: "Intel IA-64",
        Machine.MIPS_X: "Stanford MIPS-X",
        Machine.COLDFIRE: "Motorola Coldfire",
        Machine.M68HC12: "Motorola MC68HC12 Microcontroller",
        Machine.MMA: "Fujitsu Multimedia Accelerator",
        Machine.PCP: "Siemens PCP",
        Machine.NCPU: "Sony nCPU embedded RISC processor",
        Machine.NDR1: "Denso NDR1 microprocessor",
        Machine.STARCORE: "Motorola Star*Core processor",
        Machine.ME16: "Toyota ME16 processor",
        Machine.ST100: "STMicroelectronics ST100 processor",
        Machine.TINYJ: "Advanced Logic Corp. TinyJ embedded processor",
        Machine.X86_64: "Advanced Micro Devices X86-64",
        Machine.TMS320C6000: "Texas Instruments TMS320C6000 DSP family",
        Machine.AARCH64: "AArch64",
        Machine.RISCV: "RISC-V",
        Machine.BPF: "Linux BPF",
        Machine.MCS6502: "MOS Technology MCS 6502 processor",
        Machine.WDC65C816: "WDC 65816/65C816",
    },
    "ProgramHeaderType": {
        ProgramHeaderType.NULL: "NULL",
        ProgramHeaderType.LOAD: "LOAD",
        ProgramHeaderType.DYNAMIC: "DYNAMIC",
        ProgramHeaderType.INTERP: "INTERP",
        ProgramHeaderType.NOTE: "NOTE",
        ProgramHeaderType.SHLIB: "SHLIB",
        ProgramHeaderType.PHDR: "PHDR",
        ProgramHeaderType.TLS: "TLS",
        ProgramHeaderType.LOOS: "LOOS",
        ProgramHeaderType.GNU_EH_FRAME: "GNU_EH_FRAME",
        ProgramHeaderType.GNU_STACK: "GNU_STACK",
        ProgramHeaderType.GNU_RELRO: "GNU_RELRO",
        ProgramHeaderType.GNU_PROPERTY: "GNU_PROPERTY",
        ProgramHeaderType.HIOS: "HIOS",
        ProgramHeaderType.LOPROC: "LOPROC",
        ProgramHeaderType.HIPROC: "HIPROC",
    },
    "SectionType": {
        SectionType.NULL: "NULL",
        SectionType.PROGBITS: "PROGBITS",
        SectionType.SYMTAB: "SYMTAB",
        SectionType.STRTAB: "STRTAB",
        SectionType.RELA: "RELA",
        SectionType.HASH: "HASH",
        SectionType.DYNAMIC: "DYNAMIC",
        SectionType.NOTE: "NOTE",
        SectionType.NOBITS: "NOBITS",
        SectionType.REL: "REL",
        SectionType.SHLIB: "SHLIB",
        SectionType.DYNSYM: "DYNSYM",
        SectionType.INIT_ARRAY: "INIT_ARRAY",
        SectionType.FINI_ARRAY: "FINI_ARRAY",
        SectionType.PREINIT_ARRAY: "PREINIT_ARRAY",
        SectionType.GROUP: "GROUP",
        SectionType.SYMTAB_SHNDX: "SYMTAB SECTION INDICES",
        SectionType.NUM: "NUM",
    },
}

# Reserved ranges used to describe undeclared codes
_RANGES: dict[str, tuple[tuple[int, int, str], ...]] = {
    "FileType": (
        (0xFE00, 0xFEFF, "OS Specific"),
        (0xFF00, 0xFFFF, "Processor Specific"),
    ),
    "ProgramHeaderType": (
        (0x60000000, 0x6FFFFFFF, "LOOS+"),
        (0x70000000, 0x7FFFFFFF, "LOPROC+"),
    ),
    "SectionType": (
        (0x60000000, 0x6FFFFFFF, "LOOS+"),
        (0x70000000, 0x7FFFFFFF, "LOPROC+"),
        (0x80000000, 0xFFFFFFFF, "LOUSER+"),
    ),
}
