"""
Elfscope Console Output
=======================

Rich-powered, readelf-style dump of decoded ELF headers: the "ELF
Header" field list followed by the program header and section header
tables.  Section names are shown as raw string-table offsets.

Uses the :class:`~shared.console.ToolConsole` abstraction for styling.
"""

from __future__ import annotations

from shared.console import ToolConsole

from elfscope.core.models import (
    ElfReport,
    InspectionFailure,
    InspectionResult,
    ProgramHeaderInfo,
    SectionHeaderInfo,
)


def _hex(value: int) -> str:
    return f"0x{value:x}"


class ElfConsoleOutput:
    """Terminal renderer for :class:`InspectionResult` objects.

    Usage::

        output = ElfConsoleOutput()
        output.display(result)
    """

    def __init__(
        self,
        console: ToolConsole | None = None,
        *,
        show_program_headers: bool = True,
        show_section_headers: bool = True,
    ) -> None:
        self._console: ToolConsole = console or ToolConsole()
        self._show_program_headers = show_program_headers
        self._show_section_headers = show_section_headers

    def display(self, result: InspectionResult) -> None:
        """Render one inspection outcome."""
        self._console.section(f"File: {result.path}")
        if result.failure is not None:
            self.display_failure(result.failure)
            return
        if result.report is None:
            return

        self.display_file_header(result.report)
        if self._show_program_headers:
            self.display_program_headers(result.report.program_headers)
        if self._show_section_headers:
            self.display_section_headers(result.report.section_headers)
        self._console.blank()

    def display_failure(self, failure: InspectionFailure) -> None:
        where = f" [{failure.stage}]" if failure.stage else ""
        self._console.error(f"{failure.kind}{where}: {failure.message}")

    def display_file_header(self, report: ElfReport) -> None:
        ident = report.identification
        fh = report.file_header
        self._console.print("[bold]ELF Header:[/bold]")
        self._console.fields(
            [
                ("Class", ident.elf_class),
                ("Data", ident.data),
                ("Version", f"{ident.version} (current)" if ident.version == 1 else ident.version),
                ("OS/ABI", ident.osabi_label),
                ("ABI Version", ident.abiversion),
                ("Type", fh.type_label),
                ("Machine", fh.machine_label),
                ("Version", _hex(fh.version)),
                ("Entry point address", _hex(fh.entry_point)),
                ("Start of program headers", f"{fh.ph_offset} (bytes into file)"),
                ("Start of section headers", f"{fh.sh_offset} (bytes into file)"),
                ("Flags", _hex(fh.flags)),
                ("Size of this header", f"{fh.eh_size} (bytes)"),
                ("Size of program headers", f"{fh.phent_size} (bytes)"),
                ("Number of program headers", fh.phnum),
                ("Size of section headers", f"{fh.shent_size} (bytes)"),
                ("Number of section headers", fh.shnum),
                ("Section header string table index", fh.shstrndx),
            ]
        )
        self._console.blank()

    def display_program_headers(self, entries: list[ProgramHeaderInfo]) -> None:
        if not entries:
            self._console.info("There are no program headers in this file.")
            return
        rows = [
            (
                ph.type_label,
                _hex(ph.offset),
                _hex(ph.vaddr),
                _hex(ph.paddr),
                _hex(ph.filesz),
                _hex(ph.memsz),
                ph.flags_label,
                _hex(ph.align),
            )
            for ph in entries
        ]
        self._console.table(
            "Program Headers",
            ["Type", "Offset", "VirtAddr", "PhysAddr", "FileSiz", "MemSiz", "Flg", "Align"],
            rows,
            styles=["bold", "", "", "", "", "", "bright_yellow", ""],
            justify=["left", "right", "right", "right", "right", "right", "left", "right"],
        )

    def display_section_headers(self, entries: list[SectionHeaderInfo]) -> None:
        if not entries:
            self._console.info("There are no sections in this file.")
            return
        rows = [
            (
                f"[{sh.index:2}]",
                sh.name_offset,
                sh.type_label,
                _hex(sh.addr),
                _hex(sh.offset),
                _hex(sh.size),
                _hex(sh.entsize),
                sh.flags_label,
                sh.link,
                sh.info,
                sh.addralign,
            )
            for sh in entries
        ]
        self._console.table(
            "Section Headers",
            ["Nr", "Name", "Type", "Address", "Off", "Size", "ES", "Flg", "Lk", "Inf", "Al"],
            rows,
            caption="Key to Flags: W (write), A (alloc), X (execute), M (merge), "
                    "S (strings), I (info), L (link order), O (extra OS processing "
                    "required), G (group), T (TLS), C (compressed), x (unknown), "
                    "o (OS specific), p (processor specific)",
            styles=["dim", "", "bold", "", "", "", "", "bright_yellow", "", "", ""],
            justify=["right", "right", "left", "right", "right", "right", "right",
                     "left", "right", "right", "right"],
        )
