"""Tests for report models, the JSON report and the console dump."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from shared.console import ToolConsole

from elfscope.core.errors import DecodeStage, TruncatedInputError
from elfscope.core.models import ElfReport, InspectionFailure, InspectionResult
from elfscope.output.console import ElfConsoleOutput
from elfscope.output.report import ElfReportGenerator
from elfscope.parsers.constants import Machine
from elfscope.parsers.elf_parser import parse_elf
from elfscope.parsers.serializer import encode_elf_header


@pytest.fixture
def ok_result(full_image) -> InspectionResult:
    report = ElfReport.from_header(parse_elf(full_image), path="a.out", size=len(full_image))
    return InspectionResult(path="a.out", report=report)


@pytest.fixture
def failed_result() -> InspectionResult:
    exc = TruncatedInputError(DecodeStage.FILE_HEADER, "e_entry", 24, 8, 3)
    return InspectionResult(path="broken", failure=InspectionFailure.from_error(exc))


class TestModels:

    def test_report_labels(self, ok_result) -> None:
        report = ok_result.report
        assert report.identification.endian == "little"
        assert report.identification.bits == 64
        assert report.identification.osabi_label == "UNIX - GNU"
        assert report.file_header.type_label == "EXEC (Executable file)"
        assert report.file_header.machine_label == "Advanced Micro Devices X86-64"
        assert report.program_headers[1].flags_label == "R E"
        assert report.section_headers[1].name_offset == 0x1B
        assert [s.index for s in report.section_headers] == [0, 1, 2]

    def test_unknown_machine_keeps_code(self, header_factory) -> None:
        header = parse_elf(encode_elf_header(header_factory(machine=Machine(0xABCD))))
        info = ElfReport.from_header(header).file_header
        assert info.machine == 0xABCD
        assert info.machine_label == "<unknown>: 0xabcd"

    def test_failure_from_truncation(self, failed_result) -> None:
        failure = failed_result.failure
        assert failure.kind == "TruncatedInputError"
        assert failure.stage == "file_header"
        assert failure.field == "e_entry"
        assert failure.offset == 24
        assert not failed_result.ok

    def test_duration(self, ok_result) -> None:
        assert ok_result.duration_seconds == 0.0
        assert ok_result.ok


class TestJsonReport:

    def test_build(self, ok_result, failed_result) -> None:
        data = ElfReportGenerator().build([ok_result, failed_result])
        assert data["summary"] == {"files": 2, "decoded": 1, "failed": 1}
        first = data["results"][0]
        assert first["report"]["file_header"]["entry_point"] == 0x8048080
        assert data["results"][1]["failure"]["field"] == "e_entry"

    def test_generate_json(self, tmp_path: Path, ok_result) -> None:
        target = tmp_path / "out" / "report.json"
        written = ElfReportGenerator().generate_json([ok_result], target)
        assert Path(written) == target.resolve()
        payload = json.loads(target.read_text(encoding="utf-8"))
        assert payload["report_type"] == "elfscope_header_dump"
        assert payload["results"][0]["report"]["identification"]["elf_class"] == "ELF64"


class TestConsoleDump:

    @staticmethod
    def _render(result: InspectionResult, **kwargs) -> str:
        console = ToolConsole(record=True, width=200)
        ElfConsoleOutput(console=console, **kwargs).display(result)
        return console.export_text()

    def test_full_dump(self, ok_result) -> None:
        text = self._render(ok_result)
        assert "ELF Header:" in text
        assert "Advanced Micro Devices X86-64" in text
        assert "0x8048080" in text
        assert "Program Headers" in text
        assert "GNU_STACK" in text
        assert "Section Headers" in text
        assert "STRTAB" in text

    def test_tables_can_be_hidden(self, ok_result) -> None:
        text = self._render(ok_result, show_program_headers=False, show_section_headers=False)
        assert "ELF Header:" in text
        assert "Program Headers" not in text
        assert "Section Headers" not in text

    def test_failure(self, failed_result) -> None:
        text = self._render(failed_result)
        assert "TruncatedInputError [file_header]" in text
        assert "ELF Header:" not in text
