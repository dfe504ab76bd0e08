"""
Elfscope Inspection Engine
==========================

Loads ELF files from storage and runs the decoding pipeline over them,
turning every outcome into an :class:`InspectionResult`.

The decoders are pure functions of an in-memory buffer, so a batch of
files is inspected concurrently: each file is read and decoded in the
default executor, with at most ``global.max_workers`` inspections in
flight.

Usage::

    engine = ElfscopeEngine()
    result = engine.inspect_sync("/bin/ls")
    results = asyncio.run(engine.inspect_many(["/bin/ls", "/bin/cat"]))
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from shared.config import ElfscopeConfig
from shared.logger import ToolLogger

from elfscope.core.errors import ElfDecodeError
from elfscope.core.models import ElfReport, InspectionFailure, InspectionResult
from elfscope.parsers.elf_parser import ElfParser


class ElfscopeEngine:
    """Orchestrates file loading and ELF header decoding.

    Args:
        config: Elfscope configuration.  Defaults are used if not provided.
        logger: Logger instance.  A new one is created if not provided.
    """

    def __init__(
        self,
        config: ElfscopeConfig | None = None,
        logger: ToolLogger | None = None,
    ) -> None:
        self._config: ElfscopeConfig = config or ElfscopeConfig()
        self._logger: ToolLogger = logger or ToolLogger(
            "engine", log_level=self._config.global_settings.log_level
        )

    @property
    def config(self) -> ElfscopeConfig:
        return self._config

    # ------------------------------------------------------------------ #
    #  Entry points
    # ------------------------------------------------------------------ #

    def inspect_bytes(
        self,
        data: bytes,
        path: str = "<memory>",
        result: InspectionResult | None = None,
    ) -> InspectionResult:
        """Decode an already-loaded buffer.

        A *result* started by the caller is completed in place, so its
        timing also covers whatever the caller did before decoding.
        """
        if result is None:
            result = InspectionResult(path=path)
        settings = self._config.elfscope

        with self._logger.operation("decode"):
            parser = ElfParser(data, strict_file_type=settings.strict_file_type)
            try:
                header = parser.parse()
            except ElfDecodeError as exc:
                self._logger.warning(
                    "Decoding %s failed at %s: %s",
                    path, exc.stage.value, exc.reason,
                )
                result.failure = InspectionFailure.from_error(exc)
            else:
                self._logger.debug(
                    "%s: %s %s, %d program headers, %d section headers",
                    path,
                    header.elf_class.label,
                    header.data_encoding.name,
                    len(header.program_headers),
                    len(header.section_headers),
                )
                result.report = ElfReport.from_header(header, path=path, size=len(data))

        result.finished_at = datetime.now(timezone.utc)
        return result

    def inspect_sync(self, file_path: str | Path) -> InspectionResult:
        """Load *file_path* and decode it."""
        path = Path(file_path)
        display = str(path)
        max_size = self._config.elfscope.max_file_size
        result = InspectionResult(path=display)

        with self._logger.operation("load"):
            try:
                size = path.stat().st_size
                if size > max_size:
                    return self._file_failure(
                        result,
                        f"File too large: {size:,} bytes (max: {max_size:,} bytes)",
                    )
                data = path.read_bytes()
            except OSError as exc:
                return self._file_failure(result, f"{exc.strerror or exc}: {display}")

        self._logger.info("Inspecting %s (%d bytes)", display, len(data))
        return self.inspect_bytes(data, path=display, result=result)

    async def inspect(self, file_path: str | Path) -> InspectionResult:
        """Async wrapper running :meth:`inspect_sync` in the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.inspect_sync, file_path)

    async def inspect_many(
        self, file_paths: Sequence[str | Path]
    ) -> list[InspectionResult]:
        """Inspect several files concurrently, preserving input order."""
        limit = asyncio.Semaphore(max(1, self._config.global_settings.max_workers))

        async def _bounded(path: str | Path) -> InspectionResult:
            async with limit:
                return await self.inspect(path)

        with self._logger.timed(f"inspection of {len(file_paths)} file(s)"):
            results = await asyncio.gather(*(_bounded(p) for p in file_paths))

        failed = sum(1 for r in results if not r.ok)
        if failed:
            self._logger.warning("%d of %d file(s) could not be decoded", failed, len(results))
        return list(results)

    # ------------------------------------------------------------------ #
    #  Helpers
    # ------------------------------------------------------------------ #

    def _file_failure(self, result: InspectionResult, message: str) -> InspectionResult:
        self._logger.error(message)
        result.failure = InspectionFailure(kind="FileError", message=message)
        result.finished_at = datetime.now(timezone.utc)
        return result
