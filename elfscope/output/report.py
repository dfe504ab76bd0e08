"""
Elfscope Report Generator
=========================

Serialises inspection results to a structured JSON document suitable for
machine consumption and downstream tooling.  Numeric fields are emitted
as integers; every enumerated field carries both its raw code and its
display label.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence

from elfscope import __version__
from elfscope.core.models import InspectionResult


class ElfReportGenerator:
    """Build and write JSON reports.

    Usage::

        generator = ElfReportGenerator()
        text = generator.render_json(results)
        generator.generate_json(results, "report.json")
    """

    def build(self, results: Sequence[InspectionResult]) -> dict[str, Any]:
        """Return the report as a JSON-compatible dictionary."""
        return {
            "report_type": "elfscope_header_dump",
            "version": __version__,
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "summary": {
                "files": len(results),
                "decoded": sum(1 for r in results if r.ok),
                "failed": sum(1 for r in results if not r.ok),
            },
            "results": [r.model_dump(mode="json") for r in results],
        }

    def render_json(self, results: Sequence[InspectionResult], indent: int = 2) -> str:
        return json.dumps(self.build(results), indent=indent, ensure_ascii=False)

    def generate_json(self, results: Sequence[InspectionResult], output_path: str | Path) -> str:
        """Write the JSON report to *output_path*.

        Returns:
            The absolute path of the generated report.
        """
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render_json(results), encoding="utf-8")
        return str(path.resolve())
