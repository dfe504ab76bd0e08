"""
Elfscope Output
===============

Console and JSON presentation of inspection results.
"""

from elfscope.output.console import ElfConsoleOutput
from elfscope.output.report import ElfReportGenerator

__all__ = ["ElfConsoleOutput", "ElfReportGenerator"]
