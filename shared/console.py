"""
Elfscope Console Interface
==========================

Rich-powered console abstraction providing the presentation primitives
used by the elfscope output layer: section rules, severity-coloured
status messages, field lists and tables with a consistent palette.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from typing import Any, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

_ELFSCOPE_THEME = Theme(
    {
        "elfscope.section": "bold bright_magenta",
        "elfscope.success": "bold green",
        "elfscope.warning": "bold yellow",
        "elfscope.error": "bold red",
        "elfscope.info": "bold bright_blue",
        "elfscope.dim": "dim white",
        "elfscope.key": "bold bright_white",
        "elfscope.value": "bright_cyan",
        "elfscope.unknown": "italic yellow",
    }
)


class ToolConsole:
    """Unified console interface for elfscope output.

    Usage::

        con = ToolConsole()
        con.section("ELF Header")
        con.fields([("Class", "ELF64"), ("Data", "2's complement, little endian")])
        con.success("Decoded 3 files")
    """

    def __init__(
        self,
        *,
        quiet: bool = False,
        record: bool = False,
        stderr: bool = False,
        width: int | None = None,
    ) -> None:
        """Initialise the console.

        Args:
            quiet:  Suppress all output (useful in library / test mode).
            record: Enable Rich recording for text export.
            stderr: Write to standard error instead of standard output.
            width:  Fixed console width; ``None`` autodetects.
        """
        self._console = Console(
            theme=_ELFSCOPE_THEME,
            quiet=quiet,
            record=record,
            stderr=stderr,
            width=width,
            highlight=False,
        )

    # ------------------------------------------------------------------ #
    #  Section header
    # ------------------------------------------------------------------ #

    def section(self, title: str) -> None:
        """Print a section rule carrying *title*."""
        self._console.rule(
            f"  {escape(title)}  ",
            style="elfscope.section",
            characters="─",
        )

    # ------------------------------------------------------------------ #
    #  Message helpers (severity-coloured)
    # ------------------------------------------------------------------ #

    def success(self, message: str) -> None:
        self._console.print(
            f"[elfscope.success][✔] OK:[/elfscope.success] {escape(message)}"
        )

    def warning(self, message: str) -> None:
        self._console.print(
            f"[elfscope.warning][⚠] WARNING:[/elfscope.warning] {escape(message)}"
        )

    def error(self, message: str) -> None:
        self._console.print(
            f"[elfscope.error][✘] ERROR:[/elfscope.error] {escape(message)}"
        )

    def info(self, message: str) -> None:
        self._console.print(
            f"[elfscope.info][ℹ] INFO:[/elfscope.info] {escape(message)}"
        )

    # ------------------------------------------------------------------ #
    #  Structured display
    # ------------------------------------------------------------------ #

    def fields(self, pairs: Sequence[tuple[str, Any]], *, key_width: int = 36) -> None:
        """Render ``key: value`` lines with aligned values.

        Args:
            pairs:     ``(label, value)`` tuples, printed in order.
            key_width: Column at which values start.
        """
        for key, value in pairs:
            label = escape(f"{key}:".ljust(key_width))
            self._console.print(
                f"  [elfscope.key]{label}[/elfscope.key]"
                f"[elfscope.value]{escape(str(value))}[/elfscope.value]"
            )

    def table(
        self,
        title: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        *,
        caption: str | None = None,
        styles: Sequence[str] | None = None,
        justify: Sequence[str] | None = None,
    ) -> None:
        """Render a styled Rich table.

        Args:
            title:    Table title.
            columns:  Column header labels.
            rows:     Iterable of row tuples; each element is stringified.
            caption:  Optional footer caption.
            styles:   Optional per-column Rich style strings.
            justify:  Optional per-column justification (``"left"``, ``"right"``).
        """
        tbl = Table(
            title=title,
            caption=caption,
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=False,
            padding=(0, 1),
        )
        for idx, col_name in enumerate(columns):
            style = styles[idx] if styles and idx < len(styles) else ""
            just = justify[idx] if justify and idx < len(justify) else "left"
            tbl.add_column(col_name, style=style, justify=just)  # type: ignore[arg-type]

        for row in rows:
            tbl.add_row(*(escape(str(cell)) for cell in row))

        self._console.print(tbl)

    # ------------------------------------------------------------------ #
    #  Utility
    # ------------------------------------------------------------------ #

    def print(self, *args: Any, **kwargs: Any) -> None:
        """Proxy to :meth:`rich.console.Console.print`."""
        self._console.print(*args, **kwargs)

    def blank(self, count: int = 1) -> None:
        """Print *count* blank lines."""
        for _ in range(count):
            self._console.print()

    def export_text(self) -> str:
        """Export recorded console output as plain text (requires ``record=True``)."""
        return self._console.export_text()
