"""
Elfscope CLI -- ELF Header Inspector
====================================

Click-based command-line interface for decoding the identification block,
file header, program header table and section header table of one or
more ELF files.

Usage::

    # readelf-style dump
    elfscope /bin/ls

    # Several files, decoded concurrently
    elfscope /bin/ls /bin/cat /usr/lib/libc.so.6

    # Machine-readable output
    elfscope /bin/ls --json

    # Write a JSON report alongside the console dump
    elfscope /bin/ls --output report.json

    # Reject unknown e_type values
    elfscope firmware.elf --strict-type

References:
    - Click documentation: https://click.palletsprojects.com/
"""

from __future__ import annotations

import asyncio
import sys

import click

from shared.config import ElfscopeConfig
from shared.console import ToolConsole
from shared.logger import ToolLogger

from elfscope import __version__
from elfscope.core.engine import ElfscopeEngine
from elfscope.output.console import ElfConsoleOutput
from elfscope.output.report import ElfReportGenerator


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------

@click.command("elfscope")
@click.argument("paths", nargs=-1, required=True, type=click.Path())
@click.option(
    "--json", "json_output",
    is_flag=True,
    default=False,
    help="Print results as JSON to stdout instead of the console dump.",
)
@click.option(
    "--output", "-o",
    "output_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also write a JSON report to this path.",
)
@click.option(
    "--no-program-headers",
    is_flag=True,
    default=False,
    help="Omit the program header table from the console dump.",
)
@click.option(
    "--no-section-headers",
    is_flag=True,
    default=False,
    help="Omit the section header table from the console dump.",
)
@click.option(
    "--strict-type",
    is_flag=True,
    default=False,
    help="Fail on e_type values outside the known set.",
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="TOML configuration file (default: config.toml in the project root).",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging.",
)
@click.version_option(__version__, prog_name="elfscope")
def elfscope_cli(
    paths: tuple[str, ...],
    json_output: bool,
    output_path: str | None,
    no_program_headers: bool,
    no_section_headers: bool,
    strict_type: bool,
    config_path: str | None,
    verbose: bool,
) -> None:
    """Elfscope -- ELF header inspector.

    Decode the ELF identification, file header, program headers and
    section headers of every PATH.  Exits with status 1 if any file
    could not be decoded.

    Examples:

    \b
        elfscope /usr/bin/ls
        elfscope build/*.o --no-program-headers
        elfscope vmlinux --json > vmlinux.json
    """
    console = ToolConsole()

    try:
        config = ElfscopeConfig.load(config_path)
    except (OSError, ValueError) as exc:
        console.error(f"Could not load configuration: {exc}")
        sys.exit(2)

    if strict_type:
        config.elfscope.strict_file_type = True

    gs = config.global_settings
    logger = ToolLogger(
        "cli",
        log_level="DEBUG" if verbose or gs.debug else gs.log_level,
        log_file=gs.log_file or None,
        json_logs=gs.log_json,
    )
    engine = ElfscopeEngine(config=config, logger=logger)

    try:
        results = asyncio.run(engine.inspect_many(list(paths)))
    except KeyboardInterrupt:
        console.warning("Inspection interrupted by user.")
        sys.exit(130)

    report_gen = ElfReportGenerator()

    if json_output:
        click.echo(report_gen.render_json(results))
    else:
        output = ElfConsoleOutput(
            console=console,
            show_program_headers=config.elfscope.show_program_headers and not no_program_headers,
            show_section_headers=config.elfscope.show_section_headers and not no_section_headers,
        )
        for result in results:
            output.display(result)

    if output_path:
        report_path = report_gen.generate_json(results, output_path)
        logger.info("JSON report saved: %s", report_path)
        if not json_output:
            console.success(f"JSON report saved: {report_path}")

    failed = sum(1 for r in results if not r.ok)
    if failed:
        if not json_output:
            console.warning(f"{failed} of {len(results)} file(s) could not be decoded.")
        sys.exit(1)


# ---------------------------------------------------------------------------
# Module entry point
# ---------------------------------------------------------------------------

def main() -> None:
    """Entry point for the ``elfscope`` console script."""
    elfscope_cli()


if __name__ == "__main__":
    main()
