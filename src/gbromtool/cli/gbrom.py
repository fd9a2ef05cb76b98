"""
gbrom - Cartridge Header Tool Command-Line Interface
====================================================

This module implements the command-line interface for the header codec.
It inspects Game Boy ROM files, checks their integrity and converts
headers to and from the JSON collection records the codec persists.

Commands
--------
- **info**: Show every decoded header field
- **validate**: Check header checksum, global checksum and boot logo
- **export**: Write the collection record for a ROM as JSON
- **rebuild**: Rebuild a header from a JSON collection record

Usage Examples
--------------
Show the header of a ROM:
    $ gbrom info game.gbc

Check a dump before adding it to a collection:
    $ gbrom validate game.gbc

Export a record and reopen it without the ROM:
    $ gbrom export game.gbc -n "Gold, boxed" -o gold.json
    $ gbrom rebuild gold.json -o gold-header.gbc

Exit Codes
----------
See cli/errors.py. validate exits with 1 when any check fails.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import click

from gbromtool import __version__
from gbromtool.config import ToolConfig, get_default_config
from gbromtool.errors import RecordError
from gbromtool.header import (
    CollectionRecord,
    RomHeader,
    analyze_checksums,
    encode_from_record,
    read_rom_file,
)
from gbromtool.cli.errors import ExitCode, handle_cli_exception

logger = logging.getLogger(__name__)


# =============================================================================
# CLI Context and Utilities
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Stores the verbosity flag and the active configuration.
    """

    def __init__(self) -> None:
        self.verbose: bool = False
        self.config: ToolConfig = get_default_config()

    def setup_logging(self) -> None:
        """Configure logging based on verbosity and the configured level."""
        level = logging.DEBUG if self.verbose else self.config.log_level
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s" if self.verbose else "%(message)s",
        )


pass_context = click.make_pass_decorator(Context, ensure=True)


# Labels for the summary keys, in display order
_SUMMARY_LABELS = [
    ("title", "Title"),
    ("manufacturer_code", "Manufacturer"),
    ("licensee_code", "Licensee"),
    ("licensee_format", "Licensee Fmt"),
    ("cartridge_type", "Cart Type"),
    ("rom_size_code", "ROM Size"),
    ("ram_size_code", "RAM Size"),
    ("cgb_flag", "CGB Flag"),
    ("sgb_flag", "SGB Support"),
    ("destination_code", "Destination"),
    ("mask_rom_version", "Revision"),
    ("header_checksum", "Header Sum"),
    ("global_checksum", "Global Sum"),
]


def _check_mark(passed: bool) -> str:
    return "OK" if passed else "FAILED"


def _displayable(value: Any) -> str:
    """Render a summary value for the terminal, escaping NULs and control characters."""
    if value == "":
        return "-"
    if not isinstance(value, str):
        return str(value)
    return "".join(c if c.isprintable() else f"\\x{ord(c):02x}" for c in value)


def print_header(header: RomHeader, heading: str) -> None:
    """Print a header summary as aligned label/value lines."""
    summary = header.summary()

    click.echo(heading)
    click.echo("=" * 40)
    for key, label in _SUMMARY_LABELS:
        click.echo(f"{label + ':':<14}{_displayable(summary[key])}")

    click.echo()
    source = "stored record" if header.is_from_record else "computed"
    click.echo(f"Integrity ({source}):")
    click.echo(f"  Header checksum: {_check_mark(header.validity.header_checksum_valid)}")
    click.echo(f"  Global checksum: {_check_mark(header.validity.global_checksum_valid)}")
    click.echo(f"  Boot logo:       {_check_mark(header.validity.boot_logo_valid)}")


def load_record(record_file: Path) -> CollectionRecord:
    """
    Read a JSON collection record.

    Raises:
        RecordError: If the file is not a JSON object or the record is invalid
    """
    try:
        mapping: Any = json.loads(record_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise RecordError(f"{record_file.name} is not valid JSON: {e}") from e

    if not isinstance(mapping, dict):
        raise RecordError(f"{record_file.name} does not hold a record object")

    return CollectionRecord.from_dict(mapping)


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable debug output",
)
@click.version_option(__version__, "--version", "-V", prog_name="gbrom")
@pass_context
def main(ctx: Context, verbose: bool) -> None:
    """
    Game Boy cartridge header tool.

    Inspect and validate ROM files (.gb, .gbc) and convert their headers
    to and from JSON collection records.

    \b
    Commands:
      info      Show decoded header fields
      validate  Check checksums and boot logo
      export    Write the collection record as JSON
      rebuild   Rebuild a header from a JSON record

    \b
    Examples:
      gbrom info game.gbc
      gbrom validate game.gbc
      gbrom export game.gbc -n "My copy" -o game.json
      gbrom rebuild game.json

    Reference: https://gbdev.io/pandocs/The_Cartridge_Header.html
    """
    ctx.verbose = verbose
    ctx.setup_logging()


# =============================================================================
# Info Command
# =============================================================================

@main.command("info")
@click.argument(
    "rom_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--json", "as_json",
    is_flag=True,
    help="Print the header summary as JSON",
)
@pass_context
def cmd_info(ctx: Context, rom_file: Path, as_json: bool) -> None:
    """
    Show the decoded header of a ROM file.

    \b
    Example:
      gbrom info game.gbc
    """
    try:
        header = read_rom_file(rom_file, ctx.config)

        if as_json:
            click.echo(json.dumps(header.summary(), indent=ctx.config.json_indent))
        else:
            print_header(header, f"ROM Information: {rom_file}")

    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


# =============================================================================
# Validate Command
# =============================================================================

@main.command("validate")
@click.argument(
    "rom_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@pass_context
def cmd_validate(ctx: Context, rom_file: Path) -> None:
    """
    Check the header checksum, global checksum and boot logo.

    Exits with status 1 if any check fails.

    \b
    Example:
      gbrom validate game.gbc
    """
    try:
        header = read_rom_file(rom_file, ctx.config)
        validity = header.validity

        click.echo(f"Header checksum: {_check_mark(validity.header_checksum_valid)}")
        click.echo(f"Global checksum: {_check_mark(validity.global_checksum_valid)}")
        click.echo(f"Boot logo:       {_check_mark(validity.boot_logo_valid)}")

        if validity.all_valid:
            click.echo(f"\nValidation PASSED: {rom_file}")
        else:
            analysis = analyze_checksums(header.data)
            click.echo(f"\nValidation FAILED: {', '.join(validity.failures())}")
            if not (analysis.header_valid and analysis.global_valid):
                click.echo(f"  {analysis.message}")
            sys.exit(ExitCode.CHECK_FAILED)

    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


# =============================================================================
# Export Command
# =============================================================================

@main.command("export")
@click.argument(
    "rom_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-n", "--name",
    required=True,
    help="Collection entry name (up to 200 characters)",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output JSON file (default: print to stdout)",
)
@pass_context
def cmd_export(ctx: Context, rom_file: Path, name: str, output: Optional[Path]) -> None:
    """
    Write the collection record of a ROM file as JSON.

    The record keeps the validity flags computed from the file, so it can
    be rebuilt later without the ROM.

    \b
    Example:
      gbrom export game.gbc -n "My copy" -o game.json
    """
    try:
        header = read_rom_file(rom_file, ctx.config)
        record = CollectionRecord.from_header(header, name=name)
        text = json.dumps(record.to_dict(), indent=ctx.config.json_indent)

        if output is None:
            click.echo(text)
        else:
            output.write_text(text + "\n", encoding="utf-8")
            click.echo(f"Exported '{record.title}' to {output}")

    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


# =============================================================================
# Rebuild Command
# =============================================================================

@main.command("rebuild")
@click.argument(
    "record_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the rebuilt 0x150-byte header image to this file",
)
@pass_context
def cmd_rebuild(ctx: Context, record_file: Path, output: Optional[Path]) -> None:
    """
    Rebuild a header from a JSON collection record.

    The integrity results shown are the ones stored in the record; the
    rebuilt image is not checked again.

    \b
    Example:
      gbrom rebuild game.json -o header.gbc
    """
    try:
        record = load_record(record_file)
        header = encode_from_record(record)

        heading = f"Record: {record.name}" if record.name else f"Record: {record_file}"
        print_header(header, heading)

        if output is not None:
            output.write_bytes(header.data)
            click.echo(f"\nWrote {len(header.data)} bytes to {output}")

    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
