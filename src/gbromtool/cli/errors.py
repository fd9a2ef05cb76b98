"""
CLI Error Handling
==================

Exit codes and the single exception handler shared by the gbrom commands.

Package errors are reported with a prefix naming what failed (the ROM
header or a collection record); a failed validation uses the same exit
code as a package error. Argument and file problems exit with 2, and
anything unexpected with 3.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from gbromtool.errors import GbRomError, HeaderError, RecordError


class ExitCode(IntEnum):
    """Exit codes of the gbrom commands."""
    SUCCESS = 0
    CHECK_FAILED = 1     # Header error, bad record, or failed validation
    INVALID_ARGS = 2     # Invalid arguments or unreadable files
    INTERNAL_ERROR = 3   # Unexpected internal error


def exit_code_for(error: BaseException) -> ExitCode:
    """Map an exception raised by a command to its exit code."""
    if isinstance(error, GbRomError):
        return ExitCode.CHECK_FAILED
    if isinstance(error, (click.BadParameter, FileNotFoundError, PermissionError)):
        return ExitCode.INVALID_ARGS
    return ExitCode.INTERNAL_ERROR


def describe_error(error: BaseException) -> str:
    """One-line message for an exception, prefixed by the part that failed."""
    if isinstance(error, HeaderError):
        return f"Header error: {error}"
    if isinstance(error, RecordError):
        return f"Record error: {error}"
    if exit_code_for(error) is ExitCode.INTERNAL_ERROR:
        return f"Internal error: {error}"
    return f"Error: {error}"


def handle_cli_exception(error: BaseException, verbose: bool = False) -> NoReturn:
    """
    Report an exception on stderr and exit with its code.

    The traceback is printed only for internal errors in verbose mode.
    """
    code = exit_code_for(error)
    click.echo(describe_error(error), err=True)
    if verbose and code is ExitCode.INTERNAL_ERROR:
        traceback.print_exc()
    sys.exit(code)
