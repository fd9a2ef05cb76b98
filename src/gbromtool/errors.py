"""
GB ROM Tool Error Hierarchy
===========================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from GbRomError, allowing callers to catch every
package-related error with a single except clause if desired.

Exception Hierarchy
-------------------
GbRomError (base)
├── HeaderError (cartridge header handling)
│   ├── FormatError - buffer is too small to hold a cartridge header
│   └── RomFileError - ROM file cannot be used (wrong extension)
└── RecordError - persisted collection record violates its constraints

What Is NOT an Error
--------------------
Checksum and boot logo mismatches are never raised. Many real-world
dumps carry patched or non-standard checksums, so the header codec
reports them as boolean ValidityFlags and the caller decides what to do.
Likewise, a title whose tail does not look like a manufacturer code is
simply kept as title text.
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class GbRomError(Exception):
    """
    Base exception for all GB ROM Tool errors.

    All exceptions in the package inherit from this class, allowing
    callers to catch every package-related error with a single clause:

        try:
            header = read_rom_file("game.gbc")
        except GbRomError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Header Exceptions
# =============================================================================

class HeaderError(GbRomError):
    """Base exception for cartridge header handling errors."""
    pass


class FormatError(HeaderError):
    """
    Buffer cannot hold a cartridge header.

    Raised by the decoder before any field is read when the buffer is
    shorter than the end of the global checksum field (0x150 bytes).
    No partial extraction is ever attempted.

    Attributes:
        size: Actual size of the rejected buffer (optional)
        required: Minimum size a buffer must have (optional)
    """

    def __init__(
        self,
        message: str = "buffer too small",
        size: Optional[int] = None,
        required: Optional[int] = None,
    ):
        self.size = size
        self.required = required
        if size is not None and required is not None:
            message = f"{message}: {size} bytes, need at least {required}"
        super().__init__(message)


class RomFileError(HeaderError):
    """
    ROM file cannot be loaded.

    Raised when a path does not carry one of the accepted ROM file
    extensions (.gb and .gbc by default).
    """
    pass


# =============================================================================
# Record Exceptions
# =============================================================================

class RecordError(GbRomError):
    """
    Invalid collection record.

    Raised when a persisted record is constructed or rehydrated with
    values that the header layout cannot represent:
    - Missing or over-long name or title
    - Licensee code that is neither 1 nor 2 bytes
    - Single-byte fields outside 0-255
    - Global checksum that is not exactly 2 bytes
    - Malformed serialized mapping (missing keys, bad hex)
    """
    pass
