"""
GB ROM Tool - Game Boy Cartridge Header Toolkit
===============================================

This package reads, validates and rebuilds the metadata header embedded
in Game Boy and Game Boy Color cartridge images (.gb, .gbc).

Main Components
---------------
- **header**: Header codec
    Extracts typed fields, verifies the header checksum, global checksum
    and boot logo, splits manufacturer codes off titles, and rebuilds a
    minimal image from a stored collection record

- **cli**: Command-line tool (gbrom)
    Inspect and validate ROM files, export collection records as JSON,
    and rebuild headers from them

Quick Start
-----------
Inspect a ROM:
    >>> from gbromtool import read_rom_file
    >>> header = read_rom_file("game.gbc")
    >>> print(header.summary())

Or use the command-line tool:
    $ gbrom info game.gbc
    $ gbrom validate game.gbc
    $ gbrom export game.gbc -n "My copy" -o game.json
    $ gbrom rebuild game.json

Version History
---------------
1.0.0 - Initial release with header codec and gbrom CLI
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from gbromtool.errors import (
    GbRomError,
    HeaderError,
    FormatError,
    RomFileError,
    RecordError,
)

from gbromtool.config import (
    ToolConfig,
    get_default_config,
    set_default_config,
)

from gbromtool.header import (
    BOOT_LOGO,
    HeaderField,
    is_valid_size,
    compute_header_checksum,
    compute_global_checksum,
    verify_header_checksum,
    verify_global_checksum,
    RomTitle,
    split_title,
    CollectionRecord,
    HeaderFields,
    LicenseeCode,
    Origin,
    ValidityFlags,
    RomHeader,
    decode,
    read_rom_file,
    encode_from_record,
)

__all__ = [
    # Version info
    "__version__",
    # Exception hierarchy
    "GbRomError",
    "HeaderError",
    "FormatError",
    "RomFileError",
    "RecordError",
    # Configuration
    "ToolConfig",
    "get_default_config",
    "set_default_config",
    # Header codec
    "BOOT_LOGO",
    "HeaderField",
    "is_valid_size",
    "compute_header_checksum",
    "compute_global_checksum",
    "verify_header_checksum",
    "verify_global_checksum",
    "RomTitle",
    "split_title",
    "CollectionRecord",
    "HeaderFields",
    "LicenseeCode",
    "Origin",
    "ValidityFlags",
    "RomHeader",
    "decode",
    "read_rom_file",
    "encode_from_record",
]
