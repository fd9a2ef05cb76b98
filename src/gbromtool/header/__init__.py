"""
Game Boy Cartridge Header Handling
==================================

This module reads, checks and rebuilds the fixed-layout header that every
Game Boy and Game Boy Color cartridge image carries at 0x100-0x14F.

Overview
--------
The header holds the title, an optional manufacturer code, hardware
flags, size codes, a publisher (licensee) code and two checksums. This
module provides:
- **decode / read_rom_file**: Turn ROM bytes into a RomHeader with typed
  fields and computed validity flags
- **encode_from_record**: Rebuild a RomHeader from a stored
  CollectionRecord, carrying the record's validity flags
- **Checksum utilities**: Compute and verify the header and global
  checksums
- **Title utilities**: Split a title from its manufacturer code
- **Layout**: Field offsets and the boot logo bitmap

Quick Start
-----------
Reading a ROM:

    >>> from gbromtool.header import read_rom_file
    >>> header = read_rom_file("game.gbc")
    >>> print(header.title, header.licensee_code)
    >>> print(header.validity.all_valid)

Storing and reopening it without the file:

    >>> from gbromtool.header import CollectionRecord, encode_from_record
    >>> record = CollectionRecord.from_header(header, name="My copy")
    >>> reopened = encode_from_record(record)
    >>> reopened.validity == header.validity
    True

Reference
---------
- Pan Docs, "The Cartridge Header": https://gbdev.io/pandocs/The_Cartridge_Header.html
"""

# =============================================================================
# Public API Exports
# =============================================================================

# Layout constants and lookup
from gbromtool.header.layout import (
    BOOT_LOGO,
    CGB_ENHANCED,
    CGB_ONLY,
    HEADER_SIZE,
    NEW_LICENSEE_SENTINEL,
    SGB_SUPPORTED,
    HeaderField,
    extract_field,
    is_valid_size,
)

# Checksum utilities
from gbromtool.header.checksum import (
    ChecksumAnalysis,
    analyze_checksums,
    compute_global_checksum,
    compute_header_checksum,
    format_global_checksum,
    format_header_checksum,
    stored_global_checksum,
    stored_header_checksum,
    verify_global_checksum,
    verify_header_checksum,
)

# Title splitting
from gbromtool.header.title import (
    RomTitle,
    is_valid_manufacturer_code,
    parse_title,
    split_title,
)

# Data structures
from gbromtool.header.records import (
    CollectionRecord,
    HeaderFields,
    LicenseeCode,
    LicenseeFormat,
    Origin,
    ValidityFlags,
)

# Decoder
from gbromtool.header.parser import (
    RomHeader,
    decode,
    extract_header_fields,
    read_rom_file,
)

# Builder
from gbromtool.header.builder import (
    build_header_image,
    encode_from_record,
)

# =============================================================================
# Module-level __all__ for explicit exports
# =============================================================================

__all__ = [
    # Layout
    "BOOT_LOGO",
    "CGB_ENHANCED",
    "CGB_ONLY",
    "HEADER_SIZE",
    "NEW_LICENSEE_SENTINEL",
    "SGB_SUPPORTED",
    "HeaderField",
    "extract_field",
    "is_valid_size",
    # Checksums
    "ChecksumAnalysis",
    "analyze_checksums",
    "compute_global_checksum",
    "compute_header_checksum",
    "format_global_checksum",
    "format_header_checksum",
    "stored_global_checksum",
    "stored_header_checksum",
    "verify_global_checksum",
    "verify_header_checksum",
    # Title
    "RomTitle",
    "is_valid_manufacturer_code",
    "parse_title",
    "split_title",
    # Data structures
    "CollectionRecord",
    "HeaderFields",
    "LicenseeCode",
    "LicenseeFormat",
    "Origin",
    "ValidityFlags",
    # Decoder
    "RomHeader",
    "decode",
    "extract_header_fields",
    "read_rom_file",
    # Builder
    "build_header_image",
    "encode_from_record",
]
