"""
Cartridge Header Layout
=======================

Static description of the Game Boy / Game Boy Color cartridge header.
Every field lives at a fixed offset in the first 0x150 bytes of the
image; nothing here has behaviour beyond lookup.

Header Map
----------
    Offset  Size  Field
    ------  ----  -----
    0x104   48    Boot logo (checked by the boot ROM)
    0x134   15    Title (ASCII, NUL padded)
    0x13F   4     Manufacturer code (optional, overlaps title tail)
    0x143   1     CGB flag (0x80 enhanced, 0xC0 Color-only)
    0x144   2     New licensee code (ASCII)
    0x146   1     SGB flag (0x03 = SGB functions)
    0x147   1     Cartridge type
    0x148   1     ROM size code
    0x149   1     RAM size code
    0x14A   1     Destination code
    0x14B   1     Old licensee code (0x33 = use new code)
    0x14C   1     Mask ROM version
    0x14D   1     Header checksum
    0x14E   2     Global checksum (big-endian)

The title is always read as 15 bytes. Older DMG carts used 16 bytes and
ran into 0x143, but that byte is the CGB flag and is never treated as
title text here.

Reference
---------
- Pan Docs, "The Cartridge Header": https://gbdev.io/pandocs/The_Cartridge_Header.html
"""

from enum import Enum


# =============================================================================
# Constants
# =============================================================================

# Boot logo bitmap at 0x104-0x133
BOOT_LOGO = bytes([
    0xCE, 0xED, 0x66, 0x66, 0xCC, 0x0D, 0x00, 0x0B,
    0x03, 0x73, 0x00, 0x83, 0x00, 0x0C, 0x00, 0x0D,
    0x00, 0x08, 0x11, 0x1F, 0x88, 0x89, 0x00, 0x0E,
    0xDC, 0xCC, 0x6E, 0xE6, 0xDD, 0xDD, 0xD9, 0x99,
    0xBB, 0xBB, 0x67, 0x63, 0x6E, 0x0E, 0xEC, 0xCC,
    0xDD, 0xDC, 0x99, 0x9F, 0xBB, 0xB9, 0x33, 0x3E,
])

# CGB flag values that mark a Color-compatible cartridge
CGB_ENHANCED = 0x80
CGB_ONLY = 0xC0
CGB_FLAGS = (CGB_ENHANCED, CGB_ONLY)

# SGB flag value that enables Super Game Boy functions
SGB_SUPPORTED = 0x03

# Old licensee byte that redirects to the 2-byte new licensee code
NEW_LICENSEE_SENTINEL = 0x33

# Header checksum covers 0x134-0x14C inclusive
HEADER_CHECKSUM_START = 0x134
HEADER_CHECKSUM_END = 0x14C


# =============================================================================
# Field Table
# =============================================================================

class HeaderField(Enum):
    """
    Named header fields as (offset, length) pairs.

    Example:
        >>> HeaderField.TITLE.offset
        308
        >>> HeaderField.GLOBAL_CHECKSUM.end
        336
    """
    BOOT_LOGO = (0x104, 48)
    TITLE = (0x134, 15)
    MANUFACTURER_CODE = (0x13F, 4)
    CGB_FLAG = (0x143, 1)
    NEW_LICENSEE_CODE = (0x144, 2)
    SGB_FLAG = (0x146, 1)
    CARTRIDGE_TYPE = (0x147, 1)
    ROM_SIZE = (0x148, 1)
    RAM_SIZE = (0x149, 1)
    DESTINATION_CODE = (0x14A, 1)
    OLD_LICENSEE_CODE = (0x14B, 1)
    MASK_ROM_VERSION = (0x14C, 1)
    HEADER_CHECKSUM = (0x14D, 1)
    GLOBAL_CHECKSUM = (0x14E, 2)

    def __init__(self, offset: int, length: int):
        self.offset = offset
        self.length = length

    @property
    def end(self) -> int:
        """Offset one past the last byte of the field."""
        return self.offset + self.length

    @property
    def span(self) -> slice:
        """Slice selecting the field from a full image."""
        return slice(self.offset, self.end)


# Size of a synthesized header image; also the minimum size of a ROM file
HEADER_SIZE = HeaderField.GLOBAL_CHECKSUM.end


# =============================================================================
# Lookup Helpers
# =============================================================================

def is_valid_size(size: int) -> bool:
    """
    Check that a buffer is large enough to hold the whole header.

    Args:
        size: Buffer length in bytes

    Returns:
        True if the buffer reaches past the global checksum field
    """
    return size >= HEADER_SIZE


def extract_field(data: bytes, header_field: HeaderField) -> bytes:
    """
    Return the raw bytes of a header field.

    The caller owns the size check; use is_valid_size() first.

    Args:
        data: Complete ROM image (at least HEADER_SIZE bytes)
        header_field: Field to extract

    Returns:
        A new bytes object of exactly header_field.length bytes
    """
    return bytes(data[header_field.span])
