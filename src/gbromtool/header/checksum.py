"""
Cartridge Header Checksums
==========================

This module provides the two checksums defined by the cartridge header.

Header Checksum
---------------
One byte at 0x14D covering the header bytes 0x134-0x14C. The boot ROM
computes it as:

    uint8_t checksum = 0;
    for (uint16_t address = 0x0134; address <= 0x014C; address++) {
        checksum = checksum - rom[address] - 1;
    }

The accumulator is truncated to 8 bits after every step. Real hardware
refuses to boot a cartridge whose header checksum does not match.

Global Checksum
---------------
Two bytes at 0x14E-0x14F, big-endian: the 16-bit sum of every byte in
the image except the two checksum bytes themselves. Hardware never
checks it, so patched ROMs and homebrew often carry a stale value.

Neither mismatch is an error. Functions here return booleans (or a
ChecksumAnalysis) and the caller decides what to do. The compute
functions raise ValueError for buffers shorter than 0x150 bytes.
"""

from dataclasses import dataclass

from gbromtool.header.layout import (
    HEADER_CHECKSUM_END,
    HEADER_CHECKSUM_START,
    HEADER_SIZE,
    HeaderField,
)


@dataclass
class ChecksumAnalysis:
    """
    Result of analyzing both header checksums.

    Attributes:
        header_valid: True if the header checksum matches
        stored_header: Header checksum byte stored at 0x14D
        calculated_header: Header checksum computed from 0x134-0x14C
        global_valid: True if the global checksum matches
        stored_global: Global checksum word stored at 0x14E
        calculated_global: Global checksum computed over the image
        message: Human-readable explanation of the analysis
    """
    header_valid: bool
    stored_header: int
    calculated_header: int
    global_valid: bool
    stored_global: int
    calculated_global: int
    message: str = ""


def _require_header(data: bytes) -> None:
    if len(data) < HEADER_SIZE:
        raise ValueError(
            f"Image too short: need at least {HEADER_SIZE} bytes, got {len(data)}"
        )


# =============================================================================
# Header Checksum
# =============================================================================

def compute_header_checksum(data: bytes) -> int:
    """
    Compute the header checksum the way the boot ROM does.

    Args:
        data: ROM image (at least 0x150 bytes)

    Returns:
        8-bit checksum value (0x00 - 0xFF)

    Example:
        >>> image = bytes(0x150)
        >>> f"0x{compute_header_checksum(image):02X}"
        '0xE7'
    """
    _require_header(data)

    checksum = 0
    for address in range(HEADER_CHECKSUM_START, HEADER_CHECKSUM_END + 1):
        checksum = (checksum - data[address] - 1) & 0xFF
    return checksum


def stored_header_checksum(data: bytes) -> int:
    """Return the header checksum byte stored at 0x14D."""
    return data[HeaderField.HEADER_CHECKSUM.offset]


def verify_header_checksum(data: bytes) -> bool:
    """
    Verify the stored header checksum against the computed one.

    Args:
        data: ROM image (at least 0x150 bytes)

    Returns:
        True if the checksums match, False otherwise
    """
    return compute_header_checksum(data) == stored_header_checksum(data)


# =============================================================================
# Global Checksum
# =============================================================================

def compute_global_checksum(data: bytes) -> int:
    """
    Compute the global checksum over the whole image.

    Every byte is summed except the two checksum bytes at 0x14E-0x14F,
    and the result is truncated to 16 bits.

    Args:
        data: ROM image (at least 0x150 bytes)

    Returns:
        16-bit checksum value (0x0000 - 0xFFFF)
    """
    _require_header(data)

    checksum_field = HeaderField.GLOBAL_CHECKSUM
    total = sum(data) - sum(data[checksum_field.span])
    return total & 0xFFFF


def stored_global_checksum(data: bytes) -> int:
    """Return the big-endian global checksum word stored at 0x14E."""
    return int.from_bytes(data[HeaderField.GLOBAL_CHECKSUM.span], "big")


def verify_global_checksum(data: bytes) -> bool:
    """
    Verify the stored global checksum against the computed one.

    Args:
        data: ROM image (at least 0x150 bytes)

    Returns:
        True if the checksums match, False otherwise
    """
    return compute_global_checksum(data) == stored_global_checksum(data)


# =============================================================================
# Display Helpers
# =============================================================================

def format_header_checksum(value: int) -> str:
    """Render a header checksum as 2 uppercase hex digits."""
    return f"{value & 0xFF:02X}"


def format_global_checksum(value: int) -> str:
    """Render a global checksum as 4 uppercase hex digits."""
    return f"{value & 0xFFFF:04X}"


# =============================================================================
# Combined Analysis
# =============================================================================

def analyze_checksums(data: bytes) -> ChecksumAnalysis:
    """
    Compute, compare and describe both checksums of an image.

    Args:
        data: ROM image (at least 0x150 bytes)

    Returns:
        ChecksumAnalysis with stored and calculated values

    Example:
        >>> analysis = analyze_checksums(rom_bytes)
        >>> if not analysis.header_valid:
        ...     print(analysis.message)
    """
    stored_header = stored_header_checksum(data)
    calculated_header = compute_header_checksum(data)
    stored_global = stored_global_checksum(data)
    calculated_global = compute_global_checksum(data)

    header_valid = stored_header == calculated_header
    global_valid = stored_global == calculated_global

    problems = []
    if not header_valid:
        problems.append(
            f"header checksum mismatch: stored 0x{format_header_checksum(stored_header)}, "
            f"calculated 0x{format_header_checksum(calculated_header)}"
        )
    if not global_valid:
        problems.append(
            f"global checksum mismatch: stored 0x{format_global_checksum(stored_global)}, "
            f"calculated 0x{format_global_checksum(calculated_global)}"
        )

    return ChecksumAnalysis(
        header_valid=header_valid,
        stored_header=stored_header,
        calculated_header=calculated_header,
        global_valid=global_valid,
        stored_global=stored_global,
        calculated_global=calculated_global,
        message="; ".join(problems) if problems else "Checksums valid",
    )
