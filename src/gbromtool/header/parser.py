"""
Cartridge Header Decoder
========================

This module reads the cartridge header out of a ROM image.

RomHeader
---------
A RomHeader bundles the image bytes, the typed HeaderFields, the
ValidityFlags and the Origin. It is built once per load and never
changes. Headers decoded from a file and headers rebuilt from a stored
record (see builder.py) expose exactly the same accessors; only the way
the validity flags were obtained differs:

- Origin.FROM_FILE: flags are computed from the image
- Origin.FROM_RECORD: flags are copied from the record

Usage Examples
--------------
Decoding a file:
    >>> from gbromtool.header import read_rom_file
    >>> header = read_rom_file("game.gbc")
    >>> print(header.title, header.manufacturer_code)
    >>> if not header.validity.all_valid:
    ...     print("Failed:", ", ".join(header.validity.failures()))

Decoding bytes already in memory:
    >>> header = decode(rom_bytes)
    >>> print(f"Header checksum: {header.header_checksum_hex}")
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union
import logging

from gbromtool.config import ToolConfig, get_default_config
from gbromtool.errors import FormatError, RomFileError
from gbromtool.header.checksum import verify_global_checksum, verify_header_checksum
from gbromtool.header.layout import (
    BOOT_LOGO,
    HEADER_SIZE,
    NEW_LICENSEE_SENTINEL,
    SGB_SUPPORTED,
    HeaderField,
    extract_field,
    is_valid_size,
)
from gbromtool.header.records import (
    HeaderFields,
    LicenseeCode,
    Origin,
    ValidityFlags,
)
from gbromtool.header.title import split_title

# Logger for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Field Extraction
# =============================================================================

def read_licensee_code(data: bytes) -> LicenseeCode:
    """
    Read the licensee code in whichever format the header uses.

    If the old licensee byte at 0x14B is the sentinel 0x33, the two bytes
    at 0x144-0x145 are the code; otherwise the old byte is.
    """
    old_code = data[HeaderField.OLD_LICENSEE_CODE.offset]
    if old_code == NEW_LICENSEE_SENTINEL:
        return LicenseeCode(extract_field(data, HeaderField.NEW_LICENSEE_CODE))
    return LicenseeCode(bytes([old_code]))


def extract_header_fields(data: bytes) -> HeaderFields:
    """
    Extract every header field from an image.

    The caller owns the size check; use is_valid_size() first.

    Args:
        data: ROM image (at least 0x150 bytes)

    Returns:
        HeaderFields read at the fixed header offsets
    """
    title_bytes = extract_field(data, HeaderField.TITLE)
    cgb_flag = data[HeaderField.CGB_FLAG.offset]
    logger.debug(f"Raw title bytes: {title_bytes.hex()}")

    title = split_title(title_bytes, cgb_flag)

    return HeaderFields(
        title=title.title,
        manufacturer_code=title.manufacturer_code,
        cartridge_type=data[HeaderField.CARTRIDGE_TYPE.offset],
        rom_size_code=data[HeaderField.ROM_SIZE.offset],
        ram_size_code=data[HeaderField.RAM_SIZE.offset],
        sgb_flag=data[HeaderField.SGB_FLAG.offset] == SGB_SUPPORTED,
        cgb_flag=cgb_flag,
        destination_code=data[HeaderField.DESTINATION_CODE.offset],
        licensee_code=read_licensee_code(data),
        mask_rom_version=data[HeaderField.MASK_ROM_VERSION.offset],
        header_checksum=data[HeaderField.HEADER_CHECKSUM.offset],
        global_checksum=int.from_bytes(
            extract_field(data, HeaderField.GLOBAL_CHECKSUM), "big"
        ),
    )


def verify_boot_logo(data: bytes) -> bool:
    """Compare 0x104-0x133 byte for byte with the boot logo bitmap."""
    logo = extract_field(data, HeaderField.BOOT_LOGO)
    logger.debug(f"Extracted logo bytes: {logo.hex()}")
    return logo == BOOT_LOGO


def derive_validity(
    data: bytes,
    origin: Origin,
    stored: Optional[ValidityFlags] = None,
) -> ValidityFlags:
    """
    Produce the validity flags for an image according to its origin.

    File-sourced images are checked. Record-sourced images carry the
    flags stored with the record and are never re-checked: the rebuilt
    image has no ROM body, so the global checksum could not match.

    Args:
        data: ROM image (at least 0x150 bytes)
        origin: Where the image came from
        stored: Flags stored with the record (required for FROM_RECORD)

    Returns:
        ValidityFlags for the image
    """
    if origin is Origin.FROM_FILE:
        return ValidityFlags(
            header_checksum_valid=verify_header_checksum(data),
            global_checksum_valid=verify_global_checksum(data),
            boot_logo_valid=verify_boot_logo(data),
        )
    elif origin is Origin.FROM_RECORD:
        if stored is None:
            raise ValueError("Record-sourced headers need the stored validity flags")
        return stored
    raise ValueError(f"Unknown origin: {origin!r}")


# =============================================================================
# Rom Header
# =============================================================================

@dataclass(frozen=True)
class RomHeader:
    """
    A decoded cartridge header.

    Attributes:
        data: The image bytes (file contents, or a rebuilt 0x150-byte image)
        fields: Typed header fields
        validity: Header checksum, global checksum and boot logo results
        origin: Whether the header came from a file or a stored record
        record_name: Name of the source record (None for files)

    Example:
        >>> header = decode(rom_bytes)
        >>> header.licensee_code.is_new_format
        True
    """
    # Raw image bytes (not exposed in repr)
    data: bytes = field(repr=False)
    fields: HeaderFields
    validity: ValidityFlags
    origin: Origin = Origin.FROM_FILE
    record_name: Optional[str] = None

    @classmethod
    def from_bytes(cls, data: bytes) -> "RomHeader":
        """Decode an in-memory ROM image."""
        return decode(data)

    @classmethod
    def from_file(
        cls,
        filepath: Union[str, Path],
        config: Optional[ToolConfig] = None,
    ) -> "RomHeader":
        """Read and decode a ROM file."""
        return read_rom_file(filepath, config)

    # =========================================================================
    # Field Accessors
    # =========================================================================

    @property
    def title(self) -> str:
        return self.fields.title

    @property
    def manufacturer_code(self) -> str:
        return self.fields.manufacturer_code

    @property
    def has_manufacturer_code(self) -> bool:
        return bool(self.fields.manufacturer_code)

    @property
    def licensee_code(self) -> LicenseeCode:
        return self.fields.licensee_code

    @property
    def cgb_flag(self) -> int:
        return self.fields.cgb_flag

    @property
    def sgb_flag(self) -> bool:
        return self.fields.sgb_flag

    @property
    def header_checksum_hex(self) -> str:
        """Stored header checksum as 2 hex digits."""
        return self.fields.header_checksum_hex

    @property
    def global_checksum_hex(self) -> str:
        """Stored global checksum as 4 hex digits."""
        return self.fields.global_checksum_hex

    @property
    def is_from_record(self) -> bool:
        return self.origin is Origin.FROM_RECORD

    def extract(self, header_field: HeaderField) -> bytes:
        """Raw bytes of any header field."""
        return extract_field(self.data, header_field)

    # =========================================================================
    # Reporting
    # =========================================================================

    def summary(self) -> dict[str, Any]:
        """
        Summary of the header for display.

        Codes are reported raw; turning them into descriptions is left to
        lookup tables outside this package.
        """
        fields = self.fields
        return {
            "origin": self.origin.value,
            "record_name": self.record_name,
            "size": len(self.data),
            "title": fields.title,
            "manufacturer_code": fields.manufacturer_code,
            "cgb_flag": f"0x{fields.cgb_flag:02X}",
            "sgb_flag": fields.sgb_flag,
            "cartridge_type": f"0x{fields.cartridge_type:02X}",
            "rom_size_code": fields.rom_size_code,
            "ram_size_code": fields.ram_size_code,
            "destination_code": fields.destination_code,
            "licensee_code": str(fields.licensee_code),
            "licensee_format": fields.licensee_code.format.value,
            "mask_rom_version": fields.mask_rom_version,
            "header_checksum": fields.header_checksum_hex,
            "header_checksum_valid": self.validity.header_checksum_valid,
            "global_checksum": fields.global_checksum_hex,
            "global_checksum_valid": self.validity.global_checksum_valid,
            "boot_logo_valid": self.validity.boot_logo_valid,
        }


# =============================================================================
# Decoding
# =============================================================================

def decode(data: bytes) -> RomHeader:
    """
    Decode the cartridge header of a complete ROM image.

    Args:
        data: The ROM file contents

    Returns:
        A file-sourced RomHeader with computed validity flags

    Raises:
        FormatError: If the image is shorter than 0x150 bytes; no field is
            read in that case

    Example:
        >>> header = decode(Path("game.gb").read_bytes())
        >>> header.validity.header_checksum_valid
        True
    """
    if not is_valid_size(len(data)):
        raise FormatError("buffer too small", size=len(data), required=HEADER_SIZE)

    data = bytes(data)
    fields = extract_header_fields(data)
    validity = derive_validity(data, Origin.FROM_FILE)

    logger.info(
        f"Decoded '{fields.title}' ({len(data)} bytes, "
        f"header {fields.header_checksum_hex}, global {fields.global_checksum_hex})"
    )
    for failure in validity.failures():
        logger.warning(f"'{fields.title}': {failure} mismatch")

    return RomHeader(data=data, fields=fields, validity=validity, origin=Origin.FROM_FILE)


def read_rom_file(
    filepath: Union[str, Path],
    config: Optional[ToolConfig] = None,
) -> RomHeader:
    """
    Read and decode a ROM file from disk.

    Args:
        filepath: Path to a .gb or .gbc file
        config: Accepted extensions (defaults to the environment config)

    Returns:
        A file-sourced RomHeader

    Raises:
        RomFileError: If the file extension is not accepted
        FileNotFoundError: If the file doesn't exist
        FormatError: If the file is too small to hold a header
    """
    filepath = Path(filepath)
    config = config or get_default_config()

    if not config.accepts(filepath.name):
        accepted = ", ".join(f".{ext}" for ext in config.rom_extensions)
        raise RomFileError(f"Not a ROM file: {filepath.name} (expected {accepted})")

    data = filepath.read_bytes()
    logger.debug(f"Read {len(data)} bytes from {filepath}")
    return decode(data)
