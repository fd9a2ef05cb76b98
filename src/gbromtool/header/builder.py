"""
Cartridge Header Builder
========================

This module rebuilds a minimal cartridge image from a stored
CollectionRecord, the reverse of decoding. It is used when a collection
entry is opened and the original ROM file is not at hand.

Image Layout
------------
The rebuilt image is exactly 0x150 bytes, zero-filled, with:
- The boot logo at 0x104
- The title at 0x134 (at most 16 bytes; 0x143 is then overwritten by
  the CGB flag)
- The manufacturer code, when present, at 0x13F-0x142, the last four
  bytes of the 15-byte title field, replacing any title bytes there
- CGB flag, SGB flag (0x03 or 0x00), cartridge type, size codes,
  destination, mask revision and both checksums at their offsets
- The licensee code: a 2-byte code goes to 0x144 with the sentinel 0x33
  at 0x14B; a 1-byte code goes straight to 0x14B

Decoding the image reads the manufacturer code back from the same four
bytes, so title, code and every other field round-trip.

Validity Flags
--------------
The rebuilt image is never checksummed. It has no ROM body, so the
global checksum would always disagree with the value the original file
was summed to. The flags stored with the record are carried into the
header unchanged.

Usage
-----
    >>> from gbromtool.header import encode_from_record
    >>> header = encode_from_record(record)
    >>> header.origin
    <Origin.FROM_RECORD: 'record'>
    >>> header.validity == record.validity
    True
"""

import logging

from gbromtool.header.layout import (
    BOOT_LOGO,
    HEADER_SIZE,
    NEW_LICENSEE_SENTINEL,
    SGB_SUPPORTED,
    HeaderField,
)
from gbromtool.header.parser import (
    RomHeader,
    derive_validity,
    extract_header_fields,
)
from gbromtool.header.records import CollectionRecord, Origin

# Logger for this module
logger = logging.getLogger(__name__)

# Title bytes written before the CGB flag overwrites 0x143
MAX_TITLE_BYTES = 16


def _put(image: bytearray, header_field: HeaderField, value: bytes) -> None:
    """Write up to header_field.length bytes at the field offset."""
    value = value[:header_field.length]
    image[header_field.offset:header_field.offset + len(value)] = value


def build_header_image(record: CollectionRecord) -> bytes:
    """
    Build the minimal 0x150-byte image for a stored record.

    Args:
        record: The stored collection record

    Returns:
        The rebuilt image bytes

    Example:
        >>> image = build_header_image(record)
        >>> len(image)
        336
    """
    image = bytearray(HEADER_SIZE)

    _put(image, HeaderField.BOOT_LOGO, BOOT_LOGO)

    # Title first; the manufacturer code and CGB flag overwrite its tail
    title_bytes = record.title.encode("ascii", errors="replace")[:MAX_TITLE_BYTES]
    title_offset = HeaderField.TITLE.offset
    image[title_offset:title_offset + len(title_bytes)] = title_bytes

    if record.manufacturer_code:
        code_bytes = record.manufacturer_code.encode("ascii", errors="replace")
        _put(image, HeaderField.MANUFACTURER_CODE, code_bytes)

    image[HeaderField.CGB_FLAG.offset] = record.cgb_flag
    image[HeaderField.SGB_FLAG.offset] = SGB_SUPPORTED if record.sgb_flag else 0x00
    image[HeaderField.CARTRIDGE_TYPE.offset] = record.cartridge_type
    image[HeaderField.ROM_SIZE.offset] = record.rom_size_code
    image[HeaderField.RAM_SIZE.offset] = record.ram_size_code
    image[HeaderField.DESTINATION_CODE.offset] = record.destination_code

    licensee_code = record.licensee_code
    if len(licensee_code) == 2:
        image[HeaderField.OLD_LICENSEE_CODE.offset] = NEW_LICENSEE_SENTINEL
        _put(image, HeaderField.NEW_LICENSEE_CODE, licensee_code)
    else:
        image[HeaderField.OLD_LICENSEE_CODE.offset] = licensee_code[0]

    image[HeaderField.MASK_ROM_VERSION.offset] = record.rom_revision
    image[HeaderField.HEADER_CHECKSUM.offset] = record.header_checksum
    _put(image, HeaderField.GLOBAL_CHECKSUM, record.global_checksum)

    return bytes(image)


def encode_from_record(record: CollectionRecord) -> RomHeader:
    """
    Rebuild a header from a stored record.

    The returned header has the same accessors as one decoded from a
    file. Its validity flags are the record's, never recomputed.

    Args:
        record: The stored collection record

    Returns:
        A record-sourced RomHeader over a rebuilt 0x150-byte image
    """
    image = build_header_image(record)
    fields = extract_header_fields(image)
    validity = derive_validity(image, Origin.FROM_RECORD, record.validity)

    failures = validity.failures()
    logger.info(
        f"Rebuilt '{fields.title}' from record '{record.name}' "
        f"(carried failures: {', '.join(failures) if failures else 'none'})"
    )

    return RomHeader(
        data=image,
        fields=fields,
        validity=validity,
        origin=Origin.FROM_RECORD,
        record_name=record.name or None,
    )
