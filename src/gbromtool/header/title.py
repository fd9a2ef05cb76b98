"""
Title and Manufacturer Code Splitting
=====================================

Later Color-compatible cartridges store a 4-character manufacturer code
in the last four bytes of the 15-byte title field. The format has no
delimiter between the two, so the split is a structural heuristic:

1. Non-Color cartridges (CGB flag other than 0x80/0xC0) never carry a
   code; the whole field is the title.
2. Otherwise the last four characters are a candidate code. It is
   accepted only if every character is alphanumeric, the first is one of
   A B H K V and the last is one of A B D E F I J K P S U X Y.
3. A rejected candidate is folded back into the title.

A title that legitimately ends in four characters matching these classes
is mis-split. Existing catalog data was produced with exactly this rule,
so it is kept as is.
"""

from dataclasses import dataclass
import logging

from gbromtool.header.layout import CGB_FLAGS, HeaderField

logger = logging.getLogger(__name__)


MANUFACTURER_CODE_LENGTH = 4
MANUFACTURER_FIRST_CHARS = frozenset("ABHKV")
MANUFACTURER_LAST_CHARS = frozenset("ABDEFIJKPSUXY")

# Leading/trailing characters removed from a title: NUL padding,
# control characters and spaces
_TRIM_CHARS = "".join(chr(c) for c in range(0x21))


@dataclass(frozen=True)
class RomTitle:
    """
    A cartridge title split from its optional manufacturer code.

    Attributes:
        title: Display title, trimmed of padding
        manufacturer_code: 4-character code, or "" when absent
    """
    title: str
    manufacturer_code: str = ""

    @property
    def has_manufacturer_code(self) -> bool:
        return bool(self.manufacturer_code)


def trim_title(text: str) -> str:
    """Strip NUL padding, control characters and spaces from both ends."""
    return text.strip(_TRIM_CHARS)


def is_valid_manufacturer_code(candidate: str) -> bool:
    """
    Check a candidate against the manufacturer code character classes.

    Example:
        >>> is_valid_manufacturer_code("AAUE")
        True
        >>> is_valid_manufacturer_code("1234")
        False
    """
    if len(candidate) != MANUFACTURER_CODE_LENGTH:
        return False
    if not all(c.isascii() and c.isalnum() for c in candidate):
        return False
    return (
        candidate[0] in MANUFACTURER_FIRST_CHARS
        and candidate[-1] in MANUFACTURER_LAST_CHARS
    )


def split_title(title_bytes: bytes, cgb_flag: int) -> RomTitle:
    """
    Split a raw title field into display title and manufacturer code.

    Trailing NUL padding is dropped before the last four characters are
    taken as the candidate, so a short title followed by a code still
    splits; NULs embedded between title and code are kept until the
    final trim.

    Args:
        title_bytes: The 15-byte title field
        cgb_flag: The CGB flag byte at 0x143

    Returns:
        RomTitle with the split result

    Example:
        >>> split_title(b"POKEMON_GLDAAUE", 0x80)
        RomTitle(title='POKEMON_GLD', manufacturer_code='AAUE')
        >>> split_title(b"POKEMON_GLDAAUE", 0x00)
        RomTitle(title='POKEMON_GLDAAUE', manufacturer_code='')
    """
    text = bytes(title_bytes).decode("ascii", errors="replace")

    if cgb_flag not in CGB_FLAGS:
        return RomTitle(title=trim_title(text))

    body = text.rstrip("\x00")
    candidate = body[-MANUFACTURER_CODE_LENGTH:]

    if is_valid_manufacturer_code(candidate):
        logger.debug(f"Manufacturer code {candidate!r} split from title {text!r}")
        return RomTitle(
            title=trim_title(body[:-MANUFACTURER_CODE_LENGTH]),
            manufacturer_code=candidate,
        )

    return RomTitle(title=trim_title(text))


def parse_title(data: bytes) -> RomTitle:
    """
    Split the title of a complete ROM image.

    Args:
        data: ROM image (at least 0x150 bytes)

    Returns:
        RomTitle read from 0x134-0x142 using the CGB flag at 0x143
    """
    return split_title(
        data[HeaderField.TITLE.span],
        data[HeaderField.CGB_FLAG.offset],
    )
