"""
Cartridge Header Data Structures
================================

This module defines the value types produced and consumed by the header
codec. All of them are immutable once constructed.

Types
-----
- **Origin**: where a header came from (a ROM file or a stored record)
- **LicenseeCode**: 1-byte old-format or 2-byte new-format publisher code
- **HeaderFields**: every typed field extracted from a header
- **ValidityFlags**: the three independent checks (header checksum,
  global checksum, boot logo)
- **CollectionRecord**: the persisted summary of a header, as the
  collection store keeps it

Licensee Codes
--------------
The old licensee byte at 0x14B is authoritative unless it holds the
sentinel 0x33. In that case the two ASCII bytes at 0x144-0x145 carry the
code and the old byte only marks the format. A LicenseeCode therefore
knows its format from its length alone.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, TYPE_CHECKING

from gbromtool.errors import RecordError
from gbromtool.header.checksum import format_global_checksum, format_header_checksum
from gbromtool.header.layout import CGB_FLAGS
from gbromtool.header.title import MANUFACTURER_CODE_LENGTH, is_valid_manufacturer_code

if TYPE_CHECKING:
    from gbromtool.header.parser import RomHeader


# =============================================================================
# Enumeration Types
# =============================================================================

class Origin(Enum):
    """
    Source of a decoded header.

    The origin selects how ValidityFlags are derived and never changes
    after construction:
    - FROM_FILE: flags are computed from the image bytes
    - FROM_RECORD: flags are carried from the stored record, because the
      rebuilt image lacks the ROM body the global checksum covers
    """
    FROM_FILE = "file"
    FROM_RECORD = "record"


class LicenseeFormat(Enum):
    """Licensee code layout: 1 raw byte (old) or 2 ASCII bytes (new)."""
    OLD = "old"
    NEW = "new"


# =============================================================================
# Licensee Code
# =============================================================================

@dataclass(frozen=True)
class LicenseeCode:
    """
    Publisher code from the cartridge header.

    Attributes:
        value: 1 byte (old format) or 2 bytes (new format)

    Example:
        >>> LicenseeCode(b"01").format
        <LicenseeFormat.NEW: 'new'>
        >>> str(LicenseeCode(bytes([0x01])))
        '01'
    """
    value: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.value, (bytes, bytearray)):
            raise RecordError(f"Licensee code must be bytes, got {type(self.value).__name__}")
        if len(self.value) not in (1, 2):
            raise RecordError(
                f"Licensee code must be 1 or 2 bytes, got {len(self.value)}"
            )
        object.__setattr__(self, "value", bytes(self.value))

    @property
    def format(self) -> LicenseeFormat:
        return LicenseeFormat.NEW if len(self.value) == 2 else LicenseeFormat.OLD

    @property
    def is_new_format(self) -> bool:
        return self.format is LicenseeFormat.NEW

    def __str__(self) -> str:
        """New codes as their ASCII text, old codes as 2 hex digits."""
        if self.is_new_format:
            return self.value.decode("ascii", errors="replace")
        return f"{self.value[0]:02X}"


# =============================================================================
# Header Fields and Validity
# =============================================================================

@dataclass(frozen=True)
class HeaderFields:
    """
    Typed view of every cartridge header field.

    Attributes:
        title: Display title with the manufacturer code split off
        manufacturer_code: 4-character code, or "" when absent
        cartridge_type: Cartridge type byte (0x147)
        rom_size_code: ROM size code (0x148), nominally 0-8
        ram_size_code: RAM size code (0x149), nominally 0-5
        sgb_flag: True when 0x146 holds 0x03
        cgb_flag: CGB flag byte (0x143), nominally 0x00/0x80/0xC0
        destination_code: Destination code (0x14A), nominally 0x00/0x01
        licensee_code: Old or new format licensee code
        mask_rom_version: Mask ROM revision (0x14C)
        header_checksum: Stored header checksum byte (0x14D)
        global_checksum: Stored global checksum word (0x14E, big-endian)
    """
    title: str
    manufacturer_code: str
    cartridge_type: int
    rom_size_code: int
    ram_size_code: int
    sgb_flag: bool
    cgb_flag: int
    destination_code: int
    licensee_code: LicenseeCode
    mask_rom_version: int
    header_checksum: int
    global_checksum: int

    @property
    def header_checksum_hex(self) -> str:
        return format_header_checksum(self.header_checksum)

    @property
    def global_checksum_hex(self) -> str:
        return format_global_checksum(self.global_checksum)


@dataclass(frozen=True)
class ValidityFlags:
    """
    Results of the three header integrity checks.

    Attributes:
        header_checksum_valid: Header checksum matches 0x134-0x14C
        global_checksum_valid: Global checksum matches the whole image
        boot_logo_valid: 0x104-0x133 equals the boot logo bitmap
    """
    header_checksum_valid: bool
    global_checksum_valid: bool
    boot_logo_valid: bool

    @property
    def all_valid(self) -> bool:
        return (
            self.header_checksum_valid
            and self.global_checksum_valid
            and self.boot_logo_valid
        )

    def failures(self) -> list[str]:
        """Names of the checks that did not pass."""
        names = []
        if not self.header_checksum_valid:
            names.append("header checksum")
        if not self.global_checksum_valid:
            names.append("global checksum")
        if not self.boot_logo_valid:
            names.append("boot logo")
        return names


# =============================================================================
# Collection Record
# =============================================================================

# Column limits of the collection store
MAX_NAME_LENGTH = 200
MAX_TITLE_LENGTH = 100

_BYTE_FIELDS = (
    "cartridge_type",
    "rom_revision",
    "rom_size_code",
    "ram_size_code",
    "cgb_flag",
    "destination_code",
    "header_checksum",
)

_BOOL_FIELDS = (
    "sgb_flag",
    "header_checksum_valid",
    "global_checksum_valid",
    "boot_logo_valid",
)

_HEX_FIELDS = ("licensee_code", "global_checksum")


@dataclass(frozen=True)
class CollectionRecord:
    """
    Persisted summary of a cartridge header.

    This is the shape the collection store keeps for each ROM: enough
    fields to rebuild a minimal header image, plus the three validity
    flags computed when the ROM file was first read. The full ROM body is
    not kept, so the flags cannot be recomputed later.

    Attributes:
        title: Display title (up to 100 characters)
        manufacturer_code: 4-character code, or ""; a code needs a CGB
            flag of 0x80 or 0xC0 so that decoding splits it off again
        cartridge_type: Cartridge type byte
        rom_revision: Mask ROM revision byte
        rom_size_code: ROM size code
        ram_size_code: RAM size code
        sgb_flag: SGB support
        cgb_flag: CGB flag byte
        destination_code: Destination code
        licensee_code: 1 byte (old format) or 2 bytes (new format)
        header_checksum: Stored header checksum byte
        header_checksum_valid: Header checksum result at capture time
        global_checksum: Stored global checksum, 2 bytes big-endian
        global_checksum_valid: Global checksum result at capture time
        boot_logo_valid: Boot logo result at capture time
        name: User-chosen entry name (up to 200 characters)

    Raises:
        RecordError: If any value cannot be represented in a header
    """
    title: str
    manufacturer_code: str
    cartridge_type: int
    rom_revision: int
    rom_size_code: int
    ram_size_code: int
    sgb_flag: bool
    cgb_flag: int
    destination_code: int
    licensee_code: bytes
    header_checksum: int
    header_checksum_valid: bool
    global_checksum: bytes
    global_checksum_valid: bool
    boot_logo_valid: bool
    name: str = ""

    def __post_init__(self) -> None:
        """Validate field constraints."""
        if self.name is None or self.title is None:
            raise RecordError("Name and title cannot be None")
        if len(self.name) > MAX_NAME_LENGTH:
            raise RecordError(f"Name exceeds maximum length of {MAX_NAME_LENGTH}")
        if len(self.title) > MAX_TITLE_LENGTH:
            raise RecordError(f"Title exceeds maximum length of {MAX_TITLE_LENGTH}")

        if self.manufacturer_code is None:
            object.__setattr__(self, "manufacturer_code", "")

        for name in _BYTE_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 0xFF:
                raise RecordError(f"{name} must be a byte value (0-255), got {value!r}")

        # Only codes the decoder would split off again can be stored
        if self.manufacturer_code:
            if not is_valid_manufacturer_code(self.manufacturer_code):
                raise RecordError(
                    f"Invalid manufacturer code {self.manufacturer_code!r}: expected "
                    f"{MANUFACTURER_CODE_LENGTH} alphanumeric characters starting with "
                    f"one of ABHKV and ending with one of ABDEFIJKPSUXY"
                )
            if self.cgb_flag not in CGB_FLAGS:
                raise RecordError(
                    f"Manufacturer code {self.manufacturer_code!r} requires a CGB flag "
                    f"of 0x80 or 0xC0, got 0x{self.cgb_flag:02X}"
                )

        # Validates and normalizes to immutable bytes
        object.__setattr__(self, "licensee_code", LicenseeCode(self.licensee_code).value)

        if not isinstance(self.global_checksum, (bytes, bytearray)) or len(self.global_checksum) != 2:
            raise RecordError(f"Global checksum must be 2 bytes, got {self.global_checksum!r}")
        object.__setattr__(self, "global_checksum", bytes(self.global_checksum))

    # =========================================================================
    # Derived Values
    # =========================================================================

    @property
    def validity(self) -> ValidityFlags:
        """The stored validity flags."""
        return ValidityFlags(
            header_checksum_valid=self.header_checksum_valid,
            global_checksum_valid=self.global_checksum_valid,
            boot_logo_valid=self.boot_logo_valid,
        )

    @property
    def global_checksum_value(self) -> int:
        return int.from_bytes(self.global_checksum, "big")

    def identity(self) -> tuple[str, int, bytes]:
        """
        Key used to detect an entry that already exists in the collection.

        Two records describe the same ROM when title, ROM revision and
        global checksum agree.
        """
        return (self.title, self.rom_revision, self.global_checksum)

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def from_header(cls, header: "RomHeader", name: str) -> "CollectionRecord":
        """
        Capture a decoded header as a collection record.

        Args:
            header: Header decoded from a ROM file (or rebuilt from a record)
            name: User-chosen entry name

        Returns:
            A new CollectionRecord carrying the header's validity flags

        Raises:
            RecordError: If the name is missing or too long
        """
        fields = header.fields
        validity = header.validity
        return cls(
            name=name,
            title=fields.title,
            manufacturer_code=fields.manufacturer_code,
            cartridge_type=fields.cartridge_type,
            rom_revision=fields.mask_rom_version,
            rom_size_code=fields.rom_size_code,
            ram_size_code=fields.ram_size_code,
            sgb_flag=fields.sgb_flag,
            cgb_flag=fields.cgb_flag,
            destination_code=fields.destination_code,
            licensee_code=fields.licensee_code.value,
            header_checksum=fields.header_checksum,
            header_checksum_valid=validity.header_checksum_valid,
            global_checksum=fields.global_checksum.to_bytes(2, "big"),
            global_checksum_valid=validity.global_checksum_valid,
            boot_logo_valid=validity.boot_logo_valid,
        )

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to a JSON-friendly mapping.

        Byte-string fields are written as uppercase hex.
        """
        return {
            "name": self.name,
            "title": self.title,
            "manufacturer_code": self.manufacturer_code,
            "cartridge_type": self.cartridge_type,
            "rom_revision": self.rom_revision,
            "rom_size_code": self.rom_size_code,
            "ram_size_code": self.ram_size_code,
            "sgb_flag": self.sgb_flag,
            "cgb_flag": self.cgb_flag,
            "destination_code": self.destination_code,
            "licensee_code": self.licensee_code.hex().upper(),
            "header_checksum": self.header_checksum,
            "header_checksum_valid": self.header_checksum_valid,
            "global_checksum": self.global_checksum.hex().upper(),
            "global_checksum_valid": self.global_checksum_valid,
            "boot_logo_valid": self.boot_logo_valid,
        }

    @classmethod
    def from_dict(cls, mapping: dict[str, Any]) -> "CollectionRecord":
        """
        Rehydrate a record from a mapping produced by to_dict().

        Raises:
            RecordError: If a key is missing or a value is malformed
        """
        values: dict[str, Any] = {}
        for key in cls.__dataclass_fields__:
            if key in mapping:
                values[key] = mapping[key]
            elif key == "manufacturer_code":
                values[key] = ""
            elif key != "name":
                raise RecordError(f"Record is missing field '{key}'")

        for name in _HEX_FIELDS:
            value = values[name]
            if isinstance(value, str):
                try:
                    values[name] = bytes.fromhex(value)
                except ValueError as e:
                    raise RecordError(f"Field '{name}' is not valid hex: {value!r}") from e

        for name in _BOOL_FIELDS:
            if not isinstance(values[name], bool):
                raise RecordError(f"Field '{name}' must be true or false, got {values[name]!r}")

        return cls(**values)
