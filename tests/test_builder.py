"""
Header Builder Unit Tests
=========================

Tests for rebuilding headers from stored collection records.

Test Categories
---------------
1. Image layout: where each record field is written
2. Validity: flags carried from the record, never recomputed
3. Round-trip: file -> record -> rebuilt header
"""

import pytest

from gbromtool.errors import RecordError
from gbromtool.header import (
    BOOT_LOGO,
    HEADER_SIZE,
    CollectionRecord,
    Origin,
    ValidityFlags,
    build_header_image,
    decode,
    encode_from_record,
    verify_header_checksum,
)


@pytest.fixture
def record() -> CollectionRecord:
    """A stored record for a CGB cartridge with a manufacturer code."""
    return CollectionRecord(
        name="Gold, boxed",
        title="POKEMON_GLD",
        manufacturer_code="AAUE",
        cartridge_type=0x10,
        rom_revision=0x01,
        rom_size_code=0x06,
        ram_size_code=0x03,
        sgb_flag=True,
        cgb_flag=0x80,
        destination_code=0x01,
        licensee_code=b"01",
        header_checksum=0x5A,
        header_checksum_valid=True,
        global_checksum=b"\xbe\xef",
        global_checksum_valid=True,
        boot_logo_valid=True,
    )


def _replace(record: CollectionRecord, **changes) -> CollectionRecord:
    values = record.to_dict()
    values.update(changes)
    return CollectionRecord.from_dict(values)


# =============================================================================
# Image Layout
# =============================================================================

class TestBuildHeaderImage:
    """Tests for the rebuilt image bytes."""

    def test_size_and_logo(self, record):
        image = build_header_image(record)
        assert len(image) == HEADER_SIZE
        assert image[0x104:0x134] == BOOT_LOGO
        assert image[:0x104] == bytes(0x104)

    def test_title_and_code(self, record):
        image = build_header_image(record)
        assert image[0x134:0x13F] == b"POKEMON_GLD"
        assert image[0x13F:0x143] == b"AAUE"
        assert image[0x143] == 0x80

    def test_short_title_padded_before_code(self, record):
        image = build_header_image(_replace(record, title="MAORIO", manufacturer_code="BXTA"))
        assert image[0x134:0x143] == b"MAORIO\x00\x00\x00\x00\x00BXTA"

    def test_long_title_overwritten_by_code(self, record):
        image = build_header_image(_replace(record, title="ABCDEFGHIJKLMNOP"))
        assert image[0x134:0x13F] == b"ABCDEFGHIJK"
        assert image[0x13F:0x143] == b"AAUE"
        assert image[0x143] == 0x80

    def test_sixteen_byte_title_without_code(self, record):
        image = build_header_image(
            _replace(record, title="ABCDEFGHIJKLMNOP", manufacturer_code="", cgb_flag=0x00)
        )
        assert image[0x134:0x143] == b"ABCDEFGHIJKLMNO"
        assert image[0x143] == 0x00

    def test_single_byte_fields(self, record):
        image = build_header_image(record)
        assert image[0x146] == 0x03
        assert image[0x147] == 0x10
        assert image[0x148] == 0x06
        assert image[0x149] == 0x03
        assert image[0x14A] == 0x01
        assert image[0x14C] == 0x01
        assert image[0x14D] == 0x5A
        assert image[0x14E:0x150] == b"\xbe\xef"

    def test_sgb_off(self, record):
        assert build_header_image(_replace(record, sgb_flag=False))[0x146] == 0x00

    def test_new_licensee(self, record):
        image = build_header_image(record)
        assert image[0x14B] == 0x33
        assert image[0x144:0x146] == b"01"

    def test_old_licensee(self, record):
        image = build_header_image(_replace(record, licensee_code="A4"))
        assert image[0x14B] == 0xA4
        assert image[0x144:0x146] == b"\x00\x00"

    def test_stored_checksum_not_recomputed(self, record):
        image = build_header_image(record)
        assert image[0x14D] == 0x5A
        assert not verify_header_checksum(image)


# =============================================================================
# Validity
# =============================================================================

class TestEncodeFromRecord:
    """Tests for encode_from_record()."""

    def test_origin_and_name(self, record):
        header = encode_from_record(record)
        assert header.origin is Origin.FROM_RECORD
        assert header.is_from_record
        assert header.record_name == "Gold, boxed"

    def test_unnamed_record(self, record):
        header = encode_from_record(_replace(record, name=""))
        assert header.record_name is None

    def test_flags_carried(self, record):
        stored = _replace(
            record,
            header_checksum_valid=False,
            global_checksum_valid=True,
            boot_logo_valid=False,
        )
        header = encode_from_record(stored)
        assert header.validity == ValidityFlags(
            header_checksum_valid=False,
            global_checksum_valid=True,
            boot_logo_valid=False,
        )

    def test_flags_not_recomputed(self, record):
        # The rebuilt image would fail both checksums if it were checked
        header = encode_from_record(record)
        assert header.validity.all_valid
        assert not decode(header.data).validity.global_checksum_valid

    @pytest.mark.parametrize("flags", [
        (True, True, True),
        (False, False, False),
        (True, False, True),
        (False, True, False),
    ])
    def test_any_flag_combination(self, record, flags):
        header_ok, global_ok, logo_ok = flags
        stored = _replace(
            record,
            header_checksum_valid=header_ok,
            global_checksum_valid=global_ok,
            boot_logo_valid=logo_ok,
        )
        assert encode_from_record(stored).validity == ValidityFlags(*flags)

    def test_fields(self, record):
        header = encode_from_record(record)
        assert header.title == "POKEMON_GLD"
        assert header.manufacturer_code == "AAUE"
        assert header.licensee_code.value == b"01"
        assert header.fields.mask_rom_version == 0x01
        assert header.fields.header_checksum == 0x5A
        assert header.fields.global_checksum == 0xBEEF
        assert header.global_checksum_hex == "BEEF"
        assert len(header.data) == HEADER_SIZE

    def test_summary(self, record):
        summary = encode_from_record(record).summary()
        assert summary["origin"] == "record"
        assert summary["record_name"] == "Gold, boxed"
        assert summary["size"] == HEADER_SIZE


# =============================================================================
# Round-trip
# =============================================================================

class TestRoundTrip:
    """Tests for file -> record -> rebuilt header."""

    def test_cgb_rom(self, cgb_rom):
        original = decode(cgb_rom)
        record = CollectionRecord.from_header(original, name="Gold")
        rebuilt = encode_from_record(record)

        assert rebuilt.fields == original.fields
        assert rebuilt.validity == original.validity

    def test_manufacturer_code_survives_short_title(self, rom_builder):
        data = rom_builder(title=b"MAORIO   KMEX", cgb_flag=0x80)
        original = decode(data)
        rebuilt = encode_from_record(CollectionRecord.from_header(original, name="Mario"))

        assert rebuilt.title == "MAORIO"
        assert rebuilt.manufacturer_code == "KMEX"

    @pytest.mark.parametrize("cgb_flag", [0x80, 0xC0])
    @pytest.mark.parametrize("code", ["BXTA", "AAUE", "V00B"])
    def test_stored_manufacturer_code_reloads(self, record, code, cgb_flag):
        stored = _replace(record, title="MAORIO", manufacturer_code=code, cgb_flag=cgb_flag)
        rebuilt = encode_from_record(stored)

        assert (rebuilt.title, rebuilt.manufacturer_code) == ("MAORIO", code)

    @pytest.mark.parametrize("changes", [
        {"manufacturer_code": "BXT"},
        {"manufacturer_code": "1234"},
        {"manufacturer_code": "BXTA", "cgb_flag": 0x00},
    ])
    def test_unreadable_manufacturer_code_never_rebuilt(self, record, changes):
        with pytest.raises(RecordError):
            encode_from_record(_replace(record, title="MAORIO", **changes))

    def test_bad_dump_flags_survive(self, rom_builder):
        data = rom_builder(logo=bytes(48), header_checksum=0x00)
        original = decode(data)
        rebuilt = encode_from_record(CollectionRecord.from_header(original, name="Bad"))

        assert rebuilt.validity == original.validity
        assert rebuilt.validity.failures() == ["header checksum", "boot logo"]

    def test_serialized_record(self, cgb_rom):
        original = decode(cgb_rom)
        mapping = CollectionRecord.from_header(original, name="Gold").to_dict()
        rebuilt = encode_from_record(CollectionRecord.from_dict(mapping))

        assert rebuilt.fields == original.fields

    def test_rebuilt_header_recaptured(self, record):
        rebuilt = encode_from_record(record)
        again = CollectionRecord.from_header(rebuilt, name=record.name)
        assert again == record
