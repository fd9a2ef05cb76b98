"""
Checksum Unit Tests
===================

Tests for header and global checksum computation, verification,
formatting and analysis.
"""

import pytest

from gbromtool.header import (
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


# =============================================================================
# Header Checksum
# =============================================================================

class TestHeaderChecksum:
    """Tests for the 8-bit header checksum over 0x134-0x14C."""

    def test_empty_header_region(self):
        # 25 zero bytes: x = -25 mod 256
        assert compute_header_checksum(bytes(0x150)) == 0xE7

    def test_matches_stored(self, valid_rom):
        assert compute_header_checksum(valid_rom) == stored_header_checksum(valid_rom)
        assert verify_header_checksum(valid_rom)

    @pytest.mark.parametrize("offset", range(0x134, 0x14D))
    def test_single_byte_change_detected(self, valid_rom, offset):
        corrupted = bytearray(valid_rom)
        corrupted[offset] ^= 0x01
        assert not verify_header_checksum(bytes(corrupted))

    def test_bytes_outside_region_ignored(self, valid_rom):
        modified = bytearray(valid_rom)
        modified[0x104] ^= 0xFF
        modified[0x14E] ^= 0xFF
        assert verify_header_checksum(bytes(modified))

    def test_stored_ff_is_invalid(self, valid_rom):
        assert compute_header_checksum(valid_rom) != 0xFF
        patched = bytearray(valid_rom)
        patched[0x14D] = 0xFF
        assert not verify_header_checksum(bytes(patched))

    def test_stored_ff_when_correct(self, rom_builder):
        # Region sums to 232, so the checksum works out to 0xFF
        data = rom_builder(title=b"", cartridge_type=0xE8, destination_code=0, old_licensee=0)
        assert compute_header_checksum(data) == 0xFF
        assert verify_header_checksum(data)

    def test_short_buffer(self):
        with pytest.raises(ValueError):
            compute_header_checksum(bytes(0x14F))


# =============================================================================
# Global Checksum
# =============================================================================

class TestGlobalChecksum:
    """Tests for the 16-bit global checksum."""

    def test_matches_stored(self, valid_rom):
        assert verify_global_checksum(valid_rom)

    def test_excludes_own_bytes(self, valid_rom):
        modified = bytearray(valid_rom)
        modified[0x14E] = 0x12
        modified[0x14F] = 0x34
        assert compute_global_checksum(bytes(modified)) == compute_global_checksum(valid_rom)
        assert stored_global_checksum(bytes(modified)) == 0x1234

    def test_big_endian(self, rom_builder):
        data = rom_builder(global_checksum=0xABCD)
        assert data[0x14E] == 0xAB
        assert data[0x14F] == 0xCD
        assert stored_global_checksum(data) == 0xABCD

    def test_truncated_to_16_bits(self):
        data = bytes([0xFF]) * 0x1000
        expected = (0xFF * (0x1000 - 2)) & 0xFFFF
        assert compute_global_checksum(data) == expected

    def test_body_change_detected(self, cgb_rom):
        assert verify_global_checksum(cgb_rom)
        corrupted = bytearray(cgb_rom)
        corrupted[0x4000] ^= 0x80
        assert not verify_global_checksum(bytes(corrupted))

    def test_short_buffer(self):
        with pytest.raises(ValueError):
            compute_global_checksum(bytes(0x100))


# =============================================================================
# Formatting and Analysis
# =============================================================================

class TestFormatting:
    """Tests for the hex display helpers."""

    @pytest.mark.parametrize("value,expected", [
        (0x00, "00"),
        (0x0A, "0A"),
        (0xE7, "E7"),
    ])
    def test_header(self, value, expected):
        assert format_header_checksum(value) == expected

    @pytest.mark.parametrize("value,expected", [
        (0x0000, "0000"),
        (0x00FF, "00FF"),
        (0xBEEF, "BEEF"),
    ])
    def test_global(self, value, expected):
        assert format_global_checksum(value) == expected


class TestAnalyzeChecksums:
    """Tests for analyze_checksums()."""

    def test_valid(self, valid_rom):
        analysis = analyze_checksums(valid_rom)
        assert analysis.header_valid
        assert analysis.global_valid
        assert analysis.stored_header == analysis.calculated_header
        assert analysis.message == "Checksums valid"

    def test_header_mismatch(self, rom_builder):
        data = rom_builder(header_checksum=0x00)
        analysis = analyze_checksums(data)
        assert not analysis.header_valid
        assert analysis.global_valid
        assert analysis.stored_header == 0x00
        assert "header checksum mismatch" in analysis.message
        assert "global" not in analysis.message

    def test_both_mismatch(self, rom_builder):
        data = rom_builder(header_checksum=0x00, global_checksum=0x0000)
        analysis = analyze_checksums(data)
        assert not analysis.header_valid
        assert not analysis.global_valid
        assert "stored 0x0000" in analysis.message
        assert "; " in analysis.message
