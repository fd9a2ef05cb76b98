"""
GB ROM Tool - Test Configuration
================================

pytest fixtures shared by the test modules.

It provides:
- A builder for synthetic ROM images with correct (or deliberately
  broken) checksums
- Fixtures writing such images to temporary .gb/.gbc files
- Isolation of the default configuration from the environment
"""

from pathlib import Path
from typing import Callable, Optional

import pytest

from gbromtool.config import ToolConfig, set_default_config
from gbromtool.header.layout import BOOT_LOGO, HEADER_SIZE


# ═══════════════════════════════════════════════════════════════════════════════
# IMAGE BUILDER
# ═══════════════════════════════════════════════════════════════════════════════


def build_rom(
    title: bytes = b"TESTGAME",
    cgb_flag: int = 0x00,
    sgb_flag: int = 0x00,
    cartridge_type: int = 0x00,
    rom_size_code: int = 0x00,
    ram_size_code: int = 0x00,
    destination_code: int = 0x01,
    old_licensee: int = 0x01,
    new_licensee: bytes = b"",
    mask_rom_version: int = 0x00,
    size: int = HEADER_SIZE,
    logo: bytes = BOOT_LOGO,
    body: Optional[Callable[[bytearray], None]] = None,
    header_checksum: Optional[int] = None,
    global_checksum: Optional[int] = None,
) -> bytes:
    """
    Build a ROM image with a complete header.

    Checksums are computed here independently of the package unless an
    explicit value is given. `body` may modify the image (outside the
    header) before the global checksum is taken.
    """
    image = bytearray(size)
    image[0x104:0x134] = logo
    image[0x134:0x134 + len(title)] = title
    image[0x143] = cgb_flag
    image[0x144:0x144 + len(new_licensee)] = new_licensee
    image[0x146] = sgb_flag
    image[0x147] = cartridge_type
    image[0x148] = rom_size_code
    image[0x149] = ram_size_code
    image[0x14A] = destination_code
    image[0x14B] = old_licensee
    image[0x14C] = mask_rom_version

    if body is not None:
        body(image)

    if header_checksum is None:
        x = 0
        for b in image[0x134:0x14D]:
            x = (x - b - 1) & 0xFF
        header_checksum = x
    image[0x14D] = header_checksum

    if global_checksum is None:
        global_checksum = (sum(image) - image[0x14E] - image[0x14F]) & 0xFFFF
    image[0x14E] = global_checksum >> 8
    image[0x14F] = global_checksum & 0xFF

    return bytes(image)


# ═══════════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.fixture
def rom_builder():
    """Fixture: the build_rom() function."""
    return build_rom


@pytest.fixture
def valid_rom() -> bytes:
    """A 0x150-byte image with correct logo and checksums."""
    return build_rom()


@pytest.fixture
def cgb_rom() -> bytes:
    """A 32 KB CGB image with a manufacturer code and new licensee code."""
    def fill(image: bytearray) -> None:
        for i in range(HEADER_SIZE, len(image)):
            image[i] = i & 0xFF

    return build_rom(
        title=b"POKEMON_GLDAAUE",
        cgb_flag=0x80,
        sgb_flag=0x03,
        cartridge_type=0x10,
        rom_size_code=0x06,
        ram_size_code=0x03,
        old_licensee=0x33,
        new_licensee=b"01",
        mask_rom_version=0x01,
        size=0x8000,
        body=fill,
    )


@pytest.fixture
def rom_file(tmp_path: Path, valid_rom: bytes) -> Path:
    """The valid image written to a .gb file."""
    path = tmp_path / "test.gb"
    path.write_bytes(valid_rom)
    return path


@pytest.fixture
def cgb_rom_file(tmp_path: Path, cgb_rom: bytes) -> Path:
    """The CGB image written to a .gbc file."""
    path = tmp_path / "gold.gbc"
    path.write_bytes(cgb_rom)
    return path


@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    """Keep the environment out of the default configuration."""
    for name in ("GBROMTOOL_EXTENSIONS", "GBROMTOOL_LOG_LEVEL", "GBROMTOOL_JSON_INDENT"):
        monkeypatch.delenv(name, raising=False)
    config = ToolConfig()
    set_default_config(config)
    yield config
    set_default_config(None)
