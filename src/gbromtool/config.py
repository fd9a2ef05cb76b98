"""
GB ROM Tool - Configuration
===========================

Settings shared by the file loader and the command line. Configuration
can come from:
- Default values (defined here)
- Environment variables (ToolConfig.from_env)

Environment variables (all optional):
    GBROMTOOL_EXTENSIONS: Accepted ROM file extensions, comma separated
    GBROMTOOL_LOG_LEVEL: Logging level name (DEBUG, INFO, WARNING, ...)
    GBROMTOOL_JSON_INDENT: Indent used when writing record JSON
"""

from dataclasses import dataclass, field
import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class ToolConfig:
    """
    Configuration for loading ROM files and reporting on them.

    Attributes:
        rom_extensions: File extensions accepted as ROM images, lowercase
            and without the leading dot (default: gb, gbc)
        log_level: Logging level name used by the command line when
            --verbose is not given (default: WARNING)
        json_indent: Indent for record JSON output (default: 2)
    """

    rom_extensions: tuple[str, ...] = field(default_factory=lambda: ("gb", "gbc"))
    log_level: str = "WARNING"
    json_indent: int = 2

    @classmethod
    def from_env(cls) -> "ToolConfig":
        """
        Create a ToolConfig from environment variables.

        Unset variables keep their defaults. Invalid values are logged
        and ignored.

        Returns:
            ToolConfig with values from the environment applied
        """
        config = cls()

        if extensions := os.environ.get("GBROMTOOL_EXTENSIONS"):
            parsed = tuple(
                ext.strip().lstrip(".").lower()
                for ext in extensions.split(",")
                if ext.strip().lstrip(".")
            )
            if parsed:
                config.rom_extensions = parsed

        if level := os.environ.get("GBROMTOOL_LOG_LEVEL"):
            level = level.strip().upper()
            if isinstance(logging.getLevelName(level), int):
                config.log_level = level
            else:
                logger.warning(f"Ignoring unknown GBROMTOOL_LOG_LEVEL {level!r}")

        if indent := os.environ.get("GBROMTOOL_JSON_INDENT"):
            try:
                config.json_indent = int(indent)
            except ValueError:
                logger.warning(f"Ignoring non-integer GBROMTOOL_JSON_INDENT {indent!r}")

        return config

    def accepts(self, filename: str) -> bool:
        """
        Check whether a file name carries an accepted ROM extension.

        The comparison is case-insensitive.
        """
        name = filename.lower()
        return any(name.endswith(f".{ext}") for ext in self.rom_extensions)


# =============================================================================
# Default Configuration Instance
# =============================================================================

_default_config: Optional[ToolConfig] = None


def get_default_config() -> ToolConfig:
    """
    Get the default configuration.

    Built from the environment on first use. Can be overridden by
    calling set_default_config().
    """
    global _default_config
    if _default_config is None:
        _default_config = ToolConfig.from_env()
    return _default_config


def set_default_config(config: Optional[ToolConfig]) -> None:
    """Replace the default configuration (None re-reads the environment)."""
    global _default_config
    _default_config = config
