"""
GB ROM Tool Command-Line Interface
==================================

This package provides the command-line front end of the toolkit:

- **gbrom**: inspect, validate, export and rebuild cartridge headers

The tool is implemented as a Click-based CLI application with help
for every command and consistent exit codes (see errors.py).
"""

__all__ = ["gbrom"]
