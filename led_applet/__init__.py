"""
LED matrix applet client package.

This package provides:
- A handle that claims one applet slot on a running display server
- Local grid and separator-bar buffers for that applet
- JSON command encoding and single-byte status decoding
- Configuration loading and a small command line tool
"""

__version__ = "0.1.0"
