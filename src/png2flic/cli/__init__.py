"""CLI module for png2flic.

The tool is a single command; ``main`` is the console-script entry point.
"""

from .encode_cmd import encode

main = encode

__all__ = [
    "encode",
    "main",
]
