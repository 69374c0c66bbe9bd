"""Brainfuck interpreter that runs programs straight from a seekable byte stream."""

__version__ = "0.2.0"
