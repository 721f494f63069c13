"""Tools for the XFS disk image, with the XSM machine's words, memory, registers and disk store."""

__version__ = "0.1.0"