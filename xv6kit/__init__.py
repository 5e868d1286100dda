"""Sv39 page tables, ELF headers, user library pieces, a shell parser and small file utilities of a teaching operating system."""

__version__ = "0.1.0"