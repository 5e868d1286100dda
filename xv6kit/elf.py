"""ELF64 executable file and program headers."""

import struct
from dataclasses import dataclass, field
from typing import ClassVar

ELF_MAGIC = 0x464C457F  # "\x7FELF" in little endian

ELF_PROG_LOAD = 1

ELF_PROG_FLAG_EXEC = 1
ELF_PROG_FLAG_WRITE = 2
ELF_PROG_FLAG_READ = 4


class ElfFormatError(ValueError):
    """Raised when bytes are too short or malformed for an ELF structure."""


@dataclass
class ElfHeader:
    """The ELF file header."""

    magic: int = ELF_MAGIC
    elf: bytes = field(default=bytes(12))
    type: int = 0
    machine: int = 0
    version: int = 0
    entry: int = 0
    phoff: int = 0
    shoff: int = 0
    flags: int = 0
    ehsize: int = 0
    phentsize: int = 0
    phnum: int = 0
    shentsize: int = 0
    shnum: int = 0
    shstrndx: int = 0

    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<I12sHHIQQQIHHHHHH")
    SIZE: ClassVar[int] = _FORMAT.size

    @classmethod
    def parse(cls, data):
        """Decode a header from the start of ``data``."""
        if len(data) < cls.SIZE:
            raise ElfFormatError(f"ELF header needs {cls.SIZE} bytes, got {len(data)}")
        return cls(*cls._FORMAT.unpack_from(data, 0))

    def pack(self):
        """Encode the header to its on-disk bytes."""
        if len(self.elf) != 12:
            raise ElfFormatError("ident field must be exactly 12 bytes")
        return self._FORMAT.pack(
            self.magic, bytes(self.elf), self.type, self.machine, self.version,
            self.entry, self.phoff, self.shoff, self.flags, self.ehsize,
            self.phentsize, self.phnum, self.shentsize, self.shnum, self.shstrndx,
        )

    def is_valid(self):
        """True if the magic number marks this as an ELF file."""
        return self.magic == ELF_MAGIC


@dataclass
class ProgramHeader:
    """An ELF program (segment) header."""

    type: int = 0
    flags: int = 0
    off: int = 0
    vaddr: int = 0
    paddr: int = 0
    filesz: int = 0
    memsz: int = 0
    align: int = 0

    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<IIQQQQQQ")
    SIZE: ClassVar[int] = _FORMAT.size

    @classmethod
    def parse(cls, data):
        """Decode a program header from the start of ``data``."""
        if len(data) < cls.SIZE:
            raise ElfFormatError(f"program header needs {cls.SIZE} bytes, got {len(data)}")
        return cls(*cls._FORMAT.unpack_from(data, 0))

    def pack(self):
        """Encode the program header to its on-disk bytes."""
        return self._FORMAT.pack(
            self.type, self.flags, self.off, self.vaddr,
            self.paddr, self.filesz, self.memsz, self.align,
        )

    def is_loadable(self):
        """True for segments that must be loaded into memory."""
        return self.type == ELF_PROG_LOAD


def program_headers(data, header):
    """Return the program headers that ``header`` describes within ``data``."""
    headers = []
    for i in range(header.phnum):
        start = header.phoff + i * ProgramHeader.SIZE
        chunk = data[start:start + ProgramHeader.SIZE]
        if len(chunk) < ProgramHeader.SIZE:
            raise ElfFormatError(f"program header {i} lies beyond the end of the file")
        headers.append(ProgramHeader.parse(chunk))
    return headers