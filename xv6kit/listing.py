"""Directory listings and file status reports."""

import enum
import os
import stat
import sys

from .printf import fprintf, sprintf

DIRSIZ = 14  # longest directory entry name
_PATH_BUF = 512
_RULE = "-" * 58


class FileType(enum.IntEnum):
    """Kinds of file reported in listings."""

    DIR = 1
    FILE = 2
    DEVICE = 3


def _kind(st):
    mode = st.st_mode
    if stat.S_ISDIR(mode):
        return FileType.DIR
    if stat.S_ISREG(mode):
        return FileType.FILE
    if stat.S_ISCHR(mode) or stat.S_ISBLK(mode):
        return FileType.DEVICE
    return 0


def fmtname(path):
    """Return the last path component, blank-padded to DIRSIZ if shorter."""
    name = path.rsplit("/", 1)[-1]
    if len(name) >= DIRSIZ:
        return name
    return name.ljust(DIRSIZ)


def type_name(kind):
    """Return the fixed-width label for a file type."""
    return {
        FileType.DIR: "Directory ",
        FileType.FILE: "File      ",
        FileType.DEVICE: "Device    ",
    }.get(kind, "Unknown   ")


def _entries(path):
    try:
        names = sorted(os.listdir(path))
    except OSError:
        names = []
    for name in [".", ".."] + names:
        yield name[:DIRSIZ]


def ls(path, out):
    """List a file, or each entry of a directory, as name, type, inode and size."""
    try:
        st = os.stat(path)
    except OSError:
        sys.stderr.write(f"ls: cannot open {path}\n")
        return
    kind = _kind(st)
    if kind == FileType.FILE:
        fprintf(out, "%s %d %d %l\n", fmtname(path), kind, st.st_ino, st.st_size)
    elif kind == FileType.DIR:
        if len(path) + 1 + DIRSIZ + 1 > _PATH_BUF:
            out.write("ls: path too long\n")
            return
        for name in _entries(path):
            full = f"{path}/{name}"
            try:
                entry = os.stat(full)
            except OSError:
                fprintf(out, "ls: cannot stat %s\n", full)
                continue
            fprintf(out, "%s %d %d %d\n", fmtname(full), _kind(entry), entry.st_ino, entry.st_size)


def _int_pad(n, width):
    value = int(sprintf("%d", n))
    length = len(str(value)) if value > 0 else 1
    return " " * (width - length)


def _str_pad(s, width):
    return " " * (width - len(s))


def _row(st, name):
    return sprintf(
        "| %s%d | %s | %s%d | %s%s |\n",
        _int_pad(st.st_ino, 5), st.st_ino, type_name(_kind(st)),
        _int_pad(st.st_size, 10), st.st_size, name, _str_pad(name, 20),
    )


def dir_table(path, out):
    """Print a boxed table of a file or of each entry of a directory."""
    try:
        st = os.stat(path)
    except OSError:
        out.write(f"ls: cannot open {path}\n")
        return
    out.write(_RULE + "\n")
    out.write(f"| {path}{_str_pad(path, 54)} |\n")
    out.write(_RULE + "\n")
    if _kind(st) == FileType.DIR:
        for name in _entries(path):
            full = f"{path}/{name}"
            try:
                entry = os.stat(full)
            except OSError:
                out.write(f"ls: cannot stat {full}\n")
                continue
            out.write(_row(entry, name))
    else:
        out.write(_row(st, path))
    out.write(_RULE + "\n")


def describe(path, out):
    """Print device, type, inode, link count and size of ``path``.

    Returns 0, or -1 if the file cannot be examined.
    """
    try:
        st = os.stat(path)
    except OSError:
        out.write(f"lstat: cannot stat {path}\n")
        return -1
    fprintf(out, "ID of Disk Device:  %d\n", st.st_dev)
    fprintf(out, "Type:               %s\n", type_name(_kind(st)))
    fprintf(out, "Inode Number:       %d\n", st.st_ino)
    fprintf(out, "Number of Links:    %d\n", st.st_nlink)
    fprintf(out, "Size:               %d\n", st.st_size)
    return 0