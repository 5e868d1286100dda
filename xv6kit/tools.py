"""Small file utilities: cat, echo, wc, ln, rm, mkdir and salaam."""

import os
import sys
from dataclasses import dataclass

from .printf import fprintf

_WHITESPACE = " \r\t\n\v\0"
_CHUNK = 512


@dataclass(frozen=True)
class WordCount:
    """Line, word and character totals."""

    lines: int
    words: int
    chars: int


def count_words(data):
    """Count lines, words and characters in ``data`` (text or bytes)."""
    if isinstance(data, (bytes, bytearray)):
        data = bytes(data).decode("latin-1")
    lines = words = 0
    in_word = False
    for ch in data:
        if ch == "\n":
            lines += 1
        if ch in _WHITESPACE:
            in_word = False
        elif not in_word:
            words += 1
            in_word = True
    return WordCount(lines, words, len(data))


def _args(argv):
    return sys.argv[1:] if argv is None else list(argv)


def _copy(source, stdout, stderr):
    try:
        chunks = iter(lambda: source.read(_CHUNK), "")
        for chunk in chunks:
            try:
                stdout.write(chunk)
            except OSError:
                stderr.write("cat: write error\n")
                return 1
    except OSError:
        stderr.write("cat: read error\n")
        return 1
    return 0


def cat(argv=None, stdin=None, stdout=None, stderr=None):
    """Copy the named files, or standard input, to standard output."""
    args = _args(argv)
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout
    stderr = sys.stderr if stderr is None else stderr
    if not args:
        return _copy(stdin, stdout, stderr)
    for path in args:
        try:
            source = open(path, encoding="utf-8", errors="surrogateescape", newline="")
        except OSError:
            stderr.write(f"cat: cannot open {path}\n")
            return 1
        with source:
            status = _copy(source, stdout, stderr)
        if status:
            return status
    return 0


def echo(argv=None, stdout=None):
    """Print the arguments separated by spaces and ended by a newline."""
    args = _args(argv)
    stdout = sys.stdout if stdout is None else stdout
    if args:
        stdout.write(" ".join(args) + "\n")
    return 0


def _report(counts, name, stdout):
    fprintf(stdout, "%d %d %d %s\n", counts.lines, counts.words, counts.chars, name)


def wc(argv=None, stdin=None, stdout=None):
    """Print line, word and character counts for each file or standard input."""
    args = _args(argv)
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout
    if not args:
        try:
            data = stdin.read()
        except OSError:
            stdout.write("wc: read error\n")
            return 1
        _report(count_words(data), "", stdout)
        return 0
    for path in args:
        try:
            with open(path, "rb") as source:
                data = source.read()
        except OSError:
            stdout.write(f"wc: cannot open {path}\n")
            return 1
        _report(count_words(data), path, stdout)
    return 0


def ln(argv=None, stderr=None):
    """Make a hard link ``new`` to ``old``."""
    args = _args(argv)
    stderr = sys.stderr if stderr is None else stderr
    if len(args) != 2:
        stderr.write("Usage: ln old new\n")
        return 1
    old, new = args
    try:
        os.link(old, new)
    except OSError:
        stderr.write(f"link {old} {new}: failed\n")
    return 0


def _unlink(path):
    if os.path.isdir(path) and not os.path.islink(path):
        os.rmdir(path)
    else:
        os.unlink(path)


def rm(argv=None, stderr=None):
    """Remove files and empty directories, stopping at the first failure."""
    args = _args(argv)
    stderr = sys.stderr if stderr is None else stderr
    if not args:
        stderr.write("Usage: rm files...\n")
        return 1
    for path in args:
        try:
            _unlink(path)
        except OSError:
            stderr.write(f"rm: {path} failed to delete\n")
            break
    return 0


def mkdir(argv=None, stderr=None):
    """Create directories, stopping at the first failure."""
    args = _args(argv)
    stderr = sys.stderr if stderr is None else stderr
    if not args:
        stderr.write("Usage: mkdir files...\n")
        return 1
    for path in args:
        try:
            os.mkdir(path)
        except OSError:
            stderr.write(f"mkdir: {path} failed to create\n")
            break
    return 0


def salaam(argv=None, stdout=None):
    """Greet the first argument, or Robo when there is none."""
    args = _args(argv)
    stdout = sys.stdout if stdout is None else stdout
    name = args[0] if args else "Robo"
    stdout.write(f"Salaam {name}! Kaifa Haluka?\n")
    return 0