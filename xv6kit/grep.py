"""A small grep supporting the ^ . * $ operators."""

import sys

BUFSIZE = 1024


def match(re, text):
    """True if ``re`` matches anywhere in ``text``."""
    if re.startswith("^"):
        return match_here(re[1:], text)
    return any(match_here(re, text[i:]) for i in range(len(text) + 1))


def match_here(re, text):
    """True if ``re`` matches at the beginning of ``text``."""
    if not re:
        return True
    if len(re) > 1 and re[1] == "*":
        return match_star(re[0], re[2:], text)
    if re == "$":
        return text == ""
    if text and (re[0] == "." or re[0] == text[0]):
        return match_here(re[1:], text[1:])
    return False


def match_star(c, re, text):
    """True if ``c*`` followed by ``re`` matches at the beginning of ``text``."""
    while True:
        if match_here(re, text):
            return True
        if not text or not (text[0] == c or c == "."):
            return False
        text = text[1:]


def grep(pattern, stream, out):
    """Write the newline-terminated lines of ``stream`` that match ``pattern``.

    Text is read through a buffer of fixed size; a line that does not fit
    ends the search, and a final line without a newline is never printed.
    """
    pending = ""
    while True:
        chunk = stream.read(BUFSIZE - 1 - len(pending))
        if not chunk:
            break
        pending += chunk
        *lines, pending = pending.split("\n")
        for line in lines:
            if match(pattern, line):
                out.write(line + "\n")


def main(argv=None):
    """Run grep with command-line arguments; return the exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        sys.stderr.write("usage: grep pattern [file ...]\n")
        return 1
    pattern, files = args[0], args[1:]
    if not files:
        grep(pattern, sys.stdin, sys.stdout)
        return 0
    for path in files:
        try:
            stream = open(path, encoding="utf-8", errors="surrogateescape", newline="")
        except OSError:
            sys.stdout.write(f"grep: cannot open {path}\n")
            return 1
        with stream:
            grep(pattern, stream, sys.stdout)
    return 0