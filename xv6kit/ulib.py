"""Small C-library string and input helpers."""


def _cbytes(s):
    data = s.encode("utf-8") if isinstance(s, str) else bytes(s)
    return data.split(b"\0", 1)[0]


def atoi(s):
    """Parse the leading decimal digits of ``s``; no sign or spaces are accepted."""
    n = 0
    for ch in s:
        if not "0" <= ch <= "9":
            break
        n = n * 10 + ord(ch) - ord("0")
    return n


def strcmp(p, q):
    """Compare two strings as unsigned bytes up to their first NUL.

    Returns zero when equal, otherwise the difference of the first
    differing bytes.
    """
    for x, y in zip(_cbytes(p) + b"\0", _cbytes(q) + b"\0"):
        if x != y or x == 0:
            return x - y
    return 0


def gets(stream, max):
    """Read one line of at most ``max - 1`` characters from ``stream``.

    Reading stops after a newline or carriage return, which is kept, or at
    end of input.
    """
    out = []
    while len(out) + 1 < max:
        c = stream.read(1)
        if not c:
            break
        out.append(c)
        if c in "\n\r":
            break
    return "".join(out)