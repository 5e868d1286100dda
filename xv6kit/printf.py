"""Formatted output that understands %d, %l, %x, %p, %s, %c and %%."""

DIGITS = "0123456789ABCDEF"

_U32 = 0xFFFFFFFF
_U64 = (1 << 64) - 1


def _as_int32(value):
    value &= _U32
    return value - (1 << 32) if value & 0x80000000 else value


def _format_int(value, base, signed):
    xx = _as_int32(value)
    negative = signed and xx < 0
    x = (-xx if negative else xx) & _U32
    digits = []
    while True:
        digits.append(DIGITS[x % base])
        x //= base
        if x == 0:
            break
    if negative:
        digits.append("-")
    return "".join(reversed(digits))


def _format_ptr(value):
    return "0x" + "".join(DIGITS[((value & _U64) >> shift) & 0xF] for shift in range(60, -4, -4))


def _format_str(value):
    if value is None:
        return "(null)"
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("latin-1")
    if not isinstance(value, str):
        raise TypeError("%s expects a string")
    return value.split("\0", 1)[0]


def _format_char(value):
    if isinstance(value, str):
        if len(value) != 1:
            raise TypeError("%c expects a single character")
        return value
    return chr(value & 0xFF)


_CONVERSIONS = {
    "d": lambda v: _format_int(v, 10, True),
    "l": lambda v: _format_int(v, 10, False),
    "x": lambda v: _format_int(v, 16, False),
    "p": _format_ptr,
    "s": _format_str,
    "c": _format_char,
}


def sprintf(fmt, *args):
    """Format ``args`` according to ``fmt`` and return the text.

    Integers are handled as 32-bit C ints; unknown conversions are echoed
    with their percent sign so they stand out.
    """
    values = iter(args)
    out = []
    pending = False
    for c in fmt.split("\0", 1)[0]:
        if not pending:
            if c == "%":
                pending = True
            else:
                out.append(c)
            continue
        pending = False
        if c in _CONVERSIONS:
            try:
                value = next(values)
            except StopIteration:
                raise TypeError("not enough arguments for format string") from None
            out.append(_CONVERSIONS[c](value))
        elif c == "%":
            out.append("%")
        else:
            out.append("%" + c)
    return "".join(out)


def fprintf(stream, fmt, *args):
    """Write formatted text to ``stream``."""
    stream.write(sprintf(fmt, *args))