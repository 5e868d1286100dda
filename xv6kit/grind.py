"""The Park-Miller minimal standard random number generator used by the stress tester."""

_MODULUS = 0x7FFFFFFF  # 2^31 - 1
_MULTIPLIER = 16807  # 7^5
_Q = 127773  # _MODULUS // _MULTIPLIER
_R = 2836  # _MODULUS % _MULTIPLIER

SEED_A = 31
SEED_B = 7177


def do_rand(ctx):
    """Advance the generator state ``ctx`` and return the new state.

    The state doubles as the output, which lies in ``[0, 0x7ffffffd]``.
    """
    x = (ctx % 0x7FFFFFFE) + 1
    hi, lo = divmod(x, _Q)
    x = _MULTIPLIER * lo - _R * hi
    if x < 0:
        x += _MODULUS
    return x - 1


class ParkMiller:
    """A stateful generator; each seed gives its own reproducible stream."""

    def __init__(self, seed=1):
        if seed < 0:
            raise ValueError("seed must not be negative")
        self.state = seed

    def next(self):
        """Return the next number in the stream."""
        self.state = do_rand(self.state)
        return self.state

    def __iter__(self):
        while True:
            yield self.next()