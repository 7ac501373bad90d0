"""
Python implementation of the mulberry32 PRNG used by the wheel layouts.

mulberry32 is a small 32-bit generator with a single word of state. It is
cheap to construct, which lets every sub-computation (one seed-search trial,
one group's item seeds, the packing jitter) own an independent generator
derived from the caller's seed instead of sharing one mutable stream.
"""

_MASK32 = 0xFFFFFFFF


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & _MASK32


def _imul(a, b):
    """32-bit integer multiplication (low 32 bits of the product)."""
    return (_uint32(a) * _uint32(b)) & _MASK32


class Mulberry32PRNG:
    """
    mulberry32 PRNG producing a reproducible stream in [0, 1).

    The same seed always produces the same sequence, independent of any
    other generator in the process.
    """

    def __init__(self, seed):
        """Initialize with a 32-bit integer seed (wrapped modulo 2**32)."""
        self.seed = _uint32(seed)
        self.call_count = 0
        self._state = self.seed

    def random(self):
        """Generate next random number in [0, 1)."""
        self.call_count += 1
        self._state = (self._state + 0x6D2B79F5) & _MASK32
        t = self._state
        x = _imul(t ^ (t >> 15), 1 | t)
        x = (x ^ ((x + _imul(x ^ (x >> 7), 61 | x)) & _MASK32)) & _MASK32
        return ((x ^ (x >> 14)) & _MASK32) / 4294967296.0

    def uniform(self, low, high):
        """Uniform float in [low, high)."""
        return low + (high - low) * self.random()

    def choice(self, seq):
        """Choose a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[int(self.random() * len(seq))]
