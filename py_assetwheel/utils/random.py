"""
Random number generation utilities.

Layouts never share one generator across the whole computation. Each
sub-computation derives its own mulberry32 stream from the caller's seed
(``seed + offset + index``), so a single group's layout is reproducible in
isolation and does not depend on the order other groups were computed in.
"""

from typing import Sequence

from .mulberry_prng import Mulberry32PRNG

# Offsets separating the derived streams of one layout call
GROUP_TRIAL_OFFSET = 0
ITEM_SEED_OFFSET = 10_000
PACKING_JITTER_OFFSET = 20_000

_DEFAULT_LAYOUT_SEED = 1337


def derive_seed(seed: int, offset: int = 0, index: int = 0) -> int:
    """Combine a base seed with a stream offset and index (modulo 2**32)."""
    return (int(seed) + int(offset) + int(index)) & 0xFFFFFFFF


def derive_prng(seed: int, offset: int = 0, index: int = 0) -> Mulberry32PRNG:
    """
    Get a fresh PRNG for one sub-computation.

    Args:
        seed: Caller supplied base seed
        offset: Fixed offset identifying the kind of sub-computation
        index: Index of the sub-computation (trial number, group index, ...)

    Returns:
        Mulberry32PRNG instance
    """
    return Mulberry32PRNG(derive_seed(seed, offset, index))


def derive_layout_seed(group_ids: Sequence[str], item_counts: Sequence[int]) -> int:
    """
    Derive a stable seed from the shape of the input.

    Used when the caller does not pick a seed: the same wallet always lays
    out the same way, and adding a token or chain reshuffles it.
    """
    s = _DEFAULT_LAYOUT_SEED
    for group_id, count in zip(group_ids, item_counts):
        s = (s * 31 + len(group_id)) & 0xFFFFFFFF
        s = (s * 31 + int(count)) & 0xFFFFFFFF
    return s
