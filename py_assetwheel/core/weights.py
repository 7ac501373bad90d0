"""
Visual weight model.

Items with a dollar valuation are sized by it. Items without one get the
group's median priced value (floored), so an unpriced token sits next to
its typical priced siblings instead of collapsing to nothing. A group with
no prices at all uses a fixed default.
"""

from typing import List, Sequence

from .holdings import WeightedItem

FALLBACK_FLOOR = 5.0
DEFAULT_WEIGHT = 25.0


def fallback_weight(
    items: Sequence[WeightedItem],
    fallback_floor: float = FALLBACK_FLOOR,
    default_weight: float = DEFAULT_WEIGHT,
) -> float:
    """Weight given to unpriced items of this group."""
    priced = sorted(item.price_value for item in items if item.has_price)
    if not priced:
        return default_weight
    # upper median
    return max(priced[len(priced) // 2], fallback_floor)


def compute_visual_weights(
    items: Sequence[WeightedItem],
    fallback_floor: float = FALLBACK_FLOOR,
    default_weight: float = DEFAULT_WEIGHT,
) -> List[WeightedItem]:
    """
    Derive the sizing weight of every item of one group.

    Args:
        items: Items of a single group
        fallback_floor: Lower bound for the median-based fallback
        default_weight: Fallback when nothing in the group is priced

    Returns:
        New items, in input order, with ``visual_weight`` set
    """
    fallback = fallback_weight(items, fallback_floor, default_weight)
    return [item.with_weight(item.price_value if item.has_price else fallback) for item in items]
