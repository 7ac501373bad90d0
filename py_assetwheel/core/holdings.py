"""
Weighted two-level input model: groups (chains) holding items (tokens).

The data-fetch side hands over plain nested mappings. ``build_groups``
turns them into ordered ``Group`` objects, dropping anything that cannot be
laid out (non-finite or non-positive amounts, groups left empty).
"""

import math
import numbers
from dataclasses import dataclass, field, replace
from typing import Dict, List, Mapping, Optional

import structlog

logger = structlog.get_logger()

DEFAULT_GROUP_COLOR = "#999999"

Holdings = Mapping[str, Mapping[str, float]]
Prices = Mapping[str, Mapping[str, float]]


def is_positive_finite(value) -> bool:
    """True for real numbers that are finite and strictly positive."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value) and value > 0


@dataclass(frozen=True)
class WeightedItem:
    """One item of a group with its raw amount and optional dollar value."""

    group_id: str
    item_id: str
    raw_amount: float
    price_value: Optional[float] = None
    visual_weight: Optional[float] = None

    @property
    def has_price(self) -> bool:
        return is_positive_finite(self.price_value)

    def with_weight(self, weight: float) -> "WeightedItem":
        return replace(self, visual_weight=weight)


@dataclass
class Group:
    """An ordered list of items sharing a group id and a display color."""

    id: str
    items: List[WeightedItem] = field(default_factory=list)
    color: str = DEFAULT_GROUP_COLOR

    def __len__(self) -> int:
        return len(self.items)


def build_groups(
    holdings: Holdings,
    prices: Optional[Prices] = None,
    colors: Optional[Mapping[str, str]] = None,
) -> List[Group]:
    """
    Build ordered groups from nested holdings.

    Args:
        holdings: group id -> item id -> amount
        prices: Optional group id -> item id -> dollar value
        colors: Optional group id -> color tag

    Returns:
        Groups in input order, each with at least one positive finite item
    """
    prices = prices or {}
    colors = colors or {}
    groups: List[Group] = []
    filtered = 0

    for group_id, items in holdings.items():
        group_prices: Mapping[str, float] = prices.get(group_id) or {}
        members: List[WeightedItem] = []

        for item_id, amount in (items or {}).items():
            if not is_positive_finite(amount):
                filtered += 1
                continue
            price = group_prices.get(item_id)
            members.append(
                WeightedItem(
                    group_id=group_id,
                    item_id=item_id,
                    raw_amount=float(amount),
                    price_value=float(price) if is_positive_finite(price) else None,
                )
            )

        if members:
            groups.append(Group(id=group_id, items=members, color=colors.get(group_id, DEFAULT_GROUP_COLOR)))

    if filtered:
        logger.debug("Filtered unusable amounts", filtered=filtered)

    return groups


def group_item_counts(groups: List[Group]) -> Dict[str, int]:
    """Number of items per group id."""
    return {group.id: len(group.items) for group in groups}
