"""
Tier Matcher - Finds the profit tier that applies to a cost.

Used by the price calculator to resolve tiered profit. Tiers are scanned
in the order they were supplied and the first one whose range contains
the cost wins.
"""
from collections.abc import Mapping
from typing import Optional

from .models import ProfitTier
from .numbers import as_number, format_amount


def tier_contains(tier: ProfitTier, cost: float) -> bool:
    """True when cost falls in [min_cost, max_cost)."""
    min_cost = as_number(tier.min_cost)
    if min_cost is None or cost < min_cost:
        return False
    if tier.max_cost is None:
        return True
    max_cost = as_number(tier.max_cost)
    return max_cost is not None and cost < max_cost


def find_matching_tier(cost: float, tiers: list) -> Optional[tuple[int, ProfitTier]]:
    """
    Find the first tier containing cost.

    Returns (index, tier) with a 1-based index in input order, or None.
    """
    for index, tier in enumerate(tiers or [], start=1):
        if isinstance(tier, Mapping):
            tier = ProfitTier.from_dict(tier)
        if isinstance(tier, ProfitTier) and tier_contains(tier, cost):
            return index, tier
    return None


def describe_cost_range(tier: ProfitTier) -> str:
    """Human-readable range label, e.g. "$0 - $50" or "$50 - ∞"."""
    low = f"${format_amount(as_number(tier.min_cost))}"
    if tier.max_cost is None:
        return f"{low} - ∞"
    return f"{low} - ${format_amount(as_number(tier.max_cost))}"
