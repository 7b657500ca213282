"""
Price Sheet - Prices one configuration across many cost points.

Used to review a tier schedule before saving it: each row shows which
tier a cost lands in and the price it produces.
"""
from typing import Iterable, Optional

import pandas as pd

from .config_validator import coerce_config
from .price_calculator import PriceCalculator

SHEET_COLUMNS = [
    'cost',
    'tier',
    'costRange',
    'resolvedProfit',
    'buyingPriceSettlement',
    'feeMultiplier',
    'finalPrice',
]

TIER_COLUMNS = ['minCost', 'maxCost', 'profit']


def build_price_sheet(
    config,
    costs: Iterable[float],
    calculator: Optional[PriceCalculator] = None,
) -> pd.DataFrame:
    """
    Compute a price for every cost.

    Any pricing error aborts the whole sheet.
    """
    calculator = calculator or PriceCalculator()
    config = coerce_config(config)
    calculator.validator.validate(config)

    rows = []
    for cost in costs:
        result = calculator.compute_price(config, cost)
        b = result.breakdown
        rows.append({
            'cost': b.cost,
            'tier': b.profit_tier.tier_index,
            'costRange': b.profit_tier.cost_range,
            'resolvedProfit': b.resolved_profit,
            'buyingPriceSettlement': b.buying_price_settlement,
            'feeMultiplier': b.fee_multiplier,
            'finalPrice': result.price,
        })

    return pd.DataFrame(rows, columns=SHEET_COLUMNS)


def tiers_to_frame(tiers: list) -> pd.DataFrame:
    """Tier dicts to an editable table."""
    return pd.DataFrame(list(tiers or []), columns=TIER_COLUMNS)


def tiers_from_frame(df: pd.DataFrame) -> list[dict]:
    """
    Editable table back to tier dicts.

    Blank rows are dropped; a blank maxCost means unbounded.
    """
    tiers = []
    for _, row in df.iterrows():
        if pd.isna(row.get('minCost')) and pd.isna(row.get('profit')):
            continue
        tiers.append({
            'minCost': None if pd.isna(row.get('minCost')) else float(row['minCost']),
            'maxCost': None if pd.isna(row.get('maxCost')) else float(row['maxCost']),
            'profit': None if pd.isna(row.get('profit')) else float(row['profit']),
        })
    return tiers
