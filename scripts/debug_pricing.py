"""
Print price derivations for sample configurations.

Usage:
    python scripts/debug_pricing.py
"""
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from listing_pricer.engine import PriceCalculator, PricingError
from listing_pricer.engine.price_sheet import build_price_sheet
from listing_pricer.logging_config import configure_logging


SAMPLE_CONFIG = {
    'spentRate': 83,
    'payoutRate': 80,
    'desiredProfit': 500,
    'fixedFee': 0,
    'saleTax': 0,
    'ebayFee': 12.9,
    'adsFee': 3,
    'tdsFee': 1,
    'shippingCost': 0,
    'taxRate': 10,
}


def debug():
    configure_logging("DEBUG")
    calculator = PriceCalculator()

    print("--- Flat profit, cost 20 ---")
    result = calculator.compute_price(SAMPLE_CONFIG, 20)
    print(result.get_trace_text())
    print(f"Price: {result.price}")

    print("\n--- Tiered profit ---")
    tiered = dict(SAMPLE_CONFIG, profitTiers={
        'enabled': True,
        'tiers': [
            {'minCost': 0, 'maxCost': 50, 'profit': 300},
            {'minCost': 50, 'maxCost': 100, 'profit': 600},
        ],
    })
    print(build_price_sheet(tiered, [10, 49.99, 50, 75, 99.99]))

    print("\n--- Gap in tiers ---")
    broken = dict(tiered, profitTiers={
        'enabled': True,
        'tiers': [
            {'minCost': 0, 'maxCost': 40, 'profit': 300},
            {'minCost': 50, 'maxCost': None, 'profit': 600},
        ],
    })
    try:
        calculator.compute_price(broken, 45)
    except PricingError as e:
        print(f"{e.kind}: {e}")


if __name__ == "__main__":
    debug()
