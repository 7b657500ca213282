import os
import sys

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)


@pytest.fixture
def flat_config():
    """Reference flat-profit configuration (cost 20 prices at 34.99)."""
    return {
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


@pytest.fixture
def tiered_config(flat_config):
    """Two contiguous tiers: [0, 50) -> 10, [50, ∞) -> 20."""
    config = dict(flat_config)
    config['profitTiers'] = {
        'enabled': True,
        'tiers': [
            {'minCost': 0, 'maxCost': 50, 'profit': 10},
            {'minCost': 50, 'maxCost': None, 'profit': 20},
        ],
    }
    return config
