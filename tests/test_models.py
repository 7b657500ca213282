"""
Tests for configuration documents, tier helpers and money rounding.
"""
import pytest

from listing_pricer.engine import ConfigError, PricingConfig, ProfitTier, ProfitTiers, default_pricing_config
from listing_pricer.engine.numbers import as_number, format_amount, round_money
from listing_pricer.engine.tier_matcher import describe_cost_range, find_matching_tier, tier_contains


def test_default_document():
    assert default_pricing_config() == {
        'enabled': False,
        'spentRate': None,
        'payoutRate': None,
        'desiredProfit': None,
        'fixedFee': 0.0,
        'saleTax': 0.0,
        'ebayFee': 12.9,
        'adsFee': 3.0,
        'tdsFee': 1.0,
        'shippingCost': 0.0,
        'taxRate': 10.0,
        'profitTiers': {'enabled': False, 'tiers': []},
    }


def test_from_dict_round_trips_document(tiered_config):
    config = PricingConfig.from_dict(tiered_config)
    assert config.tiered is True
    assert config.profit_tiers.tiers[1] == ProfitTier(min_cost=50, max_cost=None, profit=20)
    doc = config.to_dict()
    assert doc['spentRate'] == 83
    assert doc['profitTiers'] == tiered_config['profitTiers']


def test_from_dict_missing_tiers():
    config = PricingConfig.from_dict({'profitTiers': None})
    assert config.tiered is False
    assert config.profit_tiers.tiers == []


def test_from_dict_rejects_non_object_tiers():
    with pytest.raises(ConfigError, match="profitTiers must be an object"):
        PricingConfig.from_dict({'profitTiers': ['oops']})


def test_tier_mappings_become_dataclasses():
    tiers = ProfitTiers(enabled=True, tiers=[{'minCost': 0, 'maxCost': None, 'profit': 10}])
    assert tiers.tiers == [ProfitTier(min_cost=0, max_cost=None, profit=10)]


@pytest.mark.parametrize("value, expected", [
    (3, 3.0),
    (2.5, 2.5),
    (" 12.9 ", 12.9),
    ("abc", None),
    ("", None),
    (None, None),
    (True, None),
    (float('nan'), None),
    ([1], None),
])
def test_as_number(value, expected):
    assert as_number(value) == expected


@pytest.mark.parametrize("value, places, expected", [
    (1.005, 2, 1.01),
    (2.675, 2, 2.68),
    (34.98796, 2, 34.99),
    (-1.005, 2, -1.01),
    (0.83099999, 4, 0.831),
    (10, 2, 10.0),
    (1e26, 2, 1e26),
])
def test_round_money_half_away_from_zero(value, places, expected):
    assert round_money(value, places) == expected


@pytest.mark.parametrize("value, expected", [(50, "50"), (50.0, "50"), (12.5, "12.5"), (0, "0")])
def test_format_amount(value, expected):
    assert format_amount(value) == expected


class TestTierMatcher:

    def test_half_open_interval(self):
        tier = ProfitTier(min_cost=10, max_cost=20, profit=5)
        assert tier_contains(tier, 10)
        assert tier_contains(tier, 19.99)
        assert not tier_contains(tier, 20)
        assert not tier_contains(tier, 9.99)

    def test_unbounded(self):
        assert tier_contains(ProfitTier(min_cost=10, max_cost=None, profit=5), 1e9)

    def test_find_returns_one_based_index(self):
        tiers = [ProfitTier(0, 10, 1), ProfitTier(10, None, 2)]
        index, tier = find_matching_tier(15, tiers)
        assert index == 2
        assert tier.profit == 2

    def test_find_none(self):
        assert find_matching_tier(5, [ProfitTier(10, None, 2)]) is None
        assert find_matching_tier(5, []) is None

    def test_cost_range_labels(self):
        assert describe_cost_range(ProfitTier(0, 50, 1)) == "$0 - $50"
        assert describe_cost_range(ProfitTier(12.5, None, 1)) == "$12.5 - ∞"

    def test_find_accepts_mappings(self):
        tiers = [{'minCost': 0, 'maxCost': 10, 'profit': 1}, {'minCost': 10, 'maxCost': None, 'profit': 2}]
        index, tier = find_matching_tier(15, tiers)
        assert index == 2
        assert tier == ProfitTier(min_cost=10, max_cost=None, profit=2)
