"""
Price calculation tests: formula, tier resolution and failure modes.
"""
import pytest

from listing_pricer.engine import (
    ComputationError,
    ConfigError,
    FeeConfigError,
    InputError,
    PriceCalculator,
    PricingConfig,
    ProfitTiers,
    TierError,
    calculate_start_price,
    get_applicable_profit,
)
from listing_pricer.engine.config_validator import UNBOUNDED_LAST_TIER_WARNING


@pytest.fixture
def calculator():
    return PriceCalculator()


def test_reference_scenario(calculator, flat_config):
    """Cost 20 with the reference configuration."""
    result = calculator.compute_price(flat_config, 20)
    b = result.breakdown

    assert b.tax == 2.0
    assert b.buying_price_source == 22.0
    assert b.buying_price_settlement == 1826.0
    assert b.resolved_profit == 500.0
    assert b.profit_component == 2326.0
    assert b.payout_source == 29.08  # 29.075 rounds half away from zero
    assert b.with_fixed_fee == 29.08
    assert b.fee_multiplier == 0.831
    assert result.price == 34.99
    assert b.final_price == 34.99
    assert result.warnings == []


def test_breakdown_has_every_field(calculator, flat_config):
    breakdown = calculator.compute_price(flat_config, 20).breakdown.to_dict()
    assert set(breakdown) == {
        'cost', 'shipping', 'taxRate', 'tax', 'buyingPriceSource', 'buyingPriceSettlement',
        'resolvedProfit', 'profitTier', 'profitComponent', 'payoutSource', 'fixedFee',
        'withFixedFee', 'feeMultiplier', 'finalPrice',
    }
    assert breakdown['profitTier'] == {'enabled': False, 'profit': 500.0, 'tierIndex': None, 'costRange': 'N/A'}


def test_legacy_keys(calculator, flat_config):
    legacy = calculator.compute_price(flat_config, 20).breakdown.to_legacy_dict()
    assert legacy['buyingPriceUSD'] == 22.0
    assert legacy['buyingPriceINR'] == 1826.0
    assert legacy['applicableProfit'] == 500.0
    assert legacy['desiredProfit'] == 500.0
    assert legacy['payoutUSD'] == 29.08


def test_shipping_and_fixed_fee(calculator, flat_config):
    flat_config.update(shippingCost=5, fixedFee=40, saleTax=10)
    b = calculator.compute_price(flat_config, 20).breakdown

    # (20 + 5 + 2) * 83 = 2241; + 500 = 2741; / 80 = 34.2625; + 40/80 = 34.7625
    assert b.buying_price_source == 27.0
    assert b.buying_price_settlement == 2241.0
    assert b.payout_source == 34.26
    assert b.with_fixed_fee == 34.76
    # 1 - 1.1 * 0.169 = 0.8141
    assert b.fee_multiplier == 0.8141
    assert b.final_price == pytest.approx(34.7625 / 0.8141, abs=0.005)


def test_unset_fields_use_defaults(calculator):
    config = {'spentRate': 83, 'payoutRate': 80, 'desiredProfit': 500}
    b = calculator.compute_price(config, 20).breakdown
    assert b.tax_rate == 10.0
    assert b.fee_multiplier == 0.831
    assert b.shipping == 0.0


def test_idempotent(calculator, tiered_config):
    first = calculator.compute_price(tiered_config, 42.5)
    second = calculator.compute_price(tiered_config, 42.5)
    assert first.to_dict() == second.to_dict()
    assert first.get_trace_text() == second.get_trace_text()


def test_does_not_mutate_config(calculator, tiered_config):
    snapshot = repr(tiered_config)
    calculator.compute_price(tiered_config, 10)
    assert repr(tiered_config) == snapshot


@pytest.mark.parametrize("overrides", [
    {},
    {'saleTax': 100, 'ebayFee': 20, 'adsFee': 10, 'tdsFee': 5},
    {'ebayFee': 0, 'adsFee': 0, 'tdsFee': 0},
    {'shippingCost': 12.5, 'fixedFee': 25, 'taxRate': 0},
    {'spentRate': 0.9, 'payoutRate': 1.1, 'desiredProfit': 3},
])
@pytest.mark.parametrize("cost", [0.01, 1, 19.99, 250, 10_000])
def test_valid_configs_give_positive_price(calculator, flat_config, overrides, cost):
    flat_config.update(overrides)
    result = calculator.compute_price(flat_config, cost)
    assert result.price > 0
    assert 0 < result.breakdown.fee_multiplier <= 1


def test_trace_covers_each_step(calculator, flat_config):
    result = calculator.compute_price(flat_config, 20)
    steps = [t.step for t in result.trace]
    assert steps[0] == "Tax"
    assert steps[-1] == "Final Price"
    assert "Fee Multiplier" in steps
    assert "Final Price: with fixed fee ÷ fee multiplier = 34.99" in result.get_trace_text()


class TestResolveProfit:

    @pytest.mark.parametrize("cost, expected", [
        (30, 10),
        (50, 20),
        (0, 10),
        (49.999, 10),
        (10_000, 20),
    ])
    def test_tier_boundaries(self, calculator, tiered_config, cost, expected):
        assert calculator.resolve_profit(cost, tiered_config) == expected

    def test_flat_profit_when_tiers_disabled(self, calculator, tiered_config):
        tiered_config['profitTiers']['enabled'] = False
        assert calculator.resolve_profit(30, tiered_config) == 500

    def test_flat_profit_when_tier_list_empty(self, calculator, flat_config):
        flat_config['profitTiers'] = {'enabled': True, 'tiers': []}
        assert calculator.resolve_profit(30, flat_config) == 500

    def test_first_match_in_input_order(self, calculator, flat_config):
        flat_config['profitTiers'] = {
            'enabled': True,
            'tiers': [
                {'minCost': 0, 'maxCost': None, 'profit': 7},
                {'minCost': 0, 'maxCost': 100, 'profit': 9},
            ],
        }
        assert calculator.resolve_profit(30, flat_config) == 7

    def test_no_match_falls_back_to_desired_profit(self, calculator, flat_config):
        flat_config['profitTiers'] = {
            'enabled': True,
            'tiers': [{'minCost': 10, 'maxCost': None, 'profit': 40}],
        }
        assert calculator.resolve_profit(5, flat_config) == 500

    def test_no_match_without_fallback_raises(self, calculator, tiered_config):
        tiered_config['desiredProfit'] = None
        tiered_config['profitTiers']['tiers'][0]['minCost'] = 10
        with pytest.raises(TierError, match=r"No profit tier matches cost \$5"):
            calculator.resolve_profit(5, tiered_config)

    def test_strict_tiers_raises_on_no_match(self, tiered_config):
        tiered_config['profitTiers']['tiers'][0]['minCost'] = 10
        with pytest.raises(TierError):
            PriceCalculator(strict_tiers=True).resolve_profit(5, tiered_config)

    def test_match_metadata(self, calculator, tiered_config):
        low = calculator.match_tier(30, tiered_config)
        high = calculator.match_tier(75, tiered_config)
        assert (low.tier_index, low.cost_range) == (1, "$0 - $50")
        assert (high.tier_index, high.cost_range) == (2, "$50 - ∞")

    def test_module_function(self, tiered_config):
        assert get_applicable_profit(30, tiered_config) == 10


class TestTieredPricing:

    def test_tier_profit_flows_into_price(self, calculator, tiered_config):
        b = calculator.compute_price(tiered_config, 20).breakdown
        assert b.resolved_profit == 10.0
        assert b.profit_component == 1836.0
        assert b.profit_tier.enabled is True
        assert b.profit_tier.cost_range == "$0 - $50"

    def test_fallback_adds_warning(self, calculator, tiered_config):
        tiers = tiered_config['profitTiers']['tiers']
        tiers[1]['maxCost'] = 100
        result = calculator.compute_price(tiered_config, 150)
        assert result.breakdown.resolved_profit == 500.0
        assert result.breakdown.profit_tier.cost_range == "N/A"
        assert UNBOUNDED_LAST_TIER_WARNING in result.warnings
        assert any("No profit tier matches cost $150" in w for w in result.warnings)

    def test_rates_still_required(self, calculator, tiered_config):
        tiered_config['spentRate'] = None
        with pytest.raises(ConfigError, match="spentRate is required"):
            calculator.compute_price(tiered_config, 20)

    def test_invalid_tiers_rejected_before_pricing(self, calculator, tiered_config):
        tiered_config['profitTiers']['tiers'][0]['maxCost'] = 40
        with pytest.raises(TierError, match="continuous"):
            calculator.compute_price(tiered_config, 20)


class TestFailures:

    @pytest.mark.parametrize("cost", [0, -5, None, "abc", float('inf'), float('nan'), True])
    def test_invalid_cost(self, calculator, flat_config, cost):
        with pytest.raises(InputError, match="Invalid cost"):
            calculator.compute_price(flat_config, cost)

    def test_numeric_string_cost(self, calculator, flat_config):
        assert calculator.compute_price(flat_config, "20").price == 34.99

    def test_config_checked_before_cost(self, calculator):
        with pytest.raises(ConfigError):
            calculator.compute_price(None, -1)

    def test_negative_fee_multiplier(self, calculator, flat_config):
        flat_config.update(ebayFee=90, adsFee=10, tdsFee=10, saleTax=0)
        with pytest.raises(FeeConfigError, match="Fee multiplier must be positive"):
            calculator.compute_price(flat_config, 20)

    def test_zero_fee_multiplier(self, calculator, flat_config):
        flat_config.update(ebayFee=50, adsFee=50, tdsFee=0, saleTax=0)
        with pytest.raises(FeeConfigError):
            calculator.compute_price(flat_config, 20)

    def test_overflow_is_computation_error(self, calculator, flat_config):
        with pytest.raises(ComputationError, match="Calculated price is invalid"):
            calculator.compute_price(flat_config, 1e308)

    def test_very_large_cost_still_prices(self, calculator, flat_config):
        result = calculator.compute_price(flat_config, 1e26)
        assert result.price > 0
        assert result.breakdown.cost == 1e26
        assert result.breakdown.fee_multiplier == 0.831

    def test_profit_tiers_not_an_object(self, calculator, flat_config):
        flat_config['profitTiers'] = ['oops']
        with pytest.raises(ConfigError, match="profitTiers must be an object"):
            calculator.compute_price(flat_config, 20)

    def test_sale_tax_out_of_range(self, calculator, flat_config):
        flat_config['saleTax'] = 150
        with pytest.raises(ConfigError):
            calculator.compute_price(flat_config, 20)

    def test_negative_shipping(self, calculator, flat_config):
        flat_config['shippingCost'] = -3
        with pytest.raises(ConfigError):
            calculator.compute_price(flat_config, 20)

    def test_errors_carry_kind(self, calculator, flat_config):
        flat_config['saleTax'] = 150
        with pytest.raises(ConfigError) as exc:
            calculator.compute_price(flat_config, 20)
        assert exc.value.kind == "ConfigError"
        assert isinstance(exc.value, ValueError)


def test_calculate_start_price_accepts_dataclass(flat_config):
    result = calculate_start_price(PricingConfig.from_dict(flat_config), 20)
    assert result.price == 34.99


def test_dataclass_config_unset_fees_take_defaults(calculator):
    config = PricingConfig(spent_rate=83, payout_rate=80, desired_profit=500, tax_rate=None, ebay_fee=None)
    result = calculator.compute_price(config, 20)
    assert result.breakdown.tax_rate == 10.0
    assert result.breakdown.fee_multiplier == 0.831
    assert result.price == 34.99


def test_dataclass_config_with_mapping_tiers(calculator):
    config = PricingConfig(
        spent_rate=83,
        payout_rate=80,
        profit_tiers=ProfitTiers(enabled=True, tiers=[{'minCost': 0, 'maxCost': None, 'profit': 10}]),
    )
    assert calculator.resolve_profit(20, config) == 10
    result = calculator.compute_price(config, 20)
    assert result.breakdown.profit_tier.tier_index == 1
    assert result.breakdown.profit_tier.cost_range == "$0 - ∞"
