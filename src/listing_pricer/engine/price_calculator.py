"""
Price Calculator - Derives a marketplace listing price from a sourcing cost.

Formula:
    StartPrice = (
        (profit + buyingPrice * spentRate) / payoutRate + fixedFee / payoutRate
    ) / (
        1 - (1 + saleTax/100) * (ebayFee + adsFee + tdsFee) / 100
    )

Where:
- buyingPrice (cost currency) = cost + shipping + tax
- tax (cost currency) = cost * taxRate / 100
- profit is the flat desiredProfit or the tier matching the cost

Every intermediate figure is returned in the breakdown, and each step is
recorded in the result trace.
"""
import logging
import math
from typing import Optional

from .config_validator import ConfigValidator, coerce_config
from .errors import ComputationError, ConfigError, FeeConfigError, InputError, TierError
from .models import FIELD_KEYS, PriceBreakdown, PriceResult, PricingConfig, TierMatch
from .numbers import as_number, format_amount, round_money
from .tier_matcher import describe_cost_range, find_matching_tier

logger = logging.getLogger(__name__)

NO_TIER_MATCH_WARNING = "No profit tier matches cost ${cost}; using desiredProfit"


class PriceCalculator:
    """
    Computes listing prices with a full derivation trail.

    Holds no state between calls beyond its own options.
    """

    def __init__(self, validator: Optional[ConfigValidator] = None, strict_tiers: bool = False):
        """
        Args:
            validator: ConfigValidator to run before each computation
            strict_tiers: Raise TierError when a cost matches no tier
                instead of falling back to desiredProfit
        """
        self.validator = validator or ConfigValidator()
        self.strict_tiers = strict_tiers

    def match_tier(self, cost: float, config) -> TierMatch:
        """
        Resolve the profit for a cost, with tier metadata.

        Raises:
            TierError: No tier matches and there is no usable fallback
        """
        config = coerce_config(config)
        tiers = config.profit_tiers.tiers if config.tiered else None

        if not tiers or not isinstance(tiers, list):
            return TierMatch(enabled=False, profit=as_number(config.desired_profit))

        found = find_matching_tier(cost, tiers)
        if found is not None:
            index, tier = found
            return TierMatch(
                enabled=True,
                profit=as_number(tier.profit),
                tier_index=index,
                cost_range=describe_cost_range(tier),
            )

        fallback = as_number(config.desired_profit)
        if self.strict_tiers or fallback is None or fallback <= 0:
            raise TierError(
                f"No profit tier matches cost ${format_amount(cost)} "
                "and no desiredProfit fallback is configured"
            )
        return TierMatch(enabled=True, profit=fallback)

    def resolve_profit(self, cost: float, config) -> float:
        """Return the desired profit applicable to cost (settlement currency)."""
        return self.match_tier(cost, config).profit

    def compute_price(self, config, cost) -> PriceResult:
        """
        Calculate the listing price for a cost.

        Args:
            config: PricingConfig or camelCase document
            cost: Sourcing cost in cost currency

        Returns:
            PriceResult with rounded price, breakdown, warnings and trace

        Raises:
            ConfigError, TierError: Configuration fails validation
            InputError: Cost is non-numeric, non-finite or not positive
            FeeConfigError: Fees leave no positive fee multiplier
            ComputationError: Resulting price is non-finite or not positive
        """
        config = coerce_config(config)
        warnings = self.validator.validate(config)

        amount = as_number(cost)
        if amount is None or not math.isfinite(amount) or amount <= 0:
            raise InputError("Invalid cost. Must be a positive number.")

        spent_rate = self._require_rate(config, 'spent_rate')
        payout_rate = self._require_rate(config, 'payout_rate')
        fixed_fee = self._setting(config, 'fixed_fee')
        sale_tax = self._setting(config, 'sale_tax')
        ebay_fee = self._setting(config, 'ebay_fee')
        ads_fee = self._setting(config, 'ads_fee')
        tds_fee = self._setting(config, 'tds_fee')
        shipping_cost = self._setting(config, 'shipping_cost')
        tax_rate = self._setting(config, 'tax_rate')

        # Steps 1-3: buying price in both currencies
        tax = amount * (tax_rate / 100)
        buying_price_source = amount + shipping_cost + tax
        buying_price_settlement = buying_price_source * spent_rate

        # Steps 4-7: profit, back to cost currency, fixed fee
        tier_match = self.match_tier(amount, config)
        if tier_match.enabled and tier_match.tier_index is None:
            warnings.append(NO_TIER_MATCH_WARNING.format(cost=format_amount(amount)))
            logger.warning("No profit tier matched cost %s, falling back to desiredProfit", amount)
        profit = tier_match.profit

        profit_component = profit + buying_price_settlement
        payout_source = profit_component / payout_rate
        with_fixed_fee = payout_source + (fixed_fee / payout_rate)

        # Steps 8-10: fee multiplier
        combined_fee_pct = (ebay_fee + ads_fee + tds_fee) / 100
        fee_multiplier = 1 - (1 + sale_tax / 100) * combined_fee_pct
        if fee_multiplier <= 0:
            raise FeeConfigError(
                "Invalid fee configuration. Fee multiplier must be positive. "
                "Check your percentage values."
            )

        # Steps 11-12: final price
        final_price = with_fixed_fee / fee_multiplier
        if not math.isfinite(final_price) or final_price <= 0:
            raise ComputationError("Calculated price is invalid. Please check your pricing configuration.")

        price = round_money(final_price)
        breakdown = PriceBreakdown.from_raw(
            {
                'cost': amount,
                'shipping': shipping_cost,
                'tax_rate': tax_rate,
                'tax': tax,
                'buying_price_source': buying_price_source,
                'buying_price_settlement': buying_price_settlement,
                'resolved_profit': profit,
                'profit_component': profit_component,
                'payout_source': payout_source,
                'fixed_fee': fixed_fee,
                'with_fixed_fee': with_fixed_fee,
                'fee_multiplier': fee_multiplier,
                'final_price': final_price,
            },
            profit_tier=tier_match,
        )

        result = PriceResult(price=price, breakdown=breakdown)
        for warning in warnings:
            result.add_warning(warning)

        result.add_trace("Tax", f"{format_amount(amount)} × {format_amount(tax_rate)}%", f"{breakdown.tax:.2f}")
        result.add_trace("Buying Price", "cost + shipping + tax", f"{breakdown.buying_price_source:.2f}")
        result.add_trace("Buying Price (settlement)", f"× spentRate {format_amount(spent_rate)}",
                         f"{breakdown.buying_price_settlement:.2f}")
        if tier_match.tier_index is not None:
            result.add_trace("Profit", f"Tier {tier_match.tier_index} ({tier_match.cost_range})",
                             f"{breakdown.resolved_profit:.2f}")
        else:
            result.add_trace("Profit", "Flat desiredProfit", f"{breakdown.resolved_profit:.2f}")
        result.add_trace("Profit Component", "profit + buying price (settlement)", f"{breakdown.profit_component:.2f}")
        result.add_trace("Payout", f"÷ payoutRate {format_amount(payout_rate)}", f"{breakdown.payout_source:.2f}")
        result.add_trace("Fixed Fee", f"+ {format_amount(fixed_fee)} ÷ payoutRate", f"{breakdown.with_fixed_fee:.2f}")
        result.add_trace("Fee Multiplier", "1 - (1 + saleTax) × (ebay + ads + tds)", f"{breakdown.fee_multiplier:.4f}")
        result.add_trace("Final Price", "with fixed fee ÷ fee multiplier", f"{price:.2f}")

        logger.debug("Priced cost %s at %s (profit %s)", amount, price, profit)
        return result

    @staticmethod
    def _setting(config: PricingConfig, attr: str) -> float:
        # Unset fee fields price at their class defaults, same as from_dict
        value = as_number(getattr(config, attr))
        if value is None:
            return float(getattr(PricingConfig, attr))
        return value

    @staticmethod
    def _require_rate(config: PricingConfig, attr: str) -> float:
        # Tiered configs skip the flat-field check, so rates are confirmed at use
        value = as_number(getattr(config, attr))
        if value is None or value <= 0:
            raise ConfigError(f"{FIELD_KEYS[attr]} is required and must be a positive number")
        return value


_default_calculator = PriceCalculator()


def calculate_start_price(config, cost) -> PriceResult:
    """Calculate a listing price with the default calculator."""
    return _default_calculator.compute_price(config, cost)


def get_applicable_profit(cost: float, config) -> float:
    """Resolve the flat or tiered profit for a cost."""
    return _default_calculator.resolve_profit(cost, config)


def validate_pricing_config(config) -> list[str]:
    """Validate a configuration, returning non-fatal warnings."""
    return _default_calculator.validator.validate(config)


def validate_profit_tiers(tiers) -> bool:
    """Validate a profit tier schedule."""
    return _default_calculator.validator.validate_profit_tiers(tiers)
