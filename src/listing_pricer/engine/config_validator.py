"""
Config Validator - Rejects pricing configurations that cannot yield a price.

Runs before any computation. Checks required flat-profit fields,
percentage bounds, non-negative amounts and, when tiered profit is on,
that the tier ranges are contiguous and non-overlapping.
"""
import logging
from collections.abc import Mapping
from typing import Optional

from .errors import ConfigError, TierError
from .models import (
    FIELD_KEYS,
    NON_NEGATIVE_FIELDS,
    PERCENTAGE_FIELDS,
    REQUIRED_FLAT_FIELDS,
    PricingConfig,
    ProfitTier,
)
from .numbers import as_number

logger = logging.getLogger(__name__)

UNBOUNDED_LAST_TIER_WARNING = "Last tier should have maxCost = null for unlimited range"


def coerce_config(config) -> PricingConfig:
    """Accept a PricingConfig or a stored document mapping."""
    if config is None:
        raise ConfigError("Pricing config is required")
    if isinstance(config, PricingConfig):
        return config
    if isinstance(config, Mapping):
        return PricingConfig.from_dict(config)
    raise ConfigError("Pricing config is required")


class ConfigValidator:
    """
    Validates pricing configurations.

    Stateless; one instance can be shared freely.
    """

    def validate(self, config) -> list[str]:
        """
        Validate a configuration.

        Args:
            config: PricingConfig or camelCase document

        Returns:
            Non-fatal warnings (empty when clean)

        Raises:
            ConfigError: Missing or out-of-range field
            TierError: Invalid tier schedule (tiered mode only)
        """
        config = coerce_config(config)
        warnings = []

        if config.tiered:
            self.validate_profit_tiers(config.profit_tiers.tiers, warnings)
        else:
            for attr in REQUIRED_FLAT_FIELDS:
                value = as_number(getattr(config, attr))
                if value is None or value <= 0:
                    raise ConfigError(f"{FIELD_KEYS[attr]} is required and must be a positive number")

        for attr in PERCENTAGE_FIELDS:
            raw = getattr(config, attr)
            if raw is None:
                continue
            value = as_number(raw)
            if value is None or value < 0 or value > 100:
                raise ConfigError(f"{FIELD_KEYS[attr]} must be between 0 and 100")

        for attr in NON_NEGATIVE_FIELDS:
            raw = getattr(config, attr)
            if raw is None:
                continue
            value = as_number(raw)
            if value is None or value < 0:
                raise ConfigError(f"{FIELD_KEYS[attr]} must be a non-negative number")

        return warnings

    def validate_profit_tiers(self, tiers, warnings: Optional[list] = None) -> bool:
        """
        Validate a profit tier schedule as a set.

        Tiers are checked in ascending minCost order; indices in messages
        are 1-based positions in that order.

        Raises:
            TierError: Empty list, bad tier fields, overlap or gap
        """
        if not tiers or not isinstance(tiers, list):
            raise TierError("At least one profit tier is required when tiered profit is enabled")

        parsed = [self._parse_tier(tier) for tier in tiers]

        # Sort by minCost; an unparseable minCost sorts first and is reported as tier 1
        ordered = sorted(
            parsed,
            key=lambda t: (t[0] is not None, t[0] if t[0] is not None else 0.0),
        )

        for i, (min_cost, max_cost, profit, unbounded) in enumerate(ordered):
            position = i + 1

            if min_cost is None or min_cost < 0:
                raise TierError(f"Tier {position}: minCost must be a non-negative number")

            if profit is None or profit <= 0:
                raise TierError(f"Tier {position}: profit must be a positive number")

            if not unbounded and (max_cost is None or max_cost <= min_cost):
                raise TierError(f"Tier {position}: maxCost must be greater than minCost")

            if i < len(ordered) - 1:
                next_min = ordered[i + 1][0]

                if unbounded:
                    raise TierError(f"Tier {position}: Only the last tier can have maxCost as null/unlimited")

                if max_cost > next_min:
                    raise TierError(f"Tier {position} and {position + 1}: Ranges cannot overlap")

                if max_cost != next_min:
                    raise TierError(f"Tier {position} and {position + 1}: Ranges must be continuous (no gaps)")

            elif not unbounded:
                logger.warning(UNBOUNDED_LAST_TIER_WARNING)
                if warnings is not None and UNBOUNDED_LAST_TIER_WARNING not in warnings:
                    warnings.append(UNBOUNDED_LAST_TIER_WARNING)

        return True

    @staticmethod
    def _parse_tier(tier) -> tuple:
        """Return (min_cost, max_cost, profit, unbounded) with numbers coerced."""
        if isinstance(tier, Mapping):
            tier = ProfitTier.from_dict(tier)
        if not isinstance(tier, ProfitTier):
            return None, None, None, True
        unbounded = tier.max_cost is None
        return (
            as_number(tier.min_cost),
            None if unbounded else as_number(tier.max_cost),
            as_number(tier.profit),
            unbounded,
        )
