"""Engine subpackage - configuration validation and price calculation."""
from .config_validator import ConfigValidator
from .errors import (
    ComputationError,
    ConfigError,
    FeeConfigError,
    InputError,
    PricingError,
    TierError,
)
from .models import (
    PriceBreakdown,
    PriceResult,
    PricingConfig,
    ProfitTier,
    ProfitTiers,
    TierMatch,
    default_pricing_config,
)
from .price_calculator import (
    PriceCalculator,
    calculate_start_price,
    get_applicable_profit,
    validate_pricing_config,
    validate_profit_tiers,
)

__all__ = [
    'ConfigValidator', 'PriceCalculator',
    'PricingConfig', 'ProfitTier', 'ProfitTiers', 'TierMatch', 'PriceBreakdown', 'PriceResult',
    'default_pricing_config',
    'calculate_start_price', 'get_applicable_profit', 'validate_pricing_config', 'validate_profit_tiers',
    'PricingError', 'ConfigError', 'TierError', 'InputError', 'FeeConfigError', 'ComputationError',
]
