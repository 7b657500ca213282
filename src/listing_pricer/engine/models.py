"""
Data models for the pricing engine.

Uses dataclasses for structured, type-safe data representation.
Configuration documents arrive as camelCase mappings (the shape they are
stored in); from_dict/to_dict translate at the edge.
"""
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from .errors import ConfigError
from .numbers import round_money


# Defaults applied when a configuration document leaves a fee field unset
DEFAULT_FIXED_FEE = 0.0
DEFAULT_SALE_TAX = 0.0
DEFAULT_EBAY_FEE = 12.9
DEFAULT_ADS_FEE = 3.0
DEFAULT_TDS_FEE = 1.0
DEFAULT_SHIPPING_COST = 0.0
DEFAULT_TAX_RATE = 10.0

# Python attribute -> document key
FIELD_KEYS = {
    'enabled': 'enabled',
    'spent_rate': 'spentRate',
    'payout_rate': 'payoutRate',
    'desired_profit': 'desiredProfit',
    'fixed_fee': 'fixedFee',
    'sale_tax': 'saleTax',
    'ebay_fee': 'ebayFee',
    'ads_fee': 'adsFee',
    'tds_fee': 'tdsFee',
    'shipping_cost': 'shippingCost',
    'tax_rate': 'taxRate',
}

REQUIRED_FLAT_FIELDS = ('spent_rate', 'payout_rate', 'desired_profit')
PERCENTAGE_FIELDS = ('sale_tax', 'ebay_fee', 'ads_fee', 'tds_fee', 'tax_rate')
NON_NEGATIVE_FIELDS = ('fixed_fee', 'shipping_cost')


@dataclass
class TraceStep:
    """A single step in the price derivation trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class ProfitTier:
    """Desired profit for costs in [min_cost, max_cost)."""
    min_cost: Any
    max_cost: Any = None  # None = no upper bound
    profit: Any = None

    @classmethod
    def from_dict(cls, data: dict) -> 'ProfitTier':
        return cls(
            min_cost=data.get('minCost'),
            max_cost=data.get('maxCost'),
            profit=data.get('profit'),
        )

    def to_dict(self) -> dict:
        return {'minCost': self.min_cost, 'maxCost': self.max_cost, 'profit': self.profit}


@dataclass
class ProfitTiers:
    """Tiered profit schedule. When enabled it supersedes the flat profit."""
    enabled: bool = False
    tiers: Any = field(default_factory=list)

    def __post_init__(self):
        # Non-list values are left as-is so validation can report them
        if isinstance(self.tiers, list):
            self.tiers = [
                ProfitTier.from_dict(t) if isinstance(t, Mapping) else t
                for t in self.tiers
            ]

    @classmethod
    def from_dict(cls, data) -> 'ProfitTiers':
        if not data:
            return cls()
        if not isinstance(data, Mapping):
            raise ConfigError("profitTiers must be an object")
        return cls(enabled=bool(data.get('enabled', False)), tiers=data.get('tiers'))

    def to_dict(self) -> dict:
        tiers = self.tiers if isinstance(self.tiers, list) else []
        return {
            'enabled': self.enabled,
            'tiers': [t.to_dict() if isinstance(t, ProfitTier) else t for t in tiers],
        }


@dataclass
class PricingConfig:
    """
    A seller's pricing configuration for one listing template.

    Values are kept exactly as supplied; ConfigValidator decides whether
    they are usable.
    """
    enabled: bool = False

    # Currency conversion rates
    spent_rate: Any = None  # cost currency -> settlement currency
    payout_rate: Any = None  # settlement currency -> cost currency

    # Profit & fees
    desired_profit: Any = None  # settlement currency
    fixed_fee: Any = DEFAULT_FIXED_FEE  # settlement currency
    sale_tax: Any = DEFAULT_SALE_TAX
    ebay_fee: Any = DEFAULT_EBAY_FEE
    ads_fee: Any = DEFAULT_ADS_FEE
    tds_fee: Any = DEFAULT_TDS_FEE
    shipping_cost: Any = DEFAULT_SHIPPING_COST  # cost currency
    tax_rate: Any = DEFAULT_TAX_RATE

    profit_tiers: ProfitTiers = field(default_factory=ProfitTiers)

    @property
    def tiered(self) -> bool:
        """True when tiered profit is switched on."""
        return bool(self.profit_tiers and self.profit_tiers.enabled)

    @classmethod
    def from_dict(cls, data: dict) -> 'PricingConfig':
        """Build from a stored camelCase document. Unset fee fields take defaults."""
        defaults = cls()
        values = {}
        for attr, key in FIELD_KEYS.items():
            value = data.get(key)
            values[attr] = getattr(defaults, attr) if value is None else value
        values['enabled'] = bool(values['enabled'])
        values['profit_tiers'] = ProfitTiers.from_dict(data.get('profitTiers'))
        return cls(**values)

    def to_dict(self) -> dict:
        doc = {key: getattr(self, attr) for attr, key in FIELD_KEYS.items()}
        doc['profitTiers'] = self.profit_tiers.to_dict()
        return doc


def default_pricing_config() -> dict:
    """Default configuration document for a template with no pricing set up."""
    return PricingConfig().to_dict()


@dataclass
class TierMatch:
    """Which profit was applied and where it came from."""
    enabled: bool
    profit: Optional[float]
    tier_index: Optional[int] = None  # 1-based, input order
    cost_range: str = "N/A"

    def to_dict(self) -> dict:
        return {
            'enabled': self.enabled,
            'profit': self.profit,
            'tierIndex': self.tier_index,
            'costRange': self.cost_range,
        }


@dataclass
class PriceBreakdown:
    """Every intermediate figure of a price derivation, rounded for display."""
    cost: float
    shipping: float
    tax_rate: float
    tax: float
    buying_price_source: float
    buying_price_settlement: float
    resolved_profit: float
    profit_tier: TierMatch
    profit_component: float
    payout_source: float
    fixed_fee: float
    with_fixed_fee: float
    fee_multiplier: float
    final_price: float

    @classmethod
    def from_raw(cls, raw: dict, profit_tier: TierMatch) -> 'PriceBreakdown':
        """Round raw figures: 4 places for the multiplier, cents for the rest."""
        return cls(
            cost=round_money(raw['cost']),
            shipping=round_money(raw['shipping']),
            tax_rate=round_money(raw['tax_rate']),
            tax=round_money(raw['tax']),
            buying_price_source=round_money(raw['buying_price_source']),
            buying_price_settlement=round_money(raw['buying_price_settlement']),
            resolved_profit=round_money(raw['resolved_profit']),
            profit_tier=profit_tier,
            profit_component=round_money(raw['profit_component']),
            payout_source=round_money(raw['payout_source']),
            fixed_fee=round_money(raw['fixed_fee']),
            with_fixed_fee=round_money(raw['with_fixed_fee']),
            fee_multiplier=round_money(raw['fee_multiplier'], places=4),
            final_price=round_money(raw['final_price']),
        )

    def to_dict(self) -> dict:
        return {
            'cost': self.cost,
            'shipping': self.shipping,
            'taxRate': self.tax_rate,
            'tax': self.tax,
            'buyingPriceSource': self.buying_price_source,
            'buyingPriceSettlement': self.buying_price_settlement,
            'resolvedProfit': self.resolved_profit,
            'profitTier': self.profit_tier.to_dict(),
            'profitComponent': self.profit_component,
            'payoutSource': self.payout_source,
            'fixedFee': self.fixed_fee,
            'withFixedFee': self.with_fixed_fee,
            'feeMultiplier': self.fee_multiplier,
            'finalPrice': self.final_price,
        }

    def to_legacy_dict(self) -> dict:
        """Convert to the key names older listing templates read."""
        doc = self.to_dict()
        doc.update({
            'buyingPriceUSD': self.buying_price_source,
            'buyingPriceINR': self.buying_price_settlement,
            'applicableProfit': self.resolved_profit,
            'desiredProfit': self.resolved_profit,
            'payoutUSD': self.payout_source,
        })
        return doc


@dataclass
class PriceResult:
    """Complete result of a price calculation."""
    price: float
    breakdown: PriceBreakdown
    warnings: list[str] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the derivation trace."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def add_warning(self, warning: str):
        if warning not in self.warnings:
            self.warnings.append(warning)

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"→ {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"→ {t.step}: {t.description}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            'price': self.price,
            'breakdown': self.breakdown.to_dict(),
            'warnings': list(self.warnings),
        }
