"""
Pricing errors.

Every failure in the engine is raised synchronously as one of these.
Messages name the offending field or tier and are meant to be shown
to the seller as-is.
"""


class PricingError(ValueError):
    """Base class for all pricing engine errors."""
    kind = "PricingError"


class ConfigError(PricingError):
    """Missing or structurally invalid configuration field."""
    kind = "ConfigError"


class TierError(PricingError):
    """Invalid, overlapping, non-continuous or empty profit tier list."""
    kind = "TierError"


class InputError(PricingError):
    """Invalid cost argument."""
    kind = "InputError"


class FeeConfigError(PricingError):
    """Fee and tax percentages leave no positive fee multiplier."""
    kind = "FeeConfigError"


class ComputationError(PricingError):
    """Computed price is non-finite or not positive."""
    kind = "ComputationError"
