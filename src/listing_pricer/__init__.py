"""
Listing Pricer Package

Derives marketplace listing prices from a sourcing cost and a seller's
pricing configuration (currency conversion, fees, tax, flat or tiered profit).
"""

__version__ = "1.0.0"
