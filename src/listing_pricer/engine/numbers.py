"""
Numeric helpers shared by the validator and calculator.
"""
import math
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Any, Optional


def as_number(value: Any) -> Optional[float]:
    """
    Coerce a config value to float.

    Accepts ints, floats and numeric strings. Returns None for anything
    else (None, bools, blanks, NaN, non-numeric text).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None

    if math.isnan(number):
        return None
    return number


def round_money(value: float, places: int = 2) -> float:
    """Round half away from zero to the given number of decimals."""
    # str() gives the shortest repr, so 1.005 rounds to 1.01 rather than 1.0
    amount = Decimal(str(value))
    quantum = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        # Enough digits for the integer part plus the kept decimals
        ctx.prec = max(ctx.prec, amount.adjusted() + places + 2)
        return float(amount.quantize(quantum, rounding=ROUND_HALF_UP))


def format_amount(value: float) -> str:
    """Format a cost bound the way tier labels show it ($50, $12.5)."""
    number = float(value)
    return str(int(number)) if number.is_integer() else str(number)
