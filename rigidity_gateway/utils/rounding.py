"""Display rounding helpers"""

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext

# Enough significant digits to quantize any finite float to a few decimals
DECIMAL_PRECISION = 400


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round with halves going up (2.5 -> 3.0, 0.25 -> 0.3 at one digit).

    The value is rounded as it prints, so 0.285 becomes 0.29 at two digits.
    Infinities and NaN are returned unchanged.
    """
    if not math.isfinite(value):
        return value
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        quantum = Decimal(1).scaleb(-digits)
        return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_optional(value: float | None, digits: int) -> float | None:
    return None if value is None else round_half_up(value, digits)
