"""
Number formatting for display
"""

import math
from decimal import Context, Decimal, ROUND_HALF_UP
from typing import Optional

from config import Config


UNAVAILABLE = "—"


def format_number(
    value: Optional[float],
    max_decimals: int = 3,
    decimal_separator: Optional[str] = None
) -> str:
    """
    Render a number as a short, plain decimal string

    Args:
        value: Number to format
        max_decimals: Maximum fractional digits kept
        decimal_separator: Overrides Config.DECIMAL_SEPARATOR

    Returns:
        e.g. 1.2000 -> "1.2", 0.00001 -> "0", NaN -> "—".
        Never uses exponent notation or grouping separators.
    """
    if value is None:
        return UNAVAILABLE
    try:
        value = float(value)
    except (TypeError, ValueError):
        return UNAVAILABLE
    if not math.isfinite(value):
        return UNAVAILABLE

    separator = decimal_separator if decimal_separator is not None else Config.DECIMAL_SEPARATOR
    max_decimals = max(0, int(max_decimals))

    # repr() is the shortest string that round-trips, so 0.1 stays 0.1
    exponent = Decimal(1).scaleb(-max_decimals)
    # wide enough for any finite float at the requested scale
    context = Context(prec=max_decimals + 330)
    rounded = Decimal(repr(value)).quantize(exponent, rounding=ROUND_HALF_UP, context=context)

    text = format(rounded, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"

    return text.replace(".", separator)
