"""Number Text — decimal rendering of numeric results for text content.

Invariants:
    - int renders exactly (arbitrary precision, no exponent)
    - Integral floats render without a trailing ".0" (5.0 -> "5")
    - Non-integral floats use the shortest round-trip digits
    - Exponent form only outside [1e-6, 1e21), with an explicit sign ("1e+21", "1e-7")
    - -0.0 renders as "0"

Design Decisions:
    - Follows the Number-to-String rules clients already expect from MCP demo
      servers, so "2 + 3" reads "5" on either side of the wire
    - Digits come from repr(): Python and those rules agree on shortest round-trip digits
"""

import math
from decimal import Decimal


def format_number(value: int | float) -> str:
    """Render a numeric result as text."""
    if isinstance(value, bool):
        raise TypeError("bool is not a number")
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    return sign + _format_positive(abs(value))


def _format_positive(value: float) -> str:
    _, digit_tuple, exponent = Decimal(repr(value)).as_tuple()
    digits = "".join(str(d) for d in digit_tuple).rstrip("0") or "0"
    # value == 0.digits * 10**n
    n = len(digit_tuple) + exponent
    k = len(digits)

    if k <= n <= 21:
        return digits + "0" * (n - k)
    if 0 < n <= 21:
        return digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return "0." + "0" * (-n) + digits

    e = n - 1
    exp = f"e{'+' if e >= 0 else '-'}{abs(e)}"
    if k == 1:
        return digits + exp
    return digits[0] + "." + digits[1:] + exp
