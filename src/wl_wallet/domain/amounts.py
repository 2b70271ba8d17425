"""Lenient amount parsing.

Amounts are never rejected: the leading decimal literal of the input is
used ("12.5abc" -> 12.5, " -3" -> -3.0) and anything without one, including
booleans, null, and non-finite values, is treated as 0.
"""

import math
import re
from typing import Any

_LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_amount(value: Any) -> float:
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            # ints beyond float range
            return 0.0
    else:
        match = _LEADING_NUMBER.match(str(value))
        if match is None:
            return 0.0
        number = float(match.group(0))
    return number if math.isfinite(number) else 0.0
