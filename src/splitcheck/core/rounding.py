#!/usr/bin/env python3
"""
Rounding Policy

Every amount the engine produces passes through a single rounding policy so that
totals, per-member shares and transfer suggestions agree on precision.

Rounding Methods:
- round: half-up (0.005 -> 0.01, -0.005 -> 0.00)
- floor: toward negative infinity
- ceil: toward positive infinity

Values are rounded as the shortest decimal that reproduces the float (its repr),
so 0.07 stays 0.07 under ceil while floor(v) <= v <= ceil(v) always holds.
"""

from dataclasses import dataclass
from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_DOWN, ROUND_HALF_UP, Decimal, localcontext
from enum import Enum

DEFAULT_PRECISION = 2
MIN_PRECISION = 0
MAX_PRECISION = 6

# Enough significant digits for any finite float at any requested precision
_FLOAT_DIGITS = 330


class RoundingMethod(Enum):
    """Supported rounding methods."""

    ROUND = "round"
    FLOOR = "floor"
    CEIL = "ceil"

    @classmethod
    def parse(cls, value: "str | RoundingMethod") -> "RoundingMethod":
        """Accept either an enum member or its string value."""
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


def clamp_precision(precision: int) -> int:
    """Limit a precision to the supported MIN_PRECISION..MAX_PRECISION range."""
    return max(MIN_PRECISION, min(MAX_PRECISION, precision))


def round_amount(
    value: float,
    precision: int = DEFAULT_PRECISION,
    method: RoundingMethod | str = RoundingMethod.ROUND,
) -> float:
    """
    Round a value to the given number of decimal places.

    Args:
        value: Finite number to round
        precision: Number of decimal places (>= 0)
        method: Rounding method (round, floor or ceil)

    Returns:
        Rounded value

    Examples:
        round_amount(2.345) -> 2.35
        round_amount(2.349, method="floor") -> 2.34
        round_amount(2.341, method="ceil") -> 2.35
    """
    method = RoundingMethod.parse(method)
    amount = Decimal(repr(float(value)))

    if method == RoundingMethod.FLOOR:
        mode = ROUND_FLOOR
    elif method == RoundingMethod.CEIL:
        mode = ROUND_CEILING
    else:
        # Ties go toward positive infinity: -0.5 -> 0, 0.5 -> 1
        mode = ROUND_HALF_UP if amount >= 0 else ROUND_HALF_DOWN

    with localcontext() as ctx:
        ctx.prec = _FLOAT_DIGITS + abs(precision)
        rounded = amount.quantize(Decimal(1).scaleb(-precision), rounding=mode)

    result = float(rounded)
    # Normalize -0.0 so exports never show "-0"
    return result if result != 0 else 0.0


@dataclass(frozen=True)
class Rounder:
    """Rounding policy bound to a precision and method."""

    precision: int = DEFAULT_PRECISION
    method: RoundingMethod = RoundingMethod.ROUND

    def __call__(self, value: float, precision: int | None = None, method: RoundingMethod | str | None = None) -> float:
        """Round using this policy, optionally overriding precision or method."""
        return round_amount(
            value,
            self.precision if precision is None else precision,
            self.method if method is None else method,
        )
