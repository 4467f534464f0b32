"""Integer division with a selectable rounding mode.

The quotient is computed exactly: a truncating quotient plus remainder,
then a one-step adjustment decided by the remainder's sign and size.  No
floating point is involved, so every mode matches its IEEE-754 definition
applied to the exact rational ``dividend / divisor``.

Branches: RND-INVALID-MODE, RND-TO-ZERO, RND-EXACT, RND-FLOOR, RND-CEILING,
          RND-AWAY, RND-NEAREST-ABOVE-HALF, RND-NEAREST-BELOW-HALF,
          RND-HALF-AWAY, RND-HALF-EVEN, RND-HALF-TO-ZERO, RND-HALF-DOWN,
          RND-HALF-UP
"""
from __future__ import annotations

from rounding import RoundingMode, to_rounding_mode

__all__ = ["divide", "truncated_divmod"]


def truncated_divmod(dividend: int, divisor: int) -> tuple[int, int]:
    """Quotient rounded toward zero, and the remainder with the dividend's sign.

    Python's ``divmod`` rounds toward negative infinity; this undoes that
    when the operands' signs differ.
    """
    q, r = divmod(dividend, divisor)
    if r != 0 and (dividend < 0) != (divisor < 0):
        q += 1
        r -= divisor
    return q, r


def _sign(v: int) -> int:
    return (v > 0) - (v < 0)


def _away_from_zero(q: int, sign: int) -> int:
    return q + 1 if sign > 0 else q - 1


def divide(
    dividend: int,
    divisor: int,
    mode: RoundingMode | int | str = RoundingMode.MIDPOINT_TO_EVEN,
) -> int:
    """Divide two integers, rounding any fractional part according to ``mode``.

    ``mode`` may be anything ``to_rounding_mode`` accepts.  An unknown mode
    is rejected before any arithmetic; a zero divisor raises
    ``ZeroDivisionError``.
    """
    mode = to_rounding_mode(mode)                             # RND-INVALID-MODE
    for operand in (dividend, divisor):
        if not isinstance(operand, int) or isinstance(operand, bool):
            raise TypeError(f"expected an int, got {type(operand).__name__}")
    if divisor == 0:
        raise ZeroDivisionError("integer division by zero")

    q, r = truncated_divmod(dividend, divisor)

    if mode == RoundingMode.TO_ZERO:                          # RND-TO-ZERO
        return q
    if r == 0:                                                # RND-EXACT
        return q

    sign = _sign(dividend) * _sign(divisor)

    if mode == RoundingMode.TO_NEGATIVE_INFINITY:             # RND-FLOOR
        return q - 1 if sign < 0 else q
    if mode == RoundingMode.TO_POSITIVE_INFINITY:             # RND-CEILING
        return q + 1 if sign > 0 else q
    if mode == RoundingMode.AWAY_FROM_ZERO:                   # RND-AWAY
        return _away_from_zero(q, sign)

    # Round to nearest: compare twice the remainder against the divisor.
    twice = abs(r) << 1
    half_cmp = (twice > abs(divisor)) - (twice < abs(divisor))

    if half_cmp > 0:                                          # RND-NEAREST-ABOVE-HALF
        return _away_from_zero(q, sign)
    if half_cmp < 0:                                          # RND-NEAREST-BELOW-HALF
        return q

    # Exact midpoint.
    if mode == RoundingMode.MIDPOINT_AWAY_FROM_ZERO:          # RND-HALF-AWAY
        return _away_from_zero(q, sign)
    if mode == RoundingMode.MIDPOINT_TO_EVEN:                 # RND-HALF-EVEN
        return _away_from_zero(q, sign) if q & 1 else q
    if mode == RoundingMode.MIDPOINT_TO_NEGATIVE_INFINITY:    # RND-HALF-DOWN
        return q - 1 if sign < 0 else q
    if mode == RoundingMode.MIDPOINT_TO_POSITIVE_INFINITY:    # RND-HALF-UP
        return q + 1 if sign > 0 else q
    return q                                                  # RND-HALF-TO-ZERO
