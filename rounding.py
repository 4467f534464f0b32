"""Rounding modes for integer division.

``RoundingMode`` has nine members.  The first five share their ordinals
with the older five-valued scheme (``LegacyRounding``), so a legacy value
maps onto the same-named mode by ordinal.  ``to_rounding_mode`` also
accepts the rounding constants of the ``decimal`` module.
"""
from __future__ import annotations

import decimal
from enum import IntEnum

from errors import UnsupportedRoundingModeError

__all__ = [
    "RoundingMode",
    "LegacyRounding",
    "to_rounding_mode",
]


class RoundingMode(IntEnum):
    """How a fractional quotient is rounded to an integer."""

    #: Nearest; halfway cases go to the even neighbour.
    MIDPOINT_TO_EVEN = 0
    #: Nearest; halfway cases go away from zero.
    MIDPOINT_AWAY_FROM_ZERO = 1
    #: Directed: truncate, never larger in magnitude than the exact result.
    TO_ZERO = 2
    #: Directed: floor.
    TO_NEGATIVE_INFINITY = 3
    #: Directed: ceiling.
    TO_POSITIVE_INFINITY = 4
    #: Directed: never smaller in magnitude than the exact result.
    AWAY_FROM_ZERO = 5
    #: Nearest; halfway cases go toward zero.
    MIDPOINT_TO_ZERO = 6
    #: Nearest; halfway cases go down.
    MIDPOINT_TO_NEGATIVE_INFINITY = 7
    #: Nearest; halfway cases go up.
    MIDPOINT_TO_POSITIVE_INFINITY = 8

    @property
    def is_midpoint(self) -> bool:
        """True for the round-to-nearest modes, which differ only on exact halves."""
        return self in _MIDPOINT_MODES


_MIDPOINT_MODES = frozenset({
    RoundingMode.MIDPOINT_TO_EVEN,
    RoundingMode.MIDPOINT_AWAY_FROM_ZERO,
    RoundingMode.MIDPOINT_TO_ZERO,
    RoundingMode.MIDPOINT_TO_NEGATIVE_INFINITY,
    RoundingMode.MIDPOINT_TO_POSITIVE_INFINITY,
})


class LegacyRounding(IntEnum):
    """The original five-valued rounding scheme."""

    TO_EVEN = 0
    AWAY_FROM_ZERO = 1
    TO_ZERO = 2
    TO_NEGATIVE_INFINITY = 3
    TO_POSITIVE_INFINITY = 4

    def to_rounding_mode(self) -> RoundingMode:
        return RoundingMode(int(self))


_DECIMAL_ROUNDING = {
    decimal.ROUND_HALF_EVEN: RoundingMode.MIDPOINT_TO_EVEN,
    decimal.ROUND_HALF_UP: RoundingMode.MIDPOINT_AWAY_FROM_ZERO,
    decimal.ROUND_HALF_DOWN: RoundingMode.MIDPOINT_TO_ZERO,
    decimal.ROUND_DOWN: RoundingMode.TO_ZERO,
    decimal.ROUND_UP: RoundingMode.AWAY_FROM_ZERO,
    decimal.ROUND_FLOOR: RoundingMode.TO_NEGATIVE_INFINITY,
    decimal.ROUND_CEILING: RoundingMode.TO_POSITIVE_INFINITY,
}


def to_rounding_mode(mode: object) -> RoundingMode:
    """Coerce ``mode`` to a ``RoundingMode``.

    Accepts a ``RoundingMode``, a ``LegacyRounding``, a plain ordinal, or a
    ``decimal`` rounding constant such as ``decimal.ROUND_HALF_EVEN``.
    Anything else raises ``UnsupportedRoundingModeError``.
    """
    if isinstance(mode, RoundingMode):
        return mode
    if isinstance(mode, LegacyRounding):
        return mode.to_rounding_mode()
    if isinstance(mode, str):
        try:
            return _DECIMAL_ROUNDING[mode]
        except KeyError:
            raise UnsupportedRoundingModeError(mode) from None
    if isinstance(mode, int) and not isinstance(mode, bool):
        try:
            return RoundingMode(mode)
        except ValueError:
            raise UnsupportedRoundingModeError(mode) from None
    raise UnsupportedRoundingModeError(mode)
