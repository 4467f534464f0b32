"""Base-10 digit counting for arbitrary-size integers.

``count_digits`` estimates the decimal exponent from the bit length and
corrects it with a single comparison against a cached power of ten, so no
logarithm of the full value and no string conversion is ever computed.

``count_digits_and_trailing_zeros`` also reports trailing zeros.  Odd values
have none.  Even values are handled by magnitude tier:

==========  ==========================  ==========================================
tier        magnitude                   algorithm
==========  ==========================  ==========================================
small       <= 2**64 - 1                repeated division by 10
medium      <= 2**128 - 1               split at 10**19, small scan on each half
large       anything bigger             limb radix conversion to base 10**9 when
                                        optimizations are enabled, else exact
                                        decimal digits via ``decimal.Decimal``
==========  ==========================  ==========================================

Branches: CD-SMALL, CD-ESTIMATE-EXACT, CD-ESTIMATE-LOW, TZ-SMALL-VALUE,
          TZ-ODD, TZ-TIER-SMALL, TZ-TIER-MEDIUM, TZ-TIER-LARGE-LIMBS,
          TZ-TIER-LARGE-DECIMAL
"""
from __future__ import annotations

import math
from decimal import Decimal
from typing import NamedTuple

from limbs import CHUNK_DIGITS, Limbs, optimizations_enabled
from powcache import default_registry, get_cache

__all__ = [
    "UINT64_MAX",
    "UINT128_MAX",
    "DigitCount",
    "count_digits",
    "count_digits_and_trailing_zeros",
]

UINT64_MAX = (1 << 64) - 1
UINT128_MAX = (1 << 128) - 1

_LOG10_2 = math.log10(2)
_MEDIUM_SPLIT_DIGITS = 19
_MEDIUM_SPLIT = 10 ** _MEDIUM_SPLIT_DIGITS

_pow10 = get_cache(10)
_settings = default_registry.settings


class DigitCount(NamedTuple):
    digits: int
    trailing_zeros: int


def _require_int(value: object) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"expected an int, got {type(value).__name__}")


# ---------------------------------------------------------------------------
# Digit count
# ---------------------------------------------------------------------------

def count_digits(value: int) -> int:
    """Number of base-10 digits in ``value``.  Zero has 1 digit; the sign is not counted."""
    _require_int(value)
    if -10 < value < 10:                                      # CD-SMALL
        return 1
    return _count_digits(abs(value))


def _count_digits(magnitude: int) -> int:
    # The bit-length estimate is either the exact digit count or one short.
    estimate = int(magnitude.bit_length() * _LOG10_2)
    if magnitude >= _pow10.get(estimate):                     # CD-ESTIMATE-LOW
        return estimate + 1
    return estimate                                           # CD-ESTIMATE-EXACT


# ---------------------------------------------------------------------------
# Digit count with trailing zeros
# ---------------------------------------------------------------------------

def count_digits_and_trailing_zeros(value: int) -> DigitCount:
    """Number of base-10 digits and trailing zeros in ``value``.

    Zero reports 1 digit and 0 trailing zeros.  Negative values are measured
    by magnitude.
    """
    _require_int(value)
    if -10 < value < 10:                                      # TZ-SMALL-VALUE
        return DigitCount(1, 0)

    magnitude = abs(value)
    if magnitude & 1:                                         # TZ-ODD
        return DigitCount(_count_digits(magnitude), 0)

    if magnitude <= UINT64_MAX:                               # TZ-TIER-SMALL
        return _scan(magnitude)
    if magnitude <= UINT128_MAX:                              # TZ-TIER-MEDIUM
        return _split_scan(magnitude)

    if optimizations_enabled():
        limbs = Limbs.from_int(magnitude)
        if len(limbs) <= _settings.limb_path_max_words:       # TZ-TIER-LARGE-LIMBS
            return _limb_count(limbs)
    return _decimal_count(magnitude)                          # TZ-TIER-LARGE-DECIMAL


def _scan(magnitude: int) -> DigitCount:
    """Peel decimal digits off a positive value one at a time."""
    trailing_zeros = 0
    digits = 1

    while True:
        magnitude, remainder = divmod(magnitude, 10)
        if remainder:
            break
        trailing_zeros += 1
        digits += 1

    while magnitude:
        magnitude //= 10
        digits += 1

    return DigitCount(digits, trailing_zeros)


def _split_scan(magnitude: int) -> DigitCount:
    high, low = divmod(magnitude, _MEDIUM_SPLIT)
    high_count = _scan(high)
    digits = high_count.digits + _MEDIUM_SPLIT_DIGITS
    if low == 0:
        return DigitCount(digits, high_count.trailing_zeros + _MEDIUM_SPLIT_DIGITS)
    return DigitCount(digits, _scan(low).trailing_zeros)


def _limb_count(limbs: Limbs) -> DigitCount:
    chunks = limbs.to_chunks()
    top = len(chunks) - 1
    digits = top * CHUNK_DIGITS
    trailing_zeros = 0
    hit_nonzero = False

    for chunk in chunks[:top]:
        if chunk == 0:
            trailing_zeros += CHUNK_DIGITS
            continue
        while chunk % 10 == 0:
            trailing_zeros += 1
            chunk //= 10
        hit_nonzero = True
        break

    # The most significant chunk has no leading zero padding.
    chunk = chunks[top]
    while chunk:
        digits += 1
        if not hit_nonzero:
            if chunk % 10 == 0:
                trailing_zeros += 1
            else:
                hit_nonzero = True
        chunk //= 10

    return DigitCount(digits, trailing_zeros)


def _decimal_count(magnitude: int) -> DigitCount:
    # Decimal(int) converts exactly and is not bound by the int -> str digit limit.
    digit_tuple = Decimal(magnitude).as_tuple().digits
    trailing_zeros = 0
    for digit in reversed(digit_tuple):
        if digit:
            break
        trailing_zeros += 1
    return DigitCount(len(digit_tuple), trailing_zeros)
