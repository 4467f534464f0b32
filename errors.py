"""Exception types raised for precondition violations.

Every error here is raised synchronously at the point of the call, before
any arithmetic is attempted.  They subclass ``ValueError`` so callers that
already guard numeric input with ``except ValueError`` keep working.

Division by zero is not wrapped: the built-in ``ZeroDivisionError``
propagates unchanged.
"""
from __future__ import annotations

__all__ = [
    "BigIntExtensionsError",
    "BasisOutOfRangeError",
    "NegativeExponentError",
    "UnsupportedRoundingModeError",
]


class BigIntExtensionsError(Exception):
    """Root of the library's error hierarchy."""


class BasisOutOfRangeError(BigIntExtensionsError, ValueError):
    """Raised when a power cache is requested for a basis outside [3, 10]."""

    def __init__(self, basis: int) -> None:
        self.basis = basis
        super().__init__(
            f"basis must be between 3 and 10, got {basis!r} "
            "(use shifting for powers of 2)"
        )


class NegativeExponentError(BigIntExtensionsError, ValueError):
    """Raised when a cached power is requested for a negative exponent."""

    def __init__(self, exponent: int) -> None:
        self.exponent = exponent
        super().__init__(f"exponent must be >= 0, got {exponent}")


class UnsupportedRoundingModeError(BigIntExtensionsError, ValueError):
    """Raised when a rounding mode value has no defined meaning."""

    def __init__(self, mode: object) -> None:
        self.mode = mode
        super().__init__(f"Unsupported rounding mode {mode!r}")
