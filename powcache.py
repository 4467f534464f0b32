"""Cached integer powers of a fixed basis.

A ``PowCache`` holds ``basis**0 .. basis**(size - 1)`` for one basis in
[3, 10].  Powers of 2 are deliberately unsupported: shifting is both faster
and allocation-free for those.

A cache is empty when created, so fetching one costs nothing until a value
is requested.  On a miss below ``max_size`` the cache grows by at least
``min_growth`` entries, or far enough to cover the requested exponent plus
``growth_headroom``.  Growth is linear rather than geometric because the
cached values already grow exponentially in size.  Exponents at or above
``max_size`` are computed on every request and never stored.

Concurrency
-----------
Populated entries live in an immutable tuple.  Growth builds a complete
replacement tuple under the cache lock and publishes it with a single
attribute assignment, so lock-free readers see either the old snapshot or
the new one, never a partial one.

Only one cache exists per basis within a registry.  ``get_cache`` uses the
process-wide default registry; build a ``PowCacheRegistry`` directly to get
isolated caches (e.g. in tests).
"""
from __future__ import annotations

import logging
import threading

from errors import BasisOutOfRangeError, NegativeExponentError
from settings import Settings, load_settings

__all__ = [
    "MIN_BASIS",
    "MAX_BASIS",
    "PowCache",
    "PowCacheRegistry",
    "get_cache",
    "default_registry",
]

logger = logging.getLogger(__name__)

MIN_BASIS = 3
MAX_BASIS = 10


def _check_basis(basis: int) -> None:
    if not isinstance(basis, int) or isinstance(basis, bool):
        raise TypeError(f"basis must be an int, got {type(basis).__name__}")
    if not MIN_BASIS <= basis <= MAX_BASIS:
        raise BasisOutOfRangeError(basis)                     # PC-BASIS-INVALID


class PowCache:
    """Powers of ``basis``, indexed by exponent.

    Instances are created by a ``PowCacheRegistry``; use ``get_cache`` rather
    than constructing one directly.
    """

    def __init__(self, basis: int, max_size: int, settings: Settings) -> None:
        _check_basis(basis)
        self._basis = basis
        self._max_size = max_size
        self._min_growth = settings.min_growth
        self._headroom = settings.growth_headroom
        self._entries: tuple[int, ...] = ()
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return (
            f"PowCache(basis={self._basis}, size={len(self._entries)}, "
            f"max_size={self._max_size})"
        )

    @property
    def basis(self) -> int:
        return self._basis

    @property
    def max_size(self) -> int:
        """Upper bound on cached entries.  The largest cached exponent is one less."""
        return self._max_size

    @property
    def size(self) -> int:
        """Number of entries computed so far."""
        return len(self._entries)

    def get(self, exponent: int) -> int:
        """Return ``basis ** exponent``.

        Cached values are returned as the same object on every call.
        """
        entries = self._entries
        if 0 <= exponent < len(entries):                      # PC-HIT
            return entries[exponent]
        if exponent < 0:                                      # PC-NEGATIVE
            raise NegativeExponentError(exponent)
        return self._get_uncached(exponent)

    def _get_uncached(self, exponent: int) -> int:
        if exponent < self._max_size:                         # PC-GROW
            return self._grow_to(exponent)[exponent]
        return self._basis ** exponent                        # PC-UNCACHED

    def _grow_to(self, exponent: int) -> tuple[int, ...]:
        with self._lock:
            entries = self._entries
            if exponent < len(entries):                       # PC-GROW-RACE-LOST
                # Another thread grew the cache while we waited.
                return entries

            old_size = len(entries)
            new_size = max(exponent + self._headroom, old_size + self._min_growth)
            new_size = min(new_size, self._max_size)

            grown = list(entries)
            value = grown[-1] if grown else 1
            if not grown:
                grown.append(value)
            for _ in range(len(grown), new_size):
                value *= self._basis
                grown.append(value)

            self._entries = tuple(grown)
            logger.debug(
                "grew pow cache basis=%d from %d to %d entries",
                self._basis, old_size, new_size,
            )
            return self._entries

    def require_max_size(self, size: int) -> None:
        """Raise ``max_size`` to at least ``size``.  Smaller values are a no-op."""
        with self._lock:
            if size > self._max_size:
                logger.debug(
                    "raised pow cache basis=%d max_size %d -> %d",
                    self._basis, self._max_size, size,
                )
                self._max_size = size


class PowCacheRegistry:
    """Owns at most one ``PowCache`` per basis."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings if settings is not None else Settings()
        self._caches: dict[int, PowCache] = {}
        self._lock = threading.Lock()

    def get_cache(self, basis: int, required_max_size: int | None = None) -> PowCache:
        """Get the cache for ``basis``, creating it if needed.

        The cache's ``max_size`` is raised to ``required_max_size`` when that is
        larger than its current bound; it is never lowered.
        """
        _check_basis(basis)
        if required_max_size is None:
            required_max_size = self.settings.default_max_size
        if required_max_size < 1:
            raise ValueError(
                f"required_max_size must be >= 1, got {required_max_size}"
            )

        with self._lock:
            cache = self._caches.get(basis)
            if cache is None:
                cache = PowCache(basis, self.settings.default_max_size, self.settings)
                self._caches[basis] = cache
                logger.debug("created pow cache for basis=%d", basis)
            cache.require_max_size(required_max_size)
            return cache

    def __contains__(self, basis: object) -> bool:
        return basis in self._caches


default_registry = PowCacheRegistry(load_settings())


def get_cache(basis: int, required_max_size: int | None = None) -> PowCache:
    """Get the process-wide cache for ``basis`` (see ``PowCacheRegistry.get_cache``).

    ``required_max_size`` defaults to the configured cache size (1024).
    """
    return default_registry.get_cache(basis, required_max_size)
