"""Explicit limb representation of an integer.

``Limbs`` stores a sign and the magnitude as little-endian unsigned 32-bit
words.  It is built from the public ``int.to_bytes`` API and reinterpreted
with a native ``array("I")``, which is only correct when the platform's
``unsigned int`` is 4 bytes wide and little-endian.  ``self_check`` verifies
that assumption against a known negative value once at import time; when it
fails, or when optimizations are switched off in the settings, the
capability flag is cleared and callers use their portable fallback.
"""
from __future__ import annotations

import logging
import sys
from array import array
from dataclasses import dataclass

from settings import load_settings

__all__ = [
    "WORD_BITS",
    "CHUNK_BASE",
    "CHUNK_DIGITS",
    "Limbs",
    "self_check",
    "optimizations_enabled",
]

logger = logging.getLogger(__name__)

WORD_BITS = 32
WORD_BYTES = WORD_BITS // 8
WORD_MASK = (1 << WORD_BITS) - 1

#: Radix used when converting limbs to decimal: 9 digits per chunk.
CHUNK_BASE = 1_000_000_000
CHUNK_DIGITS = 9

# -(2**64 + 7 * 2**32 + 5): three limbs, negative, every limb distinct.
_PROBE_VALUE = -((1 << 64) | (7 << 32) | 5)
_PROBE_WORDS = (5, 7, 1)


@dataclass(frozen=True)
class Limbs:
    """Sign plus little-endian 32-bit magnitude words.

    ``words`` never has a most-significant zero word; zero is ``Limbs(0, ())``.
    """

    sign: int
    words: tuple[int, ...]

    @classmethod
    def from_int(cls, value: int) -> Limbs:
        if value == 0:
            return cls(0, ())
        magnitude = -value if value < 0 else value
        nwords = (magnitude.bit_length() + WORD_BITS - 1) // WORD_BITS
        words = array("I")
        words.frombytes(magnitude.to_bytes(nwords * WORD_BYTES, "little"))
        return cls(-1 if value < 0 else 1, tuple(words))

    def to_int(self) -> int:
        magnitude = 0
        for word in reversed(self.words):
            magnitude = (magnitude << WORD_BITS) | word
        return -magnitude if self.sign < 0 else magnitude

    def __len__(self) -> int:
        return len(self.words)

    def to_chunks(self) -> list[int]:
        """Convert the magnitude to base ``10**9`` chunks, least significant first.

        Each source word, most significant first, is folded into the chunk
        buffer with one carry-propagating pass.
        """
        chunks: list[int] = []
        for word in reversed(self.words):
            carry = word
            for i in range(len(chunks)):
                acc = (chunks[i] << WORD_BITS) | carry
                carry, chunks[i] = divmod(acc, CHUNK_BASE)
            while carry:
                carry, low = divmod(carry, CHUNK_BASE)
                chunks.append(low)
        return chunks


def self_check() -> bool:
    """Return True if ``Limbs`` round-trips the probe value with the expected layout."""
    if array("I").itemsize != WORD_BYTES:
        return False
    probe = Limbs.from_int(_PROBE_VALUE)
    return (
        probe.sign == -1
        and probe.words == _PROBE_WORDS
        and probe.to_int() == _PROBE_VALUE
    )


def _detect() -> bool:
    settings = load_settings()
    if not settings.optimizations:
        logger.debug("limb optimizations disabled by configuration")
        return False
    if not self_check():
        logger.warning(
            "limb optimizations disabled: unexpected word layout "
            "(itemsize=%d, byteorder=%s)",
            array("I").itemsize, sys.byteorder,
        )
        return False
    return True


_OPTIMIZATIONS_ENABLED = _detect()


def optimizations_enabled() -> bool:
    """Whether the limb radix fast path is active in this process."""
    return _OPTIMIZATIONS_ENABLED
