"""Tunable settings.

All knobs have defaults matching the library's documented behaviour; the
environment can override them for benchmarking or to force the portable
code paths in tests.

Environment variables
---------------------
BIGINT_EXT_CACHE_MAX_SIZE        default max size of a new power cache
BIGINT_EXT_CACHE_MIN_GROWTH      minimum number of entries added per growth
BIGINT_EXT_CACHE_HEADROOM        extra entries past a missed exponent
BIGINT_EXT_OPTIMIZATIONS         0/false/no/off disables the limb fast path
BIGINT_EXT_LIMB_PATH_MAX_WORDS   largest value (in 32-bit limbs) for the fast path
"""
from __future__ import annotations

import os
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

ENV_PREFIX = "BIGINT_EXT_"

_ENV_FIELDS = {
    "CACHE_MAX_SIZE": "default_max_size",
    "CACHE_MIN_GROWTH": "min_growth",
    "CACHE_HEADROOM": "growth_headroom",
    "OPTIMIZATIONS": "optimizations",
    "LIMB_PATH_MAX_WORDS": "limb_path_max_words",
}

# Empty means "off"; everything else goes through pydantic's bool parsing.
_EMPTY = ""


class Settings(BaseModel):
    """Validated configuration for caches and the digit-counting fast path."""

    model_config = ConfigDict(frozen=True)

    default_max_size: int = Field(
        default=1024,
        ge=1,
        description="Max size given to a newly created power cache",
    )
    min_growth: int = Field(
        default=64,
        ge=1,
        description="Minimum number of entries added when a cache grows",
    )
    growth_headroom: int = Field(
        default=10,
        ge=1,
        description="Entries allocated past the missed exponent on growth",
    )
    optimizations: bool = Field(
        default=True,
        description="Allow the limb radix path for large trailing-zero counts",
    )
    limb_path_max_words: int = Field(
        default=4096,
        ge=1,
        description="Values with more 32-bit limbs than this use the fallback",
    )

    @field_validator("optimizations", mode="before")
    @classmethod
    def parse_flag(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().lower()
            return False if v == _EMPTY else v
        return v


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build settings from ``environ`` (defaults to ``os.environ``).

    Unset variables keep their defaults.  Malformed values raise
    ``pydantic.ValidationError``.
    """
    if environ is None:
        environ = os.environ

    overrides: dict[str, Any] = {}
    for suffix, field_name in _ENV_FIELDS.items():
        raw = environ.get(ENV_PREFIX + suffix)
        if raw is not None:
            overrides[field_name] = raw
    return Settings.model_validate(overrides)
