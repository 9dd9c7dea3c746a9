"""Deferred loading of the :mod:`swisseph` extension.

The calculators only need an :class:`~astrostorm.ephemeris.provider.EphemerisProvider`,
so importing :mod:`astrostorm` never touches pyswisseph.  The extension is
imported the first time :class:`~astrostorm.ephemeris.swisseph_adapter.SwissEphemerisProvider`
reaches for it through :data:`swe`.
"""

from __future__ import annotations

import importlib
import importlib.util
from functools import lru_cache
from typing import Any

from ..exceptions import ConfigurationError

__all__ = ["swe", "reset_swe", "has_swe", "swe_version"]

_MODULE_NAME = "swisseph"


@lru_cache(maxsize=1)
def _load() -> Any:
    try:
        return importlib.import_module(_MODULE_NAME)
    except ImportError as exc:
        raise ConfigurationError(
            "SwissEphemerisProvider requires pyswisseph (pip install pyswisseph); "
            "pass another EphemerisProvider to run without it."
        ) from exc


class _SweProxy:
    """Calling the proxy returns the module; attributes are forwarded to it."""

    def __call__(self) -> Any:
        return _load()

    def __getattr__(self, item: str) -> Any:
        return getattr(_load(), item)


swe = _SweProxy()


def reset_swe() -> None:
    """Drop the cached module so the next access imports it again."""

    _load.cache_clear()


def has_swe() -> bool:
    if _load.cache_info().currsize:
        return True
    return importlib.util.find_spec(_MODULE_NAME) is not None


def swe_version() -> str:
    """Return the Swiss Ephemeris release reported by pyswisseph."""

    return str(getattr(_load(), "version", "unknown"))
