"""Ephemeris access layer."""

from __future__ import annotations

from .provider import EphemerisProvider, HouseCusps, RawPosition, RiseEvent
from .swe import has_swe
from .swisseph_adapter import SUPPORTED_AYANAMSAS, SUPPORTED_HOUSE_CODES, SwissEphemerisProvider

__all__ = [
    "EphemerisProvider",
    "HouseCusps",
    "RawPosition",
    "RiseEvent",
    "SUPPORTED_AYANAMSAS",
    "SUPPORTED_HOUSE_CODES",
    "SwissEphemerisProvider",
    "has_swe",
]
