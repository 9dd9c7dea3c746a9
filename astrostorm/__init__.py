"""AstroStorm: sidereal (Vedic) chart calculations on top of Swiss Ephemeris.

The package is layered: :mod:`astrostorm.core` holds the pure angular and
zodiacal tables, :mod:`astrostorm.ephemeris` wraps ``pyswisseph`` behind the
:class:`~astrostorm.ephemeris.EphemerisProvider` protocol,
:mod:`astrostorm.chart` assembles a :class:`~astrostorm.chart.VedicChart` and
:mod:`astrostorm.vedic` derives vargas, dashas, panchanga, aspects, yogas
and planetary conditions from it.
"""

from __future__ import annotations

from .chart import BirthData, HouseSystem, VedicChart, compute_vedic_chart
from .core import Nakshatra, Planet, ZodiacSign
from .ephemeris import EphemerisProvider, SwissEphemerisProvider
from .exceptions import (
    AstroStormError,
    ConfigurationError,
    EphemerisComputationFailure,
    HouseAssignmentError,
    MissingBodyPosition,
)

__version__ = "0.1.0"

__all__ = [
    "AstroStormError",
    "BirthData",
    "ConfigurationError",
    "EphemerisComputationFailure",
    "EphemerisProvider",
    "HouseAssignmentError",
    "HouseSystem",
    "MissingBodyPosition",
    "Nakshatra",
    "Planet",
    "SwissEphemerisProvider",
    "VedicChart",
    "ZodiacSign",
    "__version__",
    "compute_vedic_chart",
]
