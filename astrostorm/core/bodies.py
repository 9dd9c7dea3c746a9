"""Planet identities and the static tables attached to them.

The :class:`Planet` enumeration is deliberately inert: it only names the
grahas.  Swiss Ephemeris identifiers, display metadata and orb classes live in
:data:`PLANET_DATA` and are reached through the free functions below so the
enum members stay trivially serialisable.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Final

__all__ = [
    "Planet",
    "PlanetClass",
    "PlanetInfo",
    "PLANET_DATA",
    "MAIN_PLANETS",
    "OUTER_PLANETS",
    "NODES",
    "LUMINARIES",
    "NATURAL_BRIGHTNESS",
    "planet_info",
    "planet_class",
    "swiss_id",
    "parse_planet",
]


class Planet(str, Enum):
    """Bodies recognised by the calculators."""

    SUN = "Sun"
    MOON = "Moon"
    MERCURY = "Mercury"
    VENUS = "Venus"
    MARS = "Mars"
    JUPITER = "Jupiter"
    SATURN = "Saturn"
    RAHU = "Rahu"
    KETU = "Ketu"
    URANUS = "Uranus"
    NEPTUNE = "Neptune"
    PLUTO = "Pluto"


class PlanetClass(str, Enum):
    """Orb families used by the aspect detector."""

    LUMINARY = "luminary"
    PERSONAL = "personal"
    SOCIAL = "social"
    NODAL = "nodal"
    OUTER = "outer"


@dataclass(frozen=True)
class PlanetInfo:
    planet: Planet
    swiss_id: int
    abbreviation: str
    orb_class: PlanetClass


PLANET_DATA: Final[Mapping[Planet, PlanetInfo]] = {
    Planet.SUN: PlanetInfo(Planet.SUN, 0, "Su", PlanetClass.LUMINARY),
    Planet.MOON: PlanetInfo(Planet.MOON, 1, "Mo", PlanetClass.LUMINARY),
    Planet.MERCURY: PlanetInfo(Planet.MERCURY, 2, "Me", PlanetClass.PERSONAL),
    Planet.VENUS: PlanetInfo(Planet.VENUS, 3, "Ve", PlanetClass.PERSONAL),
    Planet.MARS: PlanetInfo(Planet.MARS, 4, "Ma", PlanetClass.PERSONAL),
    Planet.JUPITER: PlanetInfo(Planet.JUPITER, 5, "Ju", PlanetClass.SOCIAL),
    Planet.SATURN: PlanetInfo(Planet.SATURN, 6, "Sa", PlanetClass.SOCIAL),
    # Rahu defaults to the true node; Ketu is derived from it.
    Planet.RAHU: PlanetInfo(Planet.RAHU, 11, "Ra", PlanetClass.NODAL),
    Planet.KETU: PlanetInfo(Planet.KETU, 11, "Ke", PlanetClass.NODAL),
    Planet.URANUS: PlanetInfo(Planet.URANUS, 7, "Ur", PlanetClass.OUTER),
    Planet.NEPTUNE: PlanetInfo(Planet.NEPTUNE, 8, "Ne", PlanetClass.OUTER),
    Planet.PLUTO: PlanetInfo(Planet.PLUTO, 9, "Pl", PlanetClass.OUTER),
}
"""Static metadata keyed by :class:`Planet`."""

MAIN_PLANETS: Final[Sequence[Planet]] = (
    Planet.SUN,
    Planet.MOON,
    Planet.MARS,
    Planet.MERCURY,
    Planet.JUPITER,
    Planet.VENUS,
    Planet.SATURN,
    Planet.RAHU,
    Planet.KETU,
)
"""The traditional nine grahas in chart order."""

OUTER_PLANETS: Final[frozenset[Planet]] = frozenset(
    {Planet.URANUS, Planet.NEPTUNE, Planet.PLUTO}
)
NODES: Final[frozenset[Planet]] = frozenset({Planet.RAHU, Planet.KETU})
LUMINARIES: Final[frozenset[Planet]] = frozenset({Planet.SUN, Planet.MOON})


def planet_info(planet: Planet) -> PlanetInfo:
    return PLANET_DATA[planet]


def planet_class(planet: Planet) -> PlanetClass:
    """Return the orb family for ``planet``."""

    return PLANET_DATA[planet].orb_class


def swiss_id(planet: Planet) -> int:
    """Return the Swiss Ephemeris body index used to compute ``planet``."""

    return PLANET_DATA[planet].swiss_id


def parse_planet(value: Planet | str) -> Planet:
    """Coerce ``value`` (member, name or display string) into a :class:`Planet`."""

    if isinstance(value, Planet):
        return value
    token = str(value).strip()
    for planet in Planet:
        if token.lower() in {planet.value.lower(), planet.name.lower()}:
            return planet
    raise ValueError(
        f"Unknown planet '{value}'. Valid options: {[p.value for p in Planet]}"
    )


NATURAL_BRIGHTNESS: Final[Mapping[Planet, int]] = {
    Planet.VENUS: 7,
    Planet.JUPITER: 6,
    Planet.MARS: 5,
    Planet.MERCURY: 4,
    Planet.SATURN: 3,
}
"""Brightness ranking used to decide planetary wars; absent planets rank 0."""
