"""Core enumerations and angular helpers."""

from __future__ import annotations

from .angles import (
    angular_separation,
    forward_distance,
    normalize_degrees,
    orb_from_target,
    signed_delta,
)
from .bodies import (
    LUMINARIES,
    MAIN_PLANETS,
    NODES,
    OUTER_PLANETS,
    PLANET_DATA,
    Planet,
    PlanetClass,
    parse_planet,
    planet_class,
    swiss_id,
)
from .nakshatra import (
    NAKSHATRA_ARC_DEGREES,
    PADA_ARC_DEGREES,
    Nakshatra,
    NakshatraPosition,
    nakshatra_info,
    nakshatra_of,
    position_for,
)
from .zodiac import (
    SIGNS,
    ZodiacSign,
    degree_in_sign,
    sign_from_index,
    sign_index,
    sign_info,
    sign_of,
)

__all__ = [
    "LUMINARIES",
    "MAIN_PLANETS",
    "NAKSHATRA_ARC_DEGREES",
    "NODES",
    "OUTER_PLANETS",
    "PADA_ARC_DEGREES",
    "PLANET_DATA",
    "SIGNS",
    "Nakshatra",
    "NakshatraPosition",
    "Planet",
    "PlanetClass",
    "ZodiacSign",
    "angular_separation",
    "degree_in_sign",
    "forward_distance",
    "nakshatra_info",
    "nakshatra_of",
    "normalize_degrees",
    "orb_from_target",
    "parse_planet",
    "planet_class",
    "position_for",
    "sign_from_index",
    "sign_index",
    "sign_info",
    "sign_of",
    "signed_delta",
    "swiss_id",
]
