"""Zodiac sign enumeration and sign-category tables."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Final

from .angles import segment_position
from .bodies import Planet

__all__ = [
    "ZodiacSign",
    "Element",
    "Modality",
    "SignInfo",
    "SIGN_ARC_DEGREES",
    "SIGNS",
    "SIGN_DATA",
    "MOVABLE_SIGNS",
    "FIXED_SIGNS",
    "DUAL_SIGNS",
    "ODD_SIGNS",
    "EVEN_SIGNS",
    "sign_index",
    "sign_of",
    "sign_from_index",
    "sign_info",
    "degree_in_sign",
    "is_odd_sign",
]


SIGN_ARC_DEGREES: Final[float] = 30.0


class ZodiacSign(str, Enum):
    ARIES = "Aries"
    TAURUS = "Taurus"
    GEMINI = "Gemini"
    CANCER = "Cancer"
    LEO = "Leo"
    VIRGO = "Virgo"
    LIBRA = "Libra"
    SCORPIO = "Scorpio"
    SAGITTARIUS = "Sagittarius"
    CAPRICORN = "Capricorn"
    AQUARIUS = "Aquarius"
    PISCES = "Pisces"


class Element(str, Enum):
    FIRE = "Fire"
    EARTH = "Earth"
    AIR = "Air"
    WATER = "Water"


class Modality(str, Enum):
    MOVABLE = "movable"
    FIXED = "fixed"
    DUAL = "dual"


@dataclass(frozen=True)
class SignInfo:
    sign: ZodiacSign
    index: int
    abbreviation: str
    element: Element
    ruler: Planet
    modality: Modality

    @property
    def start_degree(self) -> float:
        return self.index * SIGN_ARC_DEGREES


SIGNS: Final[Sequence[ZodiacSign]] = tuple(ZodiacSign)

_ELEMENTS: Sequence[Element] = (Element.FIRE, Element.EARTH, Element.AIR, Element.WATER)
_MODALITIES: Sequence[Modality] = (Modality.MOVABLE, Modality.FIXED, Modality.DUAL)
_RULERS: Sequence[Planet] = (
    Planet.MARS,
    Planet.VENUS,
    Planet.MERCURY,
    Planet.MOON,
    Planet.SUN,
    Planet.MERCURY,
    Planet.VENUS,
    Planet.MARS,
    Planet.JUPITER,
    Planet.SATURN,
    Planet.SATURN,
    Planet.JUPITER,
)
_ABBREVIATIONS: Sequence[str] = (
    "Ar", "Ta", "Ge", "Ca", "Le", "Vi", "Li", "Sc", "Sg", "Cp", "Aq", "Pi",
)

SIGN_DATA: Final[Mapping[ZodiacSign, SignInfo]] = {
    sign: SignInfo(
        sign=sign,
        index=idx,
        abbreviation=_ABBREVIATIONS[idx],
        element=_ELEMENTS[idx % 4],
        ruler=_RULERS[idx],
        modality=_MODALITIES[idx % 3],
    )
    for idx, sign in enumerate(SIGNS)
}
"""Element, ruler and modality for each sign."""

MOVABLE_SIGNS: Final[frozenset[int]] = frozenset({0, 3, 6, 9})
FIXED_SIGNS: Final[frozenset[int]] = frozenset({1, 4, 7, 10})
DUAL_SIGNS: Final[frozenset[int]] = frozenset({2, 5, 8, 11})
# Aries is counted as the first (odd) sign, so odd signs sit at even indices.
ODD_SIGNS: Final[frozenset[int]] = frozenset({0, 2, 4, 6, 8, 10})
EVEN_SIGNS: Final[frozenset[int]] = frozenset({1, 3, 5, 7, 9, 11})


def sign_index(longitude: float) -> int:
    """Return the 0-based sign index for ``longitude`` (0 = Aries).

    Boundaries snap exactly as nakshatra boundaries do, so a longitude and its
    nakshatra never fall on opposite sides of a sign cusp.
    """

    return segment_position(longitude, SIGN_ARC_DEGREES, 12)[0]


def sign_from_index(index: int) -> ZodiacSign:
    return SIGNS[index % 12]


def sign_of(longitude: float) -> ZodiacSign:
    """Return the :class:`ZodiacSign` that contains ``longitude``."""

    return SIGNS[sign_index(longitude)]


def sign_info(sign: ZodiacSign) -> SignInfo:
    return SIGN_DATA[sign]


def degree_in_sign(longitude: float) -> float:
    """Return the degree within the active sign (0–30)."""

    return segment_position(longitude, SIGN_ARC_DEGREES, 12)[1]


def is_odd_sign(index: int) -> bool:
    return index % 12 in ODD_SIGNS
