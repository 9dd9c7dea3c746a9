"""Nakshatra and pada calculations for sidereal longitudes."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from math import floor
from typing import Final

from .angles import BOUNDARY_TOLERANCE_DEG, normalize_degrees, segment_position
from .bodies import Planet

__all__ = [
    "NAKSHATRA_ARC_DEGREES",
    "PADA_ARC_DEGREES",
    "BOUNDARY_TOLERANCE_DEG",
    "LORD_SEQUENCE",
    "Nakshatra",
    "NakshatraInfo",
    "NakshatraPosition",
    "NAKSHATRA_DATA",
    "nakshatra_index",
    "nakshatra_of",
    "nakshatra_info",
    "lord_of",
    "position_for",
]

NAKSHATRA_ARC_DEGREES: Final[float] = 360.0 / 27.0
PADA_ARC_DEGREES: Final[float] = NAKSHATRA_ARC_DEGREES / 4.0

LORD_SEQUENCE: Final[Sequence[Planet]] = (
    Planet.KETU,
    Planet.VENUS,
    Planet.SUN,
    Planet.MOON,
    Planet.MARS,
    Planet.RAHU,
    Planet.JUPITER,
    Planet.SATURN,
    Planet.MERCURY,
)


class Nakshatra(str, Enum):
    ASHWINI = "Ashwini"
    BHARANI = "Bharani"
    KRITTIKA = "Krittika"
    ROHINI = "Rohini"
    MRIGASHIRA = "Mrigashira"
    ARDRA = "Ardra"
    PUNARVASU = "Punarvasu"
    PUSHYA = "Pushya"
    ASHLESHA = "Ashlesha"
    MAGHA = "Magha"
    PURVA_PHALGUNI = "Purva Phalguni"
    UTTARA_PHALGUNI = "Uttara Phalguni"
    HASTA = "Hasta"
    CHITRA = "Chitra"
    SWATI = "Swati"
    VISHAKHA = "Vishakha"
    ANURADHA = "Anuradha"
    JYESHTHA = "Jyeshtha"
    MULA = "Mula"
    PURVA_ASHADHA = "Purva Ashadha"
    UTTARA_ASHADHA = "Uttara Ashadha"
    SHRAVANA = "Shravana"
    DHANISHTHA = "Dhanishtha"
    SHATABHISHA = "Shatabhisha"
    PURVA_BHADRAPADA = "Purva Bhadrapada"
    UTTARA_BHADRAPADA = "Uttara Bhadrapada"
    REVATI = "Revati"


@dataclass(frozen=True)
class NakshatraInfo:
    nakshatra: Nakshatra
    number: int
    lord: Planet
    deity: str

    @property
    def start_degree(self) -> float:
        return (self.number - 1) * NAKSHATRA_ARC_DEGREES

    @property
    def end_degree(self) -> float:
        return self.number * NAKSHATRA_ARC_DEGREES


_DEITIES: Sequence[str] = (
    "Ashwini Kumaras",
    "Yama",
    "Agni",
    "Brahma",
    "Soma",
    "Rudra",
    "Aditi",
    "Brihaspati",
    "Sarpa",
    "Pitris",
    "Bhaga",
    "Aryaman",
    "Savitar",
    "Tvashtar",
    "Vayu",
    "Indra-Agni",
    "Mitra",
    "Indra",
    "Nirriti",
    "Apas",
    "Vishwadevas",
    "Vishnu",
    "Vasus",
    "Varuna",
    "Aja Ekapada",
    "Ahir Budhnya",
    "Pushan",
)

NAKSHATRA_DATA: Final[Mapping[Nakshatra, NakshatraInfo]] = {
    nak: NakshatraInfo(
        nakshatra=nak,
        number=idx + 1,
        lord=LORD_SEQUENCE[idx % len(LORD_SEQUENCE)],
        deity=_DEITIES[idx],
    )
    for idx, nak in enumerate(Nakshatra)
}

_ORDER: Sequence[Nakshatra] = tuple(Nakshatra)


@dataclass(frozen=True)
class NakshatraPosition:
    """Placement of a longitude within its nakshatra."""

    nakshatra: Nakshatra
    number: int
    pada: int
    lord: Planet
    offset: float
    longitude: float

    @property
    def progress(self) -> float:
        """Fraction (0–1) of the nakshatra already traversed."""

        return self.offset / NAKSHATRA_ARC_DEGREES


def nakshatra_index(longitude: float) -> int:
    """Return the zero-based nakshatra index for ``longitude`` in degrees."""

    return segment_position(longitude, NAKSHATRA_ARC_DEGREES, 27)[0]


def nakshatra_of(longitude: float) -> Nakshatra:
    return _ORDER[nakshatra_index(longitude)]


def nakshatra_info(nakshatra: Nakshatra | int) -> NakshatraInfo:
    """Return :class:`NakshatraInfo` for a member or a zero-based index."""

    if isinstance(nakshatra, Nakshatra):
        return NAKSHATRA_DATA[nakshatra]
    return NAKSHATRA_DATA[_ORDER[nakshatra % 27]]


def lord_of(nakshatra: Nakshatra) -> Planet:
    return NAKSHATRA_DATA[nakshatra].lord


def position_for(longitude: float) -> NakshatraPosition:
    """Return nakshatra, pada (1–4) and offset for ``longitude``."""

    lon = normalize_degrees(longitude)
    idx, offset = segment_position(lon, NAKSHATRA_ARC_DEGREES, 27)
    pada = int(floor((offset + BOUNDARY_TOLERANCE_DEG) / PADA_ARC_DEGREES)) + 1
    info = nakshatra_info(idx)
    return NakshatraPosition(
        nakshatra=info.nakshatra,
        number=info.number,
        pada=min(max(pada, 1), 4),
        lord=info.lord,
        offset=offset,
        longitude=lon,
    )
