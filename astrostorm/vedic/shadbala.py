"""Shadbala: the six-fold planetary strength of classical Jyotisha.

Every factor is scored in virupas (sixty to the rupa) and grouped into the six
classical components:

* **Sthana bala**: exaltation, divisional dignity, odd/even sign, angularity
  and decanate.
* **Dig bala**: distance from the house of directional strength.
* **Kala bala**: day/night, lunar fortnight, thirds of the day, time lords,
  declination and planetary war.
* **Chesta bala**: apparent motion.
* **Naisargika bala**: the fixed natural ranking Sun > Moon > Venus > Jupiter
  > Mercury > Mars > Saturn.
* **Drik bala**: aspects received, benefic aspects adding and malefic ones
  subtracting.

Temporal factors read the local wall-clock time of the chart's birth data
and assume a 06:00 sunrise, so they stay reproducible without a rise/set
search.  A planet is *strong* once its total reaches the classical minimum in
:data:`REQUIRED_RUPAS`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from math import radians, sin
from statistics import fmean
from typing import Final

from ..chart.natal import VedicChart
from ..chart.positions import PlanetPosition
from ..core.angles import angular_separation, forward_distance
from ..core.bodies import LUMINARIES, MAIN_PLANETS, Planet
from ..core.zodiac import (
    SIGN_DATA,
    ZodiacSign,
    degree_in_sign,
    is_odd_sign,
    sign_from_index,
    sign_index,
)
from .conditions import detect_planetary_wars
from .varga import VargaType, varga_sign

__all__ = [
    "VIRUPAS_PER_RUPA",
    "EXALTATION_DEGREES",
    "NAISARGIKA_BALA",
    "REQUIRED_RUPAS",
    "DIG_BALA_HOUSES",
    "COMPONENTS",
    "StrengthRating",
    "ShadbalaFactor",
    "ShadbalaScore",
    "ShadbalaReport",
    "compute_shadbala",
    "sign_dignity_points",
]

logger = logging.getLogger(__name__)

VIRUPAS_PER_RUPA: Final[float] = 60.0

# Exaltation points measured from 0° Aries; debilitation lies opposite.
EXALTATION_DEGREES: Final[Mapping[Planet, float]] = {
    Planet.SUN: 10.0,
    Planet.MOON: 33.0,
    Planet.MARS: 298.0,
    Planet.MERCURY: 165.0,
    Planet.JUPITER: 95.0,
    Planet.VENUS: 357.0,
    Planet.SATURN: 200.0,
    Planet.RAHU: 50.0,
    Planet.KETU: 230.0,
}

NAISARGIKA_BALA: Final[Mapping[Planet, float]] = {
    Planet.SUN: 60.0,
    Planet.MOON: 51.43,
    Planet.VENUS: 42.86,
    Planet.JUPITER: 34.29,
    Planet.MERCURY: 25.71,
    Planet.MARS: 17.14,
    Planet.SATURN: 8.57,
    Planet.RAHU: 8.57,
    Planet.KETU: 8.57,
}

REQUIRED_RUPAS: Final[Mapping[Planet, float]] = {
    Planet.SUN: 6.5,
    Planet.MOON: 6.0,
    Planet.MARS: 5.0,
    Planet.MERCURY: 7.0,
    Planet.JUPITER: 6.5,
    Planet.VENUS: 5.5,
    Planet.SATURN: 5.0,
    Planet.RAHU: 4.0,
    Planet.KETU: 4.0,
}
_DEFAULT_REQUIRED_RUPAS: Final[float] = 5.0

DIG_BALA_HOUSES: Final[Mapping[Planet, int]] = {
    Planet.SUN: 10,
    Planet.MOON: 4,
    Planet.MARS: 10,
    Planet.MERCURY: 1,
    Planet.JUPITER: 1,
    Planet.VENUS: 4,
    Planet.SATURN: 7,
    Planet.RAHU: 10,
    Planet.KETU: 4,
}
"""House in which each planet receives full directional strength."""

_EXALTATION_SIGNS: Final[Mapping[Planet, frozenset[ZodiacSign]]] = {
    Planet.SUN: frozenset({ZodiacSign.ARIES}),
    Planet.MOON: frozenset({ZodiacSign.TAURUS}),
    Planet.MARS: frozenset({ZodiacSign.CAPRICORN}),
    Planet.MERCURY: frozenset({ZodiacSign.VIRGO}),
    Planet.JUPITER: frozenset({ZodiacSign.CANCER}),
    Planet.VENUS: frozenset({ZodiacSign.PISCES}),
    Planet.SATURN: frozenset({ZodiacSign.LIBRA}),
    Planet.RAHU: frozenset({ZodiacSign.TAURUS, ZodiacSign.GEMINI}),
    Planet.KETU: frozenset({ZodiacSign.SCORPIO, ZodiacSign.SAGITTARIUS}),
}

_MOOLATRIKONA_SIGNS: Final[Mapping[Planet, ZodiacSign]] = {
    Planet.SUN: ZodiacSign.LEO,
    Planet.MOON: ZodiacSign.TAURUS,
    Planet.MARS: ZodiacSign.ARIES,
    Planet.MERCURY: ZodiacSign.VIRGO,
    Planet.JUPITER: ZodiacSign.SAGITTARIUS,
    Planet.VENUS: ZodiacSign.LIBRA,
    Planet.SATURN: ZodiacSign.AQUARIUS,
}

_FRIENDS: Final[Mapping[Planet, frozenset[Planet]]] = {
    Planet.SUN: frozenset({Planet.MOON, Planet.MARS, Planet.JUPITER}),
    Planet.MOON: frozenset({Planet.SUN, Planet.MERCURY}),
    Planet.MARS: frozenset({Planet.SUN, Planet.MOON, Planet.JUPITER}),
    Planet.MERCURY: frozenset({Planet.SUN, Planet.VENUS}),
    Planet.JUPITER: frozenset({Planet.SUN, Planet.MOON, Planet.MARS}),
    Planet.VENUS: frozenset({Planet.MERCURY, Planet.SATURN}),
    Planet.SATURN: frozenset({Planet.MERCURY, Planet.VENUS}),
}

_ENEMIES: Final[Mapping[Planet, frozenset[Planet]]] = {
    Planet.SUN: frozenset({Planet.VENUS, Planet.SATURN}),
    Planet.MARS: frozenset({Planet.MERCURY}),
    Planet.MERCURY: frozenset({Planet.MOON}),
    Planet.JUPITER: frozenset({Planet.MERCURY, Planet.VENUS}),
    Planet.VENUS: frozenset({Planet.SUN, Planet.MOON}),
    Planet.SATURN: frozenset({Planet.SUN, Planet.MOON, Planet.MARS}),
}

# Rashi and navamsa count in full; the other vargas at half weight.
_SAPTAVARGA_WEIGHTS: Final[Sequence[tuple[VargaType, float]]] = (
    (VargaType.D2, 0.5),
    (VargaType.D3, 0.5),
    (VargaType.D9, 1.0),
    (VargaType.D12, 0.5),
    (VargaType.D30, 0.5),
)

_DAY_LORDS: Final[Sequence[Planet]] = (
    Planet.MOON,
    Planet.MARS,
    Planet.MERCURY,
    Planet.JUPITER,
    Planet.VENUS,
    Planet.SATURN,
    Planet.SUN,
)
"""Weekday rulers, Monday first (``isoweekday() - 1``)."""

_HORA_SEQUENCE: Final[Sequence[Planet]] = (
    Planet.SUN,
    Planet.VENUS,
    Planet.MERCURY,
    Planet.MOON,
    Planet.SATURN,
    Planet.JUPITER,
    Planet.MARS,
)

_WAR_PLANETS: Final[frozenset[Planet]] = frozenset(
    {Planet.MARS, Planet.MERCURY, Planet.JUPITER, Planet.VENUS, Planet.SATURN}
)
_NATURAL_BENEFICS: Final[frozenset[Planet]] = frozenset(
    {Planet.JUPITER, Planet.VENUS, Planet.MOON, Planet.MERCURY}
)
_SUNRISE_HOUR: Final[int] = 6
_MAX_DECLINATION: Final[float] = 23.45

COMPONENTS: Final[Mapping[str, tuple[str, ...]]] = {
    "sthana_bala": (
        "uccha_bala",
        "saptavargaja_bala",
        "ojhayugmarasyamsa_bala",
        "kendradi_bala",
        "drekkana_bala",
    ),
    "dig_bala": ("dig_bala",),
    "kala_bala": (
        "nathonnatha_bala",
        "paksha_bala",
        "tribhaga_bala",
        "hora_adi_bala",
        "ayana_bala",
        "yuddha_bala",
    ),
    "chesta_bala": ("chesta_bala",),
    "naisargika_bala": ("naisargika_bala",),
    "drik_bala": ("drik_bala",),
}
"""Factor keys making up each of the six components."""


class StrengthRating(str, Enum):
    EXTREMELY_WEAK = "Extremely Weak"
    WEAK = "Weak"
    BELOW_AVERAGE = "Below Average"
    AVERAGE = "Average"
    ABOVE_AVERAGE = "Above Average"
    STRONG = "Strong"
    VERY_STRONG = "Very Strong"
    EXTREMELY_STRONG = "Extremely Strong"

    @classmethod
    def from_percentage(cls, percentage: float) -> StrengthRating:
        """Rate a total expressed as a percentage of the required rupas."""

        for upper, rating in _RATING_BANDS:
            if percentage < upper:
                return rating
        return cls.EXTREMELY_STRONG


_RATING_BANDS: Final[Sequence[tuple[float, StrengthRating]]] = (
    (50.0, StrengthRating.EXTREMELY_WEAK),
    (70.0, StrengthRating.WEAK),
    (85.0, StrengthRating.BELOW_AVERAGE),
    (100.0, StrengthRating.AVERAGE),
    (115.0, StrengthRating.ABOVE_AVERAGE),
    (130.0, StrengthRating.STRONG),
    (150.0, StrengthRating.VERY_STRONG),
)


@dataclass(frozen=True)
class ShadbalaFactor:
    """A single strength contribution in virupas, clamped to its range."""

    name: str
    value: float
    maximum: float
    minimum: float = 0.0

    def __post_init__(self) -> None:
        if self.value < self.minimum:
            object.__setattr__(self, "value", float(self.minimum))
        if self.value > self.maximum:
            object.__setattr__(self, "value", float(self.maximum))


@dataclass(frozen=True)
class ShadbalaScore:
    """Aggregated strength of one planet."""

    planet: Planet
    factors: Mapping[str, ShadbalaFactor]
    required_rupas: float

    def component(self, name: str) -> float:
        """Return the virupa total of component ``name`` (e.g. ``"kala_bala"``)."""

        return sum(self.factors[key].value for key in COMPONENTS[name] if key in self.factors)

    @property
    def sthana_bala(self) -> float:
        return self.component("sthana_bala")

    @property
    def dig_bala(self) -> float:
        return self.component("dig_bala")

    @property
    def kala_bala(self) -> float:
        return self.component("kala_bala")

    @property
    def chesta_bala(self) -> float:
        return self.component("chesta_bala")

    @property
    def naisargika_bala(self) -> float:
        return self.component("naisargika_bala")

    @property
    def drik_bala(self) -> float:
        return self.component("drik_bala")

    @property
    def total_virupas(self) -> float:
        return sum(factor.value for factor in self.factors.values())

    @property
    def total_rupas(self) -> float:
        return self.total_virupas / VIRUPAS_PER_RUPA

    @property
    def percentage_of_required(self) -> float:
        return self.total_rupas / self.required_rupas * 100.0

    @property
    def rating(self) -> StrengthRating:
        return StrengthRating.from_percentage(self.percentage_of_required)

    @property
    def is_strong(self) -> bool:
        return self.total_rupas >= self.required_rupas


@dataclass(frozen=True)
class ShadbalaReport:
    """Per-planet Shadbala results for a chart."""

    scores: Mapping[Planet, ShadbalaScore]

    def score_for(self, planet: Planet) -> ShadbalaScore | None:
        return self.scores.get(planet)

    def by_strength(self) -> list[ShadbalaScore]:
        """Scores sorted strongest first."""

        return sorted(self.scores.values(), key=lambda score: score.total_rupas, reverse=True)

    def weak_planets(self) -> list[Planet]:
        return [score.planet for score in self.scores.values() if not score.is_strong]

    @property
    def strongest(self) -> Planet | None:
        ranked = self.by_strength()
        return ranked[0].planet if ranked else None

    @property
    def weakest(self) -> Planet | None:
        ranked = self.by_strength()
        return ranked[-1].planet if ranked else None

    @property
    def overall_score(self) -> float:
        """Mean percentage of required strength across the scored planets."""

        if not self.scores:
            return 0.0
        return fmean(score.percentage_of_required for score in self.scores.values())


# ---------------------------------------------------------------------------
# Sthana bala
# ---------------------------------------------------------------------------


def _uccha_bala(planet: Planet, longitude: float) -> float:
    exaltation = EXALTATION_DEGREES.get(planet)
    if exaltation is None:
        return 0.0
    debilitation = exaltation + 180.0
    return angular_separation(longitude, debilitation) / 180.0 * 60.0


def sign_dignity_points(planet: Planet, sign: ZodiacSign) -> float:
    """Return the saptavarga dignity of ``planet`` placed in ``sign``.

    Exaltation scores 20, own sign 30, moolatrikona 22.5; otherwise the
    relationship with the sign lord decides (friend 15, neutral 10,
    enemy 7.5).
    """

    if sign in _EXALTATION_SIGNS.get(planet, frozenset()):
        return 20.0
    lord = SIGN_DATA[sign].ruler
    if lord is planet:
        return 30.0
    if _MOOLATRIKONA_SIGNS.get(planet) is sign:
        return 22.5
    if lord in _FRIENDS.get(planet, frozenset()):
        return 15.0
    if lord in _ENEMIES.get(planet, frozenset()):
        return 7.5
    return 10.0


def _saptavargaja_bala(position: PlanetPosition) -> float:
    total = sign_dignity_points(position.planet, position.sign)
    for varga, weight in _SAPTAVARGA_WEIGHTS:
        sign = sign_from_index(varga_sign(position.longitude, varga))
        total += sign_dignity_points(position.planet, sign) * weight
    return total


def _ojhayugmarasyamsa_bala(position: PlanetPosition) -> float:
    odd = is_odd_sign(sign_index(position.longitude))
    if position.planet in (Planet.MOON, Planet.VENUS):
        return 0.0 if odd else 15.0
    return 15.0 if odd else 0.0


def _kendradi_bala(house: int) -> float:
    if house in (1, 4, 7, 10):
        return 60.0
    if house in (2, 5, 8, 11):
        return 30.0
    return 15.0


def _drekkana_bala(position: PlanetPosition) -> float:
    decanate = min(int(degree_in_sign(position.longitude) // 10.0), 2)
    planet = position.planet
    if planet in (Planet.SUN, Planet.MARS, Planet.JUPITER):
        return 15.0 if decanate == 0 else 0.0
    if planet in (Planet.MOON, Planet.VENUS):
        return 15.0 if decanate == 2 else 0.0
    if planet in (Planet.MERCURY, Planet.SATURN):
        return 15.0 if decanate == 1 else 0.0
    return 0.0


# ---------------------------------------------------------------------------
# Dig bala
# ---------------------------------------------------------------------------


def _dig_bala(planet: Planet, house: int) -> float:
    strong_house = DIG_BALA_HOUSES.get(planet)
    if strong_house is None:
        return 0.0
    distance = abs(house - strong_house)
    if distance > 6:
        distance = 12 - distance
    return (6 - distance) * 10.0


# ---------------------------------------------------------------------------
# Kala bala
# ---------------------------------------------------------------------------


def _is_day(hour: int) -> bool:
    return 6 <= hour <= 18


def _nathonnatha_bala(planet: Planet, hour: int) -> float:
    day = _is_day(hour)
    if planet is Planet.MERCURY:
        return 60.0
    if planet in (Planet.SUN, Planet.JUPITER, Planet.VENUS, Planet.KETU):
        return 60.0 if day else 0.0
    if planet in (Planet.MOON, Planet.MARS, Planet.SATURN, Planet.RAHU):
        return 0.0 if day else 60.0
    return 30.0


def _paksha_bala(planet: Planet, sun: PlanetPosition | None, moon: PlanetPosition | None) -> float:
    if sun is None or moon is None:
        return 30.0
    elongation = forward_distance(sun.longitude, moon.longitude)
    waxing = elongation < 180.0
    phase = (elongation if waxing else 360.0 - elongation) / 180.0 * 60.0
    benefic = planet in _NATURAL_BENEFICS
    return phase if benefic == waxing else 60.0 - phase


def _tribhaga_lord(hour: int) -> Planet:
    if _is_day(hour):
        if hour < 10:
            return Planet.MERCURY
        if hour < 14:
            return Planet.SUN
        return Planet.SATURN
    if 18 <= hour < 22:
        return Planet.MOON
    if hour >= 22 or hour < 2:
        return Planet.VENUS
    return Planet.MARS


def _hora_lord(day_lord: Planet, hour: int) -> Planet:
    start = _HORA_SEQUENCE.index(day_lord)
    horas = (hour - _SUNRISE_HOUR) % 24
    return _HORA_SEQUENCE[(start + horas) % len(_HORA_SEQUENCE)]


def _hora_adi_bala(
    planet: Planet, day_lord: Planet, hour: int, moon: PlanetPosition | None
) -> float:
    bala = 0.0
    if planet is day_lord:
        bala += 15.0
    if planet is _hora_lord(day_lord, hour):
        bala += 15.0
    if moon is not None and SIGN_DATA[moon.sign].ruler is planet:
        bala += 10.0
    if planet is Planet.SUN:
        bala += 5.0
    return bala


def _ayana_bala(planet: Planet, longitude: float) -> float:
    declination = _MAX_DECLINATION * sin(radians(longitude - 80.0))
    if planet in (Planet.SUN, Planet.MARS, Planet.JUPITER):
        return 30.0 + declination
    if planet in (Planet.MOON, Planet.VENUS, Planet.SATURN):
        return 30.0 - declination
    return 30.0


def _yuddha_index(positions: Sequence[PlanetPosition]) -> dict[Planet, float]:
    fighters = [p for p in positions if p.planet in _WAR_PLANETS]
    index: dict[Planet, float] = {}
    for war in detect_planetary_wars(fighters):
        index.setdefault(war.winner, 30.0)
        index.setdefault(war.loser, -30.0)
    return index


# ---------------------------------------------------------------------------
# Chesta and drik bala
# ---------------------------------------------------------------------------


def _chesta_bala(position: PlanetPosition) -> float:
    if position.planet in LUMINARIES:
        return 0.0
    if position.is_retrograde:
        return 60.0
    if position.speed < 0.01:
        return 50.0
    if position.speed < 0.5:
        return 40.0
    if position.speed < 1.0:
        return 30.0
    return 20.0


def _aspect_weight(separation: float) -> float:
    if separation <= 10.0:
        return 1.0
    if 55.0 <= separation <= 65.0:
        return 0.25
    if 85.0 <= separation <= 95.0:
        return 0.5
    if 115.0 <= separation <= 125.0:
        return 0.75
    if separation >= 170.0:
        return 0.5
    return 0.0


def _drik_bala(position: PlanetPosition, positions: Sequence[PlanetPosition]) -> float:
    bala = 0.0
    for other in positions:
        if other.planet is position.planet:
            continue
        weight = _aspect_weight(angular_separation(position.longitude, other.longitude))
        if weight == 0.0:
            continue
        bala += weight * 15.0 if other.planet in _NATURAL_BENEFICS else -weight * 10.0
    return bala


def _score(
    position: PlanetPosition,
    chart: VedicChart,
    sun: PlanetPosition | None,
    moon: PlanetPosition | None,
    yuddha: Mapping[Planet, float],
) -> ShadbalaScore:
    planet = position.planet
    moment = chart.birth.moment
    hour = moment.hour
    day_lord = _DAY_LORDS[moment.isoweekday() - 1]
    values: Sequence[tuple[str, str, float, float, float]] = (
        ("uccha_bala", "Uccha Bala", _uccha_bala(planet, position.longitude), 60.0, 0.0),
        ("saptavargaja_bala", "Saptavargaja Bala", _saptavargaja_bala(position), 120.0, 0.0),
        ("ojhayugmarasyamsa_bala", "Ojhayugmarasyamsa Bala", _ojhayugmarasyamsa_bala(position), 15.0, 0.0),
        ("kendradi_bala", "Kendradi Bala", _kendradi_bala(position.house), 60.0, 0.0),
        ("drekkana_bala", "Drekkana Bala", _drekkana_bala(position), 15.0, 0.0),
        ("dig_bala", "Dig Bala", _dig_bala(planet, position.house), 60.0, 0.0),
        ("nathonnatha_bala", "Nathonnatha Bala", _nathonnatha_bala(planet, hour), 60.0, 0.0),
        ("paksha_bala", "Paksha Bala", _paksha_bala(planet, sun, moon), 60.0, 0.0),
        ("tribhaga_bala", "Tribhaga Bala", 60.0 if planet is _tribhaga_lord(hour) else 0.0, 60.0, 0.0),
        ("hora_adi_bala", "Hora/Dina/Masa/Varsha Bala", _hora_adi_bala(planet, day_lord, hour, moon), 45.0, 0.0),
        ("ayana_bala", "Ayana Bala", _ayana_bala(planet, position.longitude), 30.0 + _MAX_DECLINATION, 0.0),
        ("yuddha_bala", "Yuddha Bala", yuddha.get(planet, 0.0), 30.0, -30.0),
        ("chesta_bala", "Chesta Bala", _chesta_bala(position), 60.0, 0.0),
        ("naisargika_bala", "Naisargika Bala", NAISARGIKA_BALA.get(planet, 0.0), 60.0, 0.0),
        ("drik_bala", "Drik Bala", _drik_bala(position, chart.positions), 60.0, -30.0),
    )
    factors = {
        key: ShadbalaFactor(name=name, value=value, maximum=maximum, minimum=minimum)
        for key, name, value, maximum, minimum in values
    }
    return ShadbalaScore(
        planet=planet,
        factors=factors,
        required_rupas=REQUIRED_RUPAS.get(planet, _DEFAULT_REQUIRED_RUPAS),
    )


def compute_shadbala(
    chart: VedicChart,
    *,
    planets: Iterable[Planet] | None = None,
) -> ShadbalaReport:
    """Compute Shadbala for ``planets`` (the nine grahas by default).

    Planets absent from the chart, and bodies outside the nine grahas, are
    skipped.  Paksha bala falls back to a neutral 30 virupas when the Sun or
    Moon is missing.
    """

    requested = tuple(planets) if planets is not None else tuple(MAIN_PLANETS)
    sun = chart.get(Planet.SUN)
    moon = chart.get(Planet.MOON)
    yuddha = _yuddha_index(chart.positions)

    scores: dict[Planet, ShadbalaScore] = {}
    for planet in requested:
        position = chart.get(planet)
        if position is None or planet not in MAIN_PLANETS:
            continue
        scores[planet] = _score(position, chart, sun, moon, yuddha)

    report = ShadbalaReport(scores=scores)
    logger.debug(
        {
            "event": "shadbala_computed",
            "planets": [planet.value for planet in scores],
            "strongest": getattr(report.strongest, "value", None),
            "overall_score": report.overall_score,
        }
    )
    return report
