"""Aspect matrix and graha drishti for sidereal charts.

Two families of aspects are detected:

* symmetric aspects (conjunction, sextile, square, trine, opposition and,
  optionally, the minor angles) measured on the shorter arc between a pair;
* Vedic special aspects cast one way by Mars, Jupiter, Saturn and the nodes,
  measured forward along the zodiac from the aspecting body.

Orbs depend on the class of both bodies (see
:class:`~astrostorm.core.bodies.PlanetClass`) and are averaged per pair.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from itertools import combinations
from typing import Final

from ..chart.houses import house_from_sign
from ..chart.natal import VedicChart
from ..chart.positions import PlanetPosition
from ..core.angles import angular_separation, forward_distance, normalize_degrees, orb_from_target
from ..core.bodies import Planet, PlanetClass, planet_class
from ..core.zodiac import ZodiacSign, sign_from_index, sign_index
from ..exceptions import ConfigurationError

__all__ = [
    "AspectType",
    "AspectNature",
    "ASPECT_ANGLES",
    "STANDARD_ASPECTS",
    "MINOR_ASPECTS",
    "SPECIAL_ASPECTS",
    "OrbConfiguration",
    "AspectData",
    "AspectMatrix",
    "DrishtiData",
    "strength_label",
    "aspects_from_positions",
    "compute_aspect_matrix",
    "graha_drishti",
]


class AspectNature(str, Enum):
    HARMONIOUS = "Harmonious"
    CHALLENGING = "Challenging"
    VARIABLE = "Variable"
    SIGNIFICANT = "Significant"


class AspectType(str, Enum):
    CONJUNCTION = "Conjunction"
    SEXTILE = "Sextile"
    SQUARE = "Square"
    TRINE = "Trine"
    OPPOSITION = "Opposition"
    SEMISEXTILE = "Semisextile"
    SEMISQUARE = "Semisquare"
    SESQUIQUADRATE = "Sesquiquadrate"
    QUINCUNX = "Quincunx"
    MARS_4TH = "Mars 4th Aspect"
    MARS_8TH = "Mars 8th Aspect"
    JUPITER_5TH = "Jupiter 5th Aspect"
    JUPITER_9TH = "Jupiter 9th Aspect"
    SATURN_3RD = "Saturn 3rd Aspect"
    SATURN_10TH = "Saturn 10th Aspect"
    NODE_5TH = "Rahu/Ketu 5th Aspect"
    NODE_9TH = "Rahu/Ketu 9th Aspect"

    @property
    def angle(self) -> float:
        return ASPECT_ANGLES[self]

    @property
    def nature(self) -> AspectNature:
        return _NATURES[self]

    @property
    def is_special(self) -> bool:
        return self in _SPECIAL_TYPES


ASPECT_ANGLES: Final[Mapping[AspectType, float]] = {
    AspectType.CONJUNCTION: 0.0,
    AspectType.SEXTILE: 60.0,
    AspectType.SQUARE: 90.0,
    AspectType.TRINE: 120.0,
    AspectType.OPPOSITION: 180.0,
    AspectType.SEMISEXTILE: 30.0,
    AspectType.SEMISQUARE: 45.0,
    AspectType.SESQUIQUADRATE: 135.0,
    AspectType.QUINCUNX: 150.0,
    AspectType.MARS_4TH: 90.0,
    AspectType.MARS_8TH: 210.0,
    AspectType.JUPITER_5TH: 120.0,
    AspectType.JUPITER_9TH: 240.0,
    AspectType.SATURN_3RD: 60.0,
    AspectType.SATURN_10TH: 270.0,
    AspectType.NODE_5TH: 120.0,
    AspectType.NODE_9TH: 240.0,
}

_NATURES: Final[Mapping[AspectType, AspectNature]] = {
    AspectType.CONJUNCTION: AspectNature.VARIABLE,
    AspectType.SEXTILE: AspectNature.HARMONIOUS,
    AspectType.SQUARE: AspectNature.CHALLENGING,
    AspectType.TRINE: AspectNature.HARMONIOUS,
    AspectType.OPPOSITION: AspectNature.CHALLENGING,
    AspectType.SEMISEXTILE: AspectNature.HARMONIOUS,
    AspectType.SEMISQUARE: AspectNature.CHALLENGING,
    AspectType.SESQUIQUADRATE: AspectNature.CHALLENGING,
    AspectType.QUINCUNX: AspectNature.VARIABLE,
    AspectType.MARS_4TH: AspectNature.CHALLENGING,
    AspectType.MARS_8TH: AspectNature.CHALLENGING,
    AspectType.JUPITER_5TH: AspectNature.HARMONIOUS,
    AspectType.JUPITER_9TH: AspectNature.HARMONIOUS,
    AspectType.SATURN_3RD: AspectNature.CHALLENGING,
    AspectType.SATURN_10TH: AspectNature.CHALLENGING,
    AspectType.NODE_5TH: AspectNature.SIGNIFICANT,
    AspectType.NODE_9TH: AspectNature.SIGNIFICANT,
}

STANDARD_ASPECTS: Final[Sequence[AspectType]] = (
    AspectType.CONJUNCTION,
    AspectType.OPPOSITION,
    AspectType.TRINE,
    AspectType.SQUARE,
    AspectType.SEXTILE,
)

MINOR_ASPECTS: Final[Mapping[AspectType, float]] = {
    AspectType.SEMISEXTILE: 3.0,
    AspectType.QUINCUNX: 3.0,
    AspectType.SEMISQUARE: 2.0,
    AspectType.SESQUIQUADRATE: 2.0,
}
"""Minor aspects and their fixed orbs."""

SPECIAL_ASPECTS: Final[Mapping[Planet, Sequence[AspectType]]] = {
    Planet.MARS: (AspectType.MARS_4TH, AspectType.MARS_8TH),
    Planet.JUPITER: (AspectType.JUPITER_5TH, AspectType.JUPITER_9TH),
    Planet.SATURN: (AspectType.SATURN_3RD, AspectType.SATURN_10TH),
    Planet.RAHU: (AspectType.NODE_5TH, AspectType.NODE_9TH),
    Planet.KETU: (AspectType.NODE_5TH, AspectType.NODE_9TH),
}
"""One-directional aspects cast forward from each planet."""

_SPECIAL_TYPES: Final[frozenset[AspectType]] = frozenset(
    aspect for aspects in SPECIAL_ASPECTS.values() for aspect in aspects
)


@dataclass(frozen=True)
class OrbConfiguration:
    """Orb allowances per planet class.

    ``custom_orbs`` overrides the class orb of individual planets and
    ``orb_multiplier`` scales every effective orb, minor aspects included.
    """

    luminary: float = 10.0
    personal: float = 8.0
    social: float = 7.0
    nodal: float = 6.0
    outer: float = 5.0
    conjunction_bonus: float = 2.0
    opposition_bonus: float = 1.0
    orb_multiplier: float = 1.0
    include_minor: bool = False
    custom_orbs: Mapping[Planet, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        values = (
            self.luminary,
            self.personal,
            self.social,
            self.nodal,
            self.outer,
            self.conjunction_bonus,
            self.opposition_bonus,
            *self.custom_orbs.values(),
        )
        if any(value < 0.0 for value in values):
            raise ConfigurationError("orb values must be non-negative")
        if self.orb_multiplier <= 0.0:
            raise ConfigurationError("orb_multiplier must be positive")

    def orb_for(self, planet: Planet) -> float:
        if planet in self.custom_orbs:
            return float(self.custom_orbs[planet])
        return {
            PlanetClass.LUMINARY: self.luminary,
            PlanetClass.PERSONAL: self.personal,
            PlanetClass.SOCIAL: self.social,
            PlanetClass.NODAL: self.nodal,
            PlanetClass.OUTER: self.outer,
        }[planet_class(planet)]

    def effective_orb(self, first: Planet, second: Planet, aspect: AspectType) -> float:
        """Return the allowed orb for ``aspect`` between ``first`` and ``second``."""

        if aspect in MINOR_ASPECTS:
            return MINOR_ASPECTS[aspect] * self.orb_multiplier
        base = (self.orb_for(first) + self.orb_for(second)) / 2.0
        if aspect is AspectType.CONJUNCTION:
            base += self.conjunction_bonus
        elif aspect is AspectType.OPPOSITION:
            base += self.opposition_bonus
        return base * self.orb_multiplier


def strength_label(strength: float) -> str:
    if strength >= 0.9:
        return "Exact"
    if strength >= 0.7:
        return "Very Strong"
    if strength >= 0.5:
        return "Strong"
    if strength >= 0.3:
        return "Moderate"
    return "Weak"


@dataclass(frozen=True)
class AspectData:
    """A detected aspect.  For special aspects ``planet1`` casts onto ``planet2``."""

    planet1: Planet
    planet2: Planet
    aspect_type: AspectType
    separation: float
    orb: float
    effective_orb: float
    is_applying: bool
    strength: float

    @property
    def is_special(self) -> bool:
        return self.aspect_type.is_special

    @property
    def strength_label(self) -> str:
        return strength_label(self.strength)

    def involves(self, planet: Planet) -> bool:
        return planet in (self.planet1, self.planet2)


@dataclass(frozen=True)
class AspectMatrix:
    """All aspects of a chart sorted by descending strength."""

    aspects: tuple[AspectData, ...]

    def of_type(self, *types: AspectType) -> tuple[AspectData, ...]:
        return tuple(a for a in self.aspects if a.aspect_type in types)

    @property
    def conjunctions(self) -> tuple[AspectData, ...]:
        return self.of_type(AspectType.CONJUNCTION)

    @property
    def oppositions(self) -> tuple[AspectData, ...]:
        return self.of_type(AspectType.OPPOSITION)

    @property
    def trines(self) -> tuple[AspectData, ...]:
        return self.of_type(AspectType.TRINE, AspectType.JUPITER_5TH, AspectType.JUPITER_9TH)

    @property
    def squares(self) -> tuple[AspectData, ...]:
        return self.of_type(AspectType.SQUARE, AspectType.MARS_4TH)

    @property
    def sextiles(self) -> tuple[AspectData, ...]:
        return self.of_type(AspectType.SEXTILE, AspectType.SATURN_3RD)

    @property
    def special(self) -> tuple[AspectData, ...]:
        return tuple(a for a in self.aspects if a.is_special)

    def aspects_for(self, planet: Planet) -> tuple[AspectData, ...]:
        return tuple(a for a in self.aspects if a.involves(planet))

    def aspect_between(
        self, first: Planet, second: Planet, aspect_type: AspectType | None = None
    ) -> AspectData | None:
        """Return the strongest aspect linking ``first`` and ``second`` in either direction."""

        for aspect in self.aspects:
            if {aspect.planet1, aspect.planet2} != {first, second}:
                continue
            if aspect_type is None or aspect.aspect_type is aspect_type:
                return aspect
        return None

    def __len__(self) -> int:
        return len(self.aspects)


def _strength(orb: float, effective: float) -> float:
    if effective <= 0.0 or orb >= effective:
        return 0.0
    return 1.0 - orb / effective


def _future(position: PlanetPosition) -> float:
    return normalize_degrees(position.longitude + position.speed)


def _symmetric(
    first: PlanetPosition,
    second: PlanetPosition,
    aspect: AspectType,
    config: OrbConfiguration,
) -> AspectData | None:
    separation = angular_separation(first.longitude, second.longitude)
    orb = orb_from_target(separation, aspect.angle)
    effective = config.effective_orb(first.planet, second.planet, aspect)
    if orb > effective:
        return None
    future_orb = orb_from_target(angular_separation(_future(first), _future(second)), aspect.angle)
    return AspectData(
        planet1=first.planet,
        planet2=second.planet,
        aspect_type=aspect,
        separation=separation,
        orb=orb,
        effective_orb=effective,
        is_applying=future_orb < orb,
        strength=_strength(orb, effective),
    )


def _special(
    caster: PlanetPosition,
    receiver: PlanetPosition,
    aspect: AspectType,
    config: OrbConfiguration,
) -> AspectData | None:
    distance = forward_distance(caster.longitude, receiver.longitude)
    orb = orb_from_target(distance, aspect.angle)
    effective = config.effective_orb(caster.planet, receiver.planet, aspect)
    if orb > effective:
        return None
    future_orb = orb_from_target(forward_distance(_future(caster), _future(receiver)), aspect.angle)
    return AspectData(
        planet1=caster.planet,
        planet2=receiver.planet,
        aspect_type=aspect,
        separation=distance,
        orb=orb,
        effective_orb=effective,
        is_applying=future_orb < orb,
        strength=_strength(orb, effective),
    )


def aspects_from_positions(
    positions: Iterable[PlanetPosition], config: OrbConfiguration | None = None
) -> AspectMatrix:
    """Detect every aspect among ``positions``."""

    cfg = config or OrbConfiguration()
    items = list(positions)
    symmetric_types: list[AspectType] = list(STANDARD_ASPECTS)
    if cfg.include_minor:
        symmetric_types.extend(MINOR_ASPECTS)

    found: list[AspectData] = []
    for first, second in combinations(items, 2):
        for aspect in symmetric_types:
            match = _symmetric(first, second, aspect, cfg)
            if match is not None:
                found.append(match)

    for caster in items:
        for aspect in SPECIAL_ASPECTS.get(caster.planet, ()):
            for receiver in items:
                if receiver.planet is caster.planet:
                    continue
                match = _special(caster, receiver, aspect, cfg)
                if match is not None:
                    found.append(match)

    # ``sorted`` is stable, so ties keep detection order.
    found.sort(key=lambda aspect: aspect.strength, reverse=True)
    return AspectMatrix(aspects=tuple(found))


def compute_aspect_matrix(
    chart: VedicChart, config: OrbConfiguration | None = None
) -> AspectMatrix:
    return aspects_from_positions(chart.positions, config)


@dataclass(frozen=True)
class DrishtiData:
    """A sign-based (whole house) aspect cast by ``planet``."""

    planet: Planet
    house_offset: int
    aspected_sign: ZodiacSign
    aspected_house: int
    strength: float
    planets_aspected: tuple[Planet, ...]


_DRISHTI_OFFSETS: Final[Mapping[Planet, Sequence[tuple[int, float]]]] = {
    Planet.MARS: ((4, 1.0), (7, 1.0), (8, 1.0)),
    Planet.JUPITER: ((5, 1.0), (7, 1.0), (9, 1.0)),
    Planet.SATURN: ((3, 1.0), (7, 1.0), (10, 1.0)),
    Planet.RAHU: ((5, 0.75), (7, 1.0), (9, 0.75)),
    Planet.KETU: ((5, 0.75), (7, 1.0), (9, 0.75)),
}
_DEFAULT_DRISHTI: Final[Sequence[tuple[int, float]]] = ((7, 1.0),)


def graha_drishti(chart: VedicChart) -> list[DrishtiData]:
    """Return every sign-based aspect in ``chart``.

    All planets aspect the 7th sign from themselves; Mars adds the 4th and
    8th, Jupiter the 5th and 9th, Saturn the 3rd and 10th, and the nodes the
    5th and 9th at reduced strength.  Houses are counted from the ascendant
    sign.
    """

    asc_sign = sign_index(chart.ascendant)
    by_sign: dict[int, list[Planet]] = {}
    for position in chart.positions:
        by_sign.setdefault(sign_index(position.longitude), []).append(position.planet)

    result: list[DrishtiData] = []
    for position in chart.positions:
        origin = sign_index(position.longitude)
        for offset, strength in _DRISHTI_OFFSETS.get(position.planet, _DEFAULT_DRISHTI):
            target = (origin + offset - 1) % 12
            result.append(
                DrishtiData(
                    planet=position.planet,
                    house_offset=offset,
                    aspected_sign=sign_from_index(target),
                    aspected_house=house_from_sign(target, asc_sign),
                    strength=strength,
                    planets_aspected=tuple(
                        p for p in by_sign.get(target, ()) if p is not position.planet
                    ),
                )
            )
    return result
