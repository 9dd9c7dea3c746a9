"""Retrograde, combustion and planetary-war conditions."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime, time, timedelta
from enum import Enum
from itertools import combinations
from typing import Final

from ..chart.birth import julian_day
from ..chart.natal import VedicChart, position_of
from ..chart.positions import PlanetPosition, with_overrides
from ..core.angles import angular_separation
from ..core.bodies import LUMINARIES, NATURAL_BRIGHTNESS, NODES, OUTER_PLANETS, Planet
from ..ephemeris.provider import EphemerisProvider

__all__ = [
    "STATIONARY_SPEED_THRESHOLD",
    "CAZIMI_ORB",
    "WAR_ORB",
    "CombustionOrbs",
    "COMBUSTION_ORBS",
    "RetrogradeStatus",
    "CombustionStatus",
    "PlanetaryWar",
    "PlanetCondition",
    "ConditionAnalysis",
    "retrograde_status",
    "combustion_status",
    "detect_planetary_wars",
    "analyze_conditions",
    "apply_combustion",
    "RetrogradePeriod",
    "find_next_retrograde",
]

logger = logging.getLogger(__name__)

STATIONARY_SPEED_THRESHOLD: Final[float] = 0.05
"""Daily motion (degrees) below which a planet counts as stationary."""

CAZIMI_ORB: Final[float] = 0.283
"""17 arcminutes: the heart of the Sun."""

WAR_ORB: Final[float] = 1.0


@dataclass(frozen=True)
class CombustionOrbs:
    full: float
    partial: float
    full_retrograde: float | None = None

    def full_for(self, retrograde: bool) -> float:
        if retrograde and self.full_retrograde is not None:
            return self.full_retrograde
        return self.full


COMBUSTION_ORBS: Final[Mapping[Planet, CombustionOrbs]] = {
    Planet.MOON: CombustionOrbs(12.0, 17.0),
    Planet.MARS: CombustionOrbs(17.0, 25.0),
    Planet.MERCURY: CombustionOrbs(14.0, 20.0, full_retrograde=12.0),
    Planet.JUPITER: CombustionOrbs(11.0, 17.0),
    Planet.VENUS: CombustionOrbs(10.0, 16.0, full_retrograde=8.0),
    Planet.SATURN: CombustionOrbs(15.0, 22.0),
}


class RetrogradeStatus(str, Enum):
    DIRECT = "Direct"
    RETROGRADE = "Retrograde"
    STATIONARY_RETROGRADE = "Stationary Retrograde"
    STATIONARY_DIRECT = "Stationary Direct"

    @property
    def is_stationary(self) -> bool:
        return self in (RetrogradeStatus.STATIONARY_RETROGRADE, RetrogradeStatus.STATIONARY_DIRECT)


class CombustionStatus(str, Enum):
    NOT_COMBUST = "Not Combust"
    PARTIAL = "Partial Combustion"
    FULL = "Full Combustion"
    CAZIMI = "Cazimi"

    @property
    def strength(self) -> float:
        return _COMBUSTION_STRENGTH[self]


_COMBUSTION_STRENGTH: Final[Mapping[CombustionStatus, float]] = {
    CombustionStatus.NOT_COMBUST: 1.0,
    CombustionStatus.PARTIAL: 0.5,
    CombustionStatus.FULL: 0.25,
    CombustionStatus.CAZIMI: 1.2,
}

_STATIONARY_FACTOR: Final[float] = 1.2
_WAR_LOSER_FACTOR: Final[float] = 0.5


@dataclass(frozen=True)
class PlanetaryWar:
    planet1: Planet
    planet2: Planet
    separation: float
    winner: Planet
    loser: Planet


@dataclass(frozen=True)
class PlanetCondition:
    planet: Planet
    retrograde_status: RetrogradeStatus
    combustion_status: CombustionStatus
    distance_from_sun: float | None
    speed: float
    war_opponent: Planet | None = None
    is_war_winner: bool | None = None

    @property
    def in_planetary_war(self) -> bool:
        return self.war_opponent is not None

    @property
    def overall_strength(self) -> float:
        strength = self.combustion_status.strength
        if self.retrograde_status.is_stationary:
            strength *= _STATIONARY_FACTOR
        if self.in_planetary_war and self.is_war_winner is False:
            strength *= _WAR_LOSER_FACTOR
        return strength


@dataclass(frozen=True)
class ConditionAnalysis:
    conditions: tuple[PlanetCondition, ...]
    planetary_wars: tuple[PlanetaryWar, ...]

    @property
    def retrogrades(self) -> tuple[Planet, ...]:
        """Planets currently retrograde, stationary-retrograde included."""

        return tuple(
            c.planet
            for c in self.conditions
            if c.retrograde_status
            in (RetrogradeStatus.RETROGRADE, RetrogradeStatus.STATIONARY_RETROGRADE)
        )

    @property
    def combustions(self) -> tuple[Planet, ...]:
        """Planets weakened by the Sun; cazimi is excluded."""

        return tuple(
            c.planet
            for c in self.conditions
            if c.combustion_status in (CombustionStatus.FULL, CombustionStatus.PARTIAL)
        )

    def condition_of(self, planet: Planet) -> PlanetCondition | None:
        for condition in self.conditions:
            if condition.planet is planet:
                return condition
        return None


def retrograde_status(planet: Planet, speed: float) -> RetrogradeStatus:
    """Classify motion from the daily ``speed`` in degrees."""

    if planet in LUMINARIES:
        return RetrogradeStatus.DIRECT
    if abs(speed) < STATIONARY_SPEED_THRESHOLD:
        if speed < 0.0:
            return RetrogradeStatus.STATIONARY_RETROGRADE
        return RetrogradeStatus.STATIONARY_DIRECT
    return RetrogradeStatus.RETROGRADE if speed < 0.0 else RetrogradeStatus.DIRECT


def combustion_status(
    planet: Planet, distance_from_sun: float, *, retrograde: bool = False
) -> CombustionStatus:
    """Classify solar proximity; every boundary is inclusive.

    The Sun, the nodes and the outer planets never combust.
    """

    if planet is Planet.SUN or planet in NODES or planet in OUTER_PLANETS:
        return CombustionStatus.NOT_COMBUST
    orbs = COMBUSTION_ORBS.get(planet)
    if orbs is None:  # pragma: no cover - every remaining planet has orbs
        return CombustionStatus.NOT_COMBUST
    if distance_from_sun <= CAZIMI_ORB:
        return CombustionStatus.CAZIMI
    if distance_from_sun <= orbs.full_for(retrograde):
        return CombustionStatus.FULL
    if distance_from_sun <= orbs.partial:
        return CombustionStatus.PARTIAL
    return CombustionStatus.NOT_COMBUST


def _war_winner(first: Planet, second: Planet) -> Planet:
    if NATURAL_BRIGHTNESS.get(first, 0) >= NATURAL_BRIGHTNESS.get(second, 0):
        return first
    return second


def detect_planetary_wars(positions: Sequence[PlanetPosition]) -> list[PlanetaryWar]:
    """Return wars between non-luminary, non-node planets within one degree."""

    fighters = [p for p in positions if p.planet not in LUMINARIES and p.planet not in NODES]
    wars: list[PlanetaryWar] = []
    for first, second in combinations(fighters, 2):
        separation = angular_separation(first.longitude, second.longitude)
        if separation > WAR_ORB:
            continue
        winner = _war_winner(first.planet, second.planet)
        loser = second.planet if winner is first.planet else first.planet
        wars.append(
            PlanetaryWar(
                planet1=first.planet,
                planet2=second.planet,
                separation=separation,
                winner=winner,
                loser=loser,
            )
        )
    return wars


def _condition(position: PlanetPosition, sun: PlanetPosition) -> PlanetCondition:
    distance: float | None = None
    status = CombustionStatus.NOT_COMBUST
    if position.planet is not Planet.SUN:
        distance = angular_separation(position.longitude, sun.longitude)
        status = combustion_status(position.planet, distance, retrograde=position.speed < 0.0)
    return PlanetCondition(
        planet=position.planet,
        retrograde_status=retrograde_status(position.planet, position.speed),
        combustion_status=status,
        distance_from_sun=distance,
        speed=position.speed,
    )


def analyze_conditions(chart: VedicChart) -> ConditionAnalysis:
    """Classify every planet of ``chart``.

    Raises
    ------
    MissingBodyPosition
        When the chart has no Sun, since combustion cannot be judged.
    """

    sun = position_of(chart, Planet.SUN, context="combustion analysis")
    wars = detect_planetary_wars(chart.positions)
    conditions = []
    for position in chart.positions:
        condition = _condition(position, sun)
        war = next((w for w in wars if position.planet in (w.planet1, w.planet2)), None)
        if war is not None:
            opponent = war.planet2 if war.planet1 is position.planet else war.planet1
            condition = replace(
                condition,
                war_opponent=opponent,
                is_war_winner=war.winner is position.planet,
            )
        conditions.append(condition)
    return ConditionAnalysis(conditions=tuple(conditions), planetary_wars=tuple(wars))


def apply_combustion(chart: VedicChart) -> tuple[PlanetPosition, ...]:
    """Return ``chart.positions`` with ``is_combust`` set for full or partial combustion."""

    analysis = analyze_conditions(chart)
    combust = set(analysis.combustions)
    return tuple(
        with_overrides(position, is_combust=position.planet in combust)
        for position in chart.positions
    )


@dataclass(frozen=True)
class RetrogradePeriod:
    """A retrograde station-to-station span sampled at daily resolution.

    ``end`` is the first day the planet is sampled direct again.
    """

    planet: Planet
    start: date
    end: date
    start_longitude: float
    end_longitude: float

    @property
    def duration_days(self) -> int:
        return (self.end - self.start).days


_NON_RETROGRADING: Final[frozenset[Planet]] = LUMINARIES | NODES
_DAILY_SAMPLE_TIME: Final[time] = time(12, 0)


def find_next_retrograde(
    provider: EphemerisProvider,
    planet: Planet,
    start: date,
    *,
    max_search_days: int = 730,
) -> RetrogradePeriod | None:
    """Search forward from ``start`` for the next complete retrograde period.

    Each day is sampled at 12:00 UT.  A planet already retrograde on ``start``
    opens its period on that day.  Returns ``None`` for the luminaries and
    the nodes, and when no period closes within ``max_search_days``.
    """

    if planet in _NON_RETROGRADING:
        return None

    period_start: date | None = None
    start_longitude = 0.0
    for offset in range(max_search_days):
        day = start + timedelta(days=offset)
        jd = julian_day(datetime.combine(day, _DAILY_SAMPLE_TIME, tzinfo=UTC))
        sample = provider.position(planet, jd)
        retrograde = sample.speed < 0.0
        if retrograde and period_start is None:
            period_start = day
            start_longitude = sample.longitude
        elif not retrograde and period_start is not None:
            period = RetrogradePeriod(
                planet=planet,
                start=period_start,
                end=day,
                start_longitude=start_longitude,
                end_longitude=sample.longitude,
            )
            logger.debug(
                {
                    "event": "retrograde_period_found",
                    "planet": planet.value,
                    "start": period.start.isoformat(),
                    "end": period.end.isoformat(),
                }
            )
            return period
    return None
