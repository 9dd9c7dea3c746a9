"""Vimshottari dasha timeline.

The timeline starts at the birth moment with the balance of the mahadasha
ruled by the Moon's nakshatra lord and continues through the fixed nine-planet
cycle.  Each period is split into nine children that start with the parent's
own lord, so the children of a period always partition it exactly.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import Enum
from itertools import accumulate
from typing import Final

from ..chart.natal import VedicChart, position_of
from ..core.bodies import Planet
from ..core.nakshatra import NAKSHATRA_ARC_DEGREES, Nakshatra, position_for
from ..exceptions import ConfigurationError

__all__ = [
    "ORDER",
    "TOTAL_YEARS",
    "DashaLevel",
    "DashaOptions",
    "DashaPeriod",
    "DashaTimeline",
    "compute_dasha_timeline",
    "vimshottari_years",
    "active_periods",
    "iter_periods",
    "remaining_days",
    "elapsed_days",
    "completion_percent",
    "is_active",
    "upcoming_periods",
    "past_periods",
    "describe_active",
]

logger = logging.getLogger(__name__)

ORDER: Final[Sequence[tuple[Planet, float]]] = (
    (Planet.KETU, 7.0),
    (Planet.VENUS, 20.0),
    (Planet.SUN, 6.0),
    (Planet.MOON, 10.0),
    (Planet.MARS, 7.0),
    (Planet.RAHU, 18.0),
    (Planet.JUPITER, 16.0),
    (Planet.SATURN, 19.0),
    (Planet.MERCURY, 17.0),
)
TOTAL_YEARS: Final[float] = sum(years for _, years in ORDER)

_YEARS: Final[dict[Planet, float]] = dict(ORDER)
_SECONDS_PER_DAY: Final[float] = 86400.0


class DashaLevel(int, Enum):
    MAHA = 1
    ANTAR = 2
    PRATYANTAR = 3
    SOOKSHMA = 4
    PRANA = 5

    @property
    def label(self) -> str:
        return _LEVEL_LABELS[self]


_LEVEL_LABELS: Final[dict[DashaLevel, str]] = {
    DashaLevel.MAHA: "Mahadasha",
    DashaLevel.ANTAR: "Bhukti",
    DashaLevel.PRATYANTAR: "Pratyantar",
    DashaLevel.SOOKSHMA: "Sookshma",
    DashaLevel.PRANA: "Prana",
}


@dataclass(frozen=True)
class DashaOptions:
    """Generation parameters for :func:`compute_dasha_timeline`.

    ``mahadasha_count`` counts every generated mahadasha, including the
    partial one running at birth.  The default of 28 covers more than two
    full 120-year cycles.
    """

    mahadasha_count: int = 28
    levels: int = 3
    year_basis: float = 365.25

    def __post_init__(self) -> None:
        if self.mahadasha_count < 1:
            raise ConfigurationError("mahadasha_count must be at least 1")
        if not 1 <= self.levels <= len(DashaLevel):
            raise ConfigurationError(f"levels must be between 1 and {len(DashaLevel)}")
        if self.year_basis <= 0.0:
            raise ConfigurationError("year_basis must be positive")


@dataclass(frozen=True)
class DashaPeriod:
    """A dasha span in absolute time together with its sub-periods."""

    level: DashaLevel
    planet: Planet
    start: datetime
    end: datetime
    duration_years: float
    parents: tuple[Planet, ...] = ()
    children: tuple[DashaPeriod, ...] = field(default=(), repr=False)

    @property
    def duration_days(self) -> float:
        return (self.end - self.start).total_seconds() / _SECONDS_PER_DAY

    def contains(self, moment: datetime) -> bool:
        """Half-open membership test: ``start <= moment < end``."""

        return self.start <= _aware(moment) < self.end


@dataclass(frozen=True)
class DashaTimeline:
    birth_moment: datetime
    nakshatra: Nakshatra
    nakshatra_lord: Planet
    progress: float
    balance_years: float
    mahadashas: tuple[DashaPeriod, ...]
    options: DashaOptions = field(default_factory=DashaOptions)

    @property
    def start(self) -> datetime:
        return self.mahadashas[0].start

    @property
    def end(self) -> datetime:
        return self.mahadashas[-1].end


def _aware(moment: datetime) -> datetime:
    if moment.tzinfo is None or moment.tzinfo.utcoffset(moment) is None:
        raise ValueError("datetime must be timezone-aware")
    return moment.astimezone(UTC)


def vimshottari_years(planet: Planet) -> float:
    """Return the full mahadasha length of ``planet`` in years."""

    try:
        return _YEARS[planet]
    except KeyError as exc:
        raise ValueError(f"{planet.value} does not rule a Vimshottari period") from exc


def _cycle_from(lord: Planet) -> list[tuple[Planet, float]]:
    start = next(idx for idx, (planet, _) in enumerate(ORDER) if planet is lord)
    return [ORDER[(start + offset) % len(ORDER)] for offset in range(len(ORDER))]


def _boundaries(
    start: datetime, end: datetime | None, spans_years: Sequence[float], year_basis: float
) -> list[datetime]:
    """Fold span lengths into consecutive period boundaries.

    When ``end`` is given it replaces the last boundary so children close
    exactly on their parent.
    """

    edges = [start + timedelta(days=total * year_basis) for total in accumulate(spans_years)]
    if end is not None:
        edges[-1] = end
    return [start, *edges]


def _subdivide(
    lord: Planet,
    start: datetime,
    end: datetime,
    years: float,
    *,
    level: int,
    parents: tuple[Planet, ...],
    options: DashaOptions,
) -> tuple[DashaPeriod, ...]:
    if level > options.levels:
        return ()
    sequence = _cycle_from(lord)
    spans = [years * sub_years / TOTAL_YEARS for _, sub_years in sequence]
    edges = _boundaries(start, end, spans, options.year_basis)
    return tuple(
        _period(
            planet,
            edges[idx],
            edges[idx + 1],
            spans[idx],
            level=level,
            parents=parents,
            options=options,
        )
        for idx, (planet, _) in enumerate(sequence)
    )


def _period(
    planet: Planet,
    start: datetime,
    end: datetime,
    years: float,
    *,
    level: int,
    parents: tuple[Planet, ...],
    options: DashaOptions,
) -> DashaPeriod:
    return DashaPeriod(
        level=DashaLevel(level),
        planet=planet,
        start=start,
        end=end,
        duration_years=years,
        parents=parents,
        children=_subdivide(
            planet,
            start,
            end,
            years,
            level=level + 1,
            parents=(*parents, planet),
            options=options,
        ),
    )


def compute_dasha_timeline(
    chart: VedicChart, options: DashaOptions | None = None
) -> DashaTimeline:
    """Build the Vimshottari timeline for ``chart``.

    Raises
    ------
    MissingBodyPosition
        If the chart carries no Moon position.
    """

    opts = options or DashaOptions()
    moon = position_of(chart, Planet.MOON, context="Vimshottari dasha")
    nak = position_for(moon.longitude)
    progress = nak.offset / NAKSHATRA_ARC_DEGREES
    lord_years = vimshottari_years(nak.lord)
    balance = lord_years * (1.0 - progress)

    cycle = _cycle_from(nak.lord)
    lords = [cycle[idx % len(cycle)] for idx in range(opts.mahadasha_count)]
    spans = [balance, *(years for _, years in lords[1:])]
    birth = chart.birth.to_utc()
    edges = _boundaries(birth, None, spans, opts.year_basis)

    mahadashas = tuple(
        _period(
            planet,
            edges[idx],
            edges[idx + 1],
            spans[idx],
            level=DashaLevel.MAHA,
            parents=(),
            options=opts,
        )
        for idx, (planet, _) in enumerate(lords)
    )
    logger.debug(
        {
            "event": "dasha_timeline_generated",
            "nakshatra": nak.nakshatra.value,
            "lord": nak.lord.value,
            "balance_years": balance,
            "mahadashas": len(mahadashas),
            "levels": opts.levels,
        }
    )
    return DashaTimeline(
        birth_moment=birth,
        nakshatra=nak.nakshatra,
        nakshatra_lord=nak.lord,
        progress=progress,
        balance_years=balance,
        mahadashas=mahadashas,
        options=opts,
    )


def active_periods(timeline: DashaTimeline, moment: datetime) -> tuple[DashaPeriod, ...]:
    """Return the chain of periods containing ``moment``, mahadasha first.

    The chain is empty when ``moment`` lies outside the generated horizon.
    """

    chain: list[DashaPeriod] = []
    candidates: Sequence[DashaPeriod] = timeline.mahadashas
    while candidates:
        match = next((period for period in candidates if period.contains(moment)), None)
        if match is None:
            break
        chain.append(match)
        candidates = match.children
    return tuple(chain)


def iter_periods(
    timeline: DashaTimeline, level: DashaLevel = DashaLevel.MAHA
) -> Iterator[DashaPeriod]:
    """Yield every period at ``level`` in chronological order."""

    def _walk(periods: Sequence[DashaPeriod]) -> Iterator[DashaPeriod]:
        for period in periods:
            if period.level is level:
                yield period
            elif period.level < level:
                yield from _walk(period.children)

    yield from _walk(timeline.mahadashas)


def remaining_days(period: DashaPeriod, moment: datetime) -> float:
    """Days left in ``period`` after ``moment`` (0 once it has ended)."""

    seconds = (period.end - _aware(moment)).total_seconds()
    return min(max(seconds / _SECONDS_PER_DAY, 0.0), period.duration_days)


def elapsed_days(period: DashaPeriod, moment: datetime) -> float:
    seconds = (_aware(moment) - period.start).total_seconds()
    return min(max(seconds / _SECONDS_PER_DAY, 0.0), period.duration_days)


def completion_percent(period: DashaPeriod, moment: datetime) -> float:
    """Percentage (0–100) of ``period`` elapsed at ``moment``."""

    total = period.duration_days
    if total <= 0.0:
        return 100.0
    return elapsed_days(period, moment) / total * 100.0


def is_active(period: DashaPeriod, moment: datetime) -> bool:
    return period.contains(moment)


def upcoming_periods(
    timeline: DashaTimeline,
    moment: datetime,
    count: int = 5,
    *,
    level: DashaLevel = DashaLevel.MAHA,
) -> list[DashaPeriod]:
    """Return up to ``count`` periods at ``level`` starting after ``moment``."""

    when = _aware(moment)
    result: list[DashaPeriod] = []
    for period in iter_periods(timeline, level):
        if period.start > when:
            result.append(period)
            if len(result) >= count:
                break
    return result


def past_periods(
    timeline: DashaTimeline,
    moment: datetime,
    *,
    level: DashaLevel = DashaLevel.MAHA,
) -> list[DashaPeriod]:
    when = _aware(moment)
    return [period for period in iter_periods(timeline, level) if period.end <= when]


def describe_active(timeline: DashaTimeline, moment: datetime) -> str:
    """Return e.g. ``"Venus Mahadasha / Sun Bhukti / Moon Pratyantar"``."""

    chain = active_periods(timeline, moment)
    if not chain:
        return "No active Dasha"
    return " / ".join(f"{period.planet.value} {period.level.label}" for period in chain)
