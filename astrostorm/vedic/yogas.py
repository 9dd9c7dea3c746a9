"""Planetary combinations (yogas) matched against the aspect matrix."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from ..chart.natal import VedicChart
from ..core.angles import angular_separation, orb_from_target
from ..core.bodies import Planet
from .aspects import AspectMatrix, AspectType, OrbConfiguration, compute_aspect_matrix

__all__ = [
    "YogaMatch",
    "YOGA_RULES",
    "GAJA_KESARI_ORB",
    "detect_yogas",
]

GAJA_KESARI_ORB: Final[float] = 15.0
_GAJA_KESARI_STRENGTH: Final[float] = 0.8
_KENDRA_ANGLES: Final[Sequence[float]] = (0.0, 90.0, 180.0, 270.0)


@dataclass(frozen=True)
class YogaMatch:
    name: str
    planets: tuple[Planet, ...]
    description: str
    strength: float
    is_auspicious: bool


@dataclass(frozen=True)
class _ConjunctionRule:
    name: str
    planets: tuple[Planet, Planet]
    description: str
    is_auspicious: bool


YOGA_RULES: Final[Sequence[_ConjunctionRule]] = (
    _ConjunctionRule(
        "Budha-Aditya Yoga",
        (Planet.SUN, Planet.MERCURY),
        "Intelligence, communication skills, sharp intellect",
        True,
    ),
    _ConjunctionRule(
        "Chandra-Mangala Yoga",
        (Planet.MOON, Planet.MARS),
        "Wealth through enterprise, business acumen",
        True,
    ),
    _ConjunctionRule(
        "Guru-Chandal Yoga",
        (Planet.JUPITER, Planet.RAHU),
        "Challenges to traditional wisdom, unconventional beliefs",
        False,
    ),
    _ConjunctionRule(
        "Shani-Rahu Yoga",
        (Planet.SATURN, Planet.RAHU),
        "Karmic challenges, need for patience and discipline",
        False,
    ),
    _ConjunctionRule(
        "Venus-Jupiter Conjunction",
        (Planet.VENUS, Planet.JUPITER),
        "Prosperity, luxury, spiritual inclinations, marital happiness",
        True,
    ),
)
"""Yogas formed by a conjunction of two planets; strength comes from the aspect."""


def _gaja_kesari(chart: VedicChart) -> YogaMatch | None:
    moon = chart.get(Planet.MOON)
    jupiter = chart.get(Planet.JUPITER)
    if moon is None or jupiter is None:
        return None
    separation = angular_separation(moon.longitude, jupiter.longitude)
    if not any(orb_from_target(separation, angle) <= GAJA_KESARI_ORB for angle in _KENDRA_ANGLES):
        return None
    return YogaMatch(
        name="Gaja-Kesari Yoga",
        planets=(Planet.MOON, Planet.JUPITER),
        description="Fame, wisdom, wealth, and noble character",
        strength=_GAJA_KESARI_STRENGTH,
        is_auspicious=True,
    )


def detect_yogas(
    chart: VedicChart,
    matrix: AspectMatrix | None = None,
    *,
    config: OrbConfiguration | None = None,
) -> list[YogaMatch]:
    """Return the yogas present in ``chart``, strongest first.

    ``matrix`` may be passed to reuse an aspect matrix already computed for
    the chart; otherwise one is built with ``config``.  Yogas whose planets
    are absent from the chart are simply not reported.
    """

    aspects = matrix if matrix is not None else compute_aspect_matrix(chart, config)
    found = [
        match
        for match in (_match_conjunction(aspects, rule) for rule in YOGA_RULES)
        if match is not None
    ]
    gaja = _gaja_kesari(chart)
    if gaja is not None:
        found.append(gaja)

    found.sort(key=lambda yoga: yoga.strength, reverse=True)
    return found


def _match_conjunction(aspects: AspectMatrix, rule: _ConjunctionRule) -> YogaMatch | None:
    aspect = aspects.aspect_between(*rule.planets, aspect_type=AspectType.CONJUNCTION)
    if aspect is None:
        return None
    return YogaMatch(
        name=rule.name,
        planets=rule.planets,
        description=rule.description,
        strength=aspect.strength,
        is_auspicious=rule.is_auspicious,
    )
