"""Gochara: transits read against a natal chart.

Transiting grahas are judged by their sign counted from the natal Moon,
with the classical vedha (obstruction) pairs cancelling good results.
Aspects from transiting to natal bodies, a combined period assessment and a
four-week scan for slow-planet milestones (Sade Sati, Ashtama Shani, Jupiter
in trines, nodes across the Moon) complete the analysis.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from statistics import fmean
from typing import Final

from ..chart.birth import BirthData
from ..chart.houses import HouseSystem, house_from_sign
from ..chart.natal import VedicChart, compute_vedic_chart, position_of
from ..chart.positions import PlanetPosition
from ..core.angles import angular_separation, orb_from_target
from ..core.bodies import MAIN_PLANETS, Planet
from ..core.zodiac import ZodiacSign, sign_index
from ..ephemeris.provider import EphemerisProvider
from .aspects import AspectType

__all__ = [
    "FAVORABLE_TRANSITS",
    "NEUTRAL_TRANSITS",
    "VEDHA_PAIRS",
    "TRANSIT_ORBS",
    "TRANSIT_ASPECTS",
    "SIGNIFICANT_PERIOD_OFFSETS",
    "TransitEffect",
    "TransitQuality",
    "GocharaResult",
    "TransitAspect",
    "TransitAssessment",
    "SignificantPeriod",
    "TransitAnalysis",
    "transit_chart",
    "house_from_moon",
    "gochara",
    "transit_aspects",
    "assess_transits",
    "find_significant_periods",
    "analyze_transits",
]

logger = logging.getLogger(__name__)

FAVORABLE_TRANSITS: Final[Mapping[Planet, frozenset[int]]] = {
    Planet.SUN: frozenset({3, 6, 10, 11}),
    Planet.MOON: frozenset({1, 3, 6, 7, 10, 11}),
    Planet.MARS: frozenset({3, 6, 11}),
    Planet.MERCURY: frozenset({2, 4, 6, 8, 10, 11}),
    Planet.JUPITER: frozenset({2, 5, 7, 9, 11}),
    Planet.VENUS: frozenset({1, 2, 3, 4, 5, 8, 9, 11, 12}),
    Planet.SATURN: frozenset({3, 6, 11}),
    Planet.RAHU: frozenset({3, 6, 10, 11}),
    Planet.KETU: frozenset({3, 6, 10, 11}),
}
"""Houses from the natal Moon giving good results."""

NEUTRAL_TRANSITS: Final[Mapping[Planet, frozenset[int]]] = {
    Planet.SUN: frozenset({1, 2, 5}),
    Planet.MOON: frozenset({2, 5}),
    Planet.MARS: frozenset({1, 10}),
    Planet.MERCURY: frozenset({1, 3, 5}),
    Planet.JUPITER: frozenset({1, 4, 6, 8, 10}),
    Planet.VENUS: frozenset({6, 7, 10}),
    Planet.SATURN: frozenset({1, 2, 10}),
    Planet.RAHU: frozenset({1, 2, 5}),
    Planet.KETU: frozenset({1, 2, 5}),
}

VEDHA_PAIRS: Final[Mapping[Planet, Mapping[int, int]]] = {
    Planet.SUN: {3: 9, 9: 3, 6: 12, 12: 6, 10: 4, 4: 10, 11: 5, 5: 11},
    Planet.MOON: {1: 5, 5: 1, 3: 9, 9: 3, 6: 12, 12: 6, 7: 2, 2: 7, 10: 4, 4: 10, 11: 8, 8: 11},
    Planet.MARS: {3: 12, 12: 3, 6: 9, 9: 6, 11: 5, 5: 11},
    Planet.MERCURY: {2: 5, 5: 2, 4: 3, 3: 4, 6: 9, 9: 6, 8: 1, 1: 8, 10: 8, 11: 12, 12: 11},
    Planet.JUPITER: {2: 12, 12: 2, 5: 4, 4: 5, 7: 3, 3: 7, 9: 10, 10: 9, 11: 8, 8: 11},
    Planet.VENUS: {1: 3, 8: 5, 2: 7, 7: 2, 3: 12, 4: 10, 10: 4, 5: 8, 9: 11, 11: 6, 6: 11, 12: 3},
    Planet.SATURN: {3: 12, 12: 3, 6: 9, 9: 6, 11: 5, 5: 11},
}
"""Transit house mapped to the house whose occupant obstructs it.

The nodes have no vedha.
"""

TRANSIT_ORBS: Final[Mapping[Planet, float]] = {
    Planet.SUN: 8.0,
    Planet.MOON: 8.0,
    Planet.MERCURY: 6.0,
    Planet.VENUS: 6.0,
    Planet.MARS: 6.0,
    Planet.JUPITER: 8.0,
    Planet.SATURN: 8.0,
    Planet.RAHU: 5.0,
    Planet.KETU: 5.0,
}
_DEFAULT_TRANSIT_ORB: Final[float] = 6.0

TRANSIT_ASPECTS: Final[Sequence[AspectType]] = (
    AspectType.CONJUNCTION,
    AspectType.SEXTILE,
    AspectType.SQUARE,
    AspectType.TRINE,
    AspectType.OPPOSITION,
)

SIGNIFICANT_PERIOD_OFFSETS: Final[Sequence[int]] = (0, 7, 14, 21, 28)
"""Day offsets sampled by :func:`find_significant_periods`."""

_SIGNIFICANT_HOUSES: Final[Mapping[Planet, frozenset[int]]] = {
    Planet.SATURN: frozenset({1, 4, 7, 8, 10, 12}),
    Planet.JUPITER: frozenset({1, 5, 9}),
    Planet.RAHU: frozenset({1, 7}),
    Planet.KETU: frozenset({1, 7}),
}

_HOUSE_MATTERS: Final[Mapping[int, str]] = {
    1: "self, health, personality",
    2: "wealth, family, speech",
    3: "courage, siblings, short journeys",
    4: "home, mother, mental peace",
    5: "children, creativity, romance",
    6: "enemies, health issues, debts",
    7: "marriage, partnerships, business",
    8: "obstacles, longevity, occult",
    9: "fortune, father, religion",
    10: "career, status, government",
    11: "gains, friends, elder siblings",
    12: "expenses, spirituality, foreign",
}

_HARMONIOUS: Final[frozenset[AspectType]] = frozenset({AspectType.TRINE, AspectType.SEXTILE})
_TENSE: Final[frozenset[AspectType]] = frozenset({AspectType.SQUARE, AspectType.OPPOSITION})
_BENEFIC_TRANSITERS: Final[frozenset[Planet]] = frozenset({Planet.JUPITER, Planet.VENUS})
_MALEFIC_TRANSITERS: Final[frozenset[Planet]] = frozenset(
    {Planet.SATURN, Planet.MARS, Planet.RAHU, Planet.KETU}
)
_STRONG_ASPECT: Final[float] = 0.8
_MAX_FOCUS_AREAS: Final[int] = 5
_NEUTRAL_COMPONENT: Final[float] = 50.0


class TransitEffect(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    NEUTRAL = "Neutral"
    CHALLENGING = "Challenging"
    DIFFICULT = "Difficult"

    @property
    def score(self) -> int:
        return _EFFECT_SCORES[self]


_EFFECT_SCORES: Final[Mapping[TransitEffect, int]] = {
    TransitEffect.EXCELLENT: 5,
    TransitEffect.GOOD: 4,
    TransitEffect.NEUTRAL: 3,
    TransitEffect.CHALLENGING: 2,
    TransitEffect.DIFFICULT: 1,
}


class TransitQuality(str, Enum):
    EXCELLENT = "Excellent Period"
    GOOD = "Good Period"
    MIXED = "Mixed Period"
    CHALLENGING = "Challenging Period"
    DIFFICULT = "Difficult Period"

    @classmethod
    def from_score(cls, score: float) -> TransitQuality:
        if score >= 75.0:
            return cls.EXCELLENT
        if score >= 60.0:
            return cls.GOOD
        if score >= 45.0:
            return cls.MIXED
        if score >= 30.0:
            return cls.CHALLENGING
        return cls.DIFFICULT


@dataclass(frozen=True)
class GocharaResult:
    planet: Planet
    transit_sign: ZodiacSign
    house_from_moon: int
    effect: TransitEffect
    vedha_source: Planet | None = None
    interpretation: str = ""

    @property
    def is_vedha_affected(self) -> bool:
        return self.vedha_source is not None


@dataclass(frozen=True)
class TransitAspect:
    transiting_planet: Planet
    natal_planet: Planet
    aspect_type: AspectType
    separation: float
    orb: float
    is_applying: bool
    strength: float
    interpretation: str = ""


@dataclass(frozen=True)
class TransitAssessment:
    quality: TransitQuality
    score: float
    summary: str
    focus_areas: tuple[str, ...]


@dataclass(frozen=True)
class SignificantPeriod:
    start: datetime
    end: datetime
    description: str
    planets: tuple[Planet, ...]
    intensity: int


@dataclass(frozen=True)
class TransitAnalysis:
    natal_chart: VedicChart
    moment: datetime
    transit_positions: tuple[PlanetPosition, ...]
    gochara_results: tuple[GocharaResult, ...]
    aspects: tuple[TransitAspect, ...]
    assessment: TransitAssessment
    significant_periods: tuple[SignificantPeriod, ...]

    def gochara_for(self, planet: Planet) -> GocharaResult | None:
        for result in self.gochara_results:
            if result.planet is planet:
                return result
        return None


def transit_chart(
    provider: EphemerisProvider, moment: datetime, *, timezone: str = "UTC"
) -> VedicChart:
    """Cast the sky at ``moment`` (naive wall-clock time in ``timezone``).

    The chart is computed for 0°N 0°E with whole-sign houses; only the
    planetary longitudes matter for transit work.
    """

    birth = BirthData(
        name="Transit",
        moment=moment,
        timezone=timezone,
        latitude=0.0,
        longitude=0.0,
        location="Transit Chart",
    )
    return compute_vedic_chart(birth, provider, house_system=HouseSystem.WHOLE_SIGN)


def house_from_moon(longitude: float, moon_longitude: float) -> int:
    """Sign-based house (1-12) of ``longitude`` counted from the Moon's sign."""

    return house_from_sign(sign_index(longitude), sign_index(moon_longitude))


def _vedha_source(
    planet: Planet, house: int, houses: Mapping[Planet, int]
) -> Planet | None:
    blocking_house = VEDHA_PAIRS.get(planet, {}).get(house)
    if blocking_house is None:
        return None
    for other, other_house in houses.items():
        if other is not planet and other_house == blocking_house:
            return other
    return None


def _gochara_text(planet: Planet, house: int, effect: TransitEffect, vedha: bool) -> str:
    matters = _HOUSE_MATTERS[house]
    lead = f"{planet.value} transit in house {house} from the Moon"
    text = {
        TransitEffect.EXCELLENT: f"{lead} brings excellent results for {matters}.",
        TransitEffect.GOOD: f"{lead} supports {matters}.",
        TransitEffect.NEUTRAL: f"{lead} has neutral effects on {matters}.",
        TransitEffect.CHALLENGING: f"{lead} may challenge {matters}.",
        TransitEffect.DIFFICULT: f"{lead} requires caution in {matters}.",
    }[effect]
    if vedha:
        text += " Effects may be diminished due to vedha."
    return text


def gochara(
    natal_moon: PlanetPosition, transit_positions: Sequence[PlanetPosition]
) -> list[GocharaResult]:
    """Judge each transiting graha by its house from ``natal_moon``.

    A good result obstructed by a planet in its vedha house drops to neutral.
    """

    houses = {
        position.planet: house_from_moon(position.longitude, natal_moon.longitude)
        for position in transit_positions
        if position.planet in MAIN_PLANETS
    }
    results: list[GocharaResult] = []
    for position in transit_positions:
        planet = position.planet
        if planet not in houses:
            continue
        house = houses[planet]
        if house in FAVORABLE_TRANSITS.get(planet, frozenset()):
            effect = TransitEffect.GOOD
        elif house in NEUTRAL_TRANSITS.get(planet, frozenset()):
            effect = TransitEffect.NEUTRAL
        else:
            effect = TransitEffect.CHALLENGING
        source = _vedha_source(planet, house, houses)
        if source is not None and effect is TransitEffect.GOOD:
            effect = TransitEffect.NEUTRAL
        results.append(
            GocharaResult(
                planet=planet,
                transit_sign=position.sign,
                house_from_moon=house,
                effect=effect,
                vedha_source=source,
                interpretation=_gochara_text(planet, house, effect, source is not None),
            )
        )
    return results


def _aspect_text(transiting: Planet, natal: Planet, aspect: AspectType, applying: bool) -> str:
    motion = "becoming exact" if applying else "separating"
    base = f"Transit {transiting.value} {aspect.value} natal {natal.value} ({motion})"
    benefic = transiting in _BENEFIC_TRANSITERS
    harmonious = aspect in _HARMONIOUS
    if benefic and harmonious:
        return f"Favorable: {base} - beneficial influence"
    if benefic:
        return f"{base} - mixed but generally supportive"
    if harmonious:
        return f"{base} - harmonious connection"
    return f"{base} - requires attention"


def transit_aspects(
    natal_chart: VedicChart, transit_positions: Sequence[PlanetPosition]
) -> list[TransitAspect]:
    """Return major aspects from transiting to natal bodies, strongest first.

    Strength is ``1 - orb / max_orb`` where ``max_orb`` depends on the
    transiting planet.  An aspect is applying when one day of the transiting
    planet's motion brings it closer to exact.
    """

    found: list[TransitAspect] = []
    for transit in transit_positions:
        max_orb = TRANSIT_ORBS.get(transit.planet, _DEFAULT_TRANSIT_ORB)
        tomorrow = transit.longitude + transit.speed
        for natal in natal_chart.positions:
            separation = angular_separation(transit.longitude, natal.longitude)
            for aspect in TRANSIT_ASPECTS:
                orb = orb_from_target(separation, aspect.angle)
                if orb > max_orb:
                    continue
                future_orb = orb_from_target(angular_separation(tomorrow, natal.longitude), aspect.angle)
                applying = future_orb < orb
                found.append(
                    TransitAspect(
                        transiting_planet=transit.planet,
                        natal_planet=natal.planet,
                        aspect_type=aspect,
                        separation=separation,
                        orb=orb,
                        is_applying=applying,
                        strength=1.0 - orb / max_orb,
                        interpretation=_aspect_text(transit.planet, natal.planet, aspect, applying),
                    )
                )
    found.sort(key=lambda aspect: aspect.strength, reverse=True)
    return found


def _aspect_component(aspects: Sequence[TransitAspect]) -> float:
    if not aspects:
        return _NEUTRAL_COMPONENT
    supportive = sum(
        1
        for a in aspects
        if a.aspect_type in _HARMONIOUS
        or (a.aspect_type is AspectType.CONJUNCTION and a.transiting_planet in _BENEFIC_TRANSITERS)
    )
    tense = sum(
        1
        for a in aspects
        if a.aspect_type in _TENSE and a.transiting_planet in _MALEFIC_TRANSITERS
    )
    return float(min(max(supportive * 10 - tense * 5 + 50, 0), 100))


def _summary(quality: TransitQuality, results: Sequence[GocharaResult]) -> str:
    favorable = ", ".join(
        r.planet.value for r in results if r.effect in (TransitEffect.EXCELLENT, TransitEffect.GOOD)
    )
    challenging = ", ".join(
        r.planet.value
        for r in results
        if r.effect in (TransitEffect.CHALLENGING, TransitEffect.DIFFICULT)
    )
    if quality is TransitQuality.EXCELLENT:
        return f"Excellent transit period. {favorable} are well placed from the Moon."
    if quality is TransitQuality.GOOD:
        return f"Favorable transit period. {favorable} provide support."
    if quality is TransitQuality.MIXED:
        return f"Mixed transit influences. Balance {favorable} against {challenging}."
    if quality is TransitQuality.CHALLENGING:
        return f"Challenging period requiring patience. {challenging} may create obstacles."
    return f"Difficult transit period. {challenging} create significant challenges."


def _focus_areas(
    results: Sequence[GocharaResult], aspects: Sequence[TransitAspect]
) -> tuple[str, ...]:
    areas: list[str] = []
    houses = {r.planet: r.house_from_moon for r in results}
    saturn = houses.get(Planet.SATURN)
    if saturn in (1, 12):
        areas.append("Sade Sati period: patience, health and spiritual growth")
    elif saturn == 8:
        areas.append("Ashtama Shani: caution about health and unexpected challenges")
    elif saturn == 4:
        areas.append("Saturn transiting the 4th: home, mother and mental peace")
    elif saturn == 10:
        areas.append("Saturn transiting the 10th: career responsibilities")
    jupiter = houses.get(Planet.JUPITER)
    if jupiter in (1, 5, 9):
        areas.append("Jupiter in trine houses: expansion, learning and spirituality")
    elif jupiter == 2:
        areas.append("Jupiter transiting the 2nd: wealth accumulation")
    elif jupiter == 11:
        areas.append("Jupiter transiting the 11th: gains through networking")
    strong = [a for a in aspects if a.strength > _STRONG_ASPECT][:3]
    areas.extend(
        f"Strong {a.aspect_type.value} from transit {a.transiting_planet.value} "
        f"to natal {a.natal_planet.value}"
        for a in strong
    )
    return tuple(areas[:_MAX_FOCUS_AREAS])


def assess_transits(
    results: Sequence[GocharaResult],
    aspects: Sequence[TransitAspect],
    *,
    ashtakavarga_score: float | None = None,
) -> TransitAssessment:
    """Combine gochara, aspects and ashtakavarga into a 0-100 period score.

    Gochara contributes 40% (mean effect score times 20), aspects 30% and
    ``ashtakavarga_score`` 30%.  Missing components count as neutral: 60
    for gochara and 50 for the others.
    """

    if results:
        gochara_component = fmean(r.effect.score for r in results) * 20.0
    else:
        gochara_component = TransitEffect.NEUTRAL.score * 20.0
    aspect_component = _aspect_component(aspects)
    bindu_component = _NEUTRAL_COMPONENT if ashtakavarga_score is None else ashtakavarga_score
    score = gochara_component * 0.4 + aspect_component * 0.3 + bindu_component * 0.3
    quality = TransitQuality.from_score(score)
    return TransitAssessment(
        quality=quality,
        score=score,
        summary=_summary(quality, results),
        focus_areas=_focus_areas(results, aspects),
    )


def _period_description(planet: Planet, house: int) -> str:
    if planet is Planet.SATURN:
        return {
            12: "Sade Sati beginning phase (Saturn in 12th from Moon)",
            1: "Sade Sati peak phase (Saturn over natal Moon)",
            8: "Ashtama Shani (Saturn in 8th from Moon)",
            4: "Kantak Shani (Saturn in 4th from Moon)",
            7: "Saturn in 7th from Moon: relationship focus",
            10: "Saturn in 10th from Moon: career challenges and growth",
        }.get(house, f"Saturn transit in house {house} from Moon")
    if planet is Planet.JUPITER:
        return {
            1: "Jupiter over natal Moon: expansion and growth",
            5: "Jupiter in 5th from Moon: creativity and children",
            9: "Jupiter in 9th from Moon: fortune and dharma",
        }.get(house, f"Jupiter transit in house {house} from Moon")
    if planet is Planet.RAHU:
        return f"Rahu transit in house {house} from Moon: worldly desires amplified"
    return f"Ketu transit in house {house} from Moon: spiritual detachment"


def _intensity(planet: Planet, house: int) -> int:
    if planet is Planet.SATURN and house == 8:
        return 5
    if planet is Planet.SATURN and house in (1, 12):
        return 4
    if planet is Planet.JUPITER:
        return 4
    return 3


def find_significant_periods(
    natal_chart: VedicChart,
    provider: EphemerisProvider,
    start: datetime,
) -> list[SignificantPeriod]:
    """Scan the four weeks after ``start`` for slow-planet milestones.

    The sky is sampled every seven days; each hit spans a week and repeated
    descriptions are reported once, at their first sample.
    """

    natal_moon = natal_chart.get(Planet.MOON)
    if natal_moon is None:
        return []
    timezone = natal_chart.birth.timezone
    periods: dict[str, SignificantPeriod] = {}
    for offset in SIGNIFICANT_PERIOD_OFFSETS:
        sample = start + timedelta(days=offset)
        sky = transit_chart(provider, sample, timezone=timezone)
        for planet, houses in _SIGNIFICANT_HOUSES.items():
            position = sky.get(planet)
            if position is None:
                continue
            house = house_from_moon(position.longitude, natal_moon.longitude)
            if house not in houses:
                continue
            description = _period_description(planet, house)
            periods.setdefault(
                description,
                SignificantPeriod(
                    start=sample,
                    end=sample + timedelta(days=7),
                    description=description,
                    planets=(planet,),
                    intensity=_intensity(planet, house),
                ),
            )
    return list(periods.values())


def analyze_transits(
    natal_chart: VedicChart,
    provider: EphemerisProvider,
    moment: datetime,
    *,
    ashtakavarga_score: float | None = None,
) -> TransitAnalysis:
    """Run the full transit analysis for ``moment`` in the natal timezone.

    Raises
    ------
    MissingBodyPosition
        When the natal chart has no Moon.
    """

    natal_moon = position_of(natal_chart, Planet.MOON, context="gochara")
    sky = transit_chart(provider, moment, timezone=natal_chart.birth.timezone)
    results = gochara(natal_moon, sky.positions)
    aspects = transit_aspects(natal_chart, sky.positions)
    assessment = assess_transits(results, aspects, ashtakavarga_score=ashtakavarga_score)
    periods = find_significant_periods(natal_chart, provider, moment)
    logger.debug(
        {
            "event": "transits_analyzed",
            "name": natal_chart.birth.name,
            "moment": moment.isoformat(),
            "quality": assessment.quality.value,
            "score": assessment.score,
            "aspects": len(aspects),
            "periods": len(periods),
        }
    )
    return TransitAnalysis(
        natal_chart=natal_chart,
        moment=moment,
        transit_positions=sky.positions,
        gochara_results=tuple(results),
        aspects=tuple(aspects),
        assessment=assessment,
        significant_periods=tuple(periods),
    )
