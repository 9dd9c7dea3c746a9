"""Rashi (sign-based) and Bhava (cusp-based) chart composition.

Both charts label house ``n`` with the sign ``(ascendant sign + n - 1) % 12``.
They differ in how planets are placed: the Rashi chart uses each planet's
sign, while the Bhava chart uses containment between the ascendant and the
subsequent cusps.  A planet near a cusp can therefore sit in different houses
in the two charts.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum

from ..core.bodies import Planet
from ..core.zodiac import ZodiacSign, sign_from_index, sign_index
from ..exceptions import MissingBodyPosition
from .houses import bhava_boundaries, house_for_longitude, house_from_sign
from .natal import VedicChart

__all__ = [
    "ChartType",
    "ChartHouse",
    "ChartData",
    "rashi_chart",
    "bhava_chart",
    "planets_by_house",
    "house_of",
]


class ChartType(str, Enum):
    RASHI = "rashi"
    BHAVA = "bhava"


@dataclass(frozen=True)
class ChartHouse:
    number: int
    sign: ZodiacSign
    planets: tuple[Planet, ...]


@dataclass(frozen=True)
class ChartData:
    chart_type: ChartType
    ascendant: float
    houses: tuple[ChartHouse, ...]

    def house(self, number: int) -> ChartHouse:
        if not 1 <= number <= 12:
            raise ValueError(f"house number must be within 1..12, received {number}")
        return self.houses[number - 1]

    @property
    def placements(self) -> Mapping[Planet, int]:
        return {planet: house.number for house in self.houses for planet in house.planets}


def _house_signs(ascendant: float) -> list[ZodiacSign]:
    asc_index = sign_index(ascendant)
    return [sign_from_index(asc_index + n - 1) for n in range(1, 13)]


def _assemble(
    chart_type: ChartType, ascendant: float, placements: Sequence[tuple[Planet, int]]
) -> ChartData:
    signs = _house_signs(ascendant)
    houses = tuple(
        ChartHouse(
            number=n,
            sign=signs[n - 1],
            planets=tuple(planet for planet, house in placements if house == n),
        )
        for n in range(1, 13)
    )
    return ChartData(chart_type=chart_type, ascendant=ascendant, houses=houses)


def rashi_chart(chart: VedicChart) -> ChartData:
    """Place planets by sign relative to the ascendant sign."""

    asc_index = sign_index(chart.ascendant)
    placements = [
        (pos.planet, house_from_sign(sign_index(pos.longitude), asc_index))
        for pos in chart.positions
    ]
    return _assemble(ChartType.RASHI, chart.ascendant, placements)


def bhava_chart(chart: VedicChart) -> ChartData:
    """Place planets by cusp containment using the ascendant and cusps 2–12."""

    boundaries = bhava_boundaries(chart.ascendant, chart.cusps)
    placements = [
        (pos.planet, house_for_longitude(pos.longitude, boundaries))
        for pos in chart.positions
    ]
    return _assemble(ChartType.BHAVA, chart.ascendant, placements)


def planets_by_house(chart: VedicChart) -> dict[int, tuple[Planet, ...]]:
    """Group the chart's planets by their stored house number (1–12)."""

    grouped: dict[int, list[Planet]] = {n: [] for n in range(1, 13)}
    for pos in chart.positions:
        grouped[pos.house].append(pos.planet)
    return {n: tuple(planets) for n, planets in grouped.items()}


def house_of(chart_data: ChartData, planet: Planet) -> int:
    """Return the house holding ``planet`` in ``chart_data``."""

    try:
        return chart_data.placements[planet]
    except KeyError as exc:
        raise MissingBodyPosition(planet, f"{chart_data.chart_type.value} chart") from exc
