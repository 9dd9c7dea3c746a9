"""Sidereal natal chart assembly."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ..core.bodies import MAIN_PLANETS, Planet
from ..ephemeris.provider import EphemerisProvider, RawPosition
from ..exceptions import MissingBodyPosition
from .birth import BirthData
from .houses import HouseSystem, bhava_boundaries, resolve_house_system
from .positions import PlanetPosition, ketu_from_rahu, normalize_position

__all__ = ["VedicChart", "compute_vedic_chart", "position_of"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VedicChart:
    """Computed sidereal chart for a :class:`BirthData`.

    ``positions`` follow the order of the body set the chart was computed
    with; houses on each position are cusp-based (bhava) placements.
    """

    birth: BirthData
    julian_day: float
    ayanamsa: float
    ayanamsa_name: str
    ascendant: float
    midheaven: float
    cusps: tuple[float, ...]
    house_system: HouseSystem
    positions: tuple[PlanetPosition, ...]

    def __post_init__(self) -> None:
        if len(self.cusps) != 12:
            raise ValueError(f"VedicChart requires 12 cusps, received {len(self.cusps)}")

    def get(self, planet: Planet) -> PlanetPosition | None:
        for position in self.positions:
            if position.planet is planet:
                return position
        return None

    @property
    def planets(self) -> tuple[Planet, ...]:
        return tuple(position.planet for position in self.positions)


def position_of(
    chart: VedicChart, planet: Planet, *, context: str | None = None
) -> PlanetPosition:
    """Return ``planet``'s position or raise :class:`MissingBodyPosition`."""

    position = chart.get(planet)
    if position is None:
        raise MissingBodyPosition(planet, context)
    return position


def compute_vedic_chart(
    birth: BirthData,
    provider: EphemerisProvider,
    *,
    house_system: HouseSystem | str | None = None,
    bodies: Iterable[Planet] | None = None,
    ayanamsa_name: str | None = None,
) -> VedicChart:
    """Compute a :class:`VedicChart` for ``birth`` using ``provider``.

    ``bodies`` defaults to :data:`~astrostorm.core.bodies.MAIN_PLANETS`.
    Ketu is never requested from the provider; it is derived from Rahu.
    Provider failures propagate unchanged.
    """

    system = resolve_house_system(house_system)
    body_set: Sequence[Planet] = tuple(dict.fromkeys(bodies or MAIN_PLANETS))
    jd = birth.julian_day()

    ayanamsa = provider.ayanamsa(jd)
    houses = provider.house_cusps(jd, birth.latitude, birth.longitude, system.code)
    boundaries = bhava_boundaries(houses.ascendant, houses.cusps)

    raw: dict[Planet, RawPosition] = {}
    for planet in body_set:
        if planet is Planet.KETU:
            continue
        raw[planet] = provider.position(planet, jd)
    if Planet.KETU in body_set:
        rahu = raw.get(Planet.RAHU) or provider.position(Planet.RAHU, jd)
        raw[Planet.KETU] = ketu_from_rahu(rahu)

    positions = tuple(
        normalize_position(planet, raw[planet], boundaries=boundaries) for planet in body_set
    )
    chart = VedicChart(
        birth=birth,
        julian_day=jd,
        ayanamsa=ayanamsa,
        ayanamsa_name=ayanamsa_name or getattr(provider, "ayanamsa_name", "lahiri"),
        ascendant=houses.ascendant,
        midheaven=houses.midheaven,
        cusps=tuple(houses.cusps),
        house_system=resolve_house_system(houses.system),
        positions=positions,
    )
    logger.debug(
        {
            "event": "vedic_chart_computed",
            "name": birth.name,
            "julian_day": jd,
            "house_system": system.code,
            "bodies": [p.value for p in body_set],
        }
    )
    return chart
