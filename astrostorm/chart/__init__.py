"""Chart construction: birth data, positions, houses and composition."""

from __future__ import annotations

from .birth import BirthData, from_julian_day, julian_day
from .composer import (
    ChartData,
    ChartHouse,
    ChartType,
    bhava_chart,
    house_of,
    planets_by_house,
    rashi_chart,
)
from .houses import (
    DEFAULT_HOUSE_SYSTEM,
    HouseSystem,
    bhava_boundaries,
    house_for_longitude,
    house_from_sign,
    resolve_house_system,
)
from .natal import VedicChart, compute_vedic_chart, position_of
from .positions import PlanetPosition, ketu_from_rahu, normalize_position, with_overrides

__all__ = [
    "BirthData",
    "ChartData",
    "ChartHouse",
    "ChartType",
    "DEFAULT_HOUSE_SYSTEM",
    "HouseSystem",
    "PlanetPosition",
    "VedicChart",
    "bhava_boundaries",
    "bhava_chart",
    "compute_vedic_chart",
    "from_julian_day",
    "house_for_longitude",
    "house_from_sign",
    "house_of",
    "julian_day",
    "ketu_from_rahu",
    "normalize_position",
    "planets_by_house",
    "position_of",
    "rashi_chart",
    "resolve_house_system",
    "with_overrides",
]
