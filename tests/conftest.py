from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime

import pytest

from astrostorm.chart.birth import BirthData
from astrostorm.chart.houses import HouseSystem, bhava_boundaries
from astrostorm.chart.natal import VedicChart
from astrostorm.chart.positions import normalize_position
from astrostorm.core.angles import normalize_degrees
from astrostorm.core.bodies import NODES, Planet
from astrostorm.ephemeris.provider import HouseCusps, RawPosition, RiseEvent
from astrostorm.exceptions import EphemerisComputationFailure

DEFAULT_LONGITUDES: Mapping[Planet, float] = {
    Planet.SUN: 30.5,
    Planet.MOON: 95.0,
    Planet.MARS: 160.0,
    Planet.MERCURY: 45.0,
    Planet.JUPITER: 250.0,
    Planet.VENUS: 70.0,
    Planet.SATURN: 290.0,
    Planet.RAHU: 330.0,
}


def equal_cusps(ascendant: float) -> tuple[float, ...]:
    return tuple(normalize_degrees(ascendant + 30.0 * idx) for idx in range(12))


def _default_speed(planet: Planet) -> float:
    return -0.05 if planet in NODES else 1.0


class FakeProvider:
    """Deterministic :class:`EphemerisProvider` with equal houses."""

    def __init__(
        self,
        longitudes: Mapping[Planet, float] | None = None,
        *,
        speeds: Mapping[Planet, float] | None = None,
        ascendant: float = 0.0,
        ayanamsa: float = 24.0,
        sunrise_offset: float | None = 0.25,
        sunset_offset: float | None = 0.75,
        fail_houses: bool = False,
    ) -> None:
        self.longitudes = dict(longitudes if longitudes is not None else DEFAULT_LONGITUDES)
        self.speeds = dict(speeds or {})
        self.ascendant_deg = ascendant
        self.ayanamsa_deg = ayanamsa
        self.sunrise_offset = sunrise_offset
        self.sunset_offset = sunset_offset
        self.fail_houses = fail_houses
        self.requested: list[Planet] = []
        self.house_codes: list[str] = []
        self.ayanamsa_name = "lahiri"

    def position(self, body: Planet | int, julian_day: float) -> RawPosition:
        assert isinstance(body, Planet)
        self.requested.append(body)
        if body not in self.longitudes:
            raise EphemerisComputationFailure(
                f"no position for {body.value}", body=body, julian_day=julian_day
            )
        return RawPosition(
            longitude=self.longitudes[body],
            latitude=0.5,
            distance=1.0,
            speed=self.speeds.get(body, _default_speed(body)),
        )

    def house_cusps(
        self, julian_day: float, latitude: float, longitude: float, house_system: str
    ) -> HouseCusps:
        self.house_codes.append(house_system)
        if self.fail_houses:
            raise EphemerisComputationFailure("house failure", julian_day=julian_day)
        return HouseCusps(
            ascendant=self.ascendant_deg,
            midheaven=normalize_degrees(self.ascendant_deg + 270.0),
            cusps=equal_cusps(self.ascendant_deg),
            system=house_system,
        )

    def rise_transit(
        self,
        julian_day: float,
        body: Planet | int,
        latitude: float,
        longitude: float,
        kind: RiseEvent,
    ) -> float | None:
        offset = self.sunrise_offset if kind == "rise" else self.sunset_offset
        if offset is None:
            return None
        return julian_day + offset

    def ayanamsa(self, julian_day: float) -> float:
        return self.ayanamsa_deg


@pytest.fixture
def birth() -> BirthData:
    return BirthData(
        name="Test Native",
        moment=datetime(1990, 5, 15, 10, 30),
        timezone="Asia/Kolkata",
        latitude=28.6139,
        longitude=77.2090,
        location="New Delhi",
    )


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


ChartFactory = Callable[..., VedicChart]


@pytest.fixture
def make_chart(birth: BirthData) -> ChartFactory:
    """Return a factory building a chart directly from longitudes.

    ``speeds`` overrides the default daily motion (1°/day, nodes -0.05°/day).
    """

    def _factory(
        longitudes: Mapping[Planet, float],
        *,
        ascendant: float = 0.0,
        speeds: Mapping[Planet, float] | None = None,
    ) -> VedicChart:
        cusps = equal_cusps(ascendant)
        boundaries = bhava_boundaries(ascendant, cusps)
        speed_map = dict(speeds or {})
        positions = tuple(
            normalize_position(
                planet,
                RawPosition(
                    longitude=lon,
                    latitude=0.0,
                    distance=1.0,
                    speed=speed_map.get(planet, _default_speed(planet)),
                ),
                boundaries=boundaries,
            )
            for planet, lon in longitudes.items()
        )
        return VedicChart(
            birth=birth,
            julian_day=birth.julian_day(),
            ayanamsa=24.0,
            ayanamsa_name="lahiri",
            ascendant=ascendant,
            midheaven=normalize_degrees(ascendant + 270.0),
            cusps=cusps,
            house_system=HouseSystem.EQUAL,
            positions=positions,
        )

    return _factory


@pytest.fixture
def provider_factory() -> Callable[..., FakeProvider]:
    return FakeProvider
