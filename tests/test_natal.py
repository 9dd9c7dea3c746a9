from __future__ import annotations

import logging

import pytest

from astrostorm.chart.houses import HouseSystem
from astrostorm.chart.natal import compute_vedic_chart, position_of
from astrostorm.chart.positions import normalize_position, with_overrides
from astrostorm.core.bodies import MAIN_PLANETS, Planet
from astrostorm.core.nakshatra import Nakshatra
from astrostorm.core.zodiac import ZodiacSign
from astrostorm.ephemeris.provider import RawPosition
from astrostorm.exceptions import (
    ConfigurationError,
    EphemerisComputationFailure,
    MissingBodyPosition,
)


def test_chart_positions_follow_main_planet_order(birth, fake_provider) -> None:
    chart = compute_vedic_chart(birth, fake_provider)
    assert chart.planets == tuple(MAIN_PLANETS)
    assert chart.house_system is HouseSystem.PLACIDUS
    assert fake_provider.house_codes == ["P"]
    assert chart.ayanamsa == pytest.approx(24.0)


def test_ketu_is_derived_from_rahu(birth, fake_provider) -> None:
    chart = compute_vedic_chart(birth, fake_provider)
    rahu = position_of(chart, Planet.RAHU)
    ketu = position_of(chart, Planet.KETU)
    assert ketu.longitude == pytest.approx(150.0)
    assert ketu.latitude == pytest.approx(-rahu.latitude)
    assert ketu.speed == pytest.approx(rahu.speed)
    assert ketu.is_retrograde and rahu.is_retrograde
    assert Planet.KETU not in fake_provider.requested


def test_position_fields_are_derived(birth, fake_provider) -> None:
    chart = compute_vedic_chart(birth, fake_provider)
    sun = position_of(chart, Planet.SUN)
    assert sun.sign is ZodiacSign.TAURUS
    assert (sun.degree, sun.minutes) == (0, 30)
    assert sun.seconds == pytest.approx(0.0, abs=1e-6)
    assert sun.nakshatra is Nakshatra.KRITTIKA
    assert sun.house == 2
    assert not sun.is_retrograde


def test_house_system_is_passed_as_code(birth, fake_provider) -> None:
    chart = compute_vedic_chart(birth, fake_provider, house_system="whole_sign")
    assert fake_provider.house_codes == ["W"]
    assert chart.house_system is HouseSystem.WHOLE_SIGN


def test_unknown_house_system_is_rejected(birth, fake_provider) -> None:
    with pytest.raises(ConfigurationError):
        compute_vedic_chart(birth, fake_provider, house_system="Z")


def test_provider_failures_propagate(birth, provider_factory) -> None:
    provider = provider_factory(fail_houses=True)
    with pytest.raises(EphemerisComputationFailure):
        compute_vedic_chart(birth, provider)


def test_custom_body_set(birth, fake_provider) -> None:
    chart = compute_vedic_chart(birth, fake_provider, bodies=[Planet.MOON, Planet.KETU])
    assert chart.planets == (Planet.MOON, Planet.KETU)
    assert chart.get(Planet.SUN) is None
    with pytest.raises(MissingBodyPosition) as excinfo:
        position_of(chart, Planet.SUN, context="combustion analysis")
    assert str(excinfo.value) == (
        "Sun position unavailable in chart (required for combustion analysis)"
    )
    assert isinstance(excinfo.value, KeyError)


def test_chart_computation_is_idempotent(birth, fake_provider) -> None:
    first = compute_vedic_chart(birth, fake_provider)
    second = compute_vedic_chart(birth, fake_provider)
    assert first == second


def test_chart_computation_logs_event(birth, fake_provider, caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="astrostorm.chart.natal")
    compute_vedic_chart(birth, fake_provider)
    events = [r.msg.get("event") for r in caplog.records if isinstance(r.msg, dict)]
    assert "vedic_chart_computed" in events


def test_with_overrides_rederives_placement(birth, fake_provider) -> None:
    chart = compute_vedic_chart(birth, fake_provider)
    sun = position_of(chart, Planet.SUN)
    moved = with_overrides(sun, longitude=121.0, speed=-0.2)
    assert moved.sign is ZodiacSign.LEO
    assert moved.degree == 1
    assert moved.nakshatra is Nakshatra.MAGHA
    assert moved.is_retrograde
    assert moved.house == sun.house
    assert moved.to_dict()["sign"] == "Leo"


def test_normalize_position_takes_exactly_one_house_source() -> None:
    raw = RawPosition(longitude=75.0, latitude=0.0, distance=1.0, speed=1.0)
    boundaries = tuple(30.0 * idx for idx in range(12))
    assert normalize_position(Planet.VENUS, raw, boundaries=boundaries).house == 3
    assert normalize_position(Planet.VENUS, raw, house=7).house == 7
    with pytest.raises(ValueError, match="exactly one"):
        normalize_position(Planet.VENUS, raw)
    with pytest.raises(ValueError, match="exactly one"):
        normalize_position(Planet.VENUS, raw, boundaries=boundaries, house=7)
