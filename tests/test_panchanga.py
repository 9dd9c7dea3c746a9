from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from astrostorm.core.bodies import Planet
from astrostorm.core.nakshatra import Nakshatra
from astrostorm.exceptions import MissingBodyPosition
from astrostorm.vedic.panchanga import (
    Paksha,
    YogaNature,
    auspiciousness_score,
    compute_panchanga,
    format_clock,
    is_auspicious,
    karana_from_longitudes,
    moon_phase_percent,
    panchanga_for_chart,
    tithi_from_longitudes,
    vara_from_julian_day,
    yoga_from_longitudes,
)

KOLKATA = ZoneInfo("Asia/Kolkata")


@pytest.mark.parametrize(
    "moon, index, name, paksha",
    [
        (0.0, 1, "Shukla Pratipada", Paksha.SHUKLA),
        (175.0, 15, "Purnima", Paksha.SHUKLA),
        (180.0, 16, "Krishna Pratipada", Paksha.KRISHNA),
        (280.0, 24, "Krishna Navami", Paksha.KRISHNA),
        (355.0, 30, "Amavasya", Paksha.KRISHNA),
    ],
)
def test_tithi(moon: float, index: int, name: str, paksha: Paksha) -> None:
    tithi = tithi_from_longitudes(0.0, moon)
    assert (tithi.index, tithi.name, tithi.paksha) == (index, name, paksha)


def test_tithi_uses_elongation_across_aries() -> None:
    tithi = tithi_from_longitudes(350.0, 5.0)
    assert tithi.index == 2
    assert tithi.progress == pytest.approx(25.0)


def test_yoga() -> None:
    first = yoga_from_longitudes(0.0, 0.0)
    assert (first.index, first.name, first.nature) == (1, "Vishkambha", YogaNature.MIXED)
    siddhi = yoga_from_longitudes(100.0, 105.0)
    assert (siddhi.index, siddhi.name, siddhi.nature) == (16, "Siddhi", YogaNature.AUSPICIOUS)
    assert yoga_from_longitudes(0.0, 354.0).nature is YogaNature.INAUSPICIOUS


@pytest.mark.parametrize(
    "moon, index, name, fixed",
    [
        (3.0, 1, "Kimstughna", True),
        (6.0, 2, "Bava", False),
        (45.0, 8, "Vishti", False),
        (340.0, 57, "Vishti", False),
        (354.0, 60, "Naga", True),
    ],
)
def test_karana(moon: float, index: int, name: str, fixed: bool) -> None:
    karana = karana_from_longitudes(0.0, moon)
    assert (karana.index, karana.name, karana.is_fixed) == (index, name, fixed)


def test_vara_and_phase() -> None:
    assert vara_from_julian_day(2451545.0).name == "Saturday"
    assert vara_from_julian_day(2451545.0).lord is Planet.SATURN
    assert moon_phase_percent(0.0, 180.0) == pytest.approx(100.0)
    assert moon_phase_percent(0.0, 90.0) == pytest.approx(50.0)
    assert moon_phase_percent(0.0, 270.0) == pytest.approx(50.0)


@pytest.mark.parametrize(
    "moment, text",
    [
        (datetime(2024, 1, 1, 0, 5, 9), "12:05:09 AM"),
        (datetime(2024, 1, 1, 12, 0, 0), "12:00:00 PM"),
        (datetime(2024, 1, 1, 13, 30, 0), "1:30:00 PM"),
    ],
)
def test_format_clock(moment: datetime, text: str) -> None:
    assert format_clock(moment) == text


def test_compute_panchanga_searches_from_local_midnight(fake_provider) -> None:
    moment = datetime(2024, 3, 10, 15, 0, tzinfo=KOLKATA)
    data = compute_panchanga(fake_provider, moment, 28.6139, 77.2090)
    assert data.sunrise is not None and data.sunset is not None
    expected_rise = datetime(2024, 3, 10, 6, 0, tzinfo=KOLKATA)
    expected_set = datetime(2024, 3, 10, 18, 0, tzinfo=KOLKATA)
    assert abs((data.sunrise - expected_rise).total_seconds()) < 1e-3
    assert abs((data.sunset - expected_set).total_seconds()) < 1e-3
    assert data.sunrise.utcoffset() == expected_rise.utcoffset()
    assert data.nakshatra.nakshatra is Nakshatra.PUSHYA
    assert data.paksha is data.tithi.paksha


def test_circumpolar_day_has_no_sunrise(provider_factory) -> None:
    provider = provider_factory(sunrise_offset=None, sunset_offset=None)
    moment = datetime(2024, 6, 21, 12, 0, tzinfo=ZoneInfo("Europe/Oslo"))
    data = compute_panchanga(provider, moment, 78.2, 15.6)
    assert data.sunrise is None and data.sunset is None
    assert data.sunrise_text is None


def test_compute_panchanga_requires_aware_moment(fake_provider) -> None:
    with pytest.raises(ValueError):
        compute_panchanga(fake_provider, datetime(2024, 3, 10, 15, 0), 28.6, 77.2)


def test_panchanga_for_chart(make_chart, fake_provider) -> None:
    chart = make_chart({Planet.SUN: 0.0, Planet.MOON: 100.0})
    data = panchanga_for_chart(chart)
    assert data.sunrise is None
    assert data.tithi.name == "Shukla Navami"
    assert data.karana.name == "Balava"
    assert data.yoga.name == "Dhriti"
    assert data.vara.name == "Tuesday"
    assert is_auspicious(data)
    assert auspiciousness_score(data) == 75
    with_provider = panchanga_for_chart(chart, fake_provider)
    assert with_provider.sunrise is not None


def test_inauspicious_day_score_is_clamped(make_chart) -> None:
    data = panchanga_for_chart(make_chart({Planet.SUN: 0.0, Planet.MOON: 354.0}))
    assert data.tithi.name == "Amavasya"
    assert not is_auspicious(data)
    assert auspiciousness_score(data) == 0


def test_panchanga_needs_luminaries(make_chart) -> None:
    with pytest.raises(MissingBodyPosition):
        panchanga_for_chart(make_chart({Planet.SUN: 0.0}))
