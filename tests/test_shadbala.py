from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest

from astrostorm.core.bodies import Planet
from astrostorm.core.zodiac import ZodiacSign
from astrostorm.vedic.shadbala import (
    COMPONENTS,
    ShadbalaFactor,
    ShadbalaReport,
    StrengthRating,
    compute_shadbala,
    sign_dignity_points,
)


def factor(chart, planet: Planet, key: str) -> float:
    score = compute_shadbala(chart).score_for(planet)
    assert score is not None
    return score.factors[key].value


@pytest.mark.parametrize(
    "longitude, expected",
    [(10.0, 60.0), (190.0, 0.0), (100.0, 30.0), (280.0, 30.0)],
)
def test_uccha_bala_scales_with_distance_from_debilitation(make_chart, longitude, expected) -> None:
    chart = make_chart({Planet.SUN: longitude})
    assert factor(chart, Planet.SUN, "uccha_bala") == pytest.approx(expected)


@pytest.mark.parametrize(
    "planet, sign, expected",
    [
        (Planet.SUN, ZodiacSign.ARIES, 20.0),
        (Planet.MOON, ZodiacSign.TAURUS, 20.0),
        (Planet.SUN, ZodiacSign.LEO, 30.0),
        (Planet.SATURN, ZodiacSign.AQUARIUS, 30.0),
        (Planet.JUPITER, ZodiacSign.LEO, 15.0),
        (Planet.MERCURY, ZodiacSign.ARIES, 10.0),
        (Planet.SUN, ZodiacSign.LIBRA, 7.5),
        (Planet.RAHU, ZodiacSign.GEMINI, 20.0),
        (Planet.RAHU, ZodiacSign.LEO, 10.0),
    ],
)
def test_sign_dignity_points(planet: Planet, sign: ZodiacSign, expected: float) -> None:
    assert sign_dignity_points(planet, sign) == expected


def test_odd_even_and_decanate_strength(make_chart) -> None:
    chart = make_chart({Planet.SUN: 5.0, Planet.MOON: 25.0, Planet.SATURN: 45.0})
    report = compute_shadbala(chart)
    sun, moon, saturn = (report.score_for(p) for p in (Planet.SUN, Planet.MOON, Planet.SATURN))
    assert sun.factors["ojhayugmarasyamsa_bala"].value == 15.0
    assert moon.factors["ojhayugmarasyamsa_bala"].value == 0.0
    assert saturn.factors["ojhayugmarasyamsa_bala"].value == 0.0
    assert sun.factors["drekkana_bala"].value == 15.0
    assert moon.factors["drekkana_bala"].value == 15.0
    assert saturn.factors["drekkana_bala"].value == 15.0


@pytest.mark.parametrize(
    "longitude, kendradi",
    [(5.0, 60.0), (35.0, 30.0), (65.0, 15.0), (275.0, 60.0)],
)
def test_kendradi_bala_by_house(make_chart, longitude, kendradi) -> None:
    chart = make_chart({Planet.MARS: longitude})
    assert factor(chart, Planet.MARS, "kendradi_bala") == kendradi


@pytest.mark.parametrize(
    "planet, longitude, expected",
    [
        (Planet.SUN, 275.0, 60.0),
        (Planet.SUN, 95.0, 0.0),
        (Planet.SATURN, 185.0, 60.0),
        (Planet.SATURN, 5.0, 0.0),
        (Planet.MERCURY, 35.0, 50.0),
        (Planet.MOON, 335.0, 20.0),
    ],
)
def test_dig_bala_counts_houses_from_strong_point(make_chart, planet, longitude, expected) -> None:
    chart = make_chart({planet: longitude})
    assert factor(chart, planet, "dig_bala") == pytest.approx(expected)


def test_day_birth_time_factors(make_chart) -> None:
    # 1990-05-15 10:30 is a Tuesday: Mars rules the day, the Moon the hora.
    chart = make_chart({Planet.SUN: 20.0, Planet.MOON: 100.0, Planet.MARS: 200.0, Planet.MERCURY: 40.0})
    report = compute_shadbala(chart)
    sun, moon, mars, mercury = (
        report.score_for(p) for p in (Planet.SUN, Planet.MOON, Planet.MARS, Planet.MERCURY)
    )
    assert sun.factors["nathonnatha_bala"].value == 60.0
    assert moon.factors["nathonnatha_bala"].value == 0.0
    assert mars.factors["nathonnatha_bala"].value == 0.0
    assert mercury.factors["nathonnatha_bala"].value == 60.0
    assert sun.factors["tribhaga_bala"].value == 60.0
    assert mercury.factors["tribhaga_bala"].value == 0.0
    assert sun.factors["hora_adi_bala"].value == 5.0
    assert moon.factors["hora_adi_bala"].value == 25.0
    assert mars.factors["hora_adi_bala"].value == 15.0
    assert mercury.factors["hora_adi_bala"].value == 0.0


def test_night_birth_time_factors(make_chart, birth) -> None:
    chart = make_chart({Planet.SUN: 20.0, Planet.MOON: 100.0, Planet.VENUS: 50.0})
    chart = replace(chart, birth=replace(birth, moment=datetime(1990, 5, 15, 22, 30)))
    report = compute_shadbala(chart)
    assert report.score_for(Planet.SUN).factors["nathonnatha_bala"].value == 0.0
    assert report.score_for(Planet.MOON).factors["nathonnatha_bala"].value == 60.0
    assert report.score_for(Planet.VENUS).factors["tribhaga_bala"].value == 60.0
    assert report.score_for(Planet.SUN).factors["tribhaga_bala"].value == 0.0


@pytest.mark.parametrize(
    "moon, jupiter, saturn",
    [(150.0, 50.0, 10.0), (210.0, 10.0, 50.0), (0.0, 0.0, 60.0)],
)
def test_paksha_bala_follows_lunar_phase(make_chart, moon, jupiter, saturn) -> None:
    chart = make_chart(
        {Planet.SUN: 0.0, Planet.MOON: moon, Planet.JUPITER: 240.0, Planet.SATURN: 300.0}
    )
    assert factor(chart, Planet.JUPITER, "paksha_bala") == pytest.approx(jupiter)
    assert factor(chart, Planet.SATURN, "paksha_bala") == pytest.approx(saturn)


def test_paksha_bala_is_neutral_without_luminaries(make_chart) -> None:
    chart = make_chart({Planet.JUPITER: 240.0})
    assert factor(chart, Planet.JUPITER, "paksha_bala") == 30.0


@pytest.mark.parametrize(
    "planet, longitude, expected",
    [
        (Planet.SUN, 170.0, 53.45),
        (Planet.SUN, 350.0, 6.55),
        (Planet.MOON, 170.0, 6.55),
        (Planet.MERCURY, 170.0, 30.0),
    ],
)
def test_ayana_bala_uses_declination(make_chart, planet, longitude, expected) -> None:
    chart = make_chart({planet: longitude})
    assert factor(chart, planet, "ayana_bala") == pytest.approx(expected)


def test_planetary_war_and_aspects(make_chart) -> None:
    chart = make_chart({Planet.MARS: 100.0, Planet.VENUS: 100.5, Planet.SATURN: 280.0})
    report = compute_shadbala(chart)
    mars, venus, saturn = (report.score_for(p) for p in (Planet.MARS, Planet.VENUS, Planet.SATURN))
    assert venus.factors["yuddha_bala"].value == 30.0
    assert mars.factors["yuddha_bala"].value == -30.0
    assert saturn.factors["yuddha_bala"].value == 0.0
    # Mars: Venus conjunct (+15) and Saturn opposite (-5).
    assert mars.factors["drik_bala"].value == pytest.approx(10.0)
    # Venus: Mars conjunct (-10) and Saturn opposite (-5).
    assert venus.factors["drik_bala"].value == pytest.approx(-15.0)
    # Saturn: opposed by benefic Venus (+7.5) and malefic Mars (-5).
    assert saturn.factors["drik_bala"].value == pytest.approx(2.5)


@pytest.mark.parametrize(
    "planet, speed, expected",
    [
        (Planet.SUN, 1.0, 0.0),
        (Planet.MOON, 13.0, 0.0),
        (Planet.MARS, -0.3, 60.0),
        (Planet.MARS, 0.005, 50.0),
        (Planet.MARS, 0.3, 40.0),
        (Planet.MARS, 0.7, 30.0),
        (Planet.MARS, 1.2, 20.0),
    ],
)
def test_chesta_bala_reads_motion(make_chart, planet, speed, expected) -> None:
    chart = make_chart({planet: 200.0}, speeds={planet: speed})
    assert factor(chart, planet, "chesta_bala") == expected


def test_naisargika_bala_is_fixed(make_chart, fake_provider) -> None:
    report = compute_shadbala(make_chart(fake_provider.longitudes))
    assert report.score_for(Planet.SUN).naisargika_bala == 60.0
    assert report.score_for(Planet.VENUS).naisargika_bala == 42.86
    assert report.score_for(Planet.SATURN).naisargika_bala == 8.57


def test_components_sum_to_total(make_chart, fake_provider) -> None:
    report = compute_shadbala(make_chart(fake_provider.longitudes))
    assert set(report.scores) == set(fake_provider.longitudes)
    for score in report.scores.values():
        components = (
            score.sthana_bala
            + score.dig_bala
            + score.kala_bala
            + score.chesta_bala
            + score.naisargika_bala
            + score.drik_bala
        )
        assert components == pytest.approx(score.total_virupas)
        assert score.total_rupas == pytest.approx(score.total_virupas / 60.0)
        assert score.is_strong == (score.total_rupas >= score.required_rupas)
        assert set(score.factors) == {key for keys in COMPONENTS.values() for key in keys}
        for item in score.factors.values():
            assert item.minimum <= item.value <= item.maximum


def test_report_rankings(make_chart, fake_provider) -> None:
    report = compute_shadbala(make_chart(fake_provider.longitudes))
    ranked = report.by_strength()
    assert [s.total_rupas for s in ranked] == sorted((s.total_rupas for s in ranked), reverse=True)
    assert report.strongest is ranked[0].planet
    assert report.weakest is ranked[-1].planet
    assert report.weak_planets() == [s.planet for s in report.scores.values() if not s.is_strong]
    expected = sum(s.percentage_of_required for s in ranked) / len(ranked)
    assert report.overall_score == pytest.approx(expected)


def test_planet_selection_skips_missing_and_outer_bodies(make_chart) -> None:
    chart = make_chart({Planet.SUN: 10.0, Planet.URANUS: 40.0})
    report = compute_shadbala(chart, planets=[Planet.SUN, Planet.MOON, Planet.URANUS])
    assert list(report.scores) == [Planet.SUN]
    assert report.score_for(Planet.MOON) is None


def test_empty_report() -> None:
    report = ShadbalaReport(scores={})
    assert report.strongest is None
    assert report.weakest is None
    assert report.overall_score == 0.0


def test_factor_is_clamped_to_its_range() -> None:
    assert ShadbalaFactor("Drik Bala", 80.0, maximum=60.0, minimum=-30.0).value == 60.0
    assert ShadbalaFactor("Drik Bala", -45.0, maximum=60.0, minimum=-30.0).value == -30.0
    assert ShadbalaFactor("Uccha Bala", 12.5, maximum=60.0).value == 12.5


@pytest.mark.parametrize(
    "percentage, expected",
    [
        (49.9, StrengthRating.EXTREMELY_WEAK),
        (50.0, StrengthRating.WEAK),
        (84.9, StrengthRating.BELOW_AVERAGE),
        (99.9, StrengthRating.AVERAGE),
        (100.0, StrengthRating.ABOVE_AVERAGE),
        (129.9, StrengthRating.STRONG),
        (149.9, StrengthRating.VERY_STRONG),
        (150.0, StrengthRating.EXTREMELY_STRONG),
    ],
)
def test_strength_rating_bands(percentage: float, expected: StrengthRating) -> None:
    assert StrengthRating.from_percentage(percentage) is expected
