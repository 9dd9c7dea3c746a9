from __future__ import annotations

import pytest

from astrostorm.core.bodies import Planet
from astrostorm.vedic.aspects import OrbConfiguration, compute_aspect_matrix
from astrostorm.vedic.yogas import GAJA_KESARI_ORB, detect_yogas


def _names(yogas) -> list[str]:
    return [yoga.name for yoga in yogas]


def test_budha_aditya_strength_comes_from_conjunction(make_chart) -> None:
    yogas = detect_yogas(make_chart({Planet.SUN: 100.0, Planet.MERCURY: 105.0}))
    assert _names(yogas) == ["Budha-Aditya Yoga"]
    assert yogas[0].strength == pytest.approx(1.0 - 5.0 / 11.0)
    assert yogas[0].is_auspicious
    assert yogas[0].planets == (Planet.SUN, Planet.MERCURY)


def test_inauspicious_conjunctions(make_chart) -> None:
    yogas = detect_yogas(
        make_chart({Planet.JUPITER: 200.0, Planet.SATURN: 202.0, Planet.RAHU: 201.0})
    )
    names = _names(yogas)
    assert "Guru-Chandal Yoga" in names
    assert "Shani-Rahu Yoga" in names
    assert not any(y.is_auspicious for y in yogas)


@pytest.mark.parametrize("jupiter", [5.0, 95.0, 185.0, 265.0, 360.0 - GAJA_KESARI_ORB])
def test_gaja_kesari_in_kendra(make_chart, jupiter: float) -> None:
    yogas = detect_yogas(make_chart({Planet.MOON: 0.0, Planet.JUPITER: jupiter}))
    assert "Gaja-Kesari Yoga" in _names(yogas)


def test_gaja_kesari_outside_kendra(make_chart) -> None:
    yogas = detect_yogas(make_chart({Planet.MOON: 0.0, Planet.JUPITER: 45.0}))
    assert "Gaja-Kesari Yoga" not in _names(yogas)


def test_yogas_sorted_by_strength(make_chart) -> None:
    chart = make_chart(
        {
            Planet.SUN: 100.0,
            Planet.MERCURY: 109.0,
            Planet.MOON: 10.0,
            Planet.MARS: 10.5,
            Planet.JUPITER: 100.0,
        }
    )
    yogas = detect_yogas(chart)
    assert _names(yogas)[0] == "Chandra-Mangala Yoga"
    strengths = [y.strength for y in yogas]
    assert strengths == sorted(strengths, reverse=True)


def test_precomputed_matrix_is_reused(make_chart) -> None:
    chart = make_chart({Planet.SUN: 100.0, Planet.MERCURY: 108.0})
    tight = OrbConfiguration(orb_multiplier=0.5)
    assert detect_yogas(chart, config=tight) == []
    matrix = compute_aspect_matrix(chart)
    assert _names(detect_yogas(chart, matrix)) == ["Budha-Aditya Yoga"]


def test_missing_planets_yield_no_yogas(make_chart) -> None:
    assert detect_yogas(make_chart({Planet.SUN: 0.0})) == []
