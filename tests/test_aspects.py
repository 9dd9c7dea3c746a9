from __future__ import annotations

import pytest

from astrostorm.core.bodies import Planet
from astrostorm.core.zodiac import ZodiacSign
from astrostorm.exceptions import ConfigurationError
from astrostorm.vedic.aspects import (
    AspectType,
    OrbConfiguration,
    compute_aspect_matrix,
    graha_drishti,
    strength_label,
)


def test_exact_conjunction_has_full_strength(make_chart) -> None:
    matrix = compute_aspect_matrix(make_chart({Planet.SUN: 40.0, Planet.MOON: 40.0}))
    aspect = matrix.aspect_between(Planet.SUN, Planet.MOON)
    assert aspect is not None
    assert aspect.aspect_type is AspectType.CONJUNCTION
    assert aspect.effective_orb == pytest.approx(12.0)
    assert aspect.strength == pytest.approx(1.0)
    assert aspect.strength_label == "Exact"


def test_orbs_average_planet_classes(make_chart) -> None:
    matrix = compute_aspect_matrix(make_chart({Planet.SUN: 10.0, Planet.MERCURY: 20.0}))
    aspect = matrix.aspect_between(Planet.MERCURY, Planet.SUN, AspectType.CONJUNCTION)
    assert aspect is not None
    assert aspect.effective_orb == pytest.approx(11.0)
    assert aspect.strength == pytest.approx(1.0 - 10.0 / 11.0)


def test_square_and_trine_views(make_chart) -> None:
    matrix = compute_aspect_matrix(
        make_chart({Planet.VENUS: 0.0, Planet.MARS: 97.0, Planet.MOON: 241.0})
    )
    assert [a.aspect_type for a in matrix.squares] == [AspectType.SQUARE]
    assert matrix.squares[0].orb == pytest.approx(7.0)
    trine = matrix.aspect_between(Planet.VENUS, Planet.MOON, AspectType.TRINE)
    assert trine is not None and trine.orb == pytest.approx(1.0)
    assert trine in matrix.trines


def test_special_aspects_are_directional(make_chart) -> None:
    forward = compute_aspect_matrix(make_chart({Planet.JUPITER: 0.0, Planet.SATURN: 120.0}))
    fifth = forward.aspect_between(Planet.JUPITER, Planet.SATURN, AspectType.JUPITER_5TH)
    assert fifth is not None and fifth.planet1 is Planet.JUPITER
    assert forward.aspect_between(Planet.JUPITER, Planet.SATURN, AspectType.JUPITER_9TH) is None

    backward = compute_aspect_matrix(make_chart({Planet.JUPITER: 120.0, Planet.SATURN: 0.0}))
    ninth = backward.aspect_between(Planet.JUPITER, Planet.SATURN, AspectType.JUPITER_9TH)
    assert ninth is not None
    assert ninth.separation == pytest.approx(240.0)
    assert backward.aspect_between(Planet.JUPITER, Planet.SATURN, AspectType.JUPITER_5TH) is None


def test_mars_eighth_aspect_uses_forward_distance(make_chart) -> None:
    matrix = compute_aspect_matrix(make_chart({Planet.MARS: 10.0, Planet.MOON: 220.0}))
    eighth = matrix.aspect_between(Planet.MARS, Planet.MOON, AspectType.MARS_8TH)
    assert eighth is not None and eighth.is_special
    assert eighth in matrix.special


def test_applying_and_separating(make_chart) -> None:
    applying = compute_aspect_matrix(
        make_chart(
            {Planet.SUN: 0.0, Planet.MERCURY: 5.0},
            speeds={Planet.SUN: 1.0, Planet.MERCURY: -1.0},
        )
    )
    assert applying.conjunctions[0].is_applying
    separating = compute_aspect_matrix(
        make_chart(
            {Planet.SUN: 0.0, Planet.MERCURY: 5.0},
            speeds={Planet.SUN: 1.0, Planet.MERCURY: 1.5},
        )
    )
    assert not separating.conjunctions[0].is_applying


def test_orb_configuration_options(make_chart) -> None:
    chart = make_chart({Planet.SUN: 0.0, Planet.MERCURY: 10.0})
    assert not compute_aspect_matrix(chart, OrbConfiguration(orb_multiplier=0.5)).conjunctions
    custom = OrbConfiguration(custom_orbs={Planet.MERCURY: 1.0})
    assert custom.effective_orb(Planet.SUN, Planet.MERCURY, AspectType.CONJUNCTION) == 7.5
    assert not compute_aspect_matrix(chart, custom).conjunctions


def test_minor_aspects_are_opt_in(make_chart) -> None:
    chart = make_chart({Planet.VENUS: 0.0, Planet.MERCURY: 150.0})
    assert not compute_aspect_matrix(chart).of_type(AspectType.QUINCUNX)
    matrix = compute_aspect_matrix(chart, OrbConfiguration(include_minor=True))
    quincunx = matrix.of_type(AspectType.QUINCUNX)
    assert len(quincunx) == 1
    assert quincunx[0].effective_orb == pytest.approx(3.0)


def test_matrix_is_sorted_by_strength(make_chart) -> None:
    matrix = compute_aspect_matrix(
        make_chart(
            {
                Planet.SUN: 0.0,
                Planet.MOON: 3.0,
                Planet.MARS: 91.0,
                Planet.JUPITER: 125.0,
                Planet.SATURN: 181.0,
            }
        )
    )
    strengths = [a.strength for a in matrix.aspects]
    assert strengths == sorted(strengths, reverse=True)
    assert all(0.0 <= s <= 1.0 for s in strengths)
    assert len(matrix) == len(matrix.aspects)
    assert all(a.involves(Planet.SUN) for a in matrix.aspects_for(Planet.SUN))


@pytest.mark.parametrize(
    "kwargs",
    [{"luminary": -1.0}, {"orb_multiplier": 0.0}, {"custom_orbs": {Planet.SUN: -2.0}}],
)
def test_invalid_orb_configuration(kwargs: dict) -> None:
    with pytest.raises(ConfigurationError):
        OrbConfiguration(**kwargs)


@pytest.mark.parametrize(
    "strength, label",
    [(0.95, "Exact"), (0.75, "Very Strong"), (0.5, "Strong"), (0.3, "Moderate"), (0.1, "Weak")],
)
def test_strength_labels(strength: float, label: str) -> None:
    assert strength_label(strength) == label


def test_graha_drishti(make_chart) -> None:
    chart = make_chart({Planet.MARS: 5.0, Planet.SUN: 10.0, Planet.VENUS: 190.0})
    drishti = graha_drishti(chart)
    mars = {d.house_offset: d for d in drishti if d.planet is Planet.MARS}
    assert sorted(mars) == [4, 7, 8]
    assert mars[4].aspected_sign is ZodiacSign.CANCER
    assert mars[7].aspected_sign is ZodiacSign.LIBRA
    assert mars[7].aspected_house == 7
    assert mars[7].planets_aspected == (Planet.VENUS,)
    assert mars[8].aspected_sign is ZodiacSign.SCORPIO
    sun = [d for d in drishti if d.planet is Planet.SUN]
    assert [d.house_offset for d in sun] == [7]
