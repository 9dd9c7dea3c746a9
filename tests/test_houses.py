from __future__ import annotations

import pytest

from astrostorm.chart.houses import (
    HouseSystem,
    bhava_boundaries,
    house_for_longitude,
    house_from_sign,
    resolve_house_system,
)
from astrostorm.exceptions import ConfigurationError, HouseAssignmentError

WRAPPING = (350.0, 10.0, 40.0, 70.0, 100.0, 130.0, 160.0, 190.0, 220.0, 250.0, 280.0, 310.0)


@pytest.mark.parametrize(
    "longitude, expected",
    [
        (359.0, 1),
        (350.0, 1),
        (5.0, 1),
        (10.0, 2),
        (349.9, 12),
        (200.0, 8),
    ],
)
def test_house_assignment_across_aries(longitude: float, expected: int) -> None:
    assert house_for_longitude(longitude, WRAPPING) == expected


def test_degenerate_boundaries_raise() -> None:
    with pytest.raises(HouseAssignmentError):
        house_for_longitude(12.0, [0.0] * 12)
    with pytest.raises(HouseAssignmentError):
        house_for_longitude(12.0, [0.0] * 11)


def test_bhava_boundaries_start_at_ascendant() -> None:
    cusps = tuple(float(30 * idx) for idx in range(12))
    boundaries = bhava_boundaries(12.5, cusps)
    assert boundaries[0] == pytest.approx(12.5)
    assert boundaries[1:] == cusps[1:]


def test_house_from_sign_rotates() -> None:
    assert house_from_sign(1, 1) == 1
    assert house_from_sign(0, 1) == 12
    assert house_from_sign(7, 1) == 7


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, HouseSystem.PLACIDUS),
        ("W", HouseSystem.WHOLE_SIGN),
        ("k", HouseSystem.KOCH),
        ("whole_sign", HouseSystem.WHOLE_SIGN),
        ("Whole Sign", HouseSystem.WHOLE_SIGN),
        (HouseSystem.EQUAL, HouseSystem.EQUAL),
    ],
)
def test_resolve_house_system(value, expected: HouseSystem) -> None:
    assert resolve_house_system(value) is expected


def test_unknown_house_system() -> None:
    with pytest.raises(ConfigurationError):
        resolve_house_system("Q")
    with pytest.raises(ConfigurationError):
        resolve_house_system("topocentric-ish")
