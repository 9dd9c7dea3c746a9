from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from astrostorm.core.bodies import Planet
from astrostorm.core.nakshatra import Nakshatra
from astrostorm.exceptions import ConfigurationError, MissingBodyPosition
from astrostorm.vedic.dasha import (
    ORDER,
    TOTAL_YEARS,
    DashaLevel,
    DashaOptions,
    active_periods,
    completion_percent,
    compute_dasha_timeline,
    describe_active,
    elapsed_days,
    iter_periods,
    past_periods,
    remaining_days,
    upcoming_periods,
)

DAY_TOLERANCE = 1e-3


def _timeline(make_chart, moon: float, **options):
    chart = make_chart({Planet.SUN: 30.0, Planet.MOON: moon})
    return compute_dasha_timeline(chart, DashaOptions(**options) if options else None)


def test_vimshottari_total_is_120_years() -> None:
    assert TOTAL_YEARS == pytest.approx(120.0)


def test_full_cycle_spans_120_years(make_chart) -> None:
    timeline = _timeline(make_chart, 0.0, mahadasha_count=9)
    assert timeline.nakshatra is Nakshatra.ASHWINI
    assert timeline.nakshatra_lord is Planet.KETU
    assert timeline.balance_years == pytest.approx(7.0)
    assert [p.planet for p in timeline.mahadashas] == [planet for planet, _ in ORDER]
    span_days = (timeline.end - timeline.start).total_seconds() / 86400.0
    assert span_days == pytest.approx(120.0 * 365.25, abs=DAY_TOLERANCE)


def test_balance_uses_moon_progress(make_chart) -> None:
    timeline = _timeline(make_chart, 20.0)
    assert timeline.nakshatra is Nakshatra.BHARANI
    assert timeline.nakshatra_lord is Planet.VENUS
    assert timeline.progress == pytest.approx(0.5)
    assert timeline.balance_years == pytest.approx(10.0)
    first = timeline.mahadashas[0]
    assert first.planet is Planet.VENUS
    assert first.duration_years == pytest.approx(10.0)
    assert first.start == timeline.birth_moment
    assert timeline.mahadashas[1].planet is Planet.SUN


def test_default_generates_28_mahadashas(make_chart) -> None:
    timeline = _timeline(make_chart, 0.0)
    assert len(timeline.mahadashas) == 28
    for earlier, later in zip(timeline.mahadashas, timeline.mahadashas[1:]):
        assert earlier.end == later.start


def test_children_partition_their_parent(make_chart) -> None:
    timeline = _timeline(make_chart, 47.0)
    for maha in timeline.mahadashas[:3]:
        children = maha.children
        assert len(children) == 9
        assert children[0].planet is maha.planet
        assert children[0].start == maha.start
        assert children[-1].end == maha.end
        for earlier, later in zip(children, children[1:]):
            assert earlier.end == later.start
        assert sum(c.duration_years for c in children) == pytest.approx(maha.duration_years)
        assert sum(c.duration_days for c in children) == pytest.approx(
            maha.duration_days, abs=DAY_TOLERANCE
        )
        assert all(c.parents == (maha.planet,) for c in children)


def test_antardasha_lengths(make_chart) -> None:
    ketu = _timeline(make_chart, 0.0).mahadashas[0]
    venus_bhukti = ketu.children[1]
    assert venus_bhukti.planet is Planet.VENUS
    assert venus_bhukti.level is DashaLevel.ANTAR
    assert venus_bhukti.duration_years == pytest.approx(7.0 * 20.0 / 120.0)


def test_levels_limit_depth(make_chart) -> None:
    shallow = _timeline(make_chart, 0.0, levels=1)
    assert all(not maha.children for maha in shallow.mahadashas)
    deep = _timeline(make_chart, 0.0, levels=3)
    assert deep.mahadashas[0].children[0].children[0].level is DashaLevel.PRATYANTAR
    assert not deep.mahadashas[0].children[0].children[0].children


def test_active_periods_are_half_open(make_chart) -> None:
    timeline = _timeline(make_chart, 0.0)
    boundary = timeline.mahadashas[1].start
    chain = active_periods(timeline, boundary)
    assert chain[0] is timeline.mahadashas[1]
    assert [p.level for p in chain] == [DashaLevel.MAHA, DashaLevel.ANTAR, DashaLevel.PRATYANTAR]
    before = active_periods(timeline, boundary - timedelta(seconds=1))
    assert before[0] is timeline.mahadashas[0]


def test_describe_active(make_chart) -> None:
    timeline = _timeline(make_chart, 0.0)
    assert describe_active(timeline, timeline.start) == (
        "Ketu Mahadasha / Ketu Bhukti / Ketu Pratyantar"
    )
    assert describe_active(timeline, timeline.start - timedelta(days=1)) == "No active Dasha"


def test_period_progress_helpers(make_chart) -> None:
    timeline = _timeline(make_chart, 0.0)
    maha = timeline.mahadashas[1]
    midpoint = maha.start + (maha.end - maha.start) / 2
    assert completion_percent(maha, midpoint) == pytest.approx(50.0, abs=1e-6)
    assert remaining_days(maha, midpoint) + elapsed_days(maha, midpoint) == pytest.approx(
        maha.duration_days
    )
    assert remaining_days(maha, maha.end + timedelta(days=5)) == 0.0


def test_upcoming_and_past_periods(make_chart) -> None:
    timeline = _timeline(make_chart, 0.0)
    moment = timeline.mahadashas[2].start + timedelta(days=1)
    upcoming = upcoming_periods(timeline, moment, count=3)
    assert upcoming == list(timeline.mahadashas[3:6])
    assert past_periods(timeline, moment) == list(timeline.mahadashas[:2])
    bhuktis = list(iter_periods(timeline, DashaLevel.ANTAR))
    assert len(bhuktis) == 28 * 9


def test_naive_moments_are_rejected(make_chart) -> None:
    timeline = _timeline(make_chart, 0.0)
    with pytest.raises(ValueError):
        active_periods(timeline, datetime(2000, 1, 1))


def test_missing_moon_raises(make_chart) -> None:
    chart = make_chart({Planet.SUN: 10.0})
    with pytest.raises(MissingBodyPosition):
        compute_dasha_timeline(chart)


@pytest.mark.parametrize(
    "options",
    [{"mahadasha_count": 0}, {"levels": 6}, {"levels": 0}, {"year_basis": 0.0}],
)
def test_invalid_options(options: dict) -> None:
    with pytest.raises(ConfigurationError):
        DashaOptions(**options)


def test_timeline_is_idempotent(make_chart) -> None:
    assert _timeline(make_chart, 123.4) == _timeline(make_chart, 123.4)


def test_birth_moment_is_utc(make_chart) -> None:
    timeline = _timeline(make_chart, 0.0)
    assert timeline.birth_moment == datetime(1990, 5, 15, 5, 0, tzinfo=UTC)
