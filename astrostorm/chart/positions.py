"""Normalised planet positions and their derivation from raw coordinates."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, fields, replace
from math import floor
from typing import Any

from ..core.angles import normalize_degrees
from ..core.bodies import Planet
from ..core.nakshatra import Nakshatra, position_for
from ..core.zodiac import ZodiacSign, degree_in_sign, sign_of
from ..ephemeris.provider import RawPosition
from .houses import house_for_longitude

__all__ = [
    "PlanetPosition",
    "dms",
    "normalize_position",
    "ketu_from_rahu",
    "with_overrides",
]


@dataclass(frozen=True)
class PlanetPosition:
    """A body's sidereal placement within one chart context."""

    planet: Planet
    longitude: float
    latitude: float
    distance: float
    speed: float
    sign: ZodiacSign
    degree: int
    minutes: int
    seconds: float
    is_retrograde: bool
    nakshatra: Nakshatra
    pada: int
    house: int
    is_combust: bool = False
    is_vargottama: bool = False

    @property
    def degree_in_sign(self) -> float:
        return degree_in_sign(self.longitude)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            payload[item.name] = getattr(value, "value", value)
        return payload


def dms(longitude: float) -> tuple[int, int, float]:
    """Split the in-sign degree of ``longitude`` into degrees, minutes, seconds."""

    within = degree_in_sign(longitude)
    degrees = int(floor(within))
    minutes_float = (within - degrees) * 60.0
    minutes = int(floor(minutes_float))
    seconds = (minutes_float - minutes) * 60.0
    return degrees, minutes, seconds


def normalize_position(
    planet: Planet,
    raw: RawPosition,
    *,
    boundaries: Sequence[float] | None = None,
    house: int | None = None,
) -> PlanetPosition:
    """Build a :class:`PlanetPosition` from provider output.

    The house is either given directly via ``house`` or derived from the
    twelve ``boundaries``.  Exactly one of them must be supplied.
    """

    lon = normalize_degrees(raw.longitude)
    if boundaries is not None and house is None:
        house_number = house_for_longitude(lon, boundaries)
    elif house is not None and boundaries is None:
        house_number = house
    else:
        raise ValueError("provide exactly one of 'boundaries' or 'house'")
    nak = position_for(lon)
    degrees, minutes, seconds = dms(lon)
    return PlanetPosition(
        planet=planet,
        longitude=lon,
        latitude=raw.latitude,
        distance=raw.distance,
        speed=raw.speed,
        sign=sign_of(lon),
        degree=degrees,
        minutes=minutes,
        seconds=seconds,
        is_retrograde=raw.speed < 0.0,
        nakshatra=nak.nakshatra,
        pada=nak.pada,
        house=house_number,
    )


def ketu_from_rahu(rahu: RawPosition) -> RawPosition:
    """Return Ketu's coordinates: opposite Rahu, same speed, mirrored latitude."""

    return RawPosition(
        longitude=normalize_degrees(rahu.longitude + 180.0),
        latitude=-rahu.latitude,
        distance=rahu.distance,
        speed=rahu.speed,
    )


def with_overrides(position: PlanetPosition, **changes: Any) -> PlanetPosition:
    """Return a copy of ``position`` with ``changes`` applied.

    A new ``longitude`` re-derives sign, degree/minute/second, nakshatra and
    pada so the record stays self-consistent; the house is only changed when
    passed explicitly.
    """

    if "longitude" in changes:
        lon = normalize_degrees(changes["longitude"])
        nak = position_for(lon)
        degrees, minutes, seconds = dms(lon)
        derived = {
            "longitude": lon,
            "sign": sign_of(lon),
            "degree": degrees,
            "minutes": minutes,
            "seconds": seconds,
            "nakshatra": nak.nakshatra,
            "pada": nak.pada,
        }
        derived.update({k: v for k, v in changes.items() if k != "longitude"})
        changes = derived
    if "speed" in changes and "is_retrograde" not in changes:
        changes["is_retrograde"] = changes["speed"] < 0.0
    return replace(position, **changes)
