"""Provider protocol consumed by the chart calculators.

The calculators never talk to Swiss Ephemeris directly.  They accept any
object implementing :class:`EphemerisProvider` so tests can substitute a
deterministic fake and alternative engines can be plugged in without touching
the chart code.  All angles exchanged through the protocol are sidereal
degrees.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal, Protocol, runtime_checkable

from ..core.bodies import Planet

__all__ = [
    "RawPosition",
    "HouseCusps",
    "RiseEvent",
    "EphemerisProvider",
]

RiseEvent = Literal["rise", "set"]


@dataclass(frozen=True, slots=True)
class RawPosition:
    """Geocentric ecliptic coordinates and daily motion for a single body."""

    longitude: float
    latitude: float
    distance: float
    speed: float


@dataclass(frozen=True, slots=True)
class HouseCusps:
    """Angles and the twelve cusps returned by a house computation."""

    ascendant: float
    midheaven: float
    cusps: Sequence[float]
    system: str

    def __post_init__(self) -> None:
        if len(self.cusps) != 12:
            raise ValueError(f"expected 12 house cusps, received {len(self.cusps)}")
        object.__setattr__(self, "cusps", tuple(float(c) for c in self.cusps))


@runtime_checkable
class EphemerisProvider(Protocol):
    """Interface for sources of sidereal positions, cusps and rise times."""

    def position(self, body: Planet | int, julian_day: float) -> RawPosition:
        """Return the sidereal position of ``body`` at ``julian_day`` (UT)."""

    def house_cusps(
        self,
        julian_day: float,
        latitude: float,
        longitude: float,
        house_system: str,
    ) -> HouseCusps:
        """Return sidereal cusps for the one-letter ``house_system`` code."""

    def rise_transit(
        self,
        julian_day: float,
        body: Planet | int,
        latitude: float,
        longitude: float,
        kind: RiseEvent,
    ) -> float | None:
        """Return the next rise or set after ``julian_day``.

        ``None`` signals that the body neither rises nor sets on that day.
        """

    def ayanamsa(self, julian_day: float) -> float:
        """Return the ayanamsa in degrees at ``julian_day``."""
