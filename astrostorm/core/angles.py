"""Angular utilities shared across the sidereal calculators.

Every calculator in the package compares longitudes that live on a circle.
Doing so with raw subtraction invites subtle bugs around the 0°/360°
boundary, so the helpers here centralise degree normalisation, the shortest
arc between two bodies and the distance between a measured separation and an
aspect target.
"""

from __future__ import annotations

from math import floor
from typing import Final

__all__ = [
    "EPSILON_DEG",
    "BOUNDARY_TOLERANCE_DEG",
    "normalize_degrees",
    "signed_delta",
    "angular_separation",
    "orb_from_target",
    "forward_distance",
    "segment_position",
]


EPSILON_DEG: Final[float] = 1e-9


def normalize_degrees(angle: float) -> float:
    """Return ``angle`` normalised to the ``[0, 360)`` interval.

    Parameters
    ----------
    angle:
        Value in **degrees**. Inputs outside the canonical range are
        wrapped by multiples of 360°.

    Returns
    -------
    float
        A degree value in ``[0, 360)``. Values within ``1e-9`` of ``360``
        are coerced to ``0`` so callers can rely on a consistent
        wrap-around contract when comparing Swiss Ephemeris output.
    """

    wrapped = float(angle) % 360.0
    if wrapped >= 360.0 - EPSILON_DEG:
        wrapped = 0.0
    return wrapped if wrapped >= 0.0 else wrapped + 360.0


def signed_delta(angle: float) -> float:
    """Return ``angle`` wrapped to the ``[-180, 180)`` interval."""

    wrapped = normalize_degrees(angle)
    if wrapped >= 180.0:
        return wrapped - 360.0
    return wrapped


def angular_separation(first: float, second: float) -> float:
    """Return the shorter arc between two longitudes, ``min(|a-b|, 360-|a-b|)``."""

    diff = abs(normalize_degrees(first) - normalize_degrees(second))
    return 360.0 - diff if diff > 180.0 else diff


def orb_from_target(separation: float, target: float) -> float:
    """Return how far ``separation`` sits from the aspect ``target`` angle."""

    diff = abs(separation - target)
    return min(diff, 360.0 - diff)


def forward_distance(origin: float, destination: float) -> float:
    """Return the zodiacal distance travelled from ``origin`` to ``destination``.

    Unlike :func:`angular_separation` the result is directional and lies in
    ``[0, 360)``; it is used for one-way aspects counted forward from the
    casting body.
    """

    return normalize_degrees(destination - origin)


BOUNDARY_TOLERANCE_DEG: Final[float] = 1e-6
"""Longitudes this close below a segment boundary belong to the next segment.

Sign and nakshatra boundaries are usually quoted to a handful of decimals
(``13.333333``), so a value within this tolerance must resolve to the segment
that starts there.  Signs, nakshatras and padas all snap the same way.
"""


def segment_position(longitude: float, arc: float, count: int) -> tuple[int, float]:
    """Return ``(index, offset)`` of ``longitude`` on a circle cut into ``count`` arcs.

    A longitude within :data:`BOUNDARY_TOLERANCE_DEG` below a boundary is
    reported at offset ``0`` of the following segment, wrapping past 360°.
    """

    lon = normalize_degrees(longitude)
    raw = int(floor((lon + BOUNDARY_TOLERANCE_DEG) / arc))
    offset = max(0.0, lon - raw * arc)
    return raw % count, offset
