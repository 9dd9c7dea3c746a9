"""House systems and wraparound-safe house assignment."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from ..core.angles import normalize_degrees
from ..exceptions import ConfigurationError, HouseAssignmentError

__all__ = [
    "HouseSystem",
    "DEFAULT_HOUSE_SYSTEM",
    "resolve_house_system",
    "house_for_longitude",
    "bhava_boundaries",
    "house_from_sign",
]


class HouseSystem(Enum):
    """House systems understood by the ephemeris provider.

    The value is the one-letter Swiss Ephemeris code; ``display_name`` holds
    the human readable label.
    """

    PLACIDUS = "P"
    KOCH = "K"
    PORPHYRIUS = "O"
    REGIOMONTANUS = "R"
    CAMPANUS = "C"
    EQUAL = "E"
    WHOLE_SIGN = "W"
    VEHLOW = "V"
    MERIDIAN = "X"
    MORINUS = "M"
    ALCABITUS = "B"

    @property
    def code(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        return self.name.replace("_", " ").title()


DEFAULT_HOUSE_SYSTEM = HouseSystem.PLACIDUS


def resolve_house_system(value: HouseSystem | str | None) -> HouseSystem:
    """Return the :class:`HouseSystem` for a member, code or name.

    ``None`` resolves to :data:`DEFAULT_HOUSE_SYSTEM`.  Accepts one-letter
    codes (``"P"``), enum names (``"whole_sign"``) and display names
    (``"Whole Sign"``).
    """

    if value is None:
        return DEFAULT_HOUSE_SYSTEM
    if isinstance(value, HouseSystem):
        return value
    token = str(value).strip()
    if len(token) == 1:
        try:
            return HouseSystem(token.upper())
        except ValueError:
            pass
    key = token.lower().replace("-", "_").replace(" ", "_")
    for system in HouseSystem:
        if system.name.lower() == key:
            return system
    options = ", ".join(s.name.lower() for s in HouseSystem)
    raise ConfigurationError(f"Unsupported house system '{value}'. Valid options: {options}")


def house_for_longitude(longitude: float, boundaries: Sequence[float]) -> int:
    """Return the 1-based house containing ``longitude``.

    ``boundaries`` are the twelve house starts in order; house 12 ends where
    house 1 begins.  A longitude belongs to house ``i`` when
    ``(lon - start + 360) % 360 < (end - start + 360) % 360``, which keeps the
    0° Aries crossing correct.

    Raises
    ------
    HouseAssignmentError
        When the boundaries are degenerate and no house contains the value.
    """

    if len(boundaries) != 12:
        raise HouseAssignmentError(f"expected 12 house boundaries, received {len(boundaries)}")
    lon = normalize_degrees(longitude)
    for index in range(12):
        start = boundaries[index]
        end = boundaries[(index + 1) % 12]
        offset = (lon - start + 360.0) % 360.0
        span = (end - start + 360.0) % 360.0
        if offset < span:
            return index + 1
    raise HouseAssignmentError(
        f"Longitude {lon:.6f} is not contained by any house; boundaries={tuple(boundaries)}"
    )


def bhava_boundaries(ascendant: float, cusps: Sequence[float]) -> tuple[float, ...]:
    """Return bhava boundaries: the ascendant followed by cusps 2 through 12."""

    if len(cusps) != 12:
        raise HouseAssignmentError(f"expected 12 house cusps, received {len(cusps)}")
    return (normalize_degrees(ascendant), *(normalize_degrees(c) for c in cusps[1:]))


def house_from_sign(sign_index: int, ascendant_sign_index: int) -> int:
    """Return the sign-based house (1–12) counted from the ascendant sign."""

    return (sign_index - ascendant_sign_index) % 12 + 1
