"""Divisional chart (varga) transforms.

Each varga splits a sign into ``k`` parts and maps every part onto a sign,
counting from a starting sign chosen by the Parashari rule for that chart.
The in-part offset is rescaled to a full 30° in the destination sign.  The
trimsamsa (D30) is the exception: it uses five unequal spans that map to
fixed signs.

Divisional charts re-house every planet from the divisional ascendant's own
sign, never from the rashi ascendant.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from math import floor
from typing import Final

from ..chart.houses import house_from_sign
from ..chart.natal import VedicChart
from ..chart.positions import PlanetPosition, with_overrides
from ..core.angles import BOUNDARY_TOLERANCE_DEG, normalize_degrees
from ..core.bodies import Planet
from ..core.zodiac import (
    FIXED_SIGNS,
    MOVABLE_SIGNS,
    Element,
    SIGN_DATA,
    SIGNS,
    degree_in_sign,
    is_odd_sign,
    sign_index,
)

__all__ = [
    "VargaType",
    "VargaDefinition",
    "VargaPlacement",
    "DivisionalChartData",
    "VARGA_DEFINITIONS",
    "ODD_TRIMSAMSA",
    "EVEN_TRIMSAMSA",
    "compute_varga",
    "varga_longitude",
    "varga_sign",
    "navamsa_sign",
    "trimsamsa_ruler",
    "divisional_chart",
    "compute_all_vargas",
    "mark_vargottama",
]

_BOUNDARY_EPS: Final[float] = 1e-9


class VargaType(str, Enum):
    D2 = "D2"
    D3 = "D3"
    D4 = "D4"
    D7 = "D7"
    D9 = "D9"
    D10 = "D10"
    D12 = "D12"
    D16 = "D16"
    D20 = "D20"
    D24 = "D24"
    D27 = "D27"
    D30 = "D30"
    D60 = "D60"

    @property
    def divisions(self) -> int:
        return int(self.value[1:])

    @property
    def display_name(self) -> str:
        return VARGA_DEFINITIONS[self].name


# (span in degrees, destination sign index, ruler)
ODD_TRIMSAMSA: Final[Sequence[tuple[float, int, Planet]]] = (
    (5.0, 0, Planet.MARS),
    (5.0, 10, Planet.SATURN),
    (8.0, 2, Planet.MERCURY),
    (7.0, 6, Planet.VENUS),
    (5.0, 8, Planet.JUPITER),
)
EVEN_TRIMSAMSA: Final[Sequence[tuple[float, int, Planet]]] = (
    (5.0, 1, Planet.VENUS),
    (5.0, 11, Planet.JUPITER),
    (8.0, 9, Planet.SATURN),
    (7.0, 7, Planet.MARS),
    (5.0, 5, Planet.MERCURY),
)


@dataclass(frozen=True)
class VargaDefinition:
    varga: VargaType
    name: str
    dest_fn: Callable[[int, int], int]
    rule_description: str

    @property
    def divisions(self) -> int:
        return self.varga.divisions

    @property
    def span(self) -> float:
        return 30.0 / self.divisions


@dataclass(frozen=True)
class VargaPlacement:
    """Result of mapping one longitude into a divisional chart."""

    varga: VargaType
    sign_index: int
    longitude: float
    part: int
    """1-based part (or trimsamsa segment) the source longitude fell into."""


@dataclass(frozen=True)
class DivisionalChartData:
    varga: VargaType
    ascendant: float
    positions: tuple[PlanetPosition, ...]

    @property
    def ascendant_sign_index(self) -> int:
        return sign_index(self.ascendant)

    def get(self, planet: Planet) -> PlanetPosition | None:
        for position in self.positions:
            if position.planet is planet:
                return position
        return None


def _sequential(start_fn: Callable[[int], int]) -> Callable[[int, int], int]:
    def _inner(sign_idx: int, part_index: int) -> int:
        return (start_fn(sign_idx) + part_index) % 12

    return _inner


def _stepped(step: int) -> Callable[[int, int], int]:
    def _inner(sign_idx: int, part_index: int) -> int:
        return (sign_idx + step * part_index) % 12

    return _inner


def _odd_even_start(even_offset: int) -> Callable[[int], int]:
    def _inner(sign_idx: int) -> int:
        if is_odd_sign(sign_idx):
            return sign_idx
        return (sign_idx + even_offset) % 12

    return _inner


def _modal_start(movable: int, fixed: int, dual: int, *, relative: bool) -> Callable[[int], int]:
    """Return a start rule keyed on modality.

    With ``relative`` the offsets count from the sign itself, otherwise they
    name absolute sign indices.
    """

    def _inner(sign_idx: int) -> int:
        if sign_idx in MOVABLE_SIGNS:
            offset = movable
        elif sign_idx in FIXED_SIGNS:
            offset = fixed
        else:
            offset = dual
        return (sign_idx + offset) % 12 if relative else offset

    return _inner


def _odd_even_fixed(odd_start: int, even_start: int) -> Callable[[int], int]:
    def _inner(sign_idx: int) -> int:
        return odd_start if is_odd_sign(sign_idx) else even_start

    return _inner


_ELEMENT_START: Mapping[Element, int] = {
    Element.FIRE: 0,
    Element.EARTH: 3,
    Element.AIR: 6,
    Element.WATER: 9,
}


def _element_start(sign_idx: int) -> int:
    return _ELEMENT_START[SIGN_DATA[SIGNS[sign_idx]].element]


def _hora_dest(sign_idx: int, part_index: int) -> int:
    leo, cancer = 4, 3
    first, second = (leo, cancer) if is_odd_sign(sign_idx) else (cancer, leo)
    return first if part_index == 0 else second


VARGA_DEFINITIONS: Final[Mapping[VargaType, VargaDefinition]] = {
    VargaType.D2: VargaDefinition(
        VargaType.D2,
        "Hora",
        _hora_dest,
        "Odd signs: first half Leo, second half Cancer; even signs reversed.",
    ),
    VargaType.D3: VargaDefinition(
        VargaType.D3,
        "Drekkana",
        _stepped(4),
        "Each 10° segment maps to the sign itself, then the 5th, then the 9th.",
    ),
    VargaType.D4: VargaDefinition(
        VargaType.D4,
        "Chaturthamsa",
        _stepped(3),
        "Each 7°30' segment maps to the sign itself, then the 4th, 7th and 10th.",
    ),
    VargaType.D7: VargaDefinition(
        VargaType.D7,
        "Saptamsa",
        _sequential(_odd_even_start(6)),
        "Odd signs count from the natal sign; even signs count from the 7th sign.",
    ),
    VargaType.D9: VargaDefinition(
        VargaType.D9,
        "Navamsa",
        _sequential(_modal_start(0, 8, 4, relative=True)),
        "Movable signs count from the natal sign, fixed from the 9th, dual from the 5th.",
    ),
    VargaType.D10: VargaDefinition(
        VargaType.D10,
        "Dasamsa",
        _sequential(_odd_even_start(8)),
        "Odd signs count from the natal sign; even signs count from the 9th sign.",
    ),
    VargaType.D12: VargaDefinition(
        VargaType.D12,
        "Dwadasamsa",
        _sequential(lambda sign_idx: sign_idx),
        "Every sign counts from itself.",
    ),
    VargaType.D16: VargaDefinition(
        VargaType.D16,
        "Shodasamsa",
        _sequential(_modal_start(0, 4, 8, relative=False)),
        "Movable signs count from Aries, fixed from Leo, dual from Sagittarius.",
    ),
    VargaType.D20: VargaDefinition(
        VargaType.D20,
        "Vimsamsa",
        _sequential(_modal_start(0, 8, 4, relative=False)),
        "Movable signs count from Aries, fixed from Sagittarius, dual from Leo.",
    ),
    VargaType.D24: VargaDefinition(
        VargaType.D24,
        "Chaturvimsamsa",
        _sequential(_odd_even_fixed(4, 3)),
        "Odd signs count from Leo; even signs count from Cancer.",
    ),
    VargaType.D27: VargaDefinition(
        VargaType.D27,
        "Bhamsa",
        _sequential(_element_start),
        "Fire signs count from Aries, earth from Cancer, air from Libra, water from Capricorn.",
    ),
    VargaType.D30: VargaDefinition(
        VargaType.D30,
        "Trimsamsa",
        lambda sign_idx, part_index: _trimsamsa_segments(sign_idx)[part_index][1],
        "Unequal 5/5/8/7/5 spans mapped to the signs of Mars, Saturn, Mercury, Venus and Jupiter.",
    ),
    VargaType.D60: VargaDefinition(
        VargaType.D60,
        "Shashtiamsa",
        _sequential(_odd_even_start(6)),
        "Odd signs count from the natal sign; even signs count from the 7th sign.",
    ),
}


def _trimsamsa_segments(sign_idx: int) -> Sequence[tuple[float, int, Planet]]:
    return ODD_TRIMSAMSA if is_odd_sign(sign_idx) else EVEN_TRIMSAMSA


def _part_index(degrees_in_sign: float, divisions: int) -> int:
    span = 30.0 / divisions
    # ``floor`` with a tiny bias keeps exact boundaries (10° in D3) in the
    # part that starts there.
    raw = floor((degrees_in_sign / span) + _BOUNDARY_EPS)
    if raw >= divisions:
        return divisions - 1
    return int(raw)


def _trimsamsa_part(deg: float, sign_idx: int) -> tuple[int, float, float]:
    """Return (segment index, offset within segment, segment width)."""

    accumulated = 0.0
    segments = _trimsamsa_segments(sign_idx)
    for index, (width, _dest, _ruler) in enumerate(segments):
        upper = accumulated + width
        if deg + _BOUNDARY_EPS < upper:
            return index, max(0.0, deg - accumulated), width
        accumulated = upper
    width = segments[-1][0]
    return len(segments) - 1, width, width


def _coerce(varga: VargaType | str) -> VargaType:
    if isinstance(varga, VargaType):
        return varga
    try:
        return VargaType(str(varga).strip().upper())
    except ValueError as exc:
        options = ", ".join(v.value for v in VargaType)
        raise ValueError(f"Unsupported varga '{varga}'. Valid options: {options}") from exc


def compute_varga(longitude: float, varga: VargaType | str) -> VargaPlacement:
    """Map ``longitude`` into ``varga`` and return the full placement."""

    kind = _coerce(varga)
    definition = VARGA_DEFINITIONS[kind]
    sign_idx = sign_index(longitude)
    deg = degree_in_sign(longitude)
    if kind is VargaType.D30:
        part_index, offset, width = _trimsamsa_part(deg, sign_idx)
    else:
        part_index = _part_index(deg, definition.divisions)
        width = definition.span
        offset = max(0.0, deg - part_index * width)
    dest = definition.dest_fn(sign_idx, part_index)
    # Keep the rescaled offset inside the destination sign.
    within = min(offset / width * 30.0, 30.0 - 2 * BOUNDARY_TOLERANCE_DEG)
    return VargaPlacement(
        varga=kind,
        sign_index=dest,
        longitude=normalize_degrees(dest * 30.0 + within),
        part=part_index + 1,
    )


def varga_longitude(longitude: float, varga: VargaType | str) -> float:
    return compute_varga(longitude, varga).longitude


def varga_sign(longitude: float, varga: VargaType | str) -> int:
    """Return the 0-based divisional sign index for ``longitude``."""

    return compute_varga(longitude, varga).sign_index


def navamsa_sign(longitude: float) -> int:
    return compute_varga(longitude, VargaType.D9).sign_index


def trimsamsa_ruler(longitude: float) -> Planet:
    """Return the planet ruling the trimsamsa segment holding ``longitude``."""

    sign_idx = sign_index(longitude)
    part_index, _offset, _width = _trimsamsa_part(degree_in_sign(longitude), sign_idx)
    return _trimsamsa_segments(sign_idx)[part_index][2]


def divisional_chart(chart: VedicChart, varga: VargaType | str) -> DivisionalChartData:
    """Transform every position and the ascendant of ``chart`` into ``varga``.

    Houses are counted from the divisional ascendant's sign.
    """

    kind = _coerce(varga)
    ascendant = compute_varga(chart.ascendant, kind).longitude
    asc_sign = sign_index(ascendant)
    positions = []
    for position in chart.positions:
        placement = compute_varga(position.longitude, kind)
        positions.append(
            with_overrides(
                position,
                longitude=placement.longitude,
                house=house_from_sign(placement.sign_index, asc_sign),
            )
        )
    return DivisionalChartData(varga=kind, ascendant=ascendant, positions=tuple(positions))


def compute_all_vargas(
    chart: VedicChart, codes: Iterable[VargaType | str] | None = None
) -> dict[VargaType, DivisionalChartData]:
    """Return divisional charts for ``codes`` (all supported vargas by default)."""

    kinds = [_coerce(code) for code in codes] if codes is not None else list(VargaType)
    return {kind: divisional_chart(chart, kind) for kind in kinds}


def mark_vargottama(chart: VedicChart) -> tuple[PlanetPosition, ...]:
    """Return ``chart.positions`` with ``is_vargottama`` set where D1 and D9 signs agree."""

    return tuple(
        with_overrides(
            position,
            is_vargottama=sign_index(position.longitude) == navamsa_sign(position.longitude),
        )
        for position in chart.positions
    )
