"""Panchanga (five-limb almanac) derived from sidereal Sun and Moon longitudes."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, time, tzinfo
from enum import Enum
from math import floor
from typing import Final

from ..chart.birth import from_julian_day, julian_day
from ..chart.natal import VedicChart, position_of
from ..core.angles import normalize_degrees
from ..core.bodies import Planet
from ..core.nakshatra import NAKSHATRA_ARC_DEGREES, Nakshatra, position_for
from ..ephemeris.provider import EphemerisProvider, RiseEvent

__all__ = [
    "TITHI_ARC_DEGREES",
    "YOGA_ARC_DEGREES",
    "KARANA_ARC_DEGREES",
    "Paksha",
    "YogaNature",
    "TithiData",
    "NakshatraData",
    "YogaData",
    "KaranaData",
    "VaraData",
    "PanchangaData",
    "tithi_from_longitudes",
    "nakshatra_from_longitude",
    "yoga_from_longitudes",
    "karana_from_longitudes",
    "vara_from_julian_day",
    "moon_phase_percent",
    "format_clock",
    "sunrise_sunset",
    "compute_panchanga",
    "panchanga_for_chart",
    "is_auspicious",
    "auspiciousness_score",
]

TITHI_ARC_DEGREES: Final[float] = 360.0 / 30.0
"""Angular span of a single tithi in degrees."""

YOGA_ARC_DEGREES: Final[float] = 360.0 / 27.0
"""Angular span of a single yoga in degrees."""

KARANA_ARC_DEGREES: Final[float] = TITHI_ARC_DEGREES / 2.0
"""Angular span of a single karana (half tithi) in degrees."""


class Paksha(str, Enum):
    SHUKLA = "Shukla"
    KRISHNA = "Krishna"


class YogaNature(str, Enum):
    AUSPICIOUS = "Auspicious"
    INAUSPICIOUS = "Inauspicious"
    MIXED = "Mixed"


@dataclass(frozen=True)
class TithiData:
    index: int
    name: str
    paksha: Paksha
    lord: Planet
    deity: str
    progress: float


@dataclass(frozen=True)
class NakshatraData:
    nakshatra: Nakshatra
    index: int
    pada: int
    lord: Planet
    progress: float


@dataclass(frozen=True)
class YogaData:
    index: int
    name: str
    nature: YogaNature
    progress: float


@dataclass(frozen=True)
class KaranaData:
    index: int
    name: str
    is_fixed: bool
    progress: float


@dataclass(frozen=True)
class VaraData:
    index: int
    name: str
    lord: Planet
    colour: str
    deity: str


@dataclass(frozen=True)
class PanchangaData:
    """Complete panchanga snapshot for one moment and place.

    ``sunrise`` and ``sunset`` are aware datetimes in the query timezone, or
    ``None`` when the Sun does not rise or set on that day.
    """

    tithi: TithiData
    nakshatra: NakshatraData
    yoga: YogaData
    karana: KaranaData
    vara: VaraData
    paksha: Paksha
    sunrise: datetime | None
    sunset: datetime | None
    moon_phase: float
    sun_longitude: float
    moon_longitude: float

    @property
    def sunrise_text(self) -> str | None:
        return format_clock(self.sunrise) if self.sunrise is not None else None

    @property
    def sunset_text(self) -> str | None:
        return format_clock(self.sunset) if self.sunset is not None else None


_TITHI_NAMES: Sequence[str] = (
    "Pratipada",
    "Dwitiya",
    "Tritiya",
    "Chaturthi",
    "Panchami",
    "Shashthi",
    "Saptami",
    "Ashtami",
    "Navami",
    "Dashami",
    "Ekadashi",
    "Dwadashi",
    "Trayodashi",
    "Chaturdashi",
)

_TITHI_LORDS: Sequence[Planet] = (
    Planet.SUN,
    Planet.MOON,
    Planet.MARS,
    Planet.MERCURY,
    Planet.JUPITER,
    Planet.VENUS,
    Planet.SATURN,
    Planet.RAHU,
    Planet.SUN,
    Planet.MOON,
    Planet.MARS,
    Planet.MERCURY,
    Planet.JUPITER,
    Planet.VENUS,
    Planet.SATURN,
)

_SHUKLA_DEITIES: Sequence[str] = (
    "Agni", "Brahma", "Gauri", "Ganesha", "Naga", "Karttikeya", "Surya", "Shiva",
    "Durga", "Dharma", "Vishnu", "Vishnu", "Kamadeva", "Shiva", "Chandra",
)
_KRISHNA_DEITIES: Sequence[str] = (
    "Brahma", "Vidhata", "Gauri", "Yama", "Naga", "Karttikeya", "Surya", "Shiva",
    "Durga", "Yama", "Vishnu", "Vishnu", "Kamadeva", "Shiva", "Pitris",
)

_YOGA_NAMES: Sequence[str] = (
    "Vishkambha",
    "Priti",
    "Ayushman",
    "Saubhagya",
    "Shobhana",
    "Atiganda",
    "Sukarma",
    "Dhriti",
    "Shula",
    "Ganda",
    "Vriddhi",
    "Dhruva",
    "Vyaghata",
    "Harshana",
    "Vajra",
    "Siddhi",
    "Vyatipata",
    "Variyan",
    "Parigha",
    "Shiva",
    "Siddha",
    "Sadhya",
    "Shubha",
    "Shukla",
    "Brahma",
    "Indra",
    "Vaidhriti",
)

_INAUSPICIOUS_YOGAS: frozenset[str] = frozenset(
    {"Atiganda", "Shula", "Ganda", "Vyaghata", "Vajra", "Vyatipata", "Parigha", "Vaidhriti"}
)
_MIXED_YOGAS: frozenset[str] = frozenset({"Vishkambha"})

_CHARA_KARANAS: Sequence[str] = (
    "Bava",
    "Balava",
    "Kaulava",
    "Taitila",
    "Garaja",
    "Vanija",
    "Vishti",
)
_STHIRA_KARANAS: dict[int, str] = {
    1: "Kimstughna",
    58: "Shakuni",
    59: "Chatushpada",
    60: "Naga",
}


@dataclass(frozen=True)
class _VaraDefinition:
    name: str
    lord: Planet
    colour: str
    deity: str


_VARA_DEFINITIONS: Sequence[_VaraDefinition] = (
    _VaraDefinition("Sunday", Planet.SUN, "Red", "Surya"),
    _VaraDefinition("Monday", Planet.MOON, "White", "Chandra"),
    _VaraDefinition("Tuesday", Planet.MARS, "Red", "Mangala"),
    _VaraDefinition("Wednesday", Planet.MERCURY, "Green", "Budha"),
    _VaraDefinition("Thursday", Planet.JUPITER, "Yellow", "Guru"),
    _VaraDefinition("Friday", Planet.VENUS, "White", "Shukra"),
    _VaraDefinition("Saturday", Planet.SATURN, "Black", "Shani"),
)

# Amavasya, Krishna Ashtami and Krishna Chaturdashi.
_INAUSPICIOUS_TITHIS: frozenset[int] = frozenset({30, 23, 29})
_AUSPICIOUS_SHUKLA_TITHIS: frozenset[int] = frozenset({5, 8, 11, 13})


def _progress(value: float, span: float) -> float:
    return (value % span) / span * 100.0


def _tithi_name(index: int) -> str:
    if index == 15:
        return "Purnima"
    if index == 30:
        return "Amavasya"
    paksha = Paksha.SHUKLA if index <= 15 else Paksha.KRISHNA
    return f"{paksha.value} {_TITHI_NAMES[(index - 1) % 15]}"


def tithi_from_longitudes(sun_longitude: float, moon_longitude: float) -> TithiData:
    """Return the tithi for the Moon's elongation from the Sun."""

    diff = normalize_degrees(moon_longitude - sun_longitude)
    index = min(int(floor(diff / TITHI_ARC_DEGREES)) + 1, 30)
    paksha = Paksha.SHUKLA if index <= 15 else Paksha.KRISHNA
    deities = _SHUKLA_DEITIES if paksha is Paksha.SHUKLA else _KRISHNA_DEITIES
    return TithiData(
        index=index,
        name=_tithi_name(index),
        paksha=paksha,
        lord=_TITHI_LORDS[(index - 1) % 15],
        deity=deities[(index - 1) % 15],
        progress=_progress(diff, TITHI_ARC_DEGREES),
    )


def nakshatra_from_longitude(moon_longitude: float) -> NakshatraData:
    position = position_for(moon_longitude)
    return NakshatraData(
        nakshatra=position.nakshatra,
        index=position.number,
        pada=position.pada,
        lord=position.lord,
        progress=position.offset / NAKSHATRA_ARC_DEGREES * 100.0,
    )


def yoga_from_longitudes(sun_longitude: float, moon_longitude: float) -> YogaData:
    """Return the yoga for the sum of the luminaries' longitudes."""

    total = normalize_degrees(sun_longitude + moon_longitude)
    index = min(int(floor(total / YOGA_ARC_DEGREES)) + 1, 27)
    name = _YOGA_NAMES[index - 1]
    if name in _MIXED_YOGAS:
        nature = YogaNature.MIXED
    elif name in _INAUSPICIOUS_YOGAS:
        nature = YogaNature.INAUSPICIOUS
    else:
        nature = YogaNature.AUSPICIOUS
    return YogaData(
        index=index,
        name=name,
        nature=nature,
        progress=_progress(total, YOGA_ARC_DEGREES),
    )


def karana_from_longitudes(sun_longitude: float, moon_longitude: float) -> KaranaData:
    """Return the karana (half tithi); four fixed karanas bracket the cycle."""

    diff = normalize_degrees(moon_longitude - sun_longitude)
    index = min(int(floor(diff / KARANA_ARC_DEGREES)) + 1, 60)
    fixed = _STHIRA_KARANAS.get(index)
    name = fixed if fixed is not None else _CHARA_KARANAS[(index - 2) % len(_CHARA_KARANAS)]
    return KaranaData(
        index=index,
        name=name,
        is_fixed=fixed is not None,
        progress=_progress(diff, KARANA_ARC_DEGREES),
    )


def vara_from_julian_day(jd_ut: float) -> VaraData:
    """Return the weekday for ``jd_ut``; index 0 is Sunday."""

    index = int(floor(jd_ut + 1.5)) % 7
    definition = _VARA_DEFINITIONS[index]
    return VaraData(
        index=index,
        name=definition.name,
        lord=definition.lord,
        colour=definition.colour,
        deity=definition.deity,
    )


def moon_phase_percent(sun_longitude: float, moon_longitude: float) -> float:
    """Illumination proxy: 0 at new moon, 100 at full moon."""

    diff = normalize_degrees(moon_longitude - sun_longitude)
    if diff <= 180.0:
        return diff / 180.0 * 100.0
    return (360.0 - diff) / 180.0 * 100.0


def format_clock(moment: datetime) -> str:
    """Render ``moment`` as ``h:mm:ss AM/PM``."""

    hour = moment.hour
    suffix = "AM" if hour < 12 else "PM"
    display = 12 if hour % 12 == 0 else hour % 12
    return f"{display}:{moment.minute:02d}:{moment.second:02d} {suffix}"


def sunrise_sunset(
    provider: EphemerisProvider,
    moment: datetime,
    latitude: float,
    longitude: float,
) -> tuple[datetime | None, datetime | None]:
    """Return sunrise and sunset on the local day of ``moment``.

    The search starts at local midnight; results are expressed in the
    timezone of ``moment``.
    """

    if moment.tzinfo is None or moment.tzinfo.utcoffset(moment) is None:
        raise ValueError("datetime must be timezone-aware")
    zone: tzinfo = moment.tzinfo
    midnight = datetime.combine(moment.date(), time(0, 0), tzinfo=zone)
    start_jd = julian_day(midnight)

    def _event(kind: RiseEvent) -> datetime | None:
        jd = provider.rise_transit(start_jd, Planet.SUN, latitude, longitude, kind)
        if jd is None:
            return None
        return from_julian_day(jd).astimezone(zone)

    return _event("rise"), _event("set")


def _assemble(
    sun_longitude: float,
    moon_longitude: float,
    jd_ut: float,
    sunrise: datetime | None,
    sunset: datetime | None,
) -> PanchangaData:
    tithi = tithi_from_longitudes(sun_longitude, moon_longitude)
    return PanchangaData(
        tithi=tithi,
        nakshatra=nakshatra_from_longitude(moon_longitude),
        yoga=yoga_from_longitudes(sun_longitude, moon_longitude),
        karana=karana_from_longitudes(sun_longitude, moon_longitude),
        vara=vara_from_julian_day(jd_ut),
        paksha=tithi.paksha,
        sunrise=sunrise,
        sunset=sunset,
        moon_phase=moon_phase_percent(sun_longitude, moon_longitude),
        sun_longitude=normalize_degrees(sun_longitude),
        moon_longitude=normalize_degrees(moon_longitude),
    )


def compute_panchanga(
    provider: EphemerisProvider,
    moment: datetime,
    latitude: float,
    longitude: float,
) -> PanchangaData:
    """Compute the panchanga at ``moment`` (timezone-aware) for a location."""

    jd = julian_day(moment)
    sun = provider.position(Planet.SUN, jd)
    moon = provider.position(Planet.MOON, jd)
    sunrise, sunset = sunrise_sunset(provider, moment, latitude, longitude)
    return _assemble(sun.longitude, moon.longitude, jd, sunrise, sunset)


def panchanga_for_chart(
    chart: VedicChart, provider: EphemerisProvider | None = None
) -> PanchangaData:
    """Compute the panchanga for a chart's birth moment.

    Sun and Moon come from the chart itself.  Sunrise and sunset are only
    searched when a ``provider`` is given; otherwise they are ``None``.

    Raises
    ------
    MissingBodyPosition
        If the chart lacks the Sun or the Moon.
    """

    sun = position_of(chart, Planet.SUN, context="panchanga")
    moon = position_of(chart, Planet.MOON, context="panchanga")
    sunrise = sunset = None
    if provider is not None:
        sunrise, sunset = sunrise_sunset(
            provider,
            chart.birth.local_datetime(),
            chart.birth.latitude,
            chart.birth.longitude,
        )
    return _assemble(sun.longitude, moon.longitude, chart.julian_day, sunrise, sunset)


def is_auspicious(panchanga: PanchangaData) -> bool:
    """Auspicious yoga, no Amavasya/Krishna Ashtami/Chaturdashi and no Vishti karana."""

    return (
        panchanga.yoga.nature is YogaNature.AUSPICIOUS
        and panchanga.tithi.index not in _INAUSPICIOUS_TITHIS
        and panchanga.karana.name != "Vishti"
    )


def auspiciousness_score(panchanga: PanchangaData) -> int:
    """Return a 0–100 score combining yoga, tithi, karana and weekday."""

    score = 50
    if panchanga.yoga.nature is YogaNature.AUSPICIOUS:
        score += 30
    elif panchanga.yoga.nature is YogaNature.INAUSPICIOUS:
        score -= 30

    tithi = panchanga.tithi.index
    if tithi == 15:
        score += 20
    elif tithi == 30:
        score -= 20
    elif tithi in _AUSPICIOUS_SHUKLA_TITHIS:
        score += 15

    score += -10 if panchanga.karana.name == "Vishti" else 5

    weekday = panchanga.vara.name
    if weekday in ("Thursday", "Friday"):
        score += 10
    elif weekday in ("Tuesday", "Saturday"):
        score -= 10
    else:
        score += 5
    return max(0, min(100, score))
