"""Birth moment description and Julian Day conversion."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from math import floor
from typing import Final
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..exceptions import ConfigurationError

__all__ = [
    "UNIX_EPOCH_JD",
    "BirthData",
    "julian_day",
    "from_julian_day",
]

UNIX_EPOCH_JD: Final[float] = 2440587.5
_SECONDS_PER_DAY: Final[float] = 86400.0


def julian_day(moment: datetime) -> float:
    """Return the Julian Day (UT) for a timezone-aware ``moment``.

    The fractional day is accumulated as
    ``hour + minute/60 + second/3600 + microsecond/3.6e9`` on the UTC
    calendar date, matching ``swe.julday`` for the Gregorian calendar.
    """

    if moment.tzinfo is None or moment.tzinfo.utcoffset(moment) is None:
        raise ValueError("datetime must be timezone-aware in UTC or convertible to UTC")
    utc = moment.astimezone(UTC)
    hour = (
        utc.hour
        + utc.minute / 60.0
        + utc.second / 3600.0
        + utc.microsecond / 3.6e9
    )
    year, month = utc.year, utc.month
    if month <= 2:
        year -= 1
        month += 12
    century = year // 100
    gregorian = 2 - century + century // 4
    return (
        floor(365.25 * (year + 4716))
        + floor(30.6001 * (month + 1))
        + utc.day
        + gregorian
        - 1524.5
        + hour / 24.0
    )


def from_julian_day(jd_ut: float) -> datetime:
    """Convert a Julian Day in UT back to an aware UTC :class:`datetime`."""

    seconds = (jd_ut - UNIX_EPOCH_JD) * _SECONDS_PER_DAY
    return datetime(1970, 1, 1, tzinfo=UTC) + timedelta(seconds=seconds)


def _zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"Unknown timezone '{name}'") from exc


@dataclass(frozen=True)
class BirthData:
    """A named, geolocated local birth moment.

    ``moment`` is the wall-clock time at the birth place and must be naive;
    ``timezone`` is the IANA zone used to interpret it.
    """

    name: str
    moment: datetime
    timezone: str
    latitude: float
    longitude: float
    location: str = ""

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ConfigurationError(
                f"Latitude {self.latitude} outside the range [-90, 90]"
            )
        if not -180.0 <= self.longitude <= 180.0:
            raise ConfigurationError(
                f"Longitude {self.longitude} outside the range [-180, 180]"
            )
        if self.moment.tzinfo is not None:
            raise ConfigurationError(
                "BirthData.moment must be a naive local time; pass the zone via 'timezone'"
            )
        _zone(self.timezone)

    @property
    def zone(self) -> ZoneInfo:
        return _zone(self.timezone)

    def local_datetime(self) -> datetime:
        """Return ``moment`` attached to its timezone."""

        return self.moment.replace(tzinfo=self.zone)

    def to_utc(self) -> datetime:
        return self.local_datetime().astimezone(UTC)

    def julian_day(self) -> float:
        return julian_day(self.to_utc())
