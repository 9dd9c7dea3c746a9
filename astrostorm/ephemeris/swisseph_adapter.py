"""Swiss Ephemeris implementation of :class:`~astrostorm.ephemeris.provider.EphemerisProvider`."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from functools import lru_cache
from types import TracebackType
from typing import Any, Final

from ..core.angles import normalize_degrees
from ..core.bodies import Planet, swiss_id
from ..exceptions import ConfigurationError, EphemerisComputationFailure
from .provider import HouseCusps, RawPosition, RiseEvent
from .swe import swe as _swe, swe_version
from .utils import get_se_ephe_path

__all__ = [
    "SUPPORTED_AYANAMSAS",
    "SUPPORTED_HOUSE_CODES",
    "SwissEphemerisProvider",
    "swe_calc",
]

logger = logging.getLogger(__name__)

SUPPORTED_AYANAMSAS: Final[tuple[str, ...]] = (
    "lahiri",
    "raman",
    "krishnamurti",
    "fagan_bradley",
    "yukteshwar",
    "true_chitra",
)

SUPPORTED_HOUSE_CODES: Final[frozenset[str]] = frozenset(
    {"P", "K", "O", "R", "C", "E", "W", "V", "X", "M", "B"}
)
"""One-letter Swiss Ephemeris house codes accepted by the provider."""

_WHOLE_SIGN: Final[str] = "W"
_CIRCUMPOLAR_STATUS: Final[int] = -2


@lru_cache(maxsize=1)
def _ayanamsa_modes() -> Mapping[str, int]:
    swe = _swe()
    return {
        "lahiri": swe.SIDM_LAHIRI,
        "raman": swe.SIDM_RAMAN,
        "krishnamurti": swe.SIDM_KRISHNAMURTI,
        "fagan_bradley": swe.SIDM_FAGAN_BRADLEY,
        "yukteshwar": swe.SIDM_YUKTESHWAR,
        "true_chitra": swe.SIDM_TRUE_CITRA,
    }


@lru_cache(maxsize=1)
def _node_variant_codes() -> Mapping[str, int]:
    swe = _swe()
    return {
        "true": int(getattr(swe, "TRUE_NODE", 11)),
        "mean": int(getattr(swe, "MEAN_NODE", 10)),
    }


@lru_cache(maxsize=1)
def _rise_transit_events() -> Mapping[str, int]:
    swe = _swe()
    return {"rise": swe.CALC_RISE, "set": swe.CALC_SET}


def normalize_ayanamsa_name(name: str) -> str:
    return name.strip().lower().replace("-", "_").replace(" ", "_")


def swe_calc(*, jd_ut: float, planet_index: int, flag: int) -> tuple[float, ...]:
    """Invoke ``swe.calc_ut`` and translate failures into :class:`EphemerisComputationFailure`."""

    swe = _swe()
    try:
        xx, ret_flag = swe.calc_ut(jd_ut, planet_index, flag)
    except Exception as exc:
        raise EphemerisComputationFailure(
            f"Swiss ephemeris failed for body index {planet_index} at JD {jd_ut}: {exc}",
            body=planet_index,
            julian_day=jd_ut,
        ) from exc
    if ret_flag < 0:
        raise EphemerisComputationFailure(
            f"Swiss ephemeris returned error code {ret_flag}",
            body=planet_index,
            julian_day=jd_ut,
        )
    return tuple(xx)


class SwissEphemerisProvider:
    """Sidereal provider backed by :mod:`swisseph`.

    Swiss Ephemeris keeps its search path and sidereal mode in process-wide
    state.  Both are applied when the provider is constructed and released by
    :meth:`close`; instances are therefore not meant to be shared between
    threads that need different ayanamsas.
    """

    def __init__(
        self,
        ephemeris_path: str | os.PathLike[str] | None = None,
        *,
        ayanamsa: str = "lahiri",
        node_variant: str = "true",
        allow_house_fallback: bool = False,
    ) -> None:
        self.ayanamsa_name = normalize_ayanamsa_name(ayanamsa)
        if self.ayanamsa_name not in SUPPORTED_AYANAMSAS:
            options = ", ".join(SUPPORTED_AYANAMSAS)
            raise ConfigurationError(
                f"Unsupported ayanamsa '{ayanamsa}'. Supported options: {options}"
            )
        variant = node_variant.strip().lower()
        if variant not in ("true", "mean"):
            raise ConfigurationError(
                f"Unsupported node variant '{node_variant}'. Valid options: mean, true"
            )
        self.node_variant = variant
        self.allow_house_fallback = allow_house_fallback
        self.ephemeris_path = self._configure_ephemeris_path(ephemeris_path)
        self._sidereal_mode = _ayanamsa_modes()[self.ayanamsa_name]
        swe = _swe()
        self._calc_flags = swe.FLG_SWIEPH | swe.FLG_SPEED | swe.FLG_SIDEREAL
        self._apply_sidereal_mode()
        self._closed = False
        logger.debug(
            {
                "event": "swiss_ephemeris_configured",
                "version": swe_version(),
                "ayanamsa": self.ayanamsa_name,
                "node_variant": self.node_variant,
                "ephemeris_path": self.ephemeris_path,
            }
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _configure_ephemeris_path(
        self, ephemeris_path: str | os.PathLike[str] | None
    ) -> str | None:
        swe = _swe()
        if ephemeris_path is not None:
            swe.set_ephe_path(str(ephemeris_path))
            return str(ephemeris_path)

        discovered = get_se_ephe_path()
        if discovered:
            swe.set_ephe_path(discovered)
        return discovered

    def _apply_sidereal_mode(self) -> None:
        _swe().set_sid_mode(self._sidereal_mode, 0.0, 0.0)

    def _body_code(self, body: Planet | int) -> int:
        if isinstance(body, Planet):
            if body in (Planet.RAHU, Planet.KETU):
                return _node_variant_codes()[self.node_variant]
            return swiss_id(body)
        return int(body)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def position(self, body: Planet | int, julian_day: float) -> RawPosition:
        """Return the sidereal position of ``body``.

        Ketu is reported opposite the configured lunar node with the node's
        speed and a negated latitude.
        """

        code = self._body_code(body)
        xx = swe_calc(jd_ut=julian_day, planet_index=code, flag=self._calc_flags)
        longitude, latitude, distance, speed = (
            float(xx[0]),
            float(xx[1]),
            float(xx[2]),
            float(xx[3]),
        )
        if body is Planet.KETU:
            longitude = longitude + 180.0
            latitude = -latitude
        return RawPosition(
            longitude=normalize_degrees(longitude),
            latitude=latitude,
            distance=distance,
            speed=speed,
        )

    def ayanamsa(self, julian_day: float) -> float:
        self._apply_sidereal_mode()
        return float(_swe().get_ayanamsa_ut(julian_day))

    def house_cusps(
        self,
        julian_day: float,
        latitude: float,
        longitude: float,
        house_system: str,
    ) -> HouseCusps:
        """Compute sidereal house cusps for ``house_system``.

        Quadrant systems can fail at polar latitudes.  The failure is raised
        as :class:`EphemerisComputationFailure` unless the provider was built
        with ``allow_house_fallback=True``, in which case whole-sign cusps are
        returned and a ``house_system_fallback`` warning is logged.
        """

        code = str(house_system).strip().upper()
        if code not in SUPPORTED_HOUSE_CODES:
            options = ", ".join(sorted(SUPPORTED_HOUSE_CODES))
            raise ConfigurationError(
                f"Unsupported house system '{house_system}'. Valid options: {options}"
            )

        self._apply_sidereal_mode()
        swe = _swe()
        used_code = code
        try:
            cusps, angles = swe.houses_ex(julian_day, latitude, longitude, code.encode("ascii"))
        except Exception as exc:
            if code == _WHOLE_SIGN or not self.allow_house_fallback:
                raise EphemerisComputationFailure(
                    f"House computation failed for system '{code}' at latitude {latitude}: {exc}",
                    julian_day=julian_day,
                ) from exc
            logger.warning(
                {
                    "event": "house_system_fallback",
                    "from": code,
                    "to": _WHOLE_SIGN,
                    "latitude": latitude,
                    "longitude": longitude,
                    "reason": str(exc),
                }
            )
            used_code = _WHOLE_SIGN
            cusps, angles = swe.houses_ex(
                julian_day, latitude, longitude, _WHOLE_SIGN.encode("ascii")
            )

        ayan = self.ayanamsa(julian_day)
        return HouseCusps(
            ascendant=normalize_degrees(angles[0] - ayan),
            midheaven=normalize_degrees(angles[1] - ayan),
            cusps=tuple(normalize_degrees(c - ayan) for c in tuple(cusps)[:12]),
            system=used_code,
        )

    def rise_transit(
        self,
        julian_day: float,
        body: Planet | int,
        latitude: float,
        longitude: float,
        kind: RiseEvent,
    ) -> float | None:
        """Return the Julian day of the next rise or set after ``julian_day``."""

        try:
            rsmi = _rise_transit_events()[kind]
        except KeyError as exc:
            raise ConfigurationError(
                f"Unknown rise/transit event '{kind}'. Options: rise, set"
            ) from exc

        swe = _swe()
        geopos = (float(longitude), float(latitude), 0.0)
        try:
            status, tret = swe.rise_trans(
                julian_day, self._body_code(body), rsmi, geopos, 0.0, 0.0, swe.FLG_SWIEPH
            )
        except Exception as exc:
            raise EphemerisComputationFailure(
                f"Swiss ephemeris rise/set search failed at JD {julian_day}: {exc}",
                body=body,
                julian_day=julian_day,
            ) from exc
        if status == _CIRCUMPOLAR_STATUS:
            return None
        if status < 0:
            raise EphemerisComputationFailure(
                f"Swiss ephemeris returned error code {status} for {kind}",
                body=body,
                julian_day=julian_day,
            )
        event_jd = float(tret[0]) if tret else 0.0
        return event_jd if event_jd != 0.0 else None

    def close(self) -> None:
        """Release files and process-wide state held by Swiss Ephemeris."""

        if not self._closed:
            _swe().close()
            self._closed = True

    def __enter__(self) -> SwissEphemerisProvider:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        details: dict[str, Any] = {
            "ayanamsa": self.ayanamsa_name,
            "node_variant": self.node_variant,
            "ephemeris_path": self.ephemeris_path,
        }
        return f"{type(self).__name__}({details})"
