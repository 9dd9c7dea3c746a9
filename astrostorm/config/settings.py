"""Configuration models and helpers for AstroStorm settings."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from ..chart.houses import HouseSystem, resolve_house_system
from ..core.bodies import Planet, parse_planet
from ..ephemeris.swisseph_adapter import (
    SUPPORTED_AYANAMSAS,
    SwissEphemerisProvider,
    normalize_ayanamsa_name,
)
from ..exceptions import ConfigurationError
from ..vedic.aspects import OrbConfiguration
from ..vedic.dasha import DashaLevel, DashaOptions

__all__ = [
    "CONFIG_FILENAME",
    "CURRENT_SETTINGS_SCHEMA_VERSION",
    "AspectsCfg",
    "DashaCfg",
    "EphemerisCfg",
    "HousesCfg",
    "Settings",
    "aspect_orbs",
    "config_path",
    "dasha_options",
    "default_settings",
    "ephemeris_provider",
    "get_config_home",
    "house_system",
    "load_settings",
    "save_settings",
    "validate_payload",
]

logger = logging.getLogger(__name__)

CURRENT_SETTINGS_SCHEMA_VERSION = 1
CONFIG_FILENAME = "config.yaml"

# -------------------- Settings Schema --------------------


class EphemerisCfg(BaseModel):
    """Swiss Ephemeris data location and sidereal options."""

    path: Optional[str] = None
    ayanamsa: str = "lahiri"
    node_variant: Literal["true", "mean"] = "true"

    @field_validator("ayanamsa", mode="before")
    @classmethod
    def _known_ayanamsa(cls, value: object) -> str:
        key = normalize_ayanamsa_name(str(value))
        if key not in SUPPORTED_AYANAMSAS:
            raise ValueError(
                f"unsupported ayanamsa '{value}'; options: {sorted(SUPPORTED_AYANAMSAS)}"
            )
        return key


class HousesCfg(BaseModel):
    """House system configuration."""

    system: str = "placidus"
    allow_fallback: bool = False

    @field_validator("system", mode="before")
    @classmethod
    def _known_system(cls, value: object) -> str:
        try:
            return resolve_house_system(str(value)).name.lower()
        except ConfigurationError as exc:
            raise ValueError(str(exc)) from exc


class DashaCfg(BaseModel):
    """Vimshottari timeline generation."""

    mahadasha_count: int = Field(default=28, ge=1)
    levels: int = Field(default=3, ge=1, le=len(DashaLevel))
    year_basis: float = Field(default=365.25, gt=0.0)


class AspectsCfg(BaseModel):
    """Orb allowances for aspect detection."""

    luminary: float = Field(default=10.0, ge=0.0)
    personal: float = Field(default=8.0, ge=0.0)
    social: float = Field(default=7.0, ge=0.0)
    nodal: float = Field(default=6.0, ge=0.0)
    outer: float = Field(default=5.0, ge=0.0)
    conjunction_bonus: float = Field(default=2.0, ge=0.0)
    opposition_bonus: float = Field(default=1.0, ge=0.0)
    orb_multiplier: float = Field(default=1.0, gt=0.0)
    include_minor: bool = False
    custom_orbs: Dict[str, float] = Field(default_factory=dict)

    @field_validator("custom_orbs", mode="before")
    @classmethod
    def _normalise_custom_orbs(cls, data: Dict[str, float] | object) -> Dict[str, float] | object:
        if not isinstance(data, dict):
            return data
        cleaned: Dict[str, float] = {}
        for key, value in data.items():
            planet = parse_planet(key)
            orb = float(value)
            if orb < 0.0:
                raise ValueError(f"custom orb for {planet.value} must be non-negative")
            cleaned[planet.value] = orb
        return cleaned


class Settings(BaseModel):
    """Top-level settings document persisted as YAML."""

    schema_version: int = CURRENT_SETTINGS_SCHEMA_VERSION
    ephemeris: EphemerisCfg = Field(default_factory=EphemerisCfg)
    houses: HousesCfg = Field(default_factory=HousesCfg)
    dasha: DashaCfg = Field(default_factory=DashaCfg)
    aspects: AspectsCfg = Field(default_factory=AspectsCfg)


# -------------------- Persistence --------------------


def get_config_home() -> Path:
    """Return the directory where settings should be stored."""

    return Path(os.environ.get("ASTROSTORM_HOME", str(Path.home() / ".astrostorm")))


def config_path() -> Path:
    """Return the full path to the configuration file, creating directories as needed."""

    home = get_config_home()
    home.mkdir(parents=True, exist_ok=True)
    return home / CONFIG_FILENAME


def default_settings() -> Settings:
    return Settings()


def save_settings(settings: Settings, path: Optional[Path] = None) -> Path:
    """Persist the given settings to disk as YAML."""

    target_path = Path(path) if path else config_path()
    target_path.parent.mkdir(parents=True, exist_ok=True)
    data = settings.model_dump()
    with target_path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(data, handle, sort_keys=False, allow_unicode=True)
    return target_path


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from disk, creating defaults if missing."""

    source_path = Path(path) if path else config_path()
    if not source_path.exists():
        settings = default_settings()
        save_settings(settings, source_path)
        logger.debug({"event": "settings_created", "path": str(source_path)})
        return settings
    with source_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, dict):
        raw = {}
    settings = Settings(**raw)
    logger.debug(
        {
            "event": "settings_loaded",
            "path": str(source_path),
            "schema_version": settings.schema_version,
        }
    )
    return settings


# -------------------- Runtime translation --------------------


def house_system(settings: Settings) -> HouseSystem:
    return resolve_house_system(settings.houses.system)


def dasha_options(settings: Settings) -> DashaOptions:
    """Return :class:`DashaOptions` built from the ``dasha`` section."""

    cfg = settings.dasha
    return DashaOptions(
        mahadasha_count=cfg.mahadasha_count,
        levels=cfg.levels,
        year_basis=cfg.year_basis,
    )


def aspect_orbs(settings: Settings) -> OrbConfiguration:
    """Return the :class:`OrbConfiguration` described by the ``aspects`` section."""

    cfg = settings.aspects
    custom: Dict[Planet, float] = {}
    for key, value in cfg.custom_orbs.items():
        try:
            custom[parse_planet(key)] = value
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
    return OrbConfiguration(
        luminary=cfg.luminary,
        personal=cfg.personal,
        social=cfg.social,
        nodal=cfg.nodal,
        outer=cfg.outer,
        conjunction_bonus=cfg.conjunction_bonus,
        opposition_bonus=cfg.opposition_bonus,
        orb_multiplier=cfg.orb_multiplier,
        include_minor=cfg.include_minor,
        custom_orbs=custom,
    )


def ephemeris_provider(settings: Settings) -> SwissEphemerisProvider:
    """Instantiate a :class:`SwissEphemerisProvider` configured from ``settings``."""

    cfg = settings.ephemeris
    return SwissEphemerisProvider(
        cfg.path,
        ayanamsa=cfg.ayanamsa,
        node_variant=cfg.node_variant,
        allow_house_fallback=settings.houses.allow_fallback,
    )


def validate_payload(data: dict[str, object]) -> Settings:
    """Validate a raw mapping, reporting failures as :class:`ConfigurationError`."""

    try:
        return Settings(**data)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid settings: {exc}") from exc
