"""Settings models and persistence helpers."""

from .settings import (
    AspectsCfg,
    DashaCfg,
    EphemerisCfg,
    HousesCfg,
    Settings,
    aspect_orbs,
    config_path,
    dasha_options,
    default_settings,
    ephemeris_provider,
    get_config_home,
    house_system,
    load_settings,
    save_settings,
    validate_payload,
)

__all__ = [
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
