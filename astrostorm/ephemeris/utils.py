"""Swiss ephemeris path discovery helpers."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from pathlib import Path

__all__ = [
    "DEFAULT_ENV_KEYS",
    "iter_candidate_paths",
    "get_se_ephe_path",
]

DEFAULT_ENV_KEYS: tuple[str, ...] = (
    "SE_EPHE_PATH",
    "SWE_EPH_PATH",
    "ASTROSTORM_EPHEMERIS_PATH",
)
"""Environment variables checked (in order) for Swiss ephemeris paths."""

_DEFAULT_HINTS: tuple[Path, ...] = (
    Path.home() / ".sweph",
    Path("/usr/share/sweph"),
    Path("/usr/share/libswisseph"),
)


def _first_env(keys: Iterable[str]) -> str | None:
    for key in keys:
        value = os.environ.get(key)
        if value:
            return value
    return None


def _ensure_dir(path: os.PathLike[str] | str | None) -> str | None:
    """Expand ``path`` to an absolute directory string when it exists."""

    if not path:
        return None
    candidate = Path(path).expanduser()
    if candidate.is_dir():
        return str(candidate)
    return None


def iter_candidate_paths(
    default: str | os.PathLike[str] | None = None,
) -> Iterator[str]:
    """Yield Swiss ephemeris path candidates in priority order."""

    seen: set[str] = set()
    for raw in (default, _first_env(DEFAULT_ENV_KEYS), *_DEFAULT_HINTS):
        candidate = _ensure_dir(raw)
        if candidate and candidate not in seen:
            seen.add(candidate)
            yield candidate


def get_se_ephe_path(default: str | os.PathLike[str] | None = None) -> str | None:
    """Return the first usable Swiss ephemeris path or ``None``.

    ``None`` is a valid outcome: pyswisseph then falls back to its built-in
    Moshier ephemeris.
    """

    return next(iter_candidate_paths(default), None)
