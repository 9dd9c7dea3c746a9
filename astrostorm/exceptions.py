"""Error hierarchy shared by the calculators.

Each error also derives from the builtin the surrounding code would naturally
raise (``KeyError`` for lookups, ``RuntimeError`` for provider failures,
``ValueError`` for bad input), so callers that already guard those builtins
keep working.
"""

from __future__ import annotations

__all__ = [
    "AstroStormError",
    "MissingBodyPosition",
    "EphemerisComputationFailure",
    "ConfigurationError",
    "HouseAssignmentError",
]


class AstroStormError(Exception):
    """Base class for every error raised by :mod:`astrostorm`."""


class MissingBodyPosition(AstroStormError, KeyError):
    """A calculation required a body that is absent from the chart."""

    def __init__(self, body: object, context: str | None = None) -> None:
        self.body = body
        self.context = context
        label = getattr(body, "value", body)
        message = f"{label!s} position unavailable in chart"
        if context:
            message = f"{message} (required for {context})"
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError.__str__ would quote the message.
        return str(self.args[0])


class EphemerisComputationFailure(AstroStormError, RuntimeError):
    """The ephemeris provider reported an error for a computation."""

    def __init__(self, message: str, *, body: object = None, julian_day: float | None = None) -> None:
        self.body = body
        self.julian_day = julian_day
        super().__init__(message)


class ConfigurationError(AstroStormError, ValueError):
    """Invalid or unsupported configuration such as an unknown house system."""


class HouseAssignmentError(AstroStormError, ValueError):
    """House cusps could not place a longitude in any house."""
