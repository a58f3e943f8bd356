"""Exception types raised at the engine boundary.

Missing or partial ephemeris data is never an error: the resolver degrades to
an interpolated or synthetic position instead. Only malformed caller input is
rejected, and always with a subclass of :class:`EngineValidationError` so that
callers can catch a single type.
"""

from __future__ import annotations


class EngineValidationError(ValueError):
    """Caller supplied a value the engine refuses to coerce."""


class UnknownPlanetError(EngineValidationError):
    def __init__(self, value: object) -> None:
        super().__init__(f"Unknown planet identifier: {value!r}")
        self.value = value


class UnknownElementError(EngineValidationError):
    def __init__(self, value: object) -> None:
        super().__init__(f"Unknown element: {value!r}")
        self.value = value


class CoordinateRangeError(EngineValidationError):
    """Longitude, sign index or sign degree outside its documented range."""


class InstantError(EngineValidationError):
    """Naive datetimes, mis-ordered solar boundaries or an out-of-day 'now'."""


class EmptyCandidateSetError(EngineValidationError):
    def __init__(self) -> None:
        super().__init__("Cannot select from an empty candidate set")


class ConfigurationError(RuntimeError):
    """An environment setting could not be parsed."""


class EphemerisBackendError(RuntimeError):
    """The Swiss Ephemeris could not compute a body for the refresh job."""


__all__ = [
    "ConfigurationError",
    "CoordinateRangeError",
    "EmptyCandidateSetError",
    "EngineValidationError",
    "EphemerisBackendError",
    "InstantError",
    "UnknownElementError",
    "UnknownPlanetError",
]
