"""Approximate body positions through a cache → interpolation → synthetic ladder.

The resolver never raises for missing data. An exact cache hit is preferred,
then linear interpolation between the nearest cached days on either side of
the target, and finally a mean-motion estimate from a fixed epoch. The tier
that produced a position is reported as its ``confidence``.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Dict, Optional, Union

from ..config import EngineSettings, get_settings
from ..errors import InstantError
from ..schemas.timing import CelestialPosition
from .angles import interpolate_longitude, normalize_longitude, shortest_delta
from .constants import PLANETS, normalize_planet
from .ephemeris_store import EphemerisEntry, EphemerisStore

logger = logging.getLogger(__name__)

UTC = timezone.utc

SYNTHETIC_EPOCH = datetime(2000, 1, 1, tzinfo=UTC)

# Mean daily motion in degrees per day.
MEAN_DAILY_MOTION = {
    "Sun": 0.9857,
    "Moon": 13.1687,
    "Mercury": 1.1407,
    "Venus": 0.6158,
    "Mars": 0.3282,
    "Jupiter": 0.0831,
    "Saturn": 0.0335,
}

# Mean longitude at SYNTHETIC_EPOCH.
MEAN_LONGITUDE_AT_EPOCH = {
    "Sun": 280.46646,
    "Moon": 218.31645,
    "Mercury": 280.46646,
    "Venus": 247.92362,
    "Mars": 285.43112,
    "Jupiter": 20.35053,
    "Saturn": 317.14307,
}

NEVER_RETROGRADE = {"Sun", "Moon"}

Target = Union[date, datetime]


def to_utc_instant(target: Target) -> datetime:
    """Dates map to 00:00 UTC; datetimes must be timezone-aware."""

    if isinstance(target, datetime):
        if target.tzinfo is None or target.utcoffset() is None:
            raise InstantError(f"Naive datetime not accepted: {target.isoformat()}")
        return target.astimezone(UTC)
    if isinstance(target, date):
        return datetime(target.year, target.month, target.day, tzinfo=UTC)
    raise InstantError(f"Expected a date or datetime, got {type(target).__name__}")


def days_since_epoch(instant: datetime) -> float:
    return (instant - SYNTHETIC_EPOCH).total_seconds() / 86400.0


def synthetic_longitude(planet: str, instant: datetime) -> float:
    planet = normalize_planet(planet)
    mean = MEAN_LONGITUDE_AT_EPOCH[planet] + MEAN_DAILY_MOTION[planet] * days_since_epoch(instant)
    return normalize_longitude(mean)


def max_bracket_days(planet: str, settings: EngineSettings) -> float:
    """Widest bracket for which the shortest arc is still the travelled arc."""

    return min(settings.max_interpolation_days, 180.0 / MEAN_DAILY_MOTION[planet])


class EphemerisResolver:
    def __init__(
        self,
        store: Optional[EphemerisStore] = None,
        settings: Optional[EngineSettings] = None,
    ) -> None:
        self.store = store
        self.settings = settings or get_settings()

    def resolve(self, planet: str, target: Target) -> CelestialPosition:
        planet = normalize_planet(planet)
        instant = to_utc_instant(target)
        day = instant.date()

        if self.store is not None:
            entry = self.store.get(planet, day)
            if entry is not None:
                logger.debug("ephemeris_exact_hit", extra={"planet": planet, "day": day.isoformat()})
                return self._exact(entry)

            before, after = self.store.neighbours(planet, day)
            if before is not None and after is not None:
                span = (after.day - before.day).days
                if span <= max_bracket_days(planet, self.settings):
                    logger.debug(
                        "ephemeris_interpolated",
                        extra={"planet": planet, "day": day.isoformat(), "span_days": span},
                    )
                    return self._interpolated(planet, instant, before, after)
                logger.info(
                    "ephemeris_bracket_too_wide",
                    extra={"planet": planet, "day": day.isoformat(), "span_days": span},
                )

        logger.info("ephemeris_synthetic_fallback", extra={"planet": planet, "day": day.isoformat()})
        return CelestialPosition(
            planet=planet,
            longitude=synthetic_longitude(planet, instant),
            retrograde=False,
            confidence="synthetic",
        )

    def resolve_all(self, target: Target) -> Dict[str, CelestialPosition]:
        return {planet: self.resolve(planet, target) for planet in PLANETS}

    @staticmethod
    def _exact(entry: EphemerisEntry) -> CelestialPosition:
        return CelestialPosition(
            planet=entry.planet,
            longitude=normalize_longitude(entry.longitude),
            retrograde=entry.retrograde and entry.planet not in NEVER_RETROGRADE,
            confidence="exact",
            source_dates=[entry.day.isoformat()],
        )

    @staticmethod
    def _interpolated(
        planet: str, instant: datetime, before: EphemerisEntry, after: EphemerisEntry
    ) -> CelestialPosition:
        total = (after.midnight - before.midnight).total_seconds()
        t = (instant - before.midnight).total_seconds() / total
        delta = shortest_delta(before.longitude, after.longitude)
        return CelestialPosition(
            planet=planet,
            longitude=interpolate_longitude(before.longitude, after.longitude, t),
            retrograde=delta < 0 and planet not in NEVER_RETROGRADE,
            confidence="interpolated",
            source_dates=[before.day.isoformat(), after.day.isoformat()],
        )


__all__ = [
    "EphemerisResolver",
    "MEAN_DAILY_MOTION",
    "MEAN_LONGITUDE_AT_EPOCH",
    "SYNTHETIC_EPOCH",
    "synthetic_longitude",
    "to_utc_instant",
]
