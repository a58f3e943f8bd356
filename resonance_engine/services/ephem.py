"""Swiss Ephemeris helpers used by the ephemeris refresh job.

Nothing on the query path imports this module; resolving positions only
reads the cache store.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Dict, Optional

import swisseph as swe

from ..config import EngineSettings, get_settings
from ..errors import EphemerisBackendError, InstantError
from .angles import normalize_longitude

BODIES: Dict[str, int] = {
    "Sun": swe.SUN,
    "Moon": swe.MOON,
    "Mercury": swe.MERCURY,
    "Venus": swe.VENUS,
    "Mars": swe.MARS,
    "Jupiter": swe.JUPITER,
    "Saturn": swe.SATURN,
}


def _backend_flag(settings: EngineSettings) -> int:
    return swe.FLG_MOSEPH if settings.ephemeris_backend == "moseph" else swe.FLG_SWIEPH


def init_paths(ephe_dir: str | os.PathLike[str] | None) -> None:
    """Set the Swiss Ephemeris file search path when available."""

    if not ephe_dir:
        return

    path = os.fspath(ephe_dir)
    if os.path.isdir(path):
        swe.set_ephe_path(path)


def to_jd_utc(instant: datetime) -> float:
    """Convert an aware instant to a Julian day in UTC."""

    if instant.tzinfo is None or instant.utcoffset() is None:
        raise InstantError(f"Naive datetime not accepted: {instant.isoformat()}")
    dt_utc = instant.astimezone(timezone.utc)
    hour = (
        dt_utc.hour
        + dt_utc.minute / 60
        + dt_utc.second / 3600
        + dt_utc.microsecond / 3_600_000_000
    )
    return swe.julday(dt_utc.year, dt_utc.month, dt_utc.day, hour, swe.GREG_CAL)


def positions_ecliptic(
    jd_utc: float, settings: Optional[EngineSettings] = None
) -> Dict[str, Dict[str, float]]:
    """Return tropical ecliptic longitude, speed and retrograde flag per body."""

    settings = settings or get_settings()
    init_paths(settings.ephemeris_path)
    flag = _backend_flag(settings) | swe.FLG_SPEED

    bodies: Dict[str, Dict[str, float]] = {}
    for name, code in BODIES.items():
        try:
            values, _ = swe.calc_ut(jd_utc, code, flag)
        except swe.Error as exc:
            raise EphemerisBackendError(f"Swiss Ephemeris failed for {name} at JD {jd_utc}: {exc}") from exc
        lon, _lat, _dist, lon_speed, _lat_speed, _dist_speed = values
        bodies[name] = {
            "lon": normalize_longitude(lon),
            "speed_lon": lon_speed,
            "retro": lon_speed < 0 and name not in ("Sun", "Moon"),
        }

    return bodies


__all__ = ["BODIES", "init_paths", "positions_ecliptic", "to_jd_utc"]
