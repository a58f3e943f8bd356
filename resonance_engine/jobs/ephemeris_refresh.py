"""Out-of-band job that fills an ephemeris store from the Swiss Ephemeris.

Each entry is sampled at 00:00 UTC of its date, the instant the resolver
treats as the entry's position, and carries an expiry ``ttl`` hours after the
run. Re-running the job for overlapping dates simply rewrites the same keys.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Callable, List, Optional, Protocol

from ..config import EngineSettings, get_settings
from ..services.ephem import positions_ecliptic, to_jd_utc
from ..services.ephemeris_store import EphemerisEntry

logger = logging.getLogger(__name__)


class WritableStore(Protocol):
    def put(self, entry: EphemerisEntry) -> None:
        ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def entries_for_day(day: date, expires_at: datetime, settings: EngineSettings) -> List[EphemerisEntry]:
    midnight = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    bodies = positions_ecliptic(to_jd_utc(midnight), settings)
    return [
        EphemerisEntry(
            planet=name,
            day=day,
            longitude=values["lon"],
            retrograde=bool(values["retro"]),
            expires_at=expires_at,
        )
        for name, values in bodies.items()
    ]


def refresh_ephemeris(
    store: WritableStore,
    start: date,
    days: int = 1,
    settings: Optional[EngineSettings] = None,
    clock: Callable[[], datetime] = _utcnow,
) -> int:
    """Compute ``days`` consecutive dates from ``start`` and write them to ``store``.

    Returns the number of entries written. :class:`EphemerisBackendError`
    propagates so a scheduler can retry the run.
    """

    settings = settings or get_settings()
    if days < 1:
        return 0
    expires_at = clock() + timedelta(hours=settings.ephemeris_ttl_hours)

    written = 0
    for offset in range(days):
        day = start + timedelta(days=offset)
        for entry in entries_for_day(day, expires_at, settings):
            store.put(entry)
            written += 1

    logger.info(
        "ephemeris_refresh_completed",
        extra={
            "start": start.isoformat(),
            "days": days,
            "entries": written,
            "backend": settings.ephemeris_backend,
        },
    )
    return written


__all__ = ["entries_for_day", "refresh_ephemeris"]
