"""Ephemeris cache entries and the in-memory store used by tests and workers.

The refresh job writes entries; :class:`~.ephemeris_resolver.EphemerisResolver`
only reads them. A key (planet, date) always maps to the same computed value
and the last write wins. The in-memory store guards its state with a
threading lock.
"""

from __future__ import annotations

import bisect
import threading
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Protocol, Tuple

from .constants import normalize_planet, sign_degree_from_lon, sign_index_from_lon, validate_longitude


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class EphemerisEntry:
    planet: str
    day: date
    longitude: float
    retrograde: bool = False
    expires_at: Optional[datetime] = None

    @property
    def sign(self) -> int:
        return sign_index_from_lon(self.longitude)

    @property
    def sign_degree(self) -> float:
        return sign_degree_from_lon(self.longitude)

    @property
    def midnight(self) -> datetime:
        return datetime(self.day.year, self.day.month, self.day.day, tzinfo=timezone.utc)

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and now >= self.expires_at

    @classmethod
    def from_mapping(cls, planet: str, iso_date: str, payload: Mapping[str, Any]) -> "EphemerisEntry":
        """Build an entry from a stored record such as ``{"longitude": 281.2, "sign": 9}``.

        Sign and sign degree are always recomputed from the longitude.
        """

        lon = payload.get("longitude", payload.get("lon"))
        expires = payload.get("expires_at")
        if isinstance(expires, str):
            expires = datetime.fromisoformat(expires.replace("Z", "+00:00"))
        return cls(
            planet=normalize_planet(planet),
            day=date.fromisoformat(iso_date),
            longitude=validate_longitude(lon),
            retrograde=bool(payload.get("retrograde", payload.get("retro", False))),
            expires_at=expires,
        )

    def to_mapping(self) -> Dict[str, Any]:
        return {
            "longitude": self.longitude,
            "sign": self.sign,
            "sign_degree": self.sign_degree,
            "retrograde": self.retrograde,
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
        }


class EphemerisStore(Protocol):
    """Read capability injected into the resolver."""

    def get(self, planet: str, day: date) -> Optional[EphemerisEntry]:
        ...

    def neighbours(
        self, planet: str, day: date
    ) -> Tuple[Optional[EphemerisEntry], Optional[EphemerisEntry]]:
        """Return the nearest live entries strictly before and strictly after ``day``."""
        ...


class InMemoryEphemerisStore:
    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._entries: Dict[Tuple[str, date], EphemerisEntry] = {}
        self._days: Dict[str, List[date]] = {}
        self._clock = clock
        self._lock = threading.Lock()

    # Basic CRUD helpers -------------------------------------------------

    def put(self, entry: EphemerisEntry) -> None:
        key = (entry.planet, entry.day)
        with self._lock:
            if key not in self._entries:
                bisect.insort(self._days.setdefault(entry.planet, []), entry.day)
            self._entries[key] = entry

    def put_many(self, entries: Iterable[EphemerisEntry]) -> int:
        count = 0
        for entry in entries:
            self.put(entry)
            count += 1
        return count

    def get(self, planet: str, day: date) -> Optional[EphemerisEntry]:
        now = self._clock()
        with self._lock:
            entry = self._entries.get((planet, day))
        if entry is None or entry.is_expired(now):
            return None
        return entry

    def neighbours(
        self, planet: str, day: date
    ) -> Tuple[Optional[EphemerisEntry], Optional[EphemerisEntry]]:
        now = self._clock()
        before: Optional[EphemerisEntry] = None
        after: Optional[EphemerisEntry] = None
        with self._lock:
            days = self._days.get(planet, [])
            pos = bisect.bisect_left(days, day)
            for candidate in reversed(days[:pos]):
                entry = self._entries[(planet, candidate)]
                if not entry.is_expired(now):
                    before = entry
                    break
            start = bisect.bisect_right(days, day)
            for candidate in days[start:]:
                entry = self._entries[(planet, candidate)]
                if not entry.is_expired(now):
                    after = entry
                    break
        return before, after

    def purge_expired(self) -> int:
        """Drop expired entries and return how many were removed."""

        now = self._clock()
        with self._lock:
            stale = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for planet, day in stale:
                del self._entries[(planet, day)]
                self._days[planet].remove(day)
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = ["EphemerisEntry", "EphemerisStore", "InMemoryEphemerisStore"]
