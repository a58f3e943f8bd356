from datetime import date, datetime, timedelta, timezone

import pytest

pytest.importorskip("swisseph")

from resonance_engine.config import EngineSettings
from resonance_engine.jobs.ephemeris_refresh import refresh_ephemeris
from resonance_engine.services.ephem import positions_ecliptic, to_jd_utc
from resonance_engine.services.ephemeris_resolver import EphemerisResolver
from resonance_engine.services.ephemeris_store import InMemoryEphemerisStore

SETTINGS = EngineSettings(ephemeris_backend="moseph", ephemeris_ttl_hours=6.0)
RUN_AT = datetime(2000, 1, 1, 3, tzinfo=timezone.utc)


def test_positions_for_j2000():
    jd = to_jd_utc(datetime(2000, 1, 1, 12, tzinfo=timezone.utc))
    assert jd == pytest.approx(2451545.0)
    bodies = positions_ecliptic(jd, SETTINGS)
    assert set(bodies) == {"Sun", "Moon", "Mercury", "Venus", "Mars", "Jupiter", "Saturn"}
    assert bodies["Sun"]["lon"] == pytest.approx(280.4, abs=0.5)
    assert bodies["Sun"]["retro"] is False
    assert all(0.0 <= b["lon"] < 360.0 for b in bodies.values())


def test_refresh_writes_entries_with_ttl():
    store = InMemoryEphemerisStore(clock=lambda: RUN_AT)
    written = refresh_ephemeris(store, date(2000, 1, 1), days=2, settings=SETTINGS, clock=lambda: RUN_AT)
    assert written == 14
    assert len(store) == 14
    entry = store.get("Saturn", date(2000, 1, 2))
    assert entry.expires_at == RUN_AT + timedelta(hours=6)


def test_refreshed_store_serves_exact_and_interpolated_positions():
    store = InMemoryEphemerisStore(clock=lambda: RUN_AT)
    refresh_ephemeris(store, date(2000, 1, 1), days=1, settings=SETTINGS, clock=lambda: RUN_AT)
    refresh_ephemeris(store, date(2000, 1, 3), days=1, settings=SETTINGS, clock=lambda: RUN_AT)
    resolver = EphemerisResolver(store, SETTINGS)
    assert resolver.resolve("Mars", date(2000, 1, 3)).confidence == "exact"
    gap = resolver.resolve("Moon", datetime(2000, 1, 2, 12, tzinfo=timezone.utc))
    assert gap.confidence == "interpolated"
    assert gap.source_dates == ["2000-01-01", "2000-01-03"]


def test_zero_days_is_a_noop():
    store = InMemoryEphemerisStore()
    assert refresh_ephemeris(store, date(2000, 1, 1), days=0, settings=SETTINGS) == 0
