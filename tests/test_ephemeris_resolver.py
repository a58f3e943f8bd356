from datetime import date, datetime, timedelta, timezone
import logging

import pytest

from resonance_engine.config import EngineSettings
from resonance_engine.errors import InstantError, UnknownPlanetError
from resonance_engine.services.ephemeris_resolver import (
    MEAN_DAILY_MOTION,
    MEAN_LONGITUDE_AT_EPOCH,
    EphemerisResolver,
    synthetic_longitude,
    to_utc_instant,
)
from resonance_engine.services.ephemeris_store import EphemerisEntry, InMemoryEphemerisStore

SETTINGS = EngineSettings()
NOW = datetime(2025, 3, 1, tzinfo=timezone.utc)


def _store(*entries):
    store = InMemoryEphemerisStore(clock=lambda: NOW)
    store.put_many(entries)
    return store


def _entry(planet, day, longitude, **kwargs):
    return EphemerisEntry(planet=planet, day=day, longitude=longitude, **kwargs)


def test_exact_hit():
    store = _store(_entry("Mars", date(2025, 3, 1), 281.5, retrograde=True))
    pos = EphemerisResolver(store, SETTINGS).resolve("mars", date(2025, 3, 1))
    assert pos.confidence == "exact"
    assert pos.longitude == 281.5
    assert pos.sign_index == 9
    assert pos.sign == "Capricorn"
    assert pos.retrograde is True
    assert pos.source_dates == ["2025-03-01"]


def test_interpolates_across_the_seam():
    store = _store(
        _entry("Sun", date(2025, 3, 1), 350.0),
        _entry("Sun", date(2025, 3, 3), 10.0),
    )
    pos = EphemerisResolver(store, SETTINGS).resolve("Sun", date(2025, 3, 2))
    assert pos.confidence == "interpolated"
    assert pos.longitude == pytest.approx(0.0, abs=1e-9) or pos.longitude == pytest.approx(360.0, abs=1e-9)
    assert pos.sign_index in (0, 11)
    assert pos.retrograde is False
    assert pos.source_dates == ["2025-03-01", "2025-03-03"]


def test_interpolation_uses_fractional_days():
    store = _store(
        _entry("Mars", date(2025, 3, 1), 100.0),
        _entry("Mars", date(2025, 3, 5), 102.0),
    )
    instant = datetime(2025, 3, 2, 12, tzinfo=timezone.utc)
    pos = EphemerisResolver(store, SETTINGS).resolve("Mars", instant)
    assert pos.longitude == pytest.approx(100.75)


def test_interpolated_backward_motion_is_retrograde():
    store = _store(
        _entry("Mercury", date(2025, 3, 1), 20.0),
        _entry("Mercury", date(2025, 3, 3), 18.0),
    )
    pos = EphemerisResolver(store, SETTINGS).resolve("Mercury", date(2025, 3, 2))
    assert pos.longitude == pytest.approx(19.0)
    assert pos.retrograde is True


def test_single_point_is_never_extrapolated():
    store = _store(_entry("Venus", date(2025, 3, 1), 45.0))
    pos = EphemerisResolver(store, SETTINGS).resolve("Venus", date(2025, 3, 4))
    assert pos.confidence == "synthetic"
    assert pos.longitude == pytest.approx(synthetic_longitude("Venus", datetime(2025, 3, 4, tzinfo=timezone.utc)))


def test_wide_bracket_falls_back_to_synthetic(caplog):
    store = _store(
        _entry("Saturn", date(2025, 1, 1), 340.0),
        _entry("Saturn", date(2025, 6, 1), 345.0),
    )
    with caplog.at_level(logging.INFO, logger="resonance_engine.services.ephemeris_resolver"):
        pos = EphemerisResolver(store, SETTINGS).resolve("Saturn", date(2025, 3, 1))
    assert pos.confidence == "synthetic"
    messages = [r.getMessage() for r in caplog.records]
    assert "ephemeris_bracket_too_wide" in messages
    assert "ephemeris_synthetic_fallback" in messages


def test_moon_bracket_is_limited_by_its_motion():
    # 13 days of lunar motion is more than half a turn; the shortest arc would lie.
    store = _store(
        _entry("Moon", date(2025, 3, 1), 10.0),
        _entry("Moon", date(2025, 3, 15), 30.0),
    )
    pos = EphemerisResolver(store, SETTINGS).resolve("Moon", date(2025, 3, 8))
    assert pos.confidence == "synthetic"


def test_no_store_is_synthetic():
    pos = EphemerisResolver(None, SETTINGS).resolve("Jupiter", date(2000, 1, 1))
    assert pos.confidence == "synthetic"
    assert pos.longitude == pytest.approx(MEAN_LONGITUDE_AT_EPOCH["Jupiter"])


def test_synthetic_motion_follows_mean_rate():
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    a = synthetic_longitude("Sun", start)
    b = synthetic_longitude("Sun", start + timedelta(days=10))
    assert (b - a) % 360.0 == pytest.approx(10 * MEAN_DAILY_MOTION["Sun"])


def test_resolve_all_covers_seven_bodies():
    positions = EphemerisResolver(None, SETTINGS).resolve_all(date(2025, 3, 1))
    assert list(positions) == ["Sun", "Moon", "Mercury", "Venus", "Mars", "Jupiter", "Saturn"]
    assert all(0.0 <= p.longitude < 360.0 for p in positions.values())


def test_invalid_inputs():
    resolver = EphemerisResolver(None, SETTINGS)
    with pytest.raises(UnknownPlanetError):
        resolver.resolve("Pluto", date(2025, 3, 1))
    with pytest.raises(InstantError):
        resolver.resolve("Sun", datetime(2025, 3, 1, 12))
    with pytest.raises(InstantError):
        to_utc_instant("2025-03-01")


def test_aware_local_instant_maps_to_utc_day():
    tz = timezone(timedelta(hours=10))
    assert to_utc_instant(datetime(2025, 3, 2, 5, tzinfo=tz)).date() == date(2025, 3, 1)
