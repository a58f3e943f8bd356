"""Planetary hour schedule for one solar day.

The day segment (sunrise → sunset) and the night segment (sunset → next
sunrise) are each divided into twelve equal hours, so day and night hours
generally differ in length. Rulers cycle through the Chaldean order starting
from the weekday ruler at sunrise. Every boundary is an absolute instant; no
wall-clock arithmetic is performed, so DST changes cannot shift a window.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Union

from ..errors import InstantError
from ..schemas.timing import HourPosition, PlanetaryHourWindow
from .constants import CHALDEAN_ORDER, PLANET_ELEMENTS, WEEKDAY_RULERS, normalize_weekday


def _require_aware(name: str, value: datetime) -> None:
    if not isinstance(value, datetime):
        raise InstantError(f"{name} must be a datetime, got {type(value).__name__}")
    if value.tzinfo is None or value.utcoffset() is None:
        raise InstantError(f"{name} must be timezone-aware: {value.isoformat()}")


def _boundaries(start: datetime, end: datetime) -> List[datetime]:
    """Thirteen instants splitting ``start``..``end`` into twelve equal parts."""

    seg = (end - start) / 12
    points = [start + i * seg for i in range(12)]
    points.append(end)
    return points


def ruler_for_hour(day_ruler: str, hour_offset: int) -> str:
    """Return the ruler of the ``hour_offset``-th hour (0-based) after sunrise."""

    start_offset = CHALDEAN_ORDER.index(day_ruler)
    return CHALDEAN_ORDER[(start_offset + hour_offset) % len(CHALDEAN_ORDER)]


def day_ruler_for(weekday: Union[str, int, date]) -> str:
    return WEEKDAY_RULERS[normalize_weekday(weekday)]


def compute_planetary_hours(
    sunrise: datetime,
    sunset: datetime,
    next_sunrise: datetime,
    weekday: Union[str, int, date, None] = None,
) -> List[PlanetaryHourWindow]:
    """Return the 24 windows partitioning [sunrise, next_sunrise).

    ``weekday`` defaults to the local calendar day of ``sunrise``.
    """

    _require_aware("sunrise", sunrise)
    _require_aware("sunset", sunset)
    _require_aware("next_sunrise", next_sunrise)
    ruler = day_ruler_for(sunrise.date() if weekday is None else weekday)

    # Same-tzinfo datetimes subtract and compare by wall clock, so work in UTC.
    sunrise, sunset, next_sunrise = (d.astimezone(timezone.utc) for d in (sunrise, sunset, next_sunrise))
    if not sunrise < sunset < next_sunrise:
        raise InstantError(
            "Expected sunrise < sunset < next_sunrise, got "
            f"{sunrise.isoformat()}, {sunset.isoformat()}, {next_sunrise.isoformat()}"
        )

    windows: List[PlanetaryHourWindow] = []
    segments = ((True, _boundaries(sunrise, sunset)), (False, _boundaries(sunset, next_sunrise)))
    hour_offset = 0
    for is_daytime, points in segments:
        for i in range(12):
            lord = ruler_for_hour(ruler, hour_offset)
            windows.append(
                PlanetaryHourWindow(
                    index=i + 1,
                    hour_number=hour_offset + 1,
                    is_daytime=is_daytime,
                    ruling_planet=lord,
                    element=PLANET_ELEMENTS[lord],
                    start=points[i],
                    end=points[i + 1],
                )
            )
            hour_offset += 1

    return windows


def _find_index(schedule: List[PlanetaryHourWindow], now: datetime) -> int:
    _require_aware("now", now)
    if not schedule:
        raise InstantError("Empty planetary hour schedule")
    if not schedule[0].start <= now < schedule[-1].end:
        raise InstantError(
            f"{now.isoformat()} lies outside the solar day "
            f"[{schedule[0].start.isoformat()}, {schedule[-1].end.isoformat()})"
        )
    for idx, window in enumerate(schedule):
        if window.contains(now):
            return idx
    # Unreachable for a contiguous schedule.
    raise InstantError(f"No planetary hour contains {now.isoformat()}")


def locate_hour(schedule: List[PlanetaryHourWindow], now: datetime) -> HourPosition:
    """Return the current window, elapsed/remaining seconds and the next window.

    The last night hour has no next window within this solar day.
    """

    idx = _find_index(schedule, now)
    current = schedule[idx]
    nxt: Optional[PlanetaryHourWindow] = schedule[idx + 1] if idx + 1 < len(schedule) else None
    return HourPosition(
        current=current,
        next=nxt,
        elapsed_seconds=(now - current.start).total_seconds(),
        remaining_seconds=(current.end - now).total_seconds(),
    )


def upcoming_windows(
    schedule: List[PlanetaryHourWindow], now: datetime, count: int = 24
) -> List[PlanetaryHourWindow]:
    """Windows from the one containing ``now`` onwards, at most ``count`` of them."""

    idx = _find_index(schedule, now)
    return schedule[idx : idx + max(1, count)]


def format_countdown(seconds: float) -> str:
    total = max(0, int(seconds))
    hours, rem = divmod(total, 3600)
    minutes, secs = divmod(rem, 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def segment_lengths(schedule: List[PlanetaryHourWindow]) -> tuple[timedelta, timedelta]:
    """Total day and night durations covered by a schedule."""

    day = sum((w.end - w.start for w in schedule if w.is_daytime), timedelta())
    night = sum((w.end - w.start for w in schedule if not w.is_daytime), timedelta())
    return day, night


__all__ = [
    "compute_planetary_hours",
    "day_ruler_for",
    "format_countdown",
    "locate_hour",
    "ruler_for_hour",
    "segment_lengths",
    "upcoming_windows",
]
