"""Build the read-only timing snapshot for one instant.

Everything is recomputed from the supplied instants, profile and store on each
call; the snapshot is the only value handed to presentation layers.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence, Union

from ...config import EngineSettings, get_settings
from ...content.selector import reflection_prompt, seed_for, select_content
from ...errors import InstantError
from ...schemas.timing import (
    ContentCandidate,
    ContentSelection,
    ElementalProfile,
    SelectionCriteria,
    TimingSnapshot,
)
from ..alignment import align
from ..constants import PLANETS, WEEKDAY_RULERS, normalize_weekday
from ..daily_timing import analyze_day, score_day
from ..ephemeris_resolver import EphemerisResolver
from ..lunar import moon_phase_for
from ..planetary_hours import compute_planetary_hours, locate_hour
from ..strength import score_positions

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "general"

# Intention match outranks cycle match, which outranks element and general tags.
INTENTION_WEIGHT = 10
CYCLE_WEIGHT = 5
ELEMENT_WEIGHT = 3
GENERAL_WEIGHT = 2


def default_criteria(category: str, cycle_state: str, element: str) -> SelectionCriteria:
    return SelectionCriteria(
        tags=frozenset({category, cycle_state}),
        tag_weights={category: INTENTION_WEIGHT, cycle_state: CYCLE_WEIGHT},
        element=element,
        element_weight=ELEMENT_WEIGHT,
        general_weight=GENERAL_WEIGHT,
    )


def build_snapshot(
    now: datetime,
    sunrise: datetime,
    sunset: datetime,
    next_sunrise: datetime,
    *,
    resolver: Optional[EphemerisResolver] = None,
    profile: Optional[ElementalProfile] = None,
    fallback_element: Optional[str] = None,
    weekday: Union[str, int, date, None] = None,
    candidates: Optional[Sequence[ContentCandidate]] = None,
    category: str = DEFAULT_CATEGORY,
    criteria: Optional[SelectionCriteria] = None,
    settings: Optional[EngineSettings] = None,
) -> TimingSnapshot:
    if now.tzinfo is None or now.utcoffset() is None:
        raise InstantError(f"now must be timezone-aware: {now.isoformat()}")

    settings = settings or get_settings()
    resolver = resolver or EphemerisResolver(settings=settings)

    local_day = sunrise.date()
    weekday_name = normalize_weekday(local_day if weekday is None else weekday)
    day_ruler = WEEKDAY_RULERS[weekday_name]

    schedule = compute_planetary_hours(sunrise, sunset, next_sunrise, weekday_name)
    hour = locate_hour(schedule, now)

    positions = resolver.resolve_all(now)
    strengths = score_positions(positions)
    daily = score_day(strengths, weekday_name, settings)
    analysis = analyze_day(strengths)
    alignment = align(
        profile,
        hour_ruler=hour.current.ruling_planet,
        day_ruler=day_ruler,
        fallback_element=fallback_element,
        settings=settings,
    )
    moon = moon_phase_for(positions["Sun"], positions["Moon"])

    content: Optional[ContentSelection] = None
    prompt: Optional[str] = None
    if candidates:
        criteria = criteria or default_criteria(category, daily.cycle_state, alignment.user_element)
        content = select_content(candidates, criteria, seed_for(local_day, category))
        prompt = reflection_prompt(daily.timing_quality, local_day.isoformat())

    logger.info(
        "timing_snapshot_built",
        extra={
            "weekday": weekday_name,
            "hour_number": hour.current.hour_number,
            "total_score": daily.breakdown.total_score,
            "synthetic_positions": sum(1 for p in positions.values() if p.confidence == "synthetic"),
            "content_id": content.candidate.id if content else None,
        },
    )

    return TimingSnapshot(
        generated_for=now,
        weekday=weekday_name,
        day_ruler=day_ruler,
        positions=[positions[p] for p in PLANETS],
        hour=hour,
        strengths=[strengths[p] for p in PLANETS],
        daily_timing=daily,
        analysis=analysis,
        alignment=alignment,
        moon_phase=moon,
        content=content,
        reflection_prompt=prompt,
    )


__all__ = ["build_snapshot", "default_criteria"]
