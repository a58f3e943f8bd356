"""Composite daily timing score and the qualitative tables read from it."""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Union

from ..config import EngineSettings, get_settings
from ..errors import EngineValidationError
from ..schemas.timing import (
    DailyPlanetaryAnalysis,
    DailyTiming,
    PlanetaryStrengthScore,
    TimingScoreBreakdown,
)
from .constants import PLANETS, WEEKDAY_RULERS, normalize_weekday, round_half_up

logger = logging.getLogger(__name__)

DAY_RULER_WEIGHT = 0.50
MOON_WEIGHT = 0.30
OTHERS_WEIGHT = 0.20

AVOID_BELOW = 30
CRITICAL_WARNING_CODES = ("combust", "fall", "just_entered_sign")
MAX_CRITICAL_WARNINGS = 3

ACTION_CYCLES = {"initiation", "growth_expansion"}

Scores = Union[Mapping[str, PlanetaryStrengthScore], Iterable[PlanetaryStrengthScore]]


def _by_planet(scores: Scores) -> Dict[str, PlanetaryStrengthScore]:
    if isinstance(scores, Mapping):
        return {score.planet: score for score in scores.values()}
    return {score.planet: score for score in scores}


def _others_average(
    others: List[PlanetaryStrengthScore], settings: EngineSettings
) -> tuple[float, List[str], str]:
    """Mean of the others at or above the floor, else of all of them.

    An all-weak day stays low rather than taking the neutral default, which
    only applies when no other bodies were supplied.
    """

    if not others:
        return float(settings.neutral_others_default), [], "neutral_default"
    strong = [s for s in others if s.final_power >= settings.weak_power_floor]
    if strong:
        return sum(s.final_power for s in strong) / len(strong), [s.planet for s in strong], "filtered"
    return sum(s.final_power for s in others) / len(others), [s.planet for s in others], "unfiltered"


def compute_breakdown(
    scores: Scores,
    weekday: Union[str, int, date],
    settings: Optional[EngineSettings] = None,
) -> TimingScoreBreakdown:
    """Weighted composite of the day ruler, the Moon and the remaining bodies.

    The others are every supplied body except the day ruler and the Moon, so
    on a Monday six bodies enter the others average.
    """

    settings = settings or get_settings()
    by_planet = _by_planet(scores)
    day_ruler = WEEKDAY_RULERS[normalize_weekday(weekday)]

    for required in {day_ruler, "Moon"}:
        if required not in by_planet:
            raise EngineValidationError(f"Missing strength score for {required}")

    ruler_power = by_planet[day_ruler].final_power
    moon_power = by_planet["Moon"].final_power
    # Fixed order keeps the float sum independent of the caller's ordering.
    others = [by_planet[p] for p in PLANETS if p in by_planet and p not in (day_ruler, "Moon")]
    others_average, others_used, others_source = _others_average(others, settings)

    ruler_part = ruler_power * DAY_RULER_WEIGHT
    moon_part = moon_power * MOON_WEIGHT
    others_part = others_average * OTHERS_WEIGHT
    total = max(0, min(100, round_half_up(ruler_part + moon_part + others_part)))

    return TimingScoreBreakdown(
        day_ruler=day_ruler,
        day_ruler_power=ruler_power,
        day_ruler_contribution=round(ruler_part, 2),
        moon_power=moon_power,
        moon_contribution=round(moon_part, 2),
        others_average=round(others_average, 2),
        others_contribution=round(others_part, 2),
        others_used=others_used,
        others_source=others_source,
        total_score=total,
    )


def timing_quality(total: int) -> str:
    if total >= 70:
        return "favorable"
    if total >= 40:
        return "neutral"
    return "delicate"


def cycle_state(total: int) -> str:
    if total >= 75:
        return "growth_expansion"
    if total >= 55:
        return "initiation"
    if total >= 40:
        return "review_restraint"
    return "completion_closure"


def guidance_level(quality: str, cycle: str) -> str:
    if quality == "delicate":
        return "observe"
    if quality == "favorable":
        return "act" if cycle in ACTION_CYCLES else "slow"
    return "slow" if cycle in ACTION_CYCLES else "observe"


def score_day(
    scores: Scores,
    weekday: Union[str, int, date],
    settings: Optional[EngineSettings] = None,
) -> DailyTiming:
    breakdown = compute_breakdown(scores, weekday, settings)
    quality = timing_quality(breakdown.total_score)
    cycle = cycle_state(breakdown.total_score)
    logger.debug(
        "daily_timing_scored",
        extra={"total_score": breakdown.total_score, "others_source": breakdown.others_source},
    )
    return DailyTiming(
        weekday=normalize_weekday(weekday),
        breakdown=breakdown,
        cycle_state=cycle,
        timing_quality=quality,
        guidance_level=guidance_level(quality, cycle),
    )


def analyze_day(scores: Scores) -> DailyPlanetaryAnalysis:
    """Pick the best bodies for outer and inner work and collect warnings.

    Ties go to the body listed first in weekday-independent planet order. The
    inner-work pick skips the body already chosen for outer work when another
    inner-suitable body exists.
    """

    by_planet = _by_planet(scores)
    ordered = [by_planet[p] for p in PLANETS if p in by_planet]

    outer = [s for s in ordered if s.suitability.outer]
    best_outer = max(outer, key=lambda s: s.final_power) if outer else None

    inner = [s for s in ordered if s.suitability.inner]
    if best_outer is not None and len(inner) > 1:
        inner = [s for s in inner if s.planet != best_outer.planet]
    best_inner = max(inner, key=lambda s: s.final_power) if inner else None

    critical: List[str] = []
    for score in ordered:
        for code in score.warnings:
            if code in CRITICAL_WARNING_CODES:
                critical.append(f"{score.planet}: {code}")

    return DailyPlanetaryAnalysis(
        best_for_outer_work=best_outer.planet if best_outer else None,
        best_for_inner_work=best_inner.planet if best_inner else None,
        planets_to_avoid=[s.planet for s in ordered if s.final_power < AVOID_BELOW],
        critical_warnings=critical[:MAX_CRITICAL_WARNINGS],
    )


__all__ = [
    "analyze_day",
    "compute_breakdown",
    "cycle_state",
    "guidance_level",
    "score_day",
    "timing_quality",
]
