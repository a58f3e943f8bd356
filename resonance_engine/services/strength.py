"""Classical strength of one body in its current position.

``final_power = clamp(round(60 + dignity + combustion + retrograde), 0, 100)``.
Degree stage only contributes a warning, never points.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from ..errors import CoordinateRangeError
from ..schemas.timing import CelestialPosition, PlanetaryStrengthScore, Suitability
from .angles import angular_separation
from .constants import (
    normalize_planet,
    round_half_up,
    sign_degree_from_lon,
    sign_index_from_lon,
    validate_longitude,
    validate_sign_degree,
    validate_sign_index,
)
from .dignities import DIGNITY_POINTS, dignity_for

BASE_POWER = 60

COMBUST_ORB = 8.0
COMBUST_PENALTY = -25
BEAMS_ORB = 15.0
BEAMS_PENALTY = -10
RETROGRADE_PENALTY = -10
EARLY_DEGREE_LIMIT = 6.0
SIGN_DEGREE_TOLERANCE = 1e-6

OUTER_WORK_MIN = 60
INNER_WORK_MIN = 40

LUMINARIES = {"Sun", "Moon"}


def degree_stage(sign_degree: float) -> str:
    if sign_degree < 6.0:
        return "entry"
    if sign_degree < 15.0:
        return "stabilization"
    if sign_degree < 26.0:
        return "peak"
    return "weakening"


def combustion(planet: str, sun_distance: float) -> tuple[int, Optional[str]]:
    """Return the combustion penalty and its warning code, if any."""

    if planet in LUMINARIES:
        return 0, None
    if sun_distance < COMBUST_ORB:
        return COMBUST_PENALTY, "combust"
    if sun_distance < BEAMS_ORB:
        return BEAMS_PENALTY, "under_beams"
    return 0, None


def score_planet(
    planet: str,
    sign_index: int,
    sign_degree: float,
    longitude: float,
    sun_longitude: float,
    retrograde: bool = False,
    confidence: str = "exact",
) -> PlanetaryStrengthScore:
    planet = normalize_planet(planet)
    sign_index = validate_sign_index(sign_index)
    sign_degree = validate_sign_degree(sign_degree)
    longitude = validate_longitude(longitude)
    sun_longitude = validate_longitude(sun_longitude)
    # sign fields must agree with the longitude
    mismatch = abs(sign_degree - sign_degree_from_lon(longitude)) > SIGN_DEGREE_TOLERANCE
    if sign_index != sign_index_from_lon(longitude) or mismatch:
        raise CoordinateRangeError(
            f"Sign {sign_index} at {sign_degree} does not match longitude {longitude}"
        )

    warnings: List[str] = []

    dignity = dignity_for(planet, sign_index)
    dignity_component = DIGNITY_POINTS[dignity]
    if dignity in ("detriment", "fall"):
        warnings.append(dignity)

    sun_distance = angular_separation(longitude, sun_longitude)
    combustion_penalty, combust_code = combustion(planet, sun_distance)
    if combust_code:
        warnings.append(combust_code)

    if sign_degree < EARLY_DEGREE_LIMIT:
        warnings.append("just_entered_sign")

    retrograde_modifier = 0
    if retrograde and planet not in LUMINARIES:
        retrograde_modifier = RETROGRADE_PENALTY
        warnings.append("retrograde")

    if confidence == "synthetic":
        warnings.append("low_confidence_position")

    raw = BASE_POWER + dignity_component + combustion_penalty + retrograde_modifier
    final_power = max(0, min(100, round_half_up(raw)))

    return PlanetaryStrengthScore(
        planet=planet,
        final_power=final_power,
        dignity=dignity,
        dignity_component=dignity_component,
        combustion_penalty=combustion_penalty,
        retrograde_modifier=retrograde_modifier,
        degree_stage=degree_stage(sign_degree),
        sun_distance=round(sun_distance, 4),
        warnings=warnings,
        suitability=Suitability(
            outer=final_power >= OUTER_WORK_MIN,
            inner=final_power >= INNER_WORK_MIN,
        ),
    )


def score_position(position: CelestialPosition, sun_longitude: float) -> PlanetaryStrengthScore:
    return score_planet(
        position.planet,
        position.sign_index,
        position.sign_degree,
        position.longitude,
        sun_longitude,
        retrograde=position.retrograde,
        confidence=position.confidence,
    )


def score_positions(positions: Dict[str, CelestialPosition]) -> Dict[str, PlanetaryStrengthScore]:
    """Score every resolved body against the resolved Sun."""

    sun = positions["Sun"]
    return {planet: score_position(pos, sun.longitude) for planet, pos in positions.items()}


__all__ = [
    "BASE_POWER",
    "combustion",
    "degree_stage",
    "score_planet",
    "score_position",
    "score_positions",
]
