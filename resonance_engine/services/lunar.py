from __future__ import annotations

import math

from ..schemas.timing import CelestialPosition, MoonPhase
from .angles import normalize_longitude
from .constants import round_half_up, validate_longitude

# One label per 45° of elongation, starting at conjunction.
PHASES = [
    "new",
    "waxing_crescent",
    "first_quarter",
    "waxing_gibbous",
    "full",
    "waning_gibbous",
    "last_quarter",
    "waning_crescent",
]


def moon_phase(sun_longitude: float, moon_longitude: float) -> MoonPhase:
    """Approximate phase from the Moon's elongation east of the Sun."""

    sun = validate_longitude(sun_longitude)
    moon = validate_longitude(moon_longitude)
    elongation = normalize_longitude(moon - sun)
    illumination = round_half_up(50.0 * (1.0 - math.cos(math.radians(elongation))))
    return MoonPhase(
        phase=PHASES[int(elongation // 45.0) % 8],
        elongation=round(elongation, 4),
        illumination=max(0, min(100, illumination)),
        waxing=elongation < 180.0,
    )


def moon_phase_for(sun: CelestialPosition, moon: CelestialPosition) -> MoonPhase:
    return moon_phase(sun.longitude, moon.longitude)


__all__ = ["PHASES", "moon_phase", "moon_phase_for"]
