from __future__ import annotations

import math
from datetime import date

from ..errors import CoordinateRangeError, UnknownElementError, UnknownPlanetError

SIGN_NAMES = ["Aries","Taurus","Gemini","Cancer","Leo","Virgo","Libra","Scorpio","Sagittarius","Capricorn","Aquarius","Pisces"]

SIGN_ELEMENTS = ["fire","earth","air","water"] * 3

ELEMENTS = ("fire", "water", "air", "earth")

# Chaldean order, slowest to fastest.
CHALDEAN_ORDER = ["Saturn", "Jupiter", "Mars", "Sun", "Venus", "Mercury", "Moon"]

PLANETS = ["Sun", "Moon", "Mercury", "Venus", "Mars", "Jupiter", "Saturn"]

WEEKDAY_RULERS = {
    "Sunday": "Sun",
    "Monday": "Moon",
    "Tuesday": "Mars",
    "Wednesday": "Mercury",
    "Thursday": "Jupiter",
    "Friday": "Venus",
    "Saturday": "Saturn",
}

# date.weekday() order
WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

PLANET_ELEMENTS = {
    "Sun": "fire",
    "Moon": "water",
    "Mars": "fire",
    "Mercury": "air",
    "Jupiter": "air",
    "Venus": "earth",
    "Saturn": "earth",
}

_PLANET_LOOKUP = {name.lower(): name for name in PLANETS}


def normalize_planet(value: str) -> str:
    if not isinstance(value, str):
        raise UnknownPlanetError(value)
    planet = _PLANET_LOOKUP.get(value.strip().lower())
    if planet is None:
        raise UnknownPlanetError(value)
    return planet


def normalize_element(value: str) -> str:
    if not isinstance(value, str):
        raise UnknownElementError(value)
    element = value.strip().lower()
    if element not in ELEMENTS:
        raise UnknownElementError(value)
    return element


def normalize_weekday(value: str | int | date) -> str:
    """Accept a weekday name, a ``date.weekday()`` index or a date."""

    if isinstance(value, date):
        return WEEKDAY_NAMES[value.weekday()]
    if isinstance(value, int) and not isinstance(value, bool):
        if 0 <= value <= 6:
            return WEEKDAY_NAMES[value]
    elif isinstance(value, str):
        name = value.strip().capitalize()
        if name in WEEKDAY_RULERS:
            return name
    raise CoordinateRangeError(f"Unrecognised weekday: {value!r}")


def validate_longitude(lon: float) -> float:
    if isinstance(lon, bool) or not isinstance(lon, (int, float)) or not math.isfinite(lon):
        raise CoordinateRangeError(f"Longitude must be a finite number, got {lon!r}")
    if not 0.0 <= lon < 360.0:
        raise CoordinateRangeError(f"Longitude must lie in [0, 360), got {lon!r}")
    return float(lon)


def validate_sign_index(index: int) -> int:
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index <= 11:
        raise CoordinateRangeError(f"Sign index must be an integer in [0, 11], got {index!r}")
    return index


def validate_sign_degree(degree: float) -> float:
    if isinstance(degree, bool) or not isinstance(degree, (int, float)) or not math.isfinite(degree):
        raise CoordinateRangeError(f"Sign degree must be a finite number, got {degree!r}")
    if not 0.0 <= degree < 30.0:
        raise CoordinateRangeError(f"Sign degree must lie in [0, 30), got {degree!r}")
    return float(degree)


def sign_index_from_lon(lon: float) -> int:
    return int(lon // 30) % 12

def sign_degree_from_lon(lon: float) -> float:
    # float modulo is exact, so this always agrees with sign_index_from_lon
    return lon % 30.0

def sign_element(sign_index: int) -> str:
    return SIGN_ELEMENTS[sign_index % 12]

def fmt_deg(lon: float) -> str:
    """Position label such as ``"Taurus 15°30′00″"``."""
    total_seconds = int(sign_degree_from_lon(lon) * 3600)
    deg, rest = divmod(total_seconds, 3600)
    mins, secs = divmod(rest, 60)
    return f"{SIGN_NAMES[sign_index_from_lon(lon)]} {deg:02d}°{mins:02d}′{secs:02d}″"

def round_half_up(value: float) -> int:
    # builtin round() is banker's rounding; scores round .5 upwards
    return int(math.floor(value + 0.5))
