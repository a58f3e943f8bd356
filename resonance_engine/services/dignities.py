from __future__ import annotations

from .constants import SIGN_NAMES, normalize_planet, validate_sign_index

RULERS = {
    "Aries": "Mars",
    "Taurus": "Venus",
    "Gemini": "Mercury",
    "Cancer": "Moon",
    "Leo": "Sun",
    "Virgo": "Mercury",
    "Libra": "Venus",
    "Scorpio": "Mars",
    "Sagittarius": "Jupiter",
    "Capricorn": "Saturn",
    "Aquarius": "Saturn",
    "Pisces": "Jupiter",
}
EXALT = {
    "Sun": "Aries",
    "Moon": "Taurus",
    "Mercury": "Virgo",
    "Venus": "Pisces",
    "Mars": "Capricorn",
    "Jupiter": "Cancer",
    "Saturn": "Libra",
}


def _opposite(sign: str) -> str:
    return SIGN_NAMES[(SIGN_NAMES.index(sign) + 6) % 12]


# Detriment is the sign opposite each ruled sign; fall is opposite the exaltation.
DETRIMENT = {}
for _sign, _planet in RULERS.items():
    DETRIMENT.setdefault(_planet, set()).add(_opposite(_sign))
FALL = {planet: _opposite(sign) for planet, sign in EXALT.items()}

DIGNITY_POINTS = {
    "rulership": 25,
    "exaltation": 15,
    "neutral": 0,
    "detriment": -15,
    "fall": -25,
}


def dignity_for(planet: str, sign_index: int) -> str:
    """Classify ``planet`` in the sign at ``sign_index``.

    Rulership wins over exaltation (Mercury in Virgo) and fall wins over
    detriment (Mercury in Pisces).
    """

    planet = normalize_planet(planet)
    sign = SIGN_NAMES[validate_sign_index(sign_index)]
    if RULERS[sign] == planet:
        return "rulership"
    if EXALT[planet] == sign:
        return "exaltation"
    if FALL[planet] == sign:
        return "fall"
    if sign in DETRIMENT[planet]:
        return "detriment"
    return "neutral"


__all__ = ["DETRIMENT", "DIGNITY_POINTS", "EXALT", "FALL", "RULERS", "dignity_for"]
