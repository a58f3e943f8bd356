"""Elemental alignment between a user profile and the current moment."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from ..config import EngineSettings, get_settings
from ..errors import EngineValidationError
from ..schemas.timing import AlignedWindow, AlignmentResult, ElementalProfile, PlanetaryHourWindow
from .constants import PLANET_ELEMENTS, normalize_element, normalize_planet

# Interaction matrix; lookups are symmetric.
ELEMENT_INTERACTION: Dict[Tuple[str, str], str] = {
    ("fire", "fire"): "same",
    ("fire", "air"): "supportive",
    ("fire", "earth"): "neutral",
    ("fire", "water"): "opposing",
    ("air", "air"): "same",
    ("air", "earth"): "opposing",
    ("air", "water"): "neutral",
    ("earth", "earth"): "same",
    ("earth", "water"): "supportive",
    ("water", "water"): "same",
}

BASE_HARMONY = {"same": 100, "supportive": 80, "neutral": 60, "opposing": 25}
SECONDARY_BONUS = 5
MIN_HARMONY = 20
MAX_HARMONY = 100

SUGGESTED_ACTIONS = {
    "act": ["Initiate", "Decide", "Execute"],
    "flow": ["Continue", "Build", "Connect"],
    "hold": ["Wait", "Observe", "Prepare"],
    "rest": ["Reflect", "Journal", "Restore"],
}

ACTIVE_RULERS = {"Sun", "Mars", "Jupiter"}
RECEPTIVE_RULERS = {"Moon", "Venus"}


def element_interaction(a: str, b: str) -> str:
    a, b = normalize_element(a), normalize_element(b)
    return ELEMENT_INTERACTION.get((a, b)) or ELEMENT_INTERACTION[(b, a)]


def quality_for(score: int) -> str:
    if score >= 95:
        return "perfect"
    if score >= 70:
        return "strong"
    if score >= 50:
        return "moderate"
    if score >= 30:
        return "weak"
    return "opposing"


def harmony_score(user_element: str, moment_element: str, secondary: Optional[str] = None) -> int:
    score = BASE_HARMONY[element_interaction(user_element, moment_element)]
    if secondary is not None:
        relation = element_interaction(secondary, moment_element)
        if relation in ("same", "supportive"):
            score += SECONDARY_BONUS
        elif relation == "opposing":
            score -= SECONDARY_BONUS
    return max(MIN_HARMONY, min(MAX_HARMONY, score))


def resolve_user_element(
    profile: Optional[ElementalProfile],
    fallback_element: Optional[str] = None,
    settings: Optional[EngineSettings] = None,
) -> Tuple[str, Optional[str], str]:
    """Return ``(element, secondary, source)`` for the user.

    A profile always wins; a caller-derived fallback comes next, then the
    configured default.
    """

    if profile is not None:
        return profile.primary_element, profile.secondary_element, "primary"
    if fallback_element is not None:
        return normalize_element(fallback_element), None, "fallback"
    settings = settings or get_settings()
    return normalize_element(settings.default_element), None, "default"


def moment_state(interaction: str, user_element: str, moment_ruler: str) -> str:
    if interaction == "opposing" or moment_ruler == "Saturn":
        return "hold"
    if user_element in ("fire", "air") and moment_ruler in ACTIVE_RULERS:
        return "act"
    if user_element in ("water", "earth") and moment_ruler in RECEPTIVE_RULERS:
        return "rest"
    return "flow"


def align(
    profile: Optional[ElementalProfile] = None,
    *,
    hour_ruler: Optional[str] = None,
    day_ruler: Optional[str] = None,
    fallback_element: Optional[str] = None,
    settings: Optional[EngineSettings] = None,
) -> AlignmentResult:
    """Compare the user's element with the element of the current moment.

    The moment is the current planetary hour when ``hour_ruler`` is known,
    otherwise the day ruler.
    """

    if hour_ruler is not None:
        ruler, moment_source = normalize_planet(hour_ruler), "hour"
    elif day_ruler is not None:
        ruler, moment_source = normalize_planet(day_ruler), "day"
    else:
        raise EngineValidationError("Either hour_ruler or day_ruler is required")

    user_element, secondary, source = resolve_user_element(profile, fallback_element, settings)
    moment_element = PLANET_ELEMENTS[ruler]
    interaction = element_interaction(user_element, moment_element)
    score = harmony_score(user_element, moment_element, secondary)
    state = moment_state(interaction, user_element, ruler)

    return AlignmentResult(
        element_source=source,
        user_element=user_element,
        moment_element=moment_element,
        moment_source=moment_source,
        interaction=interaction,
        quality=quality_for(score),
        harmony_score=score,
        moment_state=state,
        suggested_actions=list(SUGGESTED_ACTIONS[state]),
    )


def annotate_windows(
    windows: Iterable[PlanetaryHourWindow],
    profile: Optional[ElementalProfile] = None,
    fallback_element: Optional[str] = None,
    settings: Optional[EngineSettings] = None,
) -> List[AlignedWindow]:
    user_element, secondary, _ = resolve_user_element(profile, fallback_element, settings)
    annotated: List[AlignedWindow] = []
    for window in windows:
        score = harmony_score(user_element, window.element, secondary)
        annotated.append(
            AlignedWindow(
                window=window,
                interaction=element_interaction(user_element, window.element),
                quality=quality_for(score),
                harmony_score=score,
            )
        )
    return annotated


__all__ = [
    "ELEMENT_INTERACTION",
    "align",
    "annotate_windows",
    "element_interaction",
    "harmony_score",
    "moment_state",
    "quality_for",
    "resolve_user_element",
]
