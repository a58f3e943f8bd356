"""Stateless, reproducible content selection.

A pick depends only on the candidate list, the criteria and a seed string such
as ``"2026-03-14-patience"``. The seed is reduced with the 32-bit polynomial
rolling hash used by the mobile clients (``hash * 31 + code_unit`` over UTF-16
code units, wrapped to signed 32-bit), so every platform lands on the same
candidate for the same day.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Sequence, TypeVar

from ..errors import EmptyCandidateSetError
from ..schemas.timing import ContentCandidate, ContentSelection, SelectionCriteria

logger = logging.getLogger(__name__)

T = TypeVar("T")

GENERAL_TAG = "general"

REFLECTION_PROMPTS: Dict[str, tuple[str, ...]] = {
    "favorable": (
        "Read this passage slowly. What word resonates with you today?",
        "Reflect on how this passage speaks to clarity and mindful action.",
        "Consider what wisdom this passage offers for your current path.",
    ),
    "neutral": (
        "What does this passage invite you to consider today?",
        "Reflect on balance, patience, and attentive observation.",
        "Notice which part of this passage draws your attention.",
    ),
    "delicate": (
        "Read this passage with patience. What comfort does it offer?",
        "Reflect on trust, stillness, and careful contemplation.",
        "Consider how this passage speaks to wisdom in waiting.",
    ),
}


def seed_hash(seed: str) -> int:
    """Absolute value of the signed 32-bit rolling hash of ``seed``."""

    raw = seed.encode("utf-16-le", "surrogatepass")
    value = 0
    for i in range(0, len(raw), 2):
        code_unit = raw[i] | (raw[i + 1] << 8)
        value = (value * 31 + code_unit) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return abs(value)


def seed_for(day: date, category: str) -> str:
    return f"{day.isoformat()}-{category}"


def choose(items: Sequence[T], seed: str) -> T:
    if not items:
        raise EmptyCandidateSetError()
    return items[seed_hash(seed) % len(items)]


def score_candidate(candidate: ContentCandidate, criteria: SelectionCriteria) -> int:
    score = sum(criteria.tag_weights.get(tag, 1) for tag in candidate.tags & criteria.tags)
    if criteria.element is not None and criteria.element in candidate.element_affinities:
        score += criteria.element_weight
    if GENERAL_TAG in candidate.tags:
        score += criteria.general_weight
    return score


def select_content(
    candidates: Sequence[ContentCandidate],
    criteria: SelectionCriteria,
    seed: str,
) -> ContentSelection:
    """Pick one candidate among those sharing the highest score.

    Tied candidates keep their input order, so the result is a pure function
    of the arguments.
    """

    if not candidates:
        raise EmptyCandidateSetError()

    scored = [(score_candidate(c, criteria), c) for c in candidates]
    best = max(score for score, _ in scored)
    top: List[ContentCandidate] = [c for score, c in scored if score == best]

    hashed = seed_hash(seed)
    index = hashed % len(top)
    chosen = top[index]
    logger.debug(
        "content_selected",
        extra={"candidate_id": chosen.id, "score": best, "tied": len(top), "seed": seed},
    )
    return ContentSelection(
        candidate=chosen,
        score=best,
        tied_candidates=len(top),
        seed=seed,
        seed_hash=hashed,
        index=index,
    )


def reflection_prompt(timing_quality: str, seed: str) -> str:
    return choose(REFLECTION_PROMPTS[timing_quality], seed)


__all__ = [
    "REFLECTION_PROMPTS",
    "choose",
    "reflection_prompt",
    "score_candidate",
    "seed_for",
    "seed_hash",
    "select_content",
]
