"""Immutable result models shared by every engine component."""

from __future__ import annotations

from datetime import datetime
from typing import FrozenSet, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from ..services.constants import (
    SIGN_NAMES,
    fmt_deg,
    normalize_element,
    sign_degree_from_lon,
    sign_element,
    sign_index_from_lon,
)

Planet = Literal["Sun", "Moon", "Mercury", "Venus", "Mars", "Jupiter", "Saturn"]
Element = Literal["fire", "water", "air", "earth"]
Confidence = Literal["exact", "interpolated", "synthetic"]
Dignity = Literal["rulership", "exaltation", "neutral", "detriment", "fall"]
DegreeStage = Literal["entry", "stabilization", "peak", "weakening"]
CycleState = Literal["initiation", "growth_expansion", "review_restraint", "completion_closure"]
TimingQuality = Literal["favorable", "neutral", "delicate"]
GuidanceLevel = Literal["act", "slow", "observe"]
ElementSource = Literal["primary", "fallback", "default"]
MomentSource = Literal["hour", "day"]
Interaction = Literal["same", "supportive", "neutral", "opposing"]
AlignmentQuality = Literal["perfect", "strong", "moderate", "weak", "opposing"]
MomentState = Literal["act", "flow", "hold", "rest"]
OthersSource = Literal["filtered", "unfiltered", "neutral_default"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class CelestialPosition(_Frozen):
    planet: Planet
    longitude: float = Field(ge=0.0, lt=360.0)
    retrograde: bool = False
    confidence: Confidence
    source_dates: List[str] = Field(default_factory=list)

    @computed_field
    @property
    def sign_index(self) -> int:
        return sign_index_from_lon(self.longitude)

    @computed_field
    @property
    def sign_degree(self) -> float:
        return sign_degree_from_lon(self.longitude)

    @computed_field
    @property
    def sign(self) -> str:
        return SIGN_NAMES[self.sign_index]

    @computed_field
    @property
    def element(self) -> str:
        return sign_element(self.sign_index)

    @computed_field
    @property
    def label(self) -> str:
        return fmt_deg(self.longitude)


class PlanetaryHourWindow(_Frozen):
    index: int = Field(ge=1, le=12)
    hour_number: int = Field(ge=1, le=24)
    is_daytime: bool
    ruling_planet: Planet
    element: Element
    start: datetime
    end: datetime

    @property
    def duration_seconds(self) -> float:
        return (self.end - self.start).total_seconds()

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end


class HourPosition(_Frozen):
    current: PlanetaryHourWindow
    next: Optional[PlanetaryHourWindow] = None
    elapsed_seconds: float
    remaining_seconds: float


class Suitability(_Frozen):
    outer: bool
    inner: bool


class PlanetaryStrengthScore(_Frozen):
    planet: Planet
    final_power: int = Field(ge=0, le=100)
    dignity: Dignity
    dignity_component: int
    combustion_penalty: int
    retrograde_modifier: int
    degree_stage: DegreeStage
    sun_distance: float
    warnings: List[str] = Field(default_factory=list)
    suitability: Suitability


class TimingScoreBreakdown(_Frozen):
    day_ruler: Planet
    day_ruler_power: int
    day_ruler_contribution: float
    moon_power: int
    moon_contribution: float
    others_average: float
    others_contribution: float
    others_used: List[Planet] = Field(default_factory=list)
    others_source: OthersSource
    total_score: int = Field(ge=0, le=100)


class DailyTiming(_Frozen):
    weekday: str
    breakdown: TimingScoreBreakdown
    cycle_state: CycleState
    timing_quality: TimingQuality
    guidance_level: GuidanceLevel


class DailyPlanetaryAnalysis(_Frozen):
    best_for_outer_work: Optional[Planet] = None
    best_for_inner_work: Optional[Planet] = None
    planets_to_avoid: List[Planet] = Field(default_factory=list)
    critical_warnings: List[str] = Field(default_factory=list)


class ElementalProfile(_Frozen):
    primary_element: Element
    secondary_element: Optional[Element] = None

    @field_validator("primary_element", "secondary_element", mode="before")
    @classmethod
    def _normalize(cls, value):
        if value is None:
            return value
        return normalize_element(value)


class AlignmentResult(_Frozen):
    element_source: ElementSource
    user_element: Element
    moment_element: Element
    moment_source: MomentSource
    interaction: Interaction
    quality: AlignmentQuality
    harmony_score: int = Field(ge=20, le=100)
    moment_state: MomentState
    suggested_actions: List[str] = Field(default_factory=list)


class AlignedWindow(_Frozen):
    window: PlanetaryHourWindow
    interaction: Interaction
    quality: AlignmentQuality
    harmony_score: int


class ContentCandidate(_Frozen):
    id: str
    tags: FrozenSet[str] = frozenset()
    element_affinities: FrozenSet[str] = frozenset()


class SelectionCriteria(_Frozen):
    tags: FrozenSet[str] = frozenset()
    tag_weights: dict[str, int] = Field(default_factory=dict)
    element: Optional[str] = None
    element_weight: int = 1
    general_weight: int = 0


class ContentSelection(_Frozen):
    candidate: ContentCandidate
    score: int
    tied_candidates: int
    seed: str
    seed_hash: int
    index: int


class MoonPhase(_Frozen):
    phase: Literal[
        "new",
        "waxing_crescent",
        "first_quarter",
        "waxing_gibbous",
        "full",
        "waning_gibbous",
        "last_quarter",
        "waning_crescent",
    ]
    elongation: float
    illumination: int = Field(ge=0, le=100)
    waxing: bool


class TimingSnapshot(_Frozen):
    """Read-only bundle handed to presentation layers and telemetry sinks."""

    generated_for: datetime
    weekday: str
    day_ruler: Planet
    positions: List[CelestialPosition]
    hour: HourPosition
    strengths: List[PlanetaryStrengthScore]
    daily_timing: DailyTiming
    analysis: DailyPlanetaryAnalysis
    alignment: AlignmentResult
    moon_phase: MoonPhase
    content: Optional[ContentSelection] = None
    reflection_prompt: Optional[str] = None
