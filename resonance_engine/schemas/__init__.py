from .timing import (
    AlignedWindow,
    AlignmentResult,
    CelestialPosition,
    ContentCandidate,
    ContentSelection,
    DailyPlanetaryAnalysis,
    DailyTiming,
    ElementalProfile,
    HourPosition,
    MoonPhase,
    PlanetaryHourWindow,
    PlanetaryStrengthScore,
    SelectionCriteria,
    Suitability,
    TimingScoreBreakdown,
    TimingSnapshot,
)
