"""
Workout Catalog

Static knowledge about workout kinds: titles, base descriptions, intensity,
and the progressive interval sessions for each race distance. Numeric tables
(mix ratios, offsets, fractions) are read from the PlanPolicy.

Usage:
    catalog = WorkoutCatalog()
    catalog.title(WorkoutType.TEMPO)                    # "Tempo Run"
    catalog.describe_workout(WorkoutType.EASY, 8, "6:10/km")
    interval_set = catalog.select_interval_set(Distance.TEN_K, 9, PhaseType.PEAK)
"""

from typing import Dict, List, NamedTuple, Optional

from .constants import (
    Distance,
    ExperienceLevel,
    PhaseType,
    WorkoutType,
    NON_RUNNING_TYPES,
)
from .models import IntervalSpec
from .policy import DEFAULT_POLICY, PlanPolicy


WORKOUT_DESCRIPTIONS: Dict[WorkoutType, Dict[str, str]] = {
    WorkoutType.EASY: {
        "title": "Easy Run",
        "description": "Comfortable, conversational pace. Focus on building aerobic base and recovery.",
    },
    WorkoutType.LONG: {
        "title": "Long Run",
        "description": "Steady endurance run at easy to moderate pace. Build stamina and mental toughness.",
    },
    WorkoutType.TEMPO: {
        "title": "Tempo Run",
        "description": "Comfortably hard effort. Improves lactate threshold and race pace endurance.",
    },
    WorkoutType.INTERVALS: {
        "title": "Interval Training",
        "description": "Hard efforts with recovery periods. Builds speed and VO2 max capacity.",
    },
    WorkoutType.HILLS: {
        "title": "Hill Repeats",
        "description": "Uphill efforts with recovery jogs. Builds strength and power.",
    },
    WorkoutType.FARTLEK: {
        "title": "Fartlek Run",
        "description": "Unstructured speed play. Mix of fast and slow segments for fun and fitness.",
    },
    WorkoutType.RECOVERY: {
        "title": "Recovery Run",
        "description": "Very easy pace to promote active recovery. Keep effort minimal.",
    },
    WorkoutType.RACE_PACE: {
        "title": "Race Pace Run",
        "description": "Practice running at goal race pace. Build confidence and muscle memory.",
    },
    WorkoutType.REST: {
        "title": "Rest Day",
        "description": "Complete rest or light stretching. Allow body to recover and adapt.",
    },
    WorkoutType.CROSS_TRAINING: {
        "title": "Cross Training",
        "description": "Low-impact activity like cycling, swimming, or strength training.",
    },
}


class IntervalSet(NamedTuple):
    """Repetition count x interval distance, with a recovery jog distance (km)."""
    count: int
    distance: float
    recovery_distance: float

    @property
    def total_distance(self) -> float:
        return round(self.count * self.distance, 1)


def _format_km(value: float) -> str:
    return f"{value:g}km"


class WorkoutCatalog:
    """
    Lookup and description helpers over the workout tables.
    """

    def __init__(self, policy: PlanPolicy = DEFAULT_POLICY):
        self.policy = policy

    def title(self, workout_type: WorkoutType) -> str:
        return WORKOUT_DESCRIPTIONS[WorkoutType(workout_type)]["title"]

    def base_description(self, workout_type: WorkoutType) -> str:
        return WORKOUT_DESCRIPTIONS[WorkoutType(workout_type)]["description"]

    def intensity(self, workout_type: WorkoutType) -> int:
        return self.policy.workout_intensity[WorkoutType(workout_type)]

    def pace_offset(self, workout_type: WorkoutType) -> int:
        return self.policy.pace_offsets[WorkoutType(workout_type)]

    def phase_mix(self, phase: PhaseType) -> Dict[str, float]:
        """Target share of the week per workout kind for a phase."""
        return dict(self.policy.phase_workout_mix[PhaseType(phase)])

    def long_run_fraction(self, phase: PhaseType) -> float:
        return self.policy.long_run_fraction[PhaseType(phase)]

    def tempo_fraction(self, experience_level: ExperienceLevel) -> float:
        return self.policy.tempo_fraction[ExperienceLevel(experience_level)]

    def interval_sets(self, distance: Distance) -> List[IntervalSet]:
        """Interval sessions for a distance, easiest first."""
        return [IntervalSet(**s) for s in self.policy.interval_sets[Distance(distance)]]

    def select_interval_set(
        self,
        distance: Distance,
        week_number: int,
        phase: PhaseType,
    ) -> IntervalSet:
        """
        Pick the interval session for a week.

        Build weeks always get the easiest set; peak weeks alternate between
        the middle set (even weeks) and the hardest set (odd weeks).
        """
        sets = self.interval_sets(distance)
        if PhaseType(phase) == PhaseType.PEAK and len(sets) >= 3:
            return sets[1] if week_number % 2 == 0 else sets[2]
        return sets[0]

    def describe_workout(
        self,
        workout_type: WorkoutType,
        distance_km: Optional[float] = None,
        pace: Optional[str] = None,
        intervals: Optional[IntervalSpec] = None,
    ) -> str:
        """Compose a human-readable sentence for a workout."""
        workout_type = WorkoutType(workout_type)
        base = self.base_description(workout_type)

        if workout_type == WorkoutType.INTERVALS and intervals:
            return (
                f"{intervals.count}x {_format_km(intervals.distance_km)} at {intervals.pace} "
                f"with {intervals.recovery} recovery. {base}"
            )

        if distance_km and pace and workout_type not in NON_RUNNING_TYPES:
            return f"{_format_km(distance_km)} at {pace}. {base}"

        return base
