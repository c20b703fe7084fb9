"""
Plan data model.

Inputs arrive from the multi-step wizard as three step records bundled in
PlanInputs. The generator returns a TrainingPlan; every value here is a
frozen dataclass so callers receive an immutable snapshot.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from .constants import (
    Distance,
    ExperienceLevel,
    PhaseType,
    WorkoutType,
    LongRunDay,
    TrainingPhilosophy,
    DAY_NAMES,
    QUALITY_TYPES,
)


@dataclass(frozen=True)
class GoalSelection:
    """Step 1: race goal."""
    distance: Optional[Distance]
    goal_hours: int
    goal_minutes: int
    goal_seconds: int
    race_date: Optional[date]

    @property
    def goal_time_seconds(self) -> int:
        return self.goal_hours * 3600 + self.goal_minutes * 60 + self.goal_seconds


@dataclass(frozen=True)
class RunnerProfile:
    """Step 2: current fitness. Volumes in km."""
    experience_level: Optional[ExperienceLevel]
    current_weekly_km: float
    longest_recent_run_km: float
    available_weeks: int


@dataclass(frozen=True)
class TrainingPreferences:
    """Step 3: scheduling preferences."""
    training_days_per_week: int
    long_run_day: LongRunDay = LongRunDay.SUNDAY
    include_cross_training: bool = False
    preferred_workouts: FrozenSet[WorkoutType] = frozenset()
    training_philosophy: TrainingPhilosophy = TrainingPhilosophy.BALANCED


@dataclass(frozen=True)
class PlanInputs:
    """Everything the wizard collects, handed over once."""
    goal: GoalSelection
    profile: RunnerProfile
    preferences: TrainingPreferences


@dataclass(frozen=True)
class IntervalSpec:
    """Structured speed session attached to an interval workout."""
    count: int
    distance_km: float
    pace: str
    recovery: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "distance": self.distance_km,
            "pace": self.pace,
            "recovery": self.recovery,
        }


@dataclass(frozen=True)
class Workout:
    """A single day's entry."""
    id: str  # assigned at generation, unchanged by edits
    day: int  # 1=Monday, 7=Sunday
    type: WorkoutType
    title: str
    description: str
    distance_km: Optional[float] = None
    pace: Optional[str] = None
    duration_minutes: Optional[int] = None
    intervals: Optional[IntervalSpec] = None
    notes: Optional[str] = None

    @property
    def day_name(self) -> str:
        return DAY_NAMES[self.day - 1]

    @property
    def is_rest(self) -> bool:
        return self.type == WorkoutType.REST

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "day": self.day,
            "day_name": self.day_name,
            "type": self.type.value,
            "title": self.title,
            "description": self.description,
            "distance": self.distance_km,
            "pace": self.pace,
            "duration": self.duration_minutes,
            "intervals": self.intervals.to_dict() if self.intervals else None,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class TrainingWeek:
    """One calendar week of the plan."""
    week_number: int
    weekly_volume_km: float
    phase: PhaseType
    workouts: Tuple[Workout, ...]
    notes: str = ""
    start_date: Optional[date] = None

    @property
    def planned_distance_km(self) -> float:
        """Sum of assigned workout distances (approximately the target volume)."""
        return round(sum(w.distance_km or 0 for w in self.workouts), 1)

    @property
    def run_days(self) -> List[int]:
        return [w.day for w in self.workouts if not w.is_rest]

    def get_workout(self, workout_id: str) -> Optional[Workout]:
        for w in self.workouts:
            if w.id == workout_id:
                return w
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "week_number": self.week_number,
            "weekly_volume": self.weekly_volume_km,
            "phase": self.phase.value,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "planned_distance": self.planned_distance_km,
            "notes": self.notes,
            "workouts": [w.to_dict() for w in self.workouts],
        }


@dataclass(frozen=True)
class TrainingPlan:
    """Complete generated training plan."""
    distance: Distance
    goal_time_seconds: int
    race_date: Optional[date]
    total_weeks: int
    experience_level: ExperienceLevel
    weeks: Tuple[TrainingWeek, ...] = field(default_factory=tuple)
    # Ceiling the volume curve builds toward (growth-capped, table-clamped)
    peak_target_km: float = 0.0

    @property
    def peak_volume_km(self) -> float:
        """Highest weekly target before taper (0 for an empty plan)."""
        volumes = [w.weekly_volume_km for w in self.weeks if w.phase != PhaseType.TAPER]
        if not volumes:
            volumes = [w.weekly_volume_km for w in self.weeks]
        return max(volumes) if volumes else 0.0

    @property
    def total_distance_km(self) -> float:
        return round(sum(w.planned_distance_km for w in self.weeks), 1)

    @property
    def quality_session_count(self) -> int:
        return sum(
            1 for week in self.weeks for w in week.workouts if w.type in QUALITY_TYPES
        )

    def get_week(self, week_number: int) -> Optional[TrainingWeek]:
        for week in self.weeks:
            if week.week_number == week_number:
                return week
        return None

    def get_phase_weeks(self, phase: PhaseType) -> List[int]:
        return [w.week_number for w in self.weeks if w.phase == phase]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "distance": self.distance.value,
            "goal_time": self.goal_time_seconds,
            "race_date": self.race_date.isoformat() if self.race_date else None,
            "total_weeks": self.total_weeks,
            "experience_level": self.experience_level.value,
            "peak_volume": self.peak_volume_km,
            "peak_target": self.peak_target_km,
            "total_distance": self.total_distance_km,
            "quality_sessions": self.quality_session_count,
            "weeks": [w.to_dict() for w in self.weeks],
        }
