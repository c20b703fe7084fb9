"""
Plan Policy

Every table the generator consults (peak mileage targets, minimum weeks,
phase splits, pace offsets, run-day patterns, ...) lives on one immutable
PlanPolicy value. DEFAULT_POLICY holds the shipped numbers; ConfigService
layers YAML overrides on top and hands back a new policy.

Usage:
    policy = DEFAULT_POLICY
    targets = policy.peak_mileage_targets[Distance.MARATHON][ExperienceLevel.BEGINNER]

    tweaked = DEFAULT_POLICY.with_overrides({"recovery_week_reduction": 0.25})
"""

import copy
from dataclasses import dataclass, fields
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

from .constants import (
    Distance,
    ExperienceLevel,
    PhaseType,
    WorkoutType,
    LongRunDay,
)


# Peak weekly km by distance and experience
PEAK_MILEAGE_TARGETS = {
    Distance.FIVE_K: {
        ExperienceLevel.BEGINNER: {"min": 25, "max": 35},
        ExperienceLevel.INTERMEDIATE: {"min": 35, "max": 45},
        ExperienceLevel.ADVANCED: {"min": 45, "max": 55},
    },
    Distance.TEN_K: {
        ExperienceLevel.BEGINNER: {"min": 35, "max": 45},
        ExperienceLevel.INTERMEDIATE: {"min": 45, "max": 55},
        ExperienceLevel.ADVANCED: {"min": 55, "max": 70},
    },
    Distance.HALF: {
        ExperienceLevel.BEGINNER: {"min": 45, "max": 60},
        ExperienceLevel.INTERMEDIATE: {"min": 60, "max": 75},
        ExperienceLevel.ADVANCED: {"min": 75, "max": 90},
    },
    Distance.MARATHON: {
        ExperienceLevel.BEGINNER: {"min": 60, "max": 75},
        ExperienceLevel.INTERMEDIATE: {"min": 75, "max": 90},
        ExperienceLevel.ADVANCED: {"min": 90, "max": 110},
    },
}

MIN_WEEKS_REQUIRED = {
    Distance.FIVE_K: {
        ExperienceLevel.BEGINNER: 6,
        ExperienceLevel.INTERMEDIATE: 8,
        ExperienceLevel.ADVANCED: 10,
    },
    Distance.TEN_K: {
        ExperienceLevel.BEGINNER: 8,
        ExperienceLevel.INTERMEDIATE: 10,
        ExperienceLevel.ADVANCED: 12,
    },
    Distance.HALF: {
        ExperienceLevel.BEGINNER: 10,
        ExperienceLevel.INTERMEDIATE: 12,
        ExperienceLevel.ADVANCED: 14,
    },
    Distance.MARATHON: {
        ExperienceLevel.BEGINNER: 16,
        ExperienceLevel.INTERMEDIATE: 16,
        ExperienceLevel.ADVANCED: 18,
    },
}

RECOMMENDED_WEEKS = {
    Distance.FIVE_K: {
        ExperienceLevel.BEGINNER: 8,
        ExperienceLevel.INTERMEDIATE: 10,
        ExperienceLevel.ADVANCED: 12,
    },
    Distance.TEN_K: {
        ExperienceLevel.BEGINNER: 10,
        ExperienceLevel.INTERMEDIATE: 12,
        ExperienceLevel.ADVANCED: 14,
    },
    Distance.HALF: {
        ExperienceLevel.BEGINNER: 12,
        ExperienceLevel.INTERMEDIATE: 14,
        ExperienceLevel.ADVANCED: 16,
    },
    Distance.MARATHON: {
        ExperienceLevel.BEGINNER: 18,
        ExperienceLevel.INTERMEDIATE: 18,
        ExperienceLevel.ADVANCED: 20,
    },
}

# Share of total weeks per phase. Taper gets whatever rounding leaves over.
PHASE_SPLITS = {
    Distance.FIVE_K: {
        ExperienceLevel.BEGINNER: {PhaseType.BASE: 0.40, PhaseType.BUILD: 0.40, PhaseType.PEAK: 0.10, PhaseType.TAPER: 0.10},
        ExperienceLevel.INTERMEDIATE: {PhaseType.BASE: 0.30, PhaseType.BUILD: 0.40, PhaseType.PEAK: 0.20, PhaseType.TAPER: 0.10},
        ExperienceLevel.ADVANCED: {PhaseType.BASE: 0.25, PhaseType.BUILD: 0.40, PhaseType.PEAK: 0.25, PhaseType.TAPER: 0.10},
    },
    Distance.TEN_K: {
        ExperienceLevel.BEGINNER: {PhaseType.BASE: 0.40, PhaseType.BUILD: 0.35, PhaseType.PEAK: 0.15, PhaseType.TAPER: 0.10},
        ExperienceLevel.INTERMEDIATE: {PhaseType.BASE: 0.35, PhaseType.BUILD: 0.35, PhaseType.PEAK: 0.20, PhaseType.TAPER: 0.10},
        ExperienceLevel.ADVANCED: {PhaseType.BASE: 0.30, PhaseType.BUILD: 0.35, PhaseType.PEAK: 0.25, PhaseType.TAPER: 0.10},
    },
    Distance.HALF: {
        ExperienceLevel.BEGINNER: {PhaseType.BASE: 0.45, PhaseType.BUILD: 0.30, PhaseType.PEAK: 0.15, PhaseType.TAPER: 0.10},
        ExperienceLevel.INTERMEDIATE: {PhaseType.BASE: 0.35, PhaseType.BUILD: 0.35, PhaseType.PEAK: 0.20, PhaseType.TAPER: 0.10},
        ExperienceLevel.ADVANCED: {PhaseType.BASE: 0.30, PhaseType.BUILD: 0.40, PhaseType.PEAK: 0.20, PhaseType.TAPER: 0.10},
    },
    Distance.MARATHON: {
        ExperienceLevel.BEGINNER: {PhaseType.BASE: 0.40, PhaseType.BUILD: 0.35, PhaseType.PEAK: 0.15, PhaseType.TAPER: 0.10},
        ExperienceLevel.INTERMEDIATE: {PhaseType.BASE: 0.35, PhaseType.BUILD: 0.35, PhaseType.PEAK: 0.20, PhaseType.TAPER: 0.10},
        ExperienceLevel.ADVANCED: {PhaseType.BASE: 0.30, PhaseType.BUILD: 0.35, PhaseType.PEAK: 0.25, PhaseType.TAPER: 0.10},
    },
}

# Seconds/km added to race pace. Rest and cross-training have no pace at all.
PACE_OFFSETS = {
    WorkoutType.EASY: 60,
    WorkoutType.LONG: 45,
    WorkoutType.TEMPO: 10,
    WorkoutType.INTERVALS: -5,
    WorkoutType.HILLS: 0,
    WorkoutType.FARTLEK: 0,
    WorkoutType.RECOVERY: 90,
    WorkoutType.RACE_PACE: 0,
    WorkoutType.REST: 0,
    WorkoutType.CROSS_TRAINING: 0,
}

# Target share of the week per workout kind, by phase
PHASE_WORKOUT_MIX = {
    PhaseType.BASE: {"easy": 0.60, "tempo": 0.15, "intervals": 0.0, "hills": 0.05, "recovery": 0.10, "long": 0.10},
    PhaseType.BUILD: {"easy": 0.45, "tempo": 0.20, "intervals": 0.15, "hills": 0.10, "recovery": 0.05, "long": 0.05},
    PhaseType.PEAK: {"easy": 0.40, "tempo": 0.20, "intervals": 0.20, "hills": 0.10, "recovery": 0.05, "long": 0.05},
    PhaseType.TAPER: {"easy": 0.50, "tempo": 0.10, "intervals": 0.10, "hills": 0.0, "recovery": 0.20, "long": 0.10},
}

# 0-10 scale
WORKOUT_INTENSITY = {
    WorkoutType.EASY: 3,
    WorkoutType.LONG: 5,
    WorkoutType.TEMPO: 7,
    WorkoutType.INTERVALS: 9,
    WorkoutType.HILLS: 8,
    WorkoutType.FARTLEK: 7,
    WorkoutType.RECOVERY: 2,
    WorkoutType.RACE_PACE: 8,
    WorkoutType.REST: 0,
    WorkoutType.CROSS_TRAINING: 4,
}

# Ordered easiest -> hardest
INTERVAL_SETS = {
    Distance.FIVE_K: [
        {"count": 8, "distance": 0.4, "recovery_distance": 0.2},
        {"count": 6, "distance": 0.8, "recovery_distance": 0.4},
        {"count": 4, "distance": 1.0, "recovery_distance": 0.4},
    ],
    Distance.TEN_K: [
        {"count": 6, "distance": 1.0, "recovery_distance": 0.4},
        {"count": 4, "distance": 1.6, "recovery_distance": 0.8},
        {"count": 3, "distance": 2.0, "recovery_distance": 0.8},
    ],
    Distance.HALF: [
        {"count": 4, "distance": 2.0, "recovery_distance": 0.8},
        {"count": 3, "distance": 3.0, "recovery_distance": 1.0},
        {"count": 2, "distance": 5.0, "recovery_distance": 1.0},
    ],
    Distance.MARATHON: [
        {"count": 3, "distance": 3.0, "recovery_distance": 1.0},
        {"count": 2, "distance": 5.0, "recovery_distance": 1.0},
        {"count": 2, "distance": 8.0, "recovery_distance": 2.0},
    ],
}

# Share of weekly volume
TEMPO_FRACTION = {
    ExperienceLevel.BEGINNER: 0.15,
    ExperienceLevel.INTERMEDIATE: 0.20,
    ExperienceLevel.ADVANCED: 0.25,
}

LONG_RUN_FRACTION = {
    PhaseType.BASE: 0.35,
    PhaseType.BUILD: 0.30,
    PhaseType.PEAK: 0.28,
    PhaseType.TAPER: 0.25,
}

# Run days (1=Monday .. 7=Sunday) by training days per week and long-run day.
# The long-run day is always part of its own pattern.
RUN_DAY_PATTERNS = {
    3: {LongRunDay.SATURDAY: [2, 4, 6], LongRunDay.SUNDAY: [2, 4, 7]},
    4: {LongRunDay.SATURDAY: [2, 4, 5, 6], LongRunDay.SUNDAY: [2, 4, 6, 7]},
    5: {LongRunDay.SATURDAY: [1, 3, 4, 5, 6], LongRunDay.SUNDAY: [1, 3, 5, 6, 7]},
    6: {LongRunDay.SATURDAY: [1, 2, 3, 4, 5, 6], LongRunDay.SUNDAY: [1, 2, 3, 5, 6, 7]},
    7: {LongRunDay.SATURDAY: [1, 2, 3, 4, 5, 6, 7], LongRunDay.SUNDAY: [1, 2, 3, 4, 5, 6, 7]},
}


# Key types per nested level, used to rebuild enum keys from YAML/JSON data
_KEY_TYPES = {
    "peak_mileage_targets": (Distance, ExperienceLevel),
    "min_weeks_required": (Distance, ExperienceLevel),
    "recommended_weeks": (Distance, ExperienceLevel),
    "phase_splits": (Distance, ExperienceLevel, PhaseType),
    "pace_offsets": (WorkoutType,),
    "phase_workout_mix": (PhaseType,),
    "workout_intensity": (WorkoutType,),
    "interval_sets": (Distance,),
    "tempo_fraction": (ExperienceLevel,),
    "long_run_fraction": (PhaseType,),
    "run_day_patterns": (int, LongRunDay),
}


def _convert_keys(value: Any, key_types: Tuple[type, ...]) -> Any:
    if not key_types or not isinstance(value, Mapping):
        return value
    key_type, rest = key_types[0], key_types[1:]
    return {key_type(k): _convert_keys(v, rest) for k, v in value.items()}


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    """Plain dict/list copy with enum keys flattened to their values."""
    if isinstance(value, Mapping):
        return {
            (k.value if hasattr(k, "value") else k): _thaw(v)
            for k, v in value.items()
        }
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


def _deep_merge(base: Dict[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


@dataclass(frozen=True)
class PlanPolicy:
    """All table-driven policy for plan generation."""

    peak_mileage_targets: Mapping
    min_weeks_required: Mapping
    recommended_weeks: Mapping
    phase_splits: Mapping
    pace_offsets: Mapping
    phase_workout_mix: Mapping
    workout_intensity: Mapping
    interval_sets: Mapping
    tempo_fraction: Mapping
    long_run_fraction: Mapping
    run_day_patterns: Mapping

    # Volume progression
    max_weekly_increase: float = 0.10
    recovery_week_reduction: float = 0.20
    recovery_week_frequency: int = 4  # every Nth plan week
    building_weeks_fraction: float = 0.70
    # Chronological order over the last len() weeks before the race
    taper_ratios: Tuple[float, ...] = (0.75, 0.60, 0.50)

    # Workout assignment
    hill_fraction: float = 0.10
    min_easy_run_km: float = 5.0

    # Input limits
    fastest_goal_pace_seconds: int = 210   # 3:30/km
    slowest_goal_pace_seconds: int = 600   # 10:00/km
    min_weeks_until_race: int = 4
    max_weekly_volume_km: float = 200.0
    min_training_days: int = 3
    max_training_days: int = 7

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PlanPolicy":
        """Build a policy from plain (YAML/JSON style) data."""
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for name, value in data.items():
            if name not in known:
                raise ValueError(f"Unknown plan policy key: {name}")
            if name in _KEY_TYPES:
                value = _freeze(_convert_keys(value, _KEY_TYPES[name]))
            elif name == "taper_ratios":
                value = tuple(float(v) for v in value)
            kwargs[name] = value
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Plain nested dict with string keys (YAML/JSON friendly)."""
        return {f.name: _thaw(getattr(self, f.name)) for f in fields(self)}

    def with_overrides(self, overrides: Mapping[str, Any]) -> "PlanPolicy":
        """Return a new policy with ``overrides`` deep-merged over this one."""
        return PlanPolicy.from_dict(_deep_merge(self.to_dict(), overrides))


DEFAULT_POLICY = PlanPolicy(
    peak_mileage_targets=_freeze(PEAK_MILEAGE_TARGETS),
    min_weeks_required=_freeze(MIN_WEEKS_REQUIRED),
    recommended_weeks=_freeze(RECOMMENDED_WEEKS),
    phase_splits=_freeze(PHASE_SPLITS),
    pace_offsets=_freeze(PACE_OFFSETS),
    phase_workout_mix=_freeze(PHASE_WORKOUT_MIX),
    workout_intensity=_freeze(WORKOUT_INTENSITY),
    interval_sets=_freeze(INTERVAL_SETS),
    tempo_fraction=_freeze(TEMPO_FRACTION),
    long_run_fraction=_freeze(LONG_RUN_FRACTION),
    run_day_patterns=_freeze(RUN_DAY_PATTERNS),
)
