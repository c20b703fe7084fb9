"""
Pace Table

Converts a goal finish time into target paces for every workout type.
All paces are seconds per kilometer internally and "M:SS/km" strings
on the way out.

Usage:
    paces = all_training_paces(goal_seconds=4 * 3600, distance=Distance.MARATHON)
    paces[WorkoutType.EASY]   # "6:41/km"

    check = validate_goal_pace(15 * 60, Distance.FIVE_K)
    check.is_valid            # False - faster than 3:30/km
"""

import math
import re
from dataclasses import dataclass
from typing import Dict, Optional, Union

from .constants import (
    Distance,
    WorkoutType,
    DISTANCE_KM,
    NON_RUNNING_TYPES,
    NOT_APPLICABLE,
)
from .policy import DEFAULT_POLICY, PlanPolicy

PaceMap = Dict[WorkoutType, str]

_PACE_RE = re.compile(r"(\d+):(\d+)")


def round_half_up(value: float, digits: int = 0) -> float:
    """Round .5 away from zero for positives (Python's round() is banker's)."""
    factor = 10 ** digits
    rounded = math.floor(value * factor + 0.5) / factor
    return int(rounded) if digits == 0 else rounded


def pace_from_seconds(total_seconds: float) -> str:
    """Format seconds per km as "M:SS/km"."""
    total = int(round_half_up(total_seconds))
    minutes, seconds = divmod(total, 60)
    return f"{minutes}:{seconds:02d}/km"


def pace_to_seconds(pace: str) -> int:
    """Parse "M:SS" or "M:SS/km" into seconds per km. Returns 0 if unparseable."""
    match = _PACE_RE.search(pace or "")
    if not match:
        return 0
    minutes, seconds = match.groups()
    return int(minutes) * 60 + int(seconds)


def race_pace_seconds_per_km(goal_time_seconds: float, distance: Distance) -> float:
    """Goal time divided by race length in km."""
    return goal_time_seconds / DISTANCE_KM[Distance(distance)]


def workout_pace(
    race_pace: float,
    workout_type: WorkoutType,
    policy: PlanPolicy = DEFAULT_POLICY,
) -> str:
    """Race pace plus the fixed per-type offset, formatted."""
    workout_type = WorkoutType(workout_type)
    if workout_type in NON_RUNNING_TYPES:
        return NOT_APPLICABLE
    return pace_from_seconds(race_pace + policy.pace_offsets[workout_type])


def all_training_paces(
    goal_time_seconds: float,
    distance: Distance,
    policy: PlanPolicy = DEFAULT_POLICY,
) -> PaceMap:
    """Pace for every workout type ("N/A" for rest and cross-training)."""
    race_pace = race_pace_seconds_per_km(goal_time_seconds, distance)
    return {wt: workout_pace(race_pace, wt, policy) for wt in WorkoutType}


@dataclass(frozen=True)
class GoalPaceCheck:
    """Result of a goal pace sanity check."""
    is_valid: bool
    pace_seconds_per_km: float
    message: Optional[str] = None


def validate_goal_pace(
    goal_time_seconds: float,
    distance: Distance,
    policy: PlanPolicy = DEFAULT_POLICY,
) -> GoalPaceCheck:
    """
    Reject goal paces outside the plausible window.

    Faster than 3:30/km is unrealistic for any distance; slower than
    10:00/km almost always means the time was typed in the wrong field.
    Both block generation.
    """
    pace = race_pace_seconds_per_km(goal_time_seconds, distance)

    if pace < policy.fastest_goal_pace_seconds:
        limit = pace_from_seconds(policy.fastest_goal_pace_seconds)
        return GoalPaceCheck(
            is_valid=False,
            pace_seconds_per_km=pace,
            message=(
                f"This goal time is unrealistic (faster than {limit} pace). "
                "Please enter a more achievable goal."
            ),
        )

    if pace > policy.slowest_goal_pace_seconds:
        limit = pace_from_seconds(policy.slowest_goal_pace_seconds)
        return GoalPaceCheck(
            is_valid=False,
            pace_seconds_per_km=pace,
            message=(
                f"This pace is very slow (over {limit}). "
                "Please verify your goal time is correct."
            ),
        )

    return GoalPaceCheck(is_valid=True, pace_seconds_per_km=pace)


def _to_int(value: Union[int, str, None]) -> int:
    if value is None or value == "":
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def time_to_seconds(hours, minutes, seconds) -> int:
    """Convert h/m/s form inputs (ints or numeric strings) to total seconds."""
    return _to_int(hours) * 3600 + _to_int(minutes) * 60 + _to_int(seconds)


def seconds_to_time(total_seconds: float) -> str:
    """Format seconds as "H:MM:SS", or "M:SS" under an hour."""
    total = int(total_seconds)
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def clock_to_seconds(clock: str) -> int:
    """Parse "H:MM:SS", "MM:SS" or "SS" into seconds."""
    parts = [p.strip() for p in clock.strip().split(":")]
    if not 1 <= len(parts) <= 3 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid time: {clock!r}")
    parts = [0] * (3 - len(parts)) + [int(p) for p in parts]
    return time_to_seconds(*parts)


def finish_time_seconds(distance_km: float, pace_seconds_per_km: float) -> float:
    """Estimated finish time for a distance at a given pace."""
    return distance_km * pace_seconds_per_km
