"""
Plan Editor

Manual adjustments to a generated plan. Every edit returns a new
TrainingPlan; the plan passed in is never modified.

Usage:
    plan = move_workout(plan, week_number=3, workout_id="tempo-3-2", target_day=3)
    plan = swap_workouts(plan, 3, "tempo-3-2", "easy-3-5")
    plan = reduce_week(plan, week_number=6, percentage=20)

Workout ids are handles assigned at generation ("{type}-{week}-{day}" of the
original day). Moves and swaps change only `day`, so an id keeps naming the
same workout across edits; read the current day from the workout itself.
"""

import logging
from dataclasses import replace
from typing import Tuple

from .models import IntervalSpec, TrainingPlan, TrainingWeek, Workout
from .pace_table import pace_to_seconds, round_half_up
from .workout_catalog import WorkoutCatalog

logger = logging.getLogger(__name__)


class PlanEditError(ValueError):
    """Raised when an edit refers to a missing week/workout or bad arguments."""


def _get_week(plan: TrainingPlan, week_number: int) -> TrainingWeek:
    week = plan.get_week(week_number)
    if week is None:
        raise PlanEditError(f"Week not found: {week_number}")
    return week


def _get_workout(week: TrainingWeek, workout_id: str) -> Workout:
    workout = week.get_workout(workout_id)
    if workout is None:
        raise PlanEditError(f"Workout not found in week {week.week_number}: {workout_id}")
    return workout


def _replace_week(plan: TrainingPlan, new_week: TrainingWeek) -> TrainingPlan:
    weeks = tuple(new_week if w.week_number == new_week.week_number else w for w in plan.weeks)
    return replace(plan, weeks=weeks)


def _with_workouts(week: TrainingWeek, workouts) -> TrainingWeek:
    return replace(week, workouts=tuple(sorted(workouts, key=lambda w: w.day)))


def swap_workouts(
    plan: TrainingPlan,
    week_number: int,
    first_id: str,
    second_id: str,
) -> TrainingPlan:
    """Exchange the days of two workouts in the same week."""
    week = _get_week(plan, week_number)
    first = _get_workout(week, first_id)
    second = _get_workout(week, second_id)
    if first.id == second.id:
        return plan

    swapped = []
    for w in week.workouts:
        if w.id == first.id:
            swapped.append(replace(w, day=second.day))
        elif w.id == second.id:
            swapped.append(replace(w, day=first.day))
        else:
            swapped.append(w)

    logger.debug(f"Swapped {first.id} <-> {second.id} in week {week_number}")
    return _replace_week(plan, _with_workouts(week, swapped))


def move_workout(
    plan: TrainingPlan,
    week_number: int,
    workout_id: str,
    target_day: int,
) -> TrainingPlan:
    """
    Move a workout to another day of the same week.

    Each day holds exactly one entry, so whatever occupied the target day
    (often a rest day) takes the vacated day.
    """
    if not 1 <= target_day <= 7:
        raise PlanEditError(f"Target day must be between 1 and 7, got {target_day}")

    week = _get_week(plan, week_number)
    workout = _get_workout(week, workout_id)
    if workout.day == target_day:
        return plan

    occupant = next(w for w in week.workouts if w.day == target_day)
    return swap_workouts(plan, week_number, workout.id, occupant.id)


def _scale_workout(workout: Workout, factor: float, catalog: WorkoutCatalog) -> Workout:
    if workout.is_rest or not workout.distance_km:
        return workout

    if workout.intervals is not None:
        count = max(1, round_half_up(workout.intervals.count * factor))
        intervals = IntervalSpec(
            count=count,
            distance_km=workout.intervals.distance_km,
            pace=workout.intervals.pace,
            recovery=workout.intervals.recovery,
        )
        distance = round(count * intervals.distance_km, 1)
        description = catalog.describe_workout(workout.type, intervals=intervals)
    else:
        intervals = None
        distance = round_half_up(workout.distance_km * factor, 1)
        description = catalog.describe_workout(workout.type, distance, workout.pace)

    seconds_per_km = pace_to_seconds(workout.pace) if workout.pace else 0
    duration = round_half_up(distance * seconds_per_km / 60) if seconds_per_km else None

    return replace(
        workout,
        distance_km=distance,
        description=description,
        duration_minutes=duration,
        intervals=intervals,
    )


def reduce_week(
    plan: TrainingPlan,
    week_number: int,
    percentage: float,
    catalog: WorkoutCatalog = None,
) -> TrainingPlan:
    """
    Cut a week's target volume and every workout distance by a percentage.

    Interval sessions drop repetitions rather than shortening each rep.
    """
    if not 0 < percentage < 100:
        raise PlanEditError(f"Percentage must be between 0 and 100 (exclusive), got {percentage}")

    catalog = catalog or WorkoutCatalog()
    week = _get_week(plan, week_number)
    factor = 1 - percentage / 100

    workouts: Tuple[Workout, ...] = tuple(_scale_workout(w, factor, catalog) for w in week.workouts)
    reduced = replace(
        week,
        weekly_volume_km=round_half_up(week.weekly_volume_km * factor, 1),
        workouts=workouts,
    )

    logger.info(f"Reduced week {week_number} by {percentage}%")
    return _replace_week(plan, reduced)
