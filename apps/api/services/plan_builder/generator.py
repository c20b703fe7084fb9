"""
Plan Generator

Main orchestrator for plan generation.
Combines paces, phases and the volume curve into a week-by-week,
day-by-day workout grid.

Usage:
    generator = PlanGenerator()
    plan = generator.generate(inputs)

    # Reproducible variant with an explicit seed
    plan = PlanGenerator(seed=42).generate(inputs)
"""

import hashlib
import logging
import random
from datetime import date, timedelta
from typing import Dict, FrozenSet, List, Optional, Tuple

from .config import ConfigService
from .constants import (
    Distance,
    ExperienceLevel,
    PhaseType,
    WorkoutType,
    LongRunDay,
    TrainingPhilosophy,
    EFFORT_BASED,
    NOT_APPLICABLE,
)
from .models import (
    IntervalSpec,
    PlanInputs,
    TrainingPlan,
    TrainingPreferences,
    TrainingWeek,
    Workout,
)
from .pace_table import PaceMap, all_training_paces, pace_to_seconds, round_half_up
from .policy import PlanPolicy
from .progression_planner import ProgressionPlanner
from .workout_catalog import WorkoutCatalog

logger = logging.getLogger(__name__)

SATURDAY = 6
SUNDAY = 7

CROSS_TRAINING_NOTE = "Optional: 30-45 minutes of low-impact cross training (bike, swim or strength)."


class PlanGenerator:
    """
    Main plan generator orchestrating all components.

    Weekly structure:
    - Long run anchored on the preferred day
    - Tempo / intervals / hills only in build and peak
    - Remaining run days filled with easy or recovery runs
    - Days without a run are explicit rest days
    """

    def __init__(self, policy: Optional[PlanPolicy] = None, seed: Optional[int] = None):
        self.policy = policy or ConfigService.get_policy()
        self.seed = seed
        self.planner = ProgressionPlanner(self.policy)
        self.catalog = WorkoutCatalog(self.policy)

    def generate(self, inputs: PlanInputs) -> TrainingPlan:
        """
        Generate a complete training plan.

        Assumes inputs already passed InputValidator. Zero (or negative)
        available weeks yields an empty plan rather than an error.
        """
        goal, profile, prefs = inputs.goal, inputs.profile, inputs.preferences
        distance = Distance(goal.distance)
        experience = ExperienceLevel(profile.experience_level)
        total_weeks = profile.available_weeks
        goal_seconds = goal.goal_time_seconds

        logger.info(
            f"Generating plan: {distance.value} {experience.value} {total_weeks}w "
            f"{prefs.training_days_per_week}d goal={goal_seconds}s"
        )
        philosophy = TrainingPhilosophy(prefs.training_philosophy)
        if philosophy != TrainingPhilosophy.BALANCED:
            logger.debug(f"Training philosophy '{philosophy.value}' does not affect generation")

        if total_weeks <= 0:
            logger.warning(f"Plan requested with {total_weeks} available weeks; returning empty plan")
            return TrainingPlan(
                distance=distance,
                goal_time_seconds=goal_seconds,
                race_date=goal.race_date,
                total_weeks=0,
                experience_level=experience,
                weeks=(),
            )

        paces = all_training_paces(goal_seconds, distance, self.policy)
        phases = self.planner.phase_split(total_weeks, experience, distance)
        peak = self.planner.peak_mileage(profile.current_weekly_km, experience, distance, total_weeks)
        volumes = self.planner.mileage_progression(profile.current_weekly_km, peak, total_weeks, phases)

        logger.debug(f"Phases: {self.planner.phase_counts(phases)}, peak={peak:.1f}km")

        rng = random.Random(self.seed if self.seed is not None else self._seed_for(inputs))
        start_dates = self._week_start_dates(goal.race_date, total_weeks)

        weeks: List[TrainingWeek] = []
        for week_number in range(1, total_weeks + 1):
            phase = phases[week_number - 1]
            volume = volumes[week_number - 1]

            workouts = self.assign_week(
                week_number=week_number,
                target_volume=volume,
                phase=phase,
                paces=paces,
                distance=distance,
                experience_level=experience,
                preferences=prefs,
                rng=rng,
            )

            weeks.append(TrainingWeek(
                week_number=week_number,
                weekly_volume_km=volume,
                phase=phase,
                workouts=workouts,
                notes=self.week_notes(week_number, phase, total_weeks),
                start_date=start_dates[week_number - 1] if start_dates else None,
            ))

        return TrainingPlan(
            distance=distance,
            goal_time_seconds=goal_seconds,
            race_date=goal.race_date,
            total_weeks=total_weeks,
            experience_level=experience,
            weeks=tuple(weeks),
            peak_target_km=round_half_up(peak, 1),
        )

    # ---------------------------------------------------------------
    # Week assembly
    # ---------------------------------------------------------------

    def assign_week(
        self,
        week_number: int,
        target_volume: float,
        phase: PhaseType,
        paces: PaceMap,
        distance: Distance,
        experience_level: ExperienceLevel,
        preferences: TrainingPreferences,
        rng: Optional[random.Random] = None,
    ) -> Tuple[Workout, ...]:
        """Build the 7 day entries for one week, sorted by day."""
        rng = rng or random.Random(self.seed)
        phase = PhaseType(phase)
        mix = self.catalog.phase_mix(phase)
        preferred: FrozenSet[WorkoutType] = frozenset(preferences.preferred_workouts)

        long_run_day = self.resolve_long_run_day(preferences.long_run_day)
        run_days = self.select_run_days(preferences.training_days_per_week, preferences.long_run_day)

        workouts: Dict[int, Workout] = {}
        assigned = 0.0

        # 1. Long run
        long_distance = round_half_up(target_volume * self.catalog.long_run_fraction(phase))
        workouts[long_run_day] = self._create_workout(
            week_number, long_run_day, WorkoutType.LONG, paces[WorkoutType.LONG], long_distance
        )
        assigned += long_distance

        # 2. Quality sessions
        if phase in (PhaseType.BUILD, PhaseType.PEAK) and len(run_days) > 2:
            if mix.get("tempo", 0) > 0:
                tempo_day = self._pick_tempo_day(run_days, long_run_day, workouts)
                if tempo_day is not None:
                    tempo_distance = round_half_up(
                        target_volume * self.catalog.tempo_fraction(experience_level)
                    )
                    workouts[tempo_day] = self._create_workout(
                        week_number, tempo_day, WorkoutType.TEMPO, paces[WorkoutType.TEMPO], tempo_distance
                    )
                    assigned += tempo_distance

            if mix.get("intervals", 0) > 0 and WorkoutType.INTERVALS in preferred:
                interval_day = self._next_free_day(run_days, workouts)
                if interval_day is not None:
                    interval_set = self.catalog.select_interval_set(distance, week_number, phase)
                    workouts[interval_day] = self._create_interval_workout(
                        week_number,
                        interval_day,
                        interval_set,
                        paces[WorkoutType.INTERVALS],
                        paces[WorkoutType.RECOVERY],
                    )
                    assigned += interval_set.total_distance

            if mix.get("hills", 0) > 0 and WorkoutType.HILLS in preferred:
                hill_day = self._next_free_day(run_days, workouts)
                if hill_day is not None:
                    hill_distance = round_half_up(target_volume * self.policy.hill_fraction)
                    workouts[hill_day] = self._create_workout(
                        week_number, hill_day, WorkoutType.HILLS, EFFORT_BASED, hill_distance
                    )
                    assigned += hill_distance

        # 3. Easy / recovery fill
        recovery_share = mix.get("recovery", 0)
        for day in run_days:
            if day in workouts:
                continue
            remaining_days = sum(1 for d in run_days if d not in workouts)
            easy_distance = max(
                self.policy.min_easy_run_km,
                round_half_up((target_volume - assigned) / remaining_days),
            )
            if recovery_share > 0 and rng.random() < recovery_share:
                kind = WorkoutType.RECOVERY
            else:
                kind = WorkoutType.EASY
            workouts[day] = self._create_workout(week_number, day, kind, paces[kind], easy_distance)
            assigned += easy_distance

        # 4. Rest days
        for day in range(1, 8):
            if day not in workouts:
                workouts[day] = self._create_rest_day(
                    week_number, day, preferences.include_cross_training
                )

        return tuple(workouts[day] for day in sorted(workouts))

    def select_run_days(self, training_days: int, long_run_day: LongRunDay) -> List[int]:
        """Run days (1=Monday) for a training frequency and long-run preference."""
        key = LongRunDay.SATURDAY if self.resolve_long_run_day(long_run_day) == SATURDAY else LongRunDay.SUNDAY
        patterns = self.policy.run_day_patterns.get(training_days) or self.policy.run_day_patterns[4]
        return list(patterns[key])

    @staticmethod
    def resolve_long_run_day(long_run_day: LongRunDay) -> int:
        """Saturday -> 6; Sunday and flexible -> 7."""
        return SATURDAY if LongRunDay(long_run_day) == LongRunDay.SATURDAY else SUNDAY

    @staticmethod
    def _pick_tempo_day(
        run_days: List[int],
        long_run_day: int,
        workouts: Dict[int, Workout],
    ) -> Optional[int]:
        """First free run day not next to the long run, else any free run day."""
        free = [d for d in run_days if d not in workouts]
        for day in free:
            if abs(day - long_run_day) > 1:
                return day
        return free[0] if free else None

    @staticmethod
    def _next_free_day(run_days: List[int], workouts: Dict[int, Workout]) -> Optional[int]:
        for day in run_days:
            if day not in workouts:
                return day
        return None

    # ---------------------------------------------------------------
    # Workout factories
    # ---------------------------------------------------------------

    def _create_workout(
        self,
        week_number: int,
        day: int,
        workout_type: WorkoutType,
        pace: str,
        distance_km: float,
    ) -> Workout:
        return Workout(
            id=f"{workout_type.value}-{week_number}-{day}",
            day=day,
            type=workout_type,
            title=self.catalog.title(workout_type),
            description=self.catalog.describe_workout(workout_type, distance_km, pace),
            distance_km=distance_km,
            pace=pace,
            duration_minutes=self._duration_minutes(distance_km, pace),
        )

    def _create_interval_workout(
        self,
        week_number: int,
        day: int,
        interval_set,
        interval_pace: str,
        recovery_pace: str,
    ) -> Workout:
        spec = IntervalSpec(
            count=interval_set.count,
            distance_km=interval_set.distance,
            pace=interval_pace,
            recovery=f"{interval_set.recovery_distance:g}km easy @ {recovery_pace}",
        )
        total = interval_set.total_distance
        return Workout(
            id=f"{WorkoutType.INTERVALS.value}-{week_number}-{day}",
            day=day,
            type=WorkoutType.INTERVALS,
            title=self.catalog.title(WorkoutType.INTERVALS),
            description=self.catalog.describe_workout(WorkoutType.INTERVALS, intervals=spec),
            distance_km=total,
            pace=interval_pace,
            duration_minutes=self._duration_minutes(total, interval_pace),
            intervals=spec,
        )

    def _create_rest_day(self, week_number: int, day: int, include_cross_training: bool) -> Workout:
        return Workout(
            id=f"{WorkoutType.REST.value}-{week_number}-{day}",
            day=day,
            type=WorkoutType.REST,
            title=self.catalog.title(WorkoutType.REST),
            description=self.catalog.describe_workout(WorkoutType.REST),
            pace=NOT_APPLICABLE,
            notes=CROSS_TRAINING_NOTE if include_cross_training else None,
        )

    @staticmethod
    def _duration_minutes(distance_km: Optional[float], pace: Optional[str]) -> Optional[int]:
        seconds_per_km = pace_to_seconds(pace) if pace else 0
        if not distance_km or not seconds_per_km:
            return None
        return round_half_up(distance_km * seconds_per_km / 60)

    # ---------------------------------------------------------------
    # Notes, dates, seeding
    # ---------------------------------------------------------------

    @staticmethod
    def week_notes(week_number: int, phase: PhaseType, total_weeks: int) -> str:
        """Coaching note for a week."""
        weeks_remaining = total_weeks - week_number

        if phase == PhaseType.BASE:
            return "Focus on building your aerobic base. Keep efforts comfortable and conversational."
        if phase == PhaseType.BUILD:
            return "Introducing quality workouts. Balance intensity with adequate recovery."
        if phase == PhaseType.PEAK:
            return "Peak training phase. Push yourself but listen to your body."
        if phase == PhaseType.TAPER:
            if weeks_remaining == 0:
                return "Race week! Trust your training. Stay relaxed and focused."
            if weeks_remaining == 1:
                return "Final taper week. Reduce volume, maintain some intensity. Rest well."
            return "Taper phase. Reduce volume while maintaining fitness. Prioritize rest and recovery."
        return ""

    @staticmethod
    def _week_start_dates(race_date: Optional[date], total_weeks: int) -> Optional[List[date]]:
        """Monday of each plan week, with race day falling in the final week."""
        if race_date is None:
            return None
        race_week_monday = race_date - timedelta(days=race_date.weekday())
        return [
            race_week_monday - timedelta(weeks=total_weeks - week_number)
            for week_number in range(1, total_weeks + 1)
        ]

    @staticmethod
    def _seed_for(inputs: PlanInputs) -> int:
        """Stable seed from the inputs so identical requests give identical plans."""
        goal, profile, prefs = inputs.goal, inputs.profile, inputs.preferences
        material = "|".join(str(part) for part in (
            Distance(goal.distance).value,
            goal.goal_time_seconds,
            goal.race_date.isoformat() if goal.race_date else "",
            ExperienceLevel(profile.experience_level).value,
            profile.current_weekly_km,
            profile.longest_recent_run_km,
            profile.available_weeks,
            prefs.training_days_per_week,
            LongRunDay(prefs.long_run_day).value,
            prefs.include_cross_training,
            ",".join(sorted(WorkoutType(w).value for w in prefs.preferred_workouts)),
        ))
        return int(hashlib.sha256(material.encode("utf-8")).hexdigest()[:16], 16)
