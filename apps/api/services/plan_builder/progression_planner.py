"""
Progression Planner

Works out the shape of a plan before any workout is placed:
- how many weeks go to base / build / peak / taper
- the peak weekly volume the runner can safely reach
- the week-by-week volume curve (growth, recovery dips, taper)

Usage:
    planner = ProgressionPlanner()
    phases = planner.phase_split(18, ExperienceLevel.INTERMEDIATE, Distance.MARATHON)
    peak = planner.peak_mileage(40, ExperienceLevel.INTERMEDIATE, Distance.MARATHON, 18)
    volumes = planner.mileage_progression(40, peak, 18, phases)
"""

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Sequence

from .constants import Distance, ExperienceLevel, PhaseType, PHASE_ORDER
from .pace_table import round_half_up
from .policy import DEFAULT_POLICY, PlanPolicy

logger = logging.getLogger(__name__)


def weeks_until(race_date: date, today: Optional[date] = None) -> int:
    """Whole weeks from today until race day (negative if the race has passed)."""
    today = today or date.today()
    return (race_date - today).days // 7


@dataclass(frozen=True)
class WeeksCheck:
    """Result of checking available weeks against the minimum."""
    is_valid: bool
    min_required: int
    message: Optional[str] = None


class ProgressionPlanner:
    """
    Phase allocation and weekly volume progression.

    Rules:
    - Growth weeks add at most 10% over the previous week
    - Every 4th week outside peak/taper is a recovery week (-20%)
    - Taper steps down from peak over the final weeks
    - Peak volume never exceeds the distance/experience ceiling
    """

    def __init__(self, policy: PlanPolicy = DEFAULT_POLICY):
        self.policy = policy

    # ---------------------------------------------------------------
    # Table lookups
    # ---------------------------------------------------------------

    def peak_targets(self, experience_level: ExperienceLevel, distance: Distance) -> Dict[str, float]:
        """Peak weekly km range {"min", "max"} for a distance and experience."""
        targets = self.policy.peak_mileage_targets[Distance(distance)][ExperienceLevel(experience_level)]
        return {"min": targets["min"], "max": targets["max"]}

    def min_weeks_required(self, experience_level: ExperienceLevel, distance: Distance) -> int:
        return self.policy.min_weeks_required[Distance(distance)][ExperienceLevel(experience_level)]

    def recommended_weeks(
        self,
        experience_level: ExperienceLevel,
        distance: Distance,
        race_date: date,
        today: Optional[date] = None,
    ) -> int:
        """
        Plan length for a race date.

        Weeks until the race, clamped between the minimum required and the
        recommended length for this distance/experience.
        """
        minimum = self.min_weeks_required(experience_level, distance)
        recommended = self.policy.recommended_weeks[Distance(distance)][ExperienceLevel(experience_level)]
        available = weeks_until(race_date, today)
        return min(max(available, minimum), recommended)

    def validate_available_weeks(
        self,
        available_weeks: int,
        experience_level: ExperienceLevel,
        distance: Distance,
    ) -> WeeksCheck:
        minimum = self.min_weeks_required(experience_level, distance)
        if available_weeks < minimum:
            return WeeksCheck(
                is_valid=False,
                min_required=minimum,
                message=(
                    f"Minimum {minimum} weeks required for a "
                    f"{ExperienceLevel(experience_level).value} {Distance(distance).value} plan. "
                    f"You have {available_weeks} weeks available."
                ),
            )
        return WeeksCheck(is_valid=True, min_required=minimum)

    # ---------------------------------------------------------------
    # Peak volume
    # ---------------------------------------------------------------

    def peak_mileage(
        self,
        current_weekly_km: float,
        experience_level: ExperienceLevel,
        distance: Distance,
        available_weeks: int,
    ) -> float:
        """
        Highest weekly volume the plan should build to.

        Compounds 10% growth over the building weeks (70% of the plan, less
        one recovery week per four), then clamps to the table maximum.
        """
        targets = self.peak_targets(experience_level, distance)

        weeks_for_building = math.floor(max(available_weeks, 0) * self.policy.building_weeks_fraction)
        recovery_weeks = weeks_for_building // self.policy.recovery_week_frequency
        building_weeks = weeks_for_building - recovery_weeks

        achievable = current_weekly_km * (1 + self.policy.max_weekly_increase) ** building_weeks
        return min(achievable, targets["max"])

    # ---------------------------------------------------------------
    # Phases
    # ---------------------------------------------------------------

    def phase_split(
        self,
        total_weeks: int,
        experience_level: ExperienceLevel,
        distance: Distance,
    ) -> List[PhaseType]:
        """
        Phase for every week, in order base -> build -> peak -> taper.

        Base, build and peak counts are rounded from the split table; taper
        takes the remainder so the counts always sum to total_weeks.
        """
        if total_weeks <= 0:
            return []

        split = self.policy.phase_splits[Distance(distance)][ExperienceLevel(experience_level)]
        counts = {
            phase: round_half_up(total_weeks * split[phase])
            for phase in (PhaseType.BASE, PhaseType.BUILD, PhaseType.PEAK)
        }

        # Rounding up three phases can overshoot short plans; give weeks back
        # starting from the latest phase.
        overflow = sum(counts.values()) - total_weeks
        for phase in (PhaseType.PEAK, PhaseType.BUILD, PhaseType.BASE):
            if overflow <= 0:
                break
            taken = min(counts[phase], overflow)
            counts[phase] -= taken
            overflow -= taken
            if taken:
                logger.debug(f"Phase split: trimmed {taken} {phase.value} week(s) to fit {total_weeks} weeks")

        counts[PhaseType.TAPER] = total_weeks - sum(counts.values())

        phases: List[PhaseType] = []
        for phase in PHASE_ORDER:
            phases.extend([phase] * counts[phase])
        return phases

    def phase_counts(self, phases: Sequence[PhaseType]) -> Dict[PhaseType, int]:
        return {phase: sum(1 for p in phases if p == phase) for phase in PHASE_ORDER}

    # ---------------------------------------------------------------
    # Volume curve
    # ---------------------------------------------------------------

    def taper_ratio(self, weeks_to_race: int) -> float:
        """
        Share of peak volume for a taper week.

        weeks_to_race is 0 for race week. The final weeks step down through
        taper_ratios in order; any earlier taper week holds the first ratio.
        """
        ratios = self.policy.taper_ratios
        if weeks_to_race >= len(ratios):
            return ratios[0]
        return ratios[len(ratios) - 1 - weeks_to_race]

    def is_recovery_week(self, week_number: int, phase: PhaseType) -> bool:
        return (
            week_number % self.policy.recovery_week_frequency == 0
            and phase not in (PhaseType.PEAK, PhaseType.TAPER)
        )

    def mileage_progression(
        self,
        start_volume: float,
        peak_volume: float,
        total_weeks: int,
        phases: Sequence[PhaseType],
    ) -> List[float]:
        """
        Target volume for every week.

        Per week, first match wins:
        1. Taper: peak x taper ratio for the weeks left to race
        2. Every 4th week (not peak/taper): 20% below the previous week
        3. Otherwise grow toward peak by the smaller of the even share of the
           remaining gap and 10% of the previous week
        """
        if len(phases) < total_weeks:
            raise ValueError(f"Need a phase for each of {total_weeks} weeks, got {len(phases)}")

        max_increase = self.policy.max_weekly_increase
        volumes: List[float] = []
        current = start_volume

        for index in range(total_weeks):
            week_number = index + 1
            phase = PhaseType(phases[index])

            if phase == PhaseType.TAPER:
                weeks_to_race = total_weeks - week_number
                current = round_half_up(peak_volume * self.taper_ratio(weeks_to_race))
                volumes.append(current)
                continue

            if self.is_recovery_week(week_number, phase):
                current = round_half_up(current * (1 - self.policy.recovery_week_reduction))
                volumes.append(current)
                continue

            if current < peak_volume:
                remaining_weeks = total_weeks - index
                increase = min(
                    (peak_volume - current) / remaining_weeks,
                    current * max_increase,
                )
                raw = current + increase
                whole = round_half_up(raw)
                # Whole km only while that still grows within the weekly cap and the peak;
                # small volumes fall back to 0.1 km so they keep growing.
                ceiling = min(current * (1 + max_increase), peak_volume)
                if current < whole <= ceiling:
                    current = whole
                else:
                    current = math.floor(raw * 10 + 1e-9) / 10
            else:
                current = math.floor(peak_volume)

            volumes.append(current)

        return volumes
