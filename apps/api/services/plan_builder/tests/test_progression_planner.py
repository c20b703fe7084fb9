"""
Progression Planner Tests

Phase allocation, peak volume and the weekly volume curve.
"""

import pytest
from datetime import date, timedelta

from services.plan_builder import (
    ProgressionPlanner,
    Distance,
    ExperienceLevel,
    PhaseType,
    DEFAULT_POLICY,
)
from services.plan_builder.constants import PHASE_ORDER
from services.plan_builder.progression_planner import weeks_until

TODAY = date(2026, 1, 5)

ALL_COMBOS = [(d, e) for d in Distance for e in ExperienceLevel]


@pytest.fixture
def planner():
    return ProgressionPlanner()


class TestTableLookups:

    def test_min_weeks(self, planner):
        assert planner.min_weeks_required(ExperienceLevel.BEGINNER, Distance.FIVE_K) == 6
        assert planner.min_weeks_required(ExperienceLevel.ADVANCED, Distance.MARATHON) == 18

    def test_peak_targets(self, planner):
        assert planner.peak_targets(ExperienceLevel.INTERMEDIATE, Distance.MARATHON) == {"min": 75, "max": 90}

    def test_accepts_raw_values(self, planner):
        assert planner.min_weeks_required("beginner", "Half") == 10


class TestRecommendedWeeks:

    def test_weeks_until(self):
        assert weeks_until(TODAY + timedelta(days=20), TODAY) == 2
        assert weeks_until(TODAY - timedelta(days=1), TODAY) == -1

    def test_clamped_to_recommended(self, planner):
        race = TODAY + timedelta(weeks=30)
        assert planner.recommended_weeks(ExperienceLevel.INTERMEDIATE, Distance.MARATHON, race, TODAY) == 18

    def test_clamped_to_minimum(self, planner):
        race = TODAY + timedelta(weeks=10)
        assert planner.recommended_weeks(ExperienceLevel.INTERMEDIATE, Distance.MARATHON, race, TODAY) == 16

    def test_uses_time_until_race(self, planner):
        race = TODAY + timedelta(weeks=17)
        assert planner.recommended_weeks(ExperienceLevel.INTERMEDIATE, Distance.MARATHON, race, TODAY) == 17


class TestAvailableWeeks:

    def test_too_few(self, planner):
        check = planner.validate_available_weeks(10, ExperienceLevel.INTERMEDIATE, Distance.MARATHON)

        assert not check.is_valid
        assert check.min_required == 16
        assert check.message == (
            "Minimum 16 weeks required for a intermediate Marathon plan. "
            "You have 10 weeks available."
        )

    def test_enough(self, planner):
        """8 weeks clears the 6-week minimum for a beginner 5K."""
        check = planner.validate_available_weeks(8, ExperienceLevel.BEGINNER, Distance.FIVE_K)
        assert check.is_valid
        assert check.message is None


class TestPeakMileage:

    def test_clamped_to_table_max(self, planner):
        # 12 building weeks - 3 recovery = 9 weeks of 10% growth from 40 -> ~94
        peak = planner.peak_mileage(40, ExperienceLevel.INTERMEDIATE, Distance.MARATHON, 18)
        assert peak == 90

    def test_limited_by_growth(self, planner):
        # 5 building weeks - 1 recovery = 4 weeks of growth
        peak = planner.peak_mileage(15, ExperienceLevel.BEGINNER, Distance.FIVE_K, 8)
        assert peak == pytest.approx(15 * 1.1 ** 4)

    @pytest.mark.parametrize("distance,experience", ALL_COMBOS)
    def test_never_exceeds_table_max(self, planner, distance, experience):
        targets = planner.peak_targets(experience, distance)
        for current in (0, 20, 60, 150):
            for weeks in (4, 12, 24):
                assert planner.peak_mileage(current, experience, distance, weeks) <= targets["max"]


class TestPhaseSplit:

    def test_marathon_18_weeks(self, planner):
        phases = planner.phase_split(18, ExperienceLevel.INTERMEDIATE, Distance.MARATHON)
        counts = planner.phase_counts(phases)

        assert counts == {
            PhaseType.BASE: 6,
            PhaseType.BUILD: 6,
            PhaseType.PEAK: 4,
            PhaseType.TAPER: 2,
        }

    def test_taper_is_remainder(self, planner):
        phases = planner.phase_split(16, ExperienceLevel.INTERMEDIATE, Distance.MARATHON)
        assert planner.phase_counts(phases)[PhaseType.TAPER] == 1

    def test_rounding_overflow_trims_latest_phase(self, planner):
        # 10K advanced over 2 weeks rounds to 1 + 1 + 1
        phases = planner.phase_split(2, ExperienceLevel.ADVANCED, Distance.TEN_K)
        assert phases == [PhaseType.BASE, PhaseType.BUILD]

    def test_zero_weeks(self, planner):
        assert planner.phase_split(0, ExperienceLevel.BEGINNER, Distance.FIVE_K) == []

    @pytest.mark.parametrize("distance,experience", ALL_COMBOS)
    def test_counts_sum_and_order(self, planner, distance, experience):
        """Every week gets a phase and phases never go backwards."""
        for total in range(1, 31):
            phases = planner.phase_split(total, experience, distance)

            assert len(phases) == total
            order = [PHASE_ORDER.index(p) for p in phases]
            assert order == sorted(order), f"{total} weeks: phases out of order"
            assert phases[0] == PhaseType.BASE or total < 3


class TestTaperRatio:

    def test_final_weeks_step_down(self, planner):
        assert planner.taper_ratio(2) == 0.75
        assert planner.taper_ratio(1) == 0.6
        assert planner.taper_ratio(0) == 0.5

    def test_early_taper_weeks_hold_first_ratio(self, planner):
        assert planner.taper_ratio(5) == 0.75


class TestMileageProgression:

    @pytest.fixture
    def marathon(self, planner):
        phases = planner.phase_split(18, ExperienceLevel.INTERMEDIATE, Distance.MARATHON)
        volumes = planner.mileage_progression(40, 90, 18, phases)
        return phases, volumes

    def test_one_volume_per_week(self, marathon):
        phases, volumes = marathon
        assert len(volumes) == 18

    def test_first_weeks(self, marathon):
        _, volumes = marathon
        assert volumes[:4] == [43, 46, 49, 39]

    def test_recovery_weeks_drop_20_percent(self, planner, marathon):
        phases, volumes = marathon
        for index, phase in enumerate(phases):
            week_number = index + 1
            if planner.is_recovery_week(week_number, phase):
                assert volumes[index] == round(volumes[index - 1] * 0.8), (
                    f"Week {week_number}: expected 20% cut from {volumes[index - 1]}"
                )

    def test_growth_never_exceeds_10_percent(self, marathon):
        phases, volumes = marathon
        for i in range(1, len(volumes)):
            if phases[i] == PhaseType.TAPER:
                continue
            assert volumes[i] <= volumes[i - 1] * 1.1, (
                f"Week {i + 1}: {volumes[i - 1]} -> {volumes[i]} exceeds 10%"
            )

    def test_never_exceeds_peak(self, marathon):
        _, volumes = marathon
        assert max(volumes) <= 90

    def test_taper_from_peak(self, marathon):
        _, volumes = marathon
        assert volumes[-2] == 54
        assert volumes[-1] == 45

    def test_taper_strictly_decreasing(self, planner):
        phases = [PhaseType.BASE] * 3 + [PhaseType.TAPER] * 3
        volumes = planner.mileage_progression(30, 40, 6, phases)
        taper = volumes[3:]
        assert taper == [30, 24, 20]
        assert taper[0] > taper[1] > taper[2]

    def test_recovery_not_in_peak_or_taper(self, planner):
        assert planner.is_recovery_week(4, PhaseType.BASE)
        assert planner.is_recovery_week(8, PhaseType.BUILD)
        assert not planner.is_recovery_week(8, PhaseType.PEAK)
        assert not planner.is_recovery_week(12, PhaseType.TAPER)
        assert not planner.is_recovery_week(3, PhaseType.BASE)

    def test_start_above_peak_holds_at_peak(self, planner):
        phases = [PhaseType.BASE, PhaseType.BUILD, PhaseType.PEAK, PhaseType.TAPER]
        volumes = planner.mileage_progression(100, 90, 4, phases)
        assert volumes == [90, 90, 90, 45]

    def test_needs_a_phase_per_week(self, planner):
        with pytest.raises(ValueError):
            planner.mileage_progression(40, 90, 5, [PhaseType.BASE] * 3)

    def test_policy_overrides(self):
        policy = DEFAULT_POLICY.with_overrides({"recovery_week_reduction": 0.5})
        planner = ProgressionPlanner(policy)
        volumes = planner.mileage_progression(40, 90, 4, [PhaseType.BASE] * 4)
        assert volumes == [44, 48, 52.8, 26]

    def test_low_volume_start_keeps_growing(self, planner):
        """A 5K beginner on 8 km/week must still build, even below a whole km of headroom."""
        peak = planner.peak_mileage(8, ExperienceLevel.BEGINNER, Distance.FIVE_K, 8)
        phases = planner.phase_split(8, ExperienceLevel.BEGINNER, Distance.FIVE_K)
        volumes = planner.mileage_progression(8, peak, 8, phases)

        assert volumes[0] > 8, f"No growth in week 1: {volumes}"
        assert planner.is_recovery_week(4, phases[3])
        assert volumes[4] > volumes[3], f"No growth after the recovery week: {volumes}"
        building = [v for v, phase in zip(volumes, phases) if phase != PhaseType.TAPER]
        assert max(building) > 8
        assert max(building) <= peak
        for i in range(1, len(volumes)):
            if phases[i] == PhaseType.TAPER:
                continue
            assert volumes[i] <= volumes[i - 1] * 1.1 + 1e-9, (
                f"Week {i + 1}: {volumes[i - 1]} -> {volumes[i]} exceeds 10%"
            )
