"""
Input Validator Tests

Each wizard step returns field -> message; an empty dict means the step passes.
"""

import pytest
from datetime import date, timedelta

from services.plan_builder import (
    InputValidator,
    GoalSelection,
    RunnerProfile,
    TrainingPreferences,
    PlanInputs,
    Distance,
    ExperienceLevel,
    WorkoutType,
)
from services.plan_builder.input_validator import STEP_GOAL, STEP_PROFILE, STEP_PREFERENCES

TODAY = date(2026, 1, 5)


def make_goal(**overrides):
    values = dict(
        distance=Distance.MARATHON,
        goal_hours=4,
        goal_minutes=0,
        goal_seconds=0,
        race_date=TODAY + timedelta(weeks=20),
    )
    values.update(overrides)
    return GoalSelection(**values)


def make_profile(**overrides):
    values = dict(
        experience_level=ExperienceLevel.INTERMEDIATE,
        current_weekly_km=40,
        longest_recent_run_km=15,
        available_weeks=18,
    )
    values.update(overrides)
    return RunnerProfile(**values)


def make_preferences(**overrides):
    values = dict(
        training_days_per_week=5,
        preferred_workouts=frozenset({WorkoutType.EASY, WorkoutType.TEMPO}),
    )
    values.update(overrides)
    return TrainingPreferences(**values)


@pytest.fixture
def validator():
    return InputValidator()


class TestGoalStep:

    def test_valid(self, validator):
        assert validator.validate_goal_step(make_goal(), TODAY) == {}

    def test_missing_distance(self, validator):
        errors = validator.validate_goal_step(make_goal(distance=None), TODAY)
        assert errors["distance"] == "Please select a race distance"

    def test_missing_goal_time(self, validator):
        errors = validator.validate_goal_step(make_goal(goal_hours=0), TODAY)
        assert errors["goal_time"] == "Please enter a goal time"

    def test_negative_time(self, validator):
        errors = validator.validate_goal_step(make_goal(goal_minutes=-5), TODAY)
        assert errors["goal_time"] == "Goal time values cannot be negative"

    def test_minutes_out_of_range(self, validator):
        errors = validator.validate_goal_step(make_goal(goal_minutes=75), TODAY)
        assert errors["goal_time"] == "Minutes and seconds must be between 0 and 59"

    def test_unrealistic_goal(self, validator):
        goal = make_goal(distance=Distance.FIVE_K, goal_hours=0, goal_minutes=15)
        errors = validator.validate_goal_step(goal, TODAY)
        assert "unrealistic" in errors["goal_time"]

    def test_race_in_past(self, validator):
        errors = validator.validate_goal_step(make_goal(race_date=TODAY), TODAY)
        assert errors["race_date"] == "Race date must be in the future"

    def test_race_too_soon(self, validator):
        errors = validator.validate_goal_step(make_goal(race_date=TODAY + timedelta(days=20)), TODAY)
        assert errors["race_date"] == "Race date should be at least 4 weeks away for a proper training plan"

    def test_missing_race_date(self, validator):
        errors = validator.validate_goal_step(make_goal(race_date=None), TODAY)
        assert "race_date" in errors


class TestProfileStep:

    def test_valid(self, validator):
        assert validator.validate_profile_step(make_profile(), Distance.MARATHON) == {}

    def test_missing_experience(self, validator):
        errors = validator.validate_profile_step(make_profile(experience_level=None), Distance.MARATHON)
        assert errors["experience_level"] == "Please select your experience level"

    def test_negative_volume(self, validator):
        errors = validator.validate_profile_step(
            make_profile(current_weekly_km=-1, longest_recent_run_km=0), Distance.MARATHON
        )
        assert errors["current_weekly_km"] == "Weekly volume cannot be negative"

    def test_volume_too_high(self, validator):
        errors = validator.validate_profile_step(make_profile(current_weekly_km=250), Distance.MARATHON)
        assert "too high" in errors["current_weekly_km"]

    def test_longest_run_exceeds_volume(self, validator):
        errors = validator.validate_profile_step(
            make_profile(current_weekly_km=20, longest_recent_run_km=25), Distance.MARATHON
        )
        assert errors["longest_recent_run_km"] == "Longest run cannot exceed your weekly volume"

    def test_zero_weeks(self, validator):
        errors = validator.validate_profile_step(make_profile(available_weeks=0), Distance.MARATHON)
        assert errors["available_weeks"] == "Training plan requires at least 1 week"

    def test_below_minimum_weeks(self, validator):
        errors = validator.validate_profile_step(make_profile(available_weeks=10), Distance.MARATHON)
        assert errors["available_weeks"].startswith("Minimum 16 weeks required")

    def test_minimum_weeks_needs_distance(self, validator):
        """Without a distance the minimum cannot be looked up yet."""
        assert validator.validate_profile_step(make_profile(available_weeks=10), None) == {}


class TestPreferencesStep:

    def test_valid(self, validator):
        assert validator.validate_preferences_step(make_preferences()) == {}

    @pytest.mark.parametrize("days", [2, 8, 0])
    def test_training_days_out_of_range(self, validator, days):
        errors = validator.validate_preferences_step(make_preferences(training_days_per_week=days))
        assert errors["training_days_per_week"] == "Training days must be between 3 and 7"

    def test_needs_a_workout(self, validator):
        errors = validator.validate_preferences_step(make_preferences(preferred_workouts=frozenset()))
        assert errors["preferred_workouts"] == "Please select at least one workout type"


class TestAllSteps:

    def test_only_failing_steps_reported(self, validator):
        inputs = PlanInputs(
            goal=make_goal(),
            profile=make_profile(available_weeks=10),
            preferences=make_preferences(training_days_per_week=9),
        )
        errors = validator.validate_inputs(inputs, TODAY)

        assert set(errors) == {STEP_PROFILE, STEP_PREFERENCES}
        assert InputValidator.can_proceed_from_step(STEP_GOAL, errors)
        assert not InputValidator.can_proceed_from_step(STEP_PROFILE, errors)

    def test_all_valid(self, validator):
        inputs = PlanInputs(goal=make_goal(), profile=make_profile(), preferences=make_preferences())
        assert validator.validate_inputs(inputs, TODAY) == {}
