"""
Input Validator

Per-step checks for the plan wizard. Each check returns a dict of
field name -> message; an empty dict means the step is fine. Nothing here
raises for bad user input.

Usage:
    validator = InputValidator()
    errors = validator.validate_goal_step(inputs.goal)
    if errors:
        ...  # show errors["goal_time"], errors["race_date"], ...

    all_errors = validator.validate_inputs(inputs)   # {"goal": {...}, ...}
"""

from datetime import date
from typing import Dict, Optional

from .constants import Distance
from .models import GoalSelection, PlanInputs, RunnerProfile, TrainingPreferences
from .pace_table import validate_goal_pace
from .policy import DEFAULT_POLICY, PlanPolicy
from .progression_planner import ProgressionPlanner, weeks_until

FieldErrors = Dict[str, str]

STEP_GOAL = "goal"
STEP_PROFILE = "profile"
STEP_PREFERENCES = "preferences"


class InputValidator:
    """Field-level validation for PlanInputs, one method per wizard step."""

    def __init__(self, policy: PlanPolicy = DEFAULT_POLICY):
        self.policy = policy
        self.planner = ProgressionPlanner(policy)

    def validate_goal_step(
        self,
        goal: GoalSelection,
        today: Optional[date] = None,
    ) -> FieldErrors:
        errors: FieldErrors = {}
        today = today or date.today()

        if not goal.distance:
            errors["distance"] = "Please select a race distance"

        parts = (goal.goal_hours, goal.goal_minutes, goal.goal_seconds)
        if any(p < 0 for p in parts):
            errors["goal_time"] = "Goal time values cannot be negative"
        elif goal.goal_minutes > 59 or goal.goal_seconds > 59:
            errors["goal_time"] = "Minutes and seconds must be between 0 and 59"
        elif goal.goal_time_seconds == 0:
            errors["goal_time"] = "Please enter a goal time"
        elif goal.distance:
            check = validate_goal_pace(goal.goal_time_seconds, goal.distance, self.policy)
            if not check.is_valid:
                errors["goal_time"] = check.message

        if goal.race_date is None:
            errors["race_date"] = "Please select a race date"
        elif goal.race_date <= today:
            errors["race_date"] = "Race date must be in the future"
        elif weeks_until(goal.race_date, today) < self.policy.min_weeks_until_race:
            errors["race_date"] = (
                f"Race date should be at least {self.policy.min_weeks_until_race} "
                "weeks away for a proper training plan"
            )

        return errors

    def validate_profile_step(
        self,
        profile: RunnerProfile,
        distance: Optional[Distance],
    ) -> FieldErrors:
        errors: FieldErrors = {}

        if not profile.experience_level:
            errors["experience_level"] = "Please select your experience level"

        if profile.current_weekly_km < 0:
            errors["current_weekly_km"] = "Weekly volume cannot be negative"
        elif profile.current_weekly_km > self.policy.max_weekly_volume_km:
            errors["current_weekly_km"] = "Weekly volume seems too high. Please verify."

        if profile.longest_recent_run_km < 0:
            errors["longest_recent_run_km"] = "Distance cannot be negative"
        elif profile.longest_recent_run_km > profile.current_weekly_km:
            errors["longest_recent_run_km"] = "Longest run cannot exceed your weekly volume"

        if profile.available_weeks < 1:
            errors["available_weeks"] = "Training plan requires at least 1 week"
        elif profile.experience_level and distance:
            check = self.planner.validate_available_weeks(
                profile.available_weeks, profile.experience_level, distance
            )
            if not check.is_valid:
                errors["available_weeks"] = check.message

        return errors

    def validate_preferences_step(self, preferences: TrainingPreferences) -> FieldErrors:
        errors: FieldErrors = {}

        low, high = self.policy.min_training_days, self.policy.max_training_days
        if not low <= preferences.training_days_per_week <= high:
            errors["training_days_per_week"] = f"Training days must be between {low} and {high}"

        if not preferences.preferred_workouts:
            errors["preferred_workouts"] = "Please select at least one workout type"

        return errors

    def validate_inputs(
        self,
        inputs: PlanInputs,
        today: Optional[date] = None,
    ) -> Dict[str, FieldErrors]:
        """Run every step; only steps with errors appear in the result."""
        results = {
            STEP_GOAL: self.validate_goal_step(inputs.goal, today),
            STEP_PROFILE: self.validate_profile_step(inputs.profile, inputs.goal.distance),
            STEP_PREFERENCES: self.validate_preferences_step(inputs.preferences),
        }
        return {step: errs for step, errs in results.items() if errs}

    @staticmethod
    def can_proceed_from_step(step: str, errors: Dict[str, FieldErrors]) -> bool:
        """True when the given step has no blocking errors."""
        return not errors.get(step)
