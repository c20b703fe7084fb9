# Training Plan Builder
#
# Deterministic generation of periodized running plans.
#
# Architecture:
# - Table-driven policy (PlanPolicy), overridable from YAML
# - Pace table derived from the goal finish time
# - Progression planner for phases and the weekly volume curve
# - Per-step input validation for the plan wizard
# - Generator assembling the week/day workout grid
# - Pure plan edits (move, swap, reduce)

from .constants import (
    Distance,
    ExperienceLevel,
    PhaseType,
    WorkoutType,
    LongRunDay,
    TrainingPhilosophy,
)
from .policy import PlanPolicy, DEFAULT_POLICY
from .config import ConfigService
from .models import (
    GoalSelection,
    RunnerProfile,
    TrainingPreferences,
    PlanInputs,
    IntervalSpec,
    Workout,
    TrainingWeek,
    TrainingPlan,
)
from .pace_table import (
    all_training_paces,
    validate_goal_pace,
    pace_from_seconds,
    pace_to_seconds,
    time_to_seconds,
    seconds_to_time,
)
from .workout_catalog import WorkoutCatalog, IntervalSet
from .progression_planner import ProgressionPlanner
from .input_validator import InputValidator
from .generator import PlanGenerator
from .plan_editor import PlanEditError, move_workout, swap_workouts, reduce_week

__all__ = [
    # Constants
    'Distance',
    'ExperienceLevel',
    'PhaseType',
    'WorkoutType',
    'LongRunDay',
    'TrainingPhilosophy',

    # Policy / config
    'PlanPolicy',
    'DEFAULT_POLICY',
    'ConfigService',

    # Data model
    'GoalSelection',
    'RunnerProfile',
    'TrainingPreferences',
    'PlanInputs',
    'IntervalSpec',
    'Workout',
    'TrainingWeek',
    'TrainingPlan',

    # Components
    'all_training_paces',
    'validate_goal_pace',
    'pace_from_seconds',
    'pace_to_seconds',
    'time_to_seconds',
    'seconds_to_time',
    'WorkoutCatalog',
    'IntervalSet',
    'ProgressionPlanner',
    'InputValidator',

    # Main generator
    'PlanGenerator',

    # Editing
    'PlanEditError',
    'move_workout',
    'swap_workouts',
    'reduce_week',
]
