"""
Training Plan Builder API Router

Endpoints backing the plan wizard:
- Per-step validation (goal, profile, preferences)
- Plan generation
- Training pace lookup
- Recommended plan length for a race date

Persistence of generated plans is handled by the client.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from core.exceptions import PlanInputError, ValidationError
from services.plan_builder import (
    Distance,
    ExperienceLevel,
    LongRunDay,
    TrainingPhilosophy,
    WorkoutType,
    GoalSelection,
    RunnerProfile,
    TrainingPreferences,
    PlanInputs,
    InputValidator,
    PlanGenerator,
    ProgressionPlanner,
    ConfigService,
    all_training_paces,
    validate_goal_pace,
    pace_from_seconds,
)
from services.plan_builder.pace_table import race_pace_seconds_per_km

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/training-plans", tags=["Training Plan Builder"])


# ============ Request Models ============

class GoalStepRequest(BaseModel):
    """Step 1: race goal."""
    distance: Optional[Distance] = Field(None, description="5K, 10K, Half or Marathon")
    goal_hours: int = Field(0, description="Goal time hours")
    goal_minutes: int = Field(0, description="Goal time minutes")
    goal_seconds: int = Field(0, description="Goal time seconds")
    race_date: Optional[date] = Field(None, description="Race date")

    def to_domain(self) -> GoalSelection:
        return GoalSelection(
            distance=self.distance,
            goal_hours=self.goal_hours,
            goal_minutes=self.goal_minutes,
            goal_seconds=self.goal_seconds,
            race_date=self.race_date,
        )


class ProfileFields(BaseModel):
    """Step 2: current fitness (km)."""
    experience_level: Optional[ExperienceLevel] = None
    current_weekly_km: float = Field(0, description="Current weekly volume in km")
    longest_recent_run_km: float = Field(0, description="Longest run in recent weeks, km")
    available_weeks: int = Field(0, description="Weeks available to train")

    def to_domain(self) -> RunnerProfile:
        return RunnerProfile(
            experience_level=self.experience_level,
            current_weekly_km=self.current_weekly_km,
            longest_recent_run_km=self.longest_recent_run_km,
            available_weeks=self.available_weeks,
        )


class ProfileStepRequest(ProfileFields):
    """Profile step plus the goal distance (minimum weeks depend on it)."""
    distance: Optional[Distance] = None


class PreferencesStepRequest(BaseModel):
    """Step 3: scheduling preferences."""
    training_days_per_week: int = Field(4, description="Run days per week (3-7)")
    long_run_day: LongRunDay = LongRunDay.SUNDAY
    include_cross_training: bool = False
    preferred_workouts: List[WorkoutType] = Field(default_factory=list)
    training_philosophy: TrainingPhilosophy = TrainingPhilosophy.BALANCED

    def to_domain(self) -> TrainingPreferences:
        return TrainingPreferences(
            training_days_per_week=self.training_days_per_week,
            long_run_day=self.long_run_day,
            include_cross_training=self.include_cross_training,
            preferred_workouts=frozenset(self.preferred_workouts),
            training_philosophy=self.training_philosophy,
        )


class GeneratePlanRequest(BaseModel):
    """All wizard steps, submitted together."""
    goal: GoalStepRequest
    profile: ProfileFields
    preferences: PreferencesStepRequest
    seed: Optional[int] = Field(None, description="Fix the easy/recovery draw (default: derived from inputs)")

    def to_domain(self) -> PlanInputs:
        return PlanInputs(
            goal=self.goal.to_domain(),
            profile=self.profile.to_domain(),
            preferences=self.preferences.to_domain(),
        )


# ============ Response Models ============

class StepValidationResponse(BaseModel):
    valid: bool
    errors: Dict[str, str]


class GoalPaceResponse(BaseModel):
    is_valid: bool
    message: Optional[str]


class PacesResponse(BaseModel):
    distance: str
    goal_time_seconds: int
    race_pace: str
    goal_pace: GoalPaceResponse
    paces: Dict[str, str]


class RecommendedWeeksResponse(BaseModel):
    distance: str
    experience_level: str
    race_date: date
    min_weeks_required: int
    recommended_weeks: int


def _step_response(errors: Dict[str, str]) -> StepValidationResponse:
    return StepValidationResponse(valid=not errors, errors=errors)


# ============ Endpoints ============

@router.post("/validate/goal", response_model=StepValidationResponse)
async def validate_goal(request: GoalStepRequest):
    """Validate wizard step 1."""
    validator = InputValidator(ConfigService.get_policy())
    return _step_response(validator.validate_goal_step(request.to_domain()))


@router.post("/validate/profile", response_model=StepValidationResponse)
async def validate_profile(request: ProfileStepRequest):
    """Validate wizard step 2."""
    validator = InputValidator(ConfigService.get_policy())
    return _step_response(validator.validate_profile_step(request.to_domain(), request.distance))


@router.post("/validate/preferences", response_model=StepValidationResponse)
async def validate_preferences(request: PreferencesStepRequest):
    """Validate wizard step 3."""
    validator = InputValidator(ConfigService.get_policy())
    return _step_response(validator.validate_preferences_step(request.to_domain()))


@router.post("/generate")
async def generate_plan(request: GeneratePlanRequest) -> Dict[str, Any]:
    """
    Validate all steps and generate a plan.

    Returns 422 with per-step field errors when any step fails.
    """
    policy = ConfigService.get_policy()
    inputs = request.to_domain()

    errors = InputValidator(policy).validate_inputs(inputs)
    if errors:
        logger.info(f"Plan generation rejected: {sorted(errors)}")
        raise PlanInputError(errors)

    plan = PlanGenerator(policy=policy, seed=request.seed).generate(inputs)
    return plan.to_dict()


@router.get("/paces", response_model=PacesResponse)
async def get_paces(
    distance: Distance = Query(..., description="5K, 10K, Half or Marathon"),
    goal_time_seconds: int = Query(..., description="Goal finish time in seconds"),
):
    """Training paces for every workout type from a goal time."""
    if goal_time_seconds <= 0:
        raise ValidationError("Goal time must be positive", field="goal_time_seconds")

    policy = ConfigService.get_policy()
    check = validate_goal_pace(goal_time_seconds, distance, policy)
    paces = all_training_paces(goal_time_seconds, distance, policy)

    return PacesResponse(
        distance=distance.value,
        goal_time_seconds=goal_time_seconds,
        race_pace=pace_from_seconds(race_pace_seconds_per_km(goal_time_seconds, distance)),
        goal_pace=GoalPaceResponse(is_valid=check.is_valid, message=check.message),
        paces={wt.value: pace for wt, pace in paces.items()},
    )


@router.get("/recommended-weeks", response_model=RecommendedWeeksResponse)
async def get_recommended_weeks(
    distance: Distance = Query(...),
    experience_level: ExperienceLevel = Query(...),
    race_date: date = Query(...),
):
    """Plan length for a race date, clamped to the distance/experience limits."""
    planner = ProgressionPlanner(ConfigService.get_policy())
    return RecommendedWeeksResponse(
        distance=distance.value,
        experience_level=experience_level.value,
        race_date=race_date,
        min_weeks_required=planner.min_weeks_required(experience_level, distance),
        recommended_weeks=planner.recommended_weeks(experience_level, distance, race_date),
    )
