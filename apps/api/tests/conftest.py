"""
Pytest configuration and fixtures

The plan engine is pure, so no database or network fixtures are needed.
Each test starts from the default plan policy.
"""
import pytest
import sys
import os
from datetime import date, timedelta

# Add the parent directory to the path so we can import from services
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.plan_builder import ConfigService


@pytest.fixture(autouse=True)
def default_plan_policy():
    """Drop any cached or overridden policy between tests."""
    ConfigService.configure(None)
    yield
    ConfigService.configure(None)


@pytest.fixture
def race_date():
    """A race 20 weeks out from today."""
    return date.today() + timedelta(weeks=20)


@pytest.fixture
def plan_request(race_date):
    """Valid generate payload: 18-week intermediate marathon, 5 days/week."""
    return {
        "goal": {
            "distance": "Marathon",
            "goal_hours": 4,
            "goal_minutes": 0,
            "goal_seconds": 0,
            "race_date": race_date.isoformat(),
        },
        "profile": {
            "experience_level": "intermediate",
            "current_weekly_km": 40,
            "longest_recent_run_km": 15,
            "available_weeks": 18,
        },
        "preferences": {
            "training_days_per_week": 5,
            "long_run_day": "sunday",
            "include_cross_training": False,
            "preferred_workouts": ["easy", "tempo", "intervals"],
        },
    }
