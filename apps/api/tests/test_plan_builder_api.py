"""
Integration tests for the Training Plan Builder API endpoints

Covers wizard step validation, plan generation, pace lookup and
recommended plan length.
"""
import pytest
from fastapi.testclient import TestClient
from datetime import date, timedelta
from main import app

client = TestClient(app)

BASE = "/v1/training-plans"


class TestHealth:

    def test_health(self):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestStepValidation:

    def test_goal_valid(self, plan_request):
        response = client.post(f"{BASE}/validate/goal", json=plan_request["goal"])

        assert response.status_code == 200
        assert response.json() == {"valid": True, "errors": {}}

    def test_goal_unrealistic(self):
        payload = {
            "distance": "5K",
            "goal_minutes": 15,
            "race_date": (date.today() + timedelta(weeks=10)).isoformat(),
        }
        response = client.post(f"{BASE}/validate/goal", json=payload)
        data = response.json()

        assert response.status_code == 200
        assert data["valid"] is False
        assert "unrealistic" in data["errors"]["goal_time"]

    def test_goal_missing_fields(self):
        response = client.post(f"{BASE}/validate/goal", json={})
        errors = response.json()["errors"]

        assert set(errors) == {"distance", "goal_time", "race_date"}

    def test_profile_below_minimum_weeks(self, plan_request):
        payload = dict(plan_request["profile"], available_weeks=10, distance="Marathon")
        response = client.post(f"{BASE}/validate/profile", json=payload)
        data = response.json()

        assert data["valid"] is False
        assert data["errors"]["available_weeks"].startswith("Minimum 16 weeks required")

    def test_preferences(self, plan_request):
        payload = dict(plan_request["preferences"], training_days_per_week=2, preferred_workouts=[])
        response = client.post(f"{BASE}/validate/preferences", json=payload)
        errors = response.json()["errors"]

        assert errors["training_days_per_week"] == "Training days must be between 3 and 7"
        assert "preferred_workouts" in errors


class TestGeneratePlan:

    def test_generate(self, plan_request):
        response = client.post(f"{BASE}/generate", json=plan_request)

        assert response.status_code == 200
        plan = response.json()
        assert plan["distance"] == "Marathon"
        assert plan["total_weeks"] == 18
        assert len(plan["weeks"]) == 18
        assert plan["weeks"][0]["phase"] == "base"
        assert plan["peak_target"] <= 90

        for week in plan["weeks"]:
            assert len(week["workouts"]) == 7
            assert sum(1 for w in week["workouts"] if w["type"] != "rest") == 5

    def test_generate_is_reproducible(self, plan_request):
        first = client.post(f"{BASE}/generate", json=plan_request).json()
        second = client.post(f"{BASE}/generate", json=plan_request).json()
        assert first == second

    def test_generate_with_seed(self, plan_request):
        payload = dict(plan_request, seed=11)
        response = client.post(f"{BASE}/generate", json=payload)
        assert response.status_code == 200

    def test_invalid_inputs(self, plan_request):
        plan_request["profile"]["available_weeks"] = 10
        plan_request["preferences"]["training_days_per_week"] = 9

        response = client.post(f"{BASE}/generate", json=plan_request)
        data = response.json()

        assert response.status_code == 422
        assert data["error_code"] == "PLAN_INPUT_INVALID"
        assert set(data["errors"]) == {"profile", "preferences"}
        assert "available_weeks" in data["errors"]["profile"]

    def test_unknown_distance(self, plan_request):
        plan_request["goal"]["distance"] = "Ultra"
        response = client.post(f"{BASE}/generate", json=plan_request)
        assert response.status_code == 422


class TestPaces:

    def test_marathon_paces(self):
        response = client.get(f"{BASE}/paces", params={"distance": "Marathon", "goal_time_seconds": 14400})
        data = response.json()

        assert response.status_code == 200
        assert data["race_pace"] == "5:41/km"
        assert data["paces"]["easy"] == "6:41/km"
        assert data["paces"]["rest"] == "N/A"
        assert data["goal_pace"]["is_valid"] is True

    def test_flags_unrealistic_goal(self):
        response = client.get(f"{BASE}/paces", params={"distance": "5K", "goal_time_seconds": 900})
        assert response.json()["goal_pace"]["is_valid"] is False

    def test_zero_goal_time(self):
        response = client.get(f"{BASE}/paces", params={"distance": "5K", "goal_time_seconds": 0})

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR_GOAL_TIME_SECONDS"


class TestRecommendedWeeks:

    @pytest.mark.parametrize("weeks_out,expected", [(30, 18), (10, 16), (17, 17)])
    def test_clamped(self, weeks_out, expected):
        race_date = date.today() + timedelta(weeks=weeks_out)
        response = client.get(
            f"{BASE}/recommended-weeks",
            params={
                "distance": "Marathon",
                "experience_level": "intermediate",
                "race_date": race_date.isoformat(),
            },
        )
        data = response.json()

        assert response.status_code == 200
        assert data["recommended_weeks"] == expected
        assert data["min_weeks_required"] == 16
