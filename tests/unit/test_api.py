"""Tests for the HTTP API on the in-memory store."""

import json
from datetime import timedelta

import jwt
import pytest
from fastapi.testclient import TestClient

from dailycode.api.main import create_app
from dailycode.shared.models import Difficulty, Topic

SUBMIT_PASSING = {
    "code": "function twoSum(nums, target) { return [0, 1]; }",
    "language": "javascript",
    "time_taken": 12.5,
    "test_cases_passed": 4,
    "total_test_cases": 4,
}


def make_token(settings, user_id, **claims) -> str:
    payload = {"sub": str(user_id), **claims}
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


@pytest.fixture
def client(registry):
    with TestClient(create_app()) as client:
        yield client


@pytest.fixture
def user(registry_seed):
    return registry_seed.user()


@pytest.fixture
def auth(settings, user):
    return {"Authorization": f"Bearer {make_token(settings, user.id)}"}


class TestHealth:
    """Tests for health endpoints."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["store"] == {"healthy": True, "type": "memory"}
        assert data["features"] == {"use_database_persistence": False, "enable_background_jobs": False}

    def test_liveness(self, client):
        response = client.get("/health/live")

        assert response.status_code == 200
        assert response.json()["status"] == "alive"

    def test_request_id_is_echoed(self, client):
        response = client.get("/health/live", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"

    def test_unknown_path_uses_error_envelope(self, client):
        response = client.get("/nowhere", headers={"X-Request-ID": "req-404"})

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "NOT_FOUND"
        assert body["request_id"] == "req-404"


class TestAuthentication:
    """Tests for bearer token verification."""

    def test_missing_token(self, client):
        response = client.get("/problems/daily-recommendation")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTHENTICATION_ERROR"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_bad_signature(self, client, user):
        token = jwt.encode({"sub": str(user.id)}, "another-secret-with-enough-length!!", algorithm="HS256")

        response = client.get(
            "/problems/daily-recommendation",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 401

    def test_expired_token(self, client, settings, user, clock):
        token = make_token(settings, user.id, exp=clock.now() - timedelta(days=400))

        response = client.get(
            "/problems/daily-recommendation",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 401

    def test_subject_must_be_a_uuid(self, client, settings):
        token = jwt.encode({"sub": "ada"}, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)

        response = client.get("/progress/mastery", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401


class TestProblemRoutes:
    """Tests for /problems."""

    def test_daily_recommendation(self, client, auth, registry_seed, clock):
        problem = registry_seed.problem(Topic.ARRAYS, Difficulty.EASY)

        response = client.get("/problems/daily-recommendation", headers=auth)

        assert response.status_code == 200
        data = response.json()
        assert data["date"] == clock.today().isoformat()
        assert data["reason"] == "daily_recommendation"
        assert data["completed"] is False
        assert data["progress"] is None
        assert data["problem"]["id"] == str(problem.id)
        assert data["problem"]["solution"] is None
        assert len(data["problem"]["hints"]) == 2
        assert len(data["problem"]["test_cases"]) == 1

        again = client.get("/problems/daily-recommendation", headers=auth)
        assert again.json()["recommendation_id"] == data["recommendation_id"]

    def test_daily_recommendation_without_problems(self, client, auth):
        response = client.get("/problems/daily-recommendation", headers=auth)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_unknown_problem(self, client, auth, registry_seed):
        inactive = registry_seed.problem(is_active=False)

        response = client.get(f"/problems/{inactive.id}", headers=auth)

        assert response.status_code == 404
        assert response.json()["error"]["details"]["resource_type"] == "Problem"

    def test_list_by_topic(self, client, auth, registry_seed):
        first = registry_seed.problem(Topic.STACK, Difficulty.EASY)
        registry_seed.problem(Topic.STACK, Difficulty.MEDIUM)
        registry_seed.problem(Topic.STACK, Difficulty.EASY, is_active=False)
        registry_seed.problem(Topic.QUEUE, Difficulty.EASY)

        response = client.get("/problems/topic/stack?limit=1", headers=auth)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["has_more"] is True
        assert [item["id"] for item in data["items"]] == [str(first.id)]
        assert "solution" not in data["items"][0]

    def test_list_by_topic_and_difficulty(self, client, auth, registry_seed):
        registry_seed.problem(Topic.STACK, Difficulty.EASY)
        medium = registry_seed.problem(Topic.STACK, Difficulty.MEDIUM)

        response = client.get("/problems/topic/stack?difficulty=medium", headers=auth)

        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["id"] == str(medium.id)
        assert data["has_more"] is False

    @pytest.mark.parametrize("path", ["/problems/topic/quantum", "/problems/topic/stack?difficulty=brutal"])
    def test_list_rejects_unknown_values(self, client, auth, path):
        response = client.get(path, headers=auth)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_list_rejects_bad_paging(self, client, auth):
        response = client.get("/problems/topic/stack?limit=0", headers=auth)

        assert response.status_code == 422

    def test_submit_and_solve(self, client, auth, registry_seed, registry, user, clock):
        problem = registry_seed.problem(Topic.ARRAYS, Difficulty.EASY)
        registry_seed.recommendation(user, clock.today(), problem)

        response = client.post(f"/problems/{problem.id}/submit", json=SUBMIT_PASSING, headers=auth)

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Solution accepted!"
        assert data["result"] == "passed"
        assert data["first_solve"] is True
        assert data["recommendation_completed"] is True
        assert data["progress"]["status"] == "solved"
        assert data["progress"]["best_time"] == 12.5
        assert data["mastery"]["topic"] == "arrays"
        assert data["mastery"]["mastery_level"] == 62
        assert registry.get_memory_db().users[user.id].total_solved == 1

        detail = client.get(f"/problems/{problem.id}", headers=auth).json()
        assert detail["problem"]["solution"] == "return 42;"
        assert len(detail["problem"]["hints"]) == 3
        assert len(detail["problem"]["test_cases"]) == 1
        assert detail["progress"]["total_attempts"] == 1

    def test_submit_failure(self, client, auth, registry_seed):
        problem = registry_seed.problem()
        payload = {**SUBMIT_PASSING, "test_cases_passed": 1, "result": "timeout"}

        response = client.post(f"/problems/{problem.id}/submit", json=payload, headers=auth)

        data = response.json()
        assert data["message"] == "Solution failed some test cases"
        assert data["result"] == "timeout"
        assert data["progress"]["status"] == "attempted"
        assert data["first_solve"] is False

    def test_submit_inconsistent_counts(self, client, auth, registry_seed):
        problem = registry_seed.problem()
        payload = {**SUBMIT_PASSING, "test_cases_passed": 5}

        response = client.post(f"/problems/{problem.id}/submit", json=payload, headers=auth)

        assert response.status_code == 400
        assert response.json()["error"]["details"]["field"] == "test_cases_passed"

    def test_submit_non_finite_time(self, client, auth, registry_seed):
        problem = registry_seed.problem()
        body = json.dumps({**SUBMIT_PASSING, "time_taken": float("nan")})

        response = client.post(
            f"/problems/{problem.id}/submit",
            content=body,
            headers={**auth, "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["details"]["field"] == "time_taken"

    def test_submit_missing_code(self, client, auth, registry_seed):
        problem = registry_seed.problem()
        payload = {key: value for key, value in SUBMIT_PASSING.items() if key != "code"}

        response = client.post(f"/problems/{problem.id}/submit", json=payload, headers=auth)

        assert response.status_code == 422

    def test_submit_to_inactive_problem(self, client, auth, registry_seed):
        problem = registry_seed.problem(is_active=False)

        response = client.post(f"/problems/{problem.id}/submit", json=SUBMIT_PASSING, headers=auth)

        assert response.status_code == 404


class TestRecommendationRoutes:
    """Tests for /recommendations."""

    def test_today_then_complete(self, client, auth, registry_seed):
        problem = registry_seed.problem()

        today = client.get("/recommendations/today", headers=auth).json()
        assert today["selected_problem_id"] == str(problem.id)

        completed = client.post("/recommendations/today/complete", headers=auth)
        assert completed.status_code == 200
        assert completed.json()["completed"] is True

        skipped = client.post("/recommendations/today/skip", headers=auth)
        assert skipped.status_code == 409
        assert skipped.json()["error"]["code"] == "CONFLICT"

    def test_complete_without_recommendation(self, client, auth):
        response = client.post("/recommendations/today/complete", headers=auth)

        assert response.status_code == 404

    def test_feedback(self, client, auth, registry_seed, user, clock):
        registry_seed.recommendation(user, clock.today())

        response = client.post(
            "/recommendations/today/feedback",
            json={"difficulty_rating": 3, "helpful": True},
            headers=auth,
        )

        assert response.status_code == 200
        assert response.json()["feedback"] == {"difficulty_rating": 3, "helpful": True, "comments": None}

    def test_feedback_rating_out_of_range(self, client, auth, registry_seed, user, clock):
        registry_seed.recommendation(user, clock.today())

        response = client.post("/recommendations/today/feedback", json={"difficulty_rating": 9}, headers=auth)

        assert response.status_code == 400


class TestProgressRoutes:
    """Tests for /progress."""

    def test_mastery_after_submission(self, client, auth, registry_seed):
        problem = registry_seed.problem(Topic.STRINGS, Difficulty.EASY)
        client.post(f"/problems/{problem.id}/submit", json=SUBMIT_PASSING, headers=auth)

        data = client.get("/progress/mastery", headers=auth).json()

        assert data["overall_mastery"] == 62
        assert data["topics"][0]["topic"] == "strings"
        assert data["focus_topics"][0]["reason"] == "Practice more problems"

    def test_streak(self, client, auth, registry_seed, user, clock):
        registry_seed.recommendation(user, clock.today(), completed=True)
        registry_seed.recommendation(user, clock.today() - timedelta(days=1), completed=True)

        data = client.get("/progress/streak", headers=auth).json()

        assert data["current_streak"] == 2
        assert data["longest_streak"] == 2
        assert data["recent_activity"][0]["date"] == clock.today().isoformat()

    def test_streak_for_unknown_user(self, client, settings, sample_user_id):
        headers = {"Authorization": f"Bearer {make_token(settings, sample_user_id)}"}

        response = client.get("/progress/streak", headers=headers)

        assert response.status_code == 404

    def test_stats(self, client, auth, registry_seed):
        problem = registry_seed.problem(Topic.TREES, Difficulty.MEDIUM)
        client.post(f"/problems/{problem.id}/submit", json=SUBMIT_PASSING, headers=auth)

        data = client.get("/progress/stats?timeframe=7", headers=auth).json()

        assert data["timeframe_days"] == 7
        assert data["total_solved"] == 1
        assert data["success_rate"] == 100
        assert data["topic_stats"] == [
            {"key": "trees", "attempted": 1, "solved": 1, "average_attempts": 1.0}
        ]

    def test_stats_timeframe_bounds(self, client, auth):
        response = client.get("/progress/stats?timeframe=0", headers=auth)

        assert response.status_code == 422

    def test_analysis(self, client, auth):
        data = client.get("/progress/analysis", headers=auth).json()

        assert data["recommendations"] == ["Start with easy array problems"]
