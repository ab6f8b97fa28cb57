"""
HTTP surface tests. Core components are wired to mock transports through
FastAPI dependency overrides; the application lifespan is not run.
"""

import json

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from adducation.api import api_router
from adducation.api.dependencies import (
    get_auth_state,
    get_backend,
    get_gamification,
    get_llm_gateway,
    get_preferences,
    get_store,
)
from adducation.config.settings import Settings
from adducation.core.auth_state import AuthState
from adducation.core.gamification import GamificationState
from adducation.core.preferences import Preferences
from adducation.storage.local_store import PROGRESS_KEY

from tests.conftest import NOW, completion

USER = {"id": "u1", "email": "lin@example.com", "username": "lin", "userType": "student"}

EVALUATION = {
    "score": 8,
    "strengths": ["Concrete example"],
    "improvements": ["Quantify impact"],
    "overall_feedback": "Good answer.",
}


def backend_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/api/auth/login":
        body = json.loads(request.content)
        if body["password"] != "secret":
            return httpx.Response(401, json={"message": "Invalid credentials"})
        return httpx.Response(200, json={"accessToken": "tok", "user": USER})
    if request.method == "GET":
        return httpx.Response(404)
    return httpx.Response(200, json={})


def llm_handler(request: httpx.Request) -> httpx.Response:
    return completion(json.dumps(EVALUATION))


@pytest.fixture
def make_client(store, make_backend, make_gateway):
    def factory(llm_settings: Settings | None = None) -> TestClient:
        backend, _ = make_backend(backend_handler)
        gateway, _ = make_gateway(llm_handler, llm_settings)
        auth = AuthState(backend)
        gamification = GamificationState(backend, store, clock=lambda: NOW)

        app = FastAPI()
        app.include_router(api_router, prefix="/api")
        app.dependency_overrides.update({
            get_store: lambda: store,
            get_backend: lambda: backend,
            get_llm_gateway: lambda: gateway,
            get_auth_state: lambda: auth,
            get_gamification: lambda: gamification,
            get_preferences: lambda: Preferences(store),
        })
        return TestClient(app)

    return factory


@pytest.fixture
def client(make_client):
    with make_client() as client:
        yield client


def login(client: TestClient):
    response = client.post("/api/auth/login", json={"email": "lin@example.com", "password": "secret"})
    assert response.status_code == 200
    return response


# =========================================================================
# AUTH
# =========================================================================

def test_progress_requires_login(client):
    assert client.get("/api/progress").status_code == 401
    assert client.get("/api/auth/me").status_code == 401


def test_bad_credentials_are_rejected(client):
    response = client.post("/api/auth/login", json={"email": "lin@example.com", "password": "nope"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


def test_login_loads_progress_and_awards_first_login(client):
    response = login(client)
    assert response.json()["authenticated"] is True
    assert response.json()["user"]["email"] == "lin@example.com"

    progress = client.get("/api/progress").json()
    assert progress["userId"] == "u1"
    assert progress["totalXp"] == 10
    assert progress["currentLevel"] == 1
    assert progress["achievements"] == ["first_login"]

    assert client.get("/api/auth/me").json()["username"] == "lin"


def test_logout_ends_session(client):
    login(client)

    assert client.post("/api/auth/logout").json() == {"status": "logged_out"}
    assert client.get("/api/progress").status_code == 401


def test_logout_stops_awarding_xp_to_previous_user(client, store):
    login(client)
    client.post("/api/progress/xp", json={"amount": 40})

    client.post("/api/auth/logout")
    assert store.get_item(PROGRESS_KEY) is None

    response = client.post("/api/interview/question", json={"job_role": "SRE"})
    assert response.status_code == 200
    assert store.get_item(PROGRESS_KEY) is None

    # A fresh login starts from the backend, not the discarded record
    login(client)
    progress = client.get("/api/progress").json()
    assert progress["totalXp"] == 10
    assert progress["achievements"] == ["first_login"]


# =========================================================================
# PROGRESS
# =========================================================================

def test_add_xp(client):
    login(client)

    response = client.post("/api/progress/xp", json={"amount": 95, "reason": "Quiz"})

    assert response.status_code == 200
    assert response.json()["totalXp"] == 105
    assert response.json()["currentLevel"] == 2


def test_negative_xp_is_rejected(client):
    login(client)

    assert client.post("/api/progress/xp", json={"amount": -5}).status_code == 422


def test_achievement_listing_and_unknown_unlock(client):
    login(client)

    listing = client.get("/api/progress/achievements").json()
    unlocked = {a["id"]: a["unlocked"] for a in listing}
    assert unlocked["first_login"] is True
    assert unlocked["level_5"] is False

    assert client.post("/api/progress/achievements/moon_landing").status_code == 404

    again = client.post("/api/progress/achievements/first_login").json()
    assert again["newly_unlocked"] is False


def test_course_completion_is_idempotent(client):
    login(client)

    first = client.post("/api/progress/courses/sql-101/complete", json={"xp": 30}).json()
    second = client.post("/api/progress/courses/sql-101/complete", json={"xp": 30}).json()

    assert first["xp_awarded"] == 30
    assert second["xp_awarded"] == 0
    assert second["progress"]["completedCourses"] == ["sql-101"]


# =========================================================================
# AI FEATURES
# =========================================================================

def test_evaluation_awards_interview_xp(client):
    login(client)

    response = client.post(
        "/api/interview/evaluate",
        json={"question": "Tell me about a hard bug.", "response": "I bisected it.", "job_role": "SRE"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["evaluation"]["score"] == 8
    assert body["xp_awarded"] == 80

    progress = client.get("/api/progress").json()
    assert progress["interviewsPracticed"] == 1
    assert "first_interview" in progress["achievements"]
    assert progress["totalXp"] == 10 + 80 + 50


def test_empty_answer_is_rejected(client):
    response = client.post(
        "/api/interview/evaluate",
        json={"question": "Why?", "response": "   ", "job_role": "SRE"},
    )

    assert response.status_code == 400


def test_quiz_without_api_key_is_a_client_error(make_client):
    keyless = Settings(_env_file=None, openrouter_base_url="http://llm.test/api/v1", openrouter_api_key="")

    with make_client(keyless) as client:
        response = client.post("/api/quiz/generate", json={"topic": "SQL", "question_count": 3})

    assert response.status_code == 400
    assert response.json()["detail"] == "API key not set"


def test_unparseable_quiz_is_unprocessable(client):
    # The mocked model always answers with an evaluation, which has no questions
    response = client.post("/api/quiz/generate", json={"topic": "SQL", "difficulty": "beginner"})

    assert response.status_code == 422


# =========================================================================
# SETTINGS
# =========================================================================

def test_api_key_is_masked(client):
    response = client.put("/api/settings/api-key", json={"api_key": "sk-or-v1-abcdef123456"})

    assert response.json() == {"configured": True, "masked": "sk-o…3456"}
    assert client.get("/api/settings/api-key").json()["configured"] is True


def test_model_selection(client):
    response = client.put("/api/settings/model", json={"model_id": "google/gemma-7b-it:free"})

    assert response.json()["id"] == "google/gemma-7b-it:free"
    assert response.json()["name"] == "gemma-7b-it:free"
    assert client.get("/api/settings/model").json()["id"] == "google/gemma-7b-it:free"


def test_preference_toggles(client):
    assert client.get("/api/settings/preferences").json() == {"theme": "light", "show_debug": False}

    assert client.post("/api/settings/preferences/theme/toggle").json()["theme"] == "dark"
    assert client.post("/api/settings/preferences/debug/toggle").json()["show_debug"] is True
    assert client.get("/api/settings/preferences").json() == {"theme": "dark", "show_debug": True}


def test_health_endpoint():
    from main import app

    response = TestClient(app).get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
