import uuid
from datetime import date

import pytest
from fastapi.testclient import TestClient

from app.core.deps import get_assignment_store, get_progress_store, get_question_store
from app.main import app
from app.progress.store import InMemoryDailyAssignmentStore, InMemoryProgressStore
from app.questions.store import InMemoryQuestionStore


@pytest.fixture
def stores(sample_questions):
    questions = InMemoryQuestionStore(sample_questions)
    assignments = InMemoryDailyAssignmentStore()
    progress = InMemoryProgressStore()
    app.dependency_overrides[get_question_store] = lambda: questions
    app.dependency_overrides[get_assignment_store] = lambda: assignments
    app.dependency_overrides[get_progress_store] = lambda: progress
    yield questions, assignments, progress
    app.dependency_overrides.clear()


@pytest.fixture
def client(stores):
    return TestClient(app)


def test_health():
    response = TestClient(app).get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


# ======================================================
# DAILY QUESTION
# ======================================================

def test_daily_question_is_stable_across_requests(client):
    first = client.get("/api/student/daily-question")
    second = client.get("/api/student/daily-question")

    assert first.status_code == 200
    question = first.json()["question"]
    assert question["id"] in {"q1", "q2", "q3"}
    assert second.json() == first.json()


def test_daily_question_omits_absent_fields(stores, sample_questions):
    only_q3 = InMemoryQuestionStore([q for q in sample_questions if q.id == "q3"])
    app.dependency_overrides[get_question_store] = lambda: only_q3

    question = TestClient(app).get("/api/student/daily-question").json()["question"]

    assert question["id"] == "q3"
    assert "tags" not in question


def test_daily_question_is_null_with_an_empty_pool(stores):
    empty = InMemoryQuestionStore()
    app.dependency_overrides[get_question_store] = lambda: empty

    response = TestClient(app).get("/api/student/daily-question")

    assert response.status_code == 200
    assert response.json() == {"question": None}
    assert stores[1].get(date.today().isoformat()) is None


# ======================================================
# PROGRESS
# ======================================================

def test_record_completion_returns_streak(client):
    response = client.post(
        "/api/student/progress",
        json={"userId": "u1", "questionId": "q1", "difficulty": "Easy"},
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Progress updated successfully",
        "streak": 1,
    }


@pytest.mark.parametrize(
    "body",
    [
        {"questionId": "q1", "difficulty": "Easy"},
        {"userId": "u1", "difficulty": "Easy"},
        {"userId": "u1", "questionId": "q1"},
        {"userId": "  ", "questionId": "q1", "difficulty": "Easy"},
    ],
)
def test_record_completion_with_missing_fields(client, stores, body):
    response = client.post("/api/student/progress", json=body)

    assert response.status_code == 400
    assert response.json()["kind"] == "InvalidArgument"
    assert response.json()["error"]
    assert stores[2].get("u1") is None


def test_record_completion_with_a_malformed_body(client):
    response = client.post(
        "/api/student/progress",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["kind"] == "InvalidArgument"


def test_repeat_submission_same_day_is_ignored(client):
    body = {"userId": "u1", "questionId": "q1", "difficulty": "Easy"}
    client.post("/api/student/progress", json=body)
    second = client.post("/api/student/progress", json=body)

    assert second.json()["streak"] == 1
    progress = client.get("/api/student/progress", params={"userId": "u1"}).json()
    assert progress["totalSolved"] == 1
    assert len(progress["completedQuestions"]) == 1


def test_get_progress_shape(client):
    client.post("/api/student/progress", json={"userId": "u1", "questionId": "q1", "difficulty": "Easy"})
    client.post("/api/student/progress", json={"userId": "u1", "questionId": "q3", "difficulty": "Hard"})

    body = client.get("/api/student/progress", params={"userId": "u1"}).json()

    assert body["currentStreak"] == 1
    assert body["totalSolved"] == 2
    assert body["stats"] == {"hard": 1, "medium": 0, "easy": 1, "choice": 0}
    assert [c["questionId"] for c in body["completedQuestions"]] == ["q1", "q3"]
    assert body["completedQuestions"][0]["difficulty"] == "Easy"
    assert len(body["completedDates"]) == 1
    assert body["challengeDays"] == 45
    assert body["remaining"] == 43


def test_get_progress_for_new_user(client):
    body = client.get("/api/student/progress", params={"userId": "newcomer"}).json()

    assert body["currentStreak"] == 0
    assert body["totalSolved"] == 0
    assert body["completedQuestions"] == []
    assert body["stats"] == {"hard": 0, "medium": 0, "easy": 0, "choice": 0}


def test_get_progress_requires_user_id(client):
    response = client.get("/api/student/progress")

    assert response.status_code == 400
    assert response.json()["kind"] == "InvalidArgument"


# ======================================================
# PROFILE
# ======================================================

def test_profile_create_then_merge():
    client = TestClient(app)
    user_id = f"student-{uuid.uuid4().hex[:8]}"

    created = client.put("/api/student/profile", json={
        "user_id": user_id,
        "name": "Asha",
        "email": "asha@example.com",
        "course": "BCA",
    })
    assert created.status_code == 200
    assert created.json()["profile"]["status"] == "active"

    client.put("/api/student/profile", json={"user_id": user_id, "section": " B "})
    profile = client.get("/api/student/profile", params={"userId": user_id}).json()["profile"]

    assert profile["name"] == "Asha"
    assert profile["course"] == "BCA"
    assert profile["section"] == "B"
    assert profile["phone"] == ""


def test_profile_requires_user_id():
    response = TestClient(app).put("/api/student/profile", json={"name": "No id"})

    assert response.status_code == 400
    assert response.json()["kind"] == "InvalidArgument"


def test_unknown_profile_is_null():
    response = TestClient(app).get("/api/student/profile", params={"userId": "nobody-here"})

    assert response.json() == {"profile": None}
