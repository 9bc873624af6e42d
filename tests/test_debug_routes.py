from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.db.session import get_db
from app.progress.store import SqlDailyAssignmentStore
from app.web.debug_routes import router


def _client(session_factory):
    debug_app = FastAPI()
    debug_app.include_router(router)

    def override_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    debug_app.dependency_overrides[get_db] = override_db
    return TestClient(debug_app)


def test_assignments_listing(session_factory, sample_questions):
    db = session_factory()
    SqlDailyAssignmentStore(db).create_if_absent("2026-03-02", sample_questions[1])
    db.close()

    rows = _client(session_factory).get("/debug/assignments").json()

    assert rows == [{
        "date": "2026-03-02",
        "question_id": "q2",
        "title": "Add Two Numbers",
        "assigned_at": rows[0]["assigned_at"],
    }]


def test_db_diagnostics_counts_tables(session_factory):
    info = _client(session_factory).get("/debug/diagnostics/db").json()

    assert info["backend"] == "sqlite"
    assert info["counts"] == {
        "questions": 0,
        "daily_assignments": 0,
        "user_progress": 0,
        "user_profiles": 0,
    }
