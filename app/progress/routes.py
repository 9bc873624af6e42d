"""
Student endpoints: today's question and completion tracking.

GET  /api/student/daily-question   → today's pinned question (or null)
POST /api/student/progress         → record a completion, returns the streak
GET  /api/student/progress?userId= → completions, streak, difficulty stats
"""
from datetime import date, datetime

from fastapi import APIRouter, Depends, Query

from app.core.deps import get_progress_engine
from app.progress.engine import ProgressEngine
from app.progress.schemas import CompletionIn, ProgressView

router = APIRouter(prefix="/api/student", tags=["student"])


def _progress_to_response(view: ProgressView) -> dict:
    return {
        "completedQuestions": [
            {
                "questionId": c.question_id,
                "completedAt": c.completed_at.isoformat(),
                "difficulty": c.difficulty,
            }
            for c in view.completed_questions
        ],
        "currentStreak": view.current_streak,
        "totalSolved": view.total_solved,
        "stats": view.stats.model_dump(),
        "completedDates": view.completed_dates,
        "challengeDays": view.challenge_days,
        "remaining": view.remaining,
    }


@router.get("/daily-question")
def get_daily_question(engine: ProgressEngine = Depends(get_progress_engine)):
    question = engine.get_daily_question(date.today())
    return {"question": question.to_public() if question else None}


@router.post("/progress")
def record_completion(
    payload: CompletionIn,
    engine: ProgressEngine = Depends(get_progress_engine),
):
    streak = engine.record_completion(
        payload.userId,
        payload.questionId,
        payload.difficulty,
        datetime.now(),
    )
    return {
        "success": True,
        "message": "Progress updated successfully",
        "streak": streak,
    }


@router.get("/progress")
def get_progress(
    userId: str | None = Query(None),
    engine: ProgressEngine = Depends(get_progress_engine),
):
    return _progress_to_response(engine.get_progress(userId))
