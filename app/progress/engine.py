"""
Daily assignment and progress rules.

Core rules:
  - One question per calendar day, pinned on first request and never rerolled
  - A question completed twice on the same day counts once
  - Streak: +1 when the previous active day was yesterday, unchanged when it
    was today, otherwise back to 1
  - Difficulty stats are derived from the completion list on every read
"""
import logging
import random
from datetime import date, datetime, timedelta
from typing import Optional

from app.core.config import CHALLENGE_DAYS
from app.core.errors import InvalidArgument
from app.progress.schemas import (
    CompletedQuestion,
    DifficultyStats,
    ProgressView,
    UserProgress,
)
from app.progress.store import DailyAssignmentStore, ProgressStore
from app.questions.schemas import Question
from app.questions.store import QuestionStore

logger = logging.getLogger(__name__)

DIFFICULTY_BUCKETS = ("hard", "medium", "easy")


def _require(value: Optional[str], name: str) -> str:
    if value is None or not str(value).strip():
        raise InvalidArgument(f"Missing required field: {name}")
    return str(value).strip()


def next_streak(current_streak: int, last_active: Optional[date], today: date) -> int:
    """Streak after activity on `today`, given the previous active day."""
    if last_active == today:
        return current_streak
    if last_active == today - timedelta(days=1):
        return current_streak + 1
    return 1


def tally_difficulties(completed: list[CompletedQuestion]) -> DifficultyStats:
    stats = DifficultyStats()
    for entry in completed:
        bucket = (entry.difficulty or "").strip().lower()
        if bucket not in DIFFICULTY_BUCKETS:
            bucket = "choice"
        setattr(stats, bucket, getattr(stats, bucket) + 1)
    return stats


class ProgressEngine:

    def __init__(
        self,
        questions: QuestionStore,
        assignments: DailyAssignmentStore,
        progress: ProgressStore,
        rng: Optional[random.Random] = None,
        challenge_days: int = CHALLENGE_DAYS,
    ):
        self.questions = questions
        self.assignments = assignments
        self.progress = progress
        self.rng = rng or random.Random()
        self.challenge_days = challenge_days

    # ------------------------------------------------------------------
    # Today's question
    # ------------------------------------------------------------------

    def get_daily_question(self, today: date) -> Optional[Question]:
        """
        Return the question pinned to `today`, pinning a random one first if
        the day has none. Returns None when the question pool is empty.
        """
        date_key = today.isoformat()

        pinned = self.assignments.get(date_key)
        if pinned is not None:
            return pinned

        pool = self.questions.get_all()
        if not pool:
            logger.info("[DAILY] date=%s no questions available", date_key)
            return None

        candidate = self.rng.choice(pool)
        canonical = self.assignments.create_if_absent(date_key, candidate)
        logger.info("[DAILY] date=%s pinned question=%s", date_key, canonical.id)
        return canonical

    # ------------------------------------------------------------------
    # Completions
    # ------------------------------------------------------------------

    def record_completion(
        self,
        user_id: Optional[str],
        question_id: Optional[str],
        difficulty: Optional[str],
        now: datetime,
    ) -> int:
        """Record that `user_id` solved `question_id` at `now`; returns the streak."""
        user_id = _require(user_id, "userId")
        question_id = _require(question_id, "questionId")
        difficulty = _require(difficulty, "difficulty")
        today = now.date()

        def apply(current: Optional[UserProgress]) -> Optional[UserProgress]:
            progress = current or UserProgress(user_id=user_id)

            if progress.completed_on(question_id, today):
                logger.info("[PROGRESS] user=%s question=%s already completed today", user_id, question_id)
                return None

            progress.completed_questions.append(CompletedQuestion(
                question_id=question_id,
                completed_at=now,
                difficulty=difficulty,
            ))
            progress.current_streak = next_streak(
                progress.current_streak, progress.last_active_date.date(), today
            )
            progress.last_active_date = now
            progress.total_solved = len(progress.completed_questions)
            return progress

        stored = self.progress.transact(user_id, apply)
        streak = stored.current_streak if stored else 0
        logger.info("[PROGRESS] user=%s question=%s streak=%s", user_id, question_id, streak)
        return streak

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def get_progress(self, user_id: Optional[str]) -> ProgressView:
        user_id = _require(user_id, "userId")

        record = self.progress.get(user_id)
        if record is None:
            return ProgressView(
                challenge_days=self.challenge_days,
                remaining=self.challenge_days,
            )

        completed = record.completed_questions
        total = len(completed)
        return ProgressView(
            completed_questions=completed,
            current_streak=record.current_streak,
            total_solved=total,
            stats=tally_difficulties(completed),
            completed_dates=sorted({c.completed_at.date().isoformat() for c in completed}),
            challenge_days=self.challenge_days,
            remaining=max(0, self.challenge_days - total),
        )
