"""
Progress Store and Daily Assignment Store.

Both interfaces have an in-memory implementation (lock-guarded dicts) and a
SQLAlchemy one. The two operations that must be atomic live here:

  - DailyAssignmentStore.create_if_absent: conditional create keyed by date
  - ProgressStore.transact: per-user read-modify-write
"""
import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified
from sqlalchemy.orm.exc import StaleDataError

from app.core.errors import StoreUnavailable
from app.db.session import store_errors
from app.progress.models import (
    CompletedQuestionRecord,
    DailyAssignmentRecord,
    UserProgressRecord,
)
from app.progress.schemas import CompletedQuestion, UserProgress
from app.questions.schemas import Question

logger = logging.getLogger(__name__)

# Receives the current record (None when the user has none yet) and returns
# the record to persist, or None to leave the store untouched.
Mutation = Callable[[Optional[UserProgress]], Optional[UserProgress]]

# Reads and re-runs of a mutation before a write conflict is reported
TRANSACT_ATTEMPTS = 3


# ---------------------------------------------------------------------------
# Daily assignments
# ---------------------------------------------------------------------------

class DailyAssignmentStore(ABC):

    @abstractmethod
    def get(self, date_key: str) -> Optional[Question]:
        ...

    @abstractmethod
    def create_if_absent(self, date_key: str, question: Question) -> Question:
        """
        Pin `question` to `date_key` unless a question is already pinned.
        Returns the canonical question for the date (the existing one if
        another writer got there first).
        """


class InMemoryDailyAssignmentStore(DailyAssignmentStore):

    def __init__(self):
        self._lock = threading.Lock()
        self._items: dict[str, Question] = {}

    def get(self, date_key: str) -> Optional[Question]:
        with self._lock:
            q = self._items.get(date_key)
            return q.model_copy(deep=True) if q else None

    def create_if_absent(self, date_key: str, question: Question) -> Question:
        with self._lock:
            if date_key not in self._items:
                self._items[date_key] = question.model_copy(deep=True)
            return self._items[date_key].model_copy(deep=True)


class SqlDailyAssignmentStore(DailyAssignmentStore):

    def __init__(self, db: Session):
        self.db = db

    def get(self, date_key: str) -> Optional[Question]:
        with store_errors(self.db, "load daily assignment"):
            row = self.db.get(DailyAssignmentRecord, date_key)
            return Question(**row.question) if row else None

    def create_if_absent(self, date_key: str, question: Question) -> Question:
        with store_errors(self.db, "pin daily assignment"):
            try:
                self.db.add(DailyAssignmentRecord(
                    assignment_date=date_key,
                    question_id=question.id,
                    question=question.to_public(),
                ))
                self.db.commit()
                return question
            except IntegrityError:
                # Another request pinned this date first; its row wins.
                self.db.rollback()
                logger.info("[DAILY] date=%s already pinned by a concurrent request", date_key)
                row = self.db.get(DailyAssignmentRecord, date_key)
                if row is None:
                    raise StoreUnavailable(f"Daily assignment for {date_key} vanished after conflict")
                return Question(**row.question)


# ---------------------------------------------------------------------------
# User progress
# ---------------------------------------------------------------------------

class ProgressStore(ABC):

    @abstractmethod
    def get(self, user_id: str) -> Optional[UserProgress]:
        ...

    @abstractmethod
    def transact(self, user_id: str, mutate: Mutation) -> Optional[UserProgress]:
        """
        Run `mutate` on the user's record as one atomic step.
        Returns the record as stored afterwards.
        """

    @abstractmethod
    def delete(self, user_id: str) -> bool:
        ...


class InMemoryProgressStore(ProgressStore):

    def __init__(self):
        self._lock = threading.Lock()
        self._items: dict[str, UserProgress] = {}

    def get(self, user_id: str) -> Optional[UserProgress]:
        with self._lock:
            p = self._items.get(user_id)
            return p.model_copy(deep=True) if p else None

    def transact(self, user_id: str, mutate: Mutation) -> Optional[UserProgress]:
        with self._lock:
            current = self._items.get(user_id)
            updated = mutate(current.model_copy(deep=True) if current else None)
            if updated is None:
                return current.model_copy(deep=True) if current else None
            self._items[user_id] = updated.model_copy(deep=True)
            return updated

    def delete(self, user_id: str) -> bool:
        with self._lock:
            return self._items.pop(user_id, None) is not None


def record_to_progress(row: UserProgressRecord) -> UserProgress:
    return UserProgress(
        user_id=row.user_id,
        completed_questions=[
            CompletedQuestion(
                question_id=c.question_id,
                completed_at=c.completed_at,
                difficulty=c.difficulty,
            )
            for c in row.completed
        ],
        current_streak=row.current_streak or 0,
        last_active_date=row.last_active_date,
        total_solved=row.total_solved or 0,
    )


def _write_progress(row: UserProgressRecord, progress: UserProgress) -> None:
    stored = [(c.question_id, c.completed_at) for c in row.completed]
    wanted = [(c.question_id, c.completed_at) for c in progress.completed_questions]

    if wanted[:len(stored)] != stored:
        # History was rewritten rather than appended to; replace it wholesale.
        row.completed.clear()
        stored = []

    for entry in progress.completed_questions[len(stored):]:
        row.completed.append(CompletedQuestionRecord(
            question_id=entry.question_id,
            completed_at=entry.completed_at,
            difficulty=entry.difficulty,
        ))

    row.current_streak = progress.current_streak
    row.last_active_date = progress.last_active_date
    row.total_solved = progress.total_solved
    # Always UPDATE the parent row so its version is checked, even when only
    # the completion list changed
    flag_modified(row, "total_solved")


class SqlProgressStore(ProgressStore):

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> Optional[UserProgress]:
        with store_errors(self.db, "load progress"):
            row = self.db.get(UserProgressRecord, user_id)
            return record_to_progress(row) if row else None

    def transact(self, user_id: str, mutate: Mutation) -> Optional[UserProgress]:
        # Optimistic: a concurrent writer either wins the primary key on a
        # brand-new user (IntegrityError) or bumps the row version first
        # (StaleDataError). Either way the mutation is re-run on fresh data.
        for attempt in range(1, TRANSACT_ATTEMPTS + 1):
            try:
                row = (
                    self.db.query(UserProgressRecord)
                    .filter(UserProgressRecord.user_id == user_id)
                    .with_for_update()
                    .one_or_none()
                )
                current = record_to_progress(row) if row else None
                updated = mutate(current)
                if updated is None:
                    # Release the row lock
                    self.db.rollback()
                    return current

                if row is None:
                    row = UserProgressRecord(user_id=user_id)
                    self.db.add(row)
                _write_progress(row, updated)
                self.db.commit()
                return updated
            except (IntegrityError, StaleDataError) as exc:
                self.db.rollback()
                if attempt == TRANSACT_ATTEMPTS:
                    logger.error("[PROGRESS] user=%s write conflict persisted: %r", user_id, exc)
                    raise StoreUnavailable("Failed to update progress") from exc
                logger.info("[PROGRESS] user=%s concurrent write, retrying", user_id)
            except SQLAlchemyError as exc:
                self.db.rollback()
                logger.error("[PROGRESS] user=%s update failed: %r", user_id, exc)
                raise StoreUnavailable("Failed to update progress") from exc
            except Exception:
                self.db.rollback()
                raise
        return None

    def delete(self, user_id: str) -> bool:
        with store_errors(self.db, "delete progress"):
            row = self.db.get(UserProgressRecord, user_id)
            if row is None:
                return False
            self.db.delete(row)
            self.db.commit()
            return True
