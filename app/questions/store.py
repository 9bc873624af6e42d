"""
Question Store: key-value access to question content by id.

Two implementations share one interface:
  - InMemoryQuestionStore for tests and local experiments
  - SqlQuestionStore backed by the `questions` table
"""
import threading
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy.orm import Session

from app.db.session import store_errors
from app.questions.models import QuestionRecord
from app.questions.schemas import Question

_CONTENT_FIELDS = ("title", "description", "difficulty", "category", "tags", "example", "constraints")


class QuestionStore(ABC):

    @abstractmethod
    def get_all(self) -> List[Question]:
        ...

    @abstractmethod
    def get(self, question_id: str) -> Optional[Question]:
        ...

    @abstractmethod
    def save_all(self, questions: List[Question]) -> List[Question]:
        """
        Upsert every question by id in a single batch.
        Either all questions are written or none are.
        """

    @abstractmethod
    def count(self) -> int:
        ...

    def new_id(self) -> str:
        return uuid.uuid4().hex


class InMemoryQuestionStore(QuestionStore):

    def __init__(self, questions: Optional[List[Question]] = None):
        self._lock = threading.Lock()
        self._items: dict[str, Question] = {}
        for q in questions or []:
            qid = q.id or self.new_id()
            self._items[qid] = q.model_copy(update={"id": qid}, deep=True)

    def get_all(self) -> List[Question]:
        with self._lock:
            return [q.model_copy(deep=True) for q in self._items.values()]

    def get(self, question_id: str) -> Optional[Question]:
        with self._lock:
            q = self._items.get(question_id)
            return q.model_copy(deep=True) if q else None

    def save_all(self, questions: List[Question]) -> List[Question]:
        if any(not q.id for q in questions):
            raise ValueError("every question needs an id before saving")
        with self._lock:
            for q in questions:
                self._items[q.id] = q.model_copy(deep=True)
        return questions

    def count(self) -> int:
        with self._lock:
            return len(self._items)


def record_to_question(row: QuestionRecord) -> Question:
    return Question(
        id=row.id,
        title=row.title,
        description=row.description,
        difficulty=row.difficulty,
        category=row.category,
        tags=list(row.tags) if row.tags is not None else None,
        example=row.example,
        constraints=row.constraints,
    )


class SqlQuestionStore(QuestionStore):

    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> List[Question]:
        with store_errors(self.db, "load questions"):
            rows = (
                self.db.query(QuestionRecord)
                .order_by(QuestionRecord.created_at.asc(), QuestionRecord.id.asc())
                .all()
            )
            return [record_to_question(r) for r in rows]

    def get(self, question_id: str) -> Optional[Question]:
        with store_errors(self.db, "load question"):
            row = self.db.get(QuestionRecord, question_id)
            return record_to_question(row) if row else None

    def save_all(self, questions: List[Question]) -> List[Question]:
        if any(not q.id for q in questions):
            raise ValueError("every question needs an id before saving")
        with store_errors(self.db, "save questions"):
            for q in questions:
                row = self.db.get(QuestionRecord, q.id)
                if row is None:
                    row = QuestionRecord(id=q.id)
                    self.db.add(row)
                for field in _CONTENT_FIELDS:
                    setattr(row, field, getattr(q, field))
            self.db.commit()
        return questions

    def count(self) -> int:
        with store_errors(self.db, "count questions"):
            return self.db.query(QuestionRecord).count()
